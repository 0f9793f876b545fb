"""Core domain building blocks: schema descriptors, document handles, errors."""
