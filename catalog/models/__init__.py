"""Domain schemas and API contracts."""
