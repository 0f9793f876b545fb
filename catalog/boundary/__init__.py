"""Boundary adapters: persistence of documents in the backing store."""
