"""Adapters for the authoritative product store."""
