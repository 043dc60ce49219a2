"""Bundled JSON-schema contracts."""
