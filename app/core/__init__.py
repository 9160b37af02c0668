"""Core primitives shared across layers (exception hierarchy)."""
