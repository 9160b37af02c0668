"""Shared utilities (error responses, parsing, crypto, validation)."""
