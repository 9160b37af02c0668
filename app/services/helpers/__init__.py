"""Reusable query helpers for the service layer."""
