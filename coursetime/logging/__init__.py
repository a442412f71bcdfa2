"""Logging setup and diagnostics export."""
