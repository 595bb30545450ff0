"""Logging setup and per-lookup context."""
