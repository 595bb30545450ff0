"""Shared domain models and string/path helpers."""
