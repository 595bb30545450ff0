"""Lookup result caches."""
