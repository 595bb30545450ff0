"""Relationship and hierarchy hydration."""
