"""Identifier classification, scoring and staged lookup."""
