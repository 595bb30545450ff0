"""Configuration structs and settings loader."""
