"""Product repository boundary and adapters."""
