"""Product identifier resolution and reference-graph hydration for a remote catalog."""

__version__ = "0.1.0"
