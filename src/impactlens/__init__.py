"""ImpactLens - diagnostic anti-portfolio generator."""

__version__ = "0.1.0"
