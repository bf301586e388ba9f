"""CLI interface for ImpactLens."""
