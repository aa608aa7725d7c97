"""SaveForge: entity save lifecycle with ordered hook dispatch."""

__version__ = "0.1.0"
