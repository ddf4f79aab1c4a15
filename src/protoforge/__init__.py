"""Protoforge: versioned storage for AI-generated web prototypes."""

__version__ = "0.1.0"
