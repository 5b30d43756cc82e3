"""Prop documentation for Flow-typed components, with cross-file type resolution."""

__version__ = "0.1.0"
