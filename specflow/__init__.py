"""Specification workflow engine: requirements, design and task documents with phase gating."""

__version__ = "1.0.0"
