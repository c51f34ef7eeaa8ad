"""Document validation layer."""

from .validator import ValidationEngine

__all__ = ["ValidationEngine"]
