"""Route group exports."""

from . import geometry, health, territories

__all__ = ["geometry", "health", "territories"]
