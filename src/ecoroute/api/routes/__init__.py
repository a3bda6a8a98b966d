"""Route group exports."""

from . import health, optimization

__all__ = ["health", "optimization"]
