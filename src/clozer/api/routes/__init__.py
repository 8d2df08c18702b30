"""Route group exports."""

from . import geocoding, health, planning, tours

__all__ = ["tours", "planning", "geocoding", "health"]
