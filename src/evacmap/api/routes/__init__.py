"""Route group exports."""

from . import emergency, evacuation, health

__all__ = ["evacuation", "emergency", "health"]
