"""Export utilities for session snapshots."""

from .geojson import session_to_geojson

__all__ = ["session_to_geojson"]
