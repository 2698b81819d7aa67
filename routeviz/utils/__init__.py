"""Utility functions for route searches."""

from .gpx import create_gpx_from_route, save_gpx_file
from .geo import haversine_distance, path_length_km
from .log import setup_logging

__all__ = [
    "create_gpx_from_route",
    "save_gpx_file",
    "haversine_distance",
    "path_length_km",
    "setup_logging",
]
