"""Geospatial utility functions."""

from math import radians, sin, cos, sqrt, atan2
from typing import Sequence

from routeviz.models import Coordinate


def haversine_distance(
    lat1: float, lon1: float,
    lat2: float, lon2: float,
) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        lat1, lon1: First point coordinates in degrees
        lat2, lon2: Second point coordinates in degrees

    Returns:
        Distance in kilometers
    """
    R = 6371  # Earth's radius in kilometers

    lat1_rad, lon1_rad = radians(lat1), radians(lon1)
    lat2_rad, lon2_rad = radians(lat2), radians(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = sin(dlat/2)**2 + cos(lat1_rad) * cos(lat2_rad) * sin(dlon/2)**2
    c = 2 * atan2(sqrt(a), sqrt(1-a))

    return R * c


def path_length_km(path: Sequence[Coordinate]) -> float:
    """Length of a polyline, summed segment by segment."""
    return sum(
        haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)
        for a, b in zip(path, path[1:])
    )
