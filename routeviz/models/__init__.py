"""Data models for route searches."""

from .request import (
    ExtractionResult,
    RouteRequest,
    TransportMode,
    TravelPreferences,
    normalize_profile,
)
from .response import Coordinate, RouteResult

__all__ = [
    "ExtractionResult",
    "RouteRequest",
    "TransportMode",
    "TravelPreferences",
    "normalize_profile",
    "Coordinate",
    "RouteResult",
]
