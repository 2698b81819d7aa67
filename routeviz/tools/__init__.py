"""Clients for the upstream services, and route export."""

from .export import export_route, route_to_geojson
from .llm import GeminiClient, OpenAICompatibleClient, create_llm_client
from .mapbox import MapboxDirections, MapboxGeocoder

__all__ = [
    "export_route",
    "route_to_geojson",
    "GeminiClient",
    "OpenAICompatibleClient",
    "create_llm_client",
    "MapboxDirections",
    "MapboxGeocoder",
]
