"""Location extraction and route search pipeline."""

from .extractor import (
    LanguageModelExtractor,
    PatternExtractor,
    build_strategies,
    extract_locations,
    extract_via_pattern,
)
from .route_pipeline import RouteSearchPipeline, SearchOutcome
from .router import request_route, resolve_all

__all__ = [
    "LanguageModelExtractor",
    "PatternExtractor",
    "build_strategies",
    "extract_locations",
    "extract_via_pattern",
    "RouteSearchPipeline",
    "SearchOutcome",
    "request_route",
    "resolve_all",
]
