"""Error types for the route search pipeline.

Every failure a search can end with is a ``RouteVizError``. Extraction
errors are recovered inside the extractor; the rest end the current search
with a single human-readable message.
"""

from typing import Any, Optional


class RouteVizError(Exception):
    """Base error for route searches."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ExtractionError(RouteVizError):
    """The language-model extraction path produced nothing usable."""

    kind = "extraction"


class InputError(RouteVizError):
    """No usable locations could be read from the user's text."""

    kind = "input"


class NotFoundError(RouteVizError):
    """A location name returned no geocoding matches."""

    kind = "not_found"

    def __init__(self, location: str, message: str | None = None):
        super().__init__(message or f"Could not find location: {location}")
        self.location = location


class LocationResolutionError(NotFoundError):
    """One of several locations in a search could not be resolved."""

    def __init__(self, location: str):
        super().__init__(location, f'Unable to find "{location}" on the map')


class NoRouteError(RouteVizError):
    """The points resolved, but no path exists for the chosen mode."""

    kind = "no_route"

    def __init__(self, profile: str):
        super().__init__(
            f"No {profile} route found between these locations. "
            f"The distance may be too long for {profile}; "
            "try another travel mode or closer locations."
        )
        self.profile = profile


class UpstreamError(RouteVizError):
    """A third-party service was unreachable or answered unexpectedly.

    Attributes:
        status_code: HTTP status of the upstream response, if one arrived
        code: Upstream error code from the response body (e.g. ``InvalidInput``)
        details: Parsed response body, kept for logging
    """

    kind = "upstream"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.details = details
