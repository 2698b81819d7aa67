"""Mapbox geocoding and directions clients."""

import logging
from urllib.parse import quote

import httpx

from routeviz.errors import NotFoundError, UpstreamError
from routeviz.models import Coordinate, RouteRequest, RouteResult


logger = logging.getLogger(__name__)

# Fixed directions options: one full-resolution GeoJSON line, no turn-by-turn
DIRECTIONS_OPTIONS = {
    "alternatives": "false",
    "geometries": "geojson",
    "steps": "false",
    "overview": "full",
}


def _error_body(response: httpx.Response):
    """Parse an error body, which Mapbox usually sends as JSON with a ``code``."""
    try:
        return response.json()
    except ValueError:
        return {"message": response.text[:500]}


class MapboxClient:
    """
    Shared HTTP plumbing for the Mapbox APIs.

    The access token is sent as a query parameter and never logged.
    Pass ``client`` to reuse a connection pool (or a mocked transport).
    """

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.mapbox.com",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        if not token:
            raise ValueError(
                "Mapbox token is required. Set MAPBOX_TOKEN environment variable "
                "or pass token parameter."
            )
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def _get(self, path: str, params: dict) -> httpx.Response:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        query = {**params, "access_token": self.token}

        try:
            if self._client is not None:
                return await self._client.get(url, params=query, timeout=self.timeout)
            async with httpx.AsyncClient() as client:
                return await client.get(url, params=query, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise UpstreamError(f"Mapbox request timed out: {path.split('/')[1]}") from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"Could not reach Mapbox: {e}") from e


class MapboxGeocoder(MapboxClient):
    """Turn place names into coordinates with the Mapbox Geocoding API."""

    async def geocode(self, location: str) -> Coordinate:
        """
        Geocode a place name to its best match.

        Only the top match is used - there is no disambiguation.

        Raises:
            NotFoundError: the geocoder returned no matches
            UpstreamError: transport failure, non-2xx response or malformed reply
        """
        path = f"/geocoding/v5/mapbox.places/{quote(location, safe='')}.json"
        response = await self._get(path, {"limit": 1})

        if not response.is_success:
            details = _error_body(response)
            logger.error(
                "Mapbox geocoding error %s for %r: %s",
                response.status_code, location, details,
            )
            raise UpstreamError(
                "Failed to process geocoding request",
                status_code=response.status_code,
                code=details.get("code") if isinstance(details, dict) else None,
                details=details,
            )

        try:
            features = response.json().get("features") or []
            if features:
                coordinate = Coordinate.from_tuple(features[0]["center"])
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
            raise UpstreamError("Unexpected geocoding response from Mapbox") from e

        if not features:
            logger.warning("No geocoding results found for: %s", location)
            raise NotFoundError(location)

        logger.info("Geocoded %r to %s", location, coordinate.as_tuple())
        return coordinate


class MapboxDirections(MapboxClient):
    """Fetch routed paths from the Mapbox Directions API."""

    async def routes(self, request: RouteRequest) -> list[RouteResult]:
        """
        Request routes for ordered waypoints.

        Returns every route candidate in upstream order; the list is empty
        when Mapbox answers successfully but finds nothing.

        Raises:
            UpstreamError: on any non-2xx answer. ``status_code`` and ``code``
                are set from the response so callers can decide on a retry.
        """
        profile = request.profile.value
        path = f"/directions/v5/mapbox/{profile}/{request.coordinates_path()}"
        params = dict(DIRECTIONS_OPTIONS)
        if request.exclude:
            params["exclude"] = ",".join(request.exclude)

        response = await self._get(path, params)

        if not response.is_success:
            details = _error_body(response)
            code = details.get("code") if isinstance(details, dict) else None
            logger.error("Mapbox directions error %s: %s", response.status_code, details)
            raise UpstreamError(
                "Failed to get directions",
                status_code=response.status_code,
                code=code,
                details=details,
            )

        try:
            data = response.json()
            raw_routes = data.get("routes") or []
            routes = [
                RouteResult(
                    geometry=[
                        Coordinate.from_tuple(point)
                        for point in route["geometry"]["coordinates"]
                    ],
                    profile=profile,
                    distance_m=route.get("distance"),
                    duration_s=route.get("duration"),
                )
                for route in raw_routes
            ]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise UpstreamError("Unexpected directions response from Mapbox") from e

        logger.info("Mapbox response contains %d route(s)", len(routes))
        return routes
