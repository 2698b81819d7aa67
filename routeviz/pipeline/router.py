"""Geocode location names and request a route through them."""

import asyncio
import logging
from typing import Protocol, Sequence

from routeviz.errors import (
    InputError,
    LocationResolutionError,
    NoRouteError,
    NotFoundError,
    UpstreamError,
)
from routeviz.models import (
    Coordinate,
    RouteRequest,
    RouteResult,
    TravelPreferences,
    normalize_profile,
)


logger = logging.getLogger(__name__)

# Mapbox answers 422 with this code when it rejects the request parameters
RETRYABLE_STATUS = 422
RETRYABLE_CODE = "InvalidInput"


class Geocoder(Protocol):
    async def geocode(self, location: str) -> Coordinate:
        ...


class DirectionsService(Protocol):
    async def routes(self, request: RouteRequest) -> list[RouteResult]:
        ...


def _is_structural_rejection(error: UpstreamError) -> bool:
    return error.status_code == RETRYABLE_STATUS and error.code == RETRYABLE_CODE


async def resolve_all(locations: Sequence[str], geocoder: Geocoder) -> list[Coordinate]:
    """
    Geocode every location concurrently.

    Results keep the input order regardless of which lookup finishes first.
    All lookups are awaited before failing so the error can name the first
    location (in input order) that could not be resolved.

    Raises:
        InputError: no locations were given
        LocationResolutionError: a location had no geocoding match
        UpstreamError: the geocoder could not be reached
    """
    if not locations:
        raise InputError("No locations to look up")

    results = await asyncio.gather(
        *(geocoder.geocode(location) for location in locations),
        return_exceptions=True,
    )

    coordinates = []
    for location, result in zip(locations, results):
        if isinstance(result, NotFoundError):
            raise LocationResolutionError(location) from result
        if isinstance(result, BaseException):
            raise result
        coordinates.append(result)

    logger.info("All %d location(s) geocoded", len(coordinates))
    return coordinates


async def request_route(
    coordinates: Sequence[Coordinate],
    profile: str | None,
    directions: DirectionsService,
    preferences: TravelPreferences | None = None,
) -> RouteResult:
    """
    Request one route through the coordinates in order.

    A structural-invalid rejection (422 ``InvalidInput``) is retried exactly
    once with the identical request. Every other upstream error is raised
    immediately.

    Raises:
        InputError: fewer than two coordinates
        NoRouteError: no route for this profile, including after the retry
        UpstreamError: any other upstream failure
    """
    if len(coordinates) < 2:
        raise InputError("At least two valid locations are needed to create a route")

    mode = normalize_profile(profile)
    request = RouteRequest(
        coordinates=list(coordinates),
        profile=mode,
        exclude=preferences.exclusions(mode) if preferences else [],
    )

    try:
        routes = await directions.routes(request)
    except UpstreamError as e:
        if not _is_structural_rejection(e):
            raise
        logger.warning("Directions rejected as %s, retrying once", e.code)
        try:
            routes = await directions.routes(request)
        except UpstreamError as retry_error:
            logger.error("Directions retry failed: %s", retry_error.details)
            raise NoRouteError(mode.value) from retry_error

    if not routes:
        raise NoRouteError(mode.value)

    route = routes[0]
    logger.info("Route retrieved with %d coordinates", len(route.geometry))
    return route
