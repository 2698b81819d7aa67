"""GPX file generation utilities."""

from datetime import datetime, timezone
from typing import Sequence

import gpxpy
import gpxpy.gpx

from routeviz.models import Coordinate, RouteResult


def create_gpx_from_route(
    route: RouteResult,
    stops: Sequence[tuple[str, Coordinate]] = (),
) -> str:
    """
    Create a GPX file for a route, with its stops as waypoints.

    Args:
        route: The route to export
        stops: (name, coordinate) pairs for origin, via-points and destination

    Returns:
        GPX XML string
    """
    gpx = gpxpy.gpx.GPX()
    gpx.name = " to ".join(name for name, _ in stops) or "Route"
    gpx.creator = "Route Visualizer"
    gpx.time = datetime.now(timezone.utc)

    for name, coord in stops:
        waypoint = gpxpy.gpx.GPXWaypoint(
            latitude=coord.latitude,
            longitude=coord.longitude,
        )
        waypoint.name = name
        gpx.waypoints.append(waypoint)

    track = gpxpy.gpx.GPXTrack()
    track.name = gpx.name
    track.type = route.profile
    gpx.tracks.append(track)

    segment = gpxpy.gpx.GPXTrackSegment()
    for coord in route.geometry:
        segment.points.append(gpxpy.gpx.GPXTrackPoint(
            latitude=coord.latitude,
            longitude=coord.longitude,
        ))
    track.segments.append(segment)

    return gpx.to_xml()


def save_gpx_file(gpx_content: str, filepath: str) -> None:
    """Save GPX content to a file."""
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(gpx_content)
