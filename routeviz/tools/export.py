"""Route export to GeoJSON and GPX files."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Sequence

from routeviz.models import Coordinate, RouteResult
from routeviz.utils.gpx import create_gpx_from_route, save_gpx_file


logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("geojson", "gpx")


def route_to_geojson(
    route: RouteResult,
    stops: Sequence[tuple[str, Coordinate]] = (),
) -> dict:
    """
    Build a GeoJSON FeatureCollection for a route.

    The path is a LineString feature; each stop is a Point feature named
    after the location the user typed.
    """
    features = [{
        "type": "Feature",
        "properties": {
            "profile": route.profile,
            "distance_m": route.distance_m,
            "duration_s": route.duration_s,
        },
        "geometry": {
            "type": "LineString",
            "coordinates": [list(c.as_tuple()) for c in route.geometry],
        },
    }]

    for order, (name, coord) in enumerate(stops):
        features.append({
            "type": "Feature",
            "properties": {"name": name, "order": order},
            "geometry": {"type": "Point", "coordinates": list(coord.as_tuple())},
        })

    return {"type": "FeatureCollection", "features": features}


def _safe_name(stops: Sequence[tuple[str, Coordinate]]) -> str:
    raw = "_to_".join(name for name, _ in stops) or "route"
    return "".join(c if c.isalnum() or c in "-_" else "_" for c in raw)[:80]


def export_route(
    route: RouteResult,
    stops: Sequence[tuple[str, Coordinate]],
    formats: Iterable[str],
    output_dir: Path,
) -> list[Path]:
    """
    Write a route to files in the requested formats.

    Unknown formats are skipped with a warning. Returns the written paths.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    # Create filename with timestamp
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    stem = f"{_safe_name(stops)}_{timestamp}"

    written = []
    for fmt in formats:
        if fmt == "geojson":
            filepath = output_dir / f"{stem}.geojson"
            filepath.write_text(json.dumps(route_to_geojson(route, stops)), encoding="utf-8")
        elif fmt == "gpx":
            filepath = output_dir / f"{stem}.gpx"
            save_gpx_file(create_gpx_from_route(route, stops), str(filepath))
        else:
            logger.warning("Unknown export format %r (supported: %s)", fmt, ", ".join(SUPPORTED_FORMATS))
            continue
        logger.info("Route saved to %s", filepath)
        written.append(filepath)

    return written
