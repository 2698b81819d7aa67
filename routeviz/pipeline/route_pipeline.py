"""Route search pipeline.

Runs one search from free text to a routed path:

1. Extract location names (language model, pattern fallback)
2. Geocode every name concurrently
3. Centre on the point if only one resolved, otherwise request a route

Domain errors end the search and are reported on the result; nothing is
retried here beyond the router's single directions retry.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from routeviz.errors import RouteVizError
from routeviz.models import Coordinate, ExtractionResult, RouteResult
from routeviz.utils.geo import path_length_km

from .extractor import ExtractionStrategy, extract_locations
from .router import DirectionsService, Geocoder, request_route, resolve_all


console = Console()


@dataclass
class SearchOutcome:
    """Complete result of one route search."""
    success: bool
    query: str = ""
    error: Optional[str] = None
    error_kind: Optional[str] = None

    extraction: Optional[ExtractionResult] = None
    coordinates: list[Coordinate] = field(default_factory=list)

    # Exactly one of these is set on success
    route: Optional[RouteResult] = None
    center: Optional[Coordinate] = None

    @property
    def locations(self) -> list[str]:
        return list(self.extraction.locations) if self.extraction else []

    @property
    def distance_km(self) -> float:
        if not self.route:
            return 0.0
        if self.route.distance_m is not None:
            return self.route.distance_m / 1000
        return path_length_km(self.route.geometry)

    def format_summary(self) -> str:
        """Format a human-readable summary of the search."""
        if not self.success:
            return f"❌ {self.error}"

        if self.center is not None:
            name = self.locations[0] if self.locations else self.query
            lines = [
                f"## 📍 {name}",
                "",
                f"**Centred on:** {self.center.latitude:.5f}, {self.center.longitude:.5f}",
            ]
            if self.extraction and self.extraction.is_route_request:
                lines.append("")
                lines.append(
                    "Only one location was found. Add a destination with \"to\", "
                    "e.g. 'Paris to London', to get a route."
                )
            return "\n".join(lines)

        lines = [
            f"## 🗺️ Route: {' → '.join(self.locations)}",
            "",
            f"**Profile:** {self.route.profile}",
            f"**Distance:** {self.distance_km:.1f} km",
        ]
        if self.route.duration_s is not None:
            hours, minutes = divmod(round(self.route.duration_s / 60), 60)
            lines.append(f"**Duration:** {hours}h {minutes:02d}min")
        lines.append(f"**Path points:** {len(self.route.geometry)}")

        bounds = self.route.bounds()
        if bounds:
            south_west, north_east = bounds
            lines.append(
                f"**Bounds:** ({south_west.latitude:.4f}, {south_west.longitude:.4f}) – "
                f"({north_east.latitude:.4f}, {north_east.longitude:.4f})"
            )

        if self.extraction and self.extraction.strategy == "pattern":
            lines.append("")
            lines.append("_Locations read with the simple \"A to B\" parser._")

        return "\n".join(lines)


class RouteSearchPipeline:
    """
    Pipeline for a single route search.

    Each call to ``search`` is independent; nothing is shared between searches.
    """

    def __init__(
        self,
        strategies: Sequence[ExtractionStrategy],
        geocoder: Geocoder,
        directions: DirectionsService,
        extraction_timeout: float = 10.0,
        show_progress: bool = True,
    ):
        self.strategies = list(strategies)
        self.geocoder = geocoder
        self.directions = directions
        self.extraction_timeout = extraction_timeout
        self.show_progress = show_progress

    async def search(self, query: str) -> SearchOutcome:
        """
        Run a search from free text.

        Args:
            query: The user's text, e.g. "From Paris to London by bike"

        Returns:
            SearchOutcome with either a route, a centre point, or an error
        """
        outcome = SearchOutcome(success=False, query=query)

        try:
            if self.show_progress:
                with Progress(
                    SpinnerColumn(),
                    TextColumn("[progress.description]{task.description}"),
                    console=console,
                    transient=True,
                ) as progress:
                    await self._execute_steps(outcome, progress)
            else:
                await self._execute_steps(outcome, None)
        except RouteVizError as e:
            outcome.error = e.message
            outcome.error_kind = e.kind
            return outcome

        outcome.success = True
        return outcome

    async def _execute_steps(
        self,
        outcome: SearchOutcome,
        progress: Optional[Progress],
    ) -> None:
        # Step 1: Extract locations
        task = self._start(progress, "🔎 Processing your request...")
        extraction = await extract_locations(
            outcome.query, self.strategies, timeout=self.extraction_timeout
        )
        outcome.extraction = extraction
        self._stop(progress, task)

        # Step 2: Geocode everything at once
        task = self._start(progress, f"📍 Finding {', '.join(extraction.locations)}...")
        outcome.coordinates = await resolve_all(extraction.locations, self.geocoder)
        self._stop(progress, task)

        # Step 3: A single place is shown, not routed
        if len(outcome.coordinates) == 1:
            outcome.center = outcome.coordinates[0]
            return

        task = self._start(progress, "🛣️ Finding route...")
        outcome.route = await request_route(
            outcome.coordinates,
            extraction.preferences.transport_mode,
            self.directions,
            preferences=extraction.preferences,
        )
        self._stop(progress, task)

    @staticmethod
    def _start(progress: Optional[Progress], description: str):
        if progress is None:
            return None
        return progress.add_task(description, total=None)

    @staticmethod
    def _stop(progress: Optional[Progress], task) -> None:
        if progress is not None and task is not None:
            progress.remove_task(task)
