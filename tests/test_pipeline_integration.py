"""End-to-end searches through the pipeline with fake upstream services."""

import httpx
import pytest

from routeviz.errors import UpstreamError
from routeviz.models import Coordinate, RouteResult, TransportMode
from routeviz.pipeline import RouteSearchPipeline, build_strategies
from routeviz.tools.mapbox import MapboxGeocoder

from .test_extractor import FakeLLM
from .test_router import PLACES, FakeDirections, FakeGeocoder


def make_pipeline(llm=None, geocoder=None, directions=None):
    return RouteSearchPipeline(
        strategies=build_strategies(llm),
        geocoder=geocoder or FakeGeocoder(),
        directions=directions or FakeDirections(),
        extraction_timeout=0.5,
        show_progress=False,
    )


def paris_london_route(profile="driving"):
    return RouteResult(
        geometry=[PLACES["Paris"], PLACES["Brussels"], PLACES["London"]],
        profile=profile,
        distance_m=459000.0,
        duration_s=19800.0,
    )


class TestRouteSearch:
    """Full searches from text to outcome."""

    @pytest.mark.asyncio
    async def test_pattern_search_routes_between_locations(self):
        directions = FakeDirections([paris_london_route()])
        outcome = await make_pipeline(directions=directions).search("From Paris to London.")

        assert outcome.success
        assert outcome.locations == ["Paris", "London"]
        assert outcome.coordinates == [PLACES["Paris"], PLACES["London"]]
        assert outcome.route.distance_m == 459000.0
        assert outcome.center is None
        assert directions.requests[0].profile == TransportMode.DRIVING

        summary = outcome.format_summary()
        assert "Paris → London" in summary
        assert "459.0 km" in summary
        assert "5h 30min" in summary

    @pytest.mark.asyncio
    async def test_language_model_preferences_reach_directions(self):
        llm = FakeLLM(
            '{"locations": ["Paris", "Brussels", "London"], '
            '"preferences": {"transportMode": "bike", "avoidFerries": true}}'
        )
        directions = FakeDirections([paris_london_route("cycling")])
        outcome = await make_pipeline(llm=llm, directions=directions).search(
            "Cycle from Paris via Brussels to London, no ferries"
        )

        assert outcome.success
        assert outcome.extraction.strategy == "language_model"
        request = directions.requests[0]
        assert request.profile == TransportMode.CYCLING
        assert request.exclude == ["ferry"]
        assert len(request.coordinates) == 3

    @pytest.mark.asyncio
    async def test_single_location_centres_without_directions(self):
        directions = FakeDirections()
        outcome = await make_pipeline(directions=directions).search("Paris")

        assert outcome.success
        assert outcome.center == PLACES["Paris"]
        assert outcome.route is None
        assert directions.requests == []
        assert "Only one location" not in outcome.format_summary()

    @pytest.mark.asyncio
    async def test_single_location_route_request_gets_hint(self):
        outcome = await make_pipeline().search("From Paris")

        assert outcome.success
        assert outcome.center == PLACES["Paris"]
        assert "Only one location" in outcome.format_summary()

    @pytest.mark.asyncio
    async def test_unknown_location_stops_before_directions(self):
        directions = FakeDirections()
        outcome = await make_pipeline(directions=directions).search(
            "Nowhereville12345xyz to Paris"
        )

        assert not outcome.success
        assert outcome.error_kind == "not_found"
        assert "Nowhereville12345xyz" in outcome.error
        assert directions.requests == []
        assert outcome.format_summary().startswith("❌")

    @pytest.mark.asyncio
    async def test_unusable_input(self):
        outcome = await make_pipeline(llm=FakeLLM("no json")).search("...")
        assert not outcome.success
        assert outcome.error_kind == "input"

    @pytest.mark.asyncio
    async def test_no_route_message_names_mode(self):
        directions = FakeDirections([])
        outcome = await make_pipeline(directions=directions).search("Paris to London")

        assert outcome.error_kind == "no_route"
        assert "driving" in outcome.error

    @pytest.mark.asyncio
    async def test_upstream_failure_is_reported(self):
        geocoder = FakeGeocoder(errors={"London": UpstreamError("Failed to process geocoding request")})
        outcome = await make_pipeline(geocoder=geocoder).search("Paris to London")

        assert outcome.error_kind == "upstream"
        assert outcome.error == "Failed to process geocoding request"

    @pytest.mark.asyncio
    async def test_malformed_geocoding_reply_is_upstream_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"features": [{"center": ["east", "north"]}]})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            geocoder = MapboxGeocoder(token="pk.test", client=client)
            outcome = await make_pipeline(geocoder=geocoder).search("Paris to London")

        assert outcome.error_kind == "upstream"
        assert outcome.error == "Unexpected geocoding response from Mapbox"
        assert outcome.route is None

    @pytest.mark.asyncio
    async def test_distance_falls_back_to_geometry(self):
        route = RouteResult(geometry=[PLACES["Paris"], PLACES["London"]])
        outcome = await make_pipeline(directions=FakeDirections([route])).search("Paris to London")
        assert 320 < outcome.distance_km < 360

    @pytest.mark.asyncio
    async def test_searches_are_independent(self):
        directions = FakeDirections([paris_london_route()], [paris_london_route("walking")])
        pipeline = make_pipeline(directions=directions)

        first = await pipeline.search("Paris to London")
        second = await pipeline.search("London to Paris")

        assert first.locations == ["Paris", "London"]
        assert second.locations == ["London", "Paris"]
        assert second.coordinates[0] == Coordinate(longitude=-0.1276, latitude=51.5072)
