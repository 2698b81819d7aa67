"""Input models for route searches."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator

from .response import Coordinate


class TransportMode(str, Enum):
    """Travel modes the directions service can route for."""
    DRIVING = "driving"
    WALKING = "walking"
    CYCLING = "cycling"


PROFILE_SYNONYMS = {
    "walk": TransportMode.WALKING,
    "on foot": TransportMode.WALKING,
    "bicycle": TransportMode.CYCLING,
    "bike": TransportMode.CYCLING,
}


def normalize_profile(profile: str | None) -> TransportMode:
    """
    Map a free-form travel mode onto a directions profile.

    Synonyms are resolved first; anything still outside the known
    modes falls back to driving.
    """
    if not profile:
        return TransportMode.DRIVING

    value = profile.strip().lower()
    if value in PROFILE_SYNONYMS:
        return PROFILE_SYNONYMS[value]

    try:
        return TransportMode(value)
    except ValueError:
        return TransportMode.DRIVING


class TravelPreferences(BaseModel):
    """Travel preferences read from the user's request.

    ``None`` means the user did not say. Unset preferences are never sent
    upstream, which is not the same as sending ``false``.
    """

    transport_mode: str | None = Field(default=None, alias="transportMode")
    avoid_tolls: bool | None = Field(default=None, alias="avoidTolls")
    avoid_highways: bool | None = Field(default=None, alias="avoidHighways")
    avoid_ferries: bool | None = Field(default=None, alias="avoidFerries")

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "transportMode": "cycling",
                "avoidTolls": None,
                "avoidHighways": True,
                "avoidFerries": None,
            }
        }

    @field_validator("transport_mode", mode="before")
    @classmethod
    def _blank_mode_is_unset(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("avoid_tolls", "avoid_highways", "avoid_ferries", mode="before")
    @classmethod
    def _strict_flags(cls, value):
        # Anything other than a real boolean counts as "not specified"
        return value if isinstance(value, bool) else None

    @property
    def profile(self) -> TransportMode:
        """Effective directions profile, driving when unspecified."""
        return normalize_profile(self.transport_mode)

    def exclusions(self, profile: TransportMode) -> list[str]:
        """Upstream ``exclude`` values for the preferences explicitly set to true."""
        excluded = []
        if profile == TransportMode.DRIVING:
            if self.avoid_tolls is True:
                excluded.append("toll")
            if self.avoid_highways is True:
                excluded.append("motorway")
        if self.avoid_ferries is True:
            excluded.append("ferry")
        return excluded


class ExtractionResult(BaseModel):
    """Ordered location names and preferences read from one query."""

    locations: list[str] = Field(default_factory=list)
    preferences: TravelPreferences = Field(default_factory=TravelPreferences)
    strategy: str = Field(
        default="pattern",
        description="Name of the extraction strategy that produced this result"
    )
    is_route_request: bool = Field(
        default=False,
        description="Whether the wording asked for a route (affects messaging only)"
    )

    class Config:
        frozen = True


class RouteRequest(BaseModel):
    """A single directions request through ordered waypoints."""

    coordinates: list[Coordinate] = Field(
        ...,
        min_length=2,
        description="Waypoints in travel order: origin, via-points, destination"
    )
    profile: TransportMode = TransportMode.DRIVING
    exclude: list[str] = Field(default_factory=list)

    class Config:
        frozen = True

    def coordinates_path(self) -> str:
        """Waypoints formatted as ``lon,lat;lon,lat;...`` for the URL path."""
        return ";".join(f"{c.longitude},{c.latitude}" for c in self.coordinates)
