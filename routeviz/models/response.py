"""Output models for route searches."""

from pydantic import BaseModel, Field


class Coordinate(BaseModel):
    """A (longitude, latitude) point in the upstream axis order.

    Values are not range-checked; malformed points surface as upstream errors.
    """
    longitude: float
    latitude: float

    class Config:
        frozen = True

    def as_tuple(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)

    @classmethod
    def from_tuple(cls, coords) -> "Coordinate":
        return cls(longitude=coords[0], latitude=coords[1])


class RouteResult(BaseModel):
    """The first route returned for a directions request."""

    geometry: list[Coordinate] = Field(default_factory=list)
    profile: str = "driving"
    distance_m: float | None = Field(
        default=None,
        description="Route length reported by the directions service"
    )
    duration_s: float | None = Field(
        default=None,
        description="Travel time reported by the directions service"
    )

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "geometry": [
                    {"longitude": 2.3522, "latitude": 48.8566},
                    {"longitude": -0.1276, "latitude": 51.5072},
                ],
                "profile": "driving",
                "distance_m": 459000.0,
                "duration_s": 19800.0,
            }
        }

    def bounds(self) -> tuple[Coordinate, Coordinate] | None:
        """South-west and north-east corners of the route, for fitting a map view."""
        if not self.geometry:
            return None
        lons = [c.longitude for c in self.geometry]
        lats = [c.latitude for c in self.geometry]
        return (
            Coordinate(longitude=min(lons), latitude=min(lats)),
            Coordinate(longitude=max(lons), latitude=max(lats)),
        )
