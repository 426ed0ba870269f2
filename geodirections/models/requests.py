"""Request option models."""

from enum import Enum
from typing import ClassVar, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field


class ProfileIdentifier(str, Enum):
    """Routing profile used by the service."""
    AUTOMOBILE_AVOIDING_TRAFFIC = "mapbox/driving-traffic"
    AUTOMOBILE = "mapbox/driving"
    WALKING = "mapbox/walking"
    CYCLING = "mapbox/cycling"


class ShapeFormat(str, Enum):
    """Encoding of route geometries."""
    GEOJSON = "geojson"
    POLYLINE = "polyline"
    POLYLINE6 = "polyline6"


class RouteShapeResolution(str, Enum):
    """Level of detail of the overview geometry."""
    NONE = "false"
    LOW = "simplified"
    FULL = "full"


class AttributeOption(str, Enum):
    """Per-segment annotations to request."""
    DISTANCE = "distance"
    EXPECTED_TRAVEL_TIME = "duration"
    SPEED = "speed"
    CONGESTION_LEVEL = "congestion"
    MAXIMUM_SPEED_LIMIT = "maxspeed"


class Waypoint(BaseModel):
    """A requested waypoint."""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(description="Latitude in decimal degrees", ge=-90, le=90)
    lon: float = Field(description="Longitude in decimal degrees", ge=-180, le=180)
    coordinate_accuracy: Optional[float] = Field(
        default=None, description="Snapping radius in meters (None = unlimited)", ge=0
    )
    name: Optional[str] = Field(default=None, description="Name to use instead of the road name")
    separates_legs: bool = Field(default=True, description="Whether the route has a leg boundary here")

    @property
    def coordinate_string(self) -> str:
        return f"{self.lon},{self.lat}"


class DirectionsOptions(BaseModel):
    """Options shared by the directions and map matching services."""
    model_config = ConfigDict(frozen=True)

    service: ClassVar[str] = "directions"

    waypoints: list[Waypoint] = Field(min_length=2, description="Ordered waypoints")
    profile: ProfileIdentifier = ProfileIdentifier.AUTOMOBILE
    shape_format: ShapeFormat = ShapeFormat.POLYLINE
    overview: RouteShapeResolution = RouteShapeResolution.LOW
    include_steps: bool = False
    attributes: list[AttributeOption] = Field(default_factory=list)

    @property
    def coordinates(self) -> str:
        return ";".join(w.coordinate_string for w in self.waypoints)

    @property
    def path(self) -> str:
        """Request path including coordinates, for GET requests."""
        return f"{self.service}/v5/{self.profile.value}/{self.coordinates}.json"

    @property
    def abridged_path(self) -> str:
        """Request path without coordinates, for POST requests."""
        return f"{self.service}/v5/{self.profile.value}.json"

    @property
    def query_items(self) -> list[tuple[str, str]]:
        items = [
            ("geometries", self.shape_format.value),
            ("overview", self.overview.value),
            ("steps", str(self.include_steps).lower()),
        ]
        if self.attributes:
            items.append(("annotations", ",".join(a.value for a in self.attributes)))

        if any(w.coordinate_accuracy is not None for w in self.waypoints):
            radiuses = [
                "unlimited" if w.coordinate_accuracy is None else f"{w.coordinate_accuracy:g}"
                for w in self.waypoints
            ]
            items.append(("radiuses", ";".join(radiuses)))

        if any(w.name for w in self.waypoints):
            items.append(("waypoint_names", ";".join(w.name or "" for w in self.separating_waypoints)))

        if not all(w.separates_legs for w in self.waypoints):
            indices = [
                str(i) for i, w in enumerate(self.waypoints)
                if w.separates_legs or i in (0, len(self.waypoints) - 1)
            ]
            items.append(("waypoints", ";".join(indices)))

        return items

    @property
    def separating_waypoints(self) -> list[Waypoint]:
        last = len(self.waypoints) - 1
        return [w for i, w in enumerate(self.waypoints) if w.separates_legs or i in (0, last)]

    @property
    def http_body(self) -> str:
        """Form-encoded body for POST requests."""
        return str(httpx.QueryParams(self.query_items + [("coordinates", self.coordinates)]))


class RouteOptions(DirectionsOptions):
    """Options for the directions service."""
    service: ClassVar[str] = "directions"

    include_alternatives: bool = False
    continue_straight: Optional[bool] = None

    @property
    def query_items(self) -> list[tuple[str, str]]:
        items = super().query_items
        items.append(("alternatives", str(self.include_alternatives).lower()))
        if self.continue_straight is not None:
            items.append(("continue_straight", str(self.continue_straight).lower()))
        return items


class MatchOptions(DirectionsOptions):
    """Options for the map matching service."""
    service: ClassVar[str] = "matching"

    tidy: bool = Field(default=False, description="Let the service clean up noisy traces")

    @property
    def query_items(self) -> list[tuple[str, str]]:
        items = super().query_items
        items.append(("tidy", str(self.tidy).lower()))
        return items
