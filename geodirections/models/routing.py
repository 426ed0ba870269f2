"""Decoded route, match and waypoint models."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .speed import SpeedLimitDescriptor, decode_speed_limit, encode_speed_limit


class CongestionLevel(str, Enum):
    """Traffic congestion along a leg segment."""
    UNKNOWN = "unknown"
    LOW = "low"
    MODERATE = "moderate"
    HEAVY = "heavy"
    SEVERE = "severe"


class Waypoint(BaseModel):
    """
    A waypoint returned by the service.

    After reconciliation with the request it also carries the requested
    accuracy, the resolved name and whether it separates legs.
    """
    model_config = ConfigDict(frozen=True)

    location: tuple[float, float] = Field(description="(lon, lat) of the snapped location")
    name: Optional[str] = Field(default=None, description="Road or place name")
    distance: Optional[float] = Field(
        default=None, description="Distance in meters from the input coordinate"
    )
    coordinate_accuracy: Optional[float] = Field(
        default=None, description="Requested accuracy radius in meters"
    )
    separates_legs: bool = Field(default=True, description="Whether a leg ends here")

    @property
    def lon(self) -> float:
        return self.location[0]

    @property
    def lat(self) -> float:
        return self.location[1]


class Tracepoint(Waypoint):
    """A map-matching waypoint."""
    matchings_index: Optional[int] = Field(default=None, description="Index of the match it belongs to")
    waypoint_index: Optional[int] = Field(default=None, description="Index within that match's waypoints")
    alternatives_count: Optional[int] = Field(
        default=None, description="Number of alternative snapping candidates"
    )


class LegAnnotation(BaseModel):
    """Per-segment attributes of a leg. Each list has one entry per segment."""
    model_config = ConfigDict(frozen=True)

    distance: Optional[list[float]] = None
    duration: Optional[list[float]] = None
    speed: Optional[list[float]] = None
    congestion: Optional[list[CongestionLevel]] = None
    maxspeed: Optional[list[SpeedLimitDescriptor]] = Field(
        default=None, description="Maximum speed limit per segment"
    )

    @field_validator("maxspeed", mode="before")
    @classmethod
    def _decode_maxspeed(cls, value: Any) -> Any:
        if value is None:
            return None
        if not isinstance(value, list):
            raise ValueError(f"maxspeed must be a list, got {type(value).__name__}")
        return [entry if isinstance(entry, BaseModel) else decode_speed_limit(entry) for entry in value]

    @field_serializer("maxspeed")
    def _encode_maxspeed(self, value: Optional[list[SpeedLimitDescriptor]]) -> Optional[list[dict]]:
        if value is None:
            return None
        return [encode_speed_limit(entry) for entry in value]


class RouteLeg(BaseModel):
    """The part of a route between two leg-separating waypoints."""
    model_config = ConfigDict(frozen=True)

    distance: float = Field(default=0.0, description="Leg distance in meters")
    duration: float = Field(default=0.0, description="Expected travel time in seconds")
    weight: Optional[float] = None
    summary: Optional[str] = Field(default=None, description="Names of the most significant roads")
    annotation: Optional[LegAnnotation] = None

    # Filled in from the response's leg separators, not part of the wire format
    source: Optional[Waypoint] = Field(default=None, exclude=True)
    destination: Optional[Waypoint] = Field(default=None, exclude=True)


class ResultMetadata(BaseModel):
    """Request-scoped information attached to each result after a fetch."""
    model_config = ConfigDict(frozen=True)

    route_identifier: Optional[str] = Field(default=None, description="Service-assigned response uuid")
    api_endpoint: str
    access_token: str
    fetch_start_date: datetime
    response_end_date: datetime


class Route(BaseModel):
    """A route between the requested waypoints."""
    model_config = ConfigDict(frozen=True)

    distance: float = Field(default=0.0, description="Route distance in meters")
    duration: float = Field(default=0.0, description="Expected travel time in seconds")
    weight: Optional[float] = None
    weight_name: Optional[str] = None
    geometry: Optional[Any] = Field(default=None, description="Encoded polyline or GeoJSON line")
    legs: list[RouteLeg] = Field(default_factory=list)

    route_identifier: Optional[str] = Field(default=None, exclude=True)
    leg_separators: list[Waypoint] = Field(default_factory=list, exclude=True)
    metadata: Optional[ResultMetadata] = Field(default=None, exclude=True)


class Match(Route):
    """A route matched to a GPS trace."""
    confidence: float = Field(default=0.0, description="0-1 confidence of the match", ge=0, le=1)
