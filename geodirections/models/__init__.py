"""Pydantic models for requests and decoded responses."""

from .speed import (
    SpeedUnit,
    SpeedLimit,
    UnknownSpeedLimit,
    NoSpeedLimit,
    SpeedLimitDescriptor,
    speed_limit_from_speed,
    speed_from_descriptor,
    decode_speed_limit,
    encode_speed_limit,
)
from .routing import (
    CongestionLevel,
    Waypoint,
    Tracepoint,
    LegAnnotation,
    RouteLeg,
    ResultMetadata,
    Route,
    Match,
)
from .requests import (
    ProfileIdentifier,
    ShapeFormat,
    RouteShapeResolution,
    AttributeOption,
    Waypoint as RequestWaypoint,
    DirectionsOptions,
    RouteOptions,
    MatchOptions,
)

__all__ = [
    # Speed limits
    "SpeedUnit",
    "SpeedLimit",
    "UnknownSpeedLimit",
    "NoSpeedLimit",
    "SpeedLimitDescriptor",
    "speed_limit_from_speed",
    "speed_from_descriptor",
    "decode_speed_limit",
    "encode_speed_limit",
    # Decoded results
    "CongestionLevel",
    "Waypoint",
    "Tracepoint",
    "LegAnnotation",
    "RouteLeg",
    "ResultMetadata",
    "Route",
    "Match",
    # Request options
    "ProfileIdentifier",
    "ShapeFormat",
    "RouteShapeResolution",
    "AttributeOption",
    "RequestWaypoint",
    "DirectionsOptions",
    "RouteOptions",
    "MatchOptions",
]
