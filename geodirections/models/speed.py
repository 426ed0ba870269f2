"""Speed limit descriptors as they appear in leg annotations."""

import math
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SpeedUnit(str, Enum):
    """Units the service reports speed limits in."""
    KILOMETERS_PER_HOUR = "km/h"
    MILES_PER_HOUR = "mph"


class SpeedLimit(BaseModel):
    """A posted speed limit."""
    model_config = ConfigDict(frozen=True)

    speed: float = Field(description="Posted speed limit value")
    unit: SpeedUnit = Field(description="Unit of the speed value")


class UnknownSpeedLimit(BaseModel):
    """The speed limit is not known."""
    model_config = ConfigDict(frozen=True)


class NoSpeedLimit(BaseModel):
    """There is no speed limit (e.g. unrestricted motorway)."""
    model_config = ConfigDict(frozen=True)


SpeedLimitDescriptor = Union[SpeedLimit, UnknownSpeedLimit, NoSpeedLimit]


def speed_limit_from_speed(
    speed: Optional[float], unit: SpeedUnit = SpeedUnit.KILOMETERS_PER_HOUR
) -> SpeedLimitDescriptor:
    """
    Build a descriptor from a plain speed value.

    None means unknown; an infinite speed means there is no limit.
    """
    if speed is None:
        return UnknownSpeedLimit()
    if math.isinf(speed):
        return NoSpeedLimit()
    return SpeedLimit(speed=speed, unit=unit)


def speed_from_descriptor(
    descriptor: SpeedLimitDescriptor,
) -> Optional[tuple[float, SpeedUnit]]:
    """Inverse of speed_limit_from_speed. Unknown limits have no speed."""
    if isinstance(descriptor, SpeedLimit):
        return descriptor.speed, descriptor.unit
    if isinstance(descriptor, NoSpeedLimit):
        return math.inf, SpeedUnit.KILOMETERS_PER_HOUR
    return None


def decode_speed_limit(data: dict) -> SpeedLimitDescriptor:
    """
    Decode one `maxspeed` entry.

    The variant is picked by key presence:
        {"none": true}             -> NoSpeedLimit
        {"unknown": true}          -> UnknownSpeedLimit
        {"speed": 50, "unit": ...} -> SpeedLimit

    Raises:
        ValueError: If the entry matches none of the shapes.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Speed limit descriptor must be an object, got {type(data).__name__}")

    if data.get("none"):
        return NoSpeedLimit()
    if data.get("unknown"):
        return UnknownSpeedLimit()
    if "speed" in data:
        try:
            unit = SpeedUnit(data.get("unit", SpeedUnit.KILOMETERS_PER_HOUR.value))
            speed = float(data["speed"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid speed limit descriptor {data}: {e}") from e
        return speed_limit_from_speed(speed, unit)

    raise ValueError(f"Unrecognized speed limit descriptor: {data}")


def encode_speed_limit(descriptor: SpeedLimitDescriptor) -> dict:
    """Encode a descriptor back to its wire shape."""
    if isinstance(descriptor, SpeedLimit):
        if math.isinf(descriptor.speed):
            return {"none": True}
        return {"speed": descriptor.speed, "unit": descriptor.unit.value}
    if isinstance(descriptor, NoSpeedLimit):
        return {"none": True}
    if isinstance(descriptor, UnknownSpeedLimit):
        return {"unknown": True}
    raise TypeError(f"Not a speed limit descriptor: {descriptor!r}")
