"""Response decoding and postprocessing."""

from .reconciler import reconcile_waypoints
from .postprocess import assign_leg_separators, postprocess
from .decoder import (
    RouteResponse,
    MatchResponse,
    decode_route_response,
    decode_match_response,
)

__all__ = [
    "reconcile_waypoints",
    "assign_leg_separators",
    "postprocess",
    "RouteResponse",
    "MatchResponse",
    "decode_route_response",
    "decode_match_response",
]
