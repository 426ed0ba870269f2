"""geodirections: directions and map matching client with typed, reconciled results."""

__version__ = "1.0.0"

from .errors import (
    DecodingError,
    DirectionsError,
    InvalidResponseError,
    NoDataError,
    UnableToRouteError,
    UnableToLocateError,
    NoMatchesError,
    TooManyCoordinatesError,
    ProfileNotFoundError,
    RequestTooLargeError,
    InvalidInputError,
    RateLimitedError,
    UnknownDirectionsError,
    classify_error,
)
from .processing import (
    RouteResponse,
    MatchResponse,
    decode_route_response,
    decode_match_response,
    reconcile_waypoints,
    postprocess,
)
from .clients import Directions

__all__ = [
    "__version__",
    "DecodingError",
    "DirectionsError",
    "InvalidResponseError",
    "NoDataError",
    "UnableToRouteError",
    "UnableToLocateError",
    "NoMatchesError",
    "TooManyCoordinatesError",
    "ProfileNotFoundError",
    "RequestTooLargeError",
    "InvalidInputError",
    "RateLimitedError",
    "UnknownDirectionsError",
    "classify_error",
    "RouteResponse",
    "MatchResponse",
    "decode_route_response",
    "decode_match_response",
    "reconcile_waypoints",
    "postprocess",
    "Directions",
]
