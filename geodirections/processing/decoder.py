"""
Response envelope decoding.

Turns a raw directions or map matching response body into a RouteResponse or
MatchResponse whose routes share one reconciled waypoint sequence.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import TypeAdapter, ValidationError

from ..errors import DecodingError, DirectionsError, UnknownDirectionsError
from ..models.requests import DirectionsOptions
from ..models.routing import Match, Route, Tracepoint, Waypoint
from .postprocess import assign_leg_separators
from .reconciler import reconcile_waypoints

logger = logging.getLogger(__name__)

SUCCESS_CODE = "Ok"

_STRING = TypeAdapter(Optional[str])
_WAYPOINTS = TypeAdapter(Optional[list[Optional[Waypoint]]])
_TRACEPOINTS = TypeAdapter(Optional[list[Optional[Tracepoint]]])
_ROUTES = TypeAdapter(Optional[list[Route]])
_MATCHES = TypeAdapter(Optional[list[Match]])


@dataclass(frozen=True)
class RouteResponse:
    """Decoded directions (or map-matching-as-routes) response."""
    code: Optional[str] = None
    message: Optional[str] = None
    error: Optional[DirectionsError] = None
    uuid: Optional[str] = None
    routes: Optional[list[Route]] = None
    waypoints: Optional[list[Waypoint]] = None

    @property
    def is_successful(self) -> bool:
        return (self.code is None and self.message is None) or self.code == SUCCESS_CODE

    def to_json(self) -> dict:
        """Encode back to the service's wire format, omitting absent fields."""
        data = _encode_header(self.code, self.message, self.error, self.uuid)
        if self.routes is not None:
            data["routes"] = [r.model_dump(mode="json", exclude_none=True) for r in self.routes]
        if self.waypoints is not None:
            data["waypoints"] = [w.model_dump(mode="json", exclude_none=True) for w in self.waypoints]
        return data


@dataclass(frozen=True)
class MatchResponse:
    """Decoded map matching response."""
    code: Optional[str] = None
    message: Optional[str] = None
    error: Optional[DirectionsError] = None
    uuid: Optional[str] = None
    matches: Optional[list[Match]] = None
    # One entry per requested coordinate; None where nothing matched
    tracepoints: Optional[list[Optional[Tracepoint]]] = None

    @property
    def is_successful(self) -> bool:
        return self.code == SUCCESS_CODE

    def to_json(self) -> dict:
        data = _encode_header(self.code, self.message, self.error, self.uuid)
        if self.matches is not None:
            data["matchings"] = [m.model_dump(mode="json", exclude_none=True) for m in self.matches]
        if self.tracepoints is not None:
            data["tracepoints"] = [
                t.model_dump(mode="json", exclude_none=True) if t is not None else None
                for t in self.tracepoints
            ]
        return data


def _encode_header(
    code: Optional[str],
    message: Optional[str],
    error: Optional[DirectionsError],
    uuid: Optional[str],
) -> dict:
    data = {}
    if code is not None:
        data["code"] = code
    if message is not None:
        data["message"] = message
    if error is not None:
        data["error"] = str(error)
    if uuid is not None:
        data["uuid"] = uuid
    return data


def _load_payload(data: Union[bytes, str, dict]) -> dict:
    """Parse a response body into a JSON object."""
    if isinstance(data, dict):
        return data
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        raise DecodingError(f"Response is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise DecodingError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


def _decode_field(adapter: TypeAdapter, payload: dict, key: str) -> Any:
    try:
        return adapter.validate_python(payload.get(key))
    except ValidationError as e:
        raise DecodingError(f"Invalid '{key}' in response: {e}") from e


def _decode_header(payload: dict) -> tuple[Optional[str], Optional[str], Optional[DirectionsError], Optional[str]]:
    code = _decode_field(_STRING, payload, "code")
    message = _decode_field(_STRING, payload, "message")
    api_error = _decode_field(_STRING, payload, "error")
    uuid = _decode_field(_STRING, payload, "uuid")

    # The HTTP status isn't known here; the client refines this later
    error = UnknownDirectionsError(code=code, message=api_error) if api_error is not None else None
    return code, message, error, uuid


def decode_route_response(
    data: Union[bytes, str, dict],
    options: Optional[DirectionsOptions] = None,
    from_matching_service: bool = False,
) -> RouteResponse:
    """
    Decode a directions response.

    Args:
        data: Response body (bytes, str or an already parsed dict)
        options: Options of the originating request, used to name waypoints
            and mark leg separators. Without them waypoints are kept as decoded.
        from_matching_service: Read `matchings`/`tracepoints` instead of
            `routes`/`waypoints` (map matching response decoded as routes)

    Returns:
        RouteResponse. `routes` is None when the response has no routes key.

    Raises:
        DecodingError: If the body is not JSON or doesn't match the schema.
    """
    payload = _load_payload(data)
    code, message, error, uuid = _decode_header(payload)

    if from_matching_service:
        decoded_waypoints = _decode_field(_TRACEPOINTS, payload, "tracepoints")
        decoded_routes = _decode_field(_MATCHES, payload, "matchings")
    else:
        decoded_waypoints = _decode_field(_WAYPOINTS, payload, "waypoints")
        decoded_routes = _decode_field(_ROUTES, payload, "routes")

    waypoints = None
    if decoded_waypoints is not None:
        waypoints = reconcile_waypoints(decoded_waypoints, options)

    routes = None
    if decoded_routes is not None:
        routes = [_attach_waypoints(route, uuid, waypoints) for route in decoded_routes]

    logger.debug(
        f"Decoded route response code={code} routes={len(routes) if routes is not None else None} "
        f"waypoints={len(waypoints) if waypoints is not None else None}"
    )

    return RouteResponse(
        code=code,
        message=message,
        error=error,
        uuid=uuid,
        routes=routes,
        waypoints=waypoints,
    )


def decode_match_response(
    data: Union[bytes, str, dict],
    options: Optional[DirectionsOptions] = None,
) -> MatchResponse:
    """
    Decode a map matching response.

    Tracepoints are returned as sent, including None for unmatched
    coordinates. Matches get leg separators from the reconciled tracepoints.

    Raises:
        DecodingError: If the body is not JSON or doesn't match the schema.
    """
    payload = _load_payload(data)
    code, message, error, uuid = _decode_header(payload)

    tracepoints = _decode_field(_TRACEPOINTS, payload, "tracepoints")
    decoded_matches = _decode_field(_MATCHES, payload, "matchings")

    waypoints = reconcile_waypoints(tracepoints, options) if tracepoints is not None else None

    matches = None
    if decoded_matches is not None:
        matches = [_attach_waypoints(match, uuid, waypoints) for match in decoded_matches]

    return MatchResponse(
        code=code,
        message=message,
        error=error,
        uuid=uuid,
        matches=matches,
        tracepoints=tracepoints,
    )


def _attach_waypoints(route, uuid: Optional[str], waypoints: Optional[list[Waypoint]]):
    route = route.model_copy(update={"route_identifier": uuid})
    if waypoints is not None:
        route = assign_leg_separators(route, waypoints)
    return route
