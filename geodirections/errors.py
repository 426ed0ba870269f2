"""
Error taxonomy for directions requests and the classifier that maps
(HTTP status, service code) pairs onto it.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Mapping, Optional

import httpx

logger = logging.getLogger(__name__)

RATE_LIMIT_INTERVAL_HEADER = "X-Rate-Limit-Interval"
RATE_LIMIT_LIMIT_HEADER = "X-Rate-Limit-Limit"
RATE_LIMIT_RESET_HEADER = "X-Rate-Limit-Reset"


class DecodingError(ValueError):
    """Raised when a response body is not well-formed or does not match the schema."""
    pass


class DirectionsError(Exception):
    """Base class for every failure a directions request can end in."""

    default_message = "The directions request failed."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class InvalidResponseError(DirectionsError):
    """The server returned a response that isn't JSON."""
    default_message = "The server returned an invalid response."


class NoDataError(DirectionsError):
    """The server returned an empty response."""
    default_message = "The server returned an empty response."


class UnableToRouteError(DirectionsError):
    """No route could be found between the waypoints."""
    default_message = "No route could be found between the specified locations."

    def __init__(self, message: Optional[str] = None, waypoints: Optional[list] = None):
        super().__init__(message)
        self.waypoints = waypoints


class UnableToLocateError(DirectionsError):
    """A waypoint is too far from any road or path."""
    default_message = "A specified location could not be associated with a roadway or pathway."


class NoMatchesError(DirectionsError):
    """The trace could not be matched to the road network."""
    default_message = "The specified coordinates could not be matched to the road network."


class TooManyCoordinatesError(DirectionsError):
    """The request has more waypoints than the profile allows."""
    default_message = "Too many coordinates were given."


class ProfileNotFoundError(DirectionsError):
    default_message = "Unrecognized profile identifier."


class RequestTooLargeError(DirectionsError):
    """The request body exceeds the service limit."""
    default_message = "The request is too large."


class InvalidInputError(DirectionsError):
    """The service rejected a request parameter."""
    default_message = "The request is invalid."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message)
        self.message = message


class RateLimitedError(DirectionsError):
    """Too many requests were sent within the rate limit interval."""
    default_message = "Too many requests."

    def __init__(
        self,
        interval: Optional[float] = None,
        limit: Optional[int] = None,
        reset_time: Optional[datetime] = None,
    ):
        message = self.default_message
        if interval is not None and limit is not None:
            message = f"More than {limit} requests have been made in {interval:g} seconds."
        if reset_time is not None:
            message += f" Wait until {reset_time.isoformat()} before retrying."
        super().__init__(message)
        self.interval = interval
        self.limit = limit
        self.reset_time = reset_time


class UnknownDirectionsError(DirectionsError):
    """Anything not covered by a more specific error."""

    def __init__(
        self,
        underlying: Optional[BaseException] = None,
        code: Optional[str] = None,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message or (str(underlying) if underlying else None) or code)
        self.underlying = underlying
        self.code = code
        self.message = message
        self.status_code = status_code


def _header_float(headers: httpx.Headers, key: str) -> Optional[float]:
    value = headers.get(key)
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        number = math.nan
    if not math.isfinite(number):
        logger.warning(f"Ignoring malformed {key} header: {value!r}")
        return None
    return number


def rate_limit_from_headers(
    headers: Optional[Mapping[str, str]],
) -> tuple[Optional[float], Optional[int], Optional[datetime]]:
    """
    Read (interval, limit, reset time) from rate limit response headers.

    Missing or malformed headers come back as None.
    """
    headers = httpx.Headers(headers or {})

    interval = _header_float(headers, RATE_LIMIT_INTERVAL_HEADER)
    limit = _header_float(headers, RATE_LIMIT_LIMIT_HEADER)
    reset = _header_float(headers, RATE_LIMIT_RESET_HEADER)

    reset_time = None
    if reset is not None:
        try:
            reset_time = datetime.fromtimestamp(reset, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            logger.warning(f"Ignoring out of range {RATE_LIMIT_RESET_HEADER} header: {reset!r}")

    return interval, int(limit) if limit is not None else None, reset_time


def classify_error(
    status_code: Optional[int],
    code: Optional[str] = None,
    message: Optional[str] = None,
    underlying: Optional[BaseException] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> DirectionsError:
    """
    Return the error that best explains a failed response.

    Args:
        status_code: HTTP status, or None if no response was received
        code: Service error code from the response body (e.g. "NoRoute")
        message: Service error message from the response body
        underlying: Exception raised by the transport or decoder, if any
        headers: Response headers (rate limit details are read from them)

    Returns:
        Exactly one DirectionsError instance
    """
    if status_code is None:
        return UnknownDirectionsError(underlying=underlying, code=code, message=message)

    key = (status_code, code or "")

    if key == (200, "NoRoute"):
        return UnableToRouteError()
    if key == (200, "NoSegment"):
        return UnableToLocateError()
    if key == (200, "NoMatch"):
        return NoMatchesError()
    if key == (422, "TooManyCoordinates"):
        return TooManyCoordinatesError()
    if key == (404, "ProfileNotFound"):
        return ProfileNotFoundError()
    if status_code == 413:
        return RequestTooLargeError()
    if key == (422, "InvalidInput"):
        return InvalidInputError(message)
    if status_code == 429:
        interval, limit, reset_time = rate_limit_from_headers(headers)
        return RateLimitedError(interval=interval, limit=limit, reset_time=reset_time)

    return UnknownDirectionsError(
        underlying=underlying, code=code, message=message, status_code=status_code
    )
