"""
Directions and Map Matching API client.

Builds requests from DirectionsOptions, sends them with httpx and hands the
response bodies to the decoding pipeline.
"""

import asyncio
import logging
import platform
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

import httpx

from .. import __version__
from ..config import Config, ConfigurationError, get_yaml_setting, load_config
from ..errors import (
    DecodingError,
    DirectionsError,
    InvalidResponseError,
    NoDataError,
    NoMatchesError,
    UnableToRouteError,
    UnknownDirectionsError,
    classify_error,
)
from ..models.requests import DirectionsOptions, MatchOptions, RouteOptions
from ..processing.decoder import (
    SUCCESS_CODE,
    MatchResponse,
    RouteResponse,
    decode_match_response,
    decode_route_response,
)
from ..processing.postprocess import postprocess

logger = logging.getLogger(__name__)

JSON_MIME_TYPES = ("application/json",)
# Route requests also accept HTML error pages from intermediaries
ROUTE_MIME_TYPES = ("application/json", "text/html")


def user_agent() -> str:
    """User-Agent sent with every request."""
    library = get_yaml_setting("user_agent", "library_name", default="geodirections")
    return (
        f"{library}/{__version__} "
        f"Python/{platform.python_version()} "
        f"{platform.system() or 'Unknown'} ({platform.machine() or 'unknown'})"
    )


class Directions:
    """
    Client for the directions and map matching services.

    Every calculate_* coroutine either returns a decoded, postprocessed
    response or raises exactly one DirectionsError.
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        host: Optional[str] = None,
        sku_token_provider: Optional[Callable[[], Optional[str]]] = None,
        config: Optional[Config] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            access_token: Service access token. Read from the environment
                (MAPBOX_ACCESS_TOKEN) when omitted.
            host: Hostname to send requests to instead of the default endpoint
            sku_token_provider: Returns a billing SKU token to add to requests
            config: Preloaded configuration
            transport: httpx transport override (used by tests)
        """
        if access_token is None:
            config = config or load_config()
            access_token = config.access_token
        if not access_token:
            raise ConfigurationError("An access token is required")

        self.access_token = access_token

        if host:
            self.api_endpoint = f"https://{host}"
        elif config is not None:
            self.api_endpoint = config.api_endpoint
        else:
            self.api_endpoint = get_yaml_setting(
                "service", "api_endpoint", default="https://api.mapbox.com"
            ).rstrip("/")

        if config is not None:
            timeout = config.timeout_s
            self.maximum_url_length = config.maximum_url_length
        else:
            timeout = float(get_yaml_setting("service", "timeout_s", default=30.0))
            self.maximum_url_length = int(
                get_yaml_setting("service", "maximum_url_length", default=1024 * 8)
            )

        self._sku_token_provider = sku_token_provider
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Request construction
    # ------------------------------------------------------------------

    def url_for(self, options: DirectionsOptions, http_method: str = "GET") -> httpx.URL:
        """
        URL for the given options.

        POST URLs leave out the coordinates and query options, which go in the
        request body instead.
        """
        includes_query = http_method != "POST"
        params = list(options.query_items) if includes_query else []
        params.append(("access_token", self.access_token))

        sku_token = self._sku_token_provider() if self._sku_token_provider else None
        if sku_token:
            params.append(("sku", sku_token))

        path = options.path if includes_query else options.abridged_path
        return httpx.URL(f"{self.api_endpoint}/{path}", params=params)

    def build_request(self, options: DirectionsOptions) -> httpx.Request:
        """GET request, or POST when the GET URL would be too long."""
        headers = {"User-Agent": user_agent()}
        get_url = self.url_for(options, "GET")

        if len(str(get_url)) > self.maximum_url_length:
            logger.debug(f"URL exceeds {self.maximum_url_length} characters, using POST")
            headers["Content-Type"] = "application/x-www-form-urlencoded"
            return self._client.build_request(
                "POST",
                self.url_for(options, "POST"),
                content=options.http_body,
                headers=headers,
            )

        return self._client.build_request("GET", get_url, headers=headers)

    # ------------------------------------------------------------------
    # Public calls
    # ------------------------------------------------------------------

    async def calculate(self, options: RouteOptions) -> RouteResponse:
        """
        Calculate routes between the option's waypoints.

        Returns:
            RouteResponse with postprocessed routes and reconciled waypoints

        Raises:
            DirectionsError: If the request failed or no route was found
        """
        response, fetch_start, response_end = await self._fetch(options, ROUTE_MIME_TYPES)
        result = await self._decode(response, decode_route_response, options)

        if not result.is_successful:
            raise self._service_error(response, result.code, result.message, result.error)
        if result.routes is None:
            raise UnableToRouteError(waypoints=result.waypoints)

        routes = postprocess(
            result.routes, fetch_start, response_end, result.uuid,
            self.access_token, self.api_endpoint,
        )
        return replace(result, routes=routes)

    async def calculate_matches(self, options: MatchOptions) -> MatchResponse:
        """
        Match the option's waypoints to the road network.

        Raises:
            DirectionsError: If the request failed or nothing matched
        """
        response, fetch_start, response_end = await self._fetch(options, JSON_MIME_TYPES)
        result = await self._decode(response, decode_match_response, options)

        if not result.is_successful:
            raise self._service_error(response, result.code, result.message, result.error)
        if result.matches is None:
            raise NoMatchesError()

        matches = postprocess(
            result.matches, fetch_start, response_end, None,
            self.access_token, self.api_endpoint,
        )
        return replace(result, matches=matches)

    async def calculate_routes_matching(self, options: MatchOptions) -> RouteResponse:
        """
        Match the option's waypoints and return the matches as routes.

        Raises:
            DirectionsError: If the request failed or nothing matched
        """
        response, fetch_start, response_end = await self._fetch(options, JSON_MIME_TYPES)
        result = await self._decode(
            response, decode_route_response, options, from_matching_service=True
        )

        if result.code != SUCCESS_CODE:
            raise self._service_error(response, result.code, None, result.error)
        if result.routes is None:
            raise UnableToRouteError(waypoints=result.waypoints)

        routes = postprocess(
            result.routes, fetch_start, response_end, None,
            self.access_token, self.api_endpoint,
        )
        return replace(result, routes=routes)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _fetch(
        self, options: DirectionsOptions, mime_types: tuple[str, ...]
    ) -> tuple[httpx.Response, datetime, datetime]:
        fetch_start = datetime.now(timezone.utc)
        request = self.build_request(options)

        try:
            response = await self._client.send(request)
        except httpx.HTTPError as e:
            logger.warning(f"{request.method} {request.url.path} failed: {e}")
            raise UnknownDirectionsError(underlying=e) from e

        response_end = datetime.now(timezone.utc)
        logger.debug(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"in {(response_end - fetch_start).total_seconds() * 1000:.0f}ms"
        )

        mime_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
        if mime_type not in mime_types:
            raise InvalidResponseError()
        if not response.content:
            raise NoDataError()

        return response, fetch_start, response_end

    async def _decode(self, response: httpx.Response, decode, options, **kwargs):
        try:
            return await asyncio.to_thread(decode, response.content, options, **kwargs)
        except DecodingError as e:
            logger.warning(f"Could not decode response ({response.status_code}): {e}")
            raise classify_error(
                response.status_code, underlying=e, headers=response.headers
            ) from e

    @staticmethod
    def _service_error(
        response: httpx.Response,
        code: Optional[str],
        message: Optional[str],
        api_error: Optional[DirectionsError],
    ) -> DirectionsError:
        if message is None and isinstance(api_error, UnknownDirectionsError):
            message = api_error.message
        error = classify_error(
            response.status_code, code, message, headers=response.headers
        )
        logger.info(f"Service error {response.status_code}/{code}: {error}")
        return error
