"""Attach response-wide information to decoded routes and matches."""

import logging
from datetime import datetime
from typing import Optional, Sequence, TypeVar

from ..models.routing import ResultMetadata, Route, Waypoint

logger = logging.getLogger(__name__)

RouteT = TypeVar("RouteT", bound=Route)


def assign_leg_separators(route: RouteT, waypoints: Sequence[Waypoint]) -> RouteT:
    """
    Return a copy of the route whose legs start and end at the
    leg-separating waypoints.
    """
    separators = [w for w in waypoints if w.separates_legs]

    if len(separators) >= 2 and len(route.legs) != len(separators) - 1:
        logger.warning(
            f"Route has {len(route.legs)} legs but {len(separators)} leg separators"
        )

    legs = list(route.legs)
    for index, (leg, source, destination) in enumerate(
        zip(route.legs, separators, separators[1:])
    ):
        legs[index] = leg.model_copy(update={"source": source, "destination": destination})

    return route.model_copy(update={"legs": legs, "leg_separators": separators})


def postprocess(
    routes: Sequence[RouteT],
    fetch_start_date: datetime,
    response_end_date: datetime,
    route_identifier: Optional[str],
    access_token: str,
    api_endpoint: str,
) -> list[RouteT]:
    """
    Return copies of the routes carrying request metadata.

    Metadata is attached once; a route that already has it is rejected.

    Raises:
        ValueError: If a route was already postprocessed.
    """
    metadata = ResultMetadata(
        route_identifier=route_identifier,
        api_endpoint=api_endpoint,
        access_token=access_token,
        fetch_start_date=fetch_start_date,
        response_end_date=response_end_date,
    )

    results = []
    for route in routes:
        if route.metadata is not None:
            raise ValueError("Route metadata has already been set")
        results.append(route.model_copy(update={"metadata": metadata}))

    logger.debug(f"Postprocessed {len(results)} results ({route_identifier})")
    return results
