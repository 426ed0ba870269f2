"""
Waypoint reconciliation.

Merges the waypoints (or tracepoints) decoded from a response with the
waypoints of the request that produced it.
"""

import logging
from typing import Optional, Sequence

from ..models.requests import DirectionsOptions
from ..models.routing import Waypoint

logger = logging.getLogger(__name__)


def reconcile_waypoints(
    decoded: Sequence[Optional[Waypoint]],
    options: Optional[DirectionsOptions],
) -> list[Waypoint]:
    """
    Build the canonical waypoint sequence for one response.

    Decoded waypoints are paired with the requested waypoints by position and
    pairs whose decoded side is None (unmatched) are dropped. Each canonical waypoint
    keeps the decoded location, takes the requested accuracy and leg flag, and
    uses the requested name unless it is empty. The first and last waypoints
    always separate legs.

    Without options the decoded waypoints are returned as they are.

    Args:
        decoded: Waypoints or tracepoints from the response, None if unmatched
        options: Options of the originating request

    Returns:
        Canonical waypoints in request order
    """
    if options is None:
        logger.debug("No request options available, keeping decoded waypoints as-is")
        return [w for w in decoded if w is not None]

    requested = options.waypoints
    if len(decoded) != len(requested):
        # zip() below keeps only the common prefix
        logger.warning(
            f"Response has {len(decoded)} waypoints but request has {len(requested)}; "
            f"keeping the first {min(len(decoded), len(requested))}"
        )

    waypoints = [
        decoded_waypoint.model_copy(
            update={
                "coordinate_accuracy": requested_waypoint.coordinate_accuracy,
                "name": requested_waypoint.name or decoded_waypoint.name,
                "separates_legs": requested_waypoint.separates_legs,
            }
        )
        for decoded_waypoint, requested_waypoint in zip(decoded, requested)
        if decoded_waypoint is not None
    ]

    if waypoints:
        waypoints[0] = waypoints[0].model_copy(update={"separates_legs": True})
        waypoints[-1] = waypoints[-1].model_copy(update={"separates_legs": True})

    return waypoints
