"""
Directions CLI - Entry Point

Usage:
    python -m geodirections.main route -122.42,37.78 -122.40,37.76
    python -m geodirections.main match -122.42,37.78 -122.41,37.77 -122.40,37.76 --as-routes

Prints the decoded response as JSON.
"""

import argparse
import asyncio
import json
import logging
import sys

from .clients.directions import Directions
from .config import load_config, ConfigurationError
from .errors import DirectionsError
from .models.requests import MatchOptions, ProfileIdentifier, RouteOptions

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)


def parse_coordinate(value: str) -> dict:
    """Parse a "lon,lat" argument into request waypoint fields."""
    try:
        lon, lat = (float(part) for part in value.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected lon,lat but got {value!r}")
    return {"lon": lon, "lat": lat}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query the directions and map matching services")
    parser.add_argument("service", choices=["route", "match"])
    parser.add_argument("coordinates", nargs="+", type=parse_coordinate, help="lon,lat pairs")
    parser.add_argument(
        "--profile",
        choices=[p.value for p in ProfileIdentifier],
        default=ProfileIdentifier.AUTOMOBILE.value,
    )
    parser.add_argument("--alternatives", action="store_true", help="Include alternative routes")
    parser.add_argument("--as-routes", action="store_true", help="Return matches as routes")
    parser.add_argument("--verbose", action="store_true", help="Log request details")
    return parser


async def run(args: argparse.Namespace) -> dict:
    """Send the request described by the CLI arguments."""
    config = load_config()
    logger.info(f"Using endpoint {config.api_endpoint}")

    directions = Directions(config=config, access_token=config.access_token)
    try:
        profile = ProfileIdentifier(args.profile)
        if args.service == "route":
            options = RouteOptions(
                waypoints=args.coordinates,
                profile=profile,
                include_alternatives=args.alternatives,
            )
            response = await directions.calculate(options)
        else:
            options = MatchOptions(waypoints=args.coordinates, profile=profile)
            if args.as_routes:
                response = await directions.calculate_routes_matching(options)
            else:
                response = await directions.calculate_matches(options)
        return response.to_json()
    finally:
        await directions.close()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger("geodirections").setLevel(logging.DEBUG)

    try:
        result = asyncio.run(run(args))
    except ConfigurationError as e:
        logger.error("CONFIGURATION ERROR")
        logger.error(str(e))
        return 1
    except DirectionsError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 2

    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
