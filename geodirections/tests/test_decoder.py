"""
Test response envelope decoding.
"""

import json

import pytest

from ..errors import DecodingError, UnknownDirectionsError
from ..models.routing import Match, Route, Tracepoint
from ..models.speed import SpeedLimit, UnknownSpeedLimit
from ..processing.decoder import decode_match_response, decode_route_response
from .sample_responses import (
    ORIGIN,
    VIA,
    DESTINATION,
    match_options,
    match_response,
    route_options,
    route_response,
)


def test_decode_routes():
    """Test decoding a successful directions response."""
    print("\n=== Testing Route Decoding ===")

    payload = json.dumps(route_response()).encode("utf-8")
    response = decode_route_response(payload, route_options())

    assert response.code == "Ok"
    assert response.message is None
    assert response.error is None
    assert response.uuid == "ck4f22iso03fm78o2f96mt5e9"
    assert response.is_successful

    assert len(response.routes) == 1
    route = response.routes[0]
    assert isinstance(route, Route)
    assert route.distance == 2000.0
    assert route.route_identifier == "ck4f22iso03fm78o2f96mt5e9"
    assert route.metadata is None

    leg = route.legs[0]
    assert leg.summary == "Market Street"
    assert leg.annotation.maxspeed[0] == SpeedLimit(speed=48, unit="km/h")
    assert leg.annotation.maxspeed[1] == UnknownSpeedLimit()

    assert [w.name for w in response.waypoints] == ["Fulton Street", "Market Street", ""]
    assert [w.coordinate_accuracy for w in response.waypoints] == [10.0, 20.0, 30.0]

    print("✓ Routes decoded")


def test_leg_separators_assigned():
    """Test that legs start and end at separating waypoints."""
    print("\n=== Testing Leg Separators ===")

    response = decode_route_response(route_response(leg_count=2), route_options())
    route = response.routes[0]
    separators = [w for w in response.waypoints if w.separates_legs]

    assert len(separators) == 3
    assert len(route.legs) == len(separators) - 1
    assert route.leg_separators == separators
    assert route.legs[0].source.location == ORIGIN
    assert route.legs[0].destination.location == VIA
    assert route.legs[1].source.location == VIA
    assert route.legs[1].destination.location == DESTINATION

    print("✓ Leg separators assigned")


def test_non_separating_via():
    """Test a via waypoint that doesn't end a leg."""
    print("\n=== Testing Non-Separating Via ===")

    response = decode_route_response(
        route_response(leg_count=1), route_options(via_separates_legs=False)
    )
    route = response.routes[0]

    assert len(response.waypoints) == 3
    assert len(route.leg_separators) == 2
    assert len(route.legs) == 1
    assert route.legs[0].source.location == ORIGIN
    assert route.legs[0].destination.location == DESTINATION

    print("✓ One leg across the via waypoint")


def test_routes_share_waypoints():
    """Test that every route in a response gets the same separators."""
    print("\n=== Testing Shared Waypoints ===")

    response = decode_route_response(route_response(route_count=3), route_options())

    assert len(response.routes) == 3
    first = response.routes[0].leg_separators
    for route in response.routes[1:]:
        assert route.leg_separators == first

    print("✓ Routes share one waypoint sequence")


def test_without_options():
    """Test decoding without the originating options."""
    print("\n=== Testing Decoding Without Options ===")

    response = decode_route_response(route_response())

    assert [w.name for w in response.waypoints] == ["Fulton Street", "Market Street", ""]
    assert all(w.coordinate_accuracy is None for w in response.waypoints)
    # Decoded waypoints default to separating legs
    assert len(response.routes[0].leg_separators) == 3

    print("✓ Decoded without options")


def test_error_field():
    """Test that an error field becomes an unknown error."""
    print("\n=== Testing Error Field ===")

    response = decode_route_response(
        {"code": "InvalidInput", "message": "Bad coordinates", "error": "Coordinate out of range"}
    )

    assert isinstance(response.error, UnknownDirectionsError)
    assert response.error.code == "InvalidInput"
    assert response.error.message == "Coordinate out of range"
    assert not response.is_successful
    assert response.routes is None
    assert response.waypoints is None

    print("✓ Error field classified")


def test_missing_routes():
    """Test that an absent routes key is not a decode failure."""
    print("\n=== Testing Missing Routes ===")

    payload = route_response()
    del payload["routes"]
    response = decode_route_response(payload, route_options())

    assert response.is_successful
    assert response.routes is None
    assert len(response.waypoints) == 3

    empty = decode_route_response({"code": "Ok", "routes": []})
    assert empty.routes == []

    print("✓ Missing routes tolerated")


def test_success_conditions():
    """Test when an envelope counts as successful."""
    print("\n=== Testing Success Conditions ===")

    assert decode_route_response({}).is_successful
    assert decode_route_response({"code": "Ok", "message": "fine"}).is_successful
    assert not decode_route_response({"message": "Not Authorized - Invalid Token"}).is_successful
    assert not decode_route_response({"code": "NoRoute"}).is_successful

    print("✓ Success conditions correct")


def test_matching_service_routes():
    """Test decoding a map matching response as routes."""
    print("\n=== Testing Matching Service Routes ===")

    response = decode_route_response(match_response(), match_options(), from_matching_service=True)

    assert len(response.routes) == 1
    assert isinstance(response.routes[0], Match)
    assert response.routes[0].confidence == 0.87
    assert len(response.waypoints) == 3
    assert [w.separates_legs for w in response.waypoints] == [True, False, True]
    assert len(response.routes[0].legs) == 1
    assert len(response.routes[0].leg_separators) == 2

    print("✓ Matchings decoded as routes")


def test_match_shape_in_route_mode():
    """Test that a match-shaped payload yields no routes in route mode."""
    print("\n=== Testing Match Payload In Route Mode ===")

    response = decode_route_response(match_response(), match_options())

    assert response.code == "Ok"
    assert response.routes is None
    assert response.waypoints is None

    print("✓ Schema mismatch yields empty routes")


def test_decode_matches():
    """Test decoding a map matching response."""
    print("\n=== Testing Match Decoding ===")

    response = decode_match_response(match_response(unmatched_middle=True), match_options())

    assert response.is_successful
    assert len(response.tracepoints) == 3
    assert response.tracepoints[1] is None
    assert isinstance(response.tracepoints[0], Tracepoint)
    assert response.tracepoints[0].alternatives_count == 1

    match = response.matches[0]
    assert match.confidence == 0.87
    assert [w.location for w in match.leg_separators] == [ORIGIN, DESTINATION]
    assert match.legs[0].destination.name == "Mission Street"

    assert not decode_match_response({}).is_successful

    print("✓ Matches decoded")


def test_structural_failures():
    """Test that malformed bodies raise DecodingError."""
    print("\n=== Testing Structural Failures ===")

    bad_bodies = [
        b"<html>Bad Gateway</html>",
        b"\xff\xfe",
        b"[1, 2, 3]",
        {"code": 404},
        {"code": "Ok", "routes": "none"},
        {"code": "Ok", "routes": [{"legs": [{"distance": "far"}]}]},
        {"code": "Ok", "waypoints": [{"name": "no location"}]},
        {"code": "Ok", "routes": [{"legs": [{"annotation": {"maxspeed": [{"limit": 1}]}}]}]},
        {"code": "Ok", "routes": [{"legs": [{"annotation": {"maxspeed": [{"speed": None}]}}]}]},
        {"code": "Ok", "routes": [{"legs": [{"annotation": {"maxspeed": [{"speed": [1]}]}}]}]},
        {"code": "Ok", "routes": [{"legs": [{"annotation": {"maxspeed": [{"speed": 50, "unit": "knots"}]}}]}]},
        {"code": "Ok", "routes": [{"legs": [{"annotation": {"maxspeed": 5}}]}]},
    ]
    for body in bad_bodies:
        with pytest.raises(DecodingError):
            decode_route_response(body, route_options())

    with pytest.raises(DecodingError):
        decode_match_response({"code": "Ok", "tracepoints": [{"location": "here"}]})

    print("✓ Malformed bodies rejected")


def test_round_trip():
    """Test that encoding and decoding preserve the envelope's shape."""
    print("\n=== Testing Envelope Round Trip ===")

    original = decode_route_response(route_response(), route_options())
    again = decode_route_response(json.dumps(original.to_json()), route_options())

    assert again.code == original.code
    assert again.message == original.message
    assert again.uuid == original.uuid
    assert len(again.routes) == len(original.routes)
    assert [len(r.legs) for r in again.routes] == [len(r.legs) for r in original.routes]
    assert again.waypoints == original.waypoints
    assert again.routes[0].legs[0].annotation == original.routes[0].legs[0].annotation

    matches = decode_match_response(match_response(unmatched_middle=True), match_options())
    matches_again = decode_match_response(matches.to_json(), match_options())
    assert matches_again.tracepoints == matches.tracepoints
    assert len(matches_again.matches) == 1

    print("✓ Envelope round-trips")


def run_all_tests():
    """Run all decoder tests."""
    print("\n" + "=" * 60)
    print("RESPONSE DECODER - TEST SUITE")
    print("=" * 60)

    test_decode_routes()
    test_leg_separators_assigned()
    test_non_separating_via()
    test_routes_share_waypoints()
    test_without_options()
    test_error_field()
    test_missing_routes()
    test_success_conditions()
    test_matching_service_routes()
    test_match_shape_in_route_mode()
    test_decode_matches()
    test_structural_failures()
    test_round_trip()

    print("\n" + "=" * 60)
    print("✅ ALL DECODER TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    run_all_tests()
