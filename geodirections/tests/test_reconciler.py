"""
Test waypoint reconciliation.
"""

from ..models.requests import RouteOptions, Waypoint as RequestWaypoint
from ..models.routing import Tracepoint, Waypoint
from ..processing.reconciler import reconcile_waypoints
from .sample_responses import ORIGIN, VIA, DESTINATION, route_options


def decoded_waypoints(names=("Fulton Street", "Market Street", "")) -> list[Waypoint]:
    return [
        Waypoint(location=location, name=name)
        for location, name in zip([ORIGIN, VIA, DESTINATION], names)
    ]


def test_all_matched():
    """Test that N matched waypoints give N canonical waypoints."""
    print("\n=== Testing Fully Matched Waypoints ===")

    options = route_options()
    waypoints = reconcile_waypoints(decoded_waypoints(), options)

    assert len(waypoints) == 3
    assert [w.location for w in waypoints] == [ORIGIN, VIA, DESTINATION]
    assert [w.coordinate_accuracy for w in waypoints] == [10.0, 20.0, 30.0]
    assert all(w.separates_legs for w in waypoints)

    print("✓ Canonical waypoints built")


def test_endpoints_always_separate_legs():
    """Test that first and last separate legs whatever the request says."""
    print("\n=== Testing Forced Leg Boundaries ===")

    for n in range(2, 6):
        options = RouteOptions(
            waypoints=[
                RequestWaypoint(lon=-122.4 + i * 0.01, lat=37.7, separates_legs=False)
                for i in range(n)
            ]
        )
        decoded = [Waypoint(location=(w.lon, w.lat)) for w in options.waypoints]
        waypoints = reconcile_waypoints(decoded, options)

        assert len(waypoints) == n
        assert waypoints[0].separates_legs
        assert waypoints[-1].separates_legs
        assert not any(w.separates_legs for w in waypoints[1:-1])

    print("✓ First and last waypoints separate legs")


def test_via_flag_copied():
    """Test that intermediate leg flags come from the request."""
    print("\n=== Testing Via Waypoint Flags ===")

    waypoints = reconcile_waypoints(decoded_waypoints(), route_options(via_separates_legs=False))
    assert [w.separates_legs for w in waypoints] == [True, False, True]

    print("✓ Via flags copied")


def test_name_resolution():
    """Test that non-empty request names override decoded names."""
    print("\n=== Testing Name Resolution ===")

    options = route_options(names=("Home", "", None))
    waypoints = reconcile_waypoints(decoded_waypoints(), options)

    assert waypoints[0].name == "Home"
    # Empty override falls back to the decoded name
    assert waypoints[1].name == "Market Street"
    # No override and an empty decoded name stays empty
    assert waypoints[2].name == ""

    print("✓ Names resolved")


def test_unmatched_tracepoints_dropped():
    """Test that None entries are dropped without shifting alignment."""
    print("\n=== Testing Unmatched Tracepoints ===")

    options = route_options(names=("A", "B", "C"))
    decoded = [
        Tracepoint(location=ORIGIN, matchings_index=0, waypoint_index=0),
        None,
        Tracepoint(location=DESTINATION, matchings_index=0, waypoint_index=1),
    ]
    waypoints = reconcile_waypoints(decoded, options)

    assert len(waypoints) == 2
    assert [w.name for w in waypoints] == ["A", "C"]
    assert [w.coordinate_accuracy for w in waypoints] == [10.0, 30.0]
    assert all(w.separates_legs for w in waypoints)
    assert isinstance(waypoints[0], Tracepoint)
    assert waypoints[1].waypoint_index == 1

    print("✓ Unmatched tracepoints dropped")


def test_length_mismatch_truncates():
    """Test that the shorter list wins when lengths differ."""
    print("\n=== Testing Length Mismatch ===")

    options = route_options()
    waypoints = reconcile_waypoints(decoded_waypoints()[:2], options)

    assert len(waypoints) == 2
    assert waypoints[-1].location == VIA
    assert waypoints[-1].separates_legs

    print("✓ Mismatched lengths truncated")


def test_without_options():
    """Test that missing options leave decoded waypoints untouched."""
    print("\n=== Testing Missing Options ===")

    decoded = [Waypoint(location=ORIGIN, name="x", separates_legs=False), None,
               Waypoint(location=DESTINATION, separates_legs=False)]
    waypoints = reconcile_waypoints(decoded, None)

    assert len(waypoints) == 2
    assert waypoints[0].name == "x"
    assert waypoints[0].coordinate_accuracy is None
    assert not waypoints[0].separates_legs
    assert not waypoints[1].separates_legs

    print("✓ Decoded waypoints kept as-is")


def test_decoded_inputs_unchanged():
    """Test that reconciliation doesn't modify its inputs."""
    print("\n=== Testing Input Immutability ===")

    decoded = decoded_waypoints()
    reconcile_waypoints(decoded, route_options(names=("Home", None, None)))
    assert decoded[0].name == "Fulton Street"
    assert decoded[0].coordinate_accuracy is None

    print("✓ Inputs unchanged")


def run_all_tests():
    """Run all reconciler tests."""
    print("\n" + "=" * 60)
    print("WAYPOINT RECONCILER - TEST SUITE")
    print("=" * 60)

    test_all_matched()
    test_endpoints_always_separate_legs()
    test_via_flag_copied()
    test_name_resolution()
    test_unmatched_tracepoints_dropped()
    test_length_mismatch_truncates()
    test_without_options()
    test_decoded_inputs_unchanged()

    print("\n" + "=" * 60)
    print("✅ ALL RECONCILER TESTS PASSED!")
    print("=" * 60)


if __name__ == "__main__":
    run_all_tests()
