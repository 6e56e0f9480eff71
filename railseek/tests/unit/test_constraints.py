"""Unit tests for constraint satisfaction and candidate resolution.

These tests focus on the per-variant satisfaction rules and on how
accumulated constraints narrow the candidate set.
"""

import pytest

from railseek.data.schemas.models import (
    Beverage,
    BeverageConstraint,
    CircleConstraint,
    FactConstraint,
    HalfPlaneAxis,
    HalfPlaneConstraint,
    HalfPlaneDirection,
    SameCountryConstraint,
    Station,
    StationFact,
    ThermometerConstraint,
    ThermometerFeature,
    ThermometerPolarity,
)
from railseek.seeking.constraints import (
    ConstraintResolver,
    constraint_satisfied,
    resolve_candidates,
    station_matches,
)
from railseek.seeking.geo import haversine_distance


class TestCircleConstraint:
    """Test circle satisfaction."""

    def test_boundary_distance_counts_as_inside(self, tiny_graph):
        alpha = tiny_graph.get_station("alpha")
        bravo = tiny_graph.get_station("bravo")
        radius = haversine_distance(bravo.lat, bravo.lng, alpha.lat, alpha.lng)

        inside = CircleConstraint(center_lat=alpha.lat, center_lng=alpha.lng, radius_km=radius, inside=True)
        outside = CircleConstraint(center_lat=alpha.lat, center_lng=alpha.lng, radius_km=radius, inside=False)

        assert constraint_satisfied(bravo, inside, tiny_graph) is True
        assert constraint_satisfied(bravo, outside, tiny_graph) is False

    def test_inside_and_outside_partition_stations(self, tiny_graph):
        inside = CircleConstraint(center_lat=50.0, center_lng=10.0, radius_km=100, inside=True)
        outside = inside.model_copy(update={"inside": False})

        for station in tiny_graph.stations():
            assert constraint_satisfied(station, inside, tiny_graph) != constraint_satisfied(
                station, outside, tiny_graph
            )

    def test_label(self):
        assert CircleConstraint(center_lat=0, center_lng=0, radius_km=100, inside=True).label == "Within 100km"
        assert CircleConstraint(center_lat=0, center_lng=0, radius_km=500, inside=False).label == "Beyond 500km"


class TestHalfPlaneConstraint:
    """Test half-plane satisfaction."""

    def test_threshold_is_strict(self, tiny_graph):
        alpha = tiny_graph.get_station("alpha")
        above = HalfPlaneConstraint(axis=HalfPlaneAxis.LATITUDE, value=alpha.lat, direction=HalfPlaneDirection.ABOVE)
        below = HalfPlaneConstraint(axis=HalfPlaneAxis.LATITUDE, value=alpha.lat, direction=HalfPlaneDirection.BELOW)

        assert constraint_satisfied(alpha, above, tiny_graph) is False
        assert constraint_satisfied(alpha, below, tiny_graph) is False

    def test_longitude_directions(self, tiny_graph):
        east = HalfPlaneConstraint(axis=HalfPlaneAxis.LONGITUDE, value=10.0, direction=HalfPlaneDirection.EAST)
        west = HalfPlaneConstraint(axis=HalfPlaneAxis.LONGITUDE, value=10.0, direction=HalfPlaneDirection.WEST)

        assert constraint_satisfied(tiny_graph.get_station("echo"), east, tiny_graph) is True
        assert constraint_satisfied(tiny_graph.get_station("delta"), west, tiny_graph) is True
        assert constraint_satisfied(tiny_graph.get_station("delta"), east, tiny_graph) is False

    def test_direction_must_match_axis(self):
        with pytest.raises(ValueError):
            HalfPlaneConstraint(axis=HalfPlaneAxis.LATITUDE, value=1.0, direction=HalfPlaneDirection.EAST)


class TestFactConstraints:
    """Test fact, country and beverage constraints."""

    def test_capital_no_excludes_capitals(self, bundled_graph):
        capital_no = FactConstraint(fact=StationFact.CAPITAL, expected=False)
        candidates = resolve_candidates(bundled_graph, [capital_no])

        assert candidates
        assert all(station.is_capital is False for station in candidates)
        non_capitals = [s for s in bundled_graph.stations() if not s.is_capital]
        assert len(candidates) == len(non_capitals)

    def test_stacking_strictly_narrows(self, bundled_graph):
        capital_no = FactConstraint(fact=StationFact.CAPITAL, expected=False)
        mountain_no = FactConstraint(fact=StationFact.MOUNTAINOUS, expected=False)

        one = resolve_candidates(bundled_graph, [capital_no])
        two = resolve_candidates(bundled_graph, [capital_no, mountain_no])

        assert len(two) < len(one)
        assert {s.id for s in two} <= {s.id for s in one}

    def test_unknown_fact_fails_closed(self, tiny_graph):
        partial = Station(id="x", name="Xanadu", country="Testland", lat=50.0, lng=10.0)

        for expected in (True, False):
            constraint = FactConstraint(fact=StationFact.CAPITAL, expected=expected)
            assert constraint_satisfied(partial, constraint, tiny_graph) is False

    def test_hub_and_name_range(self, tiny_graph):
        hub_yes = FactConstraint(fact=StationFact.HUB, expected=True)
        name_am_no = FactConstraint(fact=StationFact.NAME_A_TO_M, expected=False)

        assert [s.id for s in resolve_candidates(tiny_graph, [hub_yes])] == ["alpha"]
        assert [s.id for s in resolve_candidates(tiny_graph, [name_am_no])] == ["november"]

    def test_country_fact_copied_from_country_table(self, tiny_graph):
        landlocked = FactConstraint(fact=StationFact.LANDLOCKED_COUNTRY, expected=True)
        ids = {s.id for s in resolve_candidates(tiny_graph, [landlocked])}
        assert ids == {"charlie", "delta", "echo"}

    def test_same_country(self, tiny_graph):
        in_testland = SameCountryConstraint(country="Testland", same=True)
        not_testland = SameCountryConstraint(country="Testland", same=False)

        assert {s.id for s in resolve_candidates(tiny_graph, [in_testland])} == {"alpha", "bravo", "november"}
        assert {s.id for s in resolve_candidates(tiny_graph, [not_testland])} == {"charlie", "delta", "echo"}
        assert not_testland.label == "Not in Testland"

    def test_beverage(self, tiny_graph):
        wine = BeverageConstraint(beverage=Beverage.WINE)
        assert {s.id for s in resolve_candidates(tiny_graph, [wine])} == {"charlie", "delta", "echo"}
        assert wine.value == "Wine"


class TestThermometerConstraint:
    """Test thermometer satisfaction against the stored seeker distance."""

    def test_nearer_is_strict_and_further_inclusive(self, tiny_graph):
        bravo = tiny_graph.get_station("bravo")
        threshold = tiny_graph.nearest_feature_distance_km(bravo.lat, bravo.lng, ThermometerFeature.COAST)

        nearer = ThermometerConstraint(
            feature=ThermometerFeature.COAST, polarity=ThermometerPolarity.NEARER, threshold_km=threshold
        )
        further = nearer.model_copy(update={"polarity": ThermometerPolarity.FURTHER})

        assert constraint_satisfied(bravo, nearer, tiny_graph) is False
        assert constraint_satisfied(bravo, further, tiny_graph) is True
        assert constraint_satisfied(tiny_graph.get_station("alpha"), nearer, tiny_graph) is True

    def test_label_and_value(self):
        constraint = ThermometerConstraint(
            feature=ThermometerFeature.CAPITAL, polarity=ThermometerPolarity.FURTHER, threshold_km=12.345
        )
        assert constraint.label == "Hider further from capital"
        assert constraint.value == "12.3"


class TestResolution:
    """Test candidate resolution."""

    def test_no_constraints_keeps_everything_but_visited(self, tiny_graph):
        candidates = resolve_candidates(tiny_graph, [], visited={"alpha", "echo"})
        assert {s.id for s in candidates} == {"bravo", "charlie", "delta", "november"}

    def test_monotone_narrowing(self, bundled_graph):
        constraints = [
            CircleConstraint(center_lat=48.8809, center_lng=2.3553, radius_km=1000, inside=True),
            HalfPlaneConstraint(axis=HalfPlaneAxis.LONGITUDE, value=2.3553, direction=HalfPlaneDirection.EAST),
            FactConstraint(fact=StationFact.HAS_METRO, expected=True),
            BeverageConstraint(beverage=Beverage.BEER),
        ]
        previous = len(bundled_graph)
        for i in range(1, len(constraints) + 1):
            count = len(resolve_candidates(bundled_graph, constraints[:i]))
            assert 0 <= count <= previous
            previous = count

    def test_station_matches_requires_every_constraint(self, tiny_graph):
        alpha = tiny_graph.get_station("alpha")
        ok = FactConstraint(fact=StationFact.COASTAL, expected=True)
        bad = FactConstraint(fact=StationFact.MOUNTAINOUS, expected=True)

        assert station_matches(alpha, [ok], tiny_graph) is True
        assert station_matches(alpha, [ok, bad], tiny_graph) is False

    def test_unsupported_constraint_raises(self, tiny_graph):
        with pytest.raises(TypeError):
            constraint_satisfied(tiny_graph.get_station("alpha"), object(), tiny_graph)

    def test_resolver_breakdown(self, tiny_graph):
        resolver = ConstraintResolver(tiny_graph)
        in_testland = SameCountryConstraint(country="Testland", same=True)

        breakdown = resolver.breakdown([in_testland], visited={"alpha"})

        assert {s.id for s in breakdown.candidates} == {"bravo", "november"}
        assert breakdown.eliminated_by_constraints == 3
        assert breakdown.eliminated_by_visit == 1
        assert resolver.matches(tiny_graph.get_station("bravo"), [in_testland]) is True

    def test_resolver_candidates_match_module_function(self, tiny_graph):
        resolver = ConstraintResolver(tiny_graph)
        not_testland = SameCountryConstraint(country="Testland", same=False)

        expected = resolve_candidates(tiny_graph, [not_testland], visited={"echo"})

        assert resolver.candidates([not_testland], visited={"echo"}) == expected
        assert resolver.breakdown([not_testland], visited={"echo"}).candidates == expected
