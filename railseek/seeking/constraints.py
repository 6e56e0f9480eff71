"""
Constraint Model - narrowing predicates and candidate resolution.

A station is a candidate iff it satisfies every accumulated constraint and
has not been visited. Each constraint variant has one satisfaction rule;
unknown station facts fail closed.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, AbstractSet, Iterable, List, Sequence

from railseek.data.schemas.models import (
    BeverageConstraint,
    CircleConstraint,
    Constraint,
    FactConstraint,
    HalfPlaneAxis,
    HalfPlaneConstraint,
    HalfPlaneDirection,
    SameCountryConstraint,
    Station,
    ThermometerConstraint,
    ThermometerPolarity,
)
from railseek.seeking.geo import haversine_distance

if TYPE_CHECKING:
    from railseek.network.graph import StationGraph


def constraint_satisfied(station: Station, constraint: Constraint, graph: "StationGraph") -> bool:
    """
    Check a single constraint against a station.

    ``graph`` is only consulted for thermometer constraints, which need the
    station's distance to the nearest feature station.

    Raises:
        TypeError: If ``constraint`` is not a known constraint variant.
    """
    if isinstance(constraint, CircleConstraint):
        distance = haversine_distance(
            station.lat, station.lng, constraint.center_lat, constraint.center_lng
        )
        if constraint.inside:
            return distance <= constraint.radius_km
        return distance > constraint.radius_km

    if isinstance(constraint, HalfPlaneConstraint):
        coordinate = station.lat if constraint.axis is HalfPlaneAxis.LATITUDE else station.lng
        if constraint.direction in (HalfPlaneDirection.ABOVE, HalfPlaneDirection.EAST):
            return coordinate > constraint.value
        return coordinate < constraint.value

    if isinstance(constraint, FactConstraint):
        actual = station.fact(constraint.fact)
        if actual is None:
            return False
        return actual == constraint.expected

    if isinstance(constraint, SameCountryConstraint):
        return (station.country == constraint.country) == constraint.same

    if isinstance(constraint, BeverageConstraint):
        return station.beer_or_wine is not None and station.beer_or_wine == constraint.beverage

    if isinstance(constraint, ThermometerConstraint):
        distance = graph.nearest_feature_distance_km(station.lat, station.lng, constraint.feature)
        if constraint.polarity is ThermometerPolarity.NEARER:
            return distance < constraint.threshold_km
        return distance >= constraint.threshold_km

    raise TypeError(f"Unsupported constraint type: {type(constraint).__name__}")


def station_matches(
    station: Station, constraints: Iterable[Constraint], graph: "StationGraph"
) -> bool:
    """True when the station satisfies every constraint."""
    return all(constraint_satisfied(station, constraint, graph) for constraint in constraints)


def resolve_candidates(
    graph: "StationGraph",
    constraints: Sequence[Constraint],
    visited: AbstractSet[str] = frozenset(),
) -> List[Station]:
    """Stations matching every constraint, minus the visited ones."""
    return [
        station
        for station in graph.stations()
        if station.id not in visited and station_matches(station, constraints, graph)
    ]


@dataclass(frozen=True)
class CandidateBreakdown:
    """Candidate count split by the reason stations were ruled out."""
    candidates: List[Station]
    eliminated_by_constraints: int
    eliminated_by_visit: int


class ConstraintResolver:
    """
    Candidate resolution bound to one station graph.

    Public helper for callers that hold a single graph, such as display
    layers and analysis scripts. ``breakdown`` also reports why stations
    were ruled out. The engine itself calls ``resolve_candidates``.
    """

    def __init__(self, graph: "StationGraph"):
        self._graph = graph

    def matches(self, station: Station, constraints: Iterable[Constraint]) -> bool:
        return station_matches(station, constraints, self._graph)

    def candidates(
        self, constraints: Sequence[Constraint], visited: AbstractSet[str] = frozenset()
    ) -> List[Station]:
        return resolve_candidates(self._graph, constraints, visited)

    def breakdown(
        self, constraints: Sequence[Constraint], visited: AbstractSet[str] = frozenset()
    ) -> CandidateBreakdown:
        candidates: List[Station] = []
        by_constraints = 0
        by_visit = 0
        for station in self._graph.stations():
            if not station_matches(station, constraints, self._graph):
                by_constraints += 1
            elif station.id in visited:
                by_visit += 1
            else:
                candidates.append(station)
        return CandidateBreakdown(candidates, by_constraints, by_visit)
