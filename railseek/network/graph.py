"""
Station Graph - Geography service for railseek.

Holds the station set, the undirected adjacency relation and the
country-level facts. Station records handed out by the graph are always
complete: country facts are copied onto each station and the connection
count is derived from the adjacency at load time.
"""

import json
from functools import lru_cache
from importlib import resources
from typing import Dict, Iterable, List, Optional, Tuple

from railseek.data.schemas.models import (
    Connection,
    CountryInfo,
    Station,
    StationFact,
    ThermometerFeature,
)
from railseek.seeking.geo import haversine_distance
from railseek.utils.logger import get_logger

logger = get_logger(__name__)

# Rail lines are longer than the straight line between stations
ROUTE_FACTOR = 1.2

_FEATURE_FACTS: Dict[ThermometerFeature, StationFact] = {
    ThermometerFeature.COAST: StationFact.COASTAL,
    ThermometerFeature.CAPITAL: StationFact.CAPITAL,
    ThermometerFeature.MOUNTAINS: StationFact.MOUNTAINOUS,
}


class UnknownStationError(KeyError):
    """Raised when a station id is not part of the graph."""

    def __init__(self, station_id: str):
        super().__init__(station_id)
        self.station_id = station_id

    def __str__(self) -> str:
        return f"Unknown station: {self.station_id}"


class StationGraph:
    """
    Immutable station network.

    Build one with ``StationGraph.load_bundled()`` for the shipped European
    network, or pass station/connection lists directly for tests and
    alternative maps.
    """

    def __init__(
        self,
        stations: Iterable[Station],
        connections: Iterable[Connection],
        countries: Optional[Dict[str, CountryInfo]] = None,
    ):
        countries = countries or {}
        raw = {station.id: station for station in stations}

        self._adjacency: Dict[str, List[str]] = {station_id: [] for station_id in raw}
        self._distances: Dict[Tuple[str, str], float] = {}

        for connection in connections:
            a, b = connection.from_id, connection.to_id
            if a not in raw:
                raise UnknownStationError(a)
            if b not in raw:
                raise UnknownStationError(b)
            if a == b or b in self._adjacency[a]:
                logger.warning(f"Ignoring duplicate or self connection {a} -> {b}")
                continue

            distance = connection.distance_km
            if distance is None:
                distance = ROUTE_FACTOR * haversine_distance(
                    raw[a].lat, raw[a].lng, raw[b].lat, raw[b].lng
                )

            self._adjacency[a].append(b)
            self._adjacency[b].append(a)
            self._distances[_edge_key(a, b)] = distance

        self._stations: Dict[str, Station] = {
            station_id: self._complete(station, countries.get(station.country))
            for station_id, station in raw.items()
        }

        # Feature reference sets and nearest-distance lookups are fixed for
        # the lifetime of the graph.
        self._feature_cache: Dict[ThermometerFeature, Tuple[Station, ...]] = {}
        self.nearest_feature_distance_km = lru_cache(maxsize=4096)(self._nearest_feature_distance)

        logger.debug(
            f"StationGraph built with {len(self._stations)} stations "
            f"and {len(self._distances)} connections"
        )

    def _complete(self, station: Station, country: Optional[CountryInfo]) -> Station:
        update = {"connections": len(self._adjacency[station.id])}
        if country is not None:
            update.update(
                landlocked_country=country.landlocked,
                large_country=country.area_over_200k,
                beer_or_wine=country.beer_or_wine,
                has_f1_circuit=country.has_f1_circuit,
            )
        return station.model_copy(update=update)

    @classmethod
    def load_bundled(cls) -> "StationGraph":
        """Load the European network shipped in ``railseek.data.network``."""
        package = resources.files("railseek.data.network")
        stations = json.loads(package.joinpath("stations.json").read_text(encoding="utf-8"))
        connections = json.loads(package.joinpath("connections.json").read_text(encoding="utf-8"))
        countries = json.loads(package.joinpath("countries.json").read_text(encoding="utf-8"))

        graph = cls(
            stations=[Station.model_validate(record) for record in stations],
            connections=[Connection.model_validate(record) for record in connections],
            countries={name: CountryInfo.model_validate(info) for name, info in countries.items()},
        )
        logger.info(f"Loaded bundled network: {len(graph)} stations")
        return graph

    def __len__(self) -> int:
        return len(self._stations)

    def __contains__(self, station_id: object) -> bool:
        return station_id in self._stations

    def get_station(self, station_id: str) -> Station:
        try:
            return self._stations[station_id]
        except KeyError:
            raise UnknownStationError(station_id) from None

    def has_station(self, station_id: str) -> bool:
        return station_id in self._stations

    def stations(self) -> List[Station]:
        return list(self._stations.values())

    def station_ids(self) -> List[str]:
        return list(self._stations)

    def neighbors(self, station_id: str) -> List[str]:
        """Station ids directly connected to ``station_id``."""
        if station_id not in self._adjacency:
            raise UnknownStationError(station_id)
        return list(self._adjacency[station_id])

    def is_adjacent(self, from_id: str, to_id: str) -> bool:
        return to_id in self._adjacency.get(from_id, ())

    def connection_distance(self, from_id: str, to_id: str) -> Optional[float]:
        """Rail distance in km between two adjacent stations, or None."""
        return self._distances.get(_edge_key(from_id, to_id))

    def feature_stations(self, feature: ThermometerFeature) -> Tuple[Station, ...]:
        """Reference set of stations carrying a thermometer feature."""
        cached = self._feature_cache.get(feature)
        if cached is None:
            fact = _FEATURE_FACTS[feature]
            cached = tuple(s for s in self._stations.values() if s.fact(fact) is True)
            self._feature_cache[feature] = cached
        return cached

    def _nearest_feature_distance(
        self, lat: float, lng: float, feature: ThermometerFeature
    ) -> float:
        references = self.feature_stations(feature)
        if not references:
            return float("inf")
        return min(haversine_distance(lat, lng, s.lat, s.lng) for s in references)


def _edge_key(a: str, b: str) -> Tuple[str, str]:
    return (a, b) if a <= b else (b, a)
