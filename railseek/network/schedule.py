"""
Train Schedule - deterministic timetable over the station graph.

Each connection runs one train class chosen by its length. Departures
repeat at the class frequency, staggered per connection by a stable
offset so that not every line leaves on the hour.
"""

import zlib
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol

from railseek.data.schemas.models import TrainType, TravelInfo
from railseek.network.graph import StationGraph


@dataclass(frozen=True)
class TrainConfig:
    frequency_minutes: int
    speed_kmh: float


TRAIN_CONFIGS: Dict[TrainType, TrainConfig] = {
    TrainType.EXPRESS: TrainConfig(frequency_minutes=120, speed_kmh=250),
    TrainType.REGIONAL: TrainConfig(frequency_minutes=60, speed_kmh=150),
    TrainType.LOCAL: TrainConfig(frequency_minutes=30, speed_kmh=80),
}

EXPRESS_MIN_KM = 300
REGIONAL_MIN_KM = 100

# Tolerance for treating "now" as exactly on a departure
_ON_DEPARTURE_EPSILON = 0.001


class ScheduleService(Protocol):
    """Schedule collaborator consumed by the turn orchestrator."""

    def neighbors(self, station_id: str) -> List[str]:
        ...

    def travel_info(self, from_id: str, to_id: str, at_minutes: float) -> Optional[TravelInfo]:
        ...


def classify_connection(distance_km: float) -> TrainType:
    if distance_km > EXPRESS_MIN_KM:
        return TrainType.EXPRESS
    if distance_km >= REGIONAL_MIN_KM:
        return TrainType.REGIONAL
    return TrainType.LOCAL


def departure_offset(from_id: str, to_id: str) -> int:
    """Stable non-negative offset for a connection, independent of direction."""
    a, b = sorted((from_id, to_id))
    return zlib.crc32(f"{a}:{b}".encode("utf-8"))


def next_departure(now: float, frequency: int, offset: int) -> float:
    """First departure at or after ``now`` for a line leaving at ``offset`` mod ``frequency``."""
    first = offset % frequency
    if now <= first:
        return float(first)
    cycles = int((now - first) // frequency)
    current = first + cycles * frequency
    if abs(current - now) < _ON_DEPARTURE_EPSILON:
        return float(current)
    return float(current + frequency)


def travel_duration(distance_km: float, speed_kmh: float) -> float:
    return distance_km / speed_kmh * 60


class TrainSchedule:
    """
    Timetable over a ``StationGraph``.

    Implements the ``ScheduleService`` protocol.
    """

    def __init__(self, graph: StationGraph):
        self._graph = graph

    @property
    def graph(self) -> StationGraph:
        return self._graph

    def neighbors(self, station_id: str) -> List[str]:
        return self._graph.neighbors(station_id)

    def travel_info(self, from_id: str, to_id: str, at_minutes: float) -> Optional[TravelInfo]:
        """
        Next departure from ``from_id`` to ``to_id`` at or after ``at_minutes``.

        Returns:
            TravelInfo for the hop, or None if the stations are not adjacent.
        """
        distance = self._graph.connection_distance(from_id, to_id)
        if distance is None:
            return None

        train_type = classify_connection(distance)
        config = TRAIN_CONFIGS[train_type]
        departure = next_departure(
            at_minutes, config.frequency_minutes, departure_offset(from_id, to_id)
        )
        travel = travel_duration(distance, config.speed_kmh)
        wait = departure - at_minutes

        return TravelInfo(
            train_type=train_type,
            departure_time=departure,
            arrival_time=departure + travel,
            wait_minutes=wait,
            travel_minutes=round(travel, 1),
            total_minutes=round(wait + travel, 1),
        )
