"""
Network module - Station geography and train timetable for railseek.

This module contains:
- graph: StationGraph, the station set and adjacency relation
- schedule: TrainSchedule, deterministic departures and travel times
"""

from railseek.network.graph import (
    StationGraph,
    UnknownStationError,
    ROUTE_FACTOR,
)
from railseek.network.schedule import (
    TrainSchedule,
    ScheduleService,
    TRAIN_CONFIGS,
    classify_connection,
    departure_offset,
    next_departure,
)

__all__ = [
    # Graph
    "StationGraph",
    "UnknownStationError",
    "ROUTE_FACTOR",
    # Schedule
    "TrainSchedule",
    "ScheduleService",
    "TRAIN_CONFIGS",
    "classify_connection",
    "departure_offset",
    "next_departure",
]
