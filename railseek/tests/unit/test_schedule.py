"""Unit tests for the train timetable."""

import pytest

from railseek.data.schemas.models import TrainType
from railseek.network.schedule import (
    TRAIN_CONFIGS,
    TrainSchedule,
    classify_connection,
    departure_offset,
    next_departure,
)


class TestClassification:
    """Test train class selection by rail distance."""

    @pytest.mark.parametrize("distance,expected", [
        (350, TrainType.EXPRESS),
        (300.1, TrainType.EXPRESS),
        (300, TrainType.REGIONAL),
        (100, TrainType.REGIONAL),
        (99.9, TrainType.LOCAL),
        (10, TrainType.LOCAL),
    ])
    def test_thresholds(self, distance, expected):
        assert classify_connection(distance) is expected

    def test_configs(self):
        assert TRAIN_CONFIGS[TrainType.EXPRESS].frequency_minutes == 120
        assert TRAIN_CONFIGS[TrainType.REGIONAL].speed_kmh == 150
        assert TRAIN_CONFIGS[TrainType.LOCAL].frequency_minutes == 30


class TestDepartures:
    """Test departure arithmetic."""

    def test_offset_ignores_direction(self):
        assert departure_offset("paris", "london") == departure_offset("london", "paris")
        assert departure_offset("paris", "london") >= 0

    @pytest.mark.parametrize("now,frequency,offset,expected", [
        (0, 60, 15, 15),
        (15, 60, 15, 15),
        (16, 60, 15, 75),
        (200, 60, 75, 255),
        (135, 60, 15, 135),
    ])
    def test_next_departure(self, now, frequency, offset, expected):
        assert next_departure(now, frequency, offset) == expected


class TestTrainSchedule:
    """Test travel info over the bundled network."""

    def test_long_connection_is_express(self, bundled_schedule):
        info = bundled_schedule.travel_info("paris", "london", 0)
        assert info.train_type is TrainType.EXPRESS

    def test_short_connection_is_local(self, bundled_schedule):
        info = bundled_schedule.travel_info("brussels-midi", "antwerp-centraal", 0)
        assert info.train_type is TrainType.LOCAL

    def test_times_are_consistent(self, bundled_schedule, bundled_graph):
        info = bundled_schedule.travel_info("brussels-midi", "antwerp-centraal", 42)
        distance = bundled_graph.connection_distance("brussels-midi", "antwerp-centraal")

        assert info.departure_time >= 42
        assert info.wait_minutes == pytest.approx(info.departure_time - 42)
        assert info.wait_minutes < TRAIN_CONFIGS[TrainType.LOCAL].frequency_minutes
        assert info.arrival_time == pytest.approx(info.departure_time + distance / 80 * 60)
        assert info.travel_minutes == round(distance / 80 * 60, 1)

    def test_is_deterministic(self, bundled_schedule):
        assert bundled_schedule.travel_info("paris", "lille-europe", 500) == (
            bundled_schedule.travel_info("paris", "lille-europe", 500)
        )

    def test_not_adjacent(self, bundled_schedule):
        assert bundled_schedule.travel_info("paris", "rome-termini", 0) is None

    def test_neighbors_delegate_to_graph(self, bundled_schedule, bundled_graph):
        assert bundled_schedule.neighbors("paris") == bundled_graph.neighbors("paris")
        assert bundled_schedule.graph is bundled_graph
