"""Unit tests for the seeking state value, its views and the agent summary."""

import pytest
from pydantic import ValidationError

from railseek.data.schemas.models import (
    CircleConstraint,
    EvaluationResult,
    GameOutcome,
    QuestionCategory,
    TrainType,
    TravelInfo,
)
from railseek.network.schedule import TrainSchedule
from railseek.seeking.coins import InsufficientCoinsError
from railseek.seeking.questions import get_question
from railseek.seeking.state import SeekingState, hider_view, seeker_view
from railseek.seeking.summary import available_question_lines, build_state_summary, compass_point


def _travel(arrival: float) -> TravelInfo:
    return TravelInfo(
        train_type=TrainType.LOCAL,
        departure_time=arrival - 40,
        arrival_time=arrival,
        wait_minutes=5,
        travel_minutes=35,
        total_minutes=40,
    )


class TestSeekingState:
    """Test state transitions."""

    def test_start(self):
        state = SeekingState.start("echo", "alpha", start_minutes=60, starting_coins=10)

        assert state.version == 0
        assert state.visited == frozenset({"alpha"})
        assert state.current_minutes == 60
        assert state.next_action_time == 60
        assert state.elapsed_minutes == 0
        assert state.coins.remaining == 10
        assert state.is_over is False

    def test_start_without_coins(self):
        assert SeekingState.start("echo", "alpha").coins is None

    def test_is_frozen(self):
        state = SeekingState.start("echo", "alpha")
        with pytest.raises(ValidationError):
            state.current_minutes = 5

    def test_travel(self):
        state = SeekingState.start("echo", "alpha")
        moved = state.with_travel("charlie", _travel(45))

        assert moved.version == 1
        assert moved.seeker_station_id == "charlie"
        assert moved.current_minutes == 45
        assert moved.visited == frozenset({"alpha", "charlie"})
        assert moved.travel_route[0].from_station_id == "alpha"
        assert moved.travel_route[0].train_type is TrainType.LOCAL
        assert state.seeker_station_id == "alpha"

    def test_question(self):
        state = SeekingState.start("echo", "alpha", starting_coins=10)
        question = get_question("radar-100")
        constraint = CircleConstraint(center_lat=50, center_lng=10, radius_km=100, inside=False)

        asked = state.with_question(question, EvaluationResult(answer="No", constraint=constraint))

        assert asked.version == 1
        assert asked.constraints == (constraint,)
        assert asked.coins.remaining == 9
        assert asked.asked_question_ids == frozenset({"radar-100"})
        assert asked.cooldown.last_asked[QuestionCategory.RADAR] == 0
        assert asked.question_log[0].answer == "No"

    def test_unknown_answer_adds_no_constraint(self):
        state = SeekingState.start("echo", "alpha")
        asked = state.with_question(get_question("prec-metro"), EvaluationResult(answer="Unknown"))
        assert asked.constraints == ()
        assert len(asked.question_log) == 1

    def test_question_overspend_raises(self):
        state = SeekingState.start("echo", "alpha", starting_coins=2)
        with pytest.raises(InsufficientCoinsError):
            state.with_question(get_question("prec-capital"), EvaluationResult(answer="No"))

    def test_action_time_and_idle_advance(self):
        state = SeekingState.start("echo", "alpha").advance_clock(30)

        assert state.with_next_action().action_counter == 1
        assert state.with_action_time(42).next_action_time == 42
        assert state.with_idle_advance(15).next_action_time == 45

    def test_outcome(self):
        state = SeekingState.start("echo", "alpha").with_outcome(GameOutcome.HIDER_WINS)
        assert state.is_over is True

    def test_clock_cannot_go_backwards(self):
        with pytest.raises(ValueError):
            SeekingState.start("echo", "alpha").advance_clock(-1)


class TestViews:
    """Test role-specific projections."""

    def test_seeker_view_hides_the_hider(self, tiny_graph):
        state = SeekingState.start("echo", "alpha", starting_coins=10)
        view = seeker_view(state, tiny_graph)

        assert "hider_station_id" not in view.model_dump()
        assert "echo" in view.candidate_station_ids
        assert "alpha" not in view.candidate_station_ids
        assert sorted(view.available_connections) == ["bravo", "charlie", "delta", "november"]

    def test_hider_view(self, tiny_graph):
        state = SeekingState.start("echo", "alpha")
        view = hider_view(state, tiny_graph)

        assert view.hider_station_name == "Echo"
        assert view.seeker_station_name == "Alphaville"


class TestStateSummary:
    """Test the agent-facing summary."""

    def test_contents(self, tiny_graph):
        state = SeekingState.start("echo", "alpha", starting_coins=10)
        summary = build_state_summary(state, tiny_graph, TrainSchedule(tiny_graph))

        assert summary.startswith("You are at Alphaville (Testland).")
        assert "Game time: 0 minutes." in summary
        assert "Coins: 10/10" in summary
        assert "Candidate stations (5):" in summary
        assert "Bravo (bravo, N):" in summary
        assert 'radar-100: "Is the hider within 100km of you?" (cost: 1 coins)' in summary
        assert summary.rstrip().endswith("the hider is not there.")

    def test_never_reveals_hider(self, tiny_graph):
        state = SeekingState.start("echo", "bravo")
        summary = build_state_summary(state, tiny_graph, TrainSchedule(tiny_graph))
        # echo is still a candidate, but nothing marks it as the hider
        assert "hider is at" not in summary.lower()
        assert "Answers so far" not in summary

    def test_visited_neighbors_are_tagged(self, tiny_graph):
        state = SeekingState.start("echo", "alpha").with_travel("bravo")
        summary = build_state_summary(state, tiny_graph, TrainSchedule(tiny_graph))

        assert "Alphaville (alpha, S):" in summary
        assert "[VISITED]" in summary
        assert "Visited stations (2): Alphaville, Bravo" in summary

    def test_answers_listed(self, tiny_graph):
        state = SeekingState.start("echo", "alpha").with_question(
            get_question("rel-north"), EvaluationResult(answer="No")
        )
        summary = build_state_summary(state, tiny_graph, TrainSchedule(tiny_graph))
        assert '"Is the hider north of you?" -> No' in summary

    def test_available_questions_filtered(self):
        state = SeekingState.start("echo", "alpha", starting_coins=2).with_question(
            get_question("radar-100"), EvaluationResult(answer="No")
        )
        lines = available_question_lines(state)

        # Radar on cooldown, one coin left: nothing affordable
        assert lines == []

    @pytest.mark.parametrize("bearing,expected", [
        (0, "N"), (44, "NE"), (90, "E"), (180, "S"), (270, "W"), (350, "N"),
    ])
    def test_compass_point(self, bearing, expected):
        assert compass_point(bearing) == expected
