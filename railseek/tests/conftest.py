"""Shared fixtures and configuration for railseek tests."""

from collections import deque
from typing import Any, Deque, Dict, List, Mapping, Optional, Sequence, Union

import pytest

from railseek.agents.llm_controller import AgentTurn, SeekerAgent, ToolCall, STOP_TOOL_USE
from railseek.config import GameConfig
from railseek.data.schemas.models import (
    Beverage,
    Connection,
    CountryInfo,
    SeekerRole,
    Station,
)
from railseek.network.graph import StationGraph
from railseek.network.schedule import TrainSchedule


class ScriptedAgent(SeekerAgent):
    """
    Seeker agent replaying a fixed script.

    Each ``propose`` call consumes the next entry: an ``AgentTurn`` is
    returned, an exception is raised. An exhausted script returns a turn
    without tool calls.
    """

    def __init__(self, role: SeekerRole, script: Sequence[Union[AgentTurn, Exception]] = ()):
        super().__init__(role)
        self._script: Deque[Union[AgentTurn, Exception]] = deque(script)
        self.calls: List[Dict[str, Any]] = []

    async def propose(
        self,
        system_prompt: str,
        state_summary: str,
        tools: Sequence[Mapping[str, Any]],
        extra_context: Optional[str] = None,
    ) -> AgentTurn:
        self.calls.append({
            "system_prompt": system_prompt,
            "state_summary": state_summary,
            "tools": [tool["function"]["name"] for tool in tools],
            "extra_context": extra_context,
        })
        if not self._script:
            return AgentTurn()
        entry = self._script.popleft()
        if isinstance(entry, Exception):
            raise entry
        return entry


def propose_turn(action_type: str, target: str, reasoning: str = "because") -> AgentTurn:
    """Consensus-mode turn with a single propose_action call."""
    return AgentTurn(
        tool_calls=[ToolCall(
            name="propose_action",
            input={"action_type": action_type, "target": target, "reasoning": reasoning},
        )],
        stop_reason=STOP_TOOL_USE,
    )


def action_turn(*actions: tuple, stop_reason: str = "end_turn") -> AgentTurn:
    """Single-mode turn; each action is ("travel_to", station_id) or ("ask_question", question_id)."""
    calls = []
    for name, target in actions:
        key = "station_id" if name == "travel_to" else "question_id"
        calls.append(ToolCall(name=name, input={key: target}))
    return AgentTurn(tool_calls=calls, stop_reason=stop_reason)


@pytest.fixture(scope="session")
def bundled_graph() -> StationGraph:
    """The shipped European network."""
    return StationGraph.load_bundled()


@pytest.fixture(scope="session")
def bundled_schedule(bundled_graph: StationGraph) -> TrainSchedule:
    return TrainSchedule(bundled_graph)


@pytest.fixture
def tiny_graph() -> StationGraph:
    """
    Six-station synthetic network.

    alpha is the only coastal station and a hub (4 connections); bravo is
    the only mountainous one; november's name falls outside A-M.
    """
    def station(station_id, name, country, lat, lng, **facts):
        defaults = dict(
            is_coastal=False,
            is_mountainous=False,
            is_capital=False,
            has_hosted_olympics=False,
            is_ancient=False,
            has_metro=False,
        )
        defaults.update(facts)
        return Station(id=station_id, name=name, country=country, lat=lat, lng=lng, **defaults)

    stations = [
        station("alpha", "Alphaville", "Testland", 50.0, 10.0,
                is_coastal=True, is_capital=True, has_metro=True),
        station("bravo", "Bravo", "Testland", 50.5, 10.0, is_mountainous=True),
        station("charlie", "Charlie", "Otherland", 49.5, 11.0, is_ancient=True),
        station("delta", "Delta Junction", "Otherland", 51.0, 9.0, has_hosted_olympics=True),
        station("echo", "Echo", "Otherland", 48.0, 12.0),
        station("november", "November Halt", "Testland", 52.0, 10.5),
    ]
    connections = [
        Connection(**{"from": "alpha", "to": "bravo"}),
        Connection(**{"from": "alpha", "to": "charlie"}),
        Connection(**{"from": "alpha", "to": "delta"}),
        Connection(**{"from": "alpha", "to": "november"}),
        Connection(**{"from": "charlie", "to": "echo"}),
        Connection(**{"from": "bravo", "to": "november", "distance": 180}),
    ]
    countries = {
        "Testland": CountryInfo(
            landlocked=False, area_over_200k=True, beer_or_wine=Beverage.BEER, has_f1_circuit=True
        ),
        "Otherland": CountryInfo(
            landlocked=True, area_over_200k=False, beer_or_wine=Beverage.WINE, has_f1_circuit=False
        ),
    }
    return StationGraph(stations, connections, countries)


@pytest.fixture
def game_config() -> GameConfig:
    """Seeking rules with the standard values, independent of the environment."""
    return GameConfig(
        seeker_mode="single",
        starting_coins=10,
        coins_enabled=True,
        max_actions_per_turn=4,
        time_limit_minutes=3000,
        win_radius_km=0.8,
        idle_advance_minutes=15,
        max_turns=20,
    )


@pytest.fixture
def scripted_agent():
    """Factory for scripted seeker agents."""
    def _make(role: SeekerRole = SeekerRole.SEEKER_A, script=()):
        return ScriptedAgent(role, script)
    return _make


@pytest.fixture(name="propose_turn")
def propose_turn_fixture():
    return propose_turn


@pytest.fixture(name="action_turn")
def action_turn_fixture():
    return action_turn
