"""
Seeking State - the versioned game-state value of one seeking phase.

The orchestrator never mutates a state: every transition returns a new
``SeekingState`` with ``version`` bumped by one. Consumers that must not
learn the hider's location receive a ``SeekerView`` instead.
"""

from typing import TYPE_CHECKING, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from railseek.data.schemas.models import (
    CoinBudget,
    Constraint,
    CooldownTracker,
    EvaluationResult,
    GameOutcome,
    Question,
    QuestionRecord,
    TravelInfo,
    TravelLeg,
)
from railseek.seeking.coins import create_coin_budget, spend_coins
from railseek.seeking.cooldown import record_question
from railseek.seeking.constraints import resolve_candidates

if TYPE_CHECKING:
    from railseek.network.graph import StationGraph


class SeekingState(BaseModel):
    """Immutable snapshot of a seeking phase."""
    model_config = ConfigDict(frozen=True)

    version: int = Field(0, ge=0)
    hider_station_id: str
    seeker_station_id: str
    phase_start_minutes: float = 0.0
    current_minutes: float = 0.0
    constraints: Tuple[Constraint, ...] = ()
    cooldown: CooldownTracker = Field(default_factory=CooldownTracker)
    coins: Optional[CoinBudget] = None
    asked_question_ids: FrozenSet[str] = frozenset()
    question_log: Tuple[QuestionRecord, ...] = ()
    visited: FrozenSet[str] = frozenset()
    travel_route: Tuple[TravelLeg, ...] = ()
    action_counter: int = Field(0, ge=0, description="Monotonic slot index used for tie-break parity")
    next_action_time: float = 0.0
    outcome: Optional[GameOutcome] = None

    @classmethod
    def start(
        cls,
        hider_station_id: str,
        seeker_station_id: str,
        start_minutes: float = 0.0,
        starting_coins: Optional[int] = None,
    ) -> "SeekingState":
        """
        Fresh state for a new seeking phase.

        Args:
            hider_station_id: Where the hider settled
            seeker_station_id: Where the seeker starts
            start_minutes: Game clock at the start of the phase
            starting_coins: Coin budget size, or None to play without coins
        """
        return cls(
            hider_station_id=hider_station_id,
            seeker_station_id=seeker_station_id,
            phase_start_minutes=start_minutes,
            current_minutes=start_minutes,
            coins=create_coin_budget(starting_coins) if starting_coins is not None else None,
            visited=frozenset({seeker_station_id}),
            next_action_time=start_minutes,
        )

    @property
    def elapsed_minutes(self) -> float:
        return self.current_minutes - self.phase_start_minutes

    @property
    def is_over(self) -> bool:
        return self.outcome is not None

    def _bump(self, **update) -> "SeekingState":
        update["version"] = self.version + 1
        return self.model_copy(update=update)

    def with_travel(self, to_station_id: str, travel: Optional[TravelInfo] = None) -> "SeekingState":
        """Move the seeker one hop, advancing the clock to the arrival time."""
        leg = TravelLeg(
            from_station_id=self.seeker_station_id,
            station_id=to_station_id,
            departure_time=travel.departure_time if travel else None,
            arrival_time=travel.arrival_time if travel else None,
            train_type=travel.train_type if travel else None,
        )
        arrival = travel.arrival_time if travel else self.current_minutes
        return self._bump(
            seeker_station_id=to_station_id,
            current_minutes=max(self.current_minutes, arrival),
            visited=self.visited | {to_station_id},
            travel_route=self.travel_route + (leg,),
        )

    def with_question(self, question: Question, result: EvaluationResult) -> "SeekingState":
        """
        Record an asked question: cooldown, coins, asked set, log and constraint.

        Raises:
            InsufficientCoinsError: If a coin budget is configured and cannot
                cover the question's category.
        """
        coins = spend_coins(self.coins, question.category) if self.coins is not None else None
        constraints = self.constraints
        if result.constraint is not None:
            constraints = constraints + (result.constraint,)
        record = QuestionRecord(
            question_id=question.id,
            question=question.text,
            category=question.category,
            answer=result.answer,
            asked_at=self.current_minutes,
        )
        return self._bump(
            cooldown=record_question(self.cooldown, question.category, self.current_minutes),
            coins=coins,
            asked_question_ids=self.asked_question_ids | {question.id},
            question_log=self.question_log + (record,),
            constraints=constraints,
        )

    def with_next_action(self) -> "SeekingState":
        """Consume one action slot index."""
        return self._bump(action_counter=self.action_counter + 1)

    def with_action_time(self, next_action_time: float) -> "SeekingState":
        return self._bump(next_action_time=next_action_time)

    def with_idle_advance(self, minutes: float) -> "SeekingState":
        """Push the next decision time forward after a turn with no progress."""
        return self._bump(next_action_time=self.current_minutes + minutes)

    def with_outcome(self, outcome: GameOutcome) -> "SeekingState":
        return self._bump(outcome=outcome)

    def advance_clock(self, minutes: float) -> "SeekingState":
        if minutes < 0:
            raise ValueError("The game clock cannot run backwards")
        return self._bump(current_minutes=self.current_minutes + minutes)


class SeekerView(BaseModel):
    """What a seeker is allowed to know. Never carries the hider's station."""
    model_config = ConfigDict(frozen=True)

    version: int
    seeker_station_id: str
    seeker_station_name: str
    seeker_country: str
    game_minutes: float
    constraints: Tuple[Constraint, ...]
    available_connections: List[str]
    question_log: Tuple[QuestionRecord, ...]
    candidate_station_ids: List[str]
    visited: List[str]
    coins: Optional[CoinBudget] = None
    outcome: Optional[GameOutcome] = None


class HiderView(BaseModel):
    """What the hider sees: both positions and the seeker's evidence."""
    model_config = ConfigDict(frozen=True)

    version: int
    hider_station_id: str
    hider_station_name: str
    seeker_station_id: str
    seeker_station_name: str
    game_minutes: float
    constraints: Tuple[Constraint, ...]
    question_log: Tuple[QuestionRecord, ...]
    outcome: Optional[GameOutcome] = None


def seeker_view(state: SeekingState, graph: "StationGraph") -> SeekerView:
    seeker = graph.get_station(state.seeker_station_id)
    candidates = resolve_candidates(graph, state.constraints, state.visited)
    return SeekerView(
        version=state.version,
        seeker_station_id=seeker.id,
        seeker_station_name=seeker.name,
        seeker_country=seeker.country,
        game_minutes=state.current_minutes,
        constraints=state.constraints,
        available_connections=graph.neighbors(seeker.id),
        question_log=state.question_log,
        candidate_station_ids=sorted(station.id for station in candidates),
        visited=sorted(state.visited),
        coins=state.coins,
        outcome=state.outcome,
    )


def hider_view(state: SeekingState, graph: "StationGraph") -> HiderView:
    hider = graph.get_station(state.hider_station_id)
    seeker = graph.get_station(state.seeker_station_id)
    return HiderView(
        version=state.version,
        hider_station_id=hider.id,
        hider_station_name=hider.name,
        seeker_station_id=seeker.id,
        seeker_station_name=seeker.name,
        game_minutes=state.current_minutes,
        constraints=state.constraints,
        question_log=state.question_log,
        outcome=state.outcome,
    )
