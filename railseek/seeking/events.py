"""
Action events emitted by the turn orchestrator.

The orchestrator yields these in order; UI layers, loggers and tests
drain them independently instead of registering callbacks.
"""

from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from railseek.data.schemas.models import (
    ActionType,
    Constraint,
    ConsensusResult,
    GameOutcome,
    QuestionCategory,
    SeekerProposal,
    SeekerRole,
    TravelInfo,
)


class RejectionReason(str, Enum):
    """Why an action slot was skipped."""
    UNKNOWN_QUESTION = "unknown_question"
    ALREADY_ASKED = "already_asked"
    ON_COOLDOWN = "on_cooldown"
    UNAFFORDABLE = "unaffordable"
    NOT_ADJACENT = "not_adjacent"
    NO_ACTION = "no_action"
    AGENT_FAILURE = "agent_failure"


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    turn: int
    slot: int
    game_minutes: float


class ProposalMade(_Event):
    kind: Literal["proposal"] = "proposal"
    proposal: SeekerProposal
    revised: bool = False


class ConsensusReached(_Event):
    kind: Literal["consensus"] = "consensus"
    action_index: int = Field(..., description="Monotonic slot index used for tie-break parity")
    result: ConsensusResult
    failures: List[SeekerRole] = Field(default_factory=list)


class TravelCompleted(_Event):
    kind: Literal["travel"] = "travel"
    from_station_id: str
    to_station_id: str
    travel: Optional[TravelInfo] = None


class QuestionAnswered(_Event):
    kind: Literal["question"] = "question"
    question_id: str
    question_text: str
    category: QuestionCategory
    answer: str
    constraint: Optional[Constraint] = None
    coins_remaining: Optional[int] = None


class ActionRejected(_Event):
    kind: Literal["rejected"] = "rejected"
    action_type: ActionType
    target: str
    reason: RejectionReason
    message: str


class TurnCompleted(_Event):
    kind: Literal["turn_completed"] = "turn_completed"
    acted: bool
    station_id: str
    next_action_time: float


class PhaseEnded(_Event):
    kind: Literal["phase_ended"] = "phase_ended"
    outcome: GameOutcome
    station_id: str


SeekingEvent = Union[
    ProposalMade,
    ConsensusReached,
    TravelCompleted,
    QuestionAnswered,
    ActionRejected,
    TurnCompleted,
    PhaseEnded,
]
