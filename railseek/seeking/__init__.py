"""
Seeking module - the geolocation-inference and consensus engine.

This module contains:
- geo: great-circle distance and bearing
- constraints: constraint satisfaction and candidate resolution
- questions: the static question catalog
- evaluator: question answering against the hider's station
- cooldown / coins: the question-asking economy
- consensus: dual-seeker negotiation
- state / summary / events: the phase state value, its text view and events
- orchestrator: the turn loop
"""

from railseek.seeking.geo import haversine_distance, compute_bearing
from railseek.seeking.constraints import (
    constraint_satisfied,
    station_matches,
    resolve_candidates,
    ConstraintResolver,
    CandidateBreakdown,
)
from railseek.seeking.questions import (
    QUESTION_CATALOG,
    get_question,
    questions_by_category,
)
from railseek.seeking.evaluator import QuestionEvaluator, UNKNOWN_ANSWER
from railseek.seeking.cooldown import (
    COOLDOWN_MINUTES,
    create_cooldown_tracker,
    can_ask_category,
    record_question,
    cooldown_remaining,
)
from railseek.seeking.coins import (
    STARTING_COINS,
    QUESTION_COSTS,
    InsufficientCoinsError,
    create_coin_budget,
    get_cost,
    can_afford,
    spend_coins,
)
from railseek.seeking.consensus import (
    check_agreement,
    tiebreaker_winner,
    resolve_consensus,
    ConsensusProtocol,
    ConsensusRound,
)
from railseek.seeking.state import (
    SeekingState,
    SeekerView,
    HiderView,
    seeker_view,
    hider_view,
)
from railseek.seeking.summary import build_state_summary
from railseek.seeking.events import (
    RejectionReason,
    ProposalMade,
    ConsensusReached,
    TravelCompleted,
    QuestionAnswered,
    ActionRejected,
    TurnCompleted,
    PhaseEnded,
    SeekingEvent,
)
from railseek.seeking.orchestrator import TurnOrchestrator, TurnResult, TurnStep

__all__ = [
    # Geometry
    "haversine_distance",
    "compute_bearing",
    # Constraints
    "constraint_satisfied",
    "station_matches",
    "resolve_candidates",
    "ConstraintResolver",
    "CandidateBreakdown",
    # Questions
    "QUESTION_CATALOG",
    "get_question",
    "questions_by_category",
    "QuestionEvaluator",
    "UNKNOWN_ANSWER",
    # Economy
    "COOLDOWN_MINUTES",
    "create_cooldown_tracker",
    "can_ask_category",
    "record_question",
    "cooldown_remaining",
    "STARTING_COINS",
    "QUESTION_COSTS",
    "InsufficientCoinsError",
    "create_coin_budget",
    "get_cost",
    "can_afford",
    "spend_coins",
    # Consensus
    "check_agreement",
    "tiebreaker_winner",
    "resolve_consensus",
    "ConsensusProtocol",
    "ConsensusRound",
    # State
    "SeekingState",
    "SeekerView",
    "HiderView",
    "seeker_view",
    "hider_view",
    "build_state_summary",
    # Events
    "RejectionReason",
    "ProposalMade",
    "ConsensusReached",
    "TravelCompleted",
    "QuestionAnswered",
    "ActionRejected",
    "TurnCompleted",
    "PhaseEnded",
    "SeekingEvent",
    # Orchestration
    "TurnOrchestrator",
    "TurnResult",
    "TurnStep",
]
