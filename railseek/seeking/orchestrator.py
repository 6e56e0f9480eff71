"""
Turn Orchestrator - drives seeker agents through a seeking phase.

For each action slot of a turn the orchestrator builds the seeker-facing
state summary, obtains a proposal (one agent) or negotiates one (two
agents), validates it and executes it against the state. Invalid actions
skip the slot; only a seeker win or the time limit end the phase.

Turns are streamed: ``stream_turn`` yields a ``TurnStep`` (event plus the
state after it) for every executed step, so consumers observe progress
without the orchestrator knowing who is listening.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, AsyncIterator, List, Optional, Sequence, Tuple

from railseek.agents.llm_controller import SeekerAgent
from railseek.agents.prompts import build_seeker_system_prompt
from railseek.agents.tools import proposals_from_turn, single_seeker_tools
from railseek.config import GameConfig, get_config
from railseek.data.schemas.models import (
    ActionType,
    GameOutcome,
    SeekerProposal,
)
from railseek.seeking.coins import can_afford, get_cost
from railseek.seeking.consensus import ConsensusProtocol
from railseek.seeking.cooldown import can_ask_category, cooldown_remaining
from railseek.seeking.evaluator import QuestionEvaluator
from railseek.seeking.events import (
    ActionRejected,
    ConsensusReached,
    PhaseEnded,
    ProposalMade,
    QuestionAnswered,
    RejectionReason,
    SeekingEvent,
    TravelCompleted,
    TurnCompleted,
)
from railseek.seeking.geo import haversine_distance
from railseek.seeking.questions import get_question
from railseek.seeking.state import SeekingState
from railseek.seeking.summary import build_state_summary
from railseek.utils.logger import get_logger

if TYPE_CHECKING:
    from railseek.network.graph import StationGraph
    from railseek.network.schedule import ScheduleService

logger = get_logger(__name__)


@dataclass(frozen=True)
class TurnStep:
    """An emitted event and the state right after it."""
    event: SeekingEvent
    state: SeekingState


@dataclass
class TurnResult:
    """Final state of a turn (or phase) plus every event emitted."""
    state: SeekingState
    events: List[SeekingEvent] = field(default_factory=list)


class TurnOrchestrator:
    """
    Runs seeking turns in single-agent or consensus mode.

    One agent means single mode; two agents (seeker A then seeker B) mean
    consensus mode.
    """

    def __init__(
        self,
        graph: "StationGraph",
        schedule: "ScheduleService",
        agents: Sequence[SeekerAgent],
        game_config: Optional[GameConfig] = None,
        system_prompt: Optional[str] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            graph: Station graph
            schedule: Timetable collaborator
            agents: One agent for single mode, two for consensus mode
            game_config: Seeking rules (defaults to the global configuration)
            system_prompt: Override for the seeker system prompt
        """
        if len(agents) not in (1, 2):
            raise ValueError(f"Expected one or two seeker agents, got {len(agents)}")

        self._graph = graph
        self._schedule = schedule
        self._agents = list(agents)
        self._game = game_config or get_config().game
        self._evaluator = QuestionEvaluator(graph)

        self._system_prompt = system_prompt or build_seeker_system_prompt(
            time_limit_minutes=self._game.time_limit_minutes,
            win_radius_km=self._game.win_radius_km,
            consensus=self.is_consensus,
            graph=graph,
        )

        self._protocol: Optional[ConsensusProtocol] = None
        if self.is_consensus:
            self._protocol = ConsensusProtocol(
                self._agents[0], self._agents[1], self._system_prompt
            )

        logger.info(
            f"TurnOrchestrator initialized in {'consensus' if self.is_consensus else 'single'} mode"
        )

    @property
    def is_consensus(self) -> bool:
        return len(self._agents) == 2

    def new_phase(
        self, hider_station_id: str, seeker_station_id: str, start_minutes: float = 0.0
    ) -> SeekingState:
        """Fresh state for a seeking phase; validates both stations exist."""
        self._graph.get_station(hider_station_id)
        self._graph.get_station(seeker_station_id)
        coins = self._game.starting_coins if self._game.coins_enabled else None
        return SeekingState.start(hider_station_id, seeker_station_id, start_minutes, coins)

    # ------------------------------------------------------------------
    # Turn loop
    # ------------------------------------------------------------------

    async def stream_turn(self, state: SeekingState, turn: int = 0) -> AsyncIterator[TurnStep]:
        """
        Run one turn, yielding each event with the resulting state.

        Raises:
            ValueError: If the phase is already over.
        """
        if state.is_over:
            raise ValueError(f"Seeking phase already ended: {state.outcome.value}")

        if state.next_action_time > state.current_minutes:
            state = state.advance_clock(state.next_action_time - state.current_minutes)

        start_station = state.seeker_station_id
        logger.info(
            f"=== TURN {turn} START === at {self._graph.get_station(start_station).name} "
            f"({start_station}), game time: {int(state.current_minutes)}min"
        )

        if self._time_limit_reached(state):
            state, event = self._end_by_time_limit(state, turn, 0)
            yield TurnStep(event, state)
            return

        acted = False
        slot = 0
        while slot < self._game.max_actions_per_turn and not state.is_over:
            summary = build_state_summary(state, self._graph, self._schedule)

            if self.is_consensus:
                proposals, steps, state = await self._negotiate_slot(state, summary, turn, slot)
                for step in steps:
                    yield step
                end_turn = False
            else:
                proposals, end_turn, rejection = await self._single_proposals(state, summary, turn, slot)
                if rejection is not None:
                    yield TurnStep(rejection, state)
                    slot += 1
                    continue
                if not proposals:
                    logger.info("No actions proposed, ending turn")
                    break

            for proposal in proposals:
                if slot >= self._game.max_actions_per_turn or state.is_over:
                    break
                state, events, did_act = self._execute(state, proposal, turn, slot)
                acted = acted or did_act
                for event in events:
                    yield TurnStep(event, state)
                if not state.is_over and self._time_limit_reached(state):
                    state, event = self._end_by_time_limit(state, turn, slot)
                    yield TurnStep(event, state)
                slot += 1

            if end_turn:
                logger.info("Agent signalled end of turn")
                break

        if state.is_over:
            return

        if self._time_limit_reached(state):
            state, event = self._end_by_time_limit(state, turn, slot)
            yield TurnStep(event, state)
            return

        if acted:
            state = state.with_action_time(state.current_minutes)
        else:
            state = state.with_idle_advance(self._game.idle_advance_minutes)

        route = " -> ".join(self._graph.get_station(leg.station_id).name for leg in state.travel_route)
        logger.info(
            f"=== TURN {turn} END === at {state.seeker_station_id}, "
            f"route so far: {route or '(none)'}, game time: {int(state.current_minutes)}min, "
            f"next action: {int(state.next_action_time)}min"
        )
        yield TurnStep(
            TurnCompleted(
                turn=turn,
                slot=slot,
                game_minutes=state.current_minutes,
                acted=acted,
                station_id=state.seeker_station_id,
                next_action_time=state.next_action_time,
            ),
            state,
        )

    async def run_turn(self, state: SeekingState, turn: int = 0) -> TurnResult:
        """Run one turn and collect its events."""
        result = TurnResult(state=state)
        async for step in self.stream_turn(state, turn):
            result.events.append(step.event)
            result.state = step.state
        return result

    async def stream_phase(
        self, state: SeekingState, max_turns: Optional[int] = None
    ) -> AsyncIterator[TurnStep]:
        """Run turns until the phase ends or ``max_turns`` is reached."""
        max_turns = max_turns if max_turns is not None else self._game.max_turns
        turn = 0
        while not state.is_over and turn < max_turns:
            async for step in self.stream_turn(state, turn):
                state = step.state
                yield step
            turn += 1

        if not state.is_over:
            logger.warning(f"Stopped after {max_turns} turns without an outcome")

    async def run_phase(self, state: SeekingState, max_turns: Optional[int] = None) -> TurnResult:
        """Run a whole seeking phase and collect its events."""
        result = TurnResult(state=state)
        async for step in self.stream_phase(state, max_turns):
            result.events.append(step.event)
            result.state = step.state
        return result

    # ------------------------------------------------------------------
    # Proposals
    # ------------------------------------------------------------------

    async def _single_proposals(
        self, state: SeekingState, summary: str, turn: int, slot: int
    ) -> Tuple[List[SeekerProposal], bool, Optional[ActionRejected]]:
        agent = self._agents[0]
        try:
            agent_turn = await agent.propose(self._system_prompt, summary, single_seeker_tools())
            proposals = proposals_from_turn(agent.role, agent_turn)
        except Exception as e:
            logger.error(f"{agent.name} failed to propose: {e}")
            rejection = ActionRejected(
                turn=turn,
                slot=slot,
                game_minutes=state.current_minutes,
                action_type=ActionType.NONE,
                target="",
                reason=RejectionReason.AGENT_FAILURE,
                message=str(e) or type(e).__name__,
            )
            return [], False, rejection

        for proposal in proposals:
            logger.info(f"{agent.name} proposes: {proposal.action_type.value} -> {proposal.target}")
        return proposals, not agent_turn.wants_to_continue, None

    async def _negotiate_slot(
        self, state: SeekingState, summary: str, turn: int, slot: int
    ) -> Tuple[List[SeekerProposal], List[TurnStep], SeekingState]:
        action_index = state.action_counter
        consensus = await self._protocol.negotiate(summary, action_index)
        state = state.with_next_action()

        now = state.current_minutes
        events: List[SeekingEvent] = [
            ProposalMade(turn=turn, slot=slot, game_minutes=now, proposal=consensus.proposal_a),
            ProposalMade(turn=turn, slot=slot, game_minutes=now, proposal=consensus.proposal_b),
        ]
        for revised in (consensus.revised_a, consensus.revised_b):
            if revised is not None:
                events.append(
                    ProposalMade(turn=turn, slot=slot, game_minutes=now, proposal=revised, revised=True)
                )
        events.append(
            ConsensusReached(
                turn=turn,
                slot=slot,
                game_minutes=now,
                action_index=action_index,
                result=consensus.result,
                failures=sorted(consensus.failures),
            )
        )
        return [consensus.result.action], [TurnStep(event, state) for event in events], state

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _execute(
        self, state: SeekingState, proposal: SeekerProposal, turn: int, slot: int
    ) -> Tuple[SeekingState, List[SeekingEvent], bool]:
        """Validate and apply one action. Returns (state, events, acted)."""
        if proposal.action_type is ActionType.TRAVEL_TO:
            return self._travel(state, proposal, turn, slot)
        if proposal.action_type is ActionType.ASK_QUESTION:
            return self._ask(state, proposal, turn, slot)

        reason = RejectionReason.AGENT_FAILURE if proposal.failure else RejectionReason.NO_ACTION
        message = proposal.failure or "No action proposed"
        return state, [self._reject(state, proposal, reason, message, turn, slot)], False

    def _reject(
        self,
        state: SeekingState,
        proposal: SeekerProposal,
        reason: RejectionReason,
        message: str,
        turn: int,
        slot: int,
    ) -> ActionRejected:
        logger.warning(f"Skipping slot {slot}: {message}")
        return ActionRejected(
            turn=turn,
            slot=slot,
            game_minutes=state.current_minutes,
            action_type=proposal.action_type,
            target=proposal.target,
            reason=reason,
            message=message,
        )

    def _travel(
        self, state: SeekingState, proposal: SeekerProposal, turn: int, slot: int
    ) -> Tuple[SeekingState, List[SeekingEvent], bool]:
        origin = state.seeker_station_id
        target = proposal.target
        neighbors = self._schedule.neighbors(origin)
        if target not in neighbors:
            message = (
                f"Cannot travel to \"{target}\": not adjacent to {origin}. "
                f"Available connections: {', '.join(neighbors)}"
            )
            return state, [self._reject(state, proposal, RejectionReason.NOT_ADJACENT, message, turn, slot)], False

        travel = self._schedule.travel_info(origin, target, state.current_minutes)
        state = state.with_travel(target, travel)
        arrived = self._graph.get_station(target)

        detail = (
            f" [{travel.train_type.value}, +{round(travel.total_minutes)}min, "
            f"now at {round(state.current_minutes)}min]" if travel else ""
        )
        logger.info(f"TRAVEL: -> {arrived.name} ({target}){detail}")

        events: List[SeekingEvent] = [
            TravelCompleted(
                turn=turn,
                slot=slot,
                game_minutes=state.current_minutes,
                from_station_id=origin,
                to_station_id=target,
                travel=travel,
            )
        ]

        hider = self._graph.get_station(state.hider_station_id)
        if haversine_distance(arrived.lat, arrived.lng, hider.lat, hider.lng) <= self._game.win_radius_km:
            state = state.with_outcome(GameOutcome.SEEKER_WINS)
            logger.info(f"=== SEEKER WINS === Found hider at {hider.name}!")
            events.append(
                PhaseEnded(
                    turn=turn,
                    slot=slot,
                    game_minutes=state.current_minutes,
                    outcome=GameOutcome.SEEKER_WINS,
                    station_id=target,
                )
            )
        return state, events, True

    def _ask(
        self, state: SeekingState, proposal: SeekerProposal, turn: int, slot: int
    ) -> Tuple[SeekingState, List[SeekingEvent], bool]:
        question_id = proposal.target
        question = get_question(question_id)
        now = state.current_minutes

        if question is None:
            return state, [self._reject(
                state, proposal, RejectionReason.UNKNOWN_QUESTION,
                f"Unknown question: {question_id}", turn, slot,
            )], False

        if question_id in state.asked_question_ids:
            return state, [self._reject(
                state, proposal, RejectionReason.ALREADY_ASKED,
                f"Question already asked: {question_id}", turn, slot,
            )], False

        if not can_ask_category(state.cooldown, question.category, now):
            remaining = cooldown_remaining(state.cooldown, question.category, now)
            return state, [self._reject(
                state, proposal, RejectionReason.ON_COOLDOWN,
                f"Category {question.category.value} is on cooldown for {remaining:.0f} more minutes",
                turn, slot,
            )], False

        if state.coins is not None and not can_afford(state.coins, question.category):
            return state, [self._reject(
                state, proposal, RejectionReason.UNAFFORDABLE,
                f"Cannot afford {question_id} (cost={get_cost(question.category)}, "
                f"remaining={state.coins.remaining})",
                turn, slot,
            )], False

        result = self._evaluator.evaluate(question, state.hider_station_id, state.seeker_station_id)
        state = state.with_question(question, result)

        coins_note = f" (coins: {state.coins.remaining}/{state.coins.total})" if state.coins else ""
        logger.info(
            f"QUESTION: \"{question.text}\" -> \"{result.answer}\" "
            f"[{question.category.value}]{coins_note}"
        )

        event = QuestionAnswered(
            turn=turn,
            slot=slot,
            game_minutes=now,
            question_id=question.id,
            question_text=question.text,
            category=question.category,
            answer=result.answer,
            constraint=result.constraint,
            coins_remaining=state.coins.remaining if state.coins else None,
        )
        return state, [event], True

    # ------------------------------------------------------------------
    # Termination
    # ------------------------------------------------------------------

    def _time_limit_reached(self, state: SeekingState) -> bool:
        return state.elapsed_minutes >= self._game.time_limit_minutes

    def _end_by_time_limit(
        self, state: SeekingState, turn: int, slot: int
    ) -> Tuple[SeekingState, PhaseEnded]:
        state = state.with_outcome(GameOutcome.HIDER_WINS)
        logger.info(f"=== HIDER WINS === Time limit reached at {int(state.current_minutes)}min")
        return state, PhaseEnded(
            turn=turn,
            slot=slot,
            game_minutes=state.current_minutes,
            outcome=GameOutcome.HIDER_WINS,
            station_id=state.seeker_station_id,
        )
