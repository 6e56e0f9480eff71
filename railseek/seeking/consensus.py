"""
Consensus Protocol - reconciles two seekers' proposals into one action.

Each action slot runs at most three phases:
1. Both seekers propose in parallel from the same state summary
2. On disagreement, each sees the partner's proposal once and may switch
3. If they still disagree, the slot index parity picks the winner

The pure resolution rules live in ``resolve_consensus``; the negotiation
itself is a small LangGraph workflow so the phases and their routing are
explicit.
"""

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any, Dict, List, Optional, Tuple, TypedDict

from langgraph.graph import END, StateGraph
from pydantic import BaseModel, ConfigDict, Field

from railseek.agents.llm_controller import SeekerAgent
from railseek.agents.prompts import build_discussion_context
from railseek.agents.tools import consensus_tools, proposal_from_turn
from railseek.data.schemas.models import (
    ConsensusMethod,
    ConsensusResult,
    SeekerProposal,
    SeekerRole,
)
from railseek.utils.logger import get_logger

logger = get_logger(__name__)


def check_agreement(a: SeekerProposal, b: SeekerProposal) -> bool:
    """Two proposals agree when action type and target are identical."""
    return a.action_type == b.action_type and a.target == b.target


def tiebreaker_winner(action_index: int) -> SeekerRole:
    """Even slot indices go to seeker A, odd ones to seeker B."""
    return SeekerRole.SEEKER_A if action_index % 2 == 0 else SeekerRole.SEEKER_B


def resolve_consensus(
    proposal_a: SeekerProposal,
    proposal_b: SeekerProposal,
    revised_a: Optional[SeekerProposal] = None,
    revised_b: Optional[SeekerProposal] = None,
    action_index: int = 0,
) -> ConsensusResult:
    """
    Select the winning proposal for a slot.

    A seeker without a revision keeps its original proposal for the
    discussion check and the tie-break.

    A seeker that failed to propose is represented by a "none" sentinel.
    Two sentinels compare equal, so a slot where both seekers failed
    resolves as an AGREEMENT on "none" with ``agreed=True``. Consumers
    should look at ``action.action_type`` and the round's recorded
    failures rather than reading ``agreed`` as a real decision.
    """
    if check_agreement(proposal_a, proposal_b):
        return ConsensusResult(agreed=True, action=proposal_a, method=ConsensusMethod.AGREEMENT)

    final_a = revised_a or proposal_a
    final_b = revised_b or proposal_b

    if check_agreement(final_a, final_b):
        return ConsensusResult(agreed=True, action=final_a, method=ConsensusMethod.DISCUSSION)

    winner = final_a if tiebreaker_winner(action_index) is SeekerRole.SEEKER_A else final_b
    return ConsensusResult(agreed=False, action=winner, method=ConsensusMethod.TIEBREAKER)


class ConsensusRound(BaseModel):
    """Full record of one negotiated slot."""
    model_config = ConfigDict(frozen=True)

    action_index: int
    proposal_a: SeekerProposal
    proposal_b: SeekerProposal
    revised_a: Optional[SeekerProposal] = None
    revised_b: Optional[SeekerProposal] = None
    result: ConsensusResult
    failures: Dict[SeekerRole, str] = Field(default_factory=dict)


class NegotiationState(TypedDict):
    """State passed through the LangGraph negotiation workflow."""
    state_summary: str
    action_index: int
    proposal_a: Optional[SeekerProposal]
    proposal_b: Optional[SeekerProposal]
    revised_a: Optional[SeekerProposal]
    revised_b: Optional[SeekerProposal]
    failures: Dict[SeekerRole, str]
    result: Optional[ConsensusResult]


class ConsensusProtocol:
    """
    Runs the dual-seeker negotiation for one slot at a time.

    Agent failures never abort a slot: a failed initial proposal becomes
    the explicit "no action" sentinel, and a failed revision keeps the
    seeker's original proposal. Every failure is recorded per seeker.
    """

    def __init__(
        self,
        agent_a: SeekerAgent,
        agent_b: SeekerAgent,
        system_prompt: str,
        tools: Optional[Sequence[Mapping[str, Any]]] = None,
    ):
        """
        Initialize the protocol.

        Args:
            agent_a: Agent playing seeker A
            agent_b: Agent playing seeker B
            system_prompt: System prompt shared by both seekers
            tools: Tool schemas offered to both (defaults to propose_action)
        """
        self._agents: Dict[SeekerRole, SeekerAgent] = {
            SeekerRole.SEEKER_A: agent_a,
            SeekerRole.SEEKER_B: agent_b,
        }
        self._system_prompt = system_prompt
        self._tools = list(tools) if tools is not None else consensus_tools()

        self._workflow = self._build_workflow()
        self._compiled_graph = self._workflow.compile()

    def _build_workflow(self) -> StateGraph:
        """Build the propose -> (discuss) -> resolve workflow."""
        workflow = StateGraph(NegotiationState)

        workflow.add_node("propose", self._propose_node)
        workflow.add_node("discuss", self._discuss_node)
        workflow.add_node("resolve", self._resolve_node)

        workflow.set_entry_point("propose")
        workflow.add_conditional_edges(
            "propose",
            self._route_after_proposals,
            {"agree": "resolve", "discuss": "discuss"},
        )
        workflow.add_edge("discuss", "resolve")
        workflow.add_edge("resolve", END)

        return workflow

    async def negotiate(self, state_summary: str, action_index: int) -> ConsensusRound:
        """
        Negotiate one slot.

        Args:
            state_summary: Seeker-visible summary shown to both agents
            action_index: Monotonic slot index used for tie-break parity

        Returns:
            ConsensusRound with both proposals, any revisions and the result
        """
        initial: NegotiationState = {
            "state_summary": state_summary,
            "action_index": action_index,
            "proposal_a": None,
            "proposal_b": None,
            "revised_a": None,
            "revised_b": None,
            "failures": {},
            "result": None,
        }
        final = await self._compiled_graph.ainvoke(initial)

        return ConsensusRound(
            action_index=action_index,
            proposal_a=final["proposal_a"],
            proposal_b=final["proposal_b"],
            revised_a=final.get("revised_a"),
            revised_b=final.get("revised_b"),
            result=final["result"],
            failures=dict(final.get("failures") or {}),
        )

    async def _ask_both(
        self, state_summary: str, contexts: Dict[SeekerRole, Optional[str]]
    ) -> List[Tuple[SeekerRole, Optional[SeekerProposal], Optional[str]]]:
        """Query both agents concurrently and join; returns (role, proposal, failure)."""
        roles = [SeekerRole.SEEKER_A, SeekerRole.SEEKER_B]
        responses = await asyncio.gather(
            *(
                self._agents[role].propose(
                    self._system_prompt, state_summary, self._tools, contexts.get(role)
                )
                for role in roles
            ),
            return_exceptions=True,
        )

        outcomes: List[Tuple[SeekerRole, Optional[SeekerProposal], Optional[str]]] = []
        for role, response in zip(roles, responses):
            if isinstance(response, BaseException):
                if not isinstance(response, Exception):
                    raise response
                logger.error(f"{role.value} failed to propose: {response}")
                outcomes.append((role, None, str(response) or type(response).__name__))
                continue
            try:
                outcomes.append((role, proposal_from_turn(role, response), None))
            except Exception as e:
                logger.error(f"{role.value} returned an unusable proposal: {e}")
                outcomes.append((role, None, str(e)))
        return outcomes

    async def _propose_node(self, state: NegotiationState) -> Dict[str, Any]:
        """Phase 1: independent proposals from the same summary."""
        logger.info(f"Action {state['action_index']}: getting proposals from both seekers...")
        failures = dict(state.get("failures") or {})
        proposals: Dict[SeekerRole, SeekerProposal] = {}

        for role, proposal, failure in await self._ask_both(state["state_summary"], {}):
            if proposal is None:
                failures[role] = failure
                proposal = SeekerProposal.no_action(role, failure)
            elif proposal.failure:
                failures[role] = proposal.failure
            proposals[role] = proposal
            logger.info(f"{role.value} proposes: {proposal.action_type.value} -> {proposal.target}")

        return {
            "proposal_a": proposals[SeekerRole.SEEKER_A],
            "proposal_b": proposals[SeekerRole.SEEKER_B],
            "failures": failures,
        }

    def _route_after_proposals(self, state: NegotiationState) -> str:
        if check_agreement(state["proposal_a"], state["proposal_b"]):
            return "agree"
        logger.info("Proposals differ, entering discussion phase...")
        return "discuss"

    async def _discuss_node(self, state: NegotiationState) -> Dict[str, Any]:
        """Phase 2: one revision each, with the partner's reasoning as context."""
        proposal_a = state["proposal_a"]
        proposal_b = state["proposal_b"]
        contexts = {
            SeekerRole.SEEKER_A: build_discussion_context(proposal_a, proposal_b),
            SeekerRole.SEEKER_B: build_discussion_context(proposal_b, proposal_a),
        }

        failures = dict(state.get("failures") or {})
        revised: Dict[SeekerRole, Optional[SeekerProposal]] = {}

        for role, proposal, failure in await self._ask_both(state["state_summary"], contexts):
            if proposal is None or proposal.failure:
                # Keep the original proposal for this seeker
                failures.setdefault(role, failure or proposal.failure)
                revised[role] = None
                continue
            revised[role] = proposal
            logger.info(f"Revised {role.value}: {proposal.action_type.value} -> {proposal.target}")

        return {
            "revised_a": revised.get(SeekerRole.SEEKER_A),
            "revised_b": revised.get(SeekerRole.SEEKER_B),
            "failures": failures,
        }

    def _resolve_node(self, state: NegotiationState) -> Dict[str, Any]:
        """Phase 3: agreement, discussion or tie-break."""
        result = resolve_consensus(
            state["proposal_a"],
            state["proposal_b"],
            state.get("revised_a"),
            state.get("revised_b"),
            state["action_index"],
        )
        logger.info(
            f"Consensus: {result.method.value} -> "
            f"{result.action.action_type.value} \"{result.action.target}\""
        )
        return {"result": result}
