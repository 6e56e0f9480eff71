"""
Tool schemas offered to seeker agents and parsing of their tool calls.

Schemas use the OpenAI function-calling layout, which LangChain's
``bind_tools`` accepts unchanged.
"""

from typing import Any, Dict, List, Optional

from railseek.agents.llm_controller import AgentTurn, InvalidResponseError, ToolCall
from railseek.data.schemas.models import ActionType, SeekerProposal, SeekerRole

TRAVEL_TO = "travel_to"
ASK_QUESTION = "ask_question"
PROPOSE_ACTION = "propose_action"

TRAVEL_TO_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": TRAVEL_TO,
        "description": (
            "Travel to a station directly connected to your current station. "
            "You may call this several times to plan a multi-hop route."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "station_id": {
                    "type": "string",
                    "description": "The id of an adjacent station, e.g. lyon-part-dieu",
                },
            },
            "required": ["station_id"],
        },
    },
}

ASK_QUESTION_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": ASK_QUESTION,
        "description": (
            "Ask a question about the hider's location. Each question can be asked "
            "once per game, each category has a 30 game-minute cooldown and costs coins."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "question_id": {
                    "type": "string",
                    "description": "The id of an available question, e.g. radar-200",
                },
            },
            "required": ["question_id"],
        },
    },
}

PROPOSE_ACTION_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": PROPOSE_ACTION,
        "description": (
            "Propose an action to take this turn. You must propose exactly one action. "
            "Your partner seeker will also propose an action, and you will need to agree on what to do."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "action_type": {
                    "type": "string",
                    "enum": [ActionType.TRAVEL_TO.value, ActionType.ASK_QUESTION.value],
                    "description": 'The type of action to propose: "travel_to" or "ask_question"',
                },
                "target": {
                    "type": "string",
                    "description": "A station_id for travel_to, or a question_id for ask_question",
                },
                "reasoning": {
                    "type": "string",
                    "description": "Brief reasoning for why this action is best",
                },
            },
            "required": ["action_type", "target", "reasoning"],
        },
    },
}


def single_seeker_tools() -> List[Dict[str, Any]]:
    return [TRAVEL_TO_TOOL, ASK_QUESTION_TOOL]


def consensus_tools() -> List[Dict[str, Any]]:
    return [PROPOSE_ACTION_TOOL]


def _require_str(call: ToolCall, key: str) -> str:
    value = call.input.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidResponseError(f"{call.name} call is missing '{key}'")
    return value.strip()


def proposal_from_tool_call(
    role: SeekerRole, call: ToolCall, commentary: str = ""
) -> SeekerProposal:
    """
    Convert one tool call into a proposal.

    Raises:
        InvalidResponseError: For unknown tools, unknown action types or
            missing arguments.
    """
    if call.name == TRAVEL_TO:
        return SeekerProposal(
            seeker_id=role,
            action_type=ActionType.TRAVEL_TO,
            target=_require_str(call, "station_id"),
            reasoning=commentary,
        )
    if call.name == ASK_QUESTION:
        return SeekerProposal(
            seeker_id=role,
            action_type=ActionType.ASK_QUESTION,
            target=_require_str(call, "question_id"),
            reasoning=commentary,
        )
    if call.name == PROPOSE_ACTION:
        raw_type = _require_str(call, "action_type")
        try:
            action_type = ActionType(raw_type)
        except ValueError:
            raise InvalidResponseError(f"Unknown action type: {raw_type}") from None
        if action_type is ActionType.NONE:
            raise InvalidResponseError("propose_action must name an action")
        reasoning = call.input.get("reasoning")
        return SeekerProposal(
            seeker_id=role,
            action_type=action_type,
            target=_require_str(call, "target"),
            reasoning=reasoning if isinstance(reasoning, str) else commentary,
        )
    raise InvalidResponseError(f"Unknown tool: {call.name}")


def proposals_from_turn(role: SeekerRole, turn: AgentTurn) -> List[SeekerProposal]:
    """Every action in a turn, in order. Malformed calls raise."""
    return [proposal_from_tool_call(role, call, turn.commentary) for call in turn.tool_calls]


def proposal_from_turn(role: SeekerRole, turn: AgentTurn) -> SeekerProposal:
    """
    The single proposal of a consensus-mode turn.

    Uses the first ``propose_action`` call, falling back to the first tool
    call of any kind. A turn without tool calls yields the "no action"
    sentinel.
    """
    chosen: Optional[ToolCall] = next(
        (call for call in turn.tool_calls if call.name == PROPOSE_ACTION),
        turn.tool_calls[0] if turn.tool_calls else None,
    )
    if chosen is None:
        return SeekerProposal.no_action(role, "Agent did not propose an action")
    return proposal_from_tool_call(role, chosen, turn.commentary)
