"""
LLM Controller - Seeker agent abstraction layer for railseek.

The seeking engine talks to language models only through ``SeekerAgent``:
a system prompt, a textual state summary and a fixed tool schema go in; a
list of tool calls plus optional commentary comes out. Nothing here knows
about a particular vendor's request or response shape.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, List, Optional

from railseek.data.schemas.models import SeekerRole

STOP_TOOL_USE = "tool_use"
STOP_END_TURN = "end_turn"


class InvalidResponseError(Exception):
    """Exception to throw when a model response cannot be interpreted as an action."""
    pass


@dataclass(frozen=True)
class ToolCall:
    """
    A structured action request returned by an agent.

    Attributes:
        name: Tool name, e.g. ``travel_to``
        input: Flat key-value arguments
        id: Provider-assigned call id, if any
    """
    name: str
    input: Mapping[str, Any] = field(default_factory=dict)
    id: Optional[str] = None


@dataclass(frozen=True)
class AgentTurn:
    """
    One agent response.

    Attributes:
        tool_calls: Requested actions, in order
        commentary: Free-text reasoning the model emitted alongside
        stop_reason: ``tool_use`` when the model wants to continue,
            ``end_turn`` when it is done
    """
    tool_calls: List[ToolCall] = field(default_factory=list)
    commentary: str = ""
    stop_reason: str = STOP_END_TURN

    @property
    def wants_to_continue(self) -> bool:
        return self.stop_reason == STOP_TOOL_USE


class SeekerAgent(ABC):
    """
    Abstract base class for seeker agents.

    Implementations may raise any exception on transport failure and
    ``InvalidResponseError`` on an uninterpretable response; the caller
    converts both into a per-seeker "no action" proposal.
    """

    def __init__(self, role: SeekerRole):
        self.role = role

    @abstractmethod
    async def propose(
        self,
        system_prompt: str,
        state_summary: str,
        tools: Sequence[Mapping[str, Any]],
        extra_context: Optional[str] = None,
    ) -> AgentTurn:
        """
        Ask the agent for its next action.

        Args:
            system_prompt: Game rules and strategy
            state_summary: Seeker-visible world state
            tools: Tool schemas the agent may call
            extra_context: Additional text appended to the summary, e.g.
                the partner's proposal during a discussion round

        Returns:
            AgentTurn with zero or more tool calls

        Raises:
            InvalidResponseError: If the response cannot be interpreted.
        """
        raise NotImplementedError

    @property
    def name(self) -> str:
        return self.role.value
