"""
LLM Provider - LangChain/OpenRouter adapter for railseek.

This module provides the concrete implementation of the SeekerAgent
interface using LangChain with OpenRouter as the backend, traced through
Langfuse when enabled.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Dict, List, Optional

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from langfuse.langchain import CallbackHandler

from railseek.agents.llm_controller import (
    STOP_END_TURN,
    STOP_TOOL_USE,
    AgentTurn,
    InvalidResponseError,
    SeekerAgent,
    ToolCall,
)
from railseek.config import RailSeekConfig, get_config
from railseek.data.schemas.models import SeekerRole
from railseek.utils.logger import get_logger

logger = get_logger(__name__)


class LangChainSeekerAgent(SeekerAgent):
    """
    SeekerAgent implementation using LangChain with OpenRouter.

    Each role is backed by its own model so the two consensus seekers
    reason independently.
    """

    def __init__(
        self,
        role: SeekerRole,
        model_name: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        timeout: float = 60,
        enable_tracing: bool = False,
    ):
        """
        Initialize the agent.

        Args:
            role: Seeker role this agent plays
            model_name: OpenRouter model identifier
            api_key: OpenRouter API key
            base_url: OpenRouter base URL
            temperature: Sampling temperature
            timeout: Request timeout in seconds
            enable_tracing: Whether to attach a Langfuse callback handler
        """
        super().__init__(role)
        self._model_name = model_name

        self._llm = ChatOpenAI(
            api_key=api_key,
            base_url=base_url,
            model=model_name,
            temperature=temperature,
            request_timeout=timeout,
        )

        # Initialize Langfuse handler for tracing
        self._langfuse_handler = CallbackHandler() if enable_tracing else None

        logger.info(f"Initialized {role.value} agent with model: {model_name}")

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._model_name

    async def propose(
        self,
        system_prompt: str,
        state_summary: str,
        tools: Sequence[Mapping[str, Any]],
        extra_context: Optional[str] = None,
    ) -> AgentTurn:
        content = f"{state_summary}\n\n{extra_context}" if extra_context else state_summary
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=content),
        ]

        config: Dict[str, Any] = {}
        if self._langfuse_handler:
            config["callbacks"] = [self._langfuse_handler]

        llm = self._llm.bind_tools([dict(tool) for tool in tools])

        try:
            response = await llm.ainvoke(messages, config=config)
        except Exception as e:
            logger.error(f"{self.role.value} request to {self._model_name} failed: {e}")
            raise

        return self._to_turn(response)

    def _to_turn(self, response: AIMessage) -> AgentTurn:
        tool_calls: List[ToolCall] = [
            ToolCall(name=call["name"], input=dict(call.get("args") or {}), id=call.get("id"))
            for call in response.tool_calls
        ]

        if not tool_calls and response.invalid_tool_calls:
            bad = response.invalid_tool_calls[0]
            raise InvalidResponseError(
                f"Malformed tool call {bad.get('name')}: {bad.get('error')}"
            )

        commentary = response.content if isinstance(response.content, str) else ""
        finish_reason = response.response_metadata.get("finish_reason")
        stop_reason = STOP_TOOL_USE if finish_reason == "tool_calls" else STOP_END_TURN

        logger.debug(
            f"{self.role.value} responded with {len(tool_calls)} tool calls, "
            f"stop_reason={stop_reason}"
        )
        return AgentTurn(tool_calls=tool_calls, commentary=commentary, stop_reason=stop_reason)


def create_seeker_agent(
    role: SeekerRole, config: Optional[RailSeekConfig] = None
) -> LangChainSeekerAgent:
    """
    Create the agent for a seeker role from configuration.

    Seeker A uses ``SEEKER_A_MODEL``; seeker B uses ``SEEKER_B_MODEL``.
    """
    config = config or get_config()
    model_name = (
        config.llm.seeker_a_model if role is SeekerRole.SEEKER_A else config.llm.seeker_b_model
    )
    return LangChainSeekerAgent(
        role=role,
        model_name=model_name,
        api_key=config.llm.api_key or None,
        base_url=config.llm.base_url,
        temperature=config.llm.temperature,
        timeout=config.llm.timeout_seconds,
        enable_tracing=config.langfuse.enabled,
    )
