"""
Agents module - Seeker agent logic for railseek.

This module contains:
- llm_controller: vendor-neutral SeekerAgent interface and tool-call contract
- llm_provider: LangChain/OpenRouter implementation with Langfuse tracing
- tools: tool schemas and tool-call parsing
- prompts: system prompt and discussion context text
"""

from railseek.agents.llm_controller import (
    SeekerAgent,
    AgentTurn,
    ToolCall,
    InvalidResponseError,
)
from railseek.agents.llm_provider import (
    LangChainSeekerAgent,
    create_seeker_agent,
)
from railseek.agents.tools import (
    single_seeker_tools,
    consensus_tools,
    proposal_from_tool_call,
    proposal_from_turn,
    proposals_from_turn,
)
from railseek.agents.prompts import (
    build_seeker_system_prompt,
    build_discussion_context,
)

__all__ = [
    # Interface
    "SeekerAgent",
    "AgentTurn",
    "ToolCall",
    "InvalidResponseError",
    # Provider
    "LangChainSeekerAgent",
    "create_seeker_agent",
    # Tools
    "single_seeker_tools",
    "consensus_tools",
    "proposal_from_tool_call",
    "proposal_from_turn",
    "proposals_from_turn",
    # Prompts
    "build_seeker_system_prompt",
    "build_discussion_context",
]
