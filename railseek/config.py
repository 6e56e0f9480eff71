"""
Configuration module for railseek.

Centralizes configuration management and environment variable handling
for the seeker agents, tracing and the seeking-phase rules.
"""

import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class LLMConfig:
    """LLM provider configuration for both seeker roles."""
    api_key: str = field(default_factory=lambda: os.getenv("OPENROUTER_API_KEY", ""))
    base_url: str = field(default_factory=lambda: os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1"))
    seeker_a_model: str = field(
        default_factory=lambda: os.getenv("SEEKER_A_MODEL", "anthropic/claude-sonnet-4")
    )
    seeker_b_model: str = field(
        default_factory=lambda: os.getenv("SEEKER_B_MODEL", "openai/gpt-4o")
    )
    temperature: float = field(default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.7")))
    timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
    )


@dataclass
class LangfuseConfig:
    """Langfuse observability configuration."""
    public_key: str = field(default_factory=lambda: os.getenv("LANGFUSE_PUBLIC_KEY", ""))
    secret_key: str = field(default_factory=lambda: os.getenv("LANGFUSE_SECRET_KEY", ""))
    host: str = field(default_factory=lambda: os.getenv("LANGFUSE_HOST", "http://localhost:3000"))
    enabled: bool = field(default_factory=lambda: _env_bool("LANGFUSE_ENABLED", "false"))


@dataclass
class GameConfig:
    """Seeking-phase rules."""
    seeker_mode: str = field(default_factory=lambda: os.getenv("SEEKER_MODE", "single"))
    starting_coins: int = field(default_factory=lambda: int(os.getenv("STARTING_COINS", "10")))
    coins_enabled: bool = field(default_factory=lambda: _env_bool("COINS_ENABLED", "true"))
    max_actions_per_turn: int = field(
        default_factory=lambda: int(os.getenv("MAX_ACTIONS_PER_TURN", "4"))
    )
    time_limit_minutes: float = field(
        default_factory=lambda: float(os.getenv("SEEKING_TIME_LIMIT", "3000"))  # 50 game-hours
    )
    win_radius_km: float = field(default_factory=lambda: float(os.getenv("WIN_RADIUS_KM", "0.8")))
    idle_advance_minutes: float = field(
        default_factory=lambda: float(os.getenv("IDLE_ADVANCE_MINUTES", "15"))
    )
    max_turns: int = field(default_factory=lambda: int(os.getenv("MAX_TURNS", "200")))

    def __post_init__(self) -> None:
        if self.seeker_mode not in ("single", "consensus"):
            raise ValueError(f"Unknown seeker mode: {self.seeker_mode!r}")
        if self.max_actions_per_turn < 1:
            raise ValueError("max_actions_per_turn must be at least 1")


@dataclass
class RailSeekConfig:
    """Main configuration class for railseek."""
    llm: LLMConfig = field(default_factory=LLMConfig)
    langfuse: LangfuseConfig = field(default_factory=LangfuseConfig)
    game: GameConfig = field(default_factory=GameConfig)


# Global configuration instance
config = RailSeekConfig()


def get_config() -> RailSeekConfig:
    """Get the global configuration instance."""
    return config


def reload_config() -> RailSeekConfig:
    """Reload configuration from environment variables."""
    global config
    load_dotenv(override=True)
    config = RailSeekConfig()
    return config
