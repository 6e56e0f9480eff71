"""Unit tests for environment-driven configuration."""

import pytest

from railseek.config import GameConfig, LLMConfig, get_config, reload_config


class TestGameConfig:
    """Test seeking-rule configuration."""

    def test_defaults(self, monkeypatch):
        for name in ("SEEKER_MODE", "STARTING_COINS", "COINS_ENABLED", "SEEKING_TIME_LIMIT", "WIN_RADIUS_KM"):
            monkeypatch.delenv(name, raising=False)

        game = GameConfig()

        assert game.seeker_mode == "single"
        assert game.starting_coins == 10
        assert game.coins_enabled is True
        assert game.time_limit_minutes == 3000
        assert game.win_radius_km == 0.8

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SEEKER_MODE", "consensus")
        monkeypatch.setenv("COINS_ENABLED", "False")
        monkeypatch.setenv("MAX_ACTIONS_PER_TURN", "2")

        game = GameConfig()

        assert game.seeker_mode == "consensus"
        assert game.coins_enabled is False
        assert game.max_actions_per_turn == 2

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            GameConfig(seeker_mode="trio")

    def test_invalid_action_count(self):
        with pytest.raises(ValueError):
            GameConfig(max_actions_per_turn=0)


class TestLLMConfig:
    """Test LLM configuration."""

    def test_models_from_environment(self, monkeypatch):
        monkeypatch.setenv("SEEKER_A_MODEL", "vendor/a")
        monkeypatch.setenv("SEEKER_B_MODEL", "vendor/b")

        llm = LLMConfig()

        assert (llm.seeker_a_model, llm.seeker_b_model) == ("vendor/a", "vendor/b")


class TestReloadConfig:
    """Test the global configuration instance."""

    def test_reload_picks_up_changes(self, monkeypatch):
        monkeypatch.setenv("STARTING_COINS", "25")
        try:
            reloaded = reload_config()
            assert reloaded.game.starting_coins == 25
            assert get_config() is reloaded
        finally:
            monkeypatch.delenv("STARTING_COINS")
            reload_config()
