"""Tests for the command-line runner and logging setup."""

import logging
from unittest.mock import AsyncMock

import pytest

from railseek.config import GameConfig
from railseek.main import main, run_seeking_phase
from railseek.utils.logger import get_logger, set_level


class TestMain:
    """Test argument handling of the runner."""

    def test_list_stations(self, capsys):
        assert main(["--list-stations"]) == 0
        out = capsys.readouterr().out
        assert "paris" in out
        assert "Bruxelles-Midi (Belgium)" in out

    def test_requires_both_stations(self):
        with pytest.raises(SystemExit):
            main(["--hider", "paris"])

    def test_rejects_unknown_log_level(self):
        with pytest.raises(SystemExit):
            main(["--log-level", "chatty", "--list-stations"])

    def test_runs_phase_with_cli_overrides(self, mocker):
        runner = mocker.patch("railseek.main.run_seeking_phase", new=AsyncMock(return_value=0))

        code = main([
            "--hider", "rome-termini", "--seeker", "paris",
            "--mode", "consensus", "--no-coins", "--max-turns", "7",
        ])

        assert code == 0
        hider, seeker, game, max_turns = runner.call_args.args
        assert (hider, seeker, max_turns) == ("rome-termini", "paris", 7)
        assert game.seeker_mode == "consensus"
        assert game.coins_enabled is False

    @pytest.mark.asyncio
    async def test_unknown_station_exit_code(self):
        assert await run_seeking_phase("atlantis", "paris", GameConfig(seeker_mode="single")) == 2


class TestLogger:
    """Test the logger factory."""

    def test_single_handler(self):
        first = get_logger("railseek.tests.handler")
        second = get_logger("railseek.tests.handler")
        assert first is second
        assert len(first.handlers) == 1

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("RAILSEEK_LOG_LEVEL", "warning")
        assert get_logger("railseek.tests.env").level == logging.WARNING

    def test_set_level(self):
        logger = get_logger("railseek.tests.relevel", level=logging.INFO)
        set_level(logging.DEBUG)
        try:
            assert logger.level == logging.DEBUG
        finally:
            set_level(logging.INFO)
