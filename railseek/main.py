"""
railseek - Main Entry Point

Runs one seeking phase on the bundled European network with LLM-driven
seekers and logs every event until a seeker win or the time limit.

Usage:
    python -m railseek.main --hider HIDER_ID --seeker SEEKER_ID
        [--mode single|consensus] [--max-turns N] [--no-coins] [--log-level LEVEL]
    python -m railseek.main --list-stations
"""

import argparse
import asyncio
import dataclasses
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv

from railseek.config import GameConfig, get_config
from railseek.utils.logger import get_logger, set_level

# Load environment variables
load_dotenv()

logger = get_logger("railseek.main")


def list_stations() -> None:
    """Print the bundled network, one station per line."""
    from railseek.network.graph import StationGraph

    graph = StationGraph.load_bundled()
    for station in sorted(graph.stations(), key=lambda s: (s.country, s.name)):
        print(f"{station.id:<24} {station.name} ({station.country}), {station.connections} connections")


async def run_seeking_phase(
    hider: str,
    seeker: str,
    game: GameConfig,
    max_turns: Optional[int] = None,
) -> int:
    """
    Build the graph, schedule, agents and orchestrator, then play a phase.

    Returns:
        Process exit code
    """
    from railseek.agents.llm_provider import create_seeker_agent
    from railseek.data.schemas.models import SeekerRole
    from railseek.network.graph import StationGraph
    from railseek.network.schedule import TrainSchedule
    from railseek.seeking.orchestrator import TurnOrchestrator

    graph = StationGraph.load_bundled()
    for station_id in (hider, seeker):
        if not graph.has_station(station_id):
            logger.error(f"Unknown station: {station_id} (use --list-stations)")
            return 2

    roles = [SeekerRole.SEEKER_A]
    if game.seeker_mode == "consensus":
        roles.append(SeekerRole.SEEKER_B)
    agents = [create_seeker_agent(role) for role in roles]

    orchestrator = TurnOrchestrator(graph, TrainSchedule(graph), agents, game_config=game)
    state = orchestrator.new_phase(hider, seeker)

    logger.info(f"Seeking phase started: seeker at {graph.get_station(seeker).name}, mode {game.seeker_mode}")
    async for step in orchestrator.stream_phase(state, max_turns):
        state = step.state
        logger.debug(f"Event: {step.event.model_dump_json()}")

    if state.outcome is None:
        logger.info(f"No outcome after {max_turns or game.max_turns} turns")
        return 1

    logger.info(
        f"Outcome: {state.outcome.value} after {int(state.elapsed_minutes)} game-minutes, "
        f"{len(state.question_log)} questions, {len(state.travel_route)} hops"
    )
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    config = get_config()

    parser = argparse.ArgumentParser(
        description="railseek - LLM seekers hunting a hider across a European rail network"
    )
    parser.add_argument(
        "--hider",
        help="Station id where the hider is hiding"
    )
    parser.add_argument(
        "--seeker",
        help="Station id where the seeker starts"
    )
    parser.add_argument(
        "--mode",
        choices=["single", "consensus"],
        default=config.game.seeker_mode,
        help="One seeker, or two seekers negotiating each action"
    )
    parser.add_argument(
        "--max-turns",
        type=int,
        default=config.game.max_turns,
        help="Safety cap on the number of turns"
    )
    parser.add_argument(
        "--no-coins",
        action="store_true",
        help="Play without the coin budget"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ...)"
    )
    parser.add_argument(
        "--list-stations",
        action="store_true",
        help="Print the bundled station network and exit"
    )

    args = parser.parse_args(argv)

    if args.log_level:
        level = logging.getLevelName(args.log_level.upper())
        if not isinstance(level, int):
            parser.error(f"Unknown log level: {args.log_level}")
        # Loggers created later read the level from the environment
        os.environ["RAILSEEK_LOG_LEVEL"] = args.log_level.upper()
        set_level(level)

    if args.list_stations:
        list_stations()
        return 0

    if not args.hider or not args.seeker:
        parser.error("--hider and --seeker are required")

    game = dataclasses.replace(
        config.game,
        seeker_mode=args.mode,
        coins_enabled=config.game.coins_enabled and not args.no_coins,
    )
    return asyncio.run(run_seeking_phase(args.hider, args.seeker, game, args.max_turns))


if __name__ == "__main__":
    sys.exit(main())
