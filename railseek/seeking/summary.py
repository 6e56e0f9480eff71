"""
State Summary - the textual world view handed to seeker agents.

This is the only channel through which an agent perceives the game, so it
is built from seeker-visible data only and never names the hider's station.
"""

from typing import TYPE_CHECKING, List

from railseek.seeking.coins import can_afford, get_cost
from railseek.seeking.constraints import resolve_candidates
from railseek.seeking.cooldown import can_ask_category
from railseek.seeking.geo import compute_bearing
from railseek.seeking.questions import QUESTION_CATALOG
from railseek.seeking.state import SeekingState

if TYPE_CHECKING:
    from railseek.network.graph import StationGraph
    from railseek.network.schedule import ScheduleService

_COMPASS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


def compass_point(bearing: float) -> str:
    return _COMPASS[int((bearing + 22.5) // 45) % 8]


def available_question_lines(state: SeekingState) -> List[str]:
    """Unasked, off-cooldown and affordable questions, one line each."""
    lines = []
    for question in QUESTION_CATALOG:
        if question.id in state.asked_question_ids:
            continue
        if not can_ask_category(state.cooldown, question.category, state.current_minutes):
            continue
        if state.coins is not None and not can_afford(state.coins, question.category):
            continue
        lines.append(f'{question.id}: "{question.text}" (cost: {get_cost(question.category)} coins)')
    return lines


def build_state_summary(
    state: SeekingState, graph: "StationGraph", schedule: "ScheduleService"
) -> str:
    """
    Render the seeker-facing summary of ``state``.

    Args:
        state: Current seeking state
        graph: Station graph used for names and candidate resolution
        schedule: Timetable used for adjacent-station travel info

    Returns:
        Multi-paragraph text ending with the instruction to propose one action
    """
    here = graph.get_station(state.seeker_station_id)
    visited = state.visited | {here.id}

    candidates = resolve_candidates(graph, state.constraints, visited)
    candidate_text = ", ".join(f"{s.name} ({s.id})" for s in sorted(candidates, key=lambda s: s.name))

    visited_names = ", ".join(sorted(graph.get_station(sid).name for sid in visited))

    neighbor_lines = []
    for neighbor_id in graph.neighbors(here.id):
        neighbor = graph.get_station(neighbor_id)
        direction = compass_point(compute_bearing(here.lat, here.lng, neighbor.lat, neighbor.lng))
        tag = " [VISITED]" if neighbor_id in visited else ""
        travel = schedule.travel_info(here.id, neighbor_id, state.current_minutes)
        if travel is not None:
            neighbor_lines.append(
                f"{neighbor.name} ({neighbor_id}, {direction}): {travel.train_type.value}, "
                f"wait {round(travel.wait_minutes)}min, travel {round(travel.travel_minutes)}min{tag}"
            )
        else:
            neighbor_lines.append(f"{neighbor.name} ({neighbor_id}, {direction}){tag}")

    parts = [
        f"You are at {here.name} ({here.country}).",
        f"Game time: {int(state.current_minutes)} minutes.",
    ]
    if state.coins is not None:
        parts.append(f"Coins: {state.coins.remaining}/{state.coins.total}")
    if state.question_log:
        answers = "\n".join(f'"{record.question}" -> {record.answer}' for record in state.question_log)
        parts.append(f"Answers so far:\n{answers}")
    parts.extend([
        f"Candidate stations ({len(candidates)}): {candidate_text}",
        f"Visited stations ({len(visited)}): {visited_names}",
        "Adjacent stations:\n" + "\n".join(neighbor_lines),
        "Available questions:\n" + ("\n".join(available_question_lines(state)) or "(none)"),
        "Propose ONE action: either travel_to a station or ask_question. "
        "Do NOT revisit stations, the hider is not there.",
    ])
    return "\n\n".join(parts)
