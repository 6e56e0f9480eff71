"""
Prompt templates for seeker agents.
"""

from collections import defaultdict
from typing import TYPE_CHECKING, Dict, List, Optional

from railseek.data.schemas.models import SeekerProposal

if TYPE_CHECKING:
    from railseek.network.graph import StationGraph


def _network_overview(graph: "StationGraph") -> str:
    by_country: Dict[str, List[str]] = defaultdict(list)
    for station in graph.stations():
        by_country[station.country].append(station.name)
    lines = [
        f"- {country}: {', '.join(sorted(names))}"
        for country, names in sorted(by_country.items())
    ]
    return (
        f"The network has {len(graph)} stations across {len(by_country)} countries:\n"
        + "\n".join(lines)
    )


def build_seeker_system_prompt(
    time_limit_minutes: float,
    win_radius_km: float,
    consensus: bool = False,
    graph: Optional["StationGraph"] = None,
) -> str:
    """
    System prompt shared by every seeker.

    Args:
        time_limit_minutes: Seeking-phase time limit in game-minutes
        win_radius_km: Radius of the hiding zone
        consensus: Whether the seeker plays with a partner via propose_action
        graph: Optional network, listed in the prompt when given
    """
    hours = time_limit_minutes / 60
    if consensus:
        tools = (
            "## YOUR TOOLS\n"
            "- **propose_action** - Propose ONE action (travel_to a station or ask_question) "
            "with your reasoning. Your partner proposes too; if you disagree you will see "
            "their reasoning once and may switch. Unresolved disagreements alternate between partners."
        )
    else:
        tools = (
            "## YOUR TOOLS\n"
            "- **ask_question** - Ask a question about the hider's location.\n"
            "- **travel_to** - Move to an adjacent station. Several calls form a multi-hop route."
        )

    sections = [
        "You are a Seeker in a train-station hide-and-seek game across Europe.",
        "## GAME RULES\n"
        "- The Hider has chosen a train station somewhere in the network and is hiding there.\n"
        f"- You WIN if you travel to a station within {win_radius_km:g} km of the hider's station "
        "(effectively the same station).\n"
        f"- You LOSE if {hours:g} game-hours ({time_limit_minutes:g} game-minutes) pass without finding the hider.\n"
        "- You can only travel along rail connections between adjacent stations.",
        tools,
        "## QUESTIONS\n"
        "- **Radar** (radar-100, radar-200, radar-500): is the hider within X km of you? Cost 1 coin.\n"
        "- **Relative** (rel-north, rel-east, thermo-coast, thermo-capital, thermo-mountain): "
        "direction, or nearer to a feature than you are? Cost 2 coins.\n"
        "- **Precision** (prec-*): facts about the hider's station or country. Cost 3 coins.\n"
        "- Each category has a 30 game-minute cooldown. Each question can be asked only ONCE.\n"
        "- The prec-same-country answer is relative to YOUR current country when asked.\n"
        "- Thermometer answers compare the hider's distance to the nearest feature with YOUR distance "
        "at the moment you ask.",
        "## STRATEGY\n"
        "1. The candidate station list is the ONLY set of stations where the hider can be. Use it.\n"
        "2. Ask questions that split the candidate list roughly in half.\n"
        "3. Only travel toward candidate stations, never away from the candidate region.\n"
        "4. Do not ask a smaller radar when geometry already answers it.\n"
        "5. Coins do not regenerate. Move to a better position before spending them when that helps.",
    ]
    if graph is not None:
        sections.append("## STATION NETWORK\n" + _network_overview(graph))
    return "\n\n".join(sections)


def build_discussion_context(own: SeekerProposal, partner: SeekerProposal) -> str:
    """Context appended to a seeker's summary when the partners disagree."""
    return (
        f'Your partner proposed: {partner.action_type.value} "{partner.target}" '
        f'because: "{partner.reasoning}". '
        f'You proposed: {own.action_type.value} "{own.target}". '
        "Consider their reasoning and either stick with your proposal or change to theirs."
    )
