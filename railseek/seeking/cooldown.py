"""
Cooldown Tracker - per-category question throttling.

All functions are pure: ``record_question`` returns a new tracker.
"""

from railseek.data.schemas.models import CooldownTracker, QuestionCategory

COOLDOWN_MINUTES = 30


def create_cooldown_tracker() -> CooldownTracker:
    return CooldownTracker()


def can_ask_category(
    tracker: CooldownTracker, category: QuestionCategory, now: float
) -> bool:
    """A category is askable if never used, or once the cooldown window has elapsed."""
    last = tracker.last_asked.get(category)
    if last is None:
        return True
    return now - last >= COOLDOWN_MINUTES


def record_question(
    tracker: CooldownTracker, category: QuestionCategory, now: float
) -> CooldownTracker:
    last_asked = dict(tracker.last_asked)
    last_asked[category] = now
    return tracker.model_copy(update={"last_asked": last_asked})


def cooldown_remaining(
    tracker: CooldownTracker, category: QuestionCategory, now: float
) -> float:
    """Game-minutes until the category is askable again (0 when askable)."""
    last = tracker.last_asked.get(category)
    if last is None:
        return 0.0
    return max(0.0, COOLDOWN_MINUTES - (now - last))
