"""
Coin Budget - the depletable resource gating question categories.

``spend_coins`` is a hard contract: callers check ``can_afford`` first and
an overspend raises instead of clamping.
"""

from typing import Dict

from railseek.data.schemas.models import CoinBudget, QuestionCategory

STARTING_COINS = 10

QUESTION_COSTS: Dict[QuestionCategory, int] = {
    QuestionCategory.RADAR: 1,
    QuestionCategory.RELATIVE: 2,
    QuestionCategory.PRECISION: 3,
}


class InsufficientCoinsError(ValueError):
    """Raised when spending more coins than remain in a budget."""

    def __init__(self, category: QuestionCategory, cost: int, remaining: int):
        super().__init__(
            f"Cannot afford {category.value} question (cost={cost}, remaining={remaining})"
        )
        self.category = category
        self.cost = cost
        self.remaining = remaining


def create_coin_budget(total: int = STARTING_COINS) -> CoinBudget:
    return CoinBudget(total=total, spent=0)


def get_cost(category: QuestionCategory) -> int:
    return QUESTION_COSTS[category]


def can_afford(budget: CoinBudget, category: QuestionCategory) -> bool:
    return budget.remaining >= QUESTION_COSTS[category]


def spend_coins(budget: CoinBudget, category: QuestionCategory) -> CoinBudget:
    """
    Deduct the category's cost from a budget.

    Raises:
        InsufficientCoinsError: If the remaining coins do not cover the cost.
    """
    cost = QUESTION_COSTS[category]
    if budget.remaining < cost:
        raise InsufficientCoinsError(category, cost, budget.remaining)
    return budget.model_copy(update={"spent": budget.spent + cost})
