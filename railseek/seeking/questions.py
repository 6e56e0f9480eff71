"""
Question Catalog - the static set of questions a seeker may ask.

Radar questions carry their radius as ``param``. Thermometer questions
belong to the relative category and share its cooldown and cost.
"""

from typing import Dict, List, Optional, Tuple

from railseek.data.schemas.models import Question, QuestionCategory

QUESTION_CATALOG: Tuple[Question, ...] = (
    # Radar: "Is the hider within X km of you?"
    Question(id="radar-100", category=QuestionCategory.RADAR, text="Is the hider within 100km of you?", param=100),
    Question(id="radar-200", category=QuestionCategory.RADAR, text="Is the hider within 200km of you?", param=200),
    Question(id="radar-500", category=QuestionCategory.RADAR, text="Is the hider within 500km of you?", param=500),

    # Relative: direction and thermometer comparisons
    Question(id="rel-north", category=QuestionCategory.RELATIVE, text="Is the hider north of you?"),
    Question(id="rel-east", category=QuestionCategory.RELATIVE, text="Is the hider east of you?"),
    Question(
        id="thermo-coast",
        category=QuestionCategory.RELATIVE,
        text="Is the hider nearer to the coast than you are?",
    ),
    Question(
        id="thermo-capital",
        category=QuestionCategory.RELATIVE,
        text="Is the hider nearer to a capital city than you are?",
    ),
    Question(
        id="thermo-mountain",
        category=QuestionCategory.RELATIVE,
        text="Is the hider nearer to the mountains than you are?",
    ),

    # Precision: facts about the hider's station or its country
    Question(
        id="prec-same-country",
        category=QuestionCategory.PRECISION,
        text="Is the hider in the same country as you?",
    ),
    Question(
        id="prec-hub",
        category=QuestionCategory.PRECISION,
        text="Does the hider's station have 4 or more direct connections?",
    ),
    Question(
        id="prec-name-am",
        category=QuestionCategory.PRECISION,
        text="Does the hider's station name start with a letter A–M?",
    ),
    Question(id="prec-coastal", category=QuestionCategory.PRECISION, text="Is the hider's station on the coast?"),
    Question(
        id="prec-mountain",
        category=QuestionCategory.PRECISION,
        text="Is the hider's station in a mountainous region?",
    ),
    Question(id="prec-capital", category=QuestionCategory.PRECISION, text="Is the hider in a capital city?"),
    Question(id="prec-landlocked", category=QuestionCategory.PRECISION, text="Is the hider's country landlocked?"),
    Question(
        id="prec-country-area",
        category=QuestionCategory.PRECISION,
        text="Is the hider's country larger than 200,000 km²?",
    ),
    Question(
        id="prec-olympic",
        category=QuestionCategory.PRECISION,
        text="Has the hider's city hosted the Olympic Games?",
    ),
    Question(
        id="prec-beer-wine",
        category=QuestionCategory.PRECISION,
        text="Is the hider's country a beer country or a wine country?",
    ),
    Question(
        id="prec-ancient",
        category=QuestionCategory.PRECISION,
        text="Was the hider's city founded more than 2000 years ago?",
    ),
    Question(
        id="prec-f1",
        category=QuestionCategory.PRECISION,
        text="Does the hider's country host a Formula 1 circuit?",
    ),
    Question(id="prec-metro", category=QuestionCategory.PRECISION, text="Does the hider's city have a metro?"),
)

_BY_ID: Dict[str, Question] = {question.id: question for question in QUESTION_CATALOG}


def get_question(question_id: str) -> Optional[Question]:
    """Look up a catalog question by id."""
    return _BY_ID.get(question_id)


def questions_by_category(category: QuestionCategory) -> List[Question]:
    return [question for question in QUESTION_CATALOG if question.category == category]
