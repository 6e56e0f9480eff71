"""
Pydantic Models for railseek.

This module defines the core data models shared by every layer:
- Station / Connection / CountryInfo: reference geography
- Question: an entry of the static question catalog
- Constraint variants: narrowing predicates produced by answered questions
- CooldownTracker / CoinBudget: the question-asking economy
- SeekerProposal / ConsensusResult: the dual-seeker negotiation
- TravelInfo / TravelLeg / QuestionRecord: turn bookkeeping

All values are immutable; transitions build new instances.
"""

from enum import Enum
from typing import Annotated, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class QuestionCategory(str, Enum):
    """Question categories; each has its own cooldown and coin cost."""
    RADAR = "radar"
    RELATIVE = "relative"
    PRECISION = "precision"


class TrainType(str, Enum):
    """Train service classes."""
    EXPRESS = "express"
    REGIONAL = "regional"
    LOCAL = "local"


class Beverage(str, Enum):
    """National drink classification used by the beer/wine question."""
    BEER = "beer"
    WINE = "wine"


class StationFact(str, Enum):
    """Yes/no facts a precision question can reveal about a station."""
    COASTAL = "coastal"
    MOUNTAINOUS = "mountainous"
    CAPITAL = "capital"
    OLYMPIC_HOST = "olympic_host"
    ANCIENT_CITY = "ancient_city"
    HAS_METRO = "has_metro"
    LANDLOCKED_COUNTRY = "landlocked_country"
    LARGE_COUNTRY = "large_country"
    F1_CIRCUIT = "f1_circuit"
    HUB = "hub"
    NAME_A_TO_M = "name_a_to_m"


class ThermometerFeature(str, Enum):
    """Geographic features measured by thermometer questions."""
    COAST = "coast"
    CAPITAL = "capital"
    MOUNTAINS = "mountains"


class ThermometerPolarity(str, Enum):
    """Whether the hider turned out nearer to or further from the feature."""
    NEARER = "nearer"
    FURTHER = "further"


class HalfPlaneAxis(str, Enum):
    LATITUDE = "latitude"
    LONGITUDE = "longitude"


class HalfPlaneDirection(str, Enum):
    ABOVE = "above"
    BELOW = "below"
    EAST = "east"
    WEST = "west"


class SeekerRole(str, Enum):
    """The two fixed seeker roles of consensus mode."""
    SEEKER_A = "seeker-a"
    SEEKER_B = "seeker-b"


class ActionType(str, Enum):
    """Actions a seeker can propose."""
    TRAVEL_TO = "travel_to"
    ASK_QUESTION = "ask_question"
    NONE = "none"


class ConsensusMethod(str, Enum):
    """How a consensus slot was decided."""
    AGREEMENT = "agreement"
    DISCUSSION = "discussion"
    TIEBREAKER = "tiebreaker"


class GameOutcome(str, Enum):
    """Terminal outcomes of a seeking phase."""
    SEEKER_WINS = "seeker_wins"
    HIDER_WINS = "hider_wins"


HUB_MIN_CONNECTIONS = 4

FACT_LABELS: Dict[StationFact, str] = {
    StationFact.COASTAL: "Coastal station",
    StationFact.MOUNTAINOUS: "Mountainous region",
    StationFact.CAPITAL: "Capital city",
    StationFact.OLYMPIC_HOST: "Olympic host city",
    StationFact.ANCIENT_CITY: "Ancient city (2000+ years)",
    StationFact.HAS_METRO: "City has metro",
    StationFact.LANDLOCKED_COUNTRY: "Landlocked country",
    StationFact.LARGE_COUNTRY: "Country area > 200,000 km²",
    StationFact.F1_CIRCUIT: "F1 circuit country",
    StationFact.HUB: "Hub station (4+ connections)",
    StationFact.NAME_A_TO_M: "Station name A–M",
}

FEATURE_NAMES: Dict[ThermometerFeature, str] = {
    ThermometerFeature.COAST: "coast",
    ThermometerFeature.CAPITAL: "capital",
    ThermometerFeature.MOUNTAINS: "mountains",
}


def yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


# --- Geography -------------------------------------------------------------


class CountryInfo(BaseModel):
    """Country-level facts shared by every station of a country."""
    model_config = ConfigDict(frozen=True)

    landlocked: bool = Field(..., description="Country has no sea coast")
    area_over_200k: bool = Field(..., description="Country area above 200,000 km²")
    beer_or_wine: Beverage = Field(..., description="Dominant national drink")
    has_f1_circuit: bool = Field(..., description="Country hosts a Formula 1 circuit")


class Station(BaseModel):
    """
    A train station with its reference facts.

    Categorical facts default to ``None`` (unknown); matching treats an
    unknown fact as failing every expectation, so records handed to the
    resolver must be complete.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique station identifier")
    name: str = Field(..., description="Display name")
    country: str = Field(..., description="Country name")
    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in degrees")
    connections: int = Field(0, ge=0, description="Number of direct connections")
    is_coastal: Optional[bool] = None
    is_mountainous: Optional[bool] = None
    is_capital: Optional[bool] = None
    has_hosted_olympics: Optional[bool] = None
    is_ancient: Optional[bool] = None
    has_metro: Optional[bool] = None
    landlocked_country: Optional[bool] = None
    large_country: Optional[bool] = None
    beer_or_wine: Optional[Beverage] = None
    has_f1_circuit: Optional[bool] = None

    def fact(self, fact: StationFact) -> Optional[bool]:
        """Return the value of a yes/no fact, or None when unknown."""
        if fact is StationFact.HUB:
            return self.connections >= HUB_MIN_CONNECTIONS
        if fact is StationFact.NAME_A_TO_M:
            if not self.name:
                return None
            return "A" <= self.name[0].upper() <= "M"
        return {
            StationFact.COASTAL: self.is_coastal,
            StationFact.MOUNTAINOUS: self.is_mountainous,
            StationFact.CAPITAL: self.is_capital,
            StationFact.OLYMPIC_HOST: self.has_hosted_olympics,
            StationFact.ANCIENT_CITY: self.is_ancient,
            StationFact.HAS_METRO: self.has_metro,
            StationFact.LANDLOCKED_COUNTRY: self.landlocked_country,
            StationFact.LARGE_COUNTRY: self.large_country,
            StationFact.F1_CIRCUIT: self.has_f1_circuit,
        }[fact]

    @property
    def is_complete(self) -> bool:
        """True when every categorical fact is populated."""
        return self.beer_or_wine is not None and all(
            self.fact(f) is not None for f in StationFact
        )


class Coordinates(BaseModel):
    """An explicit asking position, used for in-transit questions."""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    country: Optional[str] = None


SeekerPosition = Union[str, Coordinates]


class Connection(BaseModel):
    """An undirected rail link between two stations."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_id: str = Field(..., alias="from")
    to_id: str = Field(..., alias="to")
    distance_km: Optional[float] = Field(None, alias="distance", gt=0)


# --- Questions -------------------------------------------------------------


class Question(BaseModel):
    """A catalog question."""
    model_config = ConfigDict(frozen=True)

    id: str
    category: QuestionCategory
    text: str
    param: Optional[float] = Field(None, description="Numeric parameter, e.g. radar radius in km")


# --- Constraints -----------------------------------------------------------


class CircleConstraint(BaseModel):
    """Candidate must lie inside (or outside) a circle around a point."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["circle"] = "circle"
    center_lat: float = Field(..., ge=-90, le=90)
    center_lng: float = Field(..., ge=-180, le=180)
    radius_km: float = Field(..., gt=0)
    inside: bool

    @property
    def label(self) -> str:
        prefix = "Within" if self.inside else "Beyond"
        return f"{prefix} {self.radius_km:g}km"

    @property
    def value(self) -> str:
        return yes_no(self.inside)


class HalfPlaneConstraint(BaseModel):
    """Candidate coordinate must lie strictly on one side of a threshold."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["half-plane"] = "half-plane"
    axis: HalfPlaneAxis
    value: float
    direction: HalfPlaneDirection

    @model_validator(mode="after")
    def _direction_matches_axis(self) -> "HalfPlaneConstraint":
        lat_dirs = (HalfPlaneDirection.ABOVE, HalfPlaneDirection.BELOW)
        if (self.axis is HalfPlaneAxis.LATITUDE) != (self.direction in lat_dirs):
            raise ValueError(f"Direction {self.direction.value} does not apply to {self.axis.value}")
        return self

    @property
    def label(self) -> str:
        side = {
            HalfPlaneDirection.ABOVE: "north",
            HalfPlaneDirection.BELOW: "south",
            HalfPlaneDirection.EAST: "east",
            HalfPlaneDirection.WEST: "west",
        }[self.direction]
        return f"Hider is {side} of seeker"


class FactConstraint(BaseModel):
    """A station fact must equal the expected yes/no value."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["fact"] = "fact"
    fact: StationFact
    expected: bool

    @property
    def label(self) -> str:
        return FACT_LABELS[self.fact]

    @property
    def value(self) -> str:
        return yes_no(self.expected)


class SameCountryConstraint(BaseModel):
    """Candidate must (or must not) be in the given country."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["country"] = "country"
    country: str
    same: bool

    @property
    def label(self) -> str:
        return f"In {self.country}" if self.same else f"Not in {self.country}"

    @property
    def value(self) -> str:
        return yes_no(self.same)


class BeverageConstraint(BaseModel):
    """Candidate's country must be a beer (or wine) country."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["beverage"] = "beverage"
    beverage: Beverage

    @property
    def label(self) -> str:
        return f"{self.beverage.value.capitalize()} country"

    @property
    def value(self) -> str:
        return self.beverage.value.capitalize()


class ThermometerConstraint(BaseModel):
    """
    Candidate's distance to the nearest feature station compared against
    the asking seeker's own distance at the time of the question.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["thermometer"] = "thermometer"
    feature: ThermometerFeature
    polarity: ThermometerPolarity
    threshold_km: float = Field(..., ge=0)

    @property
    def label(self) -> str:
        relation = "nearer to" if self.polarity is ThermometerPolarity.NEARER else "further from"
        return f"Hider {relation} {FEATURE_NAMES[self.feature]}"

    @property
    def value(self) -> str:
        return f"{self.threshold_km:.1f}"


Constraint = Annotated[
    Union[
        CircleConstraint,
        HalfPlaneConstraint,
        FactConstraint,
        SameCountryConstraint,
        BeverageConstraint,
        ThermometerConstraint,
    ],
    Field(discriminator="kind"),
]


class EvaluationResult(BaseModel):
    """Answer to a question plus the constraint it implies, if any."""
    model_config = ConfigDict(frozen=True)

    answer: str
    constraint: Optional[Constraint] = None


# --- Economy ---------------------------------------------------------------


def _fresh_cooldowns() -> Dict[QuestionCategory, Optional[float]]:
    return {category: None for category in QuestionCategory}


class CooldownTracker(BaseModel):
    """Last asked game-minute per category (None = never asked)."""
    model_config = ConfigDict(frozen=True)

    last_asked: Dict[QuestionCategory, Optional[float]] = Field(default_factory=_fresh_cooldowns)


class CoinBudget(BaseModel):
    """Depletable coin pool gating question categories."""
    model_config = ConfigDict(frozen=True)

    total: int = Field(..., ge=0)
    spent: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _not_overspent(self) -> "CoinBudget":
        if self.spent > self.total:
            raise ValueError(f"Spent {self.spent} exceeds total {self.total}")
        return self

    @computed_field
    @property
    def remaining(self) -> int:
        return self.total - self.spent


# --- Consensus -------------------------------------------------------------


class SeekerProposal(BaseModel):
    """One seeker's proposed action for a slot."""
    model_config = ConfigDict(frozen=True)

    seeker_id: SeekerRole
    action_type: ActionType
    target: str = ""
    reasoning: str = ""
    failure: Optional[str] = Field(None, description="Set when the agent could not produce a proposal")

    @classmethod
    def no_action(cls, seeker_id: SeekerRole, reason: str) -> "SeekerProposal":
        """Explicit sentinel used when an agent fails or declines to propose."""
        return cls(
            seeker_id=seeker_id,
            action_type=ActionType.NONE,
            reasoning=reason,
            failure=reason,
        )


class ConsensusResult(BaseModel):
    """Outcome of a consensus slot."""
    model_config = ConfigDict(frozen=True)

    agreed: bool
    action: SeekerProposal
    method: ConsensusMethod


# --- Travel and logs -------------------------------------------------------


class TravelInfo(BaseModel):
    """Next departure and arrival for a single connection."""
    model_config = ConfigDict(frozen=True)

    train_type: TrainType
    departure_time: float
    arrival_time: float
    wait_minutes: float
    travel_minutes: float
    total_minutes: float


class TravelLeg(BaseModel):
    """A hop actually taken by the seeker."""
    model_config = ConfigDict(frozen=True)

    from_station_id: str
    station_id: str
    departure_time: Optional[float] = None
    arrival_time: Optional[float] = None
    train_type: Optional[TrainType] = None


class QuestionRecord(BaseModel):
    """An asked question and its answer."""
    model_config = ConfigDict(frozen=True)

    question_id: str
    question: str
    category: QuestionCategory
    answer: str
    asked_at: float
