"""
Question Evaluator - answers catalog questions against the true hider
location and produces the constraint each answer implies.

Evaluation is a pure function of (question, hider station, asking
position). Missing data never raises: it yields the ``UNKNOWN_ANSWER``
sentinel with no constraint.
"""

from typing import TYPE_CHECKING, Dict, Optional, Tuple

from railseek.data.schemas.models import (
    Beverage,
    BeverageConstraint,
    CircleConstraint,
    Coordinates,
    EvaluationResult,
    FactConstraint,
    HalfPlaneAxis,
    HalfPlaneConstraint,
    HalfPlaneDirection,
    Question,
    SameCountryConstraint,
    SeekerPosition,
    Station,
    StationFact,
    ThermometerConstraint,
    ThermometerFeature,
    ThermometerPolarity,
    yes_no,
)
from railseek.seeking.geo import haversine_distance
from railseek.seeking.questions import get_question
from railseek.utils.logger import get_logger

if TYPE_CHECKING:
    from railseek.network.graph import StationGraph

logger = get_logger(__name__)

UNKNOWN_ANSWER = "Unknown"

PRECISION_FACTS: Dict[str, StationFact] = {
    "prec-hub": StationFact.HUB,
    "prec-name-am": StationFact.NAME_A_TO_M,
    "prec-coastal": StationFact.COASTAL,
    "prec-mountain": StationFact.MOUNTAINOUS,
    "prec-capital": StationFact.CAPITAL,
    "prec-landlocked": StationFact.LANDLOCKED_COUNTRY,
    "prec-country-area": StationFact.LARGE_COUNTRY,
    "prec-olympic": StationFact.OLYMPIC_HOST,
    "prec-ancient": StationFact.ANCIENT_CITY,
    "prec-f1": StationFact.F1_CIRCUIT,
    "prec-metro": StationFact.HAS_METRO,
}

THERMOMETER_FEATURES: Dict[str, ThermometerFeature] = {
    "thermo-coast": ThermometerFeature.COAST,
    "thermo-capital": ThermometerFeature.CAPITAL,
    "thermo-mountain": ThermometerFeature.MOUNTAINS,
}

_UNKNOWN = EvaluationResult(answer=UNKNOWN_ANSWER)


class QuestionEvaluator:
    """Evaluates catalog questions over a station graph."""

    def __init__(self, graph: "StationGraph"):
        self._graph = graph

    def evaluate_by_id(
        self, question_id: str, hider_station_id: str, seeker_position: SeekerPosition
    ) -> EvaluationResult:
        question = get_question(question_id)
        if question is None:
            logger.debug(f"Unknown question id: {question_id}")
            return _UNKNOWN
        return self.evaluate(question, hider_station_id, seeker_position)

    def evaluate(
        self, question: Question, hider_station_id: str, seeker_position: SeekerPosition
    ) -> EvaluationResult:
        """
        Answer ``question`` for a hider at ``hider_station_id``.

        Args:
            question: Catalog question
            hider_station_id: The hider's true station
            seeker_position: Station id of the asking seeker, or explicit
                coordinates when asked in transit

        Returns:
            EvaluationResult with the answer and the implied constraint
        """
        hider = self._station_or_none(hider_station_id)
        seeker = self._resolve_position(seeker_position)
        if hider is None or seeker is None:
            return _UNKNOWN

        seeker_lat, seeker_lng, seeker_country = seeker

        if question.id.startswith("radar-"):
            return self._radar(question, hider, seeker_lat, seeker_lng)
        if question.id == "rel-north":
            return self._half_plane(hider.lat, seeker_lat, HalfPlaneAxis.LATITUDE)
        if question.id == "rel-east":
            return self._half_plane(hider.lng, seeker_lng, HalfPlaneAxis.LONGITUDE)
        if question.id in THERMOMETER_FEATURES:
            return self._thermometer(
                THERMOMETER_FEATURES[question.id], hider, seeker_lat, seeker_lng
            )
        if question.id == "prec-same-country":
            return self._same_country(hider, seeker_country)
        if question.id == "prec-beer-wine":
            return self._beverage(hider)
        if question.id in PRECISION_FACTS:
            return self._fact(PRECISION_FACTS[question.id], hider)

        logger.debug(f"No evaluator for question {question.id}")
        return _UNKNOWN

    def _station_or_none(self, station_id: str) -> Optional[Station]:
        if not self._graph.has_station(station_id):
            return None
        return self._graph.get_station(station_id)

    def _resolve_position(
        self, position: SeekerPosition
    ) -> Optional[Tuple[float, float, Optional[str]]]:
        if isinstance(position, Coordinates):
            return position.lat, position.lng, position.country
        station = self._station_or_none(position)
        if station is None:
            return None
        return station.lat, station.lng, station.country

    @staticmethod
    def _radar(
        question: Question, hider: Station, seeker_lat: float, seeker_lng: float
    ) -> EvaluationResult:
        if question.param is None:
            return _UNKNOWN
        distance = haversine_distance(hider.lat, hider.lng, seeker_lat, seeker_lng)
        inside = distance <= question.param
        return EvaluationResult(
            answer=yes_no(inside),
            constraint=CircleConstraint(
                center_lat=seeker_lat,
                center_lng=seeker_lng,
                radius_km=question.param,
                inside=inside,
            ),
        )

    @staticmethod
    def _half_plane(hider_value: float, seeker_value: float, axis: HalfPlaneAxis) -> EvaluationResult:
        greater = hider_value > seeker_value
        if axis is HalfPlaneAxis.LATITUDE:
            direction = HalfPlaneDirection.ABOVE if greater else HalfPlaneDirection.BELOW
        else:
            direction = HalfPlaneDirection.EAST if greater else HalfPlaneDirection.WEST
        return EvaluationResult(
            answer=yes_no(greater),
            constraint=HalfPlaneConstraint(axis=axis, value=seeker_value, direction=direction),
        )

    def _thermometer(
        self, feature: ThermometerFeature, hider: Station, seeker_lat: float, seeker_lng: float
    ) -> EvaluationResult:
        if not self._graph.feature_stations(feature):
            return _UNKNOWN
        hider_distance = self._graph.nearest_feature_distance_km(hider.lat, hider.lng, feature)
        seeker_distance = self._graph.nearest_feature_distance_km(seeker_lat, seeker_lng, feature)
        nearer = hider_distance < seeker_distance
        return EvaluationResult(
            answer=yes_no(nearer),
            constraint=ThermometerConstraint(
                feature=feature,
                polarity=ThermometerPolarity.NEARER if nearer else ThermometerPolarity.FURTHER,
                threshold_km=seeker_distance,
            ),
        )

    @staticmethod
    def _same_country(hider: Station, seeker_country: Optional[str]) -> EvaluationResult:
        # In transit with no known country: answer No, learn nothing
        if not seeker_country:
            return EvaluationResult(answer="No")
        same = hider.country == seeker_country
        return EvaluationResult(
            answer=yes_no(same),
            constraint=SameCountryConstraint(country=seeker_country, same=same),
        )

    @staticmethod
    def _beverage(hider: Station) -> EvaluationResult:
        if hider.beer_or_wine is None:
            return _UNKNOWN
        beverage: Beverage = hider.beer_or_wine
        return EvaluationResult(
            answer=beverage.value.capitalize(),
            constraint=BeverageConstraint(beverage=beverage),
        )

    @staticmethod
    def _fact(fact: StationFact, hider: Station) -> EvaluationResult:
        value = hider.fact(fact)
        if value is None:
            return _UNKNOWN
        return EvaluationResult(
            answer=yes_no(value),
            constraint=FactConstraint(fact=fact, expected=value),
        )
