"""
Data Schemas for railseek.

This module exports the core pydantic models and enums used throughout
the seeking engine.
"""

from railseek.data.schemas.models import (
    # Enums
    QuestionCategory,
    TrainType,
    Beverage,
    StationFact,
    ThermometerFeature,
    ThermometerPolarity,
    HalfPlaneAxis,
    HalfPlaneDirection,
    SeekerRole,
    ActionType,
    ConsensusMethod,
    GameOutcome,
    
    # Models
    CountryInfo,
    Station,
    Coordinates,
    SeekerPosition,
    Connection,
    Question,
    CircleConstraint,
    HalfPlaneConstraint,
    FactConstraint,
    SameCountryConstraint,
    BeverageConstraint,
    ThermometerConstraint,
    Constraint,
    EvaluationResult,
    CooldownTracker,
    CoinBudget,
    SeekerProposal,
    ConsensusResult,
    TravelInfo,
    TravelLeg,
    QuestionRecord,
)

__all__ = [
    # Enums
    'QuestionCategory',
    'TrainType',
    'Beverage',
    'StationFact',
    'ThermometerFeature',
    'ThermometerPolarity',
    'HalfPlaneAxis',
    'HalfPlaneDirection',
    'SeekerRole',
    'ActionType',
    'ConsensusMethod',
    'GameOutcome',
    
    # Models
    'CountryInfo',
    'Station',
    'Coordinates',
    'SeekerPosition',
    'Connection',
    'Question',
    'CircleConstraint',
    'HalfPlaneConstraint',
    'FactConstraint',
    'SameCountryConstraint',
    'BeverageConstraint',
    'ThermometerConstraint',
    'Constraint',
    'EvaluationResult',
    'CooldownTracker',
    'CoinBudget',
    'SeekerProposal',
    'ConsensusResult',
    'TravelInfo',
    'TravelLeg',
    'QuestionRecord',
]
