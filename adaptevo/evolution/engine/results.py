"""Tagged results returned by engine operations.

Recoverable lookups never raise: they return an ``OperationFailure`` whose
``success`` is False. Successful calls return an outcome whose ``success`` is
True, so callers can branch on ``result.success`` uniformly.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field

from adaptevo.evolution.analysis.analyzer import FitnessMetrics
from adaptevo.evolution.engine.metrics import EngineMetrics

__all__ = [
    "AdaptOutcome",
    "AdaptResult",
    "AnalysisOutcome",
    "AnalyzeResult",
    "EngineStatus",
    "EvolveOutcome",
    "EvolveResult",
    "FailureReason",
    "OperationFailure",
    "RegisterOutcome",
    "RegisterResult",
]


class FailureReason(str, Enum):
    NOT_FOUND = "not_found"
    ALREADY_REGISTERED = "already_registered"


class OperationFailure(BaseModel):
    success: Literal[False] = False
    reason: FailureReason
    detail: str = ""


class RegisterOutcome(BaseModel):
    success: Literal[True] = True
    component_id: str
    parameters: dict[str, float]


class EvolveOutcome(BaseModel):
    success: Literal[True] = True
    component_id: str
    fitness: float = Field(description="Fitness of the component's current genome")
    generation: int = Field(description="Engine-wide generation counter after this step")
    generation_best: float = Field(description="Best fitness evaluated in this generation")
    improved: bool = Field(description="Whether the current genome was replaced")
    population_size: int


class AdaptOutcome(BaseModel):
    success: Literal[True] = True
    component_id: str
    parameters: dict[str, float]
    fitness: float
    age: int
    ignored: list[str] = Field(
        default_factory=list, description="Feedback names matching no parameter"
    )


class AnalysisOutcome(BaseModel):
    success: Literal[True] = True
    component_id: str
    metrics: FitnessMetrics


class EngineStatus(BaseModel):
    active_components: int
    populations: int
    strategies: list[str]
    generation: int
    evolution_rate: float
    metrics: EngineMetrics


RegisterResult = Union[RegisterOutcome, OperationFailure]
EvolveResult = Union[EvolveOutcome, OperationFailure]
AdaptResult = Union[AdaptOutcome, OperationFailure]
AnalyzeResult = Union[AnalysisOutcome, OperationFailure]
