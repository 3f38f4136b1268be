from __future__ import annotations

import math
from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from adaptevo.exceptions import FeedbackValidationError

__all__ = ["FITNESS_KEY", "Feedback"]

FITNESS_KEY: str = "fitness"


def _check_unit_interval(name: str, value: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Signal '{name}' must be a number, got {type(value).__name__}")
    value = float(value)
    if not math.isfinite(value) or not 0.0 <= value <= 1.0:
        raise ValueError(f"Signal '{name}' must be within [0, 1], got {value}")
    return value


class Feedback(BaseModel):
    """External feedback for one component: parameter signals plus optional fitness."""

    signals: dict[str, Any] = Field(
        default_factory=dict, description="Parameter name -> signal in [0, 1]"
    )
    fitness: float | None = Field(
        default=None, description="Observed fitness in [0, 1], blended into the genome"
    )

    @field_validator("signals")
    @classmethod
    def validate_signals(cls, v: dict[str, Any]) -> dict[str, float]:
        validated = {}
        for name, value in v.items():
            if not isinstance(name, str) or not name:
                raise ValueError(f"Signal names must be non-empty strings, got {name!r}")
            validated[name] = _check_unit_interval(name, value)
        return validated

    @field_validator("fitness", mode="before")
    @classmethod
    def validate_fitness(cls, v: Any) -> Any:
        if v is None:
            return v
        return _check_unit_interval(FITNESS_KEY, v)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Feedback:
        """Build feedback from a flat map; the ``"fitness"`` key is split out.

        Raises:
            FeedbackValidationError: On non-string names or out-of-range signals.
        """
        if not isinstance(data, Mapping):
            raise FeedbackValidationError(
                f"Feedback must be a mapping, got {type(data).__name__}"
            )
        signals = {k: v for k, v in data.items() if k != FITNESS_KEY}
        try:
            return cls(signals=signals, fitness=data.get(FITNESS_KEY))
        except PydanticValidationError as exc:
            raise FeedbackValidationError(f"Invalid feedback: {exc}") from exc

    @classmethod
    def coerce(cls, feedback: Feedback | Mapping[str, Any]) -> Feedback:
        if isinstance(feedback, Feedback):
            return feedback
        return cls.from_mapping(feedback)
