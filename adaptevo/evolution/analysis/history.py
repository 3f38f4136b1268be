from __future__ import annotations

from collections import deque
from typing import Iterator

__all__ = ["DEFAULT_HISTORY_CAPACITY", "FitnessHistory"]

DEFAULT_HISTORY_CAPACITY: int = 1000


class FitnessHistory:
    """Bounded FIFO of best fitness per generation; oldest entries evict first."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._values: deque[float] = deque(maxlen=capacity)

    def append(self, value: float) -> None:
        self._values.append(float(value))

    def values(self) -> list[float]:
        return list(self._values)

    def deltas(self, last_n: int | None = None) -> list[float]:
        """Generation-to-generation differences, optionally only the last ``last_n``."""
        values = self.values()
        diffs = [b - a for a, b in zip(values, values[1:])]
        if last_n is not None:
            diffs = diffs[-last_n:] if last_n > 0 else []
        return diffs

    @property
    def first(self) -> float | None:
        return self._values[0] if self._values else None

    @property
    def last(self) -> float | None:
        return self._values[-1] if self._values else None

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"FitnessHistory(len={len(self)}, capacity={self.capacity})"
