"""Bounded (position, velocity) history for selected masses."""
from __future__ import annotations

from collections import deque

import numpy as np


class PhaseSpaceHistory:
    """Trailing phase-space samples for a caller-selected set of masses.

    Each tracked index keeps at most ``capacity`` samples; once full, the
    oldest sample is evicted first.
    """

    def __init__(self, capacity: int = 500) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._paths: dict[int, deque[tuple[float, float]]] = {}

    def track(self, index: int) -> None:
        """Start recording ``index`` from an empty path (restarts if tracked)."""
        self._paths[index] = deque(maxlen=self.capacity)

    def untrack(self, index: int) -> None:
        self._paths.pop(index, None)

    def is_tracked(self, index: int) -> bool:
        return index in self._paths

    @property
    def tracked(self) -> list[int]:
        return sorted(self._paths)

    def sample(self, position: np.ndarray, velocity: np.ndarray) -> None:
        """Append the current (x_i, v_i) for every tracked index."""
        for index, path in self._paths.items():
            path.append((float(position[index]), float(velocity[index])))

    def clear(self) -> None:
        """Empty every path without untracking."""
        for path in self._paths.values():
            path.clear()

    def get(self, index: int) -> list[tuple[float, float]]:
        """Samples for ``index``, oldest first."""
        return list(self._paths[index])

    def as_array(self, index: int) -> np.ndarray:
        """Samples for ``index`` as an array of shape (n, 2)."""
        path = self._paths[index]
        if not path:
            return np.empty((0, 2))
        return np.array(path, dtype=np.float64)

    def __len__(self) -> int:
        return len(self._paths)
