"""Trajectory and frame snapshot types."""

from __future__ import annotations

import numpy as np
from pydantic import BaseModel, Field

from oscillator_chain.types.simulation import ForceModelKind


class TrajectoryData(BaseModel):
    """A timestamped sequence of chain states."""

    model_config = {"arbitrary_types_allowed": True}

    force_model: ForceModelKind = ForceModelKind.LINEARIZED
    parameters: dict[str, float] = Field(default_factory=dict)

    # These hold the actual numerical data (not serialized via Pydantic)
    _positions: np.ndarray | None = None
    _velocities: np.ndarray | None = None
    _timestamps: np.ndarray | None = None

    @property
    def positions(self) -> np.ndarray | None:
        return self._positions

    @positions.setter
    def positions(self, value: np.ndarray) -> None:
        self._positions = value

    @property
    def velocities(self) -> np.ndarray | None:
        return self._velocities

    @velocities.setter
    def velocities(self, value: np.ndarray) -> None:
        self._velocities = value

    @property
    def timestamps(self) -> np.ndarray | None:
        return self._timestamps

    @timestamps.setter
    def timestamps(self, value: np.ndarray) -> None:
        self._timestamps = value

    @property
    def n_steps(self) -> int:
        if self._positions is not None:
            return len(self._positions)
        return 0


class FrameSnapshot(BaseModel):
    """State handed to rendering collaborators after a completed frame."""

    model_config = {"arbitrary_types_allowed": True}

    frame: int
    time: float
    position: np.ndarray
    velocity: np.ndarray
