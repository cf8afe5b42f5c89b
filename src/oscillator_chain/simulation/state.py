"""Chain state and the canonical triangular initial profile."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def triangular_profile(n_masses: int, peak_index: int, amplitude: float) -> np.ndarray:
    """Return the piecewise-linear displacement profile of length N+2.

    x_i = (i / p) * A                  for 0 <= i <= p
    x_i = ((N+1-i) / (N+1-p)) * A      for p < i <= N+1

    Both expressions vanish at the fixed ends i = 0 and i = N+1.
    """
    if not 1 <= peak_index <= n_masses:
        raise ValueError(f"peak_index must be in 1..{n_masses}, got {peak_index}")
    i = np.arange(n_masses + 2, dtype=np.float64)
    rising = (i / peak_index) * amplitude
    falling = ((n_masses + 1 - i) / (n_masses + 1 - peak_index)) * amplitude
    profile = np.where(i <= peak_index, rising, falling)
    profile[0] = 0.0
    profile[-1] = 0.0
    return profile


@dataclass
class ChainState:
    """Positions and velocities of N interior masses plus two fixed ends.

    Both arrays have length N+2; index 0 and N+1 are the pinned boundary
    masses and are held at exactly zero.
    """

    position: np.ndarray
    velocity: np.ndarray

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=np.float64)
        self.velocity = np.asarray(self.velocity, dtype=np.float64)
        if self.position.shape != self.velocity.shape or self.position.ndim != 1:
            raise ValueError(
                f"position and velocity must be 1D arrays of equal length, got "
                f"{self.position.shape} and {self.velocity.shape}"
            )
        if len(self.position) < 3:
            raise ValueError("A chain needs at least one interior mass")
        self.enforce_boundaries()

    @classmethod
    def zeros(cls, n_masses: int) -> ChainState:
        return cls(np.zeros(n_masses + 2), np.zeros(n_masses + 2))

    @classmethod
    def triangular(cls, n_masses: int, peak_index: int, amplitude: float) -> ChainState:
        """Canonical initial state: triangular profile at rest."""
        return cls(
            triangular_profile(n_masses, peak_index, amplitude),
            np.zeros(n_masses + 2),
        )

    @property
    def n_masses(self) -> int:
        return len(self.position) - 2

    def enforce_boundaries(self) -> None:
        self.position[0] = 0.0
        self.position[-1] = 0.0
        self.velocity[0] = 0.0
        self.velocity[-1] = 0.0

    def reset(self, amplitude: float, peak_index: int) -> None:
        """Re-seed this state in place with the triangular profile."""
        self.position[:] = triangular_profile(self.n_masses, peak_index, amplitude)
        self.velocity[:] = 0.0

    def copy(self) -> ChainState:
        return ChainState(self.position.copy(), self.velocity.copy())

    def as_vector(self) -> np.ndarray:
        """Flattened [x_0..x_{N+1}, v_0..v_{N+1}]."""
        return np.concatenate([self.position, self.velocity])
