"""Force models for a fixed-end spring-mass chain.

Two interchangeable variants share the same derivative contract:

    d(position)/dt = velocity
    d(velocity)/dt = acceleration

with the derivative of both boundary masses identically zero.

Linearized tension with an on-site cubic potential:
    m * a_i = k*(x_{i+1} + x_{i-1} - 2*x_i) - gamma*v_i - alpha*x_i^2

Exact geometric tension with optional Langevin-style forcing:
    dn = x_{i+1} - x_i,  dp = x_{i-1} - x_i
    L_n = sqrt(d^2 + dn^2),  L_p = sqrt(d^2 + dp^2)
    m * a_i = k*(dn*(1 - d/L_n) + dp*(1 - d/L_p)) - gamma*v_i + xi_i
"""
from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from oscillator_chain.simulation.state import ChainState
from oscillator_chain.types.simulation import ForceModelKind, PhysicalParameters


class ForceModel(ABC):
    """Maps a chain state to per-mass accelerations.

    Subclasses implement the interior spring force and its potential energy.
    The base class handles damping, boundaries and the derivative packing.
    """

    kind: ForceModelKind

    def __init__(self, mass: float, spacing: float) -> None:
        if mass <= 0:
            raise ValueError(f"Mass must be positive, got {mass}")
        if spacing <= 0:
            raise ValueError(f"Spacing must be positive, got {spacing}")
        self.m = float(mass)
        self.d = float(spacing)

    @abstractmethod
    def spring_force(self, x: np.ndarray, params: PhysicalParameters) -> np.ndarray:
        """Net force on each interior mass from springs and on-site terms.

        Args:
            x: displacement array of shape (N+2,), boundaries included.
            params: physical parameters for the current frame.

        Returns:
            Force array of shape (N,).
        """

    @abstractmethod
    def potential_energy(self, x: np.ndarray, params: PhysicalParameters) -> float:
        """Potential energy stored in the chain for displacement x."""

    def sample_noise(
        self, rng: np.random.Generator, params: PhysicalParameters, size: int
    ) -> np.ndarray | None:
        """Draw the per-step forcing vector, or None for a deterministic model."""
        return None

    def accelerations(
        self,
        state: ChainState,
        params: PhysicalParameters,
        noise: np.ndarray | None = None,
    ) -> np.ndarray:
        """Accelerations of all N+2 masses; boundary entries are zero."""
        x = state.position
        v = state.velocity
        force = self.spring_force(x, params) - params.damping * v[1:-1]
        if noise is not None:
            force = force + noise[1:-1]
        accel = np.zeros_like(x)
        accel[1:-1] = force / self.m
        return accel

    def derivatives(
        self,
        state: ChainState,
        params: PhysicalParameters,
        noise: np.ndarray | None = None,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Return (dx/dt, dv/dt), each of shape (N+2,)."""
        dx = state.velocity.copy()
        dx[0] = 0.0
        dx[-1] = 0.0
        dv = self.accelerations(state, params, noise)
        assert np.all(np.isfinite(dx)) and np.all(np.isfinite(dv)), (
            "Non-finite derivative: parameters outside the validated range"
        )
        return dx, dv

    def kinetic_energy(self, v: np.ndarray) -> float:
        return float(0.5 * self.m * np.sum(v**2))

    def total_energy(self, state: ChainState, params: PhysicalParameters) -> float:
        return self.kinetic_energy(state.velocity) + self.potential_energy(state.position, params)


class LinearizedTensionModel(ForceModel):
    """Small-displacement spring tension plus on-site cubic restoring force.

    The on-site potential V(x) = alpha*x^3/3 gives the quadratic force
    -alpha*x^2, which is asymmetric: for alpha > 0 the well is
    stiffer for positive displacement and overturns for negative.
    """

    kind = ForceModelKind.LINEARIZED

    def spring_force(self, x: np.ndarray, params: PhysicalParameters) -> np.ndarray:
        laplacian = x[2:] + x[:-2] - 2.0 * x[1:-1]
        return params.stiffness * laplacian - params.nonlinearity * x[1:-1] ** 2

    def potential_energy(self, x: np.ndarray, params: PhysicalParameters) -> float:
        # N+1 bond stretches including the two springs attached to the walls
        delta = np.diff(x)
        elastic = 0.5 * params.stiffness * np.sum(delta**2)
        onsite = (params.nonlinearity / 3.0) * np.sum(x[1:-1] ** 3)
        return float(elastic + onsite)


class GeometricTensionModel(ForceModel):
    """Exact tension of springs with natural length d and transverse motion.

    Tension depends on the instantaneous spring length, so large-amplitude
    waves travel faster than small ones. With temperature T > 0 an additive
    random force is applied, drawn once per integration step.
    """

    kind = ForceModelKind.GEOMETRIC

    def __init__(self, mass: float, spacing: float, noise_scale: float = 5.0) -> None:
        super().__init__(mass, spacing)
        self.noise_scale = noise_scale

    def spring_force(self, x: np.ndarray, params: PhysicalParameters) -> np.ndarray:
        d = self.d
        dn = x[2:] - x[1:-1]
        dp = x[:-2] - x[1:-1]
        # L >= d > 0, so the division is always safe
        L_next = np.sqrt(d * d + dn * dn)
        L_prev = np.sqrt(d * d + dp * dp)
        return params.stiffness * (dn * (1.0 - d / L_next) + dp * (1.0 - d / L_prev))

    def potential_energy(self, x: np.ndarray, params: PhysicalParameters) -> float:
        lengths = np.sqrt(self.d**2 + np.diff(x) ** 2)
        return float(0.5 * params.stiffness * np.sum((lengths - self.d) ** 2))

    def sample_noise(
        self, rng: np.random.Generator, params: PhysicalParameters, size: int
    ) -> np.ndarray | None:
        """Uniform forcing on [-0.5, 0.5) * noise_scale * T, or None when T = 0."""
        if params.temperature <= 0.0 or self.noise_scale == 0.0:
            return None
        return (rng.random(size) - 0.5) * (self.noise_scale * params.temperature)


def make_force_model(
    kind: ForceModelKind | str,
    mass: float,
    spacing: float,
    noise_scale: float = 5.0,
) -> ForceModel:
    """Build the force model variant selected by ``kind``."""
    try:
        kind = ForceModelKind(kind)
    except ValueError:
        raise ValueError(
            f"Unknown force model {kind!r}; expected one of "
            f"{[k.value for k in ForceModelKind]}"
        ) from None

    if kind is ForceModelKind.LINEARIZED:
        return LinearizedTensionModel(mass, spacing)
    return GeometricTensionModel(mass, spacing, noise_scale=noise_scale)
