"""Fixed-step classical fourth-order Runge-Kutta stepper."""
from __future__ import annotations

import numpy as np

from oscillator_chain.simulation.forces import ForceModel
from oscillator_chain.simulation.state import ChainState
from oscillator_chain.types.simulation import PhysicalParameters


def _stage(state: ChainState, dx: np.ndarray, dv: np.ndarray, h: float) -> ChainState:
    """Intermediate state s + h*k with the boundaries pinned back to zero."""
    return ChainState(state.position + h * dx, state.velocity + h * dv)


def rk4_step(
    state: ChainState,
    model: ForceModel,
    params: PhysicalParameters,
    dt: float,
    noise: np.ndarray | None = None,
) -> ChainState:
    """Advance ``state`` by one increment ``dt`` and return the new state.

    The same ``noise`` vector is used by all four derivative evaluations so
    that one step sees a single stochastic realization. The input state is not
    modified.
    """
    k1x, k1v = model.derivatives(state, params, noise)
    k2x, k2v = model.derivatives(_stage(state, k1x, k1v, 0.5 * dt), params, noise)
    k3x, k3v = model.derivatives(_stage(state, k2x, k2v, 0.5 * dt), params, noise)
    k4x, k4v = model.derivatives(_stage(state, k3x, k3v, dt), params, noise)

    position = state.position.copy()
    velocity = state.velocity.copy()
    position[1:-1] += (dt / 6.0) * (k1x + 2 * k2x + 2 * k3x + k4x)[1:-1]
    velocity[1:-1] += (dt / 6.0) * (k1v + 2 * k2v + 2 * k3v + k4v)[1:-1]
    return ChainState(position, velocity)
