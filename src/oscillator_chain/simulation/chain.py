"""1D chain of point masses joined by springs between two fixed walls.

Displacements are transverse; the walls sit at index 0 and N+1. The chain is
advanced with a fixed-step RK4 scheme under one of two force models:

- linearized tension plus an on-site cubic potential (alpha)
- exact geometric tension plus optional thermal forcing (temperature)

Both include linear damping gamma*v.
"""
from __future__ import annotations

import logging

import numpy as np

from oscillator_chain.simulation.base import SimulationEnvironment
from oscillator_chain.simulation.forces import ForceModel, make_force_model
from oscillator_chain.simulation.integrator import rk4_step
from oscillator_chain.simulation.state import ChainState
from oscillator_chain.types.simulation import ChainConfig, PhysicalParameters

logger = logging.getLogger(__name__)

# Extent of the RK4 stability region on the imaginary axis
RK4_STABILITY_LIMIT = 2.0 * np.sqrt(2.0)


class OscillatorChain(SimulationEnvironment):
    """Damped chain of N masses with pinned ends.

    State arrays: position[0..N+1], velocity[0..N+1] with the boundary
    entries held at zero. The ``ChainState`` object is created once and
    updated in place, so references held by observers stay valid across
    steps and resets.

    Parameters (from ``PhysicalParameters``):
        stiffness: spring constant k (default 10000)
        damping: linear damping gamma (default 0.5)
        nonlinearity: on-site coefficient alpha (linearized model only)
        temperature: thermal forcing intensity T (geometric model only)
        amplitude: peak of the triangular initial profile (default 5)
    """

    def __init__(
        self,
        config: ChainConfig,
        parameters: PhysicalParameters | None = None,
        model: ForceModel | None = None,
    ) -> None:
        super().__init__(config, parameters)
        self.N = config.n_masses
        self.model = model if model is not None else make_force_model(
            config.force_model, config.mass, config.d, config.noise_scale
        )
        self._rng = np.random.default_rng(config.seed)
        self._state = ChainState.triangular(
            self.N, config.peak_index, self.parameters.amplitude
        )
        logger.debug(
            f"Created {self.model.kind.value} chain: N={self.N}, m={config.mass}, "
            f"d={config.d:.4f}, dt={config.dt}"
        )
        self.check_stability()

    def reset(self, amplitude: float | None = None, seed: int | None = None) -> np.ndarray:
        """Re-seed the chain in place with the triangular profile at rest.

        If ``seed`` is given the noise generator is re-seeded as well.
        """
        if amplitude is None:
            amplitude = self.parameters.amplitude
        self._step_count = 0
        self._state.reset(amplitude, self.config.peak_index)
        if seed is not None:
            self._rng = np.random.default_rng(seed)
        return self.observe()

    def set_parameters(self, parameters: PhysicalParameters) -> None:
        """Replace the held parameters, re-checking stability if k changed."""
        previous = self.parameters.stiffness
        super().set_parameters(parameters)
        if parameters.stiffness != previous:
            self.check_stability()

    def step(self, parameters: PhysicalParameters | None = None) -> np.ndarray:
        """Advance one timestep using RK4.

        Noise (if any) is sampled once here and shared by all four stages.
        """
        params = parameters if parameters is not None else self.parameters
        noise = self.model.sample_noise(self._rng, params, self.N + 2)
        new_state = rk4_step(self._state, self.model, params, self.config.dt, noise)
        self._state.position[:] = new_state.position
        self._state.velocity[:] = new_state.velocity
        self._step_count += 1
        return self.observe()

    def observe(self) -> np.ndarray:
        """Return current state [x_0,...,x_{N+1}, v_0,...,v_{N+1}]."""
        return self._state.as_vector()

    @property
    def kinetic_energy(self) -> float:
        """Total kinetic energy: sum of 0.5 * m * v_i^2."""
        return self.model.kinetic_energy(self._state.velocity)

    @property
    def potential_energy(self) -> float:
        """Potential energy of the springs and on-site terms."""
        return self.model.potential_energy(self._state.position, self.parameters)

    @property
    def total_energy(self) -> float:
        """Total mechanical energy (KE + PE)."""
        return self.kinetic_energy + self.potential_energy

    @property
    def omega_max(self) -> float:
        """Highest normal mode frequency of the linearized chain: 2*sqrt(k/m)."""
        return 2.0 * np.sqrt(self.parameters.stiffness / self.config.mass)

    def check_stability(self) -> bool:
        """Warn if omega_max * dt lies outside the RK4 stability interval."""
        ratio = self.omega_max * self.config.dt
        if ratio > RK4_STABILITY_LIMIT:
            logger.warning(
                f"Stiffness k={self.parameters.stiffness} gives omega_max*dt={ratio:.3f} "
                f"> {RK4_STABILITY_LIMIT:.3f}; RK4 will diverge for the fastest modes"
            )
            return False
        return True
