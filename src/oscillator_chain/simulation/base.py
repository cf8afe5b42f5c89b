"""Abstract base class for chain simulation environments."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from oscillator_chain.simulation.state import ChainState
from oscillator_chain.types.simulation import ChainConfig, PhysicalParameters
from oscillator_chain.types.trajectory import TrajectoryData


class SimulationEnvironment(ABC):
    """Base class for chain simulations.

    Subclasses implement the dynamics via reset/step/observe.
    The base class provides trajectory collection and parameter management.
    """

    def __init__(
        self, config: ChainConfig, parameters: PhysicalParameters | None = None
    ) -> None:
        self.config = config
        self.parameters = parameters if parameters is not None else PhysicalParameters()
        self._step_count = 0
        self._state: ChainState = ChainState.zeros(config.n_masses)
        self._trajectory_positions: list[np.ndarray] = []
        self._trajectory_velocities: list[np.ndarray] = []
        self._trajectory_timestamps: list[float] = []

    @property
    def state(self) -> ChainState:
        return self._state

    @property
    def step_count(self) -> int:
        return self._step_count

    @abstractmethod
    def reset(self, amplitude: float | None = None, seed: int | None = None) -> np.ndarray:
        """Reset simulation to initial conditions.

        Returns the initial observation as a numpy array.
        """

    @abstractmethod
    def step(self, parameters: PhysicalParameters | None = None) -> np.ndarray:
        """Advance simulation by one timestep.

        Returns the new observation as a numpy array.
        """

    @abstractmethod
    def observe(self) -> np.ndarray:
        """Return the current observable state as a numpy array."""

    def set_parameters(self, parameters: PhysicalParameters) -> None:
        self.parameters = parameters

    def run(self, n_steps: int) -> TrajectoryData:
        """Reset, run for n_steps and collect a trajectory."""
        self.reset(seed=self.config.seed)
        self._trajectory_positions = []
        self._trajectory_velocities = []
        self._trajectory_timestamps = []
        self._record(0.0)

        for i in range(1, n_steps + 1):
            self.step()
            self._record(i * self.config.dt)

        return self.get_trajectory()

    def _record(self, t: float) -> None:
        self._trajectory_positions.append(self._state.position.copy())
        self._trajectory_velocities.append(self._state.velocity.copy())
        self._trajectory_timestamps.append(t)

    def get_trajectory(self) -> TrajectoryData:
        """Package collected states into a TrajectoryData object."""
        traj = TrajectoryData(
            force_model=self.config.force_model,
            parameters=self.parameters.model_dump(),
        )
        traj.positions = np.array(self._trajectory_positions)
        traj.velocities = np.array(self._trajectory_velocities)
        traj.timestamps = np.array(self._trajectory_timestamps)
        return traj
