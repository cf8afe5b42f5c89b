"""Frame driver coupling the RK4 stepper to a rendering cadence."""
from __future__ import annotations

import logging
from typing import Callable

from oscillator_chain.simulation.chain import OscillatorChain
from oscillator_chain.simulation.phase_space import PhaseSpaceHistory
from oscillator_chain.types.simulation import PhysicalParameters
from oscillator_chain.types.trajectory import FrameSnapshot

logger = logging.getLogger(__name__)

ParameterSource = Callable[[], PhysicalParameters]
FrameListener = Callable[[FrameSnapshot], None]


class FrameDriver:
    """Runs a fixed number of RK4 substeps per rendered frame.

    Each call to ``advance``:
      1. reads the current physical parameters,
      2. steps the chain ``substeps`` times with those parameters,
      3. advances the simulated clock by substeps * dt * time_scale,
      4. samples the phase-space history and notifies frame listeners.

    Listeners only ever see the state after a whole frame has been applied.
    """

    def __init__(
        self,
        chain: OscillatorChain,
        parameter_source: ParameterSource | None = None,
        history: PhaseSpaceHistory | None = None,
    ) -> None:
        self.chain = chain
        self.config = chain.config
        self._parameter_source = parameter_source
        self.history = history if history is not None else PhaseSpaceHistory(
            self.config.history_capacity
        )
        self._listeners: list[FrameListener] = []
        self.frame = 0
        self.time = 0.0

    @property
    def parameters(self) -> PhysicalParameters:
        if self._parameter_source is not None:
            return self._parameter_source()
        return self.chain.parameters

    def update_parameters(self, parameters: PhysicalParameters) -> None:
        """Replace the held parameters; takes effect at the next frame."""
        self.chain.set_parameters(parameters)

    def add_listener(self, listener: FrameListener) -> None:
        self._listeners.append(listener)

    def advance(self, parameters: PhysicalParameters | None = None) -> FrameSnapshot:
        """Integrate one frame and return the resulting snapshot."""
        params = parameters if parameters is not None else self.parameters
        # Keep the chain's view in sync so energies use the frame's parameters
        self.chain.set_parameters(params)

        for _ in range(self.config.substeps):
            self.chain.step(params)

        self.frame += 1
        self.time += self.config.frame_duration * self.config.time_scale

        state = self.chain.state
        self.history.sample(state.position, state.velocity)
        snapshot = self.snapshot()
        for listener in self._listeners:
            listener(snapshot)
        return snapshot

    def run_frames(self, n_frames: int) -> FrameSnapshot:
        """Advance ``n_frames`` frames and return the last snapshot."""
        snapshot = self.snapshot()
        for i in range(n_frames):
            snapshot = self.advance()
            if (i + 1) % 100 == 0:
                logger.info(
                    f"  Frame {i + 1}/{n_frames}: t={self.time:.2f}, "
                    f"E={self.chain.total_energy:.4g}"
                )
        return snapshot

    def snapshot(self) -> FrameSnapshot:
        state = self.chain.state
        return FrameSnapshot(
            frame=self.frame,
            time=self.time,
            position=state.position.copy(),
            velocity=state.velocity.copy(),
        )

    def reset(self) -> FrameSnapshot:
        """Re-seed the chain from the current amplitude and clear history."""
        self.chain.reset(amplitude=self.parameters.amplitude)
        self.time = 0.0
        self.history.clear()
        logger.debug(f"Reset chain at frame {self.frame}")
        return self.snapshot()

    def _check_index(self, index: int) -> None:
        if not 1 <= index <= self.chain.N:
            raise ValueError(f"Mass index must be in 1..{self.chain.N}, got {index}")

    def track(self, index: int) -> None:
        self._check_index(index)
        self.history.track(index)

    def untrack(self, index: int) -> None:
        self._check_index(index)
        self.history.untrack(index)

    def set_tracking(self, index: int, enabled: bool) -> None:
        if enabled:
            self.track(index)
        else:
            self.untrack(index)
