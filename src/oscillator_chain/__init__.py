"""Oscillator chain: RK4 simulation of a damped spring-mass chain with fixed ends."""

__version__ = "0.1.0"

from oscillator_chain.simulation.chain import OscillatorChain
from oscillator_chain.simulation.driver import FrameDriver

__all__ = ["FrameDriver", "OscillatorChain", "__version__"]
