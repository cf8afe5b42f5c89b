"""Core data types for the oscillator chain."""

from oscillator_chain.types.simulation import (
    ChainConfig,
    ForceModelKind,
    PhysicalParameters,
)
from oscillator_chain.types.trajectory import (
    FrameSnapshot,
    TrajectoryData,
)
from oscillator_chain.types.validation import (
    CheckResult,
    ValidationReport,
)

__all__ = [
    # simulation
    "ForceModelKind",
    "ChainConfig",
    "PhysicalParameters",
    # trajectory
    "TrajectoryData",
    "FrameSnapshot",
    # validation
    "CheckResult",
    "ValidationReport",
]
