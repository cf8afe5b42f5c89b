"""Chain configuration, force model selection, and physical parameter types."""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)


class ForceModelKind(str, Enum):
    LINEARIZED = "linearized"
    GEOMETRIC = "geometric"


class ChainConfig(BaseModel):
    """Construction-time configuration of a chain.

    Everything here is fixed for the lifetime of a simulation. Invalid values
    raise ``pydantic.ValidationError`` (a ``ValueError``) instead of being
    clamped.
    """

    n_masses: int = Field(default=20, ge=1)
    mass: float = Field(default=1.0, gt=0.0)
    force_model: ForceModelKind = ForceModelKind.LINEARIZED
    display_width: float = 1400.0
    display_margin: float = 100.0
    spacing: float | None = Field(default=None, gt=0.0)
    peak_index: int = 10
    dt: float = Field(default=0.01, gt=0.0)
    substeps: int = Field(default=5, ge=1)
    time_scale: float = Field(default=1.0, gt=0.0)
    history_capacity: int = Field(default=500, ge=1)
    noise_scale: float = Field(default=5.0, ge=0.0)
    seed: int | None = 42

    @model_validator(mode="after")
    def _check_geometry(self) -> ChainConfig:
        if not 1 <= self.peak_index <= self.n_masses:
            raise ValueError(
                f"peak_index must be in 1..{self.n_masses}, got {self.peak_index}"
            )
        if self.spacing is None and self.display_width - self.display_margin <= 0:
            raise ValueError(
                "Derived spring spacing must be positive: "
                f"display_width={self.display_width}, display_margin={self.display_margin}"
            )
        return self

    @property
    def d(self) -> float:
        """Natural spring length (horizontal spacing between masses)."""
        if self.spacing is not None:
            return self.spacing
        return (self.display_width - self.display_margin) / (self.n_masses + 1)

    @property
    def frame_duration(self) -> float:
        """Simulated time integrated per rendered frame."""
        return self.substeps * self.dt


class PhysicalParameters(BaseModel):
    """Externally mutable scalars read once at the start of every frame.

    Negative stiffness, damping or temperature are clamped to zero at this
    boundary, both on construction and on attribute assignment; the force
    models assume they are already non-negative.
    """

    model_config = ConfigDict(validate_assignment=True)

    stiffness: float = 10000.0
    damping: float = 0.5
    nonlinearity: float = 0.0
    temperature: float = 0.0
    amplitude: float = 5.0

    @field_validator("stiffness", "damping", "temperature")
    @classmethod
    def _clamp_non_negative(cls, value: float, info: ValidationInfo) -> float:
        if value < 0.0:
            logger.warning(f"Clamping negative {info.field_name}={value} to 0.0")
            return 0.0
        return value
