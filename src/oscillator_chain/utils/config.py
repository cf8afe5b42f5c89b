"""Configuration loading and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from oscillator_chain.types.simulation import ChainConfig, PhysicalParameters

# Default config directory relative to package root
_PACKAGE_ROOT = Path(__file__).resolve().parent.parent.parent.parent
_CONFIGS_DIR = _PACKAGE_ROOT / "configs"


class OscillatorChainConfig(BaseModel):
    """Top-level configuration for a simulation session."""

    log_level: str = "INFO"
    n_frames: int = Field(default=600, ge=0)
    tracked: list[int] = Field(default_factory=list)
    chain: ChainConfig = Field(default_factory=ChainConfig)
    parameters: PhysicalParameters = Field(default_factory=PhysicalParameters)


def load_config(path: str | Path | None = None) -> OscillatorChainConfig:
    """Load the session config from a YAML file.

    Falls back to configs/default.yaml if no path is given, and to built-in
    defaults if the file does not exist.
    """
    if path is None:
        path = _CONFIGS_DIR / "default.yaml"
    path = Path(path)

    if not path.exists():
        return OscillatorChainConfig()

    with open(path) as f:
        raw: dict[str, Any] = yaml.safe_load(f) or {}

    return OscillatorChainConfig(**raw)


def save_config(config: OscillatorChainConfig, path: str | Path) -> Path:
    """Write a config to YAML so it can be reloaded with ``load_config``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(config.model_dump(mode="json"), f, sort_keys=False)
    return path
