"""Shared test fixtures for oscillator-chain."""

import pytest

from oscillator_chain.types.simulation import ChainConfig, ForceModelKind, PhysicalParameters


@pytest.fixture
def tmp_output_dir(tmp_path):
    """Temporary directory for test outputs."""
    out = tmp_path / "output"
    out.mkdir()
    return out


@pytest.fixture
def linear_config():
    """Reference configuration: N=20, m=1, dt=0.01, 5 substeps."""
    return ChainConfig(force_model=ForceModelKind.LINEARIZED)


@pytest.fixture
def geometric_config():
    return ChainConfig(force_model=ForceModelKind.GEOMETRIC, seed=7)


@pytest.fixture
def reference_params():
    """k=10000, gamma=0.5, alpha=0, amplitude=5."""
    return PhysicalParameters(stiffness=10000.0, damping=0.5, nonlinearity=0.0, amplitude=5.0)
