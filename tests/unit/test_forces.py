"""Tests for the linearized and geometric force models."""
from __future__ import annotations

import math

import numpy as np
import pytest

from oscillator_chain.simulation.forces import (
    GeometricTensionModel,
    LinearizedTensionModel,
    make_force_model,
)
from oscillator_chain.simulation.state import ChainState
from oscillator_chain.types.simulation import ForceModelKind, PhysicalParameters


def _random_state(n: int = 8, seed: int = 0) -> ChainState:
    rng = np.random.default_rng(seed)
    return ChainState(rng.normal(0.0, 1.0, n + 2), rng.normal(0.0, 1.0, n + 2))


class TestLinearizedTensionModel:
    def test_matches_scalar_formula(self):
        m, k, gamma, alpha = 2.0, 30.0, 0.7, 1.5
        model = LinearizedTensionModel(mass=m, spacing=1.0)
        params = PhysicalParameters(stiffness=k, damping=gamma, nonlinearity=alpha)
        state = _random_state()
        accel = model.accelerations(state, params)

        x, v = state.position, state.velocity
        for i in range(1, len(x) - 1):
            expected = (k * (x[i + 1] + x[i - 1] - 2 * x[i]) - gamma * v[i] - alpha * x[i] ** 2) / m
            assert accel[i] == pytest.approx(expected, rel=1e-12)

    def test_boundary_accelerations_zero(self):
        model = LinearizedTensionModel(1.0, 1.0)
        dx, dv = model.derivatives(_random_state(), PhysicalParameters(nonlinearity=2.0))
        assert dx[0] == dx[-1] == 0.0
        assert dv[0] == dv[-1] == 0.0

    def test_position_derivative_is_velocity(self):
        model = LinearizedTensionModel(1.0, 1.0)
        state = _random_state()
        dx, _ = model.derivatives(state, PhysicalParameters())
        np.testing.assert_array_equal(dx[1:-1], state.velocity[1:-1])

    def test_onsite_term_is_asymmetric(self):
        """With alpha > 0, -alpha*x^2 always pushes down, whatever the sign of x."""
        model = LinearizedTensionModel(1.0, 1.0)
        params = PhysicalParameters(stiffness=0.0, damping=0.0, nonlinearity=2.0)
        up = ChainState(np.array([0.0, 1.0, 0.0]), np.zeros(3))
        down = ChainState(np.array([0.0, -1.0, 0.0]), np.zeros(3))
        assert model.accelerations(up, params)[1] == pytest.approx(-2.0)
        assert model.accelerations(down, params)[1] == pytest.approx(-2.0)

    def test_potential_energy(self):
        model = LinearizedTensionModel(1.0, 1.0)
        params = PhysicalParameters(stiffness=4.0, nonlinearity=3.0)
        x = np.array([0.0, 1.0, 2.0, 0.0])
        # bonds: 1, 1, -2 -> 0.5*4*(1+1+4) = 12; onsite: (3/3)*(1+8) = 9
        assert model.potential_energy(x, params) == pytest.approx(21.0)


class TestGeometricTensionModel:
    def test_matches_scalar_formula(self):
        m, k, gamma, d = 1.5, 200.0, 0.3, 2.0
        model = GeometricTensionModel(mass=m, spacing=d)
        params = PhysicalParameters(stiffness=k, damping=gamma)
        state = _random_state(seed=3)
        noise = np.linspace(-1.0, 1.0, len(state.position))
        accel = model.accelerations(state, params, noise)

        x, v = state.position, state.velocity
        for i in range(1, len(x) - 1):
            dn = x[i + 1] - x[i]
            dp = x[i - 1] - x[i]
            Ln = math.sqrt(d * d + dn * dn)
            Lp = math.sqrt(d * d + dp * dp)
            F = k * (dn * (1 - d / Ln) + dp * (1 - d / Lp))
            expected = (F - gamma * v[i] + noise[i]) / m
            assert accel[i] == pytest.approx(expected, rel=1e-12, abs=1e-12)

    def test_flat_chain_has_no_tension(self):
        model = GeometricTensionModel(1.0, 10.0)
        state = ChainState(np.zeros(7), np.zeros(7))
        accel = model.accelerations(state, PhysicalParameters(stiffness=1e6, damping=0.0))
        assert np.all(accel == 0.0)

    def test_restoring_force_is_cubic_for_small_stretch(self):
        """Doubling a small displacement scales the force by about 8."""
        model = GeometricTensionModel(1.0, 50.0)
        params = PhysicalParameters(stiffness=1000.0, damping=0.0)
        small = ChainState(np.array([0.0, 0.01, 0.0]), np.zeros(3))
        double = ChainState(np.array([0.0, 0.02, 0.0]), np.zeros(3))
        a1 = model.accelerations(small, params)[1]
        a2 = model.accelerations(double, params)[1]
        assert a1 < 0.0
        assert a2 / a1 == pytest.approx(8.0, rel=1e-3)

    def test_potential_energy_zero_when_flat(self):
        model = GeometricTensionModel(1.0, 3.0)
        assert model.potential_energy(np.zeros(6), PhysicalParameters()) == 0.0

    def test_noise_disabled_at_zero_temperature(self):
        model = GeometricTensionModel(1.0, 1.0)
        rng = np.random.default_rng(0)
        assert model.sample_noise(rng, PhysicalParameters(temperature=0.0), 22) is None

    def test_noise_range(self):
        model = GeometricTensionModel(1.0, 1.0, noise_scale=5.0)
        rng = np.random.default_rng(0)
        noise = model.sample_noise(rng, PhysicalParameters(temperature=2.0), 10000)
        assert noise.shape == (10000,)
        # uniform on [-0.5, 0.5) * 5 * 2
        assert noise.min() >= -5.0
        assert noise.max() < 5.0
        assert abs(noise.mean()) < 0.2

    def test_noise_never_moves_boundaries(self):
        model = GeometricTensionModel(1.0, 1.0)
        state = ChainState(np.zeros(6), np.zeros(6))
        noise = np.full(6, 3.0)
        _, dv = model.derivatives(state, PhysicalParameters(), noise)
        assert dv[0] == dv[-1] == 0.0
        np.testing.assert_allclose(dv[1:-1], 3.0)


class TestForceModelFactory:
    def test_linearized(self):
        model = make_force_model(ForceModelKind.LINEARIZED, 1.0, 2.0)
        assert isinstance(model, LinearizedTensionModel)
        assert model.sample_noise(np.random.default_rng(0), PhysicalParameters(temperature=5.0), 4) is None

    def test_geometric_from_string(self):
        model = make_force_model("geometric", 1.0, 2.0, noise_scale=1.0)
        assert isinstance(model, GeometricTensionModel)
        assert model.noise_scale == 1.0
        assert model.d == 2.0

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Unknown force model"):
            make_force_model("quantum", 1.0, 1.0)

    @pytest.mark.parametrize("mass,spacing", [(0.0, 1.0), (-1.0, 1.0), (1.0, 0.0), (1.0, -2.0)])
    def test_rejects_non_positive_constants(self, mass, spacing):
        with pytest.raises(ValueError):
            make_force_model("linearized", mass, spacing)

    def test_kinetic_energy(self):
        model = LinearizedTensionModel(2.0, 1.0)
        assert model.kinetic_energy(np.array([0.0, 1.0, 2.0, 0.0])) == pytest.approx(5.0)
