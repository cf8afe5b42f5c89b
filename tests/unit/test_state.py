"""Tests for the chain state and triangular initial profile."""
from __future__ import annotations

import numpy as np
import pytest

from oscillator_chain.simulation.state import ChainState, triangular_profile


class TestTriangularProfile:
    def test_canonical_shape(self):
        """Amplitude 5, N=20, peak 10: apex at 5, linear flanks, pinned ends."""
        x = triangular_profile(20, 10, 5.0)
        assert x.shape == (22,)
        assert x[10] == 5.0
        assert x[1] == pytest.approx(0.5)
        assert x[20] == pytest.approx(5.0 / 11.0)
        assert abs(x[20] - 0.5) < 0.05
        assert x[0] == 0.0
        assert x[21] == 0.0

    def test_rising_and_falling_flanks(self):
        x = triangular_profile(20, 10, 5.0)
        i = np.arange(11)
        np.testing.assert_allclose(x[:11], i / 10 * 5.0)
        j = np.arange(11, 22)
        np.testing.assert_allclose(x[11:], (21 - j) / 11 * 5.0)

    def test_peak_at_edge(self):
        x = triangular_profile(5, 5, 2.0)
        assert x[5] == 2.0
        assert x[6] == 0.0
        assert np.all(np.diff(x[:6]) > 0)

    def test_negative_amplitude(self):
        x = triangular_profile(20, 10, -3.0)
        assert x[10] == -3.0
        assert np.all(x <= 0.0)

    def test_zero_amplitude(self):
        assert np.all(triangular_profile(20, 10, 0.0) == 0.0)

    def test_invalid_peak(self):
        with pytest.raises(ValueError):
            triangular_profile(20, 0, 1.0)
        with pytest.raises(ValueError):
            triangular_profile(20, 21, 1.0)


class TestChainState:
    def test_triangular_at_rest(self):
        state = ChainState.triangular(20, 10, 5.0)
        assert state.n_masses == 20
        assert np.all(state.velocity == 0.0)
        assert state.position[10] == 5.0

    def test_zeros(self):
        state = ChainState.zeros(8)
        assert state.position.shape == (10,)
        assert np.all(state.as_vector() == 0.0)

    def test_boundaries_forced_on_construction(self):
        state = ChainState(np.ones(6), np.ones(6))
        assert state.position[0] == state.position[-1] == 0.0
        assert state.velocity[0] == state.velocity[-1] == 0.0
        assert np.all(state.position[1:-1] == 1.0)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            ChainState(np.zeros(5), np.zeros(6))

    def test_needs_interior_mass(self):
        with pytest.raises(ValueError):
            ChainState(np.zeros(2), np.zeros(2))

    def test_reset_in_place(self):
        state = ChainState(np.full(22, 3.0), np.full(22, 1.0))
        pos_ref = state.position
        vel_ref = state.velocity
        state.reset(5.0, 10)
        assert state.position is pos_ref
        assert state.velocity is vel_ref
        np.testing.assert_array_equal(state.position, triangular_profile(20, 10, 5.0))
        assert np.all(state.velocity == 0.0)

    def test_copy_is_independent(self):
        state = ChainState.triangular(20, 10, 5.0)
        clone = state.copy()
        clone.position[5] = 99.0
        assert state.position[5] != 99.0

    def test_as_vector_layout(self):
        state = ChainState.triangular(4, 2, 1.0)
        vec = state.as_vector()
        assert vec.shape == (12,)
        np.testing.assert_array_equal(vec[:6], state.position)
        np.testing.assert_array_equal(vec[6:], state.velocity)
