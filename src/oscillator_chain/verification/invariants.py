"""Invariant and energy checks for chain simulation runs."""

from __future__ import annotations

import logging

import numpy as np

from oscillator_chain.simulation.chain import OscillatorChain
from oscillator_chain.simulation.driver import FrameDriver
from oscillator_chain.simulation.phase_space import PhaseSpaceHistory
from oscillator_chain.types.simulation import ChainConfig, ForceModelKind, PhysicalParameters
from oscillator_chain.types.validation import CheckResult, ValidationReport

logger = logging.getLogger(__name__)


def check_fixed_boundaries(positions: np.ndarray, velocities: np.ndarray) -> CheckResult:
    """Check that the wall masses stay exactly at rest at zero.

    Args:
        positions: Array of shape (n_steps, N+2).
        velocities: Array of shape (n_steps, N+2).
    """
    edges = np.concatenate([
        positions[:, [0, -1]].ravel(), velocities[:, [0, -1]].ravel(),
    ])
    max_dev = float(np.max(np.abs(edges))) if edges.size else 0.0
    return CheckResult(
        name="fixed_boundaries",
        passed=max_dev == 0.0,
        value=max_dev,
        threshold=0.0,
        message=f"Max boundary deviation: {max_dev:.2e}",
    )


def check_finite(positions: np.ndarray, velocities: np.ndarray) -> CheckResult:
    """Check that no NaN or Inf appeared anywhere in the run."""
    n_bad = int(np.sum(~np.isfinite(positions)) + np.sum(~np.isfinite(velocities)))
    return CheckResult(
        name="finite_state",
        passed=n_bad == 0,
        value=float(n_bad),
        threshold=0.0,
        message=f"{n_bad} non-finite entries",
    )


def check_energy_dissipation(energies: np.ndarray, window: int = 100) -> CheckResult:
    """Check that energy at step n+window is strictly below energy at step n.

    Only meaningful for damped runs without forcing or on-site terms.
    """
    if len(energies) <= window:
        return CheckResult(
            name="energy_dissipation",
            passed=True,
            value=0.0,
            threshold=0.0,
            message="Run too short to compare windows.",
        )

    diffs = energies[window:] - energies[:-window]
    worst = float(np.max(diffs))
    return CheckResult(
        name="energy_dissipation",
        passed=worst < 0.0,
        value=worst,
        threshold=0.0,
        message=f"Largest energy change over {window} steps: {worst:.3e}",
    )


def check_history_bound(history: PhaseSpaceHistory) -> CheckResult:
    """Check that every tracked path length lies in [0, capacity]."""
    longest = max((len(history.get(i)) for i in history.tracked), default=0)
    return CheckResult(
        name="history_bound",
        passed=longest <= history.capacity,
        value=float(longest),
        threshold=float(history.capacity),
        message=f"Longest path: {longest} / {history.capacity}",
    )


def run_invariant_checks(
    config: ChainConfig,
    parameters: PhysicalParameters,
    n_steps: int = 1000,
) -> ValidationReport:
    """Run a chain for ``n_steps`` and check its structural invariants.

    Energy dissipation is only checked when the run is damped and the active
    force model has no energy source: no on-site term for the linearized
    model, no thermal forcing for the geometric one.
    """
    chain = OscillatorChain(config, parameters)
    traj = chain.run(n_steps)

    report = ValidationReport()
    report.checks.append(check_fixed_boundaries(traj.positions, traj.velocities))
    report.checks.append(check_finite(traj.positions, traj.velocities))

    # Only the active model's extra term can add energy
    if config.force_model is ForceModelKind.LINEARIZED:
        forced = parameters.nonlinearity != 0.0
    else:
        forced = parameters.temperature > 0.0
    if parameters.damping > 0.0 and not forced:
        energies = np.array([
            chain.model.kinetic_energy(v) + chain.model.potential_energy(x, parameters)
            for x, v in zip(traj.positions, traj.velocities)
        ])
        report.checks.append(check_energy_dissipation(energies))
    else:
        report.warnings.append("Energy dissipation not checked for forced or undamped run")

    # Drive the same configuration frame by frame with every mass tracked
    driver = FrameDriver(OscillatorChain(config, parameters))
    for index in range(1, config.n_masses + 1):
        driver.track(index)
    driver.run_frames(max(1, n_steps // config.substeps))
    report.checks.append(check_history_bound(driver.history))

    for check in report.checks:
        level = logging.INFO if check.passed else logging.WARNING
        logger.log(level, f"{check.name}: {'PASS' if check.passed else 'FAIL'} ({check.message})")
    return report
