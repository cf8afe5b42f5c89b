"""CLI entry point for oscillator-chain.

Usage:
    oscillator-chain run [options]      Run the chain frame by frame and print a summary
    oscillator-chain check [options]    Run invariant checks and print a validation report
    oscillator-chain analyze            Measure amplitude dispersion and damping decay
    oscillator-chain version            Show version

Options for run/check:
    --config PATH          YAML session config (default: configs/default.yaml)
    --model NAME           linearized | geometric
    --frames N             Number of frames (run) or steps / substeps (check)
    --stiffness K          Spring constant k
    --damping G            Damping coefficient gamma
    --alpha A              On-site non-linearity (linearized model)
    --temperature T        Thermal forcing intensity (geometric model)
    --amplitude A          Peak of the initial triangular profile
    --track I [I ...]      Mass indices to record in phase space
    --seed S               Noise seed
"""
from __future__ import annotations

import argparse
import logging
import sys

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(0)

    command = sys.argv[1].lower()

    if command == "run":
        _run_simulation(sys.argv[2:])
    elif command == "check":
        _run_checks(sys.argv[2:])
    elif command == "analyze":
        _run_analysis()
    elif command in ("version", "--version", "-v"):
        from oscillator_chain import __version__
        print(f"oscillator-chain {__version__}")
    elif command in ("help", "--help", "-h"):
        print(__doc__)
    else:
        print(f"Unknown command: {command}")
        print(__doc__)
        sys.exit(1)


def _build_parser(prog: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=f"oscillator-chain {prog}")
    parser.add_argument("--config", default=None)
    parser.add_argument("--model", choices=["linearized", "geometric"], default=None)
    parser.add_argument("--frames", type=int, default=None)
    parser.add_argument("--stiffness", type=float, default=None)
    parser.add_argument("--damping", type=float, default=None)
    parser.add_argument("--alpha", type=float, default=None)
    parser.add_argument("--temperature", type=float, default=None)
    parser.add_argument("--amplitude", type=float, default=None)
    parser.add_argument("--track", type=int, nargs="*", default=None)
    parser.add_argument("--seed", type=int, default=None)
    return parser


def _load_session(prog: str, argv: list[str]):
    """Merge the YAML config with command-line overrides."""
    from oscillator_chain.utils.config import OscillatorChainConfig, load_config

    args = _build_parser(prog).parse_args(argv)
    # Configure handlers first so warnings raised while loading are formatted
    logging.basicConfig(level=logging.INFO, format=_LOG_FORMAT)
    config = load_config(args.config)

    chain_overrides = {}
    if args.model is not None:
        chain_overrides["force_model"] = args.model
    if args.seed is not None:
        chain_overrides["seed"] = args.seed

    param_overrides = {
        name: value
        for name, value in (
            ("stiffness", args.stiffness),
            ("damping", args.damping),
            ("nonlinearity", args.alpha),
            ("temperature", args.temperature),
            ("amplitude", args.amplitude),
        )
        if value is not None
    }

    raw = config.model_dump()
    raw["chain"].update(chain_overrides)
    raw["parameters"].update(param_overrides)
    if args.frames is not None:
        raw["n_frames"] = args.frames
    if args.track is not None:
        raw["tracked"] = args.track

    session = OscillatorChainConfig(**raw)
    logging.getLogger().setLevel(getattr(logging, session.log_level.upper(), logging.INFO))
    return session


def _run_simulation(argv: list[str]) -> None:
    """Drive the chain for the configured number of frames."""
    from oscillator_chain.simulation.chain import OscillatorChain
    from oscillator_chain.simulation.driver import FrameDriver

    try:
        session = _load_session("run", argv)
        chain = OscillatorChain(session.chain, session.parameters)
        driver = FrameDriver(chain)
        for index in session.tracked:
            driver.track(index)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)

    logger = logging.getLogger(__name__)
    logger.info(
        f"Running {session.n_frames} frames of the {session.chain.force_model.value} chain "
        f"(N={session.chain.n_masses}, k={session.parameters.stiffness}, "
        f"gamma={session.parameters.damping})"
    )
    E0 = chain.total_energy
    snapshot = driver.run_frames(session.n_frames)

    print(f"\nFrames: {snapshot.frame}  simulated time: {snapshot.time:.3f}")
    print(f"Energy: {E0:.6g} -> {chain.total_energy:.6g}")
    print("Positions:")
    print("  " + " ".join(f"{x:+.3f}" for x in snapshot.position))
    for index in driver.history.tracked:
        path = driver.history.get(index)
        last = path[-1] if path else (float("nan"), float("nan"))
        print(f"  mass {index}: {len(path)} samples, last (x, v) = ({last[0]:+.4f}, {last[1]:+.4f})")


def _run_checks(argv: list[str]) -> None:
    """Run invariant checks and exit non-zero on failure."""
    from oscillator_chain.verification.invariants import run_invariant_checks

    try:
        session = _load_session("check", argv)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        sys.exit(1)

    n_steps = max(1, session.n_frames) * session.chain.substeps
    report = run_invariant_checks(session.chain, session.parameters, n_steps=n_steps)

    print(f"\nValidation report ({n_steps} steps):")
    for check in report.checks:
        status = "PASS" if check.passed else "FAIL"
        print(f"  [{status}] {check.name}: {check.message}")
    for warning in report.warnings:
        print(f"  [WARN] {warning}")

    if not report.passed:
        sys.exit(1)


def _run_analysis() -> None:
    """Run the wave-response measurements."""
    logging.basicConfig(level=logging.INFO, format=_LOG_FORMAT)
    from oscillator_chain.analysis.chain_response import run_chain_response_analysis
    results = run_chain_response_analysis()

    print("\nAmplitude dispersion (geometric tension):")
    for amp, period in zip(results["dispersion"]["amplitude"], results["dispersion"]["period"]):
        print(f"  A={amp:.2f}: period={period:.4f}")
    print(f"Damping decay max relative error: {results['damping_decay_max_rel_error']:.4f}")


if __name__ == "__main__":
    main()
