"""Entry point: ``python -m spinlab``.

Supports two modes:
  - ``python -m spinlab``            → Launch FastAPI server with live frames
  - ``python -m spinlab cli``        → Headless run of N steps, logging the order parameter
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)

_MODELS = ["binary", "continuous", "multi_state", "ising", "rotator", "potts"]
_BOUNDARIES = ["periodic", "fixed_high", "fixed_low"]
_ALGORITHMS = ["local", "cluster", "metropolis", "wolff"]


def _add_physics_args(p: argparse.ArgumentParser, default_size: int) -> None:
    p.add_argument("--size", type=int, default=default_size, help="Lattice side length L")
    p.add_argument("--temperature", type=float, default=2.5)
    p.add_argument("--field", type=float, default=0.0)
    p.add_argument("--model", type=str, default="binary", choices=_MODELS)
    p.add_argument("--boundary", type=str, default="periodic", choices=_BOUNDARIES)
    p.add_argument("--algorithm", type=str, default="local", choices=_ALGORITHMS)
    p.add_argument("--states", type=int, default=3, help="Potts state count q (clamped to 2-10)")
    p.add_argument("--seed", type=int, default=42)
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="2D spin-lattice Monte Carlo simulator")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--steps-per-frame", type=int, default=1)
    srv.add_argument("--fps", type=float, default=30.0)
    srv.add_argument("--paused", action="store_true", help="Do not start stepping on launch")
    _add_physics_args(srv, default_size=300)

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless simulation")
    cli.add_argument("--sweeps", type=int, default=1000)
    cli.add_argument("--report-every", type=int, default=100)
    _add_physics_args(cli, default_size=64)

    return parser


def _config_from_args(args: argparse.Namespace, **extra):
    from spinlab.config import SimulationConfig

    return SimulationConfig(
        lattice_size=args.size,
        temperature=args.temperature,
        field=args.field,
        model_kind=args.model,
        boundary=args.boundary,
        algorithm=args.algorithm,
        potts_states=args.states,
        seed=args.seed,
        log_level=args.log_level,
        **extra,
    )


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from spinlab.api.app import create_app

    config = _config_from_args(
        args,
        steps_per_frame=args.steps_per_frame,
        target_fps=args.fps,
        autostart=not args.paused,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from spinlab.engine.clock import SimulationClock
    from spinlab.errors import SpinLabError
    from spinlab.utils.logging import setup_logging

    config = _config_from_args(args)
    setup_logging(config.log_level)

    try:
        clock = SimulationClock(config).initialize(
            config.lattice_size, config.temperature, config.model_kind, config.boundary, config.algorithm,
        )
        clock.set_field(config.field)
        clock.set_state_count(config.potts_states)
    except SpinLabError as exc:
        logger.error("Invalid configuration: %s", exc)
        raise SystemExit(2) from exc

    logger.info("=== Simulation started (seed=%d, sweeps=%d) ===", config.seed, args.sweeps)
    report_every = max(1, args.report_every)
    done = 0
    while done < args.sweeps:
        batch = min(report_every, args.sweeps - done)
        results = clock.advance(batch)
        done += batch
        frame = clock.latest_frame()
        accepted = sum(r.accepted for r in results)
        attempted = sum(r.attempted for r in results)
        logger.info(
            "Step %d: order=%+.4f acceptance=%.3f",
            done,
            frame.order_parameter if frame else float("nan"),
            accepted / attempted if attempted else 0.0,
        )

    stats = clock.history_stats()
    if stats:
        logger.info("=== Finished: mean=%+.4f std=%.4f over %d samples ===", stats.mean, stats.std, stats.count)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None:
        args = parser.parse_args(["serve"])
    if args.command == "serve":
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
