#!/usr/bin/env python3
"""Wavefield Simulation Entrypoint

Steps a Gaussian pulse through a uniform medium and writes PNG frames of the
amplitude (blue positive, red negative, green velocity-term tint).

Usage:
    python run.py                         # Run with defaults
    python run.py --steps 1000            # Custom step count
    python run.py --resolution 512 256    # Non-square grid
    python run.py --backend torch         # Force the reference kernel
    python run.py --address-mode wrap     # Periodic edges
"""

from __future__ import annotations

import argparse
from pathlib import Path

from wavefield.config import SimulationConfig
from wavefield.console import console
from wavefield.kernels.registry import BACKENDS
from wavefield.kernels.runtime import get_device
from wavefield.simulator import run_simulation


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Wavefield Simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument("--resolution", type=int, nargs=2, default=(256, 256), metavar=("NX", "NY"),
                        help="Grid points in x and y (default: 256 256)")
    parser.add_argument("--length", type=float, nargs=2, default=(1.0, 1.0), metavar=("LX", "LY"),
                        help="Domain size in meters (default: 1 1)")
    parser.add_argument("--dt", type=float, default=1e-3, help="Time step in seconds (default: 1e-3)")
    parser.add_argument("--steps", type=int, default=500, help="Number of time steps")
    parser.add_argument("--device", type=str, default=None, help="Device (cuda, cpu)")
    parser.add_argument("--backend", type=str, default="auto", choices=BACKENDS, help="Kernel backend")
    parser.add_argument("--address-mode", type=str, default="clamp", choices=("clamp", "wrap"),
                        help="Edge addressing (default: clamp)")

    parser.add_argument("--pulse-center", type=float, nargs=2, default=None, metavar=("X", "Y"),
                        help="Pulse center in meters (default: domain center)")
    parser.add_argument("--pulse-width", type=float, default=0.03, help="Pulse width in meters")
    parser.add_argument("--pulse-amplitude", type=float, default=1.0, help="Pulse peak amplitude")
    parser.add_argument("--velocity-term", type=float, default=1.0, help="Wave speed squared of the medium")

    parser.add_argument("--max-velocity-term", type=float, default=1.0,
                        help="Normalization for the green velocity tint")
    parser.add_argument("--frame-interval", type=int, default=50,
                        help="Write a frame every N steps (0: final frame only)")
    parser.add_argument("--output-dir", type=str, default="artifacts/frames", help="Frame output directory")
    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    return SimulationConfig(
        resolution=(int(args.resolution[0]), int(args.resolution[1])),
        length=(float(args.length[0]), float(args.length[1])),
        dt=float(args.dt),
        steps=int(args.steps),
        device=args.device if args.device is not None else get_device(),
        backend=args.backend,
        address_mode=args.address_mode,
        pulse_center=(None if args.pulse_center is None else (float(args.pulse_center[0]), float(args.pulse_center[1]))),
        pulse_width=float(args.pulse_width),
        pulse_amplitude=float(args.pulse_amplitude),
        velocity_term=float(args.velocity_term),
        max_velocity_term=float(args.max_velocity_term),
        frame_interval=int(args.frame_interval),
        output_dir=Path(args.output_dir),
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = config_from_args(args)

    console.header(
        "Wavefield",
        grid=f"{config.resolution[0]}x{config.resolution[1]} over {config.length[0]}x{config.length[1]} m",
        dt=f"{config.dt:g} s",
        steps=str(config.steps),
        device=config.device,
        backend=config.backend,
    )

    result = run_simulation(config)
    print("\nFinal results:")
    print(f"  Max |u|: {result['max_abs_amplitude']:.4f}")
    print(f"  Mean u:  {result['mean_amplitude']:.4f}")
    print(f"  Frames:  {len(result['frames'])}")
    return 0 if result["finite"] else 1


if __name__ == "__main__":
    raise SystemExit(main())
