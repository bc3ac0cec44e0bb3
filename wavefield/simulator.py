"""Headless simulation runner: Gaussian pulse in a uniform medium."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Any, Dict, List

from wavefield.config import SimulationConfig
from wavefield.console import console
from wavefield.diagnostics import field_stats
from wavefield.engine import WaveEngine
from wavefield.fields import gaussian_pulse, initial_fields, uniform_medium
from wavefield.render import FieldRenderer


def run_simulation(config: SimulationConfig) -> Dict[str, Any]:
    """Step the configured pulse and write PNG frames.

    Returns final field statistics, the frame paths and the wall time.
    """
    if config.steps < 0:
        raise ValueError(f"steps must be >= 0, got {config.steps!r}")
    if config.frame_interval < 0:
        raise ValueError(f"frame_interval must be >= 0, got {config.frame_interval!r}")

    engine = WaveEngine.from_config(config)
    grid = engine.grid
    device = engine.device

    amplitude = gaussian_pulse(
        grid,
        center=config.pulse_center,
        width=config.pulse_width,
        amplitude=config.pulse_amplitude,
        device=device,
    )
    medium = uniform_medium(grid, config.velocity_term, device=device)
    engine.initialize(*initial_fields(grid, amplitude, medium, device=device))

    renderer = FieldRenderer(config.max_velocity_term)
    output_dir = Path(config.output_dir)
    frames: List[Path] = []

    def _frame() -> None:
        path = output_dir / f"frame_{engine.step_count:06d}.png"
        frames.append(renderer.save(engine.get_latest_field(), path))

    t0 = time.perf_counter()
    try:
        with console.spinner(f"Stepping {config.steps} steps..."):
            done = 0
            while done < config.steps:
                chunk = config.steps - done
                if config.frame_interval > 0:
                    chunk = min(chunk, config.frame_interval)
                engine.run(chunk)
                done += chunk
                if config.frame_interval > 0 and done < config.steps:
                    _frame()
        _frame()
        stats = field_stats(engine.get_latest_field())
    finally:
        engine.shutdown()
    elapsed = time.perf_counter() - t0

    if not stats.finite:
        console.error("Field contains non-finite values", detail="the run was unstable")
    else:
        console.success(
            f"{config.steps} steps in {elapsed:.2f}s",
            detail=f"max |u|={stats.max_abs_amplitude:.4g}, frames in {output_dir}",
        )

    return {
        "steps": int(config.steps),
        "elapsed_s": float(elapsed),
        "max_abs_amplitude": stats.max_abs_amplitude,
        "mean_amplitude": stats.mean_amplitude,
        "finite": stats.finite,
        "frames": frames,
    }
