"""Field statistics and the explicit-step stability bound."""

from __future__ import annotations

import math
from dataclasses import dataclass

import torch

from wavefield.kernels.stencil import StencilCoefficients

__all__ = ["FieldStats", "field_stats", "stability_margin"]


@dataclass(frozen=True)
class FieldStats:
    max_abs_amplitude: float
    mean_amplitude: float
    max_velocity_term: float
    finite: bool


def field_stats(field: torch.Tensor) -> FieldStats:
    amp = field[..., 0].detach()
    vel = field[..., 1].detach()
    if amp.numel() == 0:
        return FieldStats(0.0, 0.0, 0.0, True)
    return FieldStats(
        max_abs_amplitude=float(amp.abs().max().item()),
        mean_amplitude=float(amp.mean().item()),
        max_velocity_term=float(vel.max().item()),
        finite=bool(torch.isfinite(field).all().item()),
    )


def stability_margin(
    coefficients: StencilCoefficients,
    max_velocity_term: float,
    min_velocity_term: float = 0.0,
) -> float:
    """Ratio of the stable velocity-term bound to the largest one present.

    >= 1 means the leapfrog step is stable; < 1 means it will blow up. A
    negative velocity term anywhere turns the step into exponential growth
    (c^2 S > 0 gives a real root |g| > 1), so the margin is then 0.
    """
    bound = coefficients.max_stable_velocity_term()
    if math.isinf(bound):
        return math.inf
    if float(min_velocity_term) < 0.0:
        return 0.0
    if not max_velocity_term > 0.0:
        return math.inf
    return bound / float(max_velocity_term)
