"""Construction of StateFields and initial conditions.

A StateField is a contiguous fp32 tensor of shape (nx, ny, 2): axis 0 is x,
axis 1 is y, channel 0 the amplitude and channel 1 the velocity term (local
wave speed squared).
"""

from __future__ import annotations

from typing import Optional

import torch

from wavefield.errors import ShapeMismatchError
from wavefield.grid import GridParameters

__all__ = [
    "FIELD_DTYPE",
    "make_state_field",
    "empty_state_field",
    "uniform_medium",
    "cell_centers",
    "gaussian_pulse",
    "initial_fields",
]

FIELD_DTYPE = torch.float32


def make_state_field(amplitude: torch.Tensor, velocity_term: torch.Tensor) -> torch.Tensor:
    """Stack two (nx, ny) planes into a StateField."""
    if amplitude.dim() != 2 or amplitude.shape != velocity_term.shape:
        raise ShapeMismatchError(
            f"amplitude and velocity term must be matching 2D planes, got "
            f"{tuple(amplitude.shape)} and {tuple(velocity_term.shape)}"
        )
    return torch.stack(
        [amplitude.to(FIELD_DTYPE), velocity_term.to(device=amplitude.device, dtype=FIELD_DTYPE)],
        dim=-1,
    ).contiguous()


def empty_state_field(grid: GridParameters, *, device: str | torch.device = "cpu") -> torch.Tensor:
    return torch.zeros(grid.field_shape, device=device, dtype=FIELD_DTYPE)


def uniform_medium(
    grid: GridParameters,
    velocity_term: float = 1.0,
    *,
    device: str | torch.device = "cpu",
) -> torch.Tensor:
    return torch.full(grid.resolution, float(velocity_term), device=device, dtype=FIELD_DTYPE)


def cell_centers(grid: GridParameters, *, device: str | torch.device = "cpu") -> tuple[torch.Tensor, torch.Tensor]:
    """Physical coordinates of cell centers, each (nx, ny)."""
    xs = (torch.arange(grid.resolution_x, device=device, dtype=FIELD_DTYPE) + 0.5) * float(grid.dx)
    ys = (torch.arange(grid.resolution_y, device=device, dtype=FIELD_DTYPE) + 0.5) * float(grid.dy)
    X, Y = torch.meshgrid(xs, ys, indexing="ij")
    return X, Y


def gaussian_pulse(
    grid: GridParameters,
    *,
    center: Optional[tuple[float, float]] = None,
    width: float = 0.05,
    amplitude: float = 1.0,
    device: str | torch.device = "cpu",
) -> torch.Tensor:
    """Gaussian bump in physical units; centered in the domain by default."""
    if not width > 0.0:
        raise ValueError(f"pulse width must be > 0, got {width!r}")
    cx, cy = center if center is not None else (0.5 * grid.length_x, 0.5 * grid.length_y)
    X, Y = cell_centers(grid, device=device)
    r2 = (X - float(cx)) ** 2 + (Y - float(cy)) ** 2
    return float(amplitude) * torch.exp(-r2 / (2.0 * float(width) * float(width)))


def initial_fields(
    grid: GridParameters,
    amplitude: torch.Tensor,
    velocity_term: torch.Tensor,
    *,
    device: str | torch.device = "cpu",
) -> tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
    """Three independent StateFields for a start from rest.

    previous == current == amplitude (zero initial velocity); the third buffer
    is the first write target and starts as a copy.
    """
    if tuple(amplitude.shape) != grid.resolution:
        raise ShapeMismatchError(f"amplitude shape {tuple(amplitude.shape)} != grid {grid.resolution}")
    if tuple(velocity_term.shape) != grid.resolution:
        raise ShapeMismatchError(f"velocity term shape {tuple(velocity_term.shape)} != grid {grid.resolution}")
    base = make_state_field(amplitude.to(device), velocity_term.to(device))
    return base.clone(), base.clone(), base.clone()
