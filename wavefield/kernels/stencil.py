"""Rotation-improved 9-point Laplacian stencil for the leapfrog wave step.

The stencil blends the 5-point cross Laplacian (weight 1 - gamma) with the
45-degree rotated diagonal Laplacian (weight gamma). With gamma = 1/3 and
dx == dy the blend is near-isotropic. The coefficients already carry the
dt^2/dx^2 factor, so a kernel only multiplies by the local velocity term.

Numerics:
- lambda = dx^2 / dy^2, eps = dt^2 / dx^2
- wt0 = eps * (-2 + 2*gamma - 2*lambda)
- wtx = eps * (1 - gamma)
- wty = eps * (lambda - gamma)
- wtd = eps * gamma / 2  (shared by diagonal and anti-diagonal)

wt0 + 2*wtx + 2*wty + 4*wtd == 0, so a spatially constant field has a zero
discrete Laplacian.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from wavefield.grid import GridParameters

__all__ = [
    "GAMMA",
    "StencilCoefficients",
    "stencil_coefficients",
]

GAMMA: float = 1.0 / 3.0

Vec2 = Tuple[float, float]


@dataclass(frozen=True)
class StencilCoefficients:
    """Per-step kernel constants: four weights and four normalized texel offsets."""

    wt0: float
    wtx: float
    wty: float
    wtd: float
    offset_x: Vec2
    offset_y: Vec2
    offset_diag: Vec2
    offset_anti_diag: Vec2

    @classmethod
    def from_grid(cls, grid: GridParameters) -> "StencilCoefficients":
        dx = float(grid.dx)
        dy = float(grid.dy)
        dt = float(grid.dt)
        gamma = GAMMA

        lam = (dx * dx) / (dy * dy)
        eps = (dt * dt) / (dx * dx)

        inv_nx = 1.0 / float(grid.resolution_x)
        inv_ny = 1.0 / float(grid.resolution_y)

        return cls(
            wt0=eps * (-2.0 + 2.0 * gamma - 2.0 * lam),
            wtx=eps * (1.0 - gamma),
            wty=eps * (lam - gamma),
            wtd=eps * gamma / 2.0,
            offset_x=(inv_nx, 0.0),
            offset_y=(0.0, inv_ny),
            offset_diag=(inv_nx, inv_ny),
            offset_anti_diag=(-inv_nx, inv_ny),
        )

    @property
    def weights(self) -> tuple[float, float, float, float]:
        return (self.wt0, self.wtx, self.wty, self.wtd)

    @property
    def offsets(self) -> tuple[Vec2, Vec2, Vec2, Vec2]:
        return (self.offset_x, self.offset_y, self.offset_diag, self.offset_anti_diag)

    def weight_sum(self) -> float:
        """Discrete Laplacian of a unit constant field (zero up to rounding)."""
        return self.wt0 + 2.0 * self.wtx + 2.0 * self.wty + 4.0 * self.wtd

    def texel_steps(self, resolution: tuple[int, int]) -> tuple[tuple[int, int], ...]:
        """Integer grid steps for each offset, in `offsets` order.

        Index-addressed kernels use these instead of normalized coordinates.
        """
        nx, ny = int(resolution[0]), int(resolution[1])
        return tuple((int(round(ox * nx)), int(round(oy * ny))) for ox, oy in self.offsets)

    def symbol(self, cos_x: float, cos_y: float) -> float:
        """Fourier symbol of the weighted stencil at (cos kx*dx, cos ky*dy)."""
        return (
            self.wt0
            + 2.0 * self.wtx * cos_x
            + 2.0 * self.wty * cos_y
            + 4.0 * self.wtd * cos_x * cos_y
        )

    def symbol_extremum(self) -> float:
        """Largest |symbol| over all wavenumbers.

        The symbol is bilinear in (cos_x, cos_y), so the extremes sit on the
        corners of [-1, 1]^2.
        """
        return max(abs(self.symbol(cx, cy)) for cx in (-1.0, 1.0) for cy in (-1.0, 1.0))

    def max_stable_velocity_term(self) -> float:
        """Largest velocity term (c^2) for which the leapfrog step is stable.

        [FORMULA] g^2 - (2 + c^2 S) g + 1 = 0 has |g| <= 1 iff -4 <= c^2 S <= 0
        """
        extremum = self.symbol_extremum()
        if extremum == 0.0:
            return math.inf
        return 4.0 / extremum


def stencil_coefficients(grid: GridParameters) -> StencilCoefficients:
    return StencilCoefficients.from_grid(grid)
