"""Simulation domain description.

A grid is fixed for the lifetime of an engine: there is no resize API, so the
derived spacings (and everything computed from them) never change.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass

from wavefield.errors import InvalidGridParametersError

__all__ = ["GridParameters"]


def _positive_int(name: str, value: object) -> int:
    # bool is an int subclass; a resolution of True is a caller bug.
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidGridParametersError(f"{name} must be an integer, got {value!r}")
    if int(value) <= 0:
        raise InvalidGridParametersError(f"{name} must be > 0, got {value!r}")
    return int(value)


def _positive_float(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidGridParametersError(f"{name} must be a real number, got {value!r}")
    v = float(value)
    if not math.isfinite(v) or v <= 0.0:
        raise InvalidGridParametersError(f"{name} must be finite and > 0, got {value!r}")
    return v


@dataclass(frozen=True)
class GridParameters:
    """Resolution, physical extents and time step of a 2D wave simulation."""

    resolution_x: int
    resolution_y: int
    length_x: float
    length_y: float
    dt: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "resolution_x", _positive_int("resolution_x", self.resolution_x))
        object.__setattr__(self, "resolution_y", _positive_int("resolution_y", self.resolution_y))
        object.__setattr__(self, "length_x", _positive_float("length_x", self.length_x))
        object.__setattr__(self, "length_y", _positive_float("length_y", self.length_y))
        object.__setattr__(self, "dt", _positive_float("dt", self.dt))

        # Spacings feed dx^2/dy^2 and dt^2/dx^2; reject anything that would
        # underflow to zero or overflow to inf there.
        for name, h in (("dx", self.dx), ("dy", self.dy)):
            h2 = h * h
            if not (h2 > 0.0 and math.isfinite(h2) and math.isfinite(1.0 / h2)):
                raise InvalidGridParametersError(f"degenerate spatial step {name}={h!r}")
        dt2 = self.dt * self.dt
        if not (dt2 > 0.0 and math.isfinite(dt2)):
            raise InvalidGridParametersError(f"degenerate time step dt={self.dt!r}")
        dx2 = self.dx * self.dx
        if not (math.isfinite(dx2 / (self.dy * self.dy)) and math.isfinite(dt2 / dx2)):
            raise InvalidGridParametersError(
                f"grid spacing ratios overflow (dx={self.dx!r}, dy={self.dy!r}, dt={self.dt!r})"
            )

    @classmethod
    def create(
        cls,
        resolution: tuple[int, int],
        length: tuple[float, float],
        dt: float,
    ) -> "GridParameters":
        """Build from `(nx, ny)` / `(lx, ly)` pairs."""
        if len(resolution) != 2 or len(length) != 2:
            raise InvalidGridParametersError(
                f"resolution and length must be pairs, got {resolution!r} and {length!r}"
            )
        return cls(
            resolution_x=resolution[0],
            resolution_y=resolution[1],
            length_x=length[0],
            length_y=length[1],
            dt=dt,
        )

    @property
    def dx(self) -> float:
        return self.length_x / self.resolution_x

    @property
    def dy(self) -> float:
        return self.length_y / self.resolution_y

    @property
    def resolution(self) -> tuple[int, int]:
        return (self.resolution_x, self.resolution_y)

    @property
    def field_shape(self) -> tuple[int, int, int]:
        """Shape of a StateField on this grid: (x, y, channel)."""
        return (self.resolution_x, self.resolution_y, 2)

    @property
    def num_points(self) -> int:
        return self.resolution_x * self.resolution_y
