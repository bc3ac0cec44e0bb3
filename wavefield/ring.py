"""Triple-buffer ring of StateFields.

For step counter s the three slots play these roles:

    previous(s)     = slot s mod 3         state at t - dt
    current(s)      = slot (s + 1) mod 3   state at t
    write_target(s) = slot (s + 2) mod 3   state at t + dt, written this step

The write target never coincides with either input, and after `advance()` it
becomes the new `current`. Two buffers are not enough: the leapfrog step reads
two time levels while writing a third.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import torch

from wavefield.errors import UninitializedBufferError

__all__ = ["RingRoles", "StateBufferRing"]

RING_SIZE = 3


@dataclass(frozen=True)
class RingRoles:
    """Slot indices for one step."""

    previous: int
    current: int
    write_target: int

    @classmethod
    def at(cls, step: int) -> "RingRoles":
        s = int(step)
        return cls(
            previous=s % RING_SIZE,
            current=(s + 1) % RING_SIZE,
            write_target=(s + 2) % RING_SIZE,
        )


class StateBufferRing:
    """Owns three StateFields and the step counter that rotates their roles."""

    def __init__(self) -> None:
        self._buffers: list[Optional[torch.Tensor]] = [None] * RING_SIZE
        self._step = 0

    def install(self, fields: Sequence[torch.Tensor]) -> None:
        """Adopt three buffers (slot order as given) and reset the counter."""
        if len(fields) != RING_SIZE:
            raise ValueError(f"ring holds exactly {RING_SIZE} buffers, got {len(fields)}")
        self._buffers = list(fields)
        self._step = 0

    @property
    def installed(self) -> bool:
        return all(b is not None for b in self._buffers)

    @property
    def step(self) -> int:
        return self._step

    @property
    def buffers(self) -> tuple[torch.Tensor, ...]:
        self._require_installed()
        return tuple(self._buffers)  # type: ignore[arg-type]

    def roles(self) -> RingRoles:
        return RingRoles.at(self._step)

    def slot(self, index: int) -> torch.Tensor:
        self._require_installed()
        return self._buffers[index % RING_SIZE]  # type: ignore[return-value]

    def previous(self) -> torch.Tensor:
        return self.slot(self.roles().previous)

    def current(self) -> torch.Tensor:
        return self.slot(self.roles().current)

    def write_target(self) -> torch.Tensor:
        return self.slot(self.roles().write_target)

    def advance(self) -> None:
        self._step += 1

    def _require_installed(self) -> None:
        if not self.installed:
            raise UninitializedBufferError("state buffers have not been initialized")
