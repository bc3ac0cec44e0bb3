"""Common interface for wave step kernels.

A kernel is the compute program of the engine: given the previous and current
StateFields and the stencil coefficients, it writes the next StateField. The
engine owns the buffers; a kernel owns only its program resources, which
`release()` frees.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

import torch

from wavefield.errors import EngineClosedError, FieldFormatError
from wavefield.kernels.runtime import resolve_device
from wavefield.kernels.stencil import StencilCoefficients

__all__ = ["AddressMode", "WaveStepKernel"]


class AddressMode(str, Enum):
    """How neighbours past the grid edge are resolved."""

    CLAMP = "clamp"
    WRAP = "wrap"


class WaveStepKernel(ABC):
    """One leapfrog step of the variable-speed wave equation over the full grid."""

    name: str = "abstract"

    def __init__(self, device: str | torch.device, address_mode: str | AddressMode = AddressMode.CLAMP) -> None:
        self.device = resolve_device(device)
        self.address_mode = AddressMode(address_mode)
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def dispatch(
        self,
        previous: torch.Tensor,
        current: torch.Tensor,
        out: torch.Tensor,
        coefficients: StencilCoefficients,
    ) -> None:
        """Write the step t + dt into `out` from `previous` (t - dt) and `current` (t)."""
        if self._released:
            raise EngineClosedError(f"{self.name} kernel was released")
        out_ptr = out.data_ptr()
        if out_ptr == previous.data_ptr() or out_ptr == current.data_ptr():
            raise FieldFormatError("kernel output aliases one of its inputs")
        steps = coefficients.texel_steps((int(out.shape[0]), int(out.shape[1])))
        self._launch(previous, current, out, coefficients, steps)

    @abstractmethod
    def _launch(
        self,
        previous: torch.Tensor,
        current: torch.Tensor,
        out: torch.Tensor,
        coefficients: StencilCoefficients,
        steps: tuple[tuple[int, int], ...],
    ) -> None:
        ...

    def release(self) -> None:
        self._released = True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(device={str(self.device)!r}, address_mode={self.address_mode.value!r})"
