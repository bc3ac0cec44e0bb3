"""Wave engine: triple-buffered leapfrog stepping of a 2D scalar wave field.

Lifecycle:
    UNINITIALIZED --initialize--> READY --timestep--> READY --shutdown--> SHUTDOWN

The engine owns the buffer ring, the step counter and the cached stencil
coefficients. The kernel (and through it the device) is passed in or built
explicitly by the registry; nothing is fetched from ambient globals, so
several engines can coexist in one process.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

import torch

from wavefield.console import console
from wavefield.diagnostics import stability_margin
from wavefield.errors import (
    EngineClosedError,
    FieldFormatError,
    ShapeMismatchError,
    UninitializedBufferError,
)
from wavefield.fields import FIELD_DTYPE
from wavefield.grid import GridParameters
from wavefield.kernels.base import AddressMode, WaveStepKernel
from wavefield.kernels.registry import create_kernel
from wavefield.kernels.runtime import resolve_device
from wavefield.kernels.stencil import StencilCoefficients
from wavefield.ring import StateBufferRing

if TYPE_CHECKING:
    from wavefield.config import SimulationConfig

__all__ = ["EngineState", "WaveEngine"]


class EngineState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    SHUTDOWN = "shutdown"


class WaveEngine:
    """Explicit time stepper for u_tt = c^2(x, y) * laplacian(u) on a fixed grid."""

    def __init__(
        self,
        grid: GridParameters,
        *,
        kernel: Optional[WaveStepKernel] = None,
        device: str | torch.device | None = None,
        backend: str = "auto",
        address_mode: str | AddressMode = AddressMode.CLAMP,
    ) -> None:
        if kernel is None:
            kernel = create_kernel(device, backend=backend, address_mode=address_mode)
        elif device is not None and resolve_device(device) != kernel.device:
            raise ValueError(f"device {device!r} does not match kernel device '{kernel.device}'")

        self._grid = grid
        self._kernel = kernel
        # Grid is immutable, so one derivation serves every step.
        self._coefficients = StencilCoefficients.from_grid(grid)
        self._ring = StateBufferRing()
        self._potential: Optional[torch.Tensor] = None
        self._state = EngineState.UNINITIALIZED

        console.info(
            f"WaveEngine {grid.resolution_x}x{grid.resolution_y}",
            detail=f"kernel={kernel.name} device={kernel.device} addressing={kernel.address_mode.value}",
        )

    @classmethod
    def from_config(cls, config: "SimulationConfig") -> "WaveEngine":
        return cls(
            config.grid(),
            device=config.device,
            backend=config.backend,
            address_mode=config.address_mode,
        )

    # ========================================
    # Properties
    # ========================================

    @property
    def grid(self) -> GridParameters:
        return self._grid

    @property
    def coefficients(self) -> StencilCoefficients:
        return self._coefficients

    @property
    def kernel(self) -> WaveStepKernel:
        return self._kernel

    @property
    def device(self) -> torch.device:
        return self._kernel.device

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def step_count(self) -> int:
        return self._ring.step

    @property
    def ring(self) -> StateBufferRing:
        return self._ring

    # ========================================
    # Setup
    # ========================================

    def initialize(self, field0: torch.Tensor, field1: torch.Tensor, field2: torch.Tensor) -> None:
        """Install three StateFields as the ring's backing store.

        Slot order follows the arguments; with a fresh counter field0 is the
        state at t - dt, field1 the state at t and field2 the first write
        target. The fields are adopted, not copied.
        """
        self._require_open()
        fields = (field0, field1, field2)
        for i, f in enumerate(fields):
            self._check_field(f, f"field{i}")
        ptrs = [f.data_ptr() for f in fields]
        if len(set(ptrs)) != len(ptrs):
            raise FieldFormatError("ring buffers must be distinct tensors")

        self._ring.install(fields)
        self._state = EngineState.READY
        if self._potential is not None:
            self._apply_potential()
        self._check_stability()

    def seed(self, previous: torch.Tensor, current: torch.Tensor) -> None:
        """Overwrite the two source buffers of the next step in place.

        Used to start a new phase on the installed ring; a pending potential
        is re-applied to the velocity-term channel afterwards.
        """
        self._require_open()
        self._require_ready()
        self._check_field(previous, "previous")
        self._check_field(current, "current")
        # A source may be one of the ring buffers; stage those before any
        # destination is overwritten.
        ring_ptrs = {buf.data_ptr() for buf in self._ring.buffers}
        if previous.data_ptr() in ring_ptrs:
            previous = previous.clone()
        if current.data_ptr() in ring_ptrs:
            current = current.clone()
        dst_prev, dst_cur = self.get_next_source_fields()
        dst_prev.copy_(previous)
        dst_cur.copy_(current)
        if self._potential is not None:
            self._apply_potential()
        self._check_stability()

    def set_potential(self, potential: torch.Tensor) -> None:
        """Set the spatially varying velocity term (wave speed squared).

        The values are written into channel 1 of every ring buffer, now if the
        ring is installed and otherwise at `initialize`.
        """
        self._require_open()
        if tuple(potential.shape) != self._grid.resolution:
            raise ShapeMismatchError(
                f"potential shape {tuple(potential.shape)} != grid resolution {self._grid.resolution}"
            )
        self._potential = potential.detach().to(device=self.device, dtype=FIELD_DTYPE).clone()
        if self._state is EngineState.READY:
            self._apply_potential()
            self._check_stability()

    # ========================================
    # Stepping
    # ========================================

    def timestep(self) -> None:
        """Advance one step: read previous and current, write the third buffer."""
        self._require_open()
        self._require_ready()
        ring = self._ring
        self._kernel.dispatch(ring.previous(), ring.current(), ring.write_target(), self._coefficients)
        ring.advance()

    def run(self, steps: int) -> None:
        if int(steps) < 0:
            raise ValueError(f"steps must be >= 0, got {steps!r}")
        for _ in range(int(steps)):
            self.timestep()

    # ========================================
    # Buffer access
    # ========================================

    def get_latest_field(self) -> torch.Tensor:
        """Most recently produced StateField.

        The tensor is still owned by the ring and is overwritten two steps
        later; callers must not write to it.
        """
        return self._ring.current()

    def get_next_source_fields(self) -> tuple[torch.Tensor, torch.Tensor]:
        """(oldest, previous): the buffers the next step reads as t - dt and t."""
        return self._ring.previous(), self._ring.current()

    # ========================================
    # Teardown
    # ========================================

    def shutdown(self) -> None:
        """Release the kernel. StateFields stay alive for a following phase."""
        if self._state is EngineState.SHUTDOWN:
            return
        self._kernel.release()
        self._state = EngineState.SHUTDOWN
        console.info("WaveEngine shut down", detail=f"after {self._ring.step} steps")

    # ========================================
    # Internals
    # ========================================

    def _require_open(self) -> None:
        if self._state is EngineState.SHUTDOWN:
            raise EngineClosedError("engine has been shut down")

    def _require_ready(self) -> None:
        if self._state is not EngineState.READY:
            raise UninitializedBufferError("initialize() must be called before stepping")

    def _check_field(self, field: torch.Tensor, name: str) -> None:
        if not isinstance(field, torch.Tensor):
            raise FieldFormatError(f"{name} must be a torch.Tensor, got {type(field).__name__}")
        if tuple(field.shape) != self._grid.field_shape:
            raise ShapeMismatchError(
                f"{name} shape {tuple(field.shape)} != expected {self._grid.field_shape}"
            )
        if field.dtype != FIELD_DTYPE:
            raise FieldFormatError(f"{name} dtype {field.dtype} != {FIELD_DTYPE}")
        if field.device != self.device:
            raise FieldFormatError(f"{name} lives on '{field.device}', kernel runs on '{self.device}'")
        if not field.is_contiguous():
            raise FieldFormatError(f"{name} must be contiguous")

    def _apply_potential(self) -> None:
        assert self._potential is not None
        for buf in self._ring.buffers:
            buf[..., 1].copy_(self._potential)

    def _check_stability(self) -> None:
        vel = self._ring.current()[..., 1]
        max_vel = float(vel.max().item())
        min_vel = float(vel.min().item())
        margin = stability_margin(self._coefficients, max_vel, min_vel)
        if margin >= 1.0:
            return
        if min_vel < 0.0:
            console.warn(
                "Negative velocity term makes the leapfrog step grow without bound",
                detail=f"min c^2={min_vel:.4g}; the medium must satisfy c^2 >= 0",
            )
        else:
            console.warn(
                "Velocity term exceeds the leapfrog stability bound",
                detail=(
                    f"max c^2={max_vel:.4g} > {self._coefficients.max_stable_velocity_term():.4g}; "
                    "reduce dt or the medium speed"
                ),
            )
