"""Explicit finite-difference stepping of a 2D scalar wave field.

The engine advances u_tt = c^2(x, y) * laplacian(u) with a leapfrog step and a
rotation-improved 9-point stencil, cycling three device tensors so the buffer
being written is never one being read.
"""

from __future__ import annotations

from wavefield.config import SimulationConfig
from wavefield.engine import EngineState, WaveEngine
from wavefield.errors import (
    EngineClosedError,
    FieldFormatError,
    InvalidGridParametersError,
    KernelCompileError,
    ShapeMismatchError,
    UninitializedBufferError,
    WaveEngineError,
)
from wavefield.fields import gaussian_pulse, initial_fields, make_state_field, uniform_medium
from wavefield.grid import GridParameters
from wavefield.kernels import AddressMode, StencilCoefficients, WaveStepKernel, create_kernel
from wavefield.render import FieldRenderer
from wavefield.ring import StateBufferRing

__version__ = "0.1.0"

__all__ = [
    "AddressMode",
    "EngineClosedError",
    "EngineState",
    "FieldFormatError",
    "FieldRenderer",
    "GridParameters",
    "InvalidGridParametersError",
    "KernelCompileError",
    "ShapeMismatchError",
    "SimulationConfig",
    "StateBufferRing",
    "StencilCoefficients",
    "UninitializedBufferError",
    "WaveEngine",
    "WaveEngineError",
    "WaveStepKernel",
    "create_kernel",
    "gaussian_pulse",
    "initial_fields",
    "make_state_field",
    "uniform_medium",
]
