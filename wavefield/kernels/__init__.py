"""Wave step kernels: the stencil math, the torch reference and the Triton program."""

from __future__ import annotations

from wavefield.kernels.base import AddressMode, WaveStepKernel
from wavefield.kernels.reference import TorchWaveStepKernel
from wavefield.kernels.registry import create_kernel
from wavefield.kernels.stencil import GAMMA, StencilCoefficients, stencil_coefficients
from wavefield.kernels.triton.wave_step import TritonWaveStepKernel

__all__ = [
    "AddressMode",
    "GAMMA",
    "StencilCoefficients",
    "TorchWaveStepKernel",
    "TritonWaveStepKernel",
    "WaveStepKernel",
    "create_kernel",
    "stencil_coefficients",
]
