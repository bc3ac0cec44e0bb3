"""Kernel selection.

Backend choice is explicit and deterministic:
- "torch": reference kernel on the requested device.
- "triton": fused CUDA kernel; fails loudly (KernelCompileError) if it cannot
  be built. There is no silent fallback.
- "auto": triton on CUDA devices when Triton is installed, torch otherwise.
"""

from __future__ import annotations

from typing import Final

import torch

from wavefield.kernels.base import AddressMode, WaveStepKernel
from wavefield.kernels.reference import TorchWaveStepKernel
from wavefield.kernels.runtime import get_device, triton_supported
from wavefield.kernels.triton.wave_step import TritonWaveStepKernel

__all__ = ["BACKENDS", "resolve_backend", "create_kernel"]

BACKENDS: Final[tuple[str, ...]] = ("auto", "torch", "triton")


def resolve_backend(backend: str, device: torch.device) -> str:
    if backend not in BACKENDS:
        raise ValueError(f"unknown kernel backend {backend!r}; expected one of {BACKENDS}")
    if backend != "auto":
        return backend
    if device.type == "cuda" and triton_supported():
        return "triton"
    return "torch"


def create_kernel(
    device: str | torch.device | None = None,
    *,
    backend: str = "auto",
    address_mode: str | AddressMode = AddressMode.CLAMP,
) -> WaveStepKernel:
    dev = torch.device(device if device is not None else get_device())
    chosen = resolve_backend(backend, dev)
    if chosen == "triton":
        return TritonWaveStepKernel(dev, address_mode)
    return TorchWaveStepKernel(dev, address_mode)
