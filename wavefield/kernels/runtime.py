"""Backend availability detection (Triton/CUDA vs plain torch).

The wave step has two implementations: a torch reference that runs on any
torch device, and a fused Triton kernel for CUDA. Detection here only answers
"could this backend run?"; building the kernel is what proves it.
"""

from __future__ import annotations

import importlib.util

import torch

__all__ = [
    "has_module",
    "triton_supported",
    "cuda_supported",
    "get_device",
    "resolve_device",
]


def has_module(name: str) -> bool:
    try:
        return importlib.util.find_spec(name) is not None
    except (ImportError, ValueError, AttributeError):
        return False


def triton_supported() -> bool:
    return bool(has_module("triton") and has_module("triton.language"))


def cuda_supported() -> bool:
    return bool(torch.cuda.is_available())


def get_device() -> str:
    """Default device for a new engine.

    CUDA when present, otherwise CPU. MPS is left to explicit opt-in because
    the fused kernel does not target it.
    """
    if cuda_supported():
        return "cuda"
    return "cpu"


def resolve_device(device: str | torch.device) -> torch.device:
    """Pin a bare "cuda" to the current CUDA device index.

    Fields carry a concrete index (cuda:0, cuda:1, ...), so device equality
    checks need one on both sides.
    """
    dev = torch.device(device)
    if dev.type == "cuda" and dev.index is None and cuda_supported():
        return torch.device("cuda", torch.cuda.current_device())
    return dev
