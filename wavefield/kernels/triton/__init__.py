"""CUDA/Triton backend for the wave step.

`wave_kernels` holds the jitted program and its launcher and imports Triton at
module level; `wave_step` wraps it as a WaveStepKernel and only touches
`wave_kernels` when a kernel is actually built.
"""

from __future__ import annotations

__all__: list[str] = []
