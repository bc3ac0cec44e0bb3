"""Fused Triton wave step kernel (CUDA only)."""

from __future__ import annotations

import torch

from wavefield.errors import FieldFormatError, KernelCompileError
from wavefield.kernels.base import AddressMode, WaveStepKernel
from wavefield.kernels.runtime import cuda_supported, triton_supported
from wavefield.kernels.stencil import StencilCoefficients

__all__ = ["TritonWaveStepKernel"]


class TritonWaveStepKernel(WaveStepKernel):
    """CUDA/Triton-accelerated leapfrog step.

    Construction imports the Triton program and runs one warm-up dispatch on a
    3x3 scratch grid, so JIT failures surface here as KernelCompileError.
    The first launch on each new grid shape may compile another specialization;
    failures there are raised as KernelCompileError too.
    """

    name = "triton"

    def __init__(self, device: str | torch.device = "cuda", address_mode: str | AddressMode = AddressMode.CLAMP) -> None:
        super().__init__(device, address_mode)
        if self.device.type != "cuda":
            raise KernelCompileError(f"TritonWaveStepKernel requires a CUDA device, got '{self.device}'")
        if not cuda_supported():
            raise KernelCompileError("CUDA not available")
        if not triton_supported():
            raise KernelCompileError("Triton is not installed")
        try:
            from wavefield.kernels.triton import wave_kernels
        except Exception as e:
            raise KernelCompileError(f"Triton wave kernel import failed: {e!r}") from e
        self._k = wave_kernels
        self._launched_shapes: set[tuple[int, ...]] = set()
        self._warmup()

    def _warmup(self) -> None:
        scratch = [torch.zeros(3, 3, 2, device=self.device, dtype=torch.float32) for _ in range(3)]
        coeffs = StencilCoefficients(
            wt0=0.0, wtx=0.0, wty=0.0, wtd=0.0,
            offset_x=(1.0 / 3.0, 0.0),
            offset_y=(0.0, 1.0 / 3.0),
            offset_diag=(1.0 / 3.0, 1.0 / 3.0),
            offset_anti_diag=(-1.0 / 3.0, 1.0 / 3.0),
        )
        try:
            self._k.wave_step(
                previous=scratch[0],
                current=scratch[1],
                out=scratch[2],
                coefficients=coeffs,
                steps=coeffs.texel_steps((3, 3)),
                wrap=self.address_mode is AddressMode.WRAP,
            )
            torch.cuda.synchronize(self.device)
        except Exception as e:
            raise KernelCompileError(f"Triton wave kernel failed to compile: {e!r}") from e

    def _launch(
        self,
        previous: torch.Tensor,
        current: torch.Tensor,
        out: torch.Tensor,
        coefficients: StencilCoefficients,
        steps: tuple[tuple[int, int], ...],
    ) -> None:
        for t in (previous, current, out):
            if not t.is_contiguous():
                raise FieldFormatError("Triton wave kernel requires contiguous fields")
        shape = tuple(out.shape)
        if shape in self._launched_shapes:
            self._run(previous, current, out, coefficients, steps)
            return
        # Triton specializes on integer arguments (ny == 1, multiples of 16),
        # so a new grid shape may JIT a new variant here.
        try:
            self._run(previous, current, out, coefficients, steps)
        except Exception as e:
            raise KernelCompileError(f"Triton wave kernel failed on grid {shape[:2]}: {e!r}") from e
        self._launched_shapes.add(shape)

    def _run(
        self,
        previous: torch.Tensor,
        current: torch.Tensor,
        out: torch.Tensor,
        coefficients: StencilCoefficients,
        steps: tuple[tuple[int, int], ...],
    ) -> None:
        self._k.wave_step(
            previous=previous,
            current=current,
            out=out,
            coefficients=coefficients,
            steps=steps,
            wrap=self.address_mode is AddressMode.WRAP,
        )

    def release(self) -> None:
        self._k = None
        super().release()
