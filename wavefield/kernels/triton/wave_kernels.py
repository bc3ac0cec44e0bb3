"""Triton kernels for the 2D leapfrog wave step (CUDA).

Fields are contiguous fp32 tensors of shape (nx, ny, 2), channel 0 amplitude,
channel 1 velocity term. One program instance handles BLOCK consecutive grid
points of the flattened (x, y) index.
"""

from __future__ import annotations

import torch
import triton
import triton.language as tl

from wavefield.kernels.stencil import StencilCoefficients

BLOCK = 256


@triton.jit
def _edge_index(i, n, WRAP: tl.constexpr):
    # [CHOICE] edge addressing
    # [FORMULA] wrap: i mod n for |step| <= n; clamp: min(max(i, 0), n - 1)
    if WRAP:
        i = tl.where(i < 0, i + n, i)
        i = tl.where(i >= n, i - n, i)
    else:
        i = tl.minimum(tl.maximum(i, 0), n - 1)
    return i


@triton.jit
def _amplitude_pair(cur_ptr, x, y, sx, sy, nx, ny, mask, WRAP: tl.constexpr):
    """A(p + s) + A(p - s)."""
    xp = _edge_index(x + sx, nx, WRAP)
    yp = _edge_index(y + sy, ny, WRAP)
    xm = _edge_index(x - sx, nx, WRAP)
    ym = _edge_index(y - sy, ny, WRAP)
    a_p = tl.load(cur_ptr + (xp * ny + yp) * 2, mask=mask, other=0.0)
    a_m = tl.load(cur_ptr + (xm * ny + ym) * 2, mask=mask, other=0.0)
    return a_p + a_m


@triton.jit
def wave_step_kernel(
    prev_ptr,  # fp32 [nx*ny*2] state at t - dt
    cur_ptr,  # fp32 [nx*ny*2] state at t
    out_ptr,  # fp32 [nx*ny*2] state at t + dt
    wt0,
    wtx,
    wty,
    wtd,
    nx,
    ny,
    sx_x, sy_x,  # texel step along x
    sx_y, sy_y,  # texel step along y
    sx_d, sy_d,  # diagonal
    sx_a, sy_a,  # anti-diagonal
    WRAP: tl.constexpr,
    BLOCK: tl.constexpr,
):
    pid = tl.program_id(0)
    idx = pid * BLOCK + tl.arange(0, BLOCK)
    m = idx < nx * ny

    # decode idx -> (x, y); y is the fast axis
    x = idx // ny
    y = idx - x * ny

    amp = tl.load(cur_ptr + idx * 2, mask=m, other=0.0)
    vel = tl.load(cur_ptr + idx * 2 + 1, mask=m, other=0.0)
    old = tl.load(prev_ptr + idx * 2, mask=m, other=0.0)

    lap = wt0 * amp
    lap += wtx * _amplitude_pair(cur_ptr, x, y, sx_x, sy_x, nx, ny, m, WRAP)
    lap += wty * _amplitude_pair(cur_ptr, x, y, sx_y, sy_y, nx, ny, m, WRAP)
    lap += wtd * (
        _amplitude_pair(cur_ptr, x, y, sx_d, sy_d, nx, ny, m, WRAP)
        + _amplitude_pair(cur_ptr, x, y, sx_a, sy_a, nx, ny, m, WRAP)
    )

    nxt = 2.0 * amp - old + vel * lap
    tl.store(out_ptr + idx * 2, nxt, mask=m)
    # velocity term is carried through unchanged
    tl.store(out_ptr + idx * 2 + 1, vel, mask=m)


def wave_step(
    *,
    previous: torch.Tensor,
    current: torch.Tensor,
    out: torch.Tensor,
    coefficients: StencilCoefficients,
    steps: tuple[tuple[int, int], ...],
    wrap: bool,
) -> None:
    nx, ny = int(out.shape[0]), int(out.shape[1])
    n = nx * ny
    if n == 0:
        return
    (sx_x, sy_x), (sx_y, sy_y), (sx_d, sy_d), (sx_a, sy_a) = steps
    grid = (triton.cdiv(n, BLOCK),)
    wave_step_kernel[grid](
        previous,
        current,
        out,
        float(coefficients.wt0),
        float(coefficients.wtx),
        float(coefficients.wty),
        float(coefficients.wtd),
        nx,
        ny,
        sx_x, sy_x,
        sx_y, sy_y,
        sx_d, sy_d,
        sx_a, sy_a,
        WRAP=bool(wrap),
        BLOCK=BLOCK,
        num_warps=4,
    )
