"""Exactness tests for the 9-point stencil coefficients."""

from __future__ import annotations

import math

import pytest

from wavefield.grid import GridParameters
from wavefield.kernels.stencil import GAMMA, StencilCoefficients, stencil_coefficients


def test_concrete_4x4_coefficients():
    grid = GridParameters(resolution_x=4, resolution_y=4, length_x=1.0, length_y=1.0, dt=0.1)
    assert grid.dx == pytest.approx(0.25)
    assert grid.dy == pytest.approx(0.25)

    c = stencil_coefficients(grid)
    eps = 0.16
    assert c.wt0 == pytest.approx(eps * (-2.0 + 2.0 / 3.0 - 2.0))
    assert c.wt0 == pytest.approx(-0.5333, abs=1e-4)
    assert c.wtx == pytest.approx(0.1067, abs=1e-4)
    assert c.wty == pytest.approx(0.1067, abs=1e-4)
    assert c.wtd == pytest.approx(0.0267, abs=1e-4)
    assert c.weight_sum() == pytest.approx(0.0, abs=1e-12)


def test_offsets_are_normalized_texel_steps():
    grid = GridParameters(resolution_x=8, resolution_y=5, length_x=2.0, length_y=1.0, dt=0.01)
    c = stencil_coefficients(grid)
    assert c.offset_x == (1.0 / 8.0, 0.0)
    assert c.offset_y == (0.0, 1.0 / 5.0)
    assert c.offset_diag == (1.0 / 8.0, 1.0 / 5.0)
    assert c.offset_anti_diag == (-1.0 / 8.0, 1.0 / 5.0)
    assert c.texel_steps(grid.resolution) == ((1, 0), (0, 1), (1, 1), (-1, 1))


@pytest.mark.parametrize(
    "res,length,dt",
    [
        ((4, 4), (1.0, 1.0), 0.1),
        ((64, 32), (1.0, 1.0), 1e-3),
        ((100, 7), (3.0, 0.2), 0.25),
        ((13, 250), (0.01, 9.0), 1e-5),
        ((1, 1), (1.0, 1.0), 1.0),
    ],
)
def test_weight_sum_vanishes(res, length, dt):
    grid = GridParameters.create(res, length, dt)
    c = StencilCoefficients.from_grid(grid)
    scale = max(abs(w) for w in c.weights)
    assert abs(c.weight_sum()) <= 1e-12 * scale


@pytest.mark.parametrize("n,dt", [(4, 0.1), (17, 0.003), (256, 1e-4)])
def test_equal_spacing_gives_equal_axis_weights(n, dt):
    grid = GridParameters(resolution_x=n, resolution_y=n, length_x=1.5, length_y=1.5, dt=dt)
    c = stencil_coefficients(grid)
    assert c.wtx == c.wty


def test_anisotropic_weights_follow_lambda():
    # dx = 0.2, dy = 0.1 -> lambda = 4
    grid = GridParameters(resolution_x=5, resolution_y=10, length_x=1.0, length_y=1.0, dt=0.02)
    c = stencil_coefficients(grid)
    eps = (0.02 * 0.02) / (0.2 * 0.2)
    assert c.wt0 == pytest.approx(eps * (-2.0 + 2.0 * GAMMA - 8.0))
    assert c.wtx == pytest.approx(eps * (1.0 - GAMMA))
    assert c.wty == pytest.approx(eps * (4.0 - GAMMA))
    assert c.wtd == pytest.approx(eps * GAMMA / 2.0)


def test_symbol_is_zero_for_constant_mode():
    grid = GridParameters(resolution_x=9, resolution_y=6, length_x=1.0, length_y=2.0, dt=0.01)
    c = stencil_coefficients(grid)
    assert c.symbol(1.0, 1.0) == pytest.approx(0.0, abs=1e-15)
    for cx in (-1.0, 1.0):
        for cy in (-1.0, 1.0):
            assert c.symbol(cx, cy) <= 1e-15


def test_stability_bound_square_grid():
    # dx == dy: max |symbol| = 16/3 * eps, so c^2 <= 3 / (4 eps)
    grid = GridParameters(resolution_x=4, resolution_y=4, length_x=1.0, length_y=1.0, dt=0.1)
    c = stencil_coefficients(grid)
    assert c.symbol_extremum() == pytest.approx(16.0 / 3.0 * 0.16)
    assert c.max_stable_velocity_term() == pytest.approx(3.0 / (4.0 * 0.16))


def test_stability_bound_is_infinite_without_weights():
    c = StencilCoefficients(
        wt0=0.0, wtx=0.0, wty=0.0, wtd=0.0,
        offset_x=(1.0, 0.0), offset_y=(0.0, 1.0),
        offset_diag=(1.0, 1.0), offset_anti_diag=(-1.0, 1.0),
    )
    assert math.isinf(c.max_stable_velocity_term())


def test_coefficients_are_deterministic():
    grid = GridParameters(resolution_x=31, resolution_y=17, length_x=1.3, length_y=0.7, dt=0.002)
    assert stencil_coefficients(grid) == stencil_coefficients(grid)
