"""Tests for StateField builders and diagnostics."""

from __future__ import annotations

import math

import pytest
import torch

from wavefield.diagnostics import field_stats, stability_margin
from wavefield.errors import ShapeMismatchError
from wavefield.fields import (
    FIELD_DTYPE,
    cell_centers,
    empty_state_field,
    gaussian_pulse,
    initial_fields,
    make_state_field,
    uniform_medium,
)
from wavefield.grid import GridParameters
from wavefield.kernels.stencil import stencil_coefficients


@pytest.fixture
def grid() -> GridParameters:
    return GridParameters(resolution_x=17, resolution_y=17, length_x=1.0, length_y=1.0, dt=0.01)


def test_make_state_field_layout():
    amp = torch.arange(6, dtype=torch.float64).reshape(3, 2)
    vel = torch.ones(3, 2)
    f = make_state_field(amp, vel)
    assert f.shape == (3, 2, 2)
    assert f.dtype == FIELD_DTYPE
    assert f.is_contiguous()
    assert torch.equal(f[..., 0], amp.to(FIELD_DTYPE))
    assert torch.equal(f[..., 1], vel)


def test_make_state_field_rejects_mismatched_planes():
    with pytest.raises(ShapeMismatchError):
        make_state_field(torch.zeros(3, 2), torch.zeros(2, 3))
    with pytest.raises(ShapeMismatchError):
        make_state_field(torch.zeros(3), torch.zeros(3))


def test_empty_and_uniform(grid):
    assert empty_state_field(grid).shape == grid.field_shape
    medium = uniform_medium(grid, 2.5)
    assert medium.shape == grid.resolution
    assert torch.all(medium == 2.5)


def test_cell_centers(grid):
    X, Y = cell_centers(grid)
    assert X.shape == grid.resolution
    assert X[0, 0].item() == pytest.approx(0.5 / 17)
    assert Y[0, 16].item() == pytest.approx(16.5 / 17)


def test_gaussian_pulse_peaks_at_domain_center(grid):
    pulse = gaussian_pulse(grid, width=0.1, amplitude=2.0)
    flat_idx = int(torch.argmax(pulse).item())
    assert divmod(flat_idx, 17) == (8, 8)
    assert pulse[8, 8].item() == pytest.approx(2.0, rel=1e-6)
    assert torch.allclose(pulse, pulse.flip(0), atol=1e-6)


def test_gaussian_pulse_rejects_bad_width(grid):
    with pytest.raises(ValueError):
        gaussian_pulse(grid, width=0.0)


def test_initial_fields_start_at_rest(grid):
    amp = gaussian_pulse(grid)
    f0, f1, f2 = initial_fields(grid, amp, uniform_medium(grid))
    assert torch.equal(f0, f1)
    assert len({f0.data_ptr(), f1.data_ptr(), f2.data_ptr()}) == 3


def test_initial_fields_shape_checked(grid):
    with pytest.raises(ShapeMismatchError):
        initial_fields(grid, torch.zeros(4, 4), uniform_medium(grid))


def test_field_stats():
    f = make_state_field(torch.tensor([[1.0, -3.0]]), torch.tensor([[0.5, 2.0]]))
    s = field_stats(f)
    assert s.max_abs_amplitude == 3.0
    assert s.mean_amplitude == -1.0
    assert s.max_velocity_term == 2.0
    assert s.finite
    f[0, 0, 0] = math.nan
    assert not field_stats(f).finite


def test_stability_margin(grid):
    c = stencil_coefficients(grid)
    bound = c.max_stable_velocity_term()
    assert stability_margin(c, bound / 2.0) == pytest.approx(2.0)
    assert stability_margin(c, bound * 4.0) == pytest.approx(0.25)
    assert math.isinf(stability_margin(c, 0.0))


def test_negative_velocity_term_has_zero_margin(grid):
    c = stencil_coefficients(grid)
    assert stability_margin(c, 1.0, -0.5) == 0.0
    assert stability_margin(c, -2.0, -2.0) == 0.0
    # Without any negative cell the usual ratio applies.
    assert stability_margin(c, 0.5, 0.0) == pytest.approx(c.max_stable_velocity_term() / 0.5)
