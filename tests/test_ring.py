"""Rotation and hazard tests for the triple-buffer ring."""

from __future__ import annotations

import pytest
import torch

from wavefield.errors import UninitializedBufferError
from wavefield.ring import RingRoles, StateBufferRing


def _ring() -> tuple[StateBufferRing, list[torch.Tensor]]:
    fields = [torch.full((2, 2, 2), float(i)) for i in range(3)]
    ring = StateBufferRing()
    ring.install(fields)
    return ring, fields


@pytest.mark.parametrize("step", range(12))
def test_write_target_never_read(step):
    roles = RingRoles.at(step)
    assert roles.write_target != roles.current
    assert roles.write_target != roles.previous
    assert roles.current != roles.previous


def test_role_formulas():
    assert RingRoles.at(0) == RingRoles(previous=0, current=1, write_target=2)
    assert RingRoles.at(1) == RingRoles(previous=1, current=2, write_target=0)
    assert RingRoles.at(5) == RingRoles(previous=2, current=0, write_target=1)


@pytest.mark.parametrize("k", [0, 1, 2, 7, 100])
def test_ring_has_period_three(k):
    targets = [RingRoles.at(k + i).write_target for i in range(3)]
    assert sorted(targets) == [0, 1, 2]
    assert RingRoles.at(k + 3) == RingRoles.at(k)


def test_written_buffer_becomes_current():
    ring, _ = _ring()
    for _ in range(6):
        written = ring.write_target()
        old_current = ring.current()
        ring.advance()
        assert ring.current() is written
        assert ring.previous() is old_current


def test_install_resets_counter_and_keeps_order():
    ring, fields = _ring()
    ring.advance()
    ring.advance()
    ring.install(fields)
    assert ring.step == 0
    assert ring.previous() is fields[0]
    assert ring.current() is fields[1]
    assert ring.write_target() is fields[2]


def test_uninstalled_ring_raises():
    ring = StateBufferRing()
    assert not ring.installed
    with pytest.raises(UninitializedBufferError):
        ring.current()
    with pytest.raises(UninitializedBufferError):
        ring.write_target()
    with pytest.raises(UninitializedBufferError):
        _ = ring.buffers


def test_install_requires_three_buffers():
    ring = StateBufferRing()
    with pytest.raises(ValueError):
        ring.install([torch.zeros(2, 2, 2), torch.zeros(2, 2, 2)])
