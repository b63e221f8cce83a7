from __future__ import annotations

import pytest

from blockfall.game.timer import GravityTimer


def test_disarmed_timer_never_fires():
    timer = GravityTimer()
    timer.advance(10_000)
    assert not timer.armed
    assert not timer.pop_due()


def test_fires_once_per_interval_and_keeps_remainder():
    timer = GravityTimer()
    timer.arm(100)
    timer.advance(250)
    assert timer.pop_due()
    assert timer.pop_due()
    assert not timer.pop_due()
    timer.advance(50)
    assert timer.pop_due()


def test_rearm_starts_a_fresh_period():
    timer = GravityTimer()
    timer.arm(100)
    timer.advance(90)
    timer.arm(50)
    assert not timer.pop_due()
    timer.advance(50)
    assert timer.pop_due()


def test_cancel_discards_elapsed_time():
    timer = GravityTimer()
    timer.arm(100)
    timer.advance(99)
    timer.cancel()
    timer.advance(500)
    assert not timer.pop_due()


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        GravityTimer().arm(0)
