"""
Tests for the host schedulers.

Run with: pytest tests/test_scheduling.py -v
"""

import pytest

from sling.scheduling import ClockScheduler, ManualScheduler


class TestManualScheduler:
    """Deterministic frame and timer scheduling."""

    def test_frame_runs_once(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.request_frame(lambda: calls.append(1))
        scheduler.step()
        scheduler.step()
        assert calls == [1]

    def test_frame_requested_during_frame_runs_next_step(self):
        scheduler = ManualScheduler()
        calls = []

        def loop():
            calls.append(scheduler.now())
            scheduler.request_frame(loop)

        scheduler.request_frame(loop)
        scheduler.run_frames(3)
        assert len(calls) == 3
        assert scheduler.pending_frames == 1

    def test_timeout_fires_once(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.set_timeout(lambda: calls.append(scheduler.now()), 1.0)
        scheduler.advance(0.9)
        assert calls == []
        scheduler.advance(5.0)
        assert calls == [1.0]
        assert scheduler.pending_timers == 0

    def test_interval_fires_at_each_period(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.set_interval(lambda: calls.append(scheduler.now()), 1.0)
        scheduler.advance(3.5)
        assert calls == [1.0, 2.0, 3.0]
        assert scheduler.now() == 3.5

    def test_cancel(self):
        scheduler = ManualScheduler()
        calls = []
        frame = scheduler.request_frame(lambda: calls.append('frame'))
        timer = scheduler.set_interval(lambda: calls.append('tick'), 1.0)
        scheduler.cancel(frame)
        scheduler.cancel(timer)
        scheduler.cancel(None)
        scheduler.cancel(12345)
        scheduler.run_frames(120)
        assert calls == []

    def test_interval_cancelled_from_its_callback(self):
        scheduler = ManualScheduler()
        calls = []
        handle = None

        def tick():
            calls.append(scheduler.now())
            if len(calls) == 2:
                scheduler.cancel(handle)

        handle = scheduler.set_interval(tick, 1.0)
        scheduler.advance(10.0)
        assert calls == [1.0, 2.0]

    def test_timers_fire_in_due_order(self):
        scheduler = ManualScheduler()
        order = []
        scheduler.set_timeout(lambda: order.append('late'), 2.0)
        scheduler.set_timeout(lambda: order.append('early'), 1.0)
        scheduler.advance(3.0)
        assert order == ['early', 'late']

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            ManualScheduler().set_interval(lambda: None, 0)

    def test_handles_are_unique(self):
        scheduler = ManualScheduler()
        handles = {
            scheduler.request_frame(lambda: None),
            scheduler.set_timeout(lambda: None, 1.0),
            scheduler.set_interval(lambda: None, 1.0),
        }
        assert len(handles) == 3


class TestClockScheduler:
    """Real-time scheduler with an injected clock."""

    def test_pump_fires_due_timers_then_frames(self):
        now = [0.0]
        scheduler = ClockScheduler(clock=lambda: now[0])
        order = []
        scheduler.set_timeout(lambda: order.append('timer'), 0.5)
        scheduler.request_frame(lambda: order.append('frame'))

        scheduler.pump()
        assert order == ['frame']

        now[0] = 0.6
        scheduler.pump()
        assert order == ['frame', 'timer']
