"""
Host scheduling for the engine.

The engine never paces itself. A host-provided scheduler invokes frame
callbacks once per display refresh and fires interval/timeout callbacks
on its clock, the same way a browser drives requestAnimationFrame and
setInterval. Everything runs on one thread: callbacks are only ever
invoked from ``pump()``.

Two drivers:
- ClockScheduler: real time (time.monotonic), pumped by the pygame loop
- ManualScheduler: a test harness that steps frames and advances time
  synchronously

Usage:
    scheduler = ClockScheduler()
    handle = scheduler.request_frame(loop)
    while running:
        clock.tick(60)
        scheduler.pump()
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

Callback = Callable[[], None]


@dataclass
class _Timer:
    """A pending timeout or interval."""
    handle: int
    due: float
    callback: Callback
    interval: Optional[float] = None


class Scheduler(ABC):
    """
    Cooperative single-threaded scheduler.

    Handles returned by ``request_frame``, ``set_interval`` and
    ``set_timeout`` share one id space and are released with ``cancel``.
    """

    def __init__(self):
        self._next_handle = 1
        self._frames: Dict[int, Callback] = {}
        self._timers: Dict[int, _Timer] = {}

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds on this scheduler's clock."""
        pass

    def _allocate(self) -> int:
        handle = self._next_handle
        self._next_handle += 1
        return handle

    def request_frame(self, callback: Callback) -> int:
        """Run ``callback`` once on the next frame."""
        handle = self._allocate()
        self._frames[handle] = callback
        return handle

    def set_timeout(self, callback: Callback, seconds: float) -> int:
        """Run ``callback`` once after ``seconds``."""
        handle = self._allocate()
        self._timers[handle] = _Timer(handle, self.now() + seconds, callback)
        return handle

    def set_interval(self, callback: Callback, seconds: float) -> int:
        """Run ``callback`` every ``seconds`` until cancelled."""
        if seconds <= 0:
            raise ValueError(f"Interval must be positive, got {seconds}")
        handle = self._allocate()
        self._timers[handle] = _Timer(handle, self.now() + seconds, callback, seconds)
        return handle

    def cancel(self, handle: Optional[int]) -> None:
        """Release a frame request or timer. Unknown handles are ignored."""
        if handle is None:
            return
        self._frames.pop(handle, None)
        self._timers.pop(handle, None)

    @property
    def pending_frames(self) -> int:
        """Number of frame callbacks waiting for the next pump."""
        return len(self._frames)

    @property
    def pending_timers(self) -> int:
        """Number of active timeouts and intervals."""
        return len(self._timers)

    def _fire_due_timers(self) -> None:
        """Fire every timer due at the current time, earliest first."""
        now = self.now()
        while True:
            due = [t for t in self._timers.values() if t.due <= now]
            if not due:
                return
            timer = min(due, key=lambda t: (t.due, t.handle))
            if timer.interval is None:
                del self._timers[timer.handle]
            else:
                timer.due += timer.interval
            timer.callback()

    def _run_frames(self) -> None:
        """Run the frame callbacks requested before this pump."""
        frames: List[Callback] = list(self._frames.values())
        self._frames.clear()
        for callback in frames:
            callback()

    def pump(self) -> None:
        """Fire due timers, then run one frame."""
        self._fire_due_timers()
        self._run_frames()


class ClockScheduler(Scheduler):
    """Real-time scheduler, pumped once per display refresh by the host loop."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self._clock = clock

    def now(self) -> float:
        return self._clock()


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler for tests and headless runs.

    Time only moves when the caller says so.

    Example:
        scheduler = ManualScheduler(frame_time=1 / 60)
        controller.start_game(theme)
        scheduler.run_frames(30)   # half a second of play
        scheduler.advance(1.0)     # fire the countdown without drawing frames
    """

    def __init__(self, start: float = 0.0, frame_time: float = 1.0 / 60.0):
        super().__init__()
        self._now = start
        self.frame_time = frame_time

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing timers as their due time passes."""
        target = self._now + seconds
        while True:
            upcoming = [t.due for t in self._timers.values() if t.due <= target]
            if not upcoming:
                break
            self._now = max(self._now, min(upcoming))
            self._fire_due_timers()
        self._now = target

    def step(self) -> None:
        """Advance one frame of time and run pending frame callbacks."""
        self.advance(self.frame_time)
        self._run_frames()

    def run_frames(self, count: int) -> None:
        """Step ``count`` frames."""
        for _ in range(count):
            self.step()
