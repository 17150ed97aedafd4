"""
Frame scheduling and the animation loop.

The loop requests the next frame only after the current one has finished
rendering, so frames never overlap. stop() prevents any later frame from
being scheduled; it is idempotent and safe to call from inside a frame.
"""

import threading
from typing import Any, Callable, Dict, Optional, Protocol

from .constants import DEFAULT_FPS


class FrameScheduler(Protocol):
    """Host hook that runs a callback on the next display frame"""

    def request_frame(self, callback: Callable[[], None]) -> Any: ...

    def cancel_frame(self, handle: Any) -> None: ...


class ManualScheduler:
    """
    Scheduler driven explicitly by the caller (tests, headless runs).

    Pending callbacks run on step(); a callback requested during step()
    waits for the next step().
    """

    def __init__(self):
        self._pending: Dict[int, Callable[[], None]] = {}
        self._next_handle = 0

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request_frame(self, callback):
        self._next_handle += 1
        self._pending[self._next_handle] = callback
        return self._next_handle

    def cancel_frame(self, handle):
        self._pending.pop(handle, None)

    def step(self) -> int:
        """Run every callback pending at call time; returns how many ran"""
        due, self._pending = self._pending, {}
        for callback in due.values():
            callback()
        return len(due)

    def run(self, frames: int) -> int:
        """Step up to `frames` times, stopping early once nothing is pending"""
        ran = 0
        for _ in range(frames):
            if not self.step():
                break
            ran += 1
        return ran


class TimerScheduler:
    """Wall-clock scheduler firing callbacks on a background timer thread"""

    def __init__(self, fps: float = DEFAULT_FPS):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.interval = 1.0 / fps

    def request_frame(self, callback):
        timer = threading.Timer(self.interval, callback)
        timer.daemon = True
        timer.start()
        return timer

    def cancel_frame(self, handle):
        handle.cancel()


class AnimationLoop:
    """
    Drives an AquariumSimulation against a drawing surface.

    Args:
        simulation: Object with render_frame(surface) and teardown()
        surface: Drawing surface handed to every frame
        scheduler: FrameScheduler used to pace frames
        on_frame: Optional hook called after each rendered frame

    Every request carries the generation it was made in; start() and stop()
    bump the generation, so a callback that fires after a restart is
    ignored and only one frame chain is ever live.
    """

    def __init__(self, simulation, surface, scheduler: FrameScheduler,
                 on_frame: Optional[Callable[[Any], None]] = None):
        self.simulation = simulation
        self.surface = surface
        self.scheduler = scheduler
        self.on_frame = on_frame
        self.frames_rendered = 0
        self._running = False
        self._generation = 0
        self._handle = None
        self._in_frame = False
        self._teardown_requested = False
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._running

    def start(self):
        with self._lock:
            if self._running:
                return
            self._running = True
            self._generation += 1
            # A frame in progress schedules the next one when it returns
            if not self._in_frame:
                self._handle = self._request(self._generation)

    def stop(self):
        with self._lock:
            if not self._running:
                return
            self._running = False
            self._generation += 1
            handle, self._handle = self._handle, None
        if handle is not None:
            self.scheduler.cancel_frame(handle)

    def teardown(self):
        """
        Stop the loop and release every simulation collection.

        Called while a frame is rendering, the release waits until that
        frame returns.
        """
        self.stop()
        with self._lock:
            if self._in_frame:
                self._teardown_requested = True
                return
        self.simulation.teardown()

    def _request(self, generation: int):
        return self.scheduler.request_frame(lambda: self._frame(generation))

    def _frame(self, generation: int):
        with self._lock:
            if not self._running or generation != self._generation:
                return
            self._handle = None
            self._in_frame = True

        try:
            self.simulation.render_frame(self.surface)
            self.frames_rendered += 1
            if self.on_frame is not None:
                self.on_frame(self)
        finally:
            # Next frame only after this one completed
            with self._lock:
                self._in_frame = False
                release = self._teardown_requested
                self._teardown_requested = False
                if self._running and self._handle is None and not release:
                    self._handle = self._request(self._generation)
            if release:
                self.simulation.teardown()
