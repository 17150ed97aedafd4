"""
Test the animation loop and frame schedulers.

Verifies:
- start() schedules exactly one frame; the next is requested only after
  the current frame completes
- stop() is idempotent, cancels the pending request and can be called
  from inside a frame
- stop() then start() mid-frame keeps exactly one frame chain
- teardown() stops the loop and releases the simulation, after any
  frame in flight
- TimerScheduler frames never overlap and stop for good
"""

import sys
import threading
import time
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from aquarium.scheduler import AnimationLoop, ManualScheduler, TimerScheduler
from aquarium.simulation import AquariumSimulation
from aquarium.data_types import Species
from aquarium.resources import StaticImage
from aquarium.surface import RecordingSurface


class CountingSimulation:
    """Minimal stand-in recording frame calls and overlap"""

    def __init__(self, frame_delay: float = 0.0):
        self.frames = 0
        self.torn_down = False
        self.frame_delay = frame_delay
        self.inside = 0
        self.max_inside = 0
        self._lock = threading.Lock()

    def render_frame(self, surface):
        with self._lock:
            self.inside += 1
            self.max_inside = max(self.max_inside, self.inside)
        if self.frame_delay:
            time.sleep(self.frame_delay)
        self.frames += 1
        with self._lock:
            self.inside -= 1

    def teardown(self):
        self.torn_down = True


def test_start_schedules_one_frame():
    scheduler = ManualScheduler()
    sim = CountingSimulation()
    loop = AnimationLoop(sim, RecordingSurface(), scheduler)

    loop.start()
    loop.start()  # Already running: no second request
    assert loop.running
    assert scheduler.pending == 1

    ran = scheduler.run(5)
    assert ran == 5
    assert sim.frames == 5
    assert loop.frames_rendered == 5
    assert scheduler.pending == 1


def test_stop_idempotent():
    scheduler = ManualScheduler()
    sim = CountingSimulation()
    loop = AnimationLoop(sim, RecordingSurface(), scheduler)

    loop.start()
    scheduler.step()
    loop.stop()
    loop.stop()

    assert not loop.running
    assert scheduler.pending == 0
    assert scheduler.step() == 0
    assert sim.frames == 1

    # Restart after stop
    loop.start()
    scheduler.step()
    assert sim.frames == 2


def test_stop_before_any_frame():
    scheduler = ManualScheduler()
    loop = AnimationLoop(CountingSimulation(), RecordingSurface(), scheduler)
    loop.stop()
    assert not loop.running
    assert scheduler.pending == 0


def test_stop_from_inside_frame():
    scheduler = ManualScheduler()
    sim = CountingSimulation()
    loop = AnimationLoop(sim, RecordingSurface(), scheduler, on_frame=lambda l: l.stop())

    loop.start()
    scheduler.step()

    assert sim.frames == 1
    assert scheduler.pending == 0
    assert not loop.running


def test_stale_callback_ignored():
    """A request that fires after a stop/start cycle renders nothing"""
    scheduler = ManualScheduler()
    sim = CountingSimulation()
    loop = AnimationLoop(sim, RecordingSurface(), scheduler)

    loop.start()
    (stale,) = scheduler._pending.values()
    loop.stop()
    loop.start()
    stale()

    assert sim.frames == 0
    assert scheduler.pending == 1

    scheduler.step()
    assert sim.frames == 1


def test_restart_inside_frame():
    """stop() then start() from a frame hook keeps a single frame chain"""
    scheduler = ManualScheduler()
    sim = CountingSimulation()
    restarted = []

    def on_frame(loop):
        if not restarted:
            restarted.append(True)
            loop.stop()
            loop.start()

    loop = AnimationLoop(sim, RecordingSurface(), scheduler, on_frame=on_frame)
    loop.start()

    scheduler.step()
    assert loop.running
    assert scheduler.pending == 1

    assert scheduler.run(5) == 5
    assert sim.frames == 6
    assert scheduler.pending == 1


def test_restart_during_timer_frame():
    """A restart from another thread mid-frame never doubles the tick rate"""
    sim = CountingSimulation(frame_delay=0.02)
    loop = AnimationLoop(sim, RecordingSurface(), TimerScheduler(fps=1000))

    loop.start()
    deadline = time.time() + 5.0
    while sim.inside == 0 and time.time() < deadline:
        time.sleep(0.001)
    loop.stop()
    loop.start()

    time.sleep(0.2)
    loop.stop()
    time.sleep(0.05)

    assert sim.max_inside == 1


def test_teardown():
    scheduler = ManualScheduler()
    sim = CountingSimulation()
    loop = AnimationLoop(sim, RecordingSurface(), scheduler)

    loop.start()
    scheduler.step()
    loop.teardown()

    assert sim.torn_down
    assert not loop.running
    assert scheduler.pending == 0


def test_teardown_inside_frame_waits_for_frame():
    scheduler = ManualScheduler()
    sim = CountingSimulation()
    seen = []

    def on_frame(loop):
        loop.teardown()
        seen.append(sim.torn_down)

    loop = AnimationLoop(sim, RecordingSurface(), scheduler, on_frame=on_frame)
    loop.start()
    scheduler.step()

    assert seen == [False]
    assert sim.torn_down
    assert not loop.running
    assert scheduler.pending == 0


def test_teardown_from_other_thread_defers_release():
    """Timer frame in flight: release happens after render_frame returns"""
    sim = CountingSimulation(frame_delay=0.05)
    released_mid_frame = []
    teardown = sim.teardown

    def checked_teardown():
        released_mid_frame.append(sim.inside > 0)
        teardown()

    sim.teardown = checked_teardown
    loop = AnimationLoop(sim, RecordingSurface(), TimerScheduler(fps=1000))

    loop.start()
    deadline = time.time() + 5.0
    while sim.inside == 0 and time.time() < deadline:
        time.sleep(0.001)
    loop.teardown()

    deadline = time.time() + 5.0
    while not sim.torn_down and time.time() < deadline:
        time.sleep(0.005)

    assert sim.torn_down
    assert released_mid_frame == [False]
    assert sim.frames == 1


def test_loop_drives_real_simulation():
    sim = AquariumSimulation(
        640, 480, 6,
        species_images={s: [StaticImage(f"{s.value}.png", 100, 50)] for s in Species},
        seed=3
    )
    surface = RecordingSurface(640, 480)
    scheduler = ManualScheduler()
    loop = AnimationLoop(sim, surface, scheduler)

    loop.start()
    scheduler.run(10)
    loop.teardown()

    assert sim.tick_count == 10
    assert sim.is_torn_down
    assert len(surface.commands) > 0


def test_timer_scheduler_frames_do_not_overlap():
    sim = CountingSimulation(frame_delay=0.005)
    enough = threading.Event()

    def on_frame(loop):
        if loop.frames_rendered >= 5:
            enough.set()

    loop = AnimationLoop(sim, RecordingSurface(), TimerScheduler(fps=500), on_frame=on_frame)
    loop.start()
    assert enough.wait(5.0)
    loop.stop()

    time.sleep(0.05)
    settled = sim.frames
    time.sleep(0.1)

    assert sim.frames == settled
    assert sim.max_inside == 1
    print(f"[OK] {settled} timer frames, never overlapping")


def test_timer_scheduler_rejects_bad_fps():
    with pytest.raises(ValueError):
        TimerScheduler(fps=0)
