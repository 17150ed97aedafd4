"""
Ambient particles: steady bubbles, marine snow and bubble emitters.

Ambient particles never interact with agents. They are allocated once and
recycled in place when they leave the visible area: a bubble that rises
above -RECYCLE_MARGIN reappears at height + RECYCLE_MARGIN, a snow flake
that sinks below the bottom reappears at the top, each with a fresh x.

Bubble emitters are the only entities with a lifecycle:
ACTIVE -> FINISHED (elapsed > duration) -> REMOVED (elapsed > duration + grace).
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np

from .data_types import ParticleConfig
from .rng import random_phase, uniform_range
from .constants import (
    BUBBLE_SIZE_RANGE,
    BUBBLE_SHAKE,
    BUBBLE_COLOR,
    RECYCLE_MARGIN,
    MARINE_SNOW_SPEED,
    MARINE_SNOW_SIZE_RANGE,
    MARINE_SNOW_AMPLITUDE,
    MARINE_SNOW_COLOR,
    EMITTER_BURST_SPEED,
    EMITTER_BURST_SIZE,
    EMITTER_JITTER,
    TWO_PI,
)


@dataclass
class AmbientParticle:
    """Bubble or marine-snow flake"""
    x: float
    y: float
    size: float
    speed: float
    offset: float  # Phase offset for the horizontal shake
    amplitude: float = 0.0


class ParticleField:
    """
    Fixed-size pool of recycled particles.

    Args:
        particles: Pre-allocated particles
        width, height: Scene size (px)
        rng: Generator used to re-randomise x on recycle
        rising: True for bubbles (move up), False for marine snow (sink)
    """

    def __init__(self, particles: List[AmbientParticle], width: float, height: float,
                 rng: np.random.Generator, rising: bool = True):
        self.particles = particles
        self.width = width
        self.height = height
        self.rng = rng
        self.rising = rising

    def __len__(self):
        return len(self.particles)

    def _random_x(self) -> float:
        return float(self.rng.uniform(0.0, self.width)) if self.width > 0 else 0.0

    def update(self):
        """Advance every particle one tick, recycling those off-screen"""
        for p in self.particles:
            if self.rising:
                p.y -= p.speed
                if p.y < -RECYCLE_MARGIN:
                    p.y = self.height + RECYCLE_MARGIN
                    p.x = self._random_x()
            else:
                p.y += p.speed
                if p.y > self.height + RECYCLE_MARGIN:
                    p.y = -RECYCLE_MARGIN
                    p.x = self._random_x()

    def draw(self, surface, time: float):
        if self.rising:
            draw_bubbles(surface, self.particles, time)
        else:
            draw_marine_snow(surface, self.particles, time)


def draw_bubbles(surface, bubbles: List[AmbientParticle], time: float):
    """Stroked circles with a small horizontal shake"""
    for b in bubbles:
        shake = math.sin(time + b.offset) * BUBBLE_SHAKE
        surface.stroke_arc(b.x + shake, b.y, b.size, 0.0, TWO_PI, BUBBLE_COLOR, 1.0)


def draw_marine_snow(surface, flakes: List[AmbientParticle], time: float):
    """Filled pale dots swaying as they sink"""
    for f in flakes:
        sway = math.sin(time * 2.0 + f.offset) * f.amplitude
        surface.fill_arc(f.x + sway, f.y, f.size, 0.0, TWO_PI, MARINE_SNOW_COLOR)


def make_bubble_field(count: int, width: float, height: float, config: ParticleConfig,
                      rng: np.random.Generator) -> ParticleField:
    """Steady bubbles spread over the full height"""
    particles = [
        AmbientParticle(
            x=float(rng.uniform(0.0, width)) if width > 0 else 0.0,
            y=float(rng.uniform(0.0, height)) if height > 0 else 0.0,
            size=uniform_range(rng, BUBBLE_SIZE_RANGE),
            speed=uniform_range(rng, (config.bubble_speed_min, config.bubble_speed_max)),
            offset=random_phase(rng)
        )
        for _ in range(count)
    ]
    return ParticleField(particles, width, height, rng, rising=True)


def make_marine_snow(width: float, height: float, config: ParticleConfig,
                     rng: np.random.Generator) -> ParticleField:
    """Marine snow, count derived from scene area with a minimum floor"""
    area = max(width, 0) * max(height, 0)
    count = max(config.marine_snow_min, int(area / config.marine_snow_area))
    particles = [
        AmbientParticle(
            x=float(rng.uniform(0.0, width)) if width > 0 else 0.0,
            y=float(rng.uniform(0.0, height)) if height > 0 else 0.0,
            size=uniform_range(rng, MARINE_SNOW_SIZE_RANGE),
            speed=uniform_range(rng, MARINE_SNOW_SPEED),
            offset=random_phase(rng),
            amplitude=uniform_range(rng, MARINE_SNOW_AMPLITUDE)
        )
        for _ in range(count)
    ]
    return ParticleField(particles, width, height, rng, rising=False)


# ============================================================================
# Bubble emitters
# ============================================================================

class EmitterState(Enum):
    ACTIVE = 'active'
    FINISHED = 'finished'
    REMOVED = 'removed'


@dataclass
class BubbleEmitter:
    """
    Time-bounded source of burst bubbles at a fixed point.

    Burst bubbles belong to the emitter: they rise until they leave the top
    edge and disappear together with the emitter once it is removed.
    """
    x: float
    y: float
    start_time: float
    duration: float
    grace_period: float
    state: EmitterState = EmitterState.ACTIVE
    bubbles: List[AmbientParticle] = field(default_factory=list)

    @property
    def is_finished(self) -> bool:
        return self.state is not EmitterState.ACTIVE

    def elapsed(self, time: float) -> float:
        return time - self.start_time

    def advance_state(self, time: float) -> EmitterState:
        """Apply lifecycle transitions for the current clock value"""
        elapsed = self.elapsed(time)
        if self.state is EmitterState.ACTIVE and elapsed > self.duration:
            self.state = EmitterState.FINISHED
        if self.state is EmitterState.FINISHED and elapsed > self.duration + self.grace_period:
            self.state = EmitterState.REMOVED
        return self.state

    def update(self, time: float, rng: np.random.Generator, burst_probability: float):
        """Transition state, emit while active, move burst bubbles"""
        self.advance_state(time)

        if self.state is EmitterState.ACTIVE and rng.random() < burst_probability:
            self.bubbles.append(AmbientParticle(
                x=self.x + float(rng.uniform(-EMITTER_JITTER, EMITTER_JITTER)),
                y=self.y,
                size=uniform_range(rng, EMITTER_BURST_SIZE),
                speed=uniform_range(rng, EMITTER_BURST_SPEED),
                offset=random_phase(rng)
            ))

        for b in self.bubbles:
            b.y -= b.speed
        self.bubbles = [b for b in self.bubbles if b.y >= -RECYCLE_MARGIN]


class BubblePool:
    """
    Steady bubbles plus emitter bursts, updated and drawn in one pass.

    Args:
        steady: Recycled bubble field
        width, height: Scene size (px)
        emitter_y: Where emitters sit (sand surface)
        config: Particle configuration (emitter rate limits)
        rng: Emitter generator
        start_time: Clock value at construction
    """

    def __init__(self, steady: ParticleField, width: float, height: float, emitter_y: float,
                 config: ParticleConfig, rng: np.random.Generator, start_time: float = 0.0):
        self.steady = steady
        self.width = width
        self.height = height
        self.emitter_y = emitter_y
        self.config = config
        self.rng = rng
        self.emitters: List[BubbleEmitter] = []
        self.next_spawn_time = start_time + uniform_range(rng, config.emitter_interval)
        self.emitters_spawned = 0
        self.emitters_removed = 0

    def active_emitters(self) -> List[BubbleEmitter]:
        return [e for e in self.emitters if e.state is EmitterState.ACTIVE]

    def spawn_emitter(self, time: float) -> Optional[BubbleEmitter]:
        """Start a new emitter unless the concurrency bound is reached"""
        if len(self.active_emitters()) >= self.config.emitter_max_active:
            return None
        emitter = BubbleEmitter(
            x=float(self.rng.uniform(0.0, self.width)) if self.width > 0 else 0.0,
            y=self.emitter_y,
            start_time=time,
            duration=uniform_range(self.rng, self.config.emitter_duration),
            grace_period=self.config.emitter_grace_period
        )
        self.emitters.append(emitter)
        self.emitters_spawned += 1
        return emitter

    def update(self, time: float):
        self.steady.update()

        if time >= self.next_spawn_time:
            self.spawn_emitter(time)
            self.next_spawn_time = time + uniform_range(self.rng, self.config.emitter_interval)

        for emitter in self.emitters:
            emitter.update(time, self.rng, self.config.emitter_burst_probability)

        # Reap removed emitters
        alive = [e for e in self.emitters if e.state is not EmitterState.REMOVED]
        self.emitters_removed += len(self.emitters) - len(alive)
        self.emitters = alive

    def all_bubbles(self) -> List[AmbientParticle]:
        bubbles = list(self.steady.particles)
        for emitter in self.emitters:
            bubbles.extend(emitter.bubbles)
        return bubbles

    def update_and_draw(self, surface, time: float):
        self.update(time)
        draw_bubbles(surface, self.all_bubbles(), time)

    def clear(self):
        self.steady.particles = []
        self.emitters = []
