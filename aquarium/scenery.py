"""
Static scenery: decor, vegetation and sand blemishes.

Everything here is generated once at initialisation and never moves.
Decor uses a bounded best-effort placement search: each instance tries a
fixed number of random x positions and keeps the first one far enough from
every already-placed decor. When no attempt qualifies the last attempt is
kept anyway, so overlap is possible and placement always terminates.
"""

from dataclasses import dataclass
from typing import Any, List, Sequence

import numpy as np

from .resources import aspect_ratio
from .rng import random_phase, uniform_range
from .constants import (
    DECOR_BASE_HEIGHT,
    DECOR_MIN_SCALE,
    DECOR_EMBED,
    DECOR_FOREGROUND_DEPTH,
    WEED_MIN,
    WEED_PER_PX,
    WEED_HEIGHT_RANGE,
    WEED_WIDTH_RANGE,
    SAND_BLEMISH_MIN,
    SAND_BLEMISH_PER_PX,
    SAND_BLEMISH_OPACITY,
)


@dataclass
class Decor:
    """Rock/coral/driftwood placed on the sand bed"""
    x: float  # Horizontal centre
    y: float  # Baseline (bottom edge of the image)
    width: float
    height: float
    depth: float  # 0 = far back, 1 = front
    image: Any
    foreground: bool
    separated: bool  # False when the placement search fell back to the last attempt


@dataclass
class Weed:
    """Vegetation blade rooted at the bottom edge"""
    x: float
    target_height: float  # Fraction of scene height
    width_ratio: float  # Fraction of scene height
    phase: float


@dataclass
class SandBlemish:
    """Dark ellipse multiplied into the sand layer"""
    x: float
    y: float
    width: float
    height: float
    opacity: float


def place_decor(
    count: int,
    images: Sequence,
    width: float,
    height: float,
    sand_ratio: float,
    rng: np.random.Generator,
    max_attempts: int,
    min_separation: float
) -> List[Decor]:
    """
    Place decor with a bounded non-overlap search.

    Args:
        count: Number of decor instances
        images: Loaded decor images (empty -> no decor)
        width: Scene width (px)
        height: Scene height (px)
        sand_ratio: Sand bed height as fraction of scene height
        rng: Decor generator
        max_attempts: Random x positions tried per instance
        min_separation: Required horizontal gap as fraction of width

    Returns:
        Decor list in placement order
    """
    if not images or count <= 0:
        return []

    sand_top = height * (1.0 - sand_ratio)
    sand_height = height - sand_top
    gap = min_separation * width
    placed: List[Decor] = []

    for _ in range(count):
        x = 0.0
        separated = False
        for _attempt in range(max(1, max_attempts)):
            x = float(rng.uniform(0.0, width)) if width > 0 else 0.0
            if all(abs(x - other.x) > gap for other in placed):
                separated = True
                break
        # No qualifying attempt: keep the last one (best effort)

        image = images[int(rng.integers(len(images)))]
        depth = float(rng.random())
        scale = DECOR_MIN_SCALE + (1.0 - DECOR_MIN_SCALE) * depth
        h = height * DECOR_BASE_HEIGHT * scale
        w = h * aspect_ratio(image)
        embed = h * DECOR_EMBED * (0.5 + depth)

        placed.append(Decor(
            x=x,
            y=sand_top + sand_height * depth * 0.6 + embed,
            width=w,
            height=h,
            depth=depth,
            image=image,
            foreground=depth >= DECOR_FOREGROUND_DEPTH,
            separated=separated
        ))

    return placed


def split_decor(decor: Sequence[Decor]):
    """(background, foreground) buckets, each ordered back to front"""
    ordered = sorted(decor, key=lambda d: d.depth)
    return [d for d in ordered if not d.foreground], [d for d in ordered if d.foreground]


def generate_weeds(width: float, height: float, rng: np.random.Generator) -> List[Weed]:
    """Vegetation blades spread across the scene width"""
    count = max(WEED_MIN, int(width * WEED_PER_PX))
    return [
        Weed(
            x=float(rng.uniform(0.0, width)) if width > 0 else 0.0,
            target_height=uniform_range(rng, WEED_HEIGHT_RANGE),
            width_ratio=uniform_range(rng, WEED_WIDTH_RANGE),
            phase=random_phase(rng)
        )
        for _ in range(count)
    ]


def generate_sand_blemishes(
    width: float,
    height: float,
    sand_ratio: float,
    rng: np.random.Generator
) -> List[SandBlemish]:
    """Fixed sand texture, generated once so it never flickers"""
    count = max(SAND_BLEMISH_MIN, int(width * SAND_BLEMISH_PER_PX))
    sand_top = height * (1.0 - sand_ratio)
    blemishes = []
    for _ in range(count):
        blemishes.append(SandBlemish(
            x=float(rng.uniform(0.0, width)) if width > 0 else 0.0,
            y=uniform_range(rng, (sand_top, height)),
            width=float(rng.uniform(5.0, 30.0)),
            height=float(rng.uniform(1.0, 4.0)),
            opacity=uniform_range(rng, SAND_BLEMISH_OPACITY)
        ))
    return blemishes
