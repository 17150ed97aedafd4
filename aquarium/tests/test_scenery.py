"""
Test static scenery generation.

Verifies:
- Decor placement honours the separation when it can
- Placement falls back to the last attempt (best effort) when it cannot
- Depth controls the foreground bucket and draw order
- Weed and sand blemish counts and bounds
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from aquarium.scenery import place_decor, split_decor, generate_weeds, generate_sand_blemishes
from aquarium.resources import StaticImage
from aquarium.rng import make_rng
from aquarium import constants as C


WIDTH = 1200.0
HEIGHT = 700.0


def _images():
    return [StaticImage("rock1.png", 200, 100), StaticImage("coral1.png", 100, 150)]


def test_no_images_no_decor():
    assert place_decor(6, [], WIDTH, HEIGHT, C.SAND_RATIO, make_rng(1, "decor"), 12, 0.12) == []
    assert place_decor(0, _images(), WIDTH, HEIGHT, C.SAND_RATIO, make_rng(1, "decor"), 12, 0.12) == []


def test_separated_placements_respect_gap():
    decor = place_decor(6, _images(), WIDTH, HEIGHT, C.SAND_RATIO, make_rng(2, "decor"),
                        C.DECOR_MAX_ATTEMPTS, C.DECOR_MIN_SEPARATION)
    assert len(decor) == 6

    gap = C.DECOR_MIN_SEPARATION * WIDTH
    for i, d in enumerate(decor):
        if d.separated:
            for other in decor[:i]:
                assert abs(d.x - other.x) > gap
    print(f"[OK] {sum(d.separated for d in decor)}/6 decor placed with full separation")


def test_impossible_separation_accepts_last_attempt():
    """Gap wider than the scene: every placement after the first falls back"""
    decor = place_decor(5, _images(), WIDTH, HEIGHT, C.SAND_RATIO, make_rng(3, "decor"),
                        max_attempts=3, min_separation=2.0)

    assert len(decor) == 5
    assert decor[0].separated
    assert not any(d.separated for d in decor[1:])
    for d in decor:
        assert 0.0 <= d.x <= WIDTH


def test_depth_sets_scale_and_bucket():
    decor = place_decor(40, _images(), WIDTH, HEIGHT, C.SAND_RATIO, make_rng(4, "decor"), 2, 0.0)
    sand_top = HEIGHT * (1.0 - C.SAND_RATIO)

    for d in decor:
        assert 0.0 <= d.depth < 1.0
        assert d.foreground == (d.depth >= C.DECOR_FOREGROUND_DEPTH)
        scale = C.DECOR_MIN_SCALE + (1.0 - C.DECOR_MIN_SCALE) * d.depth
        assert abs(d.height - HEIGHT * C.DECOR_BASE_HEIGHT * scale) < 1e-9
        assert d.y > sand_top

    background, foreground = split_decor(decor)
    assert len(background) + len(foreground) == len(decor)
    assert all(not d.foreground for d in background)
    assert all(d.foreground for d in foreground)
    assert [d.depth for d in background] == sorted(d.depth for d in background)
    assert [d.depth for d in foreground] == sorted(d.depth for d in foreground)


def test_weeds():
    weeds = generate_weeds(WIDTH, HEIGHT, make_rng(5, "weeds"))
    assert len(weeds) == max(C.WEED_MIN, int(WIDTH * C.WEED_PER_PX))

    low, high = C.WEED_HEIGHT_RANGE
    for w in weeds:
        assert 0.0 <= w.x <= WIDTH
        assert low <= w.target_height <= high

    # Minimum floor for narrow scenes
    assert len(generate_weeds(50.0, HEIGHT, make_rng(5, "weeds"))) == C.WEED_MIN


def test_sand_blemishes_inside_sand_bed():
    blemishes = generate_sand_blemishes(WIDTH, HEIGHT, C.SAND_RATIO, make_rng(6, "sand"))
    assert len(blemishes) == max(C.SAND_BLEMISH_MIN, int(WIDTH * C.SAND_BLEMISH_PER_PX))

    sand_top = HEIGHT * (1.0 - C.SAND_RATIO)
    low, high = C.SAND_BLEMISH_OPACITY
    for s in blemishes:
        assert sand_top <= s.y <= HEIGHT
        assert low <= s.opacity <= high

    assert len(generate_sand_blemishes(60.0, HEIGHT, C.SAND_RATIO, make_rng(6, "sand"))) == C.SAND_BLEMISH_MIN


def test_scenery_deterministic():
    a = generate_weeds(WIDTH, HEIGHT, make_rng(7, "weeds"))
    b = generate_weeds(WIDTH, HEIGHT, make_rng(7, "weeds"))
    assert a == b
