"""
Headless aquarium run.

Builds a scene from the YAML config with fixed-size stand-in images for
every manifest entry, renders N frames onto a RecordingSurface and prints
tick timing.

Usage:
    python scripts/run_headless.py --width 1280 --height 720 --count 40 --ticks 600
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from aquarium.loader import load_scene_config, DEFAULT_SCENE_FILE
from aquarium.resources import StaticImage
from aquarium.simulation import AquariumSimulation
from aquarium.surface import RecordingSurface
from aquarium.constants import TICK_SUMMARY_INTERVAL


def stand_in_images(config, width: int = 120, height: int = 80):
    """One StaticImage per manifest name (no pixel data)"""
    return {name: StaticImage(name, width, height) for name in config.assets.all_names()}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run the aquarium scene headless")
    parser.add_argument('--width', type=int, default=1280)
    parser.add_argument('--height', type=int, default=720)
    parser.add_argument('--count', type=int, default=40)
    parser.add_argument('--ticks', type=int, default=600)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--config', type=Path, default=DEFAULT_SCENE_FILE)
    args = parser.parse_args(argv)

    config = load_scene_config(args.config)
    print(f"[OK] Loaded scene: {config.description or args.config}")

    sim = AquariumSimulation.from_images(
        args.width, args.height, args.count,
        images=stand_in_images(config),
        config=config,
        seed=args.seed
    )
    surface = RecordingSurface(args.width, args.height)

    for i in range(args.ticks):
        surface.clear()
        sim.render_frame(surface)
        if (i + 1) % TICK_SUMMARY_INTERVAL == 0:
            sim.print_tick_summary()

    stats = sim.get_tick_stats()
    print(f"\n[OK] {stats['tick_count']} frames, last frame {len(surface.commands)} draw calls, "
          f"{stats['skipped_total']} skipped agent updates")
    sim.teardown()
    return 0


if __name__ == '__main__':
    sys.exit(main())
