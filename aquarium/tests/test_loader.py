"""
Test scene configuration loading.

Verifies YAML -> Python dataclass conversion, schema validation and
fallback to constants.py defaults.
"""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from aquarium.loader import (
    load_scene_config, load_yaml, parse_scene_config,
    DataLoadError, DEFAULT_SCENE_FILE
)
from aquarium.data_types import Species, SceneConfig, default_species_configs
from aquarium import constants as C


def test_load_default_scene():
    """Bundled scene.yaml loads and matches the documented values"""
    config = load_scene_config()

    print(f"[OK] Loaded scene: {config.description}")
    print(f"  Seed: {config.seed}, time step: {config.time_step}")
    print(f"  Species ratio: {[(s.value, r) for s, r in config.species_ratio().items()]}")

    assert config.seed == C.DEFAULT_SEED
    assert config.time_step == C.TIME_STEP
    assert config.species[Species.SWIMMER].ratio == 6
    assert config.species[Species.DRIFTER].ratio == 1
    assert config.species[Species.CRAWLER].ratio == 3
    assert config.species[Species.PULSATOR].ratio == 1
    assert config.species[Species.SWIMMER].wraps is True
    assert config.species[Species.CRAWLER].wraps is False
    assert config.avoidance.friction == 0.96
    assert config.environment.sand_ratio == 0.2
    assert config.particles.emitter_interval == (1.0, 3.0)
    assert config.particles.emitter_duration == (0.3, 0.8)


def test_asset_manifest():
    """Manifest lists images per species and decor category"""
    config = load_scene_config(DEFAULT_SCENE_FILE)
    assets = config.assets

    assert assets.species[Species.PULSATOR] == ['jelly1.png', 'jelly2.png']
    assert len(assets.species[Species.SWIMMER]) == 10
    assert set(assets.decor.keys()) == {'rocks', 'corals', 'driftwood'}

    names = assets.all_names()
    assert len(names) == len(set(names))
    assert len(names) == 32
    print(f"[OK] Manifest resolves {len(names)} distinct image names")


def test_empty_file_uses_defaults(tmp_path):
    """An empty YAML document means every value comes from constants.py"""
    scene = tmp_path / "empty.yaml"
    scene.write_text("")

    assert load_yaml(scene) == {}
    config = load_scene_config(scene)
    assert config == SceneConfig.default()


def test_partial_override_keeps_other_defaults(tmp_path):
    """Overriding one species field leaves the rest at their defaults"""
    scene = tmp_path / "partial.yaml"
    scene.write_text("species:\n  crawlers:\n    wraps: true\n")

    config = load_scene_config(scene)
    crawler = config.species[Species.CRAWLER]
    assert crawler.wraps is True
    assert crawler.wiggle == C.CRAWLER_WIGGLE
    assert config.species[Species.SWIMMER] == default_species_configs()[Species.SWIMMER]


def test_zero_ratio_disables_species():
    config = parse_scene_config({'species': {'drifter': {'ratio': 0}}})
    ratio = config.species_ratio()
    assert Species.DRIFTER not in ratio
    assert Species.SWIMMER in ratio


def test_unknown_species_rejected(tmp_path):
    scene = tmp_path / "bad_species.yaml"
    scene.write_text("species:\n  sharks:\n    ratio: 2\n")

    with pytest.raises(DataLoadError):
        load_scene_config(scene)

    # Without a schema the parser still refuses it
    with pytest.raises(DataLoadError):
        load_scene_config(scene, schema_dir=None)


def test_schema_violation_rejected(tmp_path):
    scene = tmp_path / "bad_value.yaml"
    scene.write_text("avoidance:\n  friction: 1.5\n")

    with pytest.raises(DataLoadError) as exc:
        load_scene_config(scene)
    print(f"[OK] Rejected: {exc.value}")


def test_unknown_field_without_schema(tmp_path):
    scene = tmp_path / "bad_field.yaml"
    scene.write_text("environment:\n  tide: 3\n")

    with pytest.raises(DataLoadError):
        load_scene_config(scene, schema_dir=None)


def test_missing_file():
    with pytest.raises(DataLoadError):
        load_scene_config(Path("/nonexistent/scene.yaml"))


def test_malformed_yaml(tmp_path):
    scene = tmp_path / "broken.yaml"
    scene.write_text("species: [unclosed\n")

    with pytest.raises(DataLoadError):
        load_yaml(scene)
