"""
YAML scene loader with schema validation.

Loads the scene configuration (species table, avoidance, environment,
particles, asset manifest) from a YAML file and validates it against a
JSON schema. Keys missing from the file fall back to constants.py.
"""

import yaml
import json
from dataclasses import replace
from pathlib import Path
from typing import Optional
import jsonschema

from .data_types import (
    Species, SceneConfig, AvoidanceConfig, EnvironmentConfig, ParticleConfig,
    AssetManifest, default_species_configs
)


DEFAULT_DATA_ROOT = Path(__file__).parent / "data"
DEFAULT_SCHEMA_DIR = Path(__file__).parent / "schemas"
DEFAULT_SCENE_FILE = DEFAULT_DATA_ROOT / "scene.yaml"

# Config fields stored as (low, high) tuples
_RANGE_FIELDS = ('emitter_interval', 'emitter_duration')


class DataLoadError(Exception):
    """Raised when data loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    file_path = Path(file_path)
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}")

    # Empty file means "all defaults"
    return data or {}


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        # Schema validation optional when a custom schema_dir lacks the file
        return

    try:
        with open(schema_path, 'r') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}")


def _resolve_species(key: str, data_path: Path) -> Species:
    try:
        return Species.from_key(key)
    except ValueError:
        raise DataLoadError(f"Unknown species '{key}' in {data_path}")


def parse_scene_config(data: dict, data_path: Path = Path("<memory>")) -> SceneConfig:
    """Build SceneConfig from an already-parsed (and validated) dict"""
    species = default_species_configs()
    for key, overrides in data.get('species', {}).items():
        kind = _resolve_species(key, data_path)
        species[kind] = replace(species[kind], **(overrides or {}))

    particle_data = dict(data.get('particles', {}))
    for name in _RANGE_FIELDS:
        if name in particle_data:
            particle_data[name] = tuple(particle_data[name])

    asset_data = data.get('assets', {})
    assets = AssetManifest(
        species={
            _resolve_species(key, data_path): list(names)
            for key, names in asset_data.get('species', {}).items()
        },
        decor={category: list(names) for category, names in asset_data.get('decor', {}).items()}
    )

    defaults = SceneConfig()
    return SceneConfig(
        seed=data.get('seed', defaults.seed),
        time_step=data.get('time_step', defaults.time_step),
        species=species,
        avoidance=AvoidanceConfig(**data.get('avoidance', {})),
        environment=EnvironmentConfig(**data.get('environment', {})),
        particles=ParticleConfig(**particle_data),
        assets=assets,
        description=data.get('description')
    )


def load_scene_config(
    file_path: Path = DEFAULT_SCENE_FILE,
    schema_dir: Optional[Path] = DEFAULT_SCHEMA_DIR
) -> SceneConfig:
    """Load scene configuration from YAML"""
    file_path = Path(file_path)
    data = load_yaml(file_path)

    # Validate if schema available
    if schema_dir:
        schema_path = Path(schema_dir) / "scene.schema.json"
        validate_against_schema(data, schema_path, file_path)

    try:
        return parse_scene_config(data, file_path)
    except TypeError as e:
        # Unknown dataclass field slipped past a custom schema
        raise DataLoadError(f"Invalid field in {file_path}: {e}")
