"""
Data types mirroring YAML schema structures.

These dataclasses are populated by loader.py from YAML files, or built
directly from constants.py via SceneConfig.default().
"""

from dataclasses import dataclass, field
from typing import List, Dict, Tuple
from enum import Enum

from . import constants as C


# ============================================================================
# Species Definition
# ============================================================================

class Species(Enum):
    """Closed set of motion/rendering behaviours"""
    SWIMMER = 'swimmer'
    DRIFTER = 'drifter'
    CRAWLER = 'crawler'
    PULSATOR = 'pulsator'

    @classmethod
    def from_key(cls, key: str) -> 'Species':
        """Resolve a config key (case-insensitive, plural accepted)"""
        normalized = key.strip().lower()
        if normalized.endswith('s'):
            normalized = normalized[:-1]
        return cls(normalized)


@dataclass
class SpeciesConfig:
    """Per-species motion and size parameters"""
    ratio: int
    min_speed: float
    max_speed: float
    size_ratio: float  # Visual width as fraction of scene height
    wave_amp: float = 0.0  # Swimmer bob, fraction of scene height
    drift_radius: float = 0.0  # Drifter/Pulsator wander base (px)
    wiggle: float = 0.0  # Crawler wiggle amplitude (px)
    wiggle_rate: float = 0.0
    pulse_rate: float = 0.0
    sway_rate: float = 0.0
    wraps: bool = False  # Teleport to the opposite edge past the margin


def default_species_configs() -> Dict[Species, SpeciesConfig]:
    """Species parameters from constants.py"""
    ratio = C.SPECIES_RATIO
    return {
        Species.SWIMMER: SpeciesConfig(
            ratio=ratio['swimmer'],
            min_speed=C.SWIMMER_MIN_SPEED,
            max_speed=C.SWIMMER_MAX_SPEED,
            size_ratio=C.SWIMMER_SIZE_RATIO,
            wave_amp=C.SWIMMER_WAVE_AMP,
            wraps=True,
        ),
        Species.DRIFTER: SpeciesConfig(
            ratio=ratio['drifter'],
            min_speed=C.DRIFTER_MIN_SPEED,
            max_speed=C.DRIFTER_MAX_SPEED,
            size_ratio=C.DRIFTER_SIZE_RATIO,
            drift_radius=C.DRIFTER_RADIUS_BASE,
        ),
        Species.CRAWLER: SpeciesConfig(
            ratio=ratio['crawler'],
            min_speed=C.CRAWLER_SPEED,
            max_speed=C.CRAWLER_SPEED,
            size_ratio=C.CRAWLER_SIZE_RATIO,
            wiggle=C.CRAWLER_WIGGLE,
            wiggle_rate=C.CRAWLER_WIGGLE_RATE,
        ),
        Species.PULSATOR: SpeciesConfig(
            ratio=ratio['pulsator'],
            min_speed=0.0,
            max_speed=0.0,
            size_ratio=C.PULSATOR_SIZE_RATIO,
            drift_radius=C.PULSATOR_SWAY_RADIUS,
            pulse_rate=C.PULSATOR_PULSE_RATE,
            sway_rate=C.PULSATOR_SWAY_RATE,
        ),
    }


# ============================================================================
# Shared Simulation Parameters
# ============================================================================

@dataclass
class AvoidanceConfig:
    """Separation-only avoidance parameters"""
    avoid_factor: float = C.AVOID_FACTOR
    personal_space: float = C.PERSONAL_SPACE
    friction: float = C.FRICTION
    lateral_damping: float = C.LATERAL_DAMPING


@dataclass
class EnvironmentConfig:
    """Background layer parameters"""
    sand_ratio: float = C.SAND_RATIO
    day_night_rate: float = C.DAY_NIGHT_RATE
    light_ray_opacity: float = C.LIGHT_RAY_OPACITY
    gradient_bands: int = C.GRADIENT_BANDS
    decor_count: int = C.DECOR_COUNT
    decor_max_attempts: int = C.DECOR_MAX_ATTEMPTS
    decor_min_separation: float = C.DECOR_MIN_SEPARATION


@dataclass
class ParticleConfig:
    """Ambient particle and bubble emitter parameters"""
    bubble_min: int = C.BUBBLE_MIN
    bubble_speed_min: float = C.BUBBLE_SPEED_MIN
    bubble_speed_max: float = C.BUBBLE_SPEED_MAX
    marine_snow_min: int = C.MARINE_SNOW_MIN
    marine_snow_area: float = C.MARINE_SNOW_AREA_PER_PARTICLE
    emitter_max_active: int = C.EMITTER_MAX_ACTIVE
    emitter_interval: Tuple[float, float] = C.EMITTER_INTERVAL
    emitter_duration: Tuple[float, float] = C.EMITTER_DURATION
    emitter_grace_period: float = C.EMITTER_GRACE_PERIOD
    emitter_burst_probability: float = C.EMITTER_BURST_PROBABILITY


@dataclass
class AssetManifest:
    """Image names the host must resolve before the simulation starts"""
    species: Dict[Species, List[str]] = field(default_factory=dict)
    decor: Dict[str, List[str]] = field(default_factory=dict)  # {category: [names]}

    def all_names(self) -> List[str]:
        """Every distinct image name, in manifest order"""
        names = []
        for pool in list(self.species.values()) + list(self.decor.values()):
            for name in pool:
                if name not in names:
                    names.append(name)
        return names


# ============================================================================
# Scene Definition
# ============================================================================

@dataclass
class SceneConfig:
    """Complete scene configuration"""
    seed: int = C.DEFAULT_SEED
    time_step: float = C.TIME_STEP
    species: Dict[Species, SpeciesConfig] = field(default_factory=default_species_configs)
    avoidance: AvoidanceConfig = field(default_factory=AvoidanceConfig)
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    particles: ParticleConfig = field(default_factory=ParticleConfig)
    assets: AssetManifest = field(default_factory=AssetManifest)
    description: str = None

    @classmethod
    def default(cls) -> 'SceneConfig':
        """Scene built entirely from constants.py"""
        return cls()

    def species_ratio(self) -> Dict[Species, int]:
        """Ratio table with disabled (zero-weight) species removed"""
        return {s: cfg.ratio for s, cfg in self.species.items() if cfg.ratio > 0}
