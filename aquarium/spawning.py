"""
Agent spawning system.

Builds the agent population from a weighted species ratio table and
per-species image pools. Species are drawn by independent weighted
sampling, so realised ratios carry sampling noise; only the expected
proportions follow the table.
"""

import numpy as np
from typing import Dict, List, Sequence

from .entity import Agent
from .data_types import Species, SceneConfig, SpeciesConfig
from .resources import aspect_ratio
from .rng import random_phase, random_direction, uniform_range
from .constants import (
    SWIMMER_ANCHOR_BAND,
    DRIFTER_ANCHOR_BAND,
    CRAWLER_ANCHOR_DEPTH,
    PULSATOR_ANCHOR_BAND,
)


def build_weighted_choices(ratio: Dict[Species, int]) -> List[Species]:
    """
    Flatten a ratio table into a list where each species appears `weight` times.

    Species order follows the Species enum so the list is stable regardless
    of dict insertion order.

    Example:
        {SWIMMER: 2, CRAWLER: 1} -> [SWIMMER, SWIMMER, CRAWLER]
    """
    choices = []
    for species in Species:
        weight = int(ratio.get(species, 0))
        choices.extend([species] * max(weight, 0))
    return choices


def spawn_agents(
    count: int,
    config: SceneConfig,
    pools: Dict[Species, Sequence],
    width: float,
    height: float,
    rng: np.random.Generator
) -> List[Agent]:
    """
    Spawn `count` agents by weighted species sampling.

    Species without any loaded image are removed from the choice list
    before sampling, so every spawned agent has an image to draw.

    Args:
        count: Number of agents (fixed for the run)
        config: Scene configuration (species table, sand ratio)
        pools: {species: [image, ...]} of loaded images
        width: Scene width (px)
        height: Scene height (px)
        rng: Population generator

    Returns:
        List of spawned agents in spawn order
    """
    if count <= 0:
        return []

    ratio = {}
    for species, weight in config.species_ratio().items():
        if pools.get(species):
            ratio[species] = weight
        else:
            print(f"[WARN] Species {species.value} has no loaded images, skipping")

    choices = build_weighted_choices(ratio)
    if not choices:
        print(f"[WARN] No spawnable species, population of {count} left empty")
        return []

    agents = []
    for i in range(count):
        species = choices[int(rng.integers(len(choices)))]
        pool = pools[species]
        image = pool[int(rng.integers(len(pool)))]

        agents.append(_spawn_agent(
            index=i,
            species=species,
            species_config=config.species[species],
            image=image,
            width=width,
            height=height,
            sand_ratio=config.environment.sand_ratio,
            rng=rng
        ))

    return agents


def _spawn_agent(
    index: int,
    species: Species,
    species_config: SpeciesConfig,
    image,
    width: float,
    height: float,
    sand_ratio: float,
    rng: np.random.Generator
) -> Agent:
    """Create one agent with species-biased anchor placement"""
    base_x = float(rng.uniform(0.0, width)) if width > 0 else 0.0
    base_y = anchor_y(species, rng, height, sand_ratio)

    speed = uniform_range(rng, (species_config.min_speed, species_config.max_speed))

    return Agent(
        agent_id=f"{species.value}-{index:04d}",
        species=species,
        x=base_x,
        y=base_y,
        base_x=base_x,
        base_y=base_y,
        speed=speed,
        direction=random_direction(rng),
        phase=random_phase(rng),
        phase_x=random_phase(rng),
        drift_radius=drift_radius(species, species_config, rng),
        aspect_ratio=aspect_ratio(image),
        image=image
    )


def anchor_y(species: Species, rng: np.random.Generator, height: float, sand_ratio: float) -> float:
    """
    Species-biased anchor depth.

    Swimmers: uniform in the upper 60% of the water column.
    Drifters: mid-upper water column.
    Crawlers: just below the sand surface.
    Pulsators: mid water column.
    """
    water_height = height * (1.0 - sand_ratio)
    sand_height = height - water_height

    if species is Species.SWIMMER:
        return float(rng.uniform(0.0, SWIMMER_ANCHOR_BAND)) * water_height
    elif species is Species.DRIFTER:
        return uniform_range(rng, DRIFTER_ANCHOR_BAND) * water_height
    elif species is Species.CRAWLER:
        return water_height + float(rng.uniform(0.0, CRAWLER_ANCHOR_DEPTH)) * sand_height
    elif species is Species.PULSATOR:
        return uniform_range(rng, PULSATOR_ANCHOR_BAND) * water_height
    raise ValueError(f"No anchor rule for species {species!r}")


def drift_radius(species: Species, species_config: SpeciesConfig, rng: np.random.Generator) -> float:
    """Wander amplitude; zero for species that do not drift"""
    if species is Species.DRIFTER:
        return species_config.drift_radius * float(rng.uniform(1.0, 3.0))
    elif species is Species.PULSATOR:
        return species_config.drift_radius
    elif species in (Species.SWIMMER, Species.CRAWLER):
        return 0.0
    raise ValueError(f"No drift rule for species {species!r}")


def count_by_species(agents: Sequence[Agent]) -> Dict[Species, int]:
    """Realised population per species (every species present, possibly 0)"""
    counts = {species: 0 for species in Species}
    for agent in agents:
        counts[agent.species] += 1
    return counts
