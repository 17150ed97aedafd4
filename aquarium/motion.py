"""
Per-species motion laws.

Species is fixed per agent, so each tick is a plain dispatch over the
closed Species set (MOTION_LAWS), not a state machine. Positions are
recomputed from the anchor every tick; only Swimmers and Crawlers
translate horizontally without bound, and only species configured with
`wraps` teleport to the opposite edge once past the margin.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from .entity import Agent
from .data_types import Species, SpeciesConfig, AvoidanceConfig
from .constants import (
    DRIFTER_VERTICAL_SQUASH,
    PULSATOR_PROPULSION_THRESHOLD,
    PULSATOR_PROPULSION,
    PULSATOR_SINK,
    PULSATOR_WATER_RESISTANCE,
    PULSATOR_WIDTH_SQUEEZE,
    PULSATOR_HEIGHT_STRETCH,
    PULSATOR_BASE_ALPHA,
    PULSATOR_ALPHA_RANGE,
    WRAP_MARGIN_FACTOR,
)


@dataclass
class MotionContext:
    """Scene-wide inputs shared by every motion law in a tick"""
    width: float
    height: float
    species: Dict[Species, SpeciesConfig]
    avoidance: AvoidanceConfig


# ============================================================================
# Size lookup
# ============================================================================

def agent_size(agent: Agent, scene_height: float, species: Dict[Species, SpeciesConfig]) -> Tuple[float, float]:
    """
    Visual (width, height) of an agent in pixels.

    Width scales with the scene height by the species size ratio; height
    follows the image aspect ratio.
    """
    if agent.species not in (Species.SWIMMER, Species.DRIFTER, Species.CRAWLER, Species.PULSATOR):
        raise ValueError(f"No size rule for species {agent.species!r}")
    w = scene_height * species[agent.species].size_ratio
    h = w / agent.aspect_ratio if agent.aspect_ratio else w
    return w, h


def wrap_margin(agent: Agent, ctx: MotionContext) -> float:
    """Distance past the edge before a wrapping agent teleports"""
    w, _ = agent_size(agent, ctx.height, ctx.species)
    return w * WRAP_MARGIN_FACTOR


def wrap_horizontal(agent: Agent, width: float, margin: float) -> bool:
    """
    Teleport to the opposite edge once past width + margin (or -margin).

    Returns:
        True if the agent wrapped this call
    """
    if agent.x > width + margin:
        agent.x = -margin
        return True
    if agent.x < -margin:
        agent.x = width + margin
        return True
    return False


def uses_facing(species: Species) -> bool:
    """Drifters and Pulsators are always drawn frontal"""
    return species in (Species.SWIMMER, Species.CRAWLER)


# ============================================================================
# Motion laws
# ============================================================================

def _advance_x(agent: Agent, ctx: MotionContext):
    # Cruise follows facing; the avoidance push is already in world space
    agent.x += agent.speed * agent.direction + agent.lateral_force * ctx.avoidance.lateral_damping


def update_swimmer(agent: Agent, time: float, ctx: MotionContext):
    """Unbounded horizontal cruise with a sinusoidal bob"""
    cfg = ctx.species[Species.SWIMMER]
    _advance_x(agent, ctx)
    amplitude = cfg.wave_amp * ctx.height
    agent.y = agent.base_y + math.sin(time + agent.phase) * amplitude + agent.offset_y
    if cfg.wraps:
        wrap_horizontal(agent, ctx.width, wrap_margin(agent, ctx))


def update_drifter(agent: Agent, time: float, ctx: MotionContext):
    """Lissajous-like wander around a static anchor; speed is an angular rate"""
    angle = time * agent.speed
    agent.x = agent.base_x + math.sin(angle + agent.phase_x) * agent.drift_radius
    agent.y = (agent.base_y
               + math.cos(angle + agent.phase) * agent.drift_radius * DRIFTER_VERTICAL_SQUASH
               + agent.offset_y)


def update_crawler(agent: Agent, time: float, ctx: MotionContext):
    """Creep along the sand with a fast small wiggle; no vertical avoidance"""
    cfg = ctx.species[Species.CRAWLER]
    _advance_x(agent, ctx)
    agent.y = agent.base_y + math.sin(time * cfg.wiggle_rate + agent.phase) * cfg.wiggle
    if cfg.wraps:
        wrap_horizontal(agent, ctx.width, wrap_margin(agent, ctx))


def pulse_value(time: float, rate: float, phase: float) -> float:
    """Squared sine: quick contraction, slow relaxation, always in [0, 1]"""
    return math.sin(time * rate + phase) ** 2


def update_pulsator(agent: Agent, time: float, ctx: MotionContext):
    """Jellyfish: pulse-driven propulsion, buoyant sink, slow lateral sway"""
    cfg = ctx.species[Species.PULSATOR]
    agent.pulse = pulse_value(time, cfg.pulse_rate, agent.phase)

    if agent.pulse > PULSATOR_PROPULSION_THRESHOLD:
        propulsion = PULSATOR_PROPULSION
    else:
        propulsion = PULSATOR_SINK
    agent.offset_y = (agent.offset_y + propulsion + agent.vertical_force) * PULSATOR_WATER_RESISTANCE

    agent.x = agent.base_x + math.sin(time * cfg.sway_rate + agent.phase_x) * agent.drift_radius
    agent.y = agent.base_y + agent.offset_y


def pulse_scale(pulse: float) -> Tuple[float, float]:
    """(scale_x, scale_y): narrow and elongated when closed, round when open"""
    return 1.0 - pulse * PULSATOR_WIDTH_SQUEEZE, 1.0 + pulse * PULSATOR_HEIGHT_STRETCH


def pulse_alpha(pulse: float) -> float:
    """More translucent while contracted"""
    return PULSATOR_BASE_ALPHA + (1.0 - pulse) * PULSATOR_ALPHA_RANGE


MOTION_LAWS: Dict[Species, Callable[[Agent, float, MotionContext], None]] = {
    Species.SWIMMER: update_swimmer,
    Species.DRIFTER: update_drifter,
    Species.CRAWLER: update_crawler,
    Species.PULSATOR: update_pulsator,
}


def update_agent(agent: Agent, time: float, ctx: MotionContext):
    """Apply the species motion law for one tick"""
    law = MOTION_LAWS.get(agent.species)
    if law is None:
        raise ValueError(f"No motion law for species {agent.species!r}")
    law(agent, time, ctx)
