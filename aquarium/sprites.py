"""
Agent drawing.

Agents are blitted centred on their position. Swimmers and Crawlers are
mirrored when facing left; Drifters and Pulsators are always frontal.
Pulsators are additionally squeezed/stretched and faded by their pulse.
"""

from .entity import Agent
from .data_types import Species
from .motion import MotionContext, agent_size, pulse_scale, pulse_alpha, uses_facing


def is_drawable(image) -> bool:
    """Images are only referenced after load completion; guard anyway"""
    return image is not None and getattr(image, 'loaded', True)


def draw_agent(surface, agent: Agent, ctx: MotionContext) -> bool:
    """
    Draw one agent.

    Returns:
        False when the agent was skipped (image not ready)
    """
    if not is_drawable(agent.image):
        return False

    w, h = agent_size(agent, ctx.height, ctx.species)

    surface.save()
    try:
        surface.translate(agent.x, agent.y)
        if uses_facing(agent.species) and agent.direction == -1:
            surface.scale(-1.0, 1.0)
        if agent.species is Species.PULSATOR:
            sx, sy = pulse_scale(agent.pulse)
            surface.scale(sx, sy)
            surface.set_alpha(pulse_alpha(agent.pulse))
        surface.draw_image(agent.image, -w / 2.0, -h / 2.0, w, h)
    finally:
        surface.restore()
    return True
