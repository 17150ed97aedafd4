"""
Proximity avoidance between agents.

Separation-only flocking: every agent scans every other agent (O(n^2),
no spatial partitioning) and is pushed away from neighbours closer than
its personal space. Forces are computed for the whole population from the
positions at tick start, then written back:

- lateral_force: horizontal push, consumed by Swimmer/Crawler translation
- vertical_force: vertical push (zero for Crawlers)
- offset_y: for Swimmers and Drifters, offset = offset * friction + force,
  a damped dodge rather than an instant snap. Pulsators fold the force
  into their own water-resistance damping (see motion.py).
"""

import numpy as np
from typing import Dict, List, Tuple

from .entity import Agent
from .data_types import Species, SpeciesConfig, AvoidanceConfig
from .motion import agent_size


# Species whose offset_y is smoothed here
SMOOTHED_SPECIES = (Species.SWIMMER, Species.DRIFTER)


def compute_avoidance_forces(
    positions: np.ndarray,
    thresholds: np.ndarray,
    avoid_factor: float,
    vertical_mask: np.ndarray = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Pairwise repulsion forces (vectorized).

    Args:
        positions: (N, 2) agent positions
        thresholds: (N,) personal-space radius per agent
        avoid_factor: Force per pixel of intrusion
        vertical_mask: (N,) bool, False for agents exempt from vertical force

    Returns:
        (fx, fy) arrays of shape (N,)

    Neighbour j intruding on agent i contributes
    (threshold_i - dist_ij) * avoid_factor, pushing i away from the side j is
    on. Coincident agents break the tie by index: the lower index is pushed
    towards negative x/y, the higher index towards positive.
    """
    n = len(positions)
    if n < 2:
        return np.zeros(n, dtype=np.float64), np.zeros(n, dtype=np.float64)

    positions = np.asarray(positions, dtype=np.float64)
    thresholds = np.asarray(thresholds, dtype=np.float64)

    # dx[i, j] = x_j - x_i  (where neighbour j sits relative to i)
    dx = positions[np.newaxis, :, 0] - positions[:, np.newaxis, 0]
    dy = positions[np.newaxis, :, 1] - positions[:, np.newaxis, 1]
    dist = np.hypot(dx, dy)

    intruding = dist < thresholds[:, np.newaxis]
    np.fill_diagonal(intruding, False)
    push = np.where(intruding, (thresholds[:, np.newaxis] - dist) * avoid_factor, 0.0)

    # +1 when j comes after i, -1 before; only used for exact overlaps
    idx = np.arange(n)
    order = np.where(idx[np.newaxis, :] > idx[:, np.newaxis], 1.0, -1.0)
    coincident = (dx == 0.0) & (dy == 0.0)

    side_x = np.where(coincident, order, np.sign(dx))
    side_y = np.where(coincident, order, np.sign(dy))

    fx = -np.sum(push * side_x, axis=1)
    fy = -np.sum(push * side_y, axis=1)

    if vertical_mask is not None:
        fy = np.where(vertical_mask, fy, 0.0)

    return fx, fy


def apply_avoidance(
    agents: List[Agent],
    scene_height: float,
    species: Dict[Species, SpeciesConfig],
    config: AvoidanceConfig
):
    """
    Compute avoidance for all agents and write it back in place.

    Reads every position before writing anything, so the result does not
    depend on iteration order.
    """
    if not agents:
        return

    positions = np.array([(a.x, a.y) for a in agents], dtype=np.float64)
    widths = np.array([agent_size(a, scene_height, species)[0] for a in agents], dtype=np.float64)
    vertical_mask = np.array([a.species is not Species.CRAWLER for a in agents], dtype=bool)

    fx, fy = compute_avoidance_forces(
        positions,
        widths * config.personal_space,
        config.avoid_factor,
        vertical_mask
    )

    for agent, force_x, force_y in zip(agents, fx, fy):
        agent.lateral_force = float(force_x)
        agent.vertical_force = float(force_y)
        if agent.species in SMOOTHED_SPECIES:
            agent.offset_y = agent.offset_y * config.friction + agent.vertical_force
