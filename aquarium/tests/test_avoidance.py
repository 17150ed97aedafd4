"""
Tests for proximity avoidance.

Verifies:
- Coincident agents acquire nonzero opposite-signed offsets after one tick
- Force is signed by the side the neighbour is on
- Agents outside personal space are unaffected
- Vertical offset smoothing: offset = offset * friction + force
- Crawlers are exempt from the vertical term
- Result does not depend on iteration order
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from aquarium.entity import Agent
from aquarium.data_types import Species, AvoidanceConfig, default_species_configs
from aquarium.avoidance import apply_avoidance, compute_avoidance_forces
from aquarium import constants as C


HEIGHT = 400.0  # Swimmer visual width = 100 px, personal space 110 px


def _agent(agent_id: str, species: Species, x: float, y: float) -> Agent:
    return Agent(
        agent_id=agent_id,
        species=species,
        x=x, y=y, base_x=x, base_y=y,
        speed=0.3,
        direction=1,
        phase=0.0,
        phase_x=0.0,
        drift_radius=0.0,
        aspect_ratio=1.0
    )


def _apply(agents):
    apply_avoidance(agents, HEIGHT, default_species_configs(), AvoidanceConfig())


def test_coincident_agents_split():
    """Two agents at identical anchors get opposite-signed offsets"""
    a = _agent("swimmer-0000", Species.SWIMMER, 200.0, 150.0)
    b = _agent("swimmer-0001", Species.SWIMMER, 200.0, 150.0)

    _apply([a, b])

    print(f"  a: lateral={a.lateral_force:+.3f} offset_y={a.offset_y:+.3f}")
    print(f"  b: lateral={b.lateral_force:+.3f} offset_y={b.offset_y:+.3f}")

    assert a.lateral_force != 0.0
    assert b.lateral_force != 0.0
    assert np.sign(a.lateral_force) == -np.sign(b.lateral_force)
    assert a.offset_y != 0.0
    assert np.sign(a.offset_y) == -np.sign(b.offset_y)

    # Full intrusion: threshold * avoid_factor
    expected = 100.0 * C.PERSONAL_SPACE * C.AVOID_FACTOR
    assert abs(a.lateral_force) == pytest.approx(expected)
    print("[OK] Coincident agents pushed apart")


def test_force_signed_by_side():
    left = _agent("swimmer-0000", Species.SWIMMER, 100.0, 100.0)
    right = _agent("swimmer-0001", Species.SWIMMER, 150.0, 100.0)

    _apply([left, right])

    # Intrusion = 110 - 50 px
    expected = 60.0 * C.AVOID_FACTOR
    assert left.lateral_force == pytest.approx(-expected)
    assert right.lateral_force == pytest.approx(expected)
    assert left.vertical_force == 0.0
    assert right.vertical_force == 0.0


def test_outside_personal_space_unaffected():
    a = _agent("swimmer-0000", Species.SWIMMER, 100.0, 100.0)
    b = _agent("swimmer-0001", Species.SWIMMER, 300.0, 100.0)

    _apply([a, b])

    assert a.lateral_force == 0.0
    assert b.lateral_force == 0.0
    assert a.offset_y == 0.0


def test_offset_smoothing():
    """A lone agent's offset decays by the friction factor"""
    agent = _agent("drifter-0000", Species.DRIFTER, 100.0, 100.0)
    agent.offset_y = 10.0

    _apply([agent])
    assert agent.offset_y == pytest.approx(10.0 * C.FRICTION)

    for _ in range(99):
        _apply([agent])
    assert agent.offset_y == pytest.approx(10.0 * C.FRICTION ** 100)


def test_crawler_vertical_exempt():
    crawler = _agent("crawler-0000", Species.CRAWLER, 100.0, 100.0)
    swimmer = _agent("swimmer-0001", Species.SWIMMER, 100.0, 110.0)

    _apply([crawler, swimmer])

    assert crawler.vertical_force == 0.0
    assert crawler.offset_y == 0.0
    assert swimmer.vertical_force > 0.0


def test_pulsator_offset_left_to_motion():
    """Pulsators receive the force but fold it in during their own update"""
    jelly = _agent("pulsator-0000", Species.PULSATOR, 100.0, 100.0)
    swimmer = _agent("swimmer-0001", Species.SWIMMER, 100.0, 90.0)
    jelly.offset_y = 5.0

    _apply([jelly, swimmer])

    assert jelly.vertical_force > 0.0
    assert jelly.offset_y == 5.0


def test_order_independent():
    positions = [(100.0, 100.0), (140.0, 120.0), (170.0, 90.0), (400.0, 300.0)]
    forward = [_agent(f"swimmer-{i:04d}", Species.SWIMMER, x, y) for i, (x, y) in enumerate(positions)]
    backward = [_agent(f"swimmer-{i:04d}", Species.SWIMMER, x, y) for i, (x, y) in enumerate(positions)]

    _apply(forward)
    _apply(list(reversed(backward)))

    for a, b in zip(forward, backward):
        assert a.lateral_force == pytest.approx(b.lateral_force)
        assert a.vertical_force == pytest.approx(b.vertical_force)


def test_compute_forces_degenerate():
    fx, fy = compute_avoidance_forces(np.zeros((1, 2)), np.array([10.0]), 0.03)
    assert fx.tolist() == [0.0]
    assert fy.tolist() == [0.0]

    fx, fy = compute_avoidance_forces(np.zeros((0, 2)), np.zeros(0), 0.03)
    assert len(fx) == 0

    apply_avoidance([], HEIGHT, default_species_configs(), AvoidanceConfig())


def test_forces_sum_to_zero_for_equal_sizes():
    """Equal thresholds make the pairwise pushes antisymmetric"""
    rng = np.random.default_rng(11)
    positions = rng.uniform(0.0, 150.0, size=(12, 2))
    thresholds = np.full(12, 110.0)

    fx, fy = compute_avoidance_forces(positions, thresholds, 0.03)

    assert np.sum(fx) == pytest.approx(0.0, abs=1e-9)
    assert np.sum(fy) == pytest.approx(0.0, abs=1e-9)
