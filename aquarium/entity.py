"""
Agent runtime representation.

Agents are spawned once per run by spawning.py and live until teardown.
Position is recomputed every tick from the anchor plus oscillation and
avoidance offsets; only Swimmers and Crawlers translate freely along x.
"""

from dataclasses import dataclass
from typing import Any

from .data_types import Species


@dataclass
class Agent:
    """
    Runtime creature in simulation.

    Attributes:
        agent_id: Unique identifier (format: "{species}-{index:04d}")
        species: Motion/rendering behaviour, fixed at spawn
        x, y: Current position (px)
        base_x, base_y: Anchor the motion law oscillates around
        speed: Linear speed (Swimmer/Crawler) or angular rate (Drifter)
        direction: Lateral facing, -1 or +1, assigned once at spawn
        phase, phase_x: Per-agent oscillation offsets
        offset_y: Exponentially smoothed vertical avoidance/propulsion offset
        lateral_force: Horizontal avoidance force from the latest tick
        vertical_force: Vertical avoidance force from the latest tick
        drift_radius: Wander amplitude (0 for non-drifting species)
        aspect_ratio: Image width / height, fixed at spawn
        image: Host image handle drawn for this agent
        pulse: 0..1 bell contraction, recomputed each tick (Pulsators only)
    """
    agent_id: str
    species: Species
    x: float
    y: float
    base_x: float
    base_y: float
    speed: float
    direction: int
    phase: float
    phase_x: float
    drift_radius: float
    aspect_ratio: float
    image: Any = None
    offset_y: float = 0.0
    lateral_force: float = 0.0
    vertical_force: float = 0.0
    pulse: float = 0.0

    def __post_init__(self):
        """Normalise facing and ensure float coordinates"""
        if self.direction not in (-1, 1):
            raise ValueError(f"direction must be -1 or +1, got {self.direction}")
        self.x = float(self.x)
        self.y = float(self.y)
        self.base_x = float(self.base_x)
        self.base_y = float(self.base_y)

    def to_dict(self) -> dict:
        """
        Serialize agent to JSON-compatible dict.

        Returns:
            Dict with all agent fields (image reduced to its name)
        """
        return {
            'agent_id': self.agent_id,
            'species': self.species.value,
            'position': [self.x, self.y],
            'anchor': [self.base_x, self.base_y],
            'speed': self.speed,
            'direction': self.direction,
            'phase': self.phase,
            'phase_x': self.phase_x,
            'offset_y': self.offset_y,
            'lateral_force': self.lateral_force,
            'vertical_force': self.vertical_force,
            'drift_radius': self.drift_radius,
            'aspect_ratio': self.aspect_ratio,
            'image': getattr(self.image, 'name', None),
            'pulse': self.pulse,
        }

    @classmethod
    def from_dict(cls, data: dict, image: Any = None) -> 'Agent':
        """
        Deserialize agent from dict.

        Args:
            data: Dict with agent fields
            image: Image handle to attach (dicts only carry the name)

        Returns:
            Agent instance
        """
        return cls(
            agent_id=data['agent_id'],
            species=Species(data['species']),
            x=data['position'][0],
            y=data['position'][1],
            base_x=data['anchor'][0],
            base_y=data['anchor'][1],
            speed=data['speed'],
            direction=data['direction'],
            phase=data['phase'],
            phase_x=data['phase_x'],
            drift_radius=data['drift_radius'],
            aspect_ratio=data['aspect_ratio'],
            image=image,
            offset_y=data.get('offset_y', 0.0),
            lateral_force=data.get('lateral_force', 0.0),
            vertical_force=data.get('vertical_force', 0.0),
            pulse=data.get('pulse', 0.0)
        )
