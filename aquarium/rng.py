"""
Deterministic RNG utilities for aquarium simulation.

Uses SHA256 hashing to derive stable seeds from hierarchical components
(scene_seed, component_name, ...). All randomness uses
numpy.random.Generator(PCG64) for reproducible cross-session results.
"""

import hashlib
import numpy as np
from typing import Any

from .constants import TWO_PI


def make_seed(*components: Any) -> int:
    """
    Generate deterministic 64-bit seed from hierarchical components.

    Uses SHA256 to hash components into stable seed value.

    Args:
        *components: Seed components (scene_seed, component name, index, etc.)

    Returns:
        64-bit integer seed for numpy RNG

    Example:
        population_seed = make_seed(scene_seed, "population")
        emitter_seed = make_seed(scene_seed, "emitters")
    """
    # Join all components with colon separator
    hash_input = ":".join(str(c) for c in components)

    # SHA256 hash and extract 64-bit integer
    hash_bytes = hashlib.sha256(hash_input.encode('utf-8')).digest()
    seed = int.from_bytes(hash_bytes[:8], byteorder='big')

    return seed


def make_rng(*components: Any) -> np.random.Generator:
    """
    Build an independent PCG64 generator for one simulation component.

    Each subsystem owns its generator so extra draws in one subsystem
    never shift the sequence seen by another.
    """
    return np.random.Generator(np.random.PCG64(make_seed(*components)))


def random_phase(rng: np.random.Generator) -> float:
    """Uniform oscillation phase offset in [0, 2*pi)"""
    return float(rng.uniform(0.0, TWO_PI))


def random_direction(rng: np.random.Generator) -> int:
    """Lateral facing, -1 or +1 with equal probability"""
    return 1 if rng.random() < 0.5 else -1


def uniform_range(rng: np.random.Generator, bounds) -> float:
    """Draw from a (low, high) tuple; equal bounds return the bound itself"""
    low, high = bounds
    if high <= low:
        return float(low)
    return float(rng.uniform(low, high))
