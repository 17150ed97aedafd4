"""
Aquarium Scene Simulation

A deterministic, headless animated aquarium: a population of creatures
(swimmers, drifters, crawlers, pulsators) moving over a layered ocean
scene with ambient particles, composited one frame per tick onto any
drawing surface the host provides.

Architecture: the simulation owns all state; the host only supplies
loaded images, a drawing surface and a frame scheduler.
"""

__version__ = "0.1.0"
