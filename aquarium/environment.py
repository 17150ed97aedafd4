"""
Environment layers: ocean gradient, light rays, sand bed, decor, vegetation.

Every layer is a pure function of the simulation clock and the static
scenery generated at initialisation, so painting a layer twice for the
same time produces the same draw calls.
"""

import math
from typing import List, Sequence

import numpy as np

from .data_types import EnvironmentConfig
from .scenery import Decor, SandBlemish, Weed, split_decor
from .surface import (
    COMPOSITE_MULTIPLY,
    blend_gradients,
    gradient_colors,
)
from .constants import (
    OCEAN_DAY_STOPS,
    OCEAN_NIGHT_STOPS,
    SAND_TOP_COLOR,
    SAND_BOTTOM_COLOR,
    LIGHT_RAY_COUNT,
    LIGHT_RAY_TOP_HALF_WIDTH,
    LIGHT_RAY_BOTTOM_HALF_WIDTH,
    LIGHT_RAY_SWAY_RATE,
    LIGHT_RAY_SWAY,
    WEED_SWAY,
    WEED_COLOR,
    TWO_PI,
)


def day_night_cycle(time: float, rate: float) -> float:
    """
    Day/night blend factor in [0, 1].

    0 is full day (at time 0), 1 is full night.
    """
    return (1.0 - math.cos(time * rate)) / 2.0


def light_ray_opacity(cycle: float, base: float) -> float:
    """Ray opacity fades out with the night: base * (1 - cycle)"""
    return base * (1.0 - cycle)


class EnvironmentRenderer:
    """
    Paints the background and foreground scenery layers.

    Args:
        width, height: Scene size (px)
        config: Environment configuration
        decor: Placed decor (both buckets)
        weeds: Vegetation blades
        blemishes: Fixed sand texture
    """

    def __init__(
        self,
        width: float,
        height: float,
        config: EnvironmentConfig,
        decor: Sequence[Decor] = (),
        weeds: Sequence[Weed] = (),
        blemishes: Sequence[SandBlemish] = ()
    ):
        self.width = width
        self.height = height
        self.config = config
        self.background_decor, self.foreground_decor = split_decor(decor)
        self.weeds: List[Weed] = list(weeds)
        self.blemishes: List[SandBlemish] = list(blemishes)

        bands = max(1, config.gradient_bands)
        self._ocean_day = gradient_colors(OCEAN_DAY_STOPS, bands)
        self._ocean_night = gradient_colors(OCEAN_NIGHT_STOPS, bands)
        self._sand_bands = gradient_colors([(0.0, SAND_TOP_COLOR), (1.0, SAND_BOTTOM_COLOR)], bands)

    @property
    def sand_top(self) -> float:
        return self.height * (1.0 - self.config.sand_ratio)

    def cycle(self, time: float) -> float:
        return day_night_cycle(time, self.config.day_night_rate)

    # ------------------------------------------------------------------
    # Background
    # ------------------------------------------------------------------

    def paint_ocean(self, surface, time: float):
        """Vertical water gradient blended between day and night stops"""
        colors = blend_gradients(self._ocean_day, self._ocean_night, self.cycle(time))
        _fill_bands(surface, colors, 0.0, self.width, self.height)

    def paint_light_rays(self, surface, time: float):
        """Slanted translucent rays; invisible at full night"""
        opacity = light_ray_opacity(self.cycle(time), self.config.light_ray_opacity)
        if opacity <= 0.0:
            return

        color = (255.0, 255.0, 255.0, opacity)
        surface.save()
        try:
            for i in range(LIGHT_RAY_COUNT):
                slant = math.sin(time * LIGHT_RAY_SWAY_RATE + i) * LIGHT_RAY_SWAY * self.width
                x = (self.width / LIGHT_RAY_COUNT) * i + self.width / (2 * LIGHT_RAY_COUNT)
                surface.begin_path()
                surface.move_to(x - LIGHT_RAY_TOP_HALF_WIDTH, 0.0)
                surface.line_to(x + LIGHT_RAY_TOP_HALF_WIDTH, 0.0)
                surface.line_to(x + LIGHT_RAY_BOTTOM_HALF_WIDTH + slant, self.height)
                surface.line_to(x - LIGHT_RAY_BOTTOM_HALF_WIDTH + slant, self.height)
                surface.close_path()
                surface.fill_path(color)
        finally:
            surface.restore()

    def paint_sand(self, surface, time: float = 0.0):
        """Sand gradient plus fixed blemishes in multiply mode"""
        sand_top = self.sand_top
        _fill_bands(surface, self._sand_bands, sand_top, self.width, self.height - sand_top)

        surface.save()
        try:
            surface.set_composite(COMPOSITE_MULTIPLY)
            for s in self.blemishes:
                surface.save()
                surface.translate(s.x, s.y)
                surface.scale(s.width, s.height)
                surface.fill_arc(0.0, 0.0, 1.0, 0.0, TWO_PI, (0.0, 0.0, 0.0, s.opacity))
                surface.restore()
        finally:
            surface.restore()

    # ------------------------------------------------------------------
    # Decor and vegetation
    # ------------------------------------------------------------------

    def paint_background_decor(self, surface, time: float = 0.0):
        _draw_decor(surface, self.background_decor)

    def paint_foreground_decor(self, surface, time: float = 0.0):
        _draw_decor(surface, self.foreground_decor)

    def paint_vegetation(self, surface, time: float):
        """Swaying blades; drawn last so they occlude agents behind them"""
        h_scene = self.height
        for w in self.weeds:
            h = h_scene * w.target_height
            half = h_scene * w.width_ratio / 2.0
            sway = math.sin(time + w.phase) * (h * WEED_SWAY)
            surface.begin_path()
            surface.move_to(w.x - half, h_scene)
            surface.quadratic_curve_to(w.x + sway * 0.5, h_scene - h / 2.0, w.x + sway, h_scene - h)
            surface.quadratic_curve_to(w.x + sway * 0.5 + half, h_scene - h / 2.0, w.x + half, h_scene)
            surface.fill_path(WEED_COLOR)

    def clear(self):
        self.background_decor = []
        self.foreground_decor = []
        self.weeds = []
        self.blemishes = []


def _fill_bands(surface, colors: np.ndarray, top: float, width: float, height: float):
    """Render a sampled vertical gradient as stacked rectangles"""
    bands = len(colors)
    if bands == 0 or height <= 0:
        return
    band_h = height / bands
    for i, (r, g, b) in enumerate(colors):
        # +1px overlap hides seams between bands
        surface.fill_rect(0.0, top + i * band_h, width, band_h + 1.0,
                          (float(r), float(g), float(b), 1.0))


def _draw_decor(surface, decor: Sequence[Decor]):
    for d in decor:
        surface.draw_image(d.image, d.x - d.width / 2.0, d.y - d.height, d.width, d.height)
