"""
Drawing-surface contract and the headless recording backend.

The simulation paints through a 2D immediate-mode surface: rectangles,
arcs, quadratic/bezier paths, image blits, a save/restore transform stack,
global alpha, a blur shadow and a multiply compositing mode. Any host
backend implementing DrawingSurface can display frames; RecordingSurface
keeps every call as a DrawCommand for headless runs and tests.

Colours are (r, g, b, a) tuples: channels 0-255, alpha 0.0-1.0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Protocol, Sequence, Tuple

import numpy as np


Color = Tuple[float, float, float, float]

COMPOSITE_SOURCE_OVER = 'source-over'
COMPOSITE_MULTIPLY = 'multiply'


# ============================================================================
# Colour helpers
# ============================================================================

def hex_to_rgba(value: str, alpha: float = 1.0) -> Color:
    """Parse '#rrggbb' into an RGBA tuple"""
    value = value.lstrip('#')
    if len(value) != 6:
        raise ValueError(f"Expected #rrggbb colour, got '#{value}'")
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return (float(r), float(g), float(b), float(alpha))


def gradient_colors(stops: Sequence[Tuple[float, str]], bands: int) -> np.ndarray:
    """
    Sample a vertical gradient at the centre of each band.

    Args:
        stops: [(offset 0-1, '#rrggbb'), ...] sorted by offset
        bands: Number of horizontal bands

    Returns:
        (bands, 3) float64 array of RGB values
    """
    offsets = np.array([offset for offset, _ in stops], dtype=np.float64)
    rgb = np.array([hex_to_rgba(color)[:3] for _, color in stops], dtype=np.float64)
    samples = (np.arange(bands, dtype=np.float64) + 0.5) / bands
    return np.stack([np.interp(samples, offsets, rgb[:, c]) for c in range(3)], axis=1)


def blend_gradients(day: np.ndarray, night: np.ndarray, cycle: float) -> np.ndarray:
    """Linear blend of two sampled gradients (cycle 0 = day, 1 = night)"""
    cycle = float(np.clip(cycle, 0.0, 1.0))
    return day * (1.0 - cycle) + night * cycle


# ============================================================================
# Surface protocol
# ============================================================================

class DrawingSurface(Protocol):
    """2D immediate-mode drawing surface consumed by the compositor"""

    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color) -> None: ...

    def fill_arc(self, x: float, y: float, radius: float, start: float, end: float,
                 color: Color) -> None: ...

    def stroke_arc(self, x: float, y: float, radius: float, start: float, end: float,
                   color: Color, line_width: float = 1.0) -> None: ...

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def quadratic_curve_to(self, cx: float, cy: float, x: float, y: float) -> None: ...

    def bezier_curve_to(self, c1x: float, c1y: float, c2x: float, c2y: float,
                        x: float, y: float) -> None: ...

    def close_path(self) -> None: ...

    def fill_path(self, color: Color) -> None: ...

    def draw_image(self, image: Any, x: float, y: float, w: float, h: float) -> None: ...

    def save(self) -> None: ...

    def restore(self) -> None: ...

    def translate(self, dx: float, dy: float) -> None: ...

    def scale(self, sx: float, sy: float) -> None: ...

    def rotate(self, angle: float) -> None: ...

    def set_alpha(self, alpha: float) -> None: ...

    def set_shadow(self, blur: float, color: Color) -> None: ...

    def set_composite(self, mode: str) -> None: ...


# ============================================================================
# Recording backend
# ============================================================================

@dataclass
class DrawCommand:
    """One recorded draw call with the state it was issued under"""
    op: str
    args: tuple
    alpha: float
    composite: str
    shadow_blur: float
    depth: int  # save() nesting level
    matrix: np.ndarray = field(repr=False)

    def origin(self) -> Tuple[float, float]:
        """Device-space position of the local origin when the call was made"""
        return float(self.matrix[0, 2]), float(self.matrix[1, 2])


@dataclass
class _SurfaceState:
    alpha: float
    composite: str
    shadow_blur: float
    shadow_color: Color
    matrix: np.ndarray


class RecordingSurface:
    """
    Headless DrawingSurface that records every draw call.

    Only filling/stroking/blitting operations are recorded as commands;
    state changes (alpha, transform, composite) are folded into the
    commands that follow them.
    """

    def __init__(self, width: int = 0, height: int = 0):
        self.width = width
        self.height = height
        self.commands: List[DrawCommand] = []
        self._path: List[tuple] = []
        self._stack: List[_SurfaceState] = []
        self._state = _SurfaceState(
            alpha=1.0,
            composite=COMPOSITE_SOURCE_OVER,
            shadow_blur=0.0,
            shadow_color=(0.0, 0.0, 0.0, 0.0),
            matrix=np.eye(3, dtype=np.float64)
        )

    # ------------------------------------------------------------------
    # Recording helpers
    # ------------------------------------------------------------------

    def _record(self, op: str, *args):
        self.commands.append(DrawCommand(
            op=op,
            args=args,
            alpha=self._state.alpha,
            composite=self._state.composite,
            shadow_blur=self._state.shadow_blur,
            depth=len(self._stack),
            matrix=self._state.matrix.copy()
        ))

    def clear(self):
        """Drop recorded commands (state stack is kept)"""
        self.commands = []

    def ops(self) -> List[str]:
        """Recorded operation names, in order"""
        return [c.op for c in self.commands]

    def commands_by_op(self, op: str) -> List[DrawCommand]:
        return [c for c in self.commands if c.op == op]

    @property
    def depth(self) -> int:
        return len(self._stack)

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def fill_rect(self, x, y, w, h, color):
        self._record('fill_rect', x, y, w, h, color)

    def fill_arc(self, x, y, radius, start, end, color):
        self._record('fill_arc', x, y, radius, start, end, color)

    def stroke_arc(self, x, y, radius, start, end, color, line_width=1.0):
        self._record('stroke_arc', x, y, radius, start, end, color, line_width)

    def begin_path(self):
        self._path = []

    def move_to(self, x, y):
        self._path.append(('M', x, y))

    def line_to(self, x, y):
        self._path.append(('L', x, y))

    def quadratic_curve_to(self, cx, cy, x, y):
        self._path.append(('Q', cx, cy, x, y))

    def bezier_curve_to(self, c1x, c1y, c2x, c2y, x, y):
        self._path.append(('C', c1x, c1y, c2x, c2y, x, y))

    def close_path(self):
        self._path.append(('Z',))

    def fill_path(self, color):
        self._record('fill_path', tuple(self._path), color)

    def draw_image(self, image, x, y, w, h):
        self._record('draw_image', image, x, y, w, h)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def save(self):
        s = self._state
        self._stack.append(_SurfaceState(s.alpha, s.composite, s.shadow_blur,
                                         s.shadow_color, s.matrix.copy()))

    def restore(self):
        # Unbalanced restore is ignored, matching canvas semantics
        if self._stack:
            self._state = self._stack.pop()

    def _concat(self, m: np.ndarray):
        self._state.matrix = self._state.matrix @ m

    def translate(self, dx, dy):
        self._concat(np.array([[1.0, 0.0, dx], [0.0, 1.0, dy], [0.0, 0.0, 1.0]]))

    def scale(self, sx, sy):
        self._concat(np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]]))

    def rotate(self, angle):
        c, s = np.cos(angle), np.sin(angle)
        self._concat(np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]]))

    def set_alpha(self, alpha):
        self._state.alpha = float(alpha)

    def set_shadow(self, blur, color):
        self._state.shadow_blur = float(blur)
        self._state.shadow_color = color

    def set_composite(self, mode):
        self._state.composite = mode
