"""Frame description for the rolling wheel.

The renderer is split in two halves: :func:`build_scene` turns the engine
state into a flat list of primitive draw commands in screen pixels, and the
Qt widget in :mod:`roda.view.view_widget` paints those commands with a
``QPainter``. Keeping the first half free of Qt makes every frame inspectable
from plain Python.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .. import camera
from ..engine import RodaEngine
from ..wheel_math import distance

__all__ = ["Line", "Circle", "Label", "Scene", "build_scene", "rotate"]

GROUND_COLOR = "#333333"
MARKER_COLOR = "#666666"
TRAIL_COLOR = "#4cc9f0"
ACCENT_COLOR = "#f8961e"
WHEEL_COLOR = "#3a86ff"
WHEEL_FILL_ALPHA = 0.1
TICK_LENGTH = 10.0
LABEL_DROP = 25.0
VALVE_RADIUS = 4.0


@dataclass
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    width: float = 1.0
    role: str = "line"


@dataclass
class Circle:
    cx: float
    cy: float
    r: float
    color: Optional[str] = None
    width: float = 1.0
    fill: Optional[str] = None
    fill_alpha: float = 1.0
    role: str = "circle"


@dataclass
class Label:
    x: float
    y: float
    text: str
    color: str
    size: int = 10
    bold: bool = False
    role: str = "label"


DrawCommand = Union[Line, Circle, Label]


@dataclass
class Scene:
    """Ordered draw commands plus the numbers they were derived from."""

    width: int
    height: int
    offset_x: float
    rotation: float
    commands: List[DrawCommand] = field(default_factory=list)

    def by_role(self, role: str) -> List[DrawCommand]:
        return [cmd for cmd in self.commands if cmd.role == role]


def rotate(x: float, y: float, angle: float) -> Tuple[float, float]:
    """Rotate a point clockwise on screen (y axis pointing down)."""

    c = math.cos(angle)
    s = math.sin(angle)
    return x * c - y * s, x * s + y * c


def build_scene(engine: RodaEngine, width: Optional[int] = None, height: Optional[int] = None) -> Scene:
    state = engine.state
    width = int(width if width is not None else state.viewport_width)
    height = int(height if height is not None else state.viewport_height)
    scale = state.pixel_scale
    ground_y = height - camera.GROUND_MARGIN
    start_x = camera.START_X

    current_cm = engine.current_distance()
    pixel_dist = current_cm * scale
    offset_x = camera.compute_camera_offset(current_cm, scale, width, start_x)
    rotation = current_cm / state.radius
    scene = Scene(width=width, height=height, offset_x=offset_x, rotation=rotation)
    cmds = scene.commands

    cmds.append(Line(0.0, ground_y, float(width), ground_y, GROUND_COLOR, 2.0, role="ground"))

    # Tout ce qui suit vit dans le repère du sol, décalé par la caméra.
    def sx(x: float) -> float:
        return x - offset_x

    positions = camera.marker_positions(
        offset_x, scale, state.marker_interval, width, engine.total_distance()
    )
    for position in positions:
        x = sx(start_x + position * scale)
        cmds.append(Line(x, ground_y, x, ground_y + TICK_LENGTH, GROUND_COLOR, 2.0, role="tick"))
        text, emphasized = camera.marker_label(position)
        if emphasized:
            cmds.append(Label(x - 5, ground_y + LABEL_DROP, text, GROUND_COLOR, 11, True, role="tick_label"))
        else:
            cmds.append(Label(x - 5, ground_y + LABEL_DROP, text, MARKER_COLOR, 10, False, role="tick_label"))

    cmds.append(Line(sx(start_x), ground_y, sx(start_x + pixel_dist), ground_y, TRAIL_COLOR, 4.0, role="trail"))

    for rev in range(1, int(math.floor(state.current_revolutions)) + 1):
        rx = sx(start_x + distance(state.radius, rev, state.pi_mode) * scale)
        cmds.append(
            Line(rx, ground_y - TICK_LENGTH, rx, ground_y + TICK_LENGTH, ACCENT_COLOR, 2.0, role="revolution")
        )

    wheel_r = state.radius * scale
    cx = sx(start_x + pixel_dist)
    cy = ground_y - wheel_r
    cmds.append(
        Circle(cx, cy, wheel_r, WHEEL_COLOR, 3.0, fill=WHEEL_COLOR, fill_alpha=WHEEL_FILL_ALPHA, role="rim")
    )
    for (ax, ay), (bx, by) in (((0.0, -wheel_r), (0.0, wheel_r)), ((-wheel_r, 0.0), (wheel_r, 0.0))):
        x1, y1 = rotate(ax, ay, rotation)
        x2, y2 = rotate(bx, by, rotation)
        cmds.append(Line(cx + x1, cy + y1, cx + x2, cy + y2, WHEEL_COLOR, 1.0, role="spoke"))
    vx, vy = rotate(0.0, wheel_r, rotation)
    cmds.append(Circle(cx + vx, cy + vy, VALVE_RADIUS, None, 0.0, fill=ACCENT_COLOR, role="valve"))
    return scene
