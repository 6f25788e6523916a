"""Scale, tick spacing and panning for the ground plane.

Everything here is a pure function of the wheel radius, the viewport size and
the distance already covered. The engine caches :func:`compute_scale` and
:func:`compute_marker_interval` and only refreshes them when the radius or the
viewport changes; the offset and the visible markers are evaluated per frame.
"""

from __future__ import annotations

import math
from typing import List, Tuple

__all__ = [
    "START_X",
    "GROUND_MARGIN",
    "MIN_SCALE",
    "MAX_SCALE",
    "TARGET_MARKER_PX",
    "PAN_THRESHOLD",
    "compute_scale",
    "compute_marker_interval",
    "compute_camera_offset",
    "marker_positions",
    "marker_label",
    "world_cm_at",
]

START_X = 50.0
GROUND_MARGIN = 50.0
TOP_MARGIN = 20.0
SIDE_MARGIN = 40.0
WHEEL_FIT_FACTOR = 2.2
MIN_SCALE = 0.001
MAX_SCALE = 100.0
TARGET_MARKER_PX = 180.0
PAN_THRESHOLD = 0.6
VISIBLE_MARGIN_PX = 100.0
MARKER_OVERSHOOT = 5


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def compute_scale(radius: float, viewport_width: float, viewport_height: float) -> float:
    """Return the pixels-per-cm factor fitting the whole wheel in the viewport."""

    available_height = viewport_height - (GROUND_MARGIN + TOP_MARGIN)
    available_width = viewport_width - SIDE_MARGIN
    ideal = min(available_height, available_width) / (radius * WHEEL_FIT_FACTOR)
    return clamp(ideal, MIN_SCALE, MAX_SCALE)


def compute_marker_interval(pixel_scale: float) -> float:
    """Return a tick spacing in cm close to 180 px on screen.

    The spacing is rounded to ``1``, ``2`` or ``10`` times a power of ten
    (fives are skipped on purpose) and never drops below one centimetre.
    """

    approx_cm = TARGET_MARKER_PX / pixel_scale
    magnitude = 10.0 ** math.floor(math.log10(approx_cm))
    leading_digit = approx_cm / magnitude
    if leading_digit < 1.6:
        interval = magnitude
    elif leading_digit < 4.5:
        interval = 2.0 * magnitude
    else:
        interval = 10.0 * magnitude
    return max(1.0, interval)


def compute_camera_offset(
    current_distance_cm: float,
    pixel_scale: float,
    viewport_width: float,
    start_x: float = START_X,
) -> float:
    """Return the horizontal pan keeping the wheel left of 60% of the viewport."""

    wheel_x = start_x + current_distance_cm * pixel_scale
    threshold = viewport_width * PAN_THRESHOLD
    if wheel_x > threshold:
        return wheel_x - threshold
    return 0.0


def marker_positions(
    offset_x: float,
    pixel_scale: float,
    marker_interval: float,
    viewport_width: float,
    total_distance_cm: float,
) -> List[float]:
    """Return the tick positions (cm) worth drawing for the current camera."""

    visible_start = (offset_x - VISIBLE_MARGIN_PX) / pixel_scale
    visible_end = (offset_x + viewport_width + VISIBLE_MARGIN_PX) / pixel_scale
    end = min(total_distance_cm + marker_interval * MARKER_OVERSHOOT, visible_end)
    index = int(math.floor(max(0.0, visible_start) / marker_interval))
    positions: List[float] = []
    while True:
        position = index * marker_interval
        if position > end:
            break
        positions.append(position)
        index += 1
    return positions


def _plain(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def marker_label(position_cm: float) -> Tuple[str, bool]:
    """Return ``(text, emphasized)`` for a tick at ``position_cm``.

    Whole metres from one metre on are written in metres and emphasized,
    everything else stays in centimetres.
    """

    if position_cm >= 100 and math.fmod(position_cm, 100.0) == 0:
        return f"{_plain(position_cm / 100.0)}m", True
    return f"{_plain(position_cm)}cm", False


def world_cm_at(x_px: float, offset_x: float, pixel_scale: float, start_x: float = START_X) -> float:
    """Inverse of the camera mapping: ground position (cm) under screen ``x_px``."""

    return (x_px + offset_x - start_x) / pixel_scale
