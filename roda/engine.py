"""Simulation state and clock for the rolling wheel.

:class:`RodaEngine` owns the single :class:`SimulationState` of the
application. The UI and the scenario drivers only talk to it through the
mutators and queries below; the view widget calls :meth:`RodaEngine.advance`
once per frame before painting.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from . import camera
from .wheel_math import circumference, distance, normalize_pi_mode

__all__ = [
    "BASE_SPEED_CM_PER_SECOND",
    "SPEED_MULTIPLIERS",
    "MODES",
    "SimulationState",
    "RodaEngine",
]

BASE_SPEED_CM_PER_SECOND = 30.0
SPEED_MULTIPLIERS = (0.5, 1.0, 2.0)
MODES = ("free", "demo", "step", "quiz")

CompletionCallback = Callable[[], None]


def _coerce_float(value: object) -> Optional[float]:
    """Return ``value`` as a finite ``float`` or ``None`` when it is not one."""

    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value) if isinstance(value, (int, float)) else float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


@dataclass
class SimulationState:
    """Everything the clock, the camera and the renderer read."""

    radius: float = 56.0
    target_revolutions: float = 10.0
    current_revolutions: float = 0.0
    speed_multiplier: float = 1.0
    is_playing: bool = False
    pi_mode: str = "3.14"
    mode: str = "free"
    pixel_scale: float = 2.0
    marker_interval: float = 100.0
    last_timestamp: Optional[float] = None
    viewport_width: int = 800
    viewport_height: int = 400


class RodaEngine:
    """Single writer of the simulation state."""

    def __init__(self, state: Optional[SimulationState] = None) -> None:
        self.state = state if state is not None else SimulationState()
        self._listeners: List[CompletionCallback] = []
        self._start_time = time.perf_counter()
        self._refresh_scale()

    # ------------------------------------------------------------------ helpers
    @property
    def now_ms(self) -> float:
        return (time.perf_counter() - self._start_time) * 1000.0

    def _debug(self, message: str) -> None:
        print(f"[Roda][DEBUG] {message}", flush=True)

    def _refresh_scale(self) -> None:
        s = self.state
        s.pixel_scale = camera.compute_scale(s.radius, s.viewport_width, s.viewport_height)
        s.marker_interval = camera.compute_marker_interval(s.pixel_scale)

    # ------------------------------------------------------------------ queries
    @property
    def current_revolutions(self) -> float:
        return self.state.current_revolutions

    def circumference(self) -> float:
        return circumference(self.state.radius, self.state.pi_mode)

    def current_distance(self) -> float:
        return distance(self.state.radius, self.state.current_revolutions, self.state.pi_mode)

    def total_distance(self) -> float:
        return distance(self.state.radius, self.state.target_revolutions, self.state.pi_mode)

    def rotation_angle(self) -> float:
        """Rolling without slipping: arc length over radius, in radians."""

        return self.current_distance() / self.state.radius

    def camera_offset(self) -> float:
        s = self.state
        return camera.compute_camera_offset(self.current_distance(), s.pixel_scale, s.viewport_width)

    def is_complete(self) -> bool:
        return self.state.current_revolutions >= self.state.target_revolutions

    def snapshot(self) -> Dict[str, object]:
        s = self.state
        return {
            "radius": s.radius,
            "targetRevolutions": s.target_revolutions,
            "currentRevolutions": s.current_revolutions,
            "speedMultiplier": s.speed_multiplier,
            "piMode": s.pi_mode,
            "mode": s.mode,
            "isPlaying": s.is_playing,
            "circumference": self.circumference(),
            "distance": self.current_distance(),
            "totalDistance": self.total_distance(),
            "rotationAngle": self.rotation_angle(),
            "pixelScale": s.pixel_scale,
            "markerInterval": s.marker_interval,
        }

    # ------------------------------------------------------------------ events
    def on_completion(self, callback: CompletionCallback) -> Callable[[], None]:
        """Register ``callback`` for run completion and return an unsubscriber."""

        self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    def _emit_completion(self) -> None:
        for callback in list(self._listeners):
            callback()

    # ------------------------------------------------------------------ mutators
    def set_radius(self, value: object) -> bool:
        radius = _coerce_float(value)
        if radius is None or radius <= 0:
            return False
        self.state.radius = radius
        self._refresh_scale()
        self._debug(
            "radius=%s pixelScale=%.4f markerInterval=%s"
            % (radius, self.state.pixel_scale, self.state.marker_interval)
        )
        # A new wheel always starts from the origin.
        self.reset()
        return True

    def set_target_revolutions(self, value: object) -> bool:
        target = _coerce_float(value)
        if target is None or target <= 0:
            return False
        self.state.target_revolutions = target
        if self.state.current_revolutions > target:
            self.state.current_revolutions = target
        return True

    def set_speed_multiplier(self, value: object) -> bool:
        speed = _coerce_float(value)
        if speed is None or speed not in SPEED_MULTIPLIERS:
            return False
        self.state.speed_multiplier = speed
        return True

    def set_pi_mode(self, mode: str) -> bool:
        try:
            self.state.pi_mode = normalize_pi_mode(mode)
        except ValueError:
            return False
        return True

    def set_mode(self, mode: str) -> bool:
        if mode not in MODES:
            return False
        self.state.mode = mode
        return True

    def resize_viewport(self, width: int, height: int) -> None:
        self.state.viewport_width = max(1, int(width))
        self.state.viewport_height = max(1, int(height))
        self._refresh_scale()

    # ------------------------------------------------------------------ clock
    def start(self) -> None:
        s = self.state
        if s.current_revolutions >= s.target_revolutions:
            s.current_revolutions = 0.0
        s.is_playing = True
        s.last_timestamp = None
        self._debug("start at %.3f / %s revolutions" % (s.current_revolutions, s.target_revolutions))

    def pause(self) -> None:
        self.state.is_playing = False
        self._debug("pause at %.3f revolutions" % self.state.current_revolutions)

    def toggle(self) -> None:
        if self.state.is_playing:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        s = self.state
        s.is_playing = False
        s.current_revolutions = 0.0
        s.last_timestamp = None
        self._debug("reset")

    def tick(self, delta_ms: float) -> None:
        """Advance the wheel by ``delta_ms`` milliseconds of playback."""

        s = self.state
        if not s.is_playing:
            return
        delta_ms = max(0.0, float(delta_ms))
        d_distance = BASE_SPEED_CM_PER_SECOND * s.speed_multiplier * (delta_ms / 1000.0)
        s.current_revolutions += d_distance / self.circumference()
        if s.current_revolutions >= s.target_revolutions:
            s.current_revolutions = s.target_revolutions
            s.is_playing = False
            self._debug("run complete: %s revolutions, %.2f cm" % (s.target_revolutions, self.current_distance()))
            self._emit_completion()

    def advance(self, timestamp_ms: Optional[float] = None) -> bool:
        """Run one frame of the clock and tell whether the loop must keep going.

        The first frame after a start or a reset only records the timestamp so
        idle time never turns into a jump of the wheel.
        """

        s = self.state
        if timestamp_ms is None:
            timestamp_ms = self.now_ms
        if s.last_timestamp is None:
            s.last_timestamp = timestamp_ms
        delta = timestamp_ms - s.last_timestamp
        s.last_timestamp = timestamp_ms
        if s.is_playing:
            self.tick(delta)
        return s.is_playing or s.current_revolutions > 0
