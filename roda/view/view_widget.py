"""Qt canvas for the rolling wheel.

This module hosts the painting side of the renderer. Frames are described by
:func:`roda.view.scene.build_scene` as plain draw commands; the widgets below
only translate those commands to ``QPainter`` calls and drive the frame loop.

:func:`RodaViewWidget` is a factory returning either a ``QOpenGLWidget`` or a
plain raster ``QWidget`` exposing the same API:

* ``engine`` – the :class:`~roda.engine.RodaEngine` being displayed.
* ``ensure_running()`` – restart the frame timer after a command.
* ``set_params(payload)`` – apply the ``view`` section of the configuration.
* ``frameAdvanced`` – signal emitted after every clock step and repaint.
"""

from __future__ import annotations

import os
import sys
from typing import Mapping, Optional, Tuple

from PyQt5 import QtCore, QtGui, QtWidgets

from .. import camera
from ..engine import RodaEngine
from ..wheel_math import format_number
from .scene import Circle, Label, Line, Scene, build_scene

__all__ = ["RodaViewWidget"]

DEFAULT_FRAME_INTERVAL_MS = 16
TOOLTIP_MIN_CM = -5.0
TOOLTIP_OFFSET_PX = 15


def _create_opengl_functions() -> Tuple[Optional[object], Optional[BaseException]]:
    """Safely instantiate ``QOpenGLFunctions`` when available.

    Returns ``(functions, error)``; ``functions`` is ``None`` when the binding
    is missing or could not be initialised, in which case ``error`` carries the
    reason.
    """

    factory = getattr(QtGui, "QOpenGLFunctions", None)
    if factory is None:
        return None, AttributeError("PyQt5.QtGui has no attribute 'QOpenGLFunctions'")
    try:
        functions = factory()
        functions.initializeOpenGLFunctions()
    except Exception as exc:  # pragma: no cover - depends on bindings/runtime
        return None, exc
    return functions, None


def _qcolor(name: str, alpha: float = 1.0) -> QtGui.QColor:
    color = QtGui.QColor(name)
    color.setAlphaF(max(0.0, min(1.0, alpha)))
    return color


class _ViewWidgetBase:
    """Common behaviour shared by both the OpenGL and raster backends."""

    def _init_view_widget(self, engine: Optional[RodaEngine]) -> None:
        self.setAutoFillBackground(False)
        self.setMouseTracking(True)
        self.setMinimumSize(320, 200)
        self._gl: Optional[object] = None
        self.engine = engine if engine is not None else RodaEngine()
        self._transparent = False
        self._tooltip_enabled = True
        self._timer = QtCore.QTimer(self)
        self._frame_interval_ms = DEFAULT_FRAME_INTERVAL_MS
        self._timer.setInterval(self._frame_interval_ms)
        self._timer.timeout.connect(self._on_frame)

    # ------------------------------------------------------------------ frame loop
    def _on_frame(self) -> None:
        keep_running = self.engine.advance()
        self.repaint()
        self.frameAdvanced.emit()
        if not keep_running:
            # Roue à l'arrêt à l'origine : plus rien à animer.
            self._timer.stop()

    def ensure_running(self) -> None:
        """Resume the frame loop when the wheel has something to show."""

        state = self.engine.state
        if state.is_playing or state.current_revolutions > 0:
            if not self._timer.isActive():
                self._timer.start(self._frame_interval_ms)
        self.update()
        self.frameAdvanced.emit()

    def is_animating(self) -> bool:
        return self._timer.isActive()

    def _apply_frame_interval(self, interval_ms: int) -> None:
        interval_ms = max(int(interval_ms), 1)
        if interval_ms == self._frame_interval_ms:
            return
        self._frame_interval_ms = interval_ms
        self._timer.setInterval(interval_ms)

    # ------------------------------------------------------------------ OpenGL hooks
    def _apply_clear_color(self) -> None:
        if self._gl is None:
            return
        alpha = 0.0 if self._transparent else 1.0
        self._gl.glClearColor(1.0, 1.0, 1.0, alpha)

    # ------------------------------------------------------------------ API
    def set_params(self, payload: Mapping[str, object]) -> None:
        view_cfg = payload.get("view") if isinstance(payload, Mapping) else None
        if not isinstance(view_cfg, Mapping):
            return
        frame_interval = view_cfg.get("frameIntervalMs")
        if frame_interval is not None:
            try:
                self._apply_frame_interval(int(float(frame_interval)))
            except (TypeError, ValueError):
                self._apply_frame_interval(DEFAULT_FRAME_INTERVAL_MS)
        if "tooltip" in view_cfg:
            self._tooltip_enabled = bool(view_cfg.get("tooltip"))
        transparent = view_cfg.get("transparent")
        if transparent is not None and bool(transparent) != self._transparent:
            self.set_transparent(bool(transparent))

    def set_transparent(self, enabled: bool) -> None:  # pragma: no cover - simple setter
        self._transparent = bool(enabled)
        self.setAttribute(QtCore.Qt.WA_NoSystemBackground, enabled)
        self.setAttribute(QtCore.Qt.WA_TranslucentBackground, enabled)
        self._apply_clear_color()
        self.update()

    def current_scene(self) -> Scene:
        return build_scene(self.engine, max(1, self.width()), max(1, self.height()))

    # ------------------------------------------------------------------ events
    def _sync_viewport(self) -> None:
        self.engine.resize_viewport(max(1, self.width()), max(1, self.height()))

    def _show_position_tooltip(self, pos: QtCore.QPoint, global_pos: QtCore.QPoint) -> None:
        if not self._tooltip_enabled:
            return
        state = self.engine.state
        offset_x = self.engine.camera_offset()
        cm = camera.world_cm_at(float(pos.x()), offset_x, state.pixel_scale)
        if cm >= TOOLTIP_MIN_CM:
            text = f"{format_number(max(0.0, cm), 1)} cm"
            QtWidgets.QToolTip.showText(global_pos + QtCore.QPoint(TOOLTIP_OFFSET_PX, TOOLTIP_OFFSET_PX), text, self)
        else:
            QtWidgets.QToolTip.hideText()

    # ------------------------------------------------------------------ rendering
    def _render_with_painter(self, painter: QtGui.QPainter) -> None:
        painter.setRenderHint(QtGui.QPainter.Antialiasing, True)
        painter.setRenderHint(QtGui.QPainter.TextAntialiasing, True)
        if self._transparent:
            painter.setCompositionMode(QtGui.QPainter.CompositionMode_Source)
            painter.fillRect(self.rect(), QtCore.Qt.transparent)
            painter.setCompositionMode(QtGui.QPainter.CompositionMode_SourceOver)
        else:
            painter.fillRect(self.rect(), QtGui.QColor("white"))

        scene = self.current_scene()
        for cmd in scene.commands:
            if isinstance(cmd, Line):
                pen = QtGui.QPen(_qcolor(cmd.color), cmd.width)
                pen.setCapStyle(QtCore.Qt.FlatCap)
                painter.setPen(pen)
                painter.drawLine(QtCore.QLineF(cmd.x1, cmd.y1, cmd.x2, cmd.y2))
            elif isinstance(cmd, Circle):
                if cmd.fill:
                    painter.setBrush(_qcolor(cmd.fill, cmd.fill_alpha))
                else:
                    painter.setBrush(QtCore.Qt.NoBrush)
                if cmd.color and cmd.width > 0:
                    painter.setPen(QtGui.QPen(_qcolor(cmd.color), cmd.width))
                else:
                    painter.setPen(QtCore.Qt.NoPen)
                painter.drawEllipse(QtCore.QPointF(cmd.cx, cmd.cy), cmd.r, cmd.r)
            elif isinstance(cmd, Label):
                font = QtGui.QFont("sans-serif")
                font.setPixelSize(cmd.size)
                font.setBold(cmd.bold)
                painter.setFont(font)
                painter.setPen(_qcolor(cmd.color))
                painter.drawText(QtCore.QPointF(cmd.x, cmd.y), cmd.text)


class _OpenGLViewWidget(QtWidgets.QOpenGLWidget, _ViewWidgetBase):
    """OpenGL-backed renderer when the system can create a GL context."""

    frameAdvanced = QtCore.pyqtSignal()

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None, engine: Optional[RodaEngine] = None) -> None:
        QtWidgets.QOpenGLWidget.__init__(self, parent)
        self._init_view_widget(engine)

    def initializeGL(self) -> None:  # pragma: no cover - requires GUI context
        self._gl, error = _create_opengl_functions()
        if error is not None:  # pragma: no cover - depends on bindings/runtime
            print(
                f"[Roda][WARN] OpenGL initialisation failed: {error}. Falling back to raster clear handling.",
                file=sys.stderr,
            )
        self._apply_clear_color()

    def resizeGL(self, width: int, height: int) -> None:  # pragma: no cover - requires GUI context
        self.engine.resize_viewport(max(1, width), max(1, height))

    def paintGL(self) -> None:  # pragma: no cover - requires GUI context
        if self._gl is not None:
            try:
                # GL_COLOR_BUFFER_BIT
                self._gl.glClear(0x00004000)
            except Exception:
                pass
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._sync_viewport()
        self.update()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        self._show_position_tooltip(event.pos(), event.globalPos())
        super().mouseMoveEvent(event)

    def leaveEvent(self, event: QtCore.QEvent) -> None:  # type: ignore[override]
        QtWidgets.QToolTip.hideText()
        super().leaveEvent(event)


class _RasterViewWidget(QtWidgets.QWidget, _ViewWidgetBase):
    """Fallback renderer using the traditional raster ``QWidget`` backend."""

    frameAdvanced = QtCore.pyqtSignal()

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None, engine: Optional[RodaEngine] = None) -> None:
        QtWidgets.QWidget.__init__(self, parent)
        self._init_view_widget(engine)

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # type: ignore[override]
        del event
        painter = QtGui.QPainter(self)
        try:
            self._render_with_painter(painter)
        finally:
            painter.end()

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._sync_viewport()
        self.update()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        self._show_position_tooltip(event.pos(), event.globalPos())
        super().mouseMoveEvent(event)

    def leaveEvent(self, event: QtCore.QEvent) -> None:  # type: ignore[override]
        QtWidgets.QToolTip.hideText()
        super().leaveEvent(event)


def _should_use_opengl(force_backend: Optional[str]) -> bool:
    if force_backend == "raster":
        return False
    if force_backend == "opengl":
        return True

    env_backend = os.environ.get("RODA_FORCE_BACKEND", "").strip().lower()
    if env_backend == "raster":
        return False
    if env_backend == "opengl":
        return True
    if os.environ.get("QT_QPA_PLATFORM", "").strip().lower() == "offscreen":
        return False
    return hasattr(QtWidgets, "QOpenGLWidget")


def RodaViewWidget(
    parent: Optional[QtWidgets.QWidget] = None,
    *,
    engine: Optional[RodaEngine] = None,
    force_backend: Optional[str] = None,
) -> QtWidgets.QWidget:
    """Factory returning the best available renderer widget.

    Parameters
    ----------
    parent:
        Parent widget used by Qt for ownership.
    engine:
        Engine to display. A fresh one is created when omitted.
    force_backend:
        ``"opengl"`` forces the OpenGL widget while ``"raster"`` selects the
        pure QWidget implementation.
    """

    if _should_use_opengl(force_backend):
        try:
            widget = _OpenGLViewWidget(parent, engine)
            setattr(widget, "backend_name", "opengl")
            setattr(widget, "uses_opengl", True)
            return widget
        except Exception as exc:
            print(
                f"[Roda][WARN] Unable to initialise OpenGL backend ({exc!r}). Using raster widget instead.",
                file=sys.stderr,
            )
    widget = _RasterViewWidget(parent, engine)
    setattr(widget, "backend_name", "raster")
    setattr(widget, "uses_opengl", False)
    return widget
