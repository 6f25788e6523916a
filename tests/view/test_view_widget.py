from __future__ import annotations

from typing import List

import pytest

pytest.importorskip("PyQt5.QtWidgets")

from PyQt5 import QtGui  # noqa: E402

from roda.engine import RodaEngine  # noqa: E402
from roda.view.view_widget import RodaViewWidget, _should_use_opengl  # noqa: E402


class TestBackendSelection:
    def test_forced_backends(self) -> None:
        assert _should_use_opengl("raster") is False
        assert _should_use_opengl("opengl") is True

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RODA_FORCE_BACKEND", "raster")
        assert _should_use_opengl(None) is False

    def test_offscreen_platform_prefers_raster(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("RODA_FORCE_BACKEND", raising=False)
        monkeypatch.setenv("QT_QPA_PLATFORM", "offscreen")
        assert _should_use_opengl(None) is False


class TestRasterWidget:
    def test_factory(self, qapp) -> None:
        engine = RodaEngine()
        widget = RodaViewWidget(engine=engine, force_backend="raster")
        assert widget.backend_name == "raster"
        assert widget.uses_opengl is False
        assert widget.engine is engine

    def test_resize_updates_engine_viewport(self, qapp) -> None:
        widget = RodaViewWidget(force_backend="raster")
        widget.resize(1000, 500)
        widget.show()
        qapp.processEvents()
        assert (widget.engine.state.viewport_width, widget.engine.state.viewport_height) == (1000, 500)
        scene = widget.current_scene()
        assert scene.width == 1000
        widget.close()

    def test_renders_into_image(self, qapp) -> None:
        widget = RodaViewWidget(force_backend="raster")
        widget.resize(800, 400)
        image = QtGui.QImage(800, 400, QtGui.QImage.Format_ARGB32)
        image.fill(0)
        painter = QtGui.QPainter(image)
        try:
            widget._render_with_painter(painter)
        finally:
            painter.end()
        # white background, ground line near the bottom
        assert QtGui.QColor(image.pixel(400, 10)).name() == "#ffffff"
        assert QtGui.QColor(image.pixel(400, 350)).name() == "#333333"

    def test_frame_loop_follows_engine(self, qapp) -> None:
        widget = RodaViewWidget(force_backend="raster")
        frames = []
        widget.frameAdvanced.connect(lambda: frames.append(1))
        widget.ensure_running()
        assert not widget.is_animating()
        widget.engine.start()
        widget.ensure_running()
        assert widget.is_animating()
        widget.engine.reset()
        widget._on_frame()
        assert not widget.is_animating()
        assert frames

    def test_frame_painted_before_notification(self, qapp) -> None:
        widget = RodaViewWidget(force_backend="raster")
        order: List[str] = []
        widget.repaint = lambda: order.append("paint")
        widget.frameAdvanced.connect(lambda: order.append("frame"))
        widget.engine.start()
        widget._on_frame()
        assert order == ["paint", "frame"]

    def test_view_params(self, qapp) -> None:
        widget = RodaViewWidget(force_backend="raster")
        widget.set_params({"view": {"frameIntervalMs": "33", "tooltip": False}})
        assert widget._frame_interval_ms == 33
        assert widget._tooltip_enabled is False
        widget.set_params({"view": {"frameIntervalMs": "bogus"}})
        assert widget._frame_interval_ms == 16
