from __future__ import annotations

import io

import pytest

pytest.importorskip("PyQt5.QtWidgets")

from roda import main as roda_main  # noqa: E402


class TestDebugSilencer:
    def test_filters_tagged_lines(self) -> None:
        sink = io.StringIO()
        stream = roda_main._DebugSilencer(sink, "[Roda][DEBUG]")
        stream.write("[Roda][DEBUG] start at 0\nkept line\n")
        stream.write("[Roda][WARN] partial")
        assert sink.getvalue() == "kept line\n"
        stream.flush()
        assert sink.getvalue() == "kept line\n[Roda][WARN] partial"

    def test_debug_env_disables_filter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RODA_DEBUG", "1")
        assert roda_main._debug_enabled()
        monkeypatch.setenv("RODA_DEBUG", "0")
        assert not roda_main._debug_enabled()


def test_silencer_installed_once(monkeypatch: pytest.MonkeyPatch) -> None:
    sink = io.StringIO()
    monkeypatch.delenv("RODA_DEBUG", raising=False)
    monkeypatch.setattr(roda_main.sys, "stdout", sink)
    monkeypatch.setattr(roda_main.sys, "stderr", io.StringIO())
    roda_main._silence_debug_output()
    roda_main._silence_debug_output()
    wrapped = roda_main.sys.stdout
    assert isinstance(wrapped, roda_main._DebugSilencer)
    assert wrapped._stream is sink
    wrapped.write("[Roda][DEBUG] hidden\nshown\n")
    assert sink.getvalue() == "shown\n"


def test_headless_main_returns_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("RODA_DEBUG", "1")
    assert roda_main.main(headless=True) == 0


class TestWindows:
    def test_control_window_drives_engine(self, qapp) -> None:
        from PyQt5 import QtGui

        from roda.control.control_window import ControlWindow

        screen = QtGui.QGuiApplication.primaryScreen()
        view_win = roda_main.ViewWindow(screen, roda_main.RodaEngine())
        control = ControlWindow(qapp, screen, view_win)
        engine = control.engine
        try:
            control.on_delta({"simulation": {"radius": 20.0}})
            assert engine.state.radius == 20
            assert control.state["simulation"]["radius"] == 20

            control.toggle_playback()
            assert engine.state.is_playing
            control.reset_simulation()
            assert not engine.state.is_playing

            control.run_one_revolution()
            assert engine.state.target_revolutions == 1
            assert engine.state.is_playing

            control.run_demo()
            assert engine.state.mode == "demo"
            assert engine.state.radius == 56
            control.reset_simulation()
            assert engine.state.mode == "free"

            control.tabs.setCurrentIndex(2)
            assert engine.state.mode == "quiz"
        finally:
            control.close()
            view_win.close()
