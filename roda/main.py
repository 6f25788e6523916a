# -*- coding: utf-8 -*-
"""Application entry point: one window for the wheel, one for the controls."""

import io
import os
import sys
import traceback
from pathlib import Path
from typing import NoReturn


def _qt_unavailable(exc: ImportError) -> NoReturn:
    details = str(exc)
    lines = [
        "Roda cannot start because PyQt5 failed to import.",
        "Install PyQt5 (pip install PyQt5) and the system OpenGL libraries it links against.",
    ]
    if "libGL" in details:
        lines.append("Hint: libGL is missing, install the Mesa packages of your distribution.")
    lines.append(f"Import error: {details}")
    raise SystemExit("\n".join(lines)) from exc


try:
    from PyQt5 import QtCore, QtGui, QtWidgets
except ImportError as exc:  # pragma: no cover - dépendances environnementales
    _qt_unavailable(exc)

# lancement direct : python roda/main.py
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

try:
    from .control.control_window import ControlWindow
    from .engine import RodaEngine
    from .view.view_widget import RodaViewWidget
except ImportError:  # pragma: no cover - exécution directe
    from roda.control.control_window import ControlWindow  # type: ignore
    from roda.engine import RodaEngine  # type: ignore
    from roda.view.view_widget import RodaViewWidget  # type: ignore

DEBUG_MARKER = "[Roda][DEBUG]"


class _DebugSilencer(io.TextIOBase):
    """Line-buffered wrapper dropping every line that carries ``marker``."""

    def __init__(self, stream, marker: str = DEBUG_MARKER) -> None:
        super().__init__()
        self._stream = stream
        self._marker = marker
        self._pending = ""

    def write(self, text: str) -> int:  # type: ignore[override]
        self._pending += text
        *complete, self._pending = self._pending.split("\n")
        for line in complete:
            self._forward(line + "\n")
        return len(text)

    def flush(self) -> None:  # type: ignore[override]
        if self._pending:
            self._forward(self._pending)
            self._pending = ""
        self._stream.flush()

    def _forward(self, text: str) -> None:
        if self._marker in text:
            return
        self._stream.write(text)

    def __getattr__(self, name):
        return getattr(self._stream, name)


def _debug_enabled() -> bool:
    return os.environ.get("RODA_DEBUG", "").strip().lower() in {"1", "true", "yes"}


def _silence_debug_output() -> None:
    if _debug_enabled():
        return
    for name in ("stdout", "stderr"):
        stream = getattr(sys, name)
        if not isinstance(stream, _DebugSilencer):
            setattr(sys, name, _DebugSilencer(stream))


def _record_crash(exc_type, exc_value, exc_tb) -> None:
    """Keep the last unhandled traceback in ``run_exception.txt``."""

    try:
        with (REPO_ROOT / "run_exception.txt").open("w", encoding="utf-8") as fh:
            traceback.print_exception(exc_type, exc_value, exc_tb, file=fh)
    except OSError:
        pass
    sys.__excepthook__(exc_type, exc_value, exc_tb)


class ViewWindow(QtWidgets.QMainWindow):
    """Top-level window around the wheel canvas; Escape leaves fullscreen, then closes."""

    def __init__(self, screen: QtGui.QScreen, engine: RodaEngine):
        super().__init__(None)
        self.setWindowTitle("Roda: Visualization")
        self.view = RodaViewWidget(self, engine=engine)
        self.setCentralWidget(self.view)

        area = screen.availableGeometry()
        self.resize(max(320, (area.width() * 2) // 3), max(240, area.height() // 2))
        self.move(area.topLeft())
        QtWidgets.QShortcut(QtGui.QKeySequence(QtCore.Qt.Key_Escape), self, activated=self._on_escape)

    def _on_escape(self) -> None:
        if self.isFullScreen():
            self.showNormal()
            QtCore.QTimer.singleShot(100, self.view.ensure_running)
        else:
            self.close()


def main(headless: bool = False) -> int:
    """Build both windows and run the Qt event loop.

    ``headless=True`` only installs the output filter and returns 0, without
    creating any Qt object.
    """
    _silence_debug_output()
    if headless:
        return 0

    sys.excepthook = _record_crash
    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_EnableHighDpiScaling, True)
    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_UseHighDpiPixmaps, True)
    app = QtWidgets.QApplication(sys.argv)
    screen = QtGui.QGuiApplication.primaryScreen()

    view_win = ViewWindow(screen, RodaEngine())
    # la fenêtre de contrôle se place seule sur le tiers droit
    control_win = ControlWindow(app, screen, view_win)
    view_win.show()
    control_win.raise_()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
