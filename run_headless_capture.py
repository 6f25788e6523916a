"""Smoke-run the application on Qt's offscreen platform and keep its output.

The parent process re-launches this file with ``RODA_CAPTURE_CHILD=1``. The
child builds both windows with ``QApplication.exec_`` replaced by a no-op, so
it returns as soon as the UI is constructed. Output written by Qt's C++ layer
only shows up when the child's stdout/stderr are captured at the OS level,
hence the second process.

Files written next to this script:
  - run_output.txt     everything the child printed
  - run_exception.txt  same content, only when the child failed
"""
from __future__ import annotations

import os
import subprocess
import sys
import traceback
from pathlib import Path

HERE = Path(__file__).resolve().parent
OUTPUT_LOG = HERE / "run_output.txt"
FAILURE_LOG = HERE / "run_exception.txt"
CHILD_FLAG = "RODA_CAPTURE_CHILD"


def _child() -> int:
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    if str(HERE) not in sys.path:
        sys.path.insert(0, str(HERE))
    try:
        from PyQt5 import QtWidgets

        QtWidgets.QApplication.exec_ = lambda self, *a, **kw: 0  # type: ignore[attr-defined]
        from roda import main as entry
    except (ImportError, SystemExit):
        traceback.print_exc()
        return 3

    try:
        rc = entry.main()
    except SystemExit as exc:
        print("roda.main.main() exited:", exc)
        return exc.code if isinstance(exc.code, int) else 1
    except Exception:
        traceback.print_exc()
        return 2
    print("roda.main.main() returned", rc)
    return rc if isinstance(rc, int) else 0


def _parent() -> int:
    env = dict(os.environ, **{CHILD_FLAG: "1"})
    env.setdefault("QT_QPA_PLATFORM", "offscreen")
    proc = subprocess.run([sys.executable, str(Path(__file__).resolve())], env=env, capture_output=True, text=True)

    output = proc.stdout if not proc.stderr else f"{proc.stdout}\n{proc.stderr}"
    OUTPUT_LOG.write_text(output, encoding="utf-8")
    if proc.returncode:
        FAILURE_LOG.write_text(output, encoding="utf-8")
        print(f"Child exited with {proc.returncode}; see {FAILURE_LOG}")
    else:
        print(f"Initialisation OK; see {OUTPUT_LOG}")
    return proc.returncode


if __name__ == "__main__":
    sys.exit(_child() if os.environ.get(CHILD_FLAG) == "1" else _parent())
