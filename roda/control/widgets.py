from typing import Optional, Sequence, Tuple

from PyQt5 import QtWidgets, QtCore


def mk_info(text: str) -> QtWidgets.QToolButton:
    b = QtWidgets.QToolButton(); b.setText("i"); b.setCursor(QtCore.Qt.PointingHandCursor)
    b.setToolTipDuration(0); b.setToolTip(text); b.setFixedSize(20,20)
    b.setStyleSheet("QToolButton{border:1px solid #7aa7c7;border-radius:10px;font-weight:bold;padding:0;color:#2b6ea8;background:#e6f2fb;}QToolButton:hover{background:#d8ecfa;}")
    return b

def mk_reset(cb) -> QtWidgets.QToolButton:
    b = QtWidgets.QToolButton(); b.setText("↺"); b.setCursor(QtCore.Qt.PointingHandCursor)
    b.setToolTip("Back to default"); b.setFixedSize(22,22)
    b.setStyleSheet("QToolButton{border:1px solid #9aa5b1;border-radius:11px;padding:0;background:#f2f4f7;color:#2b2b2b;font-weight:bold;}QToolButton:hover{background:#e9edf2;}")
    b.clicked.connect(lambda checked=False, _cb=cb: _cb())
    return b

def row(form: QtWidgets.QFormLayout, label: str, widget: QtWidgets.QWidget, tip: str, reset_cb=None):
    h = QtWidgets.QHBoxLayout(); h.setContentsMargins(0,0,0,0); h.setSpacing(6)
    h.addWidget(widget, 1)
    if reset_cb: h.addWidget(mk_reset(reset_cb), 0)
    h.addWidget(mk_info(tip), 0)
    w = QtWidgets.QWidget(); w.setLayout(h)
    lbl = QtWidgets.QLabel(label)
    lbl.setObjectName("FormLabel")
    form.addRow(lbl, w)
    w._form_label = lbl  # type: ignore[attr-defined]
    return w


def parse_positive(text: str) -> Optional[float]:
    """Return ``text`` as a positive number, ``None`` when the input is unusable."""

    try:
        value = float(str(text).strip().replace(",", "."))
    except ValueError:
        return None
    if value != value or value <= 0 or value == float("inf"):
        return None
    return value


class ChoiceButtons(QtWidgets.QWidget):
    """Row of exclusive checkable buttons (speed selector)."""

    valueChanged = QtCore.pyqtSignal(float)

    def __init__(self, choices: Sequence[Tuple[float, str]], value: float):
        super().__init__()
        lay = QtWidgets.QHBoxLayout(self)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setSpacing(4)
        self._group = QtWidgets.QButtonGroup(self)
        self._group.setExclusive(True)
        self._values = {}
        for idx, (choice, label) in enumerate(choices):
            btn = QtWidgets.QPushButton(label)
            btn.setCheckable(True)
            btn.setObjectName("ChoiceButton")
            self._group.addButton(btn, idx)
            self._values[idx] = float(choice)
            lay.addWidget(btn)
        self.setValue(value)
        self._group.buttonClicked.connect(self._on_clicked)

    def value(self) -> float:
        return self._values.get(self._group.checkedId(), 1.0)

    def setValue(self, value: float) -> None:
        for idx, choice in self._values.items():
            if choice == float(value):
                self._group.button(idx).setChecked(True)
                return

    def _on_clicked(self, *_a):
        self.valueChanged.emit(self.value())
