from PyQt5 import QtWidgets, QtCore
from .config import TOOLTIPS
from .widgets import mk_info
from ..scenarios import StepScenario


class StepTab(QtWidgets.QWidget):
    """Guided walkthrough of the textbook problem."""

    commandIssued = QtCore.pyqtSignal()

    def __init__(self, scenario: StepScenario):
        super().__init__()
        self.scenario = scenario
        lay = QtWidgets.QVBoxLayout(self)
        lay.setContentsMargins(12, 12, 12, 12)
        lay.setSpacing(10)

        self.lbl_step = QtWidgets.QLabel("Press “Next Step” to begin.")
        self.lbl_step.setObjectName("StepInfo")
        self.lbl_step.setWordWrap(True)
        lay.addWidget(self.lbl_step)

        h = QtWidgets.QHBoxLayout(); h.setContentsMargins(0,0,0,0)
        self.btn_next = QtWidgets.QPushButton("Next Step")
        self.btn_next.clicked.connect(self.next_step)
        h.addWidget(self.btn_next)
        h.addWidget(mk_info(TOOLTIPS["step.next"]))
        h.addStretch(1)
        lay.addLayout(h)
        lay.addStretch(1)

    def next_step(self):
        self.lbl_step.setText(self.scenario.next())
        self.commandIssued.emit()
