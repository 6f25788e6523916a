from PyQt5 import QtWidgets, QtCore
from .config import TOOLTIPS
from .widgets import row
from ..scenarios import QuizSession


class QuizTab(QtWidgets.QWidget):
    """Random distance questions, verified by running the wheel."""

    commandIssued = QtCore.pyqtSignal()

    def __init__(self, session: QuizSession):
        super().__init__()
        self.session = session
        lay = QtWidgets.QVBoxLayout(self)
        lay.setContentsMargins(12, 12, 12, 12)
        lay.setSpacing(10)

        self.btn_start = QtWidgets.QPushButton("Start Quiz")
        self.btn_start.setToolTip(TOOLTIPS["quiz.start"])
        self.btn_start.clicked.connect(self.start_quiz)
        lay.addWidget(self.btn_start, 0, QtCore.Qt.AlignLeft)

        self.controls = QtWidgets.QWidget()
        cl = QtWidgets.QVBoxLayout(self.controls); cl.setContentsMargins(0,0,0,0)
        self.lbl_question = QtWidgets.QLabel()
        self.lbl_question.setTextFormat(QtCore.Qt.RichText)
        self.lbl_question.setWordWrap(True)
        cl.addWidget(self.lbl_question)
        form = QtWidgets.QFormLayout()
        self.ed_answer = QtWidgets.QLineEdit()
        self.ed_answer.setPlaceholderText("cm")
        self.ed_answer.returnPressed.connect(self.submit)
        row(form, "Answer", self.ed_answer, TOOLTIPS["quiz.answer"])
        cl.addLayout(form)
        self.btn_submit = QtWidgets.QPushButton("Check")
        self.btn_submit.clicked.connect(self.submit)
        cl.addWidget(self.btn_submit, 0, QtCore.Qt.AlignLeft)
        self.controls.setVisible(False)
        lay.addWidget(self.controls)

        self.lbl_result = QtWidgets.QLabel()
        self.lbl_result.setTextFormat(QtCore.Qt.RichText)
        lay.addWidget(self.lbl_result)
        lay.addStretch(1)

        self.session.on_finished(self._on_question_finished)

    def start_quiz(self):
        self.lbl_question.setText(self.session.new_question())
        self.ed_answer.clear()
        self.lbl_result.clear()
        self.controls.setVisible(True)
        self.btn_start.setVisible(False)
        self.commandIssued.emit()

    def submit(self):
        if self.session.answer is None:
            return
        result = self.session.submit(self.ed_answer.text())
        color = "green" if result.correct else "red"
        self.lbl_result.setText(f"<span style='color:{color}'>{result.message}</span>")
        self.commandIssued.emit()

    def _on_question_finished(self):
        self.controls.setVisible(False)
        self.btn_start.setText("New Question")
        self.btn_start.setVisible(True)
