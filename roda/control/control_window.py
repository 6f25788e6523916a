# roda/control/control_window.py
import copy

from PyQt5 import QtWidgets, QtCore, QtGui


from .config import DEFAULTS, TOOLTIPS
from .parameters_tab import ParametersTab
from .step_tab import StepTab
from .quiz_tab import QuizTab
from .widgets import mk_info
from ..scenarios import (
    DEMO_START_DELAY_MS,
    QuizSession,
    StepScenario,
    explanation_text,
    prepare_demo,
)
from ..wheel_math import format_length, format_number


TAB_MODES = ("free", "step", "quiz")


class ControlWindow(QtWidgets.QMainWindow):
    def __init__(self, app: QtWidgets.QApplication, screen: QtGui.QScreen, view_win):
        super().__init__(None)
        self.setWindowTitle("Roda: Wheel Distance")
        self.view_win = view_win
        self.view = view_win.view
        self.engine = self.view.engine
        self.state = copy.deepcopy(DEFAULTS)
        self.step_scenario = StepScenario(self.engine)
        self.quiz = QuizSession(self.engine)

        self._apply_theme()

        # Barre d’outils persistante
        toolbar = QtWidgets.QToolBar("Main")
        toolbar.setMovable(False)
        toolbar.setFloatable(False)
        toolbar.setIconSize(QtCore.QSize(18, 18))
        toolbar.setToolButtonStyle(QtCore.Qt.ToolButtonTextBesideIcon)
        self.addToolBar(QtCore.Qt.TopToolBarArea, toolbar)

        style = self.style()

        act_quit = QtWidgets.QAction(
            style.standardIcon(QtWidgets.QStyle.SP_TitleBarCloseButton), "Quit", self
        )
        act_quit.setShortcut(QtGui.QKeySequence("Ctrl+Q"))
        act_quit.setShortcutContext(QtCore.Qt.ApplicationShortcut)
        act_quit.triggered.connect(app.quit)
        self.addAction(act_quit)
        toolbar.addAction(act_quit)
        btn_quit = toolbar.widgetForAction(act_quit)
        btn_quit.setStyleSheet("""
            QToolButton {
                background: #b22222;
                border: 1px solid rgba(255,255,255,0.08);
                border-radius: 8px;
                color: #ffffff;
                font-weight: 500;
                padding: 4px 10px;
            }
            QToolButton:hover {
                background: #d32f2f;
            }
            QToolButton:pressed {
                background: #8b0000;
            }
        """)

        toolbar.addSeparator()

        self.act_play = QtWidgets.QAction(style.standardIcon(QtWidgets.QStyle.SP_MediaPlay), "Start", self)
        self.act_play.setShortcut(QtGui.QKeySequence("Space"))
        self.act_play.setShortcutContext(QtCore.Qt.ApplicationShortcut)
        self.act_play.triggered.connect(self.toggle_playback)
        self.addAction(self.act_play)
        toolbar.addAction(self.act_play)

        self.act_reset = QtWidgets.QAction(style.standardIcon(QtWidgets.QStyle.SP_MediaSkipBackward), "Reset", self)
        self.act_reset.setShortcut(QtGui.QKeySequence("R"))
        self.act_reset.triggered.connect(self.reset_simulation)
        self.addAction(self.act_reset)
        toolbar.addAction(self.act_reset)

        self.act_one_rev = QtWidgets.QAction(style.standardIcon(QtWidgets.QStyle.SP_BrowserReload), "1 Revolution", self)
        self.act_one_rev.setToolTip("Roll the wheel exactly once")
        self.act_one_rev.triggered.connect(self.run_one_revolution)
        toolbar.addAction(self.act_one_rev)

        self.act_demo = QtWidgets.QAction(style.standardIcon(QtWidgets.QStyle.SP_DialogHelpButton), "Demo", self)
        self.act_demo.setToolTip("r = 56 cm, 10 revolutions, π ≈ 3.14")
        self.act_demo.triggered.connect(self.run_demo)
        toolbar.addAction(self.act_demo)

        spacer_right = QtWidgets.QWidget()
        spacer_right.setSizePolicy(QtWidgets.QSizePolicy.Expanding, QtWidgets.QSizePolicy.Preferred)
        toolbar.addWidget(spacer_right)

        self.act_fullscreen = QtWidgets.QAction(style.standardIcon(QtWidgets.QStyle.SP_TitleBarMaxButton), "Fullscreen", self)
        self.act_fullscreen.setShortcut(QtGui.QKeySequence("F11"))
        self.act_fullscreen.setShortcutContext(QtCore.Qt.ApplicationShortcut)
        self.act_fullscreen.triggered.connect(self.toggle_fullscreen)
        self.addAction(self.act_fullscreen)
        toolbar.addAction(self.act_fullscreen)

        # Barre de statut pour les messages utilisateur
        status = QtWidgets.QStatusBar()
        status.setObjectName("StatusBar")
        status.setSizeGripEnabled(False)
        self.setStatusBar(status)

        # Onglets
        self.tabs = QtWidgets.QTabWidget()
        self.tabs.setObjectName("ControlTabs")
        self.tabs.setDocumentMode(True)

        self.tab_parameters = ParametersTab()
        self.tab_step = StepTab(self.step_scenario)
        self.tab_quiz = QuizTab(self.quiz)

        self.tab_parameters.changed.connect(self.on_delta)
        self.tab_step.commandIssued.connect(self._after_command)
        self.tab_quiz.commandIssued.connect(self._after_command)

        self.tabs.addTab(self.tab_parameters, "Parameters")
        self.tabs.addTab(self.tab_step, "Step Mode")
        self.tabs.addTab(self.tab_quiz, "Quiz")
        self.tabs.currentChanged.connect(self.on_tab_changed)

        bar = self.tabs.tabBar()
        bar.setExpanding(True)
        bar.setElideMode(QtCore.Qt.ElideNone)
        self.tabs.setUsesScrollButtons(False)

        # Habillage principal
        shell = QtWidgets.QWidget()
        shell.setObjectName("CardContainer")
        shell_layout = QtWidgets.QVBoxLayout(shell)
        shell_layout.setContentsMargins(24, 24, 24, 24)
        shell_layout.setSpacing(18)

        shell_layout.addWidget(self._build_info_panel())

        card = QtWidgets.QFrame()
        card.setObjectName("Card")
        card_layout = QtWidgets.QVBoxLayout(card)
        card_layout.setContentsMargins(18, 18, 18, 18)
        card_layout.setSpacing(12)
        card_layout.addWidget(self.tabs)
        shell_layout.addWidget(card, 1)

        self.setCentralWidget(shell)

        geometry = screen.availableGeometry()
        width = max(200, geometry.width() // 3)
        height = max(200, (geometry.height() * 2) // 3)
        self.resize(width, height)
        self.move(geometry.x() + geometry.width() - width, geometry.y())

        self.view.frameAdvanced.connect(self.refresh_info)
        self.quiz.on_finished(lambda: self.statusBar().showMessage("Quiz verified by the simulation", 4000))

        self.apply_state(self.state)
        self.show()

    # ----------------------------------------------------------------- état
    def apply_state(self, state: dict):
        sim = state.get("simulation", {})
        self.engine.set_pi_mode(sim.get("piMode", DEFAULTS["simulation"]["piMode"]))
        self.engine.set_speed_multiplier(sim.get("speedMultiplier", DEFAULTS["simulation"]["speedMultiplier"]))
        self.engine.set_target_revolutions(sim.get("targetRevolutions", DEFAULTS["simulation"]["targetRevolutions"]))
        self.engine.set_radius(sim.get("radius", DEFAULTS["simulation"]["radius"]))
        self.push_params()
        self._after_command()

    def on_delta(self, delta: dict):
        sim = delta.get("simulation", {})
        self._leave_demo()
        if "radius" in sim:
            self.engine.set_radius(sim["radius"])
        if "targetRevolutions" in sim:
            self.engine.set_target_revolutions(sim["targetRevolutions"])
        if "piMode" in sim:
            self.engine.set_pi_mode(sim["piMode"])
        if "speedMultiplier" in sim:
            self.engine.set_speed_multiplier(sim["speedMultiplier"])
        for key, value in delta.items():
            if isinstance(value, dict):
                self.state.setdefault(key, {}).update(value)
            else:
                self.state[key] = value
        if "view" in delta:
            self.push_params()
        self._after_command()

    def push_params(self):
        try:
            self.view.set_params(self.state)
        except Exception as exc:  # pragma: no cover - retour utilisateur
            self.statusBar().showMessage(f"View settings rejected: {exc}", 4000)

    def on_tab_changed(self, index: int):
        if 0 <= index < len(TAB_MODES):
            self.engine.set_mode(TAB_MODES[index])

    def _leave_demo(self):
        if self.engine.state.mode == "demo":
            self.engine.set_mode(TAB_MODES[max(0, self.tabs.currentIndex())])

    def _after_command(self):
        s = self.engine.state
        self.tab_parameters.set_defaults(
            dict(
                radius=s.radius,
                targetRevolutions=s.target_revolutions,
                piMode=s.pi_mode,
                speedMultiplier=s.speed_multiplier,
            )
        )
        self.view.ensure_running()

    # ----------------------------------------------------------------- commandes
    def toggle_playback(self):
        self.engine.toggle()
        self._after_command()

    def reset_simulation(self):
        self._leave_demo()
        self.engine.reset()
        self._after_command()
        self.statusBar().showMessage("Simulation reset", 2000)

    def run_one_revolution(self):
        self.engine.set_target_revolutions(1)
        self.engine.reset()
        self.engine.start()
        self._after_command()

    def run_demo(self):
        caption = prepare_demo(self.engine)
        self._after_command()
        self.lbl_explanation.setText(caption)
        QtCore.QTimer.singleShot(DEMO_START_DELAY_MS, self._start_demo)

    def _start_demo(self):
        if self.engine.state.mode != "demo":
            return
        self.engine.start()
        self._after_command()

    def toggle_fullscreen(self):
        if self.view_win.isFullScreen():
            self.view_win.showNormal()
        else:
            self.view_win.showFullScreen()
        # Laisser la mise en page se stabiliser avant de redessiner.
        QtCore.QTimer.singleShot(100, self.view.ensure_running)

    # ----------------------------------------------------------------- affichage
    def refresh_info(self):
        engine = self.engine
        self.lbl_circumference.setText(format_length(engine.circumference()))
        self.lbl_distance.setText(format_length(engine.current_distance()))
        self.lbl_current_rev.setText(format_number(engine.current_revolutions))
        if engine.current_revolutions > 0 or engine.state.mode != "demo":
            self.lbl_explanation.setText(explanation_text(engine))
        playing = engine.state.is_playing
        self.act_play.setText("Pause" if playing else "Start")
        self.act_play.setIcon(
            self.style().standardIcon(
                QtWidgets.QStyle.SP_MediaPause if playing else QtWidgets.QStyle.SP_MediaPlay
            )
        )

    def _build_info_panel(self) -> QtWidgets.QFrame:
        panel = QtWidgets.QFrame()
        panel.setObjectName("InfoPanel")
        layout = QtWidgets.QVBoxLayout(panel)
        layout.setContentsMargins(24, 18, 24, 18)
        layout.setSpacing(8)

        grid = QtWidgets.QGridLayout()
        grid.setHorizontalSpacing(12)
        grid.setVerticalSpacing(6)
        self.lbl_circumference = QtWidgets.QLabel()
        self.lbl_distance = QtWidgets.QLabel()
        self.lbl_current_rev = QtWidgets.QLabel()
        entries = [
            ("Circumference", self.lbl_circumference, TOOLTIPS["info.circumference"]),
            ("Distance", self.lbl_distance, TOOLTIPS["info.distance"]),
            ("Revolutions", self.lbl_current_rev, TOOLTIPS["info.currentRevolutions"]),
        ]
        for r, (title, value_label, tip) in enumerate(entries):
            lbl = QtWidgets.QLabel(title)
            lbl.setObjectName("InfoTitle")
            value_label.setObjectName("InfoValue")
            grid.addWidget(lbl, r, 0)
            grid.addWidget(value_label, r, 1)
            grid.addWidget(mk_info(tip), r, 2)
        grid.setColumnStretch(1, 1)
        layout.addLayout(grid)

        self.lbl_explanation = QtWidgets.QLabel()
        self.lbl_explanation.setObjectName("Explanation")
        self.lbl_explanation.setTextFormat(QtCore.Qt.RichText)
        self.lbl_explanation.setWordWrap(True)
        layout.addWidget(self.lbl_explanation)
        return panel

    # ----------------------------------------------------------------- thème
    def _apply_theme(self):
        accent = "#3a86ff"
        accent_rgb = "58, 134, 255"
        parts = [
            "QMainWindow {",
            "    background-color: #eef1f7;",
            "    color: #1f2330;",
            "}",
            "QToolBar {",
            "    background: #ffffff;",
            "    border: none;",
            "    border-bottom: 1px solid rgba(31, 35, 48, 0.18);",
            "    padding: 8px 8px;",
            "    spacing: 6px;",
            "}",
            "QToolButton {",
            "    color: #1f2330;",
            "    background: transparent;",
            "    border-radius: 8px;",
            "    padding: 6px 12px;",
            "    font-weight: 500;",
            "}",
            f"QToolButton:hover {{",
            f"    background: rgba({accent_rgb}, 0.14);",
            "}",
            "QLabel {",
            "    color: #1f2330;",
            "}",
            "QLineEdit {",
            "    background: #f7f8fc;",
            "    border: 1px solid rgba(31, 35, 48, 0.18);",
            "    border-radius: 8px;",
            "    padding: 4px 8px;",
            "    color: #1f2330;",
            "}",
            f"QLineEdit:hover {{",
            f"    border: 1px solid {accent};",
            "}",
            "QRadioButton {",
            "    color: #1f2330;",
            "}",
            "QStatusBar {",
            "    background: #ffffff;",
            "    border-top: 1px solid rgba(31, 35, 48, 0.18);",
            "    color: #5c6070;",
            "}",
            "QWidget#CardContainer {",
            "    background: transparent;",
            "}",
            "QFrame#Card {",
            "    background: #ffffff;",
            "    border-radius: 16px;",
            "    border: 1px solid rgba(31, 35, 48, 0.16);",
            "}",
            "QFrame#InfoPanel {",
            f"    background: qlineargradient(x1:0, y1:0, x2:1, y2:0, stop:0 {accent}, stop:1 #4cc9f0);",
            "    border-radius: 14px;",
            "}",
            "QLabel#InfoTitle {",
            "    color: #e8f1ff;",
            "}",
            "QLabel#InfoValue {",
            "    font-size: 16px;",
            "    font-weight: 600;",
            "    color: #ffffff;",
            "}",
            "QLabel#Explanation {",
            "    color: #ffffff;",
            "    font-size: 13px;",
            "}",
            "QTabBar::tab {",
            "    background: transparent;",
            "    border: 1px solid #c9cedb;",
            "    padding: 6px 1px;",
            "    margin-right: 4px;",
            "    border-radius: 4px;",
            "    min-height: 28px;",
            "    color: #5c6070;",
            "}",
            "QTabBar::tab:selected {",
            f"    background: rgba({accent_rgb}, 0.32);",
            "    color: #0b3d91;",
            "}",
            "QPushButton {",
            "    background: rgba(31, 35, 48, 0.16);",
            "    color: #1f2330;",
            "    border: 1px solid transparent;",
            "    border-radius: 10px;",
            "    padding: 6px 14px;",
            "    font-weight: 500;",
            "}",
            f"QPushButton:hover {{",
            f"    border: 1px solid {accent};",
            "}",
            "QPushButton#ChoiceButton:checked {",
            f"    background: rgba({accent_rgb}, 0.45);",
            "    color: #ffffff;",
            "}",
        ]
        self.setStyleSheet("\n".join(parts))
