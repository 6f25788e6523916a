from PyQt5 import QtWidgets, QtCore
from .widgets import row, parse_positive, ChoiceButtons
from .config import DEFAULTS, TOOLTIPS, SPEED_CHOICES, PI_MODES


def _fmt(value: float) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(value)


class ParametersTab(QtWidgets.QWidget):
    changed = QtCore.pyqtSignal(dict)

    def __init__(self):
        super().__init__()
        d = DEFAULTS["simulation"]
        fl = QtWidgets.QFormLayout(self)

        self.ed_radius = QtWidgets.QLineEdit(_fmt(d["radius"]))
        self.ed_radius.setPlaceholderText("cm")
        self.ed_revolutions = QtWidgets.QLineEdit(_fmt(d["targetRevolutions"]))

        self.pi_group = QtWidgets.QButtonGroup(self)
        pi_box = QtWidgets.QWidget()
        pi_lay = QtWidgets.QHBoxLayout(pi_box); pi_lay.setContentsMargins(0,0,0,0)
        self._pi_buttons = {}
        for mode, label in PI_MODES:
            rb = QtWidgets.QRadioButton(label)
            rb.setProperty("piMode", mode)
            rb.setChecked(mode == d["piMode"])
            self.pi_group.addButton(rb)
            self._pi_buttons[mode] = rb
            pi_lay.addWidget(rb)

        self.speed = ChoiceButtons(SPEED_CHOICES, d["speedMultiplier"])

        row(fl, "Radius (cm)", self.ed_radius, TOOLTIPS["simulation.radius"], lambda: self._reset_field(self.ed_radius, d["radius"]))
        row(fl, "Target revolutions", self.ed_revolutions, TOOLTIPS["simulation.targetRevolutions"], lambda: self._reset_field(self.ed_revolutions, d["targetRevolutions"]))
        row(fl, "π value", pi_box, TOOLTIPS["simulation.piMode"])
        row(fl, "Speed", self.speed, TOOLTIPS["simulation.speedMultiplier"])

        self.ed_radius.textEdited.connect(self._on_radius_edited)
        self.ed_revolutions.textEdited.connect(self._on_revolutions_edited)
        self.pi_group.buttonToggled.connect(self._on_pi_toggled)
        self.speed.valueChanged.connect(lambda v: self.changed.emit({"simulation": {"speedMultiplier": v}}))

    # Seules les valeurs strictement positives quittent l'onglet.
    def _on_radius_edited(self, text: str):
        value = parse_positive(text)
        if value is not None:
            self.changed.emit({"simulation": {"radius": value}})

    def _on_revolutions_edited(self, text: str):
        value = parse_positive(text)
        if value is not None:
            self.changed.emit({"simulation": {"targetRevolutions": value}})

    def _on_pi_toggled(self, button, checked: bool):
        if checked:
            self.changed.emit({"simulation": {"piMode": button.property("piMode")}})

    def _reset_field(self, edit: QtWidgets.QLineEdit, value: float):
        edit.setText(_fmt(value))
        if edit is self.ed_radius:
            self._on_radius_edited(edit.text())
        else:
            self._on_revolutions_edited(edit.text())

    def collect(self):
        mode = next((m for m, rb in self._pi_buttons.items() if rb.isChecked()), DEFAULTS["simulation"]["piMode"])
        return dict(
            radius=parse_positive(self.ed_radius.text()),
            targetRevolutions=parse_positive(self.ed_revolutions.text()),
            piMode=mode,
            speedMultiplier=self.speed.value(),
        )

    def set_defaults(self, cfg):
        cfg = cfg or {}
        d = DEFAULTS["simulation"]
        self._sync_edit(self.ed_radius, cfg.get("radius", d["radius"]))
        self._sync_edit(self.ed_revolutions, cfg.get("targetRevolutions", d["targetRevolutions"]))
        with QtCore.QSignalBlocker(self.pi_group):
            rb = self._pi_buttons.get(cfg.get("piMode", d["piMode"]))
            if rb is not None:
                rb.setChecked(True)
        with QtCore.QSignalBlocker(self.speed):
            self.speed.setValue(cfg.get("speedMultiplier", d["speedMultiplier"]))

    def _sync_edit(self, edit: QtWidgets.QLineEdit, value: float):
        # ne pas écraser une saisie en cours ("5." vaut déjà 5)
        if parse_positive(edit.text()) == float(value):
            return
        with QtCore.QSignalBlocker(edit):
            edit.setText(_fmt(value))
