from __future__ import annotations

from typing import List

import pytest

pytest.importorskip("PyQt5.QtWidgets")

from roda.control.parameters_tab import ParametersTab  # noqa: E402
from roda.control.widgets import parse_positive  # noqa: E402


class TestParsePositive:
    @pytest.mark.parametrize("text, expected", [("56", 56.0), (" 12.5 ", 12.5), ("7,5", 7.5)])
    def test_accepted(self, text: str, expected: float) -> None:
        assert parse_positive(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "0", "-4", "nan", "inf"])
    def test_rejected(self, text: str) -> None:
        assert parse_positive(text) is None


class TestParametersTab:
    def test_edits_emit_deltas(self, qapp) -> None:
        tab = ParametersTab()
        deltas: List[dict] = []
        tab.changed.connect(deltas.append)
        tab.ed_radius.textEdited.emit("30")
        tab.ed_radius.textEdited.emit("-3")
        tab.ed_revolutions.textEdited.emit("4")
        assert deltas == [
            {"simulation": {"radius": 30.0}},
            {"simulation": {"targetRevolutions": 4.0}},
        ]

    def test_pi_and_speed(self, qapp) -> None:
        tab = ParametersTab()
        deltas: List[dict] = []
        tab.changed.connect(deltas.append)
        tab._pi_buttons["22/7"].setChecked(True)
        tab.speed._group.button(2).click()
        assert {"simulation": {"piMode": "22/7"}} in deltas
        assert {"simulation": {"speedMultiplier": 2.0}} in deltas

    def test_set_defaults_is_silent(self, qapp) -> None:
        tab = ParametersTab()
        deltas: List[dict] = []
        tab.changed.connect(deltas.append)
        tab.set_defaults({"radius": 20.0, "targetRevolutions": 3.0, "piMode": "22/7", "speedMultiplier": 0.5})
        assert deltas == []
        assert tab.collect() == {
            "radius": 20.0,
            "targetRevolutions": 3.0,
            "piMode": "22/7",
            "speedMultiplier": 0.5,
        }

    def test_pending_decimal_kept(self, qapp) -> None:
        tab = ParametersTab()
        tab.ed_radius.setText("5.")
        tab.set_defaults({"radius": 5.0})
        assert tab.ed_radius.text() == "5."
