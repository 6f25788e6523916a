from __future__ import annotations

import pytest

from roda.wheel_math import (
    circumference,
    distance,
    format_length,
    format_number,
    js_round,
    normalize_pi_mode,
    pi_value,
)


class TestPiModes:
    def test_known_modes(self) -> None:
        assert pi_value("3.14") == 3.14
        assert pi_value("22/7") == pytest.approx(22 / 7)

    def test_underscore_alias(self) -> None:
        """Older payloads spell the fraction ``22_7``."""
        assert normalize_pi_mode("22_7") == "22/7"

    def test_unknown_mode_rejected(self) -> None:
        with pytest.raises(ValueError):
            normalize_pi_mode("3")


class TestCircumference:
    def test_textbook_wheel(self) -> None:
        assert circumference(56, "3.14") == pytest.approx(351.68)

    def test_fraction_mode(self) -> None:
        assert circumference(7, "22/7") == pytest.approx(44.0)
        assert circumference(56, "22/7") == pytest.approx(352.0)

    def test_distance_is_linear_in_revolutions(self) -> None:
        assert distance(56, 10, "3.14") == pytest.approx(3516.8)
        assert distance(56, 0, "3.14") == 0
        assert distance(56, 2.5, "3.14") == pytest.approx(2.5 * 351.68)

    @pytest.mark.parametrize("radius", [0, -1])
    def test_non_positive_radius(self, radius: float) -> None:
        with pytest.raises(ValueError):
            circumference(radius, "3.14")


class TestRounding:
    def test_half_rounds_up(self) -> None:
        assert js_round(376.5) == 377
        assert js_round(-0.5) == 0

    def test_plain_values(self) -> None:
        assert js_round(376.8) == 377
        assert js_round(376.2) == 376


class TestFormatting:
    def test_indonesian_grouping(self) -> None:
        assert format_number(3516.8) == "3.516,80"
        assert format_number(351.68) == "351,68"

    def test_decimals(self) -> None:
        assert format_number(56, 0) == "56"
        assert format_number(0.5, 1) == "0,5"
        assert format_number(1234567.891, 1) == "1.234.567,9"

    def test_length_shows_both_units(self) -> None:
        assert format_length(3516.8) == "3.516,80 cm (35,17 m)"

    def test_zero(self) -> None:
        assert format_length(0) == "0,00 cm (0,00 m)"
