"""Circumference and distance helpers shared by the engine, renderer and quiz."""

from __future__ import annotations

import math
from typing import Tuple

__all__ = [
    "PI_MODES",
    "pi_value",
    "normalize_pi_mode",
    "circumference",
    "distance",
    "js_round",
    "format_number",
    "format_length",
]

PI_MODES: Tuple[str, ...] = ("3.14", "22/7")

_PI_VALUES = {
    "3.14": 3.14,
    "22/7": 22.0 / 7.0,
}
# Older payloads spell the fraction with an underscore.
_PI_ALIASES = {"22_7": "22/7"}


def normalize_pi_mode(mode: str) -> str:
    """Return the canonical spelling of ``mode`` or raise ``ValueError``."""

    key = _PI_ALIASES.get(str(mode).strip(), str(mode).strip())
    if key not in _PI_VALUES:
        raise ValueError(f"unknown pi mode: {mode!r}")
    return key


def pi_value(mode: str) -> float:
    return _PI_VALUES[normalize_pi_mode(mode)]


def circumference(radius: float, pi_mode: str) -> float:
    """Return ``2 * pi * radius`` using the selected approximation of pi."""

    if radius <= 0:
        raise ValueError(f"radius must be positive, got {radius!r}")
    return 2 * pi_value(pi_mode) * radius


def distance(radius: float, revolutions: float, pi_mode: str) -> float:
    return circumference(radius, pi_mode) * revolutions


def js_round(value: float) -> int:
    """Round half up, like the browser's ``Math.round``."""

    return int(math.floor(value + 0.5))


def format_number(value: float, decimals: int = 2) -> str:
    """Format ``value`` with Indonesian grouping: ``1.234,56``."""

    decimals = max(0, int(decimals))
    text = f"{float(value):,.{decimals}f}"
    return text.replace(",", "\x00").replace(".", ",").replace("\x00", ".")


def format_length(cm: float) -> str:
    return f"{format_number(cm)} cm ({format_number(cm / 100.0)} m)"
