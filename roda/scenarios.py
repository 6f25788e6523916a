"""Demo, step-by-step and quiz drivers built on the engine's public API.

None of these touch :class:`~roda.engine.SimulationState` directly: they call
the engine mutators exactly like the control window does, so the wheel, the
info panel and the quiz answer key always agree on the numbers.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .control.config import DEFAULTS
from .engine import RodaEngine
from .wheel_math import distance, format_number, js_round

__all__ = [
    "DEMO_START_DELAY_MS",
    "IDLE_EXPLANATION",
    "Step",
    "StepScenario",
    "DEFAULT_STEPS",
    "QuizResult",
    "QuizSession",
    "prepare_demo",
    "demo_text",
    "explanation_text",
]

DEMO_START_DELAY_MS = 1000
IDLE_EXPLANATION = "Change parameters or start the animation to see the explanation."


# ---------------------------------------------------------------------------
# Narration


def explanation_text(engine: RodaEngine) -> str:
    """Live explanation shown under the numeric displays."""

    revolutions = engine.current_revolutions
    if revolutions <= 0:
        return IDLE_EXPLANATION
    circ = engine.circumference()
    full_revs = int(revolutions)
    if full_revs == 0:
        return (
            "The wheel starts moving. <br>The wheel's circumference is "
            f"<strong>{format_number(circ)} cm</strong>."
        )
    return (
        f"The wheel has rotated <strong>{full_revs}</strong> full times.<br>"
        f"Distance = {full_revs} × {format_number(circ)} = "
        f"<strong>{format_number(full_revs * circ)} cm</strong>."
    )


def demo_text(engine: RodaEngine) -> str:
    s = engine.state
    return (
        "<strong>Problem Demonstration:</strong><br>"
        f"Given: r = {format_number(s.radius, 0)} cm, Target = {format_number(s.target_revolutions, 0)} Revolutions.<br>"
        f"Circumference = 2 × {s.pi_mode} × {format_number(s.radius, 0)} = {format_number(engine.circumference())} cm.<br>"
        "Animation starting..."
    )


def prepare_demo(engine: RodaEngine) -> str:
    """Load the textbook problem (r = 56 cm, 10 revolutions) and return its caption.

    The caller is expected to start the engine after :data:`DEMO_START_DELAY_MS`.
    """

    engine.set_mode("demo")
    engine.set_target_revolutions(10)
    engine.set_speed_multiplier(1)
    engine.set_pi_mode("3.14")
    engine.set_radius(56)
    return demo_text(engine)


# ---------------------------------------------------------------------------
# Step mode


@dataclass(frozen=True)
class Step:
    text: str
    action: Optional[Callable[[RodaEngine], None]] = None


def _identify_radius(engine: RodaEngine) -> None:
    engine.set_radius(56)


def _rotate_once(engine: RodaEngine) -> None:
    engine.set_target_revolutions(1)
    engine.start()


def _rotate_remainder(engine: RodaEngine) -> None:
    engine.set_target_revolutions(10)
    engine.start()


DEFAULT_STEPS: Sequence[Step] = (
    Step("Step 1: Identify Radius. This wheel has a radius of 56 cm.", _identify_radius),
    Step("Step 2: Calculate Circumference. C = 2 × π × r = 2 × 3.14 × 56 = 351.68 cm."),
    Step(
        "Step 3: Rotate 1 Time. Notice the wheel travels a distance equal to its circumference.",
        _rotate_once,
    ),
    Step("Step 4: Rotate Remainder (Total 10). Distance continues to accumulate.", _rotate_remainder),
    Step("Done. Total Distance = 3516.8 cm or 35.168 meters."),
)


class StepScenario:
    """Walks through :data:`DEFAULT_STEPS`, one call to :meth:`next` per click."""

    START_OVER = "Start Over?"

    def __init__(self, engine: RodaEngine, steps: Sequence[Step] = DEFAULT_STEPS) -> None:
        self.engine = engine
        self.steps: List[Step] = list(steps)
        self.index = 0

    def next(self) -> str:
        if self.index >= len(self.steps):
            self.index = 0
            return self.START_OVER
        step = self.steps[self.index]
        self.engine.set_mode("step")
        if step.action is not None:
            step.action(self.engine)
        self.index += 1
        return step.text

    def rewind(self) -> None:
        self.index = 0


# ---------------------------------------------------------------------------
# Quiz


@dataclass(frozen=True)
class QuizResult:
    correct: bool
    expected: int
    message: str


class QuizSession:
    """Random distance questions checked against :func:`~roda.wheel_math.distance`.

    A correct answer starts the wheel so the learner can watch the answer
    being measured; the question is marked finished once that run completes.
    """

    RADIUS_RANGE = (DEFAULTS["quiz"]["radiusMin"], DEFAULTS["quiz"]["radiusMax"])
    REVOLUTION_RANGE = (DEFAULTS["quiz"]["revolutionsMin"], DEFAULTS["quiz"]["revolutionsMax"])
    TOLERANCE = DEFAULTS["quiz"]["tolerance"]

    def __init__(self, engine: RodaEngine, rng: Optional[random.Random] = None) -> None:
        self.engine = engine
        self.rng = rng or random.Random()
        self.radius: Optional[int] = None
        self.revolutions: Optional[int] = None
        self.answer: Optional[float] = None
        self.finished = False
        self._verifying = False
        self._finished_callbacks: List[Callable[[], None]] = []
        engine.on_completion(self._on_run_complete)

    def on_finished(self, callback: Callable[[], None]) -> None:
        self._finished_callbacks.append(callback)

    def new_question(self) -> str:
        radius = self.rng.randint(*self.RADIUS_RANGE)
        revolutions = self.rng.randint(*self.REVOLUTION_RANGE)
        return self.ask(radius, revolutions)

    def ask(self, radius: int, revolutions: int) -> str:
        engine = self.engine
        engine.set_mode("quiz")
        engine.set_radius(radius)
        engine.set_target_revolutions(revolutions)
        engine.reset()
        self.radius = radius
        self.revolutions = revolutions
        self.answer = distance(radius, revolutions, engine.state.pi_mode)
        self.finished = False
        self._verifying = False
        return (
            f"If radius = <strong>{radius} cm</strong> and the wheel rotates "
            f"<strong>{revolutions} times</strong>,<br>what is the distance traveled (cm)? "
            "(Round to nearest integer)"
        )

    def expected_answer(self) -> int:
        if self.answer is None:
            raise RuntimeError("no quiz question has been asked yet")
        return js_round(self.answer)

    def submit(self, raw_answer: object) -> QuizResult:
        expected = self.expected_answer()
        try:
            value = float(str(raw_answer).strip().replace(",", "."))
        except ValueError:
            value = None
        if value is not None and abs(value - expected) <= self.TOLERANCE:
            self._verifying = True
            self.engine.start()
            return QuizResult(True, expected, "Correct! Let's verify with the simulation.")
        return QuizResult(False, expected, f"Not quite. The answer is around {expected}. Try again!")

    def _is_verification_run(self) -> bool:
        s = self.engine.state
        return s.mode == "quiz" and s.radius == self.radius and s.target_revolutions == self.revolutions

    def _on_run_complete(self) -> None:
        if not self._verifying:
            return
        self._verifying = False
        # un autre mode ou une autre roue : la question reste ouverte
        if not self._is_verification_run():
            return
        self.finished = True
        for callback in list(self._finished_callbacks):
            callback()
