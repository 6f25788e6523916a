from __future__ import annotations

from typing import List

import pytest

from roda.engine import BASE_SPEED_CM_PER_SECOND, RodaEngine, SimulationState


@pytest.fixture
def engine() -> RodaEngine:
    return RodaEngine()


def _run_to_end(engine: RodaEngine, step_ms: float = 500.0) -> int:
    frames = 0
    t = 0.0
    engine.advance(t)
    while engine.state.is_playing:
        t += step_ms
        engine.advance(t)
        frames += 1
        assert frames < 10_000
    return frames


class TestDefaults:
    def test_initial_state(self, engine: RodaEngine) -> None:
        s = engine.state
        assert s.radius == 56
        assert s.target_revolutions == 10
        assert s.current_revolutions == 0
        assert s.speed_multiplier == 1
        assert s.pi_mode == "3.14"
        assert s.mode == "free"
        assert s.is_playing is False

    def test_scale_follows_viewport(self, engine: RodaEngine) -> None:
        assert engine.state.pixel_scale == pytest.approx(330 / 123.2)
        assert engine.state.marker_interval == 100
        engine.resize_viewport(1600, 900)
        assert engine.state.pixel_scale == pytest.approx(830 / 123.2)

    def test_snapshot_keys(self, engine: RodaEngine) -> None:
        snap = engine.snapshot()
        assert snap["circumference"] == pytest.approx(351.68)
        assert snap["totalDistance"] == pytest.approx(3516.8)
        assert snap["distance"] == 0
        assert snap["isPlaying"] is False


class TestClock:
    def test_first_frame_has_zero_delta(self, engine: RodaEngine) -> None:
        engine.start()
        engine.advance(5000.0)
        assert engine.current_revolutions == 0
        engine.advance(6000.0)
        assert engine.current_distance() == pytest.approx(BASE_SPEED_CM_PER_SECOND)

    def test_speed_multiplier(self, engine: RodaEngine) -> None:
        assert engine.set_speed_multiplier(2)
        engine.start()
        engine.tick(1000.0)
        assert engine.current_distance() == pytest.approx(60.0)

    def test_tick_ignored_when_paused(self, engine: RodaEngine) -> None:
        engine.tick(1000.0)
        assert engine.current_revolutions == 0

    def test_negative_delta_does_not_rewind(self, engine: RodaEngine) -> None:
        engine.start()
        engine.tick(1000.0)
        before = engine.current_revolutions
        engine.tick(-500.0)
        assert engine.current_revolutions == before

    def test_revolutions_never_decrease_while_playing(self, engine: RodaEngine) -> None:
        engine.start()
        seen: List[float] = []
        for frame in range(200):
            engine.advance(frame * 16.0)
            seen.append(engine.current_revolutions)
        assert seen == sorted(seen)

    def test_clamped_at_target(self, engine: RodaEngine) -> None:
        engine.set_target_revolutions(1)
        engine.start()
        engine.tick(60_000.0)
        assert engine.current_revolutions == 1
        assert engine.is_complete()
        assert engine.state.is_playing is False
        assert engine.current_distance() == pytest.approx(351.68)

    def test_completion_fires_once(self, engine: RodaEngine) -> None:
        calls: List[int] = []
        engine.on_completion(lambda: calls.append(1))
        engine.set_target_revolutions(1)
        engine.start()
        _run_to_end(engine)
        engine.tick(1000.0)
        engine.advance(1_000_000.0)
        assert calls == [1]

    def test_unsubscribe(self, engine: RodaEngine) -> None:
        calls: List[int] = []
        unsubscribe = engine.on_completion(lambda: calls.append(1))
        unsubscribe()
        engine.set_target_revolutions(1)
        engine.start()
        engine.tick(60_000.0)
        assert calls == []

    def test_start_after_completion_restarts(self, engine: RodaEngine) -> None:
        engine.set_target_revolutions(1)
        engine.start()
        engine.tick(60_000.0)
        engine.start()
        assert engine.current_revolutions == 0
        assert engine.state.is_playing

    def test_toggle(self, engine: RodaEngine) -> None:
        engine.toggle()
        assert engine.state.is_playing
        engine.toggle()
        assert not engine.state.is_playing

    def test_reset_is_idempotent(self, engine: RodaEngine) -> None:
        engine.start()
        engine.tick(2000.0)
        engine.reset()
        first = engine.snapshot()
        engine.reset()
        assert engine.snapshot() == first
        assert first["currentRevolutions"] == 0
        assert first["isPlaying"] is False


class TestFrameLoop:
    def test_idle_engine_stops_loop(self, engine: RodaEngine) -> None:
        assert engine.advance(0.0) is False

    def test_loop_runs_while_playing(self, engine: RodaEngine) -> None:
        engine.start()
        assert engine.advance(0.0) is True

    def test_loop_keeps_running_when_paused_mid_run(self, engine: RodaEngine) -> None:
        engine.start()
        engine.advance(0.0)
        engine.advance(1000.0)
        engine.pause()
        assert engine.advance(2000.0) is True
        engine.reset()
        assert engine.advance(3000.0) is False


class TestSetters:
    @pytest.mark.parametrize("value", ["abc", "", None, -1, 0, float("nan"), float("inf"), True])
    def test_invalid_radius_rejected(self, engine: RodaEngine, value: object) -> None:
        assert engine.set_radius(value) is False
        assert engine.state.radius == 56

    def test_radius_change_resets_run(self, engine: RodaEngine) -> None:
        engine.start()
        engine.tick(2000.0)
        assert engine.set_radius("30")
        assert engine.state.radius == 30
        assert engine.current_revolutions == 0
        assert engine.state.is_playing is False
        assert engine.state.pixel_scale == pytest.approx(330 / 66)

    def test_target_lower_than_progress_clamps(self, engine: RodaEngine) -> None:
        engine.start()
        engine.tick(30_000.0)
        assert engine.current_revolutions > 2
        assert engine.set_target_revolutions(2)
        assert engine.current_revolutions == 2

    @pytest.mark.parametrize("value", [0, -3, "x"])
    def test_invalid_target_rejected(self, engine: RodaEngine, value: object) -> None:
        assert engine.set_target_revolutions(value) is False
        assert engine.state.target_revolutions == 10

    def test_fractional_target(self, engine: RodaEngine) -> None:
        assert engine.set_target_revolutions(2.5)
        engine.start()
        engine.tick(600_000.0)
        assert engine.current_revolutions == 2.5

    def test_speed_outside_choices(self, engine: RodaEngine) -> None:
        assert engine.set_speed_multiplier(3) is False
        assert engine.set_speed_multiplier("0.5") is True
        assert engine.state.speed_multiplier == 0.5

    def test_pi_mode(self, engine: RodaEngine) -> None:
        assert engine.set_pi_mode("22_7")
        assert engine.state.pi_mode == "22/7"
        assert engine.circumference() == pytest.approx(2 * 22 / 7 * 56)
        assert engine.set_pi_mode("pi") is False
        assert engine.state.pi_mode == "22/7"

    def test_mode(self, engine: RodaEngine) -> None:
        assert engine.set_mode("quiz")
        assert engine.set_mode("kiosk") is False
        assert engine.state.mode == "quiz"

    def test_custom_state(self) -> None:
        engine = RodaEngine(SimulationState(radius=20, target_revolutions=3))
        assert engine.total_distance() == pytest.approx(376.8)

    def test_rotation_angle_is_arc_over_radius(self, engine: RodaEngine) -> None:
        engine.start()
        engine.tick(1000.0)
        assert engine.rotation_angle() == pytest.approx(30.0 / 56)


class TestLogging:
    def test_debug_lines_are_tagged(self, engine: RodaEngine, capsys: pytest.CaptureFixture[str]) -> None:
        engine.start()
        engine.set_radius(40)
        out = capsys.readouterr().out
        lines = [line for line in out.splitlines() if line]
        assert lines
        assert all(line.startswith("[Roda][DEBUG]") for line in lines)
