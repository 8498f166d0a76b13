"""Tests for workout type detection and global parameter extraction."""
import pytest

from wod_parser_api.parsers.models import WorkoutType
from wod_parser_api.parsers.preprocessor import preprocess
from wod_parser_api.parsers.type_detector import (
    AMRAP_WITHOUT_DURATION_CONFIDENCE,
    CHIPPER_CONFIDENCE,
    DEFAULT_CONFIDENCE,
    ROUNDS_CONFIDENCE,
    WORK_REST_WITHOUT_ROUNDS_CONFIDENCE,
    detect,
)


def _detect(text):
    return detect(preprocess(text))


class TestDetectWorkoutType:
    """Classification of complete workouts."""

    def test_empty_document(self):
        match = _detect("")
        assert match.workout_type == WorkoutType.FOR_TIME
        assert match.confidence == 0.0
        assert match.error.error_type == "EmptyInput"

    def test_amrap(self, sample_workouts):
        match = _detect(sample_workouts["cindy"])
        assert match.workout_type == WorkoutType.AMRAP
        assert match.confidence == 1.0
        assert match.time_cap_seconds == 1200
        assert match.round_count is None

    def test_amrap_takes_duration_from_time_cap(self):
        match = _detect("AMRAP\nTime cap: 12 min\n5 Pull-ups")
        assert match.workout_type == WorkoutType.AMRAP
        assert match.time_cap_seconds == 720
        assert match.warning is None

    def test_amrap_without_duration_is_weaker(self):
        match = _detect("AMRAP\n5 Pull-ups\n10 Push-ups")
        assert match.workout_type == WorkoutType.AMRAP
        assert match.confidence == AMRAP_WITHOUT_DURATION_CONFIDENCE
        assert match.time_cap_seconds is None
        assert match.warning.error_type == "MissingDuration"

    def test_emom(self, sample_workouts):
        match = _detect(sample_workouts["emom"])
        assert match.workout_type == WorkoutType.EMOM
        assert match.time_cap_seconds == 600
        assert match.interval_seconds == 60
        assert match.round_count == 10

    def test_emom_without_duration_warns(self):
        match = _detect("EMOM\n5 Burpees")
        assert match.workout_type == WorkoutType.EMOM
        assert match.interval_seconds == 60
        assert match.time_cap_seconds is None
        assert match.warning.error_type == "MissingDuration"

    def test_intervals(self, sample_workouts):
        match = _detect(sample_workouts["intervals"])
        assert match.workout_type == WorkoutType.INTERVALS
        assert match.round_count == 5
        assert match.interval_seconds == 240
        assert match.time_cap_seconds == 1200

    def test_intervals_with_work_rest_on_its_own_line(self):
        match = _detect("8 rounds\n20 sec on / 10 sec off\nAir Squats")
        assert match.workout_type == WorkoutType.INTERVALS
        assert match.confidence == 1.0
        assert match.round_count == 8
        assert match.interval_seconds == 30
        assert match.time_cap_seconds == 240

    def test_work_rest_without_round_count(self):
        match = _detect("Work 40s, rest 20s\nTime cap: 12 min\nAir Squats")
        assert match.workout_type == WorkoutType.INTERVALS
        assert match.confidence == WORK_REST_WITHOUT_ROUNDS_CONFIDENCE
        assert match.round_count is None
        assert match.interval_seconds == 60
        assert match.time_cap_seconds == 720

    def test_tabata(self):
        match = _detect("Tabata Air Squats")
        assert match.workout_type == WorkoutType.INTERVALS
        assert match.round_count == 8
        assert match.interval_seconds == 30
        assert match.time_cap_seconds == 240

    def test_tabata_wins_over_amrap(self, sample_workouts):
        match = _detect(sample_workouts["tabata_amrap"])
        assert match.workout_type == WorkoutType.INTERVALS
        assert match.workout_type != WorkoutType.AMRAP

    def test_for_time_with_cap(self, sample_workouts):
        match = _detect(sample_workouts["for_time"])
        assert match.workout_type == WorkoutType.FOR_TIME
        assert match.confidence == 1.0
        assert match.time_cap_seconds == 720

    def test_rounds_for_time(self):
        match = _detect("5 Rounds for Time\n10 Burpees")
        assert match.workout_type == WorkoutType.FOR_TIME
        assert match.round_count == 5

    def test_rounds(self, sample_workouts):
        match = _detect(sample_workouts["rounds"])
        assert match.workout_type == WorkoutType.ROUNDS
        assert match.confidence == ROUNDS_CONFIDENCE
        assert match.round_count == 5

    def test_chipper_alone(self):
        match = _detect("21-15-9")
        assert match.workout_type == WorkoutType.FOR_TIME
        assert match.confidence == CHIPPER_CONFIDENCE
        assert match.rep_scheme.reps == (21, 15, 9)

    def test_chipper_from_leading_scheme(self):
        match = _detect("21-15-9 Thrusters, Pull-ups")
        assert match.confidence == CHIPPER_CONFIDENCE
        assert match.matched_pattern == "21-15-9"

    def test_default_is_low_confidence_for_time(self):
        match = _detect("10 Burpees\n10 Push-ups")
        assert match.workout_type == WorkoutType.FOR_TIME
        assert match.confidence == DEFAULT_CONFIDENCE
        assert match.matched_pattern is None

    @pytest.mark.parametrize("text", [
        "AMRAP 20 min\n5 Pull-ups",
        "10 min EMOM\n5 Burpees",
        "Tabata\nSit-ups",
        "For Time\n50 Burpees",
    ])
    def test_confidence_in_range(self, text):
        assert 0.0 <= _detect(text).confidence <= 1.0
