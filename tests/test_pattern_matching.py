"""Tests for workout format detection and movement line extraction."""

import pytest

from wodstrat.models.enums import DistanceUnit, LoadUnit, RepSchemeType, WorkoutType
from wodstrat.parsing.pattern_matching import (
    detect_workout_type,
    determine_rep_scheme_type,
    extract_interval,
    extract_rep_scheme,
    extract_time_cap,
    parse_movement_line,
    signalled_workout_types,
)
from wodstrat.parsing.preprocessor import normalize_text, preprocess


class TestWorkoutTypeDetection:
    """Test header classification."""

    @pytest.mark.parametrize("header", ["AMRAP 20 min", "20 min AMRAP"])
    def test_amrap_duration(self, header):
        match = detect_workout_type(header)
        assert match.workout_type == WorkoutType.AMRAP
        assert match.time_cap_seconds == 1200
        assert match.confidence == 1.0

    def test_amrap_without_duration(self):
        match = detect_workout_type("AMRAP")
        assert match.workout_type == WorkoutType.AMRAP
        assert match.time_cap_seconds is None

    def test_emom_total_from_tail(self):
        match = detect_workout_type("EMOM 10 min")
        assert match.workout_type == WorkoutType.EMOM
        assert match.interval_seconds == 60
        assert match.time_cap_seconds == 600
        assert match.round_count == 10

    def test_every_two_minutes(self):
        match = detect_workout_type("E2MOM 20")
        assert match.workout_type == WorkoutType.EMOM
        assert match.interval_seconds == 120
        assert match.time_cap_seconds == 1200
        assert match.round_count == 10

    def test_tabata(self):
        match = detect_workout_type("Tabata")
        assert match.workout_type == WorkoutType.TABATA
        assert match.time_cap_seconds == 240
        assert match.round_count == 8
        assert match.interval.work_seconds == 20
        assert match.interval.rest_seconds == 10

    def test_for_time_with_rounds(self):
        match = detect_workout_type("3 Rounds For Time")
        assert match.workout_type == WorkoutType.FOR_TIME
        assert match.round_count == 3

    def test_rounds(self):
        match = detect_workout_type("5 Rounds")
        assert match.workout_type == WorkoutType.ROUNDS
        assert match.round_count == 5
        assert match.confidence == 0.9

    def test_work_rest_intervals(self):
        match = detect_workout_type("5 x 3 min on / 1 min off")
        assert match.workout_type == WorkoutType.INTERVALS
        assert match.interval.total_seconds == 1200

    def test_chipper(self):
        match = detect_workout_type("21-15-9")
        assert match.workout_type == WorkoutType.FOR_TIME
        assert match.matched_pattern == "Chipper"
        assert match.confidence == 0.8

    def test_default_is_low_confidence_for_time(self):
        match = detect_workout_type("Thrusters and Pull-ups")
        assert match.workout_type == WorkoutType.FOR_TIME
        assert match.matched_pattern is None
        assert match.confidence == 0.5

    def test_signalled_types(self):
        assert signalled_workout_types("AMRAP 12 For Time") == [WorkoutType.AMRAP, WorkoutType.FOR_TIME]


class TestTimeAndIntervals:
    """Test time cap and interval extraction."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Time Cap: 20", 1200),
            ("Cap 12:30", 750),
            ("20 min cap", 1200),
            ("For Time", None),
        ],
    )
    def test_time_cap(self, text, expected):
        assert extract_time_cap(text) == expected

    def test_distance_repeats_are_not_intervals(self):
        assert extract_interval("5 x 400m") is None


class TestRepSchemes:
    """Test rep scheme detection and classification."""

    @pytest.mark.parametrize(
        "reps, scheme_type",
        [
            ([21, 15, 9], RepSchemeType.DESCENDING),
            ([10, 20, 30], RepSchemeType.ASCENDING),
            ([10, 10, 10], RepSchemeType.FIXED),
            ([10, 5, 10], RepSchemeType.CUSTOM),
            ([12], RepSchemeType.FIXED),
        ],
    )
    def test_scheme_type(self, reps, scheme_type):
        assert determine_rep_scheme_type(reps) == scheme_type

    def test_chipper_scheme(self):
        scheme = extract_rep_scheme("21-15-9")
        assert scheme.reps == [21, 15, 9]
        assert scheme.total_reps == 45

    def test_fixed_scheme(self):
        scheme = extract_rep_scheme("5 rounds of 10")
        assert scheme.reps == [10] * 5
        assert scheme.scheme_type == RepSchemeType.FIXED

    def test_no_scheme(self):
        assert extract_rep_scheme("For Time") is None


class TestMovementLines:
    """Test quantity extraction from movement lines."""

    def test_reps_and_gender_load(self):
        fields = parse_movement_line("21 Thrusters (95/65 lb)")
        assert fields.reps == 21
        assert fields.movement_text == "Thrusters"
        assert fields.weight.value == 95
        assert fields.weight.unit == LoadUnit.LB
        assert fields.weight_female.value == 65

    def test_kg_load(self):
        fields = parse_movement_line("10 Deadlifts 100 kg")
        assert fields.reps == 10
        assert fields.weight.unit == LoadUnit.KG
        assert fields.movement_text == "Deadlifts"

    def test_distance_is_not_reps(self):
        fields = parse_movement_line("400m Run")
        assert fields.reps is None
        assert fields.distance.value == 400
        assert fields.distance.unit == DistanceUnit.M
        assert fields.movement_text == "Run"

    def test_gender_calories_are_not_load(self):
        fields = parse_movement_line("15/12 Cal Row")
        assert fields.calories == 15
        assert fields.calories_female == 12
        assert fields.weight is None
        assert fields.movement_text == "Row"

    def test_duration(self):
        fields = parse_movement_line("1 min Plank")
        assert fields.duration_seconds == 60
        assert fields.reps is None
        assert fields.movement_text == "Plank"

    def test_no_quantity(self):
        fields = parse_movement_line("Pull-ups")
        assert fields.has_quantity is False
        assert fields.movement_text == "Pull-ups"


class TestPreprocessor:
    """Test normalization and line categorization."""

    def test_normalize_text(self):
        assert normalize_text("21–15–9\r\n\r\n\r\n\r\nThrusters   ") == "21-15-9\n\nThrusters"

    def test_named_workout_title(self):
        result = preprocess("Fran\n21-15-9\nThrusters\nPull-ups")
        assert result.workout_name == "Fran"
        assert result.header_lines == ["21-15-9"]
        assert result.movement_lines == [(3, "Thrusters"), (4, "Pull-ups")]

    def test_known_movement_is_not_title(self, catalog):
        result = preprocess("Burpees\n10 Pull-ups", catalog.is_known)
        assert result.workout_name is None
        assert result.movement_lines[0] == (1, "Burpees")
