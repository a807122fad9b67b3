"""Tests for volume load, load classification and weight recommendations."""

import pytest

from wodstrat.models.enums import ExperienceLevel, LoadClassification, LoadUnit
from wodstrat.models.parsing import ParsedMovement, ParsedWorkout, Weight
from wodstrat.services.volume_load import VolumeLoadService, movement_rounds

FRAN = "21-15-9\nThrusters (95/65 lb)\nPull-ups"


@pytest.fixture
def service():
    return VolumeLoadService()


class TestClassification:
    """Test percent-of-1RM thresholds."""

    @pytest.mark.parametrize(
        "weight, experience, expected",
        [
            (43, ExperienceLevel.INTERMEDIATE, LoadClassification.HIGH),
            (43, ExperienceLevel.ADVANCED, LoadClassification.MODERATE),
            (40, ExperienceLevel.BEGINNER, LoadClassification.HIGH),
            (32, ExperienceLevel.INTERMEDIATE, LoadClassification.MODERATE),
            (32, ExperienceLevel.ADVANCED, LoadClassification.LOW),
            (20, ExperienceLevel.BEGINNER, LoadClassification.LOW),
        ],
    )
    def test_classify_load(self, service, weight, experience, expected):
        assert service.classify_load(weight, 60, experience) == expected

    def test_missing_1rm_is_moderate(self, service):
        assert service.classify_load(100, 0) == LoadClassification.MODERATE

    def test_volume_load(self):
        assert VolumeLoadService.calculate_volume_load(60, 10, 5) == 3000
        assert VolumeLoadService.calculate_volume_load(60, 0, 5) == 0


class TestRecommendedWeight:
    @pytest.mark.parametrize(
        "percentile, expected",
        [(45, 80.0), (59.9, 80.0), (60, 90.0), (79.9, 90.0), (None, 90.0), (80, 100.0), (97, 100.0)],
    )
    def test_scaling_by_percentile(self, service, percentile, expected):
        assert service.calculate_recommended_weight(100, percentile, LoadClassification.HIGH) == expected

    @pytest.mark.parametrize("classification", [LoadClassification.MODERATE, LoadClassification.LOW])
    def test_only_high_loads(self, service, classification):
        assert service.calculate_recommended_weight(100, 50, classification) is None

    def test_tips(self, service):
        assert "Consider scaling Thrusters to 34 kg (80% of RX)" in service.generate_tip(
            LoadClassification.HIGH, 20, 43, "Thrusters"
        )
        assert "Go RX" in service.generate_tip(LoadClassification.HIGH, 90, 43, "Thrusters")
        assert service.generate_tip(LoadClassification.LOW, 90, 43, "Thrusters").startswith(
            "This is a light load"
        )
        assert service.generate_tip(LoadClassification.HIGH, None, 43, "Thrusters").startswith("Record your")


class TestMovementVolume:
    """Test per-movement analysis."""

    def test_rep_scheme_counts_once(self, parser):
        workout = parser.parse(FRAN).workout
        assert movement_rounds(workout.movements[0], workout) == 1

    def test_rounds_multiply(self, service, parser, make_context):
        workout = parser.parse("5 Rounds\n10 Deadlifts 100 kg\n10 Burpees").workout

        deadlift = service.analyze_movement(workout.movements[0], workout, make_context())

        assert deadlift.rounds == 5
        assert deadlift.volume_load == 5000
        assert deadlift.volume_load_formatted == "5,000 kg"
        assert deadlift.benchmark_used == "Deadlift 1RM"
        assert deadlift.load_classification == LoadClassification.NOT_APPLICABLE
        assert deadlift.has_sufficient_data is False
        assert deadlift.tip.startswith("Record your Deadlift 1RM")

    def test_high_load_gets_recommendation(self, service, parser, make_context):
        workout = parser.parse(FRAN).workout

        thrusters = service.analyze_movement(workout.movements[0], workout, make_context({2: 60}))

        assert thrusters.weight == pytest.approx(43.1)
        assert thrusters.weight_unit == "kg"
        assert thrusters.reps == 45
        assert thrusters.load_classification == LoadClassification.HIGH
        assert thrusters.athlete_benchmark_percentile == pytest.approx(20.0)
        assert thrusters.recommended_weight == pytest.approx(34.5)
        assert thrusters.recommended_weight_formatted.endswith("(80% of RX)")

    def test_non_weight_benchmark_is_moderate(self, service, parser, make_context):
        workout = parser.parse(FRAN).workout

        thrusters = service.analyze_movement(workout.movements[0], workout, make_context({13: 300}))

        assert thrusters.benchmark_used == "Fran"
        assert thrusters.load_classification == LoadClassification.MODERATE
        assert thrusters.recommended_weight is None

    def test_bodyweight(self, service, parser, make_context):
        workout = parser.parse(FRAN).workout

        pull_ups = service.analyze_movement(workout.movements[1], workout, make_context())

        assert pull_ups.load_classification == LoadClassification.BODYWEIGHT
        assert pull_ups.volume_load == 0

    def test_unmapped_weighted_movement(self, service, make_context):
        movement = ParsedMovement(
            sequence_order=1,
            original_text="10 Sandbag Carries 100 lb",
            movement_text="Sandbag Carries",
            rep_count=10,
            load=Weight(value=100, unit=LoadUnit.LB),
        )

        result = service.analyze_movement(movement, ParsedWorkout(movements=[movement]), make_context())

        assert result.benchmark_used == "None"
        assert result.tip.startswith("No benchmark mapping found for Sandbag Carries")


class TestWorkoutVolume:
    def test_fran(self, service, parser, make_context):
        workout = parser.parse(FRAN).workout

        result = service.calculate_workout_volume_load(workout, make_context({2: 60}))

        assert result.distribution.high_count == 1
        assert result.distribution.bodyweight_count == 1
        assert result.distribution.insufficient_data_count == 0
        assert result.is_complete is True
        assert result.total_volume_load == pytest.approx(43.1 * 45)
        assert result.overall_assessment.startswith("High volume workout")

    def test_bodyweight_only(self, service, parser, make_context):
        workout = parser.parse("AMRAP 10 min\n10 Burpees\n10 Air Squats").workout

        result = service.calculate_workout_volume_load(workout, make_context())

        assert result.total_volume_load == 0
        assert result.overall_assessment.startswith("This workout has no weighted movements")
        assert result.is_complete is True
