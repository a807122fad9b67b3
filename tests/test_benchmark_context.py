"""Tests for benchmark resolution and cardio pace targets."""
from datetime import datetime, timedelta, timezone

import pytest

from wodstrat.models.enums import CardioType, PacingLevel, WorkoutType
from wodstrat.models.parsing import Distance, ParsedMovement, ParsedWorkout
from wodstrat.models.reference import AthleteBenchmark, AthleteProfile
from wodstrat.services import cardio_pace
from wodstrat.services.benchmark_context import AthleteBenchmarkContext


class TestAthleteBenchmarkContext:
    """Test mapping choice, population row choice and percentile lookup."""

    def test_unmapped_movement_has_no_data(self, make_context):
        data = make_context({1: 110}).resolve(None)
        assert data.has_sufficient_data is False
        assert data.benchmark_name == ""

    def test_best_mapping_prefers_recorded_benchmark(self, make_context):
        # thrusters map to back squat (0.7), front squat (0.9) and fran (0.5)
        assert make_context().best_mapping(1).benchmark_definition_id == 2
        assert make_context({13: 300}).best_mapping(1).benchmark_definition_id == 13

    def test_resolve_computes_percentile(self, make_context):
        data = make_context({7: 14}).resolve(30)
        assert data.benchmark_name == "Max Pull-ups"
        assert data.has_athlete_benchmark is True
        assert data.has_population_data is True
        assert data.percentile == pytest.approx(60.0)

    def test_population_only(self, make_context):
        data = make_context().resolve(30)
        assert data.has_population_data is True
        assert data.has_sufficient_data is False

    def test_gendered_population_row(self, make_context):
        assert make_context(gender="female").population_for(1).gender == "female"
        assert make_context(gender="male").population_for(1).gender is None
        assert make_context().population_for(1).gender is None

    def test_latest_recording_wins(self, reference):
        now = datetime.now(timezone.utc)
        context = AthleteBenchmarkContext(
            [
                AthleteBenchmark(benchmark_definition_id=1, value=150, recorded_at=now),
                AthleteBenchmark(benchmark_definition_id=1, value=100, recorded_at=now - timedelta(days=30)),
            ],
            reference=reference,
            profile=AthleteProfile(),
        )
        assert context.athlete_value(1) == 150

    def test_recorded_pounds_convert_to_kilograms(self, reference):
        context = AthleteBenchmarkContext(
            [
                AthleteBenchmark(benchmark_definition_id=1, value=225, unit="lb"),
                AthleteBenchmark(benchmark_definition_id=13, value=300, unit="min"),
            ],
            reference=reference,
        )
        assert context.athlete_value(1) == pytest.approx(102.06, abs=0.01)
        assert context.athlete_value(13) == 300
        assert context.athlete_value(2) is None

    def test_matching_unit_is_unchanged(self, reference):
        context = AthleteBenchmarkContext(
            [AthleteBenchmark(benchmark_definition_id=1, value=110, unit="kg")],
            reference=reference,
        )
        assert context.athlete_value(1) == 110


class TestCardioPace:
    """Test running and rowing pace targets."""

    @staticmethod
    def _movement(catalog, name, meters=None):
        return ParsedMovement(
            sequence_order=1,
            original_text=name,
            movement_text=name,
            movement=catalog.find(name),
            distance=Distance(value=meters) if meters else None,
        )

    def test_running_pace(self):
        per_km, per_mile = cardio_pace.calculate_running_pace(1500, 5000)
        assert per_km == pytest.approx(300.0)
        assert per_mile == pytest.approx(482.8, abs=0.1)

    def test_running_pace_needs_distance(self):
        with pytest.raises(ValueError):
            cardio_pace.calculate_running_pace(1500, 0)

    def test_rowing_split(self):
        assert cardio_pace.calculate_rowing_pace(480, "2k-row") == pytest.approx(120.0)
        assert cardio_pace.calculate_rowing_pace(105, "unknown") == pytest.approx(105.0)

    def test_cardio_type(self):
        assert cardio_pace.determine_cardio_type("run") == CardioType.RUNNING
        assert cardio_pace.determine_cardio_type("row") == CardioType.ROWING
        assert cardio_pace.determine_cardio_type("bike") == CardioType.OTHER

    def test_context_factor(self):
        sprint = ParsedWorkout(time_cap_seconds=480)
        short_run = ParsedMovement(sequence_order=1, original_text="400m Run", distance=Distance(value=400))
        long_amrap = ParsedWorkout(workout_type=WorkoutType.AMRAP, time_cap_seconds=1200)

        assert cardio_pace.context_factor(None, None) == 1.05
        assert cardio_pace.context_factor(sprint, short_run) == 1.00
        assert cardio_pace.context_factor(long_amrap, None) == 1.20
        assert cardio_pace.context_factor(ParsedWorkout(time_cap_seconds=1500), None) == 1.15
        assert cardio_pace.context_factor(ParsedWorkout(), None) == 1.07

    def test_run_target_from_athlete_benchmark(self, catalog, make_context):
        run = self._movement(catalog, "Run", 400)
        data = make_context({9: 1500}).resolve(run.movement.id)

        target = cardio_pace.build_cardio_pace_target(run, data, PacingLevel.MODERATE)

        assert target.pace_unit == "km"
        assert target.display_primary == "5:15/km"
        assert target.display_secondary.endswith("/mi")
        assert target.is_derived_from_benchmark is True

    def test_row_target(self, catalog, make_context):
        row = self._movement(catalog, "Row", 500)
        data = make_context({11: 480}).resolve(row.movement.id)

        target = cardio_pace.build_cardio_pace_target(row, data, PacingLevel.MODERATE)

        assert target.display_primary == "2:06/500m"
        assert target.value_per_unit == pytest.approx(126.0)

    def test_population_median_fallback(self, catalog, make_context):
        run = self._movement(catalog, "Run", 800)
        data = make_context().resolve(run.movement.id)

        target = cardio_pace.build_cardio_pace_target(run, data, PacingLevel.MODERATE)

        assert target.is_derived_from_benchmark is False
        assert target.value_per_unit == pytest.approx(333.9)
