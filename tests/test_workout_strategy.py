"""End-to-end tests from workout text to a complete strategy."""

import pytest

from wodstrat.models.enums import EstimateType, ExperienceLevel, IssueCode, PacingLevel, RiskAlertType
from wodstrat.models.reference import AthleteBenchmark, AthleteProfile
from wodstrat.services.workout_strategy import WorkoutNotAnalyzableError, WorkoutStrategyService

FRAN = "Fran\n21-15-9\nThrusters (95/65 lb)\nPull-ups"


@pytest.fixture
def service(parser):
    return WorkoutStrategyService(parser=parser)


class TestWorkoutStrategyService:
    def test_generate(self, service, reference):
        strategy = service.generate(
            FRAN,
            athlete_benchmarks=[
                AthleteBenchmark(benchmark_definition_id=2, value=60),
                AthleteBenchmark(benchmark_definition_id=7, value=3),
            ],
            profile=AthleteProfile(experience_level=ExperienceLevel.BEGINNER),
        )

        assert strategy.parse_result.success is True
        assert strategy.pacing.workout_name == "Fran"
        assert strategy.time_estimate.estimate_type == EstimateType.TIME
        assert [m.pacing_level for m in strategy.pacing.movement_pacing] == [PacingLevel.LIGHT, PacingLevel.LIGHT]
        assert strategy.volume_load.movement_volumes[0].recommended_weight is not None
        assert strategy.insights.key_focus_movements[0].movement_name == "Thrusters"
        assert strategy.insights.strategy_confidence.level == "High"
        assert strategy.insights.pacing_analysis == strategy.pacing
        assert 1 <= strategy.insights.difficulty_score.score <= 10

    def test_generate_without_benchmarks(self, service):
        strategy = service.generate("AMRAP 12 min\n10 Burpees\n15 Air Squats")

        assert strategy.time_estimate.estimate_type == EstimateType.ROUNDS_REPS
        assert strategy.insights.strategy_confidence.level == "Low"
        alert_types = [a.alert_type for a in strategy.insights.risk_alerts]
        assert RiskAlertType.BENCHMARK_GAP in alert_types

    def test_prebuilt_context(self, service, make_context):
        strategy = service.generate(FRAN, context=make_context({2: 145, 7: 35}))
        assert all(m.pacing_level == PacingLevel.HEAVY for m in strategy.pacing.movement_pacing)

    @pytest.mark.parametrize("text", ["", "AMRAP 20 min"])
    def test_unusable_text_raises(self, service, text):
        with pytest.raises(WorkoutNotAnalyzableError) as exc_info:
            service.generate(text)

        assert exc_info.value.parse_result.success is False
        assert str(exc_info.value).startswith("Workout cannot be analyzed: ")

    @pytest.mark.parametrize(
        "text, code",
        [
            ("For Time\n0 Burpees\n10 Pull-ups", IssueCode.INVALID_REP_COUNT),
            ("For Time\n10 Burpees\nfoo bar baz", IssueCode.UNRECOGNIZED_MOVEMENT_FORMAT),
        ],
    )
    def test_line_errors_block_analysis(self, service, parser, make_context, text, code):
        parse_result = parser.parse(text)
        assert [e.code for e in parse_result.errors] == [code]
        assert parse_result.workout.movements

        with pytest.raises(WorkoutNotAnalyzableError) as exc_info:
            service.analyze(parse_result, make_context())

        assert exc_info.value.parse_result == parse_result

    def test_analyze_parsed_workout(self, service, parser, make_context):
        parse_result = parser.parse(FRAN)
        strategy = service.analyze(parse_result, make_context())
        assert strategy.parse_result == parse_result
