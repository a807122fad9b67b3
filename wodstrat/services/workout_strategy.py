"""Parse a workout description and run every strategy analyzer over it."""
from __future__ import annotations

import logging
from typing import Iterable

from wodstrat.logging_config import configure_logging
from wodstrat.models.parsing import ParsedWorkout, ParsedWorkoutResult
from wodstrat.models.reference import AthleteBenchmark, AthleteProfile
from wodstrat.models.schemas import WorkoutStrategy
from wodstrat.parsing.parser import WorkoutParser
from wodstrat.services.benchmark_context import AthleteBenchmarkContext
from wodstrat.services.pacing import PacingService
from wodstrat.services.strategy_insights import StrategyInsightsService
from wodstrat.services.time_estimate import TimeEstimateService
from wodstrat.services.volume_load import VolumeLoadService

logger = logging.getLogger(__name__)


class WorkoutNotAnalyzableError(ValueError):
    """Raised when a parse carries blocking errors or no movements."""

    def __init__(self, parse_result: ParsedWorkoutResult):
        self.parse_result = parse_result
        messages = [issue.message for issue in parse_result.errors] or ["No movements detected."]
        super().__init__(f"Workout cannot be analyzed: {'; '.join(messages)}")


class WorkoutStrategyService:
    """One entry point from workout text to a complete strategy."""

    def __init__(
        self,
        parser: WorkoutParser | None = None,
        pacing_service: PacingService | None = None,
        volume_service: VolumeLoadService | None = None,
        time_service: TimeEstimateService | None = None,
        insights_service: StrategyInsightsService | None = None,
    ):
        configure_logging()
        self.parser = parser or WorkoutParser()
        self.pacing_service = pacing_service or PacingService()
        self.volume_service = volume_service or VolumeLoadService()
        self.time_service = time_service or TimeEstimateService(pacing_service=self.pacing_service)
        self.insights_service = insights_service or StrategyInsightsService()

    def analyze(
        self,
        parse_result: ParsedWorkoutResult,
        context: AthleteBenchmarkContext,
    ) -> WorkoutStrategy:
        """
        Run all analyzers over an already parsed workout.

        Raises:
            WorkoutNotAnalyzableError: If the parse has any Error issue or the
                workout is not valid
        """
        workout: ParsedWorkout = parse_result.workout
        if parse_result.errors or not workout.is_valid:
            logger.info("Refusing to analyze workout with %d blocking issue(s)", len(parse_result.errors))
            raise WorkoutNotAnalyzableError(parse_result)

        pacing = self.pacing_service.calculate_workout_pacing(workout, context)
        volume = self.volume_service.calculate_workout_volume_load(workout, context)
        time_estimate = self.time_service.estimate(workout, context)
        insights = self.insights_service.calculate_insights(
            workout, pacing, volume, time_estimate, context.experience_level
        )
        logger.info(
            "Strategy ready for %s: %s, difficulty %d",
            pacing.workout_name,
            time_estimate.formatted_range,
            insights.difficulty_score.score,
        )
        return WorkoutStrategy(
            parse_result=parse_result,
            pacing=pacing,
            volume_load=volume,
            time_estimate=time_estimate,
            insights=insights,
        )

    def generate(
        self,
        text: str,
        athlete_benchmarks: Iterable[AthleteBenchmark] = (),
        profile: AthleteProfile | None = None,
        context: AthleteBenchmarkContext | None = None,
    ) -> WorkoutStrategy:
        """
        Parse ``text`` and build the strategy for one athlete.

        Args:
            text: Free-text workout description
            athlete_benchmarks: The athlete's recorded benchmark values
            profile: Experience level and gender
            context: Pre-built benchmark context; overrides the two arguments above

        Returns:
            WorkoutStrategy bundling the parse result and every analysis

        Raises:
            WorkoutNotAnalyzableError: If the text does not parse into a valid workout

        Example:
            >>> strategy = WorkoutStrategyService().generate("21-15-9\\nThrusters 95/65 lb\\nPull-ups")
            >>> strategy.time_estimate.estimate_type
            <EstimateType.TIME: 'Time'>
        """
        parse_result = self.parser.parse(text)
        if context is None:
            context = AthleteBenchmarkContext(athlete_benchmarks, profile=profile)
        return self.analyze(parse_result, context)
