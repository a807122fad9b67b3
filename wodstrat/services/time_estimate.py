"""Finish-time, AMRAP score and EMOM feasibility estimates."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from wodstrat.models.enums import (
    ConfidenceLevel,
    EstimateType,
    ExperienceLevel,
    MovementCategory,
    PacingLevel,
    WorkoutType,
)
from wodstrat.models.parsing import ParsedMovement, ParsedWorkout
from wodstrat.models.schemas import (
    UNNAMED_WORKOUT,
    EmomFeasibility,
    EmomMinute,
    RestRecommendation,
    TimeEstimateResult,
)
from wodstrat.services.benchmark_context import AthleteBenchmarkContext
from wodstrat.services.formatting import format_amrap_range, format_time, format_time_range
from wodstrat.services.pacing import PacingService
from wodstrat.services.strategy_config import load_section
from wodstrat.services.volume_load import movement_rounds

logger = logging.getLogger(__name__)

DEFAULT_PERCENTILE = 50.0

# (minimum percentile, time multiplier); faster athletes get a smaller multiplier
PERCENTILE_ADJUSTMENTS = (
    (95, 0.85),
    (80, 0.92),
    (60, 1.00),
    (40, 1.10),
    (20, 1.25),
)
SLOWEST_ADJUSTMENT = 1.40

REST_REASONING = {
    PacingLevel.LIGHT: "This is a weakness - longer recovery needed to maintain quality",
    PacingLevel.HEAVY: "This is a strength - quick transitions to capitalize on advantage",
    PacingLevel.MODERATE: "Average performance - maintain steady output with moderate rest",
}

EMOM_ON_PACE = "On pace - comfortable buffer"
EMOM_TIGHT = "Tight timing - maintain focus"
EMOM_SCALE = "Consider scaling - insufficient recovery time"


@dataclass
class BenchmarkCoverage:
    """Which movements of a workout have a percentile, and their average."""

    levels: dict[int, PacingLevel] = field(default_factory=dict)
    percentiles: list[float] = field(default_factory=list)
    total_movements: int = 0

    @property
    def covered(self) -> int:
        return len(self.percentiles)

    @property
    def percent(self) -> int:
        if self.total_movements <= 0:
            return 0
        return self.covered * 100 // self.total_movements

    @property
    def average_percentile(self) -> float:
        if not self.percentiles:
            return DEFAULT_PERCENTILE
        return sum(self.percentiles) / len(self.percentiles)


def percentile_adjustment_factor(percentile: float) -> float:
    for threshold, factor in PERCENTILE_ADJUSTMENTS:
        if percentile >= threshold:
            return factor
    return SLOWEST_ADJUSTMENT


def confidence_from_coverage(coverage_percent: float) -> ConfidenceLevel:
    if coverage_percent >= 80:
        return ConfidenceLevel.HIGH
    if coverage_percent >= 50:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def overall_pacing(percentiles: list[float]) -> PacingLevel:
    """Fallback level for movements without their own percentile."""
    if not percentiles:
        return PacingLevel.MODERATE
    average = sum(percentiles) / len(percentiles)
    if average >= 80:
        return PacingLevel.HEAVY
    if average >= 60:
        return PacingLevel.MODERATE
    return PacingLevel.LIGHT


class TimeEstimateService:
    """Estimates how long a workout takes, or how far an athlete gets in it."""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        emom_config: dict[str, Any] | None = None,
        pacing_service: PacingService | None = None,
    ):
        """
        Initialize time estimate service.

        Args:
            config: Optional time_estimate thresholds (defaults to strategy.yaml)
            emom_config: Optional emom buffer thresholds (defaults to strategy.yaml)
            pacing_service: Service used to turn percentiles into pacing levels
        """
        self.config = config or self._load_config()
        self.emom_config = emom_config or load_section("emom", self._default_emom_config())
        self.pacing_service = pacing_service or PacingService()

    def _load_config(self) -> dict[str, Any]:
        return load_section("time_estimate", self._default_config())

    def _default_config(self) -> dict[str, Any]:
        return {
            "seconds_per_rep": {"Gymnastics": 2.5, "Weightlifting": 4.0, "Strongman": 5.0, "default": 2.5},
            "cardio_seconds_per_meter": {"row": 0.2, "ski": 0.2, "run": 0.24, "shuttle_run": 0.24, "bike": 0.15},
            "seconds_per_calorie": 2.5,
            "default_movement_seconds": 60,
            "default_reps": 10,
            "default_amrap_cap_seconds": 720,
            "default_interval_seconds": 60,
            "tabata_seconds_per_movement": 240,
            "range_width": {"Beginner": 0.20, "Intermediate": 0.15, "Advanced": 0.10},
            "rest_seconds": {"Light": [15, 20], "Moderate": [8, 12], "Heavy": [3, 5]},
        }

    def _default_emom_config(self) -> dict[str, Any]:
        return {
            "comfortable_buffer_seconds": 10,
            "adequate_average_buffer_seconds": 10,
            "comfortable_average_buffer_seconds": 15,
            "max_minutes": 240,
        }

    # Per-movement work time

    def movement_time(self, movement: ParsedMovement) -> int:
        """
        Seconds needed for one pass through a movement line.

        Distance uses a per-meter pace keyed by movement, calories a flat
        per-calorie rate, reps a per-category rate and holds their duration.
        """
        definition = movement.movement
        is_cardio = definition is not None and definition.category == MovementCategory.CARDIO

        if movement.distance is not None:
            per_meter = self.config["cardio_seconds_per_meter"]
            pace = per_meter.get(definition.canonical_name if definition else "", per_meter.get("row", 0.2))
            return int(movement.distance.to_meters() * pace)
        if movement.calories is not None:
            return int(movement.calories * self.config["seconds_per_calorie"])

        reps = movement.total_reps
        if reps is None and movement.duration_seconds is not None:
            return movement.duration_seconds
        if reps is None and is_cardio:
            return self.config["default_movement_seconds"]

        rates = self.config["seconds_per_rep"]
        category = definition.category.value if definition else "default"
        seconds_per_rep = rates.get(category, rates["default"])
        return int((reps if reps is not None else self.config["default_reps"]) * seconds_per_rep)

    def base_workout_time(self, workout: ParsedWorkout, apply_rounds: bool = True) -> int:
        total = 0
        for movement in workout.movements:
            rounds = movement_rounds(movement, workout) if apply_rounds else 1
            total += self.movement_time(movement) * rounds
        return total

    def reps_per_round(self, workout: ParsedWorkout) -> int:
        default = self.config["default_reps"]
        return sum(m.total_reps if m.total_reps is not None else default for m in workout.movements)

    # Coverage and ranges

    def benchmark_coverage(self, workout: ParsedWorkout, context: AthleteBenchmarkContext) -> BenchmarkCoverage:
        coverage = BenchmarkCoverage(total_movements=len(workout.movements))
        for movement in workout.movements:
            if movement.movement is None:
                continue
            data = context.resolve(movement.movement.id)
            if data.percentile is None:
                continue
            coverage.percentiles.append(data.percentile)
            coverage.levels[movement.movement.id] = self.pacing_service.determine_pacing_level(data.percentile)
        return coverage

    def range_width(self, experience: ExperienceLevel, coverage_percent: int) -> float:
        width = self.config["range_width"].get(experience.value, 0.15)
        if coverage_percent < 50:
            width += 0.10
        elif coverage_percent < 80:
            width += 0.05
        return width

    def calculate_time_range(
        self,
        base_seconds: int,
        average_percentile: float,
        experience: ExperienceLevel,
        coverage_percent: int,
    ) -> tuple[int, int]:
        """
        Widen an adjusted base time into a (min, max) range.

        Example:
            >>> TimeEstimateService().calculate_time_range(600, 70, ExperienceLevel.INTERMEDIATE, 100)
            (510, 690)
        """
        adjusted = int(base_seconds * percentile_adjustment_factor(average_percentile))
        width = self.range_width(experience, coverage_percent)
        min_seconds = max(int(adjusted * (1 - width)), 1)
        max_seconds = max(int(adjusted * (1 + width)), min_seconds + 1)
        return min_seconds, max_seconds

    # EMOM

    def check_minute_feasibility(
        self,
        estimated_seconds: int,
        interval_seconds: int = 60,
        minute: int = 1,
        prescribed_work: str = "",
        movement_names: list[str] | None = None,
    ) -> EmomMinute:
        """
        Feasibility of one EMOM minute.

        Example:
            >>> TimeEstimateService().check_minute_feasibility(42).buffer_seconds
            18
        """
        buffer = interval_seconds - estimated_seconds
        if buffer >= self.emom_config["comfortable_buffer_seconds"]:
            recommendation = EMOM_ON_PACE
        elif buffer >= 0:
            recommendation = EMOM_TIGHT
        else:
            recommendation = EMOM_SCALE
        return EmomMinute(
            minute=minute,
            prescribed_work=prescribed_work,
            estimated_completion_seconds=max(estimated_seconds, 0),
            is_feasible=buffer >= 0,
            buffer_seconds=buffer,
            recommendation=recommendation,
            movement_names=movement_names or [],
        )

    def assess_emom(self, minutes: list[EmomMinute]) -> EmomFeasibility:
        all_feasible = all(m.is_feasible for m in minutes)
        average = sum(m.buffer_seconds for m in minutes) / len(minutes) if minutes else 0.0

        if not all_feasible:
            assessment = (
                "Some minutes may be challenging. Consider scaling movements or reps for a sustainable pace."
            )
        elif average >= self.emom_config["comfortable_average_buffer_seconds"]:
            assessment = "This EMOM is feasible with comfortable buffers. Maintain consistent pacing."
        elif average >= self.emom_config["adequate_average_buffer_seconds"]:
            assessment = "This EMOM is feasible with adequate buffers. Stay focused on transitions."
        else:
            assessment = "This EMOM is feasible but tight. Consider pacing conservatively early."

        return EmomFeasibility(
            minutes=minutes,
            average_buffer_seconds=round(average, 1),
            all_feasible=all_feasible,
            assessment=assessment,
        )

    def check_emom_feasibility(self, workout: ParsedWorkout) -> EmomFeasibility:
        """
        Per-minute feasibility table for an EMOM.

        Movements without minute assignments alternate: minute N works
        movement (N - 1) mod count. The table stops at ``max_minutes``.
        """
        movements = workout.movements
        interval = workout.interval_duration_seconds or self.config["default_interval_seconds"]
        if workout.time_cap_seconds:
            total_minutes = workout.time_cap_seconds // 60
        else:
            total_minutes = len(movements)
        max_minutes = self.emom_config["max_minutes"]
        if total_minutes > max_minutes:
            logger.warning("EMOM of %d minutes truncated to %d tabulated minutes", total_minutes, max_minutes)
            total_minutes = max_minutes

        minutes = []
        for minute in range(1, total_minutes + 1):
            if not movements:
                break
            movement = movements[(minute - 1) % len(movements)]
            reps = movement.total_reps if movement.total_reps is not None else self.config["default_reps"]
            minutes.append(
                self.check_minute_feasibility(
                    self.movement_time(movement),
                    interval,
                    minute=minute,
                    prescribed_work=f"{reps} {movement.display_name}",
                    movement_names=[movement.display_name],
                )
            )
        return self.assess_emom(minutes)

    # Rest and summary text

    def calculate_rest_recommendations(
        self,
        workout: ParsedWorkout,
        coverage: BenchmarkCoverage,
    ) -> list[RestRecommendation]:
        fallback = overall_pacing(coverage.percentiles)
        recommendations = []
        for movement in workout.movements:
            movement_id = movement.movement.id if movement.movement else None
            level = coverage.levels.get(movement_id, fallback) if movement_id is not None else fallback
            low, high = self.config["rest_seconds"][level.value]
            recommendations.append(
                RestRecommendation(
                    after_movement=movement.display_name,
                    movement_definition_id=movement_id,
                    suggested_rest_seconds=(low + high) // 2,
                    rest_range=f"{low}-{high} seconds",
                    reasoning=REST_REASONING[level],
                    pacing_level=level,
                )
            )
        return recommendations

    @staticmethod
    def generate_factors_summary(
        experience: ExperienceLevel,
        coverage_percent: int,
        average_percentile: float,
    ) -> str:
        widths = {
            ExperienceLevel.BEGINNER: 20,
            ExperienceLevel.INTERMEDIATE: 15,
            ExperienceLevel.ADVANCED: 10,
        }
        factors = [f"{experience.value} experience (+/- {widths[experience]}% range)"]

        if coverage_percent >= 80:
            factors.append(f"High benchmark coverage ({coverage_percent}%)")
        elif coverage_percent >= 50:
            factors.append(f"Medium benchmark coverage ({coverage_percent}%)")
        else:
            factors.append(f"Low benchmark coverage ({coverage_percent}%) - estimate less reliable")

        average = f"avg {average_percentile:.0f}th percentile"
        if average_percentile >= 80:
            factors.append(f"Strong performer ({average})")
        elif average_percentile >= 60:
            factors.append(f"Above average performer ({average})")
        elif average_percentile >= 40:
            factors.append(f"Average performer ({average})")
        else:
            factors.append(f"Developing athlete ({average})")
        return ". ".join(factors) + "."

    # Estimates

    def estimate(self, workout: ParsedWorkout, context: AthleteBenchmarkContext) -> TimeEstimateResult:
        """
        Estimate a parsed workout for one athlete.

        Args:
            workout: A parsed workout
            context: The athlete's benchmark context

        Returns:
            TimeEstimateResult: a Time range, or a RoundsReps range for AMRAPs
        """
        coverage = self.benchmark_coverage(workout, context)
        experience = context.experience_level
        average = coverage.average_percentile
        rest = self.calculate_rest_recommendations(workout, coverage)
        emom = None
        min_extra = max_extra = None
        estimate_type = EstimateType.TIME

        if workout.workout_type == WorkoutType.AMRAP:
            estimate_type = EstimateType.ROUNDS_REPS
            min_value, min_extra, max_value, max_extra = self._amrap_range(workout, coverage, experience)
            formatted = format_amrap_range(min_value, min_extra, max_value, max_extra)
        elif workout.workout_type == WorkoutType.EMOM:
            emom = self.check_emom_feasibility(workout)
            interval = workout.interval_duration_seconds or self.config["default_interval_seconds"]
            min_value = max_value = workout.time_cap_seconds or len(emom.minutes) * interval
            formatted = format_time(min_value)
            rest = []
        elif workout.workout_type in (WorkoutType.INTERVALS, WorkoutType.TABATA):
            min_value = max_value = self._prescribed_duration(workout)
            formatted = format_time(min_value)
        else:
            base = self.base_workout_time(workout)
            min_value, max_value = self.calculate_time_range(base, average, experience, coverage.percent)
            formatted = format_time_range(min_value, max_value)

        logger.debug(
            "Estimated %s (%s): %s, coverage %d%%",
            workout.name or UNNAMED_WORKOUT,
            workout.workout_type.value,
            formatted,
            coverage.percent,
        )
        return TimeEstimateResult(
            workout_name=workout.name or UNNAMED_WORKOUT,
            workout_type=workout.workout_type,
            estimate_type=estimate_type,
            min_estimate=min_value,
            max_estimate=max_value,
            min_extra_reps=min_extra,
            max_extra_reps=max_extra,
            formatted_range=formatted,
            confidence_level=confidence_from_coverage(coverage.percent),
            factors_summary=self.generate_factors_summary(experience, coverage.percent, average),
            rest_recommendations=rest,
            emom_feasibility=emom,
            benchmark_coverage_count=coverage.covered,
            total_movement_count=coverage.total_movements,
            average_percentile=round(average, 1),
        )

    def _amrap_range(
        self,
        workout: ParsedWorkout,
        coverage: BenchmarkCoverage,
        experience: ExperienceLevel,
    ) -> tuple[int, int, int, int]:
        round_seconds = self.base_workout_time(workout, apply_rounds=False)
        if round_seconds <= 0:
            round_seconds = self.config["default_movement_seconds"]
        cap = workout.time_cap_seconds or self.config["default_amrap_cap_seconds"]
        reps_per_round = self.reps_per_round(workout)

        adjusted = int(round_seconds * percentile_adjustment_factor(coverage.average_percentile))
        width = self.range_width(experience, coverage.percent)
        estimated_rounds = cap / max(adjusted, 1)

        low = estimated_rounds * (1 - width)
        high = estimated_rounds * (1 + width)
        min_rounds, max_rounds = math.floor(low), math.floor(high)
        min_extra = int((low - min_rounds) * reps_per_round)
        max_extra = int((high - max_rounds) * reps_per_round)

        if min_rounds > max_rounds or (min_rounds == max_rounds and min_extra > max_extra):
            min_rounds, max_rounds = max_rounds, min_rounds
            min_extra, max_extra = max_extra, min_extra
        return min_rounds, min_extra, max_rounds, max_extra

    def _prescribed_duration(self, workout: ParsedWorkout) -> int:
        if workout.workout_type == WorkoutType.TABATA:
            return self.config["tabata_seconds_per_movement"] * max(len(workout.movements), 1)
        if workout.interval is not None:
            return workout.interval.total_seconds
        interval = workout.interval_duration_seconds or self.config["default_interval_seconds"]
        return interval * (workout.round_count or 1)
