"""Volume load (weight x reps x rounds) and load classification per movement."""
from __future__ import annotations

import logging
from typing import Any

from wodstrat.models.enums import BenchmarkMetricType, ExperienceLevel, LoadClassification
from wodstrat.models.parsing import ParsedMovement, ParsedWorkout
from wodstrat.models.schemas import (
    UNNAMED_WORKOUT,
    MovementVolumeLoad,
    VolumeLoadDistribution,
    WorkoutVolumeLoadResult,
)
from wodstrat.services.benchmark_context import AthleteBenchmarkContext
from wodstrat.services.formatting import format_volume_load
from wodstrat.services.strategy_config import load_section

logger = logging.getLogger(__name__)

WEIGHT_UNIT = "kg"
NO_BENCHMARK = "None"


def movement_rounds(movement: ParsedMovement, workout: ParsedWorkout) -> int:
    """Rounds to multiply by; a propagated rep scheme already covers every round."""
    if movement.rep_count is None and movement.rep_scheme is not None:
        return 1
    return workout.round_count or 1


class VolumeLoadService:
    """Classifies each weighted movement against the athlete's 1RM."""

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = config or self._load_config()

    def _load_config(self) -> dict[str, Any]:
        return load_section("volume_load", self._default_config())

    def _default_config(self) -> dict[str, Any]:
        return {
            "high_percent_of_1rm": 70,
            "moderate_percent_of_1rm": 50,
            "experience_offsets": {"Beginner": -5, "Intermediate": 0, "Advanced": 5},
            "scaling": {"below_60th_percentile": 0.8, "below_80th_percentile": 0.9},
        }

    @staticmethod
    def calculate_volume_load(weight: float, reps: int, rounds: int) -> float:
        """Weight x reps x rounds, or 0 when any factor is not positive."""
        if weight <= 0 or reps <= 0 or rounds <= 0:
            return 0.0
        return weight * reps * rounds

    def classify_load(
        self,
        workout_weight: float,
        athlete_1rm: float,
        experience: ExperienceLevel = ExperienceLevel.INTERMEDIATE,
    ) -> LoadClassification:
        """
        Classify a load by its percentage of the athlete's 1RM.

        Beginners cross each threshold 5 points earlier and advanced athletes
        5 points later. A missing or zero 1RM classifies as Moderate.

        Example:
            >>> VolumeLoadService().classify_load(43, 60)
            <LoadClassification.HIGH: 'High'>
        """
        if athlete_1rm <= 0:
            return LoadClassification.MODERATE

        offset = self.config["experience_offsets"].get(experience.value, 0)
        percent = workout_weight / athlete_1rm * 100
        if percent >= self.config["high_percent_of_1rm"] + offset:
            return LoadClassification.HIGH
        if percent >= self.config["moderate_percent_of_1rm"] + offset:
            return LoadClassification.MODERATE
        return LoadClassification.LOW

    def scale_factor(self, percentile: float | None) -> float:
        scaling = self.config["scaling"]
        if percentile is not None and percentile < 60:
            return scaling["below_60th_percentile"]
        if percentile is None or percentile < 80:
            return scaling["below_80th_percentile"]
        return 1.0

    def calculate_recommended_weight(
        self,
        rx_weight: float,
        percentile: float | None,
        classification: LoadClassification,
    ) -> float | None:
        """
        Recommended working weight for a High load.

        80% of RX below the 60th percentile, 90% below the 80th (or when the
        percentile is unknown), RX otherwise. Non-High loads get no
        recommendation.
        """
        if classification != LoadClassification.HIGH or rx_weight <= 0:
            return None
        return round(rx_weight * self.scale_factor(percentile), 1)

    def generate_tip(
        self,
        classification: LoadClassification,
        percentile: float | None,
        rx_weight: float,
        movement_name: str,
    ) -> str:
        if percentile is None:
            return f"Record your benchmark to get personalized {movement_name} recommendations."

        if classification == LoadClassification.HIGH:
            factor = self.scale_factor(percentile)
            if factor < 1.0:
                return (
                    f"Consider scaling {movement_name} to {rx_weight * factor:.0f} kg "
                    f"({factor * 100:.0f}% of RX) to maintain movement quality and intensity "
                    "throughout the workout."
                )
            return (
                f"This is a heavy load for {movement_name}, but you're above the 80th percentile. "
                "Go RX but manage your rest strategically."
            )
        if classification == LoadClassification.MODERATE:
            return (
                f"This {movement_name} weight is moderate relative to your strength. "
                "Focus on consistent pacing and efficient movement."
            )
        if classification == LoadClassification.LOW:
            return (
                f"This is a light load for {movement_name}. "
                "You can push the pace here and aim for larger unbroken sets."
            )
        return f"Maintain good form on {movement_name} throughout the workout."

    def analyze_movement(
        self,
        movement: ParsedMovement,
        workout: ParsedWorkout,
        context: AthleteBenchmarkContext,
    ) -> MovementVolumeLoad:
        """Volume load, classification, tip and recommended weight for one movement."""
        name = movement.display_name
        movement_id = movement.movement.id if movement.movement else None
        weight = round(movement.load.to_kg(), 1) if movement.load else 0.0
        reps = movement.total_reps or 0
        rounds = movement_rounds(movement, workout)
        volume = self.calculate_volume_load(weight, reps, rounds)

        result = MovementVolumeLoad(
            movement_definition_id=movement_id,
            movement_name=name,
            weight=weight,
            weight_unit=WEIGHT_UNIT,
            reps=reps,
            rounds=rounds,
            volume_load=volume,
            volume_load_formatted=format_volume_load(volume, WEIGHT_UNIT),
            load_classification=LoadClassification.NOT_APPLICABLE,
            benchmark_used=NO_BENCHMARK,
        )

        is_bodyweight = movement.movement is not None and movement.movement.is_bodyweight
        if is_bodyweight or weight <= 0:
            result.load_classification = LoadClassification.BODYWEIGHT
            result.tip = (
                f"Focus on movement efficiency and consistent rep cadence for {name}."
                if is_bodyweight
                else f"No load specified for {name}. Check workout prescription."
            )
            return result

        data = context.resolve(movement_id)
        if data.mapping is None or data.benchmark is None:
            result.tip = (
                f"No benchmark mapping found for {name}. Record relevant benchmarks for personalized guidance."
            )
            return result

        result.benchmark_used = data.benchmark.name
        if data.athlete_value is None:
            result.tip = f"Record your {data.benchmark.name} to get personalized {name} recommendations."
            return result

        # Only weight benchmarks give a usable 1RM; other mappings classify as Moderate.
        one_rep_max = data.athlete_value if data.benchmark.metric_type == BenchmarkMetricType.WEIGHT else 0.0
        classification = self.classify_load(weight, one_rep_max, context.experience_level)
        percentile = round(data.percentile, 1) if data.percentile is not None else None

        result.load_classification = classification
        result.athlete_benchmark_percentile = percentile
        result.has_sufficient_data = True
        result.tip = self.generate_tip(classification, percentile, weight, name)

        recommended = self.calculate_recommended_weight(weight, percentile, classification)
        if recommended is not None:
            result.recommended_weight = recommended
            result.recommended_weight_formatted = (
                f"{recommended:.0f} {WEIGHT_UNIT} ({recommended / weight * 100:.0f}% of RX)"
            )
        return result

    @staticmethod
    def generate_overall_assessment(volumes: list[MovementVolumeLoad], total_volume: float) -> str:
        weighted = [
            v
            for v in volumes
            if v.load_classification not in (LoadClassification.BODYWEIGHT, LoadClassification.NOT_APPLICABLE)
        ]
        if not weighted:
            return "This workout has no weighted movements. Focus on movement quality and pacing."

        high = sum(1 for v in weighted if v.load_classification == LoadClassification.HIGH)
        low = sum(1 for v in weighted if v.load_classification == LoadClassification.LOW)
        half = len(weighted) // 2
        formatted = f"{total_volume:,.0f} kg"

        if high > half:
            return (
                f"High volume workout with {formatted} total. Consider scaling weights to maintain "
                "intensity throughout. Multiple movements are at high load relative to your benchmarks."
            )
        if low > half:
            return (
                f"Moderate volume workout with {formatted} total. Weights are manageable relative to "
                "your strength. Push the pace on weighted movements."
            )
        return (
            f"Balanced volume workout with {formatted} total. Mix of challenging and manageable loads. "
            "Pace yourself on high-load movements."
        )

    def calculate_workout_volume_load(
        self,
        workout: ParsedWorkout,
        context: AthleteBenchmarkContext,
    ) -> WorkoutVolumeLoadResult:
        """
        Volume load for every movement of a parsed workout.

        Args:
            workout: A parsed workout
            context: The athlete's benchmark context

        Returns:
            WorkoutVolumeLoadResult with per-movement classification and totals
        """
        volumes = [self.analyze_movement(m, workout, context) for m in workout.movements]
        total = sum(v.volume_load for v in volumes)

        def count(classification: LoadClassification) -> int:
            return sum(1 for v in volumes if v.load_classification == classification)

        distribution = VolumeLoadDistribution(
            high_count=count(LoadClassification.HIGH),
            moderate_count=count(LoadClassification.MODERATE),
            low_count=count(LoadClassification.LOW),
            bodyweight_count=count(LoadClassification.BODYWEIGHT),
            total_movements=len(volumes),
            insufficient_data_count=sum(
                1
                for v in volumes
                if not v.has_sufficient_data and v.load_classification != LoadClassification.BODYWEIGHT
            ),
        )
        logger.debug("Volume load for %s: %.0f kg", workout.name or UNNAMED_WORKOUT, total)
        return WorkoutVolumeLoadResult(
            workout_name=workout.name or UNNAMED_WORKOUT,
            workout_type=workout.workout_type,
            movement_volumes=volumes,
            total_volume_load=total,
            total_volume_load_formatted=format_volume_load(total, WEIGHT_UNIT),
            overall_assessment=self.generate_overall_assessment(volumes, total),
            distribution=distribution,
        )
