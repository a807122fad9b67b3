"""Per-movement pacing levels, set breakdowns and workout strategy notes."""
from __future__ import annotations

import logging
import math
from typing import Any

from wodstrat.models.enums import MovementCategory, PacingLevel, WorkoutType
from wodstrat.models.parsing import ParsedMovement, ParsedWorkout
from wodstrat.models.schemas import (
    UNNAMED_WORKOUT,
    MovementPacing,
    PacingDistribution,
    WorkoutPacingResult,
)
from wodstrat.services.benchmark_context import AthleteBenchmarkContext
from wodstrat.services.cardio_pace import build_cardio_pace_target
from wodstrat.services.strategy_config import load_section

logger = logging.getLogger(__name__)

NO_BENCHMARK = "None"

WORKOUT_TYPE_OPENERS = {
    WorkoutType.AMRAP: "For this AMRAP, maintain sustainable intensity across rounds.",
    WorkoutType.FOR_TIME: "For this For Time workout, balance speed with smart pacing to avoid early burnout.",
    WorkoutType.EMOM: "For this EMOM, ensure you complete work with adequate rest each minute.",
    WorkoutType.INTERVALS: "For this interval workout, push hard during work periods and use rest effectively.",
    WorkoutType.ROUNDS: "For this rounds-based workout, aim for consistent round times.",
}
DEFAULT_OPENER = "Pace yourself according to the movements below."


def pacing_reps(movement: ParsedMovement) -> int | None:
    """Reps to pace: the explicit count, else the largest round of the rep scheme."""
    if movement.rep_count is not None:
        return movement.rep_count
    if movement.rep_scheme is not None and movement.rep_scheme.reps:
        return max(movement.rep_scheme.reps)
    return None


def _even_split(total: int, sets: int) -> list[int]:
    breakdown = []
    remaining = total
    for remaining_sets in range(sets, 0, -1):
        size = math.ceil(remaining / remaining_sets)
        breakdown.append(size)
        remaining -= size
    return breakdown


class PacingService:
    """Turns benchmark percentiles into pacing guidance."""

    def __init__(self, config: dict[str, Any] | None = None):
        """
        Initialize pacing service.

        Args:
            config: Optional pre-loaded configuration (defaults to the pacing
                section of strategy.yaml)
        """
        self.config = config or self._load_config()

    def _load_config(self) -> dict[str, Any]:
        return load_section("pacing", self._default_config())

    def _default_config(self) -> dict[str, Any]:
        return {
            "light_below": 40,
            "heavy_above": 60,
            "default_percentile": 50,
            "default_reps": 10,
            "set_breakdown": {
                "heavy": {"unbroken_max": 15, "split_max": 25, "split_ratio": 0.6, "chunk_size": 15},
                "moderate": {"unbroken_max": 6, "split_max": 12, "target_set_size": 10},
                "light": {"unbroken_max": 3, "max_set_size": 7},
                "max_sets": 50,
            },
        }

    def determine_pacing_level(self, percentile: float) -> PacingLevel:
        """
        Map a percentile to a pacing level.

        Below ``light_below`` is Light, above ``heavy_above`` is Heavy and
        both boundaries themselves are Moderate.
        """
        if percentile < self.config["light_below"]:
            return PacingLevel.LIGHT
        if percentile > self.config["heavy_above"]:
            return PacingLevel.HEAVY
        return PacingLevel.MODERATE

    def calculate_set_breakdown(self, total_reps: int, pacing_level: PacingLevel) -> list[int]:
        """
        Split reps into recommended sets.

        Totals that would need more than ``max_sets`` sets are split evenly
        into exactly ``max_sets`` sets.

        Example:
            >>> PacingService().calculate_set_breakdown(21, PacingLevel.HEAVY)
            [13, 8]
        """
        if total_reps <= 0:
            return []
        rules = self.config["set_breakdown"]
        max_sets = rules["max_sets"]

        if pacing_level == PacingLevel.HEAVY:
            heavy = rules["heavy"]
            if total_reps <= heavy["unbroken_max"]:
                return [total_reps]
            if total_reps <= heavy["split_max"]:
                first = math.ceil(total_reps * heavy["split_ratio"])
                return [first, total_reps - first]
            chunk = heavy["chunk_size"]
            if total_reps > chunk * max_sets:
                return _even_split(total_reps, max_sets)
            breakdown = [chunk] * (total_reps // chunk)
            if total_reps % chunk:
                breakdown.append(total_reps % chunk)
            return breakdown

        if pacing_level == PacingLevel.LIGHT:
            light = rules["light"]
            if total_reps <= light["unbroken_max"]:
                return [total_reps]
            return _even_split(total_reps, min(max_sets, math.ceil(total_reps / light["max_set_size"])))

        moderate = rules["moderate"]
        if total_reps <= moderate["unbroken_max"]:
            return [total_reps]
        if total_reps <= moderate["split_max"]:
            return _even_split(total_reps, 2)
        return _even_split(total_reps, min(max_sets, math.ceil(total_reps / moderate["target_set_size"])))

    @staticmethod
    def generate_guidance_text(
        total_reps: int | None,
        pacing_level: PacingLevel,
        set_breakdown: list[int],
        movement_name: str,
    ) -> str:
        if not total_reps or not set_breakdown:
            return f"Complete {movement_name} as prescribed."

        sets = "-".join(str(size) for size in set_breakdown)
        single = len(set_breakdown) == 1
        if pacing_level == PacingLevel.HEAVY:
            if single:
                return f"Go unbroken on {movement_name} ({total_reps} reps). This is a strength - push the pace!"
            return f"Push hard on {movement_name}. Aim for large sets ({sets}) or go unbroken if possible."
        if pacing_level == PacingLevel.LIGHT:
            if single:
                return f"Conservative pace on {movement_name} ({total_reps} reps). Don't burn out here."
            return (
                f"Conservative pace on {movement_name}, break into manageable sets of {sets}. "
                "Protect your energy for other movements."
            )
        if single:
            return f"Controlled pace on {movement_name} ({total_reps} reps). Stay steady."
        return f"Controlled pace on {movement_name}, break into sets of {sets}. Maintain consistent effort."

    @staticmethod
    def generate_strategy_notes(workout_type: WorkoutType, movement_pacing: list[MovementPacing]) -> str:
        """Summarize the pacing distribution and name the limiting movements."""
        if not movement_pacing:
            return "No movements to analyze."

        heavy = [m for m in movement_pacing if m.pacing_level == PacingLevel.HEAVY]
        light = [m for m in movement_pacing if m.pacing_level == PacingLevel.LIGHT]

        notes = [WORKOUT_TYPE_OPENERS.get(workout_type, DEFAULT_OPENER)]
        if len(heavy) == len(movement_pacing):
            notes.append("All movements are relative strengths - push the pace throughout.")
        elif len(light) == len(movement_pacing):
            notes.append("Focus on consistency - break early and often to maintain steady output.")
        elif len(heavy) > len(light):
            notes.append("Leverage your strengths on heavy-paced movements to build time/rep cushion.")
        else:
            notes.append("Manage your limiters carefully - don't let light-paced movements derail your workout.")

        if light:
            notes.append(f"Key limiters to manage: {', '.join(m.movement_name for m in light)}")
        return " ".join(notes)

    def analyze_movement(
        self,
        movement: ParsedMovement,
        context: AthleteBenchmarkContext,
        workout: ParsedWorkout | None = None,
    ) -> MovementPacing:
        """
        Pacing for one movement.

        Without a percentile (no mapping, no recorded value or no population
        table) the movement defaults to Moderate at the 50th percentile.
        """
        movement_id = movement.movement.id if movement.movement else None
        data = context.resolve(movement_id)

        percentile = data.percentile if data.percentile is not None else float(self.config["default_percentile"])
        pacing_level = (
            self.determine_pacing_level(percentile) if data.percentile is not None else PacingLevel.MODERATE
        )
        name = movement.display_name

        is_cardio = movement.movement is not None and movement.movement.category == MovementCategory.CARDIO
        if is_cardio:
            target = build_cardio_pace_target(movement, data, pacing_level, workout)
            guidance = (
                f"Hold {target.display_primary} on {name}."
                if target is not None
                else f"Complete {name} as prescribed."
            )
            sets: list[int] = []
        else:
            target = None
            reps = pacing_reps(movement)
            if reps is None and movement.duration_seconds is None:
                reps = self.config["default_reps"]
            sets = self.calculate_set_breakdown(reps or 0, pacing_level)
            guidance = self.generate_guidance_text(reps, pacing_level, sets, name)

        return MovementPacing(
            movement_definition_id=movement_id,
            movement_name=name,
            pacing_level=pacing_level,
            athlete_percentile=round(percentile, 1),
            guidance_text=guidance,
            recommended_sets=sets,
            benchmark_used=data.benchmark_name or NO_BENCHMARK,
            has_population_data=data.has_population_data,
            has_athlete_benchmark=data.has_athlete_benchmark,
            is_cardio=is_cardio,
            target_pace=target,
        )

    def calculate_workout_pacing(
        self,
        workout: ParsedWorkout,
        context: AthleteBenchmarkContext,
    ) -> WorkoutPacingResult:
        """
        Pacing for every movement of a parsed workout.

        Args:
            workout: A parsed workout
            context: The athlete's benchmark context

        Returns:
            WorkoutPacingResult with per-movement guidance and strategy notes
        """
        movement_pacing = [self.analyze_movement(m, context, workout) for m in workout.movements]
        distribution = PacingDistribution(
            heavy_count=sum(1 for m in movement_pacing if m.pacing_level == PacingLevel.HEAVY),
            moderate_count=sum(1 for m in movement_pacing if m.pacing_level == PacingLevel.MODERATE),
            light_count=sum(1 for m in movement_pacing if m.pacing_level == PacingLevel.LIGHT),
            total_movements=len(movement_pacing),
            incomplete_data_count=sum(
                1 for m in movement_pacing if not (m.has_population_data and m.has_athlete_benchmark)
            ),
        )
        logger.debug(
            "Pacing for %s: %d heavy, %d moderate, %d light",
            workout.name or UNNAMED_WORKOUT,
            distribution.heavy_count,
            distribution.moderate_count,
            distribution.light_count,
        )
        return WorkoutPacingResult(
            workout_name=workout.name or UNNAMED_WORKOUT,
            workout_type=workout.workout_type,
            movement_pacing=movement_pacing,
            overall_strategy_notes=self.generate_strategy_notes(workout.workout_type, movement_pacing),
            distribution=distribution,
        )
