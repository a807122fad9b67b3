"""Post-parse consistency checks, confidence scoring and workout description."""
from __future__ import annotations

import logging

from wodstrat.models.enums import ConfidenceLevel, IssueCode, LoadUnit, WorkoutType
from wodstrat.models.parsing import ConfidenceBreakdown, ParsedWorkout, ParsingIssue
from wodstrat.parsing import errors

logger = logging.getLogger(__name__)

MAX_REASONABLE_REPS = 1000
MAX_REASONABLE_LOAD_KG = 500
MAX_REASONABLE_DISTANCE_M = 50_000
MAX_REASONABLE_CALORIES = 1000
MAX_REASONABLE_TIME_CAP_SECONDS = 4 * 3600

TYPE_WEIGHT = 0.2
TIME_DOMAIN_WEIGHT = 0.15
MOVEMENT_WEIGHT = 0.5
IDENTIFICATION_WEIGHT = 0.15

WARNING_PENALTY = 5
MAX_WARNING_PENALTY = 20
LINE_ERROR_PENALTY = 10
MAX_LINE_ERROR_PENALTY = 30
WORKOUT_ERROR_BASE = 40
WORKOUT_ERROR_PENALTY = 10

_TYPE_LABELS = {
    WorkoutType.FOR_TIME: "FOR TIME",
}


def check_consistency(workout: ParsedWorkout) -> list[ParsingIssue]:
    """
    Cross-line checks over the parsed movements.

    Flags the same resolved movement on consecutive lines (Info), loads that
    mix kilograms and pounds, and implausibly large values (Warnings).
    """
    issues: list[ParsingIssue] = []

    previous = None
    for movement in workout.movements:
        if (
            previous is not None
            and movement.movement is not None
            and previous.movement is not None
            and movement.movement.id == previous.movement.id
        ):
            issues.append(
                errors.info(
                    IssueCode.DUPLICATE_MOVEMENT,
                    movement.display_name,
                    line_number=movement.line_number,
                    context=movement.original_text,
                )
            )
        previous = movement

    units = {
        movement.load.unit
        for movement in workout.movements
        if movement.load is not None and movement.load.unit in (LoadUnit.KG, LoadUnit.LB)
    }
    if len(units) > 1:
        issues.append(errors.warning(IssueCode.INCONSISTENT_UNITS, "kg and lb mixed", context="kg/lb"))

    for movement in workout.movements:
        out_of_range = []
        if movement.rep_count is not None and movement.rep_count > MAX_REASONABLE_REPS:
            out_of_range.append(f"{movement.rep_count} reps")
        if movement.load is not None and movement.load.to_kg() > MAX_REASONABLE_LOAD_KG:
            out_of_range.append(str(movement.load))
        if movement.distance is not None and movement.distance.to_meters() > MAX_REASONABLE_DISTANCE_M:
            out_of_range.append(str(movement.distance))
        if movement.calories is not None and movement.calories > MAX_REASONABLE_CALORIES:
            out_of_range.append(f"{movement.calories} cal")
        if out_of_range:
            issues.append(
                errors.warning(
                    IssueCode.VALUE_OUT_OF_RANGE,
                    ", ".join(out_of_range),
                    line_number=movement.line_number,
                    context=movement.original_text,
                )
            )

    if workout.time_cap_seconds is not None and workout.time_cap_seconds > MAX_REASONABLE_TIME_CAP_SECONDS:
        value = f"{workout.time_cap_seconds // 60} min"
        issues.append(errors.warning(IssueCode.VALUE_OUT_OF_RANGE, value, context=f"time cap {value}"))

    return issues


def build_breakdown(
    workout: ParsedWorkout,
    type_confidence: int,
    time_domain_confidence: int,
    total_movement_lines: int,
) -> ConfidenceBreakdown:
    movements = workout.movements
    average = sum(m.confidence for m in movements) / len(movements) if movements else 0
    return ConfidenceBreakdown(
        workout_type_confidence=type_confidence,
        time_domain_confidence=time_domain_confidence,
        movement_identification_confidence=round(average),
        movements_identified=sum(1 for m in movements if m.is_resolved),
        total_movement_lines=max(total_movement_lines, len(movements)),
        movements_with_complete_data=sum(1 for m in movements if m.is_resolved and m.has_quantity),
    )


def calculate_confidence(
    breakdown: ConfidenceBreakdown,
    warning_count: int,
    line_error_count: int,
    workout_error_count: int,
) -> int:
    """
    Combine the sub-scores into one 0-100 confidence value.

    Blocking workout-level errors override everything else with
    ``max(0, 40 - 10 * errors)``.

    Example:
        >>> breakdown = ConfidenceBreakdown(
        ...     workout_type_confidence=80, time_domain_confidence=100,
        ...     movement_identification_confidence=100,
        ...     movements_identified=2, total_movement_lines=2)
        >>> calculate_confidence(breakdown, 0, 0, 0)
        96
    """
    if workout_error_count > 0:
        return max(0, WORKOUT_ERROR_BASE - WORKOUT_ERROR_PENALTY * workout_error_count)

    score = (
        breakdown.workout_type_confidence * TYPE_WEIGHT
        + breakdown.time_domain_confidence * TIME_DOMAIN_WEIGHT
        + breakdown.movement_identification_confidence * MOVEMENT_WEIGHT
        + breakdown.identification_rate * IDENTIFICATION_WEIGHT
    )
    score -= min(MAX_WARNING_PENALTY, WARNING_PENALTY * warning_count)
    score -= min(MAX_LINE_ERROR_PENALTY, LINE_ERROR_PENALTY * line_error_count)
    return int(max(0, min(100, round(score))))


def confidence_level(score: int) -> ConfidenceLevel:
    if score >= 100:
        return ConfidenceLevel.PERFECT
    if score >= 80:
        return ConfidenceLevel.HIGH
    if score >= 60:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def describe_workout(workout: ParsedWorkout) -> str:
    """Return a one-line summary such as ``"AMRAP - 20 min - 3 movement(s)"``."""
    parts = [_TYPE_LABELS.get(workout.workout_type, workout.workout_type.value.upper())]
    if workout.time_cap_seconds:
        parts.append(f"{workout.time_cap_seconds // 60} min")
    if workout.round_count:
        parts.append(f"{workout.round_count} rounds")
    parts.append(f"{len(workout.movements)} movement(s)")
    return " - ".join(parts)
