"""Cardio pace targets derived from running and rowing benchmarks."""
from __future__ import annotations

import logging
from types import MappingProxyType

from wodstrat.models.enums import CardioType, PacingLevel, WorkoutType
from wodstrat.models.parsing import ParsedMovement, ParsedWorkout
from wodstrat.models.schemas import CardioPaceTarget
from wodstrat.services.benchmark_context import MovementBenchmarkData
from wodstrat.services.formatting import format_pace

logger = logging.getLogger(__name__)

SECONDS_PER_MILE_FACTOR = 1.60934
SPRINT_MAX_DISTANCE_M = 400
SPRINT_MAX_CAP_SECONDS = 600
LONG_WORKOUT_CAP_SECONDS = 1200

CONTEXT_FACTOR_NO_WORKOUT = 1.05
CONTEXT_FACTOR_SPRINT = 1.00
CONTEXT_FACTOR_LONG_AMRAP = 1.20
CONTEXT_FACTOR_LONG_WORKOUT = 1.15
CONTEXT_FACTOR_MEDIUM = 1.07

PACING_FACTORS = MappingProxyType({
    PacingLevel.HEAVY: 0.97,
    PacingLevel.MODERATE: 1.00,
    PacingLevel.LIGHT: 1.05,
})

BENCHMARK_DISTANCES_M = MappingProxyType({
    "5k-run": 5000.0,
    "1-mile-run": 1609.34,
})

ROWING_SPLIT_DIVISORS = MappingProxyType({
    "500m-row": 1.0,
    "2k-row": 4.0,
    "1k-row-pace": 1.0,
})

RUNNING_MOVEMENTS = frozenset({"run", "shuttle_run"})
ROWING_MOVEMENTS = frozenset({"row"})


def calculate_running_pace(time_seconds: float, distance_meters: float) -> tuple[float, float]:
    """
    Return (seconds per km, seconds per mile) for a timed run.

    Raises:
        ValueError: If the distance is not positive
    """
    if distance_meters <= 0:
        raise ValueError("distance_meters must be positive")
    per_km = time_seconds / (distance_meters / 1000)
    return per_km, per_km * SECONDS_PER_MILE_FACTOR


def calculate_rowing_pace(value: float, benchmark_slug: str) -> float:
    """Seconds per 500 m from a rowing benchmark; unknown slugs are taken as a split already."""
    return value / ROWING_SPLIT_DIVISORS.get(benchmark_slug, 1.0)


def get_benchmark_distance_meters(benchmark_slug: str) -> float | None:
    return BENCHMARK_DISTANCES_M.get(benchmark_slug)


def determine_cardio_type(canonical_name: str) -> CardioType:
    if canonical_name in RUNNING_MOVEMENTS:
        return CardioType.RUNNING
    if canonical_name in ROWING_MOVEMENTS:
        return CardioType.ROWING
    return CardioType.OTHER


def context_factor(workout: ParsedWorkout | None, movement: ParsedMovement | None) -> float:
    """Effort factor from the workout's length and the movement's distance."""
    if workout is None:
        return CONTEXT_FACTOR_NO_WORKOUT

    cap = workout.time_cap_seconds
    short_distance = (
        movement is not None
        and movement.distance is not None
        and movement.distance.to_meters() <= SPRINT_MAX_DISTANCE_M
    )
    short_workout = cap is not None and cap <= SPRINT_MAX_CAP_SECONDS

    if short_distance and short_workout:
        return CONTEXT_FACTOR_SPRINT
    if workout.workout_type == WorkoutType.AMRAP and cap is not None and cap >= LONG_WORKOUT_CAP_SECONDS:
        return CONTEXT_FACTOR_LONG_AMRAP
    if cap is not None and cap >= LONG_WORKOUT_CAP_SECONDS:
        return CONTEXT_FACTOR_LONG_WORKOUT
    return CONTEXT_FACTOR_MEDIUM


def apply_context_adjustment(
    raw_pace_seconds: float,
    pacing_level: PacingLevel,
    workout: ParsedWorkout | None = None,
    movement: ParsedMovement | None = None,
) -> float:
    """
    Slow a benchmark pace down to what is sustainable inside a workout.

    Example:
        >>> round(apply_context_adjustment(100, PacingLevel.HEAVY), 2)
        101.85
    """
    return raw_pace_seconds * context_factor(workout, movement) * PACING_FACTORS.get(pacing_level, 1.0)


def _median_population_value(data: MovementBenchmarkData) -> float | None:
    if data.population is None:
        return None
    return (data.population.percentile_40 + data.population.percentile_60) / 2


def build_cardio_pace_target(
    movement: ParsedMovement,
    data: MovementBenchmarkData,
    pacing_level: PacingLevel,
    workout: ParsedWorkout | None = None,
) -> CardioPaceTarget | None:
    """
    Build a pace target for a running or rowing movement.

    The athlete's own benchmark is used when recorded; otherwise the
    population median stands in. Returns None for other cardio (bike, ski),
    when no usable benchmark exists, or when the benchmark slug carries no
    known distance.
    """
    if movement.movement is None or data.benchmark is None:
        return None
    cardio_type = determine_cardio_type(movement.movement.canonical_name)
    if cardio_type == CardioType.OTHER:
        return None

    derived = data.athlete_value is not None
    value = data.athlete_value if derived else _median_population_value(data)
    if value is None or value <= 0:
        return None
    slug = data.benchmark.slug

    if cardio_type == CardioType.RUNNING:
        distance = get_benchmark_distance_meters(slug)
        if distance is None:
            logger.debug("No distance known for running benchmark '%s'", slug)
            return None
        per_km, _ = calculate_running_pace(value, distance)
        adjusted = apply_context_adjustment(per_km, pacing_level, workout, movement)
        return CardioPaceTarget(
            display_primary=format_pace(adjusted, "km"),
            display_secondary=format_pace(adjusted * SECONDS_PER_MILE_FACTOR, "mi"),
            value_per_unit=round(adjusted, 1),
            pace_unit="km",
            is_derived_from_benchmark=derived,
        )

    split = calculate_rowing_pace(value, slug)
    adjusted = apply_context_adjustment(split, pacing_level, workout, movement)
    return CardioPaceTarget(
        display_primary=format_pace(adjusted, "500m"),
        value_per_unit=round(adjusted, 1),
        pace_unit="500m",
        is_derived_from_benchmark=derived,
    )
