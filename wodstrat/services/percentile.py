"""Converts raw benchmark values into population percentiles."""
from __future__ import annotations

import logging
from typing import Sequence

from wodstrat.models.enums import BenchmarkMetricType
from wodstrat.models.reference import PopulationBenchmarkPercentile

logger = logging.getLogger(__name__)

Bracket = tuple[float, float]

MIN_PERCENTILE = 0.0
MAX_PERCENTILE = 100.0


def _clamp(percentile: float) -> float:
    return max(MIN_PERCENTILE, min(MAX_PERCENTILE, percentile))


def calculate_percentile(
    value: float,
    brackets: Sequence[Bracket],
    lower_is_better: bool = False,
) -> float:
    """
    Interpolate a value's percentile from ordered (percentile, value) brackets.

    Between brackets the percentile is linear. Beyond the best bracket it is
    extrapolated with the slope of the two best brackets, up to 100. Below the
    worst bracket it scales proportionally toward 0.

    Args:
        value: The athlete's raw value
        brackets: (percentile, value) pairs ordered by increasing percentile
        lower_is_better: True for times and paces

    Returns:
        Percentile in [0, 100]

    Raises:
        ValueError: If fewer than two brackets are given

    Example:
        >>> brackets = [(20, 70), (40, 90), (60, 110), (80, 135), (95, 170)]
        >>> round(calculate_percentile(190, brackets), 2)
        97.86
    """
    if len(brackets) < 2:
        raise ValueError("At least two percentile brackets are required")

    def better(a: float, b: float) -> bool:
        return a < b if lower_is_better else a > b

    first_pct, first_value = brackets[0]
    best_pct, best_value = brackets[-1]
    _, previous_value = brackets[-2]

    # at or above the best bracket
    if not better(best_value, value):
        span = previous_value - best_value if lower_is_better else best_value - previous_value
        if span <= 0:
            return _clamp(best_pct)
        excess = best_value - value if lower_is_better else value - best_value
        return _clamp(best_pct + (MAX_PERCENTILE - best_pct) * excess / span)

    # at or below the worst bracket
    if not better(value, first_value):
        if lower_is_better:
            if value <= 0:
                return _clamp(first_pct)
            return _clamp(first_pct * first_value / value)
        if first_value <= 0:
            return MIN_PERCENTILE
        return _clamp(first_pct * value / first_value)

    # walk from the worst bracket for higher-is-better, from the best for lower-is-better
    pairs = list(zip(brackets, brackets[1:]))
    if lower_is_better:
        pairs.reverse()
    for (lo_pct, lo_value), (hi_pct, hi_value) in pairs:
        if min(lo_value, hi_value) <= value <= max(lo_value, hi_value):
            if hi_value == lo_value:
                return _clamp(hi_pct if lower_is_better else lo_pct)
            fraction = (value - lo_value) / (hi_value - lo_value)
            return _clamp(lo_pct + (hi_pct - lo_pct) * fraction)

    logger.debug("Value %s fell outside non-monotonic brackets %s", value, brackets)
    return _clamp(best_pct)


def calculate_benchmark_percentile(
    value: float,
    population: PopulationBenchmarkPercentile,
    metric_type: BenchmarkMetricType,
) -> float:
    """Percentile of a recorded value against a population table."""
    return calculate_percentile(value, population.brackets(), metric_type.lower_is_better)


def calculate_weight_percentile(value: float, population: PopulationBenchmarkPercentile) -> float:
    return calculate_benchmark_percentile(value, population, BenchmarkMetricType.WEIGHT)


def calculate_time_percentile(seconds: float, population: PopulationBenchmarkPercentile) -> float:
    return calculate_benchmark_percentile(seconds, population, BenchmarkMetricType.TIME)
