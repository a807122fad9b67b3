"""Tests for percentile interpolation against population brackets."""

import pytest

from wodstrat.models.enums import BenchmarkMetricType
from wodstrat.services.percentile import (
    calculate_benchmark_percentile,
    calculate_percentile,
    calculate_time_percentile,
    calculate_weight_percentile,
)

SQUAT = [(20, 70), (40, 90), (60, 110), (80, 135), (95, 170)]
FRAN = [(20, 600), (40, 420), (60, 300), (80, 210), (95, 150)]


class TestCalculatePercentile:
    """Test bracket interpolation and extrapolation."""

    def test_interpolates_between_brackets(self):
        assert calculate_percentile(100, SQUAT) == pytest.approx(50.0)

    def test_bracket_value_is_exact(self):
        assert calculate_percentile(135, SQUAT) == pytest.approx(80.0)

    def test_extrapolates_above_best(self):
        percentile = calculate_percentile(190, SQUAT)
        assert percentile == pytest.approx(97.857, abs=0.01)
        assert 95 < percentile <= 100

    def test_capped_at_100(self):
        assert calculate_percentile(1_000, SQUAT) == 100.0

    def test_scales_below_worst(self):
        assert calculate_percentile(35, SQUAT) == pytest.approx(10.0)
        assert calculate_percentile(0, SQUAT) == 0.0

    def test_lower_is_better(self):
        assert calculate_percentile(360, FRAN, lower_is_better=True) == pytest.approx(50.0)
        assert calculate_percentile(1200, FRAN, lower_is_better=True) == pytest.approx(10.0)
        assert calculate_percentile(120, FRAN, lower_is_better=True) == pytest.approx(97.5)

    def test_monotonic_when_higher_is_better(self):
        values = [10, 50, 70, 85, 100, 130, 165, 180, 250]
        results = [calculate_percentile(v, SQUAT) for v in values]
        assert results == sorted(results)

    def test_monotonic_when_lower_is_better(self):
        values = [900, 600, 500, 400, 250, 180, 140, 60]
        results = [calculate_percentile(v, FRAN, lower_is_better=True) for v in values]
        assert results == sorted(results)

    def test_requires_two_brackets(self):
        with pytest.raises(ValueError):
            calculate_percentile(100, [(50, 100)])

    def test_value_at_non_positive_first_bracket_is_zero(self):
        brackets = [(20, 0), (40, 90), (60, 110), (80, 135), (95, 170)]
        assert calculate_percentile(0, brackets) == 0.0
        assert calculate_percentile(-5, brackets) == 0.0

    def test_value_at_worst_bracket(self):
        assert calculate_percentile(70, SQUAT) == pytest.approx(20.0)
        assert calculate_percentile(600, FRAN, lower_is_better=True) == pytest.approx(20.0)

    def test_tied_brackets_lower_is_better_take_better_percentile(self):
        brackets = [(20, 600), (40, 420), (60, 420), (80, 300), (95, 240)]
        assert calculate_percentile(420, brackets, lower_is_better=True) == pytest.approx(60.0)

    def test_tied_brackets_higher_is_better_take_first_reached(self):
        brackets = [(20, 70), (40, 90), (60, 90), (80, 135), (95, 170)]
        assert calculate_percentile(90, brackets) == pytest.approx(40.0)

    def test_all_brackets_equal(self):
        brackets = [(20, 100), (40, 100), (60, 100), (80, 100), (95, 100)]
        assert calculate_percentile(100, brackets) == pytest.approx(95.0)
        assert calculate_percentile(100, brackets, lower_is_better=True) == pytest.approx(95.0)


class TestPopulationPercentile:
    """Test percentiles against the packaged population tables."""

    def test_weight_benchmark(self, make_context):
        population = make_context().population_for(1)
        assert calculate_weight_percentile(110, population) == pytest.approx(60.0)

    def test_time_benchmark(self, make_context):
        population = make_context().population_for(13)
        assert calculate_time_percentile(300, population) == pytest.approx(60.0)
        assert calculate_benchmark_percentile(300, population, BenchmarkMetricType.TIME) == pytest.approx(60.0)
