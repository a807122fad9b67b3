"""Tests for display formatting helpers."""

import pytest

from wodstrat.models.enums import BenchmarkMetricType
from wodstrat.services.formatting import (
    format_amrap_range,
    format_benchmark_value,
    format_pace,
    format_time,
    format_time_range,
    format_volume_load,
    format_weight,
    parse_time,
)


class TestTimeFormatting:
    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "0:00"), (59, "0:59"), (195, "3:15"), (3599, "59:59"), (3725, "1:02:05"), (-5, "0:00")],
    )
    def test_format_time(self, seconds, expected):
        assert format_time(seconds) == expected

    @pytest.mark.parametrize("text, expected", [("45", 45), ("3:15", 195), ("1:02:05", 3725)])
    def test_parse_time(self, text, expected):
        assert parse_time(text) == expected

    @pytest.mark.parametrize("text", ["", "  ", "3:xx", "1:2:3:4", "-3:00"])
    def test_parse_time_rejects_non_clock_text(self, text):
        assert parse_time(text) is None

    def test_round_trip(self):
        for seconds in (7, 195, 1260, 4000):
            assert parse_time(format_time(seconds)) == seconds

    def test_time_range(self):
        assert format_time_range(510, 690) == "8:30 - 11:30"


class TestValueFormatting:
    def test_weight(self):
        assert format_weight(100) == "100 kg"
        assert format_weight(42.5, "lb") == "42.5 lb"
        assert format_weight(60.0, None) == "60 kg"

    def test_pace(self):
        assert format_pace(300, "km") == "5:00/km"
        assert format_pace(105) == "1:45"

    def test_benchmark_values(self):
        assert format_benchmark_value(185, BenchmarkMetricType.TIME) == "3:05"
        assert format_benchmark_value(20, BenchmarkMetricType.REPS) == "20 reps"
        assert format_benchmark_value(120, BenchmarkMetricType.WEIGHT, "kg") == "120 kg"
        assert format_benchmark_value(1.25, "Other") == "1.25"

    def test_amrap_range(self):
        assert format_amrap_range(5, 3, 7, 0) == "5+3 to 7 rounds"
        assert format_amrap_range(4, 0, 6, 12) == "4 to 6+12 rounds"

    def test_volume_load(self):
        assert format_volume_load(12345.6) == "12,346 kg"
