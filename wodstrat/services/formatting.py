"""Display formatting for times, loads, paces and benchmark values."""
from __future__ import annotations

from wodstrat.models.enums import BenchmarkMetricType


def _trim_decimals(value: float, places: int) -> str:
    text = f"{value:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_time(seconds: float) -> str:
    """
    Format a duration as ``M:SS``, or ``H:MM:SS`` from one hour up.

    Example:
        >>> format_time(195)
        '3:15'
        >>> format_time(3725)
        '1:02:05'
    """
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_time(text: str) -> int | None:
    """
    Parse ``SS``, ``M:SS`` or ``H:MM:SS`` into seconds.

    Returns None when the text is not a clock value.
    """
    if not text or not text.strip():
        return None
    parts = text.strip().split(":")
    if len(parts) > 3 or not all(part.isdigit() for part in parts):
        return None
    total = 0
    for part in parts:
        total = total * 60 + int(part)
    return total


def format_reps(value: float) -> str:
    return f"{round(value)} reps"


def format_weight(value: float, unit: str | None = "kg") -> str:
    """Format a load, dropping the decimal point for whole values."""
    number = str(int(value)) if value == int(value) else _trim_decimals(value, 1)
    return f"{number} {unit or 'kg'}"


def format_pace(seconds_per_unit: float, unit: str | None = None) -> str:
    """
    Format a pace as ``M:SS/unit``.

    Example:
        >>> format_pace(300, "km")
        '5:00/km'
    """
    clock = format_time(seconds_per_unit)
    return f"{clock}/{unit}" if unit else clock


def format_benchmark_value(value: float, metric_type: BenchmarkMetricType | str, unit: str | None = None) -> str:
    """Format a recorded benchmark value according to its metric type."""
    if metric_type == BenchmarkMetricType.TIME:
        return format_time(value)
    if metric_type == BenchmarkMetricType.REPS:
        return format_reps(value)
    if metric_type == BenchmarkMetricType.WEIGHT:
        return format_weight(value, unit)
    if metric_type == BenchmarkMetricType.PACE:
        return format_pace(value, unit)
    return _trim_decimals(value, 2)


def format_time_range(min_seconds: int, max_seconds: int) -> str:
    return f"{format_time(min_seconds)} - {format_time(max_seconds)}"


def format_amrap_range(min_rounds: int, min_reps: int, max_rounds: int, max_reps: int) -> str:
    """
    Format an AMRAP score range.

    Example:
        >>> format_amrap_range(5, 3, 7, 0)
        '5+3 to 7 rounds'
    """
    low = f"{min_rounds}+{min_reps}" if min_reps > 0 else f"{min_rounds}"
    high = f"{max_rounds}+{max_reps}" if max_reps > 0 else f"{max_rounds}"
    return f"{low} to {high} rounds"


def format_volume_load(value: float, unit: str = "kg") -> str:
    return f"{value:,.0f} {unit}"
