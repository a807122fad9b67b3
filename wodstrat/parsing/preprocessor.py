"""Normalizes workout text and splits it into header and movement lines."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable

from wodstrat.parsing import patterns

_SPACES = re.compile(r"[ \t]+")
_BLANK_RUNS = re.compile(r"\n{3,}")
_UNICODE_PUNCTUATION = str.maketrans({
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "–": "-",
    "—": "-",
})


@dataclass
class PreprocessedText:
    """Normalized text with its lines categorized."""

    original_text: str
    normalized_text: str = ""
    workout_name: str | None = None
    lines: list[str] = field(default_factory=list)
    header_lines: list[str] = field(default_factory=list)
    # (1-based position among the non-empty input lines, text)
    movement_lines: list[tuple[int, str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.lines and self.workout_name is None

    @property
    def header_text(self) -> str:
        return "\n".join(self.header_lines)


def normalize_text(text: str) -> str:
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    normalized = _SPACES.sub(" ", normalized)
    normalized = _BLANK_RUNS.sub("\n\n", normalized)
    return normalized.translate(_UNICODE_PUNCTUATION).strip()


def preprocess(
    raw_text: str,
    is_movement: Callable[[str], bool] | None = None,
) -> PreprocessedText:
    """
    Normalize text and categorize its lines.

    The first line becomes the workout name when it is a named benchmark
    workout, or a title-like line that names no workout format and is not a
    known movement.

    Args:
        raw_text: Sanitized workout text
        is_movement: Optional catalog probe used to keep a bare movement name
            on the first line from being taken as the title

    Returns:
        PreprocessedText with header and numbered movement lines
    """
    normalized = normalize_text(raw_text)
    all_lines = [line.strip() for line in normalized.split("\n") if line.strip()]
    result = PreprocessedText(original_text=raw_text, normalized_text=normalized)
    if not all_lines:
        return result

    start = 0
    first = all_lines[0]
    looks_like_title = (
        patterns.WORKOUT_TITLE.match(first) is not None
        and not patterns.contains_workout_type(first)
        and not (is_movement is not None and is_movement(first))
    )
    if patterns.NAMED_WORKOUT.match(first) or looks_like_title:
        result.workout_name = first.strip("\"' ")
        start = 1

    result.lines = all_lines[start:]
    for line_number, line in enumerate(result.lines, start=start + 1):
        if patterns.is_header_line(line):
            result.header_lines.append(line)
        else:
            result.movement_lines.append((line_number, line))
    return result
