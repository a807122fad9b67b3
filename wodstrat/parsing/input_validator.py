"""Sanity checks applied to raw workout text before structural analysis."""
from __future__ import annotations

import re

from wodstrat.models.enums import IssueCode
from wodstrat.models.parsing import ParsingIssue
from wodstrat.parsing import errors
from wodstrat.parsing.errors import MAX_INPUT_LENGTH, MIN_INPUT_LENGTH

CONTROL_CHARACTERS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")
SUSPICIOUS_CONTENT = re.compile(r"<[^>]*script|javascript:|data:", re.IGNORECASE)
DIGIT = re.compile(r"\d")


def validate_input(text: str | None) -> list[ParsingIssue]:
    """
    Validate raw workout text.

    Checks run in order and stop at the first blocking problem: empty input,
    length bounds, binary content, then script-like content. Text without any
    digit gets a non-blocking NoWorkoutStructure warning.

    Args:
        text: Raw user-supplied workout text

    Returns:
        Issues found; an empty list means the text can be parsed
    """
    if text is None or not text.strip():
        return [errors.error(IssueCode.EMPTY_INPUT)]

    trimmed = text.strip()
    if len(trimmed) > MAX_INPUT_LENGTH:
        return [errors.error(IssueCode.INPUT_TOO_LONG, MAX_INPUT_LENGTH)]
    if len(trimmed) < MIN_INPUT_LENGTH:
        return [errors.error(IssueCode.INPUT_TOO_SHORT, context=trimmed)]
    if CONTROL_CHARACTERS.search(text):
        return [errors.error(IssueCode.BINARY_CONTENT)]
    if SUSPICIOUS_CONTENT.search(text):
        return [errors.error(IssueCode.INVALID_CHARACTERS)]

    if not DIGIT.search(text):
        return [
            errors.warning(
                IssueCode.NO_WORKOUT_STRUCTURE,
                context="No numbers found in input - workout typically includes reps, duration, or distance.",
            )
        ]
    return []


def sanitize(text: str) -> str:
    """Strip control characters, keeping tabs and newlines."""
    return CONTROL_CHARACTERS.sub("", text)
