"""Issue message catalog and factories for parsing diagnostics."""
from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any

from wodstrat.models.enums import IssueCode, IssueSeverity
from wodstrat.models.parsing import ParsingIssue

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH = 10_000
MIN_INPUT_LENGTH = 5
MAX_ERROR_COUNT = 20
SIMILAR_NAME_SUGGESTION_COUNT = 3

# code -> (message template, suggestion)
_CATALOG: dict[IssueCode, tuple[str, str]] = {
    IssueCode.EMPTY_INPUT: (
        "Workout text cannot be empty.",
        "Enter a workout description including movements and quantities.",
    ),
    IssueCode.INPUT_TOO_LONG: (
        "Workout text exceeds maximum length of {0:,} characters.",
        "Reduce the workout description or split into multiple workouts.",
    ),
    IssueCode.INPUT_TOO_SHORT: (
        "Workout text is too short to contain valid workout data.",
        "Include at least one movement with reps, distance, or duration.",
    ),
    IssueCode.BINARY_CONTENT: (
        "Input appears to contain binary or encoded content.",
        "Paste plain text workout description only.",
    ),
    IssueCode.INVALID_CHARACTERS: (
        "Input contains potentially harmful characters.",
        "Remove special characters and use plain text.",
    ),
    IssueCode.NO_WORKOUT_STRUCTURE: (
        "Could not detect a valid workout structure.",
        "Include workout type (e.g., 'AMRAP 20 min', 'For Time', '5 Rounds').",
    ),
    IssueCode.NO_MOVEMENTS_DETECTED: (
        "No movements could be parsed from the workout text.",
        "List movements with quantities (e.g., '21 Thrusters', '400m Run').",
    ),
    IssueCode.INVALID_WORKOUT_TYPE: (
        "'{0}' is not a recognized workout type.",
        "Use standard types: AMRAP, For Time, EMOM, Rounds, Tabata, Intervals.",
    ),
    IssueCode.AMBIGUOUS_WORKOUT_TYPE: (
        "Multiple workout types detected: {0}.",
        "Specify a single workout type clearly.",
    ),
    IssueCode.MISSING_DURATION: (
        "Timed workout (AMRAP/EMOM) requires a duration.",
        "Add duration (e.g., '20 min AMRAP', 'EMOM x 10 minutes').",
    ),
    IssueCode.MISSING_ROUND_COUNT: (
        "Rounds-based workout requires a round count.",
        "Specify rounds (e.g., '5 Rounds for Time').",
    ),
    IssueCode.CONTRADICTORY_METADATA: (
        "Contradictory workout metadata: {0}.",
        "Review and correct conflicting information.",
    ),
    IssueCode.UNKNOWN_MOVEMENT: (
        "Movement '{0}' not recognized.",
        "Check spelling or try a common abbreviation.",
    ),
    IssueCode.AMBIGUOUS_MOVEMENT: (
        "'{0}' could match multiple movements: {1}.",
        "Use the full movement name or common abbreviation.",
    ),
    IssueCode.INVALID_REP_COUNT: (
        "Invalid rep count '{0}'.",
        "Use a positive whole number for reps.",
    ),
    IssueCode.INVALID_WEIGHT: (
        "Invalid weight '{0}'.",
        "Use format like '135 lbs', '60 kg', or '1.5 pood'.",
    ),
    IssueCode.INVALID_DISTANCE: (
        "Invalid distance '{0}'.",
        "Use format like '400m', '1 mile', or '5k'.",
    ),
    IssueCode.INVALID_TIME: (
        "Invalid time value '{0}'.",
        "Use format like '2:00', '90 sec', or '3 min'.",
    ),
    IssueCode.INVALID_CALORIES: (
        "Invalid calorie value '{0}'.",
        "Use a positive whole number for calories.",
    ),
    IssueCode.EMPTY_MOVEMENT_LINE: (
        "Movement line is empty.",
        "Remove empty lines or add movement details.",
    ),
    IssueCode.UNRECOGNIZED_MOVEMENT_FORMAT: (
        "Could not parse movement: '{0}'.",
        "Use format: quantity + movement (e.g., '21 Thrusters').",
    ),
    IssueCode.DUPLICATE_MOVEMENT: (
        "Movement '{0}' appears multiple times in sequence.",
        "Intentional duplicates are allowed but flagged for review.",
    ),
    IssueCode.INCONSISTENT_UNITS: (
        "Inconsistent units: {0}.",
        "Use consistent units throughout the workout.",
    ),
    IssueCode.VALUE_OUT_OF_RANGE: (
        "Value '{0}' is outside reasonable range.",
        "Verify the value is correct.",
    ),
    IssueCode.INTERNAL_ERROR: (
        "An internal parsing error occurred.",
        "Please try again or report this issue.",
    ),
    IssueCode.TIMEOUT: (
        "Parsing timed out.",
        "Simplify the workout text or try again.",
    ),
}

ISSUE_CATALOG = MappingProxyType(_CATALOG)


def get_message(code: IssueCode | int, *args: Any) -> str:
    """
    Return the interpolated message for an issue code.

    Args:
        code: Issue code
        *args: Positional values for the template placeholders

    Returns:
        Formatted message. Unknown codes yield ``"Unknown error: <code>"``;
        a template that cannot be formatted with ``args`` is returned as-is.
    """
    entry = ISSUE_CATALOG.get(code)  # type: ignore[call-overload]
    if entry is None:
        return f"Unknown error: {int(code)}"

    template = entry[0]
    if not args:
        return template
    try:
        return template.format(*args)
    except (IndexError, KeyError, ValueError):
        logger.debug("Could not format message for %s with %r", code, args)
        return template


def get_suggestion(code: IssueCode | int) -> str | None:
    entry = ISSUE_CATALOG.get(code)  # type: ignore[call-overload]
    return entry[1] if entry else None


def _issue(
    severity: IssueSeverity,
    code: IssueCode,
    *args: Any,
    line_number: int | None = None,
    context: str | None = None,
    similar_names: list[str] | None = None,
) -> ParsingIssue:
    return ParsingIssue(
        code=code,
        severity=severity,
        message=get_message(code, *args),
        suggestion=get_suggestion(code),
        line_number=line_number,
        context=context,
        similar_names=similar_names or [],
    )


def error(code: IssueCode, *args: Any, **kwargs: Any) -> ParsingIssue:
    """Create an Error-severity issue."""
    return _issue(IssueSeverity.ERROR, code, *args, **kwargs)


def warning(code: IssueCode, *args: Any, **kwargs: Any) -> ParsingIssue:
    """Create a Warning-severity issue."""
    return _issue(IssueSeverity.WARNING, code, *args, **kwargs)


def info(code: IssueCode, *args: Any, **kwargs: Any) -> ParsingIssue:
    """Create an Info-severity issue."""
    return _issue(IssueSeverity.INFO, code, *args, **kwargs)
