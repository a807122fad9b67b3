"""Workout structure detection with confidence scoring and structural warnings."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from wodstrat.models.enums import IssueCode, WorkoutType
from wodstrat.models.parsing import ParsingIssue, RepScheme
from wodstrat.parsing import errors
from wodstrat.parsing.pattern_matching import (
    WorkoutTypeMatch,
    detect_workout_type,
    extract_rep_scheme,
    extract_time_cap,
    signalled_workout_types,
)

logger = logging.getLogger(__name__)

FOR_TIME_WITH_CAP_MIN_CONFIDENCE = 90
AMRAP_WITHOUT_CAP_MAX_CONFIDENCE = 70

TIME_DOMAIN_CONFIDENCE_FULL = 100
TIME_DOMAIN_CONFIDENCE_AMRAP_NO_CAP = 50
TIME_DOMAIN_CONFIDENCE_EMOM_NO_DURATION = 70
TIME_DOMAIN_CONFIDENCE_ROUNDS_NO_COUNT = 60


@dataclass
class StructureAnalysis:
    """Detected workout structure plus the issues raised along the way."""

    match: WorkoutTypeMatch
    type_confidence: int
    time_domain_confidence: int
    rep_scheme: RepScheme | None = None
    issues: list[ParsingIssue] = field(default_factory=list)

    @property
    def workout_type(self) -> WorkoutType:
        return self.match.workout_type


def _type_confidence(match: WorkoutTypeMatch) -> int:
    confidence = int(match.confidence * 100)
    if match.workout_type == WorkoutType.FOR_TIME and match.time_cap_seconds:
        confidence = max(confidence, FOR_TIME_WITH_CAP_MIN_CONFIDENCE)
    if match.workout_type == WorkoutType.AMRAP and not match.time_cap_seconds:
        confidence = min(confidence, AMRAP_WITHOUT_CAP_MAX_CONFIDENCE)
    return confidence


def _time_domain_confidence(match: WorkoutTypeMatch) -> int:
    if match.workout_type == WorkoutType.AMRAP and not match.time_cap_seconds:
        return TIME_DOMAIN_CONFIDENCE_AMRAP_NO_CAP
    if match.workout_type == WorkoutType.EMOM and not match.time_cap_seconds:
        return TIME_DOMAIN_CONFIDENCE_EMOM_NO_DURATION
    if match.workout_type == WorkoutType.ROUNDS and not match.round_count:
        return TIME_DOMAIN_CONFIDENCE_ROUNDS_NO_COUNT
    return TIME_DOMAIN_CONFIDENCE_FULL


def _structural_issues(match: WorkoutTypeMatch, text: str) -> list[ParsingIssue]:
    issues: list[ParsingIssue] = []

    if match.matched_pattern is None:
        issues.append(errors.warning(IssueCode.NO_WORKOUT_STRUCTURE))

    signalled = signalled_workout_types(text)
    if len(signalled) > 1:
        names = ", ".join(workout_type.value for workout_type in signalled)
        issues.append(errors.warning(IssueCode.AMBIGUOUS_WORKOUT_TYPE, names, context=names))

    if match.workout_type == WorkoutType.AMRAP and not match.time_cap_seconds:
        issues.append(errors.warning(IssueCode.MISSING_DURATION, "AMRAP", context="AMRAP"))
    elif match.workout_type == WorkoutType.EMOM and not match.time_cap_seconds:
        issues.append(errors.warning(IssueCode.MISSING_DURATION, "EMOM", context="EMOM"))
    elif match.workout_type == WorkoutType.ROUNDS and not match.round_count:
        issues.append(errors.warning(IssueCode.MISSING_ROUND_COUNT))

    if match.workout_type == WorkoutType.AMRAP and match.time_cap_seconds:
        explicit_cap = extract_time_cap(text)
        if explicit_cap is not None and explicit_cap != match.time_cap_seconds:
            detail = (
                f"AMRAP duration {match.time_cap_seconds // 60} min vs "
                f"time cap {explicit_cap // 60} min"
            )
            issues.append(errors.warning(IssueCode.CONTRADICTORY_METADATA, detail, context=detail))

    return issues


def analyze_structure(header_text: str, full_text: str) -> StructureAnalysis:
    """
    Detect the workout type and time domain.

    Args:
        header_text: Header lines joined by newlines (may be empty)
        full_text: Normalized full text, used when there are no header lines

    Returns:
        StructureAnalysis with integer confidences in [0, 100]
    """
    text = header_text if header_text.strip() else full_text
    match = detect_workout_type(text)
    analysis = StructureAnalysis(
        match=match,
        type_confidence=_type_confidence(match),
        time_domain_confidence=_time_domain_confidence(match),
        rep_scheme=extract_rep_scheme(text) if header_text.strip() else None,
        issues=_structural_issues(match, text),
    )
    logger.debug(
        "Detected %s (pattern=%s, confidence=%d, cap=%s, rounds=%s)",
        match.workout_type.value,
        match.matched_pattern,
        analysis.type_confidence,
        match.time_cap_seconds,
        match.round_count,
    )
    return analysis
