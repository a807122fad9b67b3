"""Turns single movement lines into ParsedMovement records."""
from __future__ import annotations

import logging

from wodstrat.models.enums import IssueCode
from wodstrat.models.parsing import ParsedMovement, ParsingIssue
from wodstrat.parsing import errors
from wodstrat.parsing.catalog import MovementCatalog
from wodstrat.parsing.pattern_matching import MovementLineFields, parse_movement_line
from wodstrat.parsing.similar_names import DEFAULT_MAX_DISTANCE, find_similar_names

logger = logging.getLogger(__name__)

EXACT_MATCH_CONFIDENCE = 100
SEARCH_MATCH_CONFIDENCE = 80
AMBIGUOUS_MATCH_CONFIDENCE = 70
UNRESOLVED_CONFIDENCE = 30


def _zero_value_issues(fields: MovementLineFields, line_number: int, text: str) -> list[ParsingIssue]:
    issues = []
    if fields.reps == 0:
        issues.append(errors.error(IssueCode.INVALID_REP_COUNT, 0, line_number=line_number, context=text))
    if fields.weight is not None and fields.weight.value <= 0:
        issues.append(
            errors.error(IssueCode.INVALID_WEIGHT, str(fields.weight), line_number=line_number, context=text)
        )
    if fields.distance is not None and fields.distance.value <= 0:
        issues.append(
            errors.error(IssueCode.INVALID_DISTANCE, str(fields.distance), line_number=line_number, context=text)
        )
    if fields.calories == 0:
        issues.append(errors.error(IssueCode.INVALID_CALORIES, 0, line_number=line_number, context=text))
    if fields.duration_seconds == 0:
        issues.append(errors.error(IssueCode.INVALID_TIME, 0, line_number=line_number, context=text))
    return issues


class MovementLineParser:
    """Parses movement lines and resolves them against the movement catalog."""

    def __init__(self, catalog: MovementCatalog, similar_name_distance: int = DEFAULT_MAX_DISTANCE):
        self.catalog = catalog
        self.similar_name_distance = similar_name_distance

    def parse(
        self,
        text: str,
        line_number: int,
        sequence_order: int,
        has_rep_scheme: bool = False,
    ) -> tuple[ParsedMovement | None, list[ParsingIssue]]:
        """
        Parse one movement line.

        Args:
            text: The line text
            line_number: 1-based position among the non-empty input lines
            sequence_order: Order the movement would take in the workout
            has_rep_scheme: Whether a workout-level rep scheme supplies the reps

        Returns:
            The movement (None when the line is dropped) and the issues raised
        """
        if not text or not text.strip():
            return None, [errors.error(IssueCode.EMPTY_MOVEMENT_LINE, line_number=line_number)]

        fields = parse_movement_line(text)
        issues = _zero_value_issues(fields, line_number, text)
        if issues:
            return None, issues

        name = fields.movement_text
        movement = self.catalog.find(name) if name else None
        confidence = EXACT_MATCH_CONFIDENCE
        if movement is None and name:
            candidates = self.catalog.search(name)
            if len(candidates) == 1:
                movement = candidates[0]
                confidence = SEARCH_MATCH_CONFIDENCE
            elif candidates:
                movement = candidates[0]
                confidence = AMBIGUOUS_MATCH_CONFIDENCE
                names = ", ".join(candidate.display_name for candidate in candidates)
                issues.append(
                    errors.warning(
                        IssueCode.AMBIGUOUS_MOVEMENT,
                        name,
                        names,
                        line_number=line_number,
                        context=text,
                        similar_names=[candidate.display_name for candidate in candidates],
                    )
                )

        if movement is None:
            if not (fields.has_quantity or has_rep_scheme):
                issues.append(
                    errors.error(
                        IssueCode.UNRECOGNIZED_MOVEMENT_FORMAT, text, line_number=line_number, context=text
                    )
                )
                return None, issues
            token = name or text
            similar = find_similar_names(
                token,
                self.catalog.display_names(),
                max_distance=self.similar_name_distance,
            )
            issues.append(
                errors.warning(
                    IssueCode.UNKNOWN_MOVEMENT,
                    token,
                    line_number=line_number,
                    context=text,
                    similar_names=similar,
                )
            )
            confidence = UNRESOLVED_CONFIDENCE

        notes = [*fields.modifiers]
        if fields.percentage:
            notes.append(fields.percentage)

        parsed = ParsedMovement(
            sequence_order=sequence_order,
            line_number=line_number,
            original_text=text,
            movement_text=name,
            movement=movement,
            rep_count=fields.reps,
            load=fields.weight,
            load_female=fields.weight_female,
            distance=fields.distance,
            calories=fields.calories,
            calories_female=fields.calories_female,
            duration_seconds=fields.duration_seconds,
            height_inches=fields.height_inches,
            notes="; ".join(notes) or None,
            confidence=confidence,
        )
        logger.debug(
            "Line %d '%s' -> %s (confidence=%d)",
            line_number,
            text,
            movement.canonical_name if movement else "unresolved",
            confidence,
        )
        return parsed, issues
