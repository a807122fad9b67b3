"""Workout text parser facade."""
from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from wodstrat.config import get_settings
from wodstrat.models.enums import ConfidenceLevel, IssueCode, WorkoutType
from wodstrat.models.parsing import (
    ConfidenceBreakdown,
    ParsedMovement,
    ParsedWorkout,
    ParsedWorkoutResult,
)
from wodstrat.parsing import errors, validator
from wodstrat.parsing.aggregator import ParsingResultAggregator
from wodstrat.parsing.catalog import MovementCatalog, load_catalog
from wodstrat.parsing.input_validator import sanitize, validate_input
from wodstrat.parsing.movement_parser import MovementLineParser
from wodstrat.parsing.pattern_matching import WorkoutTypeMatch
from wodstrat.parsing.preprocessor import PreprocessedText, preprocess
from wodstrat.parsing.type_detector import StructureAnalysis, analyze_structure

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FALLBACK_STRUCTURE = StructureAnalysis(
    match=WorkoutTypeMatch(workout_type=WorkoutType.FOR_TIME, confidence=0.5),
    type_confidence=50,
    time_domain_confidence=100,
)


class WorkoutParser:
    """
    Parses free-text workout descriptions.

    ``parse`` never raises: every failure becomes a ParsingIssue on the
    returned result. Unexpected exceptions inside a stage are logged and
    recorded as InternalError.

    Example:
        >>> result = WorkoutParser().parse("21-15-9\\nThrusters\\nPull-ups")
        >>> result.workout.workout_type, result.confidence
        (<WorkoutType.FOR_TIME: 'ForTime'>, 96)
    """

    def __init__(
        self,
        catalog: MovementCatalog | None = None,
        max_errors: int | None = None,
        similar_name_distance: int | None = None,
    ):
        settings = get_settings()
        self.catalog = catalog or load_catalog()
        self.max_errors = max_errors or settings.parser_max_errors
        self.line_parser = MovementLineParser(
            self.catalog,
            similar_name_distance or settings.parser_similar_name_distance,
        )

    def _run_stage(
        self,
        stage: str,
        aggregator: ParsingResultAggregator,
        func: Callable[..., T],
        *args: Any,
        line_number: int | None = None,
    ) -> T | None:
        try:
            return func(*args)
        except Exception as e:
            logger.warning("Parsing stage '%s' failed: %s", stage, e, exc_info=True)
            aggregator.add(errors.error(IssueCode.INTERNAL_ERROR, line_number=line_number, context=stage))
            return None

    def parse(self, text: str | None) -> ParsedWorkoutResult:
        """
        Parse workout text into a structured workout.

        Args:
            text: Raw workout description

        Returns:
            ParsedWorkoutResult with the workout, sorted issues and confidence
        """
        aggregator = ParsingResultAggregator(self.max_errors)

        input_issues = self._run_stage("input validation", aggregator, validate_input, text)
        if input_issues:
            aggregator.add_range(input_issues)
        if aggregator.has_errors:
            return self._rejected_result(aggregator)

        sanitized = sanitize(text or "")
        preprocessed = self._run_stage(
            "preprocessing", aggregator, preprocess, sanitized, self.catalog.is_known
        )
        if preprocessed is None:
            return self._rejected_result(aggregator)

        structure = self._run_stage(
            "structure detection",
            aggregator,
            analyze_structure,
            preprocessed.header_text,
            preprocessed.normalized_text,
        )
        if structure is None:
            structure = _FALLBACK_STRUCTURE
        aggregator.add_range(structure.issues)

        movements = self._parse_movements(preprocessed, structure, aggregator)

        workout = ParsedWorkout(
            name=preprocessed.workout_name,
            workout_type=structure.workout_type,
            time_cap_seconds=structure.match.time_cap_seconds,
            round_count=structure.match.round_count,
            interval_duration_seconds=structure.match.interval_seconds,
            interval=structure.match.interval,
            rep_scheme=structure.rep_scheme,
            movements=movements,
        )

        if not movements:
            aggregator.add(errors.error(IssueCode.NO_MOVEMENTS_DETECTED))
        else:
            consistency = self._run_stage("consistency checks", aggregator, validator.check_consistency, workout)
            if consistency:
                aggregator.add_range(consistency)

        return self._build_result(workout, structure, len(preprocessed.movement_lines), aggregator)

    def _parse_movements(
        self,
        preprocessed: PreprocessedText,
        structure: StructureAnalysis,
        aggregator: ParsingResultAggregator,
    ) -> list[ParsedMovement]:
        movements: list[ParsedMovement] = []
        scheme = structure.rep_scheme
        for line_number, line in preprocessed.movement_lines:
            outcome = self._run_stage(
                "movement line",
                aggregator,
                self.line_parser.parse,
                line,
                line_number,
                len(movements) + 1,
                scheme is not None,
                line_number=line_number,
            )
            if outcome is None:
                continue
            movement, issues = outcome
            aggregator.add_range(issues)
            if movement is None:
                continue
            if scheme is not None and movement.rep_count is None and not (
                movement.distance or movement.calories or movement.duration_seconds
            ):
                movement.rep_scheme = scheme
            movements.append(movement)
        logger.debug("Parsed %d of %d movement lines", len(movements), len(preprocessed.movement_lines))
        return movements

    def _build_result(
        self,
        workout: ParsedWorkout,
        structure: StructureAnalysis,
        total_movement_lines: int,
        aggregator: ParsingResultAggregator,
    ) -> ParsedWorkoutResult:
        workout_errors = [issue for issue in aggregator.errors if issue.line_number is None]
        line_errors = [issue for issue in aggregator.errors if issue.line_number is not None]
        workout.issues = workout_errors

        breakdown = validator.build_breakdown(
            workout,
            structure.type_confidence,
            structure.time_domain_confidence,
            total_movement_lines,
        )
        confidence = validator.calculate_confidence(
            breakdown,
            warning_count=len(aggregator.warnings),
            line_error_count=len(line_errors),
            workout_error_count=len(workout_errors),
        )
        result = ParsedWorkoutResult(
            workout=workout,
            errors=list(aggregator.errors),
            warnings=list(aggregator.warnings),
            info=list(aggregator.info),
            confidence=confidence,
            confidence_level=validator.confidence_level(confidence),
            breakdown=breakdown,
            success=not aggregator.has_errors,
            error_limit_reached=aggregator.error_limit_reached,
            parsed_description=validator.describe_workout(workout),
        )
        logger.info(
            "Parsed workout '%s': %s, confidence=%d, %s",
            workout.name or "unnamed",
            result.parsed_description,
            confidence,
            aggregator.summary(),
        )
        return result

    def _rejected_result(self, aggregator: ParsingResultAggregator) -> ParsedWorkoutResult:
        workout = ParsedWorkout(issues=[issue for issue in aggregator.errors if issue.line_number is None])
        logger.info("Workout text rejected: %s", aggregator.summary())
        return ParsedWorkoutResult(
            workout=workout,
            errors=list(aggregator.errors),
            warnings=list(aggregator.warnings),
            info=list(aggregator.info),
            confidence=0,
            confidence_level=ConfidenceLevel.LOW,
            breakdown=ConfidenceBreakdown(),
            success=False,
            error_limit_reached=aggregator.error_limit_reached,
            parsed_description=validator.describe_workout(workout),
        )


def parse_workout(text: str | None) -> ParsedWorkoutResult:
    """Parse workout text with the default catalog and settings."""
    return WorkoutParser().parse(text)
