"""Collects parsing issues with deduplication and an error cap."""
from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable

from wodstrat.models.enums import IssueSeverity
from wodstrat.models.parsing import ParsingIssue
from wodstrat.parsing.errors import MAX_ERROR_COUNT

logger = logging.getLogger(__name__)

_CONTEXT_KEY_LENGTH = 50


class ParsingResultAggregator:
    """
    Accumulates issues for a single parse.

    Errors are capped at ``max_errors``; warnings and info notes are kept
    without limit. Issues with the same code on the same line (or, when not
    line-scoped, the same leading context) are stored once.
    """

    def __init__(self, max_errors: int = MAX_ERROR_COUNT):
        if max_errors < 1:
            raise ValueError("max_errors must be at least 1")
        self.max_errors = max_errors
        self.errors: list[ParsingIssue] = []
        self.warnings: list[ParsingIssue] = []
        self.info: list[ParsingIssue] = []
        self._seen: set[str] = set()

    @staticmethod
    def dedup_key(issue: ParsingIssue) -> str:
        if issue.line_number is not None:
            return f"{int(issue.code)}:{issue.line_number}"
        context = (issue.context or "")[:_CONTEXT_KEY_LENGTH]
        return f"{int(issue.code)}:{context}"

    def add(self, issue: ParsingIssue) -> bool:
        """
        Add an issue.

        Returns:
            True when stored, False when it was a duplicate or the error cap
            had already been reached.
        """
        key = self.dedup_key(issue)
        if key in self._seen:
            return False
        self._seen.add(key)

        if issue.severity == IssueSeverity.ERROR:
            if len(self.errors) >= self.max_errors:
                logger.debug("Error cap of %d reached, dropping %s", self.max_errors, issue.code.name)
                return False
            self.errors.append(issue)
        elif issue.severity == IssueSeverity.WARNING:
            self.warnings.append(issue)
        else:
            self.info.append(issue)
        return True

    def add_range(self, issues: Iterable[ParsingIssue]) -> int:
        """Add several issues; return how many were stored."""
        return sum(1 for issue in issues if self.add(issue))

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def error_limit_reached(self) -> bool:
        return len(self.errors) >= self.max_errors

    @property
    def total_issue_count(self) -> int:
        return len(self.errors) + len(self.warnings) + len(self.info)

    def sorted_issues(self) -> list[ParsingIssue]:
        return [*self.errors, *self.warnings, *self.info]

    def summary(self) -> dict[str, Any]:
        return {
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "info_count": len(self.info),
            "error_limit_reached": self.error_limit_reached,
            "errors_by_code": dict(Counter(issue.code.name for issue in self.errors)),
            "warnings_by_code": dict(Counter(issue.code.name for issue in self.warnings)),
        }

    def clear(self) -> None:
        self.errors.clear()
        self.warnings.clear()
        self.info.clear()
        self._seen.clear()
