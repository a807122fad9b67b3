"""Tests for issue messages, the issue aggregator, name suggestions and input checks."""

import pytest

from wodstrat.models.enums import IssueCode, IssueSeverity
from wodstrat.parsing import errors
from wodstrat.parsing.aggregator import ParsingResultAggregator
from wodstrat.parsing.input_validator import sanitize, validate_input
from wodstrat.parsing.similar_names import find_similar_names, levenshtein_distance


class TestIssueMessages:
    """Test the issue message catalog."""

    def test_message_interpolation(self):
        message = errors.get_message(IssueCode.INPUT_TOO_LONG, 10_000)
        assert message == "Workout text exceeds maximum length of 10,000 characters."

    def test_unknown_code(self):
        assert errors.get_message(999) == "Unknown error: 999"

    def test_every_code_has_message_and_suggestion(self):
        for code in IssueCode:
            assert errors.get_message(code)
            assert errors.get_suggestion(code)

    def test_factories_set_severity(self):
        assert errors.error(IssueCode.EMPTY_INPUT).severity == IssueSeverity.ERROR
        assert errors.warning(IssueCode.UNKNOWN_MOVEMENT, "x").severity == IssueSeverity.WARNING
        assert errors.info(IssueCode.DUPLICATE_MOVEMENT, "x").severity == IssueSeverity.INFO


class TestAggregator:
    """Test error capping and deduplication."""

    def test_error_cap_keeps_accepting_warnings(self):
        aggregator = ParsingResultAggregator(max_errors=20)

        for line in range(1, 26):
            aggregator.add(errors.error(IssueCode.INVALID_REP_COUNT, 0, line_number=line))

        assert len(aggregator.errors) == 20
        assert aggregator.error_limit_reached is True

        stored = aggregator.add(errors.warning(IssueCode.UNKNOWN_MOVEMENT, "Wallballs", line_number=30))
        assert stored is True
        assert len(aggregator.warnings) == 1

    def test_same_code_and_line_collapse(self):
        aggregator = ParsingResultAggregator()

        first = aggregator.add(errors.error(IssueCode.INVALID_WEIGHT, "0 lb", line_number=3))
        second = aggregator.add(errors.error(IssueCode.INVALID_WEIGHT, "0 kg", line_number=3))

        assert first is True
        assert second is False
        assert len(aggregator.errors) == 1

    def test_same_code_on_different_lines_kept(self):
        aggregator = ParsingResultAggregator()
        stored = aggregator.add_range(
            [
                errors.error(IssueCode.INVALID_WEIGHT, "0 lb", line_number=2),
                errors.error(IssueCode.INVALID_WEIGHT, "0 lb", line_number=3),
            ]
        )
        assert stored == 2

    def test_workout_level_issues_dedup_on_context(self):
        aggregator = ParsingResultAggregator()
        aggregator.add(errors.error(IssueCode.NO_MOVEMENTS_DETECTED))
        aggregator.add(errors.error(IssueCode.NO_MOVEMENTS_DETECTED))
        assert len(aggregator.errors) == 1

    def test_summary_and_clear(self):
        aggregator = ParsingResultAggregator()
        aggregator.add(errors.error(IssueCode.EMPTY_INPUT))
        aggregator.add(errors.info(IssueCode.DUPLICATE_MOVEMENT, "Burpees", line_number=2))

        summary = aggregator.summary()
        assert summary["error_count"] == 1
        assert summary["info_count"] == 1
        assert summary["errors_by_code"] == {"EMPTY_INPUT": 1}

        aggregator.clear()
        assert aggregator.total_issue_count == 0
        assert aggregator.add(errors.error(IssueCode.EMPTY_INPUT)) is True

    def test_invalid_cap(self):
        with pytest.raises(ValueError):
            ParsingResultAggregator(max_errors=0)


class TestSimilarNames:
    """Test edit-distance suggestions."""

    def test_levenshtein_distance(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("same", "same") == 0

    def test_single_suggestion_for_misspelling(self, catalog):
        assert find_similar_names("Thrustres", catalog.display_names()) == ["Thrusters"]

    def test_ordered_by_distance_and_capped(self):
        names = ["Row", "Run", "Rope Climb", "Bike", "Ring Dip"]
        assert find_similar_names("Rown", names) == ["Row", "Run"]
        assert len(find_similar_names("R", names, max_distance=10)) == 3

    def test_blank_token(self):
        assert find_similar_names("  ", ["Row"]) == []


class TestInputValidation:
    """Test raw input checks."""

    @pytest.mark.parametrize(
        "text, code",
        [
            (None, IssueCode.EMPTY_INPUT),
            ("   \n ", IssueCode.EMPTY_INPUT),
            ("abc", IssueCode.INPUT_TOO_SHORT),
            ("21 " + "x" * 10_001, IssueCode.INPUT_TOO_LONG),
            ("21 Thrusters\x00", IssueCode.BINARY_CONTENT),
            ("<script>alert(1)</script> 21 Burpees", IssueCode.INVALID_CHARACTERS),
        ],
    )
    def test_blocking_input(self, text, code):
        issues = validate_input(text)
        assert [issue.code for issue in issues] == [code]
        assert issues[0].severity == IssueSeverity.ERROR

    def test_text_without_numbers_warns(self):
        issues = validate_input("Thrusters and pull-ups")
        assert len(issues) == 1
        assert issues[0].code == IssueCode.NO_WORKOUT_STRUCTURE
        assert issues[0].severity == IssueSeverity.WARNING

    def test_valid_text(self):
        assert validate_input("21-15-9\nThrusters\nPull-ups") == []

    def test_sanitize_keeps_newlines(self):
        assert sanitize("21\tThrusters\x07\nPull-ups") == "21\tThrusters\nPull-ups"
