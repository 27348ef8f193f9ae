"""Tests for the JSON Recovery Parser."""

import pytest

from quizsmith.agents.recovery import (
    TRUNCATED_MESSAGE,
    find_balanced_json_end,
    looks_truncated_json,
    repair_json_common,
    safe_parse_json,
)
from quizsmith.errors import EmptyInputError, ParseError, ParseMalformedError, ParseTruncatedError


class TestRepairJsonCommon:
    """Test the common text repairs."""

    def test_strips_code_fences(self):
        """Test that markdown fences are removed."""
        assert repair_json_common('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strips_uppercase_fences(self):
        """Test that fence matching ignores case."""
        assert repair_json_common('```JSON\n{"a": 1}```') == '{"a": 1}'

    def test_replaces_curly_quotes(self):
        """Test that typographic quotes become ASCII quotes."""
        assert repair_json_common("{“a”: ‘b’}") == "{\"a\": 'b'}"

    def test_inserts_comma_between_objects(self):
        """Test a missing comma between objects on separate lines."""
        assert repair_json_common('[{"a":1}\n{"b":2}]') == '[{"a":1},{"b":2}]'

    def test_inserts_comma_between_arrays(self):
        """Test a missing comma between arrays on separate lines."""
        assert repair_json_common("[[1]\n  [2]]") == "[[1],[2]]"

    def test_removes_trailing_commas(self):
        """Test trailing commas before closers."""
        assert repair_json_common('{"a": [1, 2, ], }') == '{"a": [1, 2]}'


class TestFindBalancedJsonEnd:
    """Test the balanced span scanner."""

    def test_finds_first_balanced_end(self):
        """Test that the scan stops where the first structure closes."""
        text = '{"a": 1} trailing {"b": 2}'
        assert find_balanced_json_end(text, 0) == 7

    def test_ignores_brackets_inside_strings(self):
        """Test that brackets in strings do not count."""
        text = '{"a": "}]{\\"["} x'
        assert find_balanced_json_end(text, 0) == text.index(" x") - 1

    def test_unclosed_gives_none(self):
        """Test that an unclosed structure has no end."""
        assert find_balanced_json_end('{"a": [1, 2', 0) is None


class TestLooksTruncatedJson:
    """Test the truncation heuristic."""

    def test_empty_is_truncated(self):
        """Test that empty text counts as truncated."""
        assert looks_truncated_json("  ")

    def test_missing_closer(self):
        """Test that text not ending in a closer is truncated."""
        assert looks_truncated_json('{"a": "b')

    def test_unbalanced(self):
        """Test that unbalanced text ending in a closer is truncated."""
        assert looks_truncated_json('{"a": [1, 2]')

    def test_balanced_is_not_truncated(self):
        """Test that balanced text is not truncated."""
        assert not looks_truncated_json('{"a": [1, 2]}')


class TestSafeParseJson:
    """Test recovery of JSON from noisy model output."""

    def test_clean_json(self):
        """Test that valid JSON parses directly."""
        assert safe_parse_json('{"title": "t", "questions": []}') == {"title": "t", "questions": []}

    def test_fenced_curly_trailing_comma(self):
        """Test that fences, curly quotes and trailing commas are all repaired."""
        text = "```json\n{“title”: “Rivers”, “questions”: [1, 2,],}\n```"
        assert safe_parse_json(text) == {"title": "Rivers", "questions": [1, 2]}

    def test_leading_commentary(self):
        """Test that prose before and after the JSON is dropped."""
        text = 'Sure! Here is your quiz:\n{"title": "t"}\nHope this helps.'
        assert safe_parse_json(text) == {"title": "t"}

    def test_first_of_several_objects(self):
        """Test that only the first balanced object is recovered."""
        assert safe_parse_json('{"a": 1} and also {"b": 2}') == {"a": 1}

    def test_top_level_array(self):
        """Test that arrays are recovered too."""
        assert safe_parse_json("Result: [1, 2, 3] done") == [1, 2, 3]

    def test_missing_comma_between_questions(self):
        """Test the missing comma repair inside a question list."""
        text = '{"questions": [\n{"q": "a"}\n{"q": "b"}\n]}'
        assert safe_parse_json(text) == {"questions": [{"q": "a"}, {"q": "b"}]}

    def test_empty_input(self):
        """Test that blank output raises EmptyInputError."""
        with pytest.raises(EmptyInputError):
            safe_parse_json("   ")

    def test_no_json_at_all(self):
        """Test that prose without braces is malformed."""
        with pytest.raises(ParseMalformedError, match="not JSON"):
            safe_parse_json("not json at all")

    def test_truncated_output(self):
        """Test that cut-off JSON is reported as truncated."""
        with pytest.raises(ParseTruncatedError) as exc_info:
            safe_parse_json('{"title":"t","questions":[{"q":"x"')
        assert str(exc_info.value) == TRUNCATED_MESSAGE

    def test_malformed_balanced_output(self):
        """Test that balanced but invalid JSON is malformed with a detail."""
        with pytest.raises(ParseMalformedError) as exc_info:
            safe_parse_json("{title: t}")
        assert exc_info.value.detail
        assert str(exc_info.value).startswith("Model output was not valid JSON:")

    def test_errors_share_parse_base(self):
        """Test that both parse failures can be caught together."""
        with pytest.raises(ParseError):
            safe_parse_json('{"a": [')
