"""
Unit tests for approximate comparison of canonical forms.

Usage:
- pytest tests/test_comparator.py -v
"""

import io
import json
import logging
from unittest.mock import Mock

import pytest

from core import (
    ComparisonMismatch,
    FieldKind,
    approx_equal,
    compare,
    exact_match,
    last_path_segment,
    make_path_detector,
    normalize,
    relative_tolerance,
)

from conftest import EXPECTED_RECORD

MISMATCHED_RECORD = "Object with Int(2), /usr/bin/bash and [1.0, 3.141592653589793, 7.5, 1.4142135623730951]"


@pytest.mark.unit
class TestNumericFields:
    """Tests for integer and float matching."""

    def test_float_within_tolerance(self):
        assert approx_equal("3.1415", "3.141592653589793")

    def test_float_exact_override(self):
        assert not approx_equal("3.1415", "3.141592653589793", float_match=exact_match, raise_on_mismatch=False)

    def test_float_outside_tolerance(self):
        assert not approx_equal("3.2", "3.141592653589793", raise_on_mismatch=False)

    def test_custom_tolerance(self):
        assert approx_equal("3.2", "3.141592653589793", float_match=relative_tolerance(0.05))

    def test_integers_exact(self):
        assert approx_equal("count 10", "count 10")
        assert not approx_equal("count 10", "count 11", raise_on_mismatch=False)

    def test_right_side_parsed_as_left_kind(self):
        """An integer on the left never matches a float on the right."""
        outcome = compare("1", "1.0")
        assert not outcome.matched
        assert outcome.mismatch.left.kind == FieldKind.INTEGER
        assert outcome.mismatch.right.value is None
        assert outcome.mismatch.right.type_name == "unparsable"

    def test_unparsable_right_side(self):
        outcome = compare("2.5", "abc")
        assert not outcome.matched
        assert outcome.mismatch.right.kind == FieldKind.FLOAT
        assert outcome.mismatch.right.value is None

    def test_scientific_notation_noise(self):
        """Single precision noise in exponent notation is tolerated."""
        left = "a, b, c, d = 1.3e-17, 2.6e17, 1.3e-17, 2.6000000279170253e17"
        right = "a, b, c, d = 1.3e-17, 2.6e17, 1.3e-17, 2.6e17"
        assert approx_equal(left, right)

    def test_symmetry(self):
        pairs = [
            ("3.1415", "3.141592653589793"),
            ("3.2", "3.141592653589793"),
            ("/usr/bin/bash", "/bin/bash"),
            ("Int(1)", "Int(2)"),
            ("foo bar", "foo baz"),
        ]
        for a, b in pairs:
            assert approx_equal(a, b, raise_on_mismatch=False) == approx_equal(b, a, raise_on_mismatch=False)


@pytest.mark.unit
class TestPathFields:
    """Tests for path detection and matching."""

    def test_paths_match_on_last_segment(self):
        assert approx_equal("/usr/bin/bash", "/bin/bash")

    def test_full_path_override(self):
        assert not approx_equal(
            "/usr/bin/bash", "/bin/bash",
            path_match=lambda a, b: a == b,
            raise_on_mismatch=False,
        )

    def test_different_last_segment(self):
        assert not approx_equal("/usr/bin/bash", "/usr/bin/zsh", raise_on_mismatch=False)

    def test_path_on_either_side(self):
        """Only one side needs to look like a path."""
        assert approx_equal("bash", "/usr/bin/bash")

    def test_trailing_comma_stripped(self):
        assert approx_equal("/usr/bin/bash,", "/bin/bash")

    def test_last_path_segment(self):
        assert last_path_segment("/usr/bin/bash") == "bash"
        assert last_path_segment("build/") == "build"
        assert last_path_segment("C:\\Tools\\bin") == "bin"
        assert last_path_segment("/") == "/"

    def test_separator_detection(self):
        looks_like_path = make_path_detector("separator")
        assert looks_like_path("/usr/bin")
        assert looks_like_path("C:\\Tools")
        assert not looks_like_path("/")
        assert not looks_like_path("bash")

    def test_custom_separators(self):
        looks_like_path = make_path_detector("separator", separators="/")
        assert not looks_like_path("C:\\Tools")

    def test_filesystem_detection(self, tmp_path):
        exists_on_host = make_path_detector("filesystem")
        assert exists_on_host(str(tmp_path))
        assert not exists_on_host(str(tmp_path / "missing" / "file"))
        assert not exists_on_host("")

    def test_unknown_detection_mode(self):
        with pytest.raises(ValueError, match="Unknown path detection mode"):
            make_path_detector("guess")

    def test_non_path_compared_exactly(self):
        """Without path detection, differing paths are plain mismatches."""
        assert not approx_equal(
            "/usr/bin/bash", "/bin/bash",
            path_detector=lambda text: False,
            raise_on_mismatch=False,
        )


@pytest.mark.unit
class TestFieldWalk:
    """Tests for the pairwise walk over fields."""

    def test_stops_at_first_mismatch(self):
        """No field after the first mismatch is evaluated."""
        int_match = Mock(side_effect=lambda a, b: a == b)
        result = approx_equal("1 2 3 4 5", "1 9 3 4 5", int_match=int_match, raise_on_mismatch=False)
        assert result is False
        assert int_match.call_count == 2

    def test_all_fields_evaluated_on_match(self):
        int_match = Mock(side_effect=lambda a, b: a == b)
        assert approx_equal("1 2 3 4 5", "1 2 3 4 5", int_match=int_match)
        assert int_match.call_count == 5

    def test_extra_trailing_fields_ignored(self):
        assert approx_equal("a b", "a b c d")
        assert approx_equal("a b c d", "a b")

    def test_empty_text_matches(self):
        assert approx_equal("", "anything at all")

    def test_plain_fields_exact(self):
        assert not approx_equal("foo bar", "foo baz", raise_on_mismatch=False)

    def test_comma_stripped_once(self):
        assert approx_equal("foo,", "foo")
        assert not approx_equal("foo,,", "foo", raise_on_mismatch=False)

    def test_outcome_details(self):
        outcome = compare("1 2 3 4 5", "1 9 3 4 5")
        assert not outcome
        assert outcome.fields_compared == 2
        assert outcome.mismatch.index == 1
        assert outcome.mismatch.left.value == 2
        assert outcome.mismatch.right.value == 9

    def test_outcome_serializable(self):
        outcome = compare("Int(1)", "Int(2)")
        data = json.loads(json.dumps(outcome.to_dict()))
        assert data["matched"] is False
        assert data["mismatch"]["left"]["kind"] == "integer"


@pytest.mark.unit
class TestSettingsPropagation:
    """A raw string is normalized with the other operand's settings."""

    def test_simplification_setting_propagates(self):
        full = normalize("[1, 2, 3]", simplify_sequences=False)
        assert approx_equal(full, "[1, 2, 3]")
        assert not approx_equal(full, "[1, 3]", raise_on_mismatch=False)

        simplified = normalize("[1, 2, 3]")
        assert approx_equal(simplified, "[1, 3]")

    def test_replacements_propagate_both_ways(self):
        form = normalize("value x", replacements=[("x", "y")])
        assert approx_equal(form, "value x")
        assert approx_equal("value x", form)

    def test_construction_path_irrelevant(self, record):
        """Rendered and literal forms compare the same way."""
        from_value = normalize(record)
        from_text = normalize(
            "Object with Int(1), /usr/bin/bash and [1.0, 3.141592653589793, 7.5, 1.4142135623730951]"
        )
        assert approx_equal(from_value, from_text)
        assert approx_equal(from_text, from_value)


@pytest.mark.unit
class TestEndToEnd:
    """Record rendering compared against reference strings."""

    def test_record_matches(self, record):
        assert approx_equal(normalize(record), EXPECTED_RECORD)

    def test_record_matches_reversed(self, record):
        assert approx_equal(EXPECTED_RECORD, normalize(record))

    def test_record_mismatch_returns_false(self, record):
        assert not approx_equal(normalize(record), MISMATCHED_RECORD, raise_on_mismatch=False)

    def test_record_mismatch_raises(self, record):
        with pytest.raises(ComparisonMismatch, match="comparison failed") as excinfo:
            approx_equal(normalize(record), MISMATCHED_RECORD)

        error = excinfo.value
        assert isinstance(error, AssertionError)
        assert error.left.kind == FieldKind.INTEGER
        assert error.left.value == 1
        assert error.right.value == 2
        assert "Int( 1 )" in error.left_text
        assert "Int( 2 )" in error.right_text
        assert "1 (int) == 2 (int)" in str(error)


@pytest.mark.unit
class TestReporting:
    """Tests for mismatch reports."""

    def test_report_in_error_message(self):
        with pytest.raises(ComparisonMismatch) as excinfo:
            approx_equal("Int(1) tail", "Int(2) tail")
        message = str(excinfo.value)
        assert "left:" in message
        assert "Int( 1 ) tail" in message
        assert "Int( 2 ) tail" in message

    def test_terse_error_without_report(self):
        with pytest.raises(ComparisonMismatch) as excinfo:
            approx_equal("Int(1)", "Int(2)", report_on_mismatch=False)
        message = str(excinfo.value)
        assert "comparison failed" in message
        assert "left:" not in message

    def test_report_written_to_stream(self):
        stream = io.StringIO()
        assert not approx_equal("Int(1)", "Int(2)", raise_on_mismatch=False, stream=stream)
        assert "1 (int) == 2 (int)" in stream.getvalue()

    def test_no_report_when_disabled(self):
        stream = io.StringIO()
        approx_equal("Int(1)", "Int(2)", raise_on_mismatch=False, report_on_mismatch=False, stream=stream)
        assert stream.getvalue() == ""

    def test_report_logged_without_stream(self, caplog):
        with caplog.at_level(logging.WARNING):
            approx_equal("Int(1)", "Int(2)", raise_on_mismatch=False)
        assert "comparison failed" in caplog.text

    def test_broken_stream_never_raises(self):
        stream = Mock()
        stream.write.side_effect = OSError("closed")
        assert approx_equal("Int(1)", "Int(2)", raise_on_mismatch=False, stream=stream) is False
