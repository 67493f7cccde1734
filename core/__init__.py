# Showmatch v1.0.0
"""
Core package for Showmatch.
Contains normalization and approximate comparison of rendered values.
"""
from core.errors import InvalidReplacementSpec, ComparisonMismatch
from core.normalizer import (
    normalize,
    canonicalize,
    isolate_digits,
    simplify_sequences,
    build_replacements,
    CanonicalForm,
    LiteralMatcher,
    PatternMatcher,
    Replacement
)
from core.comparator import (
    approx_equal,
    compare,
    classify_pair,
    last_path_segment,
    make_path_detector,
    path_tail_match,
    relative_tolerance,
    exact_match,
    ComparisonOutcome,
    FieldMismatch,
    FieldKind,
    Field
)
from core.report import format_report, format_summary, emit_report
from core.assertions import assert_show_matches

__all__ = [
    "InvalidReplacementSpec",
    "ComparisonMismatch",
    "normalize",
    "canonicalize",
    "isolate_digits",
    "simplify_sequences",
    "build_replacements",
    "CanonicalForm",
    "LiteralMatcher",
    "PatternMatcher",
    "Replacement",
    "approx_equal",
    "compare",
    "classify_pair",
    "last_path_segment",
    "make_path_detector",
    "path_tail_match",
    "relative_tolerance",
    "exact_match",
    "ComparisonOutcome",
    "FieldMismatch",
    "FieldKind",
    "Field",
    "format_report",
    "format_summary",
    "emit_report",
    "assert_show_matches"
]
