"""
Approximate, field-wise comparison of canonical forms.

Both canonical texts are split on whitespace and walked pairwise. Each
pair is classified by its left field:

- integer: compared with ``int_match`` (exact by default)
- float: compared with ``float_match`` (relative tolerance by default)
- path: compared with ``path_match`` (final component by default)
- plain: exact string equality

Fields past the end of the shorter text are ignored, and the walk stops at
the first pair that does not match.
"""
import logging
import math
import os
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, TextIO, Union

from config import settings
from core.errors import ComparisonMismatch
from core.normalizer import CanonicalForm, normalize
from core.report import emit_report, format_report, format_summary

logger = logging.getLogger(__name__)

INTEGER_RE = re.compile(r"[+-]?\d+")

PATH_DETECTION_MODES = ("separator", "filesystem")


class FieldKind(str, Enum):
    INTEGER = "integer"
    FLOAT = "float"
    PATH = "path"
    PLAIN = "plain"


@dataclass
class Field:
    """One classified whitespace-delimited field. ``value`` is None when parsing failed."""
    kind: FieldKind
    raw: str
    value: Any = None

    @property
    def type_name(self) -> str:
        if self.value is None:
            return "unparsable"
        return type(self.value).__name__

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "raw": self.raw, "value": self.value}


@dataclass
class FieldMismatch:
    """The first pair of fields that failed to match."""
    index: int
    left: Field
    right: Field

    def to_dict(self) -> dict:
        return {"index": self.index, "left": self.left.to_dict(), "right": self.right.to_dict()}


@dataclass
class ComparisonOutcome:
    """Result of comparing two canonical forms."""
    matched: bool
    left_text: str
    right_text: str
    mismatch: Optional[FieldMismatch] = None
    fields_compared: int = 0

    def __bool__(self) -> bool:
        return self.matched

    def to_dict(self) -> dict:
        return {
            "matched": self.matched,
            "fields_compared": self.fields_compared,
            "left_text": self.left_text,
            "right_text": self.right_text,
            "mismatch": self.mismatch.to_dict() if self.mismatch else None,
        }


# ---------------------------------------------------------------------------
# Field parsing and default predicates
# ---------------------------------------------------------------------------

def parse_int(text: str) -> Optional[int]:
    if INTEGER_RE.fullmatch(text):
        return int(text)
    return None


def parse_float(text: str) -> Optional[float]:
    # float() also accepts "1_000" which is not a float literal in renderings
    if "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def relative_tolerance(rtol: float) -> Callable[[Optional[float], Optional[float]], bool]:
    """Float predicate accepting |a-b| <= rtol * max(|a|, |b|)."""
    def float_match(a: Optional[float], b: Optional[float]) -> bool:
        if a is None or b is None:
            return False
        return math.isclose(a, b, rel_tol=rtol)
    return float_match


def exact_match(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return False
    return a == b


def last_path_segment(path: str, separators: Optional[str] = None) -> str:
    """
    Final component of a path, ignoring trailing separators.

    Examples:
        /usr/bin/bash -> bash
        C:\\Tools\\bin\\ -> bin
        / -> /
    """
    separators = separators or settings.PATH_SEPARATORS
    parts = re.split("[" + re.escape(separators) + "]+", path)
    segments = [p for p in parts if p]
    return segments[-1] if segments else path


def path_tail_match(a: str, b: str) -> bool:
    return last_path_segment(a) == last_path_segment(b)


def make_path_detector(mode: Optional[str] = None, separators: Optional[str] = None) -> Callable[[str], bool]:
    """
    Build the rule deciding whether a field is a filesystem path.

    Args:
        mode: "separator" - the field contains a separator and at least one
            other character; "filesystem" - the field exists on this host.
            Defaults to settings.PATH_DETECTION.
        separators: Characters treated as separators in "separator" mode.
    """
    mode = mode or settings.PATH_DETECTION
    separators = separators or settings.PATH_SEPARATORS

    if mode == "separator":
        def looks_like_path(text: str) -> bool:
            has_separator = any(c in separators for c in text)
            return has_separator and any(c not in separators for c in text)
        return looks_like_path

    if mode == "filesystem":
        def exists_on_host(text: str) -> bool:
            return bool(text) and os.path.exists(text)
        return exists_on_host

    raise ValueError(f"Unknown path detection mode: {mode!r} (expected one of {PATH_DETECTION_MODES})")


def _strip_comma(text: str) -> str:
    if text.startswith(","):
        text = text[1:]
    if text.endswith(","):
        text = text[:-1]
    return text


def classify_pair(left: str, right: str, is_path: Callable[[str], bool]) -> tuple[Field, Field]:
    """Classify a field pair by its left side and parse the right side the same way."""
    value = parse_int(left)
    if value is not None:
        return Field(FieldKind.INTEGER, left, value), Field(FieldKind.INTEGER, right, parse_int(right))

    value = parse_float(left)
    if value is not None:
        return Field(FieldKind.FLOAT, left, value), Field(FieldKind.FLOAT, right, parse_float(right))

    left, right = _strip_comma(left), _strip_comma(right)
    kind = FieldKind.PATH if (is_path(left) or is_path(right)) else FieldKind.PLAIN
    return Field(kind, left, left), Field(kind, right, right)


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

def _coerce_pair(
    a: Union[CanonicalForm, str],
    b: Union[CanonicalForm, str],
) -> tuple[CanonicalForm, CanonicalForm]:
    """Normalize a raw string operand with the settings of the other operand."""
    if isinstance(a, CanonicalForm) and not isinstance(b, CanonicalForm):
        b = normalize(b, simplify_sequences=a.simplify_sequences, replacements=a.replacements)
    elif isinstance(b, CanonicalForm) and not isinstance(a, CanonicalForm):
        a = normalize(a, simplify_sequences=b.simplify_sequences, replacements=b.replacements)
    else:
        a, b = normalize(a), normalize(b)
    return a, b


def compare(
    a: Union[CanonicalForm, str],
    b: Union[CanonicalForm, str],
    *,
    float_match: Optional[Callable] = None,
    int_match: Optional[Callable] = None,
    path_match: Optional[Callable] = None,
    path_detector: Optional[Callable[[str], bool]] = None,
) -> ComparisonOutcome:
    """
    Compare two canonical forms field by field without raising.

    Returns:
        ComparisonOutcome; ``mismatch`` holds the first failing field pair
    """
    a, b = _coerce_pair(a, b)

    float_match = float_match or relative_tolerance(settings.FLOAT_RTOL)
    int_match = int_match or exact_match
    path_match = path_match or path_tail_match
    is_path = path_detector or make_path_detector()

    predicates = {
        FieldKind.INTEGER: int_match,
        FieldKind.FLOAT: float_match,
        FieldKind.PATH: path_match,
        FieldKind.PLAIN: exact_match,
    }

    compared = 0
    for index, (left_raw, right_raw) in enumerate(zip(a.fields, b.fields)):
        left, right = classify_pair(left_raw, right_raw, is_path)
        compared += 1
        if not predicates[left.kind](left.value, right.value):
            logger.debug(f"Field {index} differs: {left.raw!r} ({left.kind.value}) vs {right.raw!r}")
            return ComparisonOutcome(
                matched=False,
                left_text=a.text,
                right_text=b.text,
                mismatch=FieldMismatch(index, left, right),
                fields_compared=compared,
            )

    return ComparisonOutcome(matched=True, left_text=a.text, right_text=b.text, fields_compared=compared)


def approx_equal(
    a: Union[CanonicalForm, str],
    b: Union[CanonicalForm, str],
    *,
    float_match: Optional[Callable] = None,
    int_match: Optional[Callable] = None,
    path_match: Optional[Callable] = None,
    path_detector: Optional[Callable[[str], bool]] = None,
    report_on_mismatch: Optional[bool] = None,
    raise_on_mismatch: Optional[bool] = None,
    stream: Optional[TextIO] = None,
) -> bool:
    """
    Check that two renderings match approximately.

    Either side may be a plain string; it is normalized with the other
    side's settings.

    Args:
        a, b: CanonicalForm or raw string
        float_match: Predicate for float fields (default: relative tolerance
            settings.FLOAT_RTOL)
        int_match: Predicate for integer fields (default: equality)
        path_match: Predicate for path fields, given the full paths
            (default: equal final component)
        path_detector: Decides whether a field is a path
            (default: make_path_detector())
        report_on_mismatch: Build a readable report of the first mismatch
        raise_on_mismatch: Raise ComparisonMismatch instead of returning False
        stream: Where to write the report when not raising (default: logger)

    Returns:
        True if every compared field pair matches

    Raises:
        ComparisonMismatch: on mismatch when raise_on_mismatch is enabled
    """
    if report_on_mismatch is None:
        report_on_mismatch = settings.REPORT_ON_MISMATCH
    if raise_on_mismatch is None:
        raise_on_mismatch = settings.RAISE_ON_MISMATCH

    outcome = compare(
        a, b,
        float_match=float_match,
        int_match=int_match,
        path_match=path_match,
        path_detector=path_detector,
    )
    if outcome.matched:
        return True

    if raise_on_mismatch:
        message = format_report(outcome) if report_on_mismatch else format_summary(outcome)
        raise ComparisonMismatch(message, outcome)

    if report_on_mismatch:
        emit_report(outcome, stream)
    return False
