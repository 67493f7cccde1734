"""
Normalization of rendered values into canonical, field-comparable text.

A rendering such as ``Object with Int(1) and [1.0, 3.14, 7.5]`` is turned
into ``Object with Int( 1 ) and [ 1.0 , 7.5 ]``:

1. User replacements are applied in order (literal or regex substitutions)
2. Digits are separated from neighbouring characters so that numbers
   become standalone whitespace-delimited fields
3. Bracketed sequences are collapsed to their first and last items

The resulting CanonicalForm remembers the settings it was built with so that
a later comparison against a plain string normalizes that string the same way.
"""
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from config import settings
from core.errors import InvalidReplacementSpec
from services.render import render_value

logger = logging.getLogger(__name__)

# Digit next to anything that is not a digit, a dot or whitespace
DIGIT_BOUNDARY_RE = re.compile(r"(?<=\d)(?=[^\d.\s])|(?<=[^\d.\s])(?=\d)")

# Innermost bracketed run, no nested brackets allowed inside
SEQUENCE_RE = re.compile(r"\[([^\[\]]*)\]")


@dataclass(frozen=True)
class LiteralMatcher:
    """Matches an exact substring."""
    text: str

    def substitute(self, text: str, replacement: str) -> str:
        return text.replace(self.text, replacement)


@dataclass(frozen=True)
class PatternMatcher:
    """Matches a compiled regular expression; replacement may use backreferences."""
    pattern: re.Pattern

    def substitute(self, text: str, replacement: Union[str, Callable]) -> str:
        return self.pattern.sub(replacement, text)


Matcher = Union[LiteralMatcher, PatternMatcher]


@dataclass(frozen=True)
class Replacement:
    """A single substitution rule applied before digit isolation."""
    matcher: Matcher
    replacement: Union[str, Callable]

    def apply(self, text: str) -> str:
        return self.matcher.substitute(text, self.replacement)


@dataclass(frozen=True)
class CanonicalForm:
    """
    Normalized text of a rendered value.

    ``simplify_sequences`` and ``replacements`` record how the text was built;
    they are reused when this form is compared against a raw string.
    """
    text: str
    simplify_sequences: bool = True
    replacements: tuple[Replacement, ...] = ()

    def __str__(self) -> str:
        return self.text

    @property
    def fields(self) -> list[str]:
        return self.text.split()

    def isapprox(self, other: Union["CanonicalForm", str], **options) -> bool:
        """Approximate comparison, see ``core.comparator.approx_equal``."""
        from core.comparator import approx_equal
        return approx_equal(self, other, **options)


def _make_matcher(matcher: Any) -> Matcher:
    if isinstance(matcher, str):
        return LiteralMatcher(matcher)
    if isinstance(matcher, re.Pattern):
        return PatternMatcher(matcher)
    raise InvalidReplacementSpec(
        f"Replacement matcher must be a string or compiled pattern, got {type(matcher).__name__}"
    )


def build_replacements(replacements: Union[Iterable, Mapping, None]) -> tuple[Replacement, ...]:
    """
    Validate user replacement rules and convert them to Replacement objects.

    Accepts a mapping, or an ordered iterable of (matcher, replacement) pairs.
    A flat list such as ``["a", "b"]`` is rejected.
    """
    if replacements is None:
        return ()
    if isinstance(replacements, (str, bytes)):
        raise InvalidReplacementSpec(
            "Replacements must be a sequence of (matcher, replacement) pairs, got a string"
        )
    if isinstance(replacements, Mapping):
        replacements = list(replacements.items())

    try:
        items = list(replacements)
    except TypeError:
        raise InvalidReplacementSpec(
            f"Replacements must be iterable, got {type(replacements).__name__}"
        ) from None

    rules = []
    for position, item in enumerate(items):
        if isinstance(item, Replacement):
            rules.append(item)
            continue
        if not isinstance(item, (tuple, list)) or len(item) != 2:
            raise InvalidReplacementSpec(
                f"Replacement #{position} is not a (matcher, replacement) pair: {item!r}"
            )
        matcher, replacement = item
        matcher = _make_matcher(matcher)
        if isinstance(matcher, LiteralMatcher) and not isinstance(replacement, str):
            raise InvalidReplacementSpec(
                f"Replacement #{position}: literal matcher needs a string replacement, "
                f"got {type(replacement).__name__}"
            )
        if not isinstance(replacement, str) and not callable(replacement):
            raise InvalidReplacementSpec(
                f"Replacement #{position}: replacement must be a string or callable, "
                f"got {type(replacement).__name__}"
            )
        rules.append(Replacement(matcher, replacement))

    return tuple(rules)


def isolate_digits(text: str) -> str:
    """Separate digits from adjacent non-numeric characters with a space."""
    return DIGIT_BOUNDARY_RE.sub(" ", text)


def _collapse_sequence(match: re.Match) -> str:
    items = [item.strip() for item in match.group(1).split(",")]
    if len(items) < 2:
        return match.group(0)
    return f"[ {items[0]} , {items[-1]} ]"


def simplify_sequences(text: str) -> str:
    """
    Keep only the first and last item of every bracketed sequence.

    Nested sequences are not supported: only bracket runs that contain no
    other bracket are collapsed.
    """
    return SEQUENCE_RE.sub(_collapse_sequence, text)


def canonicalize(text: str, simplify: bool = True, replacements: tuple[Replacement, ...] = ()) -> str:
    """Apply replacements, digit isolation and sequence simplification to raw text."""
    for rule in replacements:
        text = rule.apply(text)
    text = isolate_digits(text)
    if simplify:
        text = simplify_sequences(text)
    return text


def normalize(
    value: Any,
    *,
    simplify_sequences: Optional[bool] = None,
    replacements: Union[Iterable, Mapping, None] = (),
    mode: Optional[str] = "text/plain",
    context: Optional[dict] = None,
    renderer: Optional[Callable] = None,
) -> CanonicalForm:
    """
    Normalize a value or a raw string into a CanonicalForm.

    Args:
        value: A raw rendering (str), an existing CanonicalForm (returned
            as-is), or any other object to be rendered first
        simplify_sequences: Collapse [ ... ] runs to first/last item;
            defaults to settings.SIMPLIFY_SEQUENCES
        replacements: Ordered (matcher, replacement) pairs or a mapping;
            a str matcher is literal, a compiled re.Pattern is a regex
        mode: Rendering mode forwarded to the renderer
        context: Rendering options forwarded to the renderer
        renderer: Callable(value, mode, context) -> str; defaults to
            services.render.render_value

    Returns:
        CanonicalForm holding the normalized text and the settings used

    Raises:
        InvalidReplacementSpec: if ``replacements`` is malformed
    """
    rules = build_replacements(replacements)

    if isinstance(value, CanonicalForm):
        return value

    if simplify_sequences is None:
        simplify_sequences = settings.SIMPLIFY_SEQUENCES

    if isinstance(value, str):
        raw = value
    else:
        renderer = renderer or render_value
        raw = renderer(value, mode, context)

    text = canonicalize(raw, simplify_sequences, rules)
    logger.debug(f"Normalized {len(raw)} chars into {len(text.split())} fields")

    return CanonicalForm(text=text, simplify_sequences=simplify_sequences, replacements=rules)
