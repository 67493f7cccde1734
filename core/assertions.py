"""
Assertion helper for test suites.
"""
from typing import Any, Optional

from core.comparator import approx_equal
from core.normalizer import CanonicalForm, normalize


def assert_show_matches(
    value: Any,
    expected: str,
    normalize_options: Optional[dict] = None,
    compare_options: Optional[dict] = None,
) -> CanonicalForm:
    """
    Assert that the rendering of ``value`` approximately matches ``expected``.

    ``expected`` is normalized with the same options as ``value``. Failures
    raise ComparisonMismatch, an AssertionError, so pytest reports them as
    ordinary assertion failures.

    Returns:
        The CanonicalForm of ``value``
    """
    normalize_options = dict(normalize_options or {})
    compare_options = dict(compare_options or {})
    compare_options["raise_on_mismatch"] = True

    actual = normalize(value, **normalize_options)
    approx_equal(actual, expected, **compare_options)
    return actual
