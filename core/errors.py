"""
Errors raised by the normalizer and comparator.
"""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.comparator import ComparisonOutcome


class InvalidReplacementSpec(ValueError):
    """Replacement rules are not a sequence of (matcher, replacement) pairs."""


class ComparisonMismatch(AssertionError):
    """
    Raised at the first field pair that fails to match.

    Subclasses AssertionError so test runners report it as a failed assertion.
    """

    def __init__(self, message: str, outcome: "ComparisonOutcome"):
        super().__init__(message)
        self.outcome = outcome

    @property
    def left(self):
        return self.outcome.mismatch.left if self.outcome.mismatch else None

    @property
    def right(self):
        return self.outcome.mismatch.right if self.outcome.mismatch else None

    @property
    def left_text(self) -> str:
        return self.outcome.left_text

    @property
    def right_text(self) -> str:
        return self.outcome.right_text
