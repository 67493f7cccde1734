"""
Human-readable reports for failed comparisons.

Reports are presentation only: emitting one never raises.
"""
import logging
from typing import TYPE_CHECKING, Optional, TextIO

if TYPE_CHECKING:
    from core.comparator import ComparisonOutcome

logger = logging.getLogger(__name__)


def format_summary(outcome: "ComparisonOutcome") -> str:
    """One-line description of the divergent field pair."""
    mismatch = outcome.mismatch
    if mismatch is None:
        return "show comparison failed"
    left, right = mismatch.left, mismatch.right
    return (
        f"show comparison failed at field {mismatch.index}: "
        f"{left.raw} ({left.type_name}) == {right.raw} ({right.type_name})"
    )


def format_report(outcome: "ComparisonOutcome") -> str:
    """
    Full report: the divergent pair, its classification, and both canonical texts.
    """
    lines = [format_summary(outcome)]
    if outcome.mismatch is not None:
        lines.append(f"  field kind: {outcome.mismatch.left.kind.value}")
    lines.append("")
    lines.append("left:")
    lines.extend(f"  {line}" for line in outcome.left_text.splitlines() or [""])
    lines.append("right:")
    lines.extend(f"  {line}" for line in outcome.right_text.splitlines() or [""])
    return "\n".join(lines)


def emit_report(outcome: "ComparisonOutcome", stream: Optional[TextIO] = None) -> None:
    """Write the report to ``stream``, or log it as a warning when no stream is given."""
    try:
        report = format_report(outcome)
        if stream is None:
            logger.warning(report)
        else:
            stream.write(report + "\n")
    except Exception as e:
        logger.debug(f"Could not emit comparison report: {e}")
