"""
Rendering service for Showmatch.

Turns an arbitrary Python value into the text that the normalizer consumes.
The normalizer never looks inside values; it only sees the string returned
by a renderer, so any callable with the ``Renderer`` signature can be used.

Modes:
- "text/plain": pretty-printed with pprint (context keys are pprint options)
- "repr" / None: repr(value), the compact single-line form
- "str": str(value)

Objects that define ``__show__(mode, context)`` render themselves.
"""
import logging
import pprint
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Renderer = Callable[[Any, Optional[str], Optional[dict]], str]

RENDER_MODES = ("text/plain", "repr", "str")


def render_value(value: Any, mode: Optional[str] = "text/plain", context: Optional[dict] = None) -> str:
    """
    Render a value to text.

    Args:
        value: Object to render
        mode: Rendering mode tag (see module docstring)
        context: Extra rendering options; passed to pprint.pformat in
            "text/plain" mode and to ``__show__`` when the value defines it

    Returns:
        The textual rendering of ``value``
    """
    context = dict(context or {})

    show = getattr(type(value), "__show__", None)
    if show is not None:
        return show(value, mode, context)

    if mode == "text/plain":
        return pprint.pformat(value, **context)
    if mode is None or mode == "repr":
        return repr(value)
    if mode == "str":
        return str(value)

    raise ValueError(f"Unknown render mode: {mode!r} (expected one of {RENDER_MODES} or None)")
