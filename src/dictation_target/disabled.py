"""Disabled-state predicate for button-shaped elements."""

from __future__ import annotations

from typing import Optional

from .dom import ElementLike, class_tokens
from .guards import fail_closed

DISABLED_CLASS_MARKERS = ("disabled", "cursor-not-allowed", "opacity-50")
MIN_ENABLED_OPACITY = 0.9


@fail_closed(True)
def is_disabled(button: Optional[ElementLike]) -> bool:
    """Return True when the control cannot currently be activated. Missing buttons count as disabled."""
    if button is None:
        return True
    if button.get_attribute("disabled") is not None:
        return True
    if (button.get_attribute("aria-disabled") or "").strip().lower() == "true":
        return True
    tokens = class_tokens(button)
    if any(marker in tokens for marker in DISABLED_CLASS_MARKERS):
        return True
    return _opacity(button.computed_style().opacity) < MIN_ENABLED_OPACITY


def _opacity(value: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 1.0


__all__ = ["is_disabled", "DISABLED_CLASS_MARKERS"]
