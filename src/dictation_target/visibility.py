"""Visibility checks over computed style and geometry."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .dom import ElementLike, Viewport
from .guards import fail_closed


@fail_closed(False)
def is_visible(element: Optional[ElementLike]) -> bool:
    """Return True when the element is rendered, sized and laid out."""
    if element is None:
        return False
    style = element.computed_style()
    rect = element.bounding_rect()
    return (
        style.display != "none"
        and style.visibility != "hidden"
        and style.opacity != "0"
        and rect.width > 0
        and rect.height > 0
        and element.is_laid_out
    )


@fail_closed(False)
def is_in_viewport(element: Optional[ElementLike], viewport: Viewport) -> bool:
    """Return True when the element's rect lies entirely inside the viewport."""
    if element is None:
        return False
    rect = element.bounding_rect()
    return rect.top >= 0 and rect.left >= 0 and rect.bottom <= viewport.height and rect.right <= viewport.width


def filter_visible(elements: Iterable[ElementLike]) -> List[ElementLike]:
    return [element for element in elements if is_visible(element)]


__all__ = ["is_visible", "is_in_viewport", "filter_visible"]
