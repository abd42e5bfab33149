"""Rank editable candidates by how likely they are the page's main composition field."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .dom import ElementLike, Viewport, is_content_editable
from .guards import fail_closed
from .models import DEFAULT_WEIGHTS, ScoreWeights
from .visibility import is_in_viewport, is_visible

KEYWORD_ATTRIBUTES = ("id", "name", "class", "placeholder", "aria-label", "title")
CHAT_KEYWORDS = ("chat", "message", "input", "comment", "送信", "入力")
SEARCH_KEYWORDS = ("search", "検索")


@dataclass(frozen=True)
class InputContext:
    viewport: Viewport
    weights: ScoreWeights


InputRule = Callable[[ElementLike, InputContext], int]


def _viewport_rule(element: ElementLike, ctx: InputContext) -> int:
    return ctx.weights.input_in_viewport if is_in_viewport(element, ctx.viewport) else 0


def _keyword_rule(element: ElementLike, ctx: InputContext) -> int:
    score = 0
    for name in KEYWORD_ATTRIBUTES:
        value = (element.get_attribute(name) or "").lower()
        if not value:
            continue
        if any(keyword in value for keyword in CHAT_KEYWORDS):
            score += ctx.weights.input_chat_keyword
        if any(keyword in value for keyword in SEARCH_KEYWORDS):
            score += ctx.weights.input_search_keyword
    return score


def _textarea_rule(element: ElementLike, ctx: InputContext) -> int:
    return ctx.weights.input_textarea if element.tag == "textarea" else 0


def _size_rule(element: ElementLike, ctx: InputContext) -> int:
    area = element.bounding_rect().area
    return min(ctx.weights.input_area_cap, int(area // ctx.weights.input_area_divisor))


def _content_editable_rule(element: ElementLike, ctx: InputContext) -> int:
    return ctx.weights.input_content_editable if is_content_editable(element) else 0


INPUT_RULES: List[Tuple[str, InputRule]] = [
    ("in_viewport", _viewport_rule),
    ("keywords", _keyword_rule),
    ("textarea", _textarea_rule),
    ("size", _size_rule),
    ("content_editable", _content_editable_rule),
]


@fail_closed(0)
def score_input(
    element: Optional[ElementLike],
    viewport: Viewport,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> int:
    """Sum ``INPUT_RULES`` for a visible element; hidden or missing elements score 0."""
    if element is None or not is_visible(element):
        return 0
    ctx = InputContext(viewport=viewport, weights=weights)
    return sum(rule(element, ctx) for _, rule in INPUT_RULES)


__all__ = ["INPUT_RULES", "InputContext", "score_input"]
