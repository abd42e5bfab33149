"""Rank button candidates by how likely they submit a given input's content."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .collector import is_button_shaped
from .disabled import is_disabled
from .dom import ElementLike, Rect, class_tokens, native_type_of
from .guards import fail_closed
from .models import DEFAULT_WEIGHTS, ScoreWeights

SUBMIT_KEYWORDS = ("送信", "投稿", "submit", "post", "send", "確定", "実行", "ok", "了解")
SEND_ICON_CLASSES = ("fa-paper-plane", "fa-send")
SEND_IMAGE_HINTS = ("send", "submit", "arrow")

# Feather-style paper plane: a diagonal stroke plus the plane outline.
PAPER_PLANE_LINE = ("22", "2", "11", "13")
PAPER_PLANE_POINTS = ("22", "2", "15", "22", "11", "13", "2", "9", "22", "2")


@dataclass(frozen=True)
class ButtonContext:
    input: ElementLike
    input_rect: Rect
    weights: ScoreWeights


ButtonRule = Callable[[ElementLike, ButtonContext], int]


def _keyword_rule(button: ElementLike, ctx: ButtonContext) -> int:
    w = ctx.weights
    text = (button.text_content or "").lower()
    value = (button.get_attribute("value") or "").lower()
    ident = (button.get_attribute("id") or "").lower()
    class_name = (button.get_attribute("class") or "").lower()
    score = 0
    for keyword in SUBMIT_KEYWORDS:
        if keyword in text:
            score += w.button_text_keyword
        if keyword in value:
            score += w.button_value_keyword
        if keyword in ident:
            score += w.button_id_keyword
        if keyword in class_name:
            score += w.button_class_keyword
    return score


def _submit_type_rule(button: ElementLike, ctx: ButtonContext) -> int:
    return ctx.weights.button_submit_type if native_type_of(button) == "submit" else 0


def _role_rule(button: ElementLike, ctx: ButtonContext) -> int:
    return ctx.weights.button_role if button.get_attribute("role") == "button" else 0


def _sole_control_rule(button: ElementLike, ctx: ButtonContext) -> int:
    form = button.form
    if form is None:
        return 0
    count = sum(1 for element in form.descendants() if is_button_shaped(element))
    return ctx.weights.button_sole_control if count == 1 else 0


def _send_icon_rule(button: ElementLike, ctx: ButtonContext) -> int:
    return ctx.weights.button_send_icon if has_send_icon(button) else 0


def _right_of_input_rule(button: ElementLike, ctx: ButtonContext) -> int:
    rect = button.bounding_rect()
    target = ctx.input_rect
    w = ctx.weights
    if abs(rect.left - target.right) < w.near_horizontal_px and abs(rect.top - target.top) < w.near_vertical_px:
        return w.button_right_of_input
    return 0


def _below_input_rule(button: ElementLike, ctx: ButtonContext) -> int:
    rect = button.bounding_rect()
    target = ctx.input_rect
    w = ctx.weights
    if rect.top > target.bottom and abs(rect.left - target.left) < w.near_horizontal_px:
        return w.button_below_input
    return 0


def _chat_quadrant_rule(button: ElementLike, ctx: ButtonContext) -> int:
    rect = button.bounding_rect()
    target = ctx.input_rect
    w = ctx.weights
    if rect.top > target.top and target.left < rect.left < target.right + w.near_horizontal_px:
        return w.button_chat_quadrant
    return 0


def _send_image_rule(button: ElementLike, ctx: ButtonContext) -> int:
    image = next((element for element in button.descendants() if element.tag == "img"), None)
    if image is None:
        return 0
    src = (image.get_attribute("src") or "").lower()
    return ctx.weights.button_send_image if any(hint in src for hint in SEND_IMAGE_HINTS) else 0


def _svg_rule(button: ElementLike, ctx: ButtonContext) -> int:
    has_svg = any(element.tag == "svg" for element in button.descendants())
    return ctx.weights.button_svg_icon if has_svg else 0


def _disabled_rule(button: ElementLike, ctx: ButtonContext) -> int:
    return ctx.weights.button_disabled if is_disabled(button) else 0


BUTTON_RULES: List[Tuple[str, ButtonRule]] = [
    ("keywords", _keyword_rule),
    ("submit_type", _submit_type_rule),
    ("role_button", _role_rule),
    ("sole_control", _sole_control_rule),
    ("send_icon", _send_icon_rule),
    ("right_of_input", _right_of_input_rule),
    ("below_input", _below_input_rule),
    ("chat_quadrant", _chat_quadrant_rule),
    ("send_image", _send_image_rule),
    ("svg_icon", _svg_rule),
    ("disabled", _disabled_rule),
]


def has_send_icon(button: ElementLike) -> bool:
    """Icon-font paper plane, a tagged SVG, or an SVG drawing the paper-plane geometry."""
    for element in button.descendants():
        if element.tag == "i" and any(token in SEND_ICON_CLASSES for token in class_tokens(element)):
            return True
        if element.tag == "svg":
            if element.get_attribute("data-icon") == "paper-plane":
                return True
            if _svg_draws_paper_plane(element):
                return True
    return False


def _svg_draws_paper_plane(svg: ElementLike) -> bool:
    has_line = False
    has_polygon = False
    for shape in svg.descendants():
        if shape.tag == "line":
            coords = tuple(_number_token(shape.get_attribute(name)) for name in ("x1", "y1", "x2", "y2"))
            has_line = has_line or coords == PAPER_PLANE_LINE
        elif shape.tag == "polygon":
            points = tuple(_number_token(token) for token in re.split(r"[\s,]+", (shape.get_attribute("points") or "").strip()) if token)
            has_polygon = has_polygon or points == PAPER_PLANE_POINTS
    return has_line and has_polygon


def _number_token(value: Optional[str]) -> str:
    if value is None:
        return ""
    token = value.strip()
    try:
        number = float(token)
    except ValueError:
        return token
    return str(int(number)) if number.is_integer() else str(number)


@fail_closed(0)
def score_button(
    button: Optional[ElementLike],
    input_element: Optional[ElementLike],
    weights: ScoreWeights = DEFAULT_WEIGHTS,
) -> int:
    """Sum ``BUTTON_RULES`` for a button relative to the input it would submit."""
    if button is None or input_element is None:
        return 0
    ctx = ButtonContext(input=input_element, input_rect=input_element.bounding_rect(), weights=weights)
    return sum(rule(button, ctx) for _, rule in BUTTON_RULES)


__all__ = ["BUTTON_RULES", "ButtonContext", "SUBMIT_KEYWORDS", "has_send_icon", "score_button"]
