"""Enumerate editable and button-shaped candidates from a document."""

from __future__ import annotations

import logging
from typing import Dict, Hashable, Iterable, List, Optional

from .config import NEAR_INPUT_MAX_DEPTH
from .dom import DocumentLike, ElementLike, input_type_of, is_content_editable
from .guards import fail_closed
from .visibility import is_visible

logger = logging.getLogger(__name__)

TEXT_INPUT_TYPES = {"text", "search", "email", "password", "url", "tel", "number"}
BUTTON_INPUT_TYPES = {"submit", "button"}


def _is_editable_shape(element: ElementLike) -> bool:
    if is_content_editable(element):
        return True
    if element.tag == "textarea":
        return True
    return element.tag == "input" and input_type_of(element) in TEXT_INPUT_TYPES


def _aria_flag(element: ElementLike, name: str) -> bool:
    return (element.get_attribute(name) or "").strip().lower() == "true"


@fail_closed(False)
def is_input_element(element: Optional[ElementLike]) -> bool:
    """Return True for a visible, writable text control or content-editable element."""
    if element is None or not _is_editable_shape(element):
        return False
    if element.get_attribute("disabled") is not None or element.get_attribute("readonly") is not None:
        return False
    if _aria_flag(element, "aria-disabled") or _aria_flag(element, "aria-readonly"):
        return False
    return is_visible(element)


@fail_closed(False)
def is_button_shaped(element: Optional[ElementLike]) -> bool:
    if element is None:
        return False
    if element.tag == "button":
        return True
    return element.tag == "input" and input_type_of(element) in BUTTON_INPUT_TYPES


@fail_closed(factory=list)
def collect_inputs(document: DocumentLike) -> List[ElementLike]:
    inputs = [element for element in document.elements() if is_input_element(element)]
    logger.debug("Collected %s input candidates", len(inputs))
    return inputs


@fail_closed(factory=list)
def collect_buttons(document: DocumentLike) -> List[ElementLike]:
    """Visible button-shaped elements on the page. Disabled buttons are kept."""
    buttons = [element for element in document.elements() if is_button_shaped(element) and is_visible(element)]
    logger.debug("Collected %s page-wide button candidates", len(buttons))
    return buttons


@fail_closed(factory=list)
def collect_buttons_near(input_element: Optional[ElementLike]) -> List[ElementLike]:
    """Visible buttons in the input's form, or within ``NEAR_INPUT_MAX_DEPTH`` ancestors when it has none."""
    if input_element is None:
        return []
    found: Dict[Hashable, ElementLike] = {}
    form = input_element.form
    if form is not None:
        _add_buttons(found, form.descendants())
    else:
        ancestor = input_element.parent
        depth = 0
        while ancestor is not None and depth < NEAR_INPUT_MAX_DEPTH:
            _add_buttons(found, ancestor.descendants())
            ancestor = ancestor.parent
            depth += 1
    return [button for button in found.values() if is_visible(button)]


def _add_buttons(found: Dict[Hashable, ElementLike], elements: Iterable[ElementLike]) -> None:
    for element in elements:
        if is_button_shaped(element) and element.handle not in found:
            found[element.handle] = element


def unique_by_handle(*groups: Iterable[ElementLike]) -> List[ElementLike]:
    """Union of element groups keyed by node handle, first-seen order."""
    merged: Dict[Hashable, ElementLike] = {}
    for group in groups:
        for element in group:
            merged.setdefault(element.handle, element)
    return list(merged.values())


__all__ = [
    "TEXT_INPUT_TYPES",
    "collect_buttons",
    "collect_buttons_near",
    "collect_inputs",
    "is_button_shaped",
    "is_input_element",
    "unique_by_handle",
]
