"""Core data models for the dictation target engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from .dom import ElementLike


class ScoreWeights(BaseModel):
    """Additive bonuses and penalties used by the input and button scorers."""

    model_config = ConfigDict(frozen=True)

    # input scoring
    input_in_viewport: int = 5
    input_chat_keyword: int = 3
    input_search_keyword: int = 2
    input_textarea: int = 2
    input_area_divisor: int = 5000
    input_area_cap: int = 5
    input_content_editable: int = -1

    # button scoring
    button_text_keyword: int = 5
    button_value_keyword: int = 4
    button_id_keyword: int = 3
    button_class_keyword: int = 2
    button_submit_type: int = 10
    button_role: int = 2
    button_sole_control: int = 8
    button_send_icon: int = 5
    button_right_of_input: int = 3
    button_below_input: int = 3
    button_chat_quadrant: int = 4
    button_send_image: int = 3
    button_svg_icon: int = 2
    button_disabled: int = -20

    # geometry thresholds in CSS pixels
    near_horizontal_px: float = 100.0
    near_vertical_px: float = 50.0


DEFAULT_WEIGHTS = ScoreWeights()


@dataclass
class Candidate:
    element: ElementLike
    score: int


ButtonStatus = Literal["found", "disabled", "not_found"]


@dataclass
class ButtonResolution:
    """Outcome of one submit-button resolution, including the ranking it came from."""

    button: Optional[ElementLike] = None
    top: Optional[Candidate] = None
    top_disabled: bool = False
    candidates: List[Candidate] = field(default_factory=list)

    @property
    def status(self) -> ButtonStatus:
        if self.button is not None:
            return "found"
        if self.top is not None and self.top_disabled:
            return "disabled"
        return "not_found"


TargetStatus = Literal["ready", "input_not_found", "submit_not_found", "submit_disabled"]


class TargetReport(BaseModel):
    """What the caller found on a page, with the element references used to act on it."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    url: str
    status: TargetStatus
    input: Optional[Any] = None
    button: Optional[Any] = None
    input_source: Optional[Literal["override", "engine"]] = None
    button_source: Optional[Literal["override", "engine"]] = None
    input_score: Optional[int] = None
    button_score: Optional[int] = None

    def summary(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "status": self.status,
            "input": _describe(self.input),
            "input_source": self.input_source,
            "input_score": self.input_score,
            "button": _describe(self.button),
            "button_source": self.button_source,
            "button_score": self.button_score,
        }


def _describe(element: Optional[ElementLike]) -> Optional[Dict[str, Any]]:
    if element is None:
        return None
    return {
        "tag": element.tag,
        "selector": getattr(element, "selector", None),
        "id": element.get_attribute("id"),
        "text": (element.text_content or "")[:80] or None,
    }


__all__ = [
    "ButtonResolution",
    "Candidate",
    "DEFAULT_WEIGHTS",
    "ScoreWeights",
    "TargetReport",
]
