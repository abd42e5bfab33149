"""Caller-side flow: consult site overrides, then fall back to the generic engine."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence, Tuple

from playwright.async_api import Page

from .disabled import is_disabled
from .dom import DocumentLike, ElementLike, SnapshotDocument
from .models import TargetReport
from .perception import capture_document
from .resolver import rank_inputs, resolve_button_candidates

logger = logging.getLogger(__name__)


class SiteOverride(Protocol):
    """Per-site detection hook tried before the engine. Returning None defers to the engine."""

    def matches(self, url: str) -> bool: ...

    def find_input(self, document: DocumentLike) -> Optional[ElementLike]: ...

    def find_submit(self, document: DocumentLike, input_element: ElementLike) -> Optional[ElementLike]: ...


def _active_override(url: str, overrides: Sequence[SiteOverride]) -> Optional[SiteOverride]:
    for override in overrides:
        try:
            if override.matches(url):
                return override
        except Exception as exc:  # noqa: BLE001
            logger.warning("Site override %r failed to match %s: %s", override, url, exc)
    return None


def find_input(
    document: SnapshotDocument, overrides: Sequence[SiteOverride] = ()
) -> Tuple[Optional[ElementLike], Optional[str], Optional[int]]:
    """Return ``(element, source, score)``; ``score`` is only known for engine picks."""
    override = _active_override(document.url, overrides)
    if override is not None:
        try:
            element = override.find_input(document)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Site override input lookup failed: %s", exc)
            element = None
        if element is not None:
            return element, "override", None

    ranking = rank_inputs(document)
    if not ranking:
        return None, None, None
    return ranking[0].element, "engine", ranking[0].score


def find_submit_button(
    document: SnapshotDocument,
    input_element: ElementLike,
    overrides: Sequence[SiteOverride] = (),
) -> Tuple[Optional[ElementLike], Optional[str], Optional[int], bool]:
    """Return ``(button, source, score, disabled)`` for ``input_element``.

    ``disabled`` marks a submit control that was found but cannot be pressed: an
    override pick that is disabled, or an engine ranking whose enabled fallback ran out.
    """
    override = _active_override(document.url, overrides)
    if override is not None:
        try:
            button = override.find_submit(document, input_element)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Site override submit lookup failed: %s", exc)
            button = None
        if button is not None:
            return button, "override", None, is_disabled(button)

    resolution = resolve_button_candidates(document, input_element)
    if resolution.button is None:
        return None, None, None, resolution.status == "disabled"
    chosen = next((entry for entry in resolution.candidates if entry.element is resolution.button), None)
    return resolution.button, "engine", chosen.score if chosen else None, False


def build_report(document: SnapshotDocument, overrides: Sequence[SiteOverride] = ()) -> TargetReport:
    input_element, input_source, input_score = find_input(document, overrides)
    if input_element is None:
        logger.info("No input field found on %s", document.url)
        return TargetReport(url=document.url, status="input_not_found")

    button, button_source, button_score, disabled = find_submit_button(document, input_element, overrides)
    if disabled:
        status = "submit_disabled"
    elif button is not None:
        status = "ready"
    else:
        status = "submit_not_found"
    logger.info("Target resolution on %s: %s", document.url, status)
    return TargetReport(
        url=document.url,
        status=status,
        input=input_element,
        button=button,
        input_source=input_source,
        button_source=button_source,
        input_score=input_score,
        button_score=button_score,
    )


async def locate_targets(page: Page, overrides: Sequence[SiteOverride] = ()) -> Tuple[SnapshotDocument, TargetReport]:
    """Capture the page once and resolve both the dictation input and its submit control."""
    document = await capture_document(page)
    return document, build_report(document, overrides)


__all__ = ["SiteOverride", "build_report", "find_input", "find_submit_button", "locate_targets"]
