"""Write dictated text into resolved elements and press resolved submit controls."""

from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError, Page

from .disabled import is_disabled
from .dom import ElementLike, is_content_editable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000


def _selector_for(element: Optional[ElementLike]) -> Optional[str]:
    if element is None:
        return None
    return getattr(element, "selector", None) or None


async def write_text(page: Page, element: Optional[ElementLike], text: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
    """Replace the element's content with ``text``."""
    selector = _selector_for(element)
    if not selector:
        return False
    locator = page.locator(selector).first
    try:
        await locator.fill(text, timeout=timeout_ms)
    except PlaywrightError as exc:
        logger.warning("write_text failed selector=%s: %s", selector, exc)
        return False
    return True


async def append_text(page: Page, element: Optional[ElementLike], text: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
    """Append ``text`` after whatever the element currently holds."""
    selector = _selector_for(element)
    if not selector:
        return False
    locator = page.locator(selector).first
    try:
        if is_content_editable(element):
            current = await locator.inner_text(timeout=timeout_ms)
        else:
            current = await locator.input_value(timeout=timeout_ms)
        await locator.fill(f"{current or ''}{text}", timeout=timeout_ms)
    except PlaywrightError as exc:
        logger.warning("append_text failed selector=%s: %s", selector, exc)
        return False
    return True


async def clear_text(page: Page, element: Optional[ElementLike], timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
    return await write_text(page, element, "", timeout_ms=timeout_ms)


async def click_submit(page: Page, button: Optional[ElementLike], timeout_ms: int = DEFAULT_TIMEOUT_MS) -> bool:
    """Click a resolved submit control. Disabled buttons are never clicked."""
    selector = _selector_for(button)
    if not selector or is_disabled(button):
        return False
    try:
        await page.locator(selector).first.click(timeout=timeout_ms)
    except PlaywrightError as exc:
        logger.warning("click_submit failed selector=%s: %s", selector, exc)
        return False
    return True


__all__ = ["append_text", "clear_text", "click_submit", "write_text"]
