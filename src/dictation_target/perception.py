"""Capture a live Playwright page into a ``SnapshotDocument``."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from playwright.async_api import Error as PlaywrightError, Page
from pydantic import ValidationError

from .config import SNAPSHOT_NODE_LIMIT
from .dom import DocumentSnapshot, SnapshotDocument, Viewport

logger = logging.getLogger(__name__)


_SNAPSHOT_SCRIPT = r"""
(limit) => {
  const cssEscape = (value) => {
    if (typeof CSS !== 'undefined' && CSS.escape) return CSS.escape(value);
    return value.replace(/([^\w-])/g, '\\$1');
  };

  const buildSelector = (el) => {
    if (el.id && document.querySelectorAll(`#${cssEscape(el.id)}`).length === 1) {
      return `#${cssEscape(el.id)}`;
    }
    const parts = [];
    let node = el;
    while (node && node.nodeType === Node.ELEMENT_NODE && node !== document.documentElement) {
      const tag = node.tagName.toLowerCase();
      let index = 1;
      let sibling = node.previousElementSibling;
      while (sibling) {
        if (sibling.tagName === node.tagName) index += 1;
        sibling = sibling.previousElementSibling;
      }
      parts.unshift(`${tag}:nth-of-type(${index})`);
      node = node.parentElement;
    }
    return parts.length ? `html > ${parts.join(' > ')}` : 'html';
  };

  const ownText = (el) => {
    let text = '';
    for (const child of el.childNodes) {
      if (child.nodeType === Node.TEXT_NODE) text += child.textContent;
    }
    return text.replace(/\s+/g, ' ').trim().slice(0, 200);
  };

  const elements = Array.from(document.querySelectorAll('*')).slice(0, limit);
  const uids = new Map();
  elements.forEach((el, idx) => uids.set(el, idx));

  const nodes = elements.map((el, idx) => {
    const attributes = {};
    for (const attr of Array.from(el.attributes)) {
      attributes[attr.name.toLowerCase()] = attr.value;
    }
    if (el.disabled === true) attributes.disabled = attributes.disabled || '';
    if (el.readOnly === true) attributes.readonly = attributes.readonly || '';
    const rect = el.getBoundingClientRect();
    const style = window.getComputedStyle(el);
    const parent = el.parentElement && uids.has(el.parentElement) ? uids.get(el.parentElement) : null;
    const laidOut = el instanceof HTMLElement ? el.offsetParent !== null : rect.width > 0 && rect.height > 0;
    return {
      uid: idx,
      tag: el.tagName.toLowerCase(),
      parent,
      attributes,
      rect: { top: rect.top, left: rect.left, width: rect.width, height: rect.height },
      style: { display: style.display, visibility: style.visibility, opacity: style.opacity },
      text: ownText(el),
      laid_out: laidOut,
      selector: buildSelector(el),
    };
  });

  return {
    url: window.location.href,
    viewport: {
      width: window.innerWidth || document.documentElement.clientWidth,
      height: window.innerHeight || document.documentElement.clientHeight,
    },
    nodes,
  };
}
"""


async def capture_document(page: Page, *, limit: Optional[int] = None) -> SnapshotDocument:
    """Serialize the page's main frame. Capture failures yield an empty document."""
    url = getattr(page, "url", "") or "about:blank"
    try:
        payload: Dict[str, Any] = await page.evaluate(_SNAPSHOT_SCRIPT, limit or SNAPSHOT_NODE_LIMIT)
    except PlaywrightError as exc:
        logger.warning("DOM capture failed for %s: %s", url, exc)
        return SnapshotDocument.empty(url=url, viewport=_page_viewport(page))

    try:
        snapshot = DocumentSnapshot.model_validate(payload or {"url": url})
    except ValidationError as exc:
        logger.warning("DOM capture returned an unexpected payload for %s: %s", url, exc)
        return SnapshotDocument.empty(url=url, viewport=_page_viewport(page))

    if not snapshot.viewport.width or not snapshot.viewport.height:
        snapshot.viewport = _page_viewport(page)
    logger.debug("Captured %s nodes from %s", len(snapshot.nodes), snapshot.url)
    return SnapshotDocument(snapshot)


def _page_viewport(page: Page) -> Viewport:
    size = getattr(page, "viewport_size", None)
    if isinstance(size, dict) and size.get("width") and size.get("height"):
        return Viewport(width=size["width"], height=size["height"])
    return Viewport()


__all__ = ["capture_document"]
