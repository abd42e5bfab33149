import logging
import sys
from pathlib import Path

import pytest
from playwright.async_api import Error as PlaywrightError

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dictation_target.config import SNAPSHOT_NODE_LIMIT  # noqa: E402
from dictation_target.perception import capture_document  # noqa: E402
from dictation_target.resolver import resolve_best_input  # noqa: E402


def _payload():
    return {
        "url": "https://chat.example.test/",
        "viewport": {"width": 1280, "height": 720},
        "nodes": [
            {
                "uid": 0,
                "tag": "body",
                "parent": None,
                "rect": {"top": 0, "left": 0, "width": 1280, "height": 720},
                "selector": "html > body:nth-of-type(1)",
            },
            {
                "uid": 1,
                "tag": "textarea",
                "parent": 0,
                "attributes": {"id": "prompt", "placeholder": "Send a message"},
                "rect": {"top": 600, "left": 200, "width": 800, "height": 60},
                "style": {"display": "block", "visibility": "visible", "opacity": "1"},
                "text": "",
                "laid_out": True,
                "selector": "#prompt",
            },
        ],
    }


class FakePage:
    url = "https://chat.example.test/"
    viewport_size = {"width": 1024, "height": 768}

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    async def evaluate(self, script, arg=None):
        self.calls.append(arg)
        if self.error:
            raise self.error
        return self.payload


@pytest.mark.asyncio
async def test_capture_builds_a_snapshot_document():
    page = FakePage(payload=_payload())

    document = await capture_document(page)

    assert len(document) == 2
    assert document.viewport.width == 1280
    best = resolve_best_input(document)
    assert best is not None
    assert best.selector == "#prompt"
    assert page.calls == [SNAPSHOT_NODE_LIMIT]


@pytest.mark.asyncio
async def test_capture_passes_node_limit():
    page = FakePage(payload=_payload())
    await capture_document(page, limit=50)
    assert page.calls == [50]


@pytest.mark.asyncio
async def test_capture_falls_back_to_page_viewport():
    payload = _payload()
    payload["viewport"] = {"width": 0, "height": 0}
    document = await capture_document(FakePage(payload=payload))
    assert document.viewport.width == 1024
    assert document.viewport.height == 768


@pytest.mark.asyncio
async def test_playwright_errors_yield_an_empty_document(caplog):
    caplog.set_level(logging.WARNING)
    page = FakePage(error=PlaywrightError("Execution context was destroyed"))

    document = await capture_document(page)

    assert len(document) == 0
    assert document.url == "https://chat.example.test/"
    assert resolve_best_input(document) is None
    assert any("DOM capture failed" in record.message for record in caplog.records)


@pytest.mark.asyncio
async def test_malformed_payload_yields_an_empty_document():
    page = FakePage(payload={"nodes": [{"tag": "div"}]})
    document = await capture_document(page)
    assert len(document) == 0
