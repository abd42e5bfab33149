import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dictation_target.dom import snapshot_from_tree  # noqa: E402
from dictation_target.runner import build_report, find_input, locate_targets  # noqa: E402

CHAT_URL = "https://chat.example.test/c/123"


def _el(tag, rect=(10, 10, 80, 30), attrs=None, children=(), text=""):
    return {"tag": tag, "rect": rect, "attrs": attrs or {}, "children": list(children), "text": text}


def _page(*children, url=CHAT_URL):
    return snapshot_from_tree(_el("body", rect=(0, 0, 1440, 900), children=children), url=url)


def _composer():
    return _el("textarea", rect=(700, 300, 700, 60), attrs={"id": "prompt", "placeholder": "Send a message"})


def _send(**extra_attrs):
    return _el("button", rect=(705, 1010, 40, 40), attrs={"id": "send", "type": "submit", **extra_attrs}, text="Send")


class StaticOverride:
    """Site hook that always picks elements by id."""

    def __init__(self, host, input_id=None, submit_id=None):
        self.host = host
        self.input_id = input_id
        self.submit_id = submit_id

    def matches(self, url):
        return self.host in url

    def find_input(self, document):
        return document.find(id=self.input_id) if self.input_id else None

    def find_submit(self, document, input_element):
        return document.find(id=self.submit_id) if self.submit_id else None


class BrokenOverride:
    def matches(self, url):
        return True

    def find_input(self, document):
        raise RuntimeError("selector syntax error")

    def find_submit(self, document, input_element):
        raise RuntimeError("selector syntax error")


def test_engine_report_is_ready():
    document = _page(_el("form", children=[_composer(), _send()]))

    report = build_report(document)

    assert report.status == "ready"
    assert report.input_source == "engine"
    assert report.button_source == "engine"
    assert report.input.get_attribute("id") == "prompt"
    assert report.button.get_attribute("id") == "send"
    assert report.input_score is not None and report.button_score is not None
    summary = report.summary()
    assert summary["status"] == "ready"
    assert summary["button"]["id"] == "send"


def test_no_input_reports_input_not_found():
    report = build_report(_page(_el("p", text="Nothing to type into")))
    assert report.status == "input_not_found"
    assert report.input is None and report.button is None
    assert report.summary()["input"] is None


def test_no_button_reports_submit_not_found():
    report = build_report(_page(_composer()))
    assert report.status == "submit_not_found"
    assert report.input.get_attribute("id") == "prompt"
    assert report.button is None


def test_only_disabled_button_reports_submit_disabled():
    report = build_report(_page(_el("form", children=[_composer(), _send(disabled="")])))
    assert report.status == "submit_disabled"
    assert report.button is None


def test_matching_override_wins_over_engine():
    document = _page(
        _composer(),
        _el("input", rect=(10, 10, 200, 30), attrs={"id": "custom"}),
        _send(),
        _el("button", rect=(10, 220, 60, 30), attrs={"id": "custom-go", "type": "button"}, text="Go"),
    )
    override = StaticOverride("chat.example.test", input_id="custom", submit_id="custom-go")

    report = build_report(document, [override])

    assert report.input.get_attribute("id") == "custom"
    assert report.button.get_attribute("id") == "custom-go"
    assert report.input_source == "override"
    assert report.button_source == "override"
    assert report.input_score is None
    assert report.status == "ready"


def test_override_returning_none_defers_to_engine():
    document = _page(_el("form", children=[_composer(), _send()]))
    override = StaticOverride("chat.example.test", submit_id="missing")

    report = build_report(document, [override])

    assert report.input_source == "engine"
    assert report.button_source == "engine"
    assert report.button.get_attribute("id") == "send"


def test_disabled_override_pick_reports_submit_disabled():
    document = _page(_el("form", children=[_composer(), _send(**{"aria-disabled": "true"})]))
    override = StaticOverride("chat.example.test", submit_id="send")

    report = build_report(document, [override])

    assert report.status == "submit_disabled"
    assert report.button_source == "override"


def test_non_matching_override_is_ignored():
    document = _page(_composer(), _el("input", attrs={"id": "custom"}))
    override = StaticOverride("other.example.test", input_id="custom")
    element, source, score = find_input(document, [override])
    assert element.get_attribute("id") == "prompt"
    assert source == "engine"
    assert score is not None


def test_raising_override_is_logged_and_skipped(caplog):
    caplog.set_level(logging.WARNING)
    document = _page(_el("form", children=[_composer(), _send()]))

    report = build_report(document, [BrokenOverride()])

    assert report.status == "ready"
    assert report.input_source == "engine"
    assert any("Site override" in record.message for record in caplog.records)


class FakePage:
    url = CHAT_URL
    viewport_size = {"width": 1440, "height": 900}

    def __init__(self, payload):
        self.payload = payload

    async def evaluate(self, script, arg=None):
        return self.payload


@pytest.mark.asyncio
async def test_locate_targets_captures_and_reports():
    payload = {
        "url": CHAT_URL,
        "viewport": {"width": 1440, "height": 900},
        "nodes": [
            {"uid": 0, "tag": "body", "parent": None, "rect": {"top": 0, "left": 0, "width": 1440, "height": 900}},
            {"uid": 1, "tag": "form", "parent": 0, "rect": {"top": 690, "left": 290, "width": 800, "height": 80}},
            {
                "uid": 2,
                "tag": "textarea",
                "parent": 1,
                "attributes": {"id": "prompt", "placeholder": "Send a message"},
                "rect": {"top": 700, "left": 300, "width": 700, "height": 60},
                "selector": "#prompt",
            },
            {
                "uid": 3,
                "tag": "button",
                "parent": 1,
                "attributes": {"id": "send", "aria-label": "Send message"},
                "rect": {"top": 705, "left": 1010, "width": 40, "height": 40},
                "selector": "#send",
            },
        ],
    }

    document, report = await locate_targets(FakePage(payload))

    assert len(document) == 4
    assert report.status == "ready"
    assert report.input.selector == "#prompt"
    assert report.button.selector == "#send"


@pytest.mark.asyncio
async def test_locate_targets_on_failed_capture_reports_input_not_found():
    document, report = await locate_targets(FakePage({"nodes": "garbage"}))
    assert len(document) == 0
    assert report.status == "input_not_found"
