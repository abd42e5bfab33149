"""CLI entrypoint: locate the dictation input and submit control on a page."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from playwright.async_api import Error as PlaywrightError, async_playwright

from dictation_target.config import DEFAULT_BROWSER, LOG_DIR, PLAYWRIGHT_CHANNEL, VIEWPORT
from dictation_target.runner import locate_targets
from dictation_target.writer import append_text, click_submit, write_text

BROWSERS = {"chromium", "chrome", "firefox", "webkit"}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Find where dictated text would go on a web page.")
    parser.add_argument("--url", required=True, help="Page to inspect.")
    parser.add_argument(
        "--browser",
        default=DEFAULT_BROWSER,
        help="Browser engine to use (chrome, chromium, firefox, or webkit).",
    )
    parser.add_argument("--headless", action="store_true", help="Run the browser in headless mode.")
    parser.add_argument("--text", help="Dictated text to write into the detected input.")
    parser.add_argument("--append", action="store_true", help="Append --text instead of replacing the field content.")
    parser.add_argument("--submit", action="store_true", help="Press the detected submit control afterwards.")
    parser.add_argument("--log-level", default="INFO", help="Python logging level.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    log_file = _configure_logging(args.log_level)
    logging.info("Log file: %s", log_file)
    _validate_args(args)
    report = asyncio.run(run(args))
    print(json.dumps(report, ensure_ascii=False, indent=2))


async def run(args: argparse.Namespace) -> dict:
    async with async_playwright() as playwright:
        engine_name = "chromium" if args.browser == "chrome" else args.browser
        launch_kwargs = {"headless": args.headless}
        if args.browser == "chrome" and PLAYWRIGHT_CHANNEL:
            launch_kwargs["channel"] = PLAYWRIGHT_CHANNEL
        browser = await getattr(playwright, engine_name).launch(**launch_kwargs)
        try:
            page = await browser.new_page(viewport=VIEWPORT)
            try:
                await page.goto(args.url, wait_until="domcontentloaded")
            except PlaywrightError as exc:
                raise SystemExit(f"Navigation to {args.url} failed: {exc}") from exc

            _, report = await locate_targets(page)
            summary = report.summary()
            if args.text is not None and report.input is not None:
                writer = append_text if args.append else write_text
                summary["written"] = await writer(page, report.input, args.text)
            if args.submit and report.status == "ready":
                summary["submitted"] = await click_submit(page, report.button)
            return summary
        finally:
            await browser.close()


def _validate_args(args: argparse.Namespace) -> None:
    args.browser = args.browser.lower()
    if args.browser not in BROWSERS:
        raise SystemExit(f"Unsupported browser: {args.browser}")
    if args.append and args.text is None:
        raise SystemExit("--append requires --text")


def _configure_logging(log_level: str) -> Path:
    level = getattr(logging, log_level.upper(), logging.INFO)
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_file = LOG_DIR / f"dictation-target-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}.log"
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=[stream_handler, file_handler])
    return log_file


if __name__ == "__main__":
    main()
