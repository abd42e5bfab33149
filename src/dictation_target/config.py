"""Configuration for the dictation target engine."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from a .env file when present.
load_dotenv()

VIEWPORT = {"width": 1440, "height": 900}

# Ancestor levels searched for buttons when an input has no form.
NEAR_INPUT_MAX_DEPTH = 10

DEFAULT_BROWSER = os.getenv("DICTATION_BROWSER", "chromium").lower()

PLAYWRIGHT_CHANNEL = os.getenv("PLAYWRIGHT_CHANNEL") or None

LOG_DIR = Path(os.getenv("DICTATION_LOG_DIR", "logs"))


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


SNAPSHOT_NODE_LIMIT = _int_env("DICTATION_SNAPSHOT_LIMIT", 20000)
