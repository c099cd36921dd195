"""Static configuration for dedupguard.

All user-editable settings (ruleset location, logging) live in a single JSON
file for quick edits without touching Python. A ``.env`` file in the working
directory may override the ruleset path (``DEDUPGUARD_RULESET``) and the log
level (``DEDUPGUARD_LOG_LEVEL``).
"""

import json
import os

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Ruleset document edited by the CLI when --ruleset is not given.
_ruleset = _CONFIG.get("ruleset", {})
RULESET_PATH = _resolve_path(
    os.getenv("DEDUPGUARD_RULESET") or _ruleset.get("path", "rulesets/api-deduplication.yaml")
)

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
