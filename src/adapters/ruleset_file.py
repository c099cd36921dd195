"""Ruleset file adapter.

Supplies the controller's input text from disk and persists what it emits.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER = logging.getLogger(__name__)


class RulesetFile:
    """Thin file wrapper used as the controller's text channel."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def read_text(self) -> str:
        """Return the document text, or an empty string when the file is absent."""

        if not self.exists():
            LOGGER.debug("Ruleset file %s does not exist yet", self._path)
            return ""
        return self._path.read_text(encoding="utf-8")

    def write_text(self, text: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(text, encoding="utf-8")
        LOGGER.info("Wrote ruleset to %s", self._path)
