"""KeywordMatcher — one full pass over the watched file.

Every call rescans the file from the first line; nothing is remembered
between passes.  "Found" therefore means "present anywhere in the file right
now", not "appeared since the last check".
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from logwatcher.exceptions import FileUnavailableError
from logwatcher.logging import get_logger
from logwatcher.models import PresenceVector

log = get_logger(__name__)


class KeywordMatcher:
    """Plain, case-sensitive substring search with a per-line escape token.

    A line containing ``ignore_token`` never sets any slot, even when it also
    contains a keyword.  A keyword that itself contains the token can never
    match, which is the literal consequence of the rule.
    """

    def __init__(self, keywords: Sequence[str], ignore_token: str) -> None:
        if not keywords:
            raise ValueError("KeywordMatcher requires at least one keyword")
        self._keywords: tuple[str, ...] = tuple(keywords)
        self._ignore_token = ignore_token

    @property
    def keywords(self) -> tuple[str, ...]:
        return self._keywords

    def scan_lines(self, lines: Sequence[str]) -> PresenceVector:
        found = [False] * len(self._keywords)
        for line in lines:
            self._mark(line, found)
        return tuple(found)

    def scan(self, path: Path) -> PresenceVector:
        """Return the presence vector for the current content of *path*.

        Raises:
            FileUnavailableError: *path* cannot be opened for reading.
        """
        found = [False] * len(self._keywords)
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                for line in f:
                    self._mark(line, found)
        except FileNotFoundError as exc:
            raise FileUnavailableError(str(path)) from exc
        except OSError as exc:
            raise FileUnavailableError(str(path), f"cannot be read ({exc.strerror})") from exc

        log.debug("file_scanned", path=str(path), found=found)
        return tuple(found)

    def _mark(self, line: str, found: list[bool]) -> None:
        if self._ignore_token in line:
            return
        for i, keyword in enumerate(self._keywords):
            if keyword in line:
                found[i] = True
