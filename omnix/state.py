"""Application state: refresh requests, errors and a cache of flakes."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger("om.gui")


@dataclass(order=True)
class Refresh:
    """A counter of user requests to update some piece of data."""

    idx: int = 0

    def __str__(self) -> str:
        return str(self.idx)

    def request_refresh(self) -> None:
        """Record one more refresh request."""
        logger.info("🔄 Requesting refresh of a signal")
        self.idx += 1


class AppError(Exception):
    """Catch-all error shown to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AppError):
            return NotImplemented
        return self.message == other.message

    def __hash__(self) -> int:
        return hash(self.message)


@dataclass
class FlakeCache:
    """Flakes keyed by URL, with the time each was last fetched.

    A URL mapped to ``None`` is known but has not been fetched yet.
    """

    entries: dict[str, tuple[float, Any] | None] = field(default_factory=dict)
    clock: Callable[[], float] = field(default=time.time, compare=False, repr=False)

    @classmethod
    def with_suggestions(cls, urls: Iterable[str]) -> FlakeCache:
        """A cache that knows the given URLs without any fetched flake."""
        return cls({url: None for url in urls})

    def get(self, url: str) -> Any | None:
        """Look up a cached flake by URL."""
        entry = self.entries.get(url)
        if entry is None:
            return None
        fetched, flake = entry
        logger.info("Cache hit for %s (updated: %s)", url, fetched)
        return flake

    def update(self, url: str, flake: Any) -> None:
        """Store a freshly fetched flake."""
        logger.info("Caching flake [%s]", url)
        self.entries[url] = (self.clock(), flake)

    def recent_flakes(self) -> list[str]:
        """URLs, most recently updated first, then those never fetched."""
        ordered = sorted(
            self.entries.items(),
            key=lambda item: (item[1] is not None, item[1][0] if item[1] else 0.0),
            reverse=True,
        )
        return [url for url, _ in ordered]