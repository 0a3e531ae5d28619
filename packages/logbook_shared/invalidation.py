"""Post-commit view invalidation signalling.

Mutating service operations notify a fixed set of named views once their
transaction has committed so the presentation layer can refresh cached pages.
"""

from __future__ import annotations

from typing import Iterable, Protocol

from packages.logbook_shared.logging import get_logger

_LOGGER = get_logger(__name__)


class ViewInvalidationSink(Protocol):
    """Receiver for post-commit view invalidation signals."""

    def invalidate(self, *, views: tuple[str, ...]) -> None:
        """Mark the named views stale."""


class LoggingViewInvalidationSink:
    """Default sink that records invalidations in the structured log only."""

    def invalidate(self, *, views: tuple[str, ...]) -> None:
        for view in views:
            _LOGGER.debug("View invalidated: %s", view)


def ordered_views(groups: Iterable[Iterable[str]]) -> tuple[str, ...]:
    """Flatten view groups into one tuple, first occurrence wins."""
    seen: dict[str, None] = {}
    for group in groups:
        for view in group:
            seen.setdefault(view, None)
    return tuple(seen)
