"""Undo/redo over immutable session snapshots."""

from __future__ import annotations

import logging

from packages.session.state import DesignSession

logger = logging.getLogger(__name__)


class HistoryError(LookupError):
    """Raised when undo/redo runs off either end of the history."""


class SessionHistory:
    """Linear snapshot history.

    ``commit`` appends a new current session and drops any redo branch.  The
    oldest snapshots are discarded once *limit* is exceeded.
    """

    def __init__(self, initial: DesignSession | None = None, *, limit: int = 50):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self._limit = limit
        self._snapshots: list[DesignSession] = [initial or DesignSession()]
        self._index = 0

    @property
    def current(self) -> DesignSession:
        return self._snapshots[self._index]

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def __len__(self) -> int:
        return len(self._snapshots)

    def commit(self, session: DesignSession) -> DesignSession:
        if session is self.current:
            return session
        del self._snapshots[self._index + 1:]
        self._snapshots.append(session)
        overflow = len(self._snapshots) - self._limit
        if overflow > 0:
            del self._snapshots[:overflow]
        self._index = len(self._snapshots) - 1
        return session

    def undo(self) -> DesignSession:
        if not self.can_undo:
            raise HistoryError("Nothing to undo")
        self._index -= 1
        logger.debug("Undo → snapshot %d of %d", self._index + 1, len(self._snapshots))
        return self.current

    def redo(self) -> DesignSession:
        if not self.can_redo:
            raise HistoryError("Nothing to redo")
        self._index += 1
        logger.debug("Redo → snapshot %d of %d", self._index + 1, len(self._snapshots))
        return self.current

    def reset(self, initial: DesignSession | None = None) -> DesignSession:
        self._snapshots = [initial or DesignSession()]
        self._index = 0
        return self.current
