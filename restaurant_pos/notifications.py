"""Change feed built on the store's revision counters."""

from __future__ import annotations

import logging
from typing import Callable

from restaurant_pos.persistence import SqliteStore

logger = logging.getLogger(__name__)

ChangeListener = Callable[[str], None]


class ChangeFeed:
    """Reports which collections changed since the previous poll.

    Any process writing through a store on the same database bumps the
    revision counters, so polling also sees changes made from other
    terminals.
    """

    def __init__(self, store: SqliteStore) -> None:
        self.store = store
        self._listeners: list[ChangeListener] = []
        self._seen: dict[str, int] | None = None

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener and return a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def prime(self) -> None:
        """Remember current revisions without notifying anyone."""
        self._seen = self.store.revisions()

    def poll(self) -> list[str]:
        """Notify listeners of changed collections and return their names."""
        current = self.store.revisions()
        if self._seen is None:
            self._seen = current
            return []

        changed = [entity for entity, revision in current.items() if revision != self._seen.get(entity, 0)]
        self._seen = current
        for entity in changed:
            logger.debug("change_detected entity=%s revision=%s", entity, current[entity])
            for listener in list(self._listeners):
                listener(entity)
        return changed
