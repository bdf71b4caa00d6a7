"""
Deduplication of discrete CNA events.

A canonical CNA event is identified by (profile, gene, alteration); which
sample exhibits it is a separate case-level association. The cache is
seeded with every persisted event when an import starts, so repeated
occurrences (in this file, or in earlier imports) reuse the same event id
and at most one canonical event row exists per triple.
"""

from __future__ import annotations

import logging
from typing import Dict, Tuple

from genomatrix.core.alteration import CnaEvent, CnaEventKey
from genomatrix.store.base import EventStore

logger = logging.getLogger(__name__)

__all__ = ['CnaEventDeduplicator']


class CnaEventDeduplicator:
    """
    Session-scoped cache of canonical CNA event ids.

    Examples:
        >>> dedup = CnaEventDeduplicator(store)
        >>> dedup.resolve(CnaEvent(1, 7, 207, 2))
        (1, True)
        >>> dedup.resolve(CnaEvent(2, 7, 207, 2))
        (1, False)
    """

    def __init__(self, store: EventStore):
        self.store = store
        self._cache: Dict[CnaEventKey, int] = {}
        self.n_new = 0
        self.n_reused = 0
        for event in store.get_all_cna_events():
            self._cache.setdefault(event.key, event.event_id)
        logger.info(f"Seeded CNA event cache with {len(self._cache):,} existing events")

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: CnaEventKey) -> bool:
        return key in self._cache

    def resolve(self, event: CnaEvent) -> Tuple[int, bool]:
        """
        Record a sample's event and return (event id, whether the event is new).

        A cache hit records only the case association under the cached id;
        a miss persists a new canonical event and caches its minted id.
        """
        cached_id = self._cache.get(event.key)
        if cached_id is not None:
            self.store.add_case_cna_event(event.with_event_id(cached_id), new_event=False)
            self.n_reused += 1
            return cached_id, False

        event_id = self.store.add_case_cna_event(event, new_event=True)
        self._cache[event.key] = event_id
        self.n_new += 1
        return event_id, True
