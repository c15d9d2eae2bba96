"""Per-viewer feed state.

Holds the latest `FeedSnapshot` for each viewer and guards it with a
generation counter: every fetch takes a token, and a result whose token is
no longer the newest for that viewer is dropped instead of overwriting
fresher state. Record deletion is two-phase (pending, then committed or
rolled back) so the snapshot only changes after the backend confirms.

At most `max_viewers` entries are kept; the least recently used viewer is
evicted first. Generations come from one store-wide counter, so a token
issued before an eviction never matches a later entry for the same viewer.
"""

import itertools
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from typing import Optional

from studyfeed.core.config import settings
from studyfeed.schemas.feed import FeedTab
from studyfeed.services.feed import FeedSnapshot, FeedView, build_view

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchToken:
    viewer_id: Optional[str]
    generation: int


@dataclass
class _Entry:
    generation: int = 0
    snapshot: Optional[FeedSnapshot] = None
    pending_deletes: set[str] = field(default_factory=set)
    # Last derived view and the inputs it was derived from
    memo_tab: Optional[FeedTab] = None
    memo_snapshot: Optional[FeedSnapshot] = None
    memo_pending: frozenset[str] = frozenset()
    memo_view: Optional[FeedView] = None


class FeedStore:
    def __init__(self, max_viewers: Optional[int] = None):
        self.max_viewers = max_viewers or settings.feed_store_max_viewers
        self._lock = threading.Lock()
        self._entries: OrderedDict[Optional[str], _Entry] = OrderedDict()
        self._generations = itertools.count(1)

    def viewer_count(self) -> int:
        with self._lock:
            return len(self._entries)

    def _entry(self, viewer_id: Optional[str]) -> _Entry:
        entry = self._entries.get(viewer_id)
        if entry is None:
            entry = self._entries[viewer_id] = _Entry()
            while len(self._entries) > self.max_viewers:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("evicting feed state for %s", evicted)
        else:
            self._entries.move_to_end(viewer_id)
        return entry

    # --- fetch lifecycle --- #

    def begin_fetch(self, viewer_id: Optional[str]) -> FetchToken:
        with self._lock:
            entry = self._entry(viewer_id)
            entry.generation = next(self._generations)
            return FetchToken(viewer_id, entry.generation)

    def apply_fetch(self, token: FetchToken, snapshot: FeedSnapshot) -> bool:
        """Store `snapshot` if `token` is still the newest fetch.

        Returns False (and keeps the current state) for stale tokens,
        including tokens whose viewer has been evicted since.
        """
        with self._lock:
            entry = self._entries.get(token.viewer_id)
            if entry is None or token.generation != entry.generation:
                logger.debug(
                    "dropping stale feed for %s (gen %s, current %s)",
                    token.viewer_id, token.generation, entry.generation if entry else None,
                )
                return False
            entry.snapshot = snapshot
            return True

    def invalidate(self, viewer_id: Optional[str]) -> None:
        """Forget the viewer's state; in-flight fetches become stale."""
        with self._lock:
            self._entries.pop(viewer_id, None)

    def snapshot(self, viewer_id: Optional[str]) -> Optional[FeedSnapshot]:
        with self._lock:
            entry = self._entries.get(viewer_id)
            return entry.snapshot if entry else None

    def view(self, viewer_id: Optional[str], tab: FeedTab) -> Optional[FeedView]:
        """Derived feed for `tab`, recomputed only when its inputs change."""
        with self._lock:
            entry = self._entries.get(viewer_id)
            if entry is None or entry.snapshot is None:
                return None
            pending = frozenset(entry.pending_deletes)
            if (
                entry.memo_view is not None
                and entry.memo_tab == tab
                and entry.memo_snapshot is entry.snapshot
                and entry.memo_pending == pending
            ):
                return entry.memo_view
            view = build_view(entry.snapshot, tab, pending)
            entry.memo_tab = tab
            entry.memo_snapshot = entry.snapshot
            entry.memo_pending = pending
            entry.memo_view = view
            return view

    # --- two-phase deletion --- #

    def begin_delete(self, viewer_id: Optional[str], record_id: str) -> bool:
        """Mark a record as pending deletion. Unknown ids are a no-op."""
        with self._lock:
            entry = self._entries.get(viewer_id)
            if entry is None or entry.snapshot is None:
                return False
            if not any(r.id == record_id for r in entry.snapshot.records):
                return False
            entry.pending_deletes.add(record_id)
            return True

    def is_pending(self, viewer_id: Optional[str], record_id: str) -> bool:
        with self._lock:
            entry = self._entries.get(viewer_id)
            return bool(entry and record_id in entry.pending_deletes)

    def commit_delete(self, viewer_id: Optional[str], record_id: str) -> None:
        """Drop the record from the snapshot after the backend confirmed.

        Fetches started before the deletion are made stale so they cannot
        bring the record back.
        """
        with self._lock:
            entry = self._entries.get(viewer_id)
            if entry is None:
                return
            entry.pending_deletes.discard(record_id)
            entry.generation = next(self._generations)
            if entry.snapshot is not None:
                entry.snapshot = replace(
                    entry.snapshot,
                    records=tuple(r for r in entry.snapshot.records if r.id != record_id),
                )

    def rollback_delete(self, viewer_id: Optional[str], record_id: str) -> None:
        with self._lock:
            entry = self._entries.get(viewer_id)
            if entry is not None:
                entry.pending_deletes.discard(record_id)


feed_store = FeedStore()
