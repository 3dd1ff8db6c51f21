"""
Live DJ queue

Queue order is the play order. Nothing in the engine reorders it on its
own; only the methods below, called on a user action, change it.

Removing a track moves it to the trash. Returning a track to its list
drops it from the queue without trashing it, and a hidden anthem returned
that way shows up again in the hidden-anthems bucket.
"""

import threading
from dataclasses import replace
from typing import FrozenSet, List, Optional, Sequence, Set

import structlog

from crowdset.models import QueueEntry, QueueSource, ScoredTrack

logger = structlog.get_logger()


class LiveQueue:
    """Mutable play queue of one event."""

    def __init__(self, event_id: str):
        self.event_id = event_id
        self._entries: List[QueueEntry] = []
        self._trash: List[QueueEntry] = []
        self._removed_anthems: Set[str] = set()
        self._current_index = 0
        self._counter = 0
        self._lock = threading.Lock()

    @property
    def entries(self) -> List[QueueEntry]:
        with self._lock:
            return list(self._entries)

    @property
    def trash(self) -> List[QueueEntry]:
        with self._lock:
            return list(self._trash)

    @property
    def current_index(self) -> int:
        with self._lock:
            return self._current_index

    @property
    def current(self) -> Optional[QueueEntry]:
        with self._lock:
            if not self._entries:
                return None
            return self._entries[self._current_index]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _find(self, entries: List[QueueEntry], identity: str) -> int:
        for index, entry in enumerate(entries):
            if entry.identity == identity:
                return index
        return -1

    def _next_order(self) -> int:
        order = self._counter
        self._counter += 1
        return order

    def _clamp_current(self):
        if not self._entries:
            self._current_index = 0
        else:
            self._current_index = min(self._current_index, len(self._entries) - 1)

    def _pop(self, identity: str) -> Optional[QueueEntry]:
        index = self._find(self._entries, identity)
        if index < 0:
            return None
        entry = self._entries.pop(index)
        if index < self._current_index:
            self._current_index -= 1
        self._clamp_current()
        return entry

    def add(self, track: ScoredTrack, source: QueueSource) -> QueueEntry:
        """
        Append a track to the end of the queue.

        A track already queued is not added twice; its existing entry is
        returned.
        """
        with self._lock:
            index = self._find(self._entries, track.identity)
            if index >= 0:
                return self._entries[index]

            entry = QueueEntry(track=track, source=source, order=self._next_order())
            self._entries.append(entry)
            position = len(self._entries)
            if source == QueueSource.HIDDEN_ANTHEMS:
                self._removed_anthems.add(track.identity)

        logger.info(
            "Track queued",
            event_id=self.event_id,
            track=track.identity,
            source=source.value,
            position=position,
        )
        return entry

    def remove(self, identity: str) -> Optional[QueueEntry]:
        """Move a queued track to the trash. Returns None if not queued."""
        with self._lock:
            entry = self._pop(identity)
            if entry is not None:
                self._trash.append(entry)

        if entry is not None:
            logger.info("Track moved to trash", event_id=self.event_id, track=identity)
        return entry

    def restore(self, identity: str) -> Optional[QueueEntry]:
        """Take a track out of the trash and append it to the queue."""
        with self._lock:
            index = self._find(self._trash, identity)
            if index < 0:
                return None
            trashed = self._trash.pop(index)
            if self._find(self._entries, identity) >= 0:
                return None
            entry = replace(trashed, order=self._next_order())
            self._entries.append(entry)

        logger.info("Track restored from trash", event_id=self.event_id, track=identity)
        return entry

    def return_to_list(self, identity: str) -> Optional[QueueEntry]:
        """
        Undo an add: drop the track from the queue without trashing it.

        A hidden anthem becomes visible in the hidden-anthems list again.
        Tip requests have no list to return to and are simply dropped.
        """
        with self._lock:
            entry = self._pop(identity)
            if entry is not None and entry.source == QueueSource.HIDDEN_ANTHEMS:
                self._removed_anthems.discard(identity)

        if entry is not None:
            logger.info(
                "Track returned to list",
                event_id=self.event_id,
                track=identity,
                source=entry.source.value,
            )
        return entry

    def move(self, from_index: int, to_index: int):
        """
        Move the entry at from_index to to_index.

        The currently playing entry stays current.

        Raises:
            IndexError: If either index is outside the queue
        """
        with self._lock:
            size = len(self._entries)
            if not (0 <= from_index < size and 0 <= to_index < size):
                raise IndexError(f"Queue move {from_index} -> {to_index} out of range (size {size})")

            entry = self._entries.pop(from_index)
            self._entries.insert(to_index, entry)

            current = self._current_index
            if from_index == current:
                self._current_index = to_index
            elif from_index < current <= to_index:
                self._current_index = current - 1
            elif to_index <= current < from_index:
                self._current_index = current + 1

    def skip_to_next(self) -> Optional[QueueEntry]:
        """Advance to the next entry; stays on the last one at the end."""
        with self._lock:
            if self._current_index < len(self._entries) - 1:
                self._current_index += 1
            return self._entries[self._current_index] if self._entries else None

    def play(self, index: int) -> QueueEntry:
        with self._lock:
            if not 0 <= index < len(self._entries):
                raise IndexError(f"No queue entry at {index}")
            self._current_index = index
            return self._entries[index]

    def recent(self, count: int) -> List[QueueEntry]:
        """The last `count` entries, oldest first."""
        with self._lock:
            if count <= 0:
                return []
            return list(self._entries[-count:])

    def hidden_anthem_exclusions(self) -> FrozenSet[str]:
        """Identities to keep out of the hidden-anthems bucket this session."""
        with self._lock:
            return frozenset(self._removed_anthems)

    def apply_order(self, identities: Sequence[str]):
        """
        Reorder the queue explicitly, e.g. after accepting a suggested order.

        Listed identities come first in the given order; queued entries that
        are not listed keep their relative order after them. Unknown
        identities are ignored. The current entry stays current.
        """
        with self._lock:
            current = self._entries[self._current_index] if self._entries else None
            by_identity = {entry.identity: entry for entry in self._entries}

            ordered: List[QueueEntry] = []
            placed: Set[str] = set()
            for identity in identities:
                if identity in by_identity and identity not in placed:
                    ordered.append(by_identity[identity])
                    placed.add(identity)
            ordered.extend(e for e in self._entries if e.identity not in placed)

            self._entries = ordered
            if current is not None:
                self._current_index = ordered.index(current)

        logger.info("Queue reordered", event_id=self.event_id, entry_count=len(ordered))
