"""
Rank-delta tracking between successive refreshes of an event.

rank_change = previous_rank - current_rank, so a positive value means the
track moved up. A track absent from the previous snapshot is an arrival
and gets rank_change = None.
"""

import threading
from dataclasses import replace
from typing import Dict, List, Mapping, Sequence

import structlog

from crowdset.models import ScoredTrack

logger = structlog.get_logger()


def ranks_of(tracks: Sequence[ScoredTrack]) -> Dict[str, int]:
    """1-based rank of every identity in a ranked list."""
    return {track.identity: rank for rank, track in enumerate(tracks, start=1)}


def diff_ranks(previous: Mapping[str, int], current: Sequence[ScoredTrack]) -> List[ScoredTrack]:
    """
    Annotate a ranked list with movement against a previous snapshot.

    Args:
        previous: identity -> 1-based rank from the prior refresh
        current: Ranked tracks of this refresh

    Returns:
        Copies of the current tracks with rank_change set
    """
    annotated = []
    for rank, track in enumerate(current, start=1):
        prev_rank = previous.get(track.identity)
        change = None if prev_rank is None else prev_rank - rank
        annotated.append(replace(track, rank_change=change))
    return annotated


class RankDeltaTracker:
    """
    Holds one generation of prior ranks per (event, list) slot.

    Every event has one reentrant lock, kept for the tracker's lifetime.
    Callers that update several lists of one refresh hold lock(event_id)
    across all of them so readers never see a mix of generations.
    Different events never share a lock or a snapshot.
    """

    def __init__(self):
        self._snapshots: Dict[str, Dict[str, Dict[str, int]]] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def lock(self, event_id: str) -> threading.RLock:
        """The event's lock; reentrant so refresh() may run while it is held."""
        with self._guard:
            lock = self._locks.get(event_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[event_id] = lock
            return lock

    def refresh(
        self,
        event_id: str,
        tracks: Sequence[ScoredTrack],
        list_name: str = "favorites",
    ) -> List[ScoredTrack]:
        """
        Diff a ranked list against the stored snapshot, then replace it.

        Args:
            event_id: Event the list belongs to
            tracks: Ranked tracks of this refresh
            list_name: Which ranked list of the event this is

        Returns:
            Tracks annotated with rank_change
        """
        with self.lock(event_id):
            event_snapshots = self._snapshots.setdefault(event_id, {})
            previous = event_snapshots.get(list_name, {})
            annotated = diff_ranks(previous, tracks)
            event_snapshots[list_name] = ranks_of(tracks)

        logger.debug(
            "Rank snapshot replaced",
            event_id=event_id,
            list_name=list_name,
            track_count=len(annotated),
            arrivals=sum(1 for t in annotated if t.rank_change is None),
        )
        return annotated

    def snapshot(self, event_id: str, list_name: str = "favorites") -> Dict[str, int]:
        """Copy of the stored ranks; empty before the first refresh."""
        with self.lock(event_id):
            return dict(self._snapshots.get(event_id, {}).get(list_name, {}))

    def clear(self, event_id: str):
        """Forget an event's snapshots. Its lock stays in place."""
        with self.lock(event_id):
            self._snapshots.pop(event_id, None)
