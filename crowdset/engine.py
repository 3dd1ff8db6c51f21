"""
Curation engine facade

Ties the pipeline together for request handlers:

    submit -> PreferenceStore
    refresh -> aggregate -> score -> classify -> rank deltas -> notification
    recommend -> smart filters (+ harmonic flow) over the event's live queue

State lives per event: preference records, live queue, rank snapshots and
the last refresh summary. Different events share nothing.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import structlog

from crowdset.aggregation import CrowdInsights, PreferenceStore, aggregate, crowd_insights
from crowdset.config import Settings, get_settings
from crowdset.filters import FilterConfig, apply_filters
from crowdset.ingestion import parse_preference_record
from crowdset.models import PreferenceRecord, ScoredTrack, TrackFeatures
from crowdset.ordering import suggest_set_order
from crowdset.queue import LiveQueue
from crowdset.refresh import RankDeltaTracker, RefreshNotification, evaluate_refresh
from crowdset.scoring import ScoringWeights, classify, score_all

logger = structlog.get_logger()

FAVORITES = "favorites"
HIDDEN_ANTHEMS = "hidden_anthems"


@dataclass(frozen=True)
class RefreshResult:
    """Everything a dashboard needs after one refresh of an event."""
    favorites: List[ScoredTrack] = field(default_factory=list)
    hidden_anthems: List[ScoredTrack] = field(default_factory=list)
    insights: Optional[CrowdInsights] = None
    notification: RefreshNotification = field(
        default_factory=lambda: RefreshNotification(should_notify=False)
    )


class CurationEngine:
    """Per-process entry point holding the state of every live event."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.weights = ScoringWeights(
            frequency=self.settings.crowd_frequency_weight,
            popularity=self.settings.crowd_popularity_weight,
        )
        self.store = PreferenceStore()
        self.tracker = RankDeltaTracker()
        self._queues: Dict[str, LiveQueue] = {}
        self._last_refresh: Dict[str, Tuple[List[str], int]] = {}
        self._lock = threading.Lock()

    def submit(self, record: PreferenceRecord) -> bool:
        """Store a guest's preferences. Returns True on resubmission."""
        return self.store.upsert(record)

    def submit_payload(self, payload: Dict[str, Any], event_id: str) -> PreferenceRecord:
        """Normalize a raw submission body and store it."""
        record = parse_preference_record(payload, event_id)
        self.submit(record)
        return record

    def queue(self, event_id: str) -> LiveQueue:
        with self._lock:
            queue = self._queues.get(event_id)
            if queue is None:
                queue = LiveQueue(event_id)
                self._queues[event_id] = queue
            return queue

    def refresh(
        self,
        event_id: str,
        theme_fit: Mapping[str, float],
        metadata: Optional[Mapping[str, TrackFeatures]] = None,
    ) -> RefreshResult:
        """
        Recompute the buckets of an event from its current records.

        Args:
            event_id: Event to refresh
            theme_fit: Track identity -> theme-fit percentage (0-100)
            metadata: Track identity -> externally supplied metadata

        Returns:
            RefreshResult with rank-annotated buckets, crowd insights and a
            refresh notification measured against the previous refresh
        """
        # One refresh of an event at a time, from reading records to swapping
        # both snapshots and the last-refresh summary
        with self.tracker.lock(event_id):
            records = self.store.records(event_id)
            result = aggregate(records)
            scored = score_all(result.tracks, theme_fit, result.total_guests, self.weights, metadata)

            buckets = classify(
                scored,
                favorites_limit=self.settings.favorites_limit,
                theme_min=self.settings.hidden_anthem_theme_min,
                popularity_max=self.settings.hidden_anthem_popularity_max,
                removed_anthems=self.queue(event_id).hidden_anthem_exclusions(),
            )

            favorites = self.tracker.refresh(event_id, buckets.favorites, FAVORITES)
            anthems = self.tracker.refresh(event_id, buckets.hidden_anthems, HIDDEN_ANTHEMS)

            current_ids = [t.identity for t in favorites]
            with self._lock:
                previous_ids, previous_guests = self._last_refresh.get(event_id, ([], 0))
                self._last_refresh[event_id] = (current_ids, result.total_guests)

        notification = evaluate_refresh(
            previous_ids,
            current_ids,
            previous_guests,
            result.total_guests,
            min_guests=self.settings.min_guests_for_recommendations,
            volatility_threshold=self.settings.rank_volatility_threshold,
            guest_batch=self.settings.guest_batch_threshold,
            top_n=self.settings.notify_top_n,
        )

        logger.info(
            "Event refreshed",
            event_id=event_id,
            guest_count=result.total_guests,
            favorite_count=len(favorites),
            hidden_anthem_count=len(anthems),
        )
        return RefreshResult(
            favorites=favorites,
            hidden_anthems=anthems,
            insights=crowd_insights(result),
            notification=notification,
        )

    def recommend(
        self,
        event_id: str,
        tracks: Sequence[ScoredTrack],
        config: FilterConfig,
        anchor: Optional[ScoredTrack] = None,
        reference_year: Optional[int] = None,
    ) -> List[ScoredTrack]:
        """Run the smart filters over candidates against the event's queue."""
        return apply_filters(
            tracks,
            config,
            recent_queue=self.queue(event_id).entries,
            anchor=anchor,
            average_track_minutes=self.settings.average_track_minutes,
            reference_year=reference_year,
        )

    def suggest_queue_order(self, event_id: str) -> List[str]:
        """Suggested play order of the event's queue; not applied."""
        queue = self.queue(event_id)
        current = queue.current
        return suggest_set_order(
            [entry.track for entry in queue.entries],
            start_identity=current.identity if current else None,
        )

    def archive_event(self, event_id: str):
        """Forget every piece of state held for an event."""
        with self.tracker.lock(event_id):
            self.store.drop_event(event_id)
            self.tracker.clear(event_id)
            with self._lock:
                self._queues.pop(event_id, None)
                self._last_refresh.pop(event_id, None)
        logger.info("Event archived", event_id=event_id)
