"""
Live preference records per event, upserted by (event_id, guest_id).
"""

import threading
from typing import Dict, List

import structlog

from crowdset.models import PreferenceRecord

logger = structlog.get_logger()


class PreferenceStore:
    """
    In-memory holder of the live preference record of every guest.

    A resubmission replaces the guest's previous record. Records are only
    dropped all at once when an event is archived.
    """

    def __init__(self):
        self._records: Dict[str, Dict[str, PreferenceRecord]] = {}
        self._lock = threading.Lock()

    def upsert(self, record: PreferenceRecord) -> bool:
        """
        Store a record, replacing the guest's previous one.

        Returns:
            True if an existing record was replaced
        """
        with self._lock:
            event_records = self._records.setdefault(record.event_id, {})
            replaced = record.guest_id in event_records
            event_records[record.guest_id] = record

        logger.info(
            "Stored guest preferences",
            event_id=record.event_id,
            guest_id=record.guest_id,
            replaced=replaced,
        )
        return replaced

    def records(self, event_id: str) -> List[PreferenceRecord]:
        with self._lock:
            return list(self._records.get(event_id, {}).values())

    def guest_count(self, event_id: str) -> int:
        with self._lock:
            return len(self._records.get(event_id, {}))

    def drop_event(self, event_id: str) -> int:
        """Forget every record of an archived event. Returns how many."""
        with self._lock:
            dropped = self._records.pop(event_id, {})
        logger.info("Dropped event preferences", event_id=event_id, record_count=len(dropped))
        return len(dropped)

