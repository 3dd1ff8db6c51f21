"""
Caller-correctable input errors raised by the engine.
"""


class CrowdsetError(Exception):
    """Base class for engine errors."""


class ConfigError(CrowdsetError, ValueError):
    """A FilterConfig knob is out of bounds or has min > max."""


class DuplicateRecordError(CrowdsetError, ValueError):
    """Two preference records share the same (event_id, guest_id)."""

    def __init__(self, event_id: str, guest_id: str):
        self.event_id = event_id
        self.guest_id = guest_id
        super().__init__(
            f"Duplicate preference record for event {event_id!r}, guest {guest_id!r}; "
            "use PreferenceStore.upsert to replace a submission"
        )
