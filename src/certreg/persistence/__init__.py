"""Audit persistence — append-only registry event log."""

from certreg.persistence.event_log import EventKind, EventLog, EventRecord

__all__ = [
    "EventKind",
    "EventLog",
    "EventRecord",
]
