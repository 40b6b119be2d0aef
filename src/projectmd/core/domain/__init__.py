"""
Domain - Entities, the staleness policy and domain events.
"""

from .entities import (
    RemoteStatus,
    TaskReference,
    TaskRecord,
    ProjectConfig,
    ProjectDocument,
)
from .staleness import (
    should_sync,
    parse_timestamp,
    format_timestamp,
    from_mtime_ns,
    to_mtime_ns,
    utc_now,
)
from .events import (
    DomainEvent,
    EventBus,
    SyncStarted,
    SyncCompleted,
    TaskSynced,
    TaskSkipped,
    TaskFailed,
)

__all__ = [
    "RemoteStatus",
    "TaskReference",
    "TaskRecord",
    "ProjectConfig",
    "ProjectDocument",
    "should_sync",
    "parse_timestamp",
    "format_timestamp",
    "from_mtime_ns",
    "to_mtime_ns",
    "utc_now",
    "DomainEvent",
    "EventBus",
    "SyncStarted",
    "SyncCompleted",
    "TaskSynced",
    "TaskSkipped",
    "TaskFailed",
]
