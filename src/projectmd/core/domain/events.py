"""
Domain Events - Things that happened during a sync run.

Events are immutable records of something that occurred.
They let the CLI and tests observe a run without coupling to it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional
from uuid import uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def event_type(self) -> str:
        """Get the event type name."""
        return self.__class__.__name__


@dataclass(frozen=True)
class SyncStarted(DomainEvent):
    """Event: A sync run started."""

    project_path: str = ""
    task_count: int = 0
    force: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class TaskSynced(DomainEvent):
    """Event: A task was pushed to the tracker (created or updated)."""

    task_path: str = ""
    action: str = ""  # created, updated
    issue_number: Optional[int] = None
    dry_run: bool = False


@dataclass(frozen=True)
class TaskSkipped(DomainEvent):
    """Event: A task was unchanged since its last sync."""

    task_path: str = ""


@dataclass(frozen=True)
class TaskFailed(DomainEvent):
    """Event: Processing a task failed."""

    task_path: str = ""
    error: str = ""


@dataclass(frozen=True)
class SyncCompleted(DomainEvent):
    """Event: A sync run completed."""

    project_path: str = ""
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0


class EventBus:
    """
    Simple event bus for publishing and subscribing to domain events.

    Handlers subscribed to DomainEvent receive every event.
    """

    def __init__(self):
        self._handlers: dict[type, list[Callable[[DomainEvent], None]]] = {}
        self._history: list[DomainEvent] = []

    def subscribe(self, event_type: type, handler: Callable[[DomainEvent], None]) -> None:
        """Subscribe a handler to an event type."""
        self._handlers.setdefault(event_type, []).append(handler)

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers."""
        self._history.append(event)

        for handler in self._handlers.get(type(event), []):
            handler(event)

        for handler in self._handlers.get(DomainEvent, []):
            handler(event)

    def get_history(self) -> list[DomainEvent]:
        """Get all published events."""
        return self._history.copy()

    def clear_history(self) -> None:
        """Clear event history."""
        self._history.clear()
