"""
Application Layer - Use cases, commands, and orchestration.

This layer contains:
- commands/: Individual write operations (CreateIssue, UpdateIssue)
- sync/: Synchronization orchestrator, metadata writer and report
"""

from .sync import (
    SyncOrchestrator,
    SyncReport,
    SyncOutcome,
    SyncAction,
    MetadataWriter,
    apply_sync_metadata,
)
from .commands import (
    Command,
    CommandResult,
    CreateIssueCommand,
    UpdateIssueCommand,
)

__all__ = [
    "SyncOrchestrator",
    "SyncReport",
    "SyncOutcome",
    "SyncAction",
    "MetadataWriter",
    "apply_sync_metadata",
    "Command",
    "CommandResult",
    "CreateIssueCommand",
    "UpdateIssueCommand",
]
