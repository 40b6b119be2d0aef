"""
Sync Module - Orchestration of synchronization between task files and the issue tracker.
"""

from .orchestrator import SyncOrchestrator
from .metadata import MetadataWriter, apply_sync_metadata
from .report import SyncAction, SyncOutcome, SyncReport

__all__ = [
    "SyncOrchestrator",
    "MetadataWriter",
    "apply_sync_metadata",
    "SyncAction",
    "SyncOutcome",
    "SyncReport",
]
