"""
Metadata Writer - Record a successful remote call in the task file header.
"""

import dataclasses
import logging
from datetime import datetime
from pathlib import Path

from ...core.domain.entities import TaskRecord
from ...core.domain.staleness import format_timestamp
from ...core.ports.task_store import TaskStorePort


def apply_sync_metadata(
    record: TaskRecord,
    issue_number: int,
    is_first_link: bool,
    now: datetime,
) -> TaskRecord:
    """
    Return a copy of `record` stamped as synchronized with `issue_number`.

    created_at is only set on the first link (or when it was never set);
    updated_at is always set. Every other field is left untouched.
    """
    stamp = format_timestamp(now)
    created_at = record.created_at
    if is_first_link or created_at is None:
        created_at = stamp

    return dataclasses.replace(
        record,
        issue_id=issue_number,
        created_at=created_at,
        updated_at=stamp,
    )


class MetadataWriter:
    """Applies sync metadata to a record and persists it through a task store."""

    def __init__(self, store: TaskStorePort):
        self.store = store
        self.logger = logging.getLogger("MetadataWriter")

    def persist(
        self,
        path: Path,
        record: TaskRecord,
        issue_number: int,
        is_first_link: bool,
        now: datetime,
    ) -> TaskRecord:
        """
        Stamp and save a task record.

        Returns:
            The updated record, only once the write has completed

        Raises:
            TaskStoreError: If the file could not be rewritten; `record`
                itself is never modified
        """
        updated = apply_sync_metadata(record, issue_number, is_first_link, now)
        self.store.save_task(path, updated, synced_at=now)
        self.logger.debug(f"Stamped {path} with issue #{issue_number} at {updated.updated_at}")
        return updated
