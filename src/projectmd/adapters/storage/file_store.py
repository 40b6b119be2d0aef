"""
File Task Store - Implements TaskStorePort on the local filesystem.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from ...core.ports.document_parser import DocumentParserPort
from ...core.ports.task_store import TaskStorePort, TaskStoreError
from ...core.domain.entities import ProjectDocument, TaskRecord
from ...core.domain.staleness import from_mtime_ns
from ..parsers.markdown import MarkdownParser
from .atomic import atomic_write_text


class FileTaskStore(TaskStorePort):
    """
    Task store backed by plain files.

    No locking is performed: two processes syncing the same tree at once
    is unsupported.
    """

    def __init__(self, parser: Optional[DocumentParserPort] = None):
        self.parser = parser or MarkdownParser()
        self.logger = logging.getLogger("FileTaskStore")

    # -------------------------------------------------------------------------
    # TaskStorePort Implementation
    # -------------------------------------------------------------------------

    def load_project(self, path: Path) -> ProjectDocument:
        content = self._read(path)
        return self.parser.parse_project(content)

    def load_task(self, path: Path) -> TaskRecord:
        content = self._read(path)
        return self.parser.parse_task(content)

    def modified_time(self, path: Path) -> datetime:
        try:
            return from_mtime_ns(os.stat(path).st_mtime_ns)
        except OSError as e:
            raise TaskStoreError(f"Cannot stat {path}: {e.strerror or e}", path=str(path), cause=e)

    def save_task(self, path: Path, record: TaskRecord, synced_at: datetime) -> None:
        content = self.parser.render_task(record)
        self._write(path, content, modified_time=synced_at)
        self.logger.debug(f"Wrote metadata to {path}")

    def link_tasks(self, project_path: Path, links: dict[str, int]) -> None:
        if not links:
            return
        content = self._read(project_path)
        updated = self.parser.relink_project(content, links)
        if updated != content:
            self._write(project_path, updated)
            self.logger.info(f"Linked {len(links)} new task(s) in {project_path}")

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _read(self, path: Path) -> str:
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError as e:
            raise TaskStoreError(f"File not found: {path}", path=str(path), cause=e)
        except (OSError, UnicodeDecodeError) as e:
            raise TaskStoreError(f"Cannot read {path}: {e}", path=str(path), cause=e)

    def _write(self, path: Path, content: str, modified_time: Optional[datetime] = None) -> None:
        try:
            atomic_write_text(path, content, modified_time=modified_time)
        except OSError as e:
            raise TaskStoreError(f"Cannot write {path}: {e.strerror or e}", path=str(path), cause=e)
