"""
Sync Orchestrator - Coordinates the synchronization process.

This is the main entry point for sync operations.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from ...core.domain.entities import ProjectDocument, TaskRecord, TaskReference
from ...core.domain.events import (
    EventBus,
    SyncStarted,
    SyncCompleted,
    TaskSynced,
    TaskSkipped,
    TaskFailed,
)
from ...core.domain.staleness import should_sync, utc_now
from ...core.exceptions import LinkConflictError, ProjectMdError, ProjectFileError
from ...core.ports.config_provider import SyncConfig
from ...core.ports.issue_tracker import IssueTrackerPort, IssueTrackerError
from ...core.ports.task_store import TaskStorePort
from ..commands import CreateIssueCommand, UpdateIssueCommand
from .metadata import MetadataWriter
from .report import SyncAction, SyncOutcome, SyncReport


class SyncOrchestrator:
    """
    Orchestrates the one-way synchronization of task files to an issue tracker.

    For every task reference, in project order:
    1. Load the task record
    2. Skip it if unchanged since its last sync (unless forced)
    3. Create or update the remote issue
    4. Stamp the task file with issue_id/created_at/updated_at

    Any error while processing one task becomes a FAILED outcome for that
    task only; the remaining tasks are still attempted.
    """

    def __init__(
        self,
        tracker: IssueTrackerPort,
        store: TaskStorePort,
        config: Optional[SyncConfig] = None,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the orchestrator.

        Args:
            tracker: Issue tracker port
            store: Task store port
            config: Sync configuration (force, dry_run)
            event_bus: Optional event bus
            clock: Source of the current time, UTC
        """
        self.tracker = tracker
        self.store = store
        self.config = config or SyncConfig()
        self.event_bus = event_bus or EventBus()
        self.clock = clock
        self.metadata_writer = MetadataWriter(store)
        self.logger = logging.getLogger("SyncOrchestrator")

    # -------------------------------------------------------------------------
    # Main Entry Points
    # -------------------------------------------------------------------------

    def load_project(self, project_path: Path) -> ProjectDocument:
        """
        Load the project file.

        Raises:
            ProjectFileError: If the project file cannot be read or parsed
        """
        try:
            return self.store.load_project(project_path)
        except ProjectMdError as e:
            raise ProjectFileError(f"Cannot load project file {project_path}: {e}", cause=e)

    def sync(
        self,
        project_path: Path,
        progress_callback: Optional[Callable[[str, int, int], None]] = None,
    ) -> SyncReport:
        """
        Synchronize every task referenced by the project file.

        Args:
            project_path: Path to the project file
            progress_callback: Optional callback(task_path, current, total)

        Returns:
            SyncReport with one outcome per task reference

        Raises:
            ProjectFileError: If the project file itself is unusable
        """
        project_path = Path(project_path)
        project = self.load_project(project_path)
        project_root = project_path.parent

        report = SyncReport(dry_run=self.config.dry_run, force=self.config.force)
        total = len(project.tasks)

        self.event_bus.publish(SyncStarted(
            project_path=str(project_path),
            task_count=total,
            force=self.config.force,
            dry_run=self.config.dry_run,
        ))
        self.logger.info(f"Syncing {total} task(s) from {project_path}")

        new_links: dict[str, int] = {}
        for index, reference in enumerate(project.tasks, start=1):
            if progress_callback:
                progress_callback(str(reference.path), index, total)

            outcome = self.sync_task(project_root, reference)
            report.add(reference.path, outcome)

            if (
                reference.remote_status.is_new
                and outcome.issue_number is not None
                and not outcome.dry_run
            ):
                new_links[str(reference.path)] = outcome.issue_number

        self._link_new_tasks(project_path, new_links, report)

        counts = report.counts()
        self.event_bus.publish(SyncCompleted(
            project_path=str(project_path),
            created=len(report.created),
            updated=len(report.updated),
            skipped=len(report.skipped),
            failed=len(report.failed),
        ))
        self.logger.info(
            "Sync finished: "
            + ", ".join(f"{count} {action.value}" for action, count in counts.items())
        )
        return report

    def sync_task(self, project_root: Path, reference: TaskReference) -> SyncOutcome:
        """
        Synchronize a single task reference.

        Never raises for task-level problems; they come back as FAILED.
        """
        task_path = project_root / reference.path
        try:
            outcome = self._sync_task(task_path, reference)
        except ProjectMdError as e:
            return self._fail_task(reference, str(e))
        except Exception as e:
            # Failures outside the ProjectMdError hierarchy (tracker bugs, library errors)
            self.logger.debug(f"{reference.path}: unexpected error", exc_info=True)
            return self._fail_task(reference, f"Unexpected error: {type(e).__name__}: {e}")

        if outcome.action == SyncAction.SKIPPED:
            self.logger.debug(f"{reference.path}: unchanged, skipped")
            self.event_bus.publish(TaskSkipped(task_path=str(reference.path)))
        else:
            self.logger.info(f"{reference.path}: {outcome}")
            self.event_bus.publish(TaskSynced(
                task_path=str(reference.path),
                action=outcome.action.value,
                issue_number=outcome.issue_number,
                dry_run=outcome.dry_run,
            ))
        return outcome

    # -------------------------------------------------------------------------
    # Per-task State Machine
    # -------------------------------------------------------------------------

    def _sync_task(self, task_path: Path, reference: TaskReference) -> SyncOutcome:
        record = self.store.load_task(task_path)

        if not self.config.force:
            modified = self.store.modified_time(task_path)
            if not should_sync(modified, record.updated_at):
                return SyncOutcome.skipped(record.issue_id)

        if reference.remote_status.is_new:
            if record.issue_id is not None:
                # Linked on a previous run whose project file update was lost
                self.logger.warning(
                    f"{reference.path} is marked new but already has issue #{record.issue_id}; updating it"
                )
                return self._update(task_path, record, record.issue_id)
            return self._create(task_path, record)

        number = reference.remote_status.issue_number
        if record.issue_id is not None and record.issue_id != number:
            raise LinkConflictError(
                f"Project file links issue #{number} but task file has issue_id {record.issue_id}"
            )
        return self._update(task_path, record, number)

    def _create(self, task_path: Path, record: TaskRecord) -> SyncOutcome:
        result = CreateIssueCommand(
            tracker=self.tracker,
            title=record.title,
            body=record.body,
            labels=record.labels,
            dry_run=self.config.dry_run,
        ).execute()

        if not result.success:
            raise IssueTrackerError(result.error or "Failed to create issue")
        if result.dry_run:
            return SyncOutcome.created(None, dry_run=True)

        number = result.data.number
        self.metadata_writer.persist(task_path, record, number, is_first_link=True, now=self.clock())
        return SyncOutcome.created(number)

    def _update(self, task_path: Path, record: TaskRecord, number: int) -> SyncOutcome:
        result = UpdateIssueCommand(
            tracker=self.tracker,
            issue_number=number,
            title=record.title,
            body=record.body,
            labels=record.labels,
            dry_run=self.config.dry_run,
        ).execute()

        if not result.success:
            raise IssueTrackerError(result.error or f"Failed to update issue #{number}", issue_number=number)
        if result.dry_run:
            return SyncOutcome.updated(number, dry_run=True)

        self.metadata_writer.persist(task_path, record, number, is_first_link=False, now=self.clock())
        return SyncOutcome.updated(number)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _fail_task(self, reference: TaskReference, error: str) -> SyncOutcome:
        self.logger.error(f"{reference.path}: {error}")
        self.event_bus.publish(TaskFailed(task_path=str(reference.path), error=error))
        return SyncOutcome.failed(error)

    def _link_new_tasks(self, project_path: Path, links: dict[str, int], report: SyncReport) -> None:
        """Write issue numbers of newly created tasks back into the project file."""
        if not links:
            return
        try:
            self.store.link_tasks(project_path, links)
        except ProjectMdError as e:
            # Task files already carry issue_id, so the next run reconciles
            report.add_warning(f"Could not update {project_path} with new issue numbers: {e}")
            self.logger.warning(f"Could not update {project_path}: {e}")
