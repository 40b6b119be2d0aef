"""
projectmd - A plain text project management tool.

Keeps task files in sync, one way, with an issue tracker.

Usage:
    # Scaffold project.md and tasks/example.md
    projectmd init --repo owner/name

    # Show the task list (and live issue counts when a token is set)
    projectmd status --verbose

    # Push changed tasks to the tracker
    projectmd sync

    # Preview without touching the tracker or any file
    projectmd sync --dry-run

    # Push every task regardless of modification times
    projectmd sync --force

Environment Variables:
    GITHUB_TOKEN: Personal access token used for the GitHub backend
    GITHUB_API_URL: API root for GitHub Enterprise (optional)
    PROJECTMD_FILE: Default project file (optional)
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from ..adapters.config import EnvironmentConfigProvider
from ..adapters.github import GitHubAdapter
from ..adapters.storage import FileTaskStore
from ..application.sync import SyncOrchestrator
from ..core.domain.staleness import should_sync
from ..core.exceptions import ProjectMdError, ProjectFileError
from ..core.ports.issue_tracker import IssueTrackerError, IssueTrackerPort
from ..core.ports.config_provider import TrackerConfig
from .exit_codes import ExitCode
from .output import Console


PROJECT_TEMPLATE = """backend: {backend}
repo: {repo}
---

# My Project

Project description goes here.

## Tasks

* [new] - tasks/example.md - Example task
"""

EXAMPLE_TASK = """---
type: task
tags: [example]
---
# Example task

This is an example task file. Edit this to describe your task.

## Details

You can use full markdown here to describe:
- What needs to be done
- Why it's important
- Any technical details

When you run `projectmd sync`, this will be created as an issue in your backend.
"""


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projectmd",
        description="A plain text, LLM-friendly project management system",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--project-file", "-p",
        type=str,
        help="Path to the project.md file (default: project.md or PROJECTMD_FILE)"
    )

    parser.add_argument(
        "--github-token",
        type=str,
        help="GitHub personal access token (or set GITHUB_TOKEN env var)"
    )

    parser.add_argument(
        "--env-file",
        type=str,
        help="Read configuration from this .env file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Create/update issues for changed tasks")
    sync_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without making changes"
    )
    sync_parser.add_argument(
        "--force",
        action="store_true",
        help="Sync every task, even if unchanged since its last sync"
    )

    status_parser = subparsers.add_parser("status", help="Show the status of all tasks")
    status_parser.add_argument(
        "--details", "-d",
        action="store_true",
        help="Show title, type, tags and sync state of each task"
    )

    init_parser = subparsers.add_parser("init", help="Initialize a new project.md file")
    init_parser.add_argument(
        "--backend", "-b",
        type=str,
        default="github",
        help="Backend to use (github)"
    )
    init_parser.add_argument(
        "--repo", "-r",
        type=str,
        required=True,
        help="Repository in owner/repo format"
    )

    return parser


def make_provider(args: argparse.Namespace) -> EnvironmentConfigProvider:
    overrides = {
        "project_file": args.project_file,
        "github_token": args.github_token,
        "verbose": args.verbose or None,
        "dry_run": getattr(args, "dry_run", None),
        "force": getattr(args, "force", None),
    }
    env_file = Path(args.env_file) if args.env_file else None
    return EnvironmentConfigProvider(env_file=env_file, cli_overrides=overrides)


def create_tracker(config: TrackerConfig) -> IssueTrackerPort:
    """Build the tracker adapter for the configured backend."""
    return GitHubAdapter(config)


# =============================================================================
# Commands
# =============================================================================

def run_sync(args: argparse.Namespace, console: Console) -> int:
    logger = logging.getLogger("main")
    provider = make_provider(args)
    project_path = provider.load().project_path
    store = FileTaskStore()

    if not project_path.exists():
        logger.error(f"Project file not found: {project_path}")
        return ExitCode.FILE_NOT_FOUND

    try:
        project = store.load_project(project_path)
    except ProjectMdError as e:
        logger.error(f"Cannot load project file: {e}")
        return ExitCode.ERROR

    provider.set("backend", project.config.backend)
    provider.set("repo", project.config.repo)
    config = provider.load()

    errors = provider.validate(require_token=not config.sync.dry_run)
    if errors:
        for error in errors:
            logger.error(error)
        return ExitCode.CONFIG_ERROR

    try:
        tracker = create_tracker(config.tracker)
    except ValueError as e:
        logger.error(str(e))
        return ExitCode.CONFIG_ERROR

    if config.sync.dry_run:
        console.dry_run_banner()

    orchestrator = SyncOrchestrator(tracker, store, config.sync)
    try:
        report = orchestrator.sync(project_path)
    except ProjectFileError as e:
        logger.error(str(e))
        return ExitCode.ERROR

    console.sync_report(report)
    return ExitCode.SUCCESS if report.success else ExitCode.PARTIAL_FAILURE


def run_status(args: argparse.Namespace, console: Console) -> int:
    logger = logging.getLogger("main")
    provider = make_provider(args)
    project_path = provider.load().project_path
    store = FileTaskStore()

    try:
        project = store.load_project(project_path)
    except ProjectMdError as e:
        logger.error(f"Cannot load project file: {e}")
        return ExitCode.FILE_NOT_FOUND if not project_path.exists() else ExitCode.ERROR

    console.header(f"Project: {project_path}")
    console.info(f"Backend: {project.config.backend}")
    console.info(f"Repo: {project.config.repo}")
    console.section(f"Tasks ({len(project.tasks)})")

    for task in project.tasks:
        console.task_reference(task)
        if args.details:
            _print_task_details(console, store, project_path.parent / task.path)

    provider.set("backend", project.config.backend)
    provider.set("repo", project.config.repo)
    config = provider.load()
    if not config.tracker.token or config.tracker.backend != "github":
        return ExitCode.SUCCESS

    console.section("Fetching live status from GitHub...")
    try:
        issues = create_tracker(config.tracker).list_issues()
    except (IssueTrackerError, ValueError) as e:
        console.error(f"Could not fetch issues: {e}")
        return ExitCode.ERROR

    open_count = sum(1 for issue in issues if issue.is_open)
    console.info(f"Total issues in repository: {len(issues)}")
    console.detail(f"Open: {open_count}")
    console.detail(f"Closed: {len(issues) - open_count}")
    return ExitCode.SUCCESS


def _print_task_details(console: Console, store: FileTaskStore, task_path: Path) -> None:
    try:
        record = store.load_task(task_path)
        pending = should_sync(store.modified_time(task_path), record.updated_at)
    except ProjectMdError as e:
        console.error(str(e))
        return

    console.detail(f"Title: {record.title}")
    if record.task_type:
        console.detail(f"Type: {record.task_type}")
    if record.tags:
        console.detail(f"Tags: {', '.join(record.tags)}")
    if record.updated_at:
        console.detail(f"Last synced: {record.updated_at}")
    console.detail("Needs sync: yes" if pending else "Needs sync: no")


def run_init(args: argparse.Namespace, console: Console) -> int:
    logger = logging.getLogger("main")
    project_path = make_provider(args).load().project_path

    if project_path.exists():
        logger.error(f"{project_path} already exists")
        return ExitCode.ERROR

    tasks_dir = project_path.parent / "tasks"
    example_task = tasks_dir / "example.md"
    try:
        project_path.parent.mkdir(parents=True, exist_ok=True)
        project_path.write_text(
            PROJECT_TEMPLATE.format(backend=args.backend, repo=args.repo),
            encoding="utf-8",
        )
        tasks_dir.mkdir(exist_ok=True)
        if not example_task.exists():
            example_task.write_text(EXAMPLE_TASK, encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to initialize project: {e}")
        return ExitCode.ERROR

    console.success(f"Initialized new {project_path.name} with {args.backend} backend")
    console.info(f"Repository: {args.repo}")
    console.section("Created")
    console.item(str(project_path))
    console.item(str(example_task))
    console.section("Next steps")
    console.item(f"Edit {project_path.name} and tasks/example.md")
    console.item("Set the GITHUB_TOKEN environment variable")
    console.item("Run: projectmd sync")
    return ExitCode.SUCCESS


# =============================================================================
# Main
# =============================================================================

COMMANDS = {
    "sync": run_sync,
    "status": run_status,
    "init": run_init,
}


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    console = Console(verbose=args.verbose)

    try:
        return int(COMMANDS[args.command](args, console))
    except KeyboardInterrupt:
        console.print()
        console.warning("Interrupted")
        return ExitCode.CANCELLED


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
