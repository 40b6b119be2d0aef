"""
Output - Console output formatting.

Provides pretty-printed output with colors and formatting.
"""

import sys
from typing import Optional, TextIO

from ..application.sync import SyncAction, SyncReport
from ..core.domain.entities import TaskReference


class Colors:
    """ANSI color codes."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"

    BG_YELLOW = "\033[43m"


class Symbols:
    """Unicode symbols for output."""

    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    DOT = "•"
    WARN = "⚠"
    INFO = "ℹ"
    GEAR = "⚙"

    BOX_H = "─"


class Console:
    """Console output helper with colors and formatting."""

    def __init__(self, color: bool = True, verbose: bool = False, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self.color = color and self.stream.isatty()
        self.verbose = verbose

    def _c(self, text: str, *codes: str) -> str:
        """Apply color codes to text."""
        if not self.color:
            return text
        return "".join(codes) + text + Colors.RESET

    def print(self, text: str = "") -> None:
        """Print text."""
        print(text, file=self.stream)

    def header(self, text: str) -> None:
        """Print a header."""
        width = max(len(text) + 4, 50)
        border = self._c(Symbols.BOX_H * width, Colors.CYAN) if self.color else "-" * width

        self.print()
        self.print(border)
        self.print(self._c(f"  {text}", Colors.BOLD, Colors.CYAN))
        self.print(border)
        self.print()

    def section(self, text: str) -> None:
        """Print a section header."""
        self.print()
        self.print(self._c(f"{Symbols.ARROW} {text}", Colors.BOLD, Colors.BLUE))

    def success(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.CHECK} {text}", Colors.GREEN))

    def error(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.CROSS} {text}", Colors.RED))

    def warning(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.WARN} {text}", Colors.YELLOW))

    def info(self, text: str) -> None:
        self.print(self._c(f"  {Symbols.INFO} {text}", Colors.CYAN))

    def detail(self, text: str) -> None:
        """Print detail text (dimmed)."""
        self.print(self._c(f"    {text}", Colors.DIM))

    def item(self, text: str, status: Optional[str] = None) -> None:
        """Print a list item."""
        status_str = ""
        if status == "ok":
            status_str = self._c(f" [{Symbols.CHECK}]", Colors.GREEN)
        elif status == "skip":
            status_str = self._c(" [SKIP]", Colors.YELLOW)
        elif status == "fail":
            status_str = self._c(f" [{Symbols.CROSS}]", Colors.RED)
        elif status:
            status_str = self._c(f" [{status}]", Colors.DIM)

        self.print(f"    {Symbols.DOT} {text}{status_str}")

    def table(self, headers: list[str], rows: list[list[str]]) -> None:
        """Print a simple table."""
        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(cell)))

        header_line = "  " + "  ".join(
            self._c(h.ljust(widths[i]), Colors.BOLD)
            for i, h in enumerate(headers)
        )
        self.print(header_line)
        self.print("  " + "  ".join("-" * w for w in widths))

        for row in rows:
            row_line = "  " + "  ".join(
                str(cell).ljust(widths[i]) if i < len(widths) else str(cell)
                for i, cell in enumerate(row)
            )
            self.print(row_line)

    def dry_run_banner(self) -> None:
        """Print dry-run mode banner."""
        self.print()
        banner = f"  {Symbols.GEAR} DRY-RUN MODE - No changes will be made"
        if self.color:
            self.print(f"{Colors.BG_YELLOW}{Colors.BOLD}{banner}{Colors.RESET}")
        else:
            self.print(f"*** {banner} ***")
        self.print()

    def task_reference(self, task: TaskReference) -> None:
        """Print one line of the project's task list."""
        marker = "[NEW]" if task.remote_status.is_new else f"[#{task.remote_status.issue_number}]"
        self.print(f"  {marker} {task.path} - {task.description}")

    def sync_report(self, report: SyncReport) -> None:
        """Print sync report summary."""
        self.section("Sync Summary")
        self.print()

        if report.dry_run:
            self.info("Mode: DRY-RUN (no changes made)")
        elif report.force:
            self.info("Mode: FORCE (staleness check bypassed)")

        status_by_action = {
            SyncAction.CREATED: "ok",
            SyncAction.UPDATED: "ok",
            SyncAction.SKIPPED: "skip",
            SyncAction.FAILED: "fail",
        }
        for path, outcome in report.entries:
            self.item(f"{path}: {outcome}", status_by_action[outcome.action])

        self.print()
        counts = report.counts()
        self.table(
            ["Outcome", "Count"],
            [
                ["Created", str(counts[SyncAction.CREATED])],
                ["Updated", str(counts[SyncAction.UPDATED])],
                ["Skipped", str(counts[SyncAction.SKIPPED])],
                ["Failed", str(counts[SyncAction.FAILED])],
                ["Total", str(report.total)],
            ],
        )

        if report.warnings:
            self.print()
            self.warning(f"{len(report.warnings)} warning(s):")
            for w in report.warnings:
                self.detail(w)

        self.print()
        if report.success:
            self.success(f"Sync completed: {report.total} task(s) processed")
        else:
            self.error(f"Sync completed with {len(report.failed)} failed task(s)")
