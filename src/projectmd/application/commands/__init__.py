"""
Commands - Individual write operations against the issue tracker.

Commands can be:
- Validated before running
- Executed, or previewed in dry-run mode
"""

from .base import Command, CommandResult
from .issue_commands import CreateIssueCommand, UpdateIssueCommand

__all__ = [
    "Command",
    "CommandResult",
    "CreateIssueCommand",
    "UpdateIssueCommand",
]
