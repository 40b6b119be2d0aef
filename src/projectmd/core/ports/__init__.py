"""
Ports - Abstract interfaces for external dependencies.

Ports define the contracts that adapters must implement.
This enables dependency inversion and easy testing.
"""

from .issue_tracker import (
    IssueTrackerPort,
    IssueData,
    IssueTrackerError,
    BackendError,
    AuthenticationError,
    NotFoundError,
    TrackerPermissionError,
    RateLimitError,
    TransientError,
)
from .document_parser import DocumentParserPort, ParserError
from .task_store import TaskStorePort, TaskStoreError
from .config_provider import ConfigProviderPort, AppConfig, TrackerConfig, SyncConfig

__all__ = [
    "IssueTrackerPort",
    "IssueData",
    "IssueTrackerError",
    "BackendError",
    "AuthenticationError",
    "NotFoundError",
    "TrackerPermissionError",
    "RateLimitError",
    "TransientError",
    "DocumentParserPort",
    "ParserError",
    "TaskStorePort",
    "TaskStoreError",
    "ConfigProviderPort",
    "AppConfig",
    "TrackerConfig",
    "SyncConfig",
]
