"""
Exceptions - Centralized exception hierarchy.

Every error the sync engine knows how to contain derives from
ProjectMdError. Adapters translate library exceptions (OSError,
yaml.YAMLError, requests exceptions) into one of these.
"""

from typing import Optional


class ProjectMdError(Exception):
    """Base class for all projectmd errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class ParserError(ProjectMdError):
    """A project file or task file could not be parsed."""

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        source: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause=cause)
        self.line_number = line_number
        self.source = source

    def __str__(self) -> str:
        location = ""
        if self.source:
            location = f"{self.source}: "
        if self.line_number is not None:
            location = f"{location}line {self.line_number}: "
        return f"{location}{self.message}"


class TaskStoreError(ProjectMdError):
    """Reading or writing a file on disk failed."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause=cause)
        self.path = path


class MalformedTimestampError(ProjectMdError):
    """A stored timestamp is present but cannot be parsed."""

    def __init__(self, value: object, cause: Optional[Exception] = None):
        super().__init__(f"Malformed timestamp: {value!r}", cause=cause)
        self.value = value


class ProjectFileError(ProjectMdError):
    """The project file itself is unusable; fatal for the whole run."""


class ConfigError(ProjectMdError):
    """Configuration is missing or invalid."""


class LinkConflictError(ProjectMdError):
    """Project file and task file disagree about a task's issue number."""


__all__ = [
    "ProjectMdError",
    "ParserError",
    "TaskStoreError",
    "MalformedTimestampError",
    "ProjectFileError",
    "ConfigError",
    "LinkConflictError",
]
