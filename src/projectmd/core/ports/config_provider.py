"""
Config Provider Port - Abstract interface for configuration sources.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional


@dataclass
class TrackerConfig:
    """Connection settings for the remote tracker."""

    backend: str = "github"
    repo: str = ""
    token: str = ""
    api_url: str = "https://api.github.com"
    timeout: float = 30.0

    @property
    def owner_and_name(self) -> tuple[str, str]:
        """Split `owner/name`; raises ValueError when malformed."""
        parts = self.repo.split("/")
        if len(parts) != 2 or not all(parts):
            raise ValueError(f"Invalid repo format '{self.repo}'. Expected: owner/repo")
        return parts[0], parts[1]


@dataclass
class SyncConfig:
    """Behaviour switches for a sync run."""

    dry_run: bool = False
    force: bool = False
    verbose: bool = False


@dataclass
class AppConfig:
    """Complete application configuration."""

    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    project_path: Path = Path("project.md")


class ConfigProviderPort(ABC):
    """Abstract interface for configuration providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def load(self) -> AppConfig:
        """Load the complete configuration."""
        ...

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get a single configuration value."""
        ...

    @abstractmethod
    def validate(self) -> list[str]:
        """Return a list of configuration problems (empty when valid)."""
        ...
