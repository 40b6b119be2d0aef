"""
Adapters - Concrete implementations of ports.

This module contains implementations for:
- Issue Trackers: GitHub
- Parsers: Markdown project and task files
- Storage: Local files with atomic rewrites
- Config: Environment variables
"""

from .github import GitHubAdapter
from .parsers import MarkdownParser
from .storage import FileTaskStore
from .config import EnvironmentConfigProvider

__all__ = [
    "GitHubAdapter",
    "MarkdownParser",
    "FileTaskStore",
    "EnvironmentConfigProvider",
]
