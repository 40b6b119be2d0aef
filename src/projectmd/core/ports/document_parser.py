"""
Document Parser Port - Abstract interface for reading project and task files.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from ..domain.entities import ProjectDocument, TaskRecord
from ..exceptions import ParserError


class DocumentParserPort(ABC):
    """
    Abstract interface for document parsers.

    `source` is either a Path to read or the document text itself.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def parse_project(self, source: Union[str, Path]) -> ProjectDocument:
        """
        Parse a project file.

        Raises:
            ParserError: If the header or task list is malformed
        """
        ...

    @abstractmethod
    def parse_task(self, source: Union[str, Path]) -> TaskRecord:
        """
        Parse a task file.

        Raises:
            ParserError: If the front matter is missing or malformed
        """
        ...

    @abstractmethod
    def render_task(self, record: TaskRecord) -> str:
        """Serialize a task record back to file text."""
        ...

    @abstractmethod
    def relink_project(self, content: str, links: dict[str, int]) -> str:
        """Mark the given new task paths as linked to their issue numbers."""
        ...


__all__ = ["DocumentParserPort", "ParserError"]
