"""
Markdown Parser - Parse project.md and task files into domain entities.

Implements the DocumentParserPort interface.
"""

import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Union

import frontmatter
import yaml

from ...core.ports.document_parser import DocumentParserPort, ParserError
from ...core.domain.entities import (
    ProjectConfig,
    ProjectDocument,
    RemoteStatus,
    TaskRecord,
    TaskReference,
)


class MarkdownParser(DocumentParserPort):
    """
    Parser for project files and task files.

    Project file format:
        backend: github
        repo: owner/name
        ---
        # Project title

        * [#1] - tasks/setup_auth.md - Setup the authentication
        * [new] - tasks/scaffold_ui.md - Scaffold the UI

    Task file format:
        ---
        issue_id: 1
        type: bug
        tags: [chore, infra]
        ---
        # Setup the authentication

        Some details go here.
    """

    TASK_ITEM_PATTERN = re.compile(
        r"^\s*[*-]\s+"
        r"\[(?P<status>new|#(?P<number>\d+))\]\s+-\s+"
        r"(?P<path>\S+)"
        r"(?:\s+-\s+(?P<description>.*?))?\s*$"
    )
    SEPARATOR_PATTERN = re.compile(r"^---[ \t]*$")
    FRONT_MATTER_PATTERN = re.compile(
        r"\A---[ \t]*\r?\n(?P<header>.*?)^---[ \t]*\r?$",
        re.MULTILINE | re.DOTALL,
    )

    # Header keys with a dedicated TaskRecord field, in serialization order
    KNOWN_TASK_FIELDS = ("issue_id", "type", "tags", "created_at", "updated_at")

    def __init__(self):
        self.logger = logging.getLogger("MarkdownParser")

    # -------------------------------------------------------------------------
    # DocumentParserPort Implementation
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "Markdown"

    def parse_project(self, source: Union[str, Path]) -> ProjectDocument:
        content = self._get_content(source)
        source_name = str(source) if isinstance(source, Path) else None

        header_lines, body_start = self._split_project_header(content, source_name)
        config = self._parse_project_config("\n".join(header_lines), source_name)

        tasks = []
        lines = content.splitlines()
        for index in range(body_start, len(lines)):
            reference = self._parse_task_item(lines[index])
            if reference is not None:
                tasks.append(reference)

        self.logger.debug(f"Found {len(tasks)} task references")
        return ProjectDocument(config=config, tasks=tasks, content=content)

    def parse_task(self, source: Union[str, Path]) -> TaskRecord:
        text = self._get_content(source)
        source_name = str(source) if isinstance(source, Path) else None

        match = self.FRONT_MATTER_PATTERN.match(text)
        if not match:
            raise ParserError("Invalid task file format: missing YAML front matter", source=source_name)

        try:
            post = frontmatter.loads(text)
        except yaml.YAMLError as e:
            raise ParserError(f"Failed to parse task file front matter: {e}", source=source_name, cause=e)

        metadata = dict(post.metadata)
        title, body = self._extract_title_and_body(post.content)

        return TaskRecord(
            issue_id=self._get_issue_id(metadata, source_name),
            task_type=self._get_optional_str(metadata, "type", source_name),
            tags=self._get_tags(metadata, source_name),
            created_at=self._get_timestamp(metadata, "created_at"),
            updated_at=self._get_timestamp(metadata, "updated_at"),
            extra={k: v for k, v in metadata.items() if k not in self.KNOWN_TASK_FIELDS},
            title=title,
            body=body,
            content=text[match.end():],
        )

    def render_task(self, record: TaskRecord) -> str:
        header: dict[str, Any] = {}
        if record.issue_id is not None:
            header["issue_id"] = record.issue_id
        if record.task_type is not None:
            header["type"] = record.task_type
        if record.tags is not None:
            header["tags"] = list(record.tags)
        if record.created_at is not None:
            header["created_at"] = record.created_at
        if record.updated_at is not None:
            header["updated_at"] = record.updated_at
        header.update(record.extra)

        dumped = ""
        if header:
            dumped = yaml.safe_dump(
                header,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
            )

        content = record.content
        if not content:
            content = f"\n# {record.title}\n"
            if record.body:
                content += f"\n{record.body}\n"

        return f"---\n{dumped}---{content}"

    def relink_project(self, content: str, links: dict[str, int]) -> str:
        if not links:
            return content

        lines = content.splitlines(keepends=True)
        for index, line in enumerate(lines):
            stripped = line.rstrip("\r\n")
            match = self.TASK_ITEM_PATTERN.match(stripped)
            if not match or match.group("number") is not None:
                continue

            number = links.get(match.group("path"))
            if number is None:
                continue

            # Replace only the `new` marker; the rest of the line is kept as-is
            start, end = match.span("status")
            lines[index] = f"{line[:start]}#{number}{line[end:]}"

        return "".join(lines)

    def validate(self, source: Union[str, Path]) -> list[str]:
        """Return a list of problems with a project file (empty when valid)."""
        try:
            project = self.parse_project(source)
        except ParserError as e:
            return [str(e)]

        errors = []
        seen: set[str] = set()
        for task in project.tasks:
            key = str(task.path)
            if key in seen:
                errors.append(f"Duplicate task reference: {key}")
            seen.add(key)
        return errors

    # -------------------------------------------------------------------------
    # Private Methods
    # -------------------------------------------------------------------------

    def _get_content(self, source: Union[str, Path]) -> str:
        """Get content from file path or string."""
        if isinstance(source, Path):
            try:
                return source.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise ParserError(f"Cannot read file: {e}", source=str(source), cause=e)
        return source

    def _split_project_header(
        self,
        content: str,
        source_name: Optional[str],
    ) -> tuple[list[str], int]:
        """Return the header lines and the index of the first body line."""
        lines = content.splitlines()
        start = 0
        # Accept conventional front matter with a leading separator too
        if lines and self.SEPARATOR_PATTERN.match(lines[0]):
            start = 1

        for index in range(start, len(lines)):
            if self.SEPARATOR_PATTERN.match(lines[index]):
                return lines[start:index], index + 1

        raise ParserError("Missing YAML front matter: no '---' separator found", source=source_name)

    def _parse_project_config(self, header: str, source_name: Optional[str]) -> ProjectConfig:
        try:
            data = yaml.safe_load(header) if header.strip() else None
        except yaml.YAMLError as e:
            raise ParserError(f"Failed to parse YAML front matter: {e}", source=source_name, cause=e)

        if not isinstance(data, dict):
            raise ParserError("YAML front matter must be a mapping", source=source_name)

        missing = [key for key in ("backend", "repo") if not data.get(key)]
        if missing:
            raise ParserError(f"Missing required field(s): {', '.join(missing)}", source=source_name)

        return ProjectConfig(
            backend=str(data["backend"]),
            repo=str(data["repo"]),
            extra={k: v for k, v in data.items() if k not in ("backend", "repo")},
        )

    def _parse_task_item(self, line: str) -> Optional[TaskReference]:
        match = self.TASK_ITEM_PATTERN.match(line)
        if not match:
            return None

        number = match.group("number")
        status = RemoteStatus.linked(int(number)) if number is not None else RemoteStatus.new()

        return TaskReference(
            path=Path(match.group("path")),
            description=(match.group("description") or "").strip(),
            remote_status=status,
        )

    def _extract_title_and_body(self, markdown: str) -> tuple[str, str]:
        """Title is the first `# ` heading; the body is everything after it."""
        title = ""
        body_lines = []
        found_title = False

        for line in markdown.splitlines():
            stripped = line.strip()
            if not found_title and stripped.startswith("# "):
                title = stripped[2:].strip()
                found_title = True
            elif found_title:
                body_lines.append(line)

        return title, "\n".join(body_lines).strip()

    def _get_issue_id(self, metadata: dict, source_name: Optional[str]) -> Optional[int]:
        value = metadata.get("issue_id")
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ParserError(f"issue_id must be a positive integer, got {value!r}", source=source_name)
        return value

    def _get_optional_str(
        self,
        metadata: dict,
        key: str,
        source_name: Optional[str],
    ) -> Optional[str]:
        value = metadata.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ParserError(f"{key} must be a string, got {value!r}", source=source_name)
        return value

    def _get_tags(self, metadata: dict, source_name: Optional[str]) -> Optional[list[str]]:
        value = metadata.get("tags")
        if value is None:
            return None
        if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
            raise ParserError(f"tags must be a list of strings, got {value!r}", source=source_name)
        return list(value)

    def _get_timestamp(self, metadata: dict, key: str) -> Optional[str]:
        # YAML turns unquoted timestamps into datetime/date objects
        value = metadata.get(key)
        if value is None:
            return None
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return str(value)
