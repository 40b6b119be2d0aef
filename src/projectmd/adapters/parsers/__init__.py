"""
Document Parsers - Convert project and task files into domain entities.
"""

from .markdown import MarkdownParser

__all__ = ["MarkdownParser"]
