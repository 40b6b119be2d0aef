"""
Storage Adapters - Read and atomically rewrite project/task files.
"""

from .atomic import atomic_write_text
from .file_store import FileTaskStore

__all__ = ["atomic_write_text", "FileTaskStore"]
