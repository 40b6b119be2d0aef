"""
Atomic file replacement.

Content is written to a temporary file in the target's directory, flushed
to disk, then renamed over the target. Readers see either the old file or
the new one, never a partial write.
"""

import logging
import os
import stat
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

from ...core.domain.staleness import to_mtime_ns


logger = logging.getLogger("AtomicWrite")


def atomic_write_text(
    path: Path,
    content: str,
    modified_time: Optional[datetime] = None,
    encoding: str = "utf-8",
) -> None:
    """
    Atomically replace `path` with `content`.

    Args:
        path: File to write
        content: New file content
        modified_time: If given, the new file's mtime (and atime)
        encoding: Text encoding

    Raises:
        OSError: If any step fails; the original file is left untouched
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        mode = _existing_mode(path)
        if mode is not None:
            os.chmod(tmp_name, mode)

        # rename() keeps the inode's timestamps, so set them before replacing
        if modified_time is not None:
            ns = to_mtime_ns(modified_time)
            os.utime(tmp_name, ns=(ns, ns))

        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    _fsync_directory(path.parent)


def _fsync_directory(directory: Path) -> None:
    """Flush the directory entry so the rename itself survives a crash."""
    if os.name != "posix":
        return
    try:
        fd = os.open(str(directory), os.O_RDONLY)
    except OSError as e:
        logger.warning(f"Cannot open {directory} to flush it: {e}")
        return
    try:
        os.fsync(fd)
    except OSError as e:
        # Some filesystems reject fsync on a directory (EINVAL)
        logger.warning(f"Cannot flush directory {directory}: {e}")
    finally:
        os.close(fd)


def _existing_mode(path: Path) -> Optional[int]:
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        return None
