"""
Atomic file writer for generated modules.

Ensures that file writes are atomic so an interrupted run never leaves a
half-written module behind.
"""

from __future__ import annotations

import errno
import posixpath
import tempfile
from pathlib import Path

from ..errors import GenerationIOError
from ..gen_logging import get_logger

logger = get_logger(__name__)


def describe_os_error(error: OSError, path: Path | str, action: str = "write") -> str:
    """Human-readable message for a failed filesystem operation."""
    if error.errno in (errno.EACCES, errno.EPERM):
        return f"Permission denied writing to {path}. Check file permissions and try again."
    if error.errno == errno.ENOSPC:
        return f"No space left on device while writing {path}. Free up disk space and try again."
    if error.errno in (errno.EMFILE, errno.ENFILE):
        return f"Too many open files while writing {path}. Close other applications or raise the open file limit."
    return f"Failed to {action} {path}: {error.strerror or error}"


class FileWriter:
    """Writes generated modules atomically.

    Uses a two-phase approach:
    1. Write to a temporary file in the target directory
    2. Atomically replace the target file

    Filesystem failures are re-raised as GenerationIOError with a
    remediation hint.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self.written_count = 0

    def write(self, path: Path, content: str, display_path: str | None = None) -> None:
        """Write content to path, creating parent directories as needed.

        Args:
            path: Target file path
            content: Module source text
            display_path: Path reported in errors, e.g. relative to the output
                directory; path itself by default

        Raises:
            GenerationIOError: If the directory or file cannot be written
        """
        shown = display_path or str(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            shown_parent = posixpath.dirname(shown) if display_path else str(path.parent)
            raise GenerationIOError(describe_os_error(e, shown_parent, "create directory"), shown_parent) from e

        try:
            # Same directory ensures atomic rename on the same filesystem
            temp_fd, temp_path_str = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", text=True)
        except OSError as e:
            raise GenerationIOError(describe_os_error(e, shown), shown) from e

        temp_path = Path(temp_path_str)
        try:
            with open(temp_fd, "w", encoding=self.encoding) as f:
                f.write(content)
            temp_path.replace(path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise GenerationIOError(describe_os_error(e, shown), shown) from e

        self.written_count += 1
        logger.debug("Wrote %s", path)

    def make_directories(self, directories: list[Path]) -> None:
        """Create every directory (and parents), tolerating existing ones.

        Raises:
            GenerationIOError: If a directory cannot be created
        """
        for directory in directories:
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise GenerationIOError(describe_os_error(e, directory, "create directory"), str(directory)) from e
