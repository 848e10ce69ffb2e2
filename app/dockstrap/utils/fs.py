"""Filesystem helpers for writing, backing up and removing host files."""

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from tempfile import NamedTemporaryFile

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def write_text_atomic(path: Path, content: str, mode: int = 0o644) -> Path:
    """Write a text file atomically.

    Content goes to a temporary file in the target directory first and is
    then moved into place with os.replace(). The temporary file is removed
    on failure.

    Args:
        path: Destination file.
        content: Text to write.
        mode: Permission bits for the final file.

    Returns:
        The destination path.

    Raises:
        OSError: If the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            f.write(content)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except OSError:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise

    return path


def backup_file(path: Path, backup_dir: Path, now: datetime | None = None) -> Path | None:
    """Copy a file into ``backup_dir`` with a timestamp suffix.

    Args:
        path: File to back up.
        backup_dir: Directory receiving the copy.
        now: Timestamp to use; defaults to the current local time.

    Returns:
        Path of the backup, or None if ``path`` does not exist.

    Raises:
        OSError: If the copy fails.
    """
    if not path.is_file():
        return None

    stamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    backup_dir.mkdir(parents=True, exist_ok=True)
    target = backup_dir / f"{path.name}.backup.{stamp}"
    shutil.copy2(path, target)
    logger.info("Backed up %s to %s", path, target)
    return target


def remove_path(path: Path) -> str | None:
    """Remove a file, symlink or directory tree.

    A path that does not exist counts as removed.

    Args:
        path: Path to remove.

    Returns:
        None on success, otherwise the error message.
    """
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
        else:
            logger.debug("Nothing to remove at %s", path)
            return None
    except OSError as e:
        return str(e)

    logger.info("Removed %s", path)
    return None
