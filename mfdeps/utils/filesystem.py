"""
Filesystem utilities for mfdeps.

This module provides safe helpers for reading, writing, backing up and
restoring catalog and manifest files. All filesystem errors are normalized
to ``FileOperationError``.
"""

from __future__ import annotations

import os
import json
import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from mfdeps.utils.logger import get_logger
from mfdeps.exceptions import FileOperationError
from mfdeps.constants import BACKUP_SUFFIX, MAX_FILE_SIZE


logger = get_logger("filesystem")

PathLike = Union[str, Path]


def _validated_file(path: Path, *, must_exist: bool = True) -> Path:
    """Validate and resolve a file path."""
    if must_exist:
        if not path.exists():
            raise FileOperationError(
                f"File not found: {path}",
                file_path=str(path),
                operation="read",
            )
        if not path.is_file():
            raise FileOperationError(
                f"Not a file: {path}",
                file_path=str(path),
                operation="read",
            )
    return path.resolve()


def _atomic_write(target: Path, content: str) -> None:
    """Atomically write text to a file using a temporary file + replace."""
    target.parent.mkdir(parents=True, exist_ok=True)
    temp_path: Optional[Path] = None

    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(target.parent),
            delete=False,
            prefix=f".{target.name}.",
            suffix=".tmp",
        ) as tmp:
            temp_path = Path(tmp.name)
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())

        temp_path.replace(target)

    except Exception as exc:
        if temp_path and temp_path.exists():
            try:
                temp_path.unlink()
                logger.debug("Cleaned up temporary file: %s", temp_path)
            except OSError as cleanup_exc:
                logger.warning(
                    "Failed to clean up temporary file %s: %s",
                    temp_path,
                    cleanup_exc,
                )

        raise FileOperationError(
            f"Atomic write failed: {exc}",
            file_path=str(target),
            operation="write",
            original_error=exc,
        ) from exc


def _copy_file(source: Path, target: Path, *, operation: str) -> None:
    """Copy ``source`` over ``target`` preserving metadata."""
    try:
        shutil.copy2(source, target)
    except OSError as exc:
        raise FileOperationError(
            f"Failed to {operation} {source.name}: {exc}",
            file_path=str(source),
            operation=operation,
            original_error=exc,
        ) from exc


def safe_read_file(
    file_path: PathLike,
    *,
    max_size: Optional[int] = MAX_FILE_SIZE,
    encoding: str = "utf-8",
) -> str:
    """Safely read a text file with optional size limits.

    Args:
        file_path: Path to the file.
        max_size: Maximum allowed file size in bytes (None disables limit).
        encoding: Text encoding.

    Returns:
        File contents as a string.
    """
    path = _validated_file(Path(file_path))
    size = path.stat().st_size

    if max_size is not None and size > max_size:
        raise FileOperationError(
            f"File too large: {size} bytes (max {max_size})",
            file_path=str(path),
            operation="read",
        )

    try:
        return path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise FileOperationError(
            f"Failed to read file: {exc}",
            file_path=str(path),
            operation="read",
            original_error=exc,
        ) from exc


def safe_write_file(
    file_path: PathLike,
    content: str,
    *,
    create_backup: bool = False,
) -> Optional[Path]:
    """Write text to a file using atomic replacement.

    When ``create_backup`` is set and the file exists, a verbatim copy is
    made first and put back if the write fails.

    Args:
        file_path: Destination path.
        content: Text content to write.
        create_backup: Whether to create a backup before writing.

    Returns:
        Path to the created backup, if any.
    """
    path = Path(file_path)
    backup: Optional[Path] = None

    if create_backup and path.is_file():
        backup = create_backup_copy(path)

    try:
        _atomic_write(path, content)
    except FileOperationError:
        if backup and backup.exists():
            try:
                restore_backup(backup, path)
            except FileOperationError as restore_exc:
                logger.warning("Could not restore %s: %s", path, restore_exc)
        raise

    return backup


def backup_path_for(file_path: PathLike, *, suffix: str = BACKUP_SUFFIX) -> Path:
    """Return the backup location of ``file_path`` (``core.json`` → ``core.json.backup``)."""
    path = Path(file_path)
    return path.with_name(f"{path.name}{suffix}")


def create_backup_copy(file_path: PathLike, *, suffix: str = BACKUP_SUFFIX) -> Path:
    """Copy a file to its fixed-suffix backup location.

    An earlier backup at the same location is overwritten.

    Returns:
        Path of the backup file.
    """
    path = _validated_file(Path(file_path))
    backup = backup_path_for(path, suffix=suffix)

    _copy_file(path, backup, operation="backup")
    logger.debug("Created backup: %s", backup)
    return backup


def restore_backup(backup_path: PathLike, target_path: PathLike) -> Path:
    """Copy ``backup_path`` back over ``target_path``.

    Returns:
        Path of the restored file.
    """
    backup = Path(backup_path)
    target = Path(target_path)

    if not backup.is_file():
        raise FileOperationError(
            f"Backup file not found: {backup}",
            file_path=str(backup),
            operation="restore",
        )

    logger.debug("Restoring %s from backup %s", target, backup)
    _copy_file(backup, target, operation="restore")
    return target


def format_json(data: Any) -> str:
    """Serialize ``data`` the way npm writes ``package.json``: two-space
    indentation, non-ASCII kept as-is, trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
