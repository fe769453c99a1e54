"""
Filesystem helpers — idempotent operations used by steps and rollback.

Rollback actions must be safe to repeat, so every removal here
tolerates a target that is already gone.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path

logger = logging.getLogger(__name__)


def remove_path(target: Path) -> bool:
    """Remove a file or directory tree if present.

    Returns:
        True if something was removed, False if the target did not exist.
    """
    if target.is_symlink() or target.is_file():
        target.unlink()
        logger.debug("Removed file %s", target)
        return True

    if target.is_dir():
        shutil.rmtree(target, onexc=_force_writable)
        logger.debug("Removed directory %s", target)
        return True

    return False


def _force_writable(func, path, _exc) -> None:
    """Retry a failed removal after clearing read-only bits (git objects)."""
    os.chmod(path, stat.S_IWRITE | stat.S_IREAD | stat.S_IEXEC)
    func(path)


def is_writable_dir(path: Path) -> bool:
    """Whether *path* is an existing directory we can create entries in."""
    return path.is_dir() and os.access(path, os.W_OK | os.X_OK)


def touch(target: Path) -> Path:
    """Create an empty file (and its parents) if it does not exist."""
    target.parent.mkdir(parents=True, exist_ok=True)
    target.touch(exist_ok=True)
    return target


def write_text(target: Path, content: str) -> Path:
    """Write *content* to *target*, creating parent directories."""
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8")
    logger.debug("Wrote %d bytes to %s", len(content), target)
    return target
