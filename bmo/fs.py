"""Filesystem helpers for bmo."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from .exceptions import VCSOperationError

logger = logging.getLogger(__name__)


def absolute_path(path: Path, working_dir: Path) -> Path:
    """Anchor ``path`` at ``working_dir`` without resolving symlinks."""

    path = path.expanduser()
    if not path.is_absolute():
        path = working_dir / path
    return Path(os.path.normpath(path))


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def outermost_missing(path: Path) -> Path | None:
    """Return the highest of ``path`` and its ancestors that does not exist yet."""

    missing = None
    for candidate in (path, *path.parents):
        if candidate.exists():
            break
        missing = candidate
    return missing


def remove_partial_clone(path: Path) -> None:
    if not path.exists():
        return
    logger.info("Removing partially cloned %s", path)
    try:
        shutil.rmtree(path)
    except OSError as exc:
        raise VCSOperationError(f"failed to remove {path}: {exc}") from exc
