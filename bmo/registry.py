"""Persistent mapping of workspace names to member repository paths.

The registry is stored as an INI file. Each workspace is a section named
``workspace.<name>`` whose ``repos`` key holds a comma-joined list of paths::

    [workspace.platform]
    repos = /src/api,/src/web

Section and key names are case-insensitive. The whole file is rewritten on
``save()``; a temporary file is renamed over the original so a failed write
never leaves a truncated config behind.
"""

from __future__ import annotations

import configparser
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .exceptions import ConfigError, DuplicateMemberError, WorkspaceNotFoundError

logger = logging.getLogger(__name__)

SECTION_PREFIX = "workspace."
REPOS_KEY = "repos"


def section_name(workspace: str) -> str:
    return f"{SECTION_PREFIX}{workspace}".lower()


def _split_members(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class WorkspaceRegistry:
    """In-memory view of the config store for one command invocation."""

    def __init__(self, path: Path, parser: configparser.ConfigParser | None = None):
        self.path = path
        self._parser = parser or _new_parser()

    @classmethod
    def load(cls, path: Path) -> "WorkspaceRegistry":
        try:
            if not path.exists():
                path.parent.mkdir(parents=True, exist_ok=True)
                path.touch()
                logger.debug("Created empty config at %s", path)
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"unable to read config file {path}: {exc}") from exc
        parser = _new_parser()
        try:
            parser.read_string(text, source=str(path))
        except configparser.Error as exc:
            raise ConfigError(f"unable to load config: {exc}") from exc
        return cls(path, parser)

    def workspaces(self) -> list[str]:
        return [
            section[len(SECTION_PREFIX):]
            for section in self._parser.sections()
            if section.lower().startswith(SECTION_PREFIX)
        ]

    def exists(self, workspace: str) -> bool:
        return self._find_section(workspace) is not None

    def lookup(self, workspace: str) -> list[str]:
        """Return the members of ``workspace``; the workspace must exist."""

        section = self._find_section(workspace)
        if section is None:
            raise WorkspaceNotFoundError(workspace)
        return _split_members(self._parser.get(section, REPOS_KEY, fallback=""))

    def members(self, workspace: str) -> list[str]:
        """Like ``lookup`` but an unknown workspace has no members."""

        try:
            return self.lookup(workspace)
        except WorkspaceNotFoundError:
            return []

    def append(self, workspace: str, path: str) -> None:
        members = self.members(workspace)
        if path in members:
            raise DuplicateMemberError(f"{path} already exists in {workspace} workspace")
        if "," in path:
            raise ConfigError(f"repository paths cannot contain ',': {path}")
        members.append(path)
        section = self._find_section(workspace)
        if section is None:
            section = section_name(workspace)
            self._parser.add_section(section)
            logger.info("Created workspace %s", workspace)
        self._parser.set(section, REPOS_KEY, ",".join(members))
        logger.info("Registered %s in workspace %s", path, workspace)

    def save(self) -> None:
        tmp_path: Path | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
            tmp_path = Path(tmp_name)
            with open(fd, "w", encoding="utf-8") as handle:
                self._parser.write(handle)
            if self.path.exists():
                os.chmod(tmp_path, self.path.stat().st_mode & 0o777)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise ConfigError(f"unable to save config file: {exc}") from exc
        logger.debug("Saved config to %s", self.path)

    def _find_section(self, workspace: str) -> str | None:
        wanted = section_name(workspace)
        for section in self._parser.sections():
            if section.lower() == wanted:
                return section
        return None


@contextmanager
def open_registry(path: Path) -> Iterator[WorkspaceRegistry]:
    """Load the registry and flush it once if the block succeeds."""

    registry = WorkspaceRegistry.load(path)
    yield registry
    registry.save()


def _new_parser() -> configparser.ConfigParser:
    return configparser.ConfigParser(interpolation=None, default_section="__default__")
