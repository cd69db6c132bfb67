"""Dataclasses shared across modules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path, PurePath


def short_name(path: str | PurePath) -> str:
    """Return the user-facing name of a repository path (its last component)."""

    return PurePath(path).name


@dataclass(frozen=True)
class RepositoryRef:
    """A workspace member as stored in the registry."""

    path: Path

    @classmethod
    def from_member(cls, member: str) -> "RepositoryRef":
        return cls(path=Path(member))

    @property
    def name(self) -> str:
        return short_name(self.path)


class StatusCode(str, Enum):
    """Per-axis file status; the value is the short-format code."""

    UNMODIFIED = " "
    UNTRACKED = "?"
    MODIFIED = "M"
    ADDED = "A"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"

    @classmethod
    def from_porcelain(cls, code: str) -> "StatusCode":
        # Type changes and unmerged entries have no dedicated code here.
        if code in ("T", "U"):
            return cls.MODIFIED
        if code in (".", ""):
            return cls.UNMODIFIED
        return cls(code)

    @property
    def label(self) -> str:
        return self.name.lower()

    @property
    def is_change(self) -> bool:
        return self in CHANGE_CODES


CHANGE_CODES = frozenset(
    {
        StatusCode.MODIFIED,
        StatusCode.ADDED,
        StatusCode.DELETED,
        StatusCode.RENAMED,
        StatusCode.COPIED,
    }
)


@dataclass(frozen=True)
class FileStatus:
    """Index and worktree classification of a single path."""

    path: str
    staging: StatusCode
    worktree: StatusCode

    @property
    def code(self) -> str:
        return f"{self.staging.value}{self.worktree.value}"


@dataclass(frozen=True)
class Commit:
    """Commit metadata read from history."""

    hash: str
    author_name: str
    author_email: str
    authored_at: datetime
    message: str

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    @property
    def summary(self) -> str:
        return self.message.split("\n", 1)[0].strip()

    @property
    def author(self) -> str:
        return f"{self.author_name} <{self.author_email}>"


@dataclass(frozen=True)
class LogEntry:
    """One commit emitted by a log worker."""

    repository: RepositoryRef
    commit: Commit


@dataclass(frozen=True)
class StatusReport:
    """Worktree status of one repository, files ordered by path."""

    repository: RepositoryRef
    files: tuple[FileStatus, ...]

    @property
    def clean(self) -> bool:
        return not self.files


@dataclass(frozen=True)
class Endpoint:
    """A parsed clone URL."""

    protocol: str
    path: str
    host: str = ""
    user: str = ""
    port: int | None = None

    @property
    def repo_name(self) -> str:
        name = self.path.rstrip("/").rsplit("/", 1)[-1]
        if name.endswith(".git"):
            name = name[: -len(".git")]
        return name
