"""Custom exception hierarchy for bmo."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from .fanout import RepositoryFailure


class BmoError(Exception):
    """Base error for all custom exceptions."""


class ConfigError(BmoError):
    """Raised when the config store cannot be read, parsed or written."""


class WorkspaceNotFoundError(ConfigError):
    """Raised when a workspace section does not exist."""

    def __init__(self, workspace: str):
        super().__init__(f"{workspace} does not exist")
        self.workspace = workspace


class UnknownRepositoryError(BmoError):
    """Raised when a repo/file token names no member of the workspace."""

    def __init__(self, repo: str, workspace: str | None = None):
        message = f"{repo} not a part of workspace"
        if workspace:
            message = f"{repo} not a part of workspace {workspace}"
        super().__init__(message)
        self.repo = repo
        self.workspace = workspace


class DuplicateMemberError(BmoError):
    """Raised when a path is already registered in a workspace."""


class AlreadyMemberError(DuplicateMemberError):
    """Raised when a clone destination is already a workspace member."""


class ShortNameCollisionError(BmoError):
    """Raised when two members of a workspace would share a short name."""


class ValidationError(BmoError):
    """Raised when user input is invalid."""


class VCSOperationError(BmoError):
    """Raised when the version-control engine reports a failure."""


class GitCommandError(VCSOperationError):
    """Raised when a git invocation fails."""

    def __init__(self, command: list[str], returncode: int, stderr: str | None = None):
        message = "Git command failed"
        if command:
            message = f"Git command failed: {' '.join(command)}"
        detail = (stderr or "").strip().splitlines()
        if detail:
            message = f"{message}: {detail[-1]}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr or ""


class FanOutError(BmoError):
    """Raised when one or more workspace members failed an operation."""

    def __init__(self, operation: str, failures: Sequence[RepositoryFailure]):
        count = len(failures)
        noun = "repository" if count == 1 else "repositories"
        lines = [f"{operation} failed for {count} {noun}:"]
        lines.extend(f"  {failure.repository.name}: {failure.error}" for failure in failures)
        super().__init__("\n".join(lines))
        self.operation = operation
        self.failures = list(failures)
