"""Thin wrappers around git CLI commands."""

from __future__ import annotations

import logging
import os
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator

from .exceptions import GitCommandError, VCSOperationError
from .models import Commit, Endpoint, FileStatus, StatusCode

logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%an", "%ae", "%aI", "%B"])


def run_git(
    args: Iterable[str],
    *,
    cwd: Path,
    raise_on_error: bool = True,
    env: dict[str, str] | None = None,
    capture_stderr: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Execute a git command and optionally raise on failure."""

    cmd = ["git", *args]
    logger.debug("Running %s in %s", " ".join(cmd), cwd)
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE if capture_stderr else None,
            text=True,
            encoding="utf-8",
            errors="replace",
            env={**os.environ, **env} if env else None,
            check=False,
        )
    except OSError as exc:
        raise VCSOperationError(f"unable to run git: {exc}") from exc
    if raise_on_error and proc.returncode != 0:
        raise GitCommandError(cmd, proc.returncode, proc.stderr)
    return proc


def is_repository(path: Path) -> bool:
    return (path / ".git").exists()


def open_repository(path: Path) -> Path:
    if not path.is_dir():
        raise VCSOperationError(f'unable to open repo "{path.name}": {path} does not exist')
    proc = run_git(["rev-parse", "--show-toplevel"], cwd=path, raise_on_error=False)
    if proc.returncode != 0 or not proc.stdout.strip():
        raise VCSOperationError(f'unable to open repo "{path.name}": not a git working tree')
    # A plain directory nested in another working tree is not a repository.
    toplevel = Path(proc.stdout.strip())
    if toplevel.resolve() != path.resolve():
        raise VCSOperationError(f'unable to open repo "{path.name}": {path} is inside the working tree at {toplevel}')
    return path


def head(path: Path) -> str:
    try:
        proc = run_git(["rev-parse", "--verify", "HEAD"], cwd=path)
    except GitCommandError as exc:
        raise VCSOperationError(f'unable to get ref HEAD of "{path.name}": {exc}') from exc
    return proc.stdout.strip()


def log(path: Path, rev: str) -> Iterator[Commit]:
    """Yield commits reachable from ``rev``, most recent first."""

    try:
        proc = run_git(["log", "-z", f"--format={_LOG_FORMAT}", rev, "--"], cwd=path)
    except GitCommandError as exc:
        raise VCSOperationError(f'unable to read history of "{path.name}": {exc}') from exc
    yield from parse_log(proc.stdout)


def parse_log(output: str) -> Iterator[Commit]:
    for record in output.split("\0"):
        if not record.strip():
            continue
        fields = record.lstrip("\n").split(_FIELD_SEP, 4)
        if len(fields) != 5:
            raise VCSOperationError(f"unexpected git log record: {record[:80]!r}")
        commit_hash, name, email, date, message = fields
        yield Commit(
            hash=commit_hash,
            author_name=name,
            author_email=email,
            authored_at=datetime.fromisoformat(date),
            message=message,
        )


def worktree_status(path: Path) -> list[FileStatus]:
    """Return per-file status ordered by path."""

    try:
        proc = run_git(["status", "--porcelain=v1", "-z", "--untracked-files=all"], cwd=path)
    except GitCommandError as exc:
        raise VCSOperationError(f'unable to get worktree status of "{path.name}": {exc}') from exc
    return parse_status(proc.stdout)


def parse_status(output: str) -> list[FileStatus]:
    entries: list[FileStatus] = []
    records = iter(output.split("\0"))
    for record in records:
        if not record:
            continue
        if len(record) < 4 or record[2] != " ":
            raise VCSOperationError(f"unexpected git status record: {record!r}")
        x, y, file_path = record[0], record[1], record[3:]
        if x in ("R", "C") or y in ("R", "C"):
            # The source path of a rename or copy follows as its own record.
            next(records, None)
        entries.append(
            FileStatus(
                path=file_path,
                staging=StatusCode.from_porcelain(x),
                worktree=StatusCode.from_porcelain(y),
            )
        )
    return sorted(entries, key=lambda entry: entry.path)


def stage(path: Path, file: str) -> None:
    try:
        run_git(["add", "--", file], cwd=path)
    except GitCommandError as exc:
        raise VCSOperationError(f'unable to stage "{file}": {exc}') from exc


def clone(
    url: str,
    target: Path,
    *,
    env: dict[str, str] | None = None,
    progress: bool = True,
) -> None:
    args = ["clone"]
    if progress:
        args.append("--progress")
    args.extend(["--", url, str(target)])
    run_git(args, cwd=target.parent, env=env, capture_stderr=not progress)


def auth_environment(endpoint: Endpoint) -> dict[str, str] | None:
    """Pick credentials for ``endpoint``; only ssh needs explicit setup."""

    if endpoint.protocol != "ssh":
        return None
    if not os.environ.get("SSH_AUTH_SOCK"):
        raise VCSOperationError("error creating SSH agent: SSH_AUTH_SOCK not specified")
    ssh_command = os.environ.get("GIT_SSH_COMMAND") or "ssh"
    return {
        "GIT_SSH_COMMAND": f"{ssh_command} -o BatchMode=yes",
        "GIT_TERMINAL_PROMPT": "0",
    }
