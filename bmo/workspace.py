"""High-level orchestration for workspace commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator

from . import git, render
from .config import default_destination, parse_endpoint
from .exceptions import (
    AlreadyMemberError,
    FanOutError,
    ShortNameCollisionError,
    ValidationError,
    VCSOperationError,
)
from .fanout import fan_out
from .fs import absolute_path, ensure_directory, outermost_missing, remove_partial_clone
from .models import LogEntry, RepositoryRef, StatusReport
from .registry import WorkspaceRegistry
from .resolver import find_short_name_collision, resolve, split_file_tokens

logger = logging.getLogger(__name__)

Emit = Callable[[str], None]


@dataclass
class WorkspaceService:
    registry: WorkspaceRegistry
    working_dir: Path

    def repositories(self, workspace: str) -> list[RepositoryRef]:
        return [RepositoryRef.from_member(member) for member in self.registry.lookup(workspace)]

    def log(self, workspace: str, emit: Emit, *, oneline: bool = False) -> None:
        fmt = render.log_oneline if oneline else render.log_full
        failures = fan_out(
            self.repositories(workspace),
            read_log,
            lambda entry: emit(fmt(entry)),
        )
        if failures:
            raise FanOutError("log", failures)

    def status(self, workspace: str, emit: Emit, *, short: bool = False) -> None:
        fmt = render.status_short if short else render.status_full
        failures = fan_out(
            self.repositories(workspace),
            read_status,
            lambda report: emit(fmt(report)),
        )
        if failures:
            raise FanOutError("status", failures)

    def clone(self, workspace: str, url: str, destination: Path | None = None) -> Path:
        """Clone ``url`` and register the working copy in ``workspace``."""

        endpoint = parse_endpoint(url)
        if destination is None:
            target = default_destination(endpoint, self.working_dir)
        else:
            target = absolute_path(destination, self.working_dir)

        members = self.registry.members(workspace)
        if str(target) in members:
            raise AlreadyMemberError(f"{url} already exists in {workspace} workspace")
        clash = find_short_name_collision(members, str(target))
        if clash:
            raise ShortNameCollisionError(
                f"{target.name} is already used by {clash} in {workspace} workspace; "
                "clone into a directory with a different name"
            )
        if git.is_repository(target):
            raise VCSOperationError(f"failed to clone {url}: repository already exists at {target}")

        auth = git.auth_environment(endpoint)
        created = outermost_missing(target)
        ensure_directory(target.parent)
        logger.info("Cloning %s into %s", url, target)
        try:
            git.clone(url, target, env=auth)
        except VCSOperationError as exc:
            if created is not None:
                remove_partial_clone(created)
            raise VCSOperationError(f"failed to clone {url}: {exc}") from exc

        self.registry.append(workspace, str(target))
        return target

    def add(self, workspace: str, args: Iterable[str]) -> list[tuple[Path, str]]:
        """Stage each ``repo/file`` token in its member repository.

        Every token is resolved before anything is staged. Staging stops at
        the first failure and does not undo files staged before it.
        """

        members = self.registry.lookup(workspace)
        tokens = split_file_tokens(args)
        if not tokens:
            raise ValidationError("No files given to add.")
        targets = [resolve(members, token, workspace) for token in tokens]
        for repo_path, rel_file in targets:
            git.open_repository(repo_path)
            git.stage(repo_path, rel_file)
            logger.info("Staged %s in %s", rel_file, repo_path)
        return targets


def read_log(repo: RepositoryRef) -> Iterator[LogEntry]:
    git.open_repository(repo.path)
    rev = git.head(repo.path)
    for commit in git.log(repo.path, rev):
        yield LogEntry(repository=repo, commit=commit)


def read_status(repo: RepositoryRef) -> Iterator[StatusReport]:
    git.open_repository(repo.path)
    files = git.worktree_status(repo.path)
    yield StatusReport(repository=repo, files=tuple(files))
