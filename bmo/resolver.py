"""Map ``<repo>/<file>`` tokens onto workspace members."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Sequence

from .exceptions import UnknownRepositoryError, ValidationError
from .models import short_name


def split_file_tokens(args: Iterable[str]) -> list[str]:
    """Flatten arguments that may each hold several comma-separated tokens."""

    tokens: list[str] = []
    for arg in args:
        tokens.extend(part.strip() for part in arg.split(",") if part.strip())
    return tokens


def resolve(members: Sequence[str], token: str, workspace: str | None = None) -> tuple[Path, str]:
    """Return the member path and repository-relative file named by ``token``.

    Only the first ``/`` separates the repository from the file, so nested
    paths such as ``api/src/main.py`` resolve to ``("…/api", "src/main.py")``.
    The first member whose short name matches wins.
    """

    repo, sep, rel_file = token.partition("/")
    if not sep or not repo or not rel_file:
        raise ValidationError(f"Expected <repo>/<file>, got {token!r}.")
    for member in members:
        if short_name(member) == repo:
            return Path(member), rel_file
    raise UnknownRepositoryError(repo, workspace)


def find_short_name_collision(members: Sequence[str], path: str) -> str | None:
    """Return an existing member that shares ``path``'s short name, if any."""

    name = short_name(path)
    for member in members:
        if member != path and short_name(member) == name:
            return member
    return None
