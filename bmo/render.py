"""Text renderers for log and status entries plus console helpers."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from .models import FileStatus, LogEntry, StatusCode, StatusReport

DATE_FORMAT = "%a %b %d %H:%M:%S %Y %z"
CLEAN_MESSAGE = "nothing to commit, working tree clean"
INDENT = "    "

STAGED_HEADER = "Changes to be committed:"
UNSTAGED_HEADER = "Changes not staged for commit:"
UNTRACKED_HEADER = "Untracked Files:"

err_console = Console(stderr=True)


def success(message: str) -> None:
    err_console.print(f"[green]✓[/green] {escape(message)}")


def indent(text: str) -> str:
    """Prefix every non-empty line with four spaces."""

    return "\n".join(INDENT + line if line else line for line in text.split("\n"))


def log_oneline(entry: LogEntry) -> str:
    commit = entry.commit
    return f"[{entry.repository.name}] {commit.short_hash} {commit.summary}"


def log_full(entry: LogEntry) -> str:
    commit = entry.commit
    block = (
        f"commit {commit.hash}\n"
        f"Repository: {entry.repository.name}\n"
        f"Author:     {commit.author}\n"
        f"Date:       {commit.authored_at.strftime(DATE_FORMAT)}\n"
        "\n"
        f"{indent(commit.message)}\n"
    )
    return block.strip() + "\n"


def status_short(report: StatusReport) -> str:
    name = report.repository.name
    if report.clean:
        return f"[{name}] {CLEAN_MESSAGE}"
    return "\n".join(f"[{name}] {entry.code} {entry.path}" for entry in report.files)


def status_full(report: StatusReport) -> str:
    lines = [f"Repository: {report.repository.name}"]
    if report.clean:
        lines.extend([CLEAN_MESSAGE, ""])
        return "\n".join(lines)

    staged, unstaged, untracked = bucket_status(report.files)
    if staged:
        lines.extend(_section(STAGED_HEADER, _labelled(staged)))
    if unstaged:
        lines.extend(_section(UNSTAGED_HEADER, _labelled(unstaged)))
    if untracked:
        lines.extend(_section(UNTRACKED_HEADER, [path for path, _ in untracked]))
    return "\n".join(lines)


def bucket_status(
    files: tuple[FileStatus, ...] | list[FileStatus],
) -> tuple[list[tuple[str, StatusCode]], list[tuple[str, StatusCode]], list[tuple[str, StatusCode]]]:
    """Split files into staged, unstaged and untracked buckets.

    Staging and worktree codes are independent, so one file may land in both
    the staged and the unstaged bucket.
    """

    staged: list[tuple[str, StatusCode]] = []
    unstaged: list[tuple[str, StatusCode]] = []
    untracked: list[tuple[str, StatusCode]] = []
    for entry in files:
        if entry.worktree is StatusCode.UNTRACKED:
            untracked.append((entry.path, entry.worktree))
        elif entry.worktree.is_change:
            unstaged.append((entry.path, entry.worktree))
        if entry.staging.is_change:
            staged.append((entry.path, entry.staging))
    return staged, unstaged, untracked


def _labelled(entries: list[tuple[str, StatusCode]]) -> list[str]:
    width = max(len(code.label) for _, code in entries) + 1
    return [f"{(code.label + ':').ljust(width)} {path}" for path, code in entries]


def _section(header: str, rows: list[str]) -> list[str]:
    return [header, "", *(INDENT + row for row in rows), ""]
