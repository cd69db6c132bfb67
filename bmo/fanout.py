"""Run one operation against every workspace member concurrently.

Each member gets its own worker thread. Workers push entries into a shared
sink as soon as they produce them; the sink is guarded by a lock so every
call is an atomic write. Entries of one repository keep their order, while
entries of different repositories may interleave freely.

Failures do not stop the other workers. Once every worker has finished the
executor returns one ``RepositoryFailure`` per failing member, in member
order, and leaves it to the caller to decide what is fatal.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, TypeVar

from .exceptions import BmoError
from .models import RepositoryRef

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[RepositoryRef], Iterable[T]]
Sink = Callable[[T], None]


@dataclass(frozen=True)
class RepositoryFailure:
    repository: RepositoryRef
    error: BmoError


def fan_out(
    repositories: Sequence[RepositoryRef],
    operation: Operation[T],
    sink: Sink[T],
) -> list[RepositoryFailure]:
    if not repositories:
        return []

    lock = threading.Lock()

    def emit(entry: T) -> None:
        with lock:
            sink(entry)

    def worker(repo: RepositoryRef) -> None:
        logger.debug("Worker started for %s", repo.path)
        for entry in operation(repo):
            emit(entry)
        logger.debug("Worker finished for %s", repo.path)

    futures: list[tuple[RepositoryRef, Future[None]]] = []
    with ThreadPoolExecutor(max_workers=len(repositories), thread_name_prefix="bmo") as executor:
        for repo in repositories:
            futures.append((repo, executor.submit(worker, repo)))

    failures: list[RepositoryFailure] = []
    unexpected: BaseException | None = None
    for repo, future in futures:
        error = future.exception()
        if error is None:
            continue
        if isinstance(error, BmoError):
            logger.debug("Worker for %s failed: %s", repo.path, error)
            failures.append(RepositoryFailure(repository=repo, error=error))
        elif unexpected is None:
            unexpected = error
    if unexpected is not None:
        raise unexpected
    return failures
