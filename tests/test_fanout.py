"""Tests for the concurrent fan-out executor."""

from __future__ import annotations

import threading
import unittest
from pathlib import Path

from bmo.exceptions import VCSOperationError
from bmo.fanout import fan_out
from bmo.models import RepositoryRef


def _refs(*names: str) -> list[RepositoryRef]:
    return [RepositoryRef(path=Path("/ws") / name) for name in names]


class FanOutTests(unittest.TestCase):
    def test_zero_members_is_silent_success(self) -> None:
        emitted: list[object] = []

        failures = fan_out([], lambda repo: ["never"], emitted.append)

        self.assertEqual(failures, [])
        self.assertEqual(emitted, [])

    def test_emits_union_of_results_preserving_per_repository_order(self) -> None:
        repos = _refs("api", "web", "cli")
        emitted: list[tuple[str, int]] = []

        def operation(repo: RepositoryRef):
            for index in range(50):
                yield repo.name, index

        failures = fan_out(repos, operation, emitted.append)

        self.assertEqual(failures, [])
        self.assertEqual(len(emitted), 150)
        for repo in repos:
            own = [index for name, index in emitted if name == repo.name]
            self.assertEqual(own, list(range(50)))

    def test_runs_one_worker_per_member_concurrently(self) -> None:
        repos = _refs("api", "web", "cli", "docs")
        barrier = threading.Barrier(len(repos), timeout=5)
        threads: set[str] = set()
        emitted: list[str] = []

        def operation(repo: RepositoryRef):
            # Blocks until every member's worker is running at the same time.
            barrier.wait()
            threads.add(threading.current_thread().name)
            yield repo.name

        failures = fan_out(repos, operation, emitted.append)

        self.assertEqual(failures, [])
        self.assertEqual(sorted(emitted), sorted(repo.name for repo in repos))
        self.assertEqual(len(threads), len(repos))

    def test_collects_every_failure_in_member_order(self) -> None:
        repos = _refs("api", "web", "cli")
        emitted: list[str] = []

        def operation(repo: RepositoryRef):
            if repo.name != "web":
                raise VCSOperationError(f"{repo.name} is broken")
            yield "web ok"

        failures = fan_out(repos, operation, emitted.append)

        self.assertEqual(emitted, ["web ok"])
        self.assertEqual([failure.repository.name for failure in failures], ["api", "cli"])
        self.assertEqual(str(failures[0].error), "api is broken")

    def test_failure_after_partial_output_keeps_emitted_entries(self) -> None:
        repos = _refs("api")
        emitted: list[int] = []

        def operation(repo: RepositoryRef):
            yield 1
            yield 2
            raise VCSOperationError("history truncated")

        failures = fan_out(repos, operation, emitted.append)

        self.assertEqual(emitted, [1, 2])
        self.assertEqual(len(failures), 1)

    def test_unexpected_exceptions_propagate(self) -> None:
        repos = _refs("api", "web")

        def operation(repo: RepositoryRef):
            if repo.name == "web":
                raise KeyError("bug")
            yield repo.name

        with self.assertRaises(KeyError):
            fan_out(repos, operation, lambda entry: None)


if __name__ == "__main__":
    unittest.main()
