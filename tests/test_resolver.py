"""Tests for mapping repo/file tokens onto workspace members."""

from __future__ import annotations

import unittest
from pathlib import Path

from bmo.exceptions import UnknownRepositoryError, ValidationError
from bmo.resolver import find_short_name_collision, resolve, split_file_tokens


class ResolveTests(unittest.TestCase):
    def setUp(self) -> None:
        self.members = ["/src/api", "/work/web", "/other/web"]

    def test_matches_member_by_short_name(self) -> None:
        self.assertEqual(resolve(self.members, "api/README.md"), (Path("/src/api"), "README.md"))

    def test_splits_on_first_slash_only(self) -> None:
        repo, rel_file = resolve(self.members, "api/src/pkg/main.py")

        self.assertEqual(repo, Path("/src/api"))
        self.assertEqual(rel_file, "src/pkg/main.py")

    def test_first_matching_member_wins(self) -> None:
        repo, _ = resolve(self.members, "web/index.html")

        self.assertEqual(repo, Path("/work/web"))

    def test_trailing_slash_in_member_path(self) -> None:
        repo, _ = resolve(["/src/api/"], "api/x.txt")

        self.assertEqual(repo, Path("/src/api"))

    def test_unknown_repository_raises(self) -> None:
        with self.assertRaises(UnknownRepositoryError) as ctx:
            resolve(self.members, "docs/index.md", "platform")
        self.assertEqual(ctx.exception.repo, "docs")
        self.assertIn("platform", str(ctx.exception))

    def test_token_without_file_is_rejected(self) -> None:
        for token in ("api", "api/", "/README.md"):
            with self.subTest(token=token):
                with self.assertRaises(ValidationError):
                    resolve(self.members, token)


class SplitFileTokensTests(unittest.TestCase):
    def test_accepts_comma_joined_and_separate_arguments(self) -> None:
        tokens = split_file_tokens(["api/a.py,web/b.js", "api/c.py", " , "])

        self.assertEqual(tokens, ["api/a.py", "web/b.js", "api/c.py"])


class ShortNameCollisionTests(unittest.TestCase):
    def test_reports_member_with_same_short_name(self) -> None:
        self.assertEqual(find_short_name_collision(["/src/api"], "/fork/api"), "/src/api")

    def test_ignores_identical_path_and_distinct_names(self) -> None:
        self.assertIsNone(find_short_name_collision(["/src/api"], "/src/api"))
        self.assertIsNone(find_short_name_collision(["/src/api"], "/src/web"))


if __name__ == "__main__":
    unittest.main()
