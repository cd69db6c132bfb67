"""Tests for config path resolution and clone URL parsing."""

from __future__ import annotations

import os
import unittest
from pathlib import Path
from unittest import mock

from bmo.config import CONFIG_ENV, default_destination, parse_endpoint, resolve_config_path
from bmo.exceptions import ValidationError
from bmo.models import Endpoint


class ParseEndpointTests(unittest.TestCase):
    def test_scp_like_address_is_ssh(self) -> None:
        endpoint = parse_endpoint("git@github.com:benhinchley/bmo.git")

        self.assertEqual(
            endpoint,
            Endpoint(protocol="ssh", user="git", host="github.com", path="benhinchley/bmo.git"),
        )
        self.assertEqual(endpoint.repo_name, "bmo")

    def test_ssh_url_with_port(self) -> None:
        endpoint = parse_endpoint("ssh://deploy@git.example.com:2222/team/api.git")

        self.assertEqual(endpoint.protocol, "ssh")
        self.assertEqual(endpoint.user, "deploy")
        self.assertEqual(endpoint.host, "git.example.com")
        self.assertEqual(endpoint.port, 2222)
        self.assertEqual(endpoint.repo_name, "api")

    def test_https_url(self) -> None:
        endpoint = parse_endpoint("https://github.com/pallets/click/")

        self.assertEqual(endpoint.protocol, "https")
        self.assertEqual(endpoint.user, "")
        self.assertEqual(endpoint.repo_name, "click")

    def test_local_path_is_file_transport(self) -> None:
        endpoint = parse_endpoint("/srv/git/tools.git")

        self.assertEqual(endpoint.protocol, "file")
        self.assertEqual(endpoint.repo_name, "tools")

    def test_rejects_unsupported_scheme_and_empty_url(self) -> None:
        for url in ("ftp://example.com/repo.git", "   ", "https:///missing-host"):
            with self.subTest(url=url):
                with self.assertRaises(ValidationError):
                    parse_endpoint(url)


class DefaultDestinationTests(unittest.TestCase):
    def test_uses_last_path_segment(self) -> None:
        endpoint = parse_endpoint("https://github.com/pallets/click.git")

        self.assertEqual(default_destination(endpoint, Path("/work")), Path("/work/click"))

    def test_rejects_url_without_name(self) -> None:
        with self.assertRaises(ValidationError):
            default_destination(Endpoint(protocol="https", host="example.com", path="/"), Path("/work"))


class ResolveConfigPathTests(unittest.TestCase):
    def test_override_wins(self) -> None:
        with mock.patch.dict(os.environ, {CONFIG_ENV: "/env/config"}):
            self.assertEqual(resolve_config_path(Path("/explicit/config")), Path("/explicit/config"))

    def test_environment_variable(self) -> None:
        with mock.patch.dict(os.environ, {CONFIG_ENV: "/env/config"}):
            self.assertEqual(resolve_config_path(), Path("/env/config"))

    def test_defaults_to_home_directory(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=False):
            os.environ.pop(CONFIG_ENV, None)
            self.assertEqual(resolve_config_path(), Path("~/.bmoconfig").expanduser())


if __name__ == "__main__":
    unittest.main()
