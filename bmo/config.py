"""Resolve runtime configuration and parse clone URLs."""

from __future__ import annotations

import os
import re
from pathlib import Path
from urllib.parse import urlparse

from .exceptions import ValidationError
from .models import Endpoint

CONFIG_ENV = "BMO_CONFIG"
DEFAULT_CONFIG_PATH = "~/.bmoconfig"

_KNOWN_SCHEMES = {"ssh", "git", "http", "https", "file"}
_SCP_LIKE = re.compile(
    r"^(?:(?P<user>[^@/]+)@)?(?P<host>[^:/\s]+):(?:(?P<port>[0-9]{1,5})/)?(?P<path>[^\\].*)$"
)
_WINDOWS_DRIVE = re.compile(r"^[A-Za-z]:[\\/]")


def resolve_config_path(override: Path | None = None) -> Path:
    if override:
        return override.expanduser()
    raw = os.environ.get(CONFIG_ENV)
    if raw:
        return Path(raw).expanduser()
    return Path(DEFAULT_CONFIG_PATH).expanduser()


def parse_endpoint(url: str) -> Endpoint:
    """Classify a clone URL by transport the way git does."""

    url = url.strip()
    if not url:
        raise ValidationError("Clone URL cannot be empty.")
    if "://" in url:
        parsed = urlparse(url)
        scheme = parsed.scheme.lower()
        if scheme.startswith("git+"):
            scheme = scheme[len("git+"):]
        if scheme not in _KNOWN_SCHEMES:
            raise ValidationError(f"Unsupported clone URL scheme: {parsed.scheme}")
        try:
            port = parsed.port
        except ValueError as exc:
            raise ValidationError(f"Invalid port in clone URL: {url}") from exc
        if scheme != "file" and not parsed.hostname:
            raise ValidationError(f"Clone URL is missing a host: {url}")
        return Endpoint(
            protocol=scheme,
            user=parsed.username or "",
            host=parsed.hostname or "",
            port=port,
            path=parsed.path,
        )
    if not _WINDOWS_DRIVE.match(url):
        match = _SCP_LIKE.match(url)
        if match and not Path(url).exists():
            port = match.group("port")
            return Endpoint(
                protocol="ssh",
                user=match.group("user") or "",
                host=match.group("host"),
                port=int(port) if port else None,
                path=match.group("path"),
            )
    return Endpoint(protocol="file", path=url)


def default_destination(endpoint: Endpoint, working_dir: Path) -> Path:
    name = endpoint.repo_name
    if not name or name in (".", ".."):
        raise ValidationError(
            f"Unable to derive a directory name from {endpoint.path!r}. Pass an explicit path."
        )
    return working_dir / name
