"""Process-wide platform settings resolved from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "https://api.github.com"
DEFAULT_SERVER_BASE_URL = "https://github.com"
API_URL_ENV_VARS = ("GITHUB_API_URL", "GITEA_API_URL")
SERVER_URL_ENV_VARS = ("GITHUB_SERVER_URL", "GITEA_SERVER_URL")
USE_GITEA_API_ENV_VAR = "USE_GITEA_API"
GITHUB_HOST_MARKER = "github.com"


class Platform(StrEnum):
    """Supported code-hosting backends."""

    GITHUB = "github"
    GITEA = "gitea"


@dataclass(frozen=True, slots=True)
class PlatformConfig:
    """Resolved API/server URLs and platform selection."""

    api_base_url: str
    server_base_url: str
    use_alternate_api: bool

    @property
    def platform(self) -> Platform:
        """Platform selected by the explicit API flag."""
        return Platform.GITEA if self.use_alternate_api else Platform.GITHUB

    @property
    def web_platform(self) -> Platform:
        """Platform inferred from the web server URL.

        Any host that is not github.com is treated as Gitea-compatible.
        """
        if GITHUB_HOST_MARKER in self.server_base_url:
            return Platform.GITHUB
        return Platform.GITEA


def _first_non_empty(environ: Mapping[str, str], keys: tuple[str, ...], default: str) -> str:
    """Return the first set, non-empty value among keys, else default."""
    for key in keys:
        value = environ.get(key)
        if value:
            return value
    return default


def load_platform_config(environ: Mapping[str, str] | None = None) -> PlatformConfig:
    """Resolve platform settings from an environment mapping."""
    if environ is None:
        load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
        environ = os.environ

    return PlatformConfig(
        api_base_url=_first_non_empty(environ, API_URL_ENV_VARS, DEFAULT_API_BASE_URL),
        server_base_url=_first_non_empty(environ, SERVER_URL_ENV_VARS, DEFAULT_SERVER_BASE_URL),
        use_alternate_api=environ.get(USE_GITEA_API_ENV_VAR) == "true",
    )


_PLATFORM_CONFIG: PlatformConfig | None = None


def get_platform_config() -> PlatformConfig:
    """Return the process-wide platform config, resolving it on first use."""
    global _PLATFORM_CONFIG
    if _PLATFORM_CONFIG is None:
        _PLATFORM_CONFIG = load_platform_config()
    return _PLATFORM_CONFIG


def reset_platform_config() -> None:
    """Drop the cached config so the next lookup re-reads the environment."""
    global _PLATFORM_CONFIG
    _PLATFORM_CONFIG = None
