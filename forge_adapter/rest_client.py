"""Async REST transport, typed errors, and auth helpers for GitHub/Gitea APIs."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import httpx
from dotenv import load_dotenv

from forge_adapter.config import Platform, PlatformConfig, get_platform_config

GITHUB_API_VERSION = "2022-11-28"
JSON_ACCEPT_HEADER = "application/vnd.github+json"
PAGE_SIZE = 100
TOKEN_ENV_VARS = ("GITHUB_TOKEN", "GITEA_TOKEN", "GH_TOKEN")

logger = logging.getLogger(__name__)


class ForgeAuthError(RuntimeError):
    """Raised when required API authentication is missing."""


class ForgeInputError(ValueError):
    """Raised when repository, number, or login input values are invalid."""


class ForgeApiError(RuntimeError):
    """Raised when a REST API request fails or returns an unexpected shape."""

    def __init__(self, message: str, *, status_code: int, endpoint: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


def _ensure_mapping(value: object, *, context: str) -> dict[str, Any]:
    """Ensure a response fragment is a JSON object."""
    if not isinstance(value, dict):
        raise ForgeApiError(
            f"Expected JSON object for {context}.",
            status_code=500,
            endpoint=context,
        )
    return value


def require_str(payload: dict[str, Any], *, key: str, endpoint: str) -> str:
    """Read a required string field from payload."""
    value = payload.get(key)
    if not isinstance(value, str):
        raise ForgeApiError(
            f"Expected string field '{key}' in API response.",
            status_code=500,
            endpoint=endpoint,
        )
    return value


def require_int(payload: dict[str, Any], *, key: str, endpoint: str) -> int:
    """Read a required integer field from payload."""
    value = payload.get(key)
    if not isinstance(value, int) or isinstance(value, bool):
        raise ForgeApiError(
            f"Expected integer field '{key}' in API response.",
            status_code=500,
            endpoint=endpoint,
        )
    return value


def require_object(payload: dict[str, Any], *, key: str, endpoint: str) -> dict[str, Any]:
    """Read a required object field from payload."""
    value = payload.get(key)
    if not isinstance(value, dict):
        raise ForgeApiError(
            f"Expected object field '{key}' in API response.",
            status_code=500,
            endpoint=endpoint,
        )
    return value


def _raise_http_error(response: httpx.Response, endpoint: str) -> None:
    """Raise a typed error for a non-success API response."""
    raise ForgeApiError(
        f"API request failed with status {response.status_code} for '{endpoint}'.",
        status_code=response.status_code,
        endpoint=endpoint,
    )


async def _get(
    client: httpx.AsyncClient,
    endpoint: str,
    *,
    params: dict[str, Any] | None = None,
) -> httpx.Response:
    """Perform one GET request and fail on any non-2xx status."""
    logger.debug("GET %s params=%s", endpoint, params)
    response = await client.get(endpoint, params=params)
    if response.status_code >= 400:
        _raise_http_error(response, endpoint)
    return response


def _decode_json(response: httpx.Response, endpoint: str) -> object:
    """Decode a JSON body, treating an unparseable body as an API error."""
    try:
        return response.json()
    except ValueError as error:
        raise ForgeApiError(
            "Expected JSON body in API response.",
            status_code=500,
            endpoint=endpoint,
        ) from error


async def request_json(
    client: httpx.AsyncClient,
    endpoint: str,
    *,
    params: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Perform a JSON request that returns an object."""
    response = await _get(client, endpoint, params=params)
    return _ensure_mapping(_decode_json(response, endpoint), context=endpoint)


async def request_json_list(
    client: httpx.AsyncClient,
    endpoint: str,
    *,
    params: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Perform a JSON request that returns an array of objects."""
    response = await _get(client, endpoint, params=params)
    payload = _decode_json(response, endpoint)
    if payload is None:
        # Gitea answers some empty list endpoints with a JSON null.
        return []
    if not isinstance(payload, list):
        raise ForgeApiError(
            "Expected JSON array in API response.",
            status_code=500,
            endpoint=endpoint,
        )
    rows: list[dict[str, Any]] = []
    for item in payload:
        if not isinstance(item, dict):
            raise ForgeApiError(
                "Expected all array items to be JSON objects in API response.",
                status_code=500,
                endpoint=endpoint,
            )
        rows.append(item)
    return rows


def first_page_params() -> dict[str, int]:
    """Query params for a single capped page; Gitea reads ``limit``, GitHub ``per_page``."""
    return {"per_page": PAGE_SIZE, "limit": PAGE_SIZE}


def validate_repo_coordinates(owner: str, repo: str) -> tuple[str, str]:
    """Validate and normalize owner/repo input."""
    normalized_owner = owner.strip()
    normalized_repo = repo.strip()
    if not normalized_owner or "/" in normalized_owner:
        raise ForgeInputError(f"Invalid owner '{owner}'. Expected a non-empty account name.")
    if not normalized_repo or "/" in normalized_repo:
        raise ForgeInputError(f"Invalid repo '{repo}'. Expected a non-empty repository name.")
    return normalized_owner, normalized_repo


def validate_number(number: int) -> int:
    """Validate and normalize a pull request or issue number."""
    if number <= 0:
        raise ForgeInputError(f"Invalid number '{number}'. Expected a positive integer.")
    return number


def validate_login(login: str) -> str:
    """Validate and normalize a user login."""
    normalized_login = login.strip()
    if not normalized_login:
        raise ForgeInputError("Invalid login ''. Expected a non-empty user login.")
    return normalized_login


def get_forge_token_with_source() -> tuple[str, str]:
    """Read the API token and return it with the environment variable it came from."""
    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

    for key in TOKEN_ENV_VARS:
        token = os.getenv(key)
        if token:
            return token, key

    message = "Missing API token. Set GITHUB_TOKEN (preferred), GITEA_TOKEN, or GH_TOKEN."
    raise ForgeAuthError(message)


def build_forge_client(
    config: PlatformConfig | None = None,
    *,
    timeout_seconds: int = 20,
    trust_env: bool = True,
) -> httpx.AsyncClient:
    """Build an authenticated async HTTP client for the configured API."""
    resolved = config or get_platform_config()
    token, _source = get_forge_token_with_source()
    headers = {"Accept": JSON_ACCEPT_HEADER}
    if resolved.platform is Platform.GITEA:
        headers["Authorization"] = f"token {token}"
    else:
        headers["Authorization"] = f"Bearer {token}"
        headers["X-GitHub-Api-Version"] = GITHUB_API_VERSION
    return httpx.AsyncClient(
        base_url=resolved.api_base_url,
        headers=headers,
        timeout=timeout_seconds,
        trust_env=trust_env,
    )
