"""Configuration loading for github-projects-mcp.

Configuration is supplied by the host environment (e.g., MCP client config), not by the agent.
The bearer token itself is not part of AppConfig: it is read from the environment on every
call through a token provider, so a server started without one still lists its tools and
reports MissingCredential per invocation.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from .errors import SafeError

GITHUB_API_BASE_URL = "https://api.github.com"
DEFAULT_TOKEN_ENV = "GITHUB_TOKEN"

TokenProvider = Callable[[], Awaitable[str | None]]


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Host-controlled server configuration."""

    token_env_var: str = DEFAULT_TOKEN_ENV
    api_base_url: str = GITHUB_API_BASE_URL
    log_level: int = logging.INFO
    audit_log_path: Path | None = None
    audit_max_bytes: int = 5 * 1024 * 1024
    audit_max_backups: int = 2


def _parse_log_level(value: str | None) -> int:
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise SafeError(code="Config", message=f"Unknown log level: {value}")
    return level


def load_config_from_env() -> AppConfig:
    """Load and validate configuration from environment variables.

    Raises:
        SafeError: If configuration is invalid.
    """
    token_env_var = os.getenv("GITHUB_PROJECTS_MCP_TOKEN_ENV", "").strip() or DEFAULT_TOKEN_ENV
    log_level = _parse_log_level(os.getenv("GITHUB_PROJECTS_MCP_LOG_LEVEL"))

    audit_path_raw = os.getenv("GITHUB_PROJECTS_MCP_AUDIT_LOG_PATH")
    audit_path: Path | None = None
    if audit_path_raw:
        p = Path(audit_path_raw)
        if not p.is_absolute():
            raise SafeError(
                code="Config",
                message="GITHUB_PROJECTS_MCP_AUDIT_LOG_PATH must be an absolute path when set",
            )
        audit_path = p

    return AppConfig(
        token_env_var=token_env_var,
        log_level=log_level,
        audit_log_path=audit_path,
    )


def env_token_provider(env_var: str) -> TokenProvider:
    """Return an async callable reading the bearer token from `env_var` at call time."""

    async def _provider() -> str | None:
        token = os.getenv(env_var)
        if token is None:
            return None
        return token.strip() or None

    return _provider


def is_token_configured(config: AppConfig) -> bool:
    """Return whether a non-empty token is currently present; never exposes the value."""
    return bool((os.getenv(config.token_env_var) or "").strip())
