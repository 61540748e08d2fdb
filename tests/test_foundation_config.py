"""Foundational tests: configuration loading."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from github_projects_mcp.config import (AppConfig, env_token_provider,
                                        is_token_configured,
                                        load_config_from_env)
from github_projects_mcp.errors import SafeError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "GITHUB_TOKEN",
        "GITHUB_PROJECTS_MCP_TOKEN_ENV",
        "GITHUB_PROJECTS_MCP_LOG_LEVEL",
        "GITHUB_PROJECTS_MCP_AUDIT_LOG_PATH",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_config_defaults_without_token() -> None:
    cfg = load_config_from_env()

    assert cfg.token_env_var == "GITHUB_TOKEN"
    assert cfg.api_base_url == "https://api.github.com"
    assert cfg.log_level == logging.INFO
    assert cfg.audit_log_path is None


def test_load_config_parses_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GITHUB_PROJECTS_MCP_TOKEN_ENV", "GH_PROJECTS_TOKEN")
    monkeypatch.setenv("GITHUB_PROJECTS_MCP_LOG_LEVEL", "debug")
    monkeypatch.setenv("GITHUB_PROJECTS_MCP_AUDIT_LOG_PATH", str(tmp_path / "audit.jsonl"))

    cfg = load_config_from_env()

    assert cfg.token_env_var == "GH_PROJECTS_TOKEN"
    assert cfg.log_level == logging.DEBUG
    assert cfg.audit_log_path == tmp_path / "audit.jsonl"


def test_load_config_rejects_relative_audit_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_PROJECTS_MCP_AUDIT_LOG_PATH", "audit.jsonl")

    with pytest.raises(SafeError) as exc:
        _ = load_config_from_env()

    assert exc.value.code == "Config"
    assert "absolute path" in exc.value.message


def test_load_config_rejects_unknown_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_PROJECTS_MCP_LOG_LEVEL", "chatty")

    with pytest.raises(SafeError) as exc:
        _ = load_config_from_env()

    assert exc.value.code == "Config"


@pytest.mark.asyncio
async def test_env_token_provider_reads_at_call_time(monkeypatch: pytest.MonkeyPatch) -> None:
    provider = env_token_provider("GITHUB_TOKEN")

    assert await provider() is None

    monkeypatch.setenv("GITHUB_TOKEN", "  tok  ")
    assert await provider() == "tok"

    monkeypatch.setenv("GITHUB_TOKEN", "   ")
    assert await provider() is None


def test_is_token_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    cfg = AppConfig()
    assert is_token_configured(cfg) is False

    monkeypatch.setenv("GITHUB_TOKEN", "tok")
    assert is_token_configured(cfg) is True
