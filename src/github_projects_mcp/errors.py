"""Error taxonomy and envelope helpers.

Every failure inside a tool invocation is raised as a SafeError and converted to a
failure envelope exactly once, at the dispatch boundary. Messages must never include
the bearer credential.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

MAX_DETAIL_CHARS = 2000


@dataclass(frozen=True, slots=True)
class SafeError(Exception):
    """An error safe to expose to the calling agent."""

    code: str
    message: str
    hint: str | None = None
    status_code: int | None = None
    detail: str | None = None


def missing_credential(env_var: str) -> SafeError:
    """No bearer token is available; raised before any network activity."""
    return SafeError(
        code="MissingCredential",
        message=f"{env_var} environment variable is not set",
        hint="Provide a GitHub token with project scope in the server environment",
    )


def unknown_operation(name: str, available: list[str]) -> SafeError:
    return SafeError(
        code="UnknownOperation",
        message=f"Unknown tool: {name}",
        hint=f"Available tools: {', '.join(sorted(available))}",
    )


def missing_parameter(name: str) -> SafeError:
    return SafeError(code="MissingParameter", message=f"Missing required parameter: {name}")


def invalid_parameter(name: str, reason: str) -> SafeError:
    return SafeError(code="InvalidParameter", message=f"Invalid parameter '{name}': {reason}")


def not_found(resource: str, hint: str | None = None) -> SafeError:
    return SafeError(code="NotFound", message=f"Not found: {resource}", hint=hint)


def upstream_error(*, status_code: int, body: str) -> SafeError:
    """Non-2xx response from the GitHub API; the raw body is kept for diagnostics."""
    return SafeError(
        code="UpstreamError",
        message=f"GitHub API error ({status_code})",
        status_code=status_code,
        detail=_truncate(body),
    )


def transport_error(cause: Exception) -> SafeError:
    """Connection, DNS or timeout failure before a response was received."""
    reason = str(cause) or type(cause).__name__
    return SafeError(code="TransportError", message="Network request to GitHub failed", hint=reason)


def _truncate(text: str) -> str:
    if len(text) > MAX_DETAIL_CHARS:
        return text[:MAX_DETAIL_CHARS] + "..."
    return text


def safe_error_to_result(err: SafeError) -> dict[str, Any]:
    """Convert a SafeError into the standard tool failure envelope."""
    out = to_error_result(code=err.code, message=err.message, hint=err.hint)
    if err.status_code is not None:
        out["status_code"] = err.status_code
    if err.detail:
        out["detail"] = err.detail
    return out


def to_error_result(*, code: str, message: str, hint: str | None = None) -> dict[str, Any]:
    """Build a standard tool error envelope."""
    out: dict[str, Any] = {"ok": False, "code": code, "message": message}
    if hint:
        out["hint"] = hint
    return out


def internal_error(message: str = "Internal error") -> dict[str, Any]:
    """Error for unexpected failures."""
    return to_error_result(code="Internal", message=message)
