"""Structured audit logging.

One JSON event per tool invocation, emitted on the `github_projects_mcp.audit` logger and,
when configured, appended to a size-rotated JSONL file. Events never carry the bearer token
or tool argument values beyond the invocation target.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

_AUDIT_LOGGER_NAME = "github_projects_mcp.audit"


def new_correlation_id() -> str:
    """Generate a random correlation id tying an envelope to its audit event."""
    return uuid.uuid4().hex


def _now_rfc3339() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class AuditEvent:
    """A single audit event."""

    timestamp: str
    correlation_id: str
    operation: str
    target: str
    outcome: str
    reason: str | None
    duration_ms: int | None


class AuditLogger:
    """Writes audit events as JSON lines."""

    def __init__(
        self,
        *,
        sink_path: Path | None,
        max_bytes: int = 5 * 1024 * 1024,
        max_backups: int = 2,
    ) -> None:
        self._logger = logging.getLogger(_AUDIT_LOGGER_NAME)
        self._file_logger: logging.Logger | None = None
        if sink_path is not None:
            sink_path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                sink_path,
                maxBytes=max_bytes,
                backupCount=max_backups,
                encoding="utf-8",
            )
            handler.setFormatter(logging.Formatter("%(message)s"))
            file_logger = logging.getLogger(f"{_AUDIT_LOGGER_NAME}.file.{uuid.uuid4().hex[:8]}")
            file_logger.propagate = False
            file_logger.setLevel(logging.INFO)
            file_logger.addHandler(handler)
            self._file_logger = file_logger

    def write_event(self, event: AuditEvent) -> None:
        """Emit an audit event; unset optional fields are omitted."""
        payload = {k: v for k, v in asdict(event).items() if v is not None}
        line = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        self._logger.info(line)
        if self._file_logger is not None:
            self._file_logger.info(line)

    def measure_start(self) -> float:
        return time.monotonic()

    def measure_duration_ms(self, start: float) -> int:
        return int((time.monotonic() - start) * 1000)


def build_event(
    *,
    correlation_id: str,
    operation: str,
    target: str,
    outcome: str,
    reason: str | None = None,
    duration_ms: int | None = None,
) -> AuditEvent:
    """Construct an audit event stamped with the current UTC time."""
    return AuditEvent(
        timestamp=_now_rfc3339(),
        correlation_id=correlation_id,
        operation=operation,
        target=target,
        outcome=outcome,
        reason=reason,
        duration_ms=duration_ms,
    )
