"""Foundational tests: audit logging."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from github_projects_mcp.audit import AuditLogger, build_event, new_correlation_id


def test_new_correlation_id_is_random_hex() -> None:
    a = new_correlation_id()
    b = new_correlation_id()
    assert a != b
    assert len(a) == 32
    int(a, 16)


def test_build_event_timestamp_is_utc_rfc3339() -> None:
    event = build_event(correlation_id="c", operation="get_project_views", target="PVT_1", outcome="succeeded")
    assert event.timestamp.endswith("Z")
    assert event.reason is None


def test_write_event_emits_json_on_audit_logger(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="github_projects_mcp.audit")
    audit = AuditLogger(sink_path=None)

    audit.write_event(
        build_event(
            correlation_id="abc",
            operation="get_repository_issues",
            target="octo/repo",
            outcome="denied",
            reason="Missing required parameter: repo",
        )
    )

    records = [r for r in caplog.records if r.name == "github_projects_mcp.audit"]
    assert len(records) == 1
    payload = json.loads(records[0].getMessage())
    assert payload["correlation_id"] == "abc"
    assert payload["outcome"] == "denied"
    assert payload["reason"] == "Missing required parameter: repo"
    assert "duration_ms" not in payload


def test_write_event_appends_to_file_sink(tmp_path: Path) -> None:
    sink = tmp_path / "nested" / "audit.jsonl"
    audit = AuditLogger(sink_path=sink)

    audit.write_event(build_event(correlation_id="1", operation="op", target="t", outcome="succeeded", duration_ms=3))
    audit.write_event(build_event(correlation_id="2", operation="op", target="t", outcome="failed", reason="x"))

    lines = sink.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["correlation_id"] for line in lines] == ["1", "2"]
    assert json.loads(lines[0])["duration_ms"] == 3


def test_file_sink_rotates_by_size(tmp_path: Path) -> None:
    sink = tmp_path / "audit.jsonl"
    audit = AuditLogger(sink_path=sink, max_bytes=300, max_backups=1)

    for i in range(10):
        audit.write_event(build_event(correlation_id=str(i), operation="op", target="t", outcome="succeeded"))

    assert sink.exists()
    assert (tmp_path / "audit.jsonl.1").exists()
    assert not (tmp_path / "audit.jsonl.2").exists()


def test_measure_duration_is_non_negative() -> None:
    audit = AuditLogger(sink_path=None)
    start = audit.measure_start()
    assert audit.measure_duration_ms(start) >= 0
