"""Argument validation coverage.

Exercises `validate_tool_arguments` directly: required parameters, defaults, integer
range and coercion, enum membership, state expansion and the per-operation checks.
"""

from __future__ import annotations

from typing import Any

import pytest
from github_projects_mcp.errors import SafeError
from github_projects_mcp.operations import OPERATIONS
from github_projects_mcp.tools import TOOL_METADATA, validate_tool_arguments


def _validate(name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    return validate_tool_arguments(OPERATIONS[name], arguments)


def _error(name: str, arguments: dict[str, Any]) -> SafeError:
    with pytest.raises(SafeError) as exc:
        _ = _validate(name, arguments)
    return exc.value


def test_issue_defaults_are_applied() -> None:
    params = _validate("get_repository_issues", {"owner": "octo", "repo": "repo"})
    assert params == {"owner": "octo", "repo": "repo", "states": ["OPEN"], "first": 20}


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("get_repository_issues", ["OPEN", "CLOSED"]),
        ("get_repository_pull_requests", ["OPEN", "CLOSED", "MERGED"]),
    ],
)
def test_all_state_expands_to_every_discrete_state(name: str, expected: list[str]) -> None:
    params = _validate(name, {"owner": "octo", "repo": "repo", "states": "ALL"})
    assert sorted(params["states"]) == sorted(expected)


def test_single_state_is_sent_as_list() -> None:
    params = _validate("get_repository_pull_requests", {"owner": "octo", "repo": "repo", "states": "MERGED"})
    assert params["states"] == ["MERGED"]


def test_merged_is_not_an_issue_state() -> None:
    err = _error("get_repository_issues", {"owner": "octo", "repo": "repo", "states": "MERGED"})
    assert err.code == "InvalidParameter"
    assert "states" in err.message


def test_state_enum_is_case_sensitive() -> None:
    err = _error("get_repository_issues", {"owner": "octo", "repo": "repo", "states": "open"})
    assert err.code == "InvalidParameter"


@pytest.mark.parametrize("first", [0, 101, -5])
def test_first_outside_range_is_invalid(first: int) -> None:
    err = _error("get_repositories", {"owner": "octo", "first": first})
    assert err.code == "InvalidParameter"
    assert "first" in err.message


@pytest.mark.parametrize("first", [1, 100])
def test_first_range_bounds_are_inclusive(first: int) -> None:
    assert _validate("get_repositories", {"owner": "octo", "first": first})["first"] == first


def test_integral_float_is_coerced_to_int() -> None:
    params = _validate("get_repositories", {"owner": "octo", "first": 50.0})
    assert params["first"] == 50
    assert isinstance(params["first"], int)


@pytest.mark.parametrize("first", [True, "20", 2.5])
def test_first_rejects_non_integers(first: Any) -> None:
    err = _error("get_repositories", {"owner": "octo", "first": first})
    assert err.code == "InvalidParameter"


def test_is_org_must_be_boolean() -> None:
    err = _error("get_repositories", {"owner": "octo", "isOrg": "yes"})
    assert err.code == "InvalidParameter"
    assert "isOrg" in err.message


def test_get_repositories_defaults() -> None:
    assert _validate("get_repositories", {"owner": "octo"}) == {"owner": "octo", "isOrg": False, "first": 20}


def test_missing_required_parameter() -> None:
    err = _error("get_repository_issues", {"owner": "octo"})
    assert err.code == "MissingParameter"
    assert err.message.endswith("repo")


def test_none_for_required_parameter_counts_as_missing() -> None:
    err = _error("get_project_views", {"projectId": None})
    assert err.code == "MissingParameter"


def test_empty_required_string_is_invalid() -> None:
    err = _error("get_github_projects", {"organization": ""})
    assert err.code == "InvalidParameter"


def test_non_string_is_invalid() -> None:
    err = _error("get_github_projects", {"organization": 42})
    assert err.code == "InvalidParameter"


def test_unexpected_parameter_is_rejected() -> None:
    err = _error("get_project_views", {"projectId": "PVT_1", "cursor": "abc"})
    assert err.code == "InvalidParameter"
    assert "cursor" in err.message


def test_none_for_optional_parameter_means_omitted() -> None:
    params = _validate(
        "add_item_to_project",
        {"organization": "octo-org", "projectName": "Roadmap", "projectId": None, "title": "Draft"},
    )
    assert "projectId" not in params
    assert params["title"] == "Draft"


def test_add_item_requires_content_id_or_title() -> None:
    err = _error("add_item_to_project", {"organization": "octo-org", "projectName": "Roadmap", "body": "text"})
    assert err.code == "InvalidParameter"
    assert "contentId|title" in err.message
    assert "at least one required" in err.message


def test_add_item_empty_strings_do_not_satisfy_one_of() -> None:
    err = _error(
        "add_item_to_project",
        {"organization": "octo-org", "projectName": "Roadmap", "contentId": "", "title": ""},
    )
    assert err.code == "InvalidParameter"


def test_update_field_value_type_defaults_to_text() -> None:
    params = _validate(
        "update_project_item_field",
        {"projectId": "PVT_1", "itemId": "PVTI_1", "fieldId": "F_1", "value": "hello"},
    )
    assert params["valueType"] == "TEXT"


def test_update_field_number_requires_numeric_value() -> None:
    err = _error(
        "update_project_item_field",
        {"projectId": "PVT_1", "itemId": "PVTI_1", "fieldId": "F_1", "value": "many", "valueType": "NUMBER"},
    )
    assert err.code == "InvalidParameter"
    assert "value" in err.message


@pytest.mark.parametrize("value", ["next week", "20240101", "2024-W01-1", "2024-02-30"])
def test_update_field_date_requires_iso_date(value: str) -> None:
    err = _error(
        "update_project_item_field",
        {"projectId": "PVT_1", "itemId": "PVTI_1", "fieldId": "F_1", "value": value, "valueType": "DATE"},
    )
    assert err.code == "InvalidParameter"


def test_update_field_date_accepts_calendar_date() -> None:
    params = _validate(
        "update_project_item_field",
        {"projectId": "PVT_1", "itemId": "PVTI_1", "fieldId": "F_1", "value": "2024-01-31", "valueType": "DATE"},
    )
    assert params["value"] == "2024-01-31"


def test_tool_metadata_schemas_match_operations() -> None:
    assert set(TOOL_METADATA) == {
        "get_github_projects",
        "get_project_details",
        "get_repository_issues",
        "get_repository_pull_requests",
        "add_item_to_project",
        "update_project_item_field",
        "get_repositories",
        "get_project_views",
    }
    issues = TOOL_METADATA["get_repository_issues"]["inputSchema"]
    assert issues["required"] == ["owner", "repo"]
    assert issues["properties"]["first"] == {
        "type": "integer",
        "description": "Number of results to return (1-100)",
        "minimum": 1,
        "maximum": 100,
        "default": 20,
    }
    assert issues["properties"]["states"]["enum"] == ["OPEN", "CLOSED", "ALL"]
    assert issues["additionalProperties"] is False

    repos = TOOL_METADATA["get_repositories"]["inputSchema"]
    assert repos["properties"]["isOrg"]["default"] is False
