"""Operation definitions.

Each Operation is an immutable record: a unique name, the declared parameters, the
pre-validation checks that run after per-parameter validation, and an async builder that
turns validated parameters into a GraphQL document plus variables. Only
`add_item_to_project` uses the client inside its builder (project lookup by name).
"""

from __future__ import annotations

import math
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from typing import Any

from . import queries
from .errors import SafeError, invalid_parameter, not_found
from .graphql_client import GitHubGraphQLClient


@dataclass(frozen=True, slots=True)
class ParamSpec:
    """Declared input parameter.

    `expand_all` marks a state filter: the value is sent as a list, and the composite
    "ALL" member stands for every other enum member.
    """

    name: str
    type: str
    description: str
    required: bool = False
    default: Any = None
    enum: tuple[str, ...] | None = None
    minimum: int | None = None
    maximum: int | None = None
    expand_all: bool = False

    def json_schema(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.type == "string" and self.required:
            out["minLength"] = 1
        if self.enum is not None:
            out["enum"] = list(self.enum)
        if self.minimum is not None:
            out["minimum"] = self.minimum
        if self.maximum is not None:
            out["maximum"] = self.maximum
        if self.default is not None:
            out["default"] = self.default
        return out


@dataclass(frozen=True, slots=True)
class GraphQLRequest:
    """A fixed document and the variables bound to it."""

    query: str
    variables: dict[str, Any]


Check = Callable[[dict[str, Any]], None]
Builder = Callable[[dict[str, Any], GitHubGraphQLClient], Awaitable[GraphQLRequest]]


@dataclass(frozen=True, slots=True)
class Operation:
    name: str
    description: str
    params: tuple[ParamSpec, ...]
    build: Builder
    checks: tuple[Check, ...] = ()

    def input_schema(self) -> dict[str, Any]:
        """JSON Schema advertised to MCP clients."""
        return {
            "type": "object",
            "required": [p.name for p in self.params if p.required],
            "properties": {p.name: p.json_schema() for p in self.params},
            "additionalProperties": False,
        }


def expand_enum_value(spec: ParamSpec, value: str) -> list[str]:
    """Expand a state filter into the discrete values the GitHub schema accepts."""
    if value == "ALL" and spec.enum is not None:
        return [v for v in spec.enum if v != "ALL"]
    return [value]


def require_one_of(*names: str) -> Check:
    """Require at least one of `names` to be supplied (non-empty).

    When several are supplied the earliest name wins; builders read them in the same
    order and ignore the rest.
    """

    def _check(params: dict[str, Any]) -> None:
        if not any(params.get(n) for n in names):
            raise invalid_parameter("|".join(names), "at least one required")

    return _check


_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_FIELD_VALUE_KEYS: dict[str, str] = {
    "TEXT": "text",
    "NUMBER": "number",
    "DATE": "date",
    "SINGLE_SELECT": "singleSelectOptionId",
    "ITERATION": "iterationId",
}


def _check_field_value(params: dict[str, Any]) -> None:
    value_type = params["valueType"]
    value = params["value"]
    if value_type == "NUMBER":
        try:
            number = float(value)
        except ValueError:
            raise invalid_parameter("value", "must be numeric when valueType is NUMBER") from None
        if not math.isfinite(number):
            raise invalid_parameter("value", "must be a finite number")
    elif value_type == "DATE":
        if not _ISO_DATE_RE.match(value):
            raise invalid_parameter("value", "must be an ISO date (YYYY-MM-DD) when valueType is DATE")
        try:
            date.fromisoformat(value)
        except ValueError:
            raise invalid_parameter("value", "must be an ISO date (YYYY-MM-DD) when valueType is DATE") from None


def _first_graphql_error(payload: Any) -> str | None:
    errors = payload.get("errors") if isinstance(payload, dict) else None
    if isinstance(errors, list) and errors:
        first = errors[0]
        if isinstance(first, dict) and isinstance(first.get("message"), str):
            return first["message"]
    return None


async def resolve_project_id(client: GitHubGraphQLClient, *, organization: str, project_name: str) -> str:
    """Look up an organization project by name and return its node id.

    An exact (case-insensitive) title match wins over GitHub's fuzzy search order.
    """
    payload = await client.execute(
        query=queries.QUERY_FIND_ORGANIZATION_PROJECT,
        variables={"org": organization, "projectName": project_name},
    )
    data = payload.get("data") if isinstance(payload, dict) else None
    org = data.get("organization") if isinstance(data, dict) else None
    projects = org.get("projectsV2") if isinstance(org, dict) else None
    nodes = projects.get("nodes") if isinstance(projects, dict) else None

    candidates = [n for n in nodes or [] if isinstance(n, dict) and isinstance(n.get("id"), str)]
    if not candidates:
        raise not_found(
            f"project '{project_name}' in organization '{organization}'",
            hint=_first_graphql_error(payload),
        )

    wanted = project_name.casefold()
    for node in candidates:
        title = node.get("title")
        if isinstance(title, str) and title.casefold() == wanted:
            return node["id"]
    return candidates[0]["id"]


async def _build_get_github_projects(params: dict[str, Any], _client: GitHubGraphQLClient) -> GraphQLRequest:
    return GraphQLRequest(queries.QUERY_GET_ORGANIZATION_PROJECTS, {"org": params["organization"]})


async def _build_get_project_details(params: dict[str, Any], _client: GitHubGraphQLClient) -> GraphQLRequest:
    return GraphQLRequest(queries.QUERY_GET_PROJECT_DETAILS, {"id": params["projectId"]})


async def _build_get_repository_issues(params: dict[str, Any], _client: GitHubGraphQLClient) -> GraphQLRequest:
    return GraphQLRequest(
        queries.QUERY_GET_REPOSITORY_ISSUES,
        {"owner": params["owner"], "repo": params["repo"], "states": params["states"], "first": params["first"]},
    )


async def _build_get_repository_pull_requests(
    params: dict[str, Any], _client: GitHubGraphQLClient
) -> GraphQLRequest:
    return GraphQLRequest(
        queries.QUERY_GET_REPOSITORY_PULL_REQUESTS,
        {"owner": params["owner"], "repo": params["repo"], "states": params["states"], "first": params["first"]},
    )


async def _build_add_item_to_project(params: dict[str, Any], client: GitHubGraphQLClient) -> GraphQLRequest:
    project_id = params.get("projectId")
    if not project_id:
        project_id = await resolve_project_id(
            client,
            organization=params["organization"],
            project_name=params["projectName"],
        )

    content_id = params.get("contentId")
    if content_id:
        return GraphQLRequest(
            queries.MUTATION_ADD_PROJECT_ITEM_BY_ID,
            {"input": {"projectId": project_id, "contentId": content_id}},
        )

    return GraphQLRequest(
        queries.MUTATION_ADD_PROJECT_DRAFT_ISSUE,
        {"input": {"projectId": project_id, "title": params["title"], "body": params.get("body") or ""}},
    )


async def _build_update_project_item_field(params: dict[str, Any], _client: GitHubGraphQLClient) -> GraphQLRequest:
    value_type = params["valueType"]
    value: Any = params["value"]
    if value_type == "NUMBER":
        value = float(value)

    return GraphQLRequest(
        queries.MUTATION_UPDATE_PROJECT_ITEM_FIELD,
        {
            "input": {
                "projectId": params["projectId"],
                "itemId": params["itemId"],
                "fieldId": params["fieldId"],
                "value": {_FIELD_VALUE_KEYS[value_type]: value},
            }
        },
    )


async def _build_get_repositories(params: dict[str, Any], _client: GitHubGraphQLClient) -> GraphQLRequest:
    query = queries.QUERY_GET_ORGANIZATION_REPOSITORIES if params["isOrg"] else queries.QUERY_GET_USER_REPOSITORIES
    return GraphQLRequest(query, {"owner": params["owner"], "first": params["first"]})


async def _build_get_project_views(params: dict[str, Any], _client: GitHubGraphQLClient) -> GraphQLRequest:
    return GraphQLRequest(queries.QUERY_GET_PROJECT_VIEWS, {"id": params["projectId"]})


def _first_param() -> ParamSpec:
    return ParamSpec(
        "first",
        "integer",
        "Number of results to return (1-100)",
        default=20,
        minimum=1,
        maximum=100,
    )


_OPERATION_LIST: tuple[Operation, ...] = (
    Operation(
        name="get_github_projects",
        description="List the Projects (v2) of a GitHub organization.",
        params=(ParamSpec("organization", "string", "Organization login", required=True),),
        build=_build_get_github_projects,
    ),
    Operation(
        name="get_project_details",
        description="Get a project with its items, field values and field configuration.",
        params=(ParamSpec("projectId", "string", "Project node id", required=True),),
        build=_build_get_project_details,
    ),
    Operation(
        name="get_repository_issues",
        description="List issues of a repository with labels, assignees and project associations.",
        params=(
            ParamSpec("owner", "string", "Repository owner login", required=True),
            ParamSpec("repo", "string", "Repository name", required=True),
            ParamSpec(
                "states",
                "string",
                "Issue state filter",
                default="OPEN",
                enum=("OPEN", "CLOSED", "ALL"),
                expand_all=True,
            ),
            _first_param(),
        ),
        build=_build_get_repository_issues,
    ),
    Operation(
        name="get_repository_pull_requests",
        description="List pull requests of a repository with reviews, labels and project associations.",
        params=(
            ParamSpec("owner", "string", "Repository owner login", required=True),
            ParamSpec("repo", "string", "Repository name", required=True),
            ParamSpec(
                "states",
                "string",
                "Pull request state filter",
                default="OPEN",
                enum=("OPEN", "CLOSED", "MERGED", "ALL"),
                expand_all=True,
            ),
            _first_param(),
        ),
        build=_build_get_repository_pull_requests,
    ),
    Operation(
        name="add_item_to_project",
        description=(
            "Add an existing issue/PR (contentId) or a new draft issue (title) to a project. "
            "The project is looked up by name unless projectId is given; contentId wins over title."
        ),
        params=(
            ParamSpec("organization", "string", "Organization login owning the project", required=True),
            ParamSpec("projectName", "string", "Project title used to look up the project", required=True),
            ParamSpec("projectId", "string", "Project node id; skips the lookup by name"),
            ParamSpec("contentId", "string", "Node id of an existing issue or pull request"),
            ParamSpec("title", "string", "Title of a new draft issue"),
            ParamSpec("body", "string", "Body of a new draft issue"),
        ),
        build=_build_add_item_to_project,
        checks=(require_one_of("contentId", "title"),),
    ),
    Operation(
        name="update_project_item_field",
        description="Set the value of a field on a project item.",
        params=(
            ParamSpec("projectId", "string", "Project node id", required=True),
            ParamSpec("itemId", "string", "Project item id", required=True),
            ParamSpec("fieldId", "string", "Field id", required=True),
            ParamSpec("value", "string", "New value (text, number, ISO date, option id or iteration id)", required=True),
            ParamSpec(
                "valueType",
                "string",
                "How to interpret value",
                default="TEXT",
                enum=tuple(_FIELD_VALUE_KEYS),
            ),
        ),
        build=_build_update_project_item_field,
        checks=(_check_field_value,),
    ),
    Operation(
        name="get_repositories",
        description="List repositories of a user or organization, most recently updated first.",
        params=(
            ParamSpec("owner", "string", "User or organization login", required=True),
            ParamSpec("isOrg", "boolean", "Treat owner as an organization", default=False),
            _first_param(),
        ),
        build=_build_get_repositories,
    ),
    Operation(
        name="get_project_views",
        description="List the views configured for a project.",
        params=(ParamSpec("projectId", "string", "Project node id", required=True),),
        build=_build_get_project_views,
    ),
)


def _index(operations: tuple[Operation, ...]) -> dict[str, Operation]:
    out: dict[str, Operation] = {}
    for op in operations:
        if op.name in out:
            raise SafeError(code="Internal", message=f"Duplicate operation name: {op.name}")
        out[op.name] = op
    return out


OPERATIONS: dict[str, Operation] = _index(_OPERATION_LIST)
