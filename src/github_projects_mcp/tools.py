"""Tool registry and dispatch layer.

This module:
- publishes the operation catalog as MCP tool metadata
- validates and normalizes tool arguments (types, ranges, enums, defaults, state expansion)
- builds a per-server runtime from host-provided config
- runs one invocation as validate -> build -> execute -> wrap, and never raises
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .audit import AuditLogger, build_event, new_correlation_id
from .config import AppConfig, env_token_provider, load_config_from_env
from .errors import (SafeError, internal_error, invalid_parameter,
                     missing_parameter, safe_error_to_result,
                     unknown_operation)
from .graphql_client import GitHubGraphQLClient
from .operations import OPERATIONS, Operation, ParamSpec, expand_enum_value

logger = logging.getLogger(__name__)

TOOL_METADATA: dict[str, dict[str, Any]] = {
    name: {"description": op.description, "inputSchema": op.input_schema()} for name, op in OPERATIONS.items()
}

_DENIED_CODES: frozenset[str] = frozenset({"UnknownOperation", "MissingParameter", "InvalidParameter", "Config"})


@dataclass(frozen=True, slots=True)
class Runtime:
    """Per-server runtime dependencies shared across tool calls."""

    config: AppConfig
    audit: AuditLogger
    graphql: GitHubGraphQLClient


_RUNTIME: Runtime | None = None


def _coerce_value(spec: ParamSpec, value: Any) -> Any:
    if spec.type == "string":
        if not isinstance(value, str):
            raise invalid_parameter(spec.name, "must be a string")
        if spec.required and not value:
            raise invalid_parameter(spec.name, "must be a non-empty string")
        if spec.enum is not None and value not in spec.enum:
            raise invalid_parameter(spec.name, f"must be one of {', '.join(spec.enum)}")
        if spec.expand_all:
            return expand_enum_value(spec, value)
        return value

    if spec.type == "integer":
        # bool is an int subclass; JSON clients may also send 20.0 for 20.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise invalid_parameter(spec.name, "must be an integer")
        if isinstance(value, float):
            if not value.is_integer():
                raise invalid_parameter(spec.name, "must be an integer")
            value = int(value)
        if spec.minimum is not None and value < spec.minimum:
            raise invalid_parameter(spec.name, f"must be between {spec.minimum} and {spec.maximum}")
        if spec.maximum is not None and value > spec.maximum:
            raise invalid_parameter(spec.name, f"must be between {spec.minimum} and {spec.maximum}")
        return value

    if spec.type == "boolean":
        if not isinstance(value, bool):
            raise invalid_parameter(spec.name, "must be a boolean")
        return value

    raise SafeError(code="Internal", message=f"Unsupported parameter type: {spec.type}")


def validate_tool_arguments(operation: Operation, arguments: dict[str, Any]) -> dict[str, Any]:
    """Validate raw arguments against the operation's declared parameters.

    Returns the normalized parameters: defaults applied, integral floats coerced to int,
    state filters expanded to lists. Optional parameters that are omitted (or None) and
    have no default are absent from the result.

    Raises:
        SafeError: MissingParameter or InvalidParameter.
    """
    for spec in operation.params:
        if spec.required and arguments.get(spec.name) is None:
            raise missing_parameter(spec.name)

    declared = {spec.name for spec in operation.params}
    extras = sorted(k for k in arguments if k not in declared)
    if extras:
        raise invalid_parameter(extras[0], "unexpected parameter")

    params: dict[str, Any] = {}
    for spec in operation.params:
        value = arguments.get(spec.name)
        if value is None:
            if spec.default is None:
                continue
            value = spec.default
        params[spec.name] = _coerce_value(spec, value)

    for check in operation.checks:
        check(params)

    return params


def initialize_runtime_from_env() -> Runtime:
    """Initialize and cache runtime from environment.

    A missing token is not a startup error; it surfaces as MissingCredential per call.
    """
    global _RUNTIME  # pylint: disable=global-statement
    if _RUNTIME is not None:
        return _RUNTIME

    config = load_config_from_env()
    audit = AuditLogger(
        sink_path=config.audit_log_path,
        max_bytes=config.audit_max_bytes,
        max_backups=config.audit_max_backups,
    )
    graphql = GitHubGraphQLClient(
        token_provider=env_token_provider(config.token_env_var),
        token_env_var=config.token_env_var,
        api_base_url=config.api_base_url,
    )

    _RUNTIME = Runtime(config=config, audit=audit, graphql=graphql)
    return _RUNTIME


def _target_from_args(arguments: dict[str, Any]) -> str:
    owner = arguments.get("owner")
    repo = arguments.get("repo")
    if isinstance(owner, str) and isinstance(repo, str) and owner and repo:
        return f"{owner}/{repo}"
    for key in ("projectId", "organization", "owner"):
        value = arguments.get(key)
        if isinstance(value, str) and value:
            return value
    return "<unknown>"


async def dispatch_tool(name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Dispatch a tool call.

    Always returns an envelope that includes correlation_id. On success `result` holds
    the GitHub response body verbatim, GraphQL `errors` included.
    """
    correlation_id = new_correlation_id()
    target = _target_from_args(arguments)

    runtime: Runtime | None = None
    start: float | None = None

    try:
        runtime = initialize_runtime_from_env()
        start = runtime.audit.measure_start()

        operation = OPERATIONS.get(name)
        if operation is None:
            raise unknown_operation(name, list(OPERATIONS))

        params = validate_tool_arguments(operation, arguments)
        request = await operation.build(params, runtime.graphql)
        payload = await runtime.graphql.execute(query=request.query, variables=request.variables)

        runtime.audit.write_event(
            build_event(
                correlation_id=correlation_id,
                operation=name,
                target=target,
                outcome="succeeded",
                duration_ms=runtime.audit.measure_duration_ms(start),
            )
        )
        return {"ok": True, "correlation_id": correlation_id, "operation": name, "result": payload}

    except SafeError as err:
        outcome = "denied" if err.code in _DENIED_CODES else "failed"
        logger.warning("Tool %s %s: %s (%s)", name, outcome, err.code, err.message)
        if runtime is not None and start is not None:
            runtime.audit.write_event(
                build_event(
                    correlation_id=correlation_id,
                    operation=name,
                    target=target,
                    outcome=outcome,
                    reason=err.message,
                    duration_ms=runtime.audit.measure_duration_ms(start),
                )
            )
        else:
            # Runtime could not be built (Config failure); still emit one event.
            AuditLogger(sink_path=None).write_event(
                build_event(
                    correlation_id=correlation_id,
                    operation=name,
                    target=target,
                    outcome=outcome,
                    reason=err.message,
                )
            )
        result = safe_error_to_result(err)
        result["correlation_id"] = correlation_id
        result["operation"] = name
        return result
    except Exception:  # pylint: disable=broad-exception-caught
        logger.exception("Tool %s raised an unexpected error", name)
        if runtime is not None and start is not None:
            runtime.audit.write_event(
                build_event(
                    correlation_id=correlation_id,
                    operation=name,
                    target=target,
                    outcome="failed",
                    reason="Internal error",
                    duration_ms=runtime.audit.measure_duration_ms(start),
                )
            )
        result = internal_error("Internal error")
        result["correlation_id"] = correlation_id
        result["operation"] = name
        return result
