"""GitHub GraphQL client (the remote call executor).

Provides:
- strict host allowlist and no-redirect behavior
- bearer authentication from an injected token provider
- classification of failures into MissingCredential / UpstreamError / TransportError

Each call performs exactly one POST. There are no retries: a failed call is reported
to the caller as-is. A 2xx payload is returned verbatim, including any GraphQL
`errors` array.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import DEFAULT_TOKEN_ENV, GITHUB_API_BASE_URL, TokenProvider
from .errors import SafeError, missing_credential, transport_error, upstream_error

logger = logging.getLogger(__name__)


class GitHubGraphQLClient:
    """Minimal GitHub GraphQL client (POST /graphql only)."""

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        token_env_var: str = DEFAULT_TOKEN_ENV,
        api_base_url: str = GITHUB_API_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create a GraphQL client bound to api.github.com.

        Args:
            token_provider: Async callable returning the bearer token, or None when absent.
            token_env_var: Name reported in MissingCredential errors.
            api_base_url: Must be https://api.github.com (enforced).
            transport: Optional httpx transport for tests.
        """
        self._token_provider = token_provider
        self._token_env_var = token_env_var
        self._api_base_url = api_base_url.rstrip("/")
        self._transport = transport

        if self._api_base_url != GITHUB_API_BASE_URL:
            raise SafeError(code="Config", message=f"Only {GITHUB_API_BASE_URL} is allowed")

    @property
    def url(self) -> str:
        return f"{self._api_base_url}/graphql"

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def execute(self, *, query: str, variables: dict[str, Any] | None = None) -> Any:
        """Execute a fixed GraphQL document and return the parsed JSON body.

        Raises:
            SafeError: MissingCredential, UpstreamError or TransportError.
        """
        if not isinstance(query, str) or not query.strip():
            raise SafeError(code="Internal", message="GraphQL query is missing")

        token = await self._token_provider()
        if not token:
            raise missing_credential(self._token_env_var)

        async with httpx.AsyncClient(follow_redirects=False, transport=self._transport) as client:
            try:
                resp = await client.post(
                    self.url,
                    headers=self._headers(token),
                    json={"query": query, "variables": variables or {}},
                )
            except httpx.HTTPError as exc:
                logger.warning("GitHub GraphQL transport failure: %s", type(exc).__name__)
                raise transport_error(exc) from exc

        if not resp.is_success:
            logger.warning("GitHub GraphQL request failed with status %s", resp.status_code)
            raise upstream_error(status_code=resp.status_code, body=resp.text)

        try:
            return resp.json()
        except ValueError as exc:
            logger.warning("GitHub GraphQL returned a non-JSON body (status %s)", resp.status_code)
            raise SafeError(
                code="UpstreamError",
                message="GitHub returned invalid JSON",
                status_code=resp.status_code,
                detail=resp.text[:2000],
            ) from exc
