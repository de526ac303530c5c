from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import requests

from ..errors import MercuryError
from ._http import error_for_status

Json = Dict[str, Any]


class MercuryGraphQLClient:
    """
    Thin GraphQL client for the Mercury query/mutation endpoint.
    Sends ``{"query", "variables"}`` with the session's bearer token.
    """

    def __init__(
        self,
        url: str,
        token_provider: Callable[[], str],
        session: Optional[requests.Session] = None,
        timeout: float = 20.0,
    ) -> None:
        self.url = url
        self.token_provider = token_provider
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = self.token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> Json:
        """Run ``query`` and return its ``data`` object."""

        body = {"query": query, "variables": variables or {}}
        try:
            resp = self.session.post(
                self.url,
                json=body,
                headers=self._headers(),
                timeout=timeout or self.timeout,
            )
        except requests.Timeout as e:
            raise MercuryError("timeout", f"GraphQL request timed out: {e}") from e
        except requests.RequestException as e:
            raise MercuryError("transport", f"GraphQL request failed: {e}") from e

        if resp.status_code >= 400:
            raise error_for_status(resp, "GraphQL request rejected")

        try:
            payload = resp.json()
        except ValueError as e:
            raise MercuryError("graphql", "GraphQL response was not JSON", body=resp.text) from e
        if not isinstance(payload, dict):
            raise MercuryError("graphql", "GraphQL response was not a JSON object", body=payload)

        if payload.get("errors"):
            raise MercuryError("graphql", f"GraphQL returned errors: {payload['errors']}", body=payload["errors"])
        data = payload.get("data")
        if data is None:
            raise MercuryError("graphql", "GraphQL response carried no data", body=payload)
        return data
