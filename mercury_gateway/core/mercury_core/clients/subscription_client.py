from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from ..errors import MercuryError
from ._http import error_for_status


class MercurySubscriptionClient:
    """Client for the Mercury ``newsubscription`` REST endpoint."""

    def __init__(self, url: str, session: Optional[requests.Session] = None, timeout: float = 20.0) -> None:
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout

    @staticmethod
    def _headers(token: str) -> Dict[str, str]:
        return {"Content-Type": "application/json", "Authorization": f"Bearer {token}"}

    def create(self, payload: Dict[str, Any], token: str, timeout: Optional[float] = None) -> Any:
        try:
            resp = self.session.post(self.url, json=payload, headers=self._headers(token), timeout=timeout or self.timeout)
        except requests.Timeout as e:
            raise MercuryError("timeout", f"New subscription timed out: {e}") from e
        except requests.RequestException as e:
            raise MercuryError("transport", f"New subscription failed: {e}") from e

        if resp.status_code >= 400:
            raise error_for_status(resp, "New subscription failed")
        try:
            return resp.json()
        except ValueError:
            return resp.text
