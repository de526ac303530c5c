from __future__ import annotations

import requests

from ..errors import MercuryError

AUTH_STATUS_CODES = (401, 403)


def error_for_status(resp: requests.Response, message: str) -> MercuryError:
    """Tag a non-success response as an ``auth`` or ``http`` error."""

    kind = "auth" if resp.status_code in AUTH_STATUS_CODES else "http"
    return MercuryError(kind, f"[HTTP {resp.status_code}] {message}", status_code=resp.status_code, body=resp.text)
