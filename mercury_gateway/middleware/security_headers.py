from __future__ import annotations

from typing import Dict, Mapping, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

DEFAULT_HEADERS: Dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp baseline hardening headers on every response.

    Headers already set by a route are left alone.
    """

    def __init__(self, app: ASGIApp, headers: Optional[Mapping[str, str]] = None) -> None:
        super().__init__(app)
        self.headers = dict(DEFAULT_HEADERS if headers is None else headers)

    async def dispatch(self, request: Request, call_next):
        resp = await call_next(request)
        for name, value in self.headers.items():
            resp.headers.setdefault(name, value)
        return resp


def install_security_headers(app, headers: Optional[Mapping[str, str]] = None) -> None:
    app.add_middleware(SecurityHeadersMiddleware, headers=headers)
