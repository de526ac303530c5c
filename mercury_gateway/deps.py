"""Dependency helpers for FastAPI routes."""

from fastapi import Depends, Request

from mercury_gateway.core.mercury_core.scope import RequestScope
from mercury_gateway.core.mercury_core.services import MercuryService


def get_mercury_service(request: Request) -> MercuryService:
    """Return the :class:`MercuryService` built at app startup."""
    return request.app.state.mercury_service


def get_request_scope(svc: MercuryService = Depends(get_mercury_service)):
    """Yield one :class:`RequestScope` per inbound request, cancelled when it ends."""
    scope = RequestScope(svc.request_deadline_seconds)
    try:
        yield scope
    finally:
        scope.cancel()


__all__ = ["get_mercury_service", "get_request_scope"]
