from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, ConfigDict

from mercury_gateway.core.mercury_core.models import OperationResult, SubscriptionRequest
from mercury_gateway.core.mercury_core.scope import RequestScope
from mercury_gateway.core.mercury_core.services import MercuryService
from mercury_gateway.deps import get_mercury_service, get_request_scope

API_VERSION = "v1"

router = APIRouter(prefix=f"/api/{API_VERSION}", tags=["subscriptions"])


class NewSubscriptionBody(BaseModel):
    """Raw ``newsubscription`` body; topic filters and other fields pass through."""

    model_config = ConfigDict(extra="allow")

    contract_id: Optional[str] = None
    max_single_size: int


class TokenSubscriptionBody(BaseModel):
    contract_id: str
    pub_key: str


class AccountSubscriptionBody(BaseModel):
    pub_key: str


def _reply(result: OperationResult[Any]) -> Response:
    if result.error is not None:
        return PlainTextResponse(result.error.render(), status_code=400)
    return JSONResponse(result.data, status_code=200)


# ---------- health ----------
@router.get("/ping", response_class=PlainTextResponse)
def ping() -> str:
    return "pong"


@router.get("/health")
def health(svc: MercuryService = Depends(get_mercury_service)):
    return svc.describe()


# ---------- subscriptions ----------
@router.post("/subscription")
def create_subscription(
    body: NewSubscriptionBody,
    svc: MercuryService = Depends(get_mercury_service),
    scope: RequestScope = Depends(get_request_scope),
) -> Response:
    request = SubscriptionRequest.from_mapping(body.model_dump(exclude_none=True))
    return _reply(svc.add_new_subscription(request, scope=scope))


@router.get("/subscription")
def list_subscriptions(
    svc: MercuryService = Depends(get_mercury_service),
    scope: RequestScope = Depends(get_request_scope),
) -> Response:
    return _reply(svc.get_subscriptions(scope=scope))


@router.post("/subscription/token")
def create_token_subscription(
    body: TokenSubscriptionBody,
    svc: MercuryService = Depends(get_mercury_service),
    scope: RequestScope = Depends(get_request_scope),
) -> Response:
    return _reply(svc.add_new_token_subscription(body.contract_id, body.pub_key, scope=scope))


@router.post("/subscription/account")
def create_account_subscription(
    body: AccountSubscriptionBody,
    svc: MercuryService = Depends(get_mercury_service),
    scope: RequestScope = Depends(get_request_scope),
) -> Response:
    return _reply(svc.add_new_account_subscription(body.pub_key, scope=scope))


@router.get("/subscription/{id}")
def get_subscription(
    id: str,
    svc: MercuryService = Depends(get_mercury_service),
    scope: RequestScope = Depends(get_request_scope),
) -> Response:
    return _reply(svc.get_subscription_by_id(id, scope=scope))


# ---------- accounts / auth ----------
@router.get("/account/{pub_key}/history")
def account_history(
    pub_key: str,
    svc: MercuryService = Depends(get_mercury_service),
    scope: RequestScope = Depends(get_request_scope),
) -> Response:
    return _reply(svc.get_account_history(pub_key, scope=scope))


@router.post("/token/renew")
def renew_token(
    svc: MercuryService = Depends(get_mercury_service),
    scope: RequestScope = Depends(get_request_scope),
) -> Response:
    return _reply(svc.renew_token(scope=scope))
