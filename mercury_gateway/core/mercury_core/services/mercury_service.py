from __future__ import annotations

import json
import logging
from concurrent import futures
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar, Union

import requests

from .. import queries
from ..clients import MercuryGraphQLClient, MercurySubscriptionClient
from ..config import MercuryConfig
from ..errors import MercuryError
from ..models import TOKEN_EVENT_MAX_SINGLE_SIZE, MercurySession, OperationResult, SubscriptionRequest
from ..scope import RequestScope
from ..topics import MINT, TRANSFER, encode_topic

logger = logging.getLogger(__name__)

T = TypeVar("T")

TOKEN_SUBSCRIPTION_FAILED = "Failed to subscribe to token events"


class MercuryService:
    """Facade over the Mercury GraphQL and subscription endpoints.

    Every public operation returns an :class:`OperationResult`; backend
    failures are logged and returned as tagged errors, never raised.
    """

    def __init__(
        self,
        session: MercurySession,
        graphql: MercuryGraphQLClient,
        subscriptions: MercurySubscriptionClient,
        *,
        timeout_seconds: float = 20.0,
        request_deadline_seconds: float = 30.0,
        http_session: Optional[requests.Session] = None,
    ) -> None:
        self.session = session
        self.graphql = graphql
        self.subscriptions = subscriptions
        self.timeout_seconds = timeout_seconds
        self.request_deadline_seconds = request_deadline_seconds
        self._http_session = http_session

    @classmethod
    def from_config(cls, cfg: MercuryConfig, http_session: Optional[requests.Session] = None) -> "MercuryService":
        http_session = http_session or requests.Session()
        session = MercurySession(
            base_url=cfg.mercury_url,
            token=cfg.mercury_key,
            email=cfg.email,
            password=cfg.password,
        )
        graphql = MercuryGraphQLClient(
            cfg.graphql_url, session.current_token, session=http_session, timeout=cfg.timeout_seconds
        )
        subscriptions = MercurySubscriptionClient(
            cfg.new_subscription_url, session=http_session, timeout=cfg.timeout_seconds
        )
        return cls(
            session,
            graphql,
            subscriptions,
            timeout_seconds=cfg.timeout_seconds,
            request_deadline_seconds=cfg.request_deadline_seconds,
            http_session=http_session,
        )

    def new_scope(self) -> RequestScope:
        return RequestScope(self.request_deadline_seconds)

    def close(self) -> None:
        if self._http_session is not None:
            self._http_session.close()

    # ------------------------
    # Health / config surface
    # ------------------------
    def describe(self) -> Dict[str, Any]:
        return {
            "base_url": self.session.base_url,
            "graphql_url": self.graphql.url,
            "new_subscription_url": self.subscriptions.url,
            "can_renew_token": self.session.has_credentials,
            "timeout_seconds": self.timeout_seconds,
            "request_deadline_seconds": self.request_deadline_seconds,
        }

    # -------------
    # Internals
    # -------------
    def _run(self, name: str, fn: Callable[[], T]) -> OperationResult[T]:
        try:
            value = fn()
            if value is None:
                raise MercuryError("http", "Empty response from backend")
            return OperationResult.ok(value)
        except Exception as exc:
            err = MercuryError.wrap(exc)
            logger.error("%s failed: %s", name, json.dumps(err.as_dict(), default=str))
            return OperationResult.fail(err)

    def _query(self, template: str, variables: Dict[str, Any], scope: RequestScope) -> Dict[str, Any]:
        timeout = scope.remaining(self.timeout_seconds)
        return self.graphql.execute(template, variables, timeout=timeout)

    def _post_subscription(self, payload: Dict[str, Any], token: str, scope: RequestScope) -> Any:
        timeout = scope.remaining(self.timeout_seconds)
        return self.subscriptions.create(payload, token, timeout=timeout)

    # -----------
    # Auth
    # -----------
    def renew_token(self, scope: Optional[RequestScope] = None) -> OperationResult[Dict[str, Any]]:
        scope = scope or self.new_scope()

        def _renew() -> Dict[str, Any]:
            if not self.session.has_credentials:
                raise MercuryError("auth", "Cannot renew token: MERCURY_EMAIL/MERCURY_PASSWORD not configured")
            data = self._query(
                queries.AUTHENTICATE,
                {"email": self.session.email, "password": self.session.password},
                scope,
            )
            token = (data.get("authenticate") or {}).get("jwtToken")
            if not token:
                raise MercuryError("auth", "Authentication response carried no jwtToken", body=data)
            self.session.replace_token(token)
            logger.info("Mercury token renewed")
            return data

        return self._run("renew_token", _renew)

    # ----------------
    # Subscriptions
    # ----------------
    def get_subscription_by_id(self, id: str, scope: Optional[RequestScope] = None) -> OperationResult[Dict[str, Any]]:
        scope = scope or self.new_scope()
        return self._run(
            "get_subscription_by_id",
            lambda: self._query(queries.SUBSCRIPTION_BY_ID, {"id": id}, scope),
        )

    def get_subscriptions(self, scope: Optional[RequestScope] = None) -> OperationResult[Dict[str, Any]]:
        scope = scope or self.new_scope()
        return self._run("get_subscriptions", lambda: self._query(queries.ALL_SUBSCRIPTIONS, {}, scope))

    def add_new_subscription(
        self,
        subscription: Union[SubscriptionRequest, Mapping[str, Any]],
        scope: Optional[RequestScope] = None,
    ) -> OperationResult[Any]:
        scope = scope or self.new_scope()

        def _add() -> Any:
            request = subscription
            if not isinstance(request, SubscriptionRequest):
                request = SubscriptionRequest.from_mapping(request)
            return self._post_subscription(request.to_payload(), self.session.current_token(), scope)

        return self._run("add_new_subscription", _add)

    @staticmethod
    def token_subscription_requests(contract_id: str, pub_key: str) -> List[SubscriptionRequest]:
        """Transfer-to, transfer-from and mint subscriptions for ``pub_key`` on ``contract_id``."""

        transfer = encode_topic(TRANSFER)
        account = encode_topic(pub_key)
        return [
            SubscriptionRequest(
                max_single_size=TOKEN_EVENT_MAX_SINGLE_SIZE,
                contract_id=contract_id,
                extra={"topic1": transfer, "topic2": account},
            ),
            SubscriptionRequest(
                max_single_size=TOKEN_EVENT_MAX_SINGLE_SIZE,
                contract_id=contract_id,
                extra={"topic1": transfer, "topic3": account},
            ),
            SubscriptionRequest(
                max_single_size=TOKEN_EVENT_MAX_SINGLE_SIZE,
                contract_id=contract_id,
                extra={"topic1": encode_topic(MINT)},
            ),
        ]

    def add_new_token_subscription(
        self,
        contract_id: str,
        pub_key: str,
        scope: Optional[RequestScope] = None,
    ) -> OperationResult[bool]:
        """Subscribe to every transfer and mint event touching ``pub_key``.

        The three calls run concurrently. Success requires a truthy response
        from all of them; subscriptions that did get created are left in place
        when another one fails.
        """

        scope = scope or self.new_scope()

        def _add_all() -> bool:
            subs = self.token_subscription_requests(contract_id, pub_key)
            token = self.session.current_token()
            causes: List[MercuryError] = []
            with futures.ThreadPoolExecutor(max_workers=len(subs)) as ex:
                pending = [ex.submit(self._post_subscription, r.to_payload(), token, scope) for r in subs]
                for fut in pending:
                    try:
                        res = fut.result()
                    except Exception as exc:
                        causes.append(MercuryError.wrap(exc))
                        continue
                    if not res:
                        causes.append(MercuryError("http", "Empty response from new subscription", body=res))
            if causes:
                raise MercuryError("aggregate", TOKEN_SUBSCRIPTION_FAILED, causes=causes)
            return True

        return self._run("add_new_token_subscription", _add_all)

    # -----------
    # Accounts
    # -----------
    def add_new_account_subscription(
        self, pub_key: str, scope: Optional[RequestScope] = None
    ) -> OperationResult[Dict[str, Any]]:
        scope = scope or self.new_scope()
        return self._run(
            "add_new_account_subscription",
            lambda: self._query(queries.NEW_ACCOUNT_SUBSCRIPTION, {"pubKey": pub_key}, scope),
        )

    def get_account_history(self, pub_key: str, scope: Optional[RequestScope] = None) -> OperationResult[Dict[str, Any]]:
        scope = scope or self.new_scope()
        return self._run(
            "get_account_history",
            lambda: self._query(queries.GET_ACCOUNT_HISTORY, {"publicKeyText": pub_key}, scope),
        )
