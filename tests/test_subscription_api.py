import json

import pytest
from fastapi.testclient import TestClient

from mercury_gateway.app import create_app
from mercury_gateway.core.mercury_core.config import load_config
from mercury_gateway.core.mercury_core.errors import ConfigError, MercuryError
from mercury_gateway.core.mercury_core.models import OperationResult, SubscriptionRequest
from mercury_gateway.core.mercury_core.services import TOKEN_SUBSCRIPTION_FAILED
from tests.conftest import DummyResponse, build_service


class StubService:
    """Records calls and returns canned results."""

    request_deadline_seconds = 5

    def __init__(self, result=None):
        self.result = result or OperationResult.ok({"ok": True})
        self.calls = []
        self.scopes = []

    def _record(self, name, *args, scope=None):
        self.calls.append((name, args))
        self.scopes.append(scope)
        return self.result

    def describe(self):
        return {"base_url": "https://m"}

    def close(self):
        pass

    def add_new_subscription(self, subscription, scope=None):
        return self._record("add_new_subscription", subscription, scope=scope)

    def get_subscriptions(self, scope=None):
        return self._record("get_subscriptions", scope=scope)

    def get_subscription_by_id(self, id, scope=None):
        return self._record("get_subscription_by_id", id, scope=scope)

    def add_new_token_subscription(self, contract_id, pub_key, scope=None):
        return self._record("add_new_token_subscription", contract_id, pub_key, scope=scope)

    def add_new_account_subscription(self, pub_key, scope=None):
        return self._record("add_new_account_subscription", pub_key, scope=scope)

    def get_account_history(self, pub_key, scope=None):
        return self._record("get_account_history", pub_key, scope=scope)

    def renew_token(self, scope=None):
        return self._record("renew_token", scope=scope)


def _client(result=None):
    svc = StubService(result)
    return TestClient(create_app(service=svc)), svc


def test_ping():
    client, _ = _client()
    resp = client.get("/api/v1/ping")
    assert resp.status_code == 200
    assert resp.text == "pong"


def test_health():
    client, _ = _client()
    assert client.get("/api/v1/health").json() == {"base_url": "https://m"}


def test_create_subscription_passes_extra_fields():
    client, svc = _client()

    resp = client.post("/api/v1/subscription", json={"contract_id": "C1", "max_single_size": 200, "topic1": "AAA"})

    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    name, (req,) = svc.calls[0]
    assert name == "add_new_subscription"
    assert isinstance(req, SubscriptionRequest)
    assert req.to_payload() == {"contract_id": "C1", "max_single_size": 200, "topic1": "AAA"}
    assert svc.scopes[0] is not None


def test_create_subscription_requires_size():
    client, svc = _client()

    resp = client.post("/api/v1/subscription", json={"contract_id": "C1"})

    assert resp.status_code == 422
    assert svc.calls == []


def test_error_maps_to_400_with_error_text():
    client, _ = _client(OperationResult.fail(MercuryError("aggregate", TOKEN_SUBSCRIPTION_FAILED)))

    resp = client.post("/api/v1/subscription/token", json={"contract_id": "C1", "pub_key": "G1"})

    assert resp.status_code == 400
    assert resp.text == TOKEN_SUBSCRIPTION_FAILED


def test_backend_failure_details_reach_the_client():
    svc, _ = build_service(lambda url, body: DummyResponse(status=500, text="backend says: contract not found"))
    client = TestClient(create_app(service=svc))

    resp = client.get("/api/v1/subscription")

    assert resp.status_code == 400
    err = json.loads(resp.text)
    assert err["kind"] == "http"
    assert err["status_code"] == 500
    assert err["body"] == "backend says: contract not found"


def test_request_scope_is_cancelled_after_the_request():
    client, svc = _client()

    client.get("/api/v1/subscription")
    client.get("/api/v1/subscription/abc")

    first, second = svc.scopes
    assert first is not second
    assert first.cancelled and second.cancelled


def test_responses_carry_security_headers():
    client, _ = _client()

    for resp in (client.get("/api/v1/ping"), client.post("/api/v1/subscription", json={})):
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert resp.headers["Referrer-Policy"] == "no-referrer"

@pytest.mark.parametrize(
    "method,path,body,expected",
    [
        ("get", "/api/v1/subscription", None, ("get_subscriptions", ())),
        ("get", "/api/v1/subscription/abc", None, ("get_subscription_by_id", ("abc",))),
        ("post", "/api/v1/subscription/token", {"contract_id": "C1", "pub_key": "G1"},
         ("add_new_token_subscription", ("C1", "G1"))),
        ("post", "/api/v1/subscription/account", {"pub_key": "G1"}, ("add_new_account_subscription", ("G1",))),
        ("get", "/api/v1/account/G1/history", None, ("get_account_history", ("G1",))),
        ("post", "/api/v1/token/renew", None, ("renew_token", ())),
    ],
)
def test_routes_dispatch(method, path, body, expected):
    client, svc = _client()

    resp = getattr(client, method)(path, json=body) if body is not None else getattr(client, method)(path)

    assert resp.status_code == 200
    assert svc.calls == [expected]


def test_true_data_is_json():
    client, _ = _client(OperationResult.ok(True))

    resp = client.post("/api/v1/subscription/token", json={"contract_id": "C1", "pub_key": "G1"})

    assert resp.status_code == 200
    assert resp.json() is True


def test_create_app_without_config_fails_fast(monkeypatch):
    monkeypatch.setattr("mercury_gateway.app.load_env", lambda: None)

    with pytest.raises(ConfigError):
        create_app()


def test_create_app_from_config_builds_service():
    cfg = load_config({"MERCURY_KEY": "k", "MERCURY_URL": "https://m"})

    app = create_app(config=cfg)

    svc = app.state.mercury_service
    assert svc.session.current_token() == "k"
    assert svc.subscriptions.url == "https://m:3030/newsubscription"
    assert svc.graphql.url == "https://m:5000/graphql"
