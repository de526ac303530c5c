import threading

import pytest

from mercury_gateway.core.mercury_core.clients import MercuryGraphQLClient, MercurySubscriptionClient
from mercury_gateway.core.mercury_core.models import MercurySession
from mercury_gateway.core.mercury_core.services import MercuryService

GRAPHQL_URL = "https://mercury.test:5000/graphql"
NEW_SUB_URL = "https://mercury.test:3030/newsubscription"


class DummyResponse:
    def __init__(self, payload=None, status=200, text=None):
        self._payload = payload
        self.status_code = status
        self.text = text if text is not None else ("" if payload is None else repr(payload))

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeHttpSession:
    """Records every POST and answers with ``responder(url, json)``."""

    def __init__(self, responder):
        self.responder = responder
        self.calls = []
        self.closed = False
        self._lock = threading.Lock()

    def post(self, url, json=None, headers=None, timeout=None):
        with self._lock:
            self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        result = self.responder(url, json)
        if isinstance(result, BaseException):
            raise result
        return result

    def close(self):
        self.closed = True

    def calls_to(self, url):
        return [c for c in self.calls if c["url"] == url]


def build_service(responder, email="dev@example.com", password="hunter2", token="initial-token"):
    http = FakeHttpSession(responder)
    session = MercurySession(base_url="https://mercury.test", token=token, email=email, password=password)
    graphql = MercuryGraphQLClient(GRAPHQL_URL, session.current_token, session=http, timeout=5)
    subs = MercurySubscriptionClient(NEW_SUB_URL, session=http, timeout=5)
    svc = MercuryService(session, graphql, subs, timeout_seconds=5, request_deadline_seconds=10, http_session=http)
    return svc, http


@pytest.fixture
def make_service():
    return build_service


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for k in (
        "MERCURY_KEY", "MERCURY_URL", "MERCURY_GRAPHQL_URL",
        "MERCURY_EMAIL", "MERCURY_PASSWORD",
        "MERCURY_TIMEOUT_SECONDS", "MERCURY_REQUEST_DEADLINE_SECONDS", "MERCURY_LOG_LEVEL",
    ):
        monkeypatch.delenv(k, raising=False)
    yield
