import json

import pytest
from requests import Response

ENV_VARS = (
    "KYA_SMS_API_KEY",
    "KYA_SMS_BASE_URL",
    "KYA_SMS_TIMEOUT",
    "KYA_SMS_DEBUG",
    "KYA_SMS_CONFIG_FILE",
    "LOG_LEVEL",
)


def make_response(status: int = 200, body=None, raw=None) -> Response:
    resp = Response()
    resp.status_code = status
    resp.reason = "OK" if status < 400 else "Error"
    resp.url = "https://route.kyasms.com/api/v3/test"
    if raw is not None:
        resp._content = raw
    elif body is None:
        resp._content = b""
    else:
        resp._content = json.dumps(body).encode("utf-8")
    resp.headers["Content-Type"] = "application/json"
    return resp


class FakeSession:
    """Stands in for requests.Session: records calls, replays queued responses."""

    def __init__(self, *responses):
        self.headers = {}
        self.calls = []
        self.queue = list(responses)
        self.closed = False

    def queue_response(self, status: int = 200, body=None):
        self.queue.append(make_response(status, body))

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append(
            {"method": method, "url": url, "params": params, "json": json, "headers": headers, "timeout": timeout}
        )
        nxt = self.queue.pop(0) if self.queue else make_response(200, {"reason": "success"})
        if isinstance(nxt, Exception):
            raise nxt
        return nxt

    def close(self):
        self.closed = True

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(name="make_response")
def make_response_fixture():
    return make_response


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    from kyasms import KyaSms

    return KyaSms("test-api-key", session=session)
