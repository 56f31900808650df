from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from rank_oracle.config import FeedConfig
from rank_oracle.outcome import Outcome

FEED_BASE_URL = "https://feed.test/api/rank"


class RecordingHost:
    """In-memory host: fixed input, records log lines and every reported outcome."""

    def __init__(self, inputs: bytes):
        self.inputs = inputs
        self.logs: List[str] = []
        self.errors: List[str] = []
        self.reported: List[Outcome] = []

    def get_inputs(self) -> bytes:
        return self.inputs

    def log(self, msg: str) -> None:
        self.logs.append(msg)

    def log_error(self, msg: str) -> None:
        self.errors.append(msg)

    def success(self, data: bytes) -> None:
        self.reported.append(Outcome.success(data))

    def error(self, data: bytes) -> None:
        self.reported.append(Outcome.error(data))


class FeedStub:
    """Serves one canned answer and remembers the requests it saw."""

    def __init__(self, status: int = 200, body: Any = None, raw: Optional[bytes] = None,
                 exc: Optional[Callable[[httpx.Request], Exception]] = None):
        self.status = status
        self.body = body
        self.raw = raw
        self.exc = exc
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc(request)
        content = self.raw if self.raw is not None else json.dumps(self.body).encode("utf-8")
        return httpx.Response(self.status, content=content)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, raw: Optional[str] = None):
        self.status_code = status_code
        self._payload = payload
        self._raw = raw
        if raw is not None:
            self.text = raw
        else:
            self.text = json.dumps(payload) if payload is not None else ""

    def json(self) -> Any:
        if self._raw is not None:
            return json.loads(self._raw)
        return self._payload


class FakeSession:
    """Stands in for requests.Session: queued responses per method, calls recorded."""

    def __init__(self, posts: Optional[List[FakeResponse]] = None, gets: Optional[List[FakeResponse]] = None):
        self.posts = list(posts or [])
        self.gets = list(gets or [])
        self.calls: List[Dict[str, Any]] = []

    def post(self, url: str, data: bytes = b"", headers: Optional[Dict[str, str]] = None, timeout: float = 0):
        self.calls.append({"method": "POST", "url": url, "data": data, "headers": headers or {}})
        return self.posts.pop(0)

    def get(self, url: str, timeout: float = 0):
        self.calls.append({"method": "GET", "url": url})
        return self.gets.pop(0)


@pytest.fixture
def feed_config() -> FeedConfig:
    return FeedConfig(feed_base_url=FEED_BASE_URL)

