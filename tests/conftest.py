from __future__ import annotations

import json
import typing as t

import pytest


class FakeResponse:
    """Streamed requests.Response stand-in; the body is the JSON payload unless raw_body is given."""

    def __init__(self, payload: t.Any = None, status_code: int = 200, *, raw_body: bytes | None = None) -> None:
        self.status_code = status_code
        self.body = raw_body if raw_body is not None else json.dumps(payload).encode()
        self.closed = False

    def iter_content(self, chunk_size: int | None = 1) -> t.Iterator[bytes]:
        step = chunk_size or len(self.body) or 1
        for start in range(0, len(self.body), step):
            yield self.body[start:start + step]

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Stands in for requests.Session; records every post() call."""

    def __init__(self, response: FakeResponse | None = None, *, error: Exception | None = None) -> None:
        self.response = response or FakeResponse({"ok": True, "result": {"message_id": 1, "date": 1700000000}})
        self.error = error
        self.calls: list[dict[str, t.Any]] = []

    def post(self, url: str, **kwargs: t.Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def make_response() -> type[FakeResponse]:
    return FakeResponse


@pytest.fixture
def make_session() -> type[FakeSession]:
    return FakeSession


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()
