from __future__ import annotations

import json as _json
from typing import Any

import pytest
import requests


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, body: bytes = b"", fail_after: int | None = None):
        self.status_code = status_code
        self._payload = payload
        self._body = body if payload is None else _json.dumps(payload).encode()
        self._fail_after = fail_after
        self.closed = False

    def json(self):
        return _json.loads(self._body.decode("utf-8"))

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self._body), chunk_size):
            if self._fail_after is not None and i >= self._fail_after:
                raise requests.ConnectionError("connection reset")
            yield self._body[i:i + chunk_size]

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    def get(self, url: str, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def release_payload(*names: str) -> dict:
    return {
        "name": "v3.4.0",
        "tag_name": "v3.4.0",
        "assets": [
            {
                "id": i,
                "name": n,
                "browser_download_url": f"https://github.com/ryanoasis/nerd-fonts/releases/download/v3.4.0/{n}",
            }
            for i, n in enumerate(names, start=1)
        ],
    }


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def release():
    return release_payload
