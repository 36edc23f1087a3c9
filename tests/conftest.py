"""
Shared fixtures: a fake upstream HTTP layer patched onto sources.SESSION.
"""

import json
import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import sources


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self.payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        return json.loads(self.text)


@pytest.fixture
def fake_http(monkeypatch):
    """
    Route sources.SESSION.get by URL.

    Register responses in ``fake_http.routes[url]``; an Exception value is
    raised instead of returned. Unrouted URLs answer 404.
    """
    routes = {}
    calls = []

    def fake_get(url, **kwargs):
        calls.append((url, kwargs))
        resp = routes.get(url)
        if isinstance(resp, Exception):
            raise resp
        if resp is None:
            return FakeResponse(404, text="not found")
        return resp

    fake_get.routes = routes
    fake_get.calls = calls
    monkeypatch.setattr(sources.SESSION, "get", fake_get)
    return fake_get
