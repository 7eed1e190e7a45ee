"""
Shared pytest fixtures for session tests.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from larasession.session import ArraySessionStore, Session, SessionManager
from larasession.support import Config


@pytest.fixture(autouse=True)
def clean_config():
    """Every test starts without runtime overrides or cached config files."""
    Config.clear_runtime_overrides()
    Config.reload()
    yield
    Config.clear_runtime_overrides()
    Config.reload()


@pytest.fixture
def store():
    return ArraySessionStore()


@pytest.fixture
def manager(store):
    return SessionManager(handler=store, session_id="test-session-id")


@pytest.fixture
def make_session(manager):
    """Build an accessor over the shared manager with the given options."""

    def _make(config=None, request_params=None, **kwargs):
        return Session(manager, config=config or {"session_on": True}, request_params=request_params, **kwargs)

    return _make


@pytest.fixture
def accessor(make_session):
    return make_session()


@pytest.fixture
def make_request():
    """Minimal stand-in for a Sanic request."""

    def _make(cookies=None, args=None):
        return SimpleNamespace(cookies=cookies or {}, args=args or {}, ctx=SimpleNamespace())

    return _make


@pytest.fixture
def make_response():
    def _make():
        response = MagicMock()
        response.add_cookie = MagicMock()
        response.delete_cookie = MagicMock()
        return response

    return _make
