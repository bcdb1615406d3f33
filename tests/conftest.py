"""
Shared fixtures: in-memory session store, fake HTTP session, recording navigator
"""

from unittest.mock import Mock

import pytest
import requests

from config.app_config import reload_config
from services.api_service.client import ApiClient
from services.auth_service.session_store import MemorySessionStore, TokenCache
from services.ui_service.context import build_page_context
from services.ui_service.router import RecordingNavigator
from tests.helpers import make_response


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Every test starts from the development defaults"""
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.delenv("API_BASE_URL", raising=False)
    monkeypatch.delenv("API_TIMEOUT", raising=False)
    config = reload_config()
    yield config
    reload_config()


@pytest.fixture
def store():
    return MemorySessionStore()


@pytest.fixture
def token_cache(store):
    return TokenCache(store)


@pytest.fixture
def http():
    """Mocked requests.Session; set `http.request.return_value` per test"""
    session = Mock(spec=requests.Session)
    session.request.return_value = make_response(200, {})
    return session


@pytest.fixture
def client(token_cache, http):
    return ApiClient("http://api.test", 5.0, token_cache, session=http)


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def ctx(store, http, navigator, fresh_config):
    return build_page_context({}, navigator, store=store, session=http, config=fresh_config)
