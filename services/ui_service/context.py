"""
Wiring of the per-session services handed to every page.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, MutableMapping, Optional

import requests
import streamlit as st

from config.app_config import AppConfig, get_config
from services.api_service.client import ApiClient
from services.auth_service.auth_api import AuthApi
from services.auth_service.auth_manager import AuthManager
from services.auth_service.session_store import SessionStore, StreamlitSessionStore, TokenCache
from services.notes_service.notes_api import NotesApi
from services.user_service.users_api import AdminUsersApi, UsersApi
from services.ui_service.router import StreamlitNavigator
from utils.logging_config import ErrorTracker, get_error_tracker


@dataclass
class PageContext:
    """Everything a page function needs"""
    config: AppConfig
    token_cache: TokenCache
    client: ApiClient
    auth: AuthManager
    auth_api: AuthApi
    users_api: UsersApi
    admin_api: AdminUsersApi
    notes_api: NotesApi
    navigator: Any
    state: MutableMapping
    error_tracker: ErrorTracker
    path_params: Dict[str, str] = field(default_factory=dict)

    @property
    def query_params(self) -> Dict[str, str]:
        return self.navigator.current_params()

    def page_state(self, key: str, factory):
        """Per-page value kept across reruns until the next full-page redirect"""
        if key not in self.state:
            self.state[key] = factory()
        return self.state[key]


def build_page_context(
    state: MutableMapping,
    navigator,
    store: Optional[SessionStore] = None,
    session: Optional[requests.Session] = None,
    config: Optional[AppConfig] = None
) -> PageContext:
    """
    Assemble the service graph

    A 401 from any authenticated call drops the in-memory session and sends
    the browser to the login route.
    """
    config = config or get_config()
    token_cache = TokenCache(store or StreamlitSessionStore())

    client = ApiClient(
        base_url=config.api.base_url,
        timeout=config.api.timeout_seconds,
        token_cache=token_cache,
        session=session
    )
    auth_api = AuthApi(client)
    users_api = UsersApi(client)
    auth = AuthManager(token_cache, auth_api, users_api, navigator, state)

    def on_unauthorized():
        auth.invalidate()
        navigator.redirect(config.auth.login_route)

    client.on_unauthorized = on_unauthorized

    return PageContext(
        config=config,
        token_cache=token_cache,
        client=client,
        auth=auth,
        auth_api=auth_api,
        users_api=users_api,
        admin_api=AdminUsersApi(client),
        notes_api=NotesApi(client),
        navigator=navigator,
        state=state,
        error_tracker=get_error_tracker()
    )


def get_page_context() -> PageContext:
    """Session-scoped context for the running Streamlit app"""
    if "page_context" not in st.session_state:
        st.session_state.page_context = build_page_context(st.session_state, StreamlitNavigator())
    return st.session_state.page_context
