"""
Authentication service - holds the session state of the current browser tab.

State is two fields (`user`, `is_loading`) kept in a mutable mapping, which is
`st.session_state` inside the app and a plain dict in tests.
"""

from typing import MutableMapping, Optional

from config.app_config import get_config
from services.auth_service.auth_api import AuthApi
from services.auth_service.models import AuthState, LoginResponse, User
from services.auth_service.session_store import TokenCache
from services.user_service.users_api import UsersApi
from utils.logging_config import get_logger, log_auth_event


class AuthManager:
    """
    Main authentication manager service.
    Handles session bootstrap, login/logout and the admin check.
    """

    STATE_KEY = "auth_state"

    def __init__(
        self,
        token_cache: TokenCache,
        auth_api: AuthApi,
        users_api: UsersApi,
        navigator,
        state: MutableMapping
    ):
        self.token_cache = token_cache
        self.auth_api = auth_api
        self.users_api = users_api
        self.navigator = navigator
        self._state_store = state
        self.config = get_config()
        self.logger = get_logger(__name__)

    @property
    def state(self) -> AuthState:
        if self.STATE_KEY not in self._state_store:
            self._state_store[self.STATE_KEY] = AuthState()
        return self._state_store[self.STATE_KEY]

    @property
    def user(self) -> Optional[User]:
        return self.state.user

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    def _set_user(self, user: Optional[User]):
        self.state.user = user

    def initialize(self) -> Optional[User]:
        """
        Bootstrap the session from the token cache (runs once per state)

        A cached user is re-validated against GET /api/users/me; any failure
        clears the cache. `is_loading` ends False on every path.
        """
        if not self.state.is_loading:
            return self.state.user

        try:
            stored_user = self.token_cache.get_current_user()
            if stored_user:
                try:
                    fresh_user = self.users_api.fetch_current_user()
                    self._set_user(fresh_user)
                    self.token_cache.set_current_user(fresh_user)
                    log_auth_event(self.logger, "session_restored", fresh_user.id)
                except Exception as e:
                    self.logger.info(f"Cached session rejected, clearing: {e}")
                    self.token_cache.clear_token()
                    self._set_user(None)
            else:
                self._set_user(None)
        finally:
            self.state.is_loading = False

        return self.state.user

    def login(self, email: str, password: str) -> LoginResponse:
        """
        Authenticate and store the session

        Active accounts are sent to the user dashboard. Inactive accounts are
        logged in without navigation so the caller can show a message.

        Raises:
            ApiError: credentials rejected or backend unreachable
        """
        self.state.is_loading = True
        try:
            data = self.auth_api.login(email, password)
            self._set_user(data.user)
            log_auth_event(self.logger, "login", data.user.id, is_admin=data.user.is_admin)
        except Exception as e:
            self.logger.warning(f"Login failed: {e}")
            raise
        finally:
            self.state.is_loading = False

        if data.user.is_active:
            self.navigator.push(self.config.auth.default_user_route)
        else:
            self.logger.warning(f"User account is not active: {data.user.id}")

        return data

    def logout(self):
        """Clear the session locally and go to the login page; never calls the backend"""
        user = self.state.user
        self.token_cache.clear_token()
        self._set_user(None)
        log_auth_event(self.logger, "logout", user.id if user else None)
        self.navigator.push(self.config.auth.login_route)

    def is_admin(self) -> bool:
        user = self.state.user
        return user is not None and user.is_admin is True

    def refresh_user(self) -> User:
        """
        Re-fetch the authoritative user and overwrite state and cache

        Raises:
            ApiError: propagated unchanged
        """
        try:
            updated_user = self.users_api.fetch_current_user()
        except Exception as e:
            self.logger.error(f"Failed to refresh user: {e}")
            raise
        self._set_user(updated_user)
        self.token_cache.set_current_user(updated_user)
        return updated_user

    def invalidate(self):
        """Forget in-memory state after the backend rejected the token"""
        user = self.state.user
        self._state_store.pop(self.STATE_KEY, None)
        log_auth_event(self.logger, "session_invalidated", user.id if user else None)
