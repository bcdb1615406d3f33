"""
Token/user cache on top of a small key-value session store.

The store is swappable: `StreamlitSessionStore` keeps values for the lifetime
of the browser tab, `MemorySessionStore` is used by tests and scripts.
"""

import json
from abc import ABC, abstractmethod
from typing import Dict, Optional

import streamlit as st

from config.app_config import get_config
from services.auth_service.models import User
from utils.logging_config import get_logger

logger = get_logger(__name__)


class SessionStore(ABC):
    """Minimal string key-value storage"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...


class MemorySessionStore(SessionStore):
    """Dict-backed store"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class StreamlitSessionStore(SessionStore):
    """
    Store backed by `st.session_state`.

    Outside a running Streamlit script every call is a silent no-op.
    """

    def __init__(self, namespace: str = "session_store"):
        self.namespace = namespace

    def _storage(self) -> Optional[Dict[str, str]]:
        if not st.runtime.exists():
            return None
        if self.namespace not in st.session_state:
            st.session_state[self.namespace] = {}
        return st.session_state[self.namespace]

    def get(self, key: str) -> Optional[str]:
        storage = self._storage()
        if storage is None:
            return None
        return storage.get(key)

    def set(self, key: str, value: str) -> None:
        storage = self._storage()
        if storage is not None:
            storage[key] = value

    def remove(self, key: str) -> None:
        storage = self._storage()
        if storage is not None:
            storage.pop(key, None)


class TokenCache:
    """
    Bearer token and serialized user record under two independent keys.

    `clear_token()` always drops both entries together.
    """

    def __init__(self, store: SessionStore, token_key: Optional[str] = None, user_key: Optional[str] = None):
        auth_config = get_config().auth
        self.store = store
        self.token_key = token_key or auth_config.token_key
        self.user_key = user_key or auth_config.user_key

    def get_token(self) -> Optional[str]:
        return self.store.get(self.token_key)

    def set_token(self, token: str) -> None:
        self.store.set(self.token_key, token)

    def clear_token(self) -> None:
        self.store.remove(self.token_key)
        self.store.remove(self.user_key)

    def get_current_user(self) -> Optional[User]:
        raw = self.store.get(self.user_key)
        if not raw:
            return None
        try:
            return User.from_dict(json.loads(raw))
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(f"Discarding unreadable cached user: {e}")
            return None

    def set_current_user(self, user: User) -> None:
        self.store.set(self.user_key, json.dumps(user.to_dict(), ensure_ascii=False))
