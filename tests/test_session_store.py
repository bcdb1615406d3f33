"""
Tests for the token cache and its session stores
"""

from services.auth_service.models import User
from services.auth_service.session_store import MemorySessionStore, TokenCache


class TestTokenCache:
    """Token and user entries"""

    def test_token_roundtrip(self, token_cache):
        assert token_cache.get_token() is None

        token_cache.set_token("abc")

        assert token_cache.get_token() == "abc"

    def test_user_is_stored_as_json(self, store, token_cache):
        """Test the user record is serialized under the 'user' key"""
        token_cache.set_current_user(User(id=7, email="bob@example.com", username="鲍勃", is_admin=True))

        assert '"username": "鲍勃"' in store.get("user")
        user = token_cache.get_current_user()
        assert user.id == 7
        assert user.is_admin is True

    def test_clear_token_removes_both_entries(self, store, token_cache):
        token_cache.set_token("abc")
        token_cache.set_current_user(User(id=1, email="a@b.cn", username="a"))

        token_cache.clear_token()

        assert store.get("token") is None
        assert store.get("user") is None
        assert token_cache.get_current_user() is None

    def test_corrupt_user_entry_reads_as_none(self):
        store = MemorySessionStore({"user": "{not json"})
        assert TokenCache(store).get_current_user() is None

    def test_custom_keys(self):
        store = MemorySessionStore()
        cache = TokenCache(store, token_key="t", user_key="u")

        cache.set_token("x")

        assert store.get("t") == "x"
        assert store.get("token") is None

    def test_unknown_user_fields_are_ignored(self):
        store = MemorySessionStore({"user": '{"id": 2, "email": "c@d.cn", "username": "c", "nickname": "extra"}'})
        user = TokenCache(store).get_current_user()
        assert user.username == "c"


class TestMemorySessionStore:
    """Plain dict store"""

    def test_remove_missing_key_is_noop(self):
        store = MemorySessionStore()
        store.remove("nothing")
        assert store.get("nothing") is None
