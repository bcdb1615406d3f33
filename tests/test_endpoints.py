"""
Tests for the endpoint wrappers (auth, users, admin, notes)
"""

import pytest

from services.auth_service.auth_api import AuthApi
from services.notes_service.notes_api import NotesApi
from services.user_service.users_api import AdminUsersApi, UsersApi
from tests.helpers import make_response, user_payload


def _sent(http):
    """(method, url, kwargs) of the last request"""
    method, url = http.request.call_args[0]
    return method, url, http.request.call_args[1]


class TestAuthApi:
    """Public /api/auth endpoints"""

    def test_login_posts_form_and_caches_session(self, client, http, token_cache):
        http.request.return_value = make_response(200, {
            "access_token": "jwt-1",
            "token_type": "bearer",
            "user": user_payload(is_admin=True),
        })

        response = AuthApi(client).login("alice@example.com", "secret123")

        method, url, kwargs = _sent(http)
        assert (method, url) == ("POST", "http://api.test/api/auth/login")
        assert kwargs["data"] == {"username": "alice@example.com", "password": "secret123", "grant_type": "password"}
        assert response.access_token == "jwt-1"
        assert token_cache.get_token() == "jwt-1"
        assert token_cache.get_current_user().is_admin is True

    def test_register_returns_user(self, client, http):
        http.request.return_value = make_response(201, user_payload(id=5, username="neo"))

        user = AuthApi(client).register("neo", "neo@example.com", "password1")

        _, url, kwargs = _sent(http)
        assert url.endswith("/api/auth/register")
        assert kwargs["json"] == {"username": "neo", "email": "neo@example.com", "password": "password1"}
        assert user.id == 5

    def test_forgot_password_includes_frontend_url(self, client, http):
        AuthApi(client).forgot_password("a@b.cn", "http://console.local")
        assert _sent(http)[2]["json"] == {"email": "a@b.cn", "frontend_url": "http://console.local"}

    def test_reset_password_and_verify_email(self, client, http):
        api = AuthApi(client)

        api.reset_password("reset-tok", "newpassword")
        assert _sent(http)[2]["json"] == {"token": "reset-tok", "new_password": "newpassword"}

        api.verify_email("verify-tok")
        assert _sent(http)[1].endswith("/api/auth/verify-email")
        assert _sent(http)[2]["json"] == {"token": "verify-tok"}

    def test_public_calls_never_send_token(self, client, http, token_cache):
        token_cache.set_token("tok")
        AuthApi(client).resend_verification("a@b.cn")
        assert "Authorization" not in _sent(http)[2]["headers"]


class TestUsersApi:
    """/api/users/me endpoints"""

    def test_update_user_drops_unset_fields(self, client, http):
        http.request.return_value = make_response(200, user_payload(username="alice2"))

        user = UsersApi(client).update_user(username="alice2")

        method, url, kwargs = _sent(http)
        assert method == "PUT"
        assert url.endswith("/api/users/me")
        assert kwargs["json"] == {"username": "alice2"}
        assert user.username == "alice2"

    def test_change_password(self, client, http):
        UsersApi(client).change_password("oldpass1", "newpass12")
        assert _sent(http)[2]["json"] == {"old_password": "oldpass1", "new_password": "newpass12"}

    def test_login_history(self, client, http):
        http.request.return_value = make_response(200, [
            {"id": 1, "user_id": 1, "ip_address": "10.0.0.1", "user_agent": "Firefox", "login_time": "2024-05-01T10:00:00Z"},
        ])

        records = UsersApi(client).get_login_history(skip=10, limit=5)

        assert _sent(http)[2]["params"] == {"skip": 10, "limit": 5}
        assert records[0].ip_address == "10.0.0.1"


class TestAdminUsersApi:
    """/api/admin/users endpoints"""

    def test_user_list(self, client, http):
        http.request.return_value = make_response(200, {
            "users": [user_payload(id=1), user_payload(id=2), user_payload(id=3)],
            "total": 3,
        })

        page = AdminUsersApi(client).get_user_list({"skip": 0, "limit": 10, "is_active": True})

        assert _sent(http)[2]["params"] == {"skip": 0, "limit": 10, "is_active": "true"}
        assert [user.id for user in page.users] == [1, 2, 3]
        assert page.total == 3

    def test_status_and_role_updates(self, client, http):
        api = AdminUsersApi(client)
        http.request.return_value = make_response(200, user_payload(id=4, is_active=False))

        api.update_user_status(4, False)
        assert _sent(http)[1].endswith("/api/admin/users/4/status")
        assert _sent(http)[2]["json"] == {"is_active": False}

        api.update_user_role(4, True)
        assert _sent(http)[1].endswith("/api/admin/users/4/role")
        assert _sent(http)[2]["json"] == {"is_admin": True}

    def test_detail_and_generic_update(self, client, http):
        api = AdminUsersApi(client)
        http.request.return_value = make_response(200, user_payload(id=4, bio="note"))

        assert api.get_user_detail(4).bio == "note"
        assert _sent(http)[:2] == ("GET", "http://api.test/api/admin/users/4")

        api.update_user(4, {"bio": "note"})
        assert _sent(http)[:2] == ("PUT", "http://api.test/api/admin/users/4")
        assert _sent(http)[2]["json"] == {"bio": "note"}

    def test_user_stats_uses_list_totals(self, client, http):
        http.request.side_effect = [
            make_response(200, {"users": [], "total": 40}),
            make_response(200, {"users": [], "total": 30}),
            make_response(200, {"users": [], "total": 20}),
            make_response(200, {"users": [], "total": 2}),
        ]

        stats = AdminUsersApi(client).get_user_stats()

        assert (stats.total_users, stats.active_users, stats.verified_users, stats.admin_users) == (40, 30, 20, 2)
        assert http.request.call_count == 4


class TestNotesApi:
    """/api/v1/xhs/notes endpoints"""

    def test_list_notes(self, client, http):
        http.request.return_value = make_response(200, {
            "items": [{"note_id": "n1", "note_display_title": "早餐", "note_liked_count": 12}],
            "total": 41,
            "page": 2,
            "page_size": 20,
        })

        page = NotesApi(client).list_notes({"page": 2, "page_size": 20, "sort_by": "note_liked_count"})

        _, url, kwargs = _sent(http)
        assert url == "http://api.test/api/v1/xhs/notes/"
        assert kwargs["params"]["sort_by"] == "note_liked_count"
        assert page.total == 41
        assert page.items[0].note_display_title == "早餐"

    def test_basic_keeps_author_fields(self, client, http):
        http.request.return_value = make_response(200, {
            "note_id": "n1",
            "auther_nick_name": "小红",
            "unexpected": "ignored",
        })

        basic = NotesApi(client).get_basic("n1")

        assert _sent(http)[1].endswith("/api/v1/xhs/notes/n1/basic")
        assert basic.auther_nick_name == "小红"

    def test_keyword_groups_are_flattened(self, client, http):
        http.request.return_value = make_response(200, [
            {"keyword_group": {"group_id": 3, "group_name": "美食", "keywords": ["早餐", "咖啡"]}, "retrieved_at": "2024-05-01"},
        ])

        groups = NotesApi(client).get_keyword_groups("n1")

        assert groups[0].group_name == "美食"
        assert groups[0].keywords == ["早餐", "咖啡"]

    def test_raw_sections(self, client, http):
        http.request.return_value = make_response(200, [{"id": "d1", "diagnosis_type": "quality"}])

        records = NotesApi(client).get_llm_diagnoses("n1")

        assert _sent(http)[1].endswith("/n1/llm-diagnoses")
        assert records == [{"id": "d1", "diagnosis_type": "quality"}]

    def test_unknown_section_rejected(self, client, http):
        with pytest.raises(ValueError):
            NotesApi(client).get_section("n1", "secrets")
        http.request.assert_not_called()
