"""
Tests for the list-page helpers (admin user list, notes list, history rows)
"""

from datetime import date

from services.auth_service.models import ActivityHistory, LoginHistory, User
from services.notes_service.models import NoteListItem
from services.query_service.paginated_query import pagination_summary
from services.ui_service.admin_pages import build_user_list, initial_user_filters, parse_bool_param
from services.ui_service.components import (
    activity_history_rows,
    format_datetime,
    login_history_rows,
    tri_state_label,
    user_rows,
)
from services.ui_service.notes_pages import build_notes_list, date_filter_value, note_rows, parse_count_filters
from tests.helpers import make_response, user_payload


class TestAdminUserList:
    """Admin user management list"""

    def test_three_users_three_rows(self, ctx, http):
        http.request.return_value = make_response(200, {
            "users": [user_payload(id=1), user_payload(id=2, is_admin=True), user_payload(id=3, is_active=False)],
            "total": 3,
        })
        plist = build_user_list(ctx, initial_user_filters({}))

        plist.ensure_loaded()
        rows = user_rows(plist.items)

        assert len(rows) == 3
        assert rows[1]["角色"] == "管理员"
        assert rows[2]["状态"] == "未激活"
        assert pagination_summary(plist.total) == "共 3 条"

    def test_default_query(self, ctx, http):
        http.request.return_value = make_response(200, {"users": [], "total": 0})
        plist = build_user_list(ctx, initial_user_filters({}))

        plist.ensure_loaded()

        assert http.request.call_args[1]["params"] == {
            "skip": 0,
            "limit": 10,
            "order_by": "created_at",
            "order_direction": "desc",
        }

    def test_filter_change_fetches_first_page_once(self, ctx, http):
        http.request.return_value = make_response(200, {"users": [], "total": 40})
        plist = build_user_list(ctx, initial_user_filters({}))
        plist.ensure_loaded()
        plist.set_page(3)
        http.request.reset_mock()

        plist.apply_filter("is_verified", False)

        assert http.request.call_count == 1
        params = http.request.call_args[1]["params"]
        assert params["skip"] == 0
        assert params["is_verified"] == "false"

    def test_url_filters(self):
        assert initial_user_filters({"is_active": "true", "search": "bob"}) == {
            "search": "bob",
            "is_active": True,
            "is_verified": None,
            "is_admin": None,
        }

    def test_parse_bool_param(self):
        assert parse_bool_param("TRUE") is True
        assert parse_bool_param("false") is False
        assert parse_bool_param("yes") is None
        assert parse_bool_param(None) is None

    def test_tri_state_labels(self):
        assert tri_state_label("is_active", None) == "所有状态"
        assert tri_state_label("is_admin", True) == "管理员"
        assert tri_state_label("is_verified", False) == "未验证"


class TestNotesList:
    """Notes list helpers"""

    def test_default_query_uses_page_numbers(self, ctx, http):
        http.request.return_value = make_response(200, {"items": [], "total": 0, "page": 1, "page_size": 20})
        plist = build_notes_list(ctx)

        plist.toggle_sort("note_create_time")

        assert http.request.call_args[1]["params"] == {
            "page": 1,
            "page_size": 20,
            "sort_by": "note_create_time",
            "sort_order": "desc",
        }

    def test_count_filters(self):
        values, errors = parse_count_filters({"min_likes": "10", "max_likes": " ", "min_shares": "0"})

        assert errors == {}
        assert values["min_likes"] == 10
        assert values["max_likes"] is None
        assert values["min_shares"] == 0

    def test_count_filters_reject_garbage(self):
        values, errors = parse_count_filters({"min_comments": "abc", "max_comments": "-1"})
        assert set(errors) == {"min_comments", "max_comments"}

    def test_date_filter_value(self):
        assert date_filter_value(date(2024, 5, 1)) == "2024-05-01"
        assert date_filter_value(None) is None

    def test_note_rows(self):
        rows = note_rows([NoteListItem(note_id="n1", note_display_title="咖啡", note_liked_count=3)])
        assert rows[0]["笔记 ID"] == "n1"
        assert rows[0]["点赞"] == 3
        assert rows[0]["作者"] == "-"


class TestHistoryRows:
    """Formatting of history and user rows"""

    def test_format_datetime(self):
        assert format_datetime("2024-05-01T10:30:00Z") == "2024-05-01 10:30"
        assert format_datetime(None) == "-"
        assert format_datetime("yesterday") == "yesterday"

    def test_login_history_rows(self):
        rows = login_history_rows([LoginHistory(id=1, user_id=1, ip_address=None, login_time="2024-05-01T10:30:05")])
        assert rows == [{"登录时间": "2024-05-01 10:30:05", "IP 地址": "-", "设备信息": "-"}]

    def test_activity_history_rows(self):
        rows = activity_history_rows([ActivityHistory(id=1, user_id=1, action="login", created_at="2024-05-01T10:30:05")])
        assert rows[0]["操作"] == "login"

    def test_user_rows_never_logged_in(self):
        rows = user_rows([User(id=9, email="z@z.cn", username="z")])
        assert rows[0]["最近登录"] == "-"
