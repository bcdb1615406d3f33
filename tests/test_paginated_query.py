"""
Tests for list query state and the fetch-on-change list
"""

from unittest.mock import Mock

import pytest

from services.api_service.errors import ApiError, NetworkError
from services.query_service.paginated_query import (
    OFFSET_STYLE,
    PAGE_STYLE,
    ListResult,
    PaginatedList,
    PaginatedQuery,
    pagination_summary,
    window_list,
)
from utils.translation import t


class TestPaginatedQuery:
    """Query state and request parameters"""

    def test_offset_params(self):
        query = PaginatedQuery(filters={"search": "bob", "is_active": None}, page=3, page_size=10)

        assert query.to_params() == {"search": "bob", "skip": 20, "limit": 10}

    def test_page_params_with_sort(self):
        query = PaginatedQuery(page=2, page_size=20, sort_by="note_liked_count", style=PAGE_STYLE)

        assert query.to_params() == {
            "page": 2,
            "page_size": 20,
            "sort_by": "note_liked_count",
            "sort_order": "desc",
        }

    def test_offset_sort_names(self):
        query = PaginatedQuery(sort_by="created_at", sort_order="asc", style=OFFSET_STYLE)
        params = query.to_params()
        assert params["order_by"] == "created_at"
        assert params["order_direction"] == "asc"

    def test_blank_and_false_filters(self):
        query = PaginatedQuery(filters={"search": "  ", "is_admin": False, "min_likes": 0})
        params = query.to_params()

        assert "search" not in params
        assert params["is_admin"] is False
        assert params["min_likes"] == 0

    def test_filter_change_resets_page(self):
        query = PaginatedQuery(page=4)
        query.apply_filter("is_verified", True)
        assert query.page == 1

    def test_sort_toggle(self):
        query = PaginatedQuery(page=3)

        query.toggle_sort("comment_count")
        assert (query.sort_by, query.sort_order, query.page) == ("comment_count", "desc", 1)

        query.toggle_sort("comment_count")
        assert (query.sort_by, query.sort_order) == ("comment_count", "asc")

        query.toggle_sort("comment_count")
        assert query.sort_order == "desc"

        query.toggle_sort("comment_count")
        query.toggle_sort("share_count")
        assert (query.sort_by, query.sort_order) == ("share_count", "desc")

    def test_reset_filters_keeps_names(self):
        query = PaginatedQuery(filters={"title": "咖啡", "min_likes": 5}, page=2)
        query.reset_filters()

        assert query.filters == {"title": None, "min_likes": None}
        assert query.page == 1

    def test_page_bounds(self):
        query = PaginatedQuery(page_size=10)
        query.set_page(0)
        assert query.page == 1
        assert query.total_pages(0) == 1
        assert query.total_pages(10) == 1
        assert query.total_pages(11) == 2

    def test_page_size_change_resets_page(self):
        query = PaginatedQuery(page=5, page_size=20)
        query.set_page_size(50)
        assert (query.page, query.page_size) == (1, 50)


class TestPaginatedList:
    """One fetch per change; errors keep the previous result"""

    def _list(self, **query_kwargs):
        fetcher = Mock(return_value=ListResult(items=["a", "b"], total=25))
        return PaginatedList(PaginatedQuery(**query_kwargs), fetcher, "test_list"), fetcher

    def test_filter_change_fetches_once_from_first_page(self):
        plist, fetcher = self._list(filters={"is_active": None}, page=3, page_size=10)

        plist.apply_filter("is_active", True)

        fetcher.assert_called_once_with({"is_active": True, "skip": 0, "limit": 10})

    def test_ensure_loaded_fetches_once(self):
        plist, fetcher = self._list()

        plist.ensure_loaded()
        plist.ensure_loaded()

        assert fetcher.call_count == 1
        assert plist.items == ["a", "b"]
        assert plist.total == 25

    def test_set_page_and_sort(self):
        plist, fetcher = self._list(page_size=10)

        plist.set_page(2)
        assert fetcher.call_args[0][0]["skip"] == 10

        plist.toggle_sort("created_at")
        params = fetcher.call_args[0][0]
        assert params["skip"] == 0
        assert params["order_by"] == "created_at"
        assert fetcher.call_count == 2

    def test_failed_fetch_keeps_previous_items(self):
        plist, fetcher = self._list()
        plist.refresh()
        fetcher.side_effect = ApiError(500, "boom")

        plist.apply_filter("search", "x")

        assert plist.items == ["a", "b"]
        assert plist.error == t("messages.error.serverError")
        # no rollback of the filter
        assert plist.query.filters["search"] == "x"

    def test_error_cleared_by_next_success(self):
        plist, fetcher = self._list()
        fetcher.side_effect = [NetworkError("down"), ListResult(items=["c"], total=1)]

        plist.ensure_loaded()
        assert plist.error == t("messages.error.networkError")

        plist.refresh()
        assert plist.error is None
        assert plist.items == ["c"]

    def test_non_api_errors_propagate(self):
        plist, fetcher = self._list()
        fetcher.side_effect = KeyError("items")

        with pytest.raises(KeyError):
            plist.refresh()


class TestWindowList:
    """Lists over endpoints without a total"""

    def test_full_page_has_more(self):
        fetch = Mock(return_value=[1, 2, 3])
        plist = window_list(fetch, 3, "history")

        plist.ensure_loaded()

        fetch.assert_called_once_with(0, 3)
        assert plist.result.has_more is True

        fetch.return_value = [4]
        plist.set_page(2)

        fetch.assert_called_with(3, 3)
        assert plist.result.has_more is False
        assert plist.items == [4]


def test_pagination_summary():
    assert pagination_summary(3) == "共 3 条"
