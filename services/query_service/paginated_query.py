"""
Filter / sort / pagination state shared by every list page.

`PaginatedQuery` owns the query and turns it into request parameters;
`PaginatedList` pairs it with a fetch function and keeps the last good result.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from services.api_service.errors import ApiError, user_message
from utils.logging_config import get_error_tracker, get_logger
from utils.translation import t

logger = get_logger(__name__)

T = TypeVar("T")

SORT_DESC = "desc"
SORT_ASC = "asc"


@dataclass(frozen=True)
class ParamStyle:
    """Parameter names a backend list endpoint expects"""
    offset: bool
    position_param: str
    size_param: str
    sort_param: str
    order_param: str


# skip/limit addressing (admin users, history tables)
OFFSET_STYLE = ParamStyle(
    offset=True,
    position_param="skip",
    size_param="limit",
    sort_param="order_by",
    order_param="order_direction",
)

# page/page_size addressing (notes)
PAGE_STYLE = ParamStyle(
    offset=False,
    position_param="page",
    size_param="page_size",
    sort_param="sort_by",
    order_param="sort_order",
)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


@dataclass
class PaginatedQuery:
    """Query state of one list view; never persisted"""
    filters: Dict[str, Any] = field(default_factory=dict)
    page: int = 1
    page_size: int = 10
    sort_by: Optional[str] = None
    sort_order: str = SORT_DESC
    style: ParamStyle = OFFSET_STYLE
    default_sort_order: str = SORT_DESC

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    def apply_filter(self, name: str, value: Any):
        """Set one filter and go back to the first page"""
        self.filters[name] = value
        self.page = 1

    def apply_filters(self, values: Dict[str, Any]):
        self.filters.update(values)
        self.page = 1

    def reset_filters(self):
        self.filters = {name: None for name in self.filters}
        self.page = 1

    def set_page(self, page: int):
        self.page = max(1, int(page))

    def set_page_size(self, page_size: int):
        self.page_size = max(1, int(page_size))
        self.page = 1

    def toggle_sort(self, name: str):
        """Same column flips direction, another column starts at the default direction"""
        if name == self.sort_by:
            self.sort_order = SORT_ASC if self.sort_order == SORT_DESC else SORT_DESC
        else:
            self.sort_by = name
            self.sort_order = self.default_sort_order
        self.page = 1

    def total_pages(self, total: int) -> int:
        return max(1, math.ceil(total / self.page_size)) if total else 1

    def to_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            name: value for name, value in self.filters.items() if not _is_blank(value)
        }
        params[self.style.position_param] = self.skip if self.style.offset else self.page
        params[self.style.size_param] = self.page_size
        if self.sort_by:
            params[self.style.sort_param] = self.sort_by
            params[self.style.order_param] = self.sort_order
        return params


@dataclass
class ListResult(Generic[T]):
    items: List[T] = field(default_factory=list)
    total: int = 0
    # History endpoints return bare lists; a full page means there may be more
    has_more: Optional[bool] = None

    @classmethod
    def from_window(cls, items: List[T], query: 'PaginatedQuery') -> 'ListResult[T]':
        """Result of an endpoint that reports no total"""
        has_more = len(items) >= query.page_size
        return cls(items=list(items), total=query.skip + len(items) + (1 if has_more else 0), has_more=has_more)


class PaginatedList(Generic[T]):
    """
    A query plus the function that fetches it.

    Every mutation triggers exactly one fetch. A failed fetch keeps the
    previous items and does not roll the query back.
    """

    def __init__(self, query: PaginatedQuery, fetcher: Callable[[Dict[str, Any]], ListResult[T]], context: str = "list"):
        self.query = query
        self.fetcher = fetcher
        self.context = context
        self.result: ListResult[T] = ListResult()
        self.error: Optional[str] = None
        self.loaded = False

    @property
    def items(self) -> List[T]:
        return self.result.items

    @property
    def total(self) -> int:
        return self.result.total

    def refresh(self) -> ListResult[T]:
        params = self.query.to_params()
        try:
            self.result = self.fetcher(params)
            self.error = None
            self.loaded = True
        except ApiError as e:
            get_error_tracker().track_error(e, self.context, params=params)
            self.error = user_message(e)
        return self.result

    def ensure_loaded(self) -> ListResult[T]:
        if not self.loaded and self.error is None:
            return self.refresh()
        return self.result

    def apply_filter(self, name: str, value: Any) -> ListResult[T]:
        self.query.apply_filter(name, value)
        return self.refresh()

    def apply_filters(self, values: Dict[str, Any]) -> ListResult[T]:
        self.query.apply_filters(values)
        return self.refresh()

    def set_page(self, page: int) -> ListResult[T]:
        self.query.set_page(page)
        return self.refresh()

    def set_page_size(self, page_size: int) -> ListResult[T]:
        self.query.set_page_size(page_size)
        return self.refresh()

    def reset_filters(self) -> ListResult[T]:
        self.query.reset_filters()
        return self.refresh()

    def toggle_sort(self, name: str) -> ListResult[T]:
        self.query.toggle_sort(name)
        return self.refresh()


def pagination_summary(total: int) -> str:
    """'共 N 条' footer text"""
    return t("pagination.summary", total=total)


def window_list(fetch: Callable[[int, int], List[T]], page_size: int, context: str) -> PaginatedList[T]:
    """Skip/limit list over an endpoint that returns a bare list (history tables)"""
    query = PaginatedQuery(page_size=page_size, style=OFFSET_STYLE)

    def fetcher(params: Dict[str, Any]) -> ListResult[T]:
        return ListResult.from_window(fetch(params["skip"], params["limit"]), query)

    return PaginatedList(query, fetcher, context)
