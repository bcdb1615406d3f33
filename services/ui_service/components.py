"""
Reusable Streamlit widgets: tables, pagination bar, sort headers, form messages.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import streamlit as st

from services.auth_service.models import ActivityHistory, LoginHistory, User
from services.auth_service.validation import GENERAL
from services.query_service.paginated_query import PaginatedList, SORT_ASC, pagination_summary
from utils.translation import t

# Tri-state filter choices: label -> value sent to the backend
TRI_STATE_OPTIONS: Dict[str, Dict[str, Optional[bool]]] = {
    "is_active": {"所有状态": None, "已激活": True, "未激活": False},
    "is_verified": {"所有验证状态": None, "已验证": True, "未验证": False},
    "is_admin": {"所有角色": None, "管理员": True, "普通用户": False},
}


def format_datetime(value: Optional[str], fmt: str = "%Y-%m-%d %H:%M") -> str:
    """ISO timestamp -> short display form; unparsable input is shown as is"""
    if not value:
        return "-"
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime(fmt)
    except ValueError:
        return value


def user_rows(users: Iterable[User]) -> List[Dict[str, Any]]:
    return [
        {
            "ID": user.id,
            "用户名": user.username,
            "邮箱": user.email,
            "状态": "已激活" if user.is_active else "未激活",
            "验证": "已验证" if user.is_verified else "未验证",
            "角色": "管理员" if user.is_admin else "普通用户",
            "注册时间": format_datetime(user.created_at),
            "最近登录": format_datetime(user.last_login_at),
        }
        for user in users
    ]


def login_history_rows(records: Iterable[LoginHistory]) -> List[Dict[str, Any]]:
    return [
        {
            "登录时间": format_datetime(record.login_time, "%Y-%m-%d %H:%M:%S"),
            "IP 地址": record.ip_address or "-",
            "设备信息": record.user_agent or "-",
        }
        for record in records
    ]


def activity_history_rows(records: Iterable[ActivityHistory]) -> List[Dict[str, Any]]:
    return [
        {
            "时间": format_datetime(record.created_at, "%Y-%m-%d %H:%M:%S"),
            "操作": record.action,
            "描述": record.description or "-",
        }
        for record in records
    ]


def tri_state_label(name: str, value: Optional[bool]) -> str:
    for label, option in TRI_STATE_OPTIONS[name].items():
        if option is value:
            return label
    return next(iter(TRI_STATE_OPTIONS[name]))


def render_table(rows: List[Dict[str, Any]], empty_text: Optional[str] = None):
    if not rows:
        st.caption(empty_text or t("messages.info.noData"))
        return
    st.dataframe(rows, use_container_width=True, hide_index=True)


def render_form_errors(errors: Dict[str, str]):
    """Field messages first, then the general one"""
    for name, message in errors.items():
        if name != GENERAL:
            st.error(message)
    if GENERAL in errors:
        st.error(errors[GENERAL])


def render_list_error(plist: PaginatedList):
    """Last fetch error plus a button that fetches the current query again"""
    if plist.error:
        st.error(plist.error)
        st.button(t("actions.retry"), key=f"{plist.context}_retry", on_click=plist.refresh)


def render_pagination(plist: PaginatedList, key: str):
    """Summary plus previous/next buttons; each click fetches once"""
    query = plist.query
    pages = query.total_pages(plist.total)

    col1, col2, col3, col4 = st.columns([2, 2, 1, 1])
    with col1:
        st.caption(pagination_summary(plist.total))
    with col2:
        st.caption(t("pagination.page", page=query.page, pages=pages))
    with col3:
        st.button(
            t("pagination.previous"),
            key=f"{key}_prev",
            disabled=query.page <= 1,
            on_click=plist.set_page,
            args=(query.page - 1,),
            use_container_width=True
        )
    with col4:
        st.button(
            t("pagination.next"),
            key=f"{key}_next",
            disabled=query.page >= pages,
            on_click=plist.set_page,
            args=(query.page + 1,),
            use_container_width=True
        )


def render_window_pager(plist: PaginatedList, key: str):
    """Pager for lists without a total: next is enabled after a full page"""
    query = plist.query
    col1, col2, col3 = st.columns([4, 1, 1])
    with col1:
        st.caption(f"第 {query.page} 页")
    with col2:
        st.button(
            t("pagination.previous"),
            key=f"{key}_prev",
            disabled=query.page <= 1,
            on_click=plist.set_page,
            args=(query.page - 1,),
            use_container_width=True
        )
    with col3:
        st.button(
            t("pagination.next"),
            key=f"{key}_next",
            disabled=not plist.result.has_more,
            on_click=plist.set_page,
            args=(query.page + 1,),
            use_container_width=True
        )


def sort_label(plist: PaginatedList, name: str, label: str) -> str:
    if plist.query.sort_by != name:
        return label
    return f"{label} {'↑' if plist.query.sort_order == SORT_ASC else '↓'}"


def render_sort_headers(plist: PaginatedList, columns: Sequence[Tuple[str, str]], key: str):
    """One button per sortable column; clicking toggles the sort"""
    cells = st.columns(len(columns))
    for cell, (name, label) in zip(cells, columns):
        with cell:
            st.button(
                sort_label(plist, name, label),
                key=f"{key}_sort_{name}",
                on_click=plist.toggle_sort,
                args=(name,),
                use_container_width=True
            )


def render_user_badges(user: User):
    st.markdown(
        " ".join([
            "🟢 已激活" if user.is_active else "🔴 未激活",
            "✅ 已验证" if user.is_verified else "⚠️ 未验证",
            "🛡️ 管理员" if user.is_admin else "👤 普通用户",
        ])
    )
