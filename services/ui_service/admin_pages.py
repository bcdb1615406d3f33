"""
Admin console: statistics, user management list and user detail.

Every page here is admin-only; non-admins are sent to their dashboard.
"""

from typing import Any, Dict, Optional

import streamlit as st

from services.api_service.errors import ApiError, user_message
from services.auth_service.route_guard import require_auth
from services.query_service.paginated_query import (
    OFFSET_STYLE,
    ListResult,
    PaginatedList,
    PaginatedQuery,
    window_list,
)
from services.ui_service.components import (
    TRI_STATE_OPTIONS,
    activity_history_rows,
    format_datetime,
    login_history_rows,
    render_list_error,
    render_pagination,
    render_sort_headers,
    render_table,
    render_user_badges,
    render_window_pager,
    tri_state_label,
    user_rows,
)
from services.ui_service.context import PageContext
from utils.logging_config import get_logger, log_execution_time, log_user_interaction
from utils.translation import t

logger = get_logger(__name__)

USER_LIST_KEY = "admin_user_list"
FLASH_KEY = "admin_flash"
USER_FILTERS = ("search", "is_active", "is_verified", "is_admin")
USER_SORT_COLUMNS = (
    ("id", "ID"),
    ("username", "用户名"),
    ("email", "邮箱"),
    ("created_at", "注册时间"),
    ("last_login_at", "最近登录"),
)


def parse_bool_param(value: Optional[str]) -> Optional[bool]:
    """'true'/'false' query parameter -> bool; anything else means no filter"""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def initial_user_filters(query_params: Dict[str, str]) -> Dict[str, Any]:
    """User list filters taken from the URL, e.g. the dashboard's shortcut links"""
    filters: Dict[str, Any] = {"search": query_params.get("search") or None}
    for name in USER_FILTERS[1:]:
        filters[name] = parse_bool_param(query_params.get(name))
    return filters


def build_user_list(ctx: PageContext, filters: Dict[str, Any]) -> PaginatedList:
    query = PaginatedQuery(
        filters=dict(filters),
        page_size=ctx.config.pagination.user_list_page_size,
        sort_by="created_at",
        sort_order=ctx.config.pagination.default_sort_order,
        style=OFFSET_STYLE,
        default_sort_order=ctx.config.pagination.default_sort_order
    )

    def fetcher(params: Dict[str, Any]) -> ListResult:
        page = ctx.admin_api.get_user_list(params)
        return ListResult(items=page.users, total=page.total)

    return PaginatedList(query, fetcher, "admin_user_list")


def _show_flash(ctx: PageContext):
    message = ctx.state.pop(FLASH_KEY, None)
    if message:
        st.success(message)


@require_auth(admin_only=True)
def admin_dashboard_page(ctx: PageContext):
    st.title("🛠️ 管理后台")

    try:
        with st.spinner(t("messages.info.loading")), log_execution_time(logger, "admin_user_stats"):
            stats = ctx.admin_api.get_user_stats()
    except ApiError as e:
        ctx.error_tracker.track_error(e, "admin_stats")
        st.error(user_message(e))
        return

    shortcuts = (
        ("总用户数", stats.total_users, {}),
        ("活跃用户", stats.active_users, {"is_active": "true"}),
        ("已验证用户", stats.verified_users, {"is_verified": "true"}),
        ("管理员", stats.admin_users, {"is_admin": "true"}),
    )
    for column, (label, value, params) in zip(st.columns(len(shortcuts)), shortcuts):
        with column:
            st.metric(label, value)
            if st.button("查看", key=f"stats_{label}", use_container_width=True):
                ctx.navigator.push("/admin/user-management", **params)


def _apply_tri_state(plist: PaginatedList, name: str, key: str):
    plist.apply_filter(name, TRI_STATE_OPTIONS[name][st.session_state[key]])


@require_auth(admin_only=True)
def user_management_page(ctx: PageContext):
    st.title("👥 用户管理")

    # A new set of URL filters starts a fresh list
    initial = initial_user_filters(ctx.query_params)
    signature = tuple(sorted((name, str(value)) for name, value in initial.items()))
    stored = ctx.state.get(USER_LIST_KEY)
    if stored is None or stored[0] != signature:
        stored = (signature, build_user_list(ctx, initial))
        ctx.state[USER_LIST_KEY] = stored
    plist: PaginatedList = stored[1]

    with st.form("user_search_form"):
        col1, col2 = st.columns([4, 1])
        with col1:
            search = st.text_input(
                "搜索",
                value=plist.query.filters.get("search") or "",
                placeholder="用户名或邮箱",
                label_visibility="collapsed"
            )
        with col2:
            submitted = st.form_submit_button("搜索", use_container_width=True)
    if submitted:
        log_user_interaction(logger, "admin_user_search")
        plist.apply_filter("search", search.strip() or None)

    for column, name in zip(st.columns(3), USER_FILTERS[1:]):
        options = list(TRI_STATE_OPTIONS[name])
        key = f"user_filter_{name}"
        with column:
            st.selectbox(
                name,
                options,
                index=options.index(tri_state_label(name, plist.query.filters.get(name))),
                key=key,
                label_visibility="collapsed",
                on_change=_apply_tri_state,
                args=(plist, name, key)
            )

    plist.ensure_loaded()
    render_list_error(plist)

    render_sort_headers(plist, USER_SORT_COLUMNS, "users")
    render_table(user_rows(plist.items))
    render_pagination(plist, "users")

    if plist.items:
        labels = {user.id: f"{user.username} ({user.email})" for user in plist.items}
        col1, col2 = st.columns([4, 1])
        with col1:
            selected = st.selectbox(
                "用户",
                list(labels),
                format_func=labels.get,
                label_visibility="collapsed"
            )
        with col2:
            if st.button("查看详情", use_container_width=True):
                ctx.navigator.push(f"/admin/user-detail/{selected}")


def _toggle_status(ctx: PageContext, target, current_user):
    if target.id == current_user.id and target.is_active:
        st.error(t("messages.error.selfDeactivate"))
        return
    log_user_interaction(logger, "admin_toggle_status", target_user_id=target.id)
    try:
        updated = ctx.admin_api.update_user_status(target.id, not target.is_active)
    except ApiError as e:
        ctx.error_tracker.track_error(e, "admin_toggle_status", target_user_id=target.id)
        st.error(user_message(e))
        return
    key = "userActivated" if updated.is_active else "userDeactivated"
    ctx.state[FLASH_KEY] = t(f"messages.success.{key}")
    st.rerun()


def _toggle_role(ctx: PageContext, target, current_user):
    if target.id == current_user.id:
        st.error(t("messages.error.selfRoleChange"))
        return
    log_user_interaction(logger, "admin_toggle_role", target_user_id=target.id)
    try:
        updated = ctx.admin_api.update_user_role(target.id, not target.is_admin)
    except ApiError as e:
        ctx.error_tracker.track_error(e, "admin_toggle_role", target_user_id=target.id)
        st.error(user_message(e))
        return
    key = "roleGranted" if updated.is_admin else "roleRevoked"
    ctx.state[FLASH_KEY] = t(f"messages.success.{key}")
    st.rerun()


@require_auth(admin_only=True)
def user_detail_page(ctx: PageContext):
    if st.button("← 返回用户列表"):
        ctx.navigator.push("/admin/user-management")

    raw_id = ctx.path_params.get("id", "")
    if not raw_id.isdigit():
        st.error(t("messages.error.notFound"))
        return
    user_id = int(raw_id)

    try:
        target = ctx.admin_api.get_user_detail(user_id)
    except ApiError as e:
        ctx.error_tracker.track_error(e, "admin_user_detail", target_user_id=user_id)
        st.error(user_message(e))
        return

    st.title(f"👤 {target.username}")
    _show_flash(ctx)

    col1, col2 = st.columns(2)
    with col1:
        st.write(f"**ID：** {target.id}")
        st.write(f"**邮箱：** {target.email}")
        render_user_badges(target)
    with col2:
        st.write(f"**注册时间：** {format_datetime(target.created_at)}")
        st.write(f"**最近登录：** {format_datetime(target.last_login_at)}")
        st.write(f"**更新时间：** {format_datetime(target.updated_at)}")
    if target.bio:
        st.caption(target.bio)

    current_user = ctx.auth.user
    col1, col2 = st.columns(2)
    with col1:
        if st.button("禁用账户" if target.is_active else "激活账户", use_container_width=True):
            _toggle_status(ctx, target, current_user)
    with col2:
        if st.button("撤销管理员" if target.is_admin else "设为管理员", use_container_width=True):
            _toggle_role(ctx, target, current_user)

    login_tab, activity_tab = st.tabs(["登录历史", "活动历史"])
    size = ctx.config.pagination.history_page_size

    with login_tab:
        logins = ctx.page_state(
            f"admin_login_history_{user_id}",
            lambda: window_list(
                lambda skip, limit: ctx.admin_api.get_user_login_history(user_id, skip, limit),
                size,
                "admin_login_history"
            )
        )
        logins.ensure_loaded()
        render_list_error(logins)
        render_table(login_history_rows(logins.items))
        render_window_pager(logins, f"admin_logins_{user_id}")

    with activity_tab:
        activities = ctx.page_state(
            f"admin_activity_history_{user_id}",
            lambda: window_list(
                lambda skip, limit: ctx.admin_api.get_user_activity_history(user_id, skip, limit),
                size,
                "admin_activity_history"
            )
        )
        activities.ensure_loaded()
        render_list_error(activities)
        render_table(activity_history_rows(activities.items))
        render_window_pager(activities, f"admin_activities_{user_id}")
