"""
Pages for the logged-in user: dashboard, profile, password, account security.
"""

import streamlit as st

from services.api_service.errors import ApiError, user_message
from services.auth_service.route_guard import require_auth
from services.auth_service.validation import (
    map_password_change_error,
    validate_password_change,
    validate_profile,
)
from services.query_service.paginated_query import window_list
from services.ui_service.components import (
    activity_history_rows,
    format_datetime,
    login_history_rows,
    render_form_errors,
    render_list_error,
    render_table,
    render_user_badges,
    render_window_pager,
)
from services.ui_service.context import PageContext
from utils.logging_config import get_logger, log_user_interaction
from utils.translation import t

logger = get_logger(__name__)


@require_auth()
def dashboard_page(ctx: PageContext):
    user = ctx.auth.user
    st.title(f"👋 欢迎回来，{user.username}")

    col1, col2 = st.columns([1, 2])
    with col1:
        if user.avatar:
            st.image(user.avatar, width=96)
        st.write(f"**邮箱：** {user.email}")
        render_user_badges(user)
        st.caption(f"注册时间：{format_datetime(user.created_at)}")
        st.caption(f"最近登录：{format_datetime(user.last_login_at)}")
        if user.bio:
            st.write(user.bio)

    size = ctx.config.pagination.dashboard_history_size
    with col2:
        st.subheader("最近登录")
        try:
            render_table(login_history_rows(ctx.users_api.get_login_history(0, size)))
        except ApiError as e:
            ctx.error_tracker.track_error(e, "dashboard_login_history")
            st.error(user_message(e))

        st.subheader("最近活动")
        try:
            render_table(activity_history_rows(ctx.users_api.get_activity_history(0, size)))
        except ApiError as e:
            ctx.error_tracker.track_error(e, "dashboard_activity_history")
            st.error(user_message(e))


@require_auth()
def profile_page(ctx: PageContext):
    user = ctx.auth.user
    st.title("👤 个人资料")

    with st.form("profile_form"):
        st.text_input("📧 邮箱", value=user.email, disabled=True)
        username = st.text_input("用户名", value=user.username)
        avatar = st.text_input("头像 URL", value=user.avatar or "")
        bio = st.text_area("个人简介", value=user.bio or "")
        submitted = st.form_submit_button("保存", type="primary")

    if submitted:
        errors = validate_profile(username)
        if errors:
            render_form_errors(errors)
            return
        log_user_interaction(logger, "profile_update", user_id=user.id)
        try:
            with st.spinner(t("messages.info.processing")):
                ctx.users_api.update_user(username=username.strip(), avatar=avatar.strip(), bio=bio)
                ctx.auth.refresh_user()
            st.success(t("messages.success.profileUpdated"))
        except ApiError as e:
            ctx.error_tracker.track_error(e, "profile_update")
            st.error(user_message(e))


@require_auth()
def change_password_page(ctx: PageContext):
    st.title("🔒 修改密码")

    with st.form("change_password_form", clear_on_submit=False):
        old_password = st.text_input("当前密码", type="password")
        new_password = st.text_input("新密码", type="password")
        confirm_password = st.text_input("确认新密码", type="password")
        submitted = st.form_submit_button("修改密码", type="primary")

    if not submitted:
        return

    errors = validate_password_change(old_password, new_password, confirm_password)
    if errors:
        render_form_errors(errors)
        return

    log_user_interaction(logger, "password_change", user_id=ctx.auth.user.id)
    try:
        with st.spinner(t("messages.info.processing")):
            ctx.users_api.change_password(old_password, new_password)
        st.success(t("messages.success.passwordChanged"))
    except ApiError as e:
        ctx.error_tracker.track_error(e, "password_change")
        render_form_errors(map_password_change_error(e))


@require_auth()
def account_security_page(ctx: PageContext):
    user = ctx.auth.user
    st.title("🛡️ 账户安全")

    st.subheader("邮箱验证")
    if user.is_verified:
        st.success(f"{user.email} 已验证")
    else:
        st.warning(f"{user.email} 尚未验证")
        if st.button("重新发送验证邮件"):
            try:
                with st.spinner(t("messages.info.processing")):
                    ctx.auth_api.resend_verification(user.email, ctx.config.ui.public_url)
                st.success(t("messages.success.verificationSent"))
            except ApiError as e:
                ctx.error_tracker.track_error(e, "resend_verification")
                st.error(user_message(e))

    st.subheader("密码")
    if st.button("修改密码"):
        ctx.navigator.push("/user/change-password")

    st.subheader("登录历史")
    history = ctx.page_state(
        "security_login_history",
        lambda: window_list(ctx.users_api.get_login_history, ctx.config.pagination.history_page_size, "login_history")
    )
    history.ensure_loaded()
    render_list_error(history)
    render_table(login_history_rows(history.items))
    render_window_pager(history, "security_login_history")
