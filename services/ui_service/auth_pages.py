"""
Public pages: login, register, forgot/reset password, email verification.
"""

import streamlit as st

from services.api_service.errors import ApiError
from services.auth_service.validation import (
    GENERAL,
    map_login_error,
    map_registration_error,
    validate_email_request,
    validate_login,
    validate_password_reset,
    validate_registration,
)
from services.ui_service.components import render_form_errors
from services.ui_service.context import PageContext
from utils.logging_config import log_user_interaction, get_logger
from utils.translation import t

logger = get_logger(__name__)


def _link(ctx: PageContext, label: str, route: str, key: str):
    if st.button(label, key=key, type="secondary"):
        ctx.navigator.push(route)


def login_page(ctx: PageContext):
    st.title("🔐 登录")

    if ctx.auth.user and ctx.auth.user.is_active:
        st.info(f"已登录为 {ctx.auth.user.username}")
        if st.button("进入用户面板", type="primary"):
            ctx.navigator.push(ctx.config.auth.default_user_route)
        return

    with st.form("login_form"):
        email = st.text_input("📧 邮箱", placeholder="your@email.com")
        password = st.text_input("🔒 密码", type="password")
        submitted = st.form_submit_button("登录", type="primary", use_container_width=True)

    if submitted:
        errors = validate_login(email, password)
        if errors:
            render_form_errors(errors)
        else:
            log_user_interaction(logger, "login_submit")
            try:
                with st.spinner(t("messages.info.processing")):
                    response = ctx.auth.login(email.strip(), password)
                # Only reached for inactive accounts; active ones were redirected
                if not response.user.is_active:
                    st.warning(t("messages.error.accountInactive"))
            except ApiError as e:
                ctx.error_tracker.track_error(e, "login")
                render_form_errors(map_login_error(e))

    col1, col2 = st.columns(2)
    with col1:
        _link(ctx, "没有账户？立即注册", "/auth/register", "to_register")
    with col2:
        _link(ctx, "忘记密码？", "/auth/forgot-password", "to_forgot")


def register_page(ctx: PageContext):
    st.title("📝 创建新账户")

    if ctx.state.get("register_success"):
        st.success(t("messages.success.register"))
        st.info(t("messages.info.registerRedirect"))
        if st.button("前往登录", type="primary"):
            ctx.state.pop("register_success", None)
            ctx.navigator.push(ctx.config.auth.login_route)
        return

    with st.form("register_form"):
        username = st.text_input("👤 用户名")
        email = st.text_input("📧 邮箱", placeholder="your@email.com")
        password = st.text_input("🔒 密码", type="password")
        confirm_password = st.text_input("🔒 确认密码", type="password")
        submitted = st.form_submit_button("注册", type="primary", use_container_width=True)

    if submitted:
        errors = validate_registration(username, email, password, confirm_password)
        if errors:
            render_form_errors(errors)
        else:
            log_user_interaction(logger, "register_submit")
            try:
                with st.spinner(t("messages.info.processing")):
                    ctx.auth_api.register(username.strip(), email.strip(), password)
                ctx.state["register_success"] = True
                st.rerun()
            except ApiError as e:
                ctx.error_tracker.track_error(e, "register")
                render_form_errors(map_registration_error(e))

    _link(ctx, "已有账户？去登录", ctx.config.auth.login_route, "to_login")


def forgot_password_page(ctx: PageContext):
    st.title("❓ 找回密码")
    st.caption("输入注册邮箱，我们会发送重置密码链接")

    with st.form("forgot_password_form"):
        email = st.text_input("📧 邮箱", placeholder="your@email.com")
        submitted = st.form_submit_button("发送重置链接", type="primary", use_container_width=True)

    if submitted:
        errors = validate_email_request(email)
        if errors:
            render_form_errors(errors)
        else:
            try:
                with st.spinner(t("messages.info.processing")):
                    ctx.auth_api.forgot_password(email.strip(), ctx.config.ui.public_url)
                st.success(t("messages.success.resetLinkSent"))
            except ApiError as e:
                ctx.error_tracker.track_error(e, "forgot_password")
                st.error(t("messages.error.general"))

    _link(ctx, "返回登录", ctx.config.auth.login_route, "to_login")


def reset_password_page(ctx: PageContext):
    st.title("🔑 重置密码")

    token = ctx.query_params.get("token")
    if not token:
        st.error(t("messages.error.invalidResetLink"))

    if ctx.state.get("reset_success"):
        st.success(t("messages.success.passwordReset"))
        if st.button("前往登录", type="primary"):
            ctx.state.pop("reset_success", None)
            ctx.navigator.push(ctx.config.auth.login_route)
        return

    with st.form("reset_password_form"):
        new_password = st.text_input("🔒 新密码", type="password", disabled=not token)
        confirm_password = st.text_input("🔒 确认密码", type="password", disabled=not token)
        submitted = st.form_submit_button("重置密码", type="primary", disabled=not token, use_container_width=True)

    if submitted:
        errors = validate_password_reset(token, new_password, confirm_password)
        if errors:
            render_form_errors(errors)
        else:
            try:
                with st.spinner(t("messages.info.processing")):
                    ctx.auth_api.reset_password(token, new_password)
                ctx.state["reset_success"] = True
                st.rerun()
            except ApiError as e:
                ctx.error_tracker.track_error(e, "reset_password")
                render_form_errors({GENERAL: t("messages.error.invalidResetLink")})

    _link(ctx, "返回登录", ctx.config.auth.login_route, "to_login")


def verify_email_page(ctx: PageContext):
    st.title("📧 邮箱验证")

    token = ctx.query_params.get("token")
    if not token:
        st.error(t("messages.error.invalidVerifyLink"))
        return

    # Verify once per token; reruns reuse the outcome until a retry drops it
    outcomes = ctx.page_state("verify_email_outcomes", dict)
    if token not in outcomes:
        try:
            with st.spinner(t("messages.info.processing")):
                ctx.auth_api.verify_email(token)
            outcomes[token] = True
        except ApiError as e:
            ctx.error_tracker.track_error(e, "verify_email")
            outcomes[token] = False

        if outcomes[token] and ctx.auth.user:
            try:
                ctx.auth.refresh_user()
            except ApiError as e:
                ctx.error_tracker.track_error(e, "verify_email_refresh")

    if outcomes[token]:
        st.success(t("messages.success.emailVerified"))
    else:
        st.error(t("messages.error.verifyFailed"))
        st.button(t("actions.retry"), key="verify_retry", on_click=outcomes.pop, args=(token, None))

    _link(ctx, "返回登录", ctx.config.auth.login_route, "to_login")
