"""
Route table and sidebar of the console.
"""

import streamlit as st

from services.ui_service import admin_pages, auth_pages, notes_pages, user_pages
from services.ui_service.context import PageContext
from services.ui_service.router import Router
from utils.logging_config import get_logger, log_user_interaction
from utils.translation import t

logger = get_logger(__name__)

# (label, route) entries of the sidebar
USER_MENU = (
    ("🏠 用户面板", "/user/dashboard"),
    ("👤 个人资料", "/user/profile"),
    ("🔒 修改密码", "/user/change-password"),
    ("🛡️ 账户安全", "/user/account-security"),
    ("📒 小红书笔记", "/user/xhs-notes"),
)
ADMIN_MENU = (
    ("🛠️ 管理后台", "/admin"),
    ("👥 用户管理", "/admin/user-management"),
)


def home_page(ctx: PageContext):
    """'/' goes to the dashboard when logged in, to the login page otherwise"""
    if ctx.auth.user is not None:
        ctx.navigator.push(ctx.config.auth.default_user_route)
    else:
        ctx.navigator.push(ctx.config.auth.login_route)


def not_found_page(ctx: PageContext):
    st.title("404")
    st.error(t("messages.error.pageNotFound"))
    if st.button("返回首页"):
        ctx.navigator.push("/")


def build_router() -> Router:
    return (
        Router()
        .add("/", home_page, "首页")
        .add("/auth/login", auth_pages.login_page, "登录")
        .add("/auth/register", auth_pages.register_page, "注册")
        .add("/auth/forgot-password", auth_pages.forgot_password_page, "找回密码")
        .add("/auth/reset-password", auth_pages.reset_password_page, "重置密码")
        .add("/reset-password", auth_pages.reset_password_page, "重置密码")
        .add("/verify-email", auth_pages.verify_email_page, "邮箱验证")
        .add("/user/dashboard", user_pages.dashboard_page, "用户面板")
        .add("/user/profile", user_pages.profile_page, "个人资料")
        .add("/user/change-password", user_pages.change_password_page, "修改密码")
        .add("/user/account-security", user_pages.account_security_page, "账户安全")
        .add("/user/xhs-notes", notes_pages.notes_list_page, "小红书笔记")
        .add("/user/xhs-notes/{note_id}", notes_pages.note_detail_page, "笔记详情")
        .add("/admin", admin_pages.admin_dashboard_page, "管理后台")
        .add("/admin/user-management", admin_pages.user_management_page, "用户管理")
        .add("/admin/user-detail/{id}", admin_pages.user_detail_page, "用户详情")
    )


def render_sidebar(ctx: PageContext):
    user = ctx.auth.user
    with st.sidebar:
        st.markdown(f"### {ctx.config.ui.app_title}")
        if user is None:
            return

        st.caption(f"👤 {user.username} · {user.email}")
        menu = USER_MENU + (ADMIN_MENU if ctx.auth.is_admin() else ())
        current = ctx.navigator.current_path()
        for label, route in menu:
            if st.button(label, key=f"nav_{route}", use_container_width=True, disabled=current == route):
                ctx.navigator.push(route)

        st.divider()
        if st.button("🚪 退出登录", use_container_width=True):
            log_user_interaction(logger, "logout_click", user_id=user.id)
            ctx.auth.logout()


def dispatch(ctx: PageContext, router: Router):
    """Resolve the current path and render its page"""
    path = ctx.navigator.current_path()
    route, params = router.resolve(path)
    if route is None:
        logger.info(f"No route for {path}")
        not_found_page(ctx)
        return
    ctx.path_params = params
    return route.handler(ctx)
