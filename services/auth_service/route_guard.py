"""
Page-level access control layered on the auth manager.

This only decides what to render and where to redirect; the backend still
authorises every API call.
"""

from enum import Enum
from functools import wraps
from typing import Any, Callable, Optional

import streamlit as st

from config.app_config import get_config
from services.auth_service.auth_manager import AuthManager
from services.auth_service.models import AuthState
from utils.translation import t


class AccessDecision(Enum):
    """Outcome of a guard check"""
    LOADING = "loading"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_DASHBOARD = "redirect_dashboard"
    ALLOW = "allow"


def evaluate_access(state: AuthState, admin_only: bool = False) -> AccessDecision:
    if state.is_loading:
        return AccessDecision.LOADING
    if state.user is None:
        return AccessDecision.REDIRECT_LOGIN
    if admin_only and state.user.is_admin is not True:
        return AccessDecision.REDIRECT_DASHBOARD
    return AccessDecision.ALLOW


class ProtectedRoute:
    """Wraps a page function with the login/admin checks"""

    def __init__(self, auth: AuthManager, navigator):
        self.auth = auth
        self.navigator = navigator
        self.config = get_config()

    def render(self, page_func: Callable[[], Any], admin_only: bool = False) -> Optional[Any]:
        """
        Run `page_func` if the viewer may see it

        Returns None (renders nothing) while redirecting.
        """
        decision = evaluate_access(self.auth.state, admin_only)

        if decision is AccessDecision.LOADING:
            st.info(t("messages.info.loading"))
            return None
        if decision is AccessDecision.REDIRECT_LOGIN:
            self.navigator.push(self.config.auth.login_route)
            return None
        if decision is AccessDecision.REDIRECT_DASHBOARD:
            self.navigator.push(self.config.auth.default_user_route)
            return None

        return page_func()


def require_auth(admin_only: bool = False):
    """
    Decorator for page functions taking a PageContext as first argument

    Usage:
        @require_auth(admin_only=True)
        def admin_page(ctx):
            ...
    """
    def decorator(page_func):
        @wraps(page_func)
        def wrapper(ctx, *args, **kwargs):
            guard = ProtectedRoute(ctx.auth, ctx.navigator)
            return guard.render(lambda: page_func(ctx, *args, **kwargs), admin_only=admin_only)
        wrapper.admin_only = admin_only
        wrapper.protected = True
        return wrapper
    return decorator
