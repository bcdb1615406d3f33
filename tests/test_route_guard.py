"""
Tests for page access control
"""

from unittest.mock import Mock, patch

import pytest

from services.auth_service.models import AuthState, User
from services.auth_service.route_guard import AccessDecision, ProtectedRoute, evaluate_access, require_auth


def _user(**overrides):
    data = {"id": 1, "email": "alice@example.com", "username": "alice"}
    data.update(overrides)
    return User(**data)


class TestEvaluateAccess:
    """Pure decision table"""

    def test_loading(self):
        assert evaluate_access(AuthState(user=None, is_loading=True)) is AccessDecision.LOADING
        assert evaluate_access(AuthState(user=_user(), is_loading=True), admin_only=True) is AccessDecision.LOADING

    def test_anonymous(self):
        assert evaluate_access(AuthState(user=None, is_loading=False)) is AccessDecision.REDIRECT_LOGIN
        assert evaluate_access(AuthState(user=None, is_loading=False), admin_only=True) is AccessDecision.REDIRECT_LOGIN

    def test_non_admin_on_admin_page(self):
        state = AuthState(user=_user(is_admin=False), is_loading=False)
        assert evaluate_access(state, admin_only=True) is AccessDecision.REDIRECT_DASHBOARD

    def test_allowed(self):
        assert evaluate_access(AuthState(user=_user(), is_loading=False)) is AccessDecision.ALLOW
        admin = AuthState(user=_user(is_admin=True), is_loading=False)
        assert evaluate_access(admin, admin_only=True) is AccessDecision.ALLOW


class TestProtectedRoute:
    """Rendering and redirects"""

    def setup_method(self):
        self.st_patcher = patch("services.auth_service.route_guard.st", Mock())
        self.mock_st = self.st_patcher.start()

    def teardown_method(self):
        self.st_patcher.stop()

    def test_loading_renders_placeholder(self, ctx, navigator):
        page = Mock()

        assert ProtectedRoute(ctx.auth, navigator).render(page) is None

        page.assert_not_called()
        self.mock_st.info.assert_called_once()
        assert navigator.history == []

    def test_anonymous_redirects_to_login(self, ctx, navigator):
        ctx.auth.initialize()
        page = Mock()

        ProtectedRoute(ctx.auth, navigator).render(page)

        page.assert_not_called()
        assert navigator.routes == ["/auth/login"]

    def test_non_admin_redirects_to_dashboard(self, ctx, navigator):
        ctx.auth.state.is_loading = False
        ctx.auth.state.user = _user(is_admin=False)
        page = Mock()

        ProtectedRoute(ctx.auth, navigator).render(page, admin_only=True)

        page.assert_not_called()
        assert navigator.routes == ["/user/dashboard"]

    def test_allowed_page_runs(self, ctx, navigator):
        ctx.auth.state.is_loading = False
        ctx.auth.state.user = _user(is_admin=True)
        page = Mock(return_value="rendered")

        assert ProtectedRoute(ctx.auth, navigator).render(page, admin_only=True) == "rendered"
        assert navigator.history == []

    def test_logout_then_protected_page_redirects(self, ctx, navigator):
        ctx.auth.state.is_loading = False
        ctx.auth.state.user = _user()
        ctx.auth.logout()
        navigator.history.clear()

        ProtectedRoute(ctx.auth, navigator).render(Mock())

        assert navigator.routes == ["/auth/login"]


class TestRequireAuth:
    """Decorator form"""

    def setup_method(self):
        self.st_patcher = patch("services.auth_service.route_guard.st", Mock())
        self.st_patcher.start()

    def teardown_method(self):
        self.st_patcher.stop()

    def test_marks_page(self):
        @require_auth(admin_only=True)
        def page(ctx):
            return "admin"

        assert page.admin_only is True
        assert page.protected is True
        assert page.__name__ == "page"

    def test_passes_context_through(self, ctx):
        seen = []

        @require_auth()
        def page(page_ctx):
            seen.append(page_ctx)
            return "ok"

        ctx.auth.state.is_loading = False
        ctx.auth.state.user = _user()

        assert page(ctx) == "ok"
        assert seen == [ctx]

    def test_admin_page_blocks_regular_user(self, ctx, navigator):
        @require_auth(admin_only=True)
        def page(page_ctx):
            pytest.fail("admin page rendered for a regular user")

        ctx.auth.state.is_loading = False
        ctx.auth.state.user = _user()

        page(ctx)

        assert navigator.routes == ["/user/dashboard"]
