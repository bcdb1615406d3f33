"""
Endpoints for the logged-in user (/api/users/me) and the admin user console (/api/admin/users).
"""

from typing import Any, Dict, List, Optional

from services.api_service.client import ApiClient
from services.auth_service.models import (
    ActivityHistory,
    LoginHistory,
    User,
    UserListPage,
    UserStats,
)


def _history_page(data: Any, cls) -> List[Any]:
    return [cls.from_dict(item) for item in data or []]


class UsersApi:
    """Self-service endpoints"""

    def __init__(self, client: ApiClient):
        self.client = client

    def fetch_current_user(self) -> User:
        return User.from_dict(self.client.get("/api/users/me"))

    def update_user(self, username: Optional[str] = None, avatar: Optional[str] = None, bio: Optional[str] = None) -> User:
        payload = {
            key: value
            for key, value in {"username": username, "avatar": avatar, "bio": bio}.items()
            if value is not None
        }
        return User.from_dict(self.client.put("/api/users/me", payload))

    def change_password(self, old_password: str, new_password: str) -> None:
        self.client.put(
            "/api/users/me/password",
            {"old_password": old_password, "new_password": new_password}
        )

    def get_login_history(self, skip: int = 0, limit: int = 10) -> List[LoginHistory]:
        data = self.client.get("/api/users/me/login-history", {"skip": skip, "limit": limit})
        return _history_page(data, LoginHistory)

    def get_activity_history(self, skip: int = 0, limit: int = 10) -> List[ActivityHistory]:
        data = self.client.get("/api/users/me/activity-history", {"skip": skip, "limit": limit})
        return _history_page(data, ActivityHistory)


class AdminUsersApi:
    """Admin-only endpoints; the backend rejects non-admin tokens"""

    def __init__(self, client: ApiClient):
        self.client = client

    def get_user_list(self, params: Optional[Dict[str, Any]] = None) -> UserListPage:
        return UserListPage.from_dict(self.client.get("/api/admin/users", params or {}))

    def get_user_detail(self, user_id: int) -> User:
        return User.from_dict(self.client.get(f"/api/admin/users/{user_id}"))

    def update_user(self, user_id: int, data: Dict[str, Any]) -> User:
        return User.from_dict(self.client.put(f"/api/admin/users/{user_id}", data))

    def update_user_status(self, user_id: int, is_active: bool) -> User:
        return User.from_dict(
            self.client.put(f"/api/admin/users/{user_id}/status", {"is_active": is_active})
        )

    def update_user_role(self, user_id: int, is_admin: bool) -> User:
        return User.from_dict(
            self.client.put(f"/api/admin/users/{user_id}/role", {"is_admin": is_admin})
        )

    def get_user_login_history(self, user_id: int, skip: int = 0, limit: int = 10) -> List[LoginHistory]:
        data = self.client.get(f"/api/admin/users/{user_id}/login-history", {"skip": skip, "limit": limit})
        return _history_page(data, LoginHistory)

    def get_user_activity_history(self, user_id: int, skip: int = 0, limit: int = 10) -> List[ActivityHistory]:
        data = self.client.get(f"/api/admin/users/{user_id}/activity-history", {"skip": skip, "limit": limit})
        return _history_page(data, ActivityHistory)

    def get_user_stats(self) -> UserStats:
        """Four one-row list queries; only `total` is used"""
        return UserStats(
            total_users=self.get_user_list({"limit": 1}).total,
            active_users=self.get_user_list({"is_active": True, "limit": 1}).total,
            verified_users=self.get_user_list({"is_verified": True, "limit": 1}).total,
            admin_users=self.get_user_list({"is_admin": True, "limit": 1}).total,
        )
