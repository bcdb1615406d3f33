"""
User and session data models mirrored from the backend API.
"""

from dataclasses import dataclass, field, asdict, fields
from typing import Any, Dict, List, Optional


def _known_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only the keys a dataclass declares; the backend may send more"""
    names = {f.name for f in fields(cls)}
    return {key: value for key, value in data.items() if key in names}


@dataclass
class User:
    """User data model (cached mirror of the backend record)"""
    id: int
    email: str
    username: str
    is_active: bool = True
    is_verified: bool = False
    is_admin: bool = False
    avatar: Optional[str] = None
    bio: Optional[str] = None
    last_login_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(**_known_fields(cls, data))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class LoginResponse:
    """Token grant returned by POST /api/auth/login"""
    access_token: str
    user: User
    token_type: str = "bearer"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LoginResponse':
        return cls(
            access_token=data["access_token"],
            token_type=data.get("token_type", "bearer"),
            user=User.from_dict(data["user"])
        )


@dataclass
class LoginHistory:
    """One login record"""
    id: int
    user_id: int
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    login_time: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LoginHistory':
        return cls(**_known_fields(cls, data))


@dataclass
class ActivityHistory:
    """One activity record"""
    id: int
    user_id: int
    action: str = ""
    description: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ActivityHistory':
        return cls(**_known_fields(cls, data))


@dataclass
class UserListPage:
    """One page of GET /api/admin/users"""
    users: List[User] = field(default_factory=list)
    total: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserListPage':
        return cls(
            users=[User.from_dict(item) for item in data.get("users") or []],
            total=int(data.get("total") or 0)
        )


@dataclass
class UserStats:
    """Counters shown on the admin dashboard"""
    total_users: int = 0
    active_users: int = 0
    verified_users: int = 0
    admin_users: int = 0


@dataclass
class AuthState:
    """Two-field session state: who is logged in, and whether that is still being determined"""
    user: Optional[User] = None
    is_loading: bool = True
