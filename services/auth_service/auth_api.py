"""
Unauthenticated auth endpoints: register, login, password reset, email verification.
"""

from typing import Optional

from services.api_service.client import ApiClient
from services.auth_service.models import LoginResponse, User
from utils.logging_config import get_logger

logger = get_logger(__name__)


class AuthApi:
    """Wrapper for /api/auth/*"""

    def __init__(self, client: ApiClient):
        self.client = client

    def register(self, username: str, email: str, password: str) -> User:
        data = self.client.post(
            "/api/auth/register",
            {"username": username, "email": email, "password": password},
            with_auth=False
        )
        return User.from_dict(data)

    def login(self, email: str, password: str) -> LoginResponse:
        """
        Exchange credentials for a bearer token (OAuth2 password form).

        The token and user are written to the token cache on success.
        """
        data = self.client.request(
            "/api/auth/login",
            "POST",
            form={"username": email, "password": password, "grant_type": "password"},
            with_auth=False
        )
        response = LoginResponse.from_dict(data)
        self.client.token_cache.set_token(response.access_token)
        self.client.token_cache.set_current_user(response.user)
        return response

    def forgot_password(self, email: str, frontend_url: Optional[str] = None) -> None:
        payload = {"email": email}
        if frontend_url:
            payload["frontend_url"] = frontend_url
        self.client.post("/api/auth/forgot-password", payload, with_auth=False)

    def reset_password(self, token: str, new_password: str) -> None:
        self.client.post(
            "/api/auth/reset-password",
            {"token": token, "new_password": new_password},
            with_auth=False
        )

    def verify_email(self, token: str) -> None:
        self.client.post("/api/auth/verify-email", {"token": token}, with_auth=False)

    def resend_verification(self, email: str, frontend_url: Optional[str] = None) -> None:
        payload = {"email": email}
        if frontend_url:
            payload["frontend_url"] = frontend_url
        self.client.post("/api/auth/resend-verification", payload, with_auth=False)
