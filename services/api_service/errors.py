"""
Error types raised by the backend API client.
"""

from typing import Any, Optional

from utils.translation import t


class ApiError(Exception):
    """Backend answered with a non-2xx status"""

    def __init__(self, status: Optional[int], message: str, data: Any = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.data = data

    def __str__(self) -> str:
        return self.message

    def mentions(self, *fragments: str) -> bool:
        """Case-insensitive check of the server message"""
        lowered = self.message.lower()
        return any(fragment.lower() in lowered for fragment in fragments)


class UnauthorizedError(ApiError):
    """401 - the session token is missing, expired or revoked"""


class NotFoundError(ApiError):
    """404 - no record with the requested id"""


class NetworkError(ApiError):
    """The backend could not be reached"""

    def __init__(self, message: str):
        super().__init__(None, message)


class ApiTimeoutError(NetworkError):
    """The request exceeded the configured timeout"""


def error_for_status(status: int, message: str, data: Any = None) -> ApiError:
    """Pick the ApiError subclass matching an HTTP status"""
    if status == 401:
        return UnauthorizedError(status, message, data)
    if status == 404:
        return NotFoundError(status, message, data)
    return ApiError(status, message, data)


def user_message(error: Exception) -> str:
    """Reduce any error to the localized text shown to the user"""
    if isinstance(error, ApiTimeoutError):
        return t("messages.error.timeout")
    if isinstance(error, NetworkError):
        return t("messages.error.networkError")
    if isinstance(error, UnauthorizedError):
        return t("messages.info.sessionExpired")
    if isinstance(error, NotFoundError):
        return t("messages.error.notFound")
    if isinstance(error, ApiError) and error.status == 403:
        return t("messages.error.forbidden")
    if isinstance(error, ApiError) and error.status is not None and error.status >= 500:
        return t("messages.error.serverError")
    return t("messages.error.general")
