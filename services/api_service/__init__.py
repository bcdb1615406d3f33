"""
Backend API access - HTTP client and error types.
"""

from .client import ApiClient
from .errors import (
    ApiError,
    UnauthorizedError,
    NotFoundError,
    NetworkError,
    ApiTimeoutError,
    user_message
)

__all__ = [
    'ApiClient',
    'ApiError',
    'UnauthorizedError',
    'NotFoundError',
    'NetworkError',
    'ApiTimeoutError',
    'user_message'
]
