"""
Thin HTTP wrapper around the backend REST API.
"""

import time
from typing import Any, Callable, Dict, Optional

import requests

from services.api_service.errors import (
    ApiError,
    ApiTimeoutError,
    NetworkError,
    UnauthorizedError,
    error_for_status,
)
from services.auth_service.session_store import TokenCache
from utils.logging_config import get_logger, log_api_call

logger = get_logger(__name__)


def _error_message(payload: Any, response: requests.Response) -> str:
    """Pull the human-readable message out of an error body"""
    fallback = f"HTTP error {response.status_code}: {response.reason}"
    if not isinstance(payload, dict):
        return fallback

    detail = payload.get("detail") or payload.get("message") or payload.get("error")
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list):
        # FastAPI validation errors
        parts = []
        for entry in detail:
            if isinstance(entry, dict):
                loc = entry.get("loc") or []
                if isinstance(loc, (list, tuple)):
                    loc = ".".join(str(part) for part in loc)
                msg = entry.get("msg")
                if msg:
                    parts.append(f"{loc}: {msg}" if loc else msg)
            else:
                parts.append(str(entry))
        if parts:
            return "; ".join(parts)
    return fallback


class ApiClient:
    """
    Sends requests to the backend with the cached bearer token attached.

    When `on_unauthorized` is given, a 401 on an authenticated call clears the
    token cache and calls it (a full-page navigation to the login route)
    before `UnauthorizedError` reaches the caller.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float,
        token_cache: TokenCache,
        session: Optional[requests.Session] = None,
        on_unauthorized: Optional[Callable[[], None]] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_cache = token_cache
        self.session = session or requests.Session()
        self.on_unauthorized = on_unauthorized

    def build_url(self, path: str) -> str:
        return f"{self.base_url}{path if path.startswith('/') else '/' + path}"

    def build_headers(self, headers: Optional[Dict[str, str]], with_auth: bool, json_body: bool = True) -> Dict[str, str]:
        request_headers: Dict[str, str] = {}
        if json_body:
            request_headers["Content-Type"] = "application/json"
        request_headers.update(headers or {})

        if with_auth:
            token = self.token_cache.get_token()
            if token:
                request_headers["Authorization"] = f"Bearer {token}"

        return request_headers

    def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        headers: Optional[Dict[str, str]] = None,
        with_auth: bool = True,
        params: Optional[Dict[str, Any]] = None,
        form: Optional[Dict[str, str]] = None
    ) -> Any:
        """
        Perform one request and return the decoded JSON body

        Args:
            path: Endpoint path, with or without leading slash
            method: HTTP verb
            body: JSON body, ignored for GET
            headers: Extra headers merged over the defaults
            with_auth: Attach the cached bearer token when one exists
            params: Query parameters; None and "" values are dropped
            form: Form-encoded body (replaces the JSON body)

        Raises:
            ApiError: non-2xx response (UnauthorizedError / NotFoundError for 401 / 404)
            NetworkError: connection failure
            ApiTimeoutError: no answer within the configured timeout
        """
        method = method.upper()
        url = self.build_url(path)
        request_headers = self.build_headers(headers, with_auth, json_body=form is None)

        kwargs: Dict[str, Any] = {"headers": request_headers, "timeout": self.timeout}
        if params:
            kwargs["params"] = {
                key: (str(value).lower() if isinstance(value, bool) else value)
                for key, value in params.items()
                if value is not None and value != ""
            }
        if form is not None:
            kwargs["data"] = form
        elif body is not None and method != "GET":
            kwargs["json"] = body

        start = time.monotonic()
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.Timeout as e:
            log_api_call(logger, method, path, None, time.monotonic() - start)
            raise ApiTimeoutError(f"Request timed out: {method} {path}") from e
        except requests.ConnectionError as e:
            log_api_call(logger, method, path, None, time.monotonic() - start)
            raise NetworkError(f"Could not reach backend: {method} {path}") from e

        log_api_call(logger, method, path, response.status_code, time.monotonic() - start)

        if response.status_code == 401 and with_auth and self.on_unauthorized is not None:
            self._invalidate_session(path)

        if not response.ok:
            raise self._to_error(response)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(response.status_code, f"Invalid JSON response from {path}") from e

    def _invalidate_session(self, path: str) -> None:
        logger.warning(f"Session rejected by backend on {path}, logging out")
        self.token_cache.clear_token()
        self.on_unauthorized()

    def _to_error(self, response: requests.Response) -> ApiError:
        try:
            payload = response.json()
        except ValueError:
            return error_for_status(
                response.status_code,
                f"HTTP error {response.status_code}: {response.reason}"
            )
        return error_for_status(response.status_code, _error_message(payload, response), payload)

    def get(self, path: str, params: Optional[Dict[str, Any]] = None, **kwargs) -> Any:
        return self.request(path, "GET", params=params, **kwargs)

    def post(self, path: str, body: Any = None, **kwargs) -> Any:
        return self.request(path, "POST", body=body, **kwargs)

    def put(self, path: str, body: Any = None, **kwargs) -> Any:
        return self.request(path, "PUT", body=body, **kwargs)


__all__ = ["ApiClient", "ApiError", "UnauthorizedError"]
