"""
Client-side form checks and mapping of backend rejections to form fields.

Validators return a dict of field -> message; an empty dict means the form
may be submitted.
"""

import re
from typing import Dict, Optional

from config.app_config import get_config
from services.api_service.errors import ApiError, NetworkError, user_message
from utils.translation import t

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

GENERAL = "general"

FieldErrors = Dict[str, str]


def _required(value: Optional[str], field_key: str) -> Optional[str]:
    if not value or not str(value).strip():
        return t("form.validation.required", field=t(f"form.fields.{field_key}"))
    return None


def _min_length() -> int:
    return get_config().auth.password_min_length


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.search(email or ""))


def _check_email(errors: FieldErrors, email: str, field: str = "email"):
    missing = _required(email, "email")
    if missing:
        errors[field] = missing
    elif not is_valid_email(email):
        errors[field] = t("form.validation.email")


def _check_new_password(errors: FieldErrors, password: str, confirm: str, field: str, confirm_field: str, field_key: str):
    missing = _required(password, field_key)
    if missing:
        errors[field] = missing
    elif len(password) < _min_length():
        errors[field] = t("messages.error.passwordTooShort", min=_min_length())

    if password != confirm:
        errors[confirm_field] = t("messages.error.passwordMismatch")


def validate_login(email: str, password: str) -> FieldErrors:
    errors: FieldErrors = {}
    _check_email(errors, email)
    missing = _required(password, "password")
    if missing:
        errors["password"] = missing
    return errors


def validate_registration(username: str, email: str, password: str, confirm_password: str) -> FieldErrors:
    errors: FieldErrors = {}
    missing = _required(username, "username")
    if missing:
        errors["username"] = missing
    _check_email(errors, email)
    _check_new_password(errors, password, confirm_password, "password", "confirm_password", "password")
    return errors


def validate_password_change(old_password: str, new_password: str, confirm_password: str) -> FieldErrors:
    errors: FieldErrors = {}
    missing = _required(old_password, "oldPassword")
    if missing:
        errors["old_password"] = missing
    _check_new_password(errors, new_password, confirm_password, "new_password", "confirm_password", "newPassword")
    return errors


def validate_password_reset(token: Optional[str], new_password: str, confirm_password: str) -> FieldErrors:
    if not token:
        return {GENERAL: t("messages.error.invalidResetLink")}
    errors: FieldErrors = {}
    _check_new_password(errors, new_password, confirm_password, "new_password", "confirm_password", "newPassword")
    return errors


def validate_email_request(email: str) -> FieldErrors:
    errors: FieldErrors = {}
    _check_email(errors, email)
    return errors


def validate_profile(username: str) -> FieldErrors:
    errors: FieldErrors = {}
    missing = _required(username, "username")
    if missing:
        errors["username"] = missing
    return errors


def _general(error: Exception) -> FieldErrors:
    if isinstance(error, NetworkError) or (isinstance(error, ApiError) and error.status and error.status >= 500):
        return {GENERAL: user_message(error)}
    return {GENERAL: t("messages.error.general")}


def map_registration_error(error: Exception) -> FieldErrors:
    if isinstance(error, ApiError) and error.mentions("already registered"):
        return {"email": t("messages.error.emailInUse")}
    if isinstance(error, ApiError) and error.mentions("username already exists"):
        return {"username": t("messages.error.usernameInUse")}
    return _general(error)


def map_password_change_error(error: Exception) -> FieldErrors:
    if isinstance(error, ApiError) and error.mentions("incorrect password"):
        return {"old_password": t("messages.error.incorrectPassword")}
    return _general(error)


def map_login_error(error: Exception) -> FieldErrors:
    if isinstance(error, ApiError) and error.status in (400, 401):
        return {GENERAL: t("messages.error.login")}
    return _general(error)
