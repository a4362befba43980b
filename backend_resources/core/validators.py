"""Input validation for user creation payloads."""
from __future__ import annotations
import re
from typing import Any, Dict

from .models import UserCreateRequest

USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 30
NAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 4
EMAIL_MAX_LENGTH = 254

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# JSON field name -> UserCreateRequest attribute
FIELDS = {
    "username": "username",
    "email": "email",
    "firstName": "first_name",
    "lastName": "last_name",
    "password": "password",
}


class ValidationError(Exception):
    """Request body failed validation.

    Attributes:
        errors: Mapping of JSON field name to error message
    """

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        detail = "; ".join(f"{name}: {message}" for name, message in self.errors.items())
        super().__init__(f"Validation failed: {detail}")


def validate_username(username: str) -> str | None:
    """Return an error message, or None when the username is valid."""
    if not username.strip():
        return "must not be blank"
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return f"must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
    return None


def validate_email(email: str) -> str | None:
    if not email.strip():
        return "must not be blank"
    if len(email) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(email):
        return "must be a well-formed email address"
    return None


def validate_name(name: str) -> str | None:
    if len(name) > NAME_MAX_LENGTH:
        return f"must not exceed {NAME_MAX_LENGTH} characters"
    return None


def validate_password(password: str) -> str | None:
    if not password.strip():
        return "must not be blank"
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"must be at least {PASSWORD_MIN_LENGTH} characters"
    return None


_CHECKS = {
    "username": validate_username,
    "email": validate_email,
    "firstName": validate_name,
    "lastName": validate_name,
    "password": validate_password,
}


def validate_user_request(payload: Any) -> UserCreateRequest:
    """Validate a JSON body and build the UserCreateRequest.

    Every field is checked so the caller gets all problems at once.

    Args:
        payload: Decoded JSON body

    Returns:
        The validated request

    Raises:
        ValidationError: If the body is not an object or any field is invalid
    """
    if not isinstance(payload, dict):
        raise ValidationError({"body": "must be a JSON object"})

    errors: Dict[str, str] = {}
    values: Dict[str, str] = {}
    for json_name, attribute in FIELDS.items():
        raw = payload.get(json_name)
        if raw is None:
            raw = ""
        if not isinstance(raw, str):
            errors[json_name] = "must be a string"
            continue
        value = raw if json_name == "password" else raw.strip()
        message = _CHECKS[json_name](value)
        if message:
            errors[json_name] = message
            continue
        values[attribute] = value

    if errors:
        raise ValidationError(errors)

    return UserCreateRequest(**values)
