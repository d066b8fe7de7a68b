"""Form validation performed before any network call."""

import re
from typing import Dict

from .exceptions import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_RE = re.compile(r"^[A-Za-z0-9_.\-]{3,30}$")
MIN_PASSWORD_LENGTH = 8


def validate_email(email: str) -> str:
    email = (email or "").strip()
    if not email:
        raise ValidationError("Email is required", field="email")
    if not EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address", field="email")
    return email


def validate_password(password: str, for_signup: bool = True) -> str:
    if not password:
        raise ValidationError("Password is required", field="password")
    if for_signup and len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            field="password",
        )
    return password


def validate_username(username: str) -> str:
    username = (username or "").strip()
    if not username:
        raise ValidationError("Username is required", field="username")
    if not USERNAME_RE.match(username):
        raise ValidationError(
            "Username must be 3-30 characters: letters, digits, '_', '.' or '-'",
            field="username",
        )
    return username


def validate_project_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Project name is required", field="project_name")
    return name


def validate_person_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Person name is required", field="person_name")
    return name


def _collect(checks) -> Dict[str, str]:
    errors = {}
    for check, *args in checks:
        try:
            check(*args)
        except ValidationError as e:
            errors[e.field or "general"] = e.message
    return errors


def validate_signup(username: str, email: str, password: str, confirm_password: str = None) -> Dict[str, str]:
    """Field -> message for every invalid signup field (empty when valid)."""
    errors = _collect([
        (validate_username, username),
        (validate_email, email),
        (validate_password, password, True),
    ])
    if confirm_password is not None and "password" not in errors and password != confirm_password:
        errors["confirm_password"] = "Passwords do not match"
    return errors


def validate_login(email: str, password: str) -> Dict[str, str]:
    """Field -> message for every invalid login field (empty when valid)."""
    return _collect([
        (validate_email, email),
        (validate_password, password, False),
    ])
