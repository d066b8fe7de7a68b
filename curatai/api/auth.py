"""Authentication against the backend: signup, login, Google OAuth, logout.

Every public call returns an ``AuthResult``; HTTP and transport failures are
mapped to ``success=False`` and never raised to the caller.
"""

import base64
import json
import logging
import re
from typing import Any, Dict, Optional

from curatai.api.client import ApiClient, get_client
from curatai.core.exceptions import ApiError, ValidationError
from curatai.models import AuthResult, User
from curatai.storage import MemoryStorage, ACCESS_TOKEN_KEY, USER_KEY

logger = logging.getLogger(__name__)

DEFAULT_SIGNUP_MESSAGE = "A verification link has been sent to your email"
VERIFY_EMAIL_NOTICE = "Please verify your email to continue. Check your inbox for a verification link."
EMAIL_TAKEN_MESSAGE = "This email is already registered. Please use a different email or sign in."
EMAIL_UNKNOWN_MESSAGE = "This email is not registered. Please sign up or try a different email."

AUTH_HEADERS = {"Accept": "*/*"}


def decode_id_token(credential: str) -> Dict[str, Any]:
    """Read the claims of a Google identity token.

    The signature is not verified here; the backend receives the raw token
    and is responsible for verifying it.
    """
    parts = credential.split(".")
    if len(parts) != 3:
        raise ValidationError("Malformed Google credential", field="general")
    payload = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(payload.encode("ascii")))
    except (ValueError, UnicodeDecodeError) as e:
        raise ValidationError("Malformed Google credential", field="general") from e
    if not isinstance(claims, dict) or not claims.get("email") or not claims.get("sub"):
        raise ValidationError("Google credential is missing email or subject", field="general")
    return claims


def derive_username(name: str, sub: str) -> str:
    """Username for a Google account: squashed lowercase name plus subject suffix."""
    base = re.sub(r"\s+", "", name or "").lower() or "user"
    return f"{base}_{sub[-4:]}"


class AuthService:
    """Signup/login wrapper that persists the session into storage."""

    def __init__(self, client: Optional[ApiClient] = None, storage: Optional[MemoryStorage] = None):
        self.client = client or get_client()
        self.storage = storage if storage is not None else self.client.storage

    # Session
    def is_authenticated(self) -> bool:
        return bool(self.storage.get_item(ACCESS_TOKEN_KEY))

    def current_user(self) -> Optional[User]:
        """Cached user record, or None when absent or unreadable."""
        raw = self.storage.get_item(USER_KEY)
        if not raw:
            return None
        try:
            return User.from_dict(json.loads(raw))
        except (ValueError, TypeError, AttributeError) as e:
            logger.error(f"Invalid user object in storage: {e}")
            return None

    def logout(self) -> None:
        """Clear the persisted session wholesale."""
        self.storage.clear()
        logger.info("Logged out, session storage cleared")

    def _store_session(self, data: Dict[str, Any]) -> None:
        self.storage.set_item(ACCESS_TOKEN_KEY, data["access_token"])
        self.storage.set_item(USER_KEY, json.dumps(data["user"]))

    # Email/password
    def signup(
        self,
        username: str,
        email: str,
        password: Optional[str] = None,
        google_id: Optional[str] = None,
        id_token: Optional[str] = None,
    ) -> AuthResult:
        """Create an account. Google accounts pass ``google_id`` instead of a password."""
        payload: Dict[str, Any] = {"username": username, "email": email}
        if password is not None:
            payload["password"] = password
        if google_id is not None:
            payload["googleId"] = google_id
        if id_token is not None:
            payload["id_token"] = id_token

        try:
            data = self.client.post("/auth/signup", json=payload, auth=False, headers=AUTH_HEADERS)
        except ApiError as e:
            logger.error(f"Signup failed for {email}: {e.message}")
            return AuthResult(success=False, message=e.detail or "Signup failed")

        message = data.get("message") if isinstance(data, dict) else None
        logger.info(f"Signup succeeded for {email}")
        return AuthResult(success=True, data=data, message=message or DEFAULT_SIGNUP_MESSAGE)

    def login(self, email: str, password: str) -> AuthResult:
        """Log in with email and password; stores the session on success."""
        return self._login({"email": email, "password": password})

    def _login(self, payload: Dict[str, Any]) -> AuthResult:
        email = payload.get("email")
        try:
            data = self.client.post("/auth/login", json=payload, auth=False, headers=AUTH_HEADERS)
        except ApiError as e:
            logger.error(f"Login failed for {email}: {e.message}")
            return AuthResult(success=False, message=e.detail or "Login failed")

        if isinstance(data, dict) and data.get("access_token") and data.get("user"):
            self._store_session(data)
            logger.info(f"Login succeeded for {email}")
            return AuthResult(success=True, data=data)

        message = data.get("message") if isinstance(data, dict) else None
        logger.warning(f"Login response for {email} carried no session: {message}")
        return AuthResult(success=False, message=message or "Login failed")

    # Google OAuth
    def google_signup(self, credential: Optional[str]) -> AuthResult:
        """Create an account linked to a Google identity token."""
        if not credential:
            return AuthResult(success=False, errors={"general": "No credential provided by Google"})
        try:
            claims = decode_id_token(credential)
        except ValidationError as e:
            return AuthResult(success=False, message=e.message, errors={"general": e.message})

        username = derive_username(claims.get("name", ""), claims["sub"])
        result = self.signup(username, claims["email"], google_id=claims["sub"], id_token=credential)
        if result.success:
            return result
        return _map_google_failure(result, default="Google Signup failed")

    def google_login(self, credential: Optional[str]) -> AuthResult:
        """Log in with a Google identity token linked at signup."""
        if not credential:
            return AuthResult(success=False, errors={"general": "No credential provided by Google"})
        try:
            claims = decode_id_token(credential)
        except ValidationError as e:
            return AuthResult(success=False, message=e.message, errors={"general": e.message})

        result = self._login({
            "email": claims["email"],
            "googleId": claims["sub"],
            "id_token": credential,
        })
        if result.success:
            return result
        return _map_google_failure(result, default="Google Login failed")


def _map_google_failure(result: AuthResult, default: str) -> AuthResult:
    """Route well-known backend messages to the right form field."""
    message = result.message or default
    if "Email already exists" in message:
        result.errors = {"email": EMAIL_TAKEN_MESSAGE}
    elif "Email not verified" in message:
        result.notice = VERIFY_EMAIL_NOTICE
    elif "Email not found" in message:
        result.errors = {"email": EMAIL_UNKNOWN_MESSAGE}
    else:
        result.errors = {"general": message}
    return result
