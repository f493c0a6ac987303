"""Sign-in and sign-out."""

import re
from typing import Dict, Optional

from catalog_admin.config import FALLBACK_MESSAGES
from catalog_admin.errors import AdminClientError, ApiResponseError, ValidationError, describe, user_message
from catalog_admin.http_client import ApiClient
from catalog_admin.logging_config import get_logger, log_admin_event
from catalog_admin.models import User
from catalog_admin.session import SessionStore

__all__ = [
    "LOGIN_ENDPOINT",
    "validate_credentials",
    "login",
    "logout",
    "SignInController",
]

logger = get_logger("auth")

LOGIN_ENDPOINT = "/login"

LOGIN_FALLBACK = FALLBACK_MESSAGES["login"]["create"]

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_credentials(email: str, password: str) -> Dict[str, str]:
    """Check the sign-in form fields.

    Returns:
        Mapping of field name to message; empty when the form is valid
    """
    errors: Dict[str, str] = {}
    email = (email or "").strip()
    if not email:
        errors["email"] = "Please enter your email"
    elif not _EMAIL_PATTERN.match(email):
        errors["email"] = "Please enter a valid email"
    if not password:
        errors["password"] = "Please enter your password"
    return errors


def login(client: ApiClient, store: SessionStore, email: str, password: str) -> User:
    """Authenticate and save the returned user into ``store``.

    Raises:
        ValidationError: If the credentials fail local checks
        ApiResponseError: If the backend rejects the login or returns no token
        TransportError: If the backend could not be reached
    """
    problems = validate_credentials(email, password)
    if problems:
        raise ValidationError(list(problems), "; ".join(problems.values()))

    data = client.post_auth(LOGIN_ENDPOINT, {"email": email.strip(), "password": password})
    if not isinstance(data, dict) or not data.get("access_token"):
        raise ApiResponseError(200, None, client.auth_url(LOGIN_ENDPOINT))

    user = User.from_login_response(data)
    store.save(user)
    log_admin_event("login", {"user_id": user.id, "username": user.username, "role": user.role})
    return user


def logout(store: SessionStore) -> None:
    """End the current session."""
    user = store.user
    store.clear()
    if user is not None:
        log_admin_event("logout", {"user_id": user.id, "username": user.username})


class SignInController:
    """Sign-in form state: loading flag, error and success notice."""

    def __init__(self, client: ApiClient, store: SessionStore, redirect_to: Optional[str] = None):
        self.client = client
        self.store = store
        self.redirect_to = redirect_to or "/"
        self.loading = False
        self.error: Optional[str] = None
        self.notice: Optional[str] = None
        self.field_errors: Dict[str, str] = {}

    def submit(self, email: str, password: str) -> Optional[User]:
        """Try to sign in; returns the user, or None with ``error`` set."""
        self.error = None
        self.notice = None
        self.field_errors = validate_credentials(email, password)
        if self.field_errors:
            self.error = "; ".join(self.field_errors.values())
            return None

        self.loading = True
        try:
            user = login(self.client, self.store, email, password)
        except AdminClientError as e:
            self.error = user_message(e, LOGIN_FALLBACK)
            log_admin_event("login_error", {"email": email, **describe(e)})
            return None
        finally:
            self.loading = False

        self.notice = "Successfully logged in. Redirecting...."
        return user
