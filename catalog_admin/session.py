"""Persistent session store for the signed-in user."""

import json
import os
from pathlib import Path
from typing import Optional, Union

from catalog_admin.config import SESSION_FILE
from catalog_admin.logging_config import get_logger
from catalog_admin.models import User

__all__ = ["SessionStore"]

logger = get_logger("session")


class SessionStore:
    """Holds the current user and mirrors it to a JSON file.

    The store is loaded once on construction and cleared explicitly on
    logout. Pass it to whatever needs the token instead of reading the
    file directly.

    Usage:
        store = SessionStore()
        if store.is_authenticated:
            print(store.user.username)
        store.clear()
    """

    def __init__(self, path: Optional[Union[Path, str]] = None, persist: bool = True):
        self.path = Path(path) if path is not None else SESSION_FILE
        self.persist = persist
        self._user: Optional[User] = None
        if persist:
            self._user = self._load()

    def _load(self) -> Optional[User]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None
        if not isinstance(data, dict) or not data.get("token"):
            return None
        return User.from_dict(data)

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def token(self) -> Optional[str]:
        return self._user.token if self._user else None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def save(self, user: User) -> None:
        """Replace the current session and write it to disk."""
        self._user = user
        if not self.persist:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        tmp_path.write_text(json.dumps(user.to_dict()), encoding="utf-8")
        os.chmod(tmp_path, 0o600)
        tmp_path.replace(self.path)
        logger.debug(f"Session saved for {user.username}")

    def clear(self) -> None:
        """Drop the current session (logout)."""
        self._user = None
        if self.persist:
            self.path.unlink(missing_ok=True)
