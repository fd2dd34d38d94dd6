# finance_tracker/client/auth_state.py
# In-memory signed-in state kept in step with the stored token

from typing import Any, Dict, Optional
import logging
import threading

import requests

from .gateway import ApiClient
from .storage import TokenStorage

logger = logging.getLogger(__name__)

User = Optional[Dict[str, Any]]


class AuthError(Exception):
    """The server accepted a token but did not return a usable profile."""


class AuthState:
    """Holds ``user``, ``token`` and ``loading`` for the UI to gate screens on.

    ``restore``, ``sign_in`` and ``sign_out`` share one lock so overlapping
    calls cannot leave memory and storage disagreeing about the token. The
    lock is re-entrant: a 401 during a profile fetch may call ``sign_out``
    from the gateway hook while ``restore`` or ``sign_in`` still holds it.
    """

    def __init__(self, api: ApiClient, storage: TokenStorage):
        self.api = api
        self.storage = storage
        self.user: User = None
        self.token: Optional[str] = None
        self.loading = True
        self._lock = threading.RLock()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    def _fetch_profile(self) -> Dict[str, Any]:
        profile = self.api.get("/user").json()
        if not profile or not profile.get("id"):
            raise AuthError("Login did not return a valid user profile.")
        return {"id": profile["id"], "email": profile.get("email"), "name": profile.get("name")}

    def _reset(self) -> None:
        self.storage.delete()
        self.token = None
        self.user = None

    def restore(self) -> None:
        """Start-up: resume the stored session if the server still honours it."""
        with self._lock:
            try:
                stored_token = self.storage.get()
                if stored_token:
                    self.token = stored_token
                    try:
                        self.user = self._fetch_profile()
                    except (requests.RequestException, AuthError, ValueError) as e:
                        logger.warning(f"No user found for stored token, signing out: {e}")
                        self._reset()
            finally:
                self.loading = False

    def sign_in(self, token: str, user: User = None) -> None:
        """Persist ``token``; fetch the profile unless ``user`` already has an id."""
        with self._lock:
            self.storage.set(token)
            self.token = token

            if user and user.get("id"):
                self.user = user
                return

            try:
                self.user = self._fetch_profile()
            except Exception:
                logger.error("Fetching the profile after sign-in failed, rolling back token")
                self._reset()
                raise

    def sign_out(self) -> None:
        """Forget the token and user, both stored and in memory."""
        with self._lock:
            self._reset()
