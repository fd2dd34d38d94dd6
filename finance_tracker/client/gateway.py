# finance_tracker/client/gateway.py
# Shared HTTP client with bearer-token and forced-logout interceptors

from typing import Any, Callable, Optional
import logging

import requests
from requests.auth import AuthBase

from ..config import API_URL, API_TIMEOUT_SECONDS
from .storage import TokenStorage

logger = logging.getLogger(__name__)


class BearerTokenAuth(AuthBase):
    """Request interceptor: attach the stored token, if any, to every request."""

    def __init__(self, storage: TokenStorage):
        self.storage = storage

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        try:
            token = self.storage.get()
        except Exception as e:
            logger.warning(f"Failed to read auth token from storage: {e}")
            token = None

        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        return request


class ApiClient:
    """One HTTP session per app, built on first use and reused afterwards.

    ``on_unauthorized`` is the caller's "go to the login screen" callback. It
    runs when a 401 arrives while a token is stored, after that token has
    been cleared. A 401 with nothing stored (a failed login, say) is left
    for the caller to handle.
    """

    def __init__(self, storage: TokenStorage, base_url: str = API_URL,
                 on_unauthorized: Optional[Callable[[], None]] = None,
                 timeout: float = API_TIMEOUT_SECONDS):
        self.storage = storage
        self.base_url = base_url.rstrip("/")
        self.on_unauthorized = on_unauthorized
        self.timeout = timeout
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            session = requests.Session()
            session.headers.update({
                "Content-Type": "application/json",
                "Accept": "application/json",
            })
            session.auth = BearerTokenAuth(self.storage)
            session.hooks["response"].append(self._handle_response)
            self._session = session
        return self._session

    def _handle_response(self, response: requests.Response, *args, **kwargs) -> requests.Response:
        """Response interceptor."""
        if response.status_code == 401:
            try:
                stored_token = self.storage.get()
                if stored_token:
                    self.storage.delete()
                    logger.warning("Token invalidated, redirecting to login")
                    if self.on_unauthorized is not None:
                        self.on_unauthorized()
            except Exception as e:
                logger.error(f"Failed to clear auth token: {e}")

        elif response.status_code == 403:
            logger.error("Forbidden: you do not have access to this resource")

        elif response.status_code >= 500:
            logger.error(f"Server error {response.status_code}: something went wrong on the backend")

        return response

    def request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        """Send a request; any 4xx/5xx is raised as ``requests.HTTPError``."""
        kwargs.setdefault("timeout", self.timeout)
        response = self.session.request(method, f"{self.base_url}/{path.lstrip('/')}", **kwargs)
        response.raise_for_status()
        return response

    def get(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
