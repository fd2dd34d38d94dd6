# finance_tracker/client/__init__.py
# Client library for the finance tracker API

from ..config import API_URL
from .auth_state import AuthError, AuthState
from .endpoints import FinanceTrackerApi
from .gateway import ApiClient, BearerTokenAuth
from .storage import FileTokenStorage, MemoryTokenStorage, TokenStorage, STORAGE_KEY


def build_client(storage: TokenStorage, base_url: str = API_URL, on_unauthorized=None) -> FinanceTrackerApi:
    """Wire one gateway and one auth state together at app start-up.

    A forced logout from the gateway also clears the in-memory auth state
    before ``on_unauthorized`` runs.
    """
    auth_state = None

    def handle_unauthorized():
        auth_state.sign_out()
        if on_unauthorized is not None:
            on_unauthorized()

    gateway = ApiClient(storage, base_url=base_url, on_unauthorized=handle_unauthorized)
    auth_state = AuthState(gateway, storage)
    return FinanceTrackerApi(gateway, auth_state)


__all__ = [
    "ApiClient", "AuthError", "AuthState", "BearerTokenAuth", "FileTokenStorage",
    "FinanceTrackerApi", "MemoryTokenStorage", "STORAGE_KEY", "TokenStorage", "build_client",
]
