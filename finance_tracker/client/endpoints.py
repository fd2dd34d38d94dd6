# finance_tracker/client/endpoints.py
# Typed-ish wrappers around the HTTP API for screens and scripts

from datetime import date
from typing import Any, Dict, Optional
import logging

import requests

from .auth_state import AuthState
from .gateway import ApiClient

logger = logging.getLogger(__name__)


def _clean(values: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = {}
    for key, value in values.items():
        if value is None:
            continue
        cleaned[key] = value.isoformat() if isinstance(value, date) else value
    return cleaned


class FinanceTrackerApi:
    """Calls used by the app's screens, all routed through one ``ApiClient``."""

    def __init__(self, client: ApiClient, auth_state: AuthState):
        self.client = client
        self.auth_state = auth_state

    # ===== AUTH =====

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self.client.post("/login", json={"email": email, "password": password}).json()
        self.auth_state.sign_in(data["token"], data.get("user"))
        return data

    def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = self.client.post(
            "/register", json={"name": name, "email": email, "password": password}
        ).json()
        self.auth_state.sign_in(data["token"], data.get("user"))
        return data

    def logout(self) -> None:
        """Revoke the token server-side, then sign out locally regardless."""
        try:
            self.client.post("/logout")
        except requests.RequestException as e:
            logger.warning(f"Server logout failed, clearing local session anyway: {e}")
        finally:
            self.auth_state.sign_out()

    def me(self) -> Dict[str, Any]:
        return self.client.get("/user").json()

    # ===== TRANSACTIONS =====

    def list_transactions(self, type: Optional[str] = None, category: Optional[str] = None,
                          date_from: Optional[date] = None, date_to: Optional[date] = None,
                          per_page: Optional[int] = None, page: Optional[int] = None,
                          sort: Optional[str] = None) -> Dict[str, Any]:
        params = _clean({
            "type": type, "category": category, "date_from": date_from, "date_to": date_to,
            "per_page": per_page, "page": page, "sort": sort,
        })
        return self.client.get("/transactions", params=params).json()

    def create_transaction(self, type: str, category: str, amount: float,
                           date: Optional[date] = None, description: Optional[str] = None) -> Dict[str, Any]:
        payload = _clean({
            "type": type, "category": category, "amount": amount,
            "date": date, "description": description,
        })
        return self.client.post("/transactions", json=payload).json()["data"]

    def get_transaction(self, transaction_id: int) -> Dict[str, Any]:
        return self.client.get(f"/transactions/{transaction_id}").json()["data"]

    def update_transaction(self, transaction_id: int, **changes: Any) -> Dict[str, Any]:
        payload = {
            key: value.isoformat() if isinstance(value, date) else value
            for key, value in changes.items()
        }
        return self.client.put(f"/transactions/{transaction_id}", json=payload).json()["data"]

    def delete_transaction(self, transaction_id: int) -> None:
        self.client.delete(f"/transactions/{transaction_id}")

    def monthly_summary(self, months: Optional[int] = None) -> Dict[str, Dict[str, float]]:
        params = _clean({"months": months})
        return self.client.get("/transactions/summary/monthly", params=params).json()["data"]
