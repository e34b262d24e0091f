# buildpilot/services/rest_store.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests as http_requests

from buildpilot.core.config import Settings
from buildpilot.core.errors import InsufficientCreditsError, StoreError
from buildpilot.core.ids import utcnow_iso
from buildpilot.services.store import RecordStore

class RestRecordStore(RecordStore):
    # Tables live under /rest/v1/<table>; the atomic operations are the
    # increment_credits and rate_limit_hit functions under /rest/v1/rpc.
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings.from_env()
        self.base_url = f"{self.settings.rest_url.rstrip('/')}/rest/v1"
        self.headers = {
            "apikey": self.settings.rest_key,
            "Authorization": f"Bearer {self.settings.rest_key}",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        representation: bool = False,
    ) -> Any:
        headers = dict(self.headers)
        if representation:
            headers["Prefer"] = "return=representation"
        try:
            resp = http_requests.request(
                method,
                f"{self.base_url}/{path}",
                params=params,
                json=json,
                headers=headers,
                timeout=self.settings.rest_timeout,
            )
        except http_requests.RequestException as ex:
            raise StoreError(f"{method} {path} failed: {type(ex).__name__}") from ex

        if resp.status_code >= 400:
            message = _error_message(resp)
            if "insufficient_credits" in message:
                raise InsufficientCreditsError()
            raise StoreError(f"{method} {path} returned {resp.status_code}: {message}")

        if not resp.content:
            return None
        return resp.json()

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._request("POST", table, json=row, representation=True)
        if not rows:
            raise StoreError(f"insert into {table} returned no row")
        return rows[0]

    def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        rows = self._request("GET", table, params={"id": f"eq.{record_id}", "select": "*"})
        return rows[0] if rows else None

    def select(
        self,
        table: str,
        order_by: Optional[str] = None,
        descending: bool = False,
        **filters: Any,
    ) -> List[Dict[str, Any]]:
        params = {"select": "*"}
        for key, value in filters.items():
            params[key] = "is.null" if value is None else f"eq.{_literal(value)}"
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        return self._request("GET", table, params=params) or []

    def update(self, table: str, record_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        body = dict(changes)
        body["updated_at"] = utcnow_iso()
        rows = self._request(
            "PATCH", table, params={"id": f"eq.{record_id}"}, json=body, representation=True
        )
        return rows[0] if rows else None

    def delete(self, table: str, record_id: str) -> bool:
        rows = self._request("DELETE", table, params={"id": f"eq.{record_id}"}, representation=True)
        return bool(rows)

    def increment_credits(self, user_id: str, amount: int) -> int:
        result = self._request("POST", "rpc/increment_credits", json={"user_id": user_id, "amount": amount})
        return int(result)

    def hit_rate_limit(self, key: str, window_seconds: int, max_requests: int) -> bool:
        result = self._request(
            "POST",
            "rpc/rate_limit_hit",
            json={"ip": key, "window_seconds": window_seconds, "max_requests": max_requests},
        )
        return bool(result)

def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)

def _error_message(resp: http_requests.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text
    if isinstance(data, dict):
        return str(data.get("message") or data.get("error") or data)
    return str(data)
