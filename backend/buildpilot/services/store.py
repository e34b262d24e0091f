# buildpilot/services/store.py
from __future__ import annotations

import copy
import threading
from datetime import timedelta
from typing import Any, Dict, List, Optional

from buildpilot.core.errors import InsufficientCreditsError, NotFoundError
from buildpilot.core.ids import new_id, parse_iso, utcnow, utcnow_iso

USERS = "users"
PROJECTS = "projects"
REFERRALS = "referrals"
SUPPORT_TICKETS = "support_tickets"
CREDIT_USAGE = "credit_usage"
API_KEYS = "api_keys"
RATE_LIMITS = "rate_limits"
IP_BLOCKS = "ip_blocks"

class RecordStore:
    # Rows are plain dicts. insert assigns id/created_at/updated_at when missing;
    # update bumps updated_at.
    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def select(
        self,
        table: str,
        order_by: Optional[str] = None,
        descending: bool = False,
        **filters: Any,
    ) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def update(self, table: str, record_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def delete(self, table: str, record_id: str) -> bool:
        raise NotImplementedError

    def increment_credits(self, user_id: str, amount: int) -> int:
        raise NotImplementedError

    def hit_rate_limit(self, key: str, window_seconds: int, max_requests: int) -> bool:
        raise NotImplementedError

class MemoryRecordStore(RecordStore):
    def __init__(self) -> None:
        self._tables: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def _table(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self._tables.setdefault(name, {})

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        now = utcnow_iso()
        record = dict(row)
        record.setdefault("id", new_id())
        record.setdefault("created_at", now)
        record.setdefault("updated_at", now)
        with self._lock:
            rows = self._table(table)
            if record["id"] in rows:
                raise ValueError(f"duplicate id in {table}: {record['id']}")
            rows[record["id"]] = record
            return copy.deepcopy(record)

    def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._table(table).get(record_id)
            return copy.deepcopy(row) if row is not None else None

    def select(
        self,
        table: str,
        order_by: Optional[str] = None,
        descending: bool = False,
        **filters: Any,
    ) -> List[Dict[str, Any]]:
        with self._lock:
            rows = [
                copy.deepcopy(r)
                for r in self._table(table).values()
                if all(r.get(k) == v for k, v in filters.items())
            ]
        if order_by:
            rows.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by) or ""), reverse=descending)
        return rows

    def update(self, table: str, record_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._table(table).get(record_id)
            if row is None:
                return None
            row.update({k: v for k, v in changes.items() if k not in ("id", "created_at")})
            row["updated_at"] = utcnow_iso()
            return copy.deepcopy(row)

    def delete(self, table: str, record_id: str) -> bool:
        with self._lock:
            return self._table(table).pop(record_id, None) is not None

    def increment_credits(self, user_id: str, amount: int) -> int:
        with self._lock:
            user = self._table(USERS).get(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            balance = int(user.get("credits") or 0) + amount
            if balance < 0:
                raise InsufficientCreditsError()
            user["credits"] = balance
            user["updated_at"] = utcnow_iso()
            return balance

    def hit_rate_limit(self, key: str, window_seconds: int, max_requests: int) -> bool:
        now = utcnow()
        with self._lock:
            rows = self._table(RATE_LIMITS)
            row = rows.get(key)
            if row is None or now > parse_iso(row["reset_at"]):
                rows[key] = {
                    "id": key,
                    "ip": key,
                    "count": 1,
                    "reset_at": (now + timedelta(seconds=window_seconds)).isoformat(),
                    "created_at": now.isoformat(),
                }
                return True
            if row["count"] >= max_requests:
                return False
            row["count"] += 1
            return True
