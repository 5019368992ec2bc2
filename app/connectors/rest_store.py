"""Hosted table backend connector (PostgREST-style REST API).

Implements the TableStore operations against a hosted Postgres exposed over
PostgREST (the same API shape Supabase serves):

    GET    /rest/v1/{table}?select=*&order=created_at.desc
    POST   /rest/v1/{table}                 Prefer: return=representation
    PATCH  /rest/v1/{table}?id=eq.{id}      Prefer: return=representation
    DELETE /rest/v1/{table}?id=eq.{id}      Prefer: return=representation
    PATCH  /rest/v1/{table}?id=in.(a,b,c)
    DELETE /rest/v1/{table}?id=in.(a,b,c)

Transport errors, non-2xx responses and unparseable bodies all raise
StoreError; the connector never retries (the fallback policy handles reads,
writes report back to the user).
"""

import logging
from datetime import date, datetime
from typing import Iterable

import httpx

from ..http_client import http
from ..table_store import StoreError

log = logging.getLogger(__name__)


def _jsonable(values: dict | None) -> dict | None:
    """datetime/date → ISO strings; everything else passes through."""
    if values is None:
        return None
    return {
        k: v.isoformat() if isinstance(v, (datetime, date)) else v
        for k, v in values.items()
    }


class RestTableStore:
    """TableStore over a hosted PostgREST endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        *,
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.client = client or http

    def _headers(self, representation: bool = False) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        if representation:
            headers["Prefer"] = "return=representation"
        return headers

    def _url(self, table: str) -> str:
        return f"{self.base_url}/rest/v1/{table}"

    @staticmethod
    def _in_filter(ids: Iterable[str]) -> str:
        return "in.(" + ",".join(f'"{i}"' for i in ids) + ")"

    async def _send(
        self,
        method: str,
        table: str,
        operation: str,
        *,
        params: dict | None = None,
        json: dict | None = None,
        representation: bool = False,
    ) -> list[dict]:
        try:
            r = await self.client.request(
                method,
                self._url(table),
                params=params,
                json=_jsonable(json),
                headers=self._headers(representation),
                timeout=self.timeout,
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            log.warning(
                f"REST {operation} on {table} returned {e.response.status_code}: "
                f"{e.response.text[:200]}"
            )
            raise StoreError(table, operation, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            log.warning(f"REST {operation} on {table} failed: {e}")
            raise StoreError(table, operation, e.__class__.__name__) from e

        if not r.content:
            return []
        try:
            data = r.json()
        except ValueError as e:
            raise StoreError(table, operation, "invalid JSON body") from e
        if isinstance(data, dict):
            return [data]
        if not isinstance(data, list):
            raise StoreError(table, operation, "unexpected response shape")
        return data

    async def select_all(self, table: str) -> list[dict]:
        return await self._send(
            "GET", table, "select",
            params={"select": "*", "order": "created_at.desc"},
        )

    async def insert(self, table: str, row: dict) -> dict:
        rows = await self._send("POST", table, "insert", json=row, representation=True)
        if not rows:
            raise StoreError(table, "insert", "no row returned")
        return rows[0]

    async def update(self, table: str, row_id: str, changes: dict) -> dict | None:
        rows = await self._send(
            "PATCH", table, "update",
            params={"id": f"eq.{row_id}"}, json=changes, representation=True,
        )
        return rows[0] if rows else None

    async def delete(self, table: str, row_id: str) -> bool:
        rows = await self._send(
            "DELETE", table, "delete",
            params={"id": f"eq.{row_id}"}, representation=True,
        )
        return bool(rows)

    async def update_in(self, table: str, ids: Iterable[str], changes: dict) -> int:
        ids = list(ids)
        if not ids:
            return 0
        rows = await self._send(
            "PATCH", table, "update_in",
            params={"id": self._in_filter(ids)}, json=changes, representation=True,
        )
        return len(rows)

    async def delete_in(self, table: str, ids: Iterable[str]) -> int:
        ids = list(ids)
        if not ids:
            return 0
        rows = await self._send(
            "DELETE", table, "delete_in",
            params={"id": self._in_filter(ids)}, representation=True,
        )
        return len(rows)
