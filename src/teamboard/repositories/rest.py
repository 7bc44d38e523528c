"""PostgREST record store client (Supabase compatible)."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from .protocol import Record

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


class RecordStoreError(Exception):
    """Base exception for record store errors."""

    pass


class RecordStoreAuthError(RecordStoreError):
    """Authentication failed."""

    pass


class RecordStoreNotFoundError(RecordStoreError):
    """Table or endpoint not found."""

    pass


class RestRecordStore:
    """Record store backed by a PostgREST endpoint.

    Provides a thin wrapper around the REST API with:
    - API key authentication (apikey + bearer headers)
    - Upsert by primary key via ``Prefer: resolution=merge-duplicates``
    - Error mapping and request timing logs
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            base_url: Project URL, e.g. https://abc.supabase.co
            api_key: Service or anon key
            timeout: HTTP timeout in seconds
            client: Pre-built client (tests)
        """
        self.base_url = base_url.rstrip("/")
        self._rest_url = f"{self.base_url}/rest/v1"
        self._client = client or httpx.Client(
            base_url=self._rest_url,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> RestRecordStore | None:
        """Create a store from settings, or None in local-only mode."""
        if not settings.remote_configured:
            return None
        assert settings.remote_url is not None and settings.remote_key is not None
        return cls(
            settings.remote_url,
            settings.remote_key.get_secret_value(),
            timeout=settings.request_timeout,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> RestRecordStore:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def upsert(self, table: str, record: Record) -> None:
        """Insert or replace a record by id."""
        self._request(
            "POST",
            table,
            params={"on_conflict": "id"},
            json=[record],
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )

    def delete(self, table: str, record_id: str) -> None:
        """Delete a record by id (no error if missing)."""
        self._request("DELETE", table, params={"id": f"eq.{record_id}"})

    def select(self, table: str, order_by: str | None = None) -> list[Record]:
        """Fetch all records in a table."""
        params = {"select": "*"}
        if order_by:
            params["order"] = f"{order_by}.asc"
        response = self._request("GET", table, params=params)
        try:
            data = response.json()
        except ValueError as e:
            raise RecordStoreError(f"Invalid JSON response: {e}") from e
        if not isinstance(data, list):
            raise RecordStoreError(f"Unexpected response for {table}: {data!r}")
        return data

    def _request(self, method: str, table: str, **kwargs: Any) -> httpx.Response:
        """Send a request and map failures to RecordStoreError."""
        start_time = time.monotonic()
        try:
            response = self._client.request(method, f"/{table}", **kwargs)
        except httpx.RequestError as e:
            elapsed_ms = (time.monotonic() - start_time) * 1000
            logger.error("%s %s failed after %.0fms: %s", method, table, elapsed_ms, e)
            raise RecordStoreError(f"Request failed: {e}") from e

        elapsed_ms = (time.monotonic() - start_time) * 1000

        if response.status_code in (401, 403):
            logger.error("%s %s: %d Unauthorized (%.0fms)", method, table, response.status_code, elapsed_ms)
            raise RecordStoreAuthError(
                "Authentication failed. Check TEAMBOARD_REMOTE_KEY."
            )
        if response.status_code == 404:
            logger.error("%s %s: 404 Not Found (%.0fms)", method, table, elapsed_ms)
            raise RecordStoreNotFoundError(f"Table not found: {table}")
        if response.status_code >= 400:
            logger.error("%s %s: HTTP %d (%.0fms)", method, table, response.status_code, elapsed_ms)
            raise RecordStoreError(f"HTTP {response.status_code}: {response.text}")

        logger.debug("%s %s: %d (%.0fms)", method, table, response.status_code, elapsed_ms)
        return response
