"""
Davinci DB client: a collection-style interface over one remote query endpoint.

Every collection call becomes a single POST of
``{collection, action, filter?, data?, options?}`` to
``{api_url}/api/app-db/{app_id}/query`` and expects
``{success, data?, error?}`` back.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests
from pydantic import ValidationError

from gallery.config import Settings
from gallery.errors import ConfigurationError, DatabaseError, TransportError
from gallery.schemas import QueryOptions, QueryRequest, QueryResponse

logger = logging.getLogger(__name__)


class DavinciClient:
    """Stateless per call; holds only the endpoint and an HTTP session."""

    def __init__(
        self,
        app_id: Optional[str],
        api_url: str,
        *,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.app_id = app_id or None
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "DavinciClient":
        return cls(
            settings.app_id,
            settings.api_url,
            timeout=settings.request_timeout,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.app_id)

    @property
    def query_url(self) -> str:
        return f"{self.api_url}/api/app-db/{self.app_id}/query"

    def collection(self, name: str) -> "Collection":
        return Collection(self, name)

    def query(
        self,
        collection: str,
        action: str,
        *,
        filter: Optional[dict] = None,
        data: Any = None,
        options: Optional[dict | QueryOptions] = None,
    ) -> Any:
        """
        Run one query and return the response's ``data`` member.

        Raises:
            ConfigurationError: no app id; raised before any request is made.
            TransportError: network failure or a body that is not a query response.
            DatabaseError: the server answered with ``success: false``.
        """
        if not self.is_configured:
            raise ConfigurationError(
                "DAVINCI_APP_ID is not configured. Deploy to enable database."
            )

        if isinstance(options, dict):
            options = QueryOptions.model_validate(options)
        body = QueryRequest(
            collection=collection,
            action=action,
            filter=filter,
            data=data,
            options=options,
        ).to_body()
        logger.debug("Davinci query: %s on %s", action, collection)

        try:
            response = self.session.post(
                self.query_url, json=body, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise TransportError(f"{action} on {collection} failed: {exc}") from exc

        try:
            result = QueryResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise TransportError(
                f"Malformed response for {action} on {collection} "
                f"(HTTP {response.status_code})"
            ) from exc

        if not result.success:
            raise DatabaseError(result.error or "Database error")
        return result.data


def _first(data: Any) -> Optional[dict]:
    if isinstance(data, list):
        return data[0] if data else None
    if isinstance(data, dict):
        return data
    return None


def _rows(data: Any) -> list[dict]:
    if data is None:
        return []
    if isinstance(data, list):
        return data
    return [data]


class Collection:
    """Firestore-style view over one remote collection."""

    def __init__(self, client: DavinciClient, name: str):
        self.client = client
        self.name = name

    def _query(self, action: str, **params: Any) -> Any:
        return self.client.query(self.name, action, **params)

    def get_all(self, options: Optional[dict] = None) -> list[dict]:
        return _rows(self._query("select", options=options))

    def find(self, filter: Optional[dict] = None, options: Optional[dict] = None) -> list[dict]:
        return _rows(self._query("select", filter=filter, options=options))

    def find_by_id(self, record_id: str) -> Optional[dict]:
        data = self._query("select", filter={"id": record_id}, options={"limit": 1})
        return _first(data)

    def add(self, record: dict) -> Optional[dict]:
        return _first(self._query("insert", data=record))

    def add_many(self, records: list[dict]) -> list[dict]:
        return _rows(self._query("insert", data=records))

    def update_by_id(self, record_id: str, partial: dict) -> Optional[dict]:
        return _first(self._query("update", filter={"id": record_id}, data=partial))

    def update(self, filter: dict, partial: dict) -> list[dict]:
        return _rows(self._query("update", filter=filter, data=partial))

    def delete_by_id(self, record_id: str) -> bool:
        self._query("delete", filter={"id": record_id})
        return True

    def delete(self, filter: dict) -> bool:
        self._query("delete", filter=filter)
        return True

    def count(self, filter: Optional[dict] = None) -> int:
        data = self._query("count", filter=filter)
        if isinstance(data, dict):
            data = data.get("count", 0)
        try:
            return int(data or 0)
        except (TypeError, ValueError) as exc:
            raise TransportError(f"Unexpected count payload: {data!r}") from exc
