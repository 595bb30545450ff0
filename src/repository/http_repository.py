# src/repository/http_repository.py - v2
"""Async HTTP adapter for a REST product catalog.

Talks to a catalog exposing ``POST /api/v2/products/search`` and
``GET /api/v2/products/{id}``, both answering ``{"data": [...]}``.
Authentication is the caller's business: pass an already authorized
``httpx.AsyncClient`` or a base URL plus headers.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx

from catalogref.config.models import RefMappingConfig
from catalogref.core.models import Record
from catalogref.repository.base_repository import BaseProductRepository, RepositoryError
from catalogref.repository.models import FilterGroups, Pagination, SearchRequest, eq

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/v2/products/search"
PRODUCT_PATH = "/api/v2/products/{product_id}"


class HttpProductRepository(BaseProductRepository):
    """Product repository over the catalog REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = 15.0,
        sku_attributes: list[str] | None = None,
    ) -> None:
        if client is None and not base_url:
            raise ValueError("HttpProductRepository needs a base_url or a client")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or "",
            headers=headers or {},
            timeout=timeout,
        )
        self._sku_attributes = sku_attributes or RefMappingConfig().fetch_attributes

    async def search_by_criteria(
        self,
        filter_groups: FilterGroups,
        attributes: list[str],
        pagination: Pagination,
    ) -> list[Record]:
        body = SearchRequest(
            filters=[group for group in filter_groups if group],
            attributes=attributes,
            pagination=pagination,
        )
        data = await self._request("POST", SEARCH_PATH, json=body.to_payload())
        return _rows(data)

    async def get_by_id(self, product_id: str) -> Record | None:
        path = PRODUCT_PATH.format(product_id=quote(product_id, safe=""))
        data = await self._request("GET", path, not_found_ok=True)
        if data is None:
            return None
        rows = _rows(data)
        return rows[0] if rows else None

    async def get_by_ids(self, product_ids: list[str]) -> list[Record]:
        """Fan out one GET per unique ID; failed or missing IDs are omitted."""
        unique = list(dict.fromkeys(product_ids))
        if not unique:
            return []
        results = await asyncio.gather(
            *(self.get_by_id(pid) for pid in unique),
            return_exceptions=True,
        )
        records: list[Record] = []
        for pid, result in zip(unique, results):
            if isinstance(result, BaseException):
                logger.warning("Fetch of product %s failed: %s", pid, result)
                continue
            if result is not None:
                records.append(result)
        return records

    async def get_by_sku(self, sku: str) -> Record | None:
        rows = await self.search_by_criteria(
            [[eq("sku", sku)]], self._sku_attributes, Pagination(page=1, page_size=1)
        )
        for row in rows:
            if row.get("sku") == sku:
                return row
        return None

    async def get_by_skus(self, skus: list[str]) -> list[Record]:
        """One search with an OR group per SKU, first matching row per SKU."""
        unique = list(dict.fromkeys(skus))
        if not unique:
            return []
        rows = await self.search_by_criteria(
            [[eq("sku", sku)] for sku in unique],
            self._sku_attributes,
            Pagination(page=1, page_size=len(unique)),
        )
        by_sku: dict[str, Record] = {}
        for row in rows:
            sku = row.get("sku")
            if isinstance(sku, str) and sku in unique and sku not in by_sku:
                by_sku[sku] = row
        return [by_sku[sku] for sku in unique if sku in by_sku]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        not_found_ok: bool = False,
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise RepositoryError(f"{method} {path} failed: {exc}") from exc

        if response.status_code == 404 and not_found_ok:
            return None
        if response.status_code >= 400:
            raise RepositoryError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
                payload=_safe_json(response),
            )
        try:
            return response.json()
        except ValueError as exc:
            raise RepositoryError(
                f"{method} {path} returned invalid JSON",
                status_code=response.status_code,
            ) from exc


def _rows(data: Any) -> list[Record]:
    if not isinstance(data, dict):
        raise RepositoryError("Unexpected response shape", payload=data)
    rows = data.get("data") or []
    if not isinstance(rows, list):
        raise RepositoryError("Unexpected 'data' shape", payload=data)
    return [row for row in rows if isinstance(row, dict) and isinstance(row.get("id"), str)]


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text
