# src/repository/repository_factory.py - v2
"""Factory for product repository instantiation."""

from __future__ import annotations

from catalogref.config.settings import Settings
from catalogref.repository.base_repository import BaseProductRepository


def create_repository(settings: Settings | None = None) -> BaseProductRepository:
    """Instantiate the configured catalog backend.

    Args:
        settings: Application settings. Defaults to an empty in-memory catalog.

    Returns:
        Configured BaseProductRepository implementation.
    """
    if settings is None or settings.catalog_backend == "memory":
        from catalogref.repository.memory_repository import InMemoryProductRepository
        return InMemoryProductRepository()

    if settings.catalog_backend == "http":
        from catalogref.repository.http_repository import HttpProductRepository
        headers = {"Accept": "application/json"}
        if settings.catalog_api_token:
            headers["Authorization"] = f"Bearer {settings.catalog_api_token}"
        return HttpProductRepository(
            settings.catalog_api_base,
            headers=headers,
            timeout=settings.catalog_timeout_seconds,
            sku_attributes=settings.to_mapping_config().fetch_attributes,
        )

    raise ValueError(f"Unsupported catalog backend: {settings.catalog_backend!r}")
