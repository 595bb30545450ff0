# tests/conftest.py - v2
"""Shared test fixtures for all unit and integration tests.

Provides a small sample catalog, an in-memory repository over it, a mocked
repository and a controllable clock. No network I/O.
"""

from __future__ import annotations

import logging
from typing import Any
from unittest.mock import AsyncMock

import pytest

from catalogref.repository.base_repository import BaseProductRepository
from catalogref.repository.memory_repository import InMemoryProductRepository


class FakeClock:
    """Monotonic clock the test advances by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# === FIXTURES: Sample data ===


@pytest.fixture
def dome_041() -> dict[str, Any]:
    """Product reachable by SKU, MPN, model number and GTIN."""
    return {
        "id": "507f1f77bcf86cd799439011",
        "sku": "LMI-PD041828SI",
        "label": "Pressure Dome 041",
        "gtin": "01234567890128",
        "attributes": {
            "mpn": "PD041-828SI",
            "model_no": "PD041828",
            "name": "Pressure Dome",
            "list_price": "199.5",
        },
        "includes": ["b1", "c1"],
        "replaces": ["c1", "gone"],
    }


@pytest.fixture
def dome_052() -> dict[str, Any]:
    return {
        "id": "b1",
        "sku": "LMI-PD052",
        "label": "Pressure Dome 052",
        "attributes": {"name": "Dome 52", "mpn": "PD052", "list_price": 89},
    }


@pytest.fixture
def dome_063() -> dict[str, Any]:
    return {
        "id": "c1",
        "sku": "LMI-PD063",
        "label": "Pressure Dome 063",
        "attributes": {},
    }


@pytest.fixture
def catalog_records(dome_041, dome_052, dome_063) -> list[dict[str, Any]]:
    return [dome_041, dome_052, dome_063]


# === FIXTURES: Repositories ===


@pytest.fixture
def memory_repository(catalog_records) -> InMemoryProductRepository:
    return InMemoryProductRepository(catalog_records)


@pytest.fixture
def mock_repository() -> AsyncMock:
    """Mock BaseProductRepository returning nothing by default."""
    repo = AsyncMock(spec=BaseProductRepository)
    repo.search_by_criteria.return_value = []
    repo.get_by_id.return_value = None
    repo.get_by_ids.return_value = []
    repo.get_by_sku.return_value = None
    repo.get_by_skus.return_value = []
    return repo


# === FIXTURES: Clock ===


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# === FIXTURES: Logging ===


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo handlers and level set by setup_logging during a test."""
    root = logging.getLogger("catalogref")
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
