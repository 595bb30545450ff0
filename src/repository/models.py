# src/repository/models.py - v1
"""Query models for the product repository boundary.

A search is a disjunction of conjunctions: ``filter_groups`` is OR across
groups and AND inside a group. Empty groups are ignored; no groups at all
means "no filter".
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

FilterOperator = Literal["eq", "like", "text_search"]


class FilterCondition(BaseModel):
    """One ``{field, operator, value}`` triple.

    ``field`` is a list only for ``text_search``, which matches when any of
    the listed fields contains the value.
    """

    field: str | list[str]
    operator: FilterOperator
    value: Any

    @property
    def fields(self) -> list[str]:
        return list(self.field) if isinstance(self.field, list) else [self.field]


FilterGroups = list[list[FilterCondition]]


class Pagination(BaseModel):
    """1-based page request."""

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=5, gt=0)


class SearchRequest(BaseModel):
    """Wire shape of a search call, as posted to the catalog API."""

    filters: FilterGroups = Field(default_factory=list)
    attributes: list[str] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump()
        if not self.filters:
            payload.pop("filters")
        return payload


def eq(field: str, value: Any) -> FilterCondition:
    return FilterCondition(field=field, operator="eq", value=value)


def like(field: str, value: Any) -> FilterCondition:
    return FilterCondition(field=field, operator="like", value=value)


def text_search(fields: list[str], value: Any) -> FilterCondition:
    return FilterCondition(field=list(fields), operator="text_search", value=value)
