# tests/unit/core/test_unit_paths.py - v1
"""Tests for core/paths.py: dotted-path access on records."""

from __future__ import annotations

from catalogref.core.paths import MISSING, attribute_map, get_path, get_string


class TestGetPath:
    def test_top_level(self):
        assert get_path({"sku": "A"}, "sku") == "A"

    def test_nested(self):
        assert get_path({"attributes": {"mpn": "X"}}, "attributes.mpn") == "X"

    def test_missing_intermediate(self):
        assert get_path({"id": "1"}, "attributes.mpn") is MISSING

    def test_none_intermediate(self):
        assert get_path({"attributes": None}, "attributes.mpn") is MISSING

    def test_no_list_traversal(self):
        assert get_path({"attributes": [{"mpn": "X"}]}, "attributes.mpn") is MISSING
        assert get_path({"items": ["a", "b"]}, "items.0") is MISSING

    def test_flat_key_fallback(self):
        assert get_path({"attributes.mpn": "FLAT"}, "attributes.mpn") == "FLAT"

    def test_nested_wins_over_flat(self):
        record = {"attributes": {"mpn": "NESTED"}, "attributes.mpn": "FLAT"}
        assert get_path(record, "attributes.mpn") == "NESTED"

    def test_present_none_is_returned(self):
        assert get_path({"sku": None}, "sku") is None


class TestGetString:
    def test_string(self):
        assert get_string({"attributes": {"mpn": "X"}}, "attributes.mpn") == "X"

    def test_non_string(self):
        assert get_string({"gtin": 123}, "gtin") is None
        assert get_string({}, "gtin") is None


class TestAttributeMap:
    def test_mapping(self):
        assert attribute_map({"attributes": {"a": 1}}) == {"a": 1}

    def test_absent_or_wrong_type(self):
        assert attribute_map({}) == {}
        assert attribute_map({"attributes": ["a"]}) == {}
