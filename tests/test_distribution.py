"""
tests/test_distribution.py — Unit tests for the top-N material distribution.

Requires: pytest, pandas
"""

from __future__ import annotations

import pytest

from campus_waste.distribution import build_material_distribution
from campus_waste.loader import empty_records


class TestBuildMaterialDistribution:
    def test_ranked(self, records):
        dist = build_material_distribution(records, year=2024)
        assert [entry["name"] for entry in dist] == ["Plastic", "Paper", "Furniture"]

    def test_category_breakdown(self, records):
        paper = build_material_distribution(records, year=2024)[1]
        assert paper["total_weight"] == pytest.approx(1750.0)
        assert [(c["name"], c["value"]) for c in paper["categories"]] == [
            ("Recycling", 1500.0),
            ("Landfill", 250.0),
        ]
        assert sum(c["share"] for c in paper["categories"]) == pytest.approx(100.0)
        assert paper["primary_category"] == "Recycling"

    def test_top_n(self, records):
        assert len(build_material_distribution(records, top_n=2)) == 2

    def test_all_materials(self, records):
        dist = build_material_distribution(records, top_n=None)
        assert len(dist) == 4
        assert sum(entry["total_weight"] for entry in dist) == pytest.approx(6450.5)

    def test_category_filter(self, records):
        dist = build_material_distribution(records, year=2024, category="Reuse")
        assert [entry["name"] for entry in dist] == ["Furniture"]

    def test_empty(self):
        assert build_material_distribution(empty_records()) == []
