"""
tests/test_graph.py — Unit tests for the material -> category flow graph.

Requires: pytest, pandas
"""

from __future__ import annotations

import pytest

from campus_waste.graph import build_flow_graph, build_top_flow_graph, node_id
from campus_waste.loader import empty_records, parse_rows

from .sample_data import VALID_WEIGHTS, make_row


class TestNodeId:
    def test_namespaced_by_kind(self):
        assert node_id("material", "Paper") == "material:Paper"
        assert node_id("category", "Compost") != node_id("material", "Compost")


class TestBuildFlowGraph:
    def test_nodes_materials_then_categories(self, records):
        graph = build_flow_graph(records, year=2024)
        assert [(node["kind"], node["name"]) for node in graph["nodes"]] == [
            ("material", "Paper"),
            ("material", "Plastic"),
            ("material", "Furniture"),
            ("category", "Recycling"),
            ("category", "Landfill"),
            ("category", "Reuse"),
        ]

    def test_node_ids_unique(self, records):
        ids = [node["id"] for node in build_flow_graph(records)["nodes"]]
        assert len(ids) == len(set(ids))
        assert "material:Paper" in ids
        assert "category:Recycling" in ids

    def test_links(self, records):
        graph = build_flow_graph(records, year=2024)
        assert [
            (link["source_id"], link["target_id"], link["weight"]) for link in graph["links"]
        ] == [
            ("material:Paper", "category:Recycling", 1500.0),
            ("material:Plastic", "category:Landfill", 2000.0),
            ("material:Paper", "category:Landfill", 250.0),
            ("material:Furniture", "category:Reuse", 400.0),
        ]

    def test_link_indices_match_nodes(self, records):
        graph = build_flow_graph(records)
        for link in graph["links"]:
            assert graph["nodes"][link["source"]]["id"] == link["source_id"]
            assert graph["nodes"][link["target"]]["id"] == link["target_id"]
            assert graph["nodes"][link["source"]]["kind"] == "material"
            assert graph["nodes"][link["target"]]["kind"] == "category"

    def test_node_values(self, records):
        nodes = {node["id"]: node["value"] for node in build_flow_graph(records, year=2024)["nodes"]}
        assert nodes["material:Paper"] == pytest.approx(1750.0)
        assert nodes["category:Landfill"] == pytest.approx(2250.0)

    def test_conservation(self, records):
        for year, expected in VALID_WEIGHTS.items():
            links = build_flow_graph(records, year=year)["links"]
            assert sum(link["weight"] for link in links) == pytest.approx(expected)

    def test_no_recycle_node(self, records):
        names = {node["name"] for node in build_flow_graph(records)["nodes"]}
        assert "Recycle" not in names

    def test_material_named_like_category_no_self_loop(self):
        recs = parse_rows([make_row(2024, "Compost", "Compost", "12")])
        graph = build_flow_graph(recs)
        assert [node["id"] for node in graph["nodes"]] == ["material:Compost", "category:Compost"]
        link = graph["links"][0]
        assert link["source"] != link["target"]

    def test_zero_weight_rows_absent(self, records):
        names = {node["name"] for node in build_flow_graph(records)["nodes"]}
        assert "Yard Waste" not in names
        assert "Glass" not in names

    def test_idempotent(self, records):
        assert build_flow_graph(records, year=2024) == build_flow_graph(records, year=2024)

    def test_empty(self):
        assert build_flow_graph(empty_records()) == {"nodes": [], "links": []}


class TestBuildTopFlowGraph:
    def test_keeps_heaviest_materials(self, records):
        graph = build_top_flow_graph(records, year=2024, top_n=2)
        materials = [node["name"] for node in graph["nodes"] if node["kind"] == "material"]
        assert materials == ["Paper", "Plastic"]

    def test_drops_unlinked_categories(self, records):
        graph = build_top_flow_graph(records, year=2024, top_n=1)
        assert [node["id"] for node in graph["nodes"]] == ["material:Plastic", "category:Landfill"]
        assert graph["links"][0]["source"] == 0
        assert graph["links"][0]["target"] == 1

    def test_tie_break(self):
        recs = parse_rows(
            [
                make_row(2024, "Landfill", "A", "100"),
                make_row(2024, "Landfill", "B", "90"),
                make_row(2024, "Recycle", "C", "90"),
                make_row(2024, "Compost", "D", "10"),
            ]
        )
        graph = build_top_flow_graph(recs, top_n=3)
        names = [node["name"] for node in graph["nodes"]]
        assert names == ["A", "B", "C", "Landfill", "Recycling"]

    def test_large_top_n_is_full_graph(self, records):
        assert build_top_flow_graph(records, year=2024, top_n=50) == build_flow_graph(
            records, year=2024
        )

    def test_empty(self):
        assert build_top_flow_graph(empty_records(), top_n=3) == {"nodes": [], "links": []}
