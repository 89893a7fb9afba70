"""Material -> category flow graph for the network and Sankey views.

The graph is bipartite: material nodes link to the category nodes their
weight was recorded under.  Node ids are namespaced by kind
(``"material:Paper"``, ``"category:Recycling"``) so a material that happens
to share a category's name stays a separate node.  Nodes and links come out
in first-appearance order and every link also carries the integer positions
of its endpoints in ``nodes``, resolved through one index map.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from .aggregate import aggregate_materials, rank_materials
from .config import DEFAULT_TOP_MATERIALS

logger = logging.getLogger(__name__)

MATERIAL: str = "material"
CATEGORY: str = "category"


def node_id(kind: str, name: str) -> str:
    """Namespaced node id, e.g. ``"material:Paper"``."""
    return f"{kind}:{name}"


def _graph_from_pairs(pairs: pd.DataFrame) -> Dict[str, List[Dict[str, Any]]]:
    """Turn (category, material, weight) rows into nodes and links."""
    nodes: List[Dict[str, Any]] = []
    index: Dict[str, int] = {}

    def add_node(kind: str, name: str) -> None:
        key = node_id(kind, name)
        if key not in index:
            index[key] = len(nodes)
            nodes.append({"id": key, "name": name, "kind": kind, "value": 0.0})

    # Materials first, then categories; both in first-appearance order
    for material in pairs["material_type"]:
        add_node(MATERIAL, material)
    for category in pairs["category"]:
        add_node(CATEGORY, category)

    links: List[Dict[str, Any]] = []
    for category, material, weight in zip(
        pairs["category"], pairs["material_type"], pairs["weight"]
    ):
        source_id = node_id(MATERIAL, material)
        target_id = node_id(CATEGORY, category)
        source, target = index[source_id], index[target_id]
        weight = float(weight)
        nodes[source]["value"] += weight
        nodes[target]["value"] += weight
        links.append(
            {
                "source_id": source_id,
                "target_id": target_id,
                "source": source,
                "target": target,
                "weight": weight,
            }
        )

    return {"nodes": nodes, "links": links}


def build_flow_graph(
    records: pd.DataFrame, year: Optional[int] = None
) -> Dict[str, List[Dict[str, Any]]]:
    """Build the full flow graph.

    Parameters
    ----------
    records : pd.DataFrame
        Validated record frame.
    year : Optional[int]
        Only records from this year contribute; ``None`` uses every year.

    Returns
    -------
    Dict[str, List[Dict[str, Any]]]
        ``{"nodes": [...], "links": [...]}``.  A node is
        ``{"id", "name", "kind", "value"}``; a link is
        ``{"source_id", "target_id", "source", "target", "weight"}`` with
        one link per (material, category) pair of positive weight.
    """
    return _graph_from_pairs(aggregate_materials(records, year=year))


def build_top_flow_graph(
    records: pd.DataFrame,
    year: Optional[int] = None,
    top_n: int = DEFAULT_TOP_MATERIALS,
) -> Dict[str, List[Dict[str, Any]]]:
    """Flow graph restricted to the ``top_n`` heaviest materials.

    Materials are ranked by their total weight across all categories; ties
    are broken by first appearance.  Only the categories those materials
    link to are kept.
    """
    top = rank_materials(records, year=year, top_n=top_n)["material_type"]
    pairs = aggregate_materials(records, year=year)
    pairs = pairs[pairs["material_type"].isin(top)].reset_index(drop=True)
    logger.debug("Top flow graph for year=%s keeps %d materials", year, len(top))
    return _graph_from_pairs(pairs)
