"""Composition tree (``Total Waste`` -> category -> material) for the treemap."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from .aggregate import aggregate_materials
from .config import CATEGORIES, ROOT_NAME

logger = logging.getLogger(__name__)


def _category_order(categories: Iterable[str]) -> List[str]:
    """Canonical categories first, then unrecognised ones by first appearance."""
    present = list(dict.fromkeys(categories))
    known = [category for category in CATEGORIES if category in present]
    return known + [category for category in present if category not in CATEGORIES]


def build_composition(
    records: pd.DataFrame,
    year: Optional[int] = None,
    category: Optional[str] = None,
    min_weight: float = 0.0,
) -> Dict[str, Any]:
    """Build the composition tree for one year (or all years).

    Parameters
    ----------
    records : pd.DataFrame
        Validated record frame.
    year : Optional[int]
        Only records from this year contribute; ``None`` aggregates all years.
    category : Optional[str]
        Keep a single category node.
    min_weight : float
        Leaves lighter than this are dropped.  Leaves with a value of zero
        or less are always dropped.

    Returns
    -------
    Dict[str, Any]
        ``{"name": "Total Waste", "children": [...]}`` where each category
        node is ``{"name", "children"}`` and each leaf is ``{"name", "value"}``.
        Leaves are sorted by value, descending; ties follow the first
        appearance of the material name in the year, across all categories.
        Categories left without leaves are omitted.
    """
    # Tie-break rank: first appearance of the material name in the year
    seen = dict.fromkeys(aggregate_materials(records, year=year)["material_type"])
    first_seen = {material: rank for rank, material in enumerate(seen)}

    materials = aggregate_materials(records, year=year, category=category)
    keep = (materials["weight"] > 0) & (materials["weight"] >= min_weight)
    materials = materials[keep].assign(
        first_seen=lambda df: df["material_type"].map(first_seen)
    )

    children: List[Dict[str, Any]] = []
    for name in _category_order(materials["category"]):
        leaves = materials[materials["category"] == name].sort_values(
            ["weight", "first_seen"], ascending=[False, True], kind="stable"
        )
        children.append(
            {
                "name": name,
                "children": [
                    {"name": material, "value": float(weight)}
                    for material, weight in zip(leaves["material_type"], leaves["weight"])
                ],
            }
        )

    logger.debug(
        "Composition for year=%s: %d categories, %d leaves",
        year,
        len(children),
        len(materials),
    )
    return {"name": ROOT_NAME, "children": children}


def total_value(node: Dict[str, Any]) -> float:
    """Sum of the leaf values under ``node``."""
    if "children" not in node:
        return float(node.get("value", 0.0))
    return float(sum(total_value(child) for child in node["children"]))
