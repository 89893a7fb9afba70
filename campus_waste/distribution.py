"""Top-N material distribution across categories.

For each of the heaviest materials this reports its total weight and how
that weight splits over the categories it was recorded under (value and
percentage share), which is what the material distribution and bubble
views draw.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd

from .aggregate import aggregate_materials, rank_materials
from .config import DEFAULT_TOP_MATERIALS


def build_material_distribution(
    records: pd.DataFrame,
    year: Optional[int] = None,
    top_n: Optional[int] = DEFAULT_TOP_MATERIALS,
    category: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Rank materials and break each one down by category.

    Parameters
    ----------
    records : pd.DataFrame
        Validated record frame.
    year : Optional[int]
        Only records from this year contribute; ``None`` uses every year.
    top_n : Optional[int]
        Number of materials to return; ``None`` returns all.
    category : Optional[str]
        Only rank materials that have weight in this category.

    Returns
    -------
    List[Dict[str, Any]]
        Entries ``{"name", "total_weight", "primary_category", "categories"}``
        descending by ``total_weight`` (ties in first-appearance order).
        ``categories`` lists ``{"name", "value", "share"}`` in
        first-appearance order, ``share`` being a percentage of the
        material's total.
    """
    ranked = rank_materials(records, year=year, top_n=top_n, category=category)
    pairs = aggregate_materials(records, year=year)

    distribution: List[Dict[str, Any]] = []
    for material, total in zip(ranked["material_type"], ranked["total_weight"]):
        total = float(total)
        rows = pairs[pairs["material_type"] == material]
        categories = [
            {"name": name, "value": float(weight), "share": float(weight) / total * 100.0}
            for name, weight in zip(rows["category"], rows["weight"])
        ]
        primary = max(categories, key=lambda entry: entry["value"])["name"]
        distribution.append(
            {
                "name": material,
                "total_weight": total,
                "primary_category": primary,
                "categories": categories,
            }
        )
    return distribution
