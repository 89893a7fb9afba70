"""Aggregation of validated waste records.

Every weight sum used by the shape builders is computed here, so the
category handling (canonical names, the ``other`` bucket for unrecognised
categories) and the ordering rules live in one place:

* yearly and monthly totals are sorted ascending by their keys and carry
  every category column, filled with ``0.0`` where a year has no records
  for that category;
* (category, material) sums and per-material rankings keep the order in
  which keys first appear in the source, so repeated calls on the same
  records return the same order.

None of the functions modify the record frame they are given.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from .config import (
    CATEGORIES,
    CATEGORY_COLUMNS,
    MONTH_NUMBERS,
    OTHER_COLUMN,
    TOTAL_COLUMN,
    TOTALS_COLUMNS,
)
from .loader import normalize_category

logger = logging.getLogger(__name__)

_BUCKET_COLUMNS: List[str] = [*CATEGORY_COLUMNS.values(), OTHER_COLUMN]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def month_number(value: Any) -> Optional[int]:
    """Return 1-12 for a month name (``"Jan"``, ``"January"``) or number."""
    text = "" if value is None else str(value).strip().lower().rstrip(".")
    if text.isdigit():
        number = int(text)
        return number if 1 <= number <= 12 else None
    return MONTH_NUMBERS.get(text)


def filter_records(
    records: pd.DataFrame,
    year: Optional[int] = None,
    category: Optional[str] = None,
) -> pd.DataFrame:
    """Return a copy of ``records`` restricted to a year and/or category.

    ``None`` leaves that dimension unfiltered.  The category is normalised
    the same way the loader does, so ``"Recycle"`` selects ``"Recycling"``.
    """
    mask = pd.Series(True, index=records.index, dtype=bool)
    if year is not None:
        mask &= records["year"] == int(year)
    if category is not None:
        mask &= records["category"] == normalize_category(category)
    return records.loc[mask].copy()


def _empty_totals(keys: List[str]) -> pd.DataFrame:
    if len(keys) == 1:
        index = pd.Index([], dtype="int64", name=keys[0])
    else:
        index = pd.MultiIndex.from_arrays(
            [pd.Index([], dtype="int64") for _ in keys], names=keys
        )
    return pd.DataFrame(
        {column: pd.Series(dtype="float64") for column in TOTALS_COLUMNS},
        index=index,
    )


def _category_totals(frame: pd.DataFrame, keys: List[str]) -> pd.DataFrame:
    """Sum weights per key and category bucket; one column per bucket."""
    if frame.empty:
        return _empty_totals(keys)

    buckets = frame["category"].map(CATEGORY_COLUMNS).fillna(OTHER_COLUMN)
    totals = (
        frame.assign(bucket=buckets)
        .groupby([*keys, "bucket"])["weight"]
        .sum()
        .unstack("bucket", fill_value=0.0)
        .reindex(columns=_BUCKET_COLUMNS, fill_value=0.0)
        .astype("float64")
    )
    totals.columns.name = None
    totals[TOTAL_COLUMN] = totals[_BUCKET_COLUMNS].sum(axis=1)
    return totals.sort_index()


# ---------------------------------------------------------------------------
# Aggregation functions
# ---------------------------------------------------------------------------


def aggregate_by_year(records: pd.DataFrame) -> pd.DataFrame:
    """Per-year category totals.

    Parameters
    ----------
    records : pd.DataFrame
        Validated record frame.

    Returns
    -------
    pd.DataFrame
        Indexed by ``year`` (ascending) with columns ``landfill``,
        ``recycling``, ``compost``, ``reuse``, ``other`` and ``total``.
        Every year present in ``records`` appears with every column defined;
        ``other`` holds weights of unrecognised categories and ``total`` is
        the row sum of the category columns.
    """
    return _category_totals(records, ["year"])


def year_category_totals(records: pd.DataFrame) -> Dict[int, Dict[str, float]]:
    """Mapping form of the yearly totals: ``{year: {category: weight}}``.

    All four canonical categories are present for every year (``0.0`` when
    absent); unrecognised categories appear under their own name.  Years are
    inserted in ascending order.
    """
    result: Dict[int, Dict[str, float]] = {
        int(year): {category: 0.0 for category in CATEGORIES}
        for year in sorted(records["year"].unique())
    }
    grouped = records.groupby(["year", "category"], sort=False)["weight"].sum()
    for (year, category), weight in grouped.items():
        result[int(year)][category] = float(weight)
    return result


def aggregate_by_month(
    records: pd.DataFrame, year: Optional[int] = None
) -> pd.DataFrame:
    """Per-(year, month) category totals, with the same columns as yearly totals.

    Records whose month is blank or not a recognised month name are left out
    of the monthly view only; they still count in every other aggregate.
    """
    scoped = filter_records(records, year=year)
    months = scoped["month"].map(month_number)
    unknown = int(months.isna().sum())
    if unknown:
        logger.debug("Skipping %d records without a recognised month", unknown)

    scoped = (
        scoped.assign(month=months)
        .dropna(subset=["month"])
        .astype({"month": "int64"})
    )
    return _category_totals(scoped, ["year", "month"])


def aggregate_materials(
    records: pd.DataFrame,
    year: Optional[int] = None,
    category: Optional[str] = None,
) -> pd.DataFrame:
    """Summed weight per distinct (category, material) pair.

    Returns
    -------
    pd.DataFrame
        Columns ``category``, ``material_type`` and ``weight``; one row per
        pair with positive weight, in order of the pair's first appearance.
    """
    scoped = filter_records(records, year=year, category=category)
    if scoped.empty:
        return pd.DataFrame(
            {
                "category": pd.Series(dtype="object"),
                "material_type": pd.Series(dtype="object"),
                "weight": pd.Series(dtype="float64"),
            }
        )

    grouped = scoped.groupby(["category", "material_type"], sort=False, as_index=False)[
        "weight"
    ].sum()
    return grouped[grouped["weight"] > 0].reset_index(drop=True)


def material_matrix(
    records: pd.DataFrame, category: Optional[str] = None
) -> pd.DataFrame:
    """Year x material weight matrix.

    Rows are years ascending, columns are materials in first-appearance
    order, and a material with no records in a year is ``0.0``.
    """
    scoped = filter_records(records, category=category)
    materials = list(dict.fromkeys(scoped["material_type"]))
    if scoped.empty:
        return pd.DataFrame(index=pd.Index([], dtype="int64", name="year"))

    matrix = (
        scoped.groupby(["year", "material_type"], sort=False)["weight"]
        .sum()
        .unstack("material_type", fill_value=0.0)
        .reindex(columns=materials, fill_value=0.0)
        .sort_index()
        .astype("float64")
    )
    matrix.columns.name = None
    return matrix


def rank_materials(
    records: pd.DataFrame,
    year: Optional[int] = None,
    top_n: Optional[int] = None,
    category: Optional[str] = None,
) -> pd.DataFrame:
    """Rank materials by total weight across all categories.

    Parameters
    ----------
    records : pd.DataFrame
        Validated record frame.
    year : Optional[int]
        Restrict to one year; ``None`` ranks over all years.
    top_n : Optional[int]
        Keep only the first ``top_n`` materials; ``None`` keeps all.
    category : Optional[str]
        Only rank materials with weight in this category.  Totals still span
        every category.

    Returns
    -------
    pd.DataFrame
        Columns ``material_type`` and ``total_weight``, descending by total.
        Ties keep first-appearance order.
    """
    if top_n is not None and top_n < 0:
        raise ValueError(f"top_n must be non-negative, got {top_n}")

    pairs = aggregate_materials(records, year=year)
    if pairs.empty:
        return pd.DataFrame(
            {
                "material_type": pd.Series(dtype="object"),
                "total_weight": pd.Series(dtype="float64"),
            }
        )

    totals = pairs.groupby("material_type", sort=False, as_index=False)["weight"].sum()
    if category is not None:
        in_category = pairs.loc[
            pairs["category"] == normalize_category(category), "material_type"
        ]
        totals = totals[totals["material_type"].isin(in_category)]

    ranked = (
        totals.rename(columns={"weight": "total_weight"})
        .sort_values("total_weight", ascending=False, kind="stable")
        .reset_index(drop=True)
    )
    if top_n is not None:
        ranked = ranked.head(top_n)
    return ranked


def available_years(records: pd.DataFrame) -> List[int]:
    """Distinct years present in ``records``, ascending."""
    return sorted(int(year) for year in records["year"].unique())


def latest_year(records: pd.DataFrame) -> Optional[int]:
    """Most recent year in ``records``, or ``None`` when there are no records."""
    years = available_years(records)
    return years[-1] if years else None
