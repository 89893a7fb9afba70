"""Yearly and monthly category totals for the time-series view."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd

from .aggregate import aggregate_by_month, aggregate_by_year
from .config import TOTALS_COLUMNS


def _rows(totals: pd.DataFrame) -> List[Dict[str, Any]]:
    """Flatten an aggregate frame into plain dicts (int keys, float totals)."""
    rows: List[Dict[str, Any]] = []
    for keys, values in zip(totals.index, totals[TOTALS_COLUMNS].itertuples(index=False)):
        keys = keys if isinstance(keys, tuple) else (keys,)
        row: Dict[str, Any] = {
            name: int(key) for name, key in zip(totals.index.names, keys)
        }
        row.update({column: float(value) for column, value in zip(TOTALS_COLUMNS, values)})
        rows.append(row)
    return rows


def build_time_series(records: pd.DataFrame) -> List[Dict[str, Any]]:
    """One ``YearTotal`` per year present, ascending by year.

    Years without records are not synthesised.  Each entry has ``year``,
    ``landfill``, ``recycling``, ``compost``, ``reuse``, ``other`` and
    ``total``.
    """
    return _rows(aggregate_by_year(records))


def build_monthly_series(
    records: pd.DataFrame, year: Optional[int] = None
) -> List[Dict[str, Any]]:
    """Per-month totals ascending by (year, month); adds a ``month`` (1-12) key."""
    return _rows(aggregate_by_month(records, year=year))
