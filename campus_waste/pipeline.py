"""Pipeline driver: build every dashboard structure from one record set.

:func:`build_payload` takes an explicit record frame and a selected year and
returns all the structures the dashboard views consume.  :func:`run_pipeline`
loads the source first.  Nothing is cached between calls; changing the
selected year means calling :func:`build_payload` again.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

from .aggregate import available_years, latest_year
from .config import DEFAULT_SEP, DEFAULT_TOP_MATERIALS
from .distribution import build_material_distribution
from .graph import build_flow_graph, build_top_flow_graph
from .hierarchy import build_composition
from .loader import load_records
from .streams import build_stream_layout
from .timeseries import build_monthly_series, build_time_series

logger = logging.getLogger(__name__)


def build_payload(
    records: pd.DataFrame,
    *,
    year: Optional[int] = None,
    top_n: int = DEFAULT_TOP_MATERIALS,
) -> Dict[str, Any]:
    """Compute every view structure for one selected year.

    Parameters
    ----------
    records : pd.DataFrame
        Validated record frame (see :func:`loader.load_records`).
    year : Optional[int]
        Year for the per-year views (composition, graphs, distribution,
        monthly series).  Defaults to the most recent year in ``records``.
    top_n : int
        Number of materials kept by the top-N graph and the distribution.

    Returns
    -------
    Dict[str, Any]
        Keys ``years``, ``selected_year``, ``time_series``, ``monthly``,
        ``composition``, ``flow_graph``, ``top_flow_graph``,
        ``distribution`` and ``streams``.  With no records,
        ``selected_year`` is ``None`` and every structure is empty but
        well formed.
    """
    selected = latest_year(records) if year is None else int(year)

    if records.empty:
        logger.warning("No waste records available; returning empty payload")

    return {
        "years": available_years(records),
        "selected_year": selected,
        "time_series": build_time_series(records),
        "monthly": build_monthly_series(records, year=selected),
        "composition": build_composition(records, year=selected),
        "flow_graph": build_flow_graph(records, year=selected),
        "top_flow_graph": build_top_flow_graph(records, year=selected, top_n=top_n),
        "distribution": build_material_distribution(records, year=selected, top_n=top_n),
        "streams": build_stream_layout(records),
    }


def run_pipeline(
    source: Optional[str | Path] = None,
    *,
    sep: str = DEFAULT_SEP,
    year: Optional[int] = None,
    top_n: int = DEFAULT_TOP_MATERIALS,
) -> Dict[str, Any]:
    """Load the waste data and build the dashboard payload.

    A source that cannot be read produces the empty payload described in
    :func:`build_payload`; this function does not raise for data errors.
    """
    records = load_records(source, sep=sep)
    payload = build_payload(records, year=year, top_n=top_n)
    logger.info(
        "Pipeline complete: %d records, years %s, selected year %s",
        len(records),
        payload["years"],
        payload["selected_year"],
    )
    return payload
