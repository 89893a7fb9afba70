"""Stacked stream layout of material weights per year.

The layout follows d3's ``stack`` generator: each material becomes a layer
with a ``[y0, y1]`` band per year.  The stacking order and baseline offset
use the same algorithms as d3 (``stackOrder*`` / ``stackOffset*``), so a
renderer can draw the bands directly without restacking.

Orders
------
``none``        materials in first-appearance order
``ascending``   smallest total at the bottom
``descending``  largest total at the bottom
``inside-out``  layers peaking earliest in the middle, alternating outwards

Offsets
-------
``none``        zero baseline
``silhouette``  centred around zero
``wiggle``      minimises weighted slope changes (streamgraph)
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd

from .aggregate import material_matrix
from .config import DEFAULT_STACK_OFFSET, DEFAULT_STACK_ORDER, STACK_OFFSETS, STACK_ORDERS

Bands = List[List[float]]


# ---------------------------------------------------------------------------
# Stack orders
# ---------------------------------------------------------------------------


def _order_none(values: List[List[float]]) -> List[int]:
    return list(range(len(values)))


def _order_ascending(values: List[List[float]]) -> List[int]:
    sums = [sum(row) for row in values]
    return sorted(range(len(values)), key=lambda i: sums[i])


def _order_descending(values: List[List[float]]) -> List[int]:
    return _order_ascending(values)[::-1]


def _peak(row: List[float]) -> int:
    """Index of the first maximum."""
    if not row:
        return 0
    return max(range(len(row)), key=row.__getitem__)


def _order_inside_out(values: List[List[float]]) -> List[int]:
    sums = [sum(row) for row in values]
    peaks = [_peak(row) for row in values]
    by_appearance = sorted(range(len(values)), key=lambda i: peaks[i])

    top = bottom = 0.0
    tops: List[int] = []
    bottoms: List[int] = []
    for i in by_appearance:
        if top < bottom:
            top += sums[i]
            tops.append(i)
        else:
            bottom += sums[i]
            bottoms.append(i)
    return bottoms[::-1] + tops


_ORDERS: Dict[str, Callable[[List[List[float]]], List[int]]] = {
    "none": _order_none,
    "ascending": _order_ascending,
    "descending": _order_descending,
    "inside-out": _order_inside_out,
}


# ---------------------------------------------------------------------------
# Stack offsets
# ---------------------------------------------------------------------------
# ``bands[i][j]`` starts as ``[0, value]``; an offset sets the baseline of the
# first layer in ``order`` and then stacks the rest on top of it.


def _offset_none(bands: List[Bands], order: List[int]) -> None:
    for below, layer in zip(order, order[1:]):
        for j, band in enumerate(bands[layer]):
            base = bands[below][j][1]
            band[0] = base
            band[1] += base


def _offset_silhouette(bands: List[Bands], order: List[int]) -> None:
    if not order:
        return
    first = bands[order[0]]
    for j, band in enumerate(first):
        total = sum(bands[i][j][1] for i in range(len(bands)))
        band[0] = -total / 2
        band[1] += band[0]
    _offset_none(bands, order)


def _offset_wiggle(bands: List[Bands], order: List[int]) -> None:
    if not order or not bands[order[0]]:
        return
    first = bands[order[0]]
    m = len(first)
    y = 0.0
    for j in range(1, m):
        weighted = 0.0
        slope = 0.0
        for position, i in enumerate(order):
            current = bands[i][j][1]
            change = (current - bands[i][j - 1][1]) / 2
            for k in order[:position]:
                change += bands[k][j][1] - bands[k][j - 1][1]
            weighted += current
            slope += change * current
        first[j - 1][0] = y
        first[j - 1][1] += y
        if weighted:
            y -= slope / weighted
    first[m - 1][0] = y
    first[m - 1][1] += y
    _offset_none(bands, order)


_OFFSETS: Dict[str, Callable[[List[Bands], List[int]], None]] = {
    "none": _offset_none,
    "silhouette": _offset_silhouette,
    "wiggle": _offset_wiggle,
}


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


def stack(
    values: List[List[float]], order: str = "none", offset: str = "none"
) -> Tuple[List[int], List[Bands]]:
    """Stack ``values[layer][point]`` and return ``(order, bands)``."""
    if order not in STACK_ORDERS:
        raise ValueError(f"Unknown stack order {order!r}; expected one of {STACK_ORDERS}")
    if offset not in STACK_OFFSETS:
        raise ValueError(f"Unknown stack offset {offset!r}; expected one of {STACK_OFFSETS}")

    bands = [[[0.0, float(value)] for value in row] for row in values]
    layer_order = _ORDERS[order](values)
    _OFFSETS[offset](bands, layer_order)
    return layer_order, bands


def build_stream_layout(
    records: pd.DataFrame,
    category: Optional[str] = None,
    order: str = DEFAULT_STACK_ORDER,
    offset: str = DEFAULT_STACK_OFFSET,
) -> Dict[str, Any]:
    """Stack per-year material weights into stream layers.

    Parameters
    ----------
    records : pd.DataFrame
        Validated record frame.
    category : Optional[str]
        Only records in this category contribute.
    order : str
        One of ``none``, ``ascending``, ``descending``, ``inside-out``.
    offset : str
        One of ``none``, ``silhouette``, ``wiggle``.

    Returns
    -------
    Dict[str, Any]
        ``{"years", "keys", "order", "offset", "layers"}``.  ``keys`` lists
        materials in first-appearance order, ``order`` the same materials
        bottom to top, and ``layers`` follows ``order`` with one
        ``{"year", "value", "y0", "y1"}`` point per year.
    """
    matrix = material_matrix(records, category=category)
    years = [int(year) for year in matrix.index]
    keys = [str(material) for material in matrix.columns]
    values = [matrix[material].tolist() for material in matrix.columns]

    layer_order, bands = stack(values, order=order, offset=offset)
    layers = [
        {
            "key": keys[i],
            "points": [
                {"year": year, "value": float(value), "y0": band[0], "y1": band[1]}
                for year, value, band in zip(years, values[i], bands[i])
            ],
        }
        for i in layer_order
    ]
    return {
        "years": years,
        "keys": keys,
        "order": [keys[i] for i in layer_order],
        "offset": offset,
        "layers": layers,
    }
