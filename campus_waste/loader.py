"""Load the campus waste CSV and parse it into a validated record frame.

The loader is the only boundary between the raw source and the rest of the
pipeline.  It reads the source (a local path, an ``http(s)`` URL or an
in-memory sequence of row mappings), parses each row, canonicalises the
category spelling and drops rows that fail validation:

* the year must be written as plain digits (``2024`` or ``2024.0``),
* the category must not be blank,
* the weight, once thousands separators are stripped, must be positive.

Every other stage receives the resulting *record frame* (a DataFrame with the
columns in :data:`config.RECORD_COLUMNS`) as an explicit argument.  If the
source cannot be read at all, :func:`load_records` logs the failure and
returns an empty record frame rather than raising, so callers treat "no data"
as a normal state.
"""

from __future__ import annotations

import logging
import math
from io import StringIO
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional

import pandas as pd
import requests

from .config import (
    CATEGORIES,
    CATEGORY_ALIASES,
    DATA_SOURCE,
    DEFAULT_SEP,
    HTTP_TIMEOUT,
    RECORD_COLUMNS,
    SOURCE_COLUMNS,
)

logger = logging.getLogger(__name__)

_RECORD_DTYPES: Dict[str, str] = {
    column: "object" for column in RECORD_COLUMNS
}
_RECORD_DTYPES.update({"year": "int64", "weight": "float64"})

_YEAR_PATTERN: str = r"\d{1,9}(?:\.0*)?"

_TEXT_COLUMNS: List[str] = [
    column for column in RECORD_COLUMNS if column not in ("year", "weight", "category")
]


class WasteRecord(NamedTuple):
    """One validated row of source waste data."""

    year: int
    month: str
    day: str
    category: str
    material_type: str
    weight: float
    vendor: str
    date_updated: str
    cost: str


# ---------------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------------


def parse_weight(value: Any) -> float:
    """Parse a localized numeral such as ``"1,250.5"`` into a float.

    Blank, non-numeric and non-finite values parse as ``0.0``, which the
    validity rule then excludes.
    """
    if value is None:
        return 0.0
    text = str(value).replace(",", "").strip()
    if not text:
        return 0.0
    try:
        weight = float(text)
    except ValueError:
        return 0.0
    return weight if math.isfinite(weight) else 0.0


def normalize_category(value: Any) -> str:
    """Return the canonical category name for a raw source value.

    Known names are matched case-insensitively (``"Recycle"`` and
    ``"Recycling"`` both become ``"Recycling"``); anything else is returned
    stripped but otherwise unchanged.
    """
    text = "" if value is None else str(value).strip()
    return CATEGORY_ALIASES.get(text.lower(), text)


# ---------------------------------------------------------------------------
# Record frame helpers
# ---------------------------------------------------------------------------


def empty_records() -> pd.DataFrame:
    """Return a record frame with the expected columns and no rows."""
    return pd.DataFrame(
        {column: pd.Series(dtype=dtype) for column, dtype in _RECORD_DTYPES.items()}
    )


def to_records(records: pd.DataFrame) -> List[WasteRecord]:
    """Convert a record frame into a list of immutable :class:`WasteRecord`."""
    return [
        WasteRecord(
            year=int(row.year),
            month=str(row.month),
            day=str(row.day),
            category=str(row.category),
            material_type=str(row.material_type),
            weight=float(row.weight),
            vendor=str(row.vendor),
            date_updated=str(row.date_updated),
            cost=str(row.cost),
        )
        for row in records[RECORD_COLUMNS].itertuples(index=False)
    ]


def prepare_records(raw: pd.DataFrame) -> pd.DataFrame:
    """Parse and validate raw source rows.

    Parameters
    ----------
    raw : pd.DataFrame
        Raw rows keyed by the source headers (``Year``, ``Category``,
        ``Weight (lbs)``, ...).  Missing headers are treated as blank
        columns; extra headers are ignored.

    Returns
    -------
    pd.DataFrame
        A new record frame holding the valid rows in source order, with
        ``year`` as ``int64``, ``weight`` as ``float64`` and every other
        column as a stripped string.
    """
    df = raw.rename(columns=lambda col: str(col).strip())
    duplicated = df.columns.duplicated()
    if duplicated.any():
        logger.warning(
            "Ignoring duplicate columns after header cleanup: %s",
            sorted(set(df.columns[duplicated])),
        )
        df = df.loc[:, ~duplicated]
    df = df.reindex(columns=list(SOURCE_COLUMNS)).astype(object).fillna("").astype(str)

    # Plain digits, optionally with a zero fraction ("2024", "2024.0")
    year_text = df["Year"].str.strip()
    integral = year_text.str.fullmatch(_YEAR_PATTERN)
    years = pd.to_numeric(year_text.where(integral), errors="coerce")
    categories = df["Category"].map(normalize_category)
    weights = df["Weight (lbs)"].map(parse_weight).astype("float64")

    valid = years.notna() & (categories != "") & (weights > 0)

    records = df.loc[valid].rename(columns=SOURCE_COLUMNS)
    for column in _TEXT_COLUMNS:
        records[column] = records[column].str.strip()
    records["year"] = years[valid].astype("int64")
    records["category"] = categories[valid]
    records["weight"] = weights[valid]
    records = records[RECORD_COLUMNS].reset_index(drop=True).astype(_RECORD_DTYPES)

    dropped = len(df) - len(records)
    logger.info(
        "Parsed %d waste records (%d invalid rows dropped)", len(records), dropped
    )

    unknown = sorted(set(records["category"]) - set(CATEGORIES))
    if unknown:
        logger.warning("Unrecognised categories passed through unchanged: %s", unknown)

    return records


def parse_rows(rows: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    """Parse an ordered sequence of header -> value mappings into records."""
    raw = pd.DataFrame.from_records([dict(row) for row in rows])
    return prepare_records(raw)


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------


def _skip_bad_line(fields: List[str]) -> None:
    """Drop a CSV line with more fields than the header."""
    logger.warning("Skipping malformed CSV line with %d fields: %s", len(fields), fields)
    return None


def _read_csv(buffer: Any, sep: str) -> pd.DataFrame:
    # Callable on_bad_lines needs the python engine
    return pd.read_csv(
        buffer,
        sep=sep,
        dtype=str,
        keep_default_na=False,
        engine="python",
        on_bad_lines=_skip_bad_line,
    )


def load_raw(source: str | Path, sep: str = DEFAULT_SEP) -> pd.DataFrame:
    """Read the waste CSV with every cell kept as a string.

    Lines with more fields than the header are logged and skipped; the rest
    of the file still loads.

    Parameters
    ----------
    source : str or Path
        Local path or ``http(s)`` URL of the CSV.
    sep : str, optional
        Column delimiter; defaults to ``","``.

    Returns
    -------
    pd.DataFrame
        The raw rows, blank cells as empty strings.
    """
    source_str = str(source)
    if source_str.lower().startswith(("http://", "https://")):
        response = requests.get(source_str, timeout=HTTP_TIMEOUT)
        response.raise_for_status()
        return _read_csv(StringIO(response.text), sep)

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Waste data not found at {path}")
    return _read_csv(path, sep)


def load_records(
    source: Optional[str | Path] = None, sep: str = DEFAULT_SEP
) -> pd.DataFrame:
    """Load and validate the waste records.

    Parameters
    ----------
    source : str or Path, optional
        Location of the CSV.  Defaults to ``config.DATA_SOURCE``.
    sep : str, optional
        Column delimiter; defaults to ``","``.

    Returns
    -------
    pd.DataFrame
        The record frame.  Empty (but with the expected columns) when the
        source cannot be read or parsed.
    """
    source = DATA_SOURCE if source is None else source
    logger.info("Loading waste data from %s", source)
    try:
        raw = load_raw(source, sep=sep)
        return prepare_records(raw)
    except Exception:
        logger.exception("Could not load waste data from %s; continuing with no data", source)
        return empty_records()
