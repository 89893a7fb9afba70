"""Shared fixtures: the sample raw rows and the record frame parsed from them."""

from __future__ import annotations

import pandas as pd
import pytest

from campus_waste.loader import parse_rows

from .sample_data import SAMPLE_ROWS


@pytest.fixture
def raw_rows() -> list[dict]:
    return [dict(row) for row in SAMPLE_ROWS]


@pytest.fixture
def records(raw_rows) -> pd.DataFrame:
    return parse_rows(raw_rows)
