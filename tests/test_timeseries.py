"""
tests/test_timeseries.py — Unit tests for the yearly and monthly series.

Requires: pytest, pandas
"""

from __future__ import annotations

import json

import pytest

from campus_waste.loader import empty_records, parse_rows
from campus_waste.timeseries import build_monthly_series, build_time_series

from .sample_data import VALID_WEIGHTS, make_row

YEAR_TOTAL_KEYS = {"year", "landfill", "recycling", "compost", "reuse", "other", "total"}


class TestBuildTimeSeries:
    def test_one_entry_per_year_ascending(self, records):
        series = build_time_series(records)
        assert [entry["year"] for entry in series] == [2023, 2024]

    def test_entry_keys(self, records):
        for entry in build_time_series(records):
            assert set(entry) == YEAR_TOTAL_KEYS

    def test_values(self, records):
        by_year = {entry["year"]: entry for entry in build_time_series(records)}
        assert by_year[2024]["recycling"] == pytest.approx(1500.0)
        assert by_year[2024]["compost"] == 0.0
        assert by_year[2023]["reuse"] == 0.0

    def test_round_trip_sum(self, records):
        for entry in build_time_series(records):
            assert entry["total"] == pytest.approx(VALID_WEIGHTS[entry["year"]])
            parts = sum(entry[key] for key in ("landfill", "recycling", "compost", "reuse"))
            assert entry["total"] == pytest.approx(parts)

    def test_gaps_not_synthesised(self):
        recs = parse_rows(
            [
                make_row(2020, "Landfill", "Glass", "1"),
                make_row(2023, "Compost", "Food Waste", "2"),
            ]
        )
        assert [entry["year"] for entry in build_time_series(recs)] == [2020, 2023]

    def test_plain_python_types(self, records):
        series = build_time_series(records)
        assert type(series[0]["year"]) is int
        assert type(series[0]["total"]) is float
        json.dumps(series)

    def test_idempotent(self, records):
        assert build_time_series(records) == build_time_series(records)

    def test_empty(self):
        assert build_time_series(empty_records()) == []


class TestBuildMonthlySeries:
    def test_months_for_year(self, records):
        series = build_monthly_series(records, year=2024)
        assert [(entry["year"], entry["month"]) for entry in series] == [
            (2024, 1), (2024, 2), (2024, 3),
        ]
        assert series[1]["landfill"] == pytest.approx(2250.0)
        assert set(series[0]) == YEAR_TOTAL_KEYS | {"month"}

    def test_all_years(self, records):
        series = build_monthly_series(records)
        assert len(series) == 6
        assert sum(entry["total"] for entry in series) == pytest.approx(
            sum(VALID_WEIGHTS.values())
        )

    def test_empty(self):
        assert build_monthly_series(empty_records()) == []
