"""Tests for monitoring-sheet normalization."""

from __future__ import annotations

from datetime import date

import pytest

from batcamp.exceptions import DataQualityError
from batcamp.monitoring import (
    exclude_absent_species,
    load_monitoring_records,
    read_monitoring_rows,
    survey_totals,
)


def test_reshapes_species_columns(config, monitoring_frame) -> None:
    frame = monitoring_frame([["05/12/2023", "Maclean", 120, 30, 12, "Y"]])
    records = read_monitoring_rows(frame, config)
    assert [(r.species, r.count) for r in records] == [("GHFF", 120), ("LRFF", 30)]
    assert all(r.trees_occupied == 12 for r in records)
    assert records[0].row_number == 2
    assert records[0].date == date(2023, 12, 5)


def test_range_string_normalized_before_aggregation(config, monitoring_frame) -> None:
    frame = monitoring_frame([["10/01/2024", "Maclean", "800-1000", 0, 45, "Y"]])
    data = load_monitoring_records(frame, config)
    ghff = [r for r in data.records if r.species == "GHFF"]
    assert ghff[0].count == 900


def test_unparseable_count_identifies_row(config, monitoring_frame) -> None:
    frame = monitoring_frame(
        [
            ["05/12/2023", "Maclean", 120, 0, 12, "Y"],
            ["06/12/2023", "Maclean", "heaps", 0, 12, "Y"],
        ]
    )
    with pytest.raises(DataQualityError) as exc:
        read_monitoring_rows(frame, config)
    assert exc.value.row == 3
    assert exc.value.column == "ghff"


def test_filters_site_include_and_cutoff(config, monitoring_frame) -> None:
    frame = monitoring_frame(
        [
            ["05/12/2023", " maclean ", 100, 0, 10, "Y"],
            ["05/12/2023", "Grafton", 100, 0, 10, "Y"],
            ["05/12/2023", "Maclean", "junk", 0, 10, "N"],
            ["05/12/1998", "Maclean", 100, 0, 10, "Y"],
        ]
    )
    records = read_monitoring_rows(frame, config)
    assert {r.row_number for r in records} == {2}


def test_window_is_half_open(config, monitoring_frame) -> None:
    frame = monitoring_frame(
        [
            ["01/12/2023", "Maclean", 1, 0, 1, "Y"],
            ["30/11/2024", "Maclean", 2, 0, 1, "Y"],
            ["01/12/2024", "Maclean", 3, 0, 1, "Y"],
            ["30/11/2023", "Maclean", 4, 0, 1, "Y"],
        ]
    )
    data = load_monitoring_records(frame, config)
    assert sorted({r.row_number for r in data.records}) == [2, 3]
    assert len({r.row_number for r in data.history}) == 4


def test_missing_column_is_reported(config, monitoring_frame) -> None:
    frame = monitoring_frame([["05/12/2023", "Maclean", 1, 0, 1, "Y"]]).drop(columns=["lrff"])
    with pytest.raises(DataQualityError) as exc:
        read_monitoring_rows(frame, config)
    assert exc.value.column == "lrff"


def test_exclude_absent_species_is_configurable(config, monitoring_frame) -> None:
    frame = monitoring_frame([["05/12/2023", "Maclean", 100, 0, 10, "Y"]])

    kept = load_monitoring_records(frame, config)
    assert {r.species for r in kept.records} == {"GHFF", "LRFF"}
    assert kept.excluded_species == []

    policy = config.with_overrides(exclude_absent=True)
    dropped = load_monitoring_records(frame, policy)
    assert {r.species for r in dropped.records} == {"GHFF"}
    assert dropped.excluded_species == ["LRFF"]


def test_exclude_absent_species_keeps_present(config, monitoring_frame) -> None:
    frame = monitoring_frame([["05/12/2023", "Maclean", 0, 5, 10, "Y"]])
    records = read_monitoring_rows(frame, config)
    kept, absent = exclude_absent_species(records)
    assert absent == ["GHFF"]
    assert [r.species for r in kept] == ["LRFF"]


def test_survey_totals_and_ratio(config, monitoring_frame, december_rows) -> None:
    frame = monitoring_frame(december_rows + [["20/12/2023", "Maclean", 40, 10, 0, "Y"]])
    totals = survey_totals(read_monitoring_rows(frame, config))
    assert list(totals["total"]) == [100, 200, 300, 50]
    assert list(totals["ratio"]) == [10.0, 10.0, 10.0, 0.0]
    assert not totals["ratio"].isna().any()


def test_zero_animals_and_zero_trees_ratio_is_zero(config, monitoring_frame) -> None:
    frame = monitoring_frame([["20/12/2023", "Maclean", 0, 0, "", "Y"]])
    totals = survey_totals(read_monitoring_rows(frame, config))
    assert totals.loc[0, "trees_occupied"] == 0
    assert totals.loc[0, "ratio"] == 0.0


def test_survey_totals_empty() -> None:
    totals = survey_totals([])
    assert totals.empty
    assert "ratio" in totals.columns


def test_empty_camp_stays_surveyed_when_species_excluded(config, monitoring_frame) -> None:
    frame = monitoring_frame(
        [
            ["05/12/2023", "Maclean", 0, 0, 0, "Y"],
            ["10/01/2024", "Maclean", 0, 0, 3, "Y"],
        ]
    )
    data = load_monitoring_records(frame, config.with_overrides(exclude_absent=True))
    assert data.excluded_species == ["GHFF", "LRFF"]
    assert data.records == []
    assert {r.row_number for r in data.surveyed} == {2, 3}

    totals = survey_totals(data.surveyed)
    assert list(totals["total"]) == [0, 0]
    assert list(totals["trees_occupied"]) == [0, 3]
