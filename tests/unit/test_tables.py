"""Tests for the presentation table models and snapshot serialisation.

Covers:
- Column captions
- Placeholder rows for empty summary/detail tables
- Rendered rows for populated tables
- ViewerSnapshot.to_response payload keys
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from kml_viewer.models.tables import DetailRecord, DetailTable, SummaryTable, ViewerSnapshot


def _record(length_km: float = 111.19492664, part_index: int | None = None) -> DetailRecord:
    return DetailRecord(
        kind="LineString" if part_index is None else "MultiLineString",
        length_km=length_km,
        length=f"{length_km:.2f} km",
        part_index=part_index,
    )


class TestSummaryTable:
    def test_columns(self) -> None:
        assert SummaryTable().columns == ("Element Type", "Count")

    def test_placeholder_when_empty(self) -> None:
        assert SummaryTable().rows() == [["No Data Available"]]

    def test_rows(self) -> None:
        table = SummaryTable(counts={"Point": 2, "LineString": 1})
        assert table.rows() == [["Point", "2"], ["LineString", "1"]]


class TestDetailTable:
    def test_columns(self) -> None:
        assert DetailTable().columns == ("Element Type", "Total Length (km)")

    def test_placeholder_when_empty(self) -> None:
        assert DetailTable().rows() == [["No Line Data Available"]]

    def test_rows(self) -> None:
        table = DetailTable(records=[_record(), _record(5.0, part_index=0)])
        assert table.rows() == [["LineString", "111.19 km"], ["MultiLineString", "5.00 km"]]


class TestViewerSnapshot:
    def test_defaults_are_empty(self) -> None:
        snapshot = ViewerSnapshot()
        assert snapshot.summary == {}
        assert snapshot.details == []
        assert snapshot.geojson == {"type": "FeatureCollection", "features": []}
        assert snapshot.bbox is None

    def test_frozen(self) -> None:
        snapshot = ViewerSnapshot()
        with pytest.raises(PydanticValidationError):
            snapshot.summary = {"Point": 1}  # type: ignore[misc]

    def test_to_response_empty(self) -> None:
        response = ViewerSnapshot().to_response()
        assert set(response) == {
            "summary",
            "details",
            "geojson",
            "bbox",
            "summary_table",
            "detail_table",
        }
        assert response["summary_table"]["rows"] == [["No Data Available"]]
        assert response["detail_table"]["rows"] == [["No Line Data Available"]]

    def test_to_response_populated(self) -> None:
        snapshot = ViewerSnapshot(
            summary={"LineString": 1},
            details=[_record()],
            bbox=[0.0, 0.0, 0.0, 1.0],
        )
        response = snapshot.to_response()
        assert response["summary"] == {"LineString": 1}
        assert response["details"][0]["length"] == "111.19 km"
        assert response["details"][0]["part_index"] is None
        assert response["detail_table"]["columns"] == ["Element Type", "Total Length (km)"]
        assert response["bbox"] == [0.0, 0.0, 0.0, 1.0]
