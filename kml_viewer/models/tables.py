"""Pydantic models for the viewer output.

A ``ViewerSnapshot`` is computed afresh for every loaded document and
replaces the previous one wholesale: there is no merging between loads.

The table models carry the column captions and the placeholder row the
presentation layer shows when there is nothing to list, so an empty
document renders "No Data Available" instead of an empty table.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from kml_viewer.core.constants import (
    DETAIL_COLUMNS,
    DETAIL_PLACEHOLDER,
    SUMMARY_COLUMNS,
    SUMMARY_PLACEHOLDER,
)


class DetailRecord(BaseModel):
    """Length of one line-like path.

    Attributes:
        kind: Geometry type label (``"LineString"`` or ``"MultiLineString"``).
        length_km: Great-circle path length in kilometres.
        length: ``length_km`` rounded to two decimals with a ``" km"`` suffix.
        feature_index: Position of the owning feature in the collection.
        part_index: Part number within a MultiLineString; ``None`` for a
            LineString.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    length_km: float
    length: str
    feature_index: int = 0
    part_index: int | None = None


class SummaryTable(BaseModel):
    """Element-type / count table."""

    model_config = ConfigDict(frozen=True)

    columns: tuple[str, str] = SUMMARY_COLUMNS
    counts: dict[str, int] = Field(default_factory=dict)

    def rows(self) -> list[list[str]]:
        if not self.counts:
            return [[SUMMARY_PLACEHOLDER]]
        return [[kind, str(count)] for kind, count in self.counts.items()]


class DetailTable(BaseModel):
    """Element-type / total-length table."""

    model_config = ConfigDict(frozen=True)

    columns: tuple[str, str] = DETAIL_COLUMNS
    records: list[DetailRecord] = Field(default_factory=list)

    def rows(self) -> list[list[str]]:
        if not self.records:
            return [[DETAIL_PLACEHOLDER]]
        return [[record.kind, record.length] for record in self.records]


class ViewerSnapshot(BaseModel):
    """Everything the presentation layer needs for one loaded document.

    Attributes:
        summary: Geometry type label -> number of features of that type.
        details: One record per line path, in feature order.
        geojson: The loaded feature collection, unmodified, for the map.
        bbox: ``[min_lon, min_lat, max_lon, max_lat]`` over all
            geometries, or ``None`` when the collection is empty.
    """

    model_config = ConfigDict(frozen=True)

    summary: dict[str, int] = Field(default_factory=dict)
    details: list[DetailRecord] = Field(default_factory=list)
    geojson: dict[str, Any] = Field(
        default_factory=lambda: {"type": "FeatureCollection", "features": []}
    )
    bbox: list[float] | None = None

    @property
    def summary_table(self) -> SummaryTable:
        return SummaryTable(counts=self.summary)

    @property
    def detail_table(self) -> DetailTable:
        return DetailTable(records=self.details)

    def to_response(self) -> dict[str, Any]:
        """Serialise for the HTTP layer, including rendered table rows."""
        payload = self.model_dump(mode="json")
        payload["summary_table"] = {
            "columns": list(SUMMARY_COLUMNS),
            "rows": self.summary_table.rows(),
        }
        payload["detail_table"] = {
            "columns": list(DETAIL_COLUMNS),
            "rows": self.detail_table.rows(),
        }
        return payload
