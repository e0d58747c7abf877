"""Tests for the feature classification activity.

Covers:
- Exact per-type counts (2 Points + 1 LineString)
- Counts sum to the number of features
- Absent types are absent from the summary
- Empty input yields an empty summary
- Idempotence
"""

from __future__ import annotations

from kml_viewer.activities.classify_features import summarise_features
from kml_viewer.models.feature import Feature, Geometry, GeometryKind


def _feature(kind: GeometryKind, index: int = 0) -> Feature:
    if kind is GeometryKind.GEOMETRY_COLLECTION:
        geometry = Geometry(kind=kind, geometries=(Geometry(GeometryKind.POINT, [0.0, 0.0]),))
    else:
        geometry = Geometry(kind=kind, coordinates=[])
    return Feature(geometry=geometry, feature_index=index)


class TestSummariseFeatures:
    """Per-type counting."""

    def test_points_and_line(self, two_points_one_line: list[Feature]) -> None:
        assert summarise_features(two_points_one_line) == {"Point": 2, "LineString": 1}

    def test_empty_input(self) -> None:
        assert summarise_features([]) == {}

    def test_counts_sum_to_feature_count(self) -> None:
        kinds = [
            GeometryKind.POLYGON,
            GeometryKind.POINT,
            GeometryKind.MULTI_LINE_STRING,
            GeometryKind.POLYGON,
            GeometryKind.GEOMETRY_COLLECTION,
            GeometryKind.MULTI_POINT,
            GeometryKind.POLYGON,
        ]
        features = [_feature(kind, idx) for idx, kind in enumerate(kinds)]
        summary = summarise_features(features)
        assert sum(summary.values()) == len(features)
        assert summary["Polygon"] == 3
        assert summary["GeometryCollection"] == 1

    def test_absent_types_are_absent(self) -> None:
        summary = summarise_features([_feature(GeometryKind.POLYGON)])
        assert summary == {"Polygon": 1}
        assert "LineString" not in summary

    def test_every_kind_is_counted(self) -> None:
        features = [_feature(kind, idx) for idx, kind in enumerate(GeometryKind)]
        summary = summarise_features(features)
        assert summary == {kind.label: 1 for kind in GeometryKind}

    def test_order_of_first_appearance(self) -> None:
        features = [
            _feature(GeometryKind.LINE_STRING),
            _feature(GeometryKind.POINT),
            _feature(GeometryKind.LINE_STRING),
        ]
        assert list(summarise_features(features)) == ["LineString", "Point"]

    def test_idempotent(self, two_points_one_line: list[Feature]) -> None:
        assert summarise_features(two_points_one_line) == summarise_features(two_points_one_line)

    def test_accepts_generator(self, two_points_one_line: list[Feature]) -> None:
        assert summarise_features(f for f in two_points_one_line) == {"Point": 2, "LineString": 1}
