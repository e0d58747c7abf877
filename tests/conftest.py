"""Shared pytest fixtures for the KML Viewer test suite."""

from pathlib import Path

import pytest

from kml_viewer.models.feature import Feature, Geometry, GeometryKind

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"
EDGE_CASES_DIR = DATA_DIR / "edge_cases"


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


@pytest.fixture()
def edge_cases_dir() -> Path:
    """Return the path to the edge-cases test data directory."""
    return EDGE_CASES_DIR


# ---------------------------------------------------------------------------
# Sample KML file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def points_and_line_kml(data_dir: Path) -> Path:
    """Path to a KML with 2 Points and a 1-degree meridian LineString."""
    return data_dir / "01_points_and_line.kml"


@pytest.fixture()
def multilinestring_kml(data_dir: Path) -> Path:
    """Path to a KML with one MultiGeometry of two LineStrings."""
    return data_dir / "02_multilinestring_trail.kml"


@pytest.fixture()
def nested_folders_kml(data_dir: Path) -> Path:
    """Path to a KML with nested Folders, a holed Polygon and a mixed MultiGeometry."""
    return data_dir / "03_nested_folders_mixed.kml"


# ---------------------------------------------------------------------------
# Edge-case KML file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def not_xml_kml(edge_cases_dir: Path) -> Path:
    """Path to a file that is not valid XML."""
    return edge_cases_dir / "11_malformed_not_xml.kml"


@pytest.fixture()
def not_kml_root_kml(edge_cases_dir: Path) -> Path:
    """Path to well-formed XML whose root is not <kml>."""
    return edge_cases_dir / "12_not_kml_root.kml"


@pytest.fixture()
def empty_kml(edge_cases_dir: Path) -> Path:
    """Path to a valid KML with no features."""
    return edge_cases_dir / "13_empty_no_features.kml"


@pytest.fixture()
def invalid_coords_kml(edge_cases_dir: Path) -> Path:
    """Path to a KML with one out-of-range Point and one valid LineString."""
    return edge_cases_dir / "16_invalid_coordinates.kml"


@pytest.fixture()
def no_geometry_kml(edge_cases_dir: Path) -> Path:
    """Path to a KML with a geometry-less Placemark and a one-vertex path."""
    return edge_cases_dir / "17_placemark_without_geometry.kml"


# ---------------------------------------------------------------------------
# Feature builders
# ---------------------------------------------------------------------------


def make_feature(
    kind: GeometryKind,
    coordinates: list | None = None,
    *,
    geometries: tuple[Geometry, ...] = (),
    feature_index: int = 0,
    name: str = "",
) -> Feature:
    """Build a Feature with the given geometry."""
    return Feature(
        geometry=Geometry(kind=kind, coordinates=coordinates or [], geometries=geometries),
        properties={"name": name} if name else {},
        feature_index=feature_index,
    )


@pytest.fixture()
def two_points_one_line() -> list[Feature]:
    """2 Points and a LineString ``[[0, 0], [0, 1]]``."""
    return [
        make_feature(GeometryKind.POINT, [0.0, 0.0], feature_index=0),
        make_feature(GeometryKind.POINT, [0.0, 1.0], feature_index=1),
        make_feature(GeometryKind.LINE_STRING, [[0.0, 0.0], [0.0, 1.0]], feature_index=2),
    ]
