import math

import numpy as np
import pytest

from plasmidmap.geometry import CircularFrame, CircularGeometry, Point, format_number, linear_track_y
from plasmidmap.model import Feature


@pytest.fixture
def geometry() -> CircularGeometry:
    return CircularGeometry()


def test_position_zero_points_to_twelve_o_clock(geometry: CircularGeometry) -> None:
    assert geometry.position_to_angle(0, 100) == pytest.approx(-math.pi / 2)
    assert geometry.position_to_angle(25, 100) == pytest.approx(0.0)
    top = geometry.position_to_point(0, 100)
    assert top.x == pytest.approx(300.0)
    assert top.y == pytest.approx(100.0)


def test_zero_length_is_safe(geometry: CircularGeometry) -> None:
    assert geometry.position_to_angle(10, 0) == pytest.approx(-math.pi / 2)
    assert geometry.point_to_position(Point(500, 300), 0) == 0
    assert np.allclose(geometry.positions_to_angles([0, 5], 0), -math.pi / 2)


def test_vectorized_angles_match_scalar(geometry: CircularGeometry) -> None:
    positions = [0, 10, 333, 999]
    expected = [geometry.position_to_angle(p, 1000) for p in positions]
    assert np.allclose(geometry.positions_to_angles(positions, 1000), expected)


@pytest.mark.parametrize(
    "point, expected",
    [
        (Point(300, 100), 0),
        (Point(500, 300), 250),
        (Point(300, 500), 500),
        (Point(100, 300), 750),
    ],
)
def test_point_to_position_quadrants(geometry: CircularGeometry, point: Point, expected: int) -> None:
    assert geometry.point_to_position(point, 1000) == expected


def test_position_point_round_trip(geometry: CircularGeometry) -> None:
    for position in range(0, 1000, 37):
        point = geometry.position_to_point(position, 1000)
        assert geometry.point_to_position(point, 1000) == position


def test_feature_arc_path_quarter(geometry: CircularGeometry) -> None:
    path = geometry.feature_arc_path(-math.pi / 2, 0.0, 100)
    assert path == "M 300 197 A 103 103 0 0 1 403 300 L 397 300 A 97 97 0 0 0 300 203 Z"


def test_feature_arc_path_large_and_wrapping(geometry: CircularGeometry) -> None:
    large = geometry.feature_path(Feature("f", "CDS", 0, 600), 1000, 100)
    assert "A 103 103 0 1 1" in large
    assert "A 97 97 0 1 0" in large
    wrapped = geometry.feature_path(Feature("g", "CDS", 900, 100), 1000, 100)
    assert "A 103 103 0 0 1" in wrapped
    assert wrapped.startswith("M ") and wrapped.endswith(" Z")


def test_selection_arc_path(geometry: CircularGeometry) -> None:
    assert geometry.selection_arc_path(0, 250, 200, 1000) == "M 300 100 A 200 200 0 0 1 500 300"
    assert " 0 0 1 " in geometry.selection_arc_path(990, 10, 200, 1000)
    assert " 0 1 1 " in geometry.selection_arc_path(10, 990, 200, 1000)


def test_arrow_path_points_outward(geometry: CircularGeometry) -> None:
    assert geometry.arrow_path(0.0, 100) == "M 400 300 L 412 300 L 412 308 M 412 300 L 412 292"


def test_arrow_sits_at_strand_end(geometry: CircularGeometry) -> None:
    forward = Feature("f", "CDS", 0, 250)
    reverse = Feature("r", "CDS", 0, 250, complement=True)
    assert geometry.feature_arrow_angle(forward, 1000) == pytest.approx(0.0)
    assert geometry.feature_arrow_angle(reverse, 1000) == pytest.approx(-math.pi / 2)


def test_backbone_ticks(geometry: CircularGeometry) -> None:
    ticks = geometry.backbone_ticks(1200)
    assert len(ticks) == 12
    assert [label for _, label in ticks] == [1] + [100 * i for i in range(1, 12)]
    assert ticks[3][0] == pytest.approx(0.0)
    assert CircularGeometry(CircularFrame(marker_count=0)).backbone_ticks(1200) == []


def test_track_radius_steps_inward(geometry: CircularGeometry) -> None:
    assert geometry.track_radius(0) == pytest.approx(170.0)
    assert geometry.track_radius(2) == pytest.approx(140.0)


def test_linear_track_y_inverts_lanes() -> None:
    assert linear_track_y(0, 3, 16) == pytest.approx(36.0)
    assert linear_track_y(2, 3, 16) == pytest.approx(0.0)


def test_format_number() -> None:
    assert format_number(300.0) == "300"
    assert format_number(-2) == "-2"
    assert format_number(1.5) == "1.5"
    assert format_number(0.00005) == "0.00005"
    assert format_number(-0.000125) == "-0.000125"
    assert format_number(1e-7) == "1e-7"
    assert format_number(2.5e-7) == "2.5e-7"
