"""
Circular coordinate geometry for plasmid maps.

Positions run clockwise from 12 o'clock. Path descriptors are emitted in SVG
path syntax (``M``/``A``/``L``/``Z`` with absolute coordinates) because the
consuming renderer parses them verbatim.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .model import Feature

TWO_PI = 2 * math.pi


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class CircularFrame:
    """Reference frame shared by every circular layout computation."""

    center: float = 300.0
    backbone_radius: float = 200.0
    feature_base_radius: float = 170.0
    path_width: float = 6.0
    arrow_head_length: float = 12.0
    arrow_head_width: float = 8.0
    label_radius: float = 250.0
    marker_count: int = 12
    track_spacing: float = 15.0
    initial_radius_offset: float = 30.0


def format_number(value: float) -> str:
    """
    Render a coordinate the way a JavaScript host would print it.

    Shortest round-trip digits, positional down to ``1e-6`` and exponent
    notation without zero padding (``1e-7``) below that.
    """

    value = float(value)
    if value.is_integer():
        return str(int(value))
    if abs(value) >= 1e-6:
        return np.format_float_positional(value, unique=True, trim="-")
    mantissa, _, exponent = repr(value).partition("e")
    return f"{mantissa}e{int(exponent)}"


def _pt(point: Point) -> str:
    return f"{format_number(point.x)} {format_number(point.y)}"


class CircularGeometry:
    """Stateless position/angle/point conversions for one :class:`CircularFrame`."""

    def __init__(self, frame: Optional[CircularFrame] = None) -> None:
        self.frame = frame or CircularFrame()

    def position_to_angle(self, position: float, length: int) -> float:
        if length <= 0:
            return -math.pi / 2
        return (position / length) * TWO_PI - math.pi / 2

    def positions_to_angles(self, positions, length: int) -> np.ndarray:
        values = np.asarray(positions, dtype=float)
        if length <= 0:
            return np.full(values.shape, -math.pi / 2)
        return (values / length) * TWO_PI - math.pi / 2

    def angle_to_point(self, angle: float, radius: float) -> Point:
        center = self.frame.center
        return Point(center + radius * math.cos(angle), center + radius * math.sin(angle))

    def position_to_point(self, position: float, length: int, radius: Optional[float] = None) -> Point:
        if radius is None:
            radius = self.frame.backbone_radius
        return self.angle_to_point(self.position_to_angle(position, length), radius)

    def point_to_position(self, point: Point, length: int) -> int:
        """Invert a pointer location into the nearest sequence position."""

        if length <= 0:
            return 0
        dx = point.x - self.frame.center
        dy = point.y - self.frame.center
        angle = (math.atan2(dy, dx) + math.pi / 2 + TWO_PI) % TWO_PI
        return math.floor(angle * length / TWO_PI + 0.5) % length

    def feature_arc_path(
        self,
        start_angle: float,
        end_angle: float,
        radius: float,
        thickness: Optional[float] = None,
    ) -> str:
        """Closed annulus sector between two angles, swept clockwise."""

        if thickness is None:
            thickness = self.frame.path_width
        if end_angle < start_angle:
            end_angle += TWO_PI
        outer_radius = radius + thickness / 2
        inner_radius = radius - thickness / 2
        outer_start = self.angle_to_point(start_angle, outer_radius)
        outer_end = self.angle_to_point(end_angle, outer_radius)
        inner_start = self.angle_to_point(start_angle, inner_radius)
        inner_end = self.angle_to_point(end_angle, inner_radius)
        large_arc = 1 if end_angle - start_angle > math.pi else 0
        ro = format_number(outer_radius)
        ri = format_number(inner_radius)
        return (
            f"M {_pt(outer_start)} "
            f"A {ro} {ro} 0 {large_arc} 1 {_pt(outer_end)} "
            f"L {_pt(inner_end)} "
            f"A {ri} {ri} 0 {large_arc} 0 {_pt(inner_start)} "
            "Z"
        )

    def feature_path(self, feature: Feature, length: int, radius: float) -> str:
        return self.feature_arc_path(
            self.position_to_angle(feature.start, length),
            self.position_to_angle(feature.end, length),
            radius,
        )

    def selection_arc_path(self, start: int, end: int, radius: float, length: int) -> str:
        """Open clockwise stroke from ``start`` to ``end``."""

        start_angle = self.position_to_angle(start, length)
        end_angle = self.position_to_angle(end, length)
        if end < start:
            end_angle += TWO_PI
        start_point = self.angle_to_point(start_angle, radius)
        end_point = self.angle_to_point(end_angle % TWO_PI, radius)
        large_arc = 1 if abs(end_angle - start_angle) > math.pi else 0
        r = format_number(radius)
        return f"M {_pt(start_point)} A {r} {r} 0 {large_arc} 1 {_pt(end_point)}"

    def arrow_path(self, angle: float, radius: float) -> str:
        """Open chevron pointing outward from the arc at ``angle``."""

        length = self.frame.arrow_head_length
        width = self.frame.arrow_head_width
        base = self.angle_to_point(angle, radius)
        tip = self.angle_to_point(angle, radius + length)
        left = Point(tip.x - math.sin(angle) * width, tip.y + math.cos(angle) * width)
        right = Point(tip.x + math.sin(angle) * width, tip.y - math.cos(angle) * width)
        return f"M {_pt(base)} L {_pt(tip)} L {_pt(left)} M {_pt(tip)} L {_pt(right)}"

    def feature_arrow_angle(self, feature: Feature, length: int) -> float:
        """Arrow sits at the 3' end of the feature for its strand."""

        position = feature.start if feature.complement else feature.end
        return self.position_to_angle(position, length)

    def backbone_ticks(self, length: int) -> List[Tuple[float, int]]:
        """``marker_count`` evenly spaced ``(angle, 1-based label)`` pairs."""

        count = self.frame.marker_count
        if count <= 0:
            return []
        fractions = np.arange(count) / count
        angles = fractions * TWO_PI - math.pi / 2
        labels = np.floor(fractions * max(length, 0) + 0.5).astype(int)
        return [(float(angle), int(label) or 1) for angle, label in zip(angles, labels)]

    def track_radius(self, track: int) -> float:
        frame = self.frame
        return frame.backbone_radius - frame.initial_radius_offset - track * frame.track_spacing


def linear_track_y(track: int, max_tracks: int, track_height: float, spacing: float = 2) -> float:
    """Vertical offset of a linear-view lane; lane 0 sits closest to the sequence."""

    inverted = max_tracks - 1 - track
    return inverted * (track_height + spacing)


__all__ = [
    "CircularFrame",
    "CircularGeometry",
    "Point",
    "TWO_PI",
    "format_number",
    "linear_track_y",
]
