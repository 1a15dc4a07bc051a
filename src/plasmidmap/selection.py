"""Interactive range selection on a circular sequence."""
from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable, Iterable, List, Optional, Tuple

from .geometry import CircularGeometry, Point
from .model import Feature, SelectedRegion, feature_size

LOGGER = logging.getLogger(__name__)

CODON = 3

SelectionCallback = Callable[[Optional[SelectedRegion]], None]


class SelectionState(Enum):
    IDLE = auto()
    DRAGGING = auto()


def choose_arc(anchor: int, position: int, length: int) -> Tuple[int, int]:
    """
    Pick the shorter arc between two positions as a clockwise ``(start, end)``.

    Equal distances resolve to the direct, non-wrapping arc.
    """

    direct = abs(position - anchor)
    wrapping = length - direct
    if direct <= wrapping:
        return min(anchor, position), max(anchor, position)
    return max(anchor, position), min(anchor, position)


def find_translation_feature(features: Iterable[Feature], position: int, length: int) -> Optional[Feature]:
    for feature in features:
        if feature.is_translation and feature.contains(position, length):
            return feature
    return None


def codon_floor(offset: int) -> int:
    return (offset // CODON) * CODON


def codon_ceiling(offset: int, span: int) -> int:
    """Last base of the codon holding ``offset``, capped at the feature's last base."""
    return min(codon_floor(offset) + CODON - 1, span - 1)


def clamp_to_feature(feature: Feature, position: int, length: int) -> int:
    """Offset of ``position`` from the feature start, pulled to the nearer boundary when outside."""

    span = feature_size(feature, length)
    offset = (position - feature.start) % length
    if offset < span:
        return offset
    past_end = offset - (span - 1)
    before_start = length - offset
    return span - 1 if past_end <= before_start else 0


def snap_to_codon_start(feature: Feature, position: int, length: int) -> int:
    offset = clamp_to_feature(feature, position, length)
    return (feature.start + codon_floor(offset)) % length


class SelectionEngine:
    """
    Start/move/end lifecycle for drag selection.

    The last computed region survives :meth:`end` and is only cleared by the
    next :meth:`start` (or an explicit :meth:`clear`).
    """

    def __init__(
        self,
        length: int,
        features: Iterable[Feature] = (),
        *,
        geometry: Optional[CircularGeometry] = None,
        on_change: Optional[SelectionCallback] = None,
    ) -> None:
        self.length = length
        self._features: List[Feature] = list(features)
        self._geometry = geometry
        self._on_change = on_change
        self._state = SelectionState.IDLE
        self._drag_start: Optional[int] = None
        self._tracked: Optional[Feature] = None
        self._selection: Optional[SelectedRegion] = None

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def selection(self) -> Optional[SelectedRegion]:
        return self._selection

    @property
    def drag_start(self) -> Optional[int]:
        return self._drag_start

    @property
    def tracked_feature(self) -> Optional[Feature]:
        return self._tracked

    def is_selecting(self) -> bool:
        return self._state is SelectionState.DRAGGING

    def set_features(self, features: Iterable[Feature]) -> None:
        self._features = list(features)

    def position_from_point(self, point: Point) -> int:
        if self._geometry is None:
            raise ValueError("SelectionEngine was created without a geometry; cannot map points.")
        return self._geometry.point_to_position(point, self.length)

    def _normalize(self, position: int) -> int:
        return position % self.length if self.length > 0 else 0

    def _publish(self, region: Optional[SelectedRegion]) -> None:
        self._selection = region
        if self._on_change is not None:
            self._on_change(region)

    def start(self, position: int, within_codon_region: bool = False) -> None:
        position = self._normalize(position)
        self._tracked = None
        if within_codon_region and self.length > 0:
            feature = find_translation_feature(self._features, position, self.length)
            if feature is not None:
                position = snap_to_codon_start(feature, position, self.length)
                self._tracked = feature
        self._drag_start = position
        self._state = SelectionState.DRAGGING
        LOGGER.debug(
            "selection start position=%s tracked=%s",
            position,
            self._tracked.id if self._tracked else None,
        )
        self._publish(None)

    def move(self, position: int) -> Optional[SelectedRegion]:
        if self._state is not SelectionState.DRAGGING or self._drag_start is None or self.length <= 0:
            return None
        if self._tracked is not None:
            region = self._codon_region(self._tracked, position)
        else:
            start, end = choose_arc(self._drag_start % self.length, position % self.length, self.length)
            region = SelectedRegion(start=start, end=end)
        self._publish(region)
        return region

    def _codon_region(self, feature: Feature, position: int) -> SelectedRegion:
        span = feature_size(feature, self.length)
        anchor = clamp_to_feature(feature, self._drag_start, self.length)
        current = clamp_to_feature(feature, position, self.length)
        low, high = min(anchor, current), max(anchor, current)
        low = codon_floor(low)
        high = codon_ceiling(high, span)
        return SelectedRegion(
            start=(feature.start + low) % self.length,
            end=(feature.start + high) % self.length,
        )

    def end(self) -> None:
        if self._state is not SelectionState.DRAGGING:
            return
        self._state = SelectionState.IDLE
        self._drag_start = None
        self._tracked = None
        LOGGER.debug("selection end region=%s", self._selection)

    def select(self, region: Optional[SelectedRegion]) -> None:
        """Set the region directly, bypassing the drag lifecycle."""
        self._publish(region)

    def select_feature(self, feature: Feature) -> SelectedRegion:
        region = SelectedRegion.for_feature(feature, self.length)
        self._publish(region)
        return region

    def clear(self) -> None:
        self._publish(None)


__all__ = [
    "CODON",
    "SelectionEngine",
    "SelectionState",
    "choose_arc",
    "clamp_to_feature",
    "codon_ceiling",
    "codon_floor",
    "find_translation_feature",
    "snap_to_codon_start",
]
