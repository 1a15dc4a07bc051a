"""Plasmid annotation data models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

TRANSLATION_TYPE = "translation"
SOURCE_TYPE = "source"


@dataclass(frozen=True)
class Feature:
    """
    Annotated subrange of a circular sequence.

    Coordinates are 0-indexed and half-open: ``start`` is the first base and
    ``end`` is one past the last base. ``end < start`` marks a feature that
    crosses the origin.
    """

    id: str
    type: str
    start: int
    end: int
    complement: bool = False
    label: str = ""
    translation: Optional[str] = None

    @property
    def is_translation(self) -> bool:
        return self.type == TRANSLATION_TYPE

    @property
    def crosses_origin(self) -> bool:
        return self.end < self.start

    def size(self, length: int) -> int:
        return feature_size(self, length)

    def contains(self, position: int, length: int) -> bool:
        """Return True when ``position`` falls inside ``[start, end)``."""

        if length <= 0:
            return False
        span = feature_size(self, length)
        offset = (position - self.start) % length
        return offset < span

    def display_range(self) -> Tuple[int, int]:
        """1-based inclusive range as written in GenBank files."""
        return self.start + 1, self.end


def feature_size(feature: Feature, length: int) -> int:
    """Span of ``feature`` in bases, accounting for origin wrap."""

    if feature.end < feature.start:
        return (length - feature.start) + feature.end
    return feature.end - feature.start


@dataclass(frozen=True)
class PlasmidModel:
    """Parsed plasmid record. Replaced wholesale on every parse."""

    name: str = ""
    definition: str = ""
    length: int = 0
    sequence: str = ""
    features: Tuple[Feature, ...] = field(default_factory=tuple)

    def feature_types(self) -> List[str]:
        seen: Dict[str, None] = {}
        for feature in self.features:
            seen.setdefault(feature.type, None)
        return list(seen)

    def default_visible_types(self) -> set[str]:
        return {kind for kind in self.feature_types() if kind.lower() != SOURCE_TYPE}

    def visible_features(self, visible_types: Iterable[str]) -> List[Feature]:
        allowed = set(visible_types)
        return [feature for feature in self.features if feature.type in allowed]

    def feature_by_id(self, feature_id: str) -> Optional[Feature]:
        for feature in self.features:
            if feature.id == feature_id:
                return feature
        return None

    @property
    def is_empty(self) -> bool:
        return self.length <= 0


@dataclass(frozen=True)
class SelectedRegion:
    """
    Clockwise, inclusive arc from ``start`` to ``end``.

    ``end < start`` wraps through the origin; ``start == end`` is one base.
    """

    start: int
    end: int

    @property
    def wraps(self) -> bool:
        return self.end < self.start

    def contains(self, position: int) -> bool:
        if self.start <= self.end:
            return self.start <= position <= self.end
        return position >= self.start or position <= self.end

    def size(self, length: int) -> int:
        if self.end < self.start:
            return (length - self.start) + self.end + 1
        return self.end - self.start + 1

    def display_range(self) -> Tuple[int, int]:
        return self.start + 1, self.end + 1

    @classmethod
    def for_feature(cls, feature: Feature, length: int) -> "SelectedRegion":
        """Region covering every base of ``feature``; zero-span features select one base."""

        if feature_size(feature, length) <= 0:
            return cls(start=feature.start, end=feature.start)
        last = feature.end - 1
        if length > 0:
            last %= length
        return cls(start=feature.start, end=last)

    def matches_feature(self, feature: Feature, length: int) -> bool:
        return self == SelectedRegion.for_feature(feature, length)


def max_track_used(assignment: Dict[str, int]) -> int:
    return max(assignment.values(), default=0)


__all__ = [
    "Feature",
    "PlasmidModel",
    "SelectedRegion",
    "SOURCE_TYPE",
    "TRANSLATION_TYPE",
    "feature_size",
    "max_track_used",
]
