"""
Lane assignment for overlapping annotations.

Both layouts run the same greedy pass: every visible feature starts on
track 0, and each overlapping pair on a track pushes its lower-priority
member one track further out. Passes run for tracks below ``max_tracks``
and stop early once nothing moved; features still colliding on track
``max_tracks`` stay stacked there.
A sort-by-start first-fit colouring would give minimal lane counts but is
not what the viewers expect.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Iterable, List, Sequence

import numpy as np

from .model import Feature, feature_size

LOGGER = logging.getLogger(__name__)


class TrackPolicy(Enum):
    """Tie-break polarity for translation features of equal span."""

    CIRCULAR = "circular"
    LINEAR = "linear"

    @property
    def translation_wins(self) -> bool:
        return self is TrackPolicy.LINEAR


def features_overlap(f1: Feature, f2: Feature, length: int) -> bool:
    end1 = f1.end + length if f1.end < f1.start else f1.end
    end2 = f2.end + length if f2.end < f2.start else f2.end
    return f1.start <= end2 and f2.start <= end1


def has_track_priority(f1: Feature, f2: Feature, length: int, policy: TrackPolicy = TrackPolicy.CIRCULAR) -> bool:
    """Return True when ``f1`` keeps its track over ``f2``."""

    size1 = feature_size(f1, length)
    size2 = feature_size(f2, length)
    if size1 != size2:
        return size1 > size2
    if f1.is_translation != f2.is_translation:
        return f1.is_translation if policy.translation_wins else f2.is_translation
    return f1.id < f2.id


def _overlap_matrix(features: Sequence[Feature], length: int) -> np.ndarray:
    starts = np.array([f.start for f in features], dtype=np.int64)
    ends = np.array([f.end + length if f.end < f.start else f.end for f in features], dtype=np.int64)
    return (starts[:, None] <= ends[None, :]) & (starts[None, :] <= ends[:, None])


def assign_tracks(
    features: Iterable[Feature],
    visible_types: Iterable[str],
    length: int,
    max_tracks: int,
    policy: TrackPolicy = TrackPolicy.CIRCULAR,
) -> Dict[str, int]:
    """Map each visible feature id to a track number in ``[0, max_tracks]``."""

    visible = set(visible_types)
    ordered = [feature for feature in features if feature.type in visible]
    assignments: Dict[str, int] = {feature.id: 0 for feature in ordered}
    track = 0
    moved = True
    while moved and track < max_tracks:
        moved = False
        in_track = [feature for feature in ordered if assignments[feature.id] == track]
        if len(in_track) > 1:
            overlaps = _overlap_matrix(in_track, length)
            for i, j in np.argwhere(np.triu(overlaps, k=1)):
                f1, f2 = in_track[i], in_track[j]
                loser = f2 if has_track_priority(f1, f2, length, policy) else f1
                assignments[loser.id] = track + 1
                moved = True
        track += 1

    LOGGER.debug(
        "assign_tracks policy=%s features=%s passes=%s max_track=%s",
        policy.value,
        len(assignments),
        track,
        max(assignments.values(), default=0),
    )
    return assignments


def assign_circular_tracks(
    features: Iterable[Feature], visible_types: Iterable[str], length: int, max_tracks: int
) -> Dict[str, int]:
    return assign_tracks(features, visible_types, length, max_tracks, TrackPolicy.CIRCULAR)


def assign_linear_tracks(
    features: Iterable[Feature], visible_types: Iterable[str], length: int, max_tracks: int
) -> Dict[str, int]:
    return assign_tracks(features, visible_types, length, max_tracks, TrackPolicy.LINEAR)


def features_in_window(features: Iterable[Feature], window_start: int, window_end: int, length: int) -> List[Feature]:
    """Features touching the linear row ``[window_start, window_end)``, wrapped tails included."""

    selected = []
    for feature in features:
        wraps = feature.end < feature.start
        end = feature.end + length if wraps else feature.end
        if (feature.start < window_end and end > window_start) or (wraps and window_start < feature.end):
            selected.append(feature)
    return selected


__all__ = [
    "TrackPolicy",
    "assign_circular_tracks",
    "assign_linear_tracks",
    "assign_tracks",
    "features_in_window",
    "features_overlap",
    "has_track_priority",
]
