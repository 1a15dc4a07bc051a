"""Subsequence extraction for clipboard export."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from .model import Feature, SelectedRegion, feature_size
from .selection import codon_ceiling, codon_floor

LOGGER = logging.getLogger(__name__)


def _enclosing_translation(features: Iterable[Feature], start: int, end: int, length: int) -> Optional[Feature]:
    for feature in features:
        if not feature.is_translation:
            continue
        span = feature_size(feature, length)
        start_offset = (start - feature.start) % length
        end_offset = (end - feature.start) % length
        if start_offset < span and end_offset < span and start_offset <= end_offset:
            return feature
    return None


def _clockwise(sequence: str, start: int, end: int) -> str:
    if end < start:
        return sequence[start:] + sequence[: end + 1]
    return sequence[start : end + 1]


def extract(
    sequence: str,
    region: SelectedRegion,
    length: int,
    features: Iterable[Feature] = (),
) -> str:
    """
    Return the bases covered by ``region``.

    Regions inside a translation feature are widened to whole codons. The
    shorter of the direct and wrapping arcs wins, ties going to the direct
    arc, which mirrors :func:`plasmidmap.selection.choose_arc`.

    When ``start <= end`` but the wrapping arc is shorter, the endpoints are
    read as the ends of that wrapping arc: the result is
    ``sequence[end:] + sequence[:start + 1]``. Reading it as
    ``sequence[start:] + sequence[:end + 1]`` instead would repeat every base
    between ``start`` and ``end``.
    """

    if length <= 0 or not sequence:
        return ""
    start = region.start % length
    end = region.end % length

    feature = _enclosing_translation(features, start, end, length)
    if feature is not None:
        span = feature_size(feature, length)
        start = (feature.start + codon_floor((start - feature.start) % length)) % length
        end = (feature.start + codon_ceiling((end - feature.start) % length, span)) % length

    if end < start:
        text = _clockwise(sequence, start, end)
    else:
        direct = (end + 1 - start) % length or length
        wrapping = length - direct
        if wrapping < direct:
            # Endpoints describe the shorter arc through the origin.
            text = _clockwise(sequence, end, start)
        else:
            text = _clockwise(sequence, start, end)
    LOGGER.debug("extract start=%s end=%s bases=%s", start, end, len(text))
    return text


def extract_feature(sequence: str, feature: Feature, length: int) -> str:
    """Bases of ``feature`` read clockwise over its own span."""

    if length <= 0 or not sequence or feature_size(feature, length) <= 0:
        return ""
    region = SelectedRegion.for_feature(feature, length)
    return _clockwise(sequence, region.start % length, region.end)


__all__ = ["extract", "extract_feature"]
