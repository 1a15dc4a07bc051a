"""Render-ready layout payloads consumed by the viewer front end."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from importlib import metadata
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .geometry import CircularGeometry
from .model import Feature, PlasmidModel, SelectedRegion, max_track_used
from .tracks import assign_circular_tracks, assign_linear_tracks, features_in_window

try:  # pragma: no cover - importlib metadata path only runs once
    PLASMIDMAP_VERSION = metadata.version("plasmidmap")
except metadata.PackageNotFoundError:  # pragma: no cover - editable installs
    PLASMIDMAP_VERSION = "dev"

CIRCULAR_LAYOUT_KIND = "plasmidmap.circular_layout.v1"
LINEAR_LAYOUT_KIND = "plasmidmap.linear_layout.v1"


@dataclass(frozen=True)
class LayoutSpec:
    kind: str
    meta: Dict[str, Any]
    primitives: Dict[str, Any]
    spec_version: str = "1.0"

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(asdict(self), sort_keys=True, separators=(",", ":"))


def _meta(model: PlasmidModel, visible: Iterable[str]) -> Dict[str, Any]:
    return {
        "name": model.name,
        "definition": model.definition,
        "length": model.length,
        "visible_types": sorted(visible),
        "plasmidmap_version": PLASMIDMAP_VERSION,
    }


def _row_extent(feature: Feature, row_start: int, row_width: int, length: int) -> Tuple[int, int]:
    """Base columns ``[x_start, x_end)`` a feature covers within one linear row."""

    if feature.end < feature.start and row_start < feature.end:
        return 0, min(row_width, feature.end - row_start)
    end = feature.end + length if feature.end < feature.start else feature.end
    return max(0, feature.start - row_start), min(row_width, end - row_start)


def build_circular_layout(
    model: PlasmidModel,
    visible_types: Iterable[str],
    geometry: Optional[CircularGeometry] = None,
    max_tracks: int = 8,
    selection: Optional[SelectedRegion] = None,
) -> LayoutSpec:
    geometry = geometry or CircularGeometry()
    visible = set(visible_types)
    length = model.length
    tracks = assign_circular_tracks(model.features, visible, length, max_tracks)

    features: List[Dict[str, Any]] = []
    for feature in model.visible_features(visible):
        track = tracks[feature.id]
        radius = geometry.track_radius(track)
        features.append(
            {
                "id": feature.id,
                "type": feature.type,
                "label": feature.label,
                "complement": feature.complement,
                "range": list(feature.display_range()),
                "track": track,
                "radius": radius,
                "path": geometry.feature_path(feature, length, radius),
                "arrow": geometry.arrow_path(geometry.feature_arrow_angle(feature, length), radius),
                "selected": bool(selection and selection.matches_feature(feature, length)),
            }
        )

    primitives: Dict[str, Any] = {
        "frame": asdict(geometry.frame),
        "ticks": [{"angle": angle, "label": label} for angle, label in geometry.backbone_ticks(length)],
        "features": features,
        "max_track": max_track_used(tracks),
        "selection": None,
    }
    if selection is not None:
        primitives["selection"] = {
            "start": selection.start,
            "end": selection.end,
            "path": geometry.selection_arc_path(
                selection.start, selection.end, geometry.frame.backbone_radius, length
            ),
        }
    return LayoutSpec(kind=CIRCULAR_LAYOUT_KIND, meta=_meta(model, visible), primitives=primitives)


def build_linear_layout(
    model: PlasmidModel,
    visible_types: Iterable[str],
    bases_per_line: int = 100,
    max_tracks: int = 3,
) -> LayoutSpec:
    if bases_per_line <= 0:
        raise ValueError("bases_per_line must be positive.")
    visible = set(visible_types)
    length = model.length
    shown = model.visible_features(visible)

    rows: List[Dict[str, Any]] = []
    for row_start in range(0, max(length, 0), bases_per_line):
        row_end = min(row_start + bases_per_line, length)
        row_features = features_in_window(shown, row_start, row_end, length)
        tracks = assign_linear_tracks(row_features, visible, length, max_tracks)
        rows.append(
            {
                "start": row_start,
                "end": row_end,
                "label": row_start + 1,
                "sequence": model.sequence[row_start:row_end],
                "features": [
                    {
                        "id": feature.id,
                        "type": feature.type,
                        "label": feature.label,
                        "track": tracks[feature.id],
                        "extent": list(_row_extent(feature, row_start, row_end - row_start, length)),
                    }
                    for feature in row_features
                ],
            }
        )
    primitives = {"bases_per_line": bases_per_line, "max_tracks": max_tracks, "rows": rows}
    return LayoutSpec(kind=LINEAR_LAYOUT_KIND, meta=_meta(model, visible), primitives=primitives)


__all__ = [
    "CIRCULAR_LAYOUT_KIND",
    "LINEAR_LAYOUT_KIND",
    "LayoutSpec",
    "build_circular_layout",
    "build_linear_layout",
]
