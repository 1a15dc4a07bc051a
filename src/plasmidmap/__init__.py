"""plasmidmap core package."""

from importlib import metadata

from .extract import extract, extract_feature
from .genbank import GenBankInputHandler, GenBankParser, InvalidFormatError, is_valid_input
from .geometry import CircularFrame, CircularGeometry, Point
from .model import Feature, PlasmidModel, SelectedRegion, feature_size
from .selection import SelectionEngine, SelectionState, choose_arc
from .session import PlasmidSession
from .tracks import (
    TrackPolicy,
    assign_circular_tracks,
    assign_linear_tracks,
    assign_tracks,
    features_overlap,
)

try:  # pragma: no cover - metadata only at runtime
    __version__ = metadata.version("plasmidmap")
except metadata.PackageNotFoundError:  # pragma: no cover - source tree / editable installs
    __version__ = "0.0.0"

__all__ = [
    "CircularFrame",
    "CircularGeometry",
    "Feature",
    "GenBankInputHandler",
    "GenBankParser",
    "InvalidFormatError",
    "PlasmidModel",
    "PlasmidSession",
    "Point",
    "SelectedRegion",
    "SelectionEngine",
    "SelectionState",
    "TrackPolicy",
    "assign_circular_tracks",
    "assign_linear_tracks",
    "assign_tracks",
    "choose_arc",
    "extract",
    "extract_feature",
    "feature_size",
    "features_overlap",
    "is_valid_input",
    "__version__",
]
