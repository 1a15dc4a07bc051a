"""Viewer session wiring the parser, geometry, selection engine and extractor."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from .config import ViewerConfig
from .extract import extract, extract_feature
from .genbank import GenBankInputHandler, SequenceParser
from .geometry import CircularGeometry, Point
from .layout import LayoutSpec, build_circular_layout, build_linear_layout
from .model import Feature, PlasmidModel, SelectedRegion
from .selection import SelectionEngine
from .tracks import assign_circular_tracks, assign_linear_tracks

LOGGER = logging.getLogger(__name__)


class PlasmidSession:
    """
    Holds the state one viewer needs between events.

    Collaborators are passed in rather than looked up, so several sessions can
    coexist and tests can swap in their own parser or geometry.
    """

    def __init__(
        self,
        parser: Optional[SequenceParser] = None,
        geometry: Optional[CircularGeometry] = None,
        config: Optional[ViewerConfig] = None,
    ) -> None:
        self.config = config or ViewerConfig()
        self.input_handler = GenBankInputHandler(parser)
        self.geometry = geometry or CircularGeometry(self.config.frame)
        self.model = PlasmidModel()
        self.visible_types: set[str] = set()
        self._clicked: Optional[Feature] = None
        self.engine = self._new_engine()

    def _new_engine(self) -> SelectionEngine:
        return SelectionEngine(
            self.model.length,
            self.model.features,
            geometry=self.geometry,
            on_change=self._on_selection_change,
        )

    def _on_selection_change(self, region: Optional[SelectedRegion]) -> None:
        LOGGER.debug("selection changed region=%s", region)

    @property
    def selection(self) -> Optional[SelectedRegion]:
        return self.engine.selection

    def _install(self, model: PlasmidModel) -> PlasmidModel:
        self.model = model
        self.visible_types = self.config.initial_visible_types(model.feature_types())
        self._clicked = None
        self.engine = self._new_engine()
        LOGGER.info("Loaded plasmid '%s' (%s bp, %s features)", model.name, model.length, len(model.features))
        return model

    def load_text(self, text: str) -> PlasmidModel:
        return self._install(self.input_handler.handle_text_input(text))

    def load_file(self, path: str | Path) -> PlasmidModel:
        return self._install(self.input_handler.handle_file(path))

    def toggle_feature_type(self, feature_type: str) -> bool:
        """Flip visibility of ``feature_type``; returns the new visibility."""

        if feature_type in self.visible_types:
            self.visible_types.discard(feature_type)
            return False
        self.visible_types.add(feature_type)
        return True

    def set_visible(self, feature_type: str, visible: bool) -> None:
        if visible:
            self.visible_types.add(feature_type)
        else:
            self.visible_types.discard(feature_type)

    def circular_tracks(self) -> Dict[str, int]:
        return assign_circular_tracks(
            self.model.features, self.visible_types, self.model.length, self.config.circular_max_tracks
        )

    def linear_tracks(self) -> Dict[str, int]:
        return assign_linear_tracks(
            self.model.features, self.visible_types, self.model.length, self.config.linear_max_tracks
        )

    def circular_layout(self) -> LayoutSpec:
        return build_circular_layout(
            self.model,
            self.visible_types,
            self.geometry,
            self.config.circular_max_tracks,
            selection=self.selection,
        )

    def linear_layout(self) -> LayoutSpec:
        return build_linear_layout(
            self.model,
            self.visible_types,
            bases_per_line=self.config.bases_per_line,
            max_tracks=self.config.linear_max_tracks,
        )

    def click_feature(self, feature_id: str) -> SelectedRegion:
        feature = self.model.feature_by_id(feature_id)
        if feature is None:
            raise KeyError(f"Feature '{feature_id}' not found.")
        region = self.engine.select_feature(feature)
        self._clicked = feature
        return region

    def pointer_down(self, point: Point, within_codon_region: bool = False) -> int:
        position = self.engine.position_from_point(point)
        self._clicked = None
        self.engine.start(position, within_codon_region)
        return position

    def pointer_move(self, point: Point) -> Optional[SelectedRegion]:
        if not self.engine.is_selecting():
            return None
        return self.engine.move(self.engine.position_from_point(point))

    def pointer_up(self) -> None:
        self.engine.end()

    def copy_selection(self) -> Optional[str]:
        """Clipboard text for the current selection, or None when nothing is selected."""

        region = self.selection
        if region is None or not self.model.sequence:
            return None
        if self._clicked is not None and region.matches_feature(self._clicked, self.model.length):
            text = extract_feature(self.model.sequence, self._clicked, self.model.length)
        else:
            text = extract(self.model.sequence, region, self.model.length, self.model.features)
        LOGGER.info("Copied %s bases", len(text))
        return text


__all__ = ["PlasmidSession"]
