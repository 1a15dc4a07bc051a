"""GenBank flat-file parsing into :class:`PlasmidModel` records."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

from .model import TRANSLATION_TYPE, Feature, PlasmidModel

LOGGER = logging.getLogger(__name__)

REQUIRED_MARKERS = ("LOCUS", "FEATURES", "ORIGIN")

_LOCUS_RE = re.compile(r"^LOCUS\s+(\S+)(.*)$")
_INTEGER_TOKEN_RE = re.compile(r"(?<!\S)(\d+)(?!\S)")
_FEATURE_LINE_RE = re.compile(r"^ {5}\S")
_QUALIFIER_LINE_RE = re.compile(r"^\s{21}")
_POSITION_PREFIX_RE = re.compile(r"^\s*\d+\s+")
_BASES_RE = re.compile(r"^[ACGTUNRYKMSWBDHV]+$")
_NUMBER_RE = re.compile(r"\d+")


class InvalidFormatError(ValueError):
    """Raised when input text lacks the GenBank section markers."""


class ParseState(Enum):
    HEADER = auto()
    IN_FEATURES = auto()
    IN_SEQUENCE = auto()


class SequenceParser(Protocol):
    def parse(self, text: str) -> PlasmidModel: ...


def is_valid_input(text: str) -> bool:
    """Cheap format check: all three section markers must be present."""

    return all(marker in text for marker in REQUIRED_MARKERS)


def parse_location(location: str) -> Tuple[int, int, bool]:
    """
    Convert a GenBank location into 0-indexed half-open ``(start, end, complement)``.

    The first number is the first base and the last number is the last base,
    so ``join(2500..2686,1..50)`` comes back as an origin-crossing span.
    """

    complement = "complement" in location
    numbers = _NUMBER_RE.findall(location)
    if not numbers:
        return 0, 0, complement
    first = int(numbers[0])
    last = int(numbers[-1])
    return max(first - 1, 0), last, complement


def _clean_qualifier_value(value: str) -> str:
    return value.strip().replace('"', "")


def _clean_sequence_line(line: str) -> str:
    return re.sub(r"\s+", "", _POSITION_PREFIX_RE.sub("", line)).upper()


@dataclass
class _FeatureDraft:
    type: str
    location: str
    label: str = ""
    translation_parts: List[str] = field(default_factory=list)
    collecting: Optional[str] = "location"

    def add_qualifier(self, qualifier: str) -> None:
        key, _, value = qualifier[1:].partition("=")
        self.collecting = None
        if key == "label":
            self.label = _clean_qualifier_value(value)
        elif key == "note":
            if not self.label:
                self.label = _clean_qualifier_value(value)
        elif key == "translation":
            self.translation_parts = [re.sub(r"\s+", "", _clean_qualifier_value(value))]
            self.collecting = "translation"

    def add_continuation(self, text: str) -> None:
        if self.collecting == "translation":
            self.translation_parts.append(re.sub(r"\s+", "", _clean_qualifier_value(text)))
        elif self.collecting == "location":
            self.location += text


class GenBankParser:
    """Permissive single-pass parser for the GenBank subset plasmid files use."""

    def parse(self, text: str) -> PlasmidModel:
        name = ""
        length = 0
        definition_parts: List[str] = []
        in_definition = False
        sequence_parts: List[str] = []
        features: List[Feature] = []
        draft: Optional[_FeatureDraft] = None
        state = ParseState.HEADER

        def finish(current: Optional[_FeatureDraft]) -> None:
            if current is None:
                return
            start, end, complement = parse_location(current.location)
            base = Feature(
                id=f"feature-{len(features)}",
                type=current.type,
                start=start,
                end=end,
                complement=complement,
                label=current.label,
            )
            features.append(base)
            translation = "".join(current.translation_parts)
            if translation:
                features.append(
                    Feature(
                        id=f"feature-{len(features)}",
                        type=TRANSLATION_TYPE,
                        start=start,
                        end=end,
                        complement=complement,
                        label=f"{current.label} translation".strip(),
                        translation=translation,
                    )
                )

        for line in text.splitlines():
            if state is ParseState.IN_SEQUENCE:
                if line.startswith("//"):
                    break
                bases = _clean_sequence_line(line)
                if _BASES_RE.match(bases):
                    sequence_parts.append(bases)
                continue

            if in_definition:
                if line[:1].isspace() and line.strip():
                    definition_parts.append(line.strip())
                    continue
                in_definition = False

            if line.startswith("LOCUS"):
                match = _LOCUS_RE.match(line)
                if match:
                    name = match.group(1)
                    size = _INTEGER_TOKEN_RE.search(match.group(2))
                    length = int(size.group(1)) if size else 0
                continue
            if line.startswith("DEFINITION"):
                definition_parts = [line[len("DEFINITION"):].strip()]
                in_definition = True
                continue
            if line.startswith("FEATURES"):
                state = ParseState.IN_FEATURES
                continue
            if line.startswith("ORIGIN"):
                finish(draft)
                draft = None
                state = ParseState.IN_SEQUENCE
                continue

            if state is not ParseState.IN_FEATURES:
                continue
            if _FEATURE_LINE_RE.match(line):
                finish(draft)
                tokens = line.split()
                draft = _FeatureDraft(type=tokens[0], location=tokens[1] if len(tokens) > 1 else "")
            elif draft is not None and _QUALIFIER_LINE_RE.match(line):
                qualifier = line.strip()
                if qualifier.startswith("/"):
                    draft.add_qualifier(qualifier)
                else:
                    draft.add_continuation(qualifier)
            elif line.strip() and not line[:1].isspace():
                # Unknown top-level keyword (e.g. BASE COUNT) closes the table.
                finish(draft)
                draft = None
                state = ParseState.HEADER

        finish(draft)
        sequence = "".join(sequence_parts).upper()
        definition = " ".join(" ".join(definition_parts).split())
        if sequence and length and len(sequence) != length:
            LOGGER.warning(
                "LOCUS length %s for '%s' disagrees with %s parsed bases",
                length,
                name,
                len(sequence),
            )
        LOGGER.debug(
            "parsed GenBank record name=%s length=%s features=%s sequence=%s",
            name,
            length,
            len(features),
            len(sequence),
        )
        return PlasmidModel(
            name=name,
            definition=definition,
            length=length,
            sequence=sequence,
            features=tuple(features),
        )


class GenBankInputHandler:
    """Validates raw text before handing it to the injected parser."""

    def __init__(self, parser: Optional[SequenceParser] = None) -> None:
        self.parser: SequenceParser = parser or GenBankParser()

    def is_valid_input(self, text: str) -> bool:
        return is_valid_input(text)

    def handle_text_input(self, text: str) -> PlasmidModel:
        if not self.is_valid_input(text):
            raise InvalidFormatError("Invalid GenBank format: expected LOCUS, FEATURES and ORIGIN sections.")
        return self.parser.parse(text)

    def handle_file(self, path: str | Path) -> PlasmidModel:
        gb_path = Path(path)
        if not gb_path.exists():
            raise FileNotFoundError(f"GenBank file '{gb_path}' not found.")
        LOGGER.info("Loading GenBank file %s", gb_path)
        return self.handle_text_input(gb_path.read_text(encoding="utf-8"))


__all__ = [
    "GenBankInputHandler",
    "GenBankParser",
    "InvalidFormatError",
    "ParseState",
    "REQUIRED_MARKERS",
    "is_valid_input",
    "parse_location",
]
