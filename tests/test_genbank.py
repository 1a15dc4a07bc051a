from pathlib import Path

import pytest

from plasmidmap.genbank import (
    GenBankInputHandler,
    GenBankParser,
    InvalidFormatError,
    is_valid_input,
    parse_location,
)
from plasmidmap.model import PlasmidModel

PUC19_SNIPPET = """\
LOCUS       pUC19                   2686 bp    DNA     circular SYN
FEATURES             Location/Qualifiers
     CDS             complement(100..200)
                     /label="lacZ"
ORIGIN
        1 tcgcgcgttt cggtgatgac
//
"""


def test_parse_minimal_record() -> None:
    model = GenBankParser().parse(PUC19_SNIPPET)
    assert model.name == "pUC19"
    assert model.length == 2686
    assert len(model.features) == 1
    feature = model.features[0]
    assert feature.type == "CDS"
    assert feature.start == 99
    assert feature.end == 200
    assert feature.complement is True
    assert feature.label == "lacZ"
    assert model.sequence == "TCGCGCGTTTCGGTGATGAC"


def test_parse_demo_header(pdemo_model: PlasmidModel) -> None:
    assert pdemo_model.name == "pDemo"
    assert pdemo_model.length == 120
    assert pdemo_model.definition == (
        "Synthetic demo plasmid with a lacZ alpha fragment and an origin-spanning replication origin."
    )
    assert len(pdemo_model.sequence) == 120
    assert pdemo_model.sequence.startswith("ATGACCATGATTACG")
    assert pdemo_model.sequence == pdemo_model.sequence.upper()


def test_parse_demo_features(pdemo_model: PlasmidModel) -> None:
    summary = [(f.id, f.type, f.start, f.end, f.complement, f.label) for f in pdemo_model.features]
    assert summary == [
        ("feature-0", "source", 0, 120, False, ""),
        ("feature-1", "promoter", 4, 20, False, "Plac"),
        ("feature-2", "CDS", 30, 60, True, "lacZ"),
        ("feature-3", "translation", 30, 60, True, "lacZ translation"),
        ("feature-4", "rep_origin", 110, 10, False, "ori"),
        ("feature-5", "misc_feature", 69, 90, False, "MCS"),
    ]


def test_translation_spans_continuation_lines(pdemo_model: PlasmidModel) -> None:
    translation = pdemo_model.feature_by_id("feature-3")
    assert translation is not None
    assert translation.is_translation
    assert translation.translation == "MTMITPSLHA"
    cds = pdemo_model.feature_by_id("feature-2")
    assert cds is not None and cds.translation is None


def test_feature_types_exclude_source_by_default(pdemo_model: PlasmidModel) -> None:
    assert pdemo_model.feature_types() == [
        "source",
        "promoter",
        "CDS",
        "translation",
        "rep_origin",
        "misc_feature",
    ]
    assert "source" not in pdemo_model.default_visible_types()
    assert "CDS" in pdemo_model.default_visible_types()


def test_parse_is_idempotent(pdemo_text: str) -> None:
    parser = GenBankParser()
    assert parser.parse(pdemo_text) == parser.parse(pdemo_text)


@pytest.mark.parametrize(
    "location, expected",
    [
        ("100..200", (99, 200, False)),
        ("complement(100..200)", (99, 200, True)),
        ("join(2500..2686,1..50)", (2499, 50, False)),
        ("<1..>30", (0, 30, False)),
        ("5", (4, 5, False)),
        ("unknown", (0, 0, False)),
    ],
)
def test_parse_location(location: str, expected: tuple) -> None:
    assert parse_location(location) == expected


def test_multiline_location_is_joined() -> None:
    text = PUC19_SNIPPET.replace(
        "     CDS             complement(100..200)\n",
        "     CDS             join(10..20,\n                     30..40)\n",
    )
    feature = GenBankParser().parse(text).features[0]
    assert (feature.start, feature.end, feature.complement) == (9, 40, False)


def test_malformed_input_never_raises() -> None:
    parser = GenBankParser()
    empty = parser.parse("")
    assert empty == PlasmidModel()
    garbage = parser.parse("this is not a GenBank file\n\n\t12 34\n")
    assert garbage.name == ""
    assert garbage.length == 0
    assert garbage.features == ()


def test_non_base_lines_are_dropped_and_terminator_stops_parsing() -> None:
    text = PUC19_SNIPPET.replace(
        "//\n",
        "       21 this is junk\n       21 ggcc\n//\n       41 aaaa\n",
    )
    model = GenBankParser().parse(text)
    assert model.sequence == "TCGCGCGTTTCGGTGATGACGGCC"


def test_windows_line_endings() -> None:
    model = GenBankParser().parse(PUC19_SNIPPET.replace("\n", "\r\n"))
    assert model.name == "pUC19"
    assert model.features[0].label == "lacZ"
    assert model.sequence == "TCGCGCGTTTCGGTGATGAC"


def test_note_is_label_fallback_only() -> None:
    text = PUC19_SNIPPET.replace('/label="lacZ"', '/note="first"\n                     /label="second"')
    assert GenBankParser().parse(text).features[0].label == "second"


def test_unknown_keyword_closes_feature_table() -> None:
    text = PUC19_SNIPPET.replace(
        "ORIGIN",
        "BASE COUNT      5 a      5 c      5 g      5 t\n     gene            1..10\nORIGIN",
    )
    model = GenBankParser().parse(text)
    assert [f.type for f in model.features] == ["CDS"]


def test_is_valid_input() -> None:
    assert is_valid_input(PUC19_SNIPPET)
    assert not is_valid_input("LOCUS x 10 bp\nORIGIN\n")
    assert not is_valid_input(">fasta\nACGT\n")


def test_handler_rejects_invalid_text() -> None:
    handler = GenBankInputHandler()
    with pytest.raises(InvalidFormatError):
        handler.handle_text_input(">fasta\nACGT\n")


def test_handler_uses_injected_parser() -> None:
    class StubParser:
        def parse(self, text: str) -> PlasmidModel:
            return PlasmidModel(name="stub")

    handler = GenBankInputHandler(StubParser())
    assert handler.handle_text_input(PUC19_SNIPPET).name == "stub"


def test_handler_reads_files(pdemo_path: Path, tmp_path: Path) -> None:
    handler = GenBankInputHandler()
    assert handler.handle_file(pdemo_path).name == "pDemo"
    with pytest.raises(FileNotFoundError):
        handler.handle_file(tmp_path / "missing.gb")
