import pytest

from plasmidmap.extract import extract, extract_feature
from plasmidmap.model import Feature, PlasmidModel, SelectedRegion

SEQUENCE = "".join("ACGT"[(i * 7 + i // 5) % 4] for i in range(1000))


def test_wrapping_region_reads_through_origin() -> None:
    text = extract(SEQUENCE, SelectedRegion(990, 10), 1000)
    assert text == SEQUENCE[990:] + SEQUENCE[:11]
    assert len(text) == 21


def test_direct_region() -> None:
    assert extract(SEQUENCE, SelectedRegion(10, 20), 1000) == SEQUENCE[10:21]
    assert extract(SEQUENCE, SelectedRegion(5, 5), 1000) == SEQUENCE[5]


def test_out_of_range_positions_are_wrapped() -> None:
    assert extract(SEQUENCE, SelectedRegion(1005, 1010), 1000) == SEQUENCE[5:11]


def test_empty_inputs_yield_empty_string() -> None:
    assert extract("", SelectedRegion(0, 5), 1000) == ""
    assert extract(SEQUENCE, SelectedRegion(0, 5), 0) == ""


@pytest.mark.parametrize(
    "region, expected",
    [
        (SelectedRegion(0, 4), "ACGTA"),
        (SelectedRegion(0, 5), "CGTACA"),
    ],
)
def test_shorter_arc_wins_with_direct_tie_break(region: SelectedRegion, expected: str) -> None:
    assert extract("ACGTACGTAC", region, 10) == expected


def test_codon_snapping_inside_translation() -> None:
    translation = Feature("t", "translation", 10, 100)
    assert extract(SEQUENCE, SelectedRegion(15, 20), 1000, [translation]) == SEQUENCE[13:22]


def test_partial_trailing_codon_is_capped() -> None:
    translation = Feature("t", "translation", 10, 101)
    assert extract(SEQUENCE, SelectedRegion(95, 100), 1000, [translation]) == SEQUENCE[94:101]


def test_non_translation_features_do_not_snap() -> None:
    cds = Feature("c", "CDS", 10, 100)
    assert extract(SEQUENCE, SelectedRegion(15, 20), 1000, [cds]) == SEQUENCE[15:21]


def test_extract_feature(pdemo_model: PlasmidModel) -> None:
    sequence = pdemo_model.sequence
    origin = pdemo_model.feature_by_id("feature-4")
    source = pdemo_model.feature_by_id("feature-0")
    lac = pdemo_model.feature_by_id("feature-2")
    assert extract_feature(sequence, origin, 120) == sequence[110:] + sequence[:10]
    assert extract_feature(sequence, source, 120) == sequence
    assert extract_feature(sequence, lac, 120) == sequence[30:60]
    assert extract_feature(sequence, Feature("e", "gene", 5, 5), 120) == ""


def test_wrapping_arc_does_not_repeat_bases() -> None:
    text = extract("ACGTACGTAC", SelectedRegion(0, 7), 10)
    assert text == "TACA"
    assert len(text) == SelectedRegion(7, 0).size(10)
