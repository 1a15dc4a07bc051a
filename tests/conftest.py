import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

DATA = Path(__file__).resolve().parent / "data"


@pytest.fixture
def pdemo_path() -> Path:
    return DATA / "pdemo.gb"


@pytest.fixture
def pdemo_text(pdemo_path: Path) -> str:
    return pdemo_path.read_text(encoding="utf-8")


@pytest.fixture
def pdemo_model(pdemo_text: str):
    from plasmidmap.genbank import GenBankParser

    return GenBankParser().parse(pdemo_text)
