from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

FIXTURES = Path(__file__).resolve().parent / "fixtures"

GMC_LINES = """\
# Milky Way GMC
nH       = 1.0e2       # cm^-3
colDen   = 4.0e22
sigmaNT  = 2.0e5
Tg       = 15.0
Td       = 15.0
xoH2     = 0.1
xpH2     = 0.4
xHe      = 0.1
emitter  = CO 1.0e-4
"""


@pytest.fixture(autouse=True)
def _isolate_data_path(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the user's CLOUDZONE_DATA_PATH out of file resolution."""

    monkeypatch.delenv("CLOUDZONE_DATA_PATH", raising=False)


@pytest.fixture
def write_descriptor(tmp_path: Path) -> Callable[..., Path]:
    """Write descriptor text to ``tmp_path`` and return its path."""

    def _write(text: str, name: str = "cloud.desc") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def gmc_descriptor(write_descriptor: Callable[..., Path]) -> Path:
    return write_descriptor(GMC_LINES, "gmc.desc")


@pytest.fixture
def co_datafile(tmp_path: Path) -> Path:
    """Copy of the three-level CO LAMDA fixture named after the species."""

    target = tmp_path / "co.dat"
    shutil.copyfile(FIXTURES / "co_min.dat", target)
    return target
