from __future__ import annotations

import logging
import zipfile
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

SAMPLE_REPORT = (
    "#version:ccfindersw 1.0\n"
    "#begin{file description}\n"
    "0.0 100 444 /a/Example.ino\n"
    "0.1 250 1202 /a/MyProject.ino\n"
    "#end{file description}\n"
    "#begin{clone}\n"
    "#begin{set}\n"
    "0.0 20,40,150 30,0,189 81\n"
    "0.1 130,40,656 141,4,692 81\n"
    "#end{set}\n"
    "#end{clone}\n"
)

ArchiveFactory = Callable[[Path, dict[str, str]], Path]


@pytest.fixture
def sample_report() -> str:
    return SAMPLE_REPORT


@pytest.fixture
def make_archive() -> ArchiveFactory:
    def _make(path: Path, entries: dict[str, str]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w") as archive:
            for name, content in entries.items():
                archive.writestr(name, content)
        return path

    return _make


@pytest.fixture(autouse=True)
def _reset_hugin_logger() -> Iterator[None]:
    yield
    logger = logging.getLogger("hugin")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
