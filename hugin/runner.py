"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import zipfile
from pathlib import Path, PurePosixPath
from typing import Protocol

from .clone_pair import ClonePair
from .config import CCFinderSWConfig
from .correlate import get_clone_pairs
from .detector import Detector, SubprocessDetector
from .errors import ArchiveEntryMissingError, ProcessFailureError
from .job import Job
from .report_parser import parse_report

logger = logging.getLogger(__name__)

SOURCES_DIR = "src"
EXAMPLE_SUBDIR = "example"
TEMP_PREFIX = "hugin-"


class Runner(Protocol):
    def run_job(self, job: Job) -> list[ClonePair]: ...


def staged_paths(
    project_name: str, example_name: str
) -> tuple[PurePosixPath, PurePosixPath]:
    """Working-directory relative paths of the staged project and example files.

    Both files normally sit side by side in ``src/``. When their basenames
    collide the example moves one level down into ``src/example/``; the
    detector is pointed at ``src`` and walks it recursively, so the nested
    file is still part of the scan and is reported under its nested path.
    """
    project = PurePosixPath(SOURCES_DIR, project_name)
    if example_name == project_name:
        return project, PurePosixPath(SOURCES_DIR, EXAMPLE_SUBDIR, example_name)
    return project, PurePosixPath(SOURCES_DIR, example_name)


def example_entry_name(job: Job) -> str:
    examples_root = PurePosixPath(job.library_info.archive_root, "examples")
    return job.example_sketch.get_non_canonical_path_from(examples_root).as_posix()


def extract_example(archive_path: Path, entry: str, destination: Path) -> None:
    logger.debug("Opening the library archive...: %s", archive_path)
    with zipfile.ZipFile(archive_path) as archive:
        logger.debug("Searching the source file: %s", entry)
        try:
            info = archive.getinfo(entry)
        except KeyError:
            logger.error("Could not open an example sketch source: %s", entry)
            raise ArchiveEntryMissingError(entry, str(archive_path)) from None

        destination.parent.mkdir(parents=True, exist_ok=True)
        with archive.open(info) as src, destination.open("wb") as dst:
            shutil.copyfileobj(src, dst)


class CCFinderSWRunner:
    __slots__ = ("config", "database_path", "detector", "project_path")

    def __init__(
        self,
        config: CCFinderSWConfig,
        project_path: Path,
        database_path: Path,
        *,
        detector: Detector | None = None,
    ):
        self.config = config
        self.project_path = Path(project_path)
        self.database_path = Path(database_path)
        self.detector = detector if detector is not None else SubprocessDetector(config)

    def run_job(self, job: Job) -> list[ClonePair]:
        project_target, example_target = staged_paths(
            job.project.get_file_name(), job.example_sketch.get_file_name()
        )
        library_archive_path = job.library_info.get_absolute_location(
            self.database_path
        )

        with tempfile.TemporaryDirectory(prefix=TEMP_PREFIX) as tmp:
            working_dir = Path(tmp)
            (working_dir / SOURCES_DIR).mkdir()

            project_source = job.project.get_location_from(self.project_path)
            logger.debug("Copying the project source file...: %s", project_source)
            shutil.copyfile(project_source, working_dir / project_target)

            extract_example(
                library_archive_path,
                example_entry_name(job),
                working_dir / example_target,
            )

            run = self.detector.run(working_dir, SOURCES_DIR)
            if run.returncode != 0:
                raise ProcessFailureError(run.returncode)
            contents = run.result_path.read_text("utf-8")

        parsed = parse_report(contents)
        pairs = get_clone_pairs(parsed, project_target, example_target)
        logger.debug("pairs: %s", pairs)
        return pairs
