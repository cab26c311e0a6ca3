"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .config import CCFinderSWConfig
from .errors import ProcessFailureError

logger = logging.getLogger(__name__)

RESULT_BASENAME = "result"
RESULT_FILENAME = f"{RESULT_BASENAME}.txt"
WINDOW_SIZE = 2
CHARSET = "auto"


@dataclass(frozen=True, slots=True)
class DetectorRun:
    returncode: int
    result_path: Path


class Detector(Protocol):
    def run(self, working_dir: Path, sources_dir: str) -> DetectorRun:
        """Run the detector over ``working_dir / sources_dir``."""
        ...


def build_command(config: CCFinderSWConfig, sources_dir: str) -> list[str]:
    return [
        str(config.executable_path),
        "D",
        "-d",
        sources_dir,
        "-l",
        config.language_to_option_value(),
        "-o",
        RESULT_BASENAME,
        "-t",
        config.token_length_to_option_value(),
        "-w",
        str(WINDOW_SIZE),
        "-antlr",
        config.extensions_to_option_value(),
        "-charset",
        CHARSET,
    ]


class SubprocessDetector:
    __slots__ = ("config",)

    def __init__(self, config: CCFinderSWConfig):
        self.config = config

    def run(self, working_dir: Path, sources_dir: str) -> DetectorRun:
        command = build_command(self.config, sources_dir)
        logger.debug("Running the clone detector: %s", shlex.join(command))
        try:
            completed = subprocess.run(
                command,
                cwd=working_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self.config.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ProcessFailureError(
                None, f"Clone detector timed out after {e.timeout} seconds."
            ) from e

        if completed.stdout:
            logger.debug("Clone detector output:\n%s", completed.stdout.rstrip())
        return DetectorRun(
            returncode=completed.returncode,
            result_path=Path(working_dir) / RESULT_FILENAME,
        )
