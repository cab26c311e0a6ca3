"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

import logging
import zipfile
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .clone_pair import ClonePair
from .errors import (
    ArchiveEntryMissingError,
    CorrelationError,
    HuginError,
    InvalidPathError,
    ParseStructureError,
    ProcessFailureError,
    ValidationError,
)
from .job import load_job
from .runner import Runner

logger = logging.getLogger(__name__)

_ERROR_KINDS: tuple[tuple[type[BaseException], str], ...] = (
    (ValidationError, "invalid_job"),
    (InvalidPathError, "invalid_job"),
    (ParseStructureError, "parse_error"),
    (CorrelationError, "correlation_error"),
    (ProcessFailureError, "process_failure"),
    (ArchiveEntryMissingError, "archive_entry_missing"),
    (OSError, "io_error"),
    (zipfile.BadZipFile, "io_error"),
    (UnicodeDecodeError, "io_error"),
)


@dataclass(slots=True)
class JobOutcome:
    """Result of running a single job file."""

    job_path: Path
    success: bool
    clone_pairs: list[ClonePair] = field(default_factory=list)
    error: str | None = None
    error_kind: str | None = None


def error_kind_of(error: BaseException) -> str:
    for error_type, kind in _ERROR_KINDS:
        if isinstance(error, error_type):
            return kind
    return "unexpected_error"


def run_job_file(runner: Runner, job_path: Path) -> JobOutcome:
    """
    Load and run one job, capturing any failure in the returned outcome.

    A failed job never propagates its exception, so sibling jobs keep running.
    """
    logger.info("Running job: %s", job_path)
    try:
        job = load_job(job_path)
        pairs = runner.run_job(job)
    except (HuginError, OSError, zipfile.BadZipFile, UnicodeDecodeError) as e:
        logger.error("Job %s failed: %s", job_path, e)
        return JobOutcome(
            job_path=job_path,
            success=False,
            error=str(e),
            error_kind=error_kind_of(e),
        )
    except Exception as e:
        logger.exception("Job %s failed unexpectedly.", job_path)
        return JobOutcome(
            job_path=job_path,
            success=False,
            error=f"Unexpected error: {type(e).__name__}: {e}",
            error_kind="unexpected_error",
        )

    logger.info("Job %s finished with %d clone pairs.", job_path, len(pairs))
    return JobOutcome(job_path=job_path, success=True, clone_pairs=pairs)


def run_jobs(
    runner: Runner,
    job_paths: Iterable[Path],
    *,
    on_outcome: Callable[[JobOutcome], None] | None = None,
) -> list[JobOutcome]:
    outcomes: list[JobOutcome] = []
    for job_path in job_paths:
        outcome = run_job_file(runner, job_path)
        outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)
    return outcomes
