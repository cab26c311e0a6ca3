from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from hugin.clone_pair import ClonePair, CodePosition, CodeSlice
from hugin.dispatch import JobOutcome, error_kind_of, run_job_file, run_jobs
from hugin.errors import (
    AmbiguousFileError,
    ArchiveEntryMissingError,
    FileNotFoundInResultError,
    InvalidPathError,
    ParseStructureError,
    ProcessFailureError,
    ValidationError,
)
from hugin.job import Job

JOB_TOML = """\
[project]
location = "{project}"

[example_sketch]
location = "Fade/Fade.ino"

[library_info]
name = "Servo"
version = "1.2.1"
location = "Servo-1.2.1.zip"
archive_root = "Servo-1.2.1"
"""

PAIR = ClonePair(
    project=CodeSlice(CodePosition(1, 0), CodePosition(3, 1)),
    example_sketch=CodeSlice(CodePosition(4, 0), CodePosition(6, 1)),
)


class ScriptedRunner:
    """Fails for project locations listed in ``failures``."""

    def __init__(self, failures: dict[str, Exception]) -> None:
        self.failures = failures
        self.seen: list[str] = []

    def run_job(self, job: Job) -> list[ClonePair]:
        self.seen.append(job.project.location)
        failure = self.failures.get(job.project.location)
        if failure is not None:
            raise failure
        return [PAIR]


def _write_job(jobs: Path, name: str, project: str) -> Path:
    path = jobs / name
    path.write_text(JOB_TOML.format(project=project), "utf-8")
    return path


@pytest.mark.parametrize(
    ("error", "kind"),
    [
        (ValidationError("bad"), "invalid_job"),
        (InvalidPathError(".."), "invalid_job"),
        (ParseStructureError("bad"), "parse_error"),
        (FileNotFoundInResultError("project", "a.ino"), "correlation_error"),
        (
            AmbiguousFileError("example", "a.ino", ["/x/a.ino", "/y/a.ino"]),
            "correlation_error",
        ),
        (ProcessFailureError(2), "process_failure"),
        (ArchiveEntryMissingError("e", "a.zip"), "archive_entry_missing"),
        (FileNotFoundError("gone"), "io_error"),
        (zipfile.BadZipFile("bad"), "io_error"),
        (RuntimeError("boom"), "unexpected_error"),
    ],
)
def test_error_kind_of(error: Exception, kind: str) -> None:
    assert error_kind_of(error) == kind


def test_run_job_file_success(tmp_path: Path) -> None:
    path = _write_job(tmp_path, "a.toml", "Blink.ino")
    outcome = run_job_file(ScriptedRunner({}), path)
    assert outcome == JobOutcome(job_path=path, success=True, clone_pairs=[PAIR])


def test_run_job_file_invalid_job(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text("[project\n", "utf-8")
    runner = ScriptedRunner({})
    outcome = run_job_file(runner, path)
    assert outcome.success is False
    assert outcome.error_kind == "invalid_job"
    assert runner.seen == []


def test_run_job_file_unexpected_error(tmp_path: Path) -> None:
    path = _write_job(tmp_path, "a.toml", "Blink.ino")
    outcome = run_job_file(ScriptedRunner({"Blink.ino": KeyError("x")}), path)
    assert outcome.success is False
    assert outcome.error_kind == "unexpected_error"
    assert outcome.error is not None
    assert "KeyError" in outcome.error


def test_run_jobs_isolates_failures(tmp_path: Path) -> None:
    paths = [
        _write_job(tmp_path, "a.toml", "A.ino"),
        _write_job(tmp_path, "b.toml", "B.ino"),
        _write_job(tmp_path, "c.toml", "C.ino"),
    ]
    runner = ScriptedRunner({"B.ino": ProcessFailureError(2)})
    seen: list[JobOutcome] = []
    outcomes = run_jobs(runner, paths, on_outcome=seen.append)

    assert runner.seen == ["A.ino", "B.ino", "C.ino"]
    assert [o.success for o in outcomes] == [True, False, True]
    assert outcomes[1].error_kind == "process_failure"
    assert outcomes[1].error == "Clone detector process failed with exit code 2."
    assert seen == outcomes
