"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .errors import ValidationError

JOB_FILE_SUFFIX = ".toml"


@dataclass(frozen=True, slots=True)
class Session:
    project_path: str
    jobs_path: str

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> Session:
        values: dict[str, str] = {}
        for key in ("project_path", "jobs_path"):
            value = raw.get(key)
            if not isinstance(value, str) or not value:
                raise ValidationError(f"Missing or invalid session key: {key}")
            values[key] = value
        return cls(**values)

    def get_absolute_project_path(self, session_path: Path) -> Path:
        return (Path(session_path) / self.project_path).resolve(strict=True)

    def get_absolute_jobs_path(self, session_path: Path) -> Path:
        return (Path(session_path) / self.jobs_path).resolve(strict=True)


def load_session(path: str | Path) -> Session:
    session_file = Path(path)
    with session_file.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValidationError(f"Invalid session file {session_file}: {e}") from e
    return Session.from_mapping(raw)


def iter_job_files(jobs_path: Path) -> list[Path]:
    if not jobs_path.is_dir():
        raise ValidationError(f"Jobs path must be a directory: {jobs_path}")
    return sorted(
        p for p in jobs_path.iterdir() if p.is_file() and p.suffix == JOB_FILE_SUFFIX
    )
