"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

import re
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath
from typing import TypeVar

from .errors import InvalidPathError, ValidationError

P = TypeVar("P", bound=PurePath)

_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


def _table(raw: Mapping[str, object], key: str) -> Mapping[str, object]:
    value = raw.get(key)
    if not isinstance(value, Mapping):
        raise ValidationError(f"Missing or invalid table: [{key}]")
    return value


def _string(raw: Mapping[str, object], key: str, *, where: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value:
        raise ValidationError(f"Missing or invalid key: {where}.{key}")
    return value


@dataclass(frozen=True, slots=True)
class SourceInfo:
    location: str

    def get_location_from(self, path: Path) -> Path:
        return (Path(path) / self.location).resolve(strict=True)

    def get_non_canonical_path_from(self, path: P) -> P:
        return path / self.location

    def get_file_name(self) -> str:
        name = PurePosixPath(self.location.replace("\\", "/")).name
        if not name or name == "..":
            raise InvalidPathError(self.location)
        return name


@dataclass(frozen=True, slots=True)
class LibraryInfo:
    name: str
    version: str
    location: str
    archive_root: str

    def get_absolute_location(self, database_path: Path) -> Path:
        return (Path(database_path) / "libraries" / self.location).resolve(strict=True)


@dataclass(frozen=True, slots=True)
class Job:
    project: SourceInfo
    example_sketch: SourceInfo
    library_info: LibraryInfo

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> Job:
        project = _table(raw, "project")
        example = _table(raw, "example_sketch")
        library = _table(raw, "library_info")

        version = _string(library, "version", where="library_info")
        if not _SEMVER_RE.match(version):
            raise ValidationError(f"Invalid library version: {version}")

        return cls(
            project=SourceInfo(_string(project, "location", where="project")),
            example_sketch=SourceInfo(
                _string(example, "location", where="example_sketch")
            ),
            library_info=LibraryInfo(
                name=_string(library, "name", where="library_info"),
                version=version,
                location=_string(library, "location", where="library_info"),
                archive_root=_string(library, "archive_root", where="library_info"),
            ),
        )


def load_job(path: str | Path) -> Job:
    job_path = Path(path)
    with job_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValidationError(f"Invalid job file {job_path}: {e}") from e
    return Job.from_mapping(raw)
