"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import PurePath, PurePosixPath

from .clone_pair import ClonePair, CodeSlice
from .errors import (
    AmbiguousFileError,
    CorrelationError,
    DuplicatedCodePartError,
    FileNotFoundInResultError,
    InvalidPathError,
)
from .report_parser import CloneSet, FileNumber, ParsedResult

logger = logging.getLogger(__name__)

PROJECT_SIDE = "project"
EXAMPLE_SIDE = "example"


def path_parts(path: str | PurePath) -> tuple[str, ...]:
    """Path components with both ``/`` and ``\\`` treated as separators."""
    text = str(path).replace("\\", "/")
    return tuple(p for p in PurePosixPath(text).parts if p not in ("/", "."))


def resolve_file_number(
    file_description: Mapping[FileNumber, str],
    target: str | PurePath,
    *,
    side: str = PROJECT_SIDE,
) -> FileNumber:
    """
    Find the single file description entry whose path ends with ``target``.

    ``target`` may be a bare basename or a relative path such as
    ``src/Blink.ino``; the recorded path matches when its trailing
    components equal the target's components.
    """
    target_parts = path_parts(target)
    if not target_parts:
        raise InvalidPathError(str(target))

    size = len(target_parts)
    matches = [
        file_number
        for file_number, recorded in file_description.items()
        if path_parts(recorded)[-size:] == target_parts
    ]
    if not matches:
        raise FileNotFoundInResultError(side, str(target))
    if len(matches) > 1:
        raise AmbiguousFileError(
            side, str(target), [file_description[m] for m in matches]
        )
    return matches[0]


def _correlate_set(
    clone_set: CloneSet,
    project_number: FileNumber,
    example_number: FileNumber,
) -> ClonePair | None:
    project_part: CodeSlice | None = None
    example_part: CodeSlice | None = None
    for element in clone_set.elements:
        if element.file_number == project_number:
            if project_part is not None:
                raise DuplicatedCodePartError(PROJECT_SIDE)
            project_part = CodeSlice(element.start_position, element.end_position)
        elif element.file_number == example_number:
            if example_part is not None:
                raise DuplicatedCodePartError(EXAMPLE_SIDE)
            example_part = CodeSlice(element.start_position, element.end_position)

    if project_part is None or example_part is None:
        return None
    return ClonePair(project=project_part, example_sketch=example_part)


def get_clone_pairs(
    result: ParsedResult,
    project_file: str | PurePath,
    example_file: str | PurePath,
) -> list[ClonePair]:
    """Reduce a parsed report to the clone pairs between the two tracked files."""
    project_number = resolve_file_number(
        result.file_description, project_file, side=PROJECT_SIDE
    )
    logger.debug("project_file_number: %s", project_number)
    example_number = resolve_file_number(
        result.file_description, example_file, side=EXAMPLE_SIDE
    )
    logger.debug("example_source_file_number: %s", example_number)
    if project_number == example_number:
        raise CorrelationError(
            "The project and example files resolve to the same result entry: "
            f"{result.file_description[project_number]}"
        )

    pairs: list[ClonePair] = []
    for clone_set in result.clone:
        pair = _correlate_set(clone_set, project_number, example_number)
        if pair is not None:
            pairs.append(pair)
    logger.debug(
        "Correlated %d of %d clone sets.", len(pairs), len(result.clone)
    )
    return pairs
