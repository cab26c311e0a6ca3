"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations


class HuginError(Exception):
    """Base exception for Hugin."""


class ParseStructureError(HuginError):
    """Detector report does not follow the expected block structure."""

    __slots__ = ("line",)

    def __init__(self, message: str, *, line: int | None = None) -> None:
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)
        self.line = line


class CorrelationError(HuginError):
    """Parsed report cannot be reduced to clone pairs of the tracked files."""


class FileNotFoundInResultError(CorrelationError):
    __slots__ = ("file_name", "side")

    def __init__(self, side: str, file_name: str) -> None:
        super().__init__(f"The {side} file was not found in the result: {file_name}")
        self.side = side
        self.file_name = file_name


class AmbiguousFileError(CorrelationError):
    __slots__ = ("candidates", "side")

    def __init__(self, side: str, file_name: str, candidates: list[str]) -> None:
        super().__init__(
            f"The {side} file {file_name} matches {len(candidates)} result entries: "
            + ", ".join(candidates)
        )
        self.side = side
        self.candidates = candidates


class DuplicatedCodePartError(CorrelationError):
    __slots__ = ("side",)

    def __init__(self, side: str) -> None:
        super().__init__(f"Duplicated {side} code part entries.")
        self.side = side


class ProcessFailureError(HuginError):
    """Clone detector exited abnormally."""

    __slots__ = ("returncode",)

    def __init__(self, returncode: int | None, message: str | None = None) -> None:
        if message is None:
            message = f"Clone detector process failed with exit code {returncode}."
        super().__init__(message)
        self.returncode = returncode


class ArchiveEntryMissingError(HuginError):
    """Example sketch source is absent from the library archive."""

    __slots__ = ("archive", "entry")

    def __init__(self, entry: str, archive: str) -> None:
        super().__init__(
            f"Could not open an example sketch source: {entry} (archive: {archive})"
        )
        self.entry = entry
        self.archive = archive


class InvalidConfigurationError(HuginError):
    """Configuration is missing keys or carries invalid values."""


class InvalidPathError(HuginError):
    """Path cannot be used as a source location."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Invalid path: {path!r}")
        self.path = path


class ValidationError(HuginError):
    """Session or job description is invalid."""
