"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import NamedTuple, TypeVar

from .clone_pair import CodePosition
from .errors import ParseStructureError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_WHITESPACE = frozenset(" \t\r\n")
_DIGITS = frozenset("0123456789")
U32_MAX = 2**32 - 1

FILE_DESCRIPTION_BEGIN = "#begin{file description}"
FILE_DESCRIPTION_END = "#end{file description}"
CLONE_BEGIN = "#begin{clone}"
CLONE_END = "#end{clone}"
SET_BEGIN = "#begin{set}"
SET_END = "#end{set}"
BLOCK_BEGIN_PREFIX = "#begin{"
BLOCK_END_PREFIX = "#end{"


# =========================
# Data structures
# =========================


class FileNumber(NamedTuple):
    archive_index: int
    file_index: int


class FileDescriptionEntry(NamedTuple):
    file_number: FileNumber
    lines: int
    tokens: int
    path: str


@dataclass(frozen=True, slots=True)
class SetElement:
    file_number: FileNumber
    start_position: CodePosition
    end_position: CodePosition
    extent: int
    # Third component of each position triplet; kept, not interpreted.
    start_token_index: int = 0
    end_token_index: int = 0


@dataclass(frozen=True, slots=True)
class CloneSet:
    elements: tuple[SetElement, ...]


@dataclass(frozen=True, slots=True)
class ParsedResult:
    file_description: dict[FileNumber, str]
    clone: list[CloneSet]


@dataclass(frozen=True, slots=True)
class FileDescriptionBlock:
    entries: dict[FileNumber, str]


@dataclass(frozen=True, slots=True)
class CloneBlock:
    sets: list[CloneSet]


@dataclass(frozen=True, slots=True)
class UnknownBlock:
    """Skipped block or tagged directive; ``header`` is its first line."""

    header: str


DataBlock = FileDescriptionBlock | CloneBlock | UnknownBlock


class _NoMatch(Exception):
    """The rule does not apply at this position; the caller may backtrack."""


# =========================
# Grammar
# =========================


class ResultParser:
    """
    Recursive-descent parser over the detector's block-structured report.

    Every ``parse_*`` method takes a start offset and returns
    ``(next_offset, value)``. A rule that does not apply raises ``_NoMatch``
    so that alternatives and repetitions can backtrack; once the header of a
    mandatory block has been recognised its body is committed and any
    malformation raises ``ParseStructureError``.
    """

    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text = text

    def line_of(self, pos: int) -> int:
        return self.text.count("\n", 0, pos) + 1

    def _line_end(self, pos: int) -> int:
        idx = self.text.find("\n", pos)
        if idx == -1:
            return len(self.text)
        if idx > pos and self.text[idx - 1] == "\r":
            return idx - 1
        return idx

    def _expect(self, pos: int, literal: str) -> int:
        if not self.text.startswith(literal, pos):
            raise _NoMatch(pos)
        return pos + len(literal)

    def _committed(
        self, pos: int, rule: Callable[[int], tuple[int, T]], what: str
    ) -> tuple[int, T]:
        try:
            return rule(pos)
        except _NoMatch:
            line = self.line_of(self._skip_whitespace(pos))
            raise ParseStructureError(
                f"Malformed report: expected {what}", line=line
            ) from None

    def _many1(
        self, pos: int, rule: Callable[[int], tuple[int, T]]
    ) -> tuple[int, list[T]]:
        pos, first = rule(pos)
        items = [first]
        while True:
            try:
                pos, item = rule(pos)
            except _NoMatch:
                return pos, items
            items.append(item)

    def _skip_whitespace(self, pos: int) -> int:
        n = len(self.text)
        while pos < n and self.text[pos] in _WHITESPACE:
            pos += 1
        return pos

    def skip_preceding_whitespace(self, pos: int) -> int:
        # Fails when nothing but whitespace is left, so repetitions terminate.
        end = self._skip_whitespace(pos)
        if end >= len(self.text):
            raise _NoMatch(pos)
        return end

    def parse_digits(self, pos: int) -> tuple[int, int]:
        start = self.skip_preceding_whitespace(pos)
        end = start
        n = len(self.text)
        while end < n and self.text[end] in _DIGITS:
            end += 1
        if end == start:
            raise _NoMatch(start)
        value = int(self.text[start:end])
        if value > U32_MAX:
            raise ParseStructureError(
                f"Numeric field out of range: {self.text[start:end]}",
                line=self.line_of(start),
            )
        return end, value

    def parse_string(self, pos: int) -> tuple[int, str]:
        """Rest of the line, which must be terminated by a line ending."""
        start = self.skip_preceding_whitespace(pos)
        newline = self.text.find("\n", start)
        if newline == -1:
            raise _NoMatch(start)
        end = self._line_end(start)
        return newline + 1, self.text[start:end]

    def parse_file_number(self, pos: int) -> tuple[int, FileNumber]:
        pos, archive_index = self.parse_digits(pos)
        pos = self._expect(pos, ".")
        pos, file_index = self.parse_digits(pos)
        return pos, FileNumber(archive_index, file_index)

    def parse_position(self, pos: int) -> tuple[int, tuple[CodePosition, int]]:
        pos, line = self.parse_digits(pos)
        pos = self._expect(pos, ",")
        pos, column = self.parse_digits(pos)
        pos = self._expect(pos, ",")
        pos, token_index = self.parse_digits(pos)
        return pos, (CodePosition(line, column), token_index)

    def parse_set_element(self, pos: int) -> tuple[int, SetElement]:
        pos = self.skip_preceding_whitespace(pos)
        pos, file_number = self.parse_file_number(pos)
        pos, (start, start_token) = self.parse_position(pos)
        pos, (end, end_token) = self.parse_position(pos)
        pos, extent = self.parse_digits(pos)
        return pos, SetElement(
            file_number=file_number,
            start_position=start,
            end_position=end,
            extent=extent,
            start_token_index=start_token,
            end_token_index=end_token,
        )

    def parse_set(self, pos: int) -> tuple[int, CloneSet]:
        pos = self._expect(self.skip_preceding_whitespace(pos), SET_BEGIN)
        pos, elements = self._committed(
            pos,
            lambda p: self._many1(p, self.parse_set_element),
            "a set element",
        )
        pos, _ = self._committed(
            pos, lambda p: self._closing(p, SET_END), SET_END
        )
        return pos, CloneSet(tuple(elements))

    def parse_clone(self, pos: int) -> tuple[int, CloneBlock]:
        pos = self._expect(self.skip_preceding_whitespace(pos), CLONE_BEGIN)
        pos, sets = self._committed(
            pos,
            lambda p: self._many1(p, self.parse_set),
            SET_BEGIN,
        )
        pos, _ = self._committed(
            pos, lambda p: self._closing(p, CLONE_END), CLONE_END
        )
        return pos, CloneBlock(sets)

    def parse_file_description_entry(
        self, pos: int
    ) -> tuple[int, FileDescriptionEntry]:
        pos = self.skip_preceding_whitespace(pos)
        pos, file_number = self.parse_file_number(pos)
        pos, lines = self.parse_digits(pos)
        pos, tokens = self.parse_digits(pos)
        pos, path = self.parse_string(pos)
        return pos, FileDescriptionEntry(file_number, lines, tokens, path)

    def parse_file_description(self, pos: int) -> tuple[int, FileDescriptionBlock]:
        pos = self._expect(
            self.skip_preceding_whitespace(pos), FILE_DESCRIPTION_BEGIN
        )
        pos, entries = self._committed(
            pos,
            lambda p: self._many1(p, self.parse_file_description_entry),
            "a file description entry",
        )
        pos, _ = self._committed(
            pos,
            lambda p: self._closing(p, FILE_DESCRIPTION_END),
            FILE_DESCRIPTION_END,
        )
        # Repeated file numbers: the last entry wins.
        return pos, FileDescriptionBlock({e.file_number: e.path for e in entries})

    def parse_block(self, pos: int) -> tuple[int, UnknownBlock]:
        start = self.skip_preceding_whitespace(pos)
        pos = self._expect(start, BLOCK_BEGIN_PREFIX)
        end_tag = self.text.find(BLOCK_END_PREFIX, pos)
        if end_tag == -1:
            raise _NoMatch(start)
        header = self.text[start : self._line_end(start)]
        return self._line_end(end_tag), UnknownBlock(header)

    def parse_tag(self, pos: int) -> tuple[int, UnknownBlock]:
        start = self.skip_preceding_whitespace(pos)
        self._expect(start, "#")
        end = self._line_end(start)
        return end, UnknownBlock(self.text[start:end])

    def _closing(self, pos: int, literal: str) -> tuple[int, None]:
        return self._expect(self.skip_preceding_whitespace(pos), literal), None

    def parse_blocks(self, pos: int) -> tuple[int, list[DataBlock]]:
        alternatives: tuple[Callable[[int], tuple[int, DataBlock]], ...] = (
            self.parse_file_description,
            self.parse_clone,
            self.parse_block,
            self.parse_tag,
        )

        def _any_block(p: int) -> tuple[int, DataBlock]:
            for alternative in alternatives:
                try:
                    return alternative(p)
                except _NoMatch:
                    continue
            raise _NoMatch(p)

        try:
            return self._many1(pos, _any_block)
        except _NoMatch:
            raise ParseStructureError(
                "No result blocks found.",
                line=self.line_of(self._skip_whitespace(pos)),
            ) from None


def reduce_blocks(blocks: list[DataBlock]) -> ParsedResult:
    file_description: dict[FileNumber, str] | None = None
    clone: list[CloneSet] | None = None
    for block in blocks:
        if isinstance(block, FileDescriptionBlock):
            if file_description is not None:
                raise ParseStructureError("Duplicated file description blocks.")
            file_description = block.entries
        elif isinstance(block, CloneBlock):
            if clone is not None:
                raise ParseStructureError("Duplicated clone blocks.")
            clone = block.sets
        else:
            logger.debug("Skipping block: %s", block.header)
    if file_description is None or clone is None:
        raise ParseStructureError("Missing mandatory result blocks.")
    return ParsedResult(file_description=file_description, clone=clone)


def parse_result(text: str) -> tuple[str, ParsedResult]:
    """Parse a whole report, returning the unparsed remainder and the result."""
    parser = ResultParser(text)
    pos, blocks = parser.parse_blocks(0)
    return text[pos:], reduce_blocks(blocks)


def parse_report(text: str) -> ParsedResult:
    remaining, result = parse_result(text)
    if remaining.strip():
        consumed = len(text) - len(remaining.lstrip())
        logger.warning(
            "Ignoring unparsed report input starting at line %d.",
            text.count("\n", 0, consumed) + 1,
        )
    logger.debug(
        "Parsed report: %d files, %d clone sets.",
        len(result.file_description),
        len(result.clone),
    )
    return result
