"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CodePosition:
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class CodeSlice:
    """Contiguous code fragment; ``end`` is inclusive as reported by the detector."""

    start: CodePosition
    end: CodePosition


@dataclass(frozen=True, slots=True)
class ClonePairScores:
    project_part: float
    example_sketch_part: float


@dataclass(frozen=True, slots=True)
class ClonePair:
    project: CodeSlice
    example_sketch: CodeSlice
    scores: ClonePairScores | None = None
