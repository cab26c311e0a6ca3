"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TypedDict

from .clone_pair import ClonePair, CodePosition, CodeSlice
from .contracts import RESULTS_SCHEMA_VERSION
from .dispatch import JobOutcome

PositionRecord = dict[str, int]
SliceRecord = dict[str, PositionRecord]


class ResultsMeta(TypedDict):
    results_schema_version: str
    hugin_version: str
    python_version: str
    session_path: str
    jobs_path: str
    clone_detector: str


def build_results_meta(
    *,
    hugin_version: str,
    session_path: Path,
    jobs_path: Path,
    clone_detector: str,
) -> ResultsMeta:
    return {
        "results_schema_version": RESULTS_SCHEMA_VERSION,
        "hugin_version": hugin_version,
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}",
        "session_path": str(session_path),
        "jobs_path": str(jobs_path),
        "clone_detector": clone_detector,
    }


def _encode_position(position: CodePosition) -> PositionRecord:
    return {"line": position.line, "column": position.column}


def _encode_slice(code_slice: CodeSlice) -> SliceRecord:
    return {
        "start": _encode_position(code_slice.start),
        "end": _encode_position(code_slice.end),
    }


def clone_pair_to_dict(pair: ClonePair) -> dict[str, object]:
    record: dict[str, object] = {
        "project": _encode_slice(pair.project),
        "example_sketch": _encode_slice(pair.example_sketch),
    }
    if pair.scores is not None:
        record["scores"] = {
            "project_part": pair.scores.project_part,
            "example_sketch_part": pair.scores.example_sketch_part,
        }
    return record


def _job_label(job_path: Path, jobs_path: Path | None) -> str:
    if jobs_path is not None:
        try:
            return job_path.relative_to(jobs_path).as_posix()
        except ValueError:
            pass
    return job_path.as_posix()


def _encode_outcome(outcome: JobOutcome, jobs_path: Path | None) -> dict[str, object]:
    record: dict[str, object] = {"job": _job_label(outcome.job_path, jobs_path)}
    if outcome.success:
        record["status"] = "ok"
        record["clone_pairs"] = [clone_pair_to_dict(p) for p in outcome.clone_pairs]
    else:
        record["status"] = "failed"
        record["error_kind"] = outcome.error_kind
        record["error"] = outcome.error
    return record


def to_json_results(outcomes: Sequence[JobOutcome], meta: ResultsMeta) -> str:
    jobs_path = Path(meta["jobs_path"]) if meta["jobs_path"] else None
    ordered = sorted(outcomes, key=lambda o: _job_label(o.job_path, jobs_path))
    return json.dumps(
        {
            "meta": meta,
            "job_count": len(ordered),
            "failed_count": sum(1 for o in ordered if not o.success),
            "jobs": [_encode_outcome(o, jobs_path) for o in ordered],
        },
        ensure_ascii=False,
        indent=2,
    )
