"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Final

RESULTS_SCHEMA_VERSION: Final = "1.0"


class ExitCode(IntEnum):
    SUCCESS = 0
    CONTRACT_ERROR = 2
    JOB_FAILURE = 3
    INTERNAL_ERROR = 5


EXIT_CODE_DESCRIPTIONS: Final[tuple[tuple[ExitCode, str], ...]] = (
    (ExitCode.SUCCESS, "success"),
    (
        ExitCode.CONTRACT_ERROR,
        "contract error (invalid configuration, session or command-line values)",
    ),
    (
        ExitCode.JOB_FAILURE,
        "job failure (at least one job could not be completed)",
    ),
    (
        ExitCode.INTERNAL_ERROR,
        "internal error (unexpected exception; please report)",
    ),
)


def cli_help_epilog() -> str:
    lines = ["Exit codes"]
    for code, description in EXIT_CODE_DESCRIPTIONS:
        lines.append(f"  - {int(code)} - {description}")
    return "\n".join(lines)
