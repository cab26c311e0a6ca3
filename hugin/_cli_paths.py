"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

from rich.console import Console

from . import ui_messages as ui
from .contracts import ExitCode

RESULTS_SUFFIX = ".json"


def _reject(console: Console, message: str) -> NoReturn:
    console.print(ui.fmt_contract_error(message))
    sys.exit(ExitCode.CONTRACT_ERROR)


def _prepare_output_path(path: str, *, label: str, console: Console) -> Path:
    """Resolve an output file path and create its parent directory."""
    out = Path(path).expanduser().resolve()
    if out.is_dir():
        _reject(console, ui.fmt_output_is_directory(label=label, path=out))
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        _reject(
            console, ui.fmt_output_dir_failed(label=label, path=out.parent, error=e)
        )
    return out


def resolve_results_path(path: str, *, console: Console) -> Path:
    out = Path(path).expanduser()
    if out.suffix.lower() != RESULTS_SUFFIX:
        _reject(
            console,
            ui.fmt_invalid_output_extension(
                label="JSON", path=out, expected_suffix=RESULTS_SUFFIX
            ),
        )
    return _prepare_output_path(path, label="JSON", console=console)


def resolve_log_path(path: str, *, console: Console) -> Path:
    return _prepare_output_path(path, label="log", console=console)
