"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import ui_messages as ui


def _summary_value_style(*, label: str, value: int) -> str:
    if value == 0:
        return "dim"
    if label == ui.SUMMARY_LABEL_JOBS_FAILED:
        return "bold red"
    if label == ui.SUMMARY_LABEL_CLONE_PAIRS:
        return "bold yellow"
    return "bold"


def _build_summary_rows(
    *,
    jobs_found: int,
    jobs_succeeded: int,
    jobs_failed: int,
    clone_pairs_count: int,
) -> list[tuple[str, int]]:
    return [
        (ui.SUMMARY_LABEL_JOBS_FOUND, jobs_found),
        (ui.SUMMARY_LABEL_JOBS_SUCCEEDED, jobs_succeeded),
        (ui.SUMMARY_LABEL_JOBS_FAILED, jobs_failed),
        (ui.SUMMARY_LABEL_CLONE_PAIRS, clone_pairs_count),
    ]


def _build_summary_table(rows: list[tuple[str, int]]) -> Table:
    summary_table = Table(
        title=ui.SUMMARY_TITLE,
        show_header=True,
        width=ui.CLI_LAYOUT_WIDTH,
    )
    summary_table.add_column("Metric")
    summary_table.add_column("Value", justify="right")
    for label, value in rows:
        summary_table.add_row(
            label,
            Text(str(value), style=_summary_value_style(label=label, value=value)),
        )
    return summary_table


def _print_summary(
    *,
    console: Console,
    jobs_found: int,
    jobs_succeeded: int,
    jobs_failed: int,
    clone_pairs_count: int,
) -> None:
    rows = _build_summary_rows(
        jobs_found=jobs_found,
        jobs_succeeded=jobs_succeeded,
        jobs_failed=jobs_failed,
        clone_pairs_count=clone_pairs_count,
    )
    console.print(_build_summary_table(rows))
