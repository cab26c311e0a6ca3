"""
Hugin — Arduino project code cloning detector: job dispatcher.

Copyright (c) 2026 ikubaku
Licensed under the MIT License.
"""

from __future__ import annotations

import argparse

from . import ui_messages as ui
from .contracts import cli_help_epilog

DEFAULT_LOG_FILE = "hugin.log"


def build_parser(version: str) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="hugin",
        description="An Arduino project code cloning detector: job dispatcher.",
        epilog=cli_help_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    ap.add_argument(
        "--version",
        action="version",
        version=ui.version_output(version),
        help=ui.HELP_VERSION,
    )

    core_group = ap.add_argument_group("Target")
    core_group.add_argument(
        "session",
        metavar="SESSION_FILE",
        help=ui.HELP_SESSION,
    )
    core_group.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        default=None,
        help=ui.HELP_CONFIG,
    )
    core_group.add_argument(
        "--database",
        metavar="DIR",
        default=None,
        help=ui.HELP_DATABASE,
    )

    out_group = ap.add_argument_group("Reporting")
    out_group.add_argument(
        "--json",
        dest="json_out",
        metavar="FILE",
        help=ui.HELP_JSON,
    )
    out_group.add_argument(
        "-l",
        "--log",
        dest="log_file",
        metavar="FILE",
        nargs="?",
        const=DEFAULT_LOG_FILE,
        default=None,
        help=ui.HELP_LOG,
    )
    out_group.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help=ui.HELP_VERBOSE,
    )
    out_group.add_argument(
        "-q",
        "--no-warn",
        dest="quiet",
        action="store_true",
        help=ui.HELP_NO_WARN,
    )
    out_group.add_argument(
        "--no-progress",
        action="store_true",
        help=ui.HELP_NO_PROGRESS,
    )
    out_group.add_argument(
        "--no-color",
        action="store_true",
        help=ui.HELP_NO_COLOR,
    )
    out_group.add_argument(
        "--debug",
        action="store_true",
        help=ui.HELP_DEBUG,
    )
    return ap
