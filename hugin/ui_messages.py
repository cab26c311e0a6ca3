from __future__ import annotations

import platform
import shlex
import sys
import traceback
from pathlib import Path

from . import __version__

BANNER_SUBTITLE = "[italic]Arduino project code cloning detector[/italic]"

MARKER_CONTRACT_ERROR = "[error]CONTRACT ERROR:[/error]"
MARKER_JOB_FAILURE = "[error]JOB FAILURE:[/error]"
MARKER_INTERNAL_ERROR = "[error]INTERNAL ERROR:[/error]"

HELP_VERSION = "Print the Hugin version and exit."
HELP_SESSION = "Session file describing the project root and the jobs directory."
HELP_CONFIG = "Configuration filename. Default: built-in CCFinderSW configuration."
HELP_DATABASE = "Library database directory (overrides `database_path` in config)."
HELP_JSON = "Write the clone pairs of all jobs as JSON to FILE."
HELP_LOG = "Enable logging to FILE (default: hugin.log)."
HELP_VERBOSE = "Verbosity of the logging (max stack: 2)."
HELP_NO_WARN = (
    "Suppress warning messages (note that the verbosity option overrides this)."
)
HELP_NO_PROGRESS = "Disable the progress bar (recommended for CI logs)."
HELP_NO_COLOR = "Disable ANSI colors in output."
HELP_DEBUG = "Print debug details (traceback and environment) on internal errors."

SUMMARY_TITLE = "Dispatch Summary"
CLI_LAYOUT_WIDTH = 40
SUMMARY_LABEL_JOBS_FOUND = "Jobs found"
SUMMARY_LABEL_JOBS_SUCCEEDED = "Jobs succeeded"
SUMMARY_LABEL_JOBS_FAILED = "Jobs failed"
SUMMARY_LABEL_CLONE_PAIRS = "Clone pairs"

INFO_SESSION = "[info]Session:[/info] {path}"
INFO_LOGGING_TO_FILE = "[info]Enabled logging to the log file:[/info] {path}"
INFO_JSON_RESULTS_SAVED = "[info]JSON results saved:[/info] {path}"

WARN_FAILED_JOBS_HEADER = "\n[warning]{count} jobs failed:[/warning]"
WARN_NO_JOBS = "[warning]No job files found in: {path}[/warning]"

ERR_INVALID_VERBOSITY = "Invalid verbosity was specified (maybe too many switches?)."
ERR_INVALID_CONFIG = "[error]Invalid configuration.[/error]\n{error}"
ERR_INVALID_SESSION = "[error]Invalid session: {path}[/error]\n{error}"
ERR_DATABASE_REQUIRED = (
    "[error]No library database given.[/error]\n"
    "Set `database_path` in the configuration file or pass --database."
)
ERR_INVALID_OUTPUT_EXT = (
    "[error]Invalid {label} output extension: {path} "
    "(expected {expected_suffix}).[/error]"
)
ERR_OUTPUT_IS_DIRECTORY = (
    "[error]The {label} output path is a directory: {path}[/error]"
)
ERR_OUTPUT_DIR_FAILED = (
    "[error]Cannot create the {label} output directory: {path} ({error}).[/error]"
)
ERR_LOG_FILE_FAILED = "[error]Cannot open log file: {path} ({error}).[/error]"
ERR_RESULTS_WRITE_FAILED = (
    "[error]Failed to write {label} results: {path} ({error}).[/error]"
)


def version_output(version: str) -> str:
    return f"Hugin {version}"


def banner_title(version: str) -> str:
    return f"[bold white]Hugin[/bold white] [dim]v{version}[/dim]\n{BANNER_SUBTITLE}"


def fmt_invalid_output_extension(
    *, label: str, path: Path, expected_suffix: str
) -> str:
    return ERR_INVALID_OUTPUT_EXT.format(
        label=label, path=path, expected_suffix=expected_suffix
    )


def fmt_output_is_directory(*, label: str, path: Path) -> str:
    return ERR_OUTPUT_IS_DIRECTORY.format(label=label, path=path)


def fmt_output_dir_failed(*, label: str, path: Path, error: object) -> str:
    return ERR_OUTPUT_DIR_FAILED.format(label=label, path=path, error=error)


def fmt_invalid_config(error: object) -> str:
    return ERR_INVALID_CONFIG.format(error=error)


def fmt_invalid_session(*, path: Path, error: object) -> str:
    return ERR_INVALID_SESSION.format(path=path, error=error)


def fmt_log_file_failed(*, path: Path, error: object) -> str:
    return ERR_LOG_FILE_FAILED.format(path=path, error=error)


def fmt_results_write_failed(*, label: str, path: Path, error: object) -> str:
    return ERR_RESULTS_WRITE_FAILED.format(label=label, path=path, error=error)


def fmt_failed_jobs_header(count: int) -> str:
    return WARN_FAILED_JOBS_HEADER.format(count=count)


def fmt_path(template: str, path: Path) -> str:
    return template.format(path=path)


def fmt_contract_error(message: str) -> str:
    return f"{MARKER_CONTRACT_ERROR}\n{message}"


def fmt_job_failure(message: str) -> str:
    return f"{MARKER_JOB_FAILURE}\n{message}"


def fmt_internal_error(error: BaseException, *, debug: bool = False) -> str:
    error_name = type(error).__name__
    error_text = str(error).strip() or "<no message>"
    lines = [
        MARKER_INTERNAL_ERROR,
        "Unexpected exception.",
        f"Reason: {error_name}: {error_text}",
        "",
        "Next steps:",
        "- Re-run with --debug to include a traceback.",
        "- Attach: command line, Hugin version, Python version, and the log file.",
    ]
    if not debug:
        return "\n".join(lines)

    traceback_lines = traceback.format_exception(
        type(error), error, error.__traceback__
    )
    command_line = shlex.join(sys.argv)
    lines.extend(
        [
            "",
            "DEBUG DETAILS",
            f"Platform: {platform.platform()}",
            f"Python: {sys.version.split()[0]}",
            f"Hugin: {__version__}",
            f"Command: {command_line}",
            f"CWD: {Path.cwd()}",
            "Traceback:",
            "".join(traceback_lines).rstrip(),
        ]
    )
    return "\n".join(lines)
