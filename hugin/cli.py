from __future__ import annotations

import logging
import os
import sys
import time
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import NoReturn

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.rule import Rule
from rich.theme import Theme

from . import __version__
from . import ui_messages as ui
from ._cli_args import build_parser
from ._cli_logging import MAX_VERBOSITY, configure_logging, resolve_log_level
from ._cli_paths import resolve_log_path, resolve_results_path
from ._cli_summary import _print_summary
from .config import CloneDetectorKind, Config, load_config
from .contracts import ExitCode
from .dispatch import JobOutcome, run_jobs
from .errors import InvalidConfigurationError, ValidationError
from .results import build_results_meta, to_json_results
from .runner import CCFinderSWRunner, Runner
from .session import iter_job_files, load_session

logger = logging.getLogger(__name__)

# Custom theme for Rich
custom_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "dim": "dim",
    }
)


def _make_console(*, no_color: bool, stderr: bool = False) -> Console:
    return Console(theme=custom_theme, width=100, no_color=no_color, stderr=stderr)


console = _make_console(no_color=False)


def print_banner() -> None:
    console.print(
        Panel(
            ui.banner_title(__version__),
            border_style="blue",
            padding=(0, 2),
            width=ui.CLI_LAYOUT_WIDTH,
            expand=False,
        )
    )


def _is_debug_enabled(
    *,
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> bool:
    args = list(sys.argv[1:] if argv is None else argv)
    debug_from_flag = any(arg == "--debug" for arg in args)
    env = os.environ if environ is None else environ
    debug_from_env = env.get("HUGIN_DEBUG") == "1"
    return debug_from_flag or debug_from_env


def _contract_exit(message: str) -> NoReturn:
    console.print(ui.fmt_contract_error(message))
    sys.exit(ExitCode.CONTRACT_ERROR)


def build_runner(config: Config, project_path: Path, database_path: Path) -> Runner:
    if config.clone_detector_kind is CloneDetectorKind.CCFINDERSW:
        return CCFinderSWRunner(
            config.clone_detector_config, project_path, database_path
        )
    raise InvalidConfigurationError(
        f"Unsupported clone detector: {config.clone_detector_kind}"
    )


def _run_with_progress(runner: Runner, job_files: list[Path]) -> list[JobOutcome]:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(
            f"Running {len(job_files)} jobs...", total=len(job_files)
        )
        return run_jobs(
            runner, job_files, on_outcome=lambda _outcome: progress.advance(task)
        )


def _main_impl() -> None:
    ap = build_parser(__version__)
    args = ap.parse_args()

    global console
    console = _make_console(no_color=args.no_color)

    if args.verbose > MAX_VERBOSITY:
        _contract_exit(ui.ERR_INVALID_VERBOSITY)

    log_path: Path | None = None
    if args.log_file:
        log_path = resolve_log_path(args.log_file, console=console)
    try:
        configure_logging(
            level=resolve_log_level(verbosity=args.verbose, quiet=args.quiet),
            console=_make_console(no_color=args.no_color, stderr=True),
            log_file=log_path,
        )
    except OSError as e:
        _contract_exit(ui.fmt_log_file_failed(path=log_path, error=e))
    logger.info("Started the logger.")

    t0 = time.monotonic()

    print_banner()
    if log_path is not None:
        console.print(ui.fmt_path(ui.INFO_LOGGING_TO_FILE, log_path))

    json_out_path: Path | None = None
    if args.json_out:
        json_out_path = resolve_results_path(args.json_out, console=console)

    # Configuration
    if args.config:
        logger.info("Loading configuration from file: %s...", args.config)
        try:
            config = load_config(Path(args.config).expanduser())
        except InvalidConfigurationError as e:
            _contract_exit(ui.fmt_invalid_config(e))
    else:
        logger.info("Using the default configuration.")
        config = Config()

    if args.database:
        database_path = Path(args.database).expanduser()
    elif config.database_path is not None:
        database_path = config.database_path
    else:
        _contract_exit(ui.ERR_DATABASE_REQUIRED)

    # Session
    session_file = Path(args.session).expanduser()
    try:
        session = load_session(session_file)
        session_dir = session_file.resolve().parent
        project_path = session.get_absolute_project_path(session_dir)
        jobs_path = session.get_absolute_jobs_path(session_dir)
        job_files = iter_job_files(jobs_path)
    except (ValidationError, OSError) as e:
        _contract_exit(ui.fmt_invalid_session(path=session_file, error=e))

    console.print(ui.fmt_path(ui.INFO_SESSION, session_file))
    if not job_files:
        console.print(ui.fmt_path(ui.WARN_NO_JOBS, jobs_path))

    try:
        runner = build_runner(config, project_path, database_path)
    except InvalidConfigurationError as e:
        _contract_exit(ui.fmt_invalid_config(e))

    # Dispatch
    if args.no_progress:
        outcomes = run_jobs(runner, job_files)
    else:
        outcomes = _run_with_progress(runner, job_files)

    failed = [o for o in outcomes if not o.success]
    if failed:
        console.print(ui.fmt_failed_jobs_header(len(failed)))
        for outcome in failed[:10]:
            console.print(
                f"  • {outcome.job_path}: [{outcome.error_kind}] {outcome.error}",
                markup=False,
            )
        if len(failed) > 10:
            console.print(f"  ... and {len(failed) - 10} more")

    console.print(Rule(style="dim"))

    _print_summary(
        console=console,
        jobs_found=len(job_files),
        jobs_succeeded=len(outcomes) - len(failed),
        jobs_failed=len(failed),
        clone_pairs_count=sum(len(o.clone_pairs) for o in outcomes),
    )

    if json_out_path:
        meta = build_results_meta(
            hugin_version=__version__,
            session_path=session_file.resolve(),
            jobs_path=jobs_path,
            clone_detector=config.clone_detector_kind.value,
        )
        try:
            json_out_path.write_text(to_json_results(outcomes, meta), "utf-8")
        except OSError as e:
            _contract_exit(
                ui.fmt_results_write_failed(label="JSON", path=json_out_path, error=e)
            )
        console.print(ui.fmt_path(ui.INFO_JSON_RESULTS_SAVED, json_out_path))

    if failed:
        console.print(
            ui.fmt_job_failure(f"{len(failed)} of {len(outcomes)} jobs failed.")
        )
        sys.exit(ExitCode.JOB_FAILURE)

    elapsed = time.monotonic() - t0
    console.print(f"\n[dim]Done in {elapsed:.1f}s[/dim]")
    logger.info("Exiting...")


def main() -> None:
    try:
        _main_impl()
    except SystemExit:
        raise
    except Exception as e:
        console.print(ui.fmt_internal_error(e, debug=_is_debug_enabled()))
        sys.exit(ExitCode.INTERNAL_ERROR)


if __name__ == "__main__":
    main()
