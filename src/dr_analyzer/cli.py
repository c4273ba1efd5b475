"""Typer CLI entrypoint for dr_analyzer."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path

import typer
import yaml

from dr_analyzer.config import AppSettings, DeletionConfig, ScanConfig, load_settings
from dr_analyzer.errors import ScanRootError
from dr_analyzer.logging_utils import PACKAGE_LOGGER_NAME, configure_logging
from dr_analyzer.report import write_results_report
from dr_analyzer.results.models import ResultRow
from dr_analyzer.scan.pipeline import ScanProgress
from dr_analyzer.session import AnalyzerSession

app = typer.Typer(
    add_completion=False,
    help="dr_analyzer command line interface.",
    no_args_is_help=True,
)

CONFIG_FILE_OPTION = typer.Option(
    None,
    "--config-file",
    help="Optional settings YAML path.",
    exists=False,
    file_okay=True,
    dir_okay=False,
    readable=True,
)


def _load_and_optionally_configure_logger(
    config_file: Path | None,
    configure: bool,
) -> tuple[AppSettings, logging.Logger]:
    settings = load_settings(config_file=config_file)
    if configure:
        logger = configure_logging(settings.paths.logs_root)
    else:
        logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    return settings, logger


def _echo_rows(rows: list[ResultRow], as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps([asdict(row) for row in rows], indent=2, ensure_ascii=False))
        return
    for row in rows:
        typer.echo(f"{row.rating_label:>7}  {row.display_name}  {row.full_path}")


def _progress_logger(logger: logging.Logger, progress_every: int):
    def _on_progress(tick: ScanProgress) -> None:
        if tick.completed % progress_every == 0 or tick.completed == tick.total:
            logger.info("scan.progress completed=%s total=%s pct=%.1f", tick.completed, tick.total, tick.fraction * 100)

    return _on_progress


def _with_workers(settings: AppSettings, workers: int | None) -> AppSettings:
    if workers is None:
        return settings
    scan_config = ScanConfig(**{**settings.scan.model_dump(), "workers": workers})
    return settings.model_copy(update={"scan": scan_config})


@app.command("show-config")
def show_config(config_file: Path | None = CONFIG_FILE_OPTION) -> None:
    """Print the effective configuration after env overrides."""

    settings, _ = _load_and_optionally_configure_logger(config_file, configure=False)
    rendered = yaml.safe_dump(settings.as_dict(), sort_keys=False)
    typer.echo(rendered)


@app.command("discover")
def discover_cmd(
    root: Path = typer.Argument(..., help="Directory to list recursively."),
    as_json: bool = typer.Option(False, "--json", help="Print rows as JSON."),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """List rating log files under ROOT without scanning them."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    session = AnalyzerSession(settings, logger=logger)
    try:
        rows = session.select_directory(root.resolve())
    except ScanRootError as exc:
        raise typer.BadParameter(str(exc), param_hint="ROOT") from exc
    _echo_rows(rows, as_json)
    if not as_json:
        typer.echo(f"files_discovered_total: {len(rows)}")


@app.command("scan")
def scan_cmd(
    root: Path = typer.Argument(..., help="Directory to scan recursively."),
    workers: int | None = typer.Option(None, "--workers", min=1, help="Worker threads (default: CPU count)."),
    progress_every: int = typer.Option(100, "--progress-every", min=1, help="Log progress every N files."),
    as_json: bool = typer.Option(False, "--json", help="Print rows as JSON."),
    report: Path | None = typer.Option(None, "--report", help="Write a CSV or .parquet report."),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """Scan ROOT and print files ordered by DR rating."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    session = AnalyzerSession(_with_workers(settings, workers), logger=logger)
    try:
        batch = session.scan(root.resolve(), on_progress=_progress_logger(logger, progress_every))
    except ScanRootError as exc:
        raise typer.BadParameter(str(exc), param_hint="ROOT") from exc

    _echo_rows(session.rows(), as_json)
    if report is not None:
        written = write_results_report(session.results(), report)
        logger.info("scan.report_written path=%s", written)
    if not as_json:
        counts = batch.outcome_counts()
        typer.echo(f"run_id: {batch.run_id}")
        typer.echo(f"files_scanned_total: {len(batch.results)}")
        typer.echo(f"files_rated: {counts['rated']}")
        typer.echo(f"files_error: {counts['error']}")
        typer.echo(f"elapsed_sec: {batch.elapsed_seconds}")
        if report is not None:
            typer.echo(f"report_path: {report}")


@app.command("delete")
def delete_cmd(
    root: Path = typer.Argument(..., help="Directory whose results are loaded first."),
    paths: list[Path] = typer.Argument(..., help="Files to remove from the results."),
    delete_files: bool = typer.Option(
        False,
        "--delete-files",
        help="Also delete files from disk (also enabled by settings).",
    ),
    cascade: bool = typer.Option(
        False,
        "--cascade",
        help="Remove parent folders left empty (requires --delete-files).",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
    as_json: bool = typer.Option(False, "--json", help="Print remaining rows as JSON."),
    config_file: Path | None = CONFIG_FILE_OPTION,
) -> None:
    """Scan ROOT, remove PATHS from the results and optionally from disk."""

    settings, logger = _load_and_optionally_configure_logger(config_file, configure=True)
    deletion = DeletionConfig(
        delete_files=delete_files or settings.deletion.delete_files,
        delete_empty_parents=cascade or settings.deletion.delete_empty_parents,
    )
    session = AnalyzerSession(settings.model_copy(update={"deletion": deletion}), logger=logger)
    try:
        session.scan(root.resolve())
    except ScanRootError as exc:
        raise typer.BadParameter(str(exc), param_hint="ROOT") from exc

    confirm = (lambda _message: True) if yes else (lambda message: typer.confirm(message, default=False))
    result = session.delete([path.resolve() for path in paths], confirm=confirm)
    if result is None:
        typer.echo("Aborted; nothing was deleted.")
        raise typer.Exit(code=1)

    _echo_rows(session.rows(), as_json)
    if not as_json:
        typer.echo(f"removed_from_results: {result.removed_from_results}")
        typer.echo(f"files_deleted: {len(result.files_deleted)}")
        typer.echo(f"files_failed: {len(result.files_failed)}")
        typer.echo(f"dirs_removed: {len(result.dirs_removed)}")


@app.command("open")
def open_cmd(path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to open.")) -> None:
    """Open PATH with the system default application."""

    exit_code = typer.launch(str(path))
    if exit_code != 0:
        typer.echo(f"Failed to open file {path}", err=True)
        raise typer.Exit(code=exit_code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
