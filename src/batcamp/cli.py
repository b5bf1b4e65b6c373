"""Typer CLI entrypoint for batcamp."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from .config import load_config_bundle
from .engine import RunOverrides, build_report, lint_workbook, write_report
from .exceptions import BatcampError, ConfigError, DataQualityError, WorkbookError


EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 2
EXIT_IO_ERROR = 4
EXIT_CONFIG_ERROR = 5


app = typer.Typer(help="Flying-fox camp monitoring report pipeline")
report_app = typer.Typer(help="Report commands")
config_app = typer.Typer(help="Configuration inspection")
app.add_typer(report_app, name="report")
app.add_typer(config_app, name="config")


CONFIG_OPTION = typer.Option(
    Path("config"),
    "--config",
    "-c",
    help="Path to configuration directory",
)
START_OPTION = typer.Option(
    None, "--start", formats=["%Y-%m-%d"], help="Reporting window start (inclusive)"
)
END_OPTION = typer.Option(
    None, "--end", formats=["%Y-%m-%d"], help="Reporting window end (exclusive)"
)
YEAR_LABEL_OPTION = typer.Option(None, "--year-label", help="Report year label")
SITE_OPTION = typer.Option(None, "--site", help="Camp/site name to report on")
EXCLUDE_OPTION = typer.Option(
    None,
    "--exclude-absent/--keep-absent",
    help="Drop species with no animals recorded in the window",
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """Configure logging shared by all commands."""

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _overrides(
    start: Optional[datetime],
    end: Optional[datetime],
    year_label: Optional[str],
    site: Optional[str],
    exclude_absent: Optional[bool],
) -> RunOverrides:
    return RunOverrides(
        start=start.date() if start else None,
        end=end.date() if end else None,
        year_label=year_label,
        site=site,
        exclude_absent=exclude_absent,
    )


@report_app.command("build")
def report_build(
    workbook: Path = typer.Argument(..., exists=True, readable=True),
    out_dir: Path = typer.Option(
        Path("report"),
        "--out",
        "-o",
        file_okay=False,
        dir_okay=True,
        writable=True,
        help="Output directory for report tables",
    ),
    config_dir: Path = CONFIG_OPTION,
    start: Optional[datetime] = START_OPTION,
    end: Optional[datetime] = END_OPTION,
    year_label: Optional[str] = YEAR_LABEL_OPTION,
    site: Optional[str] = SITE_OPTION,
    exclude_absent: Optional[bool] = EXCLUDE_OPTION,
) -> None:
    """Build report tables for one reporting period."""

    overrides = _overrides(start, end, year_label, site, exclude_absent)
    try:
        report = build_report(workbook, config_dir, overrides=overrides)
        written = write_report(report, out_dir)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc
    except DataQualityError as exc:
        typer.echo(f"Data quality error: {exc}", err=True)
        raise typer.Exit(EXIT_VALIDATION_ERROR) from exc
    except WorkbookError as exc:
        typer.echo(f"Workbook error: {exc}", err=True)
        raise typer.Exit(EXIT_IO_ERROR) from exc
    except BatcampError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(EXIT_IO_ERROR) from exc
    except OSError as exc:
        typer.echo(f"Failed to write report to {out_dir}: {exc}", err=True)
        raise typer.Exit(EXIT_IO_ERROR) from exc

    payload = {
        "year_label": report.config.report.year_label,
        "outputs": {name: str(path) for name, path in sorted(written.items())},
        "warnings": report.warning_count,
    }
    typer.echo(json.dumps(payload, indent=2))


@report_app.command("lint")
def report_lint(
    workbook: Path = typer.Argument(..., exists=True, readable=True),
    config_dir: Path = CONFIG_OPTION,
    report_path: Optional[Path] = typer.Option(
        None,
        "--report",
        help="Optional path for lint report JSON",
    ),
    start: Optional[datetime] = START_OPTION,
    end: Optional[datetime] = END_OPTION,
    year_label: Optional[str] = YEAR_LABEL_OPTION,
    site: Optional[str] = SITE_OPTION,
    exclude_absent: Optional[bool] = EXCLUDE_OPTION,
) -> None:
    """Check a workbook for data-quality issues without writing tables."""

    overrides = _overrides(start, end, year_label, site, exclude_absent)
    try:
        report = lint_workbook(workbook, config_dir, overrides=overrides)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc
    except WorkbookError as exc:
        typer.echo(f"Workbook error: {exc}", err=True)
        raise typer.Exit(EXIT_IO_ERROR) from exc
    except BatcampError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(EXIT_IO_ERROR) from exc

    json_payload = json.dumps(report.as_dict(), indent=2)
    typer.echo(json_payload)

    if report_path is not None:
        try:
            report_path.parent.mkdir(parents=True, exist_ok=True)
            report_path.write_text(json_payload + "\n", encoding="utf-8")
        except OSError as exc:
            typer.echo(f"Failed to write report {report_path}: {exc}", err=True)
            raise typer.Exit(EXIT_IO_ERROR) from exc

    if report.has_errors:
        raise typer.Exit(EXIT_VALIDATION_ERROR)


@config_app.command("show")
def config_show(config_dir: Path = CONFIG_OPTION) -> None:
    """Print the resolved configuration, defaults included."""

    try:
        bundle = load_config_bundle(config_dir)
    except ConfigError as exc:
        typer.echo(f"Config error: {exc}", err=True)
        raise typer.Exit(EXIT_CONFIG_ERROR) from exc

    typer.echo(json.dumps(bundle.model_dump(mode="json"), indent=2, sort_keys=True))
