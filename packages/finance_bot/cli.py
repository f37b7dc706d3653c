# ruff: noqa: I001
"""CLI for the ``finance_bot`` package.

``finance-bot run`` starts the chat bot; the remaining commands drive the same
core from a terminal (record a message, print a monthly report, delete the
last transaction) and are handy for local development against a scratch
database. Environment variables are loaded from a local ``.env`` using
``python-dotenv`` in the root callback before any command runs.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from ledger_db.client import create_schema
from .config import Settings, get_settings
from .formatting import (
    NOTHING_TO_DELETE_TEXT,
    chart_title,
    format_confirmation,
    format_deleted,
    format_empty_month,
    format_monthly_report,
)
from .logging_setup import configure_logging, get_logger
from .persistence import StorageError
from .runtime import Services, build_services

_logger = get_logger("finance_bot.cli")


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Chat-driven personal finance ledger. Loads DATABASE_URL, BOT_TOKEN and "
        "LLM credentials from a local .env before running."
    ),
)


def _load_settings(database_url: str | None) -> Settings:
    try:
        settings = get_settings()
    except ValidationError as e:
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise typer.Exit(2) from e
    if database_url:
        settings = settings.model_copy(update={"database_url": database_url})
    return settings


@contextmanager
def _services(database_url: str | None) -> Iterator[Services]:
    settings = _load_settings(database_url)
    try:
        services = build_services(settings)
    except RuntimeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2) from e
    try:
        yield services
    except StorageError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    finally:
        services.close()


DATABASE_URL_HELP = "Override DATABASE_URL (falls back to env var)."


@app.command("run")
def run_cmd(
    database_url: str | None = typer.Option(None, help=DATABASE_URL_HELP),
) -> None:
    """Start the chat bot (webhook mode when WEBHOOK_URL is set, else polling)."""

    from . import bot

    settings = _load_settings(database_url)
    try:
        settings.require_bot_token()
        services = build_services(settings)
    except RuntimeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2) from e
    # The application's shutdown hook closes the store.
    bot.run(services)


@app.command("init-db")
def init_db_cmd(
    database_url: str | None = typer.Option(None, help=DATABASE_URL_HELP),
) -> None:
    """Create the ledger table directly (local use; deployments run Alembic)."""

    with _services(database_url) as services:
        try:
            create_schema(services.store.engine)
        except SQLAlchemyError as e:
            raise StorageError(f"schema creation failed: {e}") from e
    typer.echo("Ledger schema is ready.")


@app.command("record")
def record_cmd(
    text: str = typer.Argument(..., help='Transaction message, e.g. "-50 Pizza d".'),
    name: str = typer.Option("You", "--name", help="Display name used in the reply."),
    database_url: str | None = typer.Option(None, help=DATABASE_URL_HELP),
) -> None:
    """Record one message exactly as the chat bot would."""

    with _services(database_url) as services:
        confirmation = services.recorder.record(text, name)
        if confirmation is None:
            typer.echo(f"Not a transaction message: {text!r}", err=True)
            raise typer.Exit(1)
        typer.echo(format_confirmation(confirmation, services.settings.currency))


@app.command("report")
def report_cmd(
    month: int | None = typer.Option(None, min=1, max=12, help="Month (default: current)."),
    year: int | None = typer.Option(None, help="Year (default: current)."),
    chart: Path | None = typer.Option(
        None, "--chart", dir_okay=False, help="Write the spending pie chart (PNG) here."
    ),
    database_url: str | None = typer.Option(None, help=DATABASE_URL_HELP),
) -> None:
    """Print the monthly report and optionally save its chart."""

    now = datetime.now()
    month = month or now.month
    year = year or now.year

    with _services(database_url) as services:
        report = services.aggregator.monthly_report(month, year)
        if report is None:
            typer.echo(format_empty_month(month, year))
            return
        typer.echo(format_monthly_report(report, services.settings.currency))

        if chart is None:
            return
        series = report.chart_series()
        if not series:
            typer.echo("No spending this month; chart skipped.", err=True)
            return
        try:
            image = services.renderer.render(series, chart_title(month, year))
            chart.write_bytes(image)
        except Exception:  # noqa: BLE001 - the text report already went out
            _logger.exception("chart rendering failed for %02d/%d", month, year)
            typer.echo("Chart could not be rendered; see logs.", err=True)
            return
        typer.echo(f"Chart written to {chart}")


@app.command("delete-last")
def delete_last_cmd(
    database_url: str | None = typer.Option(None, help=DATABASE_URL_HELP),
) -> None:
    """Delete the most recently recorded transaction."""

    with _services(database_url) as services:
        deleted = services.recorder.delete_last()
        if deleted is None:
            typer.echo(NOTHING_TO_DELETE_TEXT)
            return
        typer.echo(format_deleted(deleted, services.settings.currency))


@app.callback()
def _root() -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(stream=sys.stderr)


if __name__ == "__main__":  # pragma: no cover
    app()
