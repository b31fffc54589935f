from __future__ import annotations

import sys

import psycopg
import typer
from pydantic import ValidationError

from rowlock.config import get_settings
from rowlock.errors import RowLockError
from rowlock.infrastructure.db_factory import build_dsn, get_pool
from rowlock.infrastructure.row_store import PooledRowStore
from rowlock.infrastructure.schema import prepare_database
from rowlock.orchestrator import run_experiment
from rowlock.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Row-lock interception demo CLI.")

log = get_logger(__name__)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"hold={settings.hold_seconds}s intercept_delay={settings.intercept_delay_seconds}s "
        f"pool_max={settings.pool_max_size}"
    )


@app.command()
def run() -> None:
    """
    Prepare the table and run the interception experiment once.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    try:
        prepare_database(build_dsn(settings))
    except (psycopg.Error, RowLockError) as exc:
        log.error(f"Database setup failed: {exc}")
        raise typer.Exit(code=1)

    store = PooledRowStore(get_pool(max_size=settings.pool_max_size))
    run_experiment(store, settings)


def main() -> None:
    try:
        app()
    except ValidationError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        sys.exit(2)
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
