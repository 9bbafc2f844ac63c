"""CLI entry point for classslots.

- serve: run the REST API with the configured course backend
- init-db: create the local SQLite store, optionally with courses
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
import uvicorn

from classslots.config import ConfigError, Settings, load_settings
from classslots.logging import setup_logging


def _load(config_path: Path | None) -> Settings:
    try:
        return load_settings(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(package_name="classslots")
def main() -> None:
    """classslots - class slot scheduling and capacity service."""
    pass


@main.command()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to classslots.yaml (CLASSSLOTS_CONFIG or ./classslots.yaml if not specified)",
)
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=8000, show_default=True, type=int, help="Bind port")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: CLASSSLOTS_LOG_LEVEL or INFO)",
)
def serve(config_path: Path | None, host: str, port: int, log_level: str | None) -> None:
    """Run the REST API server."""
    from classslots.api import create_app  # noqa: PLC0415

    settings = _load(config_path)
    setup_logging(level=log_level.upper() if log_level else None)
    click.echo(f"Serving classslots on http://{host}:{port} (backend: {settings.backend})")
    uvicorn.run(create_app(settings), host=host, port=port, log_level="info")


@main.command("init-db")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to classslots.yaml",
)
@click.option("--db-path", default=None, help="SQLite file (default: db_path from config)")
@click.option(
    "--course",
    "titles",
    multiple=True,
    help="Create a course with this title; may be repeated",
)
def init_db(config_path: Path | None, db_path: str | None, titles: tuple[str, ...]) -> None:
    """Create the local course database."""
    from classslots.state_store import StateStore  # noqa: PLC0415

    settings = _load(config_path)
    path = db_path or settings.db_path
    store = StateStore(path, times=settings.fallback_times, time_prefix=settings.time_prefix)
    try:
        click.echo(f"Database ready: {path}")
        for title in titles:
            course = store.create_course(title)
            click.echo(f"  Created course {course.id}: {course.title}")
    finally:
        store.close()


if __name__ == "__main__":
    main()
