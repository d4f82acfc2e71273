"""CLI entry point: userhub.

Subcommands:
    userhub serve --port 8000        # Run the API under uvicorn
    userhub init-db                  # Create missing tables

Settings are read from the environment; a ``.env`` file in the working
directory is loaded first and never overrides variables already set.
"""

from __future__ import annotations

import asyncio
import os

import click
import uvicorn
from dotenv import load_dotenv

from userhub.core.database import create_tables, make_engine
from userhub.core.logging import setup_logging
from userhub.models import User  # noqa: F401  registers the users table


async def _init_db(database_url: str | None) -> list[str]:
    engine = make_engine(database_url)
    try:
        return await create_tables(engine)
    finally:
        await engine.dispose()


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """userhub: user resource service."""
    load_dotenv(os.path.join(os.getcwd(), ".env"))
    setup_logging(level="DEBUG" if verbose else None)


@main.command("serve")
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8000, type=int, help="Bind port")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP API."""
    uvicorn.run(
        "userhub.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,
    )


@main.command("init-db")
@click.option(
    "--database-url",
    default=None,
    help="SQLAlchemy async URL (default: $USERHUB_DATABASE_URL)",
)
def init_db(database_url: str | None) -> None:
    """Create any missing tables."""
    tables = asyncio.run(_init_db(database_url))
    click.echo(f"Tables ready: {', '.join(tables)}")
