#!/usr/bin/env python3
"""
Main CLI entry point for the postgraph backend server.
"""

import asyncio
import os
import sys

import click
import uvicorn

from postgraph import __version__
from postgraph.config import settings
from postgraph.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="postgraph")
def cli() -> None:
    """postgraph CLI - manage the server and database."""
    pass


@cli.command()
@click.option("--host", default=settings.api_host, show_default=True, help="Host to bind to")
@click.option(
    "--port", default=settings.api_port, type=int, show_default=True, help="Port to bind to"
)
@click.option(
    "--reload", is_flag=True, default=settings.api_reload, help="Enable auto-reload for development"
)
@click.option(
    "--log-level",
    default=settings.log_level.lower(),
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    show_default=True,
    help="Log level",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the postgraph API server."""
    log_level = log_level.lower()
    configure_logging(debug=settings.debug, level=log_level)

    logger.info(
        "Starting postgraph API server",
        host=host,
        port=port,
        reload=reload,
        environment=settings.environment,
    )

    # The app module configures logging from settings when uvicorn imports it;
    # reload workers are fresh processes and read the environment instead
    settings.log_level = log_level
    os.environ["POSTGRAPH_LOG_LEVEL"] = log_level

    try:
        uvicorn.run(
            "postgraph.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("init-db")
def init_db() -> None:
    """Create the database tables."""
    from postgraph.database.connection import create_tables

    configure_logging(debug=settings.debug)

    try:
        asyncio.run(create_tables())
        click.echo("✓ Database tables created")
    except Exception as e:
        logger.error("Failed to create tables", error=str(e))
        click.echo(f"✗ Error creating tables: {e}", err=True)
        sys.exit(1)


@cli.command()
def seed() -> None:
    """Seed the database with sample tags and posts."""
    from postgraph.database.seed_data import seed_initial_data
    from postgraph.database.unit_of_work import SqlAlchemyUnitOfWork

    configure_logging(debug=settings.debug)

    async def do_seed() -> dict[str, int]:
        async with SqlAlchemyUnitOfWork() as uow:
            return await seed_initial_data(uow)

    try:
        counts = asyncio.run(do_seed())
        click.echo(f"✓ Database seeded: {counts['tags']} tag(s), {counts['posts']} post(s)")
    except Exception as e:
        logger.error("Failed to seed database", error=str(e))
        click.echo(f"✗ Error seeding database: {e}", err=True)
        sys.exit(1)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
