"""CLI command for preparing the database.

Usage:
    kinderhub init-db
    kinderhub init-db --drop
"""

from __future__ import annotations

import asyncio

import typer

from kinderhub.config import settings
from kinderhub.persistence.db import create_engine
from kinderhub.persistence.sqlstore import SqlStore
from kinderhub.services import seed_default_roles

app = typer.Typer(help="Create the kinderhub tables and seed the built-in roles")


@app.callback(invoke_without_command=True)
def init_db(
    database_url: str = typer.Option(
        settings.database_url, "--database-url", "-d", help="Database to initialize"
    ),
    drop: bool = typer.Option(False, "--drop", help="Drop all tables first"),
) -> None:
    """Create every table and the built-in roles."""
    created = asyncio.run(_init_db(database_url, drop))
    typer.echo(f"Database ready ({created} built-in roles created)")


async def _init_db(database_url: str, drop: bool) -> int:
    store = SqlStore(create_engine(database_url))
    try:
        if drop:
            await store.drop_all_tables()
        await store.init()
        return await seed_default_roles(store)
    finally:
        await store.close()
