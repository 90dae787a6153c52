"""CLI commands for kinderhub.

Provides command-line interface using Typer:
- kinderhub serve: Run the API server
- kinderhub init-db: Create the tables and seed the built-in roles

Usage:
    kinderhub --help
    kinderhub serve --port 8080
    kinderhub init-db --drop
"""

import typer

from kinderhub.cli.db_cmd import app as db_app
from kinderhub.cli.serve import app as serve_app

app = typer.Typer(
    name="kinderhub",
    help="kinderhub: school and childcare management backend",
    no_args_is_help=True,
)

app.add_typer(serve_app, name="serve")
app.add_typer(db_app, name="init-db")


@app.callback()
def callback() -> None:
    """kinderhub: school and childcare management backend."""


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
