# src/kubegate/cli/main.py
"""
This module is the main entry point for the kubegate CLI.

It aggregates all commands from the submodules (validate, ntnx, project).
"""

import logging

import typer

from ..core.config import config
from . import ntnx, project, validate

# --- Setup Logger ---
logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = typer.Typer(
    name="kubegate",
    help="Validate EKS Anywhere on Nutanix cluster manifests before they are applied.",
    add_completion=False,
)


def version_callback(value: bool):
    """
    Prints the version of kubegate.
    """
    if value:
        from .. import __version__

        typer.echo(f"kubegate version: {__version__}")
        raise typer.Exit()


@app.command()
def version():
    """
    Show the version of kubegate.
    """
    from .. import __version__

    typer.echo(f"kubegate version: {__version__}")


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """
    kubegate CLI main entry point.
    """
    pass


# Register command sub-apps
app.add_typer(validate.app, name="validate")
app.add_typer(ntnx.app, name="ntnx")
app.add_typer(project.app, name="project")


if __name__ == "__main__":
    app()
