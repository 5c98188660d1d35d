# src/kubegate/cli/utils.py
import logging
from typing import Optional

import typer
from typing_extensions import Annotated

from ..collectors.prism_client import PrismCentralClient
from ..core.exceptions import KubeGateError
from ..core.factory import get_connection_config, get_prism_client

logger = logging.getLogger(__name__)

# Connection options shared by every command that talks to Prism Central.
# Unset options fall back to PRISM_* configuration.
HostOption = Annotated[Optional[str], typer.Option("--host", help="Prism Central host. Default: PRISM_HOST.")]
PortOption = Annotated[Optional[int], typer.Option("--port", help="Prism Central port. Default: PRISM_PORT.")]
UsernameOption = Annotated[Optional[str], typer.Option("--username", help="Default: PRISM_USERNAME.")]
PasswordOption = Annotated[Optional[str], typer.Option("--password", help="Default: PRISM_PASSWORD.")]
InsecureOption = Annotated[
    Optional[bool],
    typer.Option("--insecure/--secure", help="Skip TLS certificate verification. Default: PRISM_INSECURE."),
]
TimeoutOption = Annotated[
    Optional[float], typer.Option("--timeout", help="Per-request timeout in seconds for platform calls.")
]


def open_prism_client(
    host: Optional[str] = None,
    port: Optional[int] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    insecure: Optional[bool] = None,
) -> PrismCentralClient:
    connection = get_connection_config(host, port, username, password, insecure)
    return get_prism_client(connection)


def fail(error: KubeGateError) -> typer.Exit:
    """Prints an error verbatim to stderr and returns the exit to raise."""
    logger.debug("Command failed: %r", error)
    typer.echo(str(error), err=True)
    return typer.Exit(code=1)
