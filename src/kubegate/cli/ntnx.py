# src/kubegate/cli/ntnx.py
"""
Single-resource existence checks against Prism Central.
"""

import logging
from typing import Type

import typer
from typing_extensions import Annotated

from ..core.exceptions import KubeGateError
from ..validation.base import ValidationContext
from ..validation.manager import ValidationManager
from ..validation.platform import (
    ComputeClusterValidator,
    ImageValidator,
    PlatformResourceValidator,
    ProjectValidator,
    SubnetValidator,
)
from .utils import (
    HostOption,
    InsecureOption,
    PasswordOption,
    PortOption,
    TimeoutOption,
    UsernameOption,
    fail,
    open_prism_client,
)

logger = logging.getLogger(__name__)

app = typer.Typer(name="ntnx", help="Check that Nutanix resources exist in Prism Central.", add_completion=False)

NameArgument = Annotated[str, typer.Argument(help="Name of the resource to look up.")]


def _check(validator_cls: Type[PlatformResourceValidator], name, host, port, username, password, insecure, timeout):
    try:
        with open_prism_client(host, port, username, password, insecure) as client:
            validator = validator_cls(name, client)
            ValidationManager().add_validator(validator).validate_all(ValidationContext(timeout=timeout))
    except KubeGateError as e:
        raise fail(e)
    typer.echo(f"{validator.name()} found")


@app.command("validate-subnet")
def validate_subnet(
    name: NameArgument,
    host: HostOption = None,
    port: PortOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    insecure: InsecureOption = None,
    timeout: TimeoutOption = None,
):
    """Checks that a subnet exists."""
    _check(SubnetValidator, name, host, port, username, password, insecure, timeout)


@app.command("validate-image")
def validate_image(
    name: NameArgument,
    host: HostOption = None,
    port: PortOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    insecure: InsecureOption = None,
    timeout: TimeoutOption = None,
):
    """Checks that an image exists."""
    _check(ImageValidator, name, host, port, username, password, insecure, timeout)


@app.command("validate-cluster")
def validate_cluster(
    name: NameArgument,
    host: HostOption = None,
    port: PortOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    insecure: InsecureOption = None,
    timeout: TimeoutOption = None,
):
    """Checks that a Prism Element cluster exists."""
    _check(ComputeClusterValidator, name, host, port, username, password, insecure, timeout)


@app.command("validate-project")
def validate_project(
    name: NameArgument,
    host: HostOption = None,
    port: PortOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    insecure: InsecureOption = None,
    timeout: TimeoutOption = None,
):
    """Checks that a project exists."""
    _check(ProjectValidator, name, host, port, username, password, insecure, timeout)
