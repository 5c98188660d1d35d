# src/kubegate/cli/project.py
"""
Implements the `project` commands: quota headroom of a project and whether it
can host a given allocation.
"""

import logging

import typer
from typing_extensions import Annotated

from ..capacity.quota import check_availability, evaluate_thresholds, summarize_quota
from ..core.config import config
from ..core.exceptions import KubeGateError
from ..models.quota import ResourceRequest
from ..reporters.console_reporter import ConsoleReporter
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

app = typer.Typer(name="project", help="Inspect the quota of a Nutanix project.", add_completion=False)

ProjectArgument = Annotated[str, typer.Argument(help="Name of the Nutanix project.")]


@app.command()
def headroom(
    project_name: ProjectArgument,
    host: HostOption = None,
    port: PortOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    insecure: InsecureOption = None,
    timeout: TimeoutOption = None,
):
    """
    Shows used, limit and available vCPU, memory and storage of a project.
    """
    try:
        with open_prism_client(host, port, username, password, insecure) as client:
            entries = client.get_project_quota(project_name, timeout=timeout)
    except KubeGateError as e:
        raise fail(e)

    summary = summarize_quota(project_name, entries)
    ConsoleReporter().report_headroom(summary)

    report = evaluate_thresholds(summary, config.QUOTA_WARNING_THRESHOLD, config.QUOTA_CRITICAL_THRESHOLD)
    for warning in report.warnings:
        logger.warning(warning)
    for error in report.errors:
        logger.error(error)


@app.command()
def check(
    project_name: ProjectArgument,
    vcpus: Annotated[int, typer.Option("--vcpus", min=0, help="vCPUs to provision.")] = 0,
    memory_gb: Annotated[int, typer.Option("--memory-gb", min=0, help="Memory to provision, in GiB.")] = 0,
    storage_gb: Annotated[int, typer.Option("--storage-gb", min=0, help="Storage to provision, in GiB.")] = 0,
    host: HostOption = None,
    port: PortOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    insecure: InsecureOption = None,
    timeout: TimeoutOption = None,
):
    """
    Checks whether a project has enough quota for the requested resources.
    Exits with code 1 when it does not.
    """
    request = ResourceRequest(vcpus=vcpus, memory_gb=memory_gb, storage_gb=storage_gb)
    try:
        with open_prism_client(host, port, username, password, insecure) as client:
            entries = client.get_project_quota(project_name, timeout=timeout)
    except KubeGateError as e:
        raise fail(e)

    result = check_availability(summarize_quota(project_name, entries), request)
    ConsoleReporter().report_availability(result)
    if not result.can_provision:
        raise typer.Exit(code=1)
