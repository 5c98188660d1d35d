# src/kubegate/cli/validate.py
"""
Implements the `validate` command: every check kubegate knows about, run
against a manifest file in a single pass.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from ..core.exceptions import KubeGateError, ManifestError
from ..core.factory import build_validation_manager
from ..manifests.loader import load_manifest
from ..validation.base import ValidationContext
from ..validation.cluster import TargetVersions
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

app = typer.Typer(help="Validate an EKS Anywhere manifest for Nutanix.", add_completion=False)


@app.callback(invoke_without_command=True)
def validate(
    filename: Annotated[
        Path,
        typer.Option("-f", "--filename", help="Manifest file with the Cluster and NutanixMachineConfig objects."),
    ],
    upgrade_k8s_version_to: Annotated[
        Optional[str],
        typer.Option("--upgrade-k8s-version-to", help="Kubernetes version the cluster is being upgraded to."),
    ] = None,
    upgrade_eksa_version_to: Annotated[
        Optional[str],
        typer.Option("--upgrade-eksa-version-to", help="EKS Anywhere version the cluster is being upgraded to."),
    ] = None,
    skip_platform: Annotated[
        bool,
        typer.Option("--skip-platform", help="Only run offline checks; do not contact Prism Central."),
    ] = False,
    host: HostOption = None,
    port: PortOption = None,
    username: UsernameOption = None,
    password: PasswordOption = None,
    insecure: InsecureOption = None,
    timeout: TimeoutOption = None,
):
    """
    Validates the manifest and, unless --skip-platform is set, the subnets,
    images, clusters, projects and project quotas it references.
    """
    if bool(upgrade_k8s_version_to) != bool(upgrade_eksa_version_to):
        typer.echo(
            "--upgrade-k8s-version-to and --upgrade-eksa-version-to must be specified together",
            err=True,
        )
        raise typer.Exit(code=1)

    target_versions = None
    if upgrade_k8s_version_to:
        target_versions = TargetVersions(kubernetes=upgrade_k8s_version_to, eksa=upgrade_eksa_version_to)

    client = None
    try:
        clusters, machine_configs = load_manifest(filename)
        if not clusters and not machine_configs:
            raise ManifestError(f"no Cluster or NutanixMachineConfig objects found in {filename}")

        if not skip_platform:
            client = open_prism_client(host, port, username, password, insecure)

        manager = build_validation_manager(
            clusters,
            machine_configs,
            lookup=client,
            quota_lookup=client,
            target_versions=target_versions,
        )
        manager.validate_all(ValidationContext(timeout=timeout))
    except KubeGateError as e:
        raise fail(e)
    finally:
        if client is not None:
            client.close()

    typer.echo(f"Validation successful: {filename}")
