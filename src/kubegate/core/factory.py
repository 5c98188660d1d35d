# src/kubegate/core/factory.py
"""
Factory functions that assemble a validation run: the Prism Central client
and a ValidationManager populated with every validator a manifest needs.
"""

import logging
from typing import Dict, List, Optional

from ..collectors.base_collector import QuotaLookup, ResourceLookup
from ..collectors.prism_client import PrismCentralClient
from ..core.config import config
from ..core.exceptions import ConfigurationError, UnitFormatError
from ..models.platform import ConnectionConfig
from ..models.quota import ResourceRequest
from ..models.spec import ClusterSpec, MachineSizingSpec
from ..utils.units import parse_memory_to_gb, parse_storage_to_gb
from ..validation.cluster import ClusterConfigValidator, TargetVersions
from ..validation.machine import MachineConfigValidator
from ..validation.manager import ValidationManager
from ..validation.platform import (
    ComputeClusterValidator,
    ImageValidator,
    ProjectCapacityValidator,
    ProjectValidator,
    SubnetValidator,
)

logger = logging.getLogger(__name__)


def get_connection_config(
    host: Optional[str] = None,
    port: Optional[int] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
    insecure: Optional[bool] = None,
) -> ConnectionConfig:
    """Merges explicit connection options over the configured defaults."""
    host = host or config.PRISM_HOST
    username = username or config.PRISM_USERNAME
    password = password or config.PRISM_PASSWORD
    if not host or not username or not password:
        raise ConfigurationError("Prism Central host, username and password are required")

    return ConnectionConfig(
        host=host,
        port=port or config.PRISM_PORT,
        username=username,
        password=password,
        insecure=config.PRISM_INSECURE if insecure is None else insecure,
    )


def get_prism_client(connection: ConnectionConfig) -> PrismCentralClient:
    logger.info("Using Prism Central at %s:%s", connection.host, connection.port)
    return PrismCentralClient(connection)


def compute_resource_requests(
    clusters: List[ClusterSpec], machine_configs: List[MachineSizingSpec]
) -> Dict[str, ResourceRequest]:
    """
    Sums, per project, the resources every control plane and worker group
    of the given clusters would allocate. Machine configs that no cluster
    references, or whose sizes cannot be parsed, contribute nothing.
    """
    machines = {machine.name: machine for machine in machine_configs}
    requests: Dict[str, ResourceRequest] = {}

    for cluster in clusters:
        groups = [(cluster.control_plane_machine_ref.name, cluster.control_plane_count)]
        groups += [(ref.name, ref.count) for ref in cluster.worker_machine_refs]

        for machine_name, count in groups:
            machine = machines.get(machine_name)
            if machine is None or not machine.project_name or count <= 0:
                continue
            try:
                memory_gb = parse_memory_to_gb(machine.memory_size)
                storage_gb = parse_storage_to_gb(machine.system_disk_size)
            except UnitFormatError as e:
                logger.debug("Not counting machine config %s towards project quota: %s", machine.name, e)
                continue

            request = ResourceRequest.from_node_spec(count, machine.vcpus, memory_gb, storage_gb)
            requests[machine.project_name] = requests.get(machine.project_name, ResourceRequest()) + request

    return requests


def build_validation_manager(
    clusters: List[ClusterSpec],
    machine_configs: List[MachineSizingSpec],
    lookup: Optional[ResourceLookup] = None,
    quota_lookup: Optional[QuotaLookup] = None,
    target_versions: Optional[TargetVersions] = None,
    max_workers: Optional[int] = None,
) -> ValidationManager:
    """
    Registers the validators for a parsed manifest on a new ValidationManager.

    Platform existence validators are added only when a lookup is given, and
    project capacity validators only when a quota lookup is given.
    """
    manager = ValidationManager(max_workers=max_workers or config.VALIDATION_MAX_WORKERS)

    for cluster in clusters:
        manager.add_validator(ClusterConfigValidator(cluster, machine_configs, target_versions))

    for machine in machine_configs:
        if lookup is not None:
            if machine.project_name:
                manager.add_validator(ProjectValidator(machine.project_name, lookup))
            if machine.image_name:
                manager.add_validator(ImageValidator(machine.image_name, lookup))
            if machine.cluster_name:
                manager.add_validator(ComputeClusterValidator(machine.cluster_name, lookup))
            if machine.subnet_name:
                manager.add_validator(SubnetValidator(machine.subnet_name, lookup))
        manager.add_validator(MachineConfigValidator(machine))

    if quota_lookup is not None:
        for project_name, request in compute_resource_requests(clusters, machine_configs).items():
            manager.add_validator(
                ProjectCapacityValidator(
                    project_name,
                    request,
                    quota_lookup,
                    warning_threshold=config.QUOTA_WARNING_THRESHOLD,
                    critical_threshold=config.QUOTA_CRITICAL_THRESHOLD,
                )
            )

    logger.debug("Registered %d validators", len(manager))
    return manager
