# src/kubegate/validation/cluster.py

import logging
from typing import Dict, List, NamedTuple, Optional

from ..core.exceptions import ConfigurationError, KubeGateError, PolicyViolation
from ..models.spec import ClusterSpec, MachineSizingSpec
from .base import BaseValidator, ResourceType, ValidationContext
from .network import validate_cni, validate_control_plane_endpoint
from .versions import (
    is_image_compatible_with_kubernetes_version,
    validate_eksa_version_skew,
    validate_kubernetes_version_skew,
)

logger = logging.getLogger(__name__)

MIN_CONTROL_PLANE_COUNT = 3

DATACENTER_KIND = "NutanixDatacenterConfig"
GITOPS_KIND = "FluxConfig"
MACHINE_CONFIG_KIND = "NutanixMachineConfig"


class TargetVersions(NamedTuple):
    """The versions a cluster is being upgraded to."""

    kubernetes: str
    eksa: str


class ClusterConfigValidator(BaseValidator):
    """
    Validates a Cluster object against the machine configs of the same manifest.

    Stages run in order and the first failing stage is reported:
    manifest structure, Kubernetes version and images, control plane
    endpoint, CNI policy and, when target versions are given, upgrade skew.
    """

    resource_type = ResourceType.CLUSTER_CONFIG

    def __init__(
        self,
        cluster: ClusterSpec,
        machine_configs: List[MachineSizingSpec],
        target_versions: Optional[TargetVersions] = None,
    ):
        self.cluster = cluster
        self.machine_configs = machine_configs
        self.target_versions = target_versions

    @property
    def instance_name(self) -> str:
        return self.cluster.name if self.cluster is not None else ""

    def get_resource(self, ctx: ValidationContext) -> ClusterSpec:
        return self.cluster

    def validate(self, ctx: ValidationContext) -> None:
        if self.machine_configs is None:
            raise ConfigurationError("machine configs are nil")
        if self.cluster is None:
            raise ConfigurationError("cluster config is nil")

        stages = [
            ("cluster manifest validation failed", self.validate_cluster_manifest),
            ("Kubernetes version validation failed", self.validate_kubernetes_version),
            ("control plane endpoint validation failed", self.validate_control_plane_endpoint),
            ("CNI plugin validation failed", self.validate_cni),
        ]
        if self.target_versions is not None:
            stages.append(("version skew validation failed", self.validate_version_skew))

        for description, stage in stages:
            try:
                stage()
            except KubeGateError as e:
                raise type(e)(f"{description}: {e}") from e

    def _machine_config_map(self) -> Dict[str, MachineSizingSpec]:
        return {machine.name: machine for machine in self.machine_configs}

    def validate_cluster_manifest(self) -> None:
        cluster = self.cluster
        if cluster.control_plane_count < MIN_CONTROL_PLANE_COUNT:
            raise PolicyViolation(
                f"control plane must have at least {MIN_CONTROL_PLANE_COUNT} machines, "
                f"got {cluster.control_plane_count}"
            )

        machines = self._machine_config_map()

        if cluster.datacenter_ref.name and cluster.datacenter_ref.kind != DATACENTER_KIND:
            raise PolicyViolation(
                f"unsupported datacenterRef kind: {cluster.datacenter_ref.kind}, expected {DATACENTER_KIND}"
            )

        if cluster.gitops_ref.name and cluster.gitops_ref.kind != GITOPS_KIND:
            raise PolicyViolation(f"unsupported gitOpsRef kind: {cluster.gitops_ref.kind}, expected {GITOPS_KIND}")

        control_plane_ref = cluster.control_plane_machine_ref
        if control_plane_ref.name:
            if control_plane_ref.kind != MACHINE_CONFIG_KIND:
                raise PolicyViolation(
                    f"unsupported controlPlane machineGroupRef kind: {control_plane_ref.kind}, "
                    f"expected {MACHINE_CONFIG_KIND}"
                )
            if control_plane_ref.name not in machines:
                raise PolicyViolation(f"control plane machine config {control_plane_ref.name} not found")

        for i, worker_ref in enumerate(cluster.worker_machine_refs):
            if worker_ref.kind != MACHINE_CONFIG_KIND:
                raise PolicyViolation(
                    f"unsupported worker node {i} machineGroupRef kind: {worker_ref.kind}, "
                    f"expected {MACHINE_CONFIG_KIND}"
                )
            if worker_ref.name not in machines:
                raise PolicyViolation(f"worker machine config {worker_ref.name} not found")

    def validate_kubernetes_version(self) -> None:
        version = self.cluster.kubernetes_version
        if not version:
            raise ConfigurationError("kubernetes version is required")

        for machine in self.machine_configs:
            if not machine.image_name:
                raise ConfigurationError(f"image name is required for machine config {machine.name}")
            if not is_image_compatible_with_kubernetes_version(machine.image_name, version):
                raise PolicyViolation(f"image {machine.image_name} is not compatible with Kubernetes version {version}")

    def validate_control_plane_endpoint(self) -> None:
        validate_control_plane_endpoint(self.cluster.endpoint)

    def validate_cni(self) -> None:
        validate_cni(self.cluster.cluster_network)

    def validate_version_skew(self) -> None:
        logger.debug(
            "Checking upgrade of %s to Kubernetes %s and EKS Anywhere %s",
            self.cluster.name,
            self.target_versions.kubernetes,
            self.target_versions.eksa,
        )
        validate_eksa_version_skew(self.target_versions.eksa, self.cluster.eksa_version)
        validate_kubernetes_version_skew(self.target_versions.kubernetes, self.cluster.kubernetes_version)
