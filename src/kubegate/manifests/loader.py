# src/kubegate/manifests/loader.py
"""
Reads an EKS Anywhere manifest (a multi-document YAML file) and extracts the
Cluster and NutanixMachineConfig objects into typed records.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple, Union

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..core.exceptions import ManifestError
from ..models.spec import (
    CiliumConfig,
    ClusterNetwork,
    ClusterSpec,
    CNIConfig,
    MachineSizingSpec,
    NetworkRange,
    ObjectReference,
    WorkerGroupReference,
)

logger = logging.getLogger(__name__)

CLUSTER_KIND = "Cluster"
MACHINE_CONFIG_KIND = "NutanixMachineConfig"

_MISSING = object()


def _nested(obj: Dict[str, Any], *keys: str, expected=str, default=_MISSING):
    """Walks nested mappings; returns the default when a key is absent and fails on a wrong type."""
    if default is _MISSING:
        default = expected()
    value: Any = obj
    for key in keys:
        if not isinstance(value, dict) or key not in value or value[key] is None:
            return default
        value = value[key]
    if expected is int and isinstance(value, bool):
        raise ManifestError(f"{'.'.join(keys)} must be an integer, got {value!r}")
    if not isinstance(value, expected):
        raise ManifestError(f"{'.'.join(keys)} must be of type {expected.__name__}, got {value!r}")
    return value


def _reference(obj: Dict[str, Any], *keys: str) -> ObjectReference:
    return ObjectReference(kind=_nested(obj, *keys, "kind"), name=_nested(obj, *keys, "name"))


def _string_list(obj: Dict[str, Any], *keys: str) -> List[str]:
    values = _nested(obj, *keys, expected=list)
    if not all(isinstance(v, str) for v in values):
        raise ManifestError(f"{'.'.join(keys)} must be a list of strings")
    return list(values)


def extract_cluster(document: Dict[str, Any]) -> ClusterSpec:
    cilium = ("spec", "clusterNetwork", "cniConfig", "cilium")
    network = ClusterNetwork(
        cni_config=CNIConfig(
            cilium=CiliumConfig(
                policy_enforcement_mode=_nested(document, *cilium, "policyEnforcementMode"),
                egress_masquerade_interfaces=_nested(document, *cilium, "egressMasqueradeInterfaces"),
                skip_upgrade=_nested(document, *cilium, "skipUpgrade", expected=bool),
                routing_mode=_nested(document, *cilium, "routingMode"),
                ipv4_native_routing_cidr=_nested(document, *cilium, "ipv4NativeRoutingCIDR"),
                ipv6_native_routing_cidr=_nested(document, *cilium, "ipv6NativeRoutingCIDR"),
            )
        ),
        pods=NetworkRange(cidr_blocks=_string_list(document, "spec", "clusterNetwork", "pods", "cidrBlocks")),
        services=NetworkRange(cidr_blocks=_string_list(document, "spec", "clusterNetwork", "services", "cidrBlocks")),
    )

    workers = []
    for i, group in enumerate(_nested(document, "spec", "workerNodeGroupConfigurations", expected=list)):
        if not isinstance(group, dict):
            raise ManifestError(f"worker node group {i} must be a mapping")
        workers.append(
            WorkerGroupReference(
                kind=_nested(group, "machineGroupRef", "kind"),
                name=_nested(group, "machineGroupRef", "name"),
                group_name=_nested(group, "name"),
                count=_nested(group, "count", expected=int),
            )
        )

    return ClusterSpec(
        name=_nested(document, "metadata", "name"),
        namespace=_nested(document, "metadata", "namespace", default="default"),
        endpoint=_nested(document, "spec", "controlPlaneConfiguration", "endpoint", "host"),
        kubernetes_version=_nested(document, "spec", "kubernetesVersion"),
        eksa_version=_nested(document, "spec", "eksaVersion"),
        datacenter_ref=_reference(document, "spec", "datacenterRef"),
        gitops_ref=_reference(document, "spec", "gitOpsRef"),
        control_plane_machine_ref=_reference(document, "spec", "controlPlaneConfiguration", "machineGroupRef"),
        control_plane_count=_nested(document, "spec", "controlPlaneConfiguration", "count", expected=int),
        worker_machine_refs=workers,
        cluster_network=network,
    )


def extract_machine_config(document: Dict[str, Any]) -> MachineSizingSpec:
    return MachineSizingSpec(
        name=_nested(document, "metadata", "name"),
        namespace=_nested(document, "metadata", "namespace", default="default"),
        vcpu_sockets=_nested(document, "spec", "vcpuSockets", expected=int),
        vcpus_per_socket=_nested(document, "spec", "vcpusPerSocket", expected=int),
        memory_size=_nested(document, "spec", "memorySize"),
        system_disk_size=_nested(document, "spec", "systemDiskSize"),
        cluster_name=_nested(document, "spec", "cluster", "name"),
        image_name=_nested(document, "spec", "image", "name"),
        subnet_name=_nested(document, "spec", "subnet", "name"),
        project_name=_nested(document, "spec", "project", "name"),
    )


def extract_documents(documents: Iterable[Any]) -> Tuple[List[ClusterSpec], List[MachineSizingSpec]]:
    clusters: List[ClusterSpec] = []
    machine_configs: List[MachineSizingSpec] = []

    for index, document in enumerate(documents):
        if not document:
            continue
        if not isinstance(document, dict):
            logger.debug("Skipping document %d: not a mapping", index)
            continue

        kind = document.get("kind")
        name = _nested(document, "metadata", "name")
        try:
            if kind == CLUSTER_KIND:
                clusters.append(extract_cluster(document))
            elif kind == MACHINE_CONFIG_KIND:
                machine_configs.append(extract_machine_config(document))
            else:
                logger.debug("Skipping %s/%s", kind, name)
        except ManifestError as e:
            raise ManifestError(f"failed to extract {kind} '{name}': {e}") from e
        except ValidationError as e:
            raise ManifestError(f"failed to extract {kind} '{name}': {e}") from e

    return clusters, machine_configs


def _plain(value: Any) -> Any:
    # Round-trip loaders return CommentedMap/CommentedSeq; keep to builtins.
    if isinstance(value, dict):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def load_manifest(source: Union[str, Path]) -> Tuple[List[ClusterSpec], List[MachineSizingSpec]]:
    """Loads a manifest file and returns its clusters and machine configs."""
    path = Path(source)
    yaml = YAML(typ="safe")
    try:
        with open(path, "r") as f:
            documents = [_plain(doc) for doc in yaml.load_all(f)]
    except OSError as e:
        raise ManifestError(f"failed to open file {path}: {e}") from e
    except YAMLError as e:
        raise ManifestError(f"failed to parse file {path}: {e}") from e

    clusters, machine_configs = extract_documents(documents)
    logger.info(
        "Parsed %d cluster(s) and %d machine config(s) from %s",
        len(clusters),
        len(machine_configs),
        path,
    )
    return clusters, machine_configs
