# src/kubegate/models/spec.py
"""
Pydantic models for the typed records extracted from an EKS Anywhere manifest.

The models describe what the manifest says, not what is valid: a Cluster with
two control plane machines still loads, and the validators report it. All
records are frozen so validators cannot mutate what they inspect.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ObjectReference(BaseModel):
    """A {kind, name} reference to a sibling manifest object."""

    model_config = ConfigDict(frozen=True)

    kind: str = Field("", description="The referenced object's kind, e.g. NutanixMachineConfig.")
    name: str = Field("", description="The referenced object's name.")


class WorkerGroupReference(ObjectReference):
    """A worker node group: the machine config it uses and its replica count."""

    group_name: str = Field("", description="The name of the worker node group.")
    count: int = Field(0, description="Number of worker machines in the group.")


class CiliumConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    policy_enforcement_mode: str = ""
    egress_masquerade_interfaces: str = ""
    skip_upgrade: bool = False
    routing_mode: str = ""
    ipv4_native_routing_cidr: str = ""
    ipv6_native_routing_cidr: str = ""


class CNIConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    cilium: CiliumConfig = Field(default_factory=CiliumConfig)


class NetworkRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    cidr_blocks: List[str] = Field(default_factory=list)


class ClusterNetwork(BaseModel):
    """The clusterNetwork block: CNI settings plus pod and service ranges."""

    model_config = ConfigDict(frozen=True)

    cni_config: CNIConfig = Field(default_factory=CNIConfig)
    pods: NetworkRange = Field(default_factory=NetworkRange)
    services: NetworkRange = Field(default_factory=NetworkRange)


class ClusterSpec(BaseModel):
    """
    Represents an EKS Anywhere Cluster object: topology, endpoint and network policy.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="The cluster name.")
    namespace: str = Field("default", description="The namespace of the Cluster object.")
    endpoint: str = Field("", description="The control plane endpoint host (an IP address).")
    kubernetes_version: str = Field("", description="The Kubernetes version of the cluster.")
    eksa_version: str = Field("", description="The EKS Anywhere version managing the cluster.")
    datacenter_ref: ObjectReference = Field(default_factory=ObjectReference)
    gitops_ref: ObjectReference = Field(default_factory=ObjectReference)
    control_plane_machine_ref: ObjectReference = Field(default_factory=ObjectReference)
    control_plane_count: int = Field(0, description="Number of control plane machines.")
    worker_machine_refs: List[WorkerGroupReference] = Field(default_factory=list)
    cluster_network: ClusterNetwork = Field(default_factory=ClusterNetwork)


class MachineSizingSpec(BaseModel):
    """
    Represents a NutanixMachineConfig: VM sizing and the Prism Central
    resources the machines are created from.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="The machine config name.")
    namespace: str = Field("default", description="The namespace of the machine config.")
    vcpu_sockets: int = Field(0, description="Number of vCPU sockets.")
    vcpus_per_socket: int = Field(0, description="Number of vCPUs per socket.")
    memory_size: str = Field("", description="Memory size, e.g. '8Gi'.")
    system_disk_size: str = Field("", description="System disk size, e.g. '40Gi'.")
    cluster_name: str = Field("", description="Prism Element cluster the VMs run on.")
    image_name: str = Field("", description="Image the VMs boot from.")
    subnet_name: str = Field("", description="Subnet the VMs attach to.")
    project_name: str = Field("", description="Prism Central project owning the VMs.")

    @property
    def vcpus(self) -> int:
        """Total vCPUs, derived from the socket topology."""
        return self.vcpu_sockets * self.vcpus_per_socket
