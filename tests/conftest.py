# tests/conftest.py

from typing import Dict, List

import pytest

from kubegate.collectors.base_collector import QuotaLookup, ResourceLookup
from kubegate.core.config import config
from kubegate.core.exceptions import LookupFailure
from kubegate.models.platform import NamedResource, PlatformResourceKind
from kubegate.models.quota import QuotaEntry
from kubegate.models.spec import (
    CiliumConfig,
    ClusterNetwork,
    ClusterSpec,
    CNIConfig,
    MachineSizingSpec,
    NetworkRange,
    ObjectReference,
    WorkerGroupReference,
)


@pytest.fixture(autouse=True)
def mock_settings_env_vars(monkeypatch):
    """
    Pytest fixture to mock environment variables for the config module.

    This fixture runs automatically for every test (`autouse=True`). It uses
    monkeypatch to set environment variables, ensuring that the application's
    config is predictable and isolated from the actual environment.
    """
    monkeypatch.setenv("PRISM_HOST", "prism.example.com")
    monkeypatch.setenv("PRISM_PORT", "9440")
    monkeypatch.setenv("PRISM_INSECURE", "false")
    monkeypatch.setattr(config, "PRISM_USERNAME", "admin")
    monkeypatch.setattr(config, "PRISM_PASSWORD", "secret")


class FakeResourceLookup(ResourceLookup):
    """In-memory ResourceLookup keyed by kind, recording every call."""

    def __init__(self, resources: Dict[str, List[str]] = None, failing: bool = False):
        self.resources = resources or {}
        self.failing = failing
        self.calls = []

    def list_resources(self, kind, name, timeout=None):
        kind = PlatformResourceKind(kind)
        self.calls.append((kind.value, name))
        if self.failing:
            raise LookupFailure(f"failed to list {kind.value}s: HTTP 500")
        return [
            NamedResource(kind=kind, name=n, uuid=f"uuid-{n}")
            for n in self.resources.get(kind.value, [])
            if n.lower() == name.lower()
        ]


class FakeQuotaLookup(QuotaLookup):
    def __init__(self, quotas: Dict[str, List[QuotaEntry]] = None):
        self.quotas = quotas or {}
        self.calls = []

    def get_project_quota(self, project_name, timeout=None):
        self.calls.append(project_name)
        if project_name not in self.quotas:
            raise LookupFailure(f"project '{project_name}' not found")
        return self.quotas[project_name]


def make_machine_config(name="cp-machine", **overrides) -> MachineSizingSpec:
    values = dict(
        name=name,
        vcpu_sockets=2,
        vcpus_per_socket=2,
        memory_size="8Gi",
        system_disk_size="40Gi",
        cluster_name="pe-cluster-01",
        image_name="ubuntu-2204-kube-1-28",
        subnet_name="vlan-120",
        project_name="team-a",
    )
    values.update(overrides)
    return MachineSizingSpec(**values)


def make_cluster(name="mgmt", **overrides) -> ClusterSpec:
    values = dict(
        name=name,
        endpoint="10.128.250.230",
        kubernetes_version="1.28",
        eksa_version="v0.19.2",
        datacenter_ref=ObjectReference(kind="NutanixDatacenterConfig", name="dc"),
        gitops_ref=ObjectReference(kind="FluxConfig", name="flux"),
        control_plane_machine_ref=ObjectReference(kind="NutanixMachineConfig", name="cp-machine"),
        control_plane_count=3,
        worker_machine_refs=[
            WorkerGroupReference(kind="NutanixMachineConfig", name="worker-machine", group_name="md-0", count=2)
        ],
        cluster_network=ClusterNetwork(
            cni_config=CNIConfig(cilium=CiliumConfig(policy_enforcement_mode="default")),
            pods=NetworkRange(cidr_blocks=["10.128.0.0/18"]),
            services=NetworkRange(cidr_blocks=["10.128.32.0/18"]),
        ),
    )
    values.update(overrides)
    return ClusterSpec(**values)


@pytest.fixture
def machine_factory():
    return make_machine_config


@pytest.fixture
def cluster_factory():
    return make_cluster


@pytest.fixture
def failing_lookup():
    return FakeResourceLookup(failing=True)


@pytest.fixture
def quota_lookup_factory():
    return FakeQuotaLookup


@pytest.fixture
def machine_configs():
    return [make_machine_config("cp-machine"), make_machine_config("worker-machine")]


@pytest.fixture
def cluster():
    return make_cluster()


@pytest.fixture
def resource_lookup():
    return FakeResourceLookup(
        {
            "subnet": ["vlan-120"],
            "image": ["ubuntu-2204-kube-1-28"],
            "cluster": ["PE-Cluster-01"],
            "project": ["team-a"],
        }
    )


@pytest.fixture
def quota_lookup():
    return FakeQuotaLookup(
        {
            "team-a": [
                QuotaEntry(resource_type="VCPUS", used=10, limit=100, units="COUNT"),
                QuotaEntry(resource_type="MEMORY", used=64, limit=1024, units="GiB"),
                QuotaEntry(resource_type="STORAGE", used=500, limit=10000, units="GiB"),
            ]
        }
    )
