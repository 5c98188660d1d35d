# tests/cli/test_cli.py

import pytest
from typer.testing import CliRunner

from kubegate import __version__
from kubegate.cli import app

runner = CliRunner()

MACHINE_TEMPLATE = """\
---
apiVersion: anywhere.eks.amazonaws.com/v1alpha1
kind: NutanixMachineConfig
metadata:
  name: {name}
spec:
  vcpuSockets: 2
  vcpusPerSocket: 2
  memorySize: 8Gi
  systemDiskSize: 40Gi
  cluster:
    name: pe-cluster-01
  image:
    name: ubuntu-2204-kube-1-28
  subnet:
    name: vlan-120
  project:
    name: team-a
"""

CLUSTER_TEMPLATE = """\
apiVersion: anywhere.eks.amazonaws.com/v1alpha1
kind: Cluster
metadata:
  name: mgmt
spec:
  kubernetesVersion: "1.28"
  eksaVersion: v0.19.2
  controlPlaneConfiguration:
    count: {cp_count}
    endpoint:
      host: 10.128.250.230
    machineGroupRef:
      kind: NutanixMachineConfig
      name: mgmt-cp
  datacenterRef:
    kind: NutanixDatacenterConfig
    name: mgmt
  clusterNetwork:
    pods:
      cidrBlocks: [10.128.0.0/18]
    services:
      cidrBlocks: [10.128.32.0/18]
  workerNodeGroupConfigurations:
    - name: md-0
      count: 2
      machineGroupRef:
        kind: NutanixMachineConfig
        name: mgmt-worker
"""


class FakePrismClient:
    def __init__(self, lookup, quota_lookup):
        self.lookup = lookup
        self.quota_lookup = quota_lookup
        self.closed = False

    def list_resources(self, kind, name, timeout=None):
        return self.lookup.list_resources(kind, name, timeout=timeout)

    def get_project_quota(self, project_name, timeout=None):
        return self.quota_lookup.get_project_quota(project_name, timeout=timeout)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


@pytest.fixture
def manifest(tmp_path):
    def write(cp_count=3):
        path = tmp_path / "cluster.yaml"
        path.write_text(
            CLUSTER_TEMPLATE.format(cp_count=cp_count)
            + MACHINE_TEMPLATE.format(name="mgmt-cp")
            + MACHINE_TEMPLATE.format(name="mgmt-worker")
        )
        return str(path)

    return write


@pytest.fixture
def prism(mocker, resource_lookup, quota_lookup):
    client = FakePrismClient(resource_lookup, quota_lookup)
    mocker.patch("kubegate.cli.utils.get_prism_client", return_value=client)
    return client


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert f"kubegate version: {__version__}" in result.output


def test_version_flag():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


class TestValidateCommand:
    def test_offline_validation_passes(self, manifest, mocker):
        get_client = mocker.patch("kubegate.cli.utils.get_prism_client")

        result = runner.invoke(app, ["validate", "-f", manifest(), "--skip-platform"])

        assert result.exit_code == 0, result.output
        assert "Validation successful" in result.output
        get_client.assert_not_called()

    def test_failures_are_printed_verbatim(self, manifest):
        result = runner.invoke(app, ["validate", "-f", manifest(cp_count=2), "--skip-platform"])

        assert result.exit_code == 1
        assert (
            "cluster-config/mgmt: cluster manifest validation failed: "
            "control plane must have at least 3 machines, got 2"
        ) in result.output

    def test_upgrade_flags_must_be_given_together(self, manifest):
        result = runner.invoke(
            app, ["validate", "-f", manifest(), "--skip-platform", "--upgrade-k8s-version-to", "1.29"]
        )
        assert result.exit_code == 1
        assert "must be specified together" in result.output

    def test_upgrade_skew_is_checked(self, manifest):
        result = runner.invoke(
            app,
            [
                "validate",
                "-f",
                manifest(),
                "--skip-platform",
                "--upgrade-k8s-version-to",
                "1.30",
                "--upgrade-eksa-version-to",
                "v0.20.0",
            ],
        )
        assert result.exit_code == 1
        assert "cluster-config/mgmt: version skew validation failed: kubernetes version skew" in result.output

    def test_platform_validation_passes(self, manifest, prism):
        result = runner.invoke(app, ["validate", "-f", manifest()])

        assert result.exit_code == 0, result.output
        assert prism.closed
        assert prism.quota_lookup.calls == ["team-a"]

    def test_missing_platform_resource(self, manifest, prism):
        prism.lookup.resources["subnet"] = []

        result = runner.invoke(app, ["validate", "-f", manifest()])

        assert result.exit_code == 1
        assert "subnet/vlan-120: subnet vlan-120 not found" in result.output
        assert prism.closed

    def test_missing_credentials(self, manifest, monkeypatch):
        monkeypatch.setenv("PRISM_HOST", "")
        result = runner.invoke(app, ["validate", "-f", manifest()])
        assert result.exit_code == 1
        assert "Prism Central host, username and password are required" in result.output

    def test_missing_manifest(self, tmp_path):
        result = runner.invoke(app, ["validate", "-f", str(tmp_path / "missing.yaml"), "--skip-platform"])
        assert result.exit_code == 1
        assert "failed to open file" in result.output


class TestNtnxCommands:
    @pytest.mark.parametrize(
        "command, name",
        [
            ("validate-subnet", "vlan-120"),
            ("validate-image", "ubuntu-2204-kube-1-28"),
            ("validate-cluster", "pe-cluster-01"),
            ("validate-project", "team-a"),
        ],
    )
    def test_existing_resources(self, prism, command, name):
        result = runner.invoke(app, ["ntnx", command, name])
        assert result.exit_code == 0, result.output
        assert "found" in result.output

    def test_missing_resource(self, prism):
        result = runner.invoke(app, ["ntnx", "validate-image", "rhel-9"])
        assert result.exit_code == 1
        assert "image/rhel-9: image rhel-9 not found" in result.output


class TestProjectCommands:
    def test_headroom(self, prism):
        result = runner.invoke(app, ["project", "headroom", "team-a"])
        assert result.exit_code == 0, result.output
        assert "team-a" in result.output
        assert "vCPU" in result.output

    def test_headroom_unknown_project(self, prism):
        result = runner.invoke(app, ["project", "headroom", "team-z"])
        assert result.exit_code == 1
        assert "project 'team-z' not found" in result.output

    def test_check_that_fits(self, prism):
        result = runner.invoke(app, ["project", "check", "team-a", "--vcpus", "8", "--memory-gb", "32"])
        assert result.exit_code == 0, result.output
        assert "RESULT: sufficient resources available" in result.output

    def test_check_with_shortage(self, prism):
        result = runner.invoke(app, ["project", "check", "team-a", "--vcpus", "200"])
        assert result.exit_code == 1
        assert "shortage: 110 COUNT" in result.output
