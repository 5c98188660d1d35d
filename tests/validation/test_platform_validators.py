# tests/validation/test_platform_validators.py

import threading
import time

import pytest
import respx
from httpx import Response

from kubegate.collectors.prism_client import PrismCentralClient
from kubegate.core.exceptions import (
    InsufficientCapacity,
    LookupFailure,
    QuotaThresholdExceeded,
    ResourceNotFound,
    ValidationCancelled,
)
from kubegate.models.platform import ConnectionConfig
from kubegate.models.quota import QuotaEntry, ResourceRequest
from kubegate.validation.base import ValidationContext
from kubegate.validation.platform import (
    ComputeClusterValidator,
    ImageValidator,
    ProjectCapacityValidator,
    ProjectValidator,
    SubnetValidator,
)


@pytest.mark.parametrize(
    "validator_cls, resource_name, expected_name",
    [
        (SubnetValidator, "vlan-120", "subnet/vlan-120"),
        (ImageValidator, "ubuntu-2204-kube-1-28", "image/ubuntu-2204-kube-1-28"),
        (ComputeClusterValidator, "pe-cluster-01", "cluster/pe-cluster-01"),
        (ProjectValidator, "team-a", "project/team-a"),
    ],
)
def test_existing_resources_pass(resource_lookup, validator_cls, resource_name, expected_name):
    validator = validator_cls(resource_name, resource_lookup)
    assert validator.name() == expected_name
    validator.validate(ValidationContext())


def test_name_match_ignores_case_and_whitespace(resource_lookup):
    ComputeClusterValidator("  pe-CLUSTER-01 ", resource_lookup).validate(ValidationContext())
    assert resource_lookup.calls[-1] == ("cluster", "pe-cluster-01")


def test_missing_resource(resource_lookup):
    with pytest.raises(ResourceNotFound, match="subnet vlan-999 not found"):
        SubnetValidator("vlan-999", resource_lookup).validate(ValidationContext())


def test_get_resource_returns_lookup_results(resource_lookup):
    resources = ImageValidator("ubuntu-2204-kube-1-28", resource_lookup).get_resource(ValidationContext())
    assert [r.uuid for r in resources] == ["uuid-ubuntu-2204-kube-1-28"]


def test_lookup_failures_propagate(failing_lookup):
    with pytest.raises(LookupFailure, match="HTTP 500"):
        ProjectValidator("team-a", failing_lookup).validate(ValidationContext())


def test_cancelled_context_skips_lookup(resource_lookup):
    ctx = ValidationContext()
    ctx.cancel()
    with pytest.raises(ValidationCancelled):
        SubnetValidator("vlan-120", resource_lookup).validate(ctx)
    assert resource_lookup.calls == []


def test_cancel_during_lookup_fails_promptly(resource_lookup):
    release = threading.Event()

    class SlowLookup(type(resource_lookup)):
        def list_resources(self, kind, name, timeout=None):
            release.wait(5)
            return super().list_resources(kind, name, timeout=timeout)

    ctx = ValidationContext()
    timer = threading.Timer(0.1, ctx.cancel)
    timer.start()
    started = time.monotonic()
    try:
        with pytest.raises(ValidationCancelled):
            SubnetValidator("vlan-120", SlowLookup(resource_lookup.resources)).validate(ctx)
        assert time.monotonic() - started < 2
    finally:
        release.set()
        timer.cancel()


def test_cancel_during_prism_request_fails_promptly():
    release = threading.Event()

    def slow_response(request):
        release.wait(5)
        return Response(200, json={"entities": [{"status": {"name": "vlan-120"}}]})

    connection = ConnectionConfig(host="prism.example.com", username="admin", password="secret")
    ctx = ValidationContext()
    timer = threading.Timer(0.1, ctx.cancel)

    with respx.mock(base_url="https://prism.example.com:9440/api/nutanix/v3") as respx_mock:
        respx_mock.post("/subnets/list").mock(side_effect=slow_response)
        with PrismCentralClient(connection) as client:
            timer.start()
            started = time.monotonic()
            try:
                with pytest.raises(ValidationCancelled):
                    SubnetValidator("vlan-120", client).validate(ctx)
                assert time.monotonic() - started < 2
            finally:
                release.set()
                timer.cancel()


def test_cancel_during_quota_lookup(quota_lookup):
    release = threading.Event()

    class SlowQuotaLookup(type(quota_lookup)):
        def get_project_quota(self, project_name, timeout=None):
            release.wait(5)
            return super().get_project_quota(project_name, timeout=timeout)

    validator = ProjectCapacityValidator(
        "team-a", ResourceRequest(vcpus=1), SlowQuotaLookup(quota_lookup.quotas), 80, 95
    )
    ctx = ValidationContext()
    timer = threading.Timer(0.1, ctx.cancel)
    timer.start()
    try:
        with pytest.raises(ValidationCancelled):
            validator.validate(ctx)
    finally:
        release.set()
        timer.cancel()


class TestProjectCapacityValidator:
    def _validator(self, quota_lookup, request):
        return ProjectCapacityValidator("team-a", request, quota_lookup, warning_threshold=80, critical_threshold=95)

    def test_request_that_fits_passes(self, quota_lookup):
        validator = self._validator(quota_lookup, ResourceRequest(vcpus=20, memory_gb=128, storage_gb=400))
        assert validator.name() == "quota/team-a"
        validator.validate(ValidationContext())

    def test_shortage_is_reported(self, quota_lookup):
        validator = self._validator(quota_lookup, ResourceRequest(vcpus=100, memory_gb=16, storage_gb=100))
        with pytest.raises(InsufficientCapacity) as exc_info:
            validator.validate(ValidationContext())

        message = str(exc_info.value)
        assert message.startswith("insufficient resources in project 'team-a' to provision requested workload:")
        assert "vCPU: 100 requested, only 90 available (shortage: 10 COUNT)" in message
        assert "Memory" not in message

    def test_critical_usage_fails_even_when_request_fits(self, quota_lookup_factory):
        lookup = quota_lookup_factory(
            {
                "team-a": [
                    QuotaEntry(resource_type="VCPUS", used=97, limit=100, units="COUNT"),
                    QuotaEntry(resource_type="MEMORY", used=0, limit=0, units="GiB"),
                    QuotaEntry(resource_type="STORAGE", used=0, limit=-1, units="GiB"),
                ]
            }
        )
        validator = self._validator(lookup, ResourceRequest(vcpus=1))
        with pytest.raises(QuotaThresholdExceeded, match=r"vCPU usage \(97.0%\) exceeds critical threshold"):
            validator.validate(ValidationContext())

    def test_check_returns_availability(self, quota_lookup):
        result = self._validator(quota_lookup, ResourceRequest(vcpus=5)).check(ValidationContext())
        assert result.can_provision
        assert result.vcpus.requested == 5
