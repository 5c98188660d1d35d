# src/kubegate/validation/platform.py
"""
Validators backed by Prism Central: existence of the subnets, images, clusters
and projects a manifest references, and whether a project has the quota to
host the machines the manifest asks for.
"""

import logging
from typing import List

from ..capacity.quota import check_availability, check_thresholds, summarize_quota
from ..collectors.base_collector import QuotaLookup, ResourceLookup
from ..core.exceptions import InsufficientCapacity, ResourceNotFound
from ..models.platform import NamedResource, PlatformResourceKind
from ..models.quota import AvailabilityResult, ResourceHeadroomSummary, ResourceRequest
from .base import BaseValidator, ResourceType, ValidationContext

logger = logging.getLogger(__name__)


def _normalize(name: str) -> str:
    return (name or "").strip().lower()


class PlatformResourceValidator(BaseValidator):
    """
    Passes when a lookup by name returns an entity whose name matches,
    ignoring case and surrounding whitespace.
    """

    platform_kind: PlatformResourceKind

    def __init__(self, resource_name: str, lookup: ResourceLookup):
        self.resource_name = resource_name
        self.lookup = lookup

    @property
    def instance_name(self) -> str:
        return self.resource_name

    def get_resource(self, ctx: ValidationContext) -> List[NamedResource]:
        return ctx.run(
            self.lookup.list_resources, self.platform_kind, _normalize(self.resource_name), timeout=ctx.timeout
        )

    def validate(self, ctx: ValidationContext) -> None:
        wanted = _normalize(self.resource_name)
        resources = self.get_resource(ctx)
        if any(_normalize(resource.name) == wanted for resource in resources):
            return
        raise ResourceNotFound(f"{self.platform_kind.value} {self.resource_name} not found")


class SubnetValidator(PlatformResourceValidator):
    resource_type = ResourceType.SUBNET
    platform_kind = PlatformResourceKind.SUBNET


class ImageValidator(PlatformResourceValidator):
    resource_type = ResourceType.IMAGE
    platform_kind = PlatformResourceKind.IMAGE


class ComputeClusterValidator(PlatformResourceValidator):
    """Checks the Prism Element cluster the machines are placed on."""

    resource_type = ResourceType.CLUSTER
    platform_kind = PlatformResourceKind.CLUSTER


class ProjectValidator(PlatformResourceValidator):
    resource_type = ResourceType.PROJECT
    platform_kind = PlatformResourceKind.PROJECT


class ProjectCapacityValidator(BaseValidator):
    """
    Checks that a project's quota can host a requested allocation, then that
    none of its dimensions is already above the critical usage threshold.
    """

    resource_type = ResourceType.QUOTA

    def __init__(
        self,
        project_name: str,
        request: ResourceRequest,
        quota_lookup: QuotaLookup,
        warning_threshold: float,
        critical_threshold: float,
    ):
        self.project_name = project_name
        self.request = request
        self.quota_lookup = quota_lookup
        self.warning_threshold = warning_threshold
        self.critical_threshold = critical_threshold

    @property
    def instance_name(self) -> str:
        return self.project_name

    def get_resource(self, ctx: ValidationContext) -> ResourceHeadroomSummary:
        entries = ctx.run(self.quota_lookup.get_project_quota, self.project_name, timeout=ctx.timeout)
        return summarize_quota(self.project_name, entries)

    def check(self, ctx: ValidationContext) -> AvailabilityResult:
        return check_availability(self.get_resource(ctx), self.request)

    def validate(self, ctx: ValidationContext) -> None:
        summary = self.get_resource(ctx)
        result = check_availability(summary, self.request)
        for check in result.checks:
            logger.info("Project %s: %s", self.project_name, check.message)

        if not result.can_provision:
            short = "; ".join(check.message for check in result.checks if not check.available)
            raise InsufficientCapacity(
                f"insufficient resources in project '{self.project_name}' to provision requested workload: {short}"
            )

        check_thresholds(summary, self.warning_threshold, self.critical_threshold)
