# src/kubegate/capacity/quota.py
"""
Project quota headroom calculations.

A raw quota snapshot (a list of QuotaEntry) is turned into usage figures per
dimension, which can then be checked against a requested allocation or
against warning and critical usage thresholds. Everything here is pure; the
snapshot itself is fetched by the Prism Central client.
"""

import logging
from typing import Iterable

from ..core.exceptions import QuotaThresholdExceeded
from ..models.quota import (
    AvailabilityResult,
    QuotaEntry,
    QuotaResourceType,
    ResourceCheck,
    ResourceHeadroomSummary,
    ResourceRequest,
    ResourceUsage,
    ThresholdReport,
)

logger = logging.getLogger(__name__)

# (summary attribute, display label) for every tracked dimension.
DIMENSIONS = [
    ("vcpus", "vCPU"),
    ("memory", "Memory"),
    ("storage", "Storage"),
]

_SUMMARY_FIELDS = {
    QuotaResourceType.VCPUS.value: "vcpus",
    QuotaResourceType.MEMORY.value: "memory",
    QuotaResourceType.STORAGE.value: "storage",
}


def summarize_quota(project_name: str, entries: Iterable[QuotaEntry]) -> ResourceHeadroomSummary:
    """Builds the usage summary of a project. Unknown resource types are ignored."""
    summary = ResourceHeadroomSummary(project_name=project_name)
    for entry in entries:
        field_name = _SUMMARY_FIELDS.get(entry.resource_type)
        if field_name is None:
            logger.debug("Ignoring quota entry of type %s for project %s", entry.resource_type, project_name)
            continue
        setattr(summary, field_name, ResourceUsage.from_entry(entry))
    return summary


def check_resource_request(resource_type: str, requested: int, current: ResourceUsage) -> ResourceCheck:
    """Checks a single dimension of a request against its usage figures."""
    check = ResourceCheck(resource_type=resource_type, requested=requested, current=current)

    if current.is_unlimited:
        check.available = True
        check.message = f"{resource_type}: {requested} requested (unlimited quota)"
        return check

    if current.limit == 0:
        check.available = False
        check.message = f"{resource_type}: {requested} requested but no quota allocated"
        return check

    check.available = current.available >= requested
    if check.available:
        remaining = current.available - requested
        check.message = (
            f"{resource_type}: {requested} requested, {current.available} available "
            f"({remaining} {current.units} remaining after provision)"
        )
    else:
        shortage = requested - current.available
        check.message = (
            f"{resource_type}: {requested} requested, only {current.available} available "
            f"(shortage: {shortage} {current.units})"
        )
    return check


def check_availability(summary: ResourceHeadroomSummary, request: ResourceRequest) -> AvailabilityResult:
    """Checks every dimension independently; the request fits only if all of them do."""
    requested = {"vcpus": request.vcpus, "memory": request.memory_gb, "storage": request.storage_gb}
    checks = {
        field_name: check_resource_request(label, requested[field_name], getattr(summary, field_name))
        for field_name, label in DIMENSIONS
    }
    result = AvailabilityResult(project_name=summary.project_name, request=request, **checks)
    result.can_provision = all(check.available for check in result.checks)
    return result


def evaluate_thresholds(
    summary: ResourceHeadroomSummary, warning_threshold: float, critical_threshold: float
) -> ThresholdReport:
    """Classifies the usage of each limited dimension as ok, warning or critical."""
    report = ThresholdReport()
    for field_name, label in DIMENSIONS:
        usage: ResourceUsage = getattr(summary, field_name)
        if usage.is_unlimited:
            continue
        if usage.usage_percent > critical_threshold:
            report.errors.append(
                f"{label} usage ({usage.usage_percent:.1f}%) exceeds critical threshold ({critical_threshold:.1f}%)"
            )
        elif usage.usage_percent > warning_threshold:
            report.warnings.append(
                f"{label} usage ({usage.usage_percent:.1f}%) exceeds warning threshold ({warning_threshold:.1f}%)"
            )
    return report


def check_thresholds(
    summary: ResourceHeadroomSummary, warning_threshold: float, critical_threshold: float
) -> ThresholdReport:
    """
    Logs every warning and raises QuotaThresholdExceeded when any dimension is
    above the critical threshold. Returns the report otherwise.
    """
    report = evaluate_thresholds(summary, warning_threshold, critical_threshold)
    for warning in report.warnings:
        logger.warning("Project %s: %s", summary.project_name, warning)
    if report.errors:
        raise QuotaThresholdExceeded(f"critical resource thresholds exceeded: {'; '.join(report.errors)}")
    return report
