# src/kubegate/models/quota.py
"""
Pydantic models for project quota accounting: the raw quota tuples reported by
Prism Central, the derived usage figures, and the result of checking a
requested allocation against them.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class QuotaResourceType(str, Enum):
    """Quota dimensions tracked for a project. Other tags are ignored."""

    VCPUS = "VCPUS"
    MEMORY = "MEMORY"
    STORAGE = "STORAGE"


class QuotaEntry(BaseModel):
    """A single (resource type, used, limit, units) tuple from a quota snapshot."""

    resource_type: str = Field(..., description="The quota tag, e.g. VCPUS.")
    used: int = Field(0, description="Amount currently consumed.")
    limit: int = Field(0, description="Quota limit. Zero or negative means unlimited.")
    units: str = Field("", description="Units of used and limit, e.g. COUNT or GiB.")


class ResourceUsage(BaseModel):
    """Usage figures derived from a QuotaEntry."""

    used: int = 0
    limit: int = 0
    available: int = 0
    usage_percent: float = 0.0
    units: str = ""
    is_unlimited: bool = False

    @classmethod
    def from_entry(cls, entry: QuotaEntry) -> "ResourceUsage":
        usage = cls(
            used=entry.used,
            limit=entry.limit,
            units=entry.units,
            is_unlimited=entry.limit <= 0,
        )
        if not usage.is_unlimited:
            usage.available = usage.limit - usage.used
            usage.usage_percent = usage.used / usage.limit * 100
        return usage

    @property
    def has_data(self) -> bool:
        return self.used != 0 or self.limit != 0


class ResourceHeadroomSummary(BaseModel):
    """Usage of the three tracked quota dimensions for one project."""

    project_name: str
    vcpus: ResourceUsage = Field(default_factory=ResourceUsage)
    memory: ResourceUsage = Field(default_factory=ResourceUsage)
    storage: ResourceUsage = Field(default_factory=ResourceUsage)


class ResourceRequest(BaseModel):
    """Resources a workload needs: vCPUs, memory and storage in GiB."""

    vcpus: int = 0
    memory_gb: int = 0
    storage_gb: int = 0

    @classmethod
    def from_node_spec(cls, node_count: int, vcpus_per_node: int, memory_gb_per_node: int, storage_gb_per_node: int):
        return cls(
            vcpus=node_count * vcpus_per_node,
            memory_gb=node_count * memory_gb_per_node,
            storage_gb=node_count * storage_gb_per_node,
        )

    def __add__(self, other: "ResourceRequest") -> "ResourceRequest":
        return ResourceRequest(
            vcpus=self.vcpus + other.vcpus,
            memory_gb=self.memory_gb + other.memory_gb,
            storage_gb=self.storage_gb + other.storage_gb,
        )


class ResourceCheck(BaseModel):
    """The outcome of checking one requested dimension against its quota."""

    resource_type: str
    requested: int
    current: ResourceUsage
    available: bool = False
    message: str = ""


class AvailabilityResult(BaseModel):
    """Per-dimension checks plus the overall verdict for a request."""

    project_name: str
    request: ResourceRequest
    vcpus: ResourceCheck
    memory: ResourceCheck
    storage: ResourceCheck
    can_provision: bool = False

    @property
    def checks(self) -> List[ResourceCheck]:
        return [self.vcpus, self.memory, self.storage]


class ThresholdReport(BaseModel):
    """Warnings and critical findings from a usage threshold evaluation."""

    warnings: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
