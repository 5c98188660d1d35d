# src/kubegate/collectors/base_collector.py
"""
This module defines the lookup capabilities the validators consume.

Validators never talk to Prism Central directly; they depend on these two
interfaces so tests can hand them an in-memory implementation.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.platform import NamedResource, PlatformResourceKind
from ..models.quota import QuotaEntry


class ResourceLookup(ABC):
    """Name-based search over the platform's subnet, image, cluster and project collections."""

    @abstractmethod
    def list_resources(
        self, kind: PlatformResourceKind, name: str, timeout: Optional[float] = None
    ) -> List[NamedResource]:
        """
        Returns the entities of the given kind matching the name filter.
        Raises LookupFailure when the platform cannot answer.
        """
        pass


class QuotaLookup(ABC):
    """Quota snapshot of a single project."""

    @abstractmethod
    def get_project_quota(self, project_name: str, timeout: Optional[float] = None) -> List[QuotaEntry]:
        """
        Returns the raw quota tuples of the named project.
        Raises LookupFailure when the platform cannot answer.
        """
        pass
