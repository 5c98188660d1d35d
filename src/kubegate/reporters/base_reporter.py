# src/kubegate/reporters/base_reporter.py
"""
Defines the abstract base class for all reporters.
"""

from abc import ABC, abstractmethod

from ..models.quota import AvailabilityResult, ResourceHeadroomSummary


class BaseReporter(ABC):
    """
    Abstract Base Class for all reporters.
    """

    @abstractmethod
    def report_headroom(self, summary: ResourceHeadroomSummary):
        """Presents the quota usage of a project."""
        pass

    @abstractmethod
    def report_availability(self, result: AvailabilityResult):
        """Presents whether a project can host a requested allocation."""
        pass
