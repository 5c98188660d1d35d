# src/kubegate/validation/base.py
"""
This module defines the abstract base class for all validators.

Every validator checks one entity and is identified by a name of the form
'<resource-type>/<instance-name>'. The ValidationManager uses the name both to
drop duplicate registrations and to group validators for progress logging.
"""

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..core.exceptions import ValidationCancelled

# Seconds between cancellation checks while a platform call is in flight.
CANCEL_POLL_INTERVAL = 0.05


class ResourceType(str, Enum):
    """The resource type prefix of a validator name."""

    CLUSTER_CONFIG = "cluster-config"
    MACHINE_CONFIG = "machine-config"
    SUBNET = "subnet"
    IMAGE = "image"
    CLUSTER = "cluster"
    PROJECT = "project"
    QUOTA = "quota"


@dataclass
class ValidationContext:
    """
    Execution context handed to every validator.

    Cancelling the context makes pending and in-flight platform calls fail with
    ValidationCancelled; the manager reports it like any other validator error.
    """

    timeout: Optional[float] = None
    cancel_event: threading.Event = field(default_factory=threading.Event)

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise ValidationCancelled("validation context cancelled")

    def run(self, call: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Runs a blocking platform call on a worker thread and waits for it.

        Cancelling the context while the call is in flight makes this raise
        ValidationCancelled promptly; the abandoned call's outcome is dropped.
        """
        self.raise_if_cancelled()
        done = threading.Event()
        outcome: Dict[str, Any] = {}

        def target():
            try:
                outcome["result"] = call(*args, **kwargs)
            except Exception as e:
                outcome["error"] = e
            finally:
                done.set()

        threading.Thread(target=target, name="kubegate-platform-call", daemon=True).start()
        while not done.wait(CANCEL_POLL_INTERVAL):
            self.raise_if_cancelled()

        self.raise_if_cancelled()
        if "error" in outcome:
            raise outcome["error"]
        return outcome["result"]


class BaseValidator(ABC):
    """
    Abstract Base Class for all validators.
    """

    resource_type: ResourceType

    @property
    @abstractmethod
    def instance_name(self) -> str:
        """The name of the checked entity, the part after the '/'."""
        pass

    def name(self) -> str:
        return f"{self.resource_type.value}/{self.instance_name}"

    @abstractmethod
    def validate(self, ctx: ValidationContext) -> None:
        """
        Checks the entity and raises a KubeGateError describing the first
        problem found. Returns None when the entity is valid. Must not
        depend on get_resource having been called first.
        """
        pass

    @abstractmethod
    def get_resource(self, ctx: ValidationContext) -> Any:
        """
        Returns the entity this validator checks, independent of whether it
        is valid. Platform-backed validators perform a lookup here.
        """
        pass

    def __repr__(self):
        return f"<{type(self).__name__} {self.name()}>"
