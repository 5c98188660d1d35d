# src/kubegate/validation/manager.py
"""
The ValidationManager collects validators for one run and executes them in a
single validate-all pass, reporting every broken resource instead of stopping
at the first one.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

from ..core.exceptions import ValidationFailed
from .base import BaseValidator, ValidationContext

logger = logging.getLogger(__name__)

OTHER_GROUP = "other"


def resource_group(validator_name: str) -> str:
    """Returns the resource type prefix of a validator name, or 'other' without a '/'."""
    parts = validator_name.split("/", 1)
    if len(parts) == 2:
        return parts[0]
    return OTHER_GROUP


class ValidationManager:
    """
    Owns an ordered, name-deduplicated set of validators.

    A manager is built for a single run and discarded afterwards; nothing is
    shared between two validate-all passes.
    """

    def __init__(self, max_workers: int = 1):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self._validators: List[BaseValidator] = []
        self._names = set()

    def add_validator(self, validator: BaseValidator) -> "ValidationManager":
        """Registers a validator unless one with the same name is already registered."""
        name = validator.name()
        if name in self._names:
            logger.debug("Skipping duplicate validator %s", name)
            return self
        self._validators.append(validator)
        self._names.add(name)
        return self

    @property
    def validators(self) -> List[BaseValidator]:
        return list(self._validators)

    def __len__(self):
        return len(self._validators)

    def groups(self) -> Dict[str, List[BaseValidator]]:
        grouped: Dict[str, List[BaseValidator]] = {}
        for validator in self._validators:
            grouped.setdefault(resource_group(validator.name()), []).append(validator)
        return grouped

    def validate_all(self, ctx: Optional[ValidationContext] = None) -> None:
        """
        Runs every registered validator and raises ValidationFailed listing
        each failure as '<validator-name>: <error>'. Returns None when all pass.
        """
        ctx = ctx or ValidationContext()
        failures: List[str] = []

        for resource_type, validators in self.groups().items():
            if len(validators) > 1:
                logger.info(f"Validating {len(validators)} {resource_type} resources")

            if self.max_workers > 1 and len(validators) > 1:
                errors = self._run_parallel(validators, ctx)
            else:
                errors = [self._run_one(validator, ctx) for validator in validators]

            for validator, error in zip(validators, errors):
                if error is not None:
                    failures.append(f"{validator.name()}: {error}")

        if failures:
            raise ValidationFailed(failures)

    def _run_parallel(self, validators: List[BaseValidator], ctx: ValidationContext) -> List[Optional[Exception]]:
        workers = min(self.max_workers, len(validators))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="kubegate-validate") as pool:
            return list(pool.map(lambda v: self._run_one(v, ctx), validators))

    @staticmethod
    def _run_one(validator: BaseValidator, ctx: ValidationContext) -> Optional[Exception]:
        name = validator.name()
        logger.info("Validating resource %s", name)
        try:
            validator.validate(ctx)
        except Exception as e:
            logger.warning("Resource validation failed for %s: %s", name, e)
            return e
        logger.info("Resource validation successful for %s", name)
        return None
