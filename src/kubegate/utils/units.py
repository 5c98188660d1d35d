# src/kubegate/utils/units.py
"""
Conversion of Kubernetes-style capacity strings ('8Gi', '4096Mi') into whole GiB.

The conversion truncates: sub-GiB remainders are discarded, so '1536Mi' is 1 GiB.
"""

import re

from ..core.exceptions import UnitFormatError

_INTEGER_RE = re.compile(r"^[+-]?\d+$")

_DIVISORS = {
    "Gi": 1,
    "Mi": 1024,
    "Ki": 1024 * 1024,
}


def _parse_to_gb(value: str, what: str) -> int:
    value = (value or "").strip()
    if len(value) < 3:
        raise UnitFormatError(f"invalid {what} format: {value}")

    unit, number = value[-2:], value[:-2]
    if not _INTEGER_RE.match(number):
        raise UnitFormatError(f"invalid {what} value: {number}")
    amount = int(number)

    divisor = _DIVISORS.get(unit)
    if divisor is not None:
        # Truncate toward zero, also for negative sizes.
        return -(-amount // divisor) if amount < 0 else amount // divisor

    # Unknown suffix: the whole string may still be a bare number of GiB.
    if _INTEGER_RE.match(value):
        return int(value)
    raise UnitFormatError(f"unsupported {what} unit: {unit}")


def parse_memory_to_gb(memory: str) -> int:
    """Parses a memory size such as '16Gi' into whole GiB."""
    return _parse_to_gb(memory, "memory")


def parse_storage_to_gb(storage: str) -> int:
    """Parses a disk size such as '120Gi' into whole GiB."""
    return _parse_to_gb(storage, "storage")
