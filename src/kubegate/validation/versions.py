# src/kubegate/validation/versions.py
"""
Version skew policy for cluster upgrades.

Only a step of zero or one minor version within the same major version is
supported. Kubernetes upgrades additionally have to move to a new minor
version, while EKS Anywhere upgrades may stay on the same minor (patch
releases).
"""

import re
from functools import total_ordering
from typing import Tuple

from ..core.exceptions import ConfigurationError, PolicyViolation, VersionParseError

SUPPORTED_MINOR_VERSION_INCREMENT = 1

_VERSION_RE = re.compile(r"^\s*v?(\d+(?:\.\d+)*)([-+][0-9A-Za-z.+-]*)?\s*$")


@total_ordering
class SemanticVersion:
    """A (major, minor, patch) version; any pre-release suffix is kept for display only."""

    def __init__(self, major: int, minor: int, patch: int = 0, suffix: str = ""):
        self.major = major
        self.minor = minor
        self.patch = patch
        self.suffix = suffix

    @property
    def components(self) -> Tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __eq__(self, other):
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.components == other.components

    def __lt__(self, other):
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.components < other.components

    def __hash__(self):
        return hash(self.components)

    def __str__(self):
        return f"{self.major}.{self.minor}.{self.patch}{self.suffix}"

    def __repr__(self):
        return f"SemanticVersion('{self}')"


def parse_version(value: str) -> SemanticVersion:
    """
    Parses a version such as 'v1.28.3', '1.28' or '0.19.2-eks-a-1'.

    At least a major and a minor component are required; a missing patch is 0
    and components beyond the patch are ignored.
    """
    match = _VERSION_RE.match(value or "")
    if not match:
        raise VersionParseError(f"could not parse '{value}' as version")

    numbers = [int(n) for n in match.group(1).split(".")]
    if len(numbers) < 2:
        raise VersionParseError(f"could not parse '{value}' as version: at least major and minor are required")

    patch = numbers[2] if len(numbers) > 2 else 0
    return SemanticVersion(numbers[0], numbers[1], patch, match.group(2) or "")


def validate_version_skew(old: SemanticVersion, new: SemanticVersion) -> None:
    """Raises PolicyViolation unless new is old or at most one minor version ahead of it."""
    if new < old:
        raise PolicyViolation(f"version downgrade is not supported ({old}) -> ({new})")

    if new.major != old.major:
        raise PolicyViolation(f"major version upgrades are not supported ({old}) -> ({new})")

    delta = new.minor - old.minor
    if delta < 0 or delta > SUPPORTED_MINOR_VERSION_INCREMENT:
        raise PolicyViolation(
            f"only +{SUPPORTED_MINOR_VERSION_INCREMENT} minor version skew is supported, detected skew: {delta}"
        )


def _parse_pair(new: str, old: str, what: str) -> Tuple[SemanticVersion, SemanticVersion]:
    if not new or not old:
        raise ConfigurationError(f"{what} version is required for both new and old cluster configurations")

    try:
        parsed_old = parse_version(old)
    except VersionParseError as e:
        raise VersionParseError(f"parsing old {what} version {old}: {e}") from e
    try:
        parsed_new = parse_version(new)
    except VersionParseError as e:
        raise VersionParseError(f"parsing new {what} version {new}: {e}") from e
    return parsed_new, parsed_old


def validate_kubernetes_version_skew(new: str, old: str) -> None:
    """
    Platform (Kubernetes) upgrade policy: the new version must be on a
    different minor version than the old one, then the generic skew rule applies.
    """
    parsed_new, parsed_old = _parse_pair(new, old, "kubernetes")

    if parsed_new.major == parsed_old.major and parsed_new.minor == parsed_old.minor:
        raise PolicyViolation(
            f"kubernetes version skew validation failed: new version {parsed_new} is the same as old version {parsed_old}"
        )

    try:
        validate_version_skew(parsed_old, parsed_new)
    except PolicyViolation as e:
        raise PolicyViolation(f"kubernetes version skew validation failed: {e}") from e


def validate_eksa_version_skew(new: str, old: str) -> None:
    """Orchestration (EKS Anywhere) upgrade policy: the generic skew rule only."""
    parsed_new, parsed_old = _parse_pair(new, old, "eksa")

    try:
        validate_version_skew(parsed_old, parsed_new)
    except PolicyViolation as e:
        raise PolicyViolation(f"eksa version skew validation failed: {e}") from e


def is_image_compatible_with_kubernetes_version(image_name: str, kubernetes_version: str) -> bool:
    """Images are named after the Kubernetes version they ship, e.g. '...-1-28-3' for 1.28.3."""
    return image_name.endswith(kubernetes_version.replace(".", "-"))
