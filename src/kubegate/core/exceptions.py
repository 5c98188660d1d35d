# src/kubegate/core/exceptions.py
from typing import List


class KubeGateError(Exception):
    """Base exception for kubegate."""

    pass


class ParseError(KubeGateError):
    """Raised when a version, capacity or manifest value cannot be parsed."""

    pass


class VersionParseError(ParseError):
    """Raised when a version string is not a valid semantic version."""

    pass


class UnitFormatError(ParseError):
    """Raised when a capacity string such as '8Gi' is malformed."""

    pass


class ManifestError(ParseError):
    """Raised when a manifest file cannot be read or decoded."""

    pass


class PolicyViolation(KubeGateError):
    """Raised when a structural, network, sizing or version rule fails."""

    pass


class InsufficientCapacity(PolicyViolation):
    """Raised when a project quota cannot host the requested resources."""

    pass


class QuotaThresholdExceeded(PolicyViolation):
    """Raised when quota usage is above the critical threshold."""

    pass


class LookupFailure(KubeGateError):
    """Raised when the platform could not answer a name or quota query."""

    pass


class ResourceNotFound(LookupFailure):
    """Raised when a named platform resource does not exist."""

    pass


class ValidationCancelled(LookupFailure):
    """Raised when the validation context was cancelled before a platform call."""

    pass


class ConfigurationError(KubeGateError):
    """Raised when a required field or setting is empty."""

    pass


class ValidationFailed(KubeGateError):
    """
    Aggregate error returned by a validate-all pass.

    The message is every failure joined by ', ', each one formatted as
    '<validator-name>: <error-text>'.
    """

    def __init__(self, failures: List[str]):
        self.failures = list(failures)
        super().__init__(", ".join(self.failures))
