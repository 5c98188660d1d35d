from .base_collector import QuotaLookup, ResourceLookup
from .prism_client import PrismCentralClient

__all__ = [
    "PrismCentralClient",
    "QuotaLookup",
    "ResourceLookup",
]
