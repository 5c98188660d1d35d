# src/kubegate/models/platform.py
"""
Models for the Prism Central side: connection settings and the entities
returned by name lookups.
"""

from enum import Enum

from pydantic import BaseModel, Field


class PlatformResourceKind(str, Enum):
    """Prism Central collections that can be searched by name."""

    SUBNET = "subnet"
    IMAGE = "image"
    CLUSTER = "cluster"
    PROJECT = "project"


class NamedResource(BaseModel):
    """A platform entity returned by a name lookup."""

    kind: PlatformResourceKind
    name: str
    uuid: str = ""


class ConnectionConfig(BaseModel):
    """Prism Central endpoint and credentials."""

    host: str = Field(..., description="Prism Central hostname or IP address.")
    port: int = Field(9440, description="Prism Central port.")
    username: str = Field(..., description="Prism Central username.")
    password: str = Field(..., repr=False, description="Prism Central password.")
    insecure: bool = Field(False, description="Skip TLS certificate verification.")

    @property
    def base_url(self) -> str:
        return f"https://{self.host}:{self.port}/api/nutanix/v3"
