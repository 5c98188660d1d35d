# src/kubegate/collectors/prism_client.py
"""
A small Prism Central v3 API client covering the lookups kubegate needs:
searching subnets, images, clusters and projects by name, and reading the
quota snapshot of a project.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..core.config import config
from ..core.exceptions import LookupFailure
from ..models.platform import ConnectionConfig, NamedResource, PlatformResourceKind
from ..models.quota import QuotaEntry, QuotaResourceType
from ..utils.http_client import get_http_client
from .base_collector import QuotaLookup, ResourceLookup

logger = logging.getLogger(__name__)

BYTES_PER_GIB = 1024 * 1024 * 1024
# Prism reports memory and storage quotas in bytes; kubegate accounts in GiB.
_BYTE_DIMENSIONS = {QuotaResourceType.MEMORY.value, QuotaResourceType.STORAGE.value}


def _entity_name(entity: Dict[str, Any]) -> str:
    status = entity.get("status") or {}
    spec = entity.get("spec") or {}
    return status.get("name") or spec.get("name") or ""


def _normalize_quota_entry(resource: Dict[str, Any]) -> Optional[QuotaEntry]:
    resource_type = resource.get("resource_type")
    if resource_type is None or resource.get("value") is None:
        return None

    used = int(resource.get("value") or 0)
    limit = int(resource.get("limit") or 0)
    units = resource.get("units") or ""

    if resource_type in _BYTE_DIMENSIONS and units.upper() == "BYTES":
        used //= BYTES_PER_GIB
        limit = limit // BYTES_PER_GIB if limit > 0 else limit
        units = "GiB"

    return QuotaEntry(resource_type=resource_type, used=used, limit=limit, units=units)


class PrismCentralClient(ResourceLookup, QuotaLookup):
    """
    Talks to the Prism Central v3 REST API over HTTPS with basic auth.
    """

    def __init__(self, connection: ConnectionConfig, client: Optional[httpx.Client] = None):
        self.connection = connection
        self.client = client or get_http_client(
            base_url=connection.base_url,
            auth=(connection.username, connection.password),
            verify=not connection.insecure,
        )
        if connection.insecure:
            logger.warning("TLS certificate verification is disabled for %s", connection.host)

    def close(self):
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _list(self, kind: str, filter_expression: str = "", timeout: Optional[float] = None) -> List[Dict[str, Any]]:
        body = {"kind": kind, "offset": 0, "length": config.PRISM_LIST_PAGE_LENGTH}
        if filter_expression:
            body["filter"] = filter_expression

        request_kwargs = {"json": body}
        if timeout is not None:
            request_kwargs["timeout"] = timeout

        try:
            response = self.client.post(f"/{kind}s/list", **request_kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise LookupFailure(f"failed to list {kind}s: HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise LookupFailure(f"failed to list {kind}s: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            logger.debug("Raw response content for %s list: %s", kind, response.text[:500])
            raise LookupFailure(f"failed to parse {kind} data") from e

        entities = payload.get("entities") or []
        if not isinstance(entities, list):
            raise LookupFailure(f"failed to parse {kind} data")
        return entities

    def list_resources(
        self, kind: PlatformResourceKind, name: str, timeout: Optional[float] = None
    ) -> List[NamedResource]:
        kind = PlatformResourceKind(kind)
        clean_name = name.strip()
        logger.debug("Looking up %s '%s' in Prism Central", kind.value, clean_name)

        entities = self._list(kind.value, f"name=={clean_name}", timeout=timeout)
        return [
            NamedResource(
                kind=kind,
                name=_entity_name(entity),
                uuid=(entity.get("metadata") or {}).get("uuid", ""),
            )
            for entity in entities
        ]

    def get_project_quota(self, project_name: str, timeout: Optional[float] = None) -> List[QuotaEntry]:
        entities = self._list(PlatformResourceKind.PROJECT.value, f"name=={project_name}", timeout=timeout)

        project = next((e for e in entities if _entity_name(e) == project_name), None)
        if project is None:
            raise LookupFailure(f"project '{project_name}' not found")

        resources = (project.get("status") or {}).get("resources") or {}
        domain = resources.get("resource_domain")
        if domain is None:
            raise LookupFailure("project resource domain information is not available")

        entries = []
        for resource in domain.get("resources") or []:
            entry = _normalize_quota_entry(resource)
            if entry is not None:
                entries.append(entry)
        logger.debug("Project %s reports %d quota entries", project_name, len(entries))
        return entries
