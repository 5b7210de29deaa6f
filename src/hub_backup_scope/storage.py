from __future__ import annotations

from typing import Any, Iterable, Mapping

import structlog
from kubernetes import client

from .models import StorageLocationRecord

STORAGE_LOCATION_GROUP = "velero.io"
STORAGE_LOCATION_VERSION = "v1"
STORAGE_LOCATION_PLURAL = "backupstoragelocations"
STORAGE_LOCATION_PHASE_AVAILABLE = "Available"

logger = structlog.get_logger(__name__)


def is_valid_storage_location_defined(
    locations: Iterable[StorageLocationRecord | Mapping[str, Any]],
) -> tuple[bool, str]:
    """Report whether an owned, available storage location exists.

    An owner reference marks a location managed by the backup operator rather
    than a stray user-created one. The namespace of the first qualifying
    location is returned alongside the flag.
    """
    for location in locations:
        record = _as_record(location)
        if not record.owner_references or record.phase != STORAGE_LOCATION_PHASE_AVAILABLE:
            continue
        for ref in record.owner_references:
            if ref.kind:
                return True, record.namespace
    return False, ""


def list_storage_locations(
    custom_objects_api: client.CustomObjectsApi,
    *,
    namespace: str | None = None,
    request_timeout_seconds: int | None = None,
) -> list[StorageLocationRecord]:
    if namespace:
        response = custom_objects_api.list_namespaced_custom_object(
            group=STORAGE_LOCATION_GROUP,
            version=STORAGE_LOCATION_VERSION,
            namespace=namespace,
            plural=STORAGE_LOCATION_PLURAL,
            _request_timeout=request_timeout_seconds,
        )
    else:
        response = custom_objects_api.list_cluster_custom_object(
            group=STORAGE_LOCATION_GROUP,
            version=STORAGE_LOCATION_VERSION,
            plural=STORAGE_LOCATION_PLURAL,
            _request_timeout=request_timeout_seconds,
        )

    records = [StorageLocationRecord.from_object(item) for item in response.get("items") or []]
    logger.debug("Listed storage locations", namespace=namespace or "*", count=len(records))
    return records


def _as_record(location: StorageLocationRecord | Mapping[str, Any]) -> StorageLocationRecord:
    if isinstance(location, StorageLocationRecord):
        return location
    return StorageLocationRecord.from_object(location)
