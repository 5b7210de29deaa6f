from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class APICatalogEntry:
    api_group: str
    api_version: str
    resource_kind: str


@dataclass(frozen=True)
class DiscoveryFailure:
    group_version: str
    reason: str


@dataclass(frozen=True)
class GenericResourceScan:
    resources: tuple[str, ...] = ()
    failures: tuple[DiscoveryFailure, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class OwnerReference:
    kind: str
    name: str = ""


@dataclass(frozen=True)
class StorageLocationRecord:
    namespace: str
    phase: str
    owner_references: tuple[OwnerReference, ...] = ()
    name: str = ""

    @classmethod
    def from_object(cls, obj: Mapping[str, Any]) -> StorageLocationRecord:
        """Build a record from an untyped storage-location document."""
        metadata = obj.get("metadata") or {}
        status = obj.get("status") or {}
        owner_references = tuple(
            OwnerReference(kind=ref.get("kind") or "", name=ref.get("name") or "")
            for ref in metadata.get("ownerReferences") or []
        )
        return cls(
            namespace=metadata.get("namespace") or "",
            phase=status.get("phase") or "",
            owner_references=owner_references,
            name=metadata.get("name") or "",
        )
