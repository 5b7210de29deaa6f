from __future__ import annotations

from typing import Any, Mapping

import structlog
from kubernetes.dynamic import DynamicClient

from .config import AppConfig

UNKNOWN_HUB_IDENTITY = "unknown"
HUB_IDENTITY_GROUP = "config.openshift.io"
HUB_IDENTITY_KIND = "ClusterVersion"
HUB_IDENTITY_FIELD = "clusterID"

logger = structlog.get_logger(__name__)


class HubIdentityError(RuntimeError):
    """Raised when the hub identity resource cannot be mapped or listed."""


def get_hub_identification(
    dynamic_client: DynamicClient,
    mapper: Any | None = None,
    *,
    group: str = HUB_IDENTITY_GROUP,
    kind: str = HUB_IDENTITY_KIND,
    request_timeout_seconds: int | None = None,
) -> str:
    """Return the cluster id used to tell active and passive hubs apart.

    The id is read from ``spec.clusterID`` of the cluster-wide singleton
    ``group/kind`` resource. ``mapper`` resolves the group/kind to a resource
    and defaults to the dynamic client's cached discoverer; invalidating that
    cache is the owner's business.

    Returns ``UNKNOWN_HUB_IDENTITY`` when the resource has no instance or the
    field is missing or not a string. Raises ``HubIdentityError`` when the
    mapping or the listing fails, transport errors included.
    """
    resource_mapper = mapper if mapper is not None else dynamic_client.resources
    try:
        resource = resource_mapper.get(group=group, kind=kind)
    except Exception as error:  # pylint: disable=broad-except
        logger.info("Failed to get dynamic mapper for group", group=group, kind=kind, error=str(error))
        raise HubIdentityError(f"Unable to resolve a REST mapping for {kind}.{group}: {error}") from error

    try:
        listing = dynamic_client.get(resource, _request_timeout=request_timeout_seconds)
    except Exception as error:  # pylint: disable=broad-except
        raise HubIdentityError(f"Unable to list {kind}.{group}: {error}") from error

    items = _document(listing).get("items") or []
    if not items or not items[0]:
        return UNKNOWN_HUB_IDENTITY

    return _spec_string_field(_document(items[0]), HUB_IDENTITY_FIELD)


def resolve_hub_identification(
    dynamic_client: DynamicClient,
    mapper: Any | None = None,
    *,
    app_config: AppConfig | None = None,
    **kwargs: Any,
) -> str:
    """Best-effort identity: any lookup failure degrades to ``UNKNOWN_HUB_IDENTITY``."""
    if app_config is not None:
        kwargs.setdefault("group", app_config.hub_identity_group)
        kwargs.setdefault("kind", app_config.hub_identity_kind)
        kwargs.setdefault("request_timeout_seconds", app_config.request_timeout_seconds)
    try:
        return get_hub_identification(dynamic_client, mapper, **kwargs)
    except HubIdentityError as error:
        logger.info("Proceeding without hub identity", error=str(error))
        return UNKNOWN_HUB_IDENTITY


def _spec_string_field(document: Mapping[str, Any], field_name: str) -> str:
    spec = document.get("spec")
    if not isinstance(spec, Mapping) or field_name not in spec:
        return UNKNOWN_HUB_IDENTITY

    value = spec[field_name]
    if not isinstance(value, str):
        logger.warning(
            "Ignoring non-string hub identity field",
            field=field_name,
            value_type=type(value).__name__,
        )
        return UNKNOWN_HUB_IDENTITY
    return value


def _document(value: Any) -> Mapping[str, Any]:
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return value
    return value.to_dict()
