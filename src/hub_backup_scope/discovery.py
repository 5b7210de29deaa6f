from __future__ import annotations

from typing import Any, Iterator, Mapping, Protocol, Sequence
import threading

import structlog
from kubernetes import client
from kubernetes.client import ApiException
from urllib3.exceptions import TimeoutError as Urllib3TimeoutError

from .models import APICatalogEntry, DiscoveryFailure, GenericResourceScan
from .resource_names import canonical_resource_name
from .sequences import append_unique, find_value

logger = structlog.get_logger(__name__)


class DiscoveryUnavailableError(RuntimeError):
    """Raised when the cluster API catalog cannot be listed at all."""


class DiscoveryCancelledError(RuntimeError):
    """Raised when the caller cancels a scan before it completes."""


class DiscoveryInterface(Protocol):
    def server_groups(self) -> client.V1APIGroupList | None: ...

    def server_resources_for_group_version(self, group_version: str) -> client.V1APIResourceList | None: ...


class KubernetesDiscoveryClient:
    """Group and resource enumeration against a live API server."""

    def __init__(self, api_client: client.ApiClient, *, request_timeout_seconds: int | None = None) -> None:
        self.api_client = api_client
        self.core_api = client.CoreApi(api_client)
        self.apis_api = client.ApisApi(api_client)
        self.request_timeout_seconds = request_timeout_seconds

    def server_groups(self) -> client.V1APIGroupList:
        core_versions = self.core_api.get_api_versions(_request_timeout=self.request_timeout_seconds)
        group_list = self.apis_api.get_api_versions(_request_timeout=self.request_timeout_seconds)

        core_group = client.V1APIGroup(
            name="",
            versions=[
                client.V1GroupVersionForDiscovery(group_version=version, version=version)
                for version in core_versions.versions or []
            ],
        )
        return client.V1APIGroupList(groups=[core_group, *(group_list.groups or [])])

    def server_resources_for_group_version(self, group_version: str) -> client.V1APIResourceList:
        # the legacy core group is served under /api, every named group under /apis
        prefix = "/api" if "/" not in group_version else "/apis"
        return self.api_client.call_api(
            f"{prefix}/{group_version}",
            "GET",
            header_params={"Accept": "application/json"},
            response_type="V1APIResourceList",
            auth_settings=["BearerToken"],
            _return_http_data_only=True,
            _request_timeout=self.request_timeout_seconds,
        )


def get_generic_crd_from_api_groups(
    discovery_client: DiscoveryInterface,
    excluded_resources: Sequence[str] = (),
    *,
    cancel_event: threading.Event | None = None,
) -> list[str]:
    """Return the generic-resource backup scope as ``kind.group`` names.

    Failures on single group-versions are logged and skipped; only a failure
    to list the API groups themselves raises ``DiscoveryUnavailableError``.
    Request timeouts and a set ``cancel_event`` abort the scan instead of
    returning partial results.
    """
    return list(scan_generic_resources(discovery_client, excluded_resources, cancel_event=cancel_event).resources)


def scan_generic_resources(
    discovery_client: DiscoveryInterface,
    excluded_resources: Sequence[str] = (),
    *,
    cancel_event: threading.Event | None = None,
) -> GenericResourceScan:
    _raise_if_cancelled(cancel_event, "server groups")
    group_list = _server_groups(discovery_client)
    if group_list is None or not group_list.groups:
        return GenericResourceScan()

    resources: list[str] = []
    failures: list[DiscoveryFailure] = []
    for entry_group, group_version, resource_list in _iter_group_versions(
        discovery_client, group_list, failures, cancel_event
    ):
        # resources without an api group are backed up by other means
        if resource_list is None or not entry_group:
            continue
        for resource in resource_list.resources or []:
            entry = APICatalogEntry(api_group=entry_group, api_version=group_version, resource_kind=resource.kind)
            resource_kind = entry.resource_kind.lower()
            resource_name = canonical_resource_name(resource_kind, entry.api_group)
            if find_value(excluded_resources, resource_name) or find_value(excluded_resources, resource_kind):
                continue
            resources = append_unique(resources, resource_name)

    logger.debug(
        "Collected generic backup resources",
        resources=len(resources),
        skipped_group_versions=len(failures),
    )
    return GenericResourceScan(resources=tuple(resources), failures=tuple(failures))


def excluded_resources_from_backup(backup: Mapping[str, Any]) -> list[str]:
    spec = backup.get("spec") or {}
    return list(spec.get("excludedResources") or [])


def _server_groups(discovery_client: DiscoveryInterface) -> client.V1APIGroupList | None:
    try:
        return discovery_client.server_groups()
    except ApiException as error:
        raise DiscoveryUnavailableError(
            f"failed to get server groups: API status {_api_status(error)} "
            f"({error.reason or 'no reason provided'}). Check API reachability and discovery RBAC."
        ) from error
    except Exception as error:
        raise DiscoveryUnavailableError(f"failed to get server groups: {_error_reason(error)}") from error


def _iter_group_versions(
    discovery_client: DiscoveryInterface,
    group_list: client.V1APIGroupList,
    failures: list[DiscoveryFailure],
    cancel_event: threading.Event | None = None,
) -> Iterator[tuple[str, str, client.V1APIResourceList | None]]:
    for group in group_list.groups:
        for version in group.versions or []:
            group_version = version.group_version
            _raise_if_cancelled(cancel_event, group_version)
            try:
                resource_list = discovery_client.server_resources_for_group_version(group_version)
            except (Urllib3TimeoutError, TimeoutError):
                raise
            except Exception as error:  # pylint: disable=broad-except
                reason = _error_reason(error)
                logger.warning("Failed to get server resources", group_version=group_version, error=reason)
                failures.append(DiscoveryFailure(group_version=group_version, reason=reason))
                continue
            yield group.name or "", group_version, resource_list


def _raise_if_cancelled(cancel_event: threading.Event | None, pending: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise DiscoveryCancelledError(f"generic resource discovery cancelled before fetching {pending}")


def _api_status(error: ApiException) -> str:
    return str(error.status) if error.status is not None else "unknown"


def _error_reason(error: Exception) -> str:
    if isinstance(error, ApiException):
        return f"API status {_api_status(error)} ({error.reason or 'no reason provided'})"
    return str(error).strip() or error.__class__.__name__
