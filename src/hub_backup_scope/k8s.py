from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog
from kubernetes import client, config
from kubernetes.dynamic import DynamicClient

from .config import AppConfig
from .discovery import KubernetesDiscoveryClient
from .hub_identity import resolve_hub_identification

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class HubClients:
    api_client: client.ApiClient
    discovery: KubernetesDiscoveryClient
    dynamic: DynamicClient
    custom_objects_api: client.CustomObjectsApi
    app_config: AppConfig = field(default_factory=AppConfig)

    @property
    def mapper(self):
        """Cached group/kind to resource resolver shared by all callers."""
        return self.dynamic.resources

    def hub_identity(self) -> str:
        return resolve_hub_identification(self.dynamic, self.mapper, app_config=self.app_config)


class KubernetesAuthenticationError(RuntimeError):
    """Raised when the hub's API credentials cannot be loaded."""


def load_hub_clients(
    *,
    kubeconfig_path: str | None,
    context: str | None,
    in_cluster: bool,
    app_config: AppConfig | None = None,
) -> HubClients:
    app_config = app_config or AppConfig()
    kubeconfig_file = _kubeconfig_file(kubeconfig_path)
    try:
        if in_cluster:
            config.load_incluster_config()
        else:
            config.load_kube_config(config_file=kubeconfig_file, context=context)
    except Exception as error:  # pylint: disable=broad-except
        reason = str(error).strip() or error.__class__.__name__
        raise KubernetesAuthenticationError(
            f"Cannot reach the hub API with {_credential_source(in_cluster, kubeconfig_file, context)}: {reason}."
        ) from error

    api_client = client.ApiClient()
    clients = HubClients(
        api_client=api_client,
        discovery=KubernetesDiscoveryClient(
            api_client,
            request_timeout_seconds=app_config.request_timeout_seconds,
        ),
        dynamic=DynamicClient(api_client),
        custom_objects_api=client.CustomObjectsApi(api_client),
        app_config=app_config,
    )
    logger.info("Loaded hub clients", in_cluster=in_cluster, context=context or "current")
    return clients


def _kubeconfig_file(kubeconfig_path: str | None) -> str | None:
    if not kubeconfig_path or not kubeconfig_path.strip():
        return None
    return str(Path(kubeconfig_path.strip()).expanduser())


def _credential_source(in_cluster: bool, kubeconfig_file: str | None, context: str | None) -> str:
    if in_cluster:
        return "the in-cluster service account (check the mounted token and KUBERNETES_SERVICE_HOST)"
    source = f"kubeconfig '{kubeconfig_file or 'default search path'}'"
    if context:
        source = f"{source} and context '{context}'"
    return source
