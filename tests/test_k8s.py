from __future__ import annotations

from unittest.mock import Mock

import pytest

from hub_backup_scope.config import AppConfig
from hub_backup_scope.k8s import HubClients, KubernetesAuthenticationError, load_hub_clients


def _patch_client_constructors(monkeypatch: pytest.MonkeyPatch, *, api_client: Mock, dynamic_client: Mock) -> Mock:
    custom_objects_api = Mock()
    monkeypatch.setattr("hub_backup_scope.k8s.client.ApiClient", Mock(return_value=api_client))
    monkeypatch.setattr("hub_backup_scope.k8s.client.CustomObjectsApi", Mock(return_value=custom_objects_api))
    monkeypatch.setattr("hub_backup_scope.k8s.DynamicClient", Mock(return_value=dynamic_client))
    return custom_objects_api


def test_load_hub_clients_with_in_cluster_mode_uses_incluster_auth(monkeypatch: pytest.MonkeyPatch) -> None:
    load_incluster_config = Mock()
    load_kube_config = Mock()
    api_client = Mock()
    dynamic_client = Mock()

    monkeypatch.setattr("hub_backup_scope.k8s.config.load_incluster_config", load_incluster_config)
    monkeypatch.setattr("hub_backup_scope.k8s.config.load_kube_config", load_kube_config)
    custom_objects_api = _patch_client_constructors(
        monkeypatch,
        api_client=api_client,
        dynamic_client=dynamic_client,
    )

    clients = load_hub_clients(
        kubeconfig_path="~/.kube/config",
        context="ignored-context",
        in_cluster=True,
        app_config=AppConfig(request_timeout_seconds=11),
    )

    load_incluster_config.assert_called_once_with()
    load_kube_config.assert_not_called()
    assert clients.api_client is api_client
    assert clients.dynamic is dynamic_client
    assert clients.mapper is dynamic_client.resources
    assert clients.custom_objects_api is custom_objects_api
    assert clients.discovery.api_client is api_client
    assert clients.discovery.request_timeout_seconds == 11


def test_load_hub_clients_with_kubeconfig_mode_expands_path_and_context(monkeypatch: pytest.MonkeyPatch) -> None:
    load_incluster_config = Mock()
    load_kube_config = Mock()

    monkeypatch.setenv("HOME", "/tmp/hub-home")
    monkeypatch.setattr("hub_backup_scope.k8s.config.load_incluster_config", load_incluster_config)
    monkeypatch.setattr("hub_backup_scope.k8s.config.load_kube_config", load_kube_config)
    _patch_client_constructors(monkeypatch, api_client=Mock(), dynamic_client=Mock())

    load_hub_clients(
        kubeconfig_path="~/.kube/config",
        context="hub-active",
        in_cluster=False,
    )

    load_incluster_config.assert_not_called()
    load_kube_config.assert_called_once_with(
        config_file="/tmp/hub-home/.kube/config",
        context="hub-active",
    )


def test_load_hub_clients_with_blank_kubeconfig_path_uses_default_search(monkeypatch: pytest.MonkeyPatch) -> None:
    load_kube_config = Mock()
    monkeypatch.setattr("hub_backup_scope.k8s.config.load_kube_config", load_kube_config)
    _patch_client_constructors(monkeypatch, api_client=Mock(), dynamic_client=Mock())

    load_hub_clients(kubeconfig_path="   ", context=None, in_cluster=False)

    load_kube_config.assert_called_once_with(config_file=None, context=None)


def test_load_hub_clients_with_invalid_context_raises_authentication_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "hub_backup_scope.k8s.config.load_kube_config",
        Mock(side_effect=RuntimeError("context does not exist")),
    )

    with pytest.raises(KubernetesAuthenticationError, match="context does not exist") as excinfo:
        load_hub_clients(
            kubeconfig_path="/etc/hub/remote/config",
            context="missing-context",
            in_cluster=False,
        )

    assert "context 'missing-context'" in str(excinfo.value)
    assert "/etc/hub/remote/config" in str(excinfo.value)


def test_load_hub_clients_with_missing_service_account_raises_authentication_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(
        "hub_backup_scope.k8s.config.load_incluster_config",
        Mock(side_effect=RuntimeError("Service host/port is not set.")),
    )

    with pytest.raises(KubernetesAuthenticationError, match="in-cluster service account"):
        load_hub_clients(kubeconfig_path=None, context=None, in_cluster=True)


def test_hub_clients_hub_identity_uses_configured_group_and_kind() -> None:
    dynamic_client = Mock()
    dynamic_client.get.return_value = {"items": [{"spec": {"clusterID": "hub-b"}}]}
    clients = HubClients(
        api_client=Mock(),
        discovery=Mock(),
        dynamic=dynamic_client,
        custom_objects_api=Mock(),
        app_config=AppConfig(hub_identity_group="example.io", hub_identity_kind="HubInfo", request_timeout_seconds=6),
    )

    assert clients.hub_identity() == "hub-b"
    dynamic_client.resources.get.assert_called_once_with(group="example.io", kind="HubInfo")
    dynamic_client.get.assert_called_once_with(dynamic_client.resources.get.return_value, _request_timeout=6)


def test_hub_clients_hub_identity_with_unreachable_mapper_returns_unknown() -> None:
    dynamic_client = Mock()
    dynamic_client.resources.get.side_effect = ConnectionError("connection refused")
    clients = HubClients(api_client=Mock(), discovery=Mock(), dynamic=dynamic_client, custom_objects_api=Mock())

    assert clients.hub_identity() == "unknown"
