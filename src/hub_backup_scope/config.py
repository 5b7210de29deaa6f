from __future__ import annotations

from dataclasses import dataclass, field
import os


def _env_int(name: str, default: str) -> int:
    return int(os.getenv(name, default))


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class AppConfig:
    # read at construction so each AppConfig() reflects the current environment
    request_timeout_seconds: int = field(default_factory=lambda: _env_int("HUB_BACKUP_REQUEST_TIMEOUT_SECONDS", "20"))
    hub_identity_group: str = field(
        default_factory=lambda: os.getenv("HUB_BACKUP_HUB_IDENTITY_GROUP", "config.openshift.io")
    )
    hub_identity_kind: str = field(default_factory=lambda: os.getenv("HUB_BACKUP_HUB_IDENTITY_KIND", "ClusterVersion"))
    log_level: str = field(default_factory=lambda: os.getenv("HUB_BACKUP_LOG_LEVEL", "INFO"))
    log_json: bool = field(default_factory=lambda: _env_flag("HUB_BACKUP_LOG_JSON", "false"))


def validate_config(config: AppConfig) -> None:
    if config.request_timeout_seconds <= 0:
        raise ValueError("request_timeout_seconds must be positive")
    if not config.hub_identity_group.strip() or not config.hub_identity_kind.strip():
        raise ValueError("hub identity group and kind must not be empty")
