from __future__ import annotations

from datetime import UTC, datetime
import re

MAX_RESTORE_NAME_LENGTH = 252
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
ZERO_TIMESTAMP = datetime(1, 1, 1, tzinfo=UTC)

_TIMESTAMP_PATTERN = re.compile(r"\d{14}")


class BackupTimestampError(ValueError):
    """Raised when a backup name carries a malformed timestamp suffix."""


def get_valid_ks_restore_name(cluster_restore_name: str, backup_name: str) -> str:
    # object names are capped at 253 characters
    full_name = f"{cluster_restore_name}-{backup_name}"
    return full_name[:MAX_RESTORE_NAME_LENGTH]


def get_backup_timestamp(backup_name: str) -> datetime:
    """Parse the ``YYYYMMDDHHMMSS`` suffix of a scheduled backup name.

    Scheduled backups are named ``<schedule>-<timestamp>``. A name without any
    ``-`` has no timestamp and yields ``ZERO_TIMESTAMP``; a suffix that is not
    a valid timestamp raises ``BackupTimestampError``.
    """
    timestamp_index = backup_name.rfind("-")
    if timestamp_index == -1:
        return ZERO_TIMESTAMP

    timestamp_str = backup_name[timestamp_index:].strip("-")
    if not _TIMESTAMP_PATTERN.fullmatch(timestamp_str):
        raise BackupTimestampError(
            f"Backup name '{backup_name}' has suffix '{timestamp_str}', which does not match "
            f"the timestamp format {BACKUP_TIMESTAMP_FORMAT}."
        )
    try:
        parsed = datetime.strptime(timestamp_str, BACKUP_TIMESTAMP_FORMAT)
    except ValueError as error:
        raise BackupTimestampError(
            f"Backup name '{backup_name}' has an invalid timestamp suffix '{timestamp_str}': {error}."
        ) from error
    return parsed.replace(tzinfo=UTC)
