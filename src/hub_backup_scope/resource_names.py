from __future__ import annotations


def get_resource_details(resource_name: str) -> tuple[str, str]:
    """Split ``kind.group`` into ``(kind, group)``.

    The split happens at the first dot: API groups contain dots of their own
    (``config.openshift.io``) while kinds never do. A name without a dot is a
    bare kind with an empty group.
    """
    kind, separator, group = resource_name.partition(".")
    if not separator:
        return resource_name, ""
    return kind, group


def canonical_resource_name(kind: str, group: str) -> str:
    return f"{kind.lower()}.{group}"
