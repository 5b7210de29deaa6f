from __future__ import annotations

from typing import Iterable, Sequence


def find(values: Sequence[str], value: str) -> tuple[int, bool]:
    """Return the index of the first exact match, or (-1, False)."""
    for index, item in enumerate(values):
        if item == value:
            return index, True
    return -1, False


def find_suffix(values: Sequence[str], value: str) -> tuple[int, bool]:
    """Return the index of the first entry that ``value`` ends with."""
    for index, item in enumerate(values):
        if value.endswith(item):
            return index, True
    return -1, False


def find_value(values: Sequence[str], value: str) -> bool:
    _, found = find(values, value)
    return found


def append_unique(values: Sequence[str], value: str) -> list[str]:
    updated = list(values)
    if not find_value(updated, value):
        updated.append(value)
    return updated


def minimum(x: int, y: int) -> int:
    if x < y:
        return x
    return y


def sort_resource_types(values: Iterable[str]) -> list[str]:
    return sorted(values)
