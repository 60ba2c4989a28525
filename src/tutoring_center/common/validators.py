from __future__ import annotations

from typing import Iterable

from ..core.exceptions import InvalidInputError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise InvalidInputError(f"{field_name} is required")
    return value.strip()


def require_positive_id(value: int, field_name: str) -> int:
    try:
        v = int(value)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field_name} is not a valid id")
    if v <= 0:
        raise InvalidInputError(f"{field_name} is not a valid id")
    return v


def normalize_tags(values: Iterable[str]) -> tuple[str, ...]:
    """Strip tags and drop blanks and repeats, keeping first-seen order."""
    seen: dict[str, None] = {}
    for v in values or ():
        tag = str(v).strip()
        if tag:
            seen.setdefault(tag, None)
    return tuple(seen)


def require_tags(values: Iterable[str], field_name: str) -> tuple[str, ...]:
    tags = normalize_tags(values)
    if not tags:
        raise InvalidInputError(f"{field_name} needs at least one entry")
    return tags
