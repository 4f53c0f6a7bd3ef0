"""Machine-name helpers for field groups."""

from __future__ import annotations

import re
from typing import Iterable, Union

from content_modeller.core.models import Group

GROUP_NAME_PREFIX = "group_"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_INVALID_NAME_CHARS = re.compile(r"[^a-z0-9_]")


def generate_group_name(label: str) -> str:
    """Derive a group machine name from a human-readable label.

    Lowercases, collapses each run of non-alphanumeric characters into a
    single underscore, trims edge underscores and adds the group prefix.

    Args:
        label: Human-readable label (e.g. "Main Content")

    Returns:
        Machine name (e.g. "group_main_content"), or "" for a blank label
    """
    if not label or not isinstance(label, str):
        return ""

    normalized = _NON_ALNUM.sub("_", label.strip().lower()).strip("_")
    if not normalized:
        return ""
    return f"{GROUP_NAME_PREFIX}{normalized}"


def normalize_group_name(name: str) -> str:
    """Normalize a user-typed group name, adding the prefix when missing."""
    normalized = _INVALID_NAME_CHARS.sub("_", name.strip().lower())
    if normalized.startswith(GROUP_NAME_PREFIX):
        return normalized
    return f"{GROUP_NAME_PREFIX}{normalized}"


def validate_group_name(
    name: str, groups: Iterable[Group]
) -> Union[bool, str]:
    """Check that a proposed group name is present and unused.

    Returns:
        True when valid, otherwise an error message
    """
    if not name or not name.strip():
        return "Group name is required"

    full_name = normalize_group_name(name)
    if any(group.name == full_name for group in groups):
        return f'Group "{full_name}" already exists'

    return True
