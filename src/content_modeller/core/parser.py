"""
Form display parsing.

Converts an already-decoded form display document (the mapping stored in
core.entity_form_display.*.yml) into a FormDisplay. No file I/O and no
structural validation: a hand-edited document is passed through as-is, see
content_modeller.core.validation for the trust-boundary checks.
"""

from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from content_modeller.core.models import (
    DEFAULT_FORMAT_KIND,
    DEFAULT_MODE,
    DEFAULT_REGION,
    ROOT,
    Field,
    FormDisplay,
    Group,
)

FORM_DISPLAY_PREFIX = "core.entity_form_display"


def get_form_display_filename(
    entity_type: str, bundle: str, mode: str = DEFAULT_MODE
) -> str:
    """Config filename for a form display (e.g. core.entity_form_display.node.page.default.yml)."""
    return f"{FORM_DISPLAY_PREFIX}.{entity_type}.{bundle}.{mode}.yml"


def _weight(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _mapping(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def parse_form_display(document: Any) -> Optional[FormDisplay]:
    """
    Parse a form display document.

    Args:
        document: Decoded YAML mapping

    Returns:
        FormDisplay, or None when the document is not a mapping or lacks
        targetEntityType/bundle (no form display configured yet)
    """
    if not isinstance(document, Mapping):
        return None

    entity_type = document.get("targetEntityType") or ""
    bundle = document.get("bundle") or ""
    if not entity_type or not bundle:
        return None

    uuid = document.get("uuid")

    return FormDisplay(
        entity_type=str(entity_type),
        bundle=str(bundle),
        mode=str(document.get("mode") or DEFAULT_MODE),
        groups=parse_field_groups(document.get("third_party_settings")),
        fields=parse_form_fields(document.get("content")),
        hidden=parse_hidden_fields(document.get("hidden")),
        uuid=str(uuid) if uuid else None,
    )


def parse_field_groups(third_party_settings: Any) -> List[Group]:
    """Extract groups from the third_party_settings.field_group section."""
    if not isinstance(third_party_settings, Mapping):
        return []

    field_group = third_party_settings.get("field_group")
    if not isinstance(field_group, Mapping):
        return []

    groups = []
    for name, config in field_group.items():
        config = _mapping(config)
        children = config.get("children") or []
        groups.append(
            Group(
                name=str(name),
                label=str(config.get("label") or name),
                children=[str(child) for child in children],
                parent_name=str(config.get("parent_name") or ROOT),
                weight=_weight(config.get("weight")),
                format_kind=str(config.get("format_type") or DEFAULT_FORMAT_KIND),
                format_settings=_mapping(config.get("format_settings")),
                region=str(config.get("region") or DEFAULT_REGION),
            )
        )

    return groups


def parse_form_fields(content: Any) -> List[Field]:
    """Extract visible field widget assignments from the content section."""
    if not isinstance(content, Mapping):
        return []

    fields = []
    for name, config in content.items():
        config = _mapping(config)
        fields.append(
            Field(
                name=str(name),
                widget_type=str(config.get("type") or ""),
                weight=_weight(config.get("weight")),
                region=str(config.get("region") or DEFAULT_REGION),
                widget_settings=_mapping(config.get("settings")),
                widget_third_party_settings=_mapping(config.get("third_party_settings")),
            )
        )

    return fields


def parse_hidden_fields(hidden: Any) -> FrozenSet[str]:
    """Names in the hidden section whose value is boolean true."""
    if not isinstance(hidden, Mapping):
        return frozenset()

    return frozenset(str(name) for name, value in hidden.items() if value is True)
