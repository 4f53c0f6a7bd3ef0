"""
Form display generation.

Serializes a FormDisplay back into the flat document stored as
core.entity_form_display.<entity>.<bundle>.<mode>.yml, recomputing the
derived dependencies section. Output is deterministic: the same model always
yields the same document and the same YAML text.
"""

from typing import Any, Dict, Iterable, List, Mapping

import yaml

from content_modeller.core.models import (
    DEFAULT_MODE,
    DEFAULT_REGION,
    ROOT,
    Field,
    FormatKind,
    FormDisplay,
    Group,
)
from content_modeller.core.widgets import FIELD_GROUP_MODULE, get_widget_module

DEFAULT_LANGCODE = "en"

# Config entity that owns each bundle, by entity type.
BUNDLE_CONFIG_PREFIXES = {
    "node": "node.type",
    "media": "media.type",
    "paragraph": "paragraphs.paragraphs_type",
    "taxonomy_term": "taxonomy.vocabulary",
    "block_content": "block_content.type",
}


def get_default_format_settings(format_kind: str) -> Dict[str, Any]:
    """
    Default format_settings for a group format kind.

    Args:
        format_kind: FormatKind value (unknown kinds get the base settings)

    Returns:
        New settings dict
    """
    base: Dict[str, Any] = {"classes": "", "id": ""}

    if format_kind == FormatKind.TABS.value:
        return {**base, "direction": "horizontal"}
    if format_kind == FormatKind.TAB.value:
        return {**base, "formatter": "closed", "description": "", "required_fields": True}
    if format_kind in (FormatKind.DETAILS.value, FormatKind.DETAILS_SIDEBAR.value):
        return {
            **base,
            "show_empty_fields": False,
            "open": False,
            "description": "",
            "required_fields": True,
        }
    if format_kind == FormatKind.FIELDSET.value:
        return {**base, "description": "", "required_fields": True}
    return base


def get_bundle_dependency(entity_type: str, bundle: str) -> str:
    """Config name of the bundle entity, or "" for unknown entity types."""
    prefix = BUNDLE_CONFIG_PREFIXES.get(entity_type)
    return f"{prefix}.{bundle}" if prefix else ""


def get_field_dependency(entity_type: str, bundle: str, field_name: str) -> str:
    return f"field.field.{entity_type}.{bundle}.{field_name}"


def generate_dependencies(model: FormDisplay) -> Dict[str, List[str]]:
    """
    Compute the dependencies section for a form display.

    config: the owning bundle plus one field.field.* entry per visible field.
    module: field_group when any group exists plus modules required by the
    visible fields' widgets. Both lists are sorted; module is omitted when empty.
    """
    visible = model.visible_fields()

    config_deps = {
        get_field_dependency(model.entity_type, model.bundle, item.name) for item in visible
    }
    bundle_dep = get_bundle_dependency(model.entity_type, model.bundle)
    if bundle_dep:
        config_deps.add(bundle_dep)

    module_deps = set()
    if model.groups:
        module_deps.add(FIELD_GROUP_MODULE)
    for item in visible:
        module = get_widget_module(item.widget_type)
        if module:
            module_deps.add(module)

    dependencies: Dict[str, List[str]] = {"config": sorted(config_deps)}
    if module_deps:
        dependencies["module"] = sorted(module_deps)
    return dependencies


def generate_group_entry(group: Group) -> Dict[str, Any]:
    return {
        "children": list(group.children),
        "label": group.label,
        "region": group.region or DEFAULT_REGION,
        "parent_name": group.parent_name or ROOT,
        "weight": group.weight,
        "format_type": group.format_kind,
        "format_settings": dict(group.format_settings)
        if group.format_settings
        else get_default_format_settings(group.format_kind),
    }


def generate_third_party_settings(groups: Iterable[Group]) -> Dict[str, Any]:
    """third_party_settings section; empty when there are no groups."""
    field_group = {group.name: generate_group_entry(group) for group in groups}
    if not field_group:
        return {}
    return {"field_group": field_group}


def generate_field_entry(item: Field) -> Dict[str, Any]:
    return {
        "type": item.widget_type,
        "weight": item.weight,
        "region": item.region or DEFAULT_REGION,
        "settings": dict(item.widget_settings),
        "third_party_settings": dict(item.widget_third_party_settings),
    }


def generate_content_section(fields: Iterable[Field]) -> Dict[str, Any]:
    return {item.name: generate_field_entry(item) for item in fields}


def generate_hidden_section(hidden: Iterable[str]) -> Dict[str, bool]:
    return {name: True for name in sorted(hidden)}


def generate_form_display(model: FormDisplay) -> Dict[str, Any]:
    """
    Generate the flat form display document.

    Keys follow Drupal's export order. Hidden fields are written to the
    hidden section only; their widget assignments are not exported.

    Args:
        model: Form display to serialize

    Returns:
        Document mapping ready for YAML encoding
    """
    mode = model.mode or DEFAULT_MODE
    document: Dict[str, Any] = {}

    if model.uuid:
        document["uuid"] = model.uuid

    document["langcode"] = DEFAULT_LANGCODE
    document["status"] = True
    document["dependencies"] = generate_dependencies(model)

    third_party_settings = generate_third_party_settings(model.groups)
    if third_party_settings:
        document["third_party_settings"] = third_party_settings

    document["id"] = f"{model.entity_type}.{model.bundle}.{mode}"
    document["targetEntityType"] = model.entity_type
    document["bundle"] = model.bundle
    document["mode"] = mode
    document["content"] = generate_content_section(model.visible_fields())
    document["hidden"] = generate_hidden_section(model.hidden)

    return document


class _ConfigDumper(yaml.SafeDumper):
    """SafeDumper that indents sequences under their parent key and never emits aliases."""

    def ignore_aliases(self, data: Any) -> bool:
        return True

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        return super().increase_indent(flow, False)


def dump_document(document: Mapping[str, Any]) -> str:
    """Encode a document as YAML text in config-export style."""
    return yaml.dump(
        dict(document),
        Dumper=_ConfigDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=float("inf"),
    )


def dump_form_display(model: FormDisplay) -> str:
    """Generate and encode a form display as YAML text."""
    return dump_document(generate_form_display(model))
