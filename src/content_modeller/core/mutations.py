"""
Form display mutation operations.

Every function takes a FormDisplay and returns a new one; inputs are never
modified. Referencing a group or field that does not exist is a silent
no-op returning the input model, so scripted sequences ("ensure field X is
in group Y") can be re-run safely. The exceptions are update_field_settings,
which raises FieldNotFoundError, and move_group_to_parent, which raises
HierarchyCycleError rather than create a cycle.

Group membership is stored twice (a group's children list and a child
group's parent_name). All edits to either go through this module so the two
stay in sync.
"""

from dataclasses import replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from content_modeller.core.generator import get_default_format_settings
from content_modeller.core.models import (
    DEFAULT_FORMAT_KIND,
    DEFAULT_REGION,
    ROOT,
    FormDisplay,
    Group,
)
from content_modeller.core.naming import generate_group_name
from content_modeller.core.tree import collect_descendant_groups
from content_modeller.core.widgets import get_default_widget, get_widget_default_settings

# Group attributes that update_field_group may replace.
UPDATABLE_GROUP_KEYS = frozenset(
    {"name", "label", "weight", "format_kind", "format_settings", "region"}
)
# Membership attributes that only the move/reorder operations may change.
STRUCTURAL_GROUP_KEYS = frozenset({"children", "parent_name"})


class FieldNotFoundError(KeyError):
    """Raised when a settings write targets a field that is not on the form."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"field not found: {field_name}")

    def __str__(self) -> str:
        return f"field not found: {self.field_name}"


class HierarchyCycleError(ValueError):
    """Raised when a group move would place a group inside itself."""

    def __init__(self, group_name: str, target_parent_name: str):
        self.group_name = group_name
        self.target_parent_name = target_parent_name
        super().__init__(
            f"Cannot move group '{group_name}' into '{target_parent_name}': "
            "target is the group itself or one of its descendants"
        )


# Group children helpers


def add_child_to_group(group: Group, item_name: str, position: Optional[int] = None) -> Group:
    """
    Return a copy of group with item_name inserted into its children.

    Args:
        group: Group to update
        item_name: Child name to add
        position: Insertion index; None or out of range appends

    Returns:
        Updated group
    """
    children = list(group.children)
    if position is None or position < 0 or position >= len(children):
        children.append(item_name)
    else:
        children.insert(position, item_name)
    return replace(group, children=children)


def remove_child_from_group(group: Group, item_name: str) -> Group:
    """Return a copy of group without any children entry named item_name."""
    return replace(group, children=[child for child in group.children if child != item_name])


def _groups_containing(model: FormDisplay, item_name: str) -> List[str]:
    return [group.name for group in model.groups if item_name in group.children]


# Moves


def move_field_to_group(model: FormDisplay, field_name: str, target_group_name: str) -> FormDisplay:
    """
    Move a field into a group, or to the root level when target_group_name is "".

    The field is removed from every group currently listing it and appended
    to the target's children. Weights are left alone.

    Returns:
        Updated model, or the input model when the field or target group
        does not exist or the field is already a direct child of the target
    """
    if model.get_field(field_name) is None:
        return model
    if target_group_name and model.get_group(target_group_name) is None:
        return model

    containing = _groups_containing(model, field_name)
    if target_group_name == ROOT and not containing:
        return model
    if target_group_name and containing == [target_group_name]:
        return model

    groups = []
    for group in model.groups:
        if group.name == target_group_name:
            if field_name not in group.children:
                group = add_child_to_group(group, field_name)
        elif field_name in group.children:
            group = remove_child_from_group(group, field_name)
        groups.append(group)

    return replace(model, groups=groups)


def move_group_to_parent(model: FormDisplay, group_name: str, target_parent_name: str) -> FormDisplay:
    """
    Move a group under another group, or to the root level when target_parent_name is "".

    Updates the moved group's parent_name together with the children lists
    of its old and new parents.

    Raises:
        HierarchyCycleError: If the target is the group itself or one of its descendants

    Returns:
        Updated model, or the input model when either group does not exist
        or the group already sits directly under the target
    """
    group = model.get_group(group_name)
    if group is None:
        return model
    if target_parent_name and model.get_group(target_parent_name) is None:
        return model

    if target_parent_name == group_name or target_parent_name in collect_descendant_groups(
        model, group_name
    ):
        raise HierarchyCycleError(group_name, target_parent_name)

    containing = _groups_containing(model, group_name)
    if group.parent_name == target_parent_name:
        if target_parent_name == ROOT and not containing:
            return model
        if target_parent_name and containing == [target_parent_name]:
            return model

    groups = []
    for current in model.groups:
        if current.name == group_name:
            current = replace(current, parent_name=target_parent_name)
        elif current.name == target_parent_name:
            if group_name not in current.children:
                current = add_child_to_group(current, group_name)
        elif group_name in current.children:
            current = remove_child_from_group(current, group_name)
        groups.append(current)

    return replace(model, groups=groups)


def add_fields_to_group(model: FormDisplay, group_name: str, field_names: Iterable[str]) -> FormDisplay:
    """Move several fields into one group, in the given order."""
    updated = model
    for field_name in field_names:
        updated = move_field_to_group(updated, field_name, group_name)
    return updated


# Ordering


def reorder_group_children(model: FormDisplay, group_name: str, new_order: Sequence[str]) -> FormDisplay:
    """
    Reorder the children of a group, or of the root level when group_name is "".

    Root level: each root group and ungrouped field named in new_order gets
    its index in new_order as weight; unnamed root items keep their weight.

    Named group: the group's children become new_order verbatim, and every
    entry naming an existing group or field is given a sequential weight
    (0, 1, 2, ...) so weights agree with the children order. Entries naming
    nothing are kept as opaque children without a weight.

    Returns:
        Updated model, or the input model when the group does not exist
    """
    new_order = list(new_order)

    if group_name == ROOT:
        positions: Dict[str, int] = {}
        for index, name in enumerate(new_order):
            positions.setdefault(name, index)

        grouped = model.grouped_names()
        fields = [
            replace(item, weight=positions[item.name])
            if item.name in positions and item.name not in grouped
            else item
            for item in model.fields
        ]
        groups = [
            replace(group, weight=positions[group.name])
            if group.name in positions and not group.parent_name
            else group
            for group in model.groups
        ]
        return replace(model, groups=groups, fields=fields)

    if model.get_group(group_name) is None:
        return model

    group_names = set(model.group_names())
    field_names = set(model.field_names())
    weights: Dict[str, int] = {}
    for name in new_order:
        if name in weights:
            continue
        if name in group_names or name in field_names:
            weights[name] = len(weights)

    groups = []
    for group in model.groups:
        if group.name == group_name:
            group = replace(group, children=list(new_order))
        if group.name in weights:
            group = replace(group, weight=weights[group.name])
        groups.append(group)

    fields = [
        replace(item, weight=weights[item.name]) if item.name in weights else item
        for item in model.fields
    ]

    return replace(model, groups=groups, fields=fields)


# Group lifecycle


def create_field_group(
    model: FormDisplay,
    label: str = "",
    name: Optional[str] = None,
    format_kind: str = DEFAULT_FORMAT_KIND,
    parent_name: str = ROOT,
    weight: int = 0,
    format_settings: Optional[Mapping[str, Any]] = None,
    region: str = DEFAULT_REGION,
) -> FormDisplay:
    """
    Add a new, empty field group.

    Args:
        model: Form display to update
        label: Display label; also the source of the name when name is omitted
        name: Machine name (default: generate_group_name(label))
        format_kind: FormatKind value
        parent_name: Containing group, or "" for root
        weight: Sibling order key
        format_settings: Explicit settings (default: defaults for format_kind)
        region: Display region

    Returns:
        Updated model, or the input model when a group with that name
        already exists or the parent group does not exist

    Raises:
        ValueError: If neither a name nor a non-blank label is given
    """
    group_name = name or generate_group_name(label)
    if not group_name:
        raise ValueError("Group label is required when no name is given")

    if model.get_group(group_name) is not None:
        return model
    if parent_name and model.get_group(parent_name) is None:
        return model

    kind = format_kind or DEFAULT_FORMAT_KIND
    new_group = Group(
        name=group_name,
        label=(label or "").strip() or group_name,
        children=[],
        parent_name=parent_name or ROOT,
        weight=weight,
        format_kind=kind,
        format_settings=dict(format_settings) if format_settings else get_default_format_settings(kind),
        region=region or DEFAULT_REGION,
    )

    groups = []
    for group in model.groups:
        if parent_name and group.name == parent_name:
            group = add_child_to_group(group, group_name)
        groups.append(group)
    groups.append(new_group)

    return replace(model, groups=groups)


def delete_field_group(
    model: FormDisplay, group_name: str, move_children_to_parent: bool = True
) -> FormDisplay:
    """
    Remove a field group, re-homing its children.

    With move_children_to_parent and a parent present, children are
    appended to the parent's children and child groups take the parent as
    their parent_name. Otherwise child groups are promoted to root and
    child fields simply become ungrouped.

    Returns:
        Updated model, or the input model when the group does not exist
    """
    doomed = model.get_group(group_name)
    if doomed is None:
        return model

    parent_name = doomed.parent_name
    if move_children_to_parent and parent_name and model.get_group(parent_name) is not None:
        new_parent = parent_name
    else:
        new_parent = ROOT

    # Children list first, then any group pointing at the deleted one without being listed.
    orphans = [child for child in doomed.children if child != group_name]
    for group in model.groups:
        if group.parent_name == group_name and group.name not in orphans and group.name != group_name:
            orphans.append(group.name)
    orphan_groups = {name for name in orphans if model.get_group(name) is not None}

    groups = []
    for group in model.groups:
        if group.name == group_name:
            continue
        if group_name in group.children:
            group = remove_child_from_group(group, group_name)
        if new_parent and group.name == new_parent:
            children = list(group.children)
            children.extend(child for child in orphans if child not in children)
            group = replace(group, children=children)
        if group.name in orphan_groups:
            group = replace(group, parent_name=new_parent)
        groups.append(group)

    return replace(model, groups=groups)


def update_field_group(model: FormDisplay, group_name: str, updates: Mapping[str, Any]) -> FormDisplay:
    """
    Shallow-merge updates onto a group.

    format_settings is merged into the existing settings; other keys replace
    the current value. A new name is propagated to the parent's children
    list and to the parent_name of child groups.

    Args:
        model: Form display to update
        group_name: Group to update
        updates: Subset of name, label, weight, format_kind, format_settings, region

    Returns:
        Updated model, or the input model when the group does not exist

    Raises:
        ValueError: For membership keys (children, parent_name), unknown keys,
            or a rename to an empty or already used name
    """
    group = model.get_group(group_name)
    if group is None:
        return model

    structural = sorted(STRUCTURAL_GROUP_KEYS.intersection(updates))
    if structural:
        raise ValueError(
            f"Cannot update {', '.join(structural)} directly; use the move or reorder operations"
        )
    unknown = sorted(set(updates) - UPDATABLE_GROUP_KEYS)
    if unknown:
        raise ValueError(f"Unknown group attribute(s): {', '.join(unknown)}")

    changes = dict(updates)
    if "format_settings" in changes:
        changes["format_settings"] = {
            **group.format_settings,
            **dict(changes["format_settings"] or {}),
        }

    new_name = changes.get("name", group_name)
    if new_name != group_name:
        if not new_name:
            raise ValueError("Group name cannot be empty")
        if model.get_group(new_name) is not None:
            raise ValueError(f"Group '{new_name}' already exists")

    groups = []
    for current in model.groups:
        if current.name == group_name:
            current = replace(current, **changes)
        elif new_name != group_name:
            if group_name in current.children:
                current = replace(
                    current,
                    children=[new_name if child == group_name else child for child in current.children],
                )
            if current.parent_name == group_name:
                current = replace(current, parent_name=new_name)
        groups.append(current)

    return replace(model, groups=groups)


def clear_field_groups(model: FormDisplay) -> FormDisplay:
    """Remove every group; fields and hidden names are kept."""
    return replace(model, groups=[])


# Visibility


def toggle_field_visibility(model: FormDisplay, field_name: str) -> FormDisplay:
    """Hide a visible field or show a hidden one. No check against the field list."""
    return replace(model, hidden=model.hidden ^ {field_name})


def hide_fields(model: FormDisplay, field_names: Iterable[str]) -> FormDisplay:
    return replace(model, hidden=model.hidden | frozenset(field_names))


def show_fields(model: FormDisplay, field_names: Iterable[str]) -> FormDisplay:
    return replace(model, hidden=model.hidden - frozenset(field_names))


def show_all_fields(model: FormDisplay) -> FormDisplay:
    return replace(model, hidden=frozenset())


# Widgets


def update_field_settings(
    model: FormDisplay, field_name: str, settings_patch: Mapping[str, Any]
) -> FormDisplay:
    """
    Merge settings_patch into a field's widget settings.

    Raises:
        FieldNotFoundError: If the field is not on the form display
    """
    target = model.get_field(field_name)
    if target is None:
        raise FieldNotFoundError(field_name)

    updated = replace(target, widget_settings={**target.widget_settings, **dict(settings_patch)})
    return replace(
        model,
        fields=[updated if item.name == field_name else item for item in model.fields],
    )


def update_field_widget(
    model: FormDisplay,
    field_name: str,
    widget_type: str,
    settings: Optional[Mapping[str, Any]] = None,
) -> FormDisplay:
    """
    Switch a field to another widget.

    The widget settings are replaced by settings when given, otherwise by
    the catalog defaults for widget_type. Widget/field-type compatibility is
    the caller's concern (see content_modeller.core.widgets).

    Returns:
        Updated model, or the input model when the field does not exist or
        already uses widget_type and no settings were given
    """
    target = model.get_field(field_name)
    if target is None:
        return model
    if target.widget_type == widget_type and settings is None:
        return model

    new_settings = dict(settings) if settings is not None else get_widget_default_settings(widget_type)
    updated = replace(target, widget_type=widget_type, widget_settings=new_settings)
    return replace(
        model,
        fields=[updated if item.name == field_name else item for item in model.fields],
    )


def reset_field_widgets(
    model: FormDisplay,
    field_types: Mapping[str, str],
    clear_groups: bool = False,
) -> FormDisplay:
    """
    Regenerate widgets from the catalog defaults.

    Args:
        model: Form display to update
        field_types: Field name -> field storage type (e.g. "string", "image")
        clear_groups: Also drop every field group

    Returns:
        Updated model; fields without a known type keep their widget
    """
    fields = []
    for item in model.fields:
        widget = get_default_widget(field_types.get(item.name, ""))
        if widget is not None:
            item = replace(item, widget_type=widget["type"], widget_settings=widget["settings"])
        fields.append(item)

    updated = replace(model, fields=fields)
    if clear_groups:
        updated = clear_field_groups(updated)
    return updated
