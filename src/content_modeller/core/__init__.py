"""Core form display operations for content-modeller."""

from content_modeller.core.models import (
    DisplayTree,
    Field,
    FieldNode,
    FormatKind,
    FormDisplay,
    Group,
    GroupNode,
)

from content_modeller.core.parser import parse_form_display

from content_modeller.core.tree import build_tree, get_group_children

from content_modeller.core.rendering import render_form_display, render_tree

from content_modeller.core.mutations import (
    FieldNotFoundError,
    HierarchyCycleError,
    clear_field_groups,
    create_field_group,
    delete_field_group,
    move_field_to_group,
    move_group_to_parent,
    reorder_group_children,
    toggle_field_visibility,
    update_field_group,
    update_field_settings,
)

from content_modeller.core.generator import dump_form_display, generate_form_display

from content_modeller.core.validation import repair_form_display, validate_form_display

from content_modeller.core.storage import load_form_display, save_form_display

__all__ = [
    "DisplayTree",
    "Field",
    "FieldNode",
    "FormatKind",
    "FormDisplay",
    "Group",
    "GroupNode",
    "parse_form_display",
    "build_tree",
    "get_group_children",
    "render_form_display",
    "render_tree",
    "FieldNotFoundError",
    "HierarchyCycleError",
    "clear_field_groups",
    "create_field_group",
    "delete_field_group",
    "move_field_to_group",
    "move_group_to_parent",
    "reorder_group_children",
    "toggle_field_visibility",
    "update_field_group",
    "update_field_settings",
    "dump_form_display",
    "generate_form_display",
    "repair_form_display",
    "validate_form_display",
    "load_form_display",
    "save_form_display",
]
