"""
Text rendering for form display trees.
Provides the indented tree view and the choice lists used by CLI listings.
"""

from typing import Any, Dict, List, Optional

from content_modeller.core.models import (
    FORMAT_KIND_DESCRIPTIONS,
    ROOT,
    DisplayTree,
    FormDisplay,
    GroupNode,
    TreeNode,
)
from content_modeller.core.tree import build_tree

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE = "│   "
SPACE = "    "

EMPTY_TREE_MESSAGE = "No fields configured."
ROOT_CHOICE_LABEL = "Root level (ungrouped)"


def render_tree(tree: DisplayTree, entity_type: str = "", bundle: str = "") -> str:
    """
    Render a display tree as indented text.

    Groups are shown as "[format_kind] label", fields as "name (widget)".
    A trailing "Hidden: ..." line lists hidden fields when there are any.

    Args:
        tree: Tree from build_tree()
        entity_type: Optional entity type for the heading
        bundle: Optional bundle for the heading

    Returns:
        Multi-line string
    """
    lines: List[str] = []

    if entity_type and bundle:
        lines.append(f"Form Display: {entity_type} > {bundle}")
        lines.append("")

    def render_node(node: TreeNode, prefix: str, is_last: bool) -> None:
        connector = LAST_BRANCH if is_last else BRANCH
        child_prefix = prefix + (SPACE if is_last else PIPE)

        if isinstance(node, GroupNode):
            lines.append(f"{prefix}{connector}[{node.format_kind}] {node.label}")
            for index, child in enumerate(node.children):
                render_node(child, child_prefix, index == len(node.children) - 1)
        else:
            widget_info = f" ({node.widget_type})" if node.widget_type else ""
            lines.append(f"{prefix}{connector}{node.name}{widget_info}")

    if not tree.nodes:
        lines.append(EMPTY_TREE_MESSAGE)
    else:
        for index, node in enumerate(tree.nodes):
            render_node(node, "", index == len(tree.nodes) - 1)

    if tree.hidden:
        lines.append("")
        lines.append(f"Hidden: {', '.join(sorted(tree.hidden))}")

    return "\n".join(lines)


def render_form_display(model: FormDisplay, include_heading: bool = True) -> str:
    """Build and render the tree of a form display in one step."""
    tree = build_tree(model)
    if include_heading:
        return render_tree(tree, model.entity_type, model.bundle)
    return render_tree(tree)


def get_group_choices(model: FormDisplay) -> List[Dict[str, str]]:
    """Choices for picking a target group; the root level comes first."""
    choices = [{"value": ROOT, "name": ROOT_CHOICE_LABEL}]
    for group in model.groups:
        choices.append({"value": group.name, "name": f"{group.label} [{group.format_kind}]"})
    return choices


def get_field_choices(model: FormDisplay) -> List[Dict[str, str]]:
    """Choices for the visible fields of a form display."""
    return [
        {"value": item.name, "name": f"{item.name} ({item.widget_type or 'unknown'})"}
        for item in model.visible_fields()
    ]


def get_hidden_field_choices(model: FormDisplay) -> List[Dict[str, str]]:
    return [{"value": name, "name": name} for name in sorted(model.hidden)]


def get_format_kind_choices() -> List[Dict[str, str]]:
    return [
        {"value": value, "name": description}
        for value, description in FORMAT_KIND_DESCRIPTIONS.items()
    ]


def summarize_form_display(model: FormDisplay) -> Dict[str, Any]:
    """Counts for listings."""
    return {
        "id": model.display_id,
        "entity_type": model.entity_type,
        "bundle": model.bundle,
        "mode": model.mode,
        "group_count": len(model.groups),
        "field_count": len(model.fields),
        "hidden_count": len(model.hidden),
    }


def describe_group(model: FormDisplay, group_name: str) -> Optional[Dict[str, Any]]:
    """Serializable description of one group, or None when it does not exist.

    "listed_by" is the group whose children list names it; it differs from
    "parent_name" only in an inconsistent document.
    """
    group = model.get_group(group_name)
    if group is None:
        return None
    return {
        "name": group.name,
        "label": group.label,
        "format_kind": group.format_kind,
        "parent_name": group.parent_name,
        "listed_by": model.find_parent_group(group.name),
        "weight": group.weight,
        "children": list(group.children),
        "format_settings": dict(group.format_settings),
    }
