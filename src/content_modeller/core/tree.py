"""
Hierarchical view of a form display.

Read-only: builds GroupNode/FieldNode trees from the flat group and field
lists for display, listings and consistency checks.
"""

from typing import Dict, List, Optional, Set

from content_modeller.core.models import (
    ROOT,
    DisplayTree,
    Field,
    FieldNode,
    FormDisplay,
    Group,
    GroupNode,
    TreeNode,
)


def _group_node(group: Group) -> GroupNode:
    return GroupNode(
        name=group.name,
        label=group.label,
        format_kind=group.format_kind,
        weight=group.weight,
    )


def _field_node(item: Field) -> FieldNode:
    return FieldNode(name=item.name, widget_type=item.widget_type, weight=item.weight)


def get_group_children(model: FormDisplay, parent_name: str = ROOT) -> List[TreeNode]:
    """
    Resolve the direct children of a group, sorted by weight.

    For the root ("") this is every group without a parent plus every field
    not listed in any group's children. For a named group each children
    entry is resolved to a group or field; entries matching neither are
    dropped. Ties keep document/children order (the sort is stable).

    Args:
        model: Form display to inspect
        parent_name: Group name, or "" for the root level

    Returns:
        Child nodes without their own children resolved
    """
    groups_by_name: Dict[str, Group] = {}
    for group in model.groups:
        groups_by_name.setdefault(group.name, group)
    fields_by_name: Dict[str, Field] = {}
    for item in model.fields:
        fields_by_name.setdefault(item.name, item)

    children: List[TreeNode] = []

    if parent_name == ROOT:
        for group in model.groups:
            if not group.parent_name:
                children.append(_group_node(group))

        grouped = model.grouped_names()
        for item in model.fields:
            if item.name not in grouped:
                children.append(_field_node(item))
    else:
        parent = groups_by_name.get(parent_name)
        if parent is None:
            return []

        for child_name in parent.children:
            child_group = groups_by_name.get(child_name)
            if child_group is not None:
                children.append(_group_node(child_group))
                continue
            child_field = fields_by_name.get(child_name)
            if child_field is not None:
                children.append(_field_node(child_field))

    children.sort(key=lambda node: node.weight)
    return children


def build_tree(model: FormDisplay) -> DisplayTree:
    """
    Build the full display tree of a form display.

    Group subtrees are resolved recursively from the root. A group already
    on the current path is not expanded again, so a cyclic document yields
    a truncated tree instead of unbounded recursion.
    """

    def build_subtree(parent_name: str, path: Set[str]) -> List[TreeNode]:
        nodes = get_group_children(model, parent_name)
        for node in nodes:
            if isinstance(node, GroupNode) and node.name not in path:
                node.children = build_subtree(node.name, path | {node.name})
        return nodes

    return DisplayTree(nodes=build_subtree(ROOT, set()), hidden=sorted(model.hidden))


def find_tree_node(tree: DisplayTree, name: str) -> Optional[TreeNode]:
    """Depth-first lookup of a node by name."""
    stack: List[TreeNode] = list(reversed(tree.nodes))
    while stack:
        node = stack.pop()
        if node.name == name:
            return node
        if isinstance(node, GroupNode):
            stack.extend(reversed(node.children))
    return None


def collect_descendant_groups(model: FormDisplay, group_name: str) -> Set[str]:
    """Names of every group nested (at any depth) under group_name."""
    descendants: Set[str] = set()
    pending = [group_name]
    while pending:
        current = pending.pop()
        for group in model.groups:
            if group.parent_name == current and group.name not in descendants:
                descendants.add(group.name)
                pending.append(group.name)
        parent = model.get_group(current)
        if parent is not None:
            for child_name in parent.children:
                if child_name not in descendants and model.get_group(child_name) is not None:
                    descendants.add(child_name)
                    pending.append(child_name)
    descendants.discard(group_name)
    return descendants
