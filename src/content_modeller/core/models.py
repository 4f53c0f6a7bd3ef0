"""
Form display data structures.

Groups and fields are kept as flat, name-addressed lists on a FormDisplay.
Every record is frozen: operations in content_modeller.core.mutations build
new instances with dataclasses.replace instead of editing in place.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Union


ROOT = ""
DEFAULT_REGION = "content"
DEFAULT_MODE = "default"


class FormatKind(str, Enum):
    """Display styles understood by the field_group module."""

    TABS = "tabs"  # container for tab items
    TAB = "tab"  # a tab within a tabs container
    DETAILS = "details"  # collapsible fieldset
    DETAILS_SIDEBAR = "details_sidebar"
    FIELDSET = "fieldset"  # non-collapsible panel

    @classmethod
    def values(cls) -> List[str]:
        return [kind.value for kind in cls]


FORMAT_KIND_DESCRIPTIONS = {
    FormatKind.TABS.value: "Tabs (container for tab items)",
    FormatKind.TAB.value: "Tab (within a tabs container)",
    FormatKind.DETAILS.value: "Details (collapsible fieldset)",
    FormatKind.DETAILS_SIDEBAR.value: "Details Sidebar",
    FormatKind.FIELDSET.value: "Fieldset (non-collapsible)",
}

DEFAULT_FORMAT_KIND = FormatKind.FIELDSET.value


@dataclass(frozen=True)
class Field:
    """
    A content field placed on the form.

    Attributes:
        name: Field machine name (unique within a form display)
        widget_type: Widget plugin identifier (e.g. "string_textfield")
        weight: Sibling order key, ascending
        region: Display region
        widget_settings: Widget plugin settings
        widget_third_party_settings: Settings owned by other modules, passed through
    """

    name: str
    widget_type: str = ""
    weight: int = 0
    region: str = DEFAULT_REGION
    widget_settings: Dict[str, Any] = field(default_factory=dict)
    widget_third_party_settings: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Group:
    """
    A field group (tabs, tab, details, fieldset) holding fields and other groups.

    Attributes:
        name: Group machine name (conventionally "group_" + normalized label)
        label: Display label
        children: Ordered names of direct members (groups or fields)
        parent_name: Containing group's name, or "" for root
        weight: Sibling order key among the group's own siblings
        format_kind: One of FormatKind values (unknown strings are kept as-is)
        format_settings: Settings whose shape depends on format_kind
        region: Display region
    """

    name: str
    label: str = ""
    children: List[str] = field(default_factory=list)
    parent_name: str = ROOT
    weight: int = 0
    format_kind: str = DEFAULT_FORMAT_KIND
    format_settings: Dict[str, Any] = field(default_factory=dict)
    region: str = DEFAULT_REGION


@dataclass(frozen=True)
class FormDisplay:
    """
    Working model of one entity form display.

    Attributes:
        entity_type: Target entity type (node, media, paragraph, ...)
        bundle: Bundle machine name
        mode: Form mode name
        groups: Field groups in document order
        fields: Placed fields in document order, hidden ones included
        hidden: Names of fields excluded from the visible arrangement
        uuid: Config entity UUID, if the document carried one
    """

    entity_type: str
    bundle: str
    mode: str = DEFAULT_MODE
    groups: List[Group] = field(default_factory=list)
    fields: List[Field] = field(default_factory=list)
    hidden: FrozenSet[str] = field(default_factory=frozenset)
    uuid: Optional[str] = None

    @property
    def display_id(self) -> str:
        return f"{self.entity_type}.{self.bundle}.{self.mode}"

    def get_group(self, name: str) -> Optional[Group]:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def get_field(self, name: str) -> Optional[Field]:
        for item in self.fields:
            if item.name == name:
                return item
        return None

    def group_names(self) -> List[str]:
        return [group.name for group in self.groups]

    def field_names(self) -> List[str]:
        return [item.name for item in self.fields]

    def find_parent_group(self, item_name: str) -> str:
        """Return the name of the first group listing item_name as a child, or ROOT."""
        for group in self.groups:
            if item_name in group.children:
                return group.name
        return ROOT

    def grouped_names(self) -> FrozenSet[str]:
        """Names that appear in any group's children list."""
        return frozenset(name for group in self.groups for name in group.children)

    def root_items(self) -> List[Union[Group, Field]]:
        """Root-level groups and ungrouped fields, in document order."""
        grouped = self.grouped_names()
        items: List[Union[Group, Field]] = [
            group for group in self.groups if not group.parent_name
        ]
        items.extend(item for item in self.fields if item.name not in grouped)
        return items

    def is_hidden(self, field_name: str) -> bool:
        return field_name in self.hidden

    def visible_fields(self) -> List[Field]:
        return [item for item in self.fields if item.name not in self.hidden]


# Tree view


@dataclass
class FieldNode:
    """Field leaf in a DisplayTree."""

    name: str
    widget_type: str = ""
    weight: int = 0
    kind: str = field(default="field", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "widget_type": self.widget_type,
            "weight": self.weight,
        }


@dataclass
class GroupNode:
    """Group node in a DisplayTree with its resolved, weight-sorted children."""

    name: str
    label: str = ""
    format_kind: str = DEFAULT_FORMAT_KIND
    weight: int = 0
    children: List["TreeNode"] = field(default_factory=list)
    kind: str = field(default="group", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "label": self.label,
            "format_kind": self.format_kind,
            "weight": self.weight,
            "children": [child.to_dict() for child in self.children],
        }


TreeNode = Union[GroupNode, FieldNode]


@dataclass
class DisplayTree:
    """Hierarchical view of a form display."""

    nodes: List[TreeNode] = field(default_factory=list)
    hidden: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "hidden": list(self.hidden),
        }
