"""
Unit tests for content_modeller.core.tree and content_modeller.core.rendering.
"""

from dataclasses import replace

from content_modeller.core.models import ROOT, FieldNode, FormDisplay, Group, GroupNode
from content_modeller.core.rendering import (
    EMPTY_TREE_MESSAGE,
    ROOT_CHOICE_LABEL,
    describe_group,
    get_field_choices,
    get_format_kind_choices,
    get_group_choices,
    get_hidden_field_choices,
    render_form_display,
    render_tree,
    summarize_form_display,
)
from content_modeller.core.tree import (
    build_tree,
    collect_descendant_groups,
    find_tree_node,
    get_group_children,
)


class TestGetGroupChildren:
    """Tests for get_group_children function."""

    def test_root_children(self, article_model):
        """Root holds parentless groups and ungrouped fields, sorted by weight."""
        names = [node.name for node in get_group_children(article_model, ROOT)]
        assert names == ["group_tabs", "created", "path"]

    def test_named_group_children(self, article_model):
        nodes = get_group_children(article_model, "group_tabs")

        assert [node.name for node in nodes] == ["group_content", "group_meta"]
        assert all(isinstance(node, GroupNode) for node in nodes)
        assert all(node.children == [] for node in nodes)

    def test_children_sorted_by_weight(self, simple_model):
        model = replace(
            simple_model,
            fields=[replace(item, weight=5 - index) for index, item in enumerate(simple_model.fields)],
        )
        names = [node.name for node in get_group_children(model, "group_main")]
        assert names == ["body", "title"]

    def test_ties_keep_children_order(self, simple_model):
        model = replace(simple_model, fields=[replace(item, weight=0) for item in simple_model.fields])
        names = [node.name for node in get_group_children(model, "group_main")]
        assert names == ["title", "body"]

    def test_unresolvable_children_are_dropped(self, simple_model):
        model = replace(
            simple_model,
            groups=[replace(simple_model.groups[0], children=["title", "ghost", "body"])],
        )
        names = [node.name for node in get_group_children(model, "group_main")]
        assert names == ["title", "body"]

    def test_unknown_group(self, article_model):
        assert get_group_children(article_model, "group_missing") == []


class TestBuildTree:
    """Tests for build_tree function."""

    def test_nested_structure(self, article_model):
        tree = build_tree(article_model)

        tabs = tree.nodes[0]
        assert isinstance(tabs, GroupNode)
        content, meta = tabs.children
        assert [child.name for child in content.children] == ["title", "body"]
        assert [child.name for child in meta.children] == ["field_tags", "field_image"]
        assert isinstance(content.children[0], FieldNode)
        assert tree.hidden == ["promote", "sticky"]

    def test_hidden_field_still_listed_by_group(self, article_model):
        """Hidden fields placed in a group are resolved like any other field."""
        model = replace(article_model, hidden=article_model.hidden | {"body"})
        content = find_tree_node(build_tree(model), "group_content")
        assert [child.name for child in content.children] == ["title", "body"]

    def test_cycle_does_not_recurse_forever(self):
        model = FormDisplay(
            entity_type="node",
            bundle="page",
            groups=[
                Group(name="group_a", children=["group_b"]),
                Group(name="group_b", children=["group_a"], parent_name="group_a"),
            ],
        )
        tree = build_tree(model)

        group_a = tree.nodes[0]
        group_b = group_a.children[0]
        assert group_b.name == "group_b"
        assert group_b.children[0].name == "group_a"
        assert group_b.children[0].children == []

    def test_to_dict(self, article_model):
        data = build_tree(article_model).to_dict()

        assert data["hidden"] == ["promote", "sticky"]
        assert data["nodes"][0]["kind"] == "group"
        assert data["nodes"][0]["children"][0]["children"][0] == {
            "kind": "field",
            "name": "title",
            "widget_type": "string_textfield",
            "weight": 0,
        }


class TestTreeHelpers:
    """Tests for find_tree_node and collect_descendant_groups."""

    def test_find_tree_node(self, article_model):
        tree = build_tree(article_model)

        assert find_tree_node(tree, "field_image").widget_type == "image_image"
        assert find_tree_node(tree, "nope") is None

    def test_collect_descendant_groups(self, article_model):
        assert collect_descendant_groups(article_model, "group_tabs") == {"group_content", "group_meta"}
        assert collect_descendant_groups(article_model, "group_meta") == set()

    def test_descendants_found_through_children_lists(self):
        """A child group listed by a parent counts even when its parent_name disagrees."""
        model = FormDisplay(
            entity_type="node",
            bundle="page",
            groups=[
                Group(name="group_a", children=["group_b"]),
                Group(name="group_b"),
            ],
        )
        assert collect_descendant_groups(model, "group_a") == {"group_b"}

    def test_find_parent_group(self, article_model):
        assert article_model.find_parent_group("body") == "group_content"
        assert article_model.find_parent_group("group_meta") == "group_tabs"
        assert article_model.find_parent_group("group_tabs") == ROOT
        assert article_model.find_parent_group("created") == ROOT


class TestRenderTree:
    """Tests for render_tree and render_form_display."""

    def test_render_form_display(self, article_model):
        expected = "\n".join(
            [
                "Form Display: node > article",
                "",
                "├── [tabs] Tabs",
                "│   ├── [tab] Content",
                "│   │   ├── title (string_textfield)",
                "│   │   └── body (text_textarea_with_summary)",
                "│   └── [tab] Meta",
                "│       ├── field_tags (entity_reference_autocomplete_tags)",
                "│       └── field_image (image_image)",
                "├── created (datetime_timestamp)",
                "└── path (path)",
                "",
                "Hidden: promote, sticky",
            ]
        )
        assert render_form_display(article_model) == expected

    def test_render_without_heading(self, simple_model):
        rendered = render_form_display(simple_model, include_heading=False)
        assert rendered.splitlines()[0] == "└── [fieldset] Main"

    def test_empty_tree(self):
        model = FormDisplay(entity_type="node", bundle="page")
        assert render_tree(build_tree(model)) == EMPTY_TREE_MESSAGE

    def test_field_without_widget(self):
        model = FormDisplay(entity_type="node", bundle="page", fields=[])
        tree = build_tree(model)
        tree.nodes.append(FieldNode(name="title"))
        assert render_tree(tree) == "└── title"


class TestChoicesAndSummaries:
    """Tests for the listing helpers."""

    def test_group_choices_start_with_root(self, article_model):
        choices = get_group_choices(article_model)

        assert choices[0] == {"value": ROOT, "name": ROOT_CHOICE_LABEL}
        assert choices[1] == {"value": "group_tabs", "name": "Tabs [tabs]"}
        assert len(choices) == 4

    def test_field_choices_skip_hidden(self, article_model):
        model = replace(article_model, hidden=article_model.hidden | {"path"})
        values = [choice["value"] for choice in get_field_choices(model)]
        assert "path" not in values
        assert values[0] == "title"

    def test_hidden_choices_sorted(self, article_model):
        assert [c["value"] for c in get_hidden_field_choices(article_model)] == ["promote", "sticky"]

    def test_format_kind_choices(self):
        values = [choice["value"] for choice in get_format_kind_choices()]
        assert values == ["tabs", "tab", "details", "details_sidebar", "fieldset"]

    def test_summarize(self, article_model):
        assert summarize_form_display(article_model) == {
            "id": "node.article.default",
            "entity_type": "node",
            "bundle": "article",
            "mode": "default",
            "group_count": 3,
            "field_count": 6,
            "hidden_count": 2,
        }

    def test_describe_group(self, article_model):
        description = describe_group(article_model, "group_content")

        assert description["parent_name"] == "group_tabs"
        assert description["listed_by"] == "group_tabs"
        assert description["children"] == ["title", "body"]
        assert description["format_settings"]["formatter"] == "open"
        assert describe_group(article_model, "group_missing") is None

    def test_describe_group_reports_lister_of_inconsistent_group(self):
        model = FormDisplay(
            entity_type="node",
            bundle="page",
            groups=[
                Group(name="group_a", children=["group_b"]),
                Group(name="group_b", parent_name=""),
            ],
        )

        description = describe_group(model, "group_b")

        assert description["parent_name"] == ""
        assert description["listed_by"] == "group_a"
