"""
Unit tests for content_modeller.core.generator module.
"""

from dataclasses import replace

import pytest
import yaml

from content_modeller.core.generator import (
    dump_document,
    dump_form_display,
    generate_dependencies,
    generate_form_display,
    get_bundle_dependency,
    get_default_format_settings,
)
from content_modeller.core.models import FormDisplay, Group
from content_modeller.core.parser import parse_form_display


class TestGenerateFormDisplay:
    """Tests for generate_form_display function."""

    def test_key_order(self, article_model):
        document = generate_form_display(article_model)

        assert list(document) == [
            "uuid",
            "langcode",
            "status",
            "dependencies",
            "third_party_settings",
            "id",
            "targetEntityType",
            "bundle",
            "mode",
            "content",
            "hidden",
        ]

    def test_round_trip(self, article_model):
        assert parse_form_display(generate_form_display(article_model)) == article_model

    def test_hidden_fields_leave_content(self, article_model):
        model = replace(article_model, hidden=article_model.hidden | {"path"})
        document = generate_form_display(model)

        assert "path" not in document["content"]
        assert document["hidden"] == {"path": True, "promote": True, "sticky": True}

    def test_group_entry(self, article_model):
        entry = generate_form_display(article_model)["third_party_settings"]["field_group"]["group_meta"]

        assert entry == {
            "children": ["field_tags", "field_image"],
            "label": "Meta",
            "region": "content",
            "parent_name": "group_tabs",
            "weight": 2,
            "format_type": "tab",
            "format_settings": {
                "classes": "",
                "id": "",
                "formatter": "closed",
                "description": "",
                "required_fields": True,
            },
        }

    def test_empty_format_settings_get_defaults(self):
        model = FormDisplay(
            entity_type="node", bundle="page", groups=[Group(name="group_tabs", format_kind="tabs")]
        )
        entry = generate_form_display(model)["third_party_settings"]["field_group"]["group_tabs"]
        assert entry["format_settings"] == {"classes": "", "id": "", "direction": "horizontal"}

    def test_no_groups_no_third_party_settings(self):
        document = generate_form_display(FormDisplay(entity_type="node", bundle="page"))

        assert "third_party_settings" not in document
        assert "uuid" not in document
        assert document["id"] == "node.page.default"
        assert document["content"] == {}
        assert document["hidden"] == {}

    def test_generation_is_deterministic(self, article_model):
        assert dump_form_display(article_model) == dump_form_display(
            parse_form_display(generate_form_display(article_model))
        )


class TestGenerateDependencies:
    """Tests for generate_dependencies function."""

    def test_article_dependencies(self, article_model):
        assert generate_dependencies(article_model) == {
            "config": [
                "field.field.node.article.body",
                "field.field.node.article.created",
                "field.field.node.article.field_image",
                "field.field.node.article.field_tags",
                "field.field.node.article.path",
                "field.field.node.article.title",
                "node.type.article",
            ],
            "module": ["datetime", "field_group", "path"],
        }

    def test_hidden_fields_are_not_dependencies(self, article_model):
        model = replace(article_model, hidden=article_model.hidden | {"path", "created"})
        dependencies = generate_dependencies(model)

        assert "field.field.node.article.path" not in dependencies["config"]
        assert dependencies["module"] == ["field_group"]

    def test_module_key_omitted_when_empty(self):
        dependencies = generate_dependencies(FormDisplay(entity_type="node", bundle="page"))
        assert dependencies == {"config": ["node.type.page"]}

    @pytest.mark.parametrize(
        "entity_type, expected",
        [
            ("node", "node.type.faq"),
            ("media", "media.type.faq"),
            ("paragraph", "paragraphs.paragraphs_type.faq"),
            ("taxonomy_term", "taxonomy.vocabulary.faq"),
            ("commerce_product", ""),
        ],
    )
    def test_bundle_dependency(self, entity_type, expected):
        assert get_bundle_dependency(entity_type, "faq") == expected


class TestDefaultFormatSettings:
    """Tests for get_default_format_settings function."""

    def test_tab(self):
        assert get_default_format_settings("tab") == {
            "classes": "",
            "id": "",
            "formatter": "closed",
            "description": "",
            "required_fields": True,
        }

    def test_details_and_sidebar_match(self):
        assert get_default_format_settings("details") == get_default_format_settings("details_sidebar")

    def test_unknown_kind_gets_base(self):
        assert get_default_format_settings("accordion") == {"classes": "", "id": ""}

    def test_returns_new_dict(self):
        settings = get_default_format_settings("fieldset")
        settings["classes"] = "changed"
        assert get_default_format_settings("fieldset")["classes"] == ""


class TestDumpDocument:
    """Tests for the YAML encoding."""

    def test_sequences_are_indented(self, article_model):
        text = dump_form_display(article_model)

        assert text.startswith("uuid: 6d0e4b5a-2f33-4c8e-9d0a-7b1f5c2e9a41\nlangcode: en\nstatus: true\n")
        assert "dependencies:\n  config:\n    - field.field.node.article.body\n" in text
        assert "hidden:\n  promote: true\n  sticky: true\n" in text

    def test_empty_collections_inline(self):
        text = dump_document({"children": [], "settings": {}})
        assert text == "children: []\nsettings: {}\n"

    def test_no_aliases_for_shared_values(self):
        shared = {"size": 60}
        text = dump_document({"a": shared, "b": shared})

        assert "&" not in text and "*" not in text
        assert yaml.safe_load(text) == {"a": {"size": 60}, "b": {"size": 60}}

    def test_yaml_round_trip(self, article_model):
        assert yaml.safe_load(dump_form_display(article_model)) == generate_form_display(article_model)
