"""
Unit tests for content_modeller.core.naming and content_modeller.core.widgets.
"""

import pytest

from content_modeller.core.models import Group
from content_modeller.core.naming import (
    generate_group_name,
    normalize_group_name,
    validate_group_name,
)
from content_modeller.core.widgets import (
    FIELD_WIDGETS,
    get_default_widget,
    get_widget_by_type,
    get_widget_default_settings,
    get_widget_module,
    get_widgets_for_field_type,
    list_field_types,
)


class TestGroupNames:
    """Tests for group machine-name helpers."""

    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Main Content", "group_main_content"),
            ("  SEO & Social  ", "group_seo_social"),
            ("Step 2: Media!", "group_step_2_media"),
            ("---", ""),
            ("", ""),
        ],
    )
    def test_generate_group_name(self, label, expected):
        assert generate_group_name(label) == expected

    @pytest.mark.parametrize(
        "name, expected",
        [("sidebar", "group_sidebar"), ("group_sidebar", "group_sidebar"), (" Side Bar ", "group_side_bar")],
    )
    def test_normalize_group_name(self, name, expected):
        assert normalize_group_name(name) == expected

    def test_validate_group_name(self):
        groups = [Group(name="group_main")]

        assert validate_group_name("sidebar", groups) is True
        assert validate_group_name("main", groups) == 'Group "group_main" already exists'
        assert validate_group_name("  ", groups) == "Group name is required"


class TestWidgetCatalog:
    """Tests for the widget catalog lookups."""

    def test_default_widget_is_first_entry(self):
        assert get_default_widget("string")["type"] == "string_textfield"
        assert get_default_widget("entity_reference")["type"] == "entity_reference_autocomplete"
        assert get_default_widget("no_such_type") is None

    def test_lookups_return_copies(self):
        widget = get_default_widget("string")
        widget["settings"]["size"] = 1

        assert FIELD_WIDGETS["string"][0]["settings"]["size"] == 60
        assert get_widgets_for_field_type("string")[0]["settings"]["size"] == 60

    def test_widget_by_type(self):
        assert get_widget_by_type("entity_reference", "media_library_widget")["settings"] == {"media_types": []}
        assert get_widget_by_type("string", "media_library_widget") is None

    def test_default_settings_by_widget(self):
        assert get_widget_default_settings("string_textarea") == {"rows": "5", "placeholder": ""}
        assert get_widget_default_settings("no_such_widget") == {}

    def test_widget_modules(self):
        assert get_widget_module("paragraphs") == "paragraphs"
        assert get_widget_module("string_textfield") is None

    def test_field_types_sorted(self):
        types = list_field_types()
        assert types == sorted(types)
        assert "text_with_summary" in types
