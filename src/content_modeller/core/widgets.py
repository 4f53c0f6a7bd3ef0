"""
Widget catalog for form displays.

Maps Drupal field types to their available form widgets (the first entry is
the default) and widget types to the modules they require. Callers consult
the catalog before changing a field's widget; the mutation functions do not
check widget/field-type compatibility themselves.
"""

import copy
from typing import Any, Dict, List, Optional

_AUTOCOMPLETE_SETTINGS = {
    "match_operator": "CONTAINS",
    "match_limit": 10,
    "size": 60,
    "placeholder": "",
}
_DATELIST_SETTINGS = {"increment": "15", "date_order": "YMD", "time_type": "24"}
_TEXTFIELD_SETTINGS = {"size": 60, "placeholder": ""}

FIELD_WIDGETS: Dict[str, List[Dict[str, Any]]] = {
    "boolean": [
        {"type": "boolean_checkbox", "label": "Single on/off checkbox", "settings": {"display_label": True}},
        {"type": "options_buttons", "label": "Check boxes/radio buttons", "settings": {}},
    ],
    "created": [
        {"type": "datetime_timestamp", "label": "Datetime Timestamp", "settings": {}},
    ],
    "daterange": [
        {"type": "daterange_default", "label": "Date and time range", "settings": {}},
        {"type": "daterange_datelist", "label": "Select list", "settings": _DATELIST_SETTINGS},
    ],
    "datetime": [
        {"type": "datetime_default", "label": "Date and time", "settings": {}},
        {"type": "datetime_datelist", "label": "Select list", "settings": _DATELIST_SETTINGS},
    ],
    "decimal": [
        {"type": "number", "label": "Number field", "settings": {"placeholder": ""}},
    ],
    "email": [
        {"type": "email_default", "label": "Email", "settings": _TEXTFIELD_SETTINGS},
    ],
    "entity_reference": [
        {"type": "entity_reference_autocomplete", "label": "Autocomplete", "settings": _AUTOCOMPLETE_SETTINGS},
        {"type": "media_library_widget", "label": "Media library", "settings": {"media_types": []}},
        {"type": "options_select", "label": "Select list", "settings": {}},
        {
            "type": "entity_reference_autocomplete_tags",
            "label": "Autocomplete (Tags style)",
            "settings": _AUTOCOMPLETE_SETTINGS,
        },
        {"type": "options_buttons", "label": "Check boxes/radio buttons", "settings": {}},
    ],
    "entity_reference_revisions": [
        {
            "type": "paragraphs",
            "label": "Paragraphs (stable)",
            "settings": {
                "title": "Paragraph",
                "title_plural": "Paragraphs",
                "edit_mode": "open",
                "closed_mode": "summary",
                "autocollapse": "none",
                "closed_mode_threshold": 0,
                "add_mode": "dropdown",
                "form_display_mode": "default",
                "default_paragraph_type": "",
                "features": {"duplicate": "duplicate", "collapse_edit_all": "collapse_edit_all"},
            },
        },
        {
            "type": "entity_reference_revisions_autocomplete",
            "label": "Autocomplete",
            "settings": _AUTOCOMPLETE_SETTINGS,
        },
        {
            "type": "entity_reference_paragraphs",
            "label": "Paragraphs Legacy",
            "settings": {
                "title": "Paragraph",
                "title_plural": "Paragraphs",
                "edit_mode": "open",
                "add_mode": "dropdown",
                "form_display_mode": "default",
                "default_paragraph_type": "",
            },
        },
        {"type": "options_select", "label": "Select list", "settings": {}},
        {"type": "options_buttons", "label": "Check boxes/radio buttons", "settings": {}},
    ],
    "file": [
        {"type": "file_generic", "label": "File", "settings": {"progress_indicator": "throbber"}},
    ],
    "file_uri": [
        {"type": "uri", "label": "URI field", "settings": _TEXTFIELD_SETTINGS},
    ],
    "float": [
        {"type": "number", "label": "Number field", "settings": {"placeholder": ""}},
    ],
    "image": [
        {
            "type": "image_image",
            "label": "Image",
            "settings": {"progress_indicator": "throbber", "preview_image_style": "thumbnail"},
        },
        {
            "type": "image_focal_point",
            "label": "Image (Focal Point)",
            "settings": {
                "progress_indicator": "throbber",
                "preview_image_style": "thumbnail",
                "preview_link": True,
                "offsets": "50,50",
            },
        },
    ],
    "integer": [
        {"type": "number", "label": "Number field", "settings": {"placeholder": ""}},
    ],
    "language": [
        {"type": "language_select", "label": "Language select", "settings": {"include_locked": True}},
    ],
    "layout_section": [
        {"type": "layout_builder_widget", "label": "Layout Builder Widget", "settings": {}},
    ],
    "link": [
        {"type": "link_default", "label": "Link", "settings": {"placeholder_url": "", "placeholder_title": ""}},
        {
            "type": "linkit",
            "label": "Linkit",
            "settings": {
                "linkit_profile": "default",
                "linkit_auto_link_text": False,
                "placeholder_url": "",
                "placeholder_title": "",
            },
        },
        {"type": "redirect_source", "label": "Redirect source", "settings": {}},
    ],
    "list_float": [
        {"type": "options_select", "label": "Select list", "settings": {}},
        {"type": "options_buttons", "label": "Check boxes/radio buttons", "settings": {}},
    ],
    "list_integer": [
        {"type": "options_select", "label": "Select list", "settings": {}},
        {"type": "options_buttons", "label": "Check boxes/radio buttons", "settings": {}},
    ],
    "list_string": [
        {"type": "options_select", "label": "Select list", "settings": {}},
        {"type": "options_buttons", "label": "Check boxes/radio buttons", "settings": {}},
    ],
    "path": [
        {"type": "path", "label": "URL alias", "settings": {}},
    ],
    "string": [
        {"type": "string_textfield", "label": "Textfield", "settings": _TEXTFIELD_SETTINGS},
        {"type": "oembed_textfield", "label": "oEmbed URL", "settings": _TEXTFIELD_SETTINGS},
        {"type": "moderation_state_default", "label": "Moderation state", "settings": {}},
    ],
    "string_long": [
        {"type": "string_textarea", "label": "Text area (multiple rows)", "settings": {"rows": "5", "placeholder": ""}},
    ],
    "text": [
        {"type": "text_textfield", "label": "Text field", "settings": _TEXTFIELD_SETTINGS},
    ],
    "text_long": [
        {"type": "text_textarea", "label": "Text area (multiple rows)", "settings": {"rows": "5", "placeholder": ""}},
    ],
    "text_with_summary": [
        {
            "type": "text_textarea_with_summary",
            "label": "Text area with a summary",
            "settings": {"rows": "9", "summary_rows": "3", "placeholder": "", "show_summary": False},
        },
    ],
    "timestamp": [
        {"type": "datetime_timestamp", "label": "Datetime Timestamp", "settings": {}},
    ],
    "uri": [
        {"type": "uri", "label": "URI field", "settings": _TEXTFIELD_SETTINGS},
    ],
    "webform": [
        {
            "type": "webform_entity_reference_autocomplete",
            "label": "Autocomplete",
            "settings": {"default_data": True, **_AUTOCOMPLETE_SETTINGS},
        },
        {
            "type": "webform_entity_reference_select",
            "label": "Select list",
            "settings": {"default_data": True, "webforms": []},
        },
    ],
}

# Widget types whose presence on a form display requires a module dependency.
WIDGET_MODULES: Dict[str, str] = {
    "datetime_default": "datetime",
    "datetime_timestamp": "datetime",
    "media_library_widget": "media_library",
    "paragraphs": "paragraphs",
    "path": "path",
}

# Module required by any field group on the form.
FIELD_GROUP_MODULE = "field_group"


def _copy_widget(widget: Dict[str, Any]) -> Dict[str, Any]:
    return copy.deepcopy(widget)


def get_default_widget(field_type: str) -> Optional[Dict[str, Any]]:
    """Get the default widget config for a field type, or None if unknown."""
    widgets = FIELD_WIDGETS.get(field_type)
    if not widgets:
        return None
    return _copy_widget(widgets[0])


def get_widgets_for_field_type(field_type: str) -> List[Dict[str, Any]]:
    """Get all widget configs available for a field type."""
    return [_copy_widget(widget) for widget in FIELD_WIDGETS.get(field_type, [])]


def get_widget_by_type(field_type: str, widget_type: str) -> Optional[Dict[str, Any]]:
    """Get a specific widget config for a field type, or None."""
    for widget in FIELD_WIDGETS.get(field_type, []):
        if widget["type"] == widget_type:
            return _copy_widget(widget)
    return None


def get_widget_default_settings(widget_type: str) -> Dict[str, Any]:
    """Default settings for a widget type, looked up across all field types.

    The first catalog entry declaring the widget wins; unknown widgets get {}.
    """
    for widgets in FIELD_WIDGETS.values():
        for widget in widgets:
            if widget["type"] == widget_type:
                return copy.deepcopy(widget["settings"])
    return {}


def get_widget_module(widget_type: str) -> Optional[str]:
    """Module a widget type depends on, if any."""
    return WIDGET_MODULES.get(widget_type)


def list_field_types() -> List[str]:
    return sorted(FIELD_WIDGETS)
