"""
Root pytest configuration and shared fixtures.

Provides sample form display documents, a populated config export directory
and isolation of the global configuration between tests.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from content_modeller.cli.registry import set_context
from content_modeller.config import set_config
from content_modeller.core.logging_config import ROOT_LOGGER_NAME
from content_modeller.core.models import Field, FormDisplay, Group
from content_modeller.core.parser import get_form_display_filename, parse_form_display

ARTICLE_DOCUMENT: Dict[str, Any] = {
    "uuid": "6d0e4b5a-2f33-4c8e-9d0a-7b1f5c2e9a41",
    "langcode": "en",
    "status": True,
    "dependencies": {
        "config": [
            "field.field.node.article.body",
            "field.field.node.article.field_image",
            "field.field.node.article.field_tags",
            "node.type.article",
        ],
        "module": ["datetime", "field_group", "path"],
    },
    "third_party_settings": {
        "field_group": {
            "group_tabs": {
                "children": ["group_content", "group_meta"],
                "label": "Tabs",
                "region": "content",
                "parent_name": "",
                "weight": 0,
                "format_type": "tabs",
                "format_settings": {"classes": "", "id": "", "direction": "horizontal"},
            },
            "group_content": {
                "children": ["title", "body"],
                "label": "Content",
                "region": "content",
                "parent_name": "group_tabs",
                "weight": 1,
                "format_type": "tab",
                "format_settings": {
                    "classes": "",
                    "id": "",
                    "formatter": "open",
                    "description": "",
                    "required_fields": True,
                },
            },
            "group_meta": {
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
            },
        }
    },
    "id": "node.article.default",
    "targetEntityType": "node",
    "bundle": "article",
    "mode": "default",
    "content": {
        "title": {
            "type": "string_textfield",
            "weight": 0,
            "region": "content",
            "settings": {"size": 60, "placeholder": ""},
            "third_party_settings": {},
        },
        "body": {
            "type": "text_textarea_with_summary",
            "weight": 1,
            "region": "content",
            "settings": {"rows": 9, "summary_rows": 3, "placeholder": "", "show_summary": False},
            "third_party_settings": {},
        },
        "field_tags": {
            "type": "entity_reference_autocomplete_tags",
            "weight": 2,
            "region": "content",
            "settings": {"match_operator": "CONTAINS", "match_limit": 10, "size": 60, "placeholder": ""},
            "third_party_settings": {},
        },
        "field_image": {
            "type": "image_image",
            "weight": 3,
            "region": "content",
            "settings": {"progress_indicator": "throbber", "preview_image_style": "thumbnail"},
            "third_party_settings": {},
        },
        "created": {
            "type": "datetime_timestamp",
            "weight": 10,
            "region": "content",
            "settings": {},
            "third_party_settings": {},
        },
        "path": {
            "type": "path",
            "weight": 12,
            "region": "content",
            "settings": {},
            "third_party_settings": {},
        },
    },
    "hidden": {"promote": True, "sticky": True, "uid": False},
}


def write_form_display(config_dir: Path, document: Dict[str, Any]) -> Path:
    """Write a form display document where storage expects it."""
    path = config_dir / get_form_display_filename(
        document["targetEntityType"], document["bundle"], document.get("mode", "default")
    )
    path.write_text(yaml.safe_dump(document, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep environment variables, config files and globals from leaking between tests."""
    for name in (
        "CONTENT_MODELLER_CONFIG_DIR",
        "CONTENT_MODELLER_MODE",
        "CONTENT_MODELLER_BACKUP",
        "CONTENT_MODELLER_MAX_BACKUPS",
        "CONTENT_MODELLER_LOG_LEVEL",
        "CONTENT_MODELLER_LOG_FORMAT",
        "CONTENT_MODELLER_CONFIG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    set_config(None)
    set_context(None)
    yield
    set_config(None)
    set_context(None)
    # CLI runs attach a handler bound to the runner's stream
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


@pytest.fixture
def article_document() -> Dict[str, Any]:
    """A node.article form display with a tabs container, two tabs and hidden fields."""
    return copy.deepcopy(ARTICLE_DOCUMENT)


@pytest.fixture
def article_model(article_document) -> FormDisplay:
    """Parsed node.article form display."""
    return parse_form_display(article_document)


@pytest.fixture
def simple_model() -> FormDisplay:
    """One root group holding title and body."""
    return FormDisplay(
        entity_type="node",
        bundle="page",
        groups=[Group(name="group_main", label="Main", children=["title", "body"], weight=0)],
        fields=[
            Field(name="title", widget_type="string_textfield", weight=0),
            Field(name="body", widget_type="text_textarea_with_summary", weight=1),
        ],
    )


@pytest.fixture
def config_dir(tmp_path, article_document) -> Path:
    """Config export directory containing the node.article form display."""
    directory = tmp_path / "config" / "sync"
    directory.mkdir(parents=True)
    write_form_display(directory, article_document)
    return directory
