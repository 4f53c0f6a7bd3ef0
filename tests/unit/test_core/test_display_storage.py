"""
Unit tests for content_modeller.core.storage module.

Tests cover:
- Locating, reading and listing form display files
- Atomic saves with backups and backup retention
"""

import logging
from dataclasses import replace
from unittest.mock import patch

import pytest
import yaml

from content_modeller.core.mutations import move_field_to_group
from content_modeller.core.storage import (
    BACKUPS_DIRNAME,
    backup_form_display,
    form_display_exists,
    get_form_display_path,
    list_form_display_backups,
    list_form_displays,
    load_form_display,
    read_form_display_document,
    save_form_display,
)


class TestReadFormDisplay:
    """Tests for reading form display files."""

    def test_path(self, tmp_path):
        path = get_form_display_path(tmp_path, "node", "article")
        assert path == tmp_path / "core.entity_form_display.node.article.default.yml"

    def test_exists(self, config_dir):
        assert form_display_exists(config_dir, "node", "article")
        assert not form_display_exists(config_dir, "node", "page")

    def test_load(self, config_dir, article_model):
        assert load_form_display(config_dir, "node", "article") == article_model

    def test_load_missing(self, config_dir):
        assert load_form_display(config_dir, "node", "article", "compact") is None

    def test_invalid_yaml_returns_none(self, config_dir, caplog):
        path = get_form_display_path(config_dir, "node", "broken")
        path.write_text("content: [unclosed\n", encoding="utf-8")

        with caplog.at_level(logging.WARNING, logger="content_modeller.core.storage"):
            assert read_form_display_document(config_dir, "node", "broken") is None
        assert "Could not read form display" in caplog.text

    def test_non_mapping_returns_none(self, config_dir):
        get_form_display_path(config_dir, "node", "list").write_text("- a\n- b\n", encoding="utf-8")
        assert read_form_display_document(config_dir, "node", "list") is None

    def test_document_without_bundle_loads_as_none(self, config_dir):
        get_form_display_path(config_dir, "node", "empty").write_text("langcode: en\n", encoding="utf-8")
        assert load_form_display(config_dir, "node", "empty") is None


class TestSaveFormDisplay:
    """Tests for save_form_display function."""

    def test_save_writes_generated_yaml(self, config_dir, article_model):
        updated = move_field_to_group(article_model, "path", "group_meta")
        path = save_form_display(config_dir, updated)

        assert path == get_form_display_path(config_dir, "node", "article")
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert document["third_party_settings"]["field_group"]["group_meta"]["children"][-1] == "path"
        assert load_form_display(config_dir, "node", "article") == updated

    def test_save_creates_directory(self, tmp_path, article_model):
        target = tmp_path / "new" / "sync"
        path = save_form_display(target, article_model, backup=False)
        assert path.is_file()

    def test_save_keeps_backup(self, config_dir, article_model):
        original = get_form_display_path(config_dir, "node", "article").read_text(encoding="utf-8")
        save_form_display(config_dir, replace(article_model, hidden=frozenset()))

        backups = list_form_display_backups(get_form_display_path(config_dir, "node", "article"))
        assert len(backups) == 1
        assert backups[0].parent.name == BACKUPS_DIRNAME
        assert backups[0].read_text(encoding="utf-8") == original

    def test_save_without_backup(self, config_dir, article_model):
        save_form_display(config_dir, article_model, backup=False)
        assert not (config_dir / BACKUPS_DIRNAME).exists()

    def test_no_temp_file_left(self, config_dir, article_model):
        save_form_display(config_dir, article_model)
        assert list(config_dir.glob("*.tmp")) == []

    def test_write_failure_raises_and_cleans_up(self, config_dir, article_model):
        with patch("pathlib.Path.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                save_form_display(config_dir, article_model, backup=False)
        assert list(config_dir.glob("*.tmp")) == []

    def test_save_logs(self, config_dir, article_model, caplog):
        with caplog.at_level(logging.INFO, logger="content_modeller.core.storage"):
            save_form_display(config_dir, article_model, backup=False)
        assert "Saved form display node.article.default" in caplog.text


class TestBackups:
    """Tests for backup_form_display and retention."""

    def test_nothing_to_back_up(self, tmp_path):
        assert backup_form_display(tmp_path / "missing.yml") is None

    def test_retention(self, config_dir):
        path = get_form_display_path(config_dir, "node", "article")
        for _ in range(5):
            backup_form_display(path, max_backups=3)

        assert len(list_form_display_backups(path)) == 3

    def test_unlimited_retention(self, config_dir):
        path = get_form_display_path(config_dir, "node", "article")
        for _ in range(4):
            backup_form_display(path, max_backups=0)

        assert len(list_form_display_backups(path)) == 4

    def test_backups_newest_first(self, config_dir):
        path = get_form_display_path(config_dir, "node", "article")
        first = backup_form_display(path)
        second = backup_form_display(path)

        assert list_form_display_backups(path) == [second, first]

    def test_no_backups_dir(self, config_dir):
        assert list_form_display_backups(get_form_display_path(config_dir, "node", "article")) == []


class TestListFormDisplays:
    """Tests for list_form_displays function."""

    def test_lists_sorted_triples(self, config_dir):
        (config_dir / "core.entity_form_display.media.image.default.yml").write_text("{}", encoding="utf-8")
        (config_dir / "core.entity_form_display.node.article.compact.yml").write_text("{}", encoding="utf-8")
        (config_dir / "core.entity_view_display.node.article.default.yml").write_text("{}", encoding="utf-8")
        (config_dir / "core.entity_form_display.broken.yml").write_text("{}", encoding="utf-8")

        assert list_form_displays(config_dir) == [
            ("media", "image", "default"),
            ("node", "article", "compact"),
            ("node", "article", "default"),
        ]

    def test_missing_directory(self, tmp_path):
        assert list_form_displays(tmp_path / "nope") == []
