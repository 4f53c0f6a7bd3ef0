"""CLI command groups."""

from content_modeller.cli.commands.form_display import form_display_group

__all__ = ["form_display_group"]
