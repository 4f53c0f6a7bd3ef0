"""Wiring of the content-modeller command tree.

Commands reach their CLIContext through click's ``ctx.obj``; tests that
call command helpers directly can install one with set_context().
"""

from typing import Optional

import click

from content_modeller.cli.config import CLIContext

_fallback_context: Optional[CLIContext] = None


def set_context(ctx: Optional[CLIContext]) -> None:
    """Install (or clear, with None) the context used when click has none."""
    global _fallback_context
    _fallback_context = ctx


def get_context(ctx: Optional[click.Context] = None) -> CLIContext:
    """CLIContext of the running command.

    Looks in ``ctx.obj["cli_context"]`` first, then at the context installed
    with set_context().

    Raises:
        RuntimeError: Neither source holds a context.
    """
    obj = ctx.obj if ctx is not None else None
    if obj and "cli_context" in obj:
        return obj["cli_context"]
    if _fallback_context is None:
        raise RuntimeError("CLI context not initialised; run through the cli group or call set_context()")
    return _fallback_context


def register_all_commands(cli: click.Group) -> None:
    """Attach the form-display group and the version command to ``cli``."""
    # Imported late: the command modules import this one.
    from content_modeller.cli.commands import form_display_group

    cli.add_command(form_display_group)

    @cli.command("version")
    @click.pass_context
    def version(ctx: click.Context) -> None:
        """Print the package version and the resolved config directory."""
        from content_modeller import __version__
        from content_modeller.cli.output import emit_success

        config_dir = get_context(ctx).config_dir
        emit_success(
            {
                "name": "content-modeller",
                "version": __version__,
                "config_dir": str(config_dir) if config_dir else None,
            }
        )
