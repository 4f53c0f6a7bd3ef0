"""content-modeller CLI entry point.

JSON-only output.
"""

import click

from content_modeller.cli.config import create_context
from content_modeller.cli.registry import register_all_commands


@click.group()
@click.option(
    "--config-dir",
    envvar="CONTENT_MODELLER_CONFIG_DIR",
    type=click.Path(file_okay=False),
    help="Config export directory holding core.entity_form_display.*.yml files.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override the configured log level (logs go to stderr).",
)
@click.pass_context
def cli(ctx: click.Context, config_dir: str | None, log_level: str | None) -> None:
    """content-modeller - arrange fields and field groups on entity edit forms.

    All commands output JSON envelopes.
    """
    ctx.ensure_object(dict)
    cli_ctx = create_context(config_dir=config_dir)
    cli_ctx.config.setup_logging(level=log_level)
    ctx.obj["cli_context"] = cli_ctx


# Register all command groups
register_all_commands(cli)


if __name__ == "__main__":
    cli()
