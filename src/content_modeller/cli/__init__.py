"""content-modeller CLI - inspect and rearrange entity form displays.

All commands emit JSON envelopes on stdout (errors on stderr).
"""

from content_modeller.cli.config import CLIContext, create_context
from content_modeller.cli.logging import cli_command, get_cli_logger, get_request_id
from content_modeller.cli.main import cli
from content_modeller.cli.output import emit, emit_error, emit_failure, emit_success
from content_modeller.cli.registry import get_context, set_context

__all__ = [
    # Entry point
    "cli",
    # Context
    "CLIContext",
    "create_context",
    "get_context",
    "set_context",
    # Output
    "emit",
    "emit_error",
    "emit_failure",
    "emit_success",
    # Logging
    "cli_command",
    "get_cli_logger",
    "get_request_id",
]
