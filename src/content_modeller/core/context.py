"""Command context shared by the log lines and the response of one CLI run.

A command run gets a request id; once it has resolved which form display it
works on, that display id is bound as well. Log filters and response
envelopes read both from here instead of having them passed around.

Usage:
    from content_modeller.core.context import command_context, bind_display

    with command_context("move-field") as ctx:
        bind_display("node.article.default")
        print(ctx.request_id)  # e.g., "cli_a1b2c3d4e5f6"
"""

from __future__ import annotations

import secrets
import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

__all__ = [
    "CommandContext",
    "new_request_id",
    "command_context",
    "bind_display",
    "current_request_id",
    "current_command",
    "current_display_id",
    "current_context",
]

_request_id: ContextVar[str] = ContextVar("request_id", default="")
_command: ContextVar[str] = ContextVar("command", default="")
_display_id: ContextVar[str] = ContextVar("display_id", default="")
_started_at: ContextVar[float] = ContextVar("started_at", default=0.0)


def new_request_id(prefix: str = "req") -> str:
    """Random request id of the form <prefix>_<12 hex chars>."""
    return f"{prefix}_{secrets.token_hex(6)}"


@dataclass(frozen=True)
class CommandContext:
    """
    Snapshot of the active command context.

    Attributes:
        request_id: Correlates the log lines and the envelope of one run
        command: CLI command name, "" outside a command
        display_id: "<entity_type>.<bundle>.<mode>" once a command has bound it
        started_at: Unix timestamp of the command start, 0.0 outside a command
    """

    request_id: str = ""
    command: str = ""
    display_id: str = ""
    started_at: float = 0.0

    @property
    def elapsed_ms(self) -> float:
        if self.started_at <= 0:
            return 0.0
        return round((time.time() - self.started_at) * 1000, 2)

    def log_fields(self) -> Dict[str, Any]:
        """Fields copied onto every log record emitted inside the command."""
        return {
            "request_id": self.request_id or "-",
            "command": self.command or "-",
            "display_id": self.display_id or "-",
            "elapsed_ms": self.elapsed_ms,
        }


@contextmanager
def command_context(command: str, *, request_id: Optional[str] = None) -> Iterator[CommandContext]:
    """
    Run a block as one command.

    Args:
        command: Command name
        request_id: Explicit request id (generated when omitted)

    Yields:
        Context snapshot taken at entry; display_id is bound later with bind_display()
    """
    tokens = [
        (_request_id, _request_id.set(request_id or new_request_id())),
        (_command, _command.set(command)),
        (_display_id, _display_id.set("")),
        (_started_at, _started_at.set(time.time())),
    ]
    try:
        yield current_context()
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def bind_display(display_id: str) -> None:
    """Record which form display the running command works on."""
    _display_id.set(display_id)


def current_request_id() -> str:
    return _request_id.get()


def current_command() -> str:
    return _command.get()


def current_display_id() -> str:
    return _display_id.get()


def current_context() -> CommandContext:
    return CommandContext(
        request_id=_request_id.get(),
        command=_command.get(),
        display_id=_display_id.get(),
        started_at=_started_at.get(),
    )
