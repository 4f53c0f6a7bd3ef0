"""Logging hooks for CLI commands.

Each command body runs inside a command context, so its log lines and its
JSON envelope carry the same "cli_..." request id. Keyword arguments given
to the command logger end up under ``extra["cli_context"]`` in structured
log output.
"""

import logging
import time
from functools import wraps
from typing import Any, Callable, MutableMapping, Optional, Tuple, TypeVar

from content_modeller.core.context import command_context, current_request_id, new_request_id

__all__ = [
    "CommandLogger",
    "cli_command",
    "get_cli_logger",
    "get_request_id",
]

T = TypeVar("T")

REQUEST_ID_PREFIX = "cli"


def get_request_id() -> str:
    """Request id of the running command, "" outside one."""
    return current_request_id()


class CommandLogger(logging.LoggerAdapter):
    """Logger adapter taking context as keyword arguments.

        logger.info("Moved field", field="body", target="group_meta")
    """

    _LOG_KWARGS = ("exc_info", "stack_info", "stacklevel", "extra")

    def __init__(self, name: str = "content_modeller.cli"):
        super().__init__(logging.getLogger(name), {})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        passthrough = {key: kwargs.pop(key) for key in self._LOG_KWARGS if key in kwargs}
        extra = dict(passthrough.pop("extra", None) or {})
        extra["cli_context"] = dict(kwargs)
        passthrough["extra"] = extra
        return msg, passthrough

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(level):
            msg, kwargs = self.process(msg, kwargs)
            self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)


_cli_logger = CommandLogger()


def get_cli_logger() -> CommandLogger:
    return _cli_logger


def cli_command(
    command_name: Optional[str] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Run a click callback as one logged command.

    The callback gets a fresh request id; start and finish (with duration
    and outcome) are logged at DEBUG. click's ``sys.exit(0)`` counts as
    success, any other exit or exception as failure.

    Example:
        >>> @cli_command("move-field")
        ... def move_field_cmd(ctx, entity_type, bundle, field_name, group_name):
        ...     ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = command_name or func.__name__.replace("_", "-")

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            with command_context(name, request_id=new_request_id(REQUEST_ID_PREFIX)):
                started = time.perf_counter()
                outcome = {"success": True, "error": None}
                _cli_logger.debug(f"Command started: {name}")
                try:
                    return func(*args, **kwargs)
                except SystemExit as exc:
                    outcome["success"] = exc.code in (None, 0)
                    raise
                except Exception as exc:
                    outcome.update(success=False, error=str(exc))
                    raise
                finally:
                    _cli_logger.debug(
                        f"Command finished: {name}",
                        duration_ms=round((time.perf_counter() - started) * 1000, 2),
                        **outcome,
                    )

        return wrapper

    return decorator
