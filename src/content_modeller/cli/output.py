"""Envelope printing for the content-modeller CLI.

Commands never print directly. A success envelope goes to stdout as one
line of compact JSON; a failure envelope goes to stderr and the process
exits with status 1.
"""

import json
import sys
from typing import Any, Mapping, NoReturn, Sequence

from content_modeller.cli.logging import get_cli_logger, get_request_id
from content_modeller.core.responses import CommandResponse, error_response, success_response

logger = get_cli_logger()


def _dumps(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), default=str)


def emit(data: Any) -> None:
    """Print ``data`` to stdout as compact JSON."""
    print(_dumps(data))


def emit_failure(response: CommandResponse) -> NoReturn:
    """Print a failure envelope to stderr and exit 1."""
    logger.debug("Command failed", error=response.error, error_code=response.data.get("error_code"))
    print(_dumps(response.to_dict()), file=sys.stderr)
    sys.exit(1)


def emit_error(
    message: str,
    code: str = "INTERNAL_ERROR",
    *,
    error_type: str = "internal",
    remediation: str | None = None,
    details: Mapping[str, Any] | None = None,
) -> NoReturn:
    """Build a failure envelope and hand it to emit_failure().

    Args:
        message: Becomes the envelope's ``error``.
        code: ErrorCode value, e.g. FIELD_NOT_FOUND.
        error_type: validation, not_found, conflict or internal.
        remediation: Next step for the user, if there is an obvious one.
        details: Extra structured context, e.g. diagnostics.
    """
    emit_failure(
        error_response(
            message,
            error_code=code,
            error_type=error_type,
            remediation=remediation,
            details=details,
            request_id=get_request_id() or None,
        )
    )


def emit_success(
    data: Any,
    *,
    warnings: Sequence[str] | None = None,
    meta: Mapping[str, Any] | None = None,
) -> None:
    """Print a success envelope; a non-dict payload is wrapped as {"result": data}."""
    response = success_response(
        data=data if isinstance(data, dict) else {"result": data},
        warnings=warnings,
        meta=meta,
        request_id=get_request_id() or None,
    )
    emit(response.to_dict())
