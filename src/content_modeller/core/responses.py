"""
Response envelopes for content-modeller commands.

Every command prints exactly one envelope:

    {
        "success": true,
        "data": {"display_id": "node.article.default", "changed": true},
        "error": null,
        "meta": {"version": "response-v1", "request_id": "cli_3f9a0c7d21be"}
    }

A command that had nothing to do (moving a field into the group that
already holds it) still succeeds. On failure ``data`` carries
``error_code`` and ``error_type``, plus ``remediation`` where there is an
obvious next step.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from content_modeller.core.context import current_request_id

RESPONSE_VERSION = "response-v1"


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    # Bad input
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_FORMAT = "INVALID_FORMAT"
    MISSING_REQUIRED = "MISSING_REQUIRED"

    # Lookups and conflicts
    NOT_FOUND = "NOT_FOUND"
    FORM_DISPLAY_NOT_FOUND = "FORM_DISPLAY_NOT_FOUND"
    GROUP_NOT_FOUND = "GROUP_NOT_FOUND"
    FIELD_NOT_FOUND = "FIELD_NOT_FOUND"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    CIRCULAR_DEPENDENCY = "CIRCULAR_DEPENDENCY"

    # Environment
    INTERNAL_ERROR = "INTERNAL_ERROR"
    WRITE_FAILED = "WRITE_FAILED"


class ErrorType(str, Enum):
    """How a caller should react to an error."""

    VALIDATION = "validation"  # fix the input
    NOT_FOUND = "not_found"  # check names and paths
    CONFLICT = "conflict"  # inspect the current hierarchy first
    INTERNAL = "internal"  # retry may help


@dataclass
class CommandResponse:
    """
    One command envelope.

    Attributes:
        success: False only when the command failed
        data: Command payload, or error details on failure
        error: Error message, None on success
        meta: Always holds "version"; "request_id" and "warnings" when present
    """

    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=lambda: {"version": RESPONSE_VERSION})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _meta(
    request_id: Optional[str],
    warnings: Optional[Sequence[str]] = None,
    extra: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    meta: Dict[str, Any] = {"version": RESPONSE_VERSION}
    # Inside a command the envelope shares the request id of its log lines.
    request_id = request_id or current_request_id()
    if request_id:
        meta["request_id"] = request_id
    if warnings:
        meta["warnings"] = list(warnings)
    meta.update(extra or {})
    return meta


def _code(value: Union[Enum, str]) -> str:
    return value.value if isinstance(value, Enum) else str(value)


def success_response(
    data: Optional[Mapping[str, Any]] = None,
    *,
    warnings: Optional[Sequence[str]] = None,
    request_id: Optional[str] = None,
    meta: Optional[Mapping[str, Any]] = None,
    **fields: Any,
) -> CommandResponse:
    """Build a success envelope.

    Keyword ``fields`` are merged over ``data``, so
    ``success_response({"display_id": d}, changed=True)`` reads naturally.
    """
    return CommandResponse(
        success=True,
        data={**(data or {}), **fields},
        meta=_meta(request_id, warnings, meta),
    )


def error_response(
    message: str,
    *,
    data: Optional[Mapping[str, Any]] = None,
    error_code: Union[ErrorCode, str] = ErrorCode.INTERNAL_ERROR,
    error_type: Union[ErrorType, str] = ErrorType.INTERNAL,
    remediation: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
    request_id: Optional[str] = None,
    meta: Optional[Mapping[str, Any]] = None,
) -> CommandResponse:
    """Build a failure envelope.

    Args:
        message: Human-readable description, becomes ``error``
        data: Extra machine-readable context merged into ``data``
        error_code: ``ErrorCode`` member or code string
        error_type: ``ErrorType`` member or category string
        remediation: What the caller can do about it
        details: Nested failure description, e.g. validation diagnostics
        request_id: Overrides the request id of the active command
        meta: Extra metadata merged into ``meta``

    Example:
        >>> error_response(
        ...     "Field 'body' not found",
        ...     error_code=ErrorCode.FIELD_NOT_FOUND,
        ...     error_type=ErrorType.NOT_FOUND,
        ... ).data
        {'error_code': 'FIELD_NOT_FOUND', 'error_type': 'not_found'}
    """
    payload: Dict[str, Any] = {
        "error_code": _code(error_code if error_code is not None else ErrorCode.INTERNAL_ERROR),
        "error_type": _code(error_type if error_type is not None else ErrorType.INTERNAL),
    }
    if remediation is not None:
        payload["remediation"] = remediation
    if details:
        payload["details"] = dict(details)
    payload.update(data or {})

    return CommandResponse(success=False, data=payload, error=message, meta=_meta(request_id, extra=meta))


def not_found_error(
    resource_type: str,
    resource_id: str,
    *,
    error_code: Union[ErrorCode, str] = ErrorCode.NOT_FOUND,
    remediation: Optional[str] = None,
    request_id: Optional[str] = None,
) -> CommandResponse:
    """Failure envelope for a missing form display, group or field.

    Example:
        >>> not_found_error("Group", "group_meta", error_code=ErrorCode.GROUP_NOT_FOUND).error
        "Group 'group_meta' not found"
    """
    return error_response(
        f"{resource_type} '{resource_id}' not found",
        error_code=error_code,
        error_type=ErrorType.NOT_FOUND,
        data={"resource_type": resource_type, "resource_id": resource_id},
        remediation=remediation or f"Verify the {resource_type.lower()} exists.",
        request_id=request_id,
    )


def circular_dependency_error(
    group_name: str,
    target_name: str,
    *,
    remediation: Optional[str] = None,
    request_id: Optional[str] = None,
) -> CommandResponse:
    """Failure envelope for moving a group under itself or one of its descendants."""
    return error_response(
        f"Circular nesting: '{group_name}' cannot be moved into '{target_name}'",
        error_code=ErrorCode.CIRCULAR_DEPENDENCY,
        error_type=ErrorType.CONFLICT,
        data={"group": group_name, "target": target_name},
        remediation=remediation or "Move the target group out of this group first.",
        request_id=request_id,
    )
