"""
Batch form display operations.

Applies scripted lists of operations such as
{"action": "move_field", "field": "body", "group": "group_main"} to a stored
form display. Operations are idempotent: re-running a script reports the
already-satisfied steps as skipped instead of failing.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from content_modeller.core.models import DEFAULT_FORMAT_KIND, DEFAULT_MODE, ROOT, FormDisplay
from content_modeller.core.mutations import (
    FieldNotFoundError,
    HierarchyCycleError,
    clear_field_groups,
    create_field_group,
    delete_field_group,
    hide_fields,
    move_field_to_group,
    move_group_to_parent,
    reorder_group_children,
    reset_field_widgets,
    show_fields,
    toggle_field_visibility,
    update_field_group,
    update_field_settings,
    update_field_widget,
)
from content_modeller.core.storage import (
    DEFAULT_MAX_BACKUPS,
    load_form_display,
    save_form_display,
)

logger = logging.getLogger(__name__)

Operation = Mapping[str, Any]


class OperationError(ValueError):
    """Raised when an operation mapping is missing a required key."""


def _require(operation: Operation, key: str) -> Any:
    if key not in operation or operation[key] is None:
        raise OperationError(f"missing required key: {key}")
    return operation[key]


def _name_list(operation: Operation, key: str) -> List[str]:
    value = _require(operation, key)
    if isinstance(value, str):
        return [value]
    return [str(name) for name in value]


def _move_field(model: FormDisplay, operation: Operation) -> FormDisplay:
    return move_field_to_group(model, _require(operation, "field"), operation.get("group") or ROOT)


def _move_group(model: FormDisplay, operation: Operation) -> FormDisplay:
    return move_group_to_parent(model, _require(operation, "group"), operation.get("parent") or ROOT)


def _reorder(model: FormDisplay, operation: Operation) -> FormDisplay:
    return reorder_group_children(model, operation.get("group") or ROOT, _name_list(operation, "order"))


def _create_group(model: FormDisplay, operation: Operation) -> FormDisplay:
    return create_field_group(
        model,
        label=operation.get("label") or "",
        name=operation.get("name"),
        format_kind=operation.get("format_kind") or DEFAULT_FORMAT_KIND,
        parent_name=operation.get("parent") or ROOT,
        weight=int(operation.get("weight", 0)),
        format_settings=operation.get("format_settings"),
    )


def _delete_group(model: FormDisplay, operation: Operation) -> FormDisplay:
    return delete_field_group(
        model,
        _require(operation, "group"),
        move_children_to_parent=bool(operation.get("move_children_to_parent", True)),
    )


def _update_group(model: FormDisplay, operation: Operation) -> FormDisplay:
    return update_field_group(model, _require(operation, "group"), _require(operation, "changes"))


def _toggle_visibility(model: FormDisplay, operation: Operation) -> FormDisplay:
    return toggle_field_visibility(model, _require(operation, "field"))


def _hide_fields(model: FormDisplay, operation: Operation) -> FormDisplay:
    return hide_fields(model, _name_list(operation, "fields"))


def _show_fields(model: FormDisplay, operation: Operation) -> FormDisplay:
    return show_fields(model, _name_list(operation, "fields"))


def _update_widget(model: FormDisplay, operation: Operation) -> FormDisplay:
    return update_field_widget(
        model,
        _require(operation, "field"),
        _require(operation, "widget"),
        settings=operation.get("settings"),
    )


def _update_settings(model: FormDisplay, operation: Operation) -> FormDisplay:
    return update_field_settings(model, _require(operation, "field"), _require(operation, "settings"))


def _clear_groups(model: FormDisplay, operation: Operation) -> FormDisplay:
    return clear_field_groups(model)


def _reset_widgets(model: FormDisplay, operation: Operation) -> FormDisplay:
    field_types = _require(operation, "field_types")
    if not isinstance(field_types, Mapping):
        raise OperationError("field_types must be a mapping of field name to field type")
    return reset_field_widgets(
        model,
        {str(name): str(kind) for name, kind in field_types.items()},
        clear_groups=bool(operation.get("clear_groups", False)),
    )


OPERATION_HANDLERS: Dict[str, Callable[[FormDisplay, Operation], FormDisplay]] = {
    "move_field": _move_field,
    "move_group": _move_group,
    "reorder": _reorder,
    "create_group": _create_group,
    "delete_group": _delete_group,
    "update_group": _update_group,
    "toggle_visibility": _toggle_visibility,
    "hide_fields": _hide_fields,
    "show_fields": _show_fields,
    "update_widget": _update_widget,
    "update_settings": _update_settings,
    "clear_groups": _clear_groups,
    "reset_widgets": _reset_widgets,
}


def _operation_target(operation: Operation) -> Optional[str]:
    for key in ("field", "group", "name", "label"):
        if operation.get(key):
            return str(operation[key])
    fields = operation.get("fields")
    if fields:
        if isinstance(fields, (list, tuple)):
            return ", ".join(str(name) for name in fields)
        return str(fields)
    return None


def apply_operation(model: FormDisplay, operation: Operation) -> Tuple[FormDisplay, Dict[str, Any]]:
    """
    Apply a single operation mapping.

    Args:
        model: Form display to update
        operation: Mapping with an "action" key and the action's arguments

    Returns:
        Tuple of (model, change record). The change status is "applied" when
        the model changed and "skipped" (with a reason) for unknown actions,
        invalid arguments and operations that left the model as it was.
    """
    action = operation.get("action")
    change: Dict[str, Any] = {"action": action, "target": _operation_target(operation)}

    handler = OPERATION_HANDLERS.get(action) if isinstance(action, str) else None
    if handler is None:
        change.update(status="skipped", reason=f"unknown action: {action}")
        return model, change

    try:
        updated = handler(model, operation)
    except (FieldNotFoundError, HierarchyCycleError, ValueError, TypeError) as exc:
        change.update(status="skipped", reason=str(exc))
        return model, change

    if updated == model:
        change.update(status="skipped", reason="no change")
        return model, change

    change["status"] = "applied"
    return updated, change


def apply_operations(
    config_dir: Union[str, Path],
    entity_type: str,
    bundle: str,
    operations: List[Operation],
    mode: str = DEFAULT_MODE,
    dry_run: bool = False,
    backup: bool = True,
    max_backups: int = DEFAULT_MAX_BACKUPS,
) -> Tuple[int, int, List[Dict[str, Any]]]:
    """
    Apply a list of operations to a stored form display.

    Args:
        config_dir: Config export directory
        entity_type: Entity type
        bundle: Bundle machine name
        operations: Operation mappings, applied in order
        mode: Form mode
        dry_run: If True, don't save changes
        backup: Back up the previous file when saving
        max_backups: Backups to retain

    Returns:
        Tuple of (applied_count, skipped_count, changes_list)

    Raises:
        ValueError: If the form display does not exist
    """
    model = load_form_display(config_dir, entity_type, bundle, mode)
    if model is None:
        raise ValueError(f"Form display '{entity_type}.{bundle}.{mode}' not found")

    applied = 0
    skipped = 0
    changes: List[Dict[str, Any]] = []

    for operation in operations:
        if not isinstance(operation, Mapping):
            skipped += 1
            changes.append(
                {
                    "action": None,
                    "target": None,
                    "status": "skipped",
                    "reason": "operation must be a mapping",
                }
            )
            continue

        model, change = apply_operation(model, operation)
        changes.append(change)
        if change["status"] == "applied":
            applied += 1
        else:
            skipped += 1
            logger.debug("Skipped %s on %s: %s", change["action"], change["target"], change["reason"])

    if not dry_run and applied > 0:
        save_form_display(config_dir, model, backup=backup, max_backups=max_backups)

    logger.info(
        "Applied %d operation(s), skipped %d on %s.%s.%s%s",
        applied,
        skipped,
        entity_type,
        bundle,
        mode,
        " (dry run)" if dry_run else "",
    )
    return applied, skipped, changes


def load_operations_file(file_path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Load operations from a JSON or YAML file.

    The file holds either a list of operations or a mapping with an
    "operations" list.

    Args:
        file_path: Path to the operations file (.json, .yml or .yaml)

    Returns:
        List of operation dictionaries

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the file cannot be decoded or has the wrong shape
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"Operations file not found: {file_path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ValueError(f"Invalid operations file {file_path}: {exc}") from exc

    if isinstance(data, Mapping):
        data = data.get("operations", [])
    if not isinstance(data, list):
        raise ValueError(f"Operations file {file_path} must contain a list of operations")

    return data
