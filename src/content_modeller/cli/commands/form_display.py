"""Form display commands for the content-modeller CLI.

Provides commands for inspecting and rearranging form displays:
- Showing the field/group tree and listing stored form displays
- Validating and repairing hierarchy consistency
- Moving, reordering, creating, updating and deleting field groups
- Hiding/showing fields and changing widgets
- Applying scripted operation files
"""

import json
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import click
import yaml

from content_modeller.cli.logging import cli_command, get_cli_logger
from content_modeller.cli.output import emit_error, emit_failure, emit_success
from content_modeller.cli.registry import get_context
from content_modeller.core.context import bind_display
from content_modeller.core.models import ROOT, FormatKind, FormDisplay
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
    show_all_fields,
    show_fields,
    toggle_field_visibility,
    update_field_group,
    update_field_settings,
    update_field_widget,
)
from content_modeller.core.naming import normalize_group_name, validate_group_name
from content_modeller.core.operations import apply_operations, load_operations_file
from content_modeller.core.rendering import (
    describe_group,
    get_field_choices,
    get_group_choices,
    get_hidden_field_choices,
    render_form_display,
    summarize_form_display,
)
from content_modeller.core.responses import (
    ErrorCode,
    ErrorType,
    circular_dependency_error,
    not_found_error,
)
from content_modeller.core.storage import (
    get_form_display_path,
    list_form_displays,
    load_form_display,
    save_form_display,
)
from content_modeller.core.tree import build_tree
from content_modeller.core.validation import repair_form_display, validate_form_display
from content_modeller.core.widgets import (
    get_widget_by_type,
    get_widgets_for_field_type,
    list_field_types,
)

logger = get_cli_logger()


@click.group("form-display")
def form_display_group() -> None:
    """Form display inspection and editing commands."""
    pass


# Shared helpers


def form_display_arguments(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the ENTITY_TYPE BUNDLE arguments and --mode option to a command."""
    func = click.option(
        "--mode",
        default=None,
        help="Form mode (default: configured default_mode, usually 'default').",
    )(func)
    func = click.argument("bundle")(func)
    func = click.argument("entity_type")(func)
    return func


def dry_run_option(func: Callable[..., Any]) -> Callable[..., Any]:
    return click.option("--dry-run", is_flag=True, help="Preview changes without saving.")(func)


def _require_config_dir(ctx: click.Context) -> Path:
    config_dir = get_context(ctx).config_dir
    if config_dir is None:
        emit_error(
            "No config directory configured",
            code=ErrorCode.VALIDATION_ERROR.value,
            error_type=ErrorType.VALIDATION.value,
            remediation="Use --config-dir or set CONTENT_MODELLER_CONFIG_DIR",
        )
    return config_dir


def _load_or_fail(
    ctx: click.Context, entity_type: str, bundle: str, mode: Optional[str]
) -> Tuple[Path, FormDisplay]:
    """Resolve the config directory and load a form display, emitting an error if missing."""
    config_dir = _require_config_dir(ctx)
    resolved_mode = get_context(ctx).resolve_mode(mode)
    bind_display(f"{entity_type}.{bundle}.{resolved_mode}")

    model = load_form_display(config_dir, entity_type, bundle, resolved_mode)
    if model is None:
        path = get_form_display_path(config_dir, entity_type, bundle, resolved_mode)
        emit_failure(
            not_found_error(
                "Form display",
                f"{entity_type}.{bundle}.{resolved_mode}",
                error_code=ErrorCode.FORM_DISPLAY_NOT_FOUND,
                remediation=(
                    f"Check that {path.name} exists; "
                    "list form displays with: content-modeller form-display list"
                ),
            )
        )
    return config_dir, model


def _require_field(model: FormDisplay, field_name: str) -> None:
    if model.get_field(field_name) is None:
        emit_failure(
            not_found_error(
                "Field",
                field_name,
                error_code=ErrorCode.FIELD_NOT_FOUND,
                remediation=f"Fields on {model.display_id}: {', '.join(model.field_names()) or 'none'}",
            )
        )


def _require_group(model: FormDisplay, group_name: str) -> None:
    if model.get_group(group_name) is None:
        emit_failure(
            not_found_error(
                "Group",
                group_name,
                error_code=ErrorCode.GROUP_NOT_FOUND,
                remediation=f"Groups on {model.display_id}: {', '.join(model.group_names()) or 'none'}",
            )
        )


def _parse_json_option(value: Optional[str], option_name: str) -> Optional[Dict[str, Any]]:
    if value is None:
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        emit_error(
            f"Invalid JSON for {option_name}: {e}",
            code=ErrorCode.INVALID_FORMAT.value,
            error_type=ErrorType.VALIDATION.value,
        )
    if not isinstance(parsed, dict):
        emit_error(
            f"{option_name} must be a JSON object",
            code=ErrorCode.INVALID_FORMAT.value,
            error_type=ErrorType.VALIDATION.value,
        )
    return parsed


def _parse_settings_pairs(pairs: Tuple[str, ...]) -> Dict[str, Any]:
    """Parse KEY=VALUE pairs; values are decoded as YAML scalars (true, 10, text)."""
    settings: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key.strip():
            emit_error(
                f"Invalid setting '{pair}', expected KEY=VALUE",
                code=ErrorCode.INVALID_FORMAT.value,
                error_type=ErrorType.VALIDATION.value,
            )
        try:
            settings[key.strip()] = yaml.safe_load(raw) if raw else ""
        except yaml.YAMLError:
            settings[key.strip()] = raw
    return settings


def _finish(
    ctx: click.Context,
    config_dir: Path,
    before: FormDisplay,
    after: FormDisplay,
    action: str,
    dry_run: bool,
    **extra: Any,
) -> None:
    """Save a changed model unless dry_run, then emit the result envelope."""
    changed = after != before
    saved_path = None

    if changed and not dry_run:
        config = get_context(ctx).config
        try:
            saved_path = save_form_display(
                config_dir, after, backup=config.backup, max_backups=config.max_backups
            )
        except OSError as e:
            emit_error(
                f"Failed to write form display: {e}",
                code=ErrorCode.WRITE_FAILED.value,
                error_type=ErrorType.INTERNAL.value,
                details={"display_id": after.display_id},
            )

    logger.info(f"{action} on {after.display_id}", changed=changed, dry_run=dry_run)

    emit_success(
        {
            "display_id": after.display_id,
            "action": action,
            "changed": changed,
            "dry_run": dry_run,
            "path": str(saved_path) if saved_path else None,
            "rendered": render_form_display(after),
            **extra,
        },
        warnings=None if changed else [f"{action}: nothing to change"],
    )


# Inspection commands


@form_display_group.command("show")
@form_display_arguments
@click.pass_context
@cli_command("show")
def show_cmd(ctx: click.Context, entity_type: str, bundle: str, mode: Optional[str]) -> None:
    """Show the field/group tree of a form display.

    ENTITY_TYPE is the entity type (e.g. node). BUNDLE is the bundle machine name.
    """
    _, model = _load_or_fail(ctx, entity_type, bundle, mode)

    emit_success(
        {
            **summarize_form_display(model),
            "tree": build_tree(model).to_dict(),
            "rendered": render_form_display(model),
            "groups": [describe_group(model, name) for name in model.group_names()],
            "group_choices": get_group_choices(model),
            "field_choices": get_field_choices(model),
            "hidden_choices": get_hidden_field_choices(model),
        }
    )


@form_display_group.command("list")
@click.pass_context
@cli_command("list")
def list_cmd(ctx: click.Context) -> None:
    """List form displays in the config directory."""
    config_dir = _require_config_dir(ctx)

    displays = []
    for entity_type, bundle, mode in list_form_displays(config_dir):
        model = load_form_display(config_dir, entity_type, bundle, mode)
        if model is None:
            continue
        displays.append(summarize_form_display(model))

    emit_success({"config_dir": str(config_dir), "form_displays": displays, "count": len(displays)})


@form_display_group.command("validate")
@form_display_arguments
@click.option("--repair", is_flag=True, help="Repair hierarchy inconsistencies.")
@dry_run_option
@click.pass_context
@cli_command("validate")
def validate_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    repair: bool,
    dry_run: bool,
) -> None:
    """Validate the group hierarchy of a form display.

    With --repair, dangling children, duplicate memberships, parent mismatches
    and nesting cycles are fixed and the form display is saved.
    """
    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    result = validate_form_display(model)

    if not repair:
        emit_success(result.to_dict())
        return

    repaired, fixes = repair_form_display(model)
    _finish(
        ctx,
        config_dir,
        model,
        repaired,
        "repair",
        dry_run,
        validation=result.to_dict(),
        fixes=[fix.to_dict() for fix in fixes],
        remaining=validate_form_display(repaired).to_dict(),
    )


# Arrangement commands


@form_display_group.command("move-field")
@form_display_arguments
@click.argument("field_name")
@click.option("--group", "group_name", default=ROOT, help="Target group (omit for root level).")
@dry_run_option
@click.pass_context
@cli_command("move-field")
def move_field_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    field_name: str,
    group_name: str,
    dry_run: bool,
) -> None:
    """Move FIELD_NAME into a group or to the root level."""
    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    _require_field(model, field_name)
    if group_name:
        _require_group(model, group_name)

    updated = move_field_to_group(model, field_name, group_name)
    _finish(ctx, config_dir, model, updated, "move-field", dry_run, field=field_name, group=group_name)


@form_display_group.command("move-group")
@form_display_arguments
@click.argument("group_name")
@click.option("--parent", "parent_name", default=ROOT, help="Target parent group (omit for root level).")
@dry_run_option
@click.pass_context
@cli_command("move-group")
def move_group_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    group_name: str,
    parent_name: str,
    dry_run: bool,
) -> None:
    """Move GROUP_NAME under another group or to the root level."""
    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    _require_group(model, group_name)
    if parent_name:
        _require_group(model, parent_name)

    try:
        updated = move_group_to_parent(model, group_name, parent_name)
    except HierarchyCycleError:
        emit_failure(circular_dependency_error(group_name, parent_name))

    _finish(ctx, config_dir, model, updated, "move-group", dry_run, group=group_name, parent=parent_name)


@form_display_group.command("reorder")
@form_display_arguments
@click.argument("order", nargs=-1, required=True)
@click.option("--group", "group_name", default=ROOT, help="Group whose children to reorder (omit for root).")
@dry_run_option
@click.pass_context
@cli_command("reorder")
def reorder_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    order: Tuple[str, ...],
    group_name: str,
    dry_run: bool,
) -> None:
    """Reorder the children of a group (or the root level).

    ORDER is the new sequence of group and field names.
    """
    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    if group_name:
        _require_group(model, group_name)

    updated = reorder_group_children(model, group_name, list(order))
    _finish(ctx, config_dir, model, updated, "reorder", dry_run, group=group_name, order=list(order))


# Group lifecycle commands


@form_display_group.command("create-group")
@form_display_arguments
@click.argument("label")
@click.option("--name", default=None, help="Machine name (default: derived from LABEL).")
@click.option(
    "--format-kind",
    type=click.Choice(FormatKind.values()),
    default=FormatKind.FIELDSET.value,
    show_default=True,
    help="Group display style.",
)
@click.option("--parent", "parent_name", default=ROOT, help="Parent group (omit for root level).")
@click.option("--weight", type=int, default=0, show_default=True, help="Sibling order key.")
@dry_run_option
@click.pass_context
@cli_command("create-group")
def create_group_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    label: str,
    name: Optional[str],
    format_kind: str,
    parent_name: str,
    weight: int,
    dry_run: bool,
) -> None:
    """Create a field group labelled LABEL."""
    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    if parent_name:
        _require_group(model, parent_name)

    group_name = None
    if name is not None:
        valid = validate_group_name(name, model.groups)
        if valid is not True:
            emit_error(
                str(valid),
                code=ErrorCode.DUPLICATE_ENTRY.value if name.strip() else ErrorCode.MISSING_REQUIRED.value,
                error_type=ErrorType.CONFLICT.value if name.strip() else ErrorType.VALIDATION.value,
            )
        group_name = normalize_group_name(name)

    try:
        updated = create_field_group(
            model,
            label=label,
            name=group_name,
            format_kind=format_kind,
            parent_name=parent_name,
            weight=weight,
        )
    except ValueError as e:
        emit_error(str(e), code=ErrorCode.MISSING_REQUIRED.value, error_type=ErrorType.VALIDATION.value)

    created = [item for item in updated.group_names() if item not in model.group_names()]
    _finish(
        ctx,
        config_dir,
        model,
        updated,
        "create-group",
        dry_run,
        group=created[0] if created else group_name,
    )


@form_display_group.command("delete-group")
@form_display_arguments
@click.argument("group_name")
@click.option(
    "--promote-children",
    is_flag=True,
    help="Move the group's children to the root level instead of its parent.",
)
@dry_run_option
@click.pass_context
@cli_command("delete-group")
def delete_group_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    group_name: str,
    promote_children: bool,
    dry_run: bool,
) -> None:
    """Delete GROUP_NAME; its children move to its parent (or root)."""
    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    _require_group(model, group_name)

    updated = delete_field_group(model, group_name, move_children_to_parent=not promote_children)
    _finish(ctx, config_dir, model, updated, "delete-group", dry_run, group=group_name)


@form_display_group.command("update-group")
@form_display_arguments
@click.argument("group_name")
@click.option("--label", default=None, help="New label.")
@click.option("--rename", "new_name", default=None, help="New machine name.")
@click.option("--weight", type=int, default=None, help="New sibling order key.")
@click.option("--format-kind", type=click.Choice(FormatKind.values()), default=None, help="New display style.")
@click.option("--setting", "settings", multiple=True, help="Format setting as KEY=VALUE (repeatable).")
@dry_run_option
@click.pass_context
@cli_command("update-group")
def update_group_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    group_name: str,
    label: Optional[str],
    new_name: Optional[str],
    weight: Optional[int],
    format_kind: Optional[str],
    settings: Tuple[str, ...],
    dry_run: bool,
) -> None:
    """Update the label, name, weight, style or format settings of GROUP_NAME."""
    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    _require_group(model, group_name)

    updates: Dict[str, Any] = {}
    if label is not None:
        updates["label"] = label
    if new_name is not None:
        updates["name"] = normalize_group_name(new_name)
    if weight is not None:
        updates["weight"] = weight
    if format_kind is not None:
        updates["format_kind"] = format_kind
    if settings:
        updates["format_settings"] = _parse_settings_pairs(settings)

    if not updates:
        emit_error(
            "Nothing to update",
            code=ErrorCode.MISSING_REQUIRED.value,
            error_type=ErrorType.VALIDATION.value,
            remediation="Pass at least one of --label, --rename, --weight, --format-kind, --setting",
        )

    try:
        updated = update_field_group(model, group_name, updates)
    except ValueError as e:
        emit_error(str(e), code=ErrorCode.DUPLICATE_ENTRY.value, error_type=ErrorType.CONFLICT.value)

    _finish(ctx, config_dir, model, updated, "update-group", dry_run, group=updates.get("name", group_name))


@form_display_group.command("clear-groups")
@form_display_arguments
@dry_run_option
@click.pass_context
@cli_command("clear-groups")
def clear_groups_cmd(
    ctx: click.Context, entity_type: str, bundle: str, mode: Optional[str], dry_run: bool
) -> None:
    """Remove every field group, keeping fields and hidden fields."""
    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    updated = clear_field_groups(model)
    _finish(ctx, config_dir, model, updated, "clear-groups", dry_run, removed=model.group_names())


# Visibility commands


@form_display_group.command("toggle")
@form_display_arguments
@click.argument("field_name")
@dry_run_option
@click.pass_context
@cli_command("toggle")
def toggle_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    field_name: str,
    dry_run: bool,
) -> None:
    """Hide FIELD_NAME if visible, show it if hidden."""
    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    updated = toggle_field_visibility(model, field_name)
    _finish(
        ctx,
        config_dir,
        model,
        updated,
        "toggle",
        dry_run,
        field=field_name,
        hidden=updated.is_hidden(field_name),
    )


@form_display_group.command("hide")
@form_display_arguments
@click.argument("field_names", nargs=-1, required=True)
@dry_run_option
@click.pass_context
@cli_command("hide")
def hide_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    field_names: Tuple[str, ...],
    dry_run: bool,
) -> None:
    """Hide one or more fields."""
    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    updated = hide_fields(model, field_names)
    _finish(ctx, config_dir, model, updated, "hide", dry_run, hidden=sorted(updated.hidden))


@form_display_group.command("show-fields")
@form_display_arguments
@click.argument("field_names", nargs=-1)
@click.option("--all", "show_all", is_flag=True, help="Show every hidden field.")
@dry_run_option
@click.pass_context
@cli_command("show-fields")
def show_fields_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    field_names: Tuple[str, ...],
    show_all: bool,
    dry_run: bool,
) -> None:
    """Show hidden fields (or all of them with --all)."""
    if not field_names and not show_all:
        emit_error(
            "No fields given",
            code=ErrorCode.MISSING_REQUIRED.value,
            error_type=ErrorType.VALIDATION.value,
            remediation="Pass field names or --all",
        )

    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    updated = show_all_fields(model) if show_all else show_fields(model, field_names)
    _finish(ctx, config_dir, model, updated, "show-fields", dry_run, hidden=sorted(updated.hidden))


# Widget commands


@form_display_group.command("set-widget")
@form_display_arguments
@click.argument("field_name")
@click.argument("widget_type")
@click.option("--settings", "settings_json", default=None, help="Widget settings as a JSON object.")
@click.option(
    "--field-type",
    default=None,
    help="Field storage type; when given the widget must be in its catalog entry.",
)
@dry_run_option
@click.pass_context
@cli_command("set-widget")
def set_widget_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    field_name: str,
    widget_type: str,
    settings_json: Optional[str],
    field_type: Optional[str],
    dry_run: bool,
) -> None:
    """Switch FIELD_NAME to WIDGET_TYPE (settings reset to the widget defaults)."""
    settings = _parse_json_option(settings_json, "--settings")

    if field_type and get_widget_by_type(field_type, widget_type) is None:
        available = [widget["type"] for widget in get_widgets_for_field_type(field_type)]
        emit_error(
            f"Widget '{widget_type}' is not available for field type '{field_type}'",
            code=ErrorCode.VALIDATION_ERROR.value,
            error_type=ErrorType.VALIDATION.value,
            details={"available_widgets": available},
        )

    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    _require_field(model, field_name)

    updated = update_field_widget(model, field_name, widget_type, settings=settings)
    field = updated.get_field(field_name)
    _finish(
        ctx,
        config_dir,
        model,
        updated,
        "set-widget",
        dry_run,
        field=field_name,
        widget_type=widget_type,
        settings=field.widget_settings if field else {},
    )


@form_display_group.command("set-settings")
@form_display_arguments
@click.argument("field_name")
@click.argument("settings_json")
@dry_run_option
@click.pass_context
@cli_command("set-settings")
def set_settings_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    field_name: str,
    settings_json: str,
    dry_run: bool,
) -> None:
    """Merge SETTINGS_JSON (a JSON object) into the widget settings of FIELD_NAME."""
    patch = _parse_json_option(settings_json, "SETTINGS_JSON") or {}
    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)

    try:
        updated = update_field_settings(model, field_name, patch)
    except FieldNotFoundError as e:
        emit_failure(
            not_found_error("Field", e.field_name, error_code=ErrorCode.FIELD_NOT_FOUND)
        )

    field = updated.get_field(field_name)
    _finish(
        ctx,
        config_dir,
        model,
        updated,
        "set-settings",
        dry_run,
        field=field_name,
        settings=field.widget_settings if field else {},
    )


@form_display_group.command("reset-widgets")
@form_display_arguments
@click.option(
    "--field-type",
    "field_type_pairs",
    multiple=True,
    metavar="NAME=TYPE",
    help="Field storage type of a field, e.g. field_tags=entity_reference (repeatable).",
)
@click.option("--clear-groups", is_flag=True, help="Also remove every field group.")
@dry_run_option
@click.pass_context
@cli_command("reset-widgets")
def reset_widgets_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    field_type_pairs: Tuple[str, ...],
    clear_groups: bool,
    dry_run: bool,
) -> None:
    """Regenerate widgets with the catalog defaults for each field's type.

    Fields without a --field-type entry, or with a type the catalog does not
    know, keep their current widget.
    """
    field_types: Dict[str, str] = {}
    for pair in field_type_pairs:
        name, sep, field_type = pair.partition("=")
        if not sep or not name.strip() or not field_type.strip():
            emit_error(
                f"Invalid field type '{pair}', expected NAME=TYPE",
                code=ErrorCode.INVALID_FORMAT.value,
                error_type=ErrorType.VALIDATION.value,
            )
        field_types[name.strip()] = field_type.strip()

    if not field_types and not clear_groups:
        emit_error(
            "No field types given",
            code=ErrorCode.MISSING_REQUIRED.value,
            error_type=ErrorType.VALIDATION.value,
            remediation="Pass --field-type NAME=TYPE for each field to reset",
        )

    config_dir, model = _load_or_fail(ctx, entity_type, bundle, mode)
    updated = reset_field_widgets(model, field_types, clear_groups=clear_groups)

    _finish(
        ctx,
        config_dir,
        model,
        updated,
        "reset-widgets",
        dry_run,
        widgets={item.name: item.widget_type for item in updated.fields},
        unknown_field_types=sorted(
            {field_type for field_type in field_types.values() if not get_widgets_for_field_type(field_type)}
        ),
    )


@form_display_group.command("widgets")
@click.argument("field_type", required=False)
@click.pass_context
@cli_command("widgets")
def widgets_cmd(ctx: click.Context, field_type: Optional[str]) -> None:
    """List widgets for FIELD_TYPE, or the known field types when omitted."""
    if not field_type:
        emit_success({"field_types": list_field_types()})
        return

    widgets = get_widgets_for_field_type(field_type)
    if not widgets:
        emit_failure(
            not_found_error(
                "Field type",
                field_type,
                remediation="List known field types with: content-modeller form-display widgets",
            )
        )

    emit_success({"field_type": field_type, "default": widgets[0]["type"], "widgets": widgets})


# Batch commands


@form_display_group.command("apply")
@form_display_arguments
@click.argument("operations_file", type=click.Path(exists=True, dir_okay=False))
@dry_run_option
@click.pass_context
@cli_command("apply")
def apply_cmd(
    ctx: click.Context,
    entity_type: str,
    bundle: str,
    mode: Optional[str],
    operations_file: str,
    dry_run: bool,
) -> None:
    """Apply a JSON or YAML file of operations to a form display.

    OPERATIONS_FILE holds a list of operations, or a mapping with an
    "operations" list, e.g. [{"action": "move_field", "field": "body",
    "group": "group_main"}].
    """
    start_time = time.perf_counter()
    cli_ctx = get_context(ctx)
    config_dir = _require_config_dir(ctx)
    resolved_mode = cli_ctx.resolve_mode(mode)
    bind_display(f"{entity_type}.{bundle}.{resolved_mode}")

    try:
        operations = load_operations_file(operations_file)
    except (FileNotFoundError, ValueError) as e:
        emit_error(
            str(e),
            code=ErrorCode.INVALID_FORMAT.value,
            error_type=ErrorType.VALIDATION.value,
            remediation="Provide a JSON or YAML list of operations",
        )

    try:
        applied, skipped, changes = apply_operations(
            config_dir,
            entity_type,
            bundle,
            operations,
            mode=resolved_mode,
            dry_run=dry_run,
            backup=cli_ctx.config.backup,
            max_backups=cli_ctx.config.max_backups,
        )
    except ValueError as e:
        emit_error(
            str(e),
            code=ErrorCode.FORM_DISPLAY_NOT_FOUND.value,
            error_type=ErrorType.NOT_FOUND.value,
            remediation="List form displays with: content-modeller form-display list",
        )
    except OSError as e:
        emit_error(
            f"Failed to write form display: {e}",
            code=ErrorCode.WRITE_FAILED.value,
            error_type=ErrorType.INTERNAL.value,
        )

    duration_ms = (time.perf_counter() - start_time) * 1000

    emit_success(
        {
            "display_id": f"{entity_type}.{bundle}.{resolved_mode}",
            "dry_run": dry_run,
            "operations_applied": applied,
            "operations_skipped": skipped,
            "changes": changes,
            "telemetry": {"duration_ms": round(duration_ms, 2)},
        }
    )
