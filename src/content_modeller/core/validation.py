"""
Validation operations for form displays.
Provides structural diagnostics and repair for models read from untrusted documents.

Mutations assume a well-formed model. Documents edited by hand or produced
by other tools can break the hierarchy (dangling children, one item in two
groups, parent cycles); validate before mutating and repair when needed.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Set, Tuple

from content_modeller.core.models import ROOT, FormDisplay


# Validation result data structures


@dataclass
class Diagnostic:
    """
    Structured diagnostic for CLI consumption.
    """

    code: str  # Diagnostic code (e.g., "MISSING_CHILD", "CYCLE_DETECTED")
    message: str  # Human-readable description
    severity: str  # "error", "warning", "info"
    category: str  # Category for grouping (e.g., "names", "hierarchy", "order")
    location: Optional[str] = None  # Group or field name where the issue occurred
    suggested_fix: Optional[str] = None
    auto_fixable: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity,
            "category": self.category,
            "location": self.location,
            "suggested_fix": self.suggested_fix,
            "auto_fixable": self.auto_fixable,
        }


@dataclass
class ValidationResult:
    """
    Complete validation result for a form display.
    """

    display_id: str
    is_valid: bool
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "display_id": self.display_id,
            "is_valid": self.is_valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "info_count": self.info_count,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }


@dataclass
class RepairFix:
    """
    One change applied by repair_form_display.
    """

    code: str  # Diagnostic code the fix addresses
    description: str
    location: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"code": self.code, "description": self.description, "location": self.location}


def validate_form_display(model: FormDisplay) -> ValidationResult:
    """
    Validate a form display and return structured diagnostics.

    Args:
        model: Parsed form display

    Returns:
        ValidationResult with all diagnostics
    """
    result = ValidationResult(display_id=model.display_id, is_valid=True)

    _validate_names(model, result)
    _validate_children(model, result)
    _validate_parents(model, result)
    _validate_cycles(model, result)
    _validate_weights(model, result)

    for diag in result.diagnostics:
        if diag.severity == "error":
            result.error_count += 1
        elif diag.severity == "warning":
            result.warning_count += 1
        else:
            result.info_count += 1

    result.is_valid = result.error_count == 0
    return result


def _duplicates(names: Iterable[str]) -> List[str]:
    seen: Set[str] = set()
    duplicates: List[str] = []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates


def _validate_names(model: FormDisplay, result: ValidationResult) -> None:
    """Group names and field names must each be unique."""
    for name in _duplicates(model.group_names()):
        result.diagnostics.append(
            Diagnostic(
                code="DUPLICATE_GROUP",
                message=f"Group '{name}' is declared more than once",
                severity="error",
                category="names",
                location=name,
                suggested_fix="Keep the first declaration",
                auto_fixable=True,
            )
        )
    for name in _duplicates(model.field_names()):
        result.diagnostics.append(
            Diagnostic(
                code="DUPLICATE_FIELD",
                message=f"Field '{name}' is placed more than once",
                severity="error",
                category="names",
                location=name,
                suggested_fix="Keep the first placement",
                auto_fixable=True,
            )
        )


def _validate_children(model: FormDisplay, result: ValidationResult) -> None:
    """Children entries must resolve, match parent_name and have a single owner."""
    group_names = set(model.group_names())
    field_names = set(model.field_names())
    owners: Dict[str, List[str]] = {}

    for group in model.groups:
        for child_name in group.children:
            owners.setdefault(child_name, [])
            if group.name not in owners[child_name]:
                owners[child_name].append(group.name)

            if child_name in model.hidden:
                result.diagnostics.append(
                    Diagnostic(
                        code="HIDDEN_FIELD_IN_GROUP",
                        message=f"Group '{group.name}' lists hidden field '{child_name}'",
                        severity="warning",
                        category="hierarchy",
                        location=group.name,
                        suggested_fix="Show the field or remove it from the group",
                    )
                )
                continue

            if child_name in group_names:
                child_group = model.get_group(child_name)
                if child_group is not None and child_group.parent_name != group.name:
                    result.diagnostics.append(
                        Diagnostic(
                            code="PARENT_CHILD_MISMATCH",
                            message=(
                                f"'{group.name}' lists '{child_name}' as child, but "
                                f"'{child_name}' has parent_name='{child_group.parent_name}'"
                            ),
                            severity="error",
                            category="hierarchy",
                            location=group.name,
                            suggested_fix="Align parent_name with the children list",
                            auto_fixable=True,
                        )
                    )
            elif child_name not in field_names:
                result.diagnostics.append(
                    Diagnostic(
                        code="MISSING_CHILD",
                        message=f"Group '{group.name}' references non-existent child '{child_name}'",
                        severity="error",
                        category="hierarchy",
                        location=group.name,
                        suggested_fix="Remove the dangling children entry",
                        auto_fixable=True,
                    )
                )

    for child_name, parents in owners.items():
        if len(parents) > 1:
            result.diagnostics.append(
                Diagnostic(
                    code="MULTIPLE_PARENTS",
                    message=f"'{child_name}' is listed by several groups: {', '.join(parents)}",
                    severity="error",
                    category="hierarchy",
                    location=child_name,
                    suggested_fix=f"Keep '{child_name}' in '{parents[0]}' only",
                    auto_fixable=True,
                )
            )


def _validate_parents(model: FormDisplay, result: ValidationResult) -> None:
    """parent_name must name an existing group that lists the group back."""
    for group in model.groups:
        if not group.parent_name:
            continue

        parent = model.get_group(group.parent_name)
        if parent is None:
            result.diagnostics.append(
                Diagnostic(
                    code="MISSING_PARENT",
                    message=f"Group '{group.name}' references non-existent parent '{group.parent_name}'",
                    severity="error",
                    category="hierarchy",
                    location=group.name,
                    suggested_fix="Move the group to the root level",
                    auto_fixable=True,
                )
            )
        elif group.name not in parent.children:
            result.diagnostics.append(
                Diagnostic(
                    code="PARENT_CHILD_MISMATCH",
                    message=(
                        f"'{group.name}' has parent_name='{parent.name}', but "
                        f"'{parent.name}' does not list it as a child"
                    ),
                    severity="error",
                    category="hierarchy",
                    location=group.name,
                    suggested_fix="Add the group to its parent's children",
                    auto_fixable=True,
                )
            )


def _on_cycle(name: str, parents: Dict[str, str]) -> bool:
    """Whether following parents upward from name leads back to name."""
    visited: Set[str] = set()
    current = parents.get(name, ROOT)
    while current:
        if current == name:
            return True
        if current in visited:
            return False
        visited.add(current)
        current = parents.get(current, ROOT)
    return False


def _validate_cycles(model: FormDisplay, result: ValidationResult) -> None:
    """Neither parent_name chains nor nested children lists may loop."""
    group_names = set(model.group_names())

    declared: Dict[str, str] = {}
    for group in model.groups:
        declared.setdefault(group.name, group.parent_name)

    listed: Dict[str, str] = {}
    for group in model.groups:
        for child_name in group.children:
            if child_name in group_names:
                listed.setdefault(child_name, group.name)

    for name in sorted(group_names):
        if _on_cycle(name, declared) or _on_cycle(name, listed):
            result.diagnostics.append(
                Diagnostic(
                    code="CYCLE_DETECTED",
                    message=f"Group '{name}' is nested inside itself",
                    severity="error",
                    category="hierarchy",
                    location=name,
                    suggested_fix="Move the group to the root level",
                    auto_fixable=True,
                )
            )


def _validate_weights(model: FormDisplay, result: ValidationResult) -> None:
    """Children lists should already be in weight order."""
    weights: Dict[str, int] = {}
    for item in model.fields:
        weights.setdefault(item.name, item.weight)
    for group in model.groups:
        weights.setdefault(group.name, group.weight)

    for group in model.groups:
        resolved = [weights[name] for name in group.children if name in weights]
        if resolved != sorted(resolved):
            result.diagnostics.append(
                Diagnostic(
                    code="WEIGHT_ORDER_MISMATCH",
                    message=f"Children of '{group.name}' are not listed in weight order",
                    severity="warning",
                    category="order",
                    location=group.name,
                    suggested_fix="Reorder the group's children",
                )
            )


# Repair


def repair_form_display(model: FormDisplay) -> Tuple[FormDisplay, List[RepairFix]]:
    """
    Restore hierarchy consistency of a form display.

    Fixes, in order:
    - duplicate groups/fields: the first declaration is kept
    - dangling children entries (naming no group, field or hidden field) are dropped
    - an item listed by several groups stays in the first one only
    - a group listed as a child takes that group as parent_name
    - an unlisted group whose parent exists is appended to the parent's children
    - an unlisted group whose parent is missing moves to the root level
    - a group on a parent cycle moves to the root level

    Weight order is not changed.

    Returns:
        Tuple of (repaired model, applied fixes); the input model is
        returned unchanged when there was nothing to fix
    """
    fixes: List[RepairFix] = []

    groups = []
    seen: Set[str] = set()
    for group in model.groups:
        if group.name in seen:
            fixes.append(
                RepairFix("DUPLICATE_GROUP", f"Removed duplicate group '{group.name}'", group.name)
            )
            continue
        seen.add(group.name)
        groups.append(group)

    fields = []
    seen = set()
    for item in model.fields:
        if item.name in seen:
            fixes.append(
                RepairFix("DUPLICATE_FIELD", f"Removed duplicate field '{item.name}'", item.name)
            )
            continue
        seen.add(item.name)
        fields.append(item)

    group_names = {group.name for group in groups}
    known = group_names | {item.name for item in fields} | set(model.hidden)

    children: Dict[str, List[str]] = {}
    owner: Dict[str, str] = {}
    for group in groups:
        kept: List[str] = []
        for child_name in group.children:
            if child_name not in known or child_name == group.name:
                fixes.append(
                    RepairFix(
                        "MISSING_CHILD",
                        f"Removed dangling child '{child_name}' from '{group.name}'",
                        group.name,
                    )
                )
                continue
            if child_name in owner:
                fixes.append(
                    RepairFix(
                        "MULTIPLE_PARENTS",
                        f"Removed '{child_name}' from '{group.name}'; it stays in '{owner[child_name]}'",
                        child_name,
                    )
                )
                continue
            owner[child_name] = group.name
            kept.append(child_name)
        children[group.name] = kept

    parents: Dict[str, str] = {}
    for group in groups:
        listed_in = owner.get(group.name)
        if listed_in is not None:
            if group.parent_name != listed_in:
                fixes.append(
                    RepairFix(
                        "PARENT_CHILD_MISMATCH",
                        f"Set parent of '{group.name}' to '{listed_in}'",
                        group.name,
                    )
                )
            parents[group.name] = listed_in
        elif not group.parent_name:
            parents[group.name] = ROOT
        elif group.parent_name not in group_names:
            fixes.append(
                RepairFix(
                    "MISSING_PARENT",
                    f"Moved '{group.name}' to root; parent '{group.parent_name}' does not exist",
                    group.name,
                )
            )
            parents[group.name] = ROOT
        else:
            fixes.append(
                RepairFix(
                    "PARENT_CHILD_MISMATCH",
                    f"Added '{group.name}' to the children of '{group.parent_name}'",
                    group.name,
                )
            )
            children[group.parent_name].append(group.name)
            owner[group.name] = group.parent_name
            parents[group.name] = group.parent_name

    for group in groups:
        if _on_cycle(group.name, parents):
            parent_name = parents[group.name]
            children[parent_name] = [name for name in children[parent_name] if name != group.name]
            parents[group.name] = ROOT
            fixes.append(
                RepairFix(
                    "CYCLE_DETECTED",
                    f"Moved '{group.name}' to root to break a nesting cycle",
                    group.name,
                )
            )

    if not fixes:
        return model, fixes

    repaired_groups = [
        replace(group, children=children[group.name], parent_name=parents[group.name])
        for group in groups
    ]
    return replace(model, groups=repaired_groups, fields=fields), fixes
