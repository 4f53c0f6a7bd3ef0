"""
Form display file storage.

Reads and writes core.entity_form_display.*.yml files in a config export
directory. Writes are atomic (temporary file + replace) and can keep
timestamped backups of the previous file.
"""

import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from content_modeller.core.generator import dump_form_display
from content_modeller.core.models import DEFAULT_MODE, FormDisplay
from content_modeller.core.parser import (
    FORM_DISPLAY_PREFIX,
    get_form_display_filename,
    parse_form_display,
)

logger = logging.getLogger(__name__)

BACKUPS_DIRNAME = ".backups"

# Default retention policy for versioned backups
DEFAULT_MAX_BACKUPS = 10

PathLike = Union[str, Path]


def get_form_display_path(
    config_dir: PathLike, entity_type: str, bundle: str, mode: str = DEFAULT_MODE
) -> Path:
    return Path(config_dir) / get_form_display_filename(entity_type, bundle, mode)


def form_display_exists(
    config_dir: PathLike, entity_type: str, bundle: str, mode: str = DEFAULT_MODE
) -> bool:
    return get_form_display_path(config_dir, entity_type, bundle, mode).is_file()


def read_form_display_document(
    config_dir: PathLike, entity_type: str, bundle: str, mode: str = DEFAULT_MODE
) -> Optional[Dict[str, Any]]:
    """
    Read the raw form display document.

    Args:
        config_dir: Config export directory
        entity_type: Entity type (e.g. "node")
        bundle: Bundle machine name
        mode: Form mode

    Returns:
        Decoded mapping, or None if the file is missing, unreadable or not a mapping
    """
    path = get_form_display_path(config_dir, entity_type, bundle, mode)
    if not path.is_file():
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except (yaml.YAMLError, IOError) as exc:
        logger.warning("Could not read form display %s: %s", path, exc)
        return None

    if not isinstance(document, dict):
        logger.warning("Form display %s does not contain a mapping", path)
        return None
    return document


def load_form_display(
    config_dir: PathLike, entity_type: str, bundle: str, mode: str = DEFAULT_MODE
) -> Optional[FormDisplay]:
    """
    Load and parse a form display.

    Returns:
        FormDisplay, or None if the file is missing or not a form display
    """
    document = read_form_display_document(config_dir, entity_type, bundle, mode)
    if document is None:
        return None
    return parse_form_display(document)


def backup_form_display(
    path: Path, max_backups: int = DEFAULT_MAX_BACKUPS
) -> Optional[Path]:
    """
    Copy a form display file into the .backups directory next to it.

    Backups are named <filename>.<timestamp>.bak with microsecond precision
    so rapid successive saves do not collide.

    Args:
        path: Existing form display file
        max_backups: Backups to retain for this file (0 for unlimited)

    Returns:
        Path to the backup file, or None if there was nothing to back up
    """
    if not path.is_file():
        return None

    backups_dir = path.parent / BACKUPS_DIRNAME
    backups_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S.%f")
    backup_file = backups_dir / f"{path.name}.{timestamp}.bak"
    shutil.copy2(path, backup_file)
    logger.debug("Backed up %s to %s", path.name, backup_file)

    if max_backups > 0:
        _apply_backup_retention(backups_dir, path.name, max_backups)

    return backup_file


def _apply_backup_retention(backups_dir: Path, filename: str, max_backups: int) -> int:
    """Remove the oldest backups of filename beyond max_backups."""
    backup_files = sorted(
        (f for f in backups_dir.glob(f"{filename}.*.bak") if f.is_file()),
        key=lambda p: p.name,
    )

    deleted_count = 0
    while len(backup_files) > max_backups:
        oldest = backup_files.pop(0)
        try:
            oldest.unlink()
            deleted_count += 1
        except OSError as exc:
            logger.warning("Could not remove old backup %s: %s", oldest, exc)

    return deleted_count


def list_form_display_backups(path: Path) -> List[Path]:
    """Backups of a form display file, newest first."""
    backups_dir = path.parent / BACKUPS_DIRNAME
    if not backups_dir.is_dir():
        return []
    return sorted(backups_dir.glob(f"{path.name}.*.bak"), key=lambda p: p.name, reverse=True)


def save_form_display(
    config_dir: PathLike,
    model: FormDisplay,
    backup: bool = True,
    max_backups: int = DEFAULT_MAX_BACKUPS,
) -> Path:
    """
    Generate and write a form display file with atomic write and optional backup.

    Args:
        config_dir: Config export directory (created if missing)
        model: Form display to write
        backup: Copy the existing file to .backups first (default: True)
        max_backups: Backups to retain per file

    Returns:
        Path of the written file

    Raises:
        OSError: If the file could not be written
    """
    config_path = Path(config_dir)
    config_path.mkdir(parents=True, exist_ok=True)
    path = get_form_display_path(config_path, model.entity_type, model.bundle, model.mode)

    if backup:
        backup_form_display(path, max_backups=max_backups)

    content = dump_form_display(model)
    temp_file = path.with_suffix(".tmp")
    try:
        with open(temp_file, "w", encoding="utf-8") as f:
            f.write(content)
        temp_file.replace(path)
    except OSError:
        logger.error("Failed to write form display %s", path)
        if temp_file.exists():
            temp_file.unlink()
        raise

    logger.info("Saved form display %s", model.display_id)
    return path


def list_form_displays(config_dir: PathLike) -> List[Tuple[str, str, str]]:
    """
    List form displays present in a config export directory.

    Returns:
        Sorted (entity_type, bundle, mode) triples
    """
    config_path = Path(config_dir)
    if not config_path.is_dir():
        return []

    displays = []
    for path in config_path.glob(f"{FORM_DISPLAY_PREFIX}.*.yml"):
        parts = path.name[len(FORM_DISPLAY_PREFIX) + 1 : -len(".yml")].split(".")
        if len(parts) != 3 or not all(parts):
            logger.debug("Skipping unrecognized form display filename %s", path.name)
            continue
        displays.append((parts[0], parts[1], parts[2]))

    return sorted(displays)
