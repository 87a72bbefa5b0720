from __future__ import annotations

import logging
from pathlib import Path

from .config import sysfs_base
from .errors import AttributeIOError, InvalidEntryNameError, MissingDirectoryError

__all__ = [
    "PATH_ATTRIBUTES",
    "PATH_AUTHENTICATIONS",
    "autodetect_roots",
    "directory_names",
    "entry_name",
    "is_firmware_attributes_root",
]

logger = logging.getLogger("pyfwattr.root")

PATH_ATTRIBUTES = "attributes"
PATH_AUTHENTICATIONS = "authentication"


def is_firmware_attributes_root(path: str | Path) -> bool:
    """Return ``True`` if *path* exposes both ``attributes`` and ``authentication``."""
    root = Path(path)
    return (root / PATH_AUTHENTICATIONS).is_dir() and (root / PATH_ATTRIBUTES).is_dir()


def autodetect_roots(base: str | Path | None = None) -> list[Path]:
    """Return every firmware attributes root found at or below *base*.

    *base* defaults to the configured sysfs location.  If *base* is a root
    itself it is the only result; otherwise its immediate subdirectories are
    checked in directory order.  Missing or unreadable locations simply yield
    fewer results.
    """
    if base is None:
        base = sysfs_base()
    base = Path(base)
    if not base.exists():
        logger.debug("firmware attributes base %s does not exist", base)
        return []
    if is_firmware_attributes_root(base):
        return [base]
    roots: list[Path] = []
    try:
        entries = list(base.iterdir())
    except OSError as exc:
        logger.warning("cannot list %s: %s", base, exc)
        return []
    for entry in entries:
        try:
            if is_firmware_attributes_root(entry):
                roots.append(entry)
        except OSError as exc:  # pragma: no cover - racing sysfs removal
            logger.debug("skipping %s: %s", entry, exc)
    return roots


def entry_name(path: str | Path) -> str:
    """Return the final component of *path* as text.

    Names the OS could not decode arrive as surrogate escapes; those are
    rejected with :class:`InvalidEntryNameError`.
    """
    name = Path(path).name
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidEntryNameError(Path(path)) from exc
    return name


def directory_names(path: str | Path) -> list[str]:
    """Return the names of the immediate subdirectories of *path*."""
    directory = Path(path)
    if not directory.is_dir():
        raise MissingDirectoryError(directory)
    names: list[str] = []
    try:
        for entry in directory.iterdir():
            if entry.is_dir():
                names.append(entry_name(entry))
    except OSError as exc:
        raise AttributeIOError(directory, str(exc)) from exc
    return names
