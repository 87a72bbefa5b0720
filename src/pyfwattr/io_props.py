from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import AttributeIOError, MissingFileError

logger = logging.getLogger("pyfwattr.io")

PROPERTY_CURRENT_VALUE = "current_value"
PROPERTY_CURRENT_PASSWORD = "current_password"
PROPERTY_DEFAULT_VALUE = "default_value"
PROPERTY_DISPLAY_NAME = "display_name"
PROPERTY_DISPLAY_NAME_LANGUAGE_CODE = "display_name_language_code"
PROPERTY_POSSIBLE_VALUES = "possible_values"
PROPERTY_TYPE = "type"

# Properties whose written value never reaches the log.
REDACTED_PROPERTIES = frozenset({PROPERTY_CURRENT_PASSWORD})
_REDACTED = "<hidden>"


def _strip_line_end(text: str) -> str:
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


def _read(path: Path) -> str:
    try:
        # newline="" keeps the content exactly as the driver produced it
        with path.open("r", encoding="utf-8", newline="") as fh:
            raw = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise AttributeIOError(path, str(exc)) from exc
    value = _strip_line_end(raw)
    logger.debug("read %s = %r", path, value)
    return value


def read_property(directory: Path, name: str) -> str:
    """Return the content of the required property *name* under *directory*.

    A single trailing line terminator is removed.  :class:`MissingFileError`
    is raised when the property file does not exist.
    """

    path = Path(directory) / name
    if not path.exists():
        logger.error("required property not found: %s", path)
        raise MissingFileError(path)
    return _read(path)


def try_read_property(directory: Path, name: str) -> str | None:
    """Like :func:`read_property` but return ``None`` for a missing file."""

    path = Path(directory) / name
    if not path.exists():
        logger.debug("optional property not found: %s", path)
        return None
    return _read(path)


def write_property(directory: Path, name: str, value: str) -> None:
    """Overwrite the existing property *name* under *directory* with *value*.

    Property files are never created: the driver decides which properties are
    writable by exposing them.  The value is written as-is in a single write
    call, without a trailing line terminator, so that an empty string still
    reaches the driver.
    """

    path = Path(directory) / name
    if not path.exists():
        logger.error("cannot write %r: property not found at %s", name, path)
        raise MissingFileError(path)
    printable = _REDACTED if name in REDACTED_PROPERTIES else value
    logger.info("write %s = %r", path, printable)
    data = value.encode("utf-8")
    try:
        fd = os.open(path, os.O_WRONLY | os.O_TRUNC)
        try:
            written = os.write(fd, data)
        finally:
            os.close(fd)
    except OSError as exc:
        raise AttributeIOError(path, str(exc)) from exc
    if written != len(data):
        raise AttributeIOError(path, f"short write ({written} of {len(data)} bytes)")
