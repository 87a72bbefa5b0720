from __future__ import annotations

import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import site_config_dir, user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "pyfwattr"
SETTINGS_FILENAME = "settings.ini"

PATH_SYSFS_FIRMWARE_ATTRIBUTES = Path("/sys/class/firmware-attributes")

ENV_SYSFS_ROOT = "FWATTR_SYSFS_ROOT"
ENV_CONFIG = "FWATTR_CONFIG"
ENV_LOG_LEVEL = "FWATTR_LOG_LEVEL"

DEFAULT_LOG_LEVEL = "warning"

SECTION_TYPE_OVERRIDES = "type-overrides"
SECTION_LOGGING = "logging"

# ---------------------------------------------------------------------------
# Type overrides
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TypeOverride:
    """Reclassify attribute *name* from *reported* type to *actual* type."""

    name: str
    reported: str
    actual: str


# Some firmware reports the list-valued boot order as a plain enumeration.
DEFAULT_TYPE_OVERRIDES: tuple[TypeOverride, ...] = (
    TypeOverride("BootOrder", "enumeration", "enumeration-list"),
)


def parse_type_override(name: str, value: str) -> TypeOverride:
    """Parse a ``reported -> actual`` settings entry for attribute *name*."""

    reported, sep, actual = value.partition("->")
    reported, actual = reported.strip(), actual.strip()
    if not sep or not name or not reported or not actual:
        raise ValueError(f"invalid type override for {name!r}: {value!r}")
    return TypeOverride(name, reported, actual)


# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------


def sysfs_base() -> Path:
    """Return the directory scanned for firmware attributes roots."""

    env = os.getenv(ENV_SYSFS_ROOT)
    if env:
        return Path(env).expanduser()
    return PATH_SYSFS_FIRMWARE_ATTRIBUTES


def settings_files() -> list[Path]:
    """Return settings files in increasing precedence order."""

    env = os.getenv(ENV_CONFIG)
    if env:
        return [Path(env).expanduser()]
    return [
        Path(site_config_dir(APP_NAME)) / SETTINGS_FILENAME,
        Path(user_config_dir(APP_NAME)) / SETTINGS_FILENAME,
    ]


# ---------------------------------------------------------------------------
# Reading helpers
# ---------------------------------------------------------------------------


def read_settings(paths: list[Path] | None = None) -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None)
    # attribute names are case sensitive
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    for path in settings_files() if paths is None else paths:
        if not path.is_file():
            continue
        try:
            parser.read(path, encoding="utf-8")
        except (configparser.Error, OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read config %s: %s", path, exc)
    return parser


def type_overrides(
    parser: configparser.ConfigParser | None = None,
) -> tuple[TypeOverride, ...]:
    """Return the built-in type overrides followed by configured ones."""

    if parser is None:
        parser = read_settings()
    result = list(DEFAULT_TYPE_OVERRIDES)
    if parser.has_section(SECTION_TYPE_OVERRIDES):
        for name, value in parser.items(SECTION_TYPE_OVERRIDES):
            try:
                result.append(parse_type_override(name, value))
            except ValueError as exc:
                logger.warning("Ignoring %s entry: %s", SECTION_TYPE_OVERRIDES, exc)
    return tuple(result)


def log_level(parser: configparser.ConfigParser | None = None) -> str:
    """Return the configured log level name.

    ``FWATTR_LOG_LEVEL`` wins over the ``[logging] level`` setting.
    """

    env = os.getenv(ENV_LOG_LEVEL)
    if env:
        return env
    if parser is None:
        parser = read_settings()
    return parser.get(SECTION_LOGGING, "level", fallback=DEFAULT_LOG_LEVEL)
