"""Entry points for reading a firmware attributes root.

Every operation validates the root first and raises
:class:`~pyfwattr.errors.InvalidRootError` for anything that does not expose
both ``attributes`` and ``authentication``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Protocol

from .attributes import AnyAttribute, attribute_from_path
from .authentication import Authentication
from .config import DEFAULT_TYPE_OVERRIDES, TypeOverride, type_overrides
from .errors import FirmwareAttributeError, InvalidRootError
from .io_props import read_property
from .root import (
    PATH_ATTRIBUTES,
    PATH_AUTHENTICATIONS,
    directory_names,
    is_firmware_attributes_root,
)

logger = logging.getLogger("pyfwattr")

PROPERTY_PENDING_REBOOT = "pending_reboot"


def _checked(root: str | Path) -> Path:
    path = Path(root)
    if not is_firmware_attributes_root(path):
        raise InvalidRootError(path)
    return path


def list_attribute_names(root: str | Path) -> list[str]:
    return directory_names(_checked(root) / PATH_ATTRIBUTES)


def list_authentication_names(root: str | Path) -> list[str]:
    return directory_names(_checked(root) / PATH_AUTHENTICATIONS)


def load_attribute(
    root: str | Path,
    name: str,
    overrides: Iterable[TypeOverride] = DEFAULT_TYPE_OVERRIDES,
) -> AnyAttribute:
    return attribute_from_path(_checked(root) / PATH_ATTRIBUTES / name, overrides)


def load_authentication(root: str | Path, name: str) -> Authentication:
    return Authentication.load(_checked(root) / PATH_AUTHENTICATIONS / name)


def pending_reboot(root: str | Path) -> bool:
    """Return ``True`` when a previous write only applies after a restart."""
    return read_property(_checked(root) / PATH_ATTRIBUTES, PROPERTY_PENDING_REBOOT) == "1"


def load_attributes(
    root: str | Path,
    overrides: Iterable[TypeOverride] = DEFAULT_TYPE_OVERRIDES,
) -> list[AnyAttribute]:
    """Load every attribute of *root*, skipping the ones that fail to load."""
    overrides = tuple(overrides)
    result: list[AnyAttribute] = []
    for name in list_attribute_names(root):
        try:
            result.append(load_attribute(root, name, overrides))
        except FirmwareAttributeError as exc:
            logger.warning("skipping attribute %s: %s", name, exc)
    return result


def load_authentications(root: str | Path) -> list[Authentication]:
    """Load every authentication of *root*, skipping the ones that fail to load."""
    result: list[Authentication] = []
    for name in list_authentication_names(root):
        try:
            result.append(load_authentication(root, name))
        except FirmwareAttributeError as exc:
            logger.warning("skipping authentication %s: %s", name, exc)
    return result


class AttributeParser(Protocol):
    """Protocol describing access to one firmware attributes root."""

    root: Path

    def attribute_names(self) -> list[str]:
        ...

    def authentication_names(self) -> list[str]:
        ...

    def attribute(self, name: str) -> AnyAttribute:
        ...

    def authentication(self, name: str) -> Authentication:
        ...

    def attributes(self) -> list[AnyAttribute]:
        ...

    def authentications(self) -> list[Authentication]:
        ...

    def pending_reboot(self) -> bool:
        ...


class FirmwareAttributes:
    """:class:`AttributeParser` backed by the sysfs tree at *root*.

    The type override table is resolved once: when *overrides* is not given
    the built-in entries plus those from the settings files are used.
    """

    def __init__(
        self, root: str | Path, *, overrides: Sequence[TypeOverride] | None = None
    ) -> None:
        self.root = Path(root)
        self.overrides: tuple[TypeOverride, ...] = (
            type_overrides() if overrides is None else tuple(overrides)
        )

    def __repr__(self) -> str:
        return f"FirmwareAttributes({str(self.root)!r})"

    def is_valid(self) -> bool:
        return is_firmware_attributes_root(self.root)

    def attribute_names(self) -> list[str]:
        return list_attribute_names(self.root)

    def authentication_names(self) -> list[str]:
        return list_authentication_names(self.root)

    def attribute(self, name: str) -> AnyAttribute:
        return load_attribute(self.root, name, self.overrides)

    def authentication(self, name: str) -> Authentication:
        return load_authentication(self.root, name)

    def attributes(self) -> list[AnyAttribute]:
        return load_attributes(self.root, self.overrides)

    def authentications(self) -> list[Authentication]:
        return load_authentications(self.root)

    def pending_reboot(self) -> bool:
        return pending_reboot(self.root)
