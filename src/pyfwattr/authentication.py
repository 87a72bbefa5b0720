from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import MissingDirectoryError, VariantNotFoundError
from .io_props import (
    PROPERTY_CURRENT_PASSWORD,
    read_property,
    try_read_property,
    write_property,
)
from .root import entry_name
from .values import parse_usize

logger = logging.getLogger("pyfwattr.authentication")

DEFAULT_MIN_PASSWORD_LENGTH = 0
DEFAULT_MAX_PASSWORD_LENGTH = 128


class _ClosedEnum(str, Enum):
    @classmethod
    def parse(cls, raw: str):
        try:
            return cls(raw)
        except ValueError:
            raise VariantNotFoundError(cls.__name__, raw) from None

    def __str__(self) -> str:
        return self.value


class Role(_ClosedEnum):
    BIOS_ADMIN = "bios-admin"
    POWER_ON = "power-on"
    SYSTEM_MGMT = "system-mgmt"
    SYSTEM = "system"
    HDD = "hdd"  # Lenovo
    NVME = "nvme"  # Lenovo
    ENHANCED_BIOS_AUTH = "enhanced-bios-auth"  # HP


class Mechanism(_ClosedEnum):
    PASSWORD = "password"


def _optional_length(path: Path, name: str, default: int) -> int:
    raw = try_read_property(path, name)
    return default if raw is None else parse_usize(raw, path / name)


@dataclass(frozen=True)
class Authentication:
    """One login mechanism of a firmware attributes root."""

    path: Path
    login: str
    is_enabled: bool
    role: Role
    mechanism: Mechanism
    min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH
    max_password_length: int = DEFAULT_MAX_PASSWORD_LENGTH

    @classmethod
    def load(cls, path: Path) -> Authentication:
        """Read the authentication directory at *path*.

        ``is_enabled``, ``role`` and ``mechanism`` are required; the password
        length limits fall back to their defaults.
        """
        path = Path(path)
        if not path.is_dir():
            raise MissingDirectoryError(path)
        login = entry_name(path)
        is_enabled = read_property(path, "is_enabled") == "1"
        role = Role.parse(read_property(path, "role"))
        mechanism = Mechanism.parse(read_property(path, "mechanism"))
        return cls(
            path=path,
            login=login,
            is_enabled=is_enabled,
            role=role,
            mechanism=mechanism,
            min_password_length=_optional_length(
                path, "min_password_length", DEFAULT_MIN_PASSWORD_LENGTH
            ),
            max_password_length=_optional_length(
                path, "max_password_length", DEFAULT_MAX_PASSWORD_LENGTH
            ),
        )

    @property
    def is_password_gate(self) -> bool:
        return self.is_enabled and self.mechanism is Mechanism.PASSWORD

    def authenticate_with_password(self, password: str) -> None:
        """Submit *password*; an empty string ends the driver session."""
        if not isinstance(password, str):
            raise TypeError("expected str")
        write_property(self.path, PROPERTY_CURRENT_PASSWORD, password)

    def logout(self) -> None:
        logger.debug("clearing password session for %s", self.login)
        self.authenticate_with_password("")
