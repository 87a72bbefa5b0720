from __future__ import annotations

from pathlib import Path


class FirmwareAttributeError(Exception):
    """Base class for firmware attribute errors."""


class MissingFileError(FirmwareAttributeError):
    """Raised when a required property file does not exist."""

    def __init__(self, path: Path):
        super().__init__(f"required file not found: {path}")
        self.path = Path(path)


class MissingDirectoryError(FirmwareAttributeError):
    """Raised when a required directory does not exist or is not a directory."""

    def __init__(self, path: Path):
        super().__init__(f"required directory not found: {path}")
        self.path = Path(path)


class AttributeIOError(FirmwareAttributeError):
    """Raised for unexpected read or write failures."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"I/O failure on {path}: {reason}")
        self.path = Path(path)


class AttributeParseError(FirmwareAttributeError, ValueError):
    """Raised when a numeric property holds something that is not a number."""

    def __init__(self, path: Path | None, raw: str, expected: str = "integer"):
        where = f" in {path}" if path is not None else ""
        super().__init__(f"invalid {expected} {raw!r}{where}")
        self.path = Path(path) if path is not None else None
        self.raw = raw


class UnsupportedAttributeTypeError(FirmwareAttributeError):
    """Raised when the ``type`` property names an unknown attribute kind."""

    def __init__(self, attribute_type: str):
        super().__init__(f"unsupported attribute type: {attribute_type!r}")
        self.attribute_type = attribute_type


class VariantNotFoundError(FirmwareAttributeError, ValueError):
    """Raised when a ``role`` or ``mechanism`` string is not recognised."""

    def __init__(self, enum_name: str, raw: str):
        super().__init__(f"unknown {enum_name} {raw!r}")
        self.enum_name = enum_name
        self.raw = raw


class InvalidRootError(FirmwareAttributeError):
    """Raised when a path is not a firmware attributes root."""

    def __init__(self, path: Path):
        super().__init__(f"not a firmware attributes root: {path}")
        self.path = Path(path)


class InvalidEntryNameError(FirmwareAttributeError):
    """Raised when a directory entry name cannot be decoded as text."""

    def __init__(self, path: Path):
        super().__init__(f"entry name is not valid text: {path!r}")
        self.path = Path(path)
