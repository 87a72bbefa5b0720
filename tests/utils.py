from __future__ import annotations

from pathlib import Path


def write_props(directory: Path, props: dict[str, str]) -> Path:
    """Create *directory* and one file per property, sysfs style (trailing newline)."""

    directory.mkdir(parents=True, exist_ok=True)
    for name, value in props.items():
        (directory / name).write_text(f"{value}\n", encoding="utf-8")
    return directory


def make_root(base: Path, name: str = "thinklmi", *, pending_reboot: str = "0") -> Path:
    root = base / name
    (root / "attributes").mkdir(parents=True)
    (root / "authentication").mkdir()
    (root / "attributes" / "pending_reboot").write_text(f"{pending_reboot}\n")
    return root


def add_attribute(root: Path, name: str, **props: str) -> Path:
    return write_props(root / "attributes" / name, props)


def add_authentication(root: Path, name: str, *, password_file: bool = True, **props: str) -> Path:
    path = write_props(root / "authentication" / name, props)
    if password_file:
        (path / "current_password").write_text("")
    return path


def add_admin(root: Path, name: str = "Admin", *, is_enabled: str = "1") -> Path:
    return add_authentication(
        root,
        name,
        is_enabled=is_enabled,
        role="bios-admin",
        mechanism="password",
        min_password_length="4",
        max_password_length="32",
    )


def raw(path: Path) -> str:
    return path.read_bytes().decode("utf-8")


class RecordingAttribute:
    """Attribute double recording writes."""

    kind = "string"

    def __init__(self, name: str, value, *, fail_with: Exception | None = None):
        self.name = name
        self.label = name
        self.value = value
        self.writes: list = []
        self.invalidations = 0
        self.fail_with = fail_with

    def current_value(self):
        return self.value

    def write_current_value(self, value) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.writes.append(value)
        self.value = value

    def invalidate_cache(self) -> None:
        self.invalidations += 1


class DummyParser:
    """In-memory :class:`pyfwattr.parser.AttributeParser`."""

    def __init__(self, attributes=(), authentications=(), *, pending: bool = False):
        self.root = Path("/dummy/root")
        self._attributes = list(attributes)
        self._authentications = {a.login: a for a in authentications}
        self.pending = pending
        self.loads = 0

    def attribute_names(self):
        return [a.name for a in self._attributes]

    def authentication_names(self):
        return list(self._authentications)

    def attribute(self, name):
        for attribute in self._attributes:
            if attribute.name == name:
                return attribute
        raise KeyError(name)

    def authentication(self, name):
        return self._authentications[name]

    def attributes(self):
        self.loads += 1
        return list(self._attributes)

    def authentications(self):
        return list(self._authentications.values())

    def pending_reboot(self):
        return self.pending
