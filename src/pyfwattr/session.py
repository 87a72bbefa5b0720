"""Interactive session flow on top of the parser.

A :class:`Session` picks the admin password gate of a root, logs in or falls
back to read-only access, loads the attributes and applies updates.  Outcomes
are recorded on a thread-safe :class:`Status` that a front end can poll from
another thread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from pathlib import Path
from threading import RLock
from typing import Any, Callable, TypeVar

from .attributes import AnyAttribute
from .authentication import Authentication
from .errors import FirmwareAttributeError
from .parser import AttributeParser, FirmwareAttributes

logger = logging.getLogger("pyfwattr.session")

T = TypeVar("T")


class MessageKind(Enum):
    OK = "ok"
    MESSAGE = "message"
    ERROR = "error"


@dataclass(frozen=True)
class StatusSnapshot:
    changed: datetime
    kind: MessageKind = MessageKind.OK
    text: str = ""
    reboot_required: bool = False


class Status:
    """User visible status record shared between threads."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._state = StatusSnapshot(changed=datetime.now())

    def snapshot(self) -> StatusSnapshot:
        with self._lock:
            return self._state

    @property
    def reboot_required(self) -> bool:
        with self._lock:
            return self._state.reboot_required

    def set_reboot_required(self, required: bool) -> None:
        with self._lock:
            self._state = replace(self._state, reboot_required=required)

    def succeeded(self, message: str | None = None) -> None:
        """Record a successful operation.

        Without *message* a previous error is cleared but a previous
        informational message is kept.
        """
        with self._lock:
            if message is not None:
                logger.info("Success: %s", message)
                self._state = replace(
                    self._state,
                    changed=datetime.now(),
                    kind=MessageKind.MESSAGE,
                    text=message,
                )
            elif self._state.kind is MessageKind.ERROR:
                self._state = replace(
                    self._state, changed=datetime.now(), kind=MessageKind.OK, text=""
                )
            else:
                self._state = replace(self._state, changed=datetime.now())

    def failed(self, exc: BaseException) -> None:
        logger.error("%s", exc)
        with self._lock:
            self._state = replace(
                self._state, changed=datetime.now(), kind=MessageKind.ERROR, text=str(exc)
            )

    def handle(self, call: Callable[..., T], *args: Any, message: str | None = None) -> T | None:
        """Run *call* and record its outcome.

        Firmware errors are recorded instead of raised and ``None`` is
        returned for them.
        """
        try:
            result = call(*args)
        except FirmwareAttributeError as exc:
            self.failed(exc)
            return None
        self.succeeded(message)
        return result


class AccessMode(Enum):
    READ_ONLY = "read-only"
    # the root has no enabled password gate
    READ_WRITE = "read-write"
    AUTHENTICATED = "authenticated"

    @property
    def write_access(self) -> bool:
        return self is not AccessMode.READ_ONLY


class Session:
    def __init__(self, parser: AttributeParser, status: Status | None = None) -> None:
        self.parser = parser
        self.status = status if status is not None else Status()
        self.access_mode = AccessMode.READ_ONLY
        self.authentication: Authentication | None = None
        self.attributes: list[AnyAttribute] = []
        self._gate: Authentication | None = None

    @classmethod
    def for_root(cls, root: str | Path, status: Status | None = None) -> Session:
        return cls(FirmwareAttributes(root), status)

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Authentication flow
    # ------------------------------------------------------------------

    def admin_authentication(self) -> Authentication | None:
        """Return the first enabled password authentication, if any."""
        for name in self.parser.authentication_names():
            auth = self.parser.authentication(name)
            if auth.is_password_gate:
                return auth
        return None

    def open(self) -> Authentication | None:
        """Start the session.

        Returns the password gate that must be passed with :meth:`login` (or
        skipped with :meth:`proceed_read_only`).  Without a gate the session
        is opened read-write immediately and ``None`` is returned.
        """
        try:
            self._gate = self.admin_authentication()
            if self._gate is None:
                self._enter(AccessMode.READ_WRITE)
        except FirmwareAttributeError as exc:
            self.status.failed(exc)
            raise
        if self._gate is None:
            self.status.succeeded("Firmware settings are not password protected")
        return self._gate

    def login(self, password: str) -> None:
        gate = self._gate
        if gate is None:
            raise RuntimeError("no password authentication to log in to")
        try:
            gate.authenticate_with_password(password)
            self.authentication = gate
            self._enter(AccessMode.AUTHENTICATED)
        except FirmwareAttributeError as exc:
            self.status.failed(exc)
            raise
        self.status.succeeded("Logged in")

    def proceed_read_only(self) -> None:
        try:
            self._enter(AccessMode.READ_ONLY)
        except FirmwareAttributeError as exc:
            self.status.failed(exc)
            raise
        self.status.succeeded("Read only mode")

    def logout(self) -> None:
        auth = self.authentication
        if auth is None:
            return
        self.authentication = None
        self.access_mode = AccessMode.READ_ONLY
        try:
            auth.logout()
        except FirmwareAttributeError as exc:
            self.status.failed(exc)
            raise
        self.status.succeeded("Logged out")

    def close(self) -> None:
        """Clear the driver session if one was opened."""
        if self.authentication is None:
            return
        try:
            self.logout()
        except FirmwareAttributeError as exc:
            logger.warning("logout of %s failed: %s", self.parser.root, exc)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def _enter(self, mode: AccessMode) -> None:
        self.attributes = self.parser.attributes()
        self.access_mode = mode
        self.check_pending_reboot()

    def attribute(self, name: str) -> AnyAttribute:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        raise KeyError(name)

    def update(self, attribute: AnyAttribute, value: Any) -> bool:
        """Write *value* unless it equals the current value.

        Returns ``True`` when a write happened.
        """
        if not self.access_mode.write_access:
            raise PermissionError(f"{attribute.name} cannot be changed in read only mode")
        try:
            unchanged = attribute.current_value() == value
        except FirmwareAttributeError as exc:
            logger.debug("current value of %s unavailable: %s", attribute.name, exc)
            unchanged = False
        if unchanged:
            return False
        try:
            attribute.write_current_value(value)
        except FirmwareAttributeError as exc:
            self.status.failed(exc)
            raise
        self.status.succeeded(
            f"Value updated for Attribute {attribute.label!r} to {value!r}"
        )
        self.check_pending_reboot()
        return True

    def check_pending_reboot(self) -> bool:
        try:
            required = self.parser.pending_reboot()
        except FirmwareAttributeError as exc:
            logger.debug("pending reboot flag unavailable: %s", exc)
            required = False
        self.status.set_reboot_required(required)
        return required

    def refresh(self) -> None:
        """Drop every cached value so the next reads hit storage."""
        for attribute in self.attributes:
            attribute.invalidate_cache()
