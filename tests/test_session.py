import pytest

from pyfwattr.errors import AttributeIOError, MissingFileError
from pyfwattr.parser import FirmwareAttributes
from pyfwattr.session import AccessMode, MessageKind, Session, Status
from tests.utils import (
    DummyParser,
    RecordingAttribute,
    add_admin,
    add_attribute,
    make_root,
    raw,
)


@pytest.fixture
def root(tmp_path):
    root = make_root(tmp_path)
    add_attribute(root, "WakeOnLAN", type="enumeration", current_value="Enabled",
                  possible_values="Enabled;Disabled")
    return root


def test_status_records_outcomes():
    status = Status()
    assert status.snapshot().kind is MessageKind.OK
    status.failed(MissingFileError("/x/current_value"))
    snap = status.snapshot()
    assert snap.kind is MessageKind.ERROR
    assert "current_value" in snap.text
    status.succeeded()
    assert status.snapshot().kind is MessageKind.OK
    status.succeeded("Logged in")
    status.succeeded()
    assert status.snapshot().text == "Logged in"
    status.set_reboot_required(True)
    assert status.reboot_required
    assert status.snapshot().text == "Logged in"


def test_status_handle_returns_result_and_records_message(root):
    status = Status()
    status.failed(AttributeIOError("/x", "denied"))
    names = status.handle(FirmwareAttributes(root).attribute_names, message="Loaded")
    assert names == ["WakeOnLAN"]
    snap = status.snapshot()
    assert (snap.kind, snap.text) == (MessageKind.MESSAGE, "Loaded")


def test_status_handle_records_firmware_errors(tmp_path):
    status = Status()
    status.succeeded("Logged in")
    assert status.handle(FirmwareAttributes(tmp_path).attribute_names) is None
    snap = status.snapshot()
    assert snap.kind is MessageKind.ERROR
    assert str(tmp_path) in snap.text


def test_status_handle_passes_arguments_and_keeps_other_errors():
    status = Status()
    assert status.handle(max, 3, 7) == 7
    assert status.snapshot().kind is MessageKind.OK
    with pytest.raises(ZeroDivisionError):
        status.handle(divmod, 1, 0)

def test_access_mode_write_access():
    assert not AccessMode.READ_ONLY.write_access
    assert AccessMode.READ_WRITE.write_access
    assert AccessMode.AUTHENTICATED.write_access


def test_unprotected_root_opens_read_write(root):
    session = Session.for_root(root)
    assert session.open() is None
    assert session.access_mode is AccessMode.READ_WRITE
    assert [a.name for a in session.attributes] == ["WakeOnLAN"]
    assert session.update(session.attribute("WakeOnLAN"), "Disabled") is True
    assert raw(root / "attributes" / "WakeOnLAN" / "current_value") == "Disabled"


def test_disabled_password_is_not_a_gate(root):
    add_admin(root, is_enabled="0")
    session = Session.for_root(root)
    assert session.open() is None
    assert session.access_mode is AccessMode.READ_WRITE


def test_login_update_and_close(root):
    admin = add_admin(root)
    with Session.for_root(root) as session:
        gate = session.open()
        assert gate is not None and gate.login == "Admin"
        assert session.attributes == []
        session.login("hunter22")
        assert raw(admin / "current_password") == "hunter22"
        assert session.access_mode is AccessMode.AUTHENTICATED
        assert session.status.snapshot().text == "Logged in"
        session.update(session.attribute("WakeOnLAN"), "Disabled")
        assert "WakeOnLAN" in session.status.snapshot().text
    assert raw(admin / "current_password") == ""
    assert session.authentication is None


def test_logout(root):
    admin = add_admin(root)
    session = Session.for_root(root)
    session.open()
    session.login("pw")
    session.logout()
    assert raw(admin / "current_password") == ""
    assert session.access_mode is AccessMode.READ_ONLY
    assert session.status.snapshot().text == "Logged out"


def test_logout_without_login_keeps_write_access(root):
    session = Session.for_root(root)
    session.open()
    session.logout()
    assert session.access_mode is AccessMode.READ_WRITE
    assert session.status.snapshot().text == "Firmware settings are not password protected"


def test_read_only_refuses_updates(root):
    add_admin(root)
    session = Session.for_root(root)
    session.open()
    session.proceed_read_only()
    assert session.access_mode is AccessMode.READ_ONLY
    with pytest.raises(PermissionError):
        session.update(session.attribute("WakeOnLAN"), "Disabled")


def test_login_without_gate():
    session = Session(DummyParser())
    session.open()
    with pytest.raises(RuntimeError):
        session.login("pw")


def test_update_skips_unchanged_value():
    attribute = RecordingAttribute("Mode", "A")
    session = Session(DummyParser([attribute]))
    session.open()
    assert session.update(attribute, "A") is False
    assert attribute.writes == []
    assert session.update(attribute, "B") is True
    assert attribute.writes == ["B"]


def test_update_rechecks_pending_reboot():
    attribute = RecordingAttribute("Mode", "A")
    parser = DummyParser([attribute])
    session = Session(parser)
    session.open()
    assert not session.status.reboot_required
    parser.pending = True
    session.update(attribute, "B")
    assert session.status.reboot_required


def test_failed_update_is_reported_and_raised():
    attribute = RecordingAttribute("Mode", "A", fail_with=AttributeIOError("/x", "denied"))
    session = Session(DummyParser([attribute]))
    session.open()
    with pytest.raises(AttributeIOError):
        session.update(attribute, "B")
    snap = session.status.snapshot()
    assert snap.kind is MessageKind.ERROR
    assert "denied" in snap.text


def test_refresh_invalidates_every_attribute():
    first, second = RecordingAttribute("A", 1), RecordingAttribute("B", 2)
    session = Session(DummyParser([first, second]))
    session.open()
    session.refresh()
    assert (first.invalidations, second.invalidations) == (1, 1)


def test_unknown_attribute():
    session = Session(DummyParser())
    session.open()
    with pytest.raises(KeyError):
        session.attribute("Nope")


def test_pending_reboot_errors_read_as_false(root):
    (root / "attributes" / "pending_reboot").unlink()
    session = Session.for_root(root)
    session.open()
    assert session.check_pending_reboot() is False
