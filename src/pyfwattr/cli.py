from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .attributes import AnyAttribute, IntegerAttribute, StringAttribute
from .config import log_level as configured_log_level
from .errors import FirmwareAttributeError
from .parser import FirmwareAttributes
from .root import autodetect_roots
from .session import Session
from .value_parser import parse_attribute_value

logger = logging.getLogger("pyfwattr.cli")

LOG_FORMAT = "%(levelname)s:%(name)s:%(message)s"


class UsageError(Exception):
    """Raised for command line mistakes that are not firmware errors."""


def configure_logging(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise UsageError(f"unknown log level: {level!r}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
    logging.getLogger("pyfwattr").setLevel(numeric)


def _resolve_root(args: argparse.Namespace) -> Path:
    if args.root:
        return Path(args.root)
    roots = autodetect_roots()
    if not roots:
        raise UsageError("Firmware Attributes root not found")
    if len(roots) > 1:
        listed = ", ".join(str(r) for r in roots)
        raise UsageError(f"several roots found, choose one with --root: {listed}")
    logger.info("The only root %s was selected automatically", roots[0])
    return roots[0]


def _encode(attribute: AnyAttribute, value: Any) -> str:
    return attribute.adapter.serialize(value)


def _describe(attribute: AnyAttribute) -> dict[str, Any]:
    data: dict[str, Any] = {
        "name": attribute.name,
        "label": attribute.label,
        "kind": attribute.kind,
        "current_value": attribute.current_value(),
        "default_value": attribute.default_value,
    }
    if attribute.common.display_name_language_code is not None:
        data["language"] = attribute.common.display_name_language_code
    if attribute.choices is not None:
        data["choices"] = attribute.choices
    if isinstance(attribute, IntegerAttribute):
        data["min_value"] = attribute.min_value
        data["max_value"] = attribute.max_value
        data["scalar_increment"] = attribute.scalar_increment
    elif isinstance(attribute, StringAttribute):
        data["min_length"] = attribute.min_length
        data["max_length"] = attribute.max_length
        if attribute.hint is not None:
            data["hint"] = attribute.hint
    return data


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def roots_cmd(args: argparse.Namespace) -> int:
    for root in autodetect_roots():
        print(root)
    return 0


def list_cmd(args: argparse.Namespace) -> int:
    fw = FirmwareAttributes(_resolve_root(args))
    rows = []
    for attribute in fw.attributes():
        try:
            value = attribute.current_value()
        except FirmwareAttributeError as exc:
            logger.error("%s: %s", attribute.name, exc)
            continue
        rows.append((attribute, value))
    if args.as_json:
        print(json.dumps({a.name: v for a, v in rows}))
    else:
        for attribute, value in rows:
            print(f"{attribute.name} ({attribute.kind}): {_encode(attribute, value)}")
    return 0


def show_cmd(args: argparse.Namespace) -> int:
    fw = FirmwareAttributes(_resolve_root(args))
    data = _describe(fw.attribute(args.name))
    if args.as_json:
        print(json.dumps(data))
    else:
        for key, value in data.items():
            print(f"{key}: {value}")
    return 0


def auth_cmd(args: argparse.Namespace) -> int:
    fw = FirmwareAttributes(_resolve_root(args))
    for auth in fw.authentications():
        state = "enabled" if auth.is_enabled else "disabled"
        print(f"{auth.login}: role={auth.role} mechanism={auth.mechanism} {state}")
    return 0


def pending_reboot_cmd(args: argparse.Namespace) -> int:
    fw = FirmwareAttributes(_resolve_root(args))
    print("yes" if fw.pending_reboot() else "no")
    return 0


def _read_password(args: argparse.Namespace, login: str) -> str:
    if args.password_stdin:
        return sys.stdin.readline().rstrip("\r\n")
    return getpass.getpass(f"Password for {login}: ")


def set_cmd(args: argparse.Namespace) -> int:
    with Session.for_root(_resolve_root(args)) as session:
        gate = session.open()
        if gate is not None:
            session.login(_read_password(args, gate.login))
        try:
            attribute = session.attribute(args.name)
        except KeyError:
            raise UsageError(f"unknown attribute: {args.name}") from None
        try:
            value = parse_attribute_value(attribute, args.values)
        except ValueError as exc:
            raise UsageError(str(exc)) from exc
        if session.update(attribute, value):
            print(session.status.snapshot().text)
        else:
            print(f"{attribute.name} already set to {_encode(attribute, value)}")
        if session.status.reboot_required:
            print("Changes will be applied after restart.")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pyfwattr",
        description="Inspect and change Linux firmware attributes. Root privileges required.",
    )
    parser.add_argument(
        "--root",
        help='Firmware attributes directory, e.g. "/sys/class/firmware-attributes/thinklmi/"',
    )
    parser.add_argument(
        "--log-level",
        help="Log level: debug, info, warning, error. Defaults to FWATTR_LOG_LEVEL or the settings file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_roots = subparsers.add_parser("roots", help="List detected firmware attributes roots.")
    p_roots.set_defaults(func=roots_cmd)

    p_list = subparsers.add_parser("list", help="List attributes and their current values.")
    p_list.add_argument("--json", dest="as_json", action="store_true")
    p_list.set_defaults(func=list_cmd)

    p_show = subparsers.add_parser("show", help="Show one attribute in detail.")
    p_show.add_argument("name")
    p_show.add_argument("--json", dest="as_json", action="store_true")
    p_show.set_defaults(func=show_cmd)

    p_set = subparsers.add_parser("set", help="Set NAME to VALUE (one VALUE per list element).")
    p_set.add_argument("name")
    p_set.add_argument("values", nargs="+", metavar="VALUE")
    p_set.add_argument(
        "--password-stdin",
        action="store_true",
        help="Read the administrator password from standard input",
    )
    p_set.set_defaults(func=set_cmd)

    p_auth = subparsers.add_parser("auth", help="List authentication mechanisms.")
    p_auth.set_defaults(func=auth_cmd)

    p_reboot = subparsers.add_parser("pending-reboot", help="Report whether a restart is pending.")
    p_reboot.set_defaults(func=pending_reboot_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level or configured_log_level())
        return int(args.func(args))
    except UsageError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except (FirmwareAttributeError, PermissionError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
