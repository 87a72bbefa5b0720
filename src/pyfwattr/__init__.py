from .attributes import (
    Attribute,
    CommonAttribute,
    EnumerationAttribute,
    EnumerationListAttribute,
    IntegerAttribute,
    OrderedListAttribute,
    StringAttribute,
)
from .authentication import Authentication, Mechanism, Role
from .errors import FirmwareAttributeError
from .parser import (
    AttributeParser,
    FirmwareAttributes,
    list_attribute_names,
    list_authentication_names,
    load_attribute,
    load_authentication,
    pending_reboot,
)
from .root import autodetect_roots, is_firmware_attributes_root
from .session import AccessMode, Session, Status


__all__ = [
    "AccessMode",
    "Attribute",
    "AttributeParser",
    "Authentication",
    "CommonAttribute",
    "EnumerationAttribute",
    "EnumerationListAttribute",
    "FirmwareAttributeError",
    "FirmwareAttributes",
    "IntegerAttribute",
    "Mechanism",
    "OrderedListAttribute",
    "Role",
    "Session",
    "Status",
    "StringAttribute",
    "autodetect_roots",
    "is_firmware_attributes_root",
    "list_attribute_names",
    "list_authentication_names",
    "load_attribute",
    "load_authentication",
    "pending_reboot",
]
