"""
Contact fields.  Most of them are plain text elements in the types
namespace; the address books (email, phone, im, physical) are lists of
keyed entries.
"""
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.lib.string_utils import camel_case
from ewsbridge.soap.rules import rule
from ewsbridge.soap.rules import text_of
from ewsbridge.soap.types import members
from ewsbridge.soap.values import require

SIMPLE_CONTACT_FIELDS = (
    "given_name",
    "initials",
    "middle_name",
    "nickname",
    "company_name",
    "assistant_name",
    "birthday",
    "business_home_page",
    "department",
    "generation",
    "job_title",
    "manager",
    "mileage",
    "office_location",
    "profession",
    "spouse_name",
    "surname",
    "file_as",
    "file_as_mapping",
    "wedding_anniversary",
    "phonetic_full_name",
    "phonetic_first_name",
    "phonetic_last_name",
    "alias",
    "notes",
)


def _text_element(wire_name):
    def build(b, value):
        b.types(wire_name, text_of(value))

    build.__name__ = wire_name
    return build


for _field in SIMPLE_CONTACT_FIELDS:
    rule(_field)(_text_element(camel_case(_field)))


def _string_list(b, wire_name, names):
    with b.node(NS_EWS_TYPES, wire_name):
        for name in members(names, wire_name):
            b.types("String", text_of(name))


@rule("children")
def children(b, names):
    _string_list(b, "Children", names)


@rule("companies")
def companies(b, names):
    _string_list(b, "Companies", names)


@rule("categories")
def categories(b, names):
    _string_list(b, "Categories", names)


def _entries(entries):
    """Entry lists may be given bare or wrapped, ``{"entry": {...}}``"""
    for entry in members(entries, "entry"):
        yield entry.get("entry", entry)


@rule("email_addresses")
def email_addresses(b, addresses):
    with b.node(NS_EWS_TYPES, "EmailAddresses"):
        for address in _entries(addresses):
            attrs = {"Key": require(address, "key", "EmailAddresses/Entry")}
            for k in ("name", "routing_type", "mailbox_type"):
                if address.get(k):
                    attrs[camel_case(k)] = address[k]
            b.types("Entry", address.get("text"), attrs)


@rule("phone_numbers")
def phone_numbers(b, numbers):
    with b.node(NS_EWS_TYPES, "PhoneNumbers"):
        for number in _entries(numbers):
            b.types(
                "Entry",
                number.get("text"),
                {"Key": require(number, "key", "PhoneNumbers/Entry")},
            )


@rule("im_addresses")
def im_addresses(b, addresses):
    with b.node(NS_EWS_TYPES, "ImAddresses"):
        for address in _entries(addresses):
            b.types(
                "Entry",
                address.get("text"),
                {"Key": require(address, "key", "ImAddresses/Entry")},
            )


PHYSICAL_ADDRESS_PARTS = ("street", "city", "state", "country_or_region", "postal_code")


@rule("physical_addresses")
def physical_addresses(b, addresses):
    with b.node(NS_EWS_TYPES, "PhysicalAddresses"):
        for address in _entries(addresses):
            key = require(address, "key", "PhysicalAddresses/Entry")
            with b.node(NS_EWS_TYPES, "Entry", attrs={"Key": key}):
                for part in PHYSICAL_ADDRESS_PARTS:
                    if address.get(part) is not None:
                        b.types(camel_case(part), text_of(address[part]))
