"""
Items (messages, calendar items, tasks, contacts, response objects) and
the fields they are made of.

Inside an item only elements with a construction rule are accepted, see
``EwsBuilder.build_member``.
"""
from datetime import date

from ewsbridge.lib import error
from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.lib.string_utils import camel_case
from ewsbridge.soap.rules import rule
from ewsbridge.soap.rules import text_of
from ewsbridge.soap.types import members
from ewsbridge.soap.values import format_time
from ewsbridge.soap.values import require

## Containers whose children are built with build_member
ITEM_TYPES = {
    "item": "Item",
    "message": "Message",
    "calendar_item": "CalendarItem",
    "task": "Task",
    "contact": "Contact",
    "cancel_calendar_item": "CancelCalendarItem",
    "forward_item": "ForwardItem",
    "reply_to_item": "ReplyToItem",
    "reply_all_to_item": "ReplyAllToItem",
    "accept_item": "AcceptItem",
    "tentatively_accept_item": "TentativelyAcceptItem",
    "decline_item": "DeclineItem",
}

## Fields that are plain text elements
TEXT_FIELDS = (
    "item_class",
    "subject",
    "importance",
    "sensitivity",
    "is_read",
    "location",
    "is_all_day_event",
    "reminder_is_set",
    "reminder_minutes_before_start",
    "legacy_free_busy_status",
    "calendar_item_type",
    "status",
    "percent_complete",
)

## Fields holding a timestamp, strings are sent as given
TIME_FIELDS = ("start", "end")

## Fields holding a timestamp that is always normalized to UTC
UTC_TIME_FIELDS = ("due_date", "reminder_due_by")


def _item_container(wire_name):
    def build(b, item):
        if not isinstance(item, dict):
            raise error.MalformedInputError("expected a mapping", key=wire_name)
        item = dict(item)
        with b.node(NS_EWS_TYPES, wire_name):
            ## extended properties go first in a Message
            if wire_name == "Message" and item.get("extended_properties"):
                b.build_member("extended_properties", item.pop("extended_properties"))
            b.build_members(item, wire_name)

    build.__name__ = wire_name
    return build


def _text_field(wire_name):
    def build(b, value):
        b.types(wire_name, text_of(value))

    build.__name__ = wire_name
    return build


def _time_field(wire_name, utc):
    def build(b, value):
        value = text_of(value)
        if utc or isinstance(value, date):
            ## datetime is a subclass of date
            value = format_time(value)
        b.types(wire_name, value)

    build.__name__ = wire_name
    return build


for _name, _wire_name in ITEM_TYPES.items():
    rule(_name)(_item_container(_wire_name))

for _name in TEXT_FIELDS:
    rule(_name)(_text_field(camel_case(_name)))

for _name in TIME_FIELDS:
    rule(_name)(_time_field(camel_case(_name), utc=False))

for _name in UTC_TIME_FIELDS:
    rule(_name)(_time_field(camel_case(_name), utc=True))


@rule("items")
def items(b, items):
    """``[{"message": {...}}, {"calendar_item": {...}}]``"""
    with b.node(NS_EWS_MESSAGES, "Items"):
        for item in members(items, "items"):
            b.build_members(item, "items")


@rule("uid")
def uid(b, value):
    b.types("UID", text_of(value))


@rule("body")
def body(b, body):
    """``{"text": "...", "body_type": "HTML"}``"""
    b.types(
        "Body",
        text_of(body),
        {"BodyType": body.get("body_type") if isinstance(body, dict) else None},
    )


@rule("new_body_content")
def new_body_content(b, body):
    b.types(
        "NewBodyContent",
        text_of(body),
        {"BodyType": body.get("body_type") if isinstance(body, dict) else None},
    )


## ---------------------------------------------------------------------
## Mailboxes, recipients and attendees
## ---------------------------------------------------------------------

MAILBOX_FIELDS = ("name", "email_address", "address", "routing_type", "mailbox_type")


@rule("mailbox")
def mailbox(b, mbox):
    """
    ``{"email_address": "user@example.com"}``.  ``address`` is used by
    availability queries instead of ``email_address``.
    """
    with b.node(NS_EWS_TYPES, "Mailbox"):
        for field in MAILBOX_FIELDS:
            if mbox.get(field):
                b.types(camel_case(field), text_of(mbox[field]))
        if mbox.get("item_id"):
            b.build_element("item_id", mbox["item_id"])


def _mailbox_list(wire_name):
    def build(b, recipients):
        with b.node(NS_EWS_TYPES, wire_name):
            for mbox in members(recipients, wire_name):
                mailbox(b, require(mbox, "mailbox", wire_name))

    build.__name__ = wire_name
    return build


def _attendee_list(wire_name):
    def build(b, attendees):
        with b.node(NS_EWS_TYPES, wire_name):
            for a in members(attendees, wire_name):
                attendee(b, require(a, "attendee", wire_name))

    build.__name__ = wire_name
    return build


for _name in ("to_recipients", "cc_recipients", "bcc_recipients", "reply_to"):
    rule(_name)(_mailbox_list(camel_case(_name)))

for _name in ("required_attendees", "optional_attendees", "resources"):
    rule(_name)(_attendee_list(camel_case(_name)))


def _single_mailbox(wire_name):
    def build(b, mbox):
        with b.node(NS_EWS_TYPES, wire_name):
            mailbox(b, mbox.get("mailbox", mbox))

    build.__name__ = wire_name
    return build


rule("from")(_single_mailbox("From"))
rule("sender")(_single_mailbox("Sender"))


@rule("attendee")
def attendee(b, a):
    with b.node(NS_EWS_TYPES, "Attendee"):
        mailbox(b, require(a, "mailbox", "Attendee"))


## ---------------------------------------------------------------------
## Extended properties
## ---------------------------------------------------------------------


@rule("extended_properties")
def extended_properties(b, eprops):
    for eprop in members(eprops, "extended_properties"):
        extended_property(b, eprop)


@rule("extended_property")
def extended_property(b, eprop):
    """
    ``{"extended_field_uri": {"property_tag": "0x3007", "property_type": "SystemTime"},
    "value": "..."}``, ``values`` gives a multi-valued property.
    """
    keys = [k for k in eprop if "extended" in k.lower()]
    if len(keys) != 1:
        raise error.MissingArgumentError(
            "ExtendedProperty requires exactly one extended field uri",
            key="extended_field_uri",
        )
    with b.node(NS_EWS_TYPES, "ExtendedProperty"):
        b.dispatch_field_uri({keys[0]: eprop[keys[0]]}, NS_EWS_TYPES)
        if eprop.get("values"):
            with b.node(NS_EWS_TYPES, "Values"):
                for v in eprop["values"]:
                    value(b, v)
        elif eprop.get("value") is not None:
            value(b, eprop["value"])


@rule("value")
def value(b, val):
    b.types("Value", text_of(val))
