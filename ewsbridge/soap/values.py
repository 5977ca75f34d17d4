"""
Conversion of payload values into their wire representation.
"""
from datetime import date
from datetime import datetime
from datetime import time
from datetime import timezone

from dateutil import parser as dateparser

from ewsbridge.lib import error
from ewsbridge.lib.string_utils import camel_case

utc_tz = timezone.utc


def format_time(ts) -> str:
    """
    Coerce a date, datetime or time string to an ISO-8601 UTC timestamp
    like ``2024-05-14T21:10:23+00:00``.  Naive timestamps are assumed to
    be local time.
    """
    if isinstance(ts, str):
        try:
            ts = dateparser.parse(ts)
        except (ValueError, OverflowError):
            raise error.BadArgumentError("Invalid Time argument (%s)" % ts)
    elif isinstance(ts, date) and not isinstance(ts, datetime):
        ts = datetime.combine(ts, time(0), tzinfo=utc_tz)
    elif not isinstance(ts, datetime):
        raise error.BadArgumentError("Invalid Time argument (%r)" % (ts,))
    return ts.astimezone(utc_tz).replace(microsecond=0).isoformat()


def body_type(value) -> str:
    """``html`` -> ``HTML``, ``text``/``best`` -> ``Text``/``Best``"""
    value = str(value)
    if "html" in value.lower():
        return value.upper()
    return value.lower().capitalize()


def wire_enum(value, key: str = None) -> str:
    """Enumeration values may be given as snake keys, ``all_properties`` -> ``AllProperties``"""
    try:
        return camel_case(str(value))
    except ValueError:
        raise error.BadArgumentError("Not an enumeration value: %r" % (value,), key=key)


EXTENDED_FIELD_ATTRIBUTES = (
    "distinguished_property_set_id",
    "property_set_id",
    "property_tag",
    "property_name",
    "property_id",
    "property_type",
)


def extended_field_attributes(val) -> dict:
    return {camel_case(k): val[k] for k in EXTENDED_FIELD_ATTRIBUTES if val.get(k)}


def require(payload, key: str, element: str = None):
    """Fetch a sub-key a construction rule can't do without"""
    if not isinstance(payload, dict) or payload.get(key) is None:
        raise error.MissingArgumentError(
            "%s requires %s" % (element or "element", key), key=key
        )
    return payload[key]


def single_pair(payload, what: str):
    if not isinstance(payload, dict) or len(payload) != 1:
        raise error.MalformedInputError(
            "a %s must be a mapping with exactly one key: %r" % (what, payload)
        )
    return next(iter(payload.items()))
