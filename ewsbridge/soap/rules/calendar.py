"""
Recurrence patterns and ranges of calendar items and tasks.
"""
from datetime import date
from datetime import datetime

from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.lib.string_utils import camel_case
from ewsbridge.soap.rules import rule
from ewsbridge.soap.rules import text_of
from ewsbridge.soap.values import format_time

RECURRENCE_CONTAINERS = (
    "recurrence",
    ## patterns
    "daily_recurrence",
    "weekly_recurrence",
    "absolute_monthly_recurrence",
    "relative_monthly_recurrence",
    "absolute_yearly_recurrence",
    "relative_yearly_recurrence",
    ## ranges
    "no_end_recurrence",
    "numbered_recurrence",
    "end_date_recurrence",
)

RECURRENCE_FIELDS = (
    "interval",
    "day_of_month",
    "days_of_week",
    "day_of_week_index",
    "first_day_of_week",
    "month",
    "number_of_occurrences",
)

## xs:date fields
DATE_FIELDS = ("start_date", "end_date")


def _container(wire_name):
    def build(b, pattern):
        with b.node(NS_EWS_TYPES, wire_name):
            b.build_members(pattern or {}, wire_name)

    build.__name__ = wire_name
    return build


def _field(wire_name):
    def build(b, value):
        b.types(wire_name, text_of(value))

    build.__name__ = wire_name
    return build


def _date_field(wire_name):
    def build(b, value):
        value = text_of(value)
        if isinstance(value, datetime):
            value = format_time(value)
        elif isinstance(value, date):
            value = value.isoformat()
        b.types(wire_name, value)

    build.__name__ = wire_name
    return build


for _name in RECURRENCE_CONTAINERS:
    rule(_name)(_container(camel_case(_name)))

for _name in RECURRENCE_FIELDS:
    rule(_name)(_field(camel_case(_name)))

for _name in DATE_FIELDS:
    rule(_name)(_date_field(camel_case(_name)))
