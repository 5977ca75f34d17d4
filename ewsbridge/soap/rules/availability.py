"""
Availability (free/busy), out of office settings and room lists.
"""
from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.lib.string_utils import camel_case
from ewsbridge.soap.rules import rule
from ewsbridge.soap.rules import text_of
from ewsbridge.soap.values import format_time
from ewsbridge.soap.values import require
from ewsbridge.soap.values import wire_enum


@rule("mailbox_data")
def mailbox_data(b, md):
    """``{"email": {"address": "user@example.com"}, "attendee_type": "Required"}``"""
    mbox = require(md, "email", "MailboxData")
    with b.node(NS_EWS_TYPES, "MailboxData"):
        with b.node(NS_EWS_TYPES, "Email"):
            for field in ("name", "address", "routing_type"):
                if mbox.get(field):
                    b.types(camel_case(field), mbox[field])
        b.types("AttendeeType", md.get("attendee_type", "Required"))
        if md.get("exclude_conflicts") is not None:
            b.types("ExcludeConflicts", md["exclude_conflicts"])


def _time_window(b, wire_name, window):
    with b.node(NS_EWS_TYPES, wire_name):
        b.types("StartTime", format_time(require(window, "start_time", wire_name)))
        b.types("EndTime", format_time(require(window, "end_time", wire_name)))


@rule("free_busy_view_options")
def free_busy_view_options(b, opts):
    """
    ``{"time_window": {"start_time": ..., "end_time": ...},
    "requested_view": {"requested_free_busy_view": "free_busy"}}``
    """
    with b.node(NS_EWS_TYPES, "FreeBusyViewOptions"):
        _time_window(b, "TimeWindow", require(opts, "time_window", "FreeBusyViewOptions"))
        if opts.get("merged_free_busy_interval_in_minutes"):
            b.types(
                "MergedFreeBusyIntervalInMinutes",
                opts["merged_free_busy_interval_in_minutes"],
            )
        view = require(opts, "requested_view", "FreeBusyViewOptions")
        b.types(
            "RequestedView",
            wire_enum(
                require(view, "requested_free_busy_view", "RequestedView"),
                "requested_free_busy_view",
            ),
        )


SUGGESTIONS_VIEW_FIELDS = (
    "good_threshold",
    "maximum_results_by_day",
    "maximum_non_work_hour_results_by_day",
    "meeting_duration_in_minutes",
    "minimum_suggestion_quality",
)


@rule("suggestions_view_options")
def suggestions_view_options(b, opts):
    with b.node(NS_EWS_TYPES, "SuggestionsViewOptions"):
        for field in SUGGESTIONS_VIEW_FIELDS:
            if opts.get(field) is not None:
                b.types(camel_case(field), opts[field])
        _time_window(
            b,
            "DetailedSuggestionsWindow",
            require(opts, "detailed_suggestions_window", "SuggestionsViewOptions"),
        )


@rule("user_oof_settings")
def user_oof_settings(b, opts):
    with b.node(NS_EWS_TYPES, "UserOofSettings"):
        b.types("OofState", wire_enum(require(opts, "oof_state", "UserOofSettings"), "oof_state"))
        if opts.get("external_audience"):
            b.types("ExternalAudience", wire_enum(opts["external_audience"], "external_audience"))
        if opts.get("duration"):
            duration(b, opts["duration"])
        if opts.get("internal_reply"):
            with b.node(NS_EWS_TYPES, "InternalReply"):
                b.types("Message", text_of(opts["internal_reply"]))
        if opts.get("external_reply"):
            with b.node(NS_EWS_TYPES, "ExternalReply"):
                b.types("Message", text_of(opts["external_reply"]))


@rule("duration")
def duration(b, opts):
    _time_window(b, "Duration", opts)


@rule("room_list")
def room_list(b, email_address):
    with b.node(NS_EWS_MESSAGES, "RoomList"):
        b.types("EmailAddress", text_of(email_address))


@rule("room_lists")
def room_lists(b, _=None):
    b.messages("GetRoomLists")
