"""
Time zone definitions.
"""
from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.soap.rules import rule
from ewsbridge.soap.rules import text_of
from ewsbridge.soap.values import require

## Used for the parts of a legacy TimeZone that are not given
DEFAULT_STANDARD_TIME = {
    "bias": 0,
    "time": "02:00:00",
    "day_order": 5,
    "month": 10,
    "day_of_week": "Sunday",
}
DEFAULT_DAYLIGHT_TIME = {
    "bias": -60,
    "time": "02:00:00",
    "day_order": 1,
    "month": 4,
    "day_of_week": "Sunday",
}
DEFAULT_BIAS = 480


def _zone_attributes(zone):
    return {"Id": zone.get("id"), "Name": zone.get("name")}


@rule("start_time_zone")
def start_time_zone(b, zone):
    """``{"id": "W. Europe Standard Time", "name": ...}``"""
    b.types("StartTimeZone", attrs=_zone_attributes(zone))


@rule("end_time_zone")
def end_time_zone(b, zone):
    b.types("EndTimeZone", attrs=_zone_attributes(zone))


@rule("time_zone_definition")
def time_zone_definition(b, zone):
    attrs = _zone_attributes(zone)
    attrs["Id"] = require(zone, "id", "TimeZoneDefinition")
    b.types("TimeZoneDefinition", attrs=attrs)


def _transition(b, wire_name, transition):
    with b.node(NS_EWS_TYPES, wire_name):
        b.types("Bias", transition["bias"])
        b.types("Time", transition["time"])
        b.types("DayOrder", transition["day_order"])
        b.types("Month", transition["month"])
        b.types("DayOfWeek", transition["day_of_week"])


@rule("time_zone")
def time_zone(b, zone):
    """The legacy (pre Exchange 2010) TimeZone of availability requests"""
    zone = zone or {}
    with b.node(NS_EWS_TYPES, "TimeZone"):
        b.types("Bias", zone.get("bias", DEFAULT_BIAS))
        _transition(
            b, "StandardTime", dict(DEFAULT_STANDARD_TIME, **(zone.get("standard_time") or {}))
        )
        _transition(
            b, "DaylightTime", dict(DEFAULT_DAYLIGHT_TIME, **(zone.get("daylight_time") or {}))
        )


@rule("meeting_time_zone")
def meeting_time_zone(b, mtz):
    with b.node(
        NS_EWS_TYPES,
        "MeetingTimeZone",
        attrs={"TimeZoneName": mtz.get("time_zone_name")},
    ):
        if mtz.get("base_offset"):
            b.types("BaseOffset", text_of(mtz["base_offset"]))


@rule("get_server_time_zones")
def get_server_time_zones(b, opts):
    """``{"full": True, "ids": ["W. Europe Standard Time"]}``"""
    with b.node(
        NS_EWS_MESSAGES,
        "GetServerTimeZones",
        attrs={"ReturnFullTimeZoneData": opts.get("full")},
    ):
        if opts.get("ids"):
            with b.node(NS_EWS_MESSAGES, "Ids"):
                for id_ in opts["ids"]:
                    b.types("Id", id_)
