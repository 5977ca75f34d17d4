"""
Event subscriptions (pull, push and streaming) and folder synchronization.
"""
from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.soap.rules import rule
from ewsbridge.soap.rules import text_of
from ewsbridge.soap.types import members
from ewsbridge.soap.values import wire_enum


@rule("event_types")
def event_types(b, evtypes):
    with b.node(NS_EWS_TYPES, "EventTypes"):
        for et in members(evtypes, "event_types"):
            b.types("EventType", wire_enum(et, "event_types"))


@rule("watermark")
def watermark(b, wmark):
    b.types("Watermark", text_of(wmark))


@rule("timeout")
def timeout(b, tout):
    b.types("Timeout", tout)


@rule("status_frequency")
def status_frequency(b, freq):
    b.types("StatusFrequency", freq)


@rule("url", "uRL")
def url(b, url):
    b.types("URL", url)


@rule("connection_timeout")
def connection_timeout(b, ctout):
    b.messages("ConnectionTimeout", ctout)


@rule("subscription_ids")
def subscription_ids(b, subids):
    with b.node(NS_EWS_MESSAGES, "SubscriptionIds"):
        for subid in members(subids, "subscription_ids"):
            b.types("SubscriptionId", subid)


@rule("subscription_id")
def subscription_id(b, subid):
    b.messages("SubscriptionId", text_of(subid))


def _subscribe_all(subopts):
    return "true" if subopts.get("subscribe_to_all_folders") else "false"


@rule("pull_subscription_request")
def pull_subscription_request(b, subopts):
    with b.node(
        NS_EWS_MESSAGES,
        "PullSubscriptionRequest",
        attrs={"SubscribeToAllFolders": _subscribe_all(subopts)},
    ):
        if subopts.get("folder_ids"):
            b.build_element("folder_ids", subopts["folder_ids"])
        if subopts.get("event_types"):
            event_types(b, subopts["event_types"])
        if subopts.get("watermark"):
            watermark(b, subopts["watermark"])
        if subopts.get("timeout"):
            timeout(b, subopts["timeout"])


@rule("push_subscription_request")
def push_subscription_request(b, subopts):
    with b.node(
        NS_EWS_MESSAGES,
        "PushSubscriptionRequest",
        attrs={"SubscribeToAllFolders": _subscribe_all(subopts)},
    ):
        if subopts.get("folder_ids"):
            b.build_element("folder_ids", subopts["folder_ids"])
        if subopts.get("event_types"):
            event_types(b, subopts["event_types"])
        if subopts.get("watermark"):
            watermark(b, subopts["watermark"])
        if subopts.get("status_frequency"):
            status_frequency(b, subopts["status_frequency"])
        push_url = subopts.get("url") or subopts.get("uRL")
        if push_url:
            url(b, push_url)


@rule("streaming_subscription_request")
def streaming_subscription_request(b, subopts):
    with b.node(
        NS_EWS_MESSAGES,
        "StreamingSubscriptionRequest",
        attrs={"SubscribeToAllFolders": _subscribe_all(subopts)},
    ):
        if subopts.get("folder_ids"):
            b.build_element("folder_ids", subopts["folder_ids"])
        if subopts.get("event_types"):
            event_types(b, subopts["event_types"])


@rule("sync_state")
def sync_state(b, syncstate):
    b.messages("SyncState", text_of(syncstate))


@rule("ignore")
def ignore(b, item_ids):
    with b.node(NS_EWS_MESSAGES, "Ignore"):
        for iid in members(item_ids, "ignore"):
            b.build_element("item_id", iid)


@rule("max_changes_returned")
def max_changes_returned(b, cnum):
    b.messages("MaxChangesReturned", cnum)


@rule("sync_scope")
def sync_scope(b, scope):
    b.messages("SyncScope", scope)
