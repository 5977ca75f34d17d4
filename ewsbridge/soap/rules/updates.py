"""
UpdateItem changes.  Every update selects its kind with one of the keys
``append_to_item_field``, ``set_item_field`` or ``delete_item_field``
and carries exactly one field uri key::

    {"item_changes": [{
        "item_id": {"id": "AAMk...", "change_key": "CQAA..."},
        "updates": [
            {"set_item_field": {
                "field_uRI": {"field_uRI": "item:Subject"},
                "message": {"sub_elements": [{"subject": {"text": "New"}}]},
            }},
        ],
    }]}
"""
from ewsbridge.lib import error
from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.soap.rules import rule
from ewsbridge.soap.types import members
from ewsbridge.soap.values import require


@rule("item_changes")
def item_changes(b, changes):
    with b.node(NS_EWS_MESSAGES, "ItemChanges"):
        for change in members(changes, "item_changes"):
            item_change(b, change)


@rule("item_change")
def item_change(b, change):
    change = dict(change)
    ## the rest of the change is the item id
    updates_ = require(change, "updates", "ItemChange")
    change.pop("updates")
    with b.node(NS_EWS_TYPES, "ItemChange"):
        b.dispatch_item_id(change)
        updates(b, updates_)


@rule("updates")
def updates(b, updates):
    with b.node(NS_EWS_TYPES, "Updates"):
        for update in members(updates, "updates"):
            b.dispatch_update_type(update)


def _split_uri(upd, wire_name):
    uri = {k: v for k, v in upd.items() if "_uri" in k.lower()}
    if len(uri) != 1:
        raise error.BadArgumentError(
            "Bad argument given for %s, expected exactly one field uri" % wire_name
        )
    rest = {k: v for k, v in upd.items() if k not in uri}
    return uri, rest


@rule("append_to_item_field")
def append_to_item_field(b, upd):
    uri, item = _split_uri(upd, "AppendToItemField")
    with b.node(NS_EWS_TYPES, "AppendToItemField"):
        b.dispatch_field_uri(uri, NS_EWS_TYPES)
        b.dispatch_field_item(item)


@rule("set_item_field")
def set_item_field(b, upd):
    uri, item = _split_uri(upd, "SetItemField")
    with b.node(NS_EWS_TYPES, "SetItemField"):
        b.dispatch_field_uri(uri, NS_EWS_TYPES)
        b.dispatch_field_item(item, NS_EWS_TYPES)


@rule("delete_item_field")
def delete_item_field(b, upd):
    uri, _ = _split_uri(upd, "DeleteItemField")
    with b.node(NS_EWS_TYPES, "DeleteItemField"):
        b.dispatch_field_uri(uri, NS_EWS_TYPES)


@rule("return_new_item_ids")
def return_new_item_ids(b, retval):
    b.messages("ReturnNewItemIds", retval)
