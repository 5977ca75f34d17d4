"""
Folder, item and attachment identifiers.

Ids are given as mappings, ``{"id": "AAMk...", "change_key": "CQAA..."}``.
A folder id whose ``id`` is a ``Distinguished`` value builds a
DistinguishedFolderId.  Item id lists hold one-key mappings selecting the
kind of id: ``{"item_id": {...}}``, ``{"occurrence_item_id": {...}}`` or
``{"recurring_master_item_id": {...}}``.
"""
import re

from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.soap.rules import rule
from ewsbridge.soap.types import members
from ewsbridge.soap.values import require

_subscription = re.compile("subscription", re.IGNORECASE)


def _id_attributes(id_, element):
    return {
        "Id": require(id_, "id", element),
        "ChangeKey": id_.get("change_key"),
    }


def _subscription_aware_prefix(b):
    """Id lists inside a subscription request live in the types namespace"""
    if _subscription.search(b.parent_name()):
        return NS_EWS_TYPES
    return NS_EWS_MESSAGES


@rule("parent_folder_ids")
def parent_folder_ids(b, pfids):
    with b.node(NS_EWS_MESSAGES, "ParentFolderIds"):
        for pfid in members(pfids, "parent_folder_ids"):
            b.dispatch_folder_id(pfid)


@rule("parent_folder_id")
def parent_folder_id(b, pfid):
    with b.node(NS_EWS_MESSAGES, "ParentFolderId"):
        b.dispatch_folder_id(pfid)


@rule("folder_ids")
def folder_ids(b, fids):
    with b.node(_subscription_aware_prefix(b), "FolderIds"):
        for fid in members(fids, "folder_ids"):
            b.dispatch_folder_id(fid)


@rule("sync_folder_id")
def sync_folder_id(b, fid):
    with b.node(NS_EWS_MESSAGES, "SyncFolderId"):
        b.dispatch_folder_id(fid)


@rule("to_folder_id")
def to_folder_id(b, fid):
    with b.node(NS_EWS_MESSAGES, "ToFolderId"):
        b.dispatch_folder_id(fid)


@rule("saved_item_folder_id")
def saved_item_folder_id(b, fid):
    with b.node(NS_EWS_MESSAGES, "SavedItemFolderId"):
        b.dispatch_folder_id(fid)


@rule("distinguished_folder_id")
def distinguished_folder_id(b, dfid):
    """
    ``{"id": "inbox", "change_key": ..., "act_as": "user@example.com"}``,
    ``act_as`` adds the Mailbox of the folder owner.
    """
    if isinstance(dfid, str):
        dfid = {"id": dfid}
    with b.node(NS_EWS_TYPES, "DistinguishedFolderId", attrs=_id_attributes(dfid, "DistinguishedFolderId")):
        if dfid.get("act_as") is not None:
            b.build_element("mailbox", {"email_address": dfid["act_as"]})


@rule("folder_id")
def folder_id(b, fid):
    if isinstance(fid, str):
        fid = {"id": fid}
    b.types("FolderId", attrs=_id_attributes(fid, "FolderId"))


@rule("item_ids")
def item_ids(b, iids):
    with b.node(NS_EWS_MESSAGES, "ItemIds"):
        for iid in members(iids, "item_ids"):
            b.dispatch_item_id(iid)


@rule("item_id")
def item_id(b, id_):
    b.types("ItemId", attrs=_id_attributes(id_, "ItemId"))


@rule("parent_item_id")
def parent_item_id(b, id_):
    b.messages("ParentItemId", attrs=_id_attributes(id_, "ParentItemId"))


@rule("reference_item_id")
def reference_item_id(b, id_):
    b.types("ReferenceItemId", attrs=_id_attributes(id_, "ReferenceItemId"))


@rule("occurrence_item_id")
def occurrence_item_id(b, id_):
    b.types(
        "OccurrenceItemId",
        attrs={
            "RecurringMasterId": require(id_, "recurring_master_id", "OccurrenceItemId"),
            "ChangeKey": id_.get("change_key"),
            "InstanceIndex": require(id_, "instance_index", "OccurrenceItemId"),
        },
    )


@rule("recurring_master_item_id")
def recurring_master_item_id(b, id_):
    b.types(
        "RecurringMasterItemId",
        attrs={
            "OccurrenceId": require(id_, "occurrence_id", "RecurringMasterItemId"),
            "ChangeKey": id_.get("change_key"),
        },
    )


@rule("export_item_ids")
def export_item_ids(b, iids):
    with b.node(_subscription_aware_prefix(b), "ExportItems"):
        item_ids(b, iids)


@rule("attachment_ids")
def attachment_ids(b, aids):
    if isinstance(aids, str):
        aids = [aids]
    with b.node(NS_EWS_MESSAGES, "AttachmentIds"):
        for aid in members(aids, "attachment_ids"):
            attachment_id(b, aid)


@rule("attachment_id")
def attachment_id(b, aid):
    if isinstance(aid, dict):
        aid = require(aid, "id", "AttachmentId")
    b.types("AttachmentId", attrs={"Id": aid})
