"""
File and item attachments.  ``content`` given as bytes is base64 encoded,
a str is expected to be base64 already.
"""
import base64

from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.soap.rules import rule
from ewsbridge.soap.types import members
from ewsbridge.soap.values import require


def _content(fa):
    content = require(fa, "content", "FileAttachment")
    if isinstance(content, bytes):
        content = base64.b64encode(content).decode("ascii")
    return content


@rule("attachments")
def attachments(b, attachments):
    """``[{"file_attachment": {"name": "a.txt", "content": b"..."}}]``"""
    prefix = NS_EWS_MESSAGES if b.parent_name() == "CreateAttachment" else NS_EWS_TYPES
    with b.node(prefix, "Attachments"):
        for attachment in members(attachments, "attachments"):
            b.build_members(attachment, "attachments")


@rule("file_attachment")
def file_attachment(b, fa):
    with b.node(NS_EWS_TYPES, "FileAttachment"):
        b.types("Name", require(fa, "name", "FileAttachment"))
        b.types("Content", _content(fa))


@rule("inline_attachment")
def inline_attachment(b, fa):
    name = require(fa, "name", "FileAttachment")
    with b.node(NS_EWS_TYPES, "FileAttachment"):
        b.types("Name", name)
        b.types("ContentId", fa.get("content_id", name))
        b.types("IsInline", True)
        b.types("Content", _content(fa))


@rule("item_attachment")
def item_attachment(b, ia):
    with b.node(NS_EWS_TYPES, "ItemAttachment"):
        b.types("Name", require(ia, "name", "ItemAttachment"))
        with b.node(NS_EWS_TYPES, "Item"):
            b.build_element("item_id", require(ia, "item", "ItemAttachment"))
