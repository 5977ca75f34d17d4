"""
Response shapes, paging views and sort orders.
"""
from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.lib.string_utils import camel_case
from ewsbridge.soap.rules import rule
from ewsbridge.soap.types import members
from ewsbridge.soap.values import body_type as wire_body_type
from ewsbridge.soap.values import require
from ewsbridge.soap.values import wire_enum


@rule("folder_shape")
def folder_shape(b, folder_shape):
    """FolderShape: ``{"base_shape": "Default", "additional_properties": {...}}``"""
    with b.node(NS_EWS_MESSAGES, "FolderShape"):
        base_shape(b, require(folder_shape, "base_shape", "FolderShape"))
        if folder_shape.get("additional_properties"):
            additional_properties(b, folder_shape["additional_properties"])


@rule("item_shape")
def item_shape(b, item_shape):
    with b.node(NS_EWS_MESSAGES, "ItemShape"):
        base_shape(b, require(item_shape, "base_shape", "ItemShape"))
        if "include_mime_content" in item_shape:
            include_mime_content(b, item_shape["include_mime_content"])
        if item_shape.get("body_type"):
            body_type(b, item_shape["body_type"])
        if item_shape.get("additional_properties"):
            additional_properties(b, item_shape["additional_properties"])


@rule("base_shape")
def base_shape(b, base_shape):
    b.types("BaseShape", wire_enum(base_shape, "base_shape"))


@rule("include_mime_content")
def include_mime_content(b, include):
    b.types("IncludeMimeContent", str(include).lower())


@rule("body_type")
def body_type(b, value):
    b.types("BodyType", wire_body_type(value))


def _view_attributes(view):
    return {camel_case(k): str(v) for k, v in view.items()}


@rule("indexed_page_item_view")
def indexed_page_item_view(b, view):
    b.messages("IndexedPageItemView", attrs=_view_attributes(view))


@rule("calendar_view")
def calendar_view(b, view):
    b.messages("CalendarView", attrs=_view_attributes(view))


@rule("contacts_view")
def contacts_view(b, view):
    b.messages("ContactsView", attrs=_view_attributes(view))


@rule("sort_order")
def sort_order(b, sort_order):
    with b.node(NS_EWS_MESSAGES, "SortOrder"):
        for order in members(require(sort_order, "field_orders", "SortOrder")):
            field_order(b, order)


@rule("field_order")
def field_order(b, field_order):
    """``{"order": "Ascending", "field_uRI": "item:DateTimeReceived"}``"""
    field_order = dict(field_order)
    order = field_order.pop("order", None)
    with b.node(NS_EWS_TYPES, "FieldOrder", attrs={"Order": order}):
        for k, v in field_order.items():
            b.dispatch_field_uri({k: v}, NS_EWS_TYPES)


@rule("additional_properties")
def additional_properties(b, addprops):
    with b.node(NS_EWS_TYPES, "AdditionalProperties"):
        for k, v in addprops.items():
            b.dispatch_field_uri({k: v}, NS_EWS_TYPES)
