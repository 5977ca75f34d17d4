#!/usr/bin/env python
"""
The element construction engine for EWS requests.

Every element of the request knows how to build itself: a construction
rule is registered under the snake_case name of the element in
``ewsbridge.soap.rules.BUILDERS``.  Elements without a dedicated rule are
built by the generic builder, ``EwsBuilder.build_xml``, from a payload
in the following format::

    {"top": {
        "xmlns_attribute": "t",
        "sub_elements": [
            {"elem1": {"text": "inside"}},
            {"elem2": {"text": "inside2"}},
        ],
        "id": "3232", "tx_dd": 23,
    }}

``text`` becomes the element text, ``sub_elements`` the children,
``xmlns_attribute`` forces the namespace prefix and every other key
becomes an attribute.

An EwsBuilder owns exactly one document and must not be reused for a
second request.
"""
import logging
from contextlib import contextmanager
from typing import Any
from typing import Callable
from typing import Dict
from typing import Iterator
from typing import List
from typing import Optional
from typing import Union

from lxml import etree
from lxml.etree import _Element

from ewsbridge.lib import error
from ewsbridge.lib.namespace import EWS_PREFIXES
from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.lib.namespace import NS_SOAP
from ewsbridge.lib.namespace import ns
from ewsbridge.lib.namespace import nsmap
from ewsbridge.lib.namespace import prefix_by_uri
from ewsbridge.lib.python_utilities import to_xml_text
from ewsbridge.lib.string_utils import camel_case
from ewsbridge.lib.string_utils import camel_case_attributes
from ewsbridge.soap.rules import BUILDERS
from ewsbridge.soap.rules import READ_ONLY
from ewsbridge.soap.types import Distinguished
from ewsbridge.soap.types import Many
from ewsbridge.soap.types import members
from ewsbridge.soap.types import shape_of
from ewsbridge.soap.values import extended_field_attributes
from ewsbridge.soap.values import require
from ewsbridge.soap.values import single_pair
from ewsbridge.soap.values import wire_enum

log = logging.getLogger(__name__)

HeaderCallback = Callable[["EwsBuilder"], Any]


class EwsBuilder:
    """
    Builds one SOAP request.  Construction rules append nodes beneath the
    current parent, ``node()`` is used to descend into a new element.

    >>> b = EwsBuilder()
    >>> b.build(body=lambda b: b.build_element("folder_shape", {"base_shape": "Default"}))
    """

    def __init__(self, default_ns: str = NS_EWS_MESSAGES) -> None:
        if default_ns not in EWS_PREFIXES:
            raise error.BadArgumentError("Unknown namespace prefix", key=default_ns)
        self.default_ns = default_ns
        self.doc: Optional[_Element] = None
        self.roots: List[_Element] = []
        self._parents: List[_Element] = []

    ## ------------------------------------------------------------------
    ## Node handling
    ## ------------------------------------------------------------------

    @property
    def parent(self) -> Optional[_Element]:
        if self._parents:
            return self._parents[-1]
        return None

    def parent_name(self) -> str:
        """Local name of the element currently being built into"""
        if self.parent is None:
            return ""
        return etree.QName(self.parent).localname

    def parent_prefix(self) -> Optional[str]:
        if self.parent is None:
            return None
        return prefix_by_uri.get(etree.QName(self.parent).namespace)

    def _resolve_prefix(self, prefix: Optional[str]) -> str:
        if prefix is None:
            prefix = self.parent_prefix()
            if prefix not in EWS_PREFIXES:
                prefix = self.default_ns
        if prefix not in nsmap:
            raise error.BadArgumentError("Unknown namespace prefix", key=prefix)
        return prefix

    def add(
        self,
        prefix: Optional[str],
        name: str,
        text: Any = None,
        attrs: Optional[Dict[str, Any]] = None,
    ) -> _Element:
        """
        Append a new element to the current parent.  ``prefix`` None
        means the namespace of the parent element.
        """
        tag = ns(self._resolve_prefix(prefix), name)
        if self.parent is None:
            node = etree.Element(tag, nsmap=nsmap)
            self.roots.append(node)
        else:
            node = etree.SubElement(self.parent, tag)
        for k, v in (attrs or {}).items():
            if v is not None:
                node.set(k, to_xml_text(v))
        if text is not None:
            node.text = to_xml_text(text)
        return node

    @contextmanager
    def node(
        self,
        prefix: Optional[str],
        name: str,
        text: Any = None,
        attrs: Optional[Dict[str, Any]] = None,
    ) -> Iterator[_Element]:
        elem = self.add(prefix, name, text, attrs)
        self._parents.append(elem)
        try:
            yield elem
        finally:
            self._parents.pop()

    def types(self, name: str, text: Any = None, attrs=None) -> _Element:
        return self.add(NS_EWS_TYPES, name, text, attrs)

    def messages(self, name: str, text: Any = None, attrs=None) -> _Element:
        return self.add(NS_EWS_MESSAGES, name, text, attrs)

    ## ------------------------------------------------------------------
    ## Envelope
    ## ------------------------------------------------------------------

    def build(
        self,
        header: Optional[HeaderCallback] = None,
        body: Optional[HeaderCallback] = None,
        server_version: Optional[str] = None,
        impersonation_type: Optional[str] = None,
        impersonation_mail: Optional[str] = None,
        time_zone_context: Optional[Dict[str, Any]] = None,
    ) -> _Element:
        """
        Build the SOAP envelope.  The three standard header directives
        are emitted first, in a fixed order, then ``header(self)`` and
        ``body(self)`` are called to fill in the rest.

        Args:
          server_version: like ``Exchange2010_SP2``.  ``None`` or ``"none"`` skips it
          impersonation_type: ``PrincipalName``, ``SID``, ``PrimarySmtpAddress`` or ``SmtpAddress``
          impersonation_mail: the value for the impersonation_type element
          time_zone_context: ``{"id": time_zone_identifier, "name": time_zone_name}``
        """
        if self.doc is not None or self.roots:
            raise error.EWSError("An EwsBuilder can only build one document")
        root = etree.Element(ns(NS_SOAP, "Envelope"), nsmap=nsmap)
        self.doc = root
        self._parents.append(root)
        try:
            with self.node(NS_SOAP, "Header"):
                self.set_version_header(server_version)
                self.set_impersonation(impersonation_type, impersonation_mail)
                self.set_time_zone_context_header(time_zone_context)
                if header is not None:
                    header(self)
            with self.node(NS_SOAP, "Body"):
                if body is not None:
                    body(self)
        finally:
            self._parents.pop()
        return root

    def to_string(self, pretty_print: bool = False) -> bytes:
        if self.doc is None:
            raise error.EWSError("Nothing has been built yet")
        return etree.tostring(
            self.doc, encoding="utf-8", xml_declaration=True, pretty_print=pretty_print
        )

    def set_version_header(self, version: Optional[str]) -> None:
        if version and version != "none":
            self.types("RequestServerVersion", attrs={"Version": version})

    def set_impersonation(self, type_: Optional[str], address: Optional[str]) -> None:
        if type_:
            with self.node(NS_EWS_TYPES, "ExchangeImpersonation"):
                with self.node(NS_EWS_TYPES, "ConnectingSID"):
                    self.types(wire_enum(type_, "impersonation_type"), address)

    def set_time_zone_context_header(self, time_zone_def) -> None:
        if time_zone_def:
            with self.node(NS_EWS_TYPES, "TimeZoneContext"):
                self.build_element("time_zone_definition", time_zone_def)

    ## ------------------------------------------------------------------
    ## Dispatch
    ## ------------------------------------------------------------------

    def build_xml(self, elems: Any) -> Union[_Element, List[_Element]]:
        """
        The generic builder.  A mapping builds one element, a sequence
        builds each member as a sibling.
        """
        shape = shape_of(elems)
        if isinstance(shape, Many):
            nodes = []
            for elem in shape.values:
                built = self.build_xml(elem)
                nodes.extend(built if isinstance(built, list) else [built])
            return nodes

        if len(elems) != 1:
            raise error.MalformedInputError("invalid input: %r" % (elems,))
        ((name, vals),) = elems.items()
        if vals is None:
            vals = {}
        if not isinstance(vals, dict):
            raise error.MalformedInputError(
                "expected a mapping, got %s" % type(vals).__name__, key=name
            )
        vals = dict(vals)
        sub_elements = vals.pop("sub_elements", None)
        text = vals.pop("text", None)
        xmlns_attribute = vals.pop("xmlns_attribute", None)
        try:
            attrs = camel_case_attributes(vals)
            wire_name = "String" if name == "string" else camel_case(name)
        except ValueError as e:
            raise error.MalformedInputError(str(e), key=name) from e

        with self.node(xmlns_attribute, wire_name, text, attrs) as node:
            if sub_elements is not None:
                self.build_xml(sub_elements)
        return node

    def build_element(self, name: str, payload: Any = None):
        """
        Build ``name`` with its dedicated construction rule, or with the
        generic builder when there is none.
        """
        rule = BUILDERS.get(name)
        if rule is not None:
            return rule(self, payload)
        if name in READ_ONLY:
            log.debug("%s is read-only, not building it", name)
            return None
        return self.build_xml({name: payload})

    def build_member(self, name: str, payload: Any = None):
        """
        Build a child of an item or folder.  Only elements with a
        construction rule are accepted here.
        """
        rule = BUILDERS.get(name)
        if rule is not None:
            return rule(self, payload)
        if name in READ_ONLY:
            log.debug("%s is read-only, not building it", name)
            return None
        raise error.BuilderNotImplementedError(
            "not implemented as a builder", key=name
        )

    def build_members(self, payload: Dict[str, Any], key: Optional[str] = None) -> None:
        if not isinstance(payload, dict):
            raise error.MalformedInputError(
                "expected a mapping, got %s" % type(payload).__name__, key=key
            )
        for k, v in payload.items():
            self.build_member(k, v)

    def dispatch_folder_id(self, fid: Dict[str, Any]) -> None:
        """
        A string id builds a FolderId, a Distinguished id (like
        ``Distinguished("inbox")``) builds a DistinguishedFolderId
        """
        folder_id = require(fid, "id", "folder_id")
        if isinstance(folder_id, Distinguished):
            self.build_element(
                "distinguished_folder_id",
                {
                    "id": folder_id,
                    "change_key": fid.get("change_key"),
                    "act_as": fid.get("act_as"),
                },
            )
        elif isinstance(folder_id, str):
            self.build_element(
                "folder_id", {"id": folder_id, "change_key": fid.get("change_key")}
            )
        else:
            raise error.BadArgumentError(
                "Bad argument given for a FolderId. %s" % type(folder_id).__name__,
                key="id",
            )

    def dispatch_item_id(self, iid: Dict[str, Any]) -> None:
        type_, item = single_pair(iid, "item id")
        if type_ not in ITEM_ID_TYPES:
            raise error.BadArgumentError("Bad ItemId type", key=type_)
        self.build_element(type_, item)

    def dispatch_update_type(self, update: Dict[str, Any]) -> None:
        type_, upd = single_pair(update, "update")
        if type_ not in UPDATE_TYPES:
            raise error.BadArgumentError("Bad Update type", key=type_)
        self.build_element(type_, upd)

    def dispatch_field_uri(self, uri: Dict[str, Any], prefix: str = NS_EWS_MESSAGES) -> None:
        """
        Build a FieldURI, IndexedFieldURI or ExtendedFieldURI.  The value
        may be a sequence, which builds one element per member.
        """
        type_, vals = single_pair(uri, "field uri")
        wire = FIELD_URI_TYPES.get(type_)
        if wire is None:
            raise error.BadArgumentError("Bad URI type", key=type_)
        if not isinstance(vals, (list, tuple)):
            vals = [vals]
        for val in vals:
            if wire == "FieldURI" and not isinstance(val, dict):
                self.add(prefix, "FieldURI", attrs={"FieldURI": val})
                continue
            if not isinstance(val, dict):
                raise error.MalformedInputError(
                    "%s expects a mapping, got %r" % (wire, val), key=type_
                )
            if wire == "ExtendedFieldURI":
                self.add(prefix, "ExtendedFieldURI", attrs=extended_field_attributes(val))
                continue
            uri = val.get("field_uRI") or require(val, "field_uri", wire)
            attrs = {"FieldURI": uri}
            if wire == "IndexedFieldURI":
                attrs["FieldIndex"] = require(val, "field_index", wire)
            self.add(prefix, wire, attrs=attrs)

    def dispatch_field_item(self, item: Dict[str, Any], prefix: Optional[str] = None) -> None:
        """Build the item of an update, forcing its namespace when a prefix is given"""
        if prefix:
            item = {
                k: dict(v or {}, xmlns_attribute=prefix) for k, v in item.items()
            }
        self.build_xml(item)


ITEM_ID_TYPES = ("item_id", "occurrence_item_id", "recurring_master_item_id")

UPDATE_TYPES = ("append_to_item_field", "set_item_field", "delete_item_field")

FIELD_URI_TYPES = {
    "field_uRI": "FieldURI",
    "field_uri": "FieldURI",
    "indexed_field_uRI": "IndexedFieldURI",
    "indexed_field_uri": "IndexedFieldURI",
    "extended_field_uRI": "ExtendedFieldURI",
    "extended_field_uri": "ExtendedFieldURI",
}


def build_soap_request(
    header: Optional[HeaderCallback] = None,
    body: Optional[HeaderCallback] = None,
    **opts,
) -> bytes:
    """
    Build a complete request with a fresh builder and return the UTF-8
    encoded XML.
    """
    builder = EwsBuilder()
    builder.build(header=header, body=body, **opts)
    return builder.to_string()


__all__ = [
    "EwsBuilder",
    "Distinguished",
    "build_soap_request",
    "members",
    "require",
]
