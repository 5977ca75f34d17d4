"""
Turns a raw SOAP response into the nested mappings the decoders work on.
"""
import logging
from typing import Any
from typing import Dict
from typing import Union

from lxml import etree
from lxml.etree import _Element

from ewsbridge.lib import error
from ewsbridge.lib.python_utilities import to_wire
from ewsbridge.lib.string_utils import ruby_case
from ewsbridge.soap.document import OrderedElement

log = logging.getLogger(__name__)


def _snake(localname: str) -> str:
    ## XML names may contain dashes and dots, python identifiers may not
    return ruby_case(localname.replace("-", "_").replace(".", "_"))


class EwsParser:
    """
    ``EwsParser(xml).parse()`` gives ``{"envelope": {"header": ..., "body": ...}}``.

    Every element becomes a mapping holding its attributes and child
    elements under their snake_case local names, plus its character data
    under ``text`` if there is any.  An element name occurring more than
    once among siblings maps to a list, in document order.

    When repeated names are mixed with other names, like NewMailEvent,
    ModifiedEvent, NewMailEvent in a Notification, the element becomes a
    :class:`OrderedElement` of single-key mappings instead, attributes and
    text first, then the children in document order.
    """

    def __init__(self, xml: Union[str, bytes], huge_tree: bool = False) -> None:
        self.xml = to_wire(xml)
        self.huge_tree = huge_tree

    def parse(self) -> Dict[str, Any]:
        if not self.xml:
            raise error.SoapResponseError("empty response")
        try:
            root = etree.XML(
                self.xml,
                parser=etree.XMLParser(remove_blank_text=True, huge_tree=self.huge_tree),
            )
        except etree.XMLSyntaxError as e:
            log.debug("unparseable response: %r", self.xml, exc_info=True)
            raise error.SoapResponseError("Response is not XML: %s" % e) from e
        name = self._name(root)
        if name != "envelope":
            raise error.SoapResponseError("Expected a SOAP envelope, got %s" % name)
        envelope = self._element(root)
        error.assert_("body" in envelope)
        return {name: envelope}

    def _name(self, element: _Element) -> str:
        return _snake(etree.QName(element).localname)

    def _element(self, element: _Element) -> Union[Dict[str, Any], OrderedElement]:
        fields = [
            (_snake(etree.QName(key).localname), value)
            for key, value in element.attrib.items()
        ]
        if element.text is not None and element.text.strip():
            fields.append(("text", element.text))
        children = [
            (self._name(child), self._element(child))
            for child in element
            ## comments and processing instructions
            if isinstance(child.tag, str)
        ]
        names = set(name for name, _ in children)
        if 1 < len(names) < len(children):
            ## repeated names mixed with others, grouping would lose the order
            return OrderedElement({name: value} for name, value in fields + children)

        node: Dict[str, Any] = dict(fields)
        for name, value in children:
            if name not in node:
                node[name] = value
            elif type(node[name]) is list:
                node[name].append(value)
            else:
                node[name] = [node[name], value]
        return node
