"""
Navigation in a parsed EWS response.

A parsed document is a tree of mappings and lists, as delivered by
:class:`ewsbridge.soap.parser.EwsParser`.  Responses are irregular: the
same logical field may sit at different depths depending on the
operation, and an element occurring once comes as a mapping while a
repeated element comes as a list.  Nothing in here raises on a missing
key, a miss is reported as :data:`ABSENT` instead.
"""
import logging
from collections.abc import Mapping
from typing import Any
from typing import Iterator
from typing import List
from typing import Sequence
from typing import Tuple

from ewsbridge.soap.types import ABSENT

log = logging.getLogger(__name__)


class OrderedElement(list):
    """
    One element given as a list of single-key mappings, its children in
    document order.  Unlike a plain list under a key, this is not a
    repeated element.
    """

    pass


def _repeated(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and not isinstance(value, OrderedElement)


def path_lookup(root: Any, keys: Sequence[Any], default: Any = ABSENT) -> Any:
    """
    Follow ``keys`` from ``root``, one level at a time.  String keys index
    mappings and ordered elements, integer keys index lists.  Returns
    ``default`` as soon as a level does not hold the next key.
    """
    node = root
    for key in keys:
        if isinstance(key, int) and not isinstance(key, bool):
            if isinstance(node, (list, tuple)) and -len(node) <= key < len(node):
                node = node[key]
                continue
            return default
        if isinstance(node, Mapping) and key in node:
            node = node[key]
        elif isinstance(node, OrderedElement):
            node = first_matching(node, key)
            if node is ABSENT:
                return default
        else:
            return default
    return node


def first_matching(collection: Any, key: Any) -> Any:
    """
    The value under ``key`` in the first mapping of ``collection`` that
    has it.  A lone mapping counts as a collection of one.
    """
    if isinstance(collection, Mapping):
        collection = [collection]
    elif not isinstance(collection, (list, tuple)):
        return ABSENT
    for candidate in collection:
        if isinstance(candidate, Mapping) and key in candidate:
            return candidate[key]
    return ABSENT


def as_list(value: Any) -> List[Any]:
    """A repeated element as a list, whether it occurred once or more"""
    if value is ABSENT or value is None:
        return []
    if _repeated(value):
        return list(value)
    return [value]


def entries(node: Any) -> Iterator[Tuple[str, Any]]:
    """
    Yield ``(tag, fragment)`` for every child element of ``node``, in
    document order as far as the parsed form keeps it.  Both the mapping
    form (``{"a": x, "b": [y, z]}``) and the list-of-single-key-mappings
    form (``[{"a": x}, {"b": y}, {"b": z}]``) are accepted; repeated
    elements yield one pair per occurrence.
    """
    if isinstance(node, Mapping):
        for tag, value in node.items():
            if _repeated(value):
                for member in value:
                    yield tag, member
            else:
                yield tag, value
    elif isinstance(node, (list, tuple)):
        for member in node:
            if isinstance(member, Mapping):
                yield from entries(member)
            else:
                log.debug("skipping non-element member %r", member)


def first_entry(node: Any) -> Tuple[Any, Any]:
    """The first ``(tag, fragment)`` of ``node``, or ``(ABSENT, ABSENT)``"""
    for pair in entries(node):
        return pair
    return ABSENT, ABSENT


def text_at(root: Any, keys: Sequence[Any]) -> Any:
    """The ``text`` of the element found at ``keys``, or None"""
    value = path_lookup(root, list(keys) + ["text"])
    if value is ABSENT:
        return None
    return value


class EwsResponseDocument:
    """
    Structural accessors over a whole parsed SOAP envelope.  These are
    plain projections: a document without an envelope, header or body is
    malformed, and a ``KeyError`` is raised for it.
    """

    def __init__(self, resp: Mapping) -> None:
        self.resp = resp

    @property
    def envelope(self) -> Any:
        return self.resp["envelope"]

    @property
    def header(self) -> Any:
        return self.envelope["header"]

    @property
    def body(self) -> Any:
        return self.envelope["body"]

    @property
    def response(self) -> Any:
        return self.body

    def response_entry(self) -> Tuple[Any, Any]:
        """The operation response element of the body, as ``(tag, fragment)``"""
        return first_entry(self.body)
