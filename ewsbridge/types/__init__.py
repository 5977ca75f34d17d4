"""
Domain types wrapping fragments of a parsed response.

Every type has a table of key paths; an attribute listed in ``KEY_PATHS``
is looked up in the fragment with :func:`path_lookup` and, if listed in
``KEY_TYPES``, converted by the named method.  Missing values come back
as None.
"""
import logging
from typing import Any
from typing import Callable
from typing import Dict
from typing import List
from typing import Optional
from typing import Type

from dateutil import parser as date_parser

from ewsbridge.lib import error
from ewsbridge.lib.string_utils import camel_case
from ewsbridge.soap.document import first_matching
from ewsbridge.soap.document import path_lookup
from ewsbridge.soap.types import ABSENT

log = logging.getLogger(__name__)

## Registry of domain types, keyed by wire name
TYPES: Dict[str, Type["EwsType"]] = {}


def register(cls):
    if cls.__name__ in TYPES:
        raise ValueError("type %s registered twice" % cls.__name__)
    TYPES[cls.__name__] = cls
    return cls


class EwsType:
    KEY_PATHS: Dict[str, List[Any]] = {}
    KEY_TYPES: Dict[str, str] = {}

    def __init__(self, parent: Any, fragment: Any, type_name: Optional[str] = None) -> None:
        self.parent = parent
        self.fragment = fragment if fragment is not None else {}
        self.type_name = type_name or self.__class__.__name__

    def __getattr__(self, name: str) -> Any:
        paths = type(self).KEY_PATHS
        if name not in paths:
            raise AttributeError(
                "%r object has no attribute %r" % (type(self).__name__, name)
            )
        path = paths[name]
        if isinstance(self.fragment, (list, tuple)):
            ## children kept in document order, see EwsParser
            value = path_lookup(first_matching(self.fragment, path[0]), path[1:])
        else:
            value = path_lookup(self.fragment, path)
        if value is ABSENT:
            return None
        converter = type(self).KEY_TYPES.get(name)
        if converter:
            try:
                value = getattr(self, converter)(value)
            except (ValueError, OverflowError, TypeError, AttributeError):
                error.weirdness("%s.%s: cannot convert %r" % (self.type_name, name, value))
                return None
        return value

    def __repr__(self) -> str:
        return "%s(%r)" % (self.type_name, self.fragment)

    def _to_datetime(self, value: str):
        return date_parser.isoparse(value)

    def _to_int(self, value: str) -> int:
        return int(value)

    def _to_bool(self, value: str) -> bool:
        return value.lower() == "true"


def class_by_name(tag: str, default: Callable = None) -> Callable:
    """
    The registered domain type for a parsed tag like ``new_mail_event``,
    or ``default`` when there is none.
    """
    try:
        cls = TYPES.get(camel_case(tag))
    except ValueError:
        cls = None
    if cls is None:
        log.debug("no domain type for %s", tag)
        return default
    return cls


from ewsbridge.types import notification  # noqa: E402,F401
from ewsbridge.types.notification import Event  # noqa: E402
from ewsbridge.types.notification import Notification  # noqa: E402

__all__ = ["TYPES", "EwsType", "Event", "Notification", "class_by_name", "register"]
