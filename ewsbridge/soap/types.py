"""
Small value types shared by the request and the response side.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Sequence
from typing import Union

from ewsbridge.lib import error


class _Absent:
    """
    Marker for a navigational miss in a parsed document.  It is falsy and
    distinct from None, {} and "", which are all present values.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


ABSENT = _Absent()


class ResponseClass(Enum):
    """The ResponseClass attribute of an EWS response message."""

    SUCCESS = "Success"
    WARNING = "Warning"
    ERROR = "Error"

    @classmethod
    def from_wire(cls, value: Any) -> Optional["ResponseClass"]:
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class Single:
    """A payload given as one mapping."""

    value: Dict[str, Any]

    def members(self) -> List[Dict[str, Any]]:
        return [self.value]


@dataclass(frozen=True)
class Many:
    """A payload given as a sequence of mappings."""

    values: Sequence[Any]

    def members(self) -> List[Any]:
        return list(self.values)


Payload = Union[Single, Many]


def shape_of(payload: Any, key: Optional[str] = None) -> Payload:
    """
    Classify a payload as Single or Many.  Anything that is neither a
    mapping nor a sequence is malformed input.
    """
    if isinstance(payload, (Single, Many)):
        return payload
    if isinstance(payload, dict):
        return Single(payload)
    if isinstance(payload, (list, tuple)):
        return Many(payload)
    raise error.MalformedInputError(
        "Unsupported type: %s" % type(payload).__name__, key=key
    )


def members(payload: Any, key: Optional[str] = None) -> List[Any]:
    return shape_of(payload, key).members()


class Distinguished(str):
    """
    A well known folder name, like ``inbox`` or ``calendar``.  Folder ids
    given as Distinguished build a DistinguishedFolderId, plain strings
    build a FolderId.
    """

    def __repr__(self) -> str:
        return "Distinguished(%s)" % str.__repr__(self)
