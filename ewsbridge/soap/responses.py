"""
Decoding of EWS responses into outcomes.

An EWS response body holds one operation response element, which holds
a ``ResponseMessages`` collection with one message per processed item or
folder.  The wire tag of each message (``FindFolderResponseMessage``,
``GetStreamingEventsResponseMessage``, ...) selects the class decoding
it, through the :data:`RESPONSE_MESSAGE_TYPES` registry; tags without a
dedicated class are decoded by the generic :class:`ResponseMessage`.

Decoding is lenient.  A message that lacks an expected element yields
None from the accessor instead of raising, as new server versions
regularly add elements and message kinds.
"""
import logging
from collections.abc import Mapping
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Type

from ewsbridge import types as domain_types
from ewsbridge.lib import error
from ewsbridge.lib.string_utils import camel_case
from ewsbridge.soap.document import as_list
from ewsbridge.soap.document import entries
from ewsbridge.soap.document import EwsResponseDocument
from ewsbridge.soap.document import first_entry
from ewsbridge.soap.document import first_matching
from ewsbridge.soap.document import OrderedElement
from ewsbridge.soap.document import path_lookup
from ewsbridge.soap.document import text_at
from ewsbridge.soap.types import ABSENT
from ewsbridge.soap.types import ResponseClass

log = logging.getLogger(__name__)


class ResponseMessage:
    """
    One outcome, built from ``{tag: fragment}``.

    The fragment is the parsed message element, like
    ``{"response_class": "Error", "response_code": {"text": "ErrorItemNotFound"},
    "message_text": {"text": "..."}}``.
    """

    def __init__(self, message: Mapping) -> None:
        self._message = message
        self.type, self.fragment = first_entry(message)
        if not isinstance(self.fragment, (Mapping, OrderedElement)):
            self.fragment = {}

    def __repr__(self) -> str:
        return "%s(%s, %s)" % (self.__class__.__name__, self.type, self.response_class)

    @property
    def response_class(self) -> Optional[str]:
        value = path_lookup(self.fragment, ["response_class"], None)
        if isinstance(value, Mapping):
            value = value.get("text")
        return value

    @property
    def response_code(self) -> Optional[str]:
        return text_at(self.fragment, ["response_code"])

    @property
    def message_text(self) -> Optional[str]:
        return text_at(self.fragment, ["message_text"])

    def status(self) -> Optional[ResponseClass]:
        return ResponseClass.from_wire(self.response_class)

    def code(self) -> Optional[str]:
        return self.response_code

    def message(self) -> Optional[str]:
        return self.message_text

    def success(self) -> bool:
        return self.status() is ResponseClass.SUCCESS

    def root_folder(self) -> Any:
        return path_lookup(self.fragment, ["root_folder"], None)

    def folders(self) -> List[Dict[str, Any]]:
        """The folders of the message as ``{tag: fragment}`` mappings"""
        node = self._below_root_folder("folders")
        return [{tag: fragment} for tag, fragment in entries(node)]

    def items(self) -> List[Dict[str, Any]]:
        """The items of the message as ``{tag: fragment}`` mappings"""
        node = self._below_root_folder("items")
        return [{tag: fragment} for tag, fragment in entries(node)]

    def _below_root_folder(self, key: str) -> Any:
        ## FindFolder and FindItem put their results below RootFolder
        node = path_lookup(self.fragment, [key])
        if node is ABSENT:
            node = path_lookup(self.fragment, ["root_folder", key])
        return node


class GetStreamingEventsResponseMessage(ResponseMessage):
    def connection_status(self) -> Optional[str]:
        return text_at(self.fragment, ["connection_status"])

    def notifications(self) -> list:
        if not hasattr(self, "_notifications"):
            node = path_lookup(self.fragment, ["notifications"])
            self._notifications = [
                domain_types.class_by_name(tag, domain_types.Event)(self, fragment, tag)
                for tag, fragment in entries(node)
            ]
        return self._notifications


class GetEventsResponseMessage(ResponseMessage):
    def notification(self) -> Optional[domain_types.Notification]:
        node = path_lookup(self.fragment, ["notification"])
        if node is ABSENT:
            return None
        return domain_types.Notification(self, node)


class SubscribeResponseMessage(ResponseMessage):
    def subscription_id(self) -> Optional[str]:
        return text_at(self.fragment, ["subscription_id"])

    def watermark(self) -> Optional[str]:
        return text_at(self.fragment, ["watermark"])


class SyncFolderItemsResponseMessage(ResponseMessage):
    def sync_state(self) -> Optional[str]:
        return text_at(self.fragment, ["sync_state"])

    def includes_last_item_in_range(self) -> bool:
        value = text_at(self.fragment, ["includes_last_item_in_range"])
        return value is not None and value.lower() == "true"

    def changes(self) -> List[Dict[str, Any]]:
        """``create``/``update``/``delete``/``read_flag_change`` entries, in order"""
        node = path_lookup(self.fragment, ["changes"])
        return [{tag: fragment} for tag, fragment in entries(node)]


class GetServerTimeZonesResponseMessage(ResponseMessage):
    def time_zone_definitions(self) -> List[Any]:
        return as_list(
            path_lookup(self.fragment, ["time_zone_definitions", "time_zone_definition"])
        )


## Outcome registry, keyed by wire tag.  Anything else is a ResponseMessage.
RESPONSE_MESSAGE_TYPES: Dict[str, Type[ResponseMessage]] = {
    cls.__name__: cls
    for cls in (
        GetStreamingEventsResponseMessage,
        GetEventsResponseMessage,
        SubscribeResponseMessage,
        SyncFolderItemsResponseMessage,
        GetServerTimeZonesResponseMessage,
    )
}


def class_by_name(tag: Any) -> Type[ResponseMessage]:
    """The outcome class for a parsed message tag like ``find_folder_response_message``"""
    try:
        cls = RESPONSE_MESSAGE_TYPES.get(camel_case(tag))
    except ValueError:
        cls = None
    if cls is None:
        log.debug("no dedicated response message class for %s", tag)
        return ResponseMessage
    return cls


class EwsResponse(EwsResponseDocument):
    """A whole response, decoded into one outcome per response message"""

    _response_messages: Optional[List[ResponseMessage]] = None

    def response_messages(self) -> List[ResponseMessage]:
        if self._response_messages is None:
            _, response = self.response_entry()
            collection = path_lookup(response, ["response_messages"])
            self._response_messages = [
                class_by_name(tag)({tag: fragment})
                for tag, fragment in entries(collection)
            ]
        return self._response_messages


class EwsSoapResponse(EwsResponseDocument):
    """
    A response where only one outcome matters.  ``status()``, ``code()``,
    ``message()`` and ``success()`` are read from it.
    """

    def response_messages(self) -> Any:
        _, response = self.response_entry()
        return path_lookup(response, ["response_messages"])

    def response_message(self) -> Any:
        _, message = first_entry(self.response_messages())
        return message

    def outcome(self) -> ResponseMessage:
        message = self.response_message()
        return ResponseMessage({"response_message": message})

    @property
    def response_class(self) -> Optional[str]:
        return self.outcome().response_class

    @property
    def response_code(self) -> Optional[str]:
        return self.outcome().response_code

    @property
    def message_text(self) -> Optional[str]:
        return self.outcome().message_text

    def status(self) -> Optional[ResponseClass]:
        return self.outcome().status()

    def code(self) -> Optional[str]:
        return self.outcome().code()

    def message(self) -> Optional[str]:
        return self.outcome().message()

    def success(self) -> bool:
        return self.outcome().success()


class EwsSoapRoomlistResponse(EwsSoapResponse):
    """
    GetRoomLists carries no ResponseMessages collection, the response
    element itself has the ResponseClass and ResponseCode.
    """

    def response_messages(self) -> Any:
        tag, response = self.response_entry()
        if tag is ABSENT:
            return {}
        return {tag: response}

    def room_lists(self) -> List[Any]:
        """The room list addresses, each a mapping with ``name`` and ``email_address``"""
        _, response = self.response_entry()
        return as_list(path_lookup(response, ["room_lists", "address"]))


class EwsSoapFreeBusyResponse(EwsSoapResponse):
    """The answer to GetUserAvailability with a free/busy view"""

    MAILBOX_RESULT_KEYS = frozenset(("response_message", "free_busy_view"))

    def free_busy_responses(self) -> List[Any]:
        """One entry per requested mailbox"""
        _, response = self.response_entry()
        value = path_lookup(response, ["free_busy_response_array", "free_busy_response"])
        if (
            isinstance(value, (list, tuple))
            and value
            and all(
                isinstance(member, Mapping)
                and len(member) == 1
                and set(member) <= self.MAILBOX_RESULT_KEYS
                for member in value
            )
        ):
            ## a single mailbox result in list form
            return [value]
        return as_list(value)

    def get_user_availability_response(self) -> Any:
        responses = self.free_busy_responses()
        return responses[0] if responses else {}

    def free_busy_view(self) -> Any:
        return first_matching(self.get_user_availability_response(), "free_busy_view")

    def response_message(self) -> Any:
        return first_matching(self.get_user_availability_response(), "response_message")

    def calendar_event_array(self) -> List[Any]:
        events = first_matching(self.free_busy_view(), "calendar_event_array")
        if isinstance(events, Mapping):
            return as_list(events.get("calendar_event"))
        if isinstance(events, (list, tuple)):
            return [fragment for _, fragment in entries(events)]
        if events is not ABSENT:
            error.weirdness("unexpected calendar event array", events)
        return []

    def working_hours(self) -> Any:
        value = first_matching(self.free_busy_view(), "working_hours")
        return None if value is ABSENT else value


class EwsSoapAvailabilityResponse(EwsSoapResponse):
    """
    Responses like GetUserOofSettings, where a single ResponseMessage sits
    directly in the operation response.
    """

    def response_messages(self) -> Any:
        _, response = self.response_entry()
        return {"response_message": path_lookup(response, ["response_message"])}

    def oof_settings(self) -> Any:
        _, response = self.response_entry()
        value = path_lookup(response, ["oof_settings"])
        return None if value is ABSENT else value


__all__ = [
    "RESPONSE_MESSAGE_TYPES",
    "EwsResponse",
    "EwsSoapAvailabilityResponse",
    "EwsSoapFreeBusyResponse",
    "EwsSoapResponse",
    "EwsSoapRoomlistResponse",
    "GetEventsResponseMessage",
    "GetServerTimeZonesResponseMessage",
    "GetStreamingEventsResponseMessage",
    "ResponseMessage",
    "SubscribeResponseMessage",
    "SyncFolderItemsResponseMessage",
    "class_by_name",
]
