"""
Notifications delivered by GetEvents and GetStreamingEvents, and the
events inside them.
"""
from typing import List

from ewsbridge.soap.document import entries
from ewsbridge.types import EwsType
from ewsbridge.types import class_by_name
from ewsbridge.types import register

## Elements of a notification that are not events
NOTIFICATION_FIELDS = ("subscription_id", "previous_watermark", "more_events")


@register
class Notification(EwsType):
    """
    Information about a subscription and the events that have occurred.
    https://learn.microsoft.com/en-us/exchange/client-developer/web-service-reference/notification-ex15websvcsotherref
    """

    KEY_PATHS = {
        "subscription_id": ["subscription_id", "text"],
        "previous_watermark": ["previous_watermark", "text"],
        "more_events": ["more_events", "text"],
    }
    KEY_TYPES = {"more_events": "_to_bool"}

    def events(self) -> List["Event"]:
        if not hasattr(self, "_events"):
            self._events = [
                class_by_name(tag, Event)(self, fragment, tag)
                for tag, fragment in entries(self.fragment)
                if tag not in NOTIFICATION_FIELDS
            ]
        return self._events


class Event(EwsType):
    """An event of a type without a dedicated class"""

    KEY_PATHS = {
        "watermark": ["watermark", "text"],
        "time_stamp": ["time_stamp", "text"],
    }
    KEY_TYPES = {"time_stamp": "_to_datetime"}


_OBJECT_PATHS = {
    "item_id": ["item_id", "id"],
    "item_change_key": ["item_id", "change_key"],
    "folder_id": ["folder_id", "id"],
    "folder_change_key": ["folder_id", "change_key"],
    "parent_folder_id": ["parent_folder_id", "id"],
    "parent_folder_change_key": ["parent_folder_id", "change_key"],
}

_OLD_OBJECT_PATHS = {
    "old_item_id": ["old_item_id", "id"],
    "old_folder_id": ["old_folder_id", "id"],
    "old_parent_folder_id": ["old_parent_folder_id", "id"],
}


class ObjectEvent(Event):
    """An event about one item or folder"""

    KEY_PATHS = dict(Event.KEY_PATHS, **_OBJECT_PATHS)

    @property
    def is_folder_event(self) -> bool:
        return self.folder_id is not None


@register
class CreatedEvent(ObjectEvent):
    pass


@register
class DeletedEvent(ObjectEvent):
    pass


@register
class NewMailEvent(ObjectEvent):
    pass


@register
class FreeBusyChangedEvent(ObjectEvent):
    pass


@register
class ModifiedEvent(ObjectEvent):
    KEY_PATHS = dict(ObjectEvent.KEY_PATHS, unread_count=["unread_count", "text"])
    KEY_TYPES = dict(ObjectEvent.KEY_TYPES, unread_count="_to_int")


@register
class CopiedEvent(ObjectEvent):
    KEY_PATHS = dict(ObjectEvent.KEY_PATHS, **_OLD_OBJECT_PATHS)


@register
class MovedEvent(ObjectEvent):
    KEY_PATHS = dict(ObjectEvent.KEY_PATHS, **_OLD_OBJECT_PATHS)


@register
class StatusEvent(Event):
    """Sent on a subscription when nothing happened, keeps it alive"""

    pass
