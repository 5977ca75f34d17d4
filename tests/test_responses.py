"""
Tests for the response message resolver, the typed facades and the
notification types.
"""
from datetime import datetime
from datetime import timezone

import pytest

from ewsbridge.soap.responses import RESPONSE_MESSAGE_TYPES
from ewsbridge.soap.responses import EwsResponse
from ewsbridge.soap.responses import EwsSoapAvailabilityResponse
from ewsbridge.soap.responses import EwsSoapFreeBusyResponse
from ewsbridge.soap.responses import EwsSoapResponse
from ewsbridge.soap.responses import EwsSoapRoomlistResponse
from ewsbridge.soap.responses import GetEventsResponseMessage
from ewsbridge.soap.responses import GetStreamingEventsResponseMessage
from ewsbridge.soap.responses import ResponseMessage
from ewsbridge.soap.responses import SubscribeResponseMessage
from ewsbridge.soap.responses import SyncFolderItemsResponseMessage
from ewsbridge.soap.responses import class_by_name
from ewsbridge.soap.types import ResponseClass
from ewsbridge.types import Event
from ewsbridge.types import Notification
from ewsbridge.types.notification import ModifiedEvent
from ewsbridge.types.notification import MovedEvent
from ewsbridge.types.notification import NewMailEvent
from ewsbridge.types.notification import StatusEvent

ERROR_MESSAGE = {
    "response_class": "Error",
    "message_text": {"text": "Id is malformed."},
    "response_code": {"text": "ErrorInvalidIdMalformed"},
    "descriptive_link_key": {"text": "0"},
}

SUCCESS_MESSAGE = {
    "response_class": "Success",
    "response_code": {"text": "NoError"},
    "root_folder": {"total_items_in_view": "1", "includes_last_item_in_range": "true"},
    "folders": {
        "folder": {
            "folder_id": {"id": "AQAnAH", "change_key": "AQAAABY"},
            "display_name": {"text": "TestFolder"},
            "total_count": {"text": "0"},
            "child_folder_count": {"text": "0"},
            "unread_count": {"text": "0"},
        }
    },
}


def envelope(body, header=None):
    return {"envelope": {"header": header or {}, "body": body}}


def find_folder_body(*messages):
    msgs = list(messages)
    return {
        "find_folder_response": {
            "response_messages": {
                "find_folder_response_message": msgs[0] if len(msgs) == 1 else msgs
            }
        }
    }


class TestResponseMessage:
    def test_error_fixture(self):
        rm = ResponseMessage({"find_folder_response_message": ERROR_MESSAGE})
        assert rm.success() is False
        assert rm.status() is ResponseClass.ERROR
        assert rm.code() == "ErrorInvalidIdMalformed"
        assert rm.message() == "Id is malformed."
        assert rm.response_class == "Error"
        assert rm.type == "find_folder_response_message"
        assert rm.fragment is ERROR_MESSAGE

    def test_success_fixture(self):
        rm = ResponseMessage({"find_folder_response_message": SUCCESS_MESSAGE})
        assert rm.success()
        assert rm.code() == "NoError"
        assert rm.message() is None
        assert rm.root_folder()["total_items_in_view"] == "1"
        folders = rm.folders()
        assert len(folders) == 1
        assert folders[0]["folder"]["display_name"]["text"] == "TestFolder"
        assert rm.items() == []

    def test_folders_below_root_folder(self):
        fragment = {
            "response_class": "Success",
            "root_folder": {"folders": {"folder": [{"display_name": {"text": "A"}}, {}]}},
        }
        rm = ResponseMessage({"find_folder_response_message": fragment})
        assert len(rm.folders()) == 2

    def test_unknown_response_class(self):
        rm = ResponseMessage({"x_response_message": {"response_class": "Bogus"}})
        assert rm.status() is None
        assert not rm.success()

    def test_garbage_fragment(self):
        rm = ResponseMessage({"x_response_message": "not a mapping"})
        assert rm.code() is None
        assert rm.message() is None
        assert not rm.success()


class TestResolver:
    def test_unregistered_tag_gives_generic_outcome(self):
        resp = EwsResponse(envelope(find_folder_body(SUCCESS_MESSAGE)))
        messages = resp.response_messages()
        assert len(messages) == 1
        assert type(messages[0]) is ResponseMessage
        assert messages[0].fragment is SUCCESS_MESSAGE

    def test_registered_tag(self):
        fragment = {
            "response_class": "Success",
            "response_code": {"text": "NoError"},
            "subscription_id": {"text": "sub-1"},
            "watermark": {"text": "wm-1"},
        }
        body = {"subscribe_response": {"response_messages": {"subscribe_response_message": fragment}}}
        messages = EwsResponse(envelope(body)).response_messages()
        assert isinstance(messages[0], SubscribeResponseMessage)
        assert messages[0].fragment is fragment
        assert messages[0].subscription_id() == "sub-1"
        assert messages[0].watermark() == "wm-1"

    def test_order_is_kept(self):
        resp = EwsResponse(envelope(find_folder_body(ERROR_MESSAGE, SUCCESS_MESSAGE)))
        assert [m.success() for m in resp.response_messages()] == [False, True]

    def test_list_form_body(self):
        ## a body as a list of one-key mappings
        body = [
            {
                "get_item_response": {
                    "response_messages": [
                        {"get_item_response_message": SUCCESS_MESSAGE},
                        {"get_item_response_message": ERROR_MESSAGE},
                    ]
                }
            }
        ]
        messages = EwsResponse(envelope(body)).response_messages()
        assert [m.code() for m in messages] == ["NoError", "ErrorInvalidIdMalformed"]

    def test_no_response_messages(self):
        assert EwsResponse(envelope({})).response_messages() == []
        assert EwsResponse(envelope({"x_response": {}})).response_messages() == []

    def test_cached(self):
        resp = EwsResponse(envelope(find_folder_body(SUCCESS_MESSAGE)))
        assert resp.response_messages() is resp.response_messages()

    def test_class_by_name(self):
        assert class_by_name("get_events_response_message") is GetEventsResponseMessage
        assert class_by_name("GetEventsResponseMessage") is GetEventsResponseMessage
        assert class_by_name("find_item_response_message") is ResponseMessage
        assert class_by_name("not-an-identifier") is ResponseMessage
        assert set(RESPONSE_MESSAGE_TYPES) == {
            "GetStreamingEventsResponseMessage",
            "GetEventsResponseMessage",
            "SubscribeResponseMessage",
            "SyncFolderItemsResponseMessage",
            "GetServerTimeZonesResponseMessage",
        }


class TestFacades:
    def test_soap_response(self):
        resp = EwsSoapResponse(envelope(find_folder_body(ERROR_MESSAGE)))
        assert resp.success() is False
        assert resp.status() is ResponseClass.ERROR
        assert resp.code() == "ErrorInvalidIdMalformed"
        assert resp.message() == "Id is malformed."
        assert resp.response_code == "ErrorInvalidIdMalformed"
        assert resp.message_text == "Id is malformed."

    def test_soap_response_without_messages(self):
        resp = EwsSoapResponse(envelope({"create_item_response": {}}))
        assert resp.success() is False
        assert resp.code() is None
        assert resp.message() is None

    def test_room_lists(self):
        body = {
            "get_room_lists_response": {
                "response_class": "Success",
                "response_code": {"text": "NoError"},
                "room_lists": {
                    "address": {
                        "name": {"text": "Building 1"},
                        "email_address": {"text": "b1@example.com"},
                    }
                },
            }
        }
        resp = EwsSoapRoomlistResponse(envelope(body))
        assert resp.success()
        assert resp.code() == "NoError"
        assert resp.room_lists() == [
            {"name": {"text": "Building 1"}, "email_address": {"text": "b1@example.com"}}
        ]

    def test_room_lists_error(self):
        body = {
            "get_room_lists_response": {
                "response_class": "Error",
                "message_text": {"text": "No room lists."},
                "response_code": {"text": "ErrorNameResolutionNoResults"},
            }
        }
        resp = EwsSoapRoomlistResponse(envelope(body))
        assert not resp.success()
        assert resp.message() == "No room lists."
        assert resp.room_lists() == []

    def free_busy_body(self, view):
        return {
            "get_user_availability_response": {
                "free_busy_response_array": {
                    "free_busy_response": {
                        "response_message": {
                            "response_class": "Success",
                            "response_code": {"text": "NoError"},
                        },
                        "free_busy_view": view,
                    }
                }
            }
        }

    def test_free_busy_without_events(self):
        view = {
            "free_busy_view_type": {"text": "FreeBusy"},
            "working_hours": {"working_periods": {}},
        }
        resp = EwsSoapFreeBusyResponse(envelope(self.free_busy_body(view)))
        assert resp.success()
        assert resp.code() == "NoError"
        assert resp.calendar_event_array() == []
        assert resp.working_hours() == {"working_periods": {}}

    def test_free_busy_with_events(self):
        events = [
            {"busy_type": {"text": "Busy"}, "start_time": {"text": "2024-05-14T10:00:00"}},
            {"busy_type": {"text": "Tentative"}, "start_time": {"text": "2024-05-14T14:00:00"}},
        ]
        view = {"calendar_event_array": {"calendar_event": events}}
        resp = EwsSoapFreeBusyResponse(envelope(self.free_busy_body(view)))
        assert resp.calendar_event_array() == events
        assert resp.working_hours() is None

    def test_free_busy_list_form(self):
        event = {"busy_type": {"text": "Busy"}}
        view = [
            {"free_busy_view_type": {"text": "Detailed"}},
            {"calendar_event_array": [{"calendar_event": event}]},
        ]
        resp = EwsSoapFreeBusyResponse(envelope(self.free_busy_body(view)))
        assert resp.calendar_event_array() == [event]

    def test_free_busy_mailbox_in_list_form(self):
        event = {"busy_type": {"text": "Busy"}}
        body = self.free_busy_body({})
        array = body["get_user_availability_response"]["free_busy_response_array"]
        array["free_busy_response"] = [
            {
                "response_message": {
                    "response_class": "Success",
                    "response_code": {"text": "NoError"},
                }
            },
            {
                "free_busy_view": {
                    "calendar_event_array": [{"calendar_event": event}],
                    "working_hours": {"working_periods": {}},
                }
            },
        ]
        resp = EwsSoapFreeBusyResponse(envelope(body))
        assert len(resp.free_busy_responses()) == 1
        assert resp.success()
        assert resp.code() == "NoError"
        assert resp.calendar_event_array() == [event]
        assert resp.working_hours() == {"working_periods": {}}

    def test_free_busy_several_mailboxes(self):
        body = self.free_busy_body({})
        array = body["get_user_availability_response"]["free_busy_response_array"]
        array["free_busy_response"] = [array["free_busy_response"], {}]
        resp = EwsSoapFreeBusyResponse(envelope(body))
        assert len(resp.free_busy_responses()) == 2
        assert resp.success()

    def test_availability_response(self):
        body = {
            "get_user_oof_settings_response": {
                "response_message": {
                    "response_class": "Success",
                    "response_code": {"text": "NoError"},
                },
                "oof_settings": {"oof_state": {"text": "Disabled"}},
            }
        }
        resp = EwsSoapAvailabilityResponse(envelope(body))
        assert resp.success()
        assert resp.oof_settings() == {"oof_state": {"text": "Disabled"}}


class TestNotifications:
    fragment = {
        "response_class": "Success",
        "response_code": {"text": "NoError"},
        "connection_status": {"text": "OK"},
        "notifications": {
            "notification": {
                "subscription_id": {"text": "sub-1"},
                "more_events": {"text": "false"},
                "new_mail_event": {
                    "watermark": {"text": "wm-1"},
                    "time_stamp": {"text": "2024-05-14T21:10:23Z"},
                    "item_id": {"id": "I1", "change_key": "C1"},
                    "parent_folder_id": {"id": "F1", "change_key": "C2"},
                },
                "moved_event": {
                    "watermark": {"text": "wm-2"},
                    "folder_id": {"id": "F2"},
                    "old_folder_id": {"id": "F3"},
                },
                "modified_event": [
                    {"watermark": {"text": "wm-3"}, "unread_count": {"text": "4"}},
                    {"watermark": {"text": "wm-4"}},
                ],
                "status_event": {"watermark": {"text": "wm-5"}},
                "future_event": {"watermark": {"text": "wm-6"}},
            }
        },
    }

    def test_streaming_events(self):
        body = {
            "get_streaming_events_response": {
                "response_messages": {"get_streaming_events_response_message": self.fragment}
            }
        }
        (message,) = EwsResponse(envelope(body)).response_messages()
        assert isinstance(message, GetStreamingEventsResponseMessage)
        assert message.connection_status() == "OK"
        (notification,) = message.notifications()
        assert isinstance(notification, Notification)
        assert notification.subscription_id == "sub-1"
        assert notification.more_events is False
        assert notification.previous_watermark is None

        events = notification.events()
        assert [type(e) for e in events] == [
            NewMailEvent,
            MovedEvent,
            ModifiedEvent,
            ModifiedEvent,
            StatusEvent,
            Event,
        ]
        new_mail = events[0]
        assert new_mail.item_id == "I1"
        assert new_mail.item_change_key == "C1"
        assert new_mail.parent_folder_id == "F1"
        assert new_mail.time_stamp == datetime(2024, 5, 14, 21, 10, 23, tzinfo=timezone.utc)
        assert not new_mail.is_folder_event
        assert events[1].is_folder_event
        assert events[1].old_folder_id == "F3"
        assert events[2].unread_count == 4
        assert events[3].unread_count is None
        assert events[4].watermark == "wm-5"
        assert events[5].type_name == "future_event"
        assert events[5].watermark == "wm-6"

    def test_no_notifications(self):
        message = GetStreamingEventsResponseMessage(
            {"get_streaming_events_response_message": {"response_class": "Success"}}
        )
        assert message.notifications() == []
        assert message.connection_status() is None

    def test_get_events(self):
        notification = self.fragment["notifications"]["notification"]
        message = GetEventsResponseMessage(
            {"get_events_response_message": {"response_class": "Success", "notification": notification}}
        )
        assert message.notification().subscription_id == "sub-1"
        assert len(message.notification().events()) == 6
        empty = GetEventsResponseMessage({"get_events_response_message": {}})
        assert empty.notification() is None

    def test_unconvertible_values(self, caplog):
        event = NewMailEvent(None, {"time_stamp": {"text": "garbage"}})
        assert event.time_stamp is None
        assert "cannot convert" in caplog.text
        modified = ModifiedEvent(None, {"unread_count": {"text": "many"}})
        assert modified.unread_count is None
        notification = Notification(None, {"more_events": {"text": {"nested": "x"}}})
        assert notification.more_events is None

    def test_unknown_attribute(self):
        event = NewMailEvent(None, {})
        assert event.item_id is None
        with pytest.raises(AttributeError):
            event.no_such_thing


def test_sync_folder_items():
    fragment = {
        "response_class": "Success",
        "sync_state": {"text": "H4sI"},
        "includes_last_item_in_range": {"text": "true"},
        "changes": {
            "create": [{"message": {"item_id": {"id": "A"}}}, {"message": {"item_id": {"id": "B"}}}],
            "delete": {"item_id": {"id": "C"}},
        },
    }
    message = SyncFolderItemsResponseMessage({"sync_folder_items_response_message": fragment})
    assert message.sync_state() == "H4sI"
    assert message.includes_last_item_in_range()
    assert [list(c) for c in message.changes()] == [["create"], ["create"], ["delete"]]
