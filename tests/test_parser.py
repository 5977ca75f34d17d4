import pytest

from ewsbridge.lib import error
from ewsbridge.soap.builder import build_soap_request
from ewsbridge.soap.document import OrderedElement
from ewsbridge.soap.parser import EwsParser
from ewsbridge.soap.responses import EwsResponse
from ewsbridge.soap.responses import EwsSoapResponse
from ewsbridge.types.notification import ModifiedEvent
from ewsbridge.types.notification import NewMailEvent

FIND_FOLDER_RESPONSE = b"""<?xml version="1.0" encoding="utf-8"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">
  <s:Header>
    <h:ServerVersionInfo MajorVersion="14" MinorVersion="2" MajorBuildNumber="390"
        Version="Exchange2010_SP2"
        xmlns:h="http://schemas.microsoft.com/exchange/services/2006/types"/>
  </s:Header>
  <s:Body xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
    <m:FindFolderResponse xmlns:m="http://schemas.microsoft.com/exchange/services/2006/messages"
        xmlns:t="http://schemas.microsoft.com/exchange/services/2006/types">
      <m:ResponseMessages>
        <m:FindFolderResponseMessage ResponseClass="Success">
          <m:ResponseCode>NoError</m:ResponseCode>
          <m:RootFolder TotalItemsInView="2" IncludesLastItemInRange="true">
            <t:Folders>
              <t:Folder>
                <t:FolderId Id="AQAnAH" ChangeKey="AQAAABY"/>
                <t:DisplayName>TestFolder</t:DisplayName>
              </t:Folder>
              <t:Folder>
                <t:FolderId Id="AQAnAI" ChangeKey="AQAAABZ"/>
                <t:DisplayName>Other</t:DisplayName>
              </t:Folder>
            </t:Folders>
          </m:RootFolder>
        </m:FindFolderResponseMessage>
      </m:ResponseMessages>
    </m:FindFolderResponse>
  </s:Body>
</s:Envelope>
"""


STREAMING_EVENTS_RESPONSE = b"""<?xml version="1.0" encoding="utf-8"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/">
  <s:Body>
    <m:GetStreamingEventsResponse xmlns:m="http://schemas.microsoft.com/exchange/services/2006/messages"
        xmlns:t="http://schemas.microsoft.com/exchange/services/2006/types">
      <m:ResponseMessages>
        <m:GetStreamingEventsResponseMessage ResponseClass="Success">
          <m:ResponseCode>NoError</m:ResponseCode>
          <m:Notifications>
            <m:Notification>
              <t:SubscriptionId>sub-1</t:SubscriptionId>
              <t:NewMailEvent>
                <t:Watermark>1</t:Watermark>
                <t:ItemId Id="I1" ChangeKey="C1"/>
              </t:NewMailEvent>
              <t:ModifiedEvent>
                <t:Watermark>2</t:Watermark>
                <t:UnreadCount>3</t:UnreadCount>
              </t:ModifiedEvent>
              <t:NewMailEvent>
                <t:Watermark>3</t:Watermark>
                <t:ItemId Id="I3" ChangeKey="C3"/>
              </t:NewMailEvent>
            </m:Notification>
          </m:Notifications>
        </m:GetStreamingEventsResponseMessage>
      </m:ResponseMessages>
    </m:GetStreamingEventsResponse>
  </s:Body>
</s:Envelope>
"""


class TestParser:
    def test_flat_form(self):
        doc = EwsParser(FIND_FOLDER_RESPONSE).parse()
        header = doc["envelope"]["header"]
        assert header["server_version_info"]["version"] == "Exchange2010_SP2"
        assert header["server_version_info"]["major_version"] == "14"

        message = doc["envelope"]["body"]["find_folder_response"]["response_messages"][
            "find_folder_response_message"
        ]
        assert message["response_class"] == "Success"
        assert message["response_code"] == {"text": "NoError"}
        assert message["root_folder"]["total_items_in_view"] == "2"

    def test_repeated_siblings_become_a_list(self):
        doc = EwsParser(FIND_FOLDER_RESPONSE).parse()
        folders = doc["envelope"]["body"]["find_folder_response"]["response_messages"][
            "find_folder_response_message"
        ]["root_folder"]["folders"]["folder"]
        assert isinstance(folders, list)
        assert [f["display_name"]["text"] for f in folders] == ["TestFolder", "Other"]
        assert folders[0]["folder_id"] == {"id": "AQAnAH", "change_key": "AQAAABY"}

    def test_decodes_into_outcomes(self):
        resp = EwsResponse(EwsParser(FIND_FOLDER_RESPONSE.decode("utf-8")).parse())
        (message,) = resp.response_messages()
        assert message.success()
        assert message.code() == "NoError"
        assert len(message.folders()) == 2

    @pytest.mark.parametrize(
        "xml",
        [
            b"",
            None,
            b"this is not xml",
            b"<html><body>Service Unavailable</body></html>",
            b"<s:Envelope xmlns:s='http://schemas.xmlsoap.org/soap/envelope/'>",
        ],
    )
    def test_bad_input(self, xml):
        with pytest.raises(error.SoapResponseError):
            EwsParser(xml).parse()

    def test_comments_are_skipped(self):
        xml = b"<Envelope><!-- hi --><Body><Thing>x</Thing></Body></Envelope>"
        doc = EwsParser(xml).parse()
        assert doc == {"envelope": {"body": {"thing": {"text": "x"}}}}

    def test_interleaved_siblings_keep_document_order(self):
        doc = EwsParser(STREAMING_EVENTS_RESPONSE).parse()
        notification = doc["envelope"]["body"]["get_streaming_events_response"][
            "response_messages"
        ]["get_streaming_events_response_message"]["notifications"]["notification"]
        assert isinstance(notification, OrderedElement)
        assert [list(member) for member in notification] == [
            ["subscription_id"],
            ["new_mail_event"],
            ["modified_event"],
            ["new_mail_event"],
        ]

    def test_attributes_and_text_lead_an_ordered_element(self):
        xml = b"<Envelope><Body><R Kind='k'>t<A>1</A><B>2</B><A>3</A></R></Body></Envelope>"
        r = EwsParser(xml).parse()["envelope"]["body"]["r"]
        assert r == [
            {"kind": "k"},
            {"text": "t"},
            {"a": {"text": "1"}},
            {"b": {"text": "2"}},
            {"a": {"text": "3"}},
        ]

    def test_interleaved_events_decode_in_order(self):
        resp = EwsResponse(EwsParser(STREAMING_EVENTS_RESPONSE).parse())
        (message,) = resp.response_messages()
        assert message.success()
        (notification,) = message.notifications()
        assert notification.subscription_id == "sub-1"
        events = notification.events()
        assert [e.watermark for e in events] == ["1", "2", "3"]
        assert [type(e) for e in events] == [NewMailEvent, ModifiedEvent, NewMailEvent]
        assert events[1].unread_count == 3
        assert events[2].item_id == "I3"


def test_build_serialize_parse_decode():
    payload = {
        "find_folder_response": {
            "sub_elements": [
                {
                    "response_messages": {
                        "sub_elements": [
                            {
                                "find_folder_response_message": {
                                    "response_class": "Error",
                                    "sub_elements": [
                                        {"message_text": {"text": "Id is malformed."}},
                                        {"response_code": {"text": "ErrorInvalidIdMalformed"}},
                                        {"descriptive_link_key": {"text": 0}},
                                    ],
                                }
                            }
                        ]
                    }
                }
            ]
        }
    }
    xml = build_soap_request(body=lambda b: b.build_xml(payload))
    doc = EwsParser(xml).parse()

    (message,) = EwsResponse(doc).response_messages()
    assert message.type == "find_folder_response_message"
    assert not message.success()
    assert message.code() == "ErrorInvalidIdMalformed"
    assert message.message() == "Id is malformed."

    facade = EwsSoapResponse(doc)
    assert facade.code() == "ErrorInvalidIdMalformed"
    assert facade.response_class == "Error"
