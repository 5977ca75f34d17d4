"""
EWS operations on user configuration objects.

An operation assembles its payload, hands it to the builder through
``build_soap`` and posts the document with ``do_soap_request``, naming
the response class that should decode the answer.  The methods are
mixed into :class:`ewsbridge.client.EwsClient`.
"""
import logging
from typing import Any
from typing import Dict

from ewsbridge.lib import error
from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.soap.responses import EwsSoapAvailabilityResponse
from ewsbridge.soap.responses import EwsSoapResponse

log = logging.getLogger(__name__)


def validate_param(opts: Dict[str, Any], key: str, required: bool, default: Any = None) -> Any:
    """
    Fetch ``key`` from the operation options.  A required key must be
    present, an optional one needs a default.
    """
    if required:
        if key not in opts:
            raise error.MissingArgumentError(
                "Required parameter (%s) not passed." % key, key=key
            )
        return opts[key]
    if default is None:
        raise error.BadArgumentError("Default value not supplied.", key=key)
    return opts.get(key, default)


class ExchangeUserConfiguration:
    """
    ``user_config_name`` is a mapping like
    ``{"name": "OWA.UserOptions", "distinguished_folder_id": {"id": "root"}}``.
    """

    def get_user_configuration(self, opts: Dict[str, Any]) -> EwsSoapAvailabilityResponse:
        """
        Args:
          opts: ``user_config_name`` and ``user_config_props``, the latter one
            of ``Id``, ``Dictionary``, ``XmlData``, ``BinaryData`` or ``All``
        """
        opts = dict(opts)
        for k in ("user_config_name", "user_config_props"):
            validate_param(opts, k, True)

        def body(b):
            with b.node(NS_EWS_MESSAGES, "GetUserConfiguration"):
                b.build_element("user_configuration_name", opts["user_config_name"])
                b.build_element("user_configuration_properties", opts["user_config_props"])

        doc = self.build_soap(body=body)
        return self.do_soap_request(doc, response_class=EwsSoapAvailabilityResponse)

    def update_user_configuration(self, opts: Dict[str, Any]) -> EwsSoapResponse:
        """
        Args:
          opts: ``user_config_name`` and, optionally, ``xml_data``
        """
        return self._user_configuration_request("UpdateUserConfiguration", opts)

    def create_user_configuration(self, opts: Dict[str, Any]) -> EwsSoapResponse:
        return self._user_configuration_request("CreateUserConfiguration", opts)

    def delete_user_configuration(self, opts: Dict[str, Any]) -> EwsSoapResponse:
        opts = dict(opts)
        validate_param(opts, "user_config_name", True)

        def body(b):
            with b.node(NS_EWS_MESSAGES, "DeleteUserConfiguration"):
                b.build_element("user_configuration_name", opts["user_config_name"])

        doc = self.build_soap(body=body)
        return self.do_soap_request(doc, response_class=EwsSoapResponse)

    def _user_configuration_request(self, operation: str, opts: Dict[str, Any]) -> EwsSoapResponse:
        opts = dict(opts)
        validate_param(opts, "user_config_name", True)

        def body(b):
            with b.node(NS_EWS_MESSAGES, operation):
                b.build_element("user_configuration", opts)

        doc = self.build_soap(body=body)
        return self.do_soap_request(doc, response_class=EwsSoapResponse)
