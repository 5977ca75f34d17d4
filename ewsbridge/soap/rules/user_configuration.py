"""
User configuration objects (folder associated configuration data).
"""
import base64

from ewsbridge.lib import error
from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.soap.rules import rule
from ewsbridge.soap.values import require

USER_CONFIGURATION_FOLDER_IDS = ("folder_id", "distinguished_folder_id")


@rule("user_configuration_name")
def user_configuration_name(b, cfg_name):
    """
    ``{"name": "OWA.UserOptions", "distinguished_folder_id": {"id": "root"}}``.
    Inside a UserConfiguration this is a types element, everywhere else
    a messages element.
    """
    prefix = NS_EWS_TYPES if b.parent_name() == "UserConfiguration" else NS_EWS_MESSAGES
    cfg_name = dict(cfg_name)
    name = require(cfg_name, "name", "UserConfigurationName")
    cfg_name.pop("name")
    with b.node(prefix, "UserConfigurationName", attrs={"Name": name}):
        for fid_type, fid in cfg_name.items():
            if fid_type not in USER_CONFIGURATION_FOLDER_IDS:
                raise error.BadArgumentError(
                    "Bad folder id type for UserConfigurationName", key=fid_type
                )
            b.build_element(fid_type, fid)


@rule("user_configuration_properties")
def user_configuration_properties(b, cfg_prop):
    b.messages("UserConfigurationProperties", cfg_prop)


@rule("user_configuration")
def user_configuration(b, options):
    with b.node(NS_EWS_MESSAGES, "UserConfiguration"):
        user_configuration_name(
            b, require(options, "user_config_name", "UserConfiguration")
        )
        if options.get("xml_data"):
            xml_data(b, options["xml_data"])


@rule("xml_data")
def xml_data(b, data):
    if isinstance(data, str):
        data = data.encode("utf-8")
    b.types("XmlData", base64.b64encode(data).decode("ascii"))
