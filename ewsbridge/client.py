#!/usr/bin/env python
"""
The ``EwsClient`` class handles the communication with an Exchange
server: it builds a request document, posts it to the EWS endpoint and
decodes the answer with the response class the operation asks for.

``get_client`` will return an EwsClient object, based either on the
parameters given, environmental variables or a configuration file.
"""
import datetime
import logging
import os
from tempfile import NamedTemporaryFile
from types import TracebackType
from typing import Any
from typing import Callable
from typing import Dict
from typing import Mapping
from typing import Optional
from typing import Tuple
from typing import Type
from typing import Union

import requests
from requests.auth import AuthBase
from requests.structures import CaseInsensitiveDict

from ewsbridge import __version__
from ewsbridge.lib import error
from ewsbridge.lib.python_utilities import to_normal_str
from ewsbridge.lib.python_utilities import to_wire
from ewsbridge.operations import ExchangeUserConfiguration
from ewsbridge.soap.builder import EwsBuilder
from ewsbridge.soap.document import EwsResponseDocument
from ewsbridge.soap.parser import EwsParser
from ewsbridge.soap.responses import EwsResponse

log = logging.getLogger(__name__)

DEFAULT_SERVER_VERSION = "Exchange2010_SP2"

## Parameters accepted from the environment and config files
CONNKEYS = set(
    (
        "endpoint",
        "username",
        "password",
        "auth_type",
        "timeout",
        "ssl_verify_cert",
        "ssl_cert",
        "proxy",
        "headers",
        "server_version",
        "impersonation_type",
        "impersonation_mail",
        "huge_tree",
    )
)


class HTTPBearerAuth(AuthBase):
    """OAuth2 access token, sent as ``Authorization: Bearer ...``"""

    def __init__(self, token: str) -> None:
        self.token = token

    def __eq__(self, other: object) -> bool:
        return self.token == getattr(other, "token", None)

    def __call__(self, r):
        r.headers["Authorization"] = f"Bearer {self.token}"
        return r


class EwsClient(ExchangeUserConfiguration):
    """
    Basic client for Exchange Web Services, uses the requests lib.

    Each operation gets a fresh :class:`EwsBuilder` from ``build_soap``,
    a builder is never shared between two requests.
    """

    huge_tree: bool = False

    def __init__(
        self,
        endpoint: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        auth: Optional[AuthBase] = None,
        auth_type: Optional[str] = None,
        timeout: Optional[int] = None,
        ssl_verify_cert: Union[bool, str] = True,
        ssl_cert: Union[str, Tuple[str, str], None] = None,
        proxy: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        server_version: Optional[str] = DEFAULT_SERVER_VERSION,
        impersonation_type: Optional[str] = None,
        impersonation_mail: Optional[str] = None,
        time_zone_context: Optional[Dict[str, Any]] = None,
        huge_tree: bool = False,
    ) -> None:
        """
        Args:
          endpoint: the EWS url, like `https://mail.example.com/EWS/Exchange.asmx`
          auth: a requests.auth.AuthBase object, may be passed instead of username/password
          auth_type: ``basic``, ``digest`` or ``bearer``.  For bearer, the token is given as password.
          timeout, ssl_verify_cert and ssl_cert are passed to requests.
          server_version: put in the RequestServerVersion header, ``"none"`` to leave it out
          impersonation_type, impersonation_mail: act as another user, see ``EwsBuilder.build``
          time_zone_context: ``{"id": ...}`` for the TimeZoneContext header
          huge_tree: boolean, enable XMLParser huge_tree to handle big responses, beware of security issues, see : https://lxml.de/api/lxml.etree.XMLParser-class.html
        """
        self.session = requests.Session()

        log.debug("endpoint: " + str(endpoint))
        self.endpoint = endpoint
        self.huge_tree = huge_tree
        self.proxy = proxy

        self.headers = CaseInsensitiveDict(
            {
                "User-Agent": "ewsbridge/" + __version__,
                "Content-Type": "text/xml; charset=utf-8",
                "Accept": "text/xml",
            }
        )
        self.headers.update(headers or {})

        self.username = username
        self.password = password
        self.auth = auth
        self.auth_type = auth_type
        if auth and auth_type:
            logging.error(
                "both auth object and auth_type sent to EwsClient.  The latter will be ignored."
            )
        elif auth_type or username:
            self.build_auth_object()

        ## from the environment, timeouts come as strings
        if isinstance(timeout, str):
            timeout = float(timeout)
        self.timeout = timeout
        self.ssl_verify_cert = ssl_verify_cert
        self.ssl_cert = ssl_cert
        self.server_version = server_version
        self.impersonation_type = impersonation_type
        self.impersonation_mail = impersonation_mail
        self.time_zone_context = time_zone_context

    def __enter__(self) -> "EwsClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.close()

    def close(self) -> None:
        """Closes the underlying requests session"""
        self.session.close()

    def build_auth_object(self) -> None:
        auth_type = (self.auth_type or "basic").lower()
        if auth_type == "digest":
            self.auth = requests.auth.HTTPDigestAuth(self.username, self.password)
        elif auth_type == "basic":
            self.auth = requests.auth.HTTPBasicAuth(self.username, self.password)
        elif auth_type == "bearer":
            if not self.password:
                raise error.AuthorizationError(
                    reason="Bearer auth requested, but no password given.  The bearer token should be configured as password"
                )
            self.auth = HTTPBearerAuth(self.password)
        else:
            raise error.BadArgumentError("Unsupported auth_type", key=auth_type)

    def build_soap(
        self,
        header: Optional[Callable[[EwsBuilder], Any]] = None,
        body: Optional[Callable[[EwsBuilder], Any]] = None,
    ) -> EwsBuilder:
        """
        Builds a request document with the connection wide header
        directives (server version, impersonation, time zone context).
        """
        builder = EwsBuilder()
        builder.build(
            header=header,
            body=body,
            server_version=self.server_version,
            impersonation_type=self.impersonation_type,
            impersonation_mail=self.impersonation_mail,
            time_zone_context=self.time_zone_context,
        )
        return builder

    def post(self, body: bytes) -> requests.Response:
        """
        Actually sends the request, and does the authentication
        """
        proxies = None
        if self.proxy is not None:
            proxies = {"http": self.proxy, "https": self.proxy}

        log.debug(
            "sending request - url={0}, headers={1}\nbody:\n{2}".format(
                self.endpoint, self.headers, to_normal_str(body)
            )
        )
        r = self.session.request(
            "POST",
            self.endpoint,
            data=to_wire(body),
            headers=self.headers,
            proxies=proxies,
            auth=self.auth,
            timeout=self.timeout,
            verify=self.ssl_verify_cert,
            cert=self.ssl_cert,
        )
        log.debug("server responded with %i %s" % (r.status_code, r.reason))

        if error.debug_dump_communication:
            self._dump_communication(body, r)

        # this is an error condition that should be raised to the application
        if r.status_code in (requests.codes.forbidden, requests.codes.unauthorized):
            raise error.AuthorizationError(url=self.endpoint, reason=r.reason or "None given")
        return r

    def do_soap_request(
        self,
        doc: Union[EwsBuilder, bytes, str],
        response_class: Type[EwsResponseDocument] = EwsResponse,
    ) -> Any:
        """
        Posts the request document and decodes the answer.

        EWS reports failed operations as SOAP faults or as response
        messages with ResponseClass Error, both come with HTTP status 500
        and are decoded rather than raised.
        """
        if isinstance(doc, EwsBuilder):
            doc = doc.to_string()
        r = self.post(doc)
        if r.status_code >= 400 and not r.content:
            raise error.SoapResponseError(
                reason=f"{r.status_code} {r.reason}", url=self.endpoint
            )
        content_type = r.headers.get("Content-Type", "")
        if content_type and not any(
            content_type.startswith(x) for x in ("text/xml", "application/xml", "application/soap+xml")
        ):
            error.weirdness(f"Unexpected content type: {content_type}")
        parsed = EwsParser(r.content, huge_tree=self.huge_tree).parse()
        return response_class(parsed)

    def _dump_communication(self, body: bytes, r: requests.Response) -> None:
        with NamedTemporaryFile(prefix="ewscomm", delete=False) as commlog:
            commlog.write(b"=" * 80 + b"\n")
            commlog.write(f"{datetime.datetime.now():%FT%H:%M:%S}".encode("utf-8"))
            commlog.write(b"\n====>\n")
            commlog.write(f"POST {self.endpoint}\n".encode("utf-8"))
            commlog.write(
                b"\n".join(to_wire(f"{x}: {self.headers[x]}") for x in self.headers)
            )
            commlog.write(b"\n\n")
            commlog.write(to_wire(body))
            commlog.write(b"<====\n")
            commlog.write(f"{r.status_code} {r.reason}\n".encode("utf-8"))
            commlog.write(b"\n".join(to_wire(f"{x}: {r.headers[x]}") for x in r.headers))
            commlog.write(b"\n\n")
            commlog.write(to_wire(r.content or b""))
            commlog.write(b"\n")
            log.debug("communication dumped to %s" % commlog.name)


def get_client(
    check_config_file: bool = True,
    config_file: Optional[str] = None,
    config_section: Optional[str] = None,
    environment: bool = True,
    **config_data,
) -> Optional[EwsClient]:
    """
    This function will yield an EwsClient object.  It will not try to
    connect.  It will read configuration from various sources, dependent
    on the parameters given, in this order:

    * Data from the parameters given
    * Environment variables prepended with `EWS_`, like `EWS_ENDPOINT`, `EWS_USERNAME`, `EWS_PASSWORD`.
    * Environment variables `EWS_CONFIG_FILE` and `EWS_CONFIG_SECTION` will be honored if environment is set
    * Configuration file, keys prepended with `ews_`
    """
    if config_data:
        return EwsClient(**config_data)

    if environment:
        conf = {}
        for conf_key in (
            x for x in os.environ if x.startswith("EWS_") and not x.startswith("EWS_CONFIG")
        ):
            key = conf_key[4:].lower()
            if key in CONNKEYS:
                conf[key] = os.environ[conf_key]
        if conf:
            return EwsClient(**conf)
        if not config_file:
            config_file = os.environ.get("EWS_CONFIG_FILE")
        if not config_section:
            config_section = os.environ.get("EWS_CONFIG_SECTION")

    if check_config_file:
        from . import config

        if not config_section:
            config_section = "default"

        cfg = config.read_config(config_file)
        if cfg:
            conn_params = config.connection_params(config.config_section(cfg, config_section))
            if conn_params:
                return EwsClient(**conn_params)
    return None
