#!/usr/bin/env python
import logging
import os
from typing import Optional

from ewsbridge import __version__

## Environmental variables prepended with "PYTHON_EWSBRIDGE" are used for debug purposes,
## environmental variables prepended with "EWS_" are for connection parameters
debug_dump_communication = os.environ.get("PYTHON_EWSBRIDGE_COMMDUMP", False)
## one of DEBUG_PDB, DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("PYTHON_EWSBRIDGE_DEBUGMODE")
if not debugmode:
    if "dev" in __version__:
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("ewsbridge")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)
else:
    log.setLevel(logging.WARNING)


def weirdness(*reasons) -> None:
    from ewsbridge.lib.debug import xmlstring

    reason = " : ".join([xmlstring(x) for x in reasons])
    log.warning(f"Deviation from expectations found: {reason}")
    if debugmode == "DEBUG_PDB":
        log.error(f"Dropping into debugger due to {reason}")
        import pdb

        pdb.set_trace()


def assert_(condition: object) -> None:
    try:
        assert condition
    except AssertionError:
        if debugmode == "PRODUCTION":
            log.error(
                "Deviation from expectations found.  %s" % ERR_FRAGMENT, exc_info=True
            )
        elif debugmode == "DEBUG_PDB":
            log.error("Deviation from expectations found.  Dropping into debugger")
            import pdb

            pdb.set_trace()
        else:
            raise


ERR_FRAGMENT: str = "Please consider raising an issue on the ewsbridge issue tracker, include this error, the traceback (if any) and the Exchange version you are talking to"


class EWSError(Exception):
    """
    Base class for everything raised by ewsbridge.  ``key`` names the
    offending payload key (if any), ``reason`` is a human readable
    explanation.
    """

    key: Optional[str] = None
    reason: str = "no reason"

    def __init__(self, reason: Optional[str] = None, key: Optional[str] = None) -> None:
        if reason:
            self.reason = reason
        if key:
            self.key = key
        super().__init__(self.reason)

    def __str__(self) -> str:
        if self.key is None:
            return "%s: %s" % (self.__class__.__name__, self.reason)
        return "%s for key '%s': %s" % (
            self.__class__.__name__,
            self.key,
            self.reason,
        )


class MalformedInputError(EWSError):
    """
    The payload handed to the builder has a shape it cannot interpret,
    like a mapping with several top-level keys or a scalar where a
    mapping or a sequence was expected.
    """

    pass


class MissingArgumentError(EWSError):
    """A construction rule requires a sub-key that was not given"""

    pass


class BadArgumentError(EWSError):
    """
    A sentinel key is outside of its closed set of alternatives, or a
    value could not be converted (like an unparseable time string).
    """

    pass


class BuilderNotImplementedError(EWSError):
    """No construction rule exists for an element inside a strict container"""

    pass


class SoapResponseError(EWSError):
    """The server did not deliver something that can be parsed as a SOAP envelope"""

    url: Optional[str] = None

    def __init__(
        self,
        reason: Optional[str] = None,
        key: Optional[str] = None,
        url: Optional[str] = None,
    ) -> None:
        if url:
            self.url = url
        super().__init__(reason, key)


class AuthorizationError(SoapResponseError):
    """
    The server answered with HTTP 401 or 403.  The url property will
    contain the endpoint in question, the reason property the HTTP
    reason phrase.
    """

    pass
