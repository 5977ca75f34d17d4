#!/usr/bin/env python
from typing import Dict
from typing import Optional

## The prefixes are part of the wire contract, Exchange is picky about them.
nsmap: Dict[str, str] = {
    "soap": "http://schemas.xmlsoap.org/soap/envelope/",
    "t": "http://schemas.microsoft.com/exchange/services/2006/types",
    "m": "http://schemas.microsoft.com/exchange/services/2006/messages",
}

NS_SOAP = "soap"
NS_EWS_TYPES = "t"
NS_EWS_MESSAGES = "m"

## prefixes an element may be bound to inside the envelope body
EWS_PREFIXES = (NS_EWS_TYPES, NS_EWS_MESSAGES)

prefix_by_uri: Dict[str, str] = {uri: prefix for prefix, uri in nsmap.items()}


def ns(prefix: str, tag: Optional[str] = None) -> str:
    name = "{%s}" % nsmap[prefix]
    if tag is not None:
        name = "%s%s" % (name, tag)
    return name
