#!/usr/bin/env python
import logging

__version__ = "1.0.0"

## Silence notification of no default logging handler
log = logging.getLogger("ewsbridge")


class NullHandler(logging.Handler):
    def emit(self, record) -> None:
        pass


log.addHandler(NullHandler())

from .client import EwsClient
from .client import get_client

__all__ = ["__version__", "EwsClient", "get_client"]
