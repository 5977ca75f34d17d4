"""
Dedicated construction rules, keyed by the snake_case element name.

A rule is a plain function ``rule(builder, payload)`` that appends its
element to ``builder.parent``.  Rules register themselves with the
``rule`` decorator when their module is imported; the registry is
complete once this package is imported and is never changed after that.
"""
from typing import Any
from typing import Callable
from typing import Dict

BUILDERS: Dict[str, Callable[..., Any]] = {}

## Server computed fields.  They show up when an item is round-tripped
## from a response, but must never be sent back, so they build nothing.
READ_ONLY = frozenset(
    (
        "complete_name",
        "display_cc",
        "display_to",
        "web_client_read_form_query_string",
        "web_client_edit_form_query_string",
        "is_associated",
        "conversation_id",
    )
)


def rule(*names: str):
    def register(fn):
        for name in names:
            if name in BUILDERS:
                raise ValueError("duplicate construction rule for %s" % name)
            BUILDERS[name] = fn
        return fn

    return register


def text_of(value: Any) -> Any:
    """Scalar element values may be given bare or as ``{"text": value}``"""
    if isinstance(value, dict):
        return value.get("text")
    return value


from . import attachments  # noqa: E402
from . import availability  # noqa: E402
from . import calendar  # noqa: E402
from . import contacts  # noqa: E402
from . import folders  # noqa: E402
from . import identifiers  # noqa: E402
from . import items  # noqa: E402
from . import restrictions  # noqa: E402
from . import shapes  # noqa: E402
from . import subscriptions  # noqa: E402
from . import time_zones  # noqa: E402
from . import updates  # noqa: E402
from . import user_configuration  # noqa: E402
