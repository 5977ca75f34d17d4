"""
Restriction (search filter) expression trees.

A restriction is a nested structure of one-key mappings whose keys are
taken from the closed ``RESTRICTION_OPERATORS`` table::

    {"restriction": {
        "and": [
            {"is_equal_to": [
                {"field_uRI": {"field_uRI": "item:Subject"}},
                {"field_uRI_or_constant": {"constant": {"value": "Lunch"}}},
            ]},
            {"exists": {"field_uRI": {"field_uRI": "item:Body"}}},
        ]
    }}
"""
from ewsbridge.lib import error
from ewsbridge.lib.namespace import NS_EWS_MESSAGES
from ewsbridge.lib.namespace import NS_EWS_TYPES
from ewsbridge.soap.rules import rule
from ewsbridge.soap.values import require
from ewsbridge.soap.values import single_pair


def build_expression(b, key, expr):
    operator = RESTRICTION_OPERATORS.get(key)
    if operator is None:
        raise error.BadArgumentError("Bad restriction operator", key=key)
    operator(b, expr)


def _build_pairs(b, expr):
    """Build every key of a mapping, or of each mapping in a sequence, in order"""
    if isinstance(expr, dict):
        expr = [expr]
    for e in expr:
        for k, v in e.items():
            build_expression(b, k, v)


@rule("restriction")
def restriction(b, restriction):
    with b.node(NS_EWS_MESSAGES, "Restriction"):
        _build_pairs(b, restriction)


def _and_or(wire_name):
    def build(b, expr):
        with b.node(NS_EWS_TYPES, wire_name):
            _build_pairs(b, expr)

    build.__name__ = wire_name
    return build


def not_r(b, expr):
    with b.node(NS_EWS_TYPES, "Not"):
        key, value = single_pair(expr, "Not expression")
        build_expression(b, key, value)


def contains(b, expr):
    expr = dict(expr)
    attrs = {
        "ContainmentMode": expr.pop("containment_mode", None),
        "ContainmentComparison": expr.pop("containment_comparison", None),
    }
    ## the constant has to come after the field
    c = require(expr, "constant", "Contains")
    expr.pop("constant")
    with b.node(NS_EWS_TYPES, "Contains", attrs=attrs):
        key, value = single_pair(expr, "Contains field")
        build_expression(b, key, value)
        constant(b, c)


def excludes(b, expr):
    expr = dict(expr)
    bm = require(expr, "bitmask", "Excludes")
    expr.pop("bitmask")
    with b.node(NS_EWS_TYPES, "Excludes"):
        key, value = single_pair(expr, "Excludes field")
        build_expression(b, key, value)
        bitmask(b, bm)


def exists(b, expr):
    with b.node(NS_EWS_TYPES, "Exists"):
        key, value = single_pair(expr, "Exists field")
        build_expression(b, key, value)


def _comparison(wire_name):
    def build(b, expr):
        with b.node(NS_EWS_TYPES, wire_name):
            _build_pairs(b, expr)

    build.__name__ = wire_name
    return build


def bitmask(b, expr):
    b.types("Bitmask", attrs={"Value": require(expr, "value", "Bitmask")})


def constant(b, expr):
    b.types("Constant", attrs={"Value": require(expr, "value", "Constant")})


def field_uri_or_constant(b, expr):
    with b.node(NS_EWS_TYPES, "FieldURIOrConstant"):
        key, value = single_pair(expr, "FieldURIOrConstant")
        build_expression(b, key, value)


def _field_uri(key):
    def build(b, expr):
        b.dispatch_field_uri({key: expr}, NS_EWS_TYPES)

    build.__name__ = key
    return build


RESTRICTION_OPERATORS = {
    "and": _and_or("And"),
    "or": _and_or("Or"),
    "not": not_r,
    "contains": contains,
    "excludes": excludes,
    "exists": exists,
    "is_equal_to": _comparison("IsEqualTo"),
    "is_not_equal_to": _comparison("IsNotEqualTo"),
    "is_greater_than": _comparison("IsGreaterThan"),
    "is_greater_than_or_equal_to": _comparison("IsGreaterThanOrEqualTo"),
    "is_less_than": _comparison("IsLessThan"),
    "is_less_than_or_equal_to": _comparison("IsLessThanOrEqualTo"),
    "bitmask": bitmask,
    "constant": constant,
    "field_uRI_or_constant": field_uri_or_constant,
    "field_uri_or_constant": field_uri_or_constant,
}
for _key in (
    "field_uRI",
    "field_uri",
    "indexed_field_uRI",
    "indexed_field_uri",
    "extended_field_uRI",
    "extended_field_uri",
):
    RESTRICTION_OPERATORS[_key] = _field_uri(_key)
