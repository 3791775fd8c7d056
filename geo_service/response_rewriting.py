# Copyright 2023-present Kensho Technologies, LLC.
"""Substitute deployment identifiers in status responses.

The geo node serves a single shared subgraph, and reports it under its own internal identifier.
API consumers query it under the identifier of the subgraph deployment they know about, so
status responses must report that identifier instead.
"""
import funcy

from .typedefs import SUBGRAPH_KEY, JsonValue


def replace_subgraph_id(value: JsonValue, old: str, new: str) -> JsonValue:
    """Return a copy of the JSON value where every "subgraph" equal to old is set to new.

    The rule applies uniformly at any depth, in objects nested inside arrays and vice versa.
    No other values are altered, and the input value is not modified.

    Args:
        value: a decoded JSON value, i.e. a dict, list, str, int, float, bool or None
        old: the identifier to replace, e.g. the geo node's internal deployment id
        new: the identifier to report instead

    Returns:
        the rewritten JSON value
    """
    if isinstance(value, dict):
        rewritten = funcy.walk_values(lambda item: replace_subgraph_id(item, old, new), value)
        if rewritten.get(SUBGRAPH_KEY) == old:
            rewritten[SUBGRAPH_KEY] = new
        return rewritten
    elif isinstance(value, list):
        return [replace_subgraph_id(item, old, new) for item in value]
    else:
        return value
