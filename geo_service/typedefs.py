# Copyright 2023-present Kensho Technologies, LLC.
from dataclasses import dataclass
from typing import Any, Dict, List, Union


# Any value that can appear in a decoded JSON document.
JsonValue = Any

# An undecoded GraphQL-over-HTTP request body: "query", and optionally "variables",
# "operationName" and "extensions".
GraphQLRequest = Dict[str, Any]

# The name of the key in status responses whose value is a deployment identifier.
SUBGRAPH_KEY = "subgraph"


@dataclass(frozen=True)
class StatusQueryData:
    """A status query answered with data."""

    data: JsonValue


@dataclass(frozen=True)
class StatusQueryErrors:
    """A status query answered with a list of GraphQL errors.

    This is a valid protocol outcome, and is passed through to the client as-is.
    """

    errors: List[JsonValue]


StatusQueryResult = Union[StatusQueryData, StatusQueryErrors]
