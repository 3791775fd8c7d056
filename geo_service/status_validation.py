# Copyright 2023-present Kensho Technologies, LLC.
import logging
from typing import AbstractSet, FrozenSet, Set, Union

from graphql.language.ast import DocumentNode

from .ast_manipulation import extract_root_fields, safe_parse_graphql
from .exceptions import UnsupportedStatusQueryFieldsError


logger = logging.getLogger(__name__)

# The geo node status endpoint serves a much larger schema than what is exposed publicly.
# Only these root fields may be queried through the status endpoint.
SUPPORTED_ROOT_FIELDS: FrozenSet[str] = frozenset(
    {
        "indexingStatuses",
        "chains",
        "latestBlock",
        "earliestBlock",
        "publicProofsOfIndexing",
        "entityChangesInBlock",
        "blockData",
        "cachedEthereumCalls",
        "subgraphFeatures",
        "apiVersions",
    }
)


def validate_status_query(
    query: Union[str, DocumentNode], supported_root_fields: AbstractSet[str] = SUPPORTED_ROOT_FIELDS
) -> Set[str]:
    """Ensure that the status query only selects supported root fields.

    Args:
        query: the status query, either as text or as an already-parsed document
        supported_root_fields: names of the root fields that may be queried

    Returns:
        set of str, the names of the root fields the query selects

    Raises:
        - InvalidStatusQueryError if the query text could not be parsed
        - UnsupportedStatusQueryFieldsError if any root field is not supported, listing all of them
    """
    document_ast = safe_parse_graphql(query) if isinstance(query, str) else query

    root_fields = extract_root_fields(document_ast)
    unsupported_root_fields = sorted(root_fields - supported_root_fields)
    if unsupported_root_fields:
        logger.warning(
            "Rejecting status query with unsupported fields: %s", unsupported_root_fields
        )
        raise UnsupportedStatusQueryFieldsError(unsupported_root_fields)

    return root_fields
