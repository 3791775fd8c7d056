# Copyright 2023-present Kensho Technologies, LLC.
from typing import Iterable, List, Set

import funcy
from graphql.error import GraphQLSyntaxError
from graphql.language.ast import (
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    OperationDefinitionNode,
    OperationType,
    SelectionSetNode,
)
from graphql.language.parser import parse

from .exceptions import InvalidStatusQueryError


def get_ast_field_name(ast: FieldNode) -> str:
    """Return the field name for the given AST node."""
    return ast.name.value


def safe_parse_graphql(graphql_string: str) -> DocumentNode:
    """Return an AST representation of the given GraphQL input, reraising GraphQL library errors."""
    try:
        ast = parse(graphql_string)
    except GraphQLSyntaxError as e:
        raise InvalidStatusQueryError(e) from e

    return ast


def get_root_selection_sets(document_ast: DocumentNode) -> List[SelectionSetNode]:
    """Return the selection sets of all query operations and all fragment definitions.

    Fragment definitions are included because a status query may select its root fields
    entirely through top-level fragment spreads. This is more lenient than GraphQL itself: the
    selection set of a fragment that is only ever spread below the root is treated as a root
    selection set too. Mutation and subscription operations have no root selection sets here.
    """
    selection_sets = []
    for definition in document_ast.definitions:
        if isinstance(definition, OperationDefinitionNode):
            # The query shorthand "{ ... }" is parsed into an anonymous query operation.
            if definition.operation == OperationType.QUERY:
                selection_sets.append(definition.selection_set)
        elif isinstance(definition, FragmentDefinitionNode):
            selection_sets.append(definition.selection_set)
    return selection_sets


def get_field_names(selection_set: SelectionSetNode) -> Iterable[str]:
    """Return the names of the fields directly selected, skipping fragment spreads and coercions."""
    return [
        get_ast_field_name(selection)
        for selection in selection_set.selections
        if isinstance(selection, FieldNode)
    ]


def extract_root_fields(document_ast: DocumentNode) -> Set[str]:
    """Return the names of all fields that appear in a root selection set of the document."""
    return set(funcy.mapcat(get_field_names, get_root_selection_sets(document_ast)))
