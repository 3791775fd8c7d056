# Copyright 2023-present Kensho Technologies, LLC.
"""Strip query constructs the geo node does not support from data queries.

The geo node schema has no block-scoped time-travel queries, but clients built against the
canonical subgraph schema still send "block" arguments. Those arguments are removed from the
query text instead of being rejected:

    foo(block: {number: 5}, first: 10) { id }  ->  foo(first: 10) { id }
    foo(block: null) { id }                    ->  foo { id }

The rewriting works on the query text rather than on a parsed AST, so that queries the geo node
would accept are forwarded byte-for-byte apart from the removed arguments. String literals and
comments are never rewritten.
"""
import re
from typing import List, Optional, Tuple

from .typedefs import GraphQLRequest


_BLOCK_ARGUMENT_START = re.compile(r"(?<![$\w])block\s*:\s*")
_NULL_VALUE = re.compile(r"null(?!\w)")
_EMPTY_ARGUMENT_OPENING = re.compile(r"\((?:\s*,)+\s*")
_EMPTY_ARGUMENT_LIST = re.compile(r"\(\s*\)")

_BLOCK_STRING_QUOTE = '"""'

# Characters next to which a removed argument leaves no separator behind.
_ARGUMENT_LIST_DELIMITERS = frozenset("(){}")


def _find_string_literal_end(query: str, start: int) -> int:
    """Return the index just past the string literal starting at the given index.

    Handles both regular and block strings. Unterminated literals extend to the end of the line
    (regular strings) or the end of the query (block strings).
    """
    if query.startswith(_BLOCK_STRING_QUOTE, start):
        end = query.find(_BLOCK_STRING_QUOTE, start + 3)
        while end != -1 and query[end - 1] == "\\":  # escaped \"""
            end = query.find(_BLOCK_STRING_QUOTE, end + 3)
        return len(query) if end == -1 else end + 3

    index = start + 1
    while index < len(query):
        char = query[index]
        if char == "\\":
            index += 2
            continue
        if char == '"':
            return index + 1
        if char == "\n":
            return index
        index += 1
    return len(query)


def _find_ignored_spans(query: str) -> List[Tuple[int, int]]:
    """Return the (start, end) spans of all string literals and comments in the query."""
    spans = []
    index = 0
    while index < len(query):
        char = query[index]
        if char == '"':
            end = _find_string_literal_end(query, index)
        elif char == "#":
            end = query.find("\n", index)
            if end == -1:
                end = len(query)
        else:
            index += 1
            continue
        spans.append((index, end))
        index = end
    return spans


def _is_ignored(position: int, ignored_spans: List[Tuple[int, int]]) -> bool:
    return any(start <= position < end for start, end in ignored_spans)


def _find_object_value_end(query: str, start: int) -> Optional[int]:
    """Return the index just past the balanced object literal starting at the given index."""
    depth = 0
    index = start
    while index < len(query):
        char = query[index]
        if char == '"':
            index = _find_string_literal_end(query, index)
            continue
        if char == "#":
            comment_end = query.find("\n", index)
            index = len(query) if comment_end == -1 else comment_end
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return None


def _find_next_block_argument(query: str, position: int) -> Optional[Tuple[int, int]]:
    """Return the span of the first removable block argument at or after the given position."""
    ignored_spans = _find_ignored_spans(query)
    for match in _BLOCK_ARGUMENT_START.finditer(query, position):
        if _is_ignored(match.start(), ignored_spans):
            continue

        value_start = match.end()
        if query.startswith("{", value_start):
            value_end = _find_object_value_end(query, value_start)
        else:
            null_match = _NULL_VALUE.match(query, value_start)
            value_end = null_match.end() if null_match else None

        if value_end is not None:
            return match.start(), value_end

    return None


def _skip_separator_backwards(query: str, index: int) -> int:
    while index > 0 and query[index - 1].isspace():
        index -= 1
    if index > 0 and query[index - 1] == ",":
        index -= 1
        while index > 0 and query[index - 1].isspace():
            index -= 1
    return index


def _skip_separator_forwards(query: str, index: int) -> int:
    while index < len(query) and query[index].isspace():
        index += 1
    if index < len(query) and query[index] == ",":
        index += 1
        while index < len(query) and query[index].isspace():
            index += 1
    return index


def _remove_argument(query: str, start: int, end: int) -> Tuple[str, int]:
    """Cut the argument out together with its surrounding comma and whitespace.

    Returns the new query, and the position from which to continue searching.
    """
    left = _skip_separator_backwards(query, start)
    right = _skip_separator_forwards(query, end)

    previous_char = query[left - 1] if left > 0 else "("
    next_char = query[right] if right < len(query) else ")"
    if previous_char in _ARGUMENT_LIST_DELIMITERS or next_char in _ARGUMENT_LIST_DELIMITERS:
        separator = ""
    else:
        # The argument sat between two others, which must stay apart.
        separator = ", "

    return query[:left] + separator + query[right:], left + len(separator)


def _strip_block_arguments(query: str) -> str:
    position = 0
    argument_span = _find_next_block_argument(query, position)
    while argument_span is not None:
        query, position = _remove_argument(query, *argument_span)
        argument_span = _find_next_block_argument(query, position)
    return query


def _substitute_outside_literals(pattern: "re.Pattern[str]", replacement: str, query: str) -> str:
    ignored_spans = _find_ignored_spans(query)

    def _replace(match: "re.Match[str]") -> str:
        if _is_ignored(match.start(), ignored_spans):
            return match.group(0)
        return replacement

    return pattern.sub(_replace, query)


def _rewrite_query_text_once(query: str) -> str:
    query = _strip_block_arguments(query)
    query = _substitute_outside_literals(_EMPTY_ARGUMENT_OPENING, "(", query)
    query = _substitute_outside_literals(_EMPTY_ARGUMENT_LIST, "", query)
    return query


######
# Public API
######


def rewrite_query_text(query: str) -> str:
    """Remove all "block" arguments from the query, along with any argument lists left empty.

    Rewriting is idempotent: rewriting an already-rewritten query returns it unchanged.

    Args:
        query: str, the text of a GraphQL data query. It does not need to be valid GraphQL.

    Returns:
        str, the query text without "block: null" and "block: {...}" arguments
    """
    # Every pass that changes the query makes it strictly shorter, so this terminates.
    rewritten_query = _rewrite_query_text_once(query)
    while rewritten_query != query:
        query = rewritten_query
        rewritten_query = _rewrite_query_text_once(query)
    return rewritten_query


def rewrite_request(request: GraphQLRequest) -> GraphQLRequest:
    """Return a copy of the request whose "query" has been rewritten for the geo node.

    Requests without a string "query" are returned unchanged. All other keys of the request,
    such as "variables" and "operationName", are passed through as-is. The input is not mutated.
    """
    if not isinstance(request, dict):
        return request

    query = request.get("query")
    if not isinstance(query, str):
        return request

    rewritten_request = dict(request)
    rewritten_request["query"] = rewrite_query_text(query)
    return rewritten_request
