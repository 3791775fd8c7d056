#!/usr/bin/env python
# Copyright 2023-present Kensho Technologies, LLC.
"""Utility modeled after json.tool, shows how the geo service adapts a query read from stdin.

Used as: python -m geo_service.tool [--status]

By default the query is treated as a data query, and the text forwarded to the geo node is
written to stdout. With --status, the query is validated as a status query instead, and the
root fields it selects are written to stdout.
"""
import argparse
import logging
import sys
from typing import List, Optional

from .exceptions import GeoServiceError
from .query_rewriting import rewrite_query_text
from .status_validation import validate_status_query


def main(argv: Optional[List[str]] = None) -> int:
    """Read a GraphQL query from standard input, and output its adapted form."""
    parser = argparse.ArgumentParser(prog="python -m geo_service.tool", description=__doc__)
    parser.add_argument(
        "--status", action="store_true", help="validate the query as a status query"
    )
    args = parser.parse_args(argv)

    query = sys.stdin.read()

    if not args.status:
        sys.stdout.write(rewrite_query_text(query))
        return 0

    try:
        root_fields = validate_status_query(query)
    except GeoServiceError as e:
        sys.stderr.write("{}\n".format(e))
        return 1

    sys.stdout.write("".join("{}\n".format(field) for field in sorted(root_fields)))
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
