# Copyright 2023-present Kensho Technologies, LLC.
from textwrap import dedent
import unittest

from graphql import parse

from ..ast_manipulation import extract_root_fields
from ..exceptions import InvalidStatusQueryError, UnsupportedStatusQueryFieldsError
from ..status_validation import SUPPORTED_ROOT_FIELDS, validate_status_query


class TestExtractRootFields(unittest.TestCase):
    def test_shorthand_query(self) -> None:
        document = parse("{ indexingStatuses { subgraph } chains { network } }")
        self.assertEqual({"indexingStatuses", "chains"}, extract_root_fields(document))

    def test_nested_fields_are_not_root_fields(self) -> None:
        document = parse("{ indexingStatuses { subgraph chains { network } } }")
        self.assertEqual({"indexingStatuses"}, extract_root_fields(document))

    def test_duplicates_and_aliases(self) -> None:
        document = parse("{ a: chains { network } b: chains { network } }")
        self.assertEqual({"chains"}, extract_root_fields(document))

    def test_multiple_operations(self) -> None:
        query = dedent(
            """\
            query First { latestBlock { number } }
            query Second { earliestBlock { number } }
            """
        )
        self.assertEqual({"latestBlock", "earliestBlock"}, extract_root_fields(parse(query)))

    def test_fragment_selection_sets_are_root_sets(self) -> None:
        query = dedent(
            """\
            {
              ...Statuses
              ... on Query { ignoredCoercedField }
            }
            fragment Statuses on Query {
              indexingStatuses { subgraph }
            }
            """
        )
        self.assertEqual({"indexingStatuses"}, extract_root_fields(parse(query)))

    def test_nested_fragment_fields_count_as_root_fields(self) -> None:
        query = dedent(
            """\
            { indexingStatuses { ...StatusFields } }
            fragment StatusFields on SubgraphIndexingStatus { subgraph health }
            """
        )
        self.assertEqual(
            {"indexingStatuses", "subgraph", "health"}, extract_root_fields(parse(query))
        )

    def test_mutations_have_no_root_fields(self) -> None:
        self.assertEqual(set(), extract_root_fields(parse("mutation { reassignSubgraph }")))


class TestValidateStatusQuery(unittest.TestCase):
    def test_supported_query(self) -> None:
        self.assertEqual(
            {"indexingStatuses"}, validate_status_query("{ indexingStatuses { subgraph } }")
        )

    def test_parsed_document(self) -> None:
        document = parse("{ apiVersions(subgraphId: \"geo\") { version } }")
        self.assertEqual({"apiVersions"}, validate_status_query(document))

    def test_all_supported_fields(self) -> None:
        query = "{ " + " ".join(sorted(SUPPORTED_ROOT_FIELDS)) + " }"
        self.assertEqual(set(SUPPORTED_ROOT_FIELDS), validate_status_query(query))

    def test_unsupported_field(self) -> None:
        with self.assertRaises(UnsupportedStatusQueryFieldsError) as context:
            validate_status_query("{ unknownField }")
        self.assertEqual(["unknownField"], context.exception.fields)
        self.assertEqual(
            "Unsupported status query fields: ['unknownField']", str(context.exception)
        )

    def test_only_unsupported_fields_reported(self) -> None:
        with self.assertRaises(UnsupportedStatusQueryFieldsError) as context:
            validate_status_query("{ indexingStatuses { subgraph } unknownField }")
        self.assertEqual(["unknownField"], context.exception.fields)

    def test_all_unsupported_fields_reported(self) -> None:
        query = dedent(
            """\
            { chains { network } version { version } }
            fragment Extra on Query { subgraphs }
            """
        )
        with self.assertRaises(UnsupportedStatusQueryFieldsError) as context:
            validate_status_query(query)
        self.assertEqual(["subgraphs", "version"], context.exception.fields)

    def test_custom_whitelist(self) -> None:
        self.assertEqual({"version"}, validate_status_query("{ version { version } }", {"version"}))
        with self.assertRaises(UnsupportedStatusQueryFieldsError):
            validate_status_query("{ chains { network } }", {"version"})

    def test_invalid_query(self) -> None:
        with self.assertRaises(InvalidStatusQueryError) as context:
            validate_status_query("{ indexingStatuses { subgraph }")
        self.assertTrue(str(context.exception).startswith("Invalid status query: Syntax Error"))
