# Copyright 2023-present Kensho Technologies, LLC.
import io
from typing import Tuple
from unittest import TestCase, mock

from ..tool import main


class TestTool(TestCase):
    def _run(self, stdin: str, *args: str) -> Tuple[int, str, str]:
        stdout = io.StringIO()
        stderr = io.StringIO()
        with mock.patch("sys.stdin", io.StringIO(stdin)), mock.patch(
            "sys.stdout", stdout
        ), mock.patch("sys.stderr", stderr):
            exit_code = main(list(args))
        return exit_code, stdout.getvalue(), stderr.getvalue()

    def test_rewrite_data_query(self) -> None:
        exit_code, stdout, _ = self._run("{ foo(block: null, first: 2) { id } }")
        self.assertEqual(0, exit_code)
        self.assertEqual("{ foo(first: 2) { id } }", stdout)

    def test_valid_status_query(self) -> None:
        exit_code, stdout, _ = self._run(
            "{ chains { network } latestBlock { number } }", "--status"
        )
        self.assertEqual(0, exit_code)
        self.assertEqual("chains\nlatestBlock\n", stdout)

    def test_invalid_status_query(self) -> None:
        exit_code, stdout, stderr = self._run("{ subgraphs }", "--status")
        self.assertEqual(1, exit_code)
        self.assertEqual("", stdout)
        self.assertEqual("Unsupported status query fields: ['subgraphs']\n", stderr)
