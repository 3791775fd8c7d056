# Copyright 2023-present Kensho Technologies, LLC.
import unittest

import httpx

from ..attestation import GeoServiceResponse, is_attestable


class TestIsAttestable(unittest.TestCase):
    def test_missing_header(self) -> None:
        self.assertTrue(is_attestable(httpx.Headers({"content-type": "application/json"})))

    def test_true(self) -> None:
        self.assertTrue(is_attestable(httpx.Headers({"graph-attestable": "true"})))

    def test_false(self) -> None:
        self.assertFalse(is_attestable(httpx.Headers({"graph-attestable": "false"})))

    def test_header_name_case_insensitive(self) -> None:
        self.assertFalse(is_attestable(httpx.Headers({"Graph-Attestable": "false"})))

    def test_malformed_bytes(self) -> None:
        self.assertTrue(is_attestable(httpx.Headers([(b"graph-attestable", b"\xff\xfe")])))

    def test_other_values(self) -> None:
        for value in ["", "yes", "False", "0"]:
            self.assertTrue(is_attestable(httpx.Headers({"graph-attestable": value})))


class TestGeoServiceResponse(unittest.TestCase):
    def test_finalize(self) -> None:
        response = GeoServiceResponse('{"data":{}}', True)
        self.assertTrue(response.is_attestable())
        self.assertEqual('{"data":{}}', response.as_str())
        self.assertEqual(
            {"graphQLResponse": '{"data":{}}', "attestation": None}, response.finalize(None)
        )
        attestation = {"requestCID": "0x00", "responseCID": "0x01"}
        self.assertEqual(
            {"graphQLResponse": '{"data":{}}', "attestation": attestation},
            response.finalize(attestation),
        )
