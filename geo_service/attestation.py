# Copyright 2023-present Kensho Technologies, LLC.
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx


ATTESTABLE_HEADER = "graph-attestable"


def is_attestable(headers: httpx.Headers) -> bool:
    """Determine whether the geo node allows attesting to the response with the given headers.

    Responses are attestable unless the geo node explicitly says otherwise with the header value
    "false". A missing header, or one whose value is not valid UTF-8, leaves the response
    attestable.

    Any other value, such as "False" or an empty string, also leaves the response attestable.
    Earlier indexer services only treated the exact value "true" as attestable; here omitting
    or mistyping the header never silently turns attestation off.
    """
    header_name = ATTESTABLE_HEADER.encode("ascii")
    for raw_name, raw_value in headers.raw:
        if raw_name.lower() != header_name:
            continue
        try:
            value = raw_value.decode("utf-8")
        except UnicodeDecodeError:
            return True
        return value != "false"

    return True


@dataclass(frozen=True)
class GeoServiceResponse:
    """The geo node's answer to a data query, ready to be attested to by the indexer service."""

    inner: str
    attestable: bool

    def is_attestable(self) -> bool:
        """Return whether an attestation may be computed over the response."""
        return self.attestable

    def as_str(self) -> str:
        """Return the response body, which is what an attestation is computed over."""
        return self.inner

    def finalize(self, attestation: Optional[Any]) -> Dict[str, Any]:
        """Produce the client-facing payload, with the attestation if one was computed."""
        return {
            "graphQLResponse": self.inner,
            "attestation": attestation,
        }
