# Copyright 2023-present Kensho Technologies, LLC.
from http import HTTPStatus
from typing import List


class GeoServiceError(Exception):
    """Generic error when processing a request for the geo node."""

    http_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR


class InvalidStatusQueryError(GeoServiceError):
    """Raised when the text of a status query could not be parsed as GraphQL."""

    http_status = HTTPStatus.BAD_REQUEST

    def __str__(self) -> str:
        """Prefix the parser diagnostic."""
        return "Invalid status query: {}".format(super().__str__())


class UnsupportedStatusQueryFieldsError(GeoServiceError):
    """Raised when a status query selects root fields outside of the supported set.

    All offending root fields are recorded, not just the first one encountered.
    """

    http_status = HTTPStatus.BAD_REQUEST

    fields: List[str]

    def __init__(self, fields: List[str]) -> None:
        """Record the unsupported root fields."""
        if not fields:
            raise ValueError(
                "Cannot raise UnsupportedStatusQueryFieldsError without at least one field."
            )
        super().__init__(fields)
        self.fields = list(fields)

    def __str__(self) -> str:
        """List the unsupported fields."""
        return "Unsupported status query fields: {}".format(self.fields)


class StatusQueryError(GeoServiceError):
    """Raised when the geo node status endpoint could not be queried successfully.

    This covers transport failures as well as response bodies that are neither data nor a list
    of GraphQL errors.
    """

    def __str__(self) -> str:
        """Prefix the underlying cause."""
        return "Internal server error: {}".format(super().__str__())


class InvalidDeploymentError(GeoServiceError):
    """Raised when no geo node URL can be constructed for the requested deployment."""

    http_status = HTTPStatus.BAD_REQUEST

    deployment: str

    def __init__(self, deployment: str) -> None:
        """Record the deployment that could not be resolved."""
        super().__init__(deployment)
        self.deployment = deployment

    def __str__(self) -> str:
        """Name the deployment."""
        return "Invalid deployment: {}".format(self.deployment)


class QueryForwardingError(GeoServiceError):
    """Raised when a data query could not be forwarded to the geo node."""

    def __str__(self) -> str:
        """Prefix the underlying cause."""
        return "Failed to process query: {}".format(super().__str__())


class ConfigError(Exception):
    """Raised when the service configuration is missing, unreadable or incomplete."""
