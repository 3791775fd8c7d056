# Copyright 2023-present Kensho Technologies, LLC.
"""Request handlers of the geo indexer service.

The indexer service framework routes data queries for a deployment to
GeoService.process_request, and the extra "/status" and "/cost" routes to the status and cost
handlers. Errors are raised as GeoServiceError subclasses, which the framework renders as HTTP
responses with the error's http_status and message.
"""
from dataclasses import dataclass
import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from .attestation import GeoServiceResponse, is_attestable
from .config import Config
from .exceptions import (
    InvalidDeploymentError,
    InvalidStatusQueryError,
    QueryForwardingError,
    StatusQueryError,
)
from .query_rewriting import rewrite_request
from .response_rewriting import replace_subgraph_id
from .status_validation import validate_status_query
from .typedefs import GraphQLRequest, StatusQueryData, StatusQueryErrors, StatusQueryResult


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

# Answered locally, without reaching the geo node.
VERSION_QUERY = "{ version { version } }"


@dataclass(frozen=True)
class GeoServiceState:
    """Resources shared by all request handlers. Never mutated while serving requests."""

    config: Config
    geo_node_client: httpx.AsyncClient
    geo_node_status_url: str
    geo_node_query_base_url: str


def build_state(
    config: Config, geo_node_client: Optional[httpx.AsyncClient] = None
) -> GeoServiceState:
    """Create the shared state of the service from its configuration.

    Args:
        config: the service configuration, which must include both geo node URLs
        geo_node_client: the HTTP client used to reach the geo node. If omitted, a pooled client
                         with a DEFAULT_TIMEOUT_SECONDS timeout is created.

    Returns:
        GeoServiceState

    Raises:
        ConfigError if either geo node URL is not configured
    """
    status_url = config.geo_node_status_url
    query_base_url = config.geo_node_query_base_url
    if geo_node_client is None:
        geo_node_client = httpx.AsyncClient(timeout=DEFAULT_TIMEOUT_SECONDS)

    return GeoServiceState(
        config=config,
        geo_node_client=geo_node_client,
        geo_node_status_url=status_url,
        geo_node_query_base_url=query_base_url,
    )


class GeoService:
    """Forwards data queries for the geo node's deployment, and classifies their responses."""

    def __init__(self, state: GeoServiceState) -> None:
        self.state = state

    def get_deployment_url(self, deployment: str) -> httpx.URL:
        """Return the geo node URL that serves queries for the deployment."""
        # The geo node serves a single subgraph, so every deployment maps to the same URL.
        try:
            url = httpx.URL("{}/graphql".format(self.state.geo_node_query_base_url.rstrip("/")))
        except httpx.InvalidURL as e:
            raise InvalidDeploymentError(deployment) from e

        if not url.scheme or not url.host:
            raise InvalidDeploymentError(deployment)
        return url

    async def process_request(
        self, deployment: str, request: GraphQLRequest
    ) -> Tuple[GraphQLRequest, GeoServiceResponse]:
        """Forward the data query to the geo node.

        Args:
            deployment: id of the deployment the query is sent to
            request: the GraphQL request as received from the client

        Returns:
            tuple of the unmodified client request, which is what gets attested to, and the
            geo node's response

        Raises:
            - InvalidDeploymentError if no geo node URL can be built for the deployment
            - QueryForwardingError if the geo node could not be reached
        """
        deployment_url = self.get_deployment_url(deployment)

        rewritten_request = rewrite_request(request)
        logger.info("Forwarding request: %s", rewritten_request)
        try:
            response = await self.state.geo_node_client.post(deployment_url, json=rewritten_request)
        except httpx.HTTPError as e:
            logger.error("Failed to forward query for deployment %s: %r", deployment, e)
            raise QueryForwardingError(e) from e

        return request, GeoServiceResponse(response.text, is_attestable(response.headers))


def parse_status_response(response: httpx.Response) -> StatusQueryResult:
    """Interpret the geo node's answer to a status query.

    GraphQL errors reported by the geo node are a valid outcome, and take precedence over
    any partial data in the same response.

    Raises:
        StatusQueryError if the response carries neither data nor errors
    """
    try:
        body = response.json()
    except ValueError as e:
        raise StatusQueryError(
            "geo node returned a response that is not JSON (HTTP {}): {}".format(
                response.status_code, e
            )
        ) from e

    if not isinstance(body, dict):
        raise StatusQueryError("geo node returned an unexpected response: {!r}".format(body))

    errors = body.get("errors")
    if errors:
        return StatusQueryErrors(errors if isinstance(errors, list) else [errors])

    data = body.get("data")
    if data is None:
        raise StatusQueryError(
            "geo node returned an empty response (HTTP {})".format(response.status_code)
        )
    return StatusQueryData(data)


async def send_status_query(state: GeoServiceState, request: GraphQLRequest) -> StatusQueryResult:
    """Send the status request to the geo node verbatim."""
    try:
        response = await state.geo_node_client.post(state.geo_node_status_url, json=request)
    except httpx.HTTPError as e:
        logger.error("Failed to query the geo node status endpoint: %r", e)
        raise StatusQueryError(e) from e

    return parse_status_response(response)


async def status(state: GeoServiceState, request: GraphQLRequest) -> Dict[str, Any]:
    """Answer a status query, exposing only the supported part of the geo node status API.

    Args:
        state: the shared service state
        request: the GraphQL request as received from the client

    Returns:
        dict, either {"data": ..., "errors": None} or {"errors": [...]}

    Raises:
        - InvalidStatusQueryError if the query is missing or cannot be parsed
        - UnsupportedStatusQueryFieldsError if the query selects unsupported root fields
        - StatusQueryError if the geo node did not answer the query
    """
    query = request.get("query")
    if not isinstance(query, str):
        raise InvalidStatusQueryError("request has no query")
    logger.info("Processing status request: %s", query)

    if query == VERSION_QUERY:
        return {"data": {}, "errors": None}

    validate_status_query(query)

    result = await send_status_query(state, request)
    if isinstance(result, StatusQueryErrors):
        response = {"errors": result.errors}
    else:
        virtual_subgraph = state.config.geo.virtual_subgraph
        response = {
            "data": replace_subgraph_id(
                result.data, virtual_subgraph.backend_id, virtual_subgraph.deployment_id
            ),
            "errors": None,
        }

    logger.info("Status response: %s", response)
    return response


async def cost(state: GeoServiceState, request: GraphQLRequest) -> str:
    """Answer a cost model query. The geo service does not publish cost models."""
    return "{}"
