# Copyright 2023-present Kensho Technologies, LLC.
"""Commonly-used functions and data types from this package."""
from .ast_manipulation import extract_root_fields, safe_parse_graphql  # noqa
from .attestation import GeoServiceResponse, is_attestable  # noqa
from .config import Config, load_config  # noqa
from .exceptions import (  # noqa
    ConfigError,
    GeoServiceError,
    InvalidDeploymentError,
    InvalidStatusQueryError,
    QueryForwardingError,
    StatusQueryError,
    UnsupportedStatusQueryFieldsError,
)
from .query_rewriting import rewrite_query_text, rewrite_request  # noqa
from .response_rewriting import replace_subgraph_id  # noqa
from .service import GeoService, GeoServiceState, build_state, cost, status  # noqa
from .status_validation import SUPPORTED_ROOT_FIELDS, validate_status_query  # noqa


__package_name__ = "geo-service"
__version__ = "0.1.0"
