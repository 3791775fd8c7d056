# Copyright 2023-present Kensho Technologies, LLC.
"""Configuration of the geo indexer service, loaded from a TOML file.

Only the "geo" table is interpreted here. The "common" table holds the settings shared by all
indexer services, and is handed as-is to the indexer service framework.

Example:
    [geo.geo_node]
    query_base_url = "http://geo-node:8000"
    status_url = "http://geo-node:8030/graphql"

    [geo.virtual_subgraph]
    backend_id = "geo"
    deployment_id = "QmVfNm8Jok8fFtspmFYYGTo5Sp7BvP3nYr6UHvDrLe6ewp"
"""
import os
import tomllib
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigError


# The id under which the geo node reports its shared subgraph, and the id of the
# deployment clients query it as.
DEFAULT_BACKEND_SUBGRAPH_ID = "geo"
DEFAULT_DEPLOYMENT_ID = "QmVfNm8Jok8fFtspmFYYGTo5Sp7BvP3nYr6UHvDrLe6ewp"


class GeoNodeConfig(BaseModel):
    """Where to reach the geo node."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    query_base_url: Optional[str] = None
    status_url: Optional[str] = None


class VirtualSubgraphConfig(BaseModel):
    """How deployment ids reported by the geo node map to the ids clients know about."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    backend_id: str = DEFAULT_BACKEND_SUBGRAPH_ID
    deployment_id: str = DEFAULT_DEPLOYMENT_ID


class GeoConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    geo_node: Optional[GeoNodeConfig] = None
    virtual_subgraph: VirtualSubgraphConfig = Field(default_factory=VirtualSubgraphConfig)


class Config(BaseModel):
    """Complete configuration of the geo indexer service."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    common: Dict[str, Any] = Field(default_factory=dict)
    geo: GeoConfig = Field(default_factory=GeoConfig)

    @property
    def geo_node_status_url(self) -> str:
        """Return the URL of the geo node status endpoint, which must be configured."""
        if self.geo.geo_node is None or not self.geo.geo_node.status_url:
            raise ConfigError("Config must have `geo.geo_node.status_url` set")
        return self.geo.geo_node.status_url

    @property
    def geo_node_query_base_url(self) -> str:
        """Return the base URL of the geo node query endpoint, which must be configured."""
        if self.geo.geo_node is None or not self.geo.geo_node.query_base_url:
            raise ConfigError("Config must have `geo.geo_node.query_base_url` set")
        return self.geo.geo_node.query_base_url


def _describe_validation_error(error: ValidationError) -> str:
    return "; ".join(
        "`{}`: {}".format(".".join(str(part) for part in details["loc"]), details["msg"])
        for details in error.errors()
    )


def config_from_dict(data: Dict[str, Any]) -> Config:
    """Build a Config from the already-decoded contents of a configuration file.

    Raises:
        ConfigError: if a section is malformed, has unknown keys, or values of the wrong type
    """
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            "Invalid configuration: {}".format(_describe_validation_error(e))
        ) from e


def load_config(path: Union[str, "os.PathLike[str]"]) -> Config:
    """Load the service configuration from the TOML file at the given path.

    Raises:
        ConfigError: if the file cannot be read, is not valid TOML, or has malformed sections.
                     Missing geo node URLs are only reported when they are accessed.
    """
    try:
        with open(path, "rb") as config_file:
            data = tomllib.load(config_file)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Invalid configuration file `{path}`: {e}") from e

    return config_from_dict(data)
