# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Adapter Builder - Functional builder pattern for configuration.

This module provides pure functions for building AdapterConfig objects.
Each function takes a config dict and returns a new dict with the
modification applied (immutable updates).
"""

from typing import Any, Callable, Dict

from osbackup.config import AdapterConfig, ApiVersion, OPENSEARCH_MAX_INDEX_NAME_LENGTH


# Type alias for builder functions
ConfigDict = Dict[str, Any]
BuilderFunc = Callable[[ConfigDict], ConfigDict]


def create_empty_config() -> ConfigDict:
    """
    Create an initial empty configuration dictionary.

    Returns:
        Dict with default values for all configuration fields
    """
    return {
        "curator_address": "",
        "curator_username": "",
        "curator_password": "",
        "opensearch_url": "http://localhost:9200",
        "opensearch_username": "",
        "opensearch_password": "",
        "repository": "snapshots",
        "api_version": ApiVersion.V2,
        "index_prefix": "dbaas",
        "name_delimiter": "_",
        "max_index_name_length": OPENSEARCH_MAX_INDEX_NAME_LENGTH,
        "restore_poll_attempts": 120,
        "restore_poll_interval": 1.0,
        "request_timeout": 30.0,
        "adapter_username": "dbaas-aggregator",
        "adapter_password": "dbaas-aggregator",
    }


def with_curator(config: ConfigDict, address: str) -> ConfigDict:
    """
    Set the Curator base address.

    A trailing slash is dropped so paths can be appended verbatim.

    Args:
        config: Current configuration dictionary
        address: Curator URL, e.g. 'http://curator:8080'

    Returns:
        New configuration dictionary with the Curator address set
    """
    return {**config, "curator_address": address.rstrip("/")}


def with_curator_credentials(config: ConfigDict, username: str, password: str) -> ConfigDict:
    """
    Set the Basic-Auth credentials sent to Curator.

    Args:
        config: Current configuration dictionary
        username: Curator username
        password: Curator password

    Returns:
        New configuration dictionary with credentials set
    """
    return {**config, "curator_username": username, "curator_password": password}


def with_opensearch(
    config: ConfigDict,
    url: str,
    username: str = "",
    password: str = "",
) -> ConfigDict:
    """
    Set the OpenSearch endpoint and its credentials.

    Args:
        config: Current configuration dictionary
        url: OpenSearch REST URL
        username: OpenSearch username (optional)
        password: OpenSearch password (optional)

    Returns:
        New configuration dictionary with OpenSearch settings
    """
    return {
        **config,
        "opensearch_url": url.rstrip("/"),
        "opensearch_username": username,
        "opensearch_password": password,
    }


def with_repository(config: ConfigDict, repository: str) -> ConfigDict:
    """Set the snapshot repository name."""
    return {**config, "repository": repository}


def with_api_version(config: ConfigDict, version: ApiVersion | str) -> ConfigDict:
    """Set the aggregator API version ('v1' or 'v2')."""
    if isinstance(version, str):
        version = ApiVersion(version.lower())
    return {**config, "api_version": version}


def with_index_prefix(config: ConfigDict, prefix: str, delimiter: str = "_") -> ConfigDict:
    """
    Set the prefix used when regenerating index names.

    Args:
        config: Current configuration dictionary
        prefix: Name prefix, e.g. 'dbaas'
        delimiter: Separator between prefix and generated part

    Returns:
        New configuration dictionary with naming settings
    """
    return {**config, "index_prefix": prefix, "name_delimiter": delimiter}


def with_restore_polling(config: ConfigDict, attempts: int, interval: float) -> ConfigDict:
    """
    Set the bounded polling used by sequential restores.

    Args:
        config: Current configuration dictionary
        attempts: Maximum polls per index
        interval: Seconds between polls

    Returns:
        New configuration dictionary with polling settings
    """
    if attempts < 1:
        raise ValueError(f"restore poll attempts must be >= 1, got {attempts}")
    if interval < 0:
        raise ValueError(f"restore poll interval must be >= 0, got {interval}")
    return {**config, "restore_poll_attempts": attempts, "restore_poll_interval": interval}


def with_request_timeout(config: ConfigDict, seconds: float) -> ConfigDict:
    """Set the timeout applied to every outbound call."""
    if seconds <= 0:
        raise ValueError(f"request timeout must be > 0, got {seconds}")
    return {**config, "request_timeout": seconds}


def with_adapter_credentials(config: ConfigDict, username: str, password: str) -> ConfigDict:
    """Set the credentials the aggregator must present to the adapter."""
    return {**config, "adapter_username": username, "adapter_password": password}


def build_config(config_dict: ConfigDict) -> AdapterConfig:
    """
    Validate and build an immutable AdapterConfig from a configuration dictionary.

    Args:
        config_dict: Configuration dictionary built using builder functions

    Returns:
        Validated, immutable AdapterConfig instance

    Raises:
        ConfigurationError: If validation fails
    """
    if not config_dict.get("curator_address"):
        from osbackup.exceptions import ConfigurationError

        raise ConfigurationError("curator_address is required")

    return AdapterConfig(**config_dict)


def create_config(
    curator_address: str,
    *,
    curator_username: str = "",
    curator_password: str = "",
    opensearch_url: str | None = None,
    opensearch_username: str = "",
    opensearch_password: str = "",
    repository: str | None = None,
    api_version: str | ApiVersion | None = None,
    **kwargs: Any,
) -> AdapterConfig:
    """
    Create adapter configuration from simple parameters.

    This is the recommended user-facing API for creating configurations.

    Args:
        curator_address: Curator base URL (required)
        curator_username: Curator Basic-Auth username
        curator_password: Curator Basic-Auth password
        opensearch_url: OpenSearch REST URL (default: http://localhost:9200)
        opensearch_username: OpenSearch username
        opensearch_password: OpenSearch password
        repository: Snapshot repository (default: "snapshots")
        api_version: "v1" or "v2" (default: "v2")
        **kwargs: Additional configuration options

    Returns:
        Validated, immutable AdapterConfig instance

    Example:
        config = create_config(
            "http://curator:8080",
            curator_username="backup",
            curator_password="secret",
            opensearch_url="https://opensearch:9200",
        )
    """
    config_dict = create_empty_config()
    config_dict = with_curator(config_dict, curator_address)
    config_dict = with_curator_credentials(config_dict, curator_username, curator_password)

    if opensearch_url:
        config_dict = with_opensearch(
            config_dict, opensearch_url, opensearch_username, opensearch_password
        )
    else:
        config_dict = {
            **config_dict,
            "opensearch_username": opensearch_username,
            "opensearch_password": opensearch_password,
        }

    if repository:
        config_dict = with_repository(config_dict, repository)

    if api_version:
        config_dict = with_api_version(config_dict, api_version)

    # Apply any additional kwargs
    for key, value in kwargs.items():
        if key in config_dict:
            config_dict[key] = value

    return build_config(config_dict)
