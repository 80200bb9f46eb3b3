# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Environment-based configuration helpers.

The adapter runs as a container next to the DBaaS aggregator, so most
deployments configure it purely through environment variables.
"""

from __future__ import annotations

import os

from osbackup.builder import create_config
from osbackup.config import AdapterConfig, ApiVersion
from osbackup.errors import (
    explain_invalid_api_version_env,
    explain_invalid_poll_attempts_env,
    explain_invalid_poll_interval_env,
    explain_missing_curator_address_env,
)
from osbackup.exceptions import ConfigurationError


def _parse_api_version(value: str | None) -> ApiVersion:
    if not value:
        return ApiVersion.V2
    try:
        return ApiVersion(value.lower())
    except ValueError as exc:
        raise ConfigurationError(explain_invalid_api_version_env(value)) from exc


def _parse_poll_attempts(value: str | None) -> int:
    if not value:
        return 120
    try:
        attempts = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(explain_invalid_poll_attempts_env(value)) from exc
    if attempts < 1:
        raise ConfigurationError(explain_invalid_poll_attempts_env(value))
    return attempts


def _parse_poll_interval(value: str | None) -> float:
    if not value:
        return 1.0
    try:
        interval = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(explain_invalid_poll_interval_env(value)) from exc
    if interval < 0:
        raise ConfigurationError(explain_invalid_poll_interval_env(value))
    return interval


def create_config_from_env() -> AdapterConfig:
    """
    Create an AdapterConfig from environment variables.

    Required:
        - CURATOR_ADDRESS: Base URL of the Curator service

    Optional environment variables:
        - CURATOR_USERNAME / CURATOR_PASSWORD: Curator Basic-Auth credentials
        - OPENSEARCH_URL: OpenSearch REST URL (default: http://localhost:9200)
        - OPENSEARCH_USERNAME / OPENSEARCH_PASSWORD: OpenSearch credentials
        - OPENSEARCH_REPOSITORY: Snapshot repository (default: snapshots)
        - API_VERSION: 'v1' | 'v2' (default: v2)
        - RESTORE_POLL_ATTEMPTS: Positive integer (default: 120)
        - RESTORE_POLL_INTERVAL: Seconds between polls (default: 1)
        - DBAAS_ADAPTER_USERNAME / DBAAS_ADAPTER_PASSWORD: Credentials the
          aggregator uses (default: dbaas-aggregator)
    """

    curator_address = os.getenv("CURATOR_ADDRESS")
    if not curator_address:
        raise ConfigurationError(explain_missing_curator_address_env())

    return create_config(
        curator_address,
        curator_username=os.getenv("CURATOR_USERNAME", ""),
        curator_password=os.getenv("CURATOR_PASSWORD", ""),
        opensearch_url=os.getenv("OPENSEARCH_URL"),
        opensearch_username=os.getenv("OPENSEARCH_USERNAME", ""),
        opensearch_password=os.getenv("OPENSEARCH_PASSWORD", ""),
        repository=os.getenv("OPENSEARCH_REPOSITORY"),
        api_version=_parse_api_version(os.getenv("API_VERSION")),
        restore_poll_attempts=_parse_poll_attempts(os.getenv("RESTORE_POLL_ATTEMPTS")),
        restore_poll_interval=_parse_poll_interval(os.getenv("RESTORE_POLL_INTERVAL")),
        adapter_username=os.getenv("DBAAS_ADAPTER_USERNAME", "dbaas-aggregator"),
        adapter_password=os.getenv("DBAAS_ADAPTER_PASSWORD", "dbaas-aggregator"),
    )
