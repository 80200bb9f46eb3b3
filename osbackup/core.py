# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Adapter Core - Runtime state shared by all requests.

The state holds the outbound HTTP clients and the backup provider built
on top of them. Nothing in it changes per request except the recovery
fallback counters.
"""

from dataclasses import dataclass
from datetime import datetime, UTC
from typing import List, TypedDict

import httpx
import structlog

from osbackup.backup.provider import BackupProvider
from osbackup.backup.recovery import RecoveryFallbackPolicy
from osbackup.config import AdapterConfig
from osbackup.curator.gateway import CuratorGateway
from osbackup.search.client import OpenSearchClient

logger = structlog.get_logger()


@dataclass
class AdapterMetrics:
    """Counters exposed for monitoring."""

    started_at: datetime
    recovery_fallback_policy: str
    recovery_query_failures: int
    recovery_missing_evidence: int


class AdapterState(TypedDict):
    """Runtime state of the adapter."""

    config: AdapterConfig
    curator_client: httpx.AsyncClient
    search_client: httpx.AsyncClient
    owned_clients: List[str]
    provider: BackupProvider
    fallback_policy: RecoveryFallbackPolicy
    started_at: datetime


async def initialize_adapter_state(
    config: AdapterConfig,
    curator_client: httpx.AsyncClient | None = None,
    search_client: httpx.AsyncClient | None = None,
) -> AdapterState:
    """
    Initialize runtime state.

    HTTP clients may be injected (tests, custom TLS); otherwise they are
    created here and closed by shutdown_adapter_state.

    Args:
        config: Adapter configuration
        curator_client: Client used for Curator calls
        search_client: Client used for OpenSearch queries

    Returns:
        Initialized AdapterState dictionary
    """
    owned_clients: List[str] = []
    if curator_client is None:
        curator_client = httpx.AsyncClient(timeout=config.request_timeout)
        owned_clients.append("curator_client")
    if search_client is None:
        search_client = httpx.AsyncClient(timeout=config.request_timeout)
        owned_clients.append("search_client")

    fallback_policy = RecoveryFallbackPolicy()
    provider = BackupProvider(
        config,
        CuratorGateway(config, curator_client),
        OpenSearchClient(config, search_client),
        fallback_policy=fallback_policy,
    )

    logger.info(
        "adapter_state_initialized",
        curator_address=config.curator_address,
        opensearch_url=config.opensearch_url,
        repository=config.repository,
        base_path=config.base_path,
    )

    return AdapterState(
        config=config,
        curator_client=curator_client,
        search_client=search_client,
        owned_clients=owned_clients,
        provider=provider,
        fallback_policy=fallback_policy,
        started_at=datetime.now(UTC),
    )


def get_metrics(state: AdapterState) -> AdapterMetrics:
    """Get current adapter metrics."""
    policy = state["fallback_policy"]
    return AdapterMetrics(
        started_at=state["started_at"],
        recovery_fallback_policy=policy.name,
        recovery_query_failures=policy.query_failures,
        recovery_missing_evidence=policy.missing_evidence,
    )


async def shutdown_adapter_state(state: AdapterState) -> None:
    """Cleanup resources."""
    for name in state["owned_clients"]:
        try:
            await state[name].aclose()
        except Exception as e:
            logger.warning("http_client_close_failed", client=name, error=str(e))

    logger.info("adapter_state_shutdown_complete")
