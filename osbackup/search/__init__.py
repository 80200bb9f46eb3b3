# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Search Engine Layer - Snapshot status and index recovery queries.
"""

from osbackup.search.client import SearchEngineClient, OpenSearchClient

from osbackup.search.models import (
    SnapshotStatus,
    RecoverySource,
    ShardRecovery,
    IndexRecovery,
    RecoveryInfo,
)

__all__ = [
    # Clients
    "SearchEngineClient",
    "OpenSearchClient",
    # Models
    "SnapshotStatus",
    "RecoverySource",
    "ShardRecovery",
    "IndexRecovery",
    "RecoveryInfo",
]
