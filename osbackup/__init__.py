# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
OpenSearch Backup Adapter - Backup/restore orchestration for DBaaS.

Translates DBaaS aggregator backup and restore requests into calls to the
Curator backup service and the OpenSearch cluster, tracks asynchronous
job completion, and optionally restores indices under regenerated names.
Package name: osbackup.
"""

__version__ = "0.1.0"

# Configuration creation (user-facing API)
from osbackup.builder import create_config
from osbackup.env import create_config_from_env

# Core functions
from osbackup.core import (
    initialize_adapter_state,
    shutdown_adapter_state,
    get_metrics,
)

# Orchestration
from osbackup.backup import BackupProvider
from osbackup.context import new_request_context
from osbackup.tracking import ActionTrack, TrackStatus

__all__ = [
    # Version
    "__version__",
    # Configuration
    "create_config",
    "create_config_from_env",
    # Core state functions
    "initialize_adapter_state",
    "shutdown_adapter_state",
    "get_metrics",
    # Orchestration
    "BackupProvider",
    "new_request_context",
    "ActionTrack",
    "TrackStatus",
]
