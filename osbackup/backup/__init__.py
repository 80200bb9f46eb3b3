# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Backup Engine - Backup orchestration, restore planning and recovery tracking.
"""

from osbackup.backup.provider import BackupProvider

from osbackup.backup.restore import (
    RestorePlanner,
    RestoreStrategy,
    choose_strategy,
)

from osbackup.backup.recovery import (
    RecoveryTracker,
    RecoveryFallbackPolicy,
    aggregate_recovery_status,
)

from osbackup.backup.snapshots import SnapshotResolver

__all__ = [
    # Provider
    "BackupProvider",
    # Restore
    "RestorePlanner",
    "RestoreStrategy",
    "choose_strategy",
    # Recovery
    "RecoveryTracker",
    "RecoveryFallbackPolicy",
    "aggregate_recovery_status",
    # Snapshots
    "SnapshotResolver",
]
