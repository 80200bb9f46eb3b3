# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Recovery Tracker - restore progress from cluster recovery info.

A restore is observed through the shard recoveries OpenSearch reports for
the target indices. Only shards recovered from the tracked snapshot and
repository count. The tracker keeps no memory between calls: every poll
recomputes the status from a fresh recovery query.
"""

from typing import Dict, List

from osbackup.context import RequestContext
from osbackup.exceptions import SearchEngineError
from osbackup.search.client import SearchEngineClient
from osbackup.search.models import RecoveryInfo
from osbackup.tracking import ActionTrack, TrackStatus, restore_track

DONE_STAGE = "DONE"


def aggregate_recovery_status(
    info: RecoveryInfo,
    backup_id: str,
    repository: str,
) -> TrackStatus | None:
    """
    Reduce shard recovery stages to one status.

    Returns:
        PROCEEDING if any matching shard is not DONE, SUCCESS if at least
        one shard matched and all matching shards are DONE, None if no
        shard was recovered from this snapshot and repository
    """
    found_done = False
    for index_recovery in info.values():
        for shard in index_recovery.shards:
            if shard.source.snapshot != backup_id or shard.source.repository != repository:
                continue
            if shard.stage.upper() != DONE_STAGE:
                return TrackStatus.PROCEEDING
            found_done = True

    if found_done:
        return TrackStatus.SUCCESS
    return None


class RecoveryFallbackPolicy:
    """
    Status reported when recovery info gives no verdict.

    OpenSearch may drop recovery records shortly after a restore finishes,
    and recovery queries may fail transiently, so neither case is taken as
    proof of failure: both resolve to PROCEEDING. This can mask a restore
    that never started; every trigger is counted and logged.
    """

    name = "optimistic_proceeding"

    def __init__(self) -> None:
        self.query_failures = 0
        self.missing_evidence = 0

    def on_query_failure(self, backup_id: str, error: Exception, ctx: RequestContext) -> TrackStatus:
        self.query_failures += 1
        ctx.logger.warning(
            "recovery_fallback_triggered",
            policy=self.name,
            reason="query_failed",
            backup_id=backup_id,
            error=str(error),
            total=self.query_failures,
        )
        return TrackStatus.PROCEEDING

    def on_missing_evidence(self, backup_id: str, ctx: RequestContext) -> TrackStatus:
        self.missing_evidence += 1
        ctx.logger.warning(
            "recovery_fallback_triggered",
            policy=self.name,
            reason="no_matching_shards",
            backup_id=backup_id,
            total=self.missing_evidence,
        )
        return TrackStatus.PROCEEDING


class RecoveryTracker:
    """Tracks restores of specific indices from a snapshot."""

    def __init__(
        self,
        search_client: SearchEngineClient,
        fallback_policy: RecoveryFallbackPolicy | None = None,
    ):
        self._search = search_client
        self.fallback_policy = fallback_policy or RecoveryFallbackPolicy()

    async def track_indices(
        self,
        backup_id: str,
        indices: List[str],
        repository: str,
        ctx: RequestContext,
        changed_name_db: Dict[str, str] | None = None,
    ) -> ActionTrack:
        """
        Compute the restore status of indices from a snapshot.

        Args:
            backup_id: Snapshot the indices are restored from
            indices: Target (possibly renamed) index names
            repository: Snapshot repository; empty means the backup id
            ctx: Request context
            changed_name_db: Name mapping echoed in the result

        Returns:
            RESTORE ActionTrack with the aggregated status
        """
        ctx.logger.info(
            "track_restore_indices_requested",
            backup_id=backup_id,
            repository=repository,
            indices=indices,
        )
        if not repository:
            repository = backup_id

        try:
            info = await self._search.indices_recovery(indices, ctx)
        except SearchEngineError as e:
            status = self.fallback_policy.on_query_failure(backup_id, e, ctx)
            return restore_track(backup_id, status, changed_name_db)

        ctx.logger.debug("recovery_info_received", backup_id=backup_id, indices=len(info))

        status = aggregate_recovery_status(info, backup_id, repository)
        if status is None:
            status = self.fallback_policy.on_missing_evidence(backup_id, ctx)

        return restore_track(backup_id, status, changed_name_db)
