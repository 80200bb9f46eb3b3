# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Backup Provider - entry points for backup and restore requests.

The provider wires the Curator gateway, job status translation, restore
planning and recovery tracking together. It holds only read-only
collaborators, so one instance serves concurrent requests for different
backups.
"""

from typing import Dict, List

from osbackup.backup.recovery import RecoveryFallbackPolicy, RecoveryTracker
from osbackup.backup.restore import RestorePlanner
from osbackup.backup.snapshots import SnapshotResolver
from osbackup.config import AdapterConfig
from osbackup.context import RequestContext
from osbackup.curator.gateway import CuratorGateway
from osbackup.curator.models import EvictResult
from osbackup.curator.status import fetch_job_status
from osbackup.naming import IndexNameGenerator
from osbackup.retry import RetryPolicy
from osbackup.search.client import SearchEngineClient
from osbackup.tracking import (
    ActionTrack,
    backup_track,
    build_track_path,
    restore_track,
)


class BackupProvider:
    """Backup and restore operations exposed to the DBaaS aggregator."""

    def __init__(
        self,
        config: AdapterConfig,
        gateway: CuratorGateway,
        search_client: SearchEngineClient,
        fallback_policy: RecoveryFallbackPolicy | None = None,
        name_generator: IndexNameGenerator | None = None,
    ):
        self.config = config
        self.gateway = gateway
        self.resolver = SnapshotResolver(search_client)
        self.tracker = RecoveryTracker(search_client, fallback_policy)
        self.planner = RestorePlanner(
            gateway,
            self.resolver,
            self.tracker,
            name_generator or IndexNameGenerator(config.index_prefix, config.name_delimiter),
            RetryPolicy(
                max_attempts=config.restore_poll_attempts,
                interval=config.restore_poll_interval,
            ),
            config.max_index_name_length,
        )

    async def collect_backup(self, databases: List[str], ctx: RequestContext) -> str:
        """Start a backup of databases and return its backup id."""
        ctx.logger.info("backup_collect_requested", databases=databases)
        return await self.gateway.collect(databases, ctx)

    async def track_backup(self, backup_id: str, ctx: RequestContext) -> ActionTrack:
        ctx.logger.debug("backup_track_requested", backup_id=backup_id)
        status = await fetch_job_status(self.gateway, backup_id, ctx)
        return backup_track(backup_id, status)

    async def delete_backup(self, backup_id: str, ctx: RequestContext) -> EvictResult:
        ctx.logger.info("backup_delete_requested", backup_id=backup_id)
        return await self.gateway.evict(backup_id, ctx)

    async def restore_backup(
        self,
        backup_id: str,
        databases: List[str],
        repository: str,
        regenerate_names: bool,
        ctx: RequestContext,
    ) -> Dict[str, str] | None:
        """Restore databases; see RestorePlanner.restore."""
        ctx.logger.info(
            "backup_restore_requested",
            backup_id=backup_id,
            databases=databases,
            repository=repository,
            regenerate_names=regenerate_names,
        )
        return await self.planner.restore(
            backup_id, databases, repository, regenerate_names, ctx
        )

    async def track_restore(self, backup_id: str, ctx: RequestContext) -> ActionTrack:
        """Track a restore through Curator's job status."""
        ctx.logger.info("restore_track_requested", backup_id=backup_id)
        status = await fetch_job_status(self.gateway, backup_id, ctx)
        return restore_track(backup_id, status)

    async def track_restore_indices(
        self,
        backup_id: str,
        indices: List[str],
        repository: str,
        ctx: RequestContext,
    ) -> ActionTrack:
        """Track a restore through cluster recovery info of its indices."""
        return await self.tracker.track_indices(backup_id, indices, repository, ctx)

    async def restore_and_track(
        self,
        backup_id: str,
        databases: List[str],
        regenerate_names: bool,
        ctx: RequestContext,
        repository: str | None = None,
    ) -> ActionTrack:
        """
        Restore a backup and report its initial tracking state.

        When names are regenerated the result also carries the name mapping
        and a trackPath for per-index tracking of the renamed indices.

        Args:
            backup_id: Backup to restore from
            databases: Database prefixes to restore
            regenerate_names: Restore under freshly generated names
            ctx: Request context
            repository: Snapshot repository (default: configured repository)

        Returns:
            RESTORE ActionTrack
        """
        repository = repository or self.config.repository
        changed_name_db = await self.restore_backup(
            backup_id, databases, repository, regenerate_names, ctx
        )
        track = await self.track_restore(backup_id, ctx)

        if regenerate_names:
            indices = await self.resolver.actual_indices(
                backup_id, repository, changed_name_db, ctx
            )
            track.changed_name_db = changed_name_db
            track.track_path = build_track_path(self.config.base_path, backup_id, indices)

        return track
