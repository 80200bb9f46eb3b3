# SPDX-License-Identifier: LGPL-2.1-only
# Copyright (c) 2026 Akshat Kotpalliwar (alias IntegerAlex)

"""
Snapshot resolution - which indices a backup actually captured.

Restore requests name database prefixes, but the snapshot holds concrete
index names fixed at backup time. Name regeneration and restore tracking
both work on the concrete names.
"""

from typing import Dict, List

from osbackup.context import RequestContext
from osbackup.exceptions import SnapshotNotFoundError
from osbackup.search.client import SearchEngineClient
from osbackup.search.models import SnapshotStatus


class SnapshotResolver:
    """Resolves backup ids to the indices captured in their snapshot."""

    def __init__(self, search_client: SearchEngineClient):
        self._search = search_client

    async def snapshot_status(
        self,
        backup_id: str,
        repository: str,
        ctx: RequestContext,
    ) -> SnapshotStatus:
        """
        Find the status entry of a snapshot.

        Raises:
            SnapshotNotFoundError: If the repository does not list the snapshot
            SearchEngineError: If the query fails
        """
        snapshots = await self._search.snapshot_status(repository, backup_id, ctx)
        ctx.logger.debug(
            "snapshots_found",
            repository=repository,
            snapshots=[s.snapshot for s in snapshots],
        )

        for snapshot in snapshots:
            if snapshot.snapshot == backup_id:
                return snapshot

        raise SnapshotNotFoundError(
            f"Failed to find '{backup_id}' snapshot in {repository}",
            details={"backup_id": backup_id, "repository": repository},
        )

    async def actual_indices(
        self,
        backup_id: str,
        repository: str,
        name_mapping: Dict[str, str] | None,
        ctx: RequestContext,
    ) -> List[str]:
        """
        List the indices captured by a backup, renamed where mapped.

        Args:
            backup_id: Snapshot name
            repository: Snapshot repository; empty means the backup id
            name_mapping: Original to regenerated names, may be empty
            ctx: Request context

        Returns:
            Index names in snapshot order, each replaced by its mapped name
            when name_mapping has one
        """
        if not repository:
            repository = backup_id

        snapshot = await self.snapshot_status(backup_id, repository, ctx)
        mapping = name_mapping or {}
        return [mapping.get(name) or name for name in snapshot.indices]
